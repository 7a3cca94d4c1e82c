"""Obtencion de la identidad del backend al iniciar el cliente."""

from __future__ import annotations

import logging
import secrets
import string

from servidor.services.auth_service import AuthService
from shared.errors import ServiceError
from shared.protocol import Principal

LOGGER = logging.getLogger(__name__)

_FALLBACK_ALPHABET = string.digits + string.ascii_lowercase
_FALLBACK_PREFIX = "anonymous-user-"


def bootstrap_principal(auth_service: AuthService, initial_token: str = "") -> Principal:
    """Canjea el token de arranque o inicia sesion anonima.

    Si el backend rechaza el intento, se usa una identidad local de respaldo y
    la autenticacion se considera lista de todas formas.
    """
    try:
        if initial_token.strip():
            return auth_service.sign_in_with_custom_token(initial_token)
        return auth_service.sign_in_anonymously()
    except ServiceError as exc:
        LOGGER.error("Error al iniciar sesion en el backend: %s", exc)

    fallback = _FALLBACK_PREFIX + "".join(secrets.choice(_FALLBACK_ALPHABET) for _ in range(7))
    LOGGER.warning("Se usa identidad de respaldo: %s", fallback)
    return Principal(uid=fallback, anonymous=True)
