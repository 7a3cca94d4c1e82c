"""Servicio de autenticacion anonima y por token personalizado."""

from __future__ import annotations

import hashlib
import hmac
import logging
import uuid

from shared.errors import AuthenticationError, ValidationError
from shared.protocol import Principal

LOGGER = logging.getLogger(__name__)


class AuthService:
    """Emite identidades (principals) para acceder al dataset compartido.

    Un token personalizado tiene la forma ``<uid>.<firma>``, donde la firma es el
    HMAC-SHA256 hexadecimal del uid con el secreto configurado.
    """

    def __init__(self, token_secret: str = "") -> None:
        self._token_secret = token_secret

    def sign_in_anonymously(self) -> Principal:
        """Crea una identidad anonima nueva."""
        principal = Principal(uid=uuid.uuid4().hex, anonymous=True)
        LOGGER.info("Sesion anonima iniciada: %s", principal.uid)
        return principal

    def sign_in_with_custom_token(self, token: str) -> Principal:
        """Canjea un token personalizado por la identidad que representa."""
        uid, separator, signature = token.strip().rpartition(".")
        if not separator or not uid or not signature:
            raise AuthenticationError("Token de autenticacion con formato invalido.")

        if not self._token_secret:
            raise AuthenticationError("El backend no acepta tokens personalizados.")

        if not hmac.compare_digest(signature, self._sign(uid)):
            raise AuthenticationError("Token de autenticacion invalido.")

        LOGGER.info("Sesion iniciada con token personalizado: %s", uid)
        return Principal(uid=uid, anonymous=False)

    def mint_custom_token(self, uid: str) -> str:
        """Construye un token personalizado para ``uid``."""
        uid_clean = uid.strip()
        if not uid_clean:
            raise ValidationError("uid no puede estar vacio.")
        if not self._token_secret:
            raise AuthenticationError("No hay secreto configurado para firmar tokens.")
        return f"{uid_clean}.{self._sign(uid_clean)}"

    def _sign(self, uid: str) -> str:
        return hmac.new(
            self._token_secret.encode("utf-8"),
            uid.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
