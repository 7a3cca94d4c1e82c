"""Emite un token personalizado para iniciar sesion con una identidad fija."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from parametros import load_backend_config
from servidor.services.auth_service import AuthService
from shared.errors import ValidationError

LOGGER = logging.getLogger(__name__)

EXIT_NO_SECRET = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parsea argumentos CLI."""
    parser = argparse.ArgumentParser(
        description=(
            "Genera un token <uid>.<firma> para TALLER_INITIAL_AUTH_TOKEN. "
            "Sin --secret se usa token_secret de TALLER_BACKEND_CONFIG."
        )
    )
    parser.add_argument("uid", help="Identidad a representar en el token.")
    parser.add_argument(
        "--secret",
        default="",
        help="Secreto HMAC; por defecto el configurado en el backend.",
    )
    return parser.parse_args(argv)


def resolve_secret(explicit: str) -> str:
    """Prioriza el secreto explicito por sobre el de la configuracion."""
    if explicit:
        return explicit
    config = load_backend_config()
    return config.token_secret if config is not None else ""


def main(argv: Sequence[str] | None = None) -> int:
    """Punto de entrada CLI."""
    args = parse_args(argv)
    secret = resolve_secret(args.secret)
    if not secret:
        LOGGER.error("No hay secreto disponible: usa --secret o define token_secret.")
        return EXIT_NO_SECRET

    try:
        token = AuthService(token_secret=secret).mint_custom_token(args.uid)
    except ValidationError as exc:
        LOGGER.error("%s", exc)
        return 1

    print(token)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
