"""Parametros globales del proyecto."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
BACKEND_DATA_DIR = DATA_DIR / "backend"

APP_ID_ENV = "TALLER_APP_ID"
BACKEND_CONFIG_ENV = "TALLER_BACKEND_CONFIG"
INITIAL_AUTH_TOKEN_ENV = "TALLER_INITIAL_AUTH_TOKEN"
DEFAULT_APP_ID = "default-app-id"

NOTICE_DURATION_SECONDS = 4
SLOW_OPERATION_SECONDS = 2.0
DEFAULT_POLL_INTERVAL_MS = 1000

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BackendConfig:
    """Descriptor de conexion al backend entregado por el entorno."""

    data_dir: Path
    token_secret: str = ""
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS


def get_app_id() -> str:
    """Retorna el identificador de la aplicacion (dataset compartido)."""
    return os.environ.get(APP_ID_ENV, "").strip() or DEFAULT_APP_ID


def get_initial_auth_token() -> str:
    """Retorna el token de arranque, o string vacio si no existe."""
    return os.environ.get(INITIAL_AUTH_TOKEN_ENV, "").strip()


def load_backend_config(raw: str | None = None) -> BackendConfig | None:
    """Parsea la configuracion del backend. Retorna None si no hay backend."""
    if raw is None:
        raw = os.environ.get(BACKEND_CONFIG_ENV, "")

    try:
        data = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError:
        LOGGER.warning("%s no contiene JSON valido; se omite el backend.", BACKEND_CONFIG_ENV)
        return None

    if not isinstance(data, dict) or not data:
        return None

    data_dir = Path(str(data.get("data_dir") or BACKEND_DATA_DIR))
    try:
        poll_interval_ms = int(data.get("poll_interval_ms", DEFAULT_POLL_INTERVAL_MS))
    except (TypeError, ValueError):
        poll_interval_ms = DEFAULT_POLL_INTERVAL_MS

    return BackendConfig(
        data_dir=data_dir,
        token_secret=str(data.get("token_secret") or ""),
        poll_interval_ms=max(poll_interval_ms, 100),
    )
