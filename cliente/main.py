"""Inicializacion de la aplicacion de cliente."""

from __future__ import annotations

import locale
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QIcon
from PyQt6.QtWidgets import QApplication

from cliente.backend.auth import bootstrap_principal
from cliente.backend.controller import AppController
from cliente.backend.gateway import LocalRecordStore
from cliente.frontend.dialogs import show_error
from cliente.frontend.main_window import MainWindow
from parametros import get_app_id, get_initial_auth_token, load_backend_config
from servidor.services.auth_service import AuthService
from servidor.services.document_store import DocumentStore
from shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def main() -> int:
    """Ejecuta la aplicacion grafica."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        LOGGER.warning("No se pudo aplicar la configuracion regional de orden: %s", exc)
    app = QApplication(sys.argv)
    icon_path = Path(__file__).resolve().parent / "utilities" / "icono.ico"
    if icon_path.exists():
        app.setWindowIcon(QIcon(str(icon_path)))
    else:
        LOGGER.warning("No se encontro icono de aplicacion en: %s", icon_path)

    app_id = get_app_id()
    config = load_backend_config()
    document_store: DocumentStore | None = None
    if config is None:
        LOGGER.warning("Sin configuracion de backend; la aplicacion queda en modo sin datos.")
    else:
        try:
            document_store = DocumentStore(app_id=app_id, data_dir=config.data_dir)
        except ServiceError as exc:
            LOGGER.error("No se pudo abrir el almacen de datos: %s", exc)
            show_error(None, "Error del Sistema", str(exc))

    store = LocalRecordStore(document_store=document_store)
    controller = AppController(store=store, app_id=app_id)
    window = MainWindow(controller=controller)
    if not app.windowIcon().isNull():
        window.setWindowIcon(app.windowIcon())

    poll_timer = QTimer(window)
    if document_store is not None and config is not None:
        auth_service = AuthService(token_secret=config.token_secret)
        principal = bootstrap_principal(auth_service, get_initial_auth_token())
        controller.on_auth_ready(principal)
        poll_timer.timeout.connect(controller.poll)
        poll_timer.start(config.poll_interval_ms)

    app.aboutToQuit.connect(controller.shutdown)
    window.show()

    LOGGER.info("Aplicacion iniciada (app_id=%s).", app_id)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
