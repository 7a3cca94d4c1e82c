"""Controlador principal del cliente."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from parametros import DEFAULT_APP_ID
from shared.categories import INVENTORY_TAB_FILTERS
from shared.protocol import Principal
from shared.schemas import InventoryItem, Ticket

from .gateway import RecordStore
from .list_controller import RecordListController
from .notices import NoticeBoard
from .policy import Role
from .record_types import INVENTORY_RECORDS, TICKET_RECORDS
from .sales import SalesController
from .session import Session

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

LOGGER = logging.getLogger(__name__)

TAB_TICKETS = "tickets"
TAB_SALES = "sales"
TAB_SETTINGS = "settings"

NAVIGATION_TABS: tuple[tuple[str, str], ...] = (
    (TAB_TICKETS, "Tickets"),
    (TAB_SALES, "Ventas"),
    ("micas", "Micas"),
    ("fundas", "Fundas"),
    ("accesorios", "Accs."),
    ("herramientas", "Herr."),
    (TAB_SETTINGS, "Ajustes"),
)


class AppController:
    """Coordina sesion, suscripciones y controllers de cada pantalla."""

    def __init__(
        self,
        store: RecordStore,
        session: Session | None = None,
        notices: NoticeBoard | None = None,
        app_id: str = DEFAULT_APP_ID,
    ) -> None:
        self._store = store
        self._session = session or Session()
        self._notices = notices or NoticeBoard()
        self._app_id = app_id
        self._active_tab = TAB_TICKETS
        self._tab_listeners: list[Callable[[str], None]] = []
        self._session_listeners: list[Callable[[], None]] = []

        self.inventory: RecordListController[InventoryItem] = RecordListController(
            INVENTORY_RECORDS, store, self._session, self._notices
        )
        self.tickets: RecordListController[Ticket] = RecordListController(
            TICKET_RECORDS, store, self._session, self._notices
        )
        self.sales = SalesController(store, self._session, self._notices)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def principal_id(self) -> str:
        return self._session.principal_id

    @property
    def auth_ready(self) -> bool:
        return self._session.auth_ready

    @property
    def active_tab(self) -> str:
        return self._active_tab

    def add_tab_listener(self, callback: Callable[[str], None]) -> None:
        self._tab_listeners.append(callback)

    def add_session_listener(self, callback: Callable[[], None]) -> None:
        """Callback para cambios de rol o de identidad."""
        self._session_listeners.append(callback)

    def on_auth_ready(self, principal: Principal) -> None:
        """Registra la identidad del backend y abre las suscripciones si hay rol."""
        self._session.principal = principal
        self._store.initialize(principal)
        LOGGER.info("Autenticacion lista: %s", principal.uid)
        self._attach_if_ready()
        self._emit_session()

    def on_principal_changed(self, principal: Principal) -> None:
        """Cambia de identidad cancelando las suscripciones de la anterior."""
        LOGGER.info("Cambio de identidad: %s -> %s", self.principal_id or "-", principal.uid)
        self._detach_all()
        self._store.teardown()
        self.on_auth_ready(principal)

    def on_login(self, role: Role | str) -> None:
        """Selecciona el rol local y comienza a recibir datos."""
        self._session.login(role)
        self._attach_if_ready()
        self._emit_session()

    def on_logout(self) -> None:
        """Olvida el rol (se vuelve a pedir) manteniendo la identidad del backend."""
        self._session.logout()
        self._detach_all()
        self._emit_session()

    def on_tab_selected(self, tab: str) -> None:
        """Cambia de pestaña; toda pantalla vuelve a su lista."""
        if tab not in dict(NAVIGATION_TABS):
            raise ValueError(f"Pestaña desconocida: {tab}")

        category_filter = INVENTORY_TAB_FILTERS.get(tab)
        if category_filter is not None:
            self.inventory.set_category_filter(category_filter)
        else:
            self.inventory.reset()
        self.tickets.reset()

        self._active_tab = tab
        LOGGER.info("Pestaña activa: %s", tab)
        for callback in list(self._tab_listeners):
            callback(tab)

    def poll(self) -> bool:
        """Entrega cambios hechos por otros clientes."""
        return self._store.poll()

    def shutdown(self) -> None:
        """Cancela suscripciones y libera el gateway al cerrar la aplicacion."""
        self._detach_all()
        self._store.teardown()

    def on_exit(
        self,
        app: QApplication | Callable[[], None] | None,
    ) -> None:
        """Cierra la aplicacion."""
        LOGGER.info("Accion ejecutada: salir")
        self.shutdown()

        if callable(app):
            app()
            return

        if app is not None:
            app.quit()

    def _attach_if_ready(self) -> None:
        if not (self._session.auth_ready and self._session.logged_in):
            return
        self.inventory.attach()
        self.tickets.attach()

    def _detach_all(self) -> None:
        self.inventory.detach()
        self.tickets.detach()

    def _emit_session(self) -> None:
        for callback in list(self._session_listeners):
            callback()
