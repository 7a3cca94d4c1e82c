"""Ventana principal de Taller Movil Pro."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QGuiApplication
from PyQt6.QtWidgets import (
    QButtonGroup,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.controller import (
    NAVIGATION_TABS,
    TAB_SALES,
    TAB_SETTINGS,
    TAB_TICKETS,
    AppController,
)
from cliente.frontend.login_page import LoginPage
from cliente.frontend.page_specs import INVENTORY_PAGE, TICKETS_PAGE
from cliente.frontend.record_list_page import RecordListPage
from cliente.frontend.sales_page import SalesPage
from cliente.frontend.settings_page import SettingsPage
from cliente.frontend.widgets.notice_banner import NoticeBanner


class MainWindow(QMainWindow):
    """Ventana principal: carga, seleccion de rol y consola con pestañas."""

    def __init__(self, controller: AppController) -> None:
        super().__init__()
        self._controller = controller

        self._stack: QStackedWidget
        self._connecting_page: QWidget
        self._login_page: LoginPage
        self._app_page: QWidget

        self._content_stack: QStackedWidget
        self._tickets_page: RecordListPage
        self._sales_page: SalesPage
        self._inventory_page: RecordListPage
        self._settings_page: SettingsPage
        self._role_label: QLabel
        self._nav_group: QButtonGroup
        self._nav_buttons: dict[str, QPushButton] = {}

        self.setWindowTitle("Taller Móvil Pro")
        screen = QGuiApplication.primaryScreen()
        geo = screen.availableGeometry()  # tamaño usable (sin taskbar/dock)
        w = int(geo.width() * 0.55)
        h = int(geo.height() * 0.85)
        self.resize(w, h)
        self.setMinimumSize(int(w * 0.70), int(h * 0.70))
        self._build_ui()
        self._apply_styles()
        self._connect_signals()
        self._on_session_changed()

    def _build_ui(self) -> None:
        """Construye la estructura de paginas de la ventana principal."""
        self._stack = QStackedWidget(self)
        self.setCentralWidget(self._stack)

        self._connecting_page = self._build_connecting_page()
        self._login_page = LoginPage(
            app_id=self._controller.app_id,
            on_login=self._controller.on_login,
            parent=self,
        )
        self._app_page = self._build_app_page()

        self._stack.addWidget(self._connecting_page)
        self._stack.addWidget(self._login_page)
        self._stack.addWidget(self._app_page)

    def _build_connecting_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout(page)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label = QLabel("Conectando a Taller Movil...", page)
        label.setObjectName("connectingLabel")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(label)
        return page

    def _build_app_page(self) -> QWidget:
        """Encabezado, aviso, contenido por pestaña y barra de navegacion."""
        page = QWidget(self)
        root_layout = QVBoxLayout(page)
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.setSpacing(0)

        header = QFrame(page)
        header.setObjectName("header")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(20, 12, 20, 12)
        title_label = QLabel(header)
        title_label.setFont(QFont("Segoe UI", 16, QFont.Weight.Bold))
        title_label.setTextFormat(Qt.TextFormat.RichText)
        title_label.setText(
            '<span style="color:#111827;">TALLER MÓVIL </span>'
            '<span style="color:#C80202;">PRO</span>'
        )
        self._role_label = QLabel(header)
        self._role_label.setObjectName("roleLabel")
        header_layout.addWidget(title_label)
        header_layout.addStretch(1)
        header_layout.addWidget(self._role_label)

        banner = NoticeBanner(self._controller.notices, page)

        self._content_stack = QStackedWidget(page)
        self._tickets_page = RecordListPage(self._controller.tickets, TICKETS_PAGE, page)
        self._sales_page = SalesPage(self._controller, page)
        self._inventory_page = RecordListPage(self._controller.inventory, INVENTORY_PAGE, page)
        self._settings_page = SettingsPage(self._controller, page)
        for widget in (
            self._tickets_page,
            self._sales_page,
            self._inventory_page,
            self._settings_page,
        ):
            self._content_stack.addWidget(widget)

        nav_bar = QFrame(page)
        nav_bar.setObjectName("navBar")
        nav_layout = QHBoxLayout(nav_bar)
        nav_layout.setContentsMargins(8, 6, 8, 6)
        self._nav_group = QButtonGroup(nav_bar)
        self._nav_group.setExclusive(True)
        for key, label in NAVIGATION_TABS:
            button = self._build_button(label)
            button.setObjectName("navButton")
            button.setCheckable(True)
            self._nav_group.addButton(button)
            self._nav_buttons[key] = button
            nav_layout.addWidget(button)

        banner_holder = QVBoxLayout()
        banner_holder.setContentsMargins(20, 10, 20, 0)
        banner_holder.addWidget(banner)

        root_layout.addWidget(header)
        root_layout.addLayout(banner_holder)
        root_layout.addWidget(self._content_stack, 1)
        root_layout.addWidget(nav_bar)
        return page

    def _apply_styles(self) -> None:
        """Aplica estilos QSS de la interfaz."""
        self.setStyleSheet(
            """
            QMainWindow {
                background-color: #eef1f4;
            }
            QFrame#mainCard {
                background-color: #ffffff;
                border-radius: 18px;
                min-width: 420px;
                max-width: 480px;
            }
            QFrame#header, QFrame#navBar {
                background-color: #ffffff;
                border-bottom: 1px solid #e5e7eb;
            }
            QLabel#subtitleLabel {
                color: #4b5563;
                font-size: 14px;
            }
            QLabel#footnoteLabel, QLabel#roleLabel {
                color: #6b7280;
                font-size: 12px;
            }
            QLabel#connectingLabel {
                color: #4b5563;
                font-family: "Segoe UI";
                font-size: 18px;
            }
            QPushButton {
                background-color: #C80202;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-family: "Segoe UI";
                font-size: 15px;
                font-weight: 600;
                min-height: 44px;
                padding: 8px 14px;
            }
            QPushButton:hover {
                background-color: #A30202;
            }
            QPushButton:pressed {
                background-color: #820101;
            }
            QPushButton:disabled {
                background-color: #d5a3a3;
                color: #f5e8e8;
            }
            QPushButton#secondaryButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            QPushButton#secondaryButton:hover {
                background-color: #d1d5db;
            }
            QPushButton#navButton {
                background-color: transparent;
                color: #6b7280;
                font-size: 12px;
                min-height: 36px;
            }
            QPushButton#navButton:checked {
                color: #C80202;
                font-weight: 700;
            }
            """
        )

    def _connect_signals(self) -> None:
        """Conecta navegacion y cambios de sesion con el controller."""
        for key, button in self._nav_buttons.items():
            button.clicked.connect(
                lambda _checked=False, tab=key: self._controller.on_tab_selected(tab)
            )
        self._controller.add_tab_listener(self._on_tab_changed)
        self._controller.add_session_listener(self._on_session_changed)

    def _on_session_changed(self) -> None:
        """Elige la pagina visible segun identidad y rol."""
        session = self._controller.session
        if not session.auth_ready:
            self._stack.setCurrentWidget(self._connecting_page)
            return
        if not session.logged_in:
            self._stack.setCurrentWidget(self._login_page)
            return

        self._role_label.setText(f"Rol: {session.role.value}")
        self._on_tab_changed(self._controller.active_tab)
        self._stack.setCurrentWidget(self._app_page)

    def _on_tab_changed(self, tab: str) -> None:
        if tab == TAB_TICKETS:
            page: QWidget = self._tickets_page
        elif tab == TAB_SALES:
            page = self._sales_page
        elif tab == TAB_SETTINGS:
            page = self._settings_page
        else:
            page = self._inventory_page
        self._content_stack.setCurrentWidget(page)
        button = self._nav_buttons.get(tab)
        if button is not None:
            button.setChecked(True)

    @staticmethod
    def _build_button(text: str) -> QPushButton:
        """Construye un boton estandar de la barra de navegacion."""
        button = QPushButton(text)
        button.setCursor(Qt.CursorShape.PointingHandCursor)
        return button
