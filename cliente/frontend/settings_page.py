"""Pagina de ajustes: rol actual, identidad compartible y cierre de sesion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QFrame, QLabel, QLineEdit, QPushButton, QVBoxLayout, QWidget

from cliente.backend.policy import Role

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class SettingsPage(QWidget):
    """Muestra la informacion de usuario y permite cambiar de rol."""

    def __init__(self, controller: AppController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller

        card = QFrame(self)
        card.setObjectName("pageCard")
        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(10)

        title_label = QLabel("Configuración", card)
        title_label.setObjectName("pageTitle")
        self._role_label = QLabel(card)
        self._role_label.setTextFormat(Qt.TextFormat.RichText)

        principal_caption = QLabel(
            "Tu ID único (puedes compartirlo para colaborar):", card
        )
        self._principal_view = QLineEdit(card)
        self._principal_view.setReadOnly(True)

        logout_button = QPushButton("Cerrar Sesión y Cambiar Rol", card)
        logout_button.setCursor(Qt.CursorShape.PointingHandCursor)
        logout_button.clicked.connect(self._controller.on_logout)

        layout.addWidget(title_label)
        layout.addWidget(QLabel("Información de Usuario", card))
        layout.addWidget(self._role_label)
        layout.addSpacing(8)
        layout.addWidget(QLabel("ID de Usuario (Referencia)", card))
        layout.addWidget(principal_caption)
        layout.addWidget(self._principal_view)
        layout.addStretch(1)
        layout.addWidget(logout_button)

        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(24, 24, 24, 24)
        root_layout.addWidget(card)

        self.setStyleSheet(
            """
            QFrame#pageCard {
                background-color: #ffffff;
                border-radius: 16px;
            }
            QLabel#pageTitle {
                color: #111827;
                font-size: 22px;
                font-weight: 800;
            }
            QLineEdit {
                background-color: #f9fafb;
                border: 1px dashed #d1d5db;
                border-radius: 8px;
                padding: 8px;
            }
            QPushButton {
                background-color: #374151;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-weight: 600;
                min-height: 42px;
            }
            """
        )

        self._controller.add_session_listener(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        role = self._controller.session.role
        color = "#C80202" if role is Role.ADMIN else "#2563eb"
        role_text = role.value if role is not None else "-"
        self._role_label.setText(f'Rol Actual: <b style="color:{color};">{role_text}</b>')
        self._principal_view.setText(self._controller.principal_id)
