"""Pagina de seleccion de rol."""

from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont
from PyQt6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.policy import Role


class LoginPage(QWidget):
    """Pide elegir entre Administrador y Empleado antes de mostrar la consola."""

    def __init__(
        self,
        app_id: str,
        on_login: Callable[[Role], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._on_login = on_login

        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(40, 40, 40, 40)
        root_layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        card = QFrame(self)
        card.setObjectName("mainCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(40, 40, 40, 40)
        card_layout.setSpacing(16)

        title_label = QLabel(card)
        title_label.setFont(QFont("Segoe UI", 24, QFont.Weight.Bold))
        title_label.setTextFormat(Qt.TextFormat.RichText)
        title_label.setText(
            '<span style="color:#111827;">TALLER MÓVIL </span>'
            '<span style="color:#C80202;">PRO</span>'
        )
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        subtitle_label = QLabel("Selecciona tu Rol para iniciar", card)
        subtitle_label.setObjectName("subtitleLabel")
        subtitle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        admin_button = QPushButton("Administrador", card)
        admin_button.setCursor(Qt.CursorShape.PointingHandCursor)
        admin_button.clicked.connect(lambda: self._on_login(Role.ADMIN))

        user_button = QPushButton("Empleado", card)
        user_button.setObjectName("secondaryButton")
        user_button.setCursor(Qt.CursorShape.PointingHandCursor)
        user_button.clicked.connect(lambda: self._on_login(Role.USER))

        dataset_label = QLabel(f"Acceso a datos compartidos: {app_id}", card)
        dataset_label.setObjectName("footnoteLabel")
        dataset_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        card_layout.addWidget(title_label)
        card_layout.addWidget(subtitle_label)
        card_layout.addSpacing(12)
        card_layout.addWidget(admin_button)
        card_layout.addWidget(user_button)
        card_layout.addSpacing(8)
        card_layout.addWidget(dataset_label)

        shadow = QGraphicsDropShadowEffect(card)
        shadow.setBlurRadius(38)
        shadow.setOffset(0, 8)
        shadow.setColor(QColor(0, 0, 0, 38))
        card.setGraphicsEffect(shadow)

        root_layout.addWidget(card)
