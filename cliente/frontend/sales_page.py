"""Pagina de punto de venta: registro simple de ventas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QFrame,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.record_formatter import format_price
from cliente.backend.record_types import sort_inventory
from cliente.backend.validators import parse_quantity
from shared.schemas import InventoryItem

if TYPE_CHECKING:
    from cliente.backend.controller import AppController


class SalesPage(QWidget):
    """Permite a un administrador registrar la venta de un articulo."""

    def __init__(self, controller: AppController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._items: list[InventoryItem] = []

        card = QFrame(self)
        card.setObjectName("pageCard")
        card_layout = QVBoxLayout(card)
        card_layout.setContentsMargins(24, 24, 24, 24)
        card_layout.setSpacing(14)

        title_label = QLabel("Punto de Venta (POS)", card)
        title_label.setObjectName("pageTitle")

        self._item_combo = QComboBox(card)
        self._quantity_input = QLineEdit("1", card)
        self._total_label = QLabel(card)
        self._total_label.setObjectName("totalLabel")

        form_layout = QFormLayout()
        form_layout.addRow("Artículo", self._item_combo)
        form_layout.addRow("Cantidad", self._quantity_input)
        form_layout.addRow("Total", self._total_label)

        self._register_button = QPushButton("Registrar venta", card)
        self._register_button.setCursor(Qt.CursorShape.PointingHandCursor)

        hint_label = QLabel(
            "El registro de ventas no descuenta stock; ajusta el inventario desde su pestaña.",
            card,
        )
        hint_label.setObjectName("hintLabel")
        hint_label.setWordWrap(True)

        card_layout.addWidget(title_label)
        card_layout.addLayout(form_layout)
        card_layout.addWidget(self._register_button)
        card_layout.addWidget(hint_label)
        card_layout.addStretch(1)

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
            QLabel#totalLabel {
                color: #C80202;
                font-size: 18px;
                font-weight: 700;
            }
            QLabel#hintLabel {
                color: #6b7280;
                font-size: 12px;
            }
            QPushButton {
                background-color: #C80202;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-weight: 600;
                min-height: 40px;
            }
            QPushButton:disabled {
                background-color: #d5a3a3;
            }
            """
        )

        self._item_combo.currentIndexChanged.connect(self._update_total)
        self._quantity_input.textChanged.connect(self._update_total)
        self._register_button.clicked.connect(self._on_register_clicked)
        self._controller.inventory.add_listener(self.refresh)
        self._controller.add_session_listener(self.refresh)
        self.refresh()

    def refresh(self) -> None:
        """Recarga articulos del ultimo snapshot de inventario."""
        selected_id = self._selected_item().id if self._selected_item() else ""
        self._items = sort_inventory(self._controller.inventory.records)

        self._item_combo.blockSignals(True)
        self._item_combo.clear()
        for item in self._items:
            self._item_combo.addItem(
                f"{item.name} - {item.model} ({item.quantity} disp.)",
                item.id,
            )
        index = self._item_combo.findData(selected_id) if selected_id else -1
        self._item_combo.setCurrentIndex(index if index >= 0 else (0 if self._items else -1))
        self._item_combo.blockSignals(False)

        self._register_button.setEnabled(self._controller.sales.can_register and bool(self._items))
        self._update_total()

    def _selected_item(self) -> InventoryItem | None:
        index = self._item_combo.currentIndex()
        if index < 0 or index >= len(self._items):
            return None
        return self._items[index]

    def _update_total(self) -> None:
        item = self._selected_item()
        quantity = parse_quantity(self._quantity_input.text())
        total = item.price * quantity if item is not None and quantity > 0 else 0.0
        self._total_label.setText(format_price(total))

    def _on_register_clicked(self) -> None:
        item = self._selected_item()
        if item is None:
            return
        quantity = parse_quantity(self._quantity_input.text())
        line = self._controller.sales.build_line(item, quantity)
        if self._controller.sales.record_sale([line]) is not None:
            self._quantity_input.setText("1")
