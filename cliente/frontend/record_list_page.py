"""Pagina generica de lista, formulario y confirmacion de eliminacion."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QPushButton,
    QStackedWidget,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from cliente.backend.list_controller import (
    ConfirmDeleteState,
    FormState,
    RecordListController,
    ViewMode,
)
from cliente.backend.validators import parse_price, parse_quantity


@dataclass(frozen=True)
class FieldSpec:
    """Campo del formulario: ``kind`` es text, int, price, choice o editable_choice."""

    key: str
    label: str
    kind: str = "text"
    choices: tuple[str, ...] = ()
    placeholder: str = ""


@dataclass(frozen=True)
class ListPageSpec:
    title: Callable[[str], str]
    add_label: str
    search_placeholder: str
    headers: tuple[str, ...]
    row: Callable[[Any], tuple[str, ...]]
    empty_text: str
    edit_label: str
    form_title_new: str
    form_title_edit: str
    save_label: str
    fields: tuple[FieldSpec, ...]
    confirm_message: Callable[[Any], str]
    lock_category_on_add: bool = False
    disable_edit_when_denied: bool = False


class RecordListPage(QWidget):
    """Vista de un RecordListController; todo cambio pasa por el controller."""

    def __init__(
        self,
        controller: RecordListController,
        spec: ListPageSpec,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._spec = spec
        self._field_widgets: dict[str, QLineEdit | QComboBox] = {}
        self._rendered_mode: ViewMode | None = None
        self._populating = False

        self._stack: QStackedWidget
        self._title_label: QLabel
        self._add_button: QPushButton
        self._search_input: QLineEdit
        self._table: QTableWidget
        self._empty_label: QLabel
        self._confirm_bar: QFrame
        self._confirm_label: QLabel
        self._form_title_label: QLabel
        self._form_errors_label: QLabel

        self._build_ui()
        self._apply_styles()
        self._controller.add_listener(self.refresh)
        self.refresh()

    def _build_ui(self) -> None:
        """Construye la vista de lista y la de formulario."""
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(24, 24, 24, 24)

        self._stack = QStackedWidget(self)
        self._list_view = self._build_list_view()
        self._form_view = self._build_form_view()
        self._stack.addWidget(self._list_view)
        self._stack.addWidget(self._form_view)
        root_layout.addWidget(self._stack)

    def _build_list_view(self) -> QWidget:
        view = QFrame(self)
        view.setObjectName("pageCard")
        layout = QVBoxLayout(view)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(12)

        header_layout = QHBoxLayout()
        self._title_label = QLabel(view)
        self._title_label.setObjectName("pageTitle")
        self._add_button = QPushButton(self._spec.add_label, view)
        self._add_button.setCursor(Qt.CursorShape.PointingHandCursor)
        self._add_button.clicked.connect(self._controller.start_add)
        header_layout.addWidget(self._title_label, 1)
        header_layout.addWidget(self._add_button)

        self._search_input = QLineEdit(view)
        self._search_input.setPlaceholderText(self._spec.search_placeholder)
        self._search_input.textChanged.connect(self._controller.set_search_term)

        self._confirm_bar = QFrame(view)
        self._confirm_bar.setObjectName("confirmBar")
        confirm_layout = QHBoxLayout(self._confirm_bar)
        self._confirm_label = QLabel(self._confirm_bar)
        self._confirm_label.setWordWrap(True)
        cancel_delete_button = QPushButton("Cancelar", self._confirm_bar)
        cancel_delete_button.setObjectName("secondaryButton")
        cancel_delete_button.clicked.connect(self._controller.cancel_delete)
        confirm_delete_button = QPushButton("Eliminar", self._confirm_bar)
        confirm_delete_button.clicked.connect(self._controller.confirm_delete)
        confirm_layout.addWidget(self._confirm_label, 1)
        confirm_layout.addWidget(cancel_delete_button)
        confirm_layout.addWidget(confirm_delete_button)
        self._confirm_bar.hide()

        column_count = len(self._spec.headers) + 1
        self._table = QTableWidget(0, column_count, view)
        self._table.setHorizontalHeaderLabels([*self._spec.headers, "Acciones"])
        self._table.verticalHeader().setVisible(False)
        self._table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self._table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)

        self._empty_label = QLabel(self._spec.empty_text, view)
        self._empty_label.setObjectName("emptyLabel")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addLayout(header_layout)
        layout.addWidget(self._search_input)
        layout.addWidget(self._confirm_bar)
        layout.addWidget(self._table, 1)
        layout.addWidget(self._empty_label)
        return view

    def _build_form_view(self) -> QWidget:
        view = QFrame(self)
        view.setObjectName("pageCard")
        layout = QVBoxLayout(view)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(14)

        header_layout = QHBoxLayout()
        back_button = QPushButton("←", view)
        back_button.setObjectName("backButton")
        back_button.clicked.connect(self._controller.cancel)
        self._form_title_label = QLabel(view)
        self._form_title_label.setObjectName("pageTitle")
        header_layout.addWidget(back_button)
        header_layout.addWidget(self._form_title_label, 1)

        form_layout = QFormLayout()
        form_layout.setSpacing(10)
        for field in self._spec.fields:
            widget = self._build_field_widget(field, view)
            self._field_widgets[field.key] = widget
            form_layout.addRow(field.label, widget)

        self._form_errors_label = QLabel(view)
        self._form_errors_label.setObjectName("formErrors")
        self._form_errors_label.setWordWrap(True)

        save_button = QPushButton(self._spec.save_label, view)
        save_button.setCursor(Qt.CursorShape.PointingHandCursor)
        save_button.clicked.connect(self._controller.save)

        layout.addLayout(header_layout)
        layout.addLayout(form_layout)
        layout.addWidget(self._form_errors_label)
        layout.addStretch(1)
        layout.addWidget(save_button)
        return view

    def _build_field_widget(self, field: FieldSpec, parent: QWidget) -> QLineEdit | QComboBox:
        if field.kind in ("choice", "editable_choice"):
            combo = QComboBox(parent)
            combo.addItems(list(field.choices))
            combo.setEditable(field.kind == "editable_choice")
            combo.currentTextChanged.connect(
                lambda text, key=field.key: self._on_field_changed(key, text)
            )
            return combo

        line_edit = QLineEdit(parent)
        line_edit.setPlaceholderText(field.placeholder)
        if field.kind == "int":
            line_edit.textChanged.connect(
                lambda text, key=field.key: self._on_field_changed(key, parse_quantity(text))
            )
        elif field.kind == "price":
            line_edit.textChanged.connect(
                lambda text, key=field.key: self._on_field_changed(key, parse_price(text))
            )
        else:
            line_edit.textChanged.connect(
                lambda text, key=field.key: self._on_field_changed(key, text)
            )
        return line_edit

    def refresh(self) -> None:
        """Sincroniza la vista con el estado del controller."""
        state = self._controller.state
        entering = state.mode is not self._rendered_mode
        self._rendered_mode = state.mode

        if isinstance(state, FormState):
            if entering:
                self._populate_form(state)
            self._render_form_errors(state)
            self._stack.setCurrentWidget(self._form_view)
            return

        if entering:
            self._search_input.setText(self._controller.search_term)
        self._render_list(state)
        self._stack.setCurrentWidget(self._list_view)

    def _render_list(self, state: Any) -> None:
        controller = self._controller
        can_mutate = controller.can_mutate
        self._title_label.setText(self._spec.title(controller.category_filter))
        self._add_button.setEnabled(can_mutate)

        if isinstance(state, ConfirmDeleteState):
            self._confirm_label.setText(self._spec.confirm_message(state.target))
            self._confirm_bar.show()
        else:
            self._confirm_bar.hide()

        records = controller.visible_records()
        self._table.setRowCount(len(records))
        for row_index, record in enumerate(records):
            for column_index, text in enumerate(self._spec.row(record)):
                self._table.setItem(row_index, column_index, QTableWidgetItem(text))
            self._table.setCellWidget(
                row_index,
                len(self._spec.headers),
                self._build_actions(record, can_mutate),
            )

        self._table.setVisible(bool(records))
        self._empty_label.setVisible(not records)

    def _build_actions(self, record: Any, can_mutate: bool) -> QWidget:
        actions = QWidget(self._table)
        layout = QHBoxLayout(actions)
        layout.setContentsMargins(4, 0, 4, 0)

        edit_button = QPushButton(self._spec.edit_label, actions)
        edit_button.setObjectName("linkButton")
        edit_button.setEnabled(can_mutate or not self._spec.disable_edit_when_denied)
        edit_button.clicked.connect(lambda _checked=False: self._controller.start_edit(record))
        layout.addWidget(edit_button)

        if can_mutate:
            delete_button = QPushButton("Eliminar", actions)
            delete_button.setObjectName("dangerLinkButton")
            delete_button.clicked.connect(
                lambda _checked=False: self._controller.request_delete(record)
            )
            layout.addWidget(delete_button)
        return actions

    def _populate_form(self, state: FormState) -> None:
        """Carga el borrador en los widgets sin reenviar cambios al controller."""
        self._populating = True
        try:
            title = self._spec.form_title_edit if state.editing else self._spec.form_title_new
            self._form_title_label.setText(title)
            for field in self._spec.fields:
                widget = self._field_widgets[field.key]
                value = getattr(state.draft, field.key)
                if isinstance(widget, QComboBox):
                    widget.setCurrentText(str(value))
                    locked = (
                        self._spec.lock_category_on_add
                        and not state.editing
                        and bool(self._controller.category_filter)
                    )
                    widget.setEnabled(not locked)
                else:
                    widget.setText(str(value))
        finally:
            self._populating = False

    def _render_form_errors(self, state: FormState) -> None:
        if not state.errors:
            self._form_errors_label.clear()
            self._form_errors_label.hide()
            return
        self._form_errors_label.setText(
            "Revisa: " + ", ".join(violation.message for violation in state.errors)
        )
        self._form_errors_label.show()

    def _on_field_changed(self, key: str, value: Any) -> None:
        if self._populating or self._controller.mode is not ViewMode.FORM:
            return
        self._controller.update_draft(**{key: value})

    def _apply_styles(self) -> None:
        """Aplica estilos QSS de la pagina."""
        self.setStyleSheet(
            """
            QFrame#pageCard {
                background-color: #ffffff;
                border-radius: 16px;
            }
            QLabel#pageTitle {
                color: #111827;
                font-family: "Segoe UI";
                font-size: 22px;
                font-weight: 800;
            }
            QLabel#emptyLabel {
                color: #6b7280;
                font-size: 14px;
                padding: 40px;
            }
            QLabel#formErrors {
                color: #b91c1c;
                font-size: 12px;
            }
            QFrame#confirmBar {
                background-color: #fef2f2;
                border: 1px solid #fecaca;
                border-radius: 10px;
            }
            QLineEdit, QComboBox {
                background-color: #f8fafc;
                border: 1px solid #d1d5db;
                border-radius: 8px;
                color: #111827;
                font-size: 13px;
                padding: 8px;
            }
            QLineEdit:focus {
                border: 1px solid #C80202;
                background-color: #ffffff;
            }
            QPushButton {
                background-color: #C80202;
                border: none;
                border-radius: 10px;
                color: #ffffff;
                font-family: "Segoe UI";
                font-size: 13px;
                font-weight: 600;
                min-height: 36px;
                padding: 6px 14px;
            }
            QPushButton:hover {
                background-color: #A30202;
            }
            QPushButton:disabled {
                background-color: #d5a3a3;
                color: #f5e8e8;
            }
            QPushButton#secondaryButton, QPushButton#backButton {
                background-color: #e5e7eb;
                color: #1f2937;
            }
            QPushButton#linkButton, QPushButton#dangerLinkButton {
                background: transparent;
                min-height: 24px;
                padding: 2px 6px;
            }
            QPushButton#linkButton {
                color: #2563eb;
            }
            QPushButton#linkButton:disabled {
                color: #9ca3af;
            }
            QPushButton#dangerLinkButton {
                color: #dc2626;
            }
            """
        )
