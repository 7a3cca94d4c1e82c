"""Configuracion de las paginas de inventario y tickets."""

from __future__ import annotations

from cliente.backend.record_formatter import inventory_row, ticket_row
from cliente.frontend.record_list_page import FieldSpec, ListPageSpec
from shared.categories import INVENTORY_CATEGORIES, inventory_title
from shared.schemas import TICKET_STATUSES, InventoryItem, Ticket


def _inventory_confirm_message(item: InventoryItem) -> str:
    return (
        f"¿Estás seguro de que quieres eliminar {item.name} del inventario? "
        "Esta acción es irreversible."
    )


def _ticket_confirm_message(ticket: Ticket) -> str:
    return (
        f"¿Estás seguro de que quieres eliminar el ticket de {ticket.cliente}? "
        "Esta acción es irreversible."
    )


INVENTORY_PAGE = ListPageSpec(
    title=inventory_title,
    add_label="Agregar Item",
    search_placeholder="Buscar por Nombre o Modelo...",
    headers=("Nombre", "Modelo", "Categoría", "Cantidad", "Precio"),
    row=inventory_row,
    empty_text="No hay items en esta categoría.",
    edit_label="Editar",
    form_title_new="Nuevo Item",
    form_title_edit="Editar Item",
    save_label="Guardar Item",
    fields=(
        FieldSpec("name", "Nombre", placeholder="Mica de vidrio templado"),
        FieldSpec("model", "Modelo", placeholder="iPhone 15"),
        FieldSpec("category", "Categoría", kind="choice", choices=INVENTORY_CATEGORIES),
        FieldSpec("quantity", "Cantidad", kind="int"),
        FieldSpec("price", "Precio", kind="price"),
    ),
    confirm_message=_inventory_confirm_message,
    lock_category_on_add=True,
    disable_edit_when_denied=True,
)

TICKETS_PAGE = ListPageSpec(
    title=lambda _category_filter: "Tickets de Reparación",
    add_label="Nuevo Ticket",
    search_placeholder="Buscar por Cliente o Equipo...",
    headers=("Cliente", "Equipo", "Estado", "Entrada"),
    row=ticket_row,
    empty_text="No hay tickets activos.",
    edit_label="Detalles",
    form_title_new="Nuevo Ticket",
    form_title_edit="Editar Ticket",
    save_label="Guardar Ticket",
    fields=(
        FieldSpec("cliente", "Cliente", placeholder="Nombre del cliente"),
        FieldSpec("equipo", "Equipo", placeholder="Samsung A54 - pantalla rota"),
        FieldSpec("estado", "Estado", kind="editable_choice", choices=TICKET_STATUSES),
    ),
    confirm_message=_ticket_confirm_message,
)
