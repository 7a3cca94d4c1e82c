"""Parametrizacion del controller de listas para inventario y tickets."""

from __future__ import annotations

import locale
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from shared.categories import category_from_filter, fold_text
from shared.protocol import Collection, StoredDocument
from shared.schemas import (
    InventoryItem,
    Ticket,
    ValidationResult,
    validate_inventory_item,
    validate_ticket,
)

from .policy import EntityType

R = TypeVar("R", InventoryItem, Ticket)


@dataclass(frozen=True, slots=True)
class RecordMessages:
    """Textos de avisos para un tipo de registro."""

    created: Callable[[str], str]
    updated: Callable[[str], str]
    deleted: Callable[[str], str]
    save_failed: str
    delete_failed: str
    save_denied: str
    edit_denied: str
    delete_denied: str


@dataclass(frozen=True)
class RecordType(Generic[R]):
    """Describe como listar, filtrar, validar y persistir un tipo de registro."""

    entity_type: EntityType
    collection: Collection
    from_document: Callable[[StoredDocument], R]
    make_default: Callable[[str], R]
    validate: Callable[[R], ValidationResult]
    search_fields: Callable[[R], tuple[str, ...]]
    sort_records: Callable[[list[R]], list[R]]
    describe: Callable[[R], str]
    messages: RecordMessages
    category_of: Callable[[R], str] | None = None


def sort_inventory(items: list[InventoryItem]) -> list[InventoryItem]:
    """Orden alfabetico por nombre, sin distinguir mayusculas ni acentos.

    El plegado NFKD aproxima la intercalacion de la configuracion regional;
    los empates se resuelven con ``locale.strxfrm`` segun el LC_COLLATE activo.
    """
    return sorted(
        items,
        key=lambda item: (fold_text(item.name), locale.strxfrm(item.name), item.name),
    )


def _intake_order_key(ticket: Ticket) -> float:
    if ticket.fecha_entrada is None:
        return float("-inf")
    return ticket.fecha_entrada.timestamp()


def sort_tickets(tickets: list[Ticket]) -> list[Ticket]:
    """Mas recientes primero; los tickets sin fecha de entrada quedan al final."""
    return sorted(tickets, key=_intake_order_key, reverse=True)


def _default_inventory_item(category_filter: str) -> InventoryItem:
    return InventoryItem(category=category_from_filter(category_filter))


def _default_ticket(_category_filter: str) -> Ticket:
    return Ticket()


INVENTORY_RECORDS: RecordType[InventoryItem] = RecordType(
    entity_type=EntityType.INVENTORY,
    collection=Collection.INVENTORY,
    from_document=InventoryItem.from_document,
    make_default=_default_inventory_item,
    validate=validate_inventory_item,
    search_fields=lambda item: (item.name, item.model),
    sort_records=sort_inventory,
    describe=lambda item: item.name.strip(),
    category_of=lambda item: item.category,
    messages=RecordMessages(
        created=lambda name: f"Nuevo item {name} agregado al inventario.",
        updated=lambda name: f"Item {name} actualizado correctamente.",
        deleted=lambda name: f"{name} eliminado del inventario.",
        save_failed="No se pudo guardar el item.",
        delete_failed="No se pudo eliminar el item.",
        save_denied="Solo los administradores pueden modificar el inventario.",
        edit_denied="Solo los administradores pueden editar el inventario.",
        delete_denied="Solo los administradores pueden eliminar items.",
    ),
)

TICKET_RECORDS: RecordType[Ticket] = RecordType(
    entity_type=EntityType.TICKETS,
    collection=Collection.TICKETS,
    from_document=Ticket.from_document,
    make_default=_default_ticket,
    validate=validate_ticket,
    search_fields=lambda ticket: (ticket.cliente, ticket.equipo, ticket.id),
    sort_records=sort_tickets,
    describe=lambda ticket: ticket.cliente.strip(),
    messages=RecordMessages(
        created=lambda cliente: f"Ticket de {cliente} registrado.",
        updated=lambda cliente: f"Ticket de {cliente} actualizado correctamente.",
        deleted=lambda cliente: f"Ticket de {cliente} eliminado.",
        save_failed="No se pudo guardar el ticket.",
        delete_failed="No se pudo eliminar el ticket.",
        save_denied="No tienes permisos para modificar tickets.",
        edit_denied="No tienes permisos para editar tickets.",
        delete_denied="No tienes permisos para eliminar tickets.",
    ),
)
