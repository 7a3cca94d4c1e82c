"""Formateo puro de valores de registros para la interfaz."""

from __future__ import annotations

from datetime import datetime

from shared.schemas import DEFAULT_TICKET_STATUS, InventoryItem, Ticket

_NO_DATE = "Sin fecha"
_NOT_AVAILABLE = "N/A"


def format_price(amount: float) -> str:
    """Formatea un precio con dos decimales: ``$5.99``."""
    return f"${amount:,.2f}"


def format_timestamp(value: datetime | None) -> str:
    """Fecha local ``dd/mm/YYYY HH:MM`` o ``Sin fecha``."""
    if value is None:
        return _NO_DATE
    local_value = value.astimezone() if value.tzinfo is not None else value
    return local_value.strftime("%d/%m/%Y %H:%M")


def format_ticket_status(estado: str) -> str:
    return (estado or "").strip() or DEFAULT_TICKET_STATUS


def inventory_row(item: InventoryItem) -> tuple[str, str, str, str, str]:
    """Columnas de una fila de inventario: nombre, modelo, categoria, cantidad, precio."""
    return (
        item.name or _NOT_AVAILABLE,
        item.model or _NOT_AVAILABLE,
        item.category or _NOT_AVAILABLE,
        str(item.quantity),
        format_price(item.price),
    )


def ticket_row(ticket: Ticket) -> tuple[str, str, str, str]:
    """Columnas de una fila de ticket: cliente, equipo, estado, fecha de entrada."""
    return (
        ticket.cliente or _NOT_AVAILABLE,
        ticket.equipo or _NOT_AVAILABLE,
        format_ticket_status(ticket.estado),
        format_timestamp(ticket.fecha_entrada),
    )
