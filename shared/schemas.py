"""Registros del dominio y sus reglas de validacion.

Los nombres de las llaves persistidas (``name``, ``cliente``, ``fechaEntrada``,
etc.) se mantienen tal como existen en el dataset compartido; los atributos
Python usan snake_case.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Union

from shared.categories import INVENTORY_CATEGORIES
from shared.errors import FieldViolation, ValidationError
from shared.protocol import StoredDocument

DEFAULT_TICKET_STATUS = "PENDIENTE"
TICKET_STATUSES: tuple[str, ...] = (
    DEFAULT_TICKET_STATUS,
    "EN REPARACION",
    "LISTO",
    "ENTREGADO",
)

INVENTORY_TIMESTAMP_KEY = "createdAt"
TICKET_TIMESTAMP_KEY = "fechaEntrada"
SALE_TIMESTAMP_KEY = "createdAt"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Resultado de validar un candidato: Ok o lista de incumplimientos."""

    violations: tuple[FieldViolation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self) -> None:
        """Levanta ValidationError si el candidato no es valido."""
        if self.violations:
            raise ValidationError(violations=self.violations)


@dataclass(slots=True)
class InventoryItem:
    """Articulo de inventario (mica, funda, accesorio o herramienta)."""

    name: str = ""
    model: str = ""
    category: str = ""
    quantity: int = 0
    price: float = 0.0
    id: str = ""
    created_at: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        """Campos editables con las llaves del dataset."""
        return {
            "name": self.name.strip(),
            "model": self.model.strip(),
            "category": self.category,
            "quantity": self.quantity,
            "price": self.price,
        }

    @classmethod
    def from_document(cls, document: StoredDocument) -> InventoryItem:
        data = document.data
        return cls(
            id=document.id,
            name=str(data.get("name") or ""),
            model=str(data.get("model") or ""),
            category=str(data.get("category") or ""),
            quantity=_coerce_int(data.get("quantity")),
            price=_coerce_float(data.get("price")),
            created_at=_coerce_datetime(data.get(INVENTORY_TIMESTAMP_KEY)),
        )


@dataclass(slots=True)
class Ticket:
    """Ticket de reparacion de un equipo."""

    cliente: str = ""
    equipo: str = ""
    estado: str = DEFAULT_TICKET_STATUS
    id: str = ""
    fecha_entrada: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        return {
            "cliente": self.cliente.strip(),
            "equipo": self.equipo.strip(),
            "estado": self.estado.strip() or DEFAULT_TICKET_STATUS,
        }

    @classmethod
    def from_document(cls, document: StoredDocument) -> Ticket:
        data = document.data
        return cls(
            id=document.id,
            cliente=str(data.get("cliente") or ""),
            equipo=str(data.get("equipo") or ""),
            estado=str(data.get("estado") or DEFAULT_TICKET_STATUS),
            fecha_entrada=_coerce_datetime(data.get(TICKET_TIMESTAMP_KEY)),
        )


@dataclass(frozen=True, slots=True)
class SaleLine:
    """Linea de venta: cantidad consumida de un articulo a un precio unitario."""

    item_id: str
    name: str
    quantity: int
    unit_price: float

    @property
    def subtotal(self) -> float:
        return self.quantity * self.unit_price


@dataclass(slots=True)
class Sale:
    """Venta registrada. Solo se crea; nunca se edita ni se elimina."""

    lines: tuple[SaleLine, ...] = ()
    id: str = ""
    created_at: datetime | None = None

    @property
    def total(self) -> float:
        return round(sum(line.subtotal for line in self.lines), 2)

    def to_fields(self) -> dict[str, Any]:
        return {
            "items": [
                {
                    "itemId": line.item_id,
                    "name": line.name,
                    "quantity": line.quantity,
                    "unitPrice": line.unit_price,
                }
                for line in self.lines
            ],
            "total": self.total,
        }


Record = Union[InventoryItem, Ticket, Sale]


def validate_inventory_item(item: InventoryItem) -> ValidationResult:
    """Valida nombre, modelo, categoria, cantidad (>=0) y precio (>0)."""
    violations: list[FieldViolation] = []

    if not item.name.strip():
        violations.append(FieldViolation("name", "Nombre"))
    if not item.model.strip():
        violations.append(FieldViolation("model", "Modelo"))
    if item.category not in INVENTORY_CATEGORIES:
        violations.append(
            FieldViolation("category", "Categoria (" + ", ".join(INVENTORY_CATEGORIES) + ")")
        )
    if not _is_int(item.quantity) or item.quantity < 0:
        violations.append(FieldViolation("quantity", "Cantidad (debe ser mayor o igual a 0)"))
    if not _is_number(item.price) or item.price <= 0:
        violations.append(FieldViolation("price", "Precio (debe ser mayor a 0)"))

    return ValidationResult(tuple(violations))


def validate_ticket(ticket: Ticket) -> ValidationResult:
    """Valida que cliente y equipo no esten vacios."""
    violations: list[FieldViolation] = []
    if not ticket.cliente.strip():
        violations.append(FieldViolation("cliente", "Cliente"))
    if not ticket.equipo.strip():
        violations.append(FieldViolation("equipo", "Equipo"))
    return ValidationResult(tuple(violations))


def validate_sale(sale: Sale) -> ValidationResult:
    violations: list[FieldViolation] = []
    if not sale.lines:
        violations.append(FieldViolation("items", "Al menos un articulo"))

    for index, line in enumerate(sale.lines):
        if not line.item_id.strip():
            violations.append(FieldViolation(f"items[{index}].itemId", "Articulo"))
        if not _is_int(line.quantity) or line.quantity <= 0:
            violations.append(
                FieldViolation(f"items[{index}].quantity", "Cantidad (debe ser mayor a 0)")
            )
        if not _is_number(line.unit_price) or line.unit_price <= 0:
            violations.append(
                FieldViolation(f"items[{index}].unitPrice", "Precio (debe ser mayor a 0)")
            )

    return ValidationResult(tuple(violations))


def validate_record(record: Record) -> ValidationResult:
    """Despacha la validacion segun el tipo de registro."""
    if isinstance(record, InventoryItem):
        return validate_inventory_item(record)
    if isinstance(record, Ticket):
        return validate_ticket(record)
    if isinstance(record, Sale):
        return validate_sale(record)
    raise TypeError(f"Tipo de registro no soportado: {type(record).__name__}")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _coerce_int(value: object) -> int:
    if _is_number(value):
        return int(value)  # type: ignore[arg-type]
    return 0


def _coerce_float(value: object) -> float:
    if _is_number(value):
        return float(value)  # type: ignore[arg-type]
    return 0.0


def _coerce_datetime(value: object) -> datetime | None:
    return value if isinstance(value, datetime) else None
