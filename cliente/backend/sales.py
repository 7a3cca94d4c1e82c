"""Registro de ventas (solo escritura)."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from shared.errors import AccessDenied, ServiceError, ValidationError
from shared.protocol import Collection
from shared.schemas import InventoryItem, Sale, SaleLine, validate_sale

from .gateway import RecordStore
from .notices import TITLE_SYSTEM_ERROR, NoticeBoard
from .policy import EntityType, require_mutation
from .session import Session

LOGGER = logging.getLogger(__name__)


class SalesController:
    """Valida y registra ventas. No descuenta stock del inventario."""

    def __init__(self, store: RecordStore, session: Session, notices: NoticeBoard) -> None:
        self._store = store
        self._session = session
        self._notices = notices

    @property
    def can_register(self) -> bool:
        return self._session.can_mutate(EntityType.SALES)

    @staticmethod
    def build_line(item: InventoryItem, quantity: int) -> SaleLine:
        """Construye una linea de venta al precio actual del articulo."""
        return SaleLine(
            item_id=item.id,
            name=item.name,
            quantity=quantity,
            unit_price=item.price,
        )

    def record_sale(self, lines: Sequence[SaleLine]) -> str | None:
        """Registra la venta y retorna su id; None si fue rechazada o fallo."""
        sale = Sale(lines=tuple(lines))
        try:
            require_mutation(self._session.role, EntityType.SALES)
            validate_sale(sale).raise_for_violations()
        except AccessDenied as exc:
            LOGGER.warning("Registro de venta denegado: %s", exc)
            self._notices.access_denied(str(exc))
            return None
        except ValidationError as exc:
            self._notices.error(str(exc))
            return None

        try:
            sale_id = self._store.create(Collection.SALES, sale.to_fields())
        except ServiceError as exc:
            LOGGER.error("Error al registrar venta: %s", exc)
            self._notices.error("No se pudo registrar la venta.", title=TITLE_SYSTEM_ERROR)
            return None

        LOGGER.info("Venta registrada: id=%s, total=%.2f", sale_id, sale.total)
        self._notices.success(f"Venta registrada por ${sale.total:,.2f}.")
        return sale_id
