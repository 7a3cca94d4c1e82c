"""Tests del registro de ventas."""

from __future__ import annotations

import unittest
from unittest import mock

from cliente.backend.gateway import LocalRecordStore
from cliente.backend.notices import TITLE_ACCESS_DENIED, TITLE_ERROR, TITLE_SYSTEM_ERROR, NoticeBoard
from cliente.backend.policy import Role
from cliente.backend.sales import SalesController
from cliente.backend.session import Session
from servidor.services.document_store import DocumentStore
from shared.errors import StoreOperationFailed
from shared.protocol import Collection, Principal
from shared.schemas import InventoryItem, SaleLine

ITEM = InventoryItem(
    id="item-1",
    name="Mica Templada",
    model="iPhone 15",
    category="Mica",
    quantity=8,
    price=5.5,
)


def _build(role: Role | None) -> tuple[SalesController, DocumentStore, NoticeBoard]:
    document_store = DocumentStore("shop")
    store = LocalRecordStore(document_store=document_store)
    store.initialize(Principal(uid="user-1"))
    notices = NoticeBoard(clock=lambda: 0.0)
    controller = SalesController(store, Session(role=role), notices)
    return controller, document_store, notices


class SalesControllerTests(unittest.TestCase):
    """Valida permisos, validacion y escritura de ventas."""

    def test_admin_records_sale_with_lines_and_total(self) -> None:
        controller, document_store, notices = _build(Role.ADMIN)

        sale_id = controller.record_sale([controller.build_line(ITEM, 3)])

        self.assertIsNotNone(sale_id)
        stored = document_store.get(Collection.SALES, sale_id)  # type: ignore[arg-type]
        assert stored is not None
        self.assertEqual(
            stored.data["items"],
            [{"itemId": "item-1", "name": "Mica Templada", "quantity": 3, "unitPrice": 5.5}],
        )
        self.assertEqual(stored.data["total"], 16.5)
        self.assertIn("createdAt", stored.data)
        self.assertEqual(notices.current().message, "Venta registrada por $16.50.")  # type: ignore[union-attr]

    def test_sale_does_not_touch_inventory(self) -> None:
        controller, document_store, _ = _build(Role.ADMIN)

        with mock.patch.object(document_store, "update", wraps=document_store.update) as spy:
            controller.record_sale([controller.build_line(ITEM, 1)])

        spy.assert_not_called()
        self.assertEqual(document_store.snapshot(Collection.INVENTORY), [])

    def test_user_cannot_register_sales(self) -> None:
        controller, document_store, notices = _build(Role.USER)

        self.assertFalse(controller.can_register)
        self.assertIsNone(controller.record_sale([controller.build_line(ITEM, 1)]))

        self.assertEqual(document_store.snapshot(Collection.SALES), [])
        notice = notices.current()
        assert notice is not None
        self.assertEqual(notice.title, TITLE_ACCESS_DENIED)
        self.assertEqual(notice.message, "Solo los administradores pueden registrar ventas.")

    def test_invalid_sale_is_rejected_before_store(self) -> None:
        controller, document_store, notices = _build(Role.ADMIN)

        self.assertIsNone(controller.record_sale([]))
        self.assertIsNone(controller.record_sale([SaleLine("item-1", "Mica", 0, 5.5)]))

        self.assertEqual(document_store.snapshot(Collection.SALES), [])
        self.assertEqual(notices.current().title, TITLE_ERROR)  # type: ignore[union-attr]

    def test_store_failure_shows_system_error(self) -> None:
        controller, _, notices = _build(Role.ADMIN)

        with mock.patch.object(
            controller._store,  # noqa: SLF001
            "create",
            side_effect=StoreOperationFailed("sin conexion"),
        ):
            self.assertIsNone(controller.record_sale([controller.build_line(ITEM, 1)]))

        notice = notices.current()
        assert notice is not None
        self.assertEqual(notice.title, TITLE_SYSTEM_ERROR)


if __name__ == "__main__":
    unittest.main()
