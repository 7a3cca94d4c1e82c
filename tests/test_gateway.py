"""Tests del gateway LocalRecordStore."""

from __future__ import annotations

import itertools
import tempfile
import unittest
from datetime import datetime
from pathlib import Path
from unittest import mock

from cliente.backend.gateway import LocalRecordStore, Subscription
from servidor.services.document_store import DocumentStore
from shared.errors import RecordNotFound, StoreOperationFailed, StoreUnavailable
from shared.protocol import SERVER_TIMESTAMP, Collection, Principal, StoredDocument

PRINCIPAL = Principal(uid="user-1")


def _ready_store() -> tuple[LocalRecordStore, DocumentStore]:
    document_store = DocumentStore("app")
    store = LocalRecordStore(document_store=document_store)
    store.initialize(PRINCIPAL)
    return store, document_store


class UninitializedGatewayTests(unittest.TestCase):
    """Sin backend o sin identidad las operaciones no hacen nada."""

    def test_operations_are_noops_without_backend(self) -> None:
        store = LocalRecordStore()
        store.initialize(PRINCIPAL)
        received: list[list[StoredDocument]] = []

        subscription = store.subscribe(Collection.TICKETS, received.append)

        self.assertFalse(store.initialized)
        self.assertFalse(subscription.active)
        self.assertEqual(received, [])
        self.assertIsNone(store.create(Collection.TICKETS, {"cliente": "Ana"}))
        store.update(Collection.TICKETS, "x", {"cliente": "Ana"})
        store.remove(Collection.TICKETS, "x")
        self.assertFalse(store.poll())

    def test_operations_before_initialize_do_not_reach_backend(self) -> None:
        document_store = DocumentStore("app")
        store = LocalRecordStore(document_store=document_store)

        with mock.patch.object(document_store, "add", wraps=document_store.add) as spy:
            self.assertIsNone(store.create(Collection.TICKETS, {"cliente": "Ana"}))
            spy.assert_not_called()

    def test_strict_mode_raises_store_unavailable(self) -> None:
        store = LocalRecordStore(strict=True)

        with self.assertRaises(StoreUnavailable):
            store.create(Collection.INVENTORY, {"name": "Mica"})
        with self.assertRaises(StoreUnavailable):
            store.subscribe(Collection.INVENTORY, lambda _snapshot: None)


class InitializedGatewayTests(unittest.TestCase):
    """Valida escrituras, suscripciones y manejo de errores."""

    def test_create_strips_id_and_adds_server_timestamp(self) -> None:
        store, document_store = _ready_store()

        with mock.patch.object(document_store, "add", wraps=document_store.add) as spy:
            doc_id = store.create(Collection.TICKETS, {"id": "forged", "cliente": "Ana"})

        payload = spy.call_args.args[1]
        self.assertNotIn("id", payload)
        self.assertIs(payload["fechaEntrada"], SERVER_TIMESTAMP)
        self.assertNotEqual(doc_id, "forged")
        stored = document_store.get(Collection.TICKETS, doc_id)  # type: ignore[arg-type]
        assert stored is not None
        self.assertIsInstance(stored.data["fechaEntrada"], datetime)

    def test_create_inventory_defaults_category_and_uses_created_at(self) -> None:
        store, document_store = _ready_store()

        doc_id = store.create(Collection.INVENTORY, {"name": "Cable", "model": "USB-C"})

        data = document_store.get(Collection.INVENTORY, doc_id).data  # type: ignore[arg-type, union-attr]
        self.assertEqual(data["category"], "Accesorio")
        self.assertIsInstance(data["createdAt"], datetime)

    def test_update_strips_id_and_sends_only_given_fields(self) -> None:
        store, document_store = _ready_store()
        doc_id = store.create(Collection.INVENTORY, {"name": "Mica", "price": 5.0})
        assert doc_id is not None

        with mock.patch.object(document_store, "update", wraps=document_store.update) as spy:
            store.update(Collection.INVENTORY, doc_id, {"id": "otro", "price": 6.0})

        spy.assert_called_once_with(Collection.INVENTORY, doc_id, {"price": 6.0})

    def test_backend_failure_is_wrapped_as_store_operation_failed(self) -> None:
        store, _ = _ready_store()

        with self.assertLogs("cliente.backend.gateway", level="ERROR"):
            with self.assertRaises(StoreOperationFailed) as ctx:
                store.remove(Collection.TICKETS, "no-existe")

        self.assertIsInstance(ctx.exception.__cause__, RecordNotFound)

    def test_failed_create_can_be_retried_without_duplicates(self) -> None:
        """Un alta que no se pudo persistir no deja copias al reintentar."""
        with tempfile.TemporaryDirectory() as temp_dir:
            blocker = Path(temp_dir) / "blocker"
            blocker.write_text("archivo", encoding="utf-8")
            document_store = DocumentStore("app", data_dir=blocker / "data")
            store = LocalRecordStore(document_store=document_store)
            store.initialize(PRINCIPAL)

            with self.assertLogs("cliente.backend.gateway", level="ERROR"):
                for _attempt in range(2):
                    with self.assertRaises(StoreOperationFailed):
                        store.create(Collection.TICKETS, {"cliente": "Ana", "equipo": "A54"})

            self.assertEqual(document_store.snapshot(Collection.TICKETS), [])

    def test_slow_operation_is_logged(self) -> None:
        document_store = DocumentStore("app")
        ticks = itertools.count(0, 5)
        store = LocalRecordStore(
            document_store=document_store,
            slow_operation_seconds=2.0,
            clock=lambda: float(next(ticks)),
        )
        store.initialize(PRINCIPAL)

        with self.assertLogs("cliente.backend.gateway", level="WARNING") as logs:
            store.create(Collection.TICKETS, {"cliente": "Ana"})

        self.assertTrue(any("Operacion lenta" in line for line in logs.output))

    def test_subscription_receives_snapshots_until_cancelled(self) -> None:
        store, document_store = _ready_store()
        received: list[list[StoredDocument]] = []

        subscription = store.subscribe(Collection.TICKETS, received.append)
        store.create(Collection.TICKETS, {"cliente": "Ana"})
        subscription.cancel()
        subscription.cancel()
        store.create(Collection.TICKETS, {"cliente": "Luis"})

        self.assertEqual([len(snapshot) for snapshot in received], [0, 1])
        self.assertEqual(store.active_subscriptions(), 0)
        self.assertEqual(document_store.listener_count(Collection.TICKETS), 0)

    def test_teardown_cancels_subscriptions_and_forgets_principal(self) -> None:
        store, document_store = _ready_store()
        first = store.subscribe(Collection.TICKETS, lambda _snapshot: None)
        second = store.subscribe(Collection.INVENTORY, lambda _snapshot: None)

        store.teardown()

        self.assertFalse(first.active)
        self.assertFalse(second.active)
        self.assertFalse(store.initialized)
        self.assertEqual(document_store.listener_count(Collection.TICKETS), 0)
        self.assertEqual(document_store.listener_count(Collection.INVENTORY), 0)

    def test_inert_subscription_cancel_is_safe(self) -> None:
        subscription = Subscription(Collection.SALES)
        subscription.cancel()
        self.assertFalse(subscription.active)


if __name__ == "__main__":
    unittest.main()
