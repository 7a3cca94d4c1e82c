"""Tests del almacen de documentos en tiempo real."""

from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from servidor.services.document_store import DocumentStore
from shared.errors import RecordNotFound, ServiceError
from shared.protocol import SERVER_TIMESTAMP, Collection, StoredDocument

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class DocumentStoreMutationTests(unittest.TestCase):
    """Valida altas, cambios, bajas y marcas de tiempo."""

    def test_add_returns_id_and_resolves_server_timestamp(self) -> None:
        """El marcador de tiempo se reemplaza por la hora del almacen."""
        store = DocumentStore("app", clock=lambda: FIXED_NOW)

        doc_id = store.add(Collection.TICKETS, {"cliente": "Ana", "fechaEntrada": SERVER_TIMESTAMP})

        document = store.get(Collection.TICKETS, doc_id)
        self.assertIsNotNone(document)
        assert document is not None
        self.assertEqual(document.data["cliente"], "Ana")
        self.assertEqual(document.data["fechaEntrada"], FIXED_NOW)

    def test_timestamps_are_strictly_increasing_with_frozen_clock(self) -> None:
        """Dos escrituras en el mismo instante reciben marcas distintas y ordenadas."""
        store = DocumentStore("app", clock=lambda: FIXED_NOW)

        first = store.add(Collection.TICKETS, {"fechaEntrada": SERVER_TIMESTAMP})
        second = store.add(Collection.TICKETS, {"fechaEntrada": SERVER_TIMESTAMP})

        first_ts = store.get(Collection.TICKETS, first).data["fechaEntrada"]  # type: ignore[union-attr]
        second_ts = store.get(Collection.TICKETS, second).data["fechaEntrada"]  # type: ignore[union-attr]
        self.assertLess(first_ts, second_ts)

    def test_update_merges_only_given_fields(self) -> None:
        store = DocumentStore("app")
        doc_id = store.add(Collection.INVENTORY, {"name": "Mica", "price": 5.0, "quantity": 3})

        store.update(Collection.INVENTORY, doc_id, {"price": 6.5})

        data = store.get(Collection.INVENTORY, doc_id).data  # type: ignore[union-attr]
        self.assertEqual(data, {"name": "Mica", "price": 6.5, "quantity": 3})

    def test_update_and_delete_unknown_document_raise_not_found(self) -> None:
        store = DocumentStore("app")

        with self.assertRaises(RecordNotFound):
            store.update(Collection.INVENTORY, "missing", {"price": 1.0})
        with self.assertRaises(RecordNotFound):
            store.delete(Collection.INVENTORY, "missing")

    def test_snapshot_returns_copies(self) -> None:
        """Modificar un snapshot no altera el almacen."""
        store = DocumentStore("app")
        doc_id = store.add(Collection.SALES, {"items": [{"itemId": "a"}], "total": 5.0})

        snapshot = store.snapshot(Collection.SALES)
        snapshot[0].data["items"].append({"itemId": "b"})

        self.assertEqual(
            store.get(Collection.SALES, doc_id).data["items"],  # type: ignore[union-attr]
            [{"itemId": "a"}],
        )


class DocumentStoreListenerTests(unittest.TestCase):
    """Valida la entrega de snapshots completos a listeners."""

    def test_listen_delivers_current_snapshot_immediately(self) -> None:
        store = DocumentStore("app")
        store.add(Collection.TICKETS, {"cliente": "Ana"})
        received: list[list[StoredDocument]] = []

        store.listen(Collection.TICKETS, received.append)

        self.assertEqual(len(received), 1)
        self.assertEqual(received[0][0].data["cliente"], "Ana")

    def test_each_mutation_delivers_full_snapshot_of_collection(self) -> None:
        store = DocumentStore("app")
        received: list[list[StoredDocument]] = []
        store.listen(Collection.TICKETS, received.append)

        first = store.add(Collection.TICKETS, {"cliente": "Ana"})
        store.add(Collection.TICKETS, {"cliente": "Luis"})
        store.delete(Collection.TICKETS, first)

        self.assertEqual([len(snapshot) for snapshot in received], [0, 1, 2, 1])
        self.assertEqual(received[-1][0].data["cliente"], "Luis")

    def test_mutation_in_other_collection_does_not_notify(self) -> None:
        store = DocumentStore("app")
        received: list[list[StoredDocument]] = []
        store.listen(Collection.TICKETS, received.append)

        store.add(Collection.INVENTORY, {"name": "Mica"})

        self.assertEqual(len(received), 1)

    def test_removed_listener_stops_receiving_and_remove_is_idempotent(self) -> None:
        store = DocumentStore("app")
        received: list[list[StoredDocument]] = []
        registration = store.listen(Collection.TICKETS, received.append)

        registration.remove()
        registration.remove()
        store.add(Collection.TICKETS, {"cliente": "Ana"})

        self.assertFalse(registration.active)
        self.assertEqual(len(received), 1)
        self.assertEqual(store.listener_count(Collection.TICKETS), 0)

    def test_failing_listener_does_not_block_others(self) -> None:
        """Un listener que falla queda registrado en el log y el resto recibe el snapshot."""
        store = DocumentStore("app")
        received: list[list[StoredDocument]] = []

        def broken(_snapshot: list[StoredDocument]) -> None:
            raise RuntimeError("boom")

        with self.assertLogs("servidor.services.document_store", level="ERROR"):
            store.listen(Collection.TICKETS, broken)
            store.listen(Collection.TICKETS, received.append)
            store.add(Collection.TICKETS, {"cliente": "Ana"})

        self.assertEqual(len(received[-1]), 1)


class DocumentStorePersistenceTests(unittest.TestCase):
    """Valida persistencia en disco y deteccion de cambios externos."""

    def test_dataset_survives_reopen_with_timestamps(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            store = DocumentStore("shop", data_dir=data_dir, clock=lambda: FIXED_NOW)
            doc_id = store.add(Collection.TICKETS, {"cliente": "Ana", "fechaEntrada": SERVER_TIMESTAMP})

            reopened = DocumentStore("shop", data_dir=data_dir)

            document = reopened.get(Collection.TICKETS, doc_id)
            self.assertIsNotNone(document)
            assert document is not None
            self.assertEqual(document.data["fechaEntrada"], FIXED_NOW)
            self.assertTrue((data_dir / "shop.json").exists())
            self.assertFalse((data_dir / "shop.json.tmp").exists())

    def test_reopened_store_keeps_timestamps_increasing(self) -> None:
        """El ultimo tiempo persistido acota las marcas siguientes."""
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            store = DocumentStore("shop", data_dir=data_dir, clock=lambda: FIXED_NOW)
            store.add(Collection.TICKETS, {"fechaEntrada": SERVER_TIMESTAMP})

            reopened = DocumentStore("shop", data_dir=data_dir, clock=lambda: FIXED_NOW)
            doc_id = reopened.add(Collection.TICKETS, {"fechaEntrada": SERVER_TIMESTAMP})

            timestamp = reopened.get(Collection.TICKETS, doc_id).data["fechaEntrada"]  # type: ignore[union-attr]
            self.assertGreater(timestamp, FIXED_NOW)

    def test_corrupt_dataset_raises_service_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            (data_dir / "shop.json").write_text("{no es json", encoding="utf-8")

            with self.assertRaises(ServiceError):
                DocumentStore("shop", data_dir=data_dir)

    def test_invalid_document_shape_raises_service_error(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            payload = {"collections": {"tickets": {"abc": "no es un objeto"}}}
            (data_dir / "shop.json").write_text(json.dumps(payload), encoding="utf-8")

            with self.assertRaises(ServiceError):
                DocumentStore("shop", data_dir=data_dir)

    def test_poll_detects_changes_written_by_another_store(self) -> None:
        """Dos procesos sobre el mismo archivo convergen mediante poll_external_changes."""
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            writer = DocumentStore("shop", data_dir=data_dir)
            reader = DocumentStore("shop", data_dir=data_dir)
            received: list[list[StoredDocument]] = []
            reader.listen(Collection.INVENTORY, received.append)

            writer.add(Collection.INVENTORY, {"name": "Funda Tough"})

            self.assertTrue(reader.poll_external_changes())
            self.assertEqual(received[-1][0].data["name"], "Funda Tough")
            self.assertFalse(reader.poll_external_changes())

    def test_writes_from_two_stores_on_same_file_are_both_kept(self) -> None:
        """Cada escritura recarga primero el archivo: ningun alta ajena se pierde."""
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            first = DocumentStore("shop", data_dir=data_dir)
            second = DocumentStore("shop", data_dir=data_dir)

            second.add(Collection.TICKETS, {"cliente": "from-second"})
            first.add(Collection.TICKETS, {"cliente": "from-first"})
            second.poll_external_changes()

            expected = ["from-first", "from-second"]
            for store in (first, second, DocumentStore("shop", data_dir=data_dir)):
                names = sorted(doc.data["cliente"] for doc in store.snapshot(Collection.TICKETS))
                self.assertEqual(names, expected)

    def test_update_keeps_fields_written_by_another_store(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            first = DocumentStore("shop", data_dir=data_dir)
            doc_id = first.add(Collection.INVENTORY, {"name": "Mica", "price": 5.0, "quantity": 1})
            second = DocumentStore("shop", data_dir=data_dir)

            second.update(Collection.INVENTORY, doc_id, {"price": 12.75})
            first.update(Collection.INVENTORY, doc_id, {"quantity": 3})

            data = first.get(Collection.INVENTORY, doc_id).data  # type: ignore[union-attr]
            self.assertEqual(data["price"], 12.75)
            self.assertEqual(data["quantity"], 3)

    def test_failed_persist_leaves_memory_unchanged(self) -> None:
        """Si no se puede escribir el archivo, la mutacion no queda aplicada ni se notifica."""
        with tempfile.TemporaryDirectory() as temp_dir:
            blocker = Path(temp_dir) / "blocker"
            blocker.write_text("no es un directorio", encoding="utf-8")
            store = DocumentStore("shop", data_dir=blocker / "data")
            received: list[list[StoredDocument]] = []
            store.listen(Collection.TICKETS, received.append)

            for _attempt in range(2):
                with self.assertRaises(ServiceError):
                    store.add(Collection.TICKETS, {"cliente": "Ana"})

            self.assertEqual(store.snapshot(Collection.TICKETS), [])
            self.assertEqual(len(received), 1)

    def test_failed_persist_on_update_and_delete_keeps_document(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            store = DocumentStore("shop", data_dir=data_dir)
            doc_id = store.add(Collection.TICKETS, {"cliente": "Ana"})

            with mock.patch.object(store, "_persist", side_effect=ServiceError("disco lleno")):
                with self.assertRaises(ServiceError):
                    store.update(Collection.TICKETS, doc_id, {"cliente": "Luis"})
                with self.assertRaises(ServiceError):
                    store.delete(Collection.TICKETS, doc_id)

            document = store.get(Collection.TICKETS, doc_id)
            assert document is not None
            self.assertEqual(document.data["cliente"], "Ana")

    def test_poll_without_data_dir_is_noop(self) -> None:
        store = DocumentStore("app")
        self.assertFalse(store.poll_external_changes())

    def test_poll_reports_unreadable_file_to_error_listeners(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            data_dir = Path(temp_dir)
            store = DocumentStore("shop", data_dir=data_dir)
            store.add(Collection.TICKETS, {"cliente": "Ana"})
            errors: list[Exception] = []
            store.listen(Collection.TICKETS, lambda _snapshot: None, errors.append)

            (data_dir / "shop.json").write_text("[corrupto", encoding="utf-8")

            with self.assertLogs("servidor.services.document_store", level="ERROR"):
                self.assertFalse(store.poll_external_changes())
            self.assertEqual(len(errors), 1)
            self.assertIsInstance(errors[0], ServiceError)
            self.assertEqual(len(store.snapshot(Collection.TICKETS)), 1)


if __name__ == "__main__":
    unittest.main()
