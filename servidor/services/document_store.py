"""Almacen de documentos en tiempo real para el dataset compartido."""

from __future__ import annotations

import copy
import itertools
import json
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from shared.errors import RecordNotFound, ServiceError
from shared.protocol import (
    SERVER_TIMESTAMP,
    Collection,
    ErrorCallback,
    SnapshotCallback,
    StoredDocument,
)

LOGGER = logging.getLogger(__name__)

_TIMESTAMP_TAG = "__timestamp__"
_ONE_TICK = timedelta(microseconds=1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class _Listener:
    on_change: SnapshotCallback
    on_error: ErrorCallback | None


class ListenerRegistration:
    """Handle de un listener registrado; ``remove()`` lo desconecta."""

    def __init__(self, store: DocumentStore, collection: Collection, listener_id: int) -> None:
        self._store = store
        self._collection = collection
        self._listener_id = listener_id
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def remove(self) -> None:
        """Desconecta el listener. Llamadas repetidas no tienen efecto."""
        if not self._active:
            return
        self._active = False
        self._store._remove_listener(self._collection, self._listener_id)  # noqa: SLF001


class DocumentStore:
    """Colecciones de documentos con marcas de tiempo del servidor y snapshots en vivo.

    Cada mutacion entrega el snapshot completo de la coleccion afectada a todos
    sus listeners. Con ``data_dir`` el dataset se persiste en
    ``<data_dir>/<app_id>.json`` y ``poll_external_changes()`` detecta cambios
    hechos por otros procesos sobre ese archivo. Cada mutacion recarga antes los
    cambios externos y solo se aplica en memoria si se pudo persistir.
    """

    def __init__(
        self,
        app_id: str,
        data_dir: Path | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._app_id = app_id
        self._clock = clock
        self._collections: dict[Collection, dict[str, dict[str, Any]]] = {
            collection: {} for collection in Collection
        }
        self._listeners: dict[Collection, dict[int, _Listener]] = {
            collection: {} for collection in Collection
        }
        self._listener_ids = itertools.count(1)
        self._last_timestamp: datetime | None = None
        self._file_path = data_dir / f"{app_id}.json" if data_dir is not None else None
        self._file_signature: tuple[int, int] | None = None

        if self._file_path is not None and self._file_path.exists():
            try:
                self._apply_dataset(self._read_dataset())
            except (OSError, ValueError) as exc:
                raise ServiceError(
                    f"No fue posible leer el dataset persistido: {self._file_path}"
                ) from exc
            LOGGER.info("Dataset cargado desde: %s", self._file_path)

    @property
    def app_id(self) -> str:
        return self._app_id

    @property
    def file_path(self) -> Path | None:
        return self._file_path

    def add(self, collection: Collection, fields: dict[str, Any]) -> str:
        """Crea un documento con id generado y retorna ese id."""
        self.poll_external_changes()
        doc_id = uuid.uuid4().hex[:20]
        documents = dict(self._collections[collection])
        documents[doc_id] = self._resolve_fields(fields)
        self._commit(collection, documents)
        LOGGER.info("Documento creado en %s: %s", collection.value, doc_id)
        return doc_id

    def update(self, collection: Collection, doc_id: str, fields: dict[str, Any]) -> None:
        """Combina ``fields`` sobre el documento existente."""
        self.poll_external_changes()
        documents = dict(self._collections[collection])
        document = documents.get(doc_id)
        if document is None:
            raise RecordNotFound(f"No existe el documento {doc_id} en {collection.value}.")

        documents[doc_id] = {**document, **self._resolve_fields(fields)}
        self._commit(collection, documents)
        LOGGER.info("Documento actualizado en %s: %s", collection.value, doc_id)

    def delete(self, collection: Collection, doc_id: str) -> None:
        """Elimina el documento de forma definitiva."""
        self.poll_external_changes()
        documents = dict(self._collections[collection])
        if documents.pop(doc_id, None) is None:
            raise RecordNotFound(f"No existe el documento {doc_id} en {collection.value}.")

        self._commit(collection, documents)
        LOGGER.info("Documento eliminado en %s: %s", collection.value, doc_id)

    def get(self, collection: Collection, doc_id: str) -> StoredDocument | None:
        document = self._collections[collection].get(doc_id)
        if document is None:
            return None
        return StoredDocument(id=doc_id, data=copy.deepcopy(document))

    def snapshot(self, collection: Collection) -> list[StoredDocument]:
        """Retorna el conjunto completo y actual de documentos de la coleccion."""
        return [
            StoredDocument(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collections[collection].items()
        ]

    def listen(
        self,
        collection: Collection,
        on_change: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> ListenerRegistration:
        """Registra un listener y le entrega de inmediato el snapshot actual."""
        listener_id = next(self._listener_ids)
        listener = _Listener(on_change=on_change, on_error=on_error)
        self._listeners[collection][listener_id] = listener
        LOGGER.debug("Listener %d registrado en %s", listener_id, collection.value)

        self._deliver(collection, listener_id, listener)
        return ListenerRegistration(self, collection, listener_id)

    def listener_count(self, collection: Collection) -> int:
        return len(self._listeners[collection])

    def poll_external_changes(self) -> bool:
        """Recarga el archivo si otro proceso lo modifico. Retorna True si hubo cambios."""
        if self._file_path is None:
            return False

        try:
            stat = self._file_path.stat()
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as exc:
            self._notify_error(ServiceError(f"No fue posible acceder a {self._file_path}"), exc)
            return False

        if (stat.st_mtime_ns, stat.st_size) == self._file_signature:
            return False

        previous = copy.deepcopy(self._collections)
        try:
            self._apply_dataset(self._read_dataset())
        except (OSError, ValueError) as exc:
            self._notify_error(
                ServiceError(f"No fue posible recargar el dataset: {self._file_path}"),
                exc,
            )
            return False

        changed = [
            collection
            for collection in Collection
            if previous[collection] != self._collections[collection]
        ]
        for collection in changed:
            self._notify(collection)

        if changed:
            LOGGER.info(
                "Cambios externos detectados en: %s",
                ", ".join(collection.value for collection in changed),
            )
        return bool(changed)

    def _remove_listener(self, collection: Collection, listener_id: int) -> None:
        self._listeners[collection].pop(listener_id, None)
        LOGGER.debug("Listener %d removido de %s", listener_id, collection.value)

    def _next_timestamp(self) -> datetime:
        """Marca de tiempo estrictamente creciente para este almacen."""
        timestamp = self._clock()
        if self._last_timestamp is not None and timestamp <= self._last_timestamp:
            timestamp = self._last_timestamp + _ONE_TICK
        self._last_timestamp = timestamp
        return timestamp

    def _resolve_fields(self, fields: dict[str, Any]) -> dict[str, Any]:
        resolved: dict[str, Any] = {}
        for key, value in fields.items():
            if value is SERVER_TIMESTAMP:
                resolved[key] = self._next_timestamp()
            else:
                resolved[key] = copy.deepcopy(value)
        return resolved

    def _commit(self, collection: Collection, documents: dict[str, dict[str, Any]]) -> None:
        """Reemplaza la coleccion solo si el dataset resultante quedo persistido."""
        previous = self._collections[collection]
        self._collections[collection] = documents
        try:
            self._persist()
        except ServiceError:
            self._collections[collection] = previous
            raise
        self._notify(collection)

    def _notify(self, collection: Collection) -> None:
        for listener_id, listener in list(self._listeners[collection].items()):
            self._deliver(collection, listener_id, listener)

    def _deliver(self, collection: Collection, listener_id: int, listener: _Listener) -> None:
        try:
            listener.on_change(self.snapshot(collection))
        except Exception:
            LOGGER.exception(
                "Listener %d de %s fallo al procesar el snapshot.",
                listener_id,
                collection.value,
            )

    def _notify_error(self, error: ServiceError, cause: Exception) -> None:
        LOGGER.error("%s (%s)", error, cause)
        error.__cause__ = cause
        for listeners in self._listeners.values():
            for listener in list(listeners.values()):
                if listener.on_error is None:
                    continue
                try:
                    listener.on_error(error)
                except Exception:
                    LOGGER.exception("Listener fallo al procesar un error del almacen.")

    def _persist(self) -> None:
        if self._file_path is None:
            return

        payload = {
            "app_id": self._app_id,
            "last_timestamp": self._last_timestamp,
            "collections": {
                collection.value: documents
                for collection, documents in self._collections.items()
            },
        }
        tmp_path = self._file_path.with_suffix(".json.tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2, default=_encode_value) + "\n",
                encoding="utf-8",
            )
            tmp_path.replace(self._file_path)
            stat = self._file_path.stat()
        except (OSError, TypeError) as exc:
            raise ServiceError(
                f"No fue posible persistir el dataset: {self._file_path}"
            ) from exc

        self._file_signature = (stat.st_mtime_ns, stat.st_size)

    def _read_dataset(self) -> dict[str, Any]:
        assert self._file_path is not None
        stat = self._file_path.stat()
        raw = self._file_path.read_text(encoding="utf-8")
        data = json.loads(raw, object_hook=_decode_object)
        if not isinstance(data, dict):
            raise ValueError("El dataset persistido debe ser un objeto JSON.")
        self._file_signature = (stat.st_mtime_ns, stat.st_size)
        return data

    def _apply_dataset(self, data: dict[str, Any]) -> None:
        raw_collections = data.get("collections") or {}
        if not isinstance(raw_collections, dict):
            raise ValueError("'collections' debe ser un objeto JSON.")

        collections: dict[Collection, dict[str, dict[str, Any]]] = {}
        for collection in Collection:
            documents = raw_collections.get(collection.value) or {}
            if not isinstance(documents, dict):
                raise ValueError(f"La coleccion {collection.value} debe ser un objeto JSON.")
            if not all(isinstance(fields, dict) for fields in documents.values()):
                raise ValueError(f"Documento invalido en la coleccion {collection.value}.")
            collections[collection] = {
                str(doc_id): dict(fields) for doc_id, fields in documents.items()
            }

        self._collections = collections
        last_timestamp = data.get("last_timestamp")
        if isinstance(last_timestamp, datetime) and (
            self._last_timestamp is None or last_timestamp > self._last_timestamp
        ):
            self._last_timestamp = last_timestamp


def _encode_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return {_TIMESTAMP_TAG: value.isoformat()}
    raise TypeError(f"Valor no serializable: {type(value).__name__}")


def _decode_object(obj: dict[str, Any]) -> Any:
    if set(obj) == {_TIMESTAMP_TAG}:
        return datetime.fromisoformat(obj[_TIMESTAMP_TAG])
    return obj
