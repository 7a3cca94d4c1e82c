"""Gateway de comunicacion cliente-servidor.

``RecordStore`` es la frontera entre los controllers y el backend de
documentos: los controllers nunca conocen rutas ni sintaxis del backend.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

from parametros import SLOW_OPERATION_SECONDS
from servidor.services.document_store import DocumentStore
from shared.categories import DEFAULT_CATEGORY
from shared.errors import StoreOperationFailed, StoreUnavailable
from shared.protocol import (
    SERVER_TIMESTAMP,
    Collection,
    ErrorCallback,
    Principal,
    SnapshotCallback,
)
from shared.schemas import (
    INVENTORY_TIMESTAMP_KEY,
    SALE_TIMESTAMP_KEY,
    TICKET_TIMESTAMP_KEY,
)

LOGGER = logging.getLogger(__name__)

ID_FIELD = "id"

_TIMESTAMP_KEYS: dict[Collection, str] = {
    Collection.INVENTORY: INVENTORY_TIMESTAMP_KEY,
    Collection.TICKETS: TICKET_TIMESTAMP_KEY,
    Collection.SALES: SALE_TIMESTAMP_KEY,
}


class Subscription:
    """Handle de una consulta en vivo; ``cancel()`` desconecta el listener."""

    def __init__(
        self,
        collection: Collection | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self.collection = collection
        self._on_cancel = on_cancel
        self._active = on_cancel is not None

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()


class RecordStore(Protocol):
    """Interfaz de acceso del cliente a las colecciones compartidas."""

    @property
    def initialized(self) -> bool:
        """Indica si existe backend configurado e identidad autenticada."""

    def initialize(self, principal: Principal) -> None:
        """Asocia la identidad autenticada al gateway."""

    def teardown(self) -> None:
        """Cancela suscripciones y libera la identidad."""

    def poll(self) -> bool:
        """Busca cambios remotos pendientes de entregar."""

    def subscribe(
        self,
        collection: Collection,
        on_change: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Subscription:
        """Registra una consulta en vivo que entrega snapshots completos."""

    def create(self, collection: Collection, fields: dict[str, Any]) -> str | None:
        """Crea un documento con marca de tiempo del servidor y retorna su id."""

    def update(self, collection: Collection, doc_id: str, fields: dict[str, Any]) -> None:
        """Combina solo los campos entregados sobre el documento."""

    def remove(self, collection: Collection, doc_id: str) -> None:
        """Elimina el documento de forma irreversible."""


class LocalRecordStore:
    """Implementacion del gateway sobre el almacen de documentos local.

    Mientras no exista backend o identidad, todas las operaciones son no-ops
    (o levantan StoreUnavailable si ``strict`` es True).
    """

    def __init__(
        self,
        document_store: DocumentStore | None = None,
        strict: bool = False,
        slow_operation_seconds: float = SLOW_OPERATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._document_store = document_store
        self._strict = strict
        self._slow_operation_seconds = slow_operation_seconds
        self._clock = clock
        self._principal: Principal | None = None
        self._subscriptions: list[Subscription] = []

    @property
    def initialized(self) -> bool:
        return self._document_store is not None and self._principal is not None

    @property
    def principal(self) -> Principal | None:
        return self._principal

    def initialize(self, principal: Principal) -> None:
        """Asocia la identidad autenticada; desde aqui las operaciones llegan al backend."""
        if self._document_store is None:
            LOGGER.warning("No hay backend configurado; las operaciones seran no-ops.")
            return

        self._principal = principal
        LOGGER.info(
            "Gateway inicializado para app_id=%s, principal=%s",
            self._document_store.app_id,
            principal.uid,
        )

    def teardown(self) -> None:
        """Cancela todas las suscripciones y olvida la identidad."""
        for subscription in list(self._subscriptions):
            subscription.cancel()
        self._principal = None
        LOGGER.info("Gateway detenido.")

    def active_subscriptions(self) -> int:
        return len(self._subscriptions)

    def poll(self) -> bool:
        """Consulta cambios hechos por otros clientes sobre el mismo dataset."""
        if not self.initialized:
            return False
        assert self._document_store is not None
        return self._document_store.poll_external_changes()

    def subscribe(
        self,
        collection: Collection,
        on_change: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Subscription:
        if not self.initialized:
            self._unavailable("subscribe", collection)
            return Subscription(collection)

        assert self._document_store is not None
        subscription: Subscription | None = None

        def _detach() -> None:
            registration.remove()
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
            LOGGER.info("Suscripcion cancelada: %s", collection.value)

        registration = self._document_store.listen(collection, on_change, on_error)
        subscription = Subscription(collection, on_cancel=_detach)
        self._subscriptions.append(subscription)
        LOGGER.info("Suscripcion activa: %s", collection.value)
        return subscription

    def create(self, collection: Collection, fields: dict[str, Any]) -> str | None:
        if not self.initialized:
            self._unavailable("create", collection)
            return None

        assert self._document_store is not None
        payload = self._strip_id(fields)
        if collection is Collection.INVENTORY:
            payload["category"] = payload.get("category") or DEFAULT_CATEGORY
        payload[_TIMESTAMP_KEYS[collection]] = SERVER_TIMESTAMP

        document_store = self._document_store
        return self._run(
            "create",
            collection,
            lambda: document_store.add(collection, payload),
        )

    def update(self, collection: Collection, doc_id: str, fields: dict[str, Any]) -> None:
        if not self.initialized:
            self._unavailable("update", collection)
            return

        assert self._document_store is not None
        payload = self._strip_id(fields)
        document_store = self._document_store
        self._run(
            "update",
            collection,
            lambda: document_store.update(collection, doc_id, payload),
        )

    def remove(self, collection: Collection, doc_id: str) -> None:
        if not self.initialized:
            self._unavailable("remove", collection)
            return

        assert self._document_store is not None
        document_store = self._document_store
        self._run(
            "remove",
            collection,
            lambda: document_store.delete(collection, doc_id),
        )

    def _run(self, operation: str, collection: Collection, call: Callable[[], Any]) -> Any:
        """Ejecuta la llamada al backend envolviendo fallas y registrando demoras."""
        started = self._clock()
        try:
            return call()
        except StoreOperationFailed:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo %s en la coleccion %s.", operation, collection.value)
            raise StoreOperationFailed(
                f"No fue posible ejecutar {operation} sobre {collection.value}."
            ) from exc
        finally:
            elapsed = self._clock() - started
            if elapsed >= self._slow_operation_seconds:
                LOGGER.warning(
                    "Operacion lenta: %s en %s tardo %.2f s.",
                    operation,
                    collection.value,
                    elapsed,
                )

    def _unavailable(self, operation: str, collection: Collection) -> None:
        if self._strict:
            raise StoreUnavailable(
                f"El almacen no esta inicializado ({operation} {collection.value})."
            )
        LOGGER.debug("Almacen no inicializado; %s %s ignorado.", operation, collection.value)

    @staticmethod
    def _strip_id(fields: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in fields.items() if key != ID_FIELD}
