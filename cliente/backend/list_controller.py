"""Controller generico de pantallas lista / formulario / confirmar eliminacion."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Union

from shared.categories import fold_text, matches_category
from shared.errors import FieldViolation, ServiceError, ValidationError
from shared.protocol import StoredDocument

from .gateway import RecordStore, Subscription
from .notices import TITLE_SYSTEM_ERROR, NoticeBoard
from .record_types import R, RecordType
from .session import Session

LOGGER = logging.getLogger(__name__)


class ViewMode(str, Enum):
    LIST = "list"
    FORM = "form"
    CONFIRM_DELETE = "confirm_delete"


@dataclass(frozen=True)
class ListState:
    mode: ViewMode = ViewMode.LIST


@dataclass(frozen=True)
class FormState(Generic[R]):
    editing: bool
    draft: R
    errors: tuple[FieldViolation, ...] = ()
    original: R | None = None
    mode: ViewMode = ViewMode.FORM


@dataclass(frozen=True)
class ConfirmDeleteState(Generic[R]):
    target: R
    mode: ViewMode = ViewMode.CONFIRM_DELETE


ViewState = Union[ListState, FormState, ConfirmDeleteState]


class RecordListController(Generic[R]):
    """Maquina de estados de una pantalla de registros.

    La lista visible se deriva en cada consulta desde el ultimo snapshot, el
    termino de busqueda y el filtro de categoria; el snapshot nunca se modifica
    localmente. Las escrituras se delegan al store y la lista solo cambia cuando
    llega el siguiente snapshot.
    """

    def __init__(
        self,
        record_type: RecordType[R],
        store: RecordStore,
        session: Session,
        notices: NoticeBoard,
        category_filter: str = "",
    ) -> None:
        self._record_type = record_type
        self._store = store
        self._session = session
        self._notices = notices
        self._category_filter = category_filter
        self._search_term = ""
        self._records: list[R] = []
        self._state: ViewState = ListState()
        self._subscription: Subscription | None = None
        self._listeners: list[Callable[[], None]] = []

    @property
    def record_type(self) -> RecordType[R]:
        return self._record_type

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def mode(self) -> ViewMode:
        return self._state.mode

    @property
    def records(self) -> list[R]:
        """Snapshot completo tal como llego del store (sin filtrar)."""
        return list(self._records)

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def category_filter(self) -> str:
        return self._category_filter

    @property
    def can_mutate(self) -> bool:
        return self._session.can_mutate(self._record_type.entity_type)

    @property
    def attached(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Registra un callback que se invoca en cada cambio de estado o datos."""
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    # Suscripcion
    # ------------------------------------------------------------------

    def attach(self) -> None:
        """Abre la consulta en vivo de la coleccion (si no esta abierta)."""
        if self.attached:
            return
        self._subscription = self._store.subscribe(
            self._record_type.collection,
            self.on_snapshot,
            self.on_snapshot_error,
        )

    def detach(self) -> None:
        """Cancela la consulta y descarta los datos de la sesion anterior."""
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._records = []
        self._enter_list()

    def on_snapshot(self, documents: list[StoredDocument]) -> None:
        self._records = [self._record_type.from_document(document) for document in documents]
        LOGGER.debug(
            "Snapshot de %s recibido: %d registros",
            self._record_type.collection.value,
            len(self._records),
        )
        self._emit()

    def on_snapshot_error(self, error: Exception) -> None:
        LOGGER.error(
            "Error al recibir snapshot de %s: %s",
            self._record_type.collection.value,
            error,
        )

    # ------------------------------------------------------------------
    # Lista
    # ------------------------------------------------------------------

    def set_search_term(self, term: str) -> None:
        self._search_term = term
        self._emit()

    def set_category_filter(self, category_filter: str) -> None:
        """Cambia el filtro de categoria y vuelve a la lista."""
        self._category_filter = category_filter
        self._enter_list()

    def visible_records(self) -> list[R]:
        """Registros filtrados por categoria y busqueda, ya ordenados."""
        record_type = self._record_type
        term = fold_text(self._search_term.strip())
        visible: list[R] = []
        for record in self._records:
            if (
                self._category_filter
                and record_type.category_of is not None
                and not matches_category(record_type.category_of(record), self._category_filter)
            ):
                continue
            if term and not any(
                term in fold_text(text) for text in record_type.search_fields(record)
            ):
                continue
            visible.append(record)

        return record_type.sort_records(visible)

    def find(self, record_id: str) -> R | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    # ------------------------------------------------------------------
    # Transiciones
    # ------------------------------------------------------------------

    def start_add(self) -> bool:
        """List -> Form(editing=False) con el borrador por defecto."""
        if not self._expect(ViewMode.LIST, "start_add"):
            return False
        if not self._allowed(self._record_type.messages.save_denied):
            return False

        draft = self._record_type.make_default(self._category_filter)
        self._set_state(FormState(editing=False, draft=draft))
        return True

    def start_edit(self, record: R) -> bool:
        """List -> Form(editing=True) con una copia del registro."""
        if not self._expect(ViewMode.LIST, "start_edit"):
            return False
        if not self._allowed(self._record_type.messages.edit_denied):
            return False

        self._set_state(
            FormState(
                editing=True,
                draft=dataclasses.replace(record),
                original=dataclasses.replace(record),
            )
        )
        return True

    def update_draft(self, **changes: Any) -> None:
        """Actualiza campos del borrador del formulario."""
        state = self._state
        if not isinstance(state, FormState):
            raise RuntimeError("No hay formulario abierto.")
        if "id" in changes:
            raise ValueError("El identificador de un registro no se puede modificar.")

        self._set_state(dataclasses.replace(state, draft=dataclasses.replace(state.draft, **changes)))

    def cancel(self) -> None:
        """Form -> List (o ConfirmDelete -> List)."""
        self._enter_list()

    def save(self) -> bool:
        """Form -> List si la politica y la validacion lo permiten y el store acepta."""
        state = self._state
        if not isinstance(state, FormState):
            LOGGER.debug("save() ignorado fuera del formulario.")
            return False

        messages = self._record_type.messages
        if not self._allowed(messages.save_denied):
            return False

        draft = state.draft
        result = self._record_type.validate(draft)
        if not result.ok:
            self._set_state(dataclasses.replace(state, errors=result.violations))
            self._notices.error(str(ValidationError(violations=result.violations)))
            return False

        name = self._record_type.describe(draft)
        collection = self._record_type.collection
        try:
            if state.editing and draft.id:
                changes = self._changed_fields(draft, state.original)
                if changes:
                    self._store.update(collection, draft.id, changes)
                success_message = messages.updated(name)
            else:
                self._store.create(collection, draft.to_fields())
                success_message = messages.created(name)
        except ServiceError as exc:
            LOGGER.error("Error al guardar en %s: %s", collection.value, exc)
            self._set_state(dataclasses.replace(state, errors=()))
            self._notices.error(messages.save_failed, title=TITLE_SYSTEM_ERROR)
            return False

        LOGGER.info("Registro guardado en %s: %s", collection.value, name)
        self._notices.success(success_message)
        self._enter_list()
        return True

    def request_delete(self, record: R) -> bool:
        """List -> ConfirmDelete."""
        if not self._expect(ViewMode.LIST, "request_delete"):
            return False
        if not self._allowed(self._record_type.messages.delete_denied):
            return False

        self._set_state(ConfirmDeleteState(target=record))
        return True

    def confirm_delete(self) -> bool:
        """ConfirmDelete -> List eliminando el registro de forma irreversible."""
        state = self._state
        if not isinstance(state, ConfirmDeleteState):
            LOGGER.debug("confirm_delete() ignorado sin confirmacion pendiente.")
            return False

        messages = self._record_type.messages
        if not self._allowed(messages.delete_denied):
            self._enter_list()
            return False

        target = state.target
        collection = self._record_type.collection
        try:
            self._store.remove(collection, target.id)
        except ServiceError as exc:
            LOGGER.error("Error al eliminar en %s: %s", collection.value, exc)
            self._notices.error(messages.delete_failed)
            return False

        LOGGER.info("Registro eliminado en %s: %s", collection.value, target.id)
        self._notices.deleted(messages.deleted(self._record_type.describe(target)))
        self._enter_list()
        return True

    def cancel_delete(self) -> None:
        self._enter_list()

    def reset(self) -> None:
        """Vuelve a la lista descartando borradores y confirmaciones."""
        self._enter_list()

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _changed_fields(self, draft: R, original: R | None) -> dict[str, Any]:
        """Campos del borrador que difieren del registro al abrir la edicion."""
        fields = draft.to_fields()
        if original is None:
            return fields
        original_fields = original.to_fields()
        return {key: value for key, value in fields.items() if original_fields.get(key) != value}

    def _allowed(self, denied_message: str) -> bool:
        if self.can_mutate:
            return True
        LOGGER.warning(
            "Accion denegada en %s para rol %s",
            self._record_type.collection.value,
            self._session.role.value if self._session.role else "-",
        )
        self._notices.access_denied(denied_message)
        return False

    def _expect(self, mode: ViewMode, action: str) -> bool:
        if self._state.mode is mode:
            return True
        LOGGER.debug("%s ignorado en estado %s", action, self._state.mode.value)
        return False

    def _enter_list(self) -> None:
        self._set_state(ListState())

    def _set_state(self, state: ViewState) -> None:
        self._state = state
        self._emit()

    def _emit(self) -> None:
        for callback in list(self._listeners):
            callback()
