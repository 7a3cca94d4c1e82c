"""Avisos visibles para el usuario: uno a la vez y con cierre automatico."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from parametros import NOTICE_DURATION_SECONDS


class NoticeKind(str, Enum):
    SUCCESS = "success"
    DELETED = "deleted"
    ERROR = "error"
    ACCESS_DENIED = "access_denied"
    INFO = "info"


TITLE_SUCCESS = "Éxito"
TITLE_DELETED = "Eliminado"
TITLE_ERROR = "Error"
TITLE_SYSTEM_ERROR = "Error del Sistema"
TITLE_ACCESS_DENIED = "Acceso Denegado"


@dataclass(frozen=True, slots=True)
class Notice:
    title: str
    message: str
    kind: NoticeKind = NoticeKind.INFO
    shown_at: float = 0.0


class NoticeBoard:
    """Mantiene el aviso actual; un aviso nuevo reemplaza al anterior."""

    def __init__(
        self,
        duration_seconds: float = NOTICE_DURATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._duration_seconds = duration_seconds
        self._clock = clock
        self._notice: Notice | None = None
        self._listeners: list[Callable[[Notice | None], None]] = []

    @property
    def duration_seconds(self) -> float:
        return self._duration_seconds

    def add_listener(self, callback: Callable[[Notice | None], None]) -> None:
        self._listeners.append(callback)

    def show(self, title: str, message: str, kind: NoticeKind = NoticeKind.INFO) -> Notice:
        notice = Notice(title=title, message=message, kind=kind, shown_at=self._clock())
        self._notice = notice
        self._emit()
        return notice

    def success(self, message: str) -> Notice:
        return self.show(TITLE_SUCCESS, message, NoticeKind.SUCCESS)

    def deleted(self, message: str) -> Notice:
        return self.show(TITLE_DELETED, message, NoticeKind.DELETED)

    def error(self, message: str, title: str = TITLE_ERROR) -> Notice:
        return self.show(title, message, NoticeKind.ERROR)

    def access_denied(self, message: str) -> Notice:
        return self.show(TITLE_ACCESS_DENIED, message, NoticeKind.ACCESS_DENIED)

    def current(self) -> Notice | None:
        """Aviso vigente, o None si no hay o ya expiro."""
        if self._notice is None:
            return None
        if self._clock() - self._notice.shown_at >= self._duration_seconds:
            self._notice = None
            return None
        return self._notice

    def dismiss(self) -> None:
        if self._notice is None:
            return
        self._notice = None
        self._emit()

    def _emit(self) -> None:
        for callback in list(self._listeners):
            callback(self._notice)
