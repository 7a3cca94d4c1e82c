"""DTOs del protocolo cliente-servidor."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Collection(str, Enum):
    """Colecciones publicas del dataset compartido."""

    INVENTORY = "inventory"
    TICKETS = "tickets"
    SALES = "sales"


class _ServerTimestamp:
    """Marcador que el backend reemplaza por su propia marca de tiempo."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """Documento tal como lo entrega un snapshot del backend."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Principal:
    """Identidad reconocida por el backend (anonima o por token)."""

    uid: str
    anonymous: bool = True


SnapshotCallback = Callable[[list[StoredDocument]], None]
ErrorCallback = Callable[[Exception], None]
