"""Excepciones compartidas del proyecto."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """Incumplimiento de una regla sobre un campo de un registro."""

    field: str
    message: str


class ValidationError(Exception):
    """Error de validacion de datos de entrada."""

    def __init__(
        self,
        message: str = "",
        violations: Iterable[FieldViolation] = (),
    ) -> None:
        self.violations: tuple[FieldViolation, ...] = tuple(violations)
        if not message and self.violations:
            message = "Completa los campos obligatorios: " + ", ".join(
                violation.message for violation in self.violations
            )
        super().__init__(message)

    @property
    def fields(self) -> tuple[str, ...]:
        """Campos con errores, en orden de deteccion."""
        return tuple(violation.field for violation in self.violations)


class AccessDenied(Exception):
    """Accion rechazada por la politica de roles de la interfaz."""


class ServiceError(Exception):
    """Error en la ejecucion de servicios."""


class StoreUnavailable(ServiceError):
    """El almacen de registros no fue inicializado."""


class StoreOperationFailed(ServiceError):
    """Fallo una operacion de escritura sobre el almacen."""


class AuthenticationError(ServiceError):
    """El backend rechazo la credencial entregada."""


class RecordNotFound(ServiceError):
    """El documento solicitado no existe en la coleccion."""
