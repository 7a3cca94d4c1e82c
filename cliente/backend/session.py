"""Contexto de sesion local: rol elegido e identidad del backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from shared.protocol import Principal

from .policy import EntityType, Role, can_mutate

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class Session:
    """Estado efimero de la sesion de interfaz.

    El rol es local y no se envia al backend; el principal vive mientras dure
    el proceso y sobrevive a los cambios de rol.
    """

    role: Role | None = None
    principal: Principal | None = None

    @property
    def auth_ready(self) -> bool:
        return self.principal is not None

    @property
    def logged_in(self) -> bool:
        return self.role is not None

    @property
    def principal_id(self) -> str:
        return self.principal.uid if self.principal is not None else ""

    def login(self, role: Role | str) -> None:
        self.role = Role(role)
        LOGGER.info("Rol seleccionado: %s", self.role.value)

    def logout(self) -> None:
        LOGGER.info("Sesion cerrada para rol: %s", self.role.value if self.role else "-")
        self.role = None

    def can_mutate(self, entity_type: EntityType) -> bool:
        return can_mutate(self.role, entity_type)
