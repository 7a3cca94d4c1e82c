"""Politica de roles para acciones de escritura en la interfaz.

La politica es solo consultiva: se evalua en el cliente y el backend no la
aplica. Cualquier acceso directo al dataset la omite, por lo que no es una
barrera de seguridad.
"""

from __future__ import annotations

from enum import Enum

from shared.errors import AccessDenied


class Role(str, Enum):
    """Modo local de la interfaz elegido al iniciar."""

    ADMIN = "Admin"
    USER = "User"


class EntityType(str, Enum):
    INVENTORY = "inventory"
    TICKETS = "tickets"
    SALES = "sales"


_MUTATION_TABLE: dict[tuple[Role, EntityType], bool] = {
    (Role.ADMIN, EntityType.INVENTORY): True,
    (Role.ADMIN, EntityType.TICKETS): True,
    (Role.ADMIN, EntityType.SALES): True,
    (Role.USER, EntityType.INVENTORY): False,
    (Role.USER, EntityType.TICKETS): True,
    (Role.USER, EntityType.SALES): False,
}

_DENIED_MESSAGES: dict[EntityType, str] = {
    EntityType.INVENTORY: "Solo los administradores pueden modificar el inventario.",
    EntityType.TICKETS: "No tienes permisos para modificar tickets.",
    EntityType.SALES: "Solo los administradores pueden registrar ventas.",
}


def can_mutate(role: Role | str | None, entity_type: EntityType | str) -> bool:
    """Indica si el rol puede crear, editar o eliminar registros del tipo dado."""
    if role is None:
        return False
    try:
        key = (Role(role), EntityType(entity_type))
    except ValueError:
        return False
    return _MUTATION_TABLE.get(key, False)


def require_mutation(
    role: Role | str | None,
    entity_type: EntityType | str,
    message: str | None = None,
) -> None:
    """Levanta AccessDenied si el rol no puede modificar el tipo de registro."""
    if can_mutate(role, entity_type):
        return
    raise AccessDenied(message or _DENIED_MESSAGES[EntityType(entity_type)])
