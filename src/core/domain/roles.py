"""Roles y capacidades.

Por qué una tabla de capacidades:
- Evita comparaciones de rol sueltas en cada comando o vista.
- El Route Guard, los servicios y la CLI consultan la misma regla vía
  `has_capability`.
"""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Rol asignado por el backend a cada cuenta."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"

    def label(self) -> str:
        """Etiqueta legible para paneles y logs."""

        return self.value.capitalize()


class Capability(str, Enum):
    """Acciones y vistas restringidas por rol."""

    VIEW_ORG_STATS = "view_org_stats"
    MANAGE_EMPLOYEES = "manage_employees"
    DELETE_EMPLOYEES = "delete_employees"
    VIEW_OWN_EMPLOYMENT = "view_own_employment"


# Solo admin puede borrar; manager comparte el resto de la visibilidad de admin.
_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.ADMIN: frozenset(
        {
            Capability.VIEW_ORG_STATS,
            Capability.MANAGE_EMPLOYEES,
            Capability.DELETE_EMPLOYEES,
        }
    ),
    Role.MANAGER: frozenset(
        {
            Capability.VIEW_ORG_STATS,
            Capability.MANAGE_EMPLOYEES,
        }
    ),
    Role.EMPLOYEE: frozenset({Capability.VIEW_OWN_EMPLOYMENT}),
}


def has_capability(role: Role | str | None, capability: Capability) -> bool:
    """True si `role` concede `capability`. Un rol desconocido no concede nada."""

    if role is None:
        return False
    try:
        resolved = Role(role)
    except ValueError:
        return False
    return capability in _CAPABILITIES[resolved]
