"""Route Guard: decide qué vista mostrar en función de la sesión.

Función pura de (`Session`, path). No navega: devuelve la decisión y la capa
de presentación la ejecuta.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.domain.roles import Capability, has_capability
from core.domain.session import Session
from core.interfaces.ui import DEFAULT_LANDING_PATH, LOGIN_PATH

PROTECTED_PATHS: frozenset[str] = frozenset({"/dashboard", "/employees", "/profile"})

# Vistas protegidas que además exigen una capacidad concreta.
REQUIRED_CAPABILITIES: dict[str, Capability] = {
    "/employees": Capability.MANAGE_EMPLOYEES,
}


class RouteKind(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class RouteDecision:
    kind: RouteKind
    path: str

    @classmethod
    def loading(cls, path: str) -> "RouteDecision":
        return cls(RouteKind.LOADING, path)

    @classmethod
    def redirect(cls, target: str) -> "RouteDecision":
        return cls(RouteKind.REDIRECT, target)

    @classmethod
    def render(cls, path: str) -> "RouteDecision":
        return cls(RouteKind.RENDER, path)

    @classmethod
    def forbidden(cls, path: str) -> "RouteDecision":
        return cls(RouteKind.FORBIDDEN, path)


def _normalize(path: str) -> str:
    cleaned = "/" + path.strip().strip("/")
    return cleaned.lower()


def guard_route(session: Session, path: str) -> RouteDecision:
    target = _normalize(path)

    if session.loading:
        return RouteDecision.loading(target)

    if target == LOGIN_PATH:
        if session.is_authenticated:
            return RouteDecision.redirect(DEFAULT_LANDING_PATH)
        return RouteDecision.render(LOGIN_PATH)

    if target not in PROTECTED_PATHS:
        return RouteDecision.redirect(DEFAULT_LANDING_PATH)

    if not session.is_authenticated or session.user is None:
        return RouteDecision.redirect(LOGIN_PATH)

    required = REQUIRED_CAPABILITIES.get(target)
    if required is not None and not has_capability(session.user.role, required):
        return RouteDecision.forbidden(target)

    return RouteDecision.render(target)
