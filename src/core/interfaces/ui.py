"""Contratos hacia la capa de presentación.

Por qué Protocol:
- El Core solo necesita "avisar al usuario", "navegar" y "pedir confirmación";
  cómo se pinta eso (Rich, tests, otra UI) queda fuera.
- Permite sustituir la CLI por fakes en los tests sin herencia.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

LOGIN_PATH = "/login"
DEFAULT_LANDING_PATH = "/dashboard"


@runtime_checkable
class Notifier(Protocol):
    """Mensajes de una sola vez para el usuario (toasts en la UI web)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@runtime_checkable
class Navigator(Protocol):
    """Cambio de vista forzado por el Core (p.ej. redirección a login)."""

    def navigate(self, path: str) -> None: ...


@runtime_checkable
class Confirmer(Protocol):
    """Confirmación explícita antes de acciones destructivas."""

    def confirm(self, prompt: str) -> bool: ...


class NullNotifier:
    def success(self, message: str) -> None:
        return None

    def error(self, message: str) -> None:
        return None


class NullNavigator:
    def navigate(self, path: str) -> None:
        return None
