"""Contrato del almacenamiento durable del token de sesión."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

TOKEN_STORAGE_KEY = "token"


@runtime_checkable
class TokenStorage(Protocol):
    """Un único token por contexto de cliente; ausencia = sesión cerrada.

    Reglas de diseño:
    - Las escrituras son síncronas: la siguiente lectura ya ve el valor nuevo.
    """

    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def delete(self) -> None: ...
