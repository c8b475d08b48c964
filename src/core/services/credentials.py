"""Propietario único del token de sesión.

Session Store y API Client comparten este objeto: ninguno guarda su propia
copia del token. `get()` lee siempre del almacenamiento persistido, así que el
token adjuntado a una petición es por construcción el token persistido.
"""

from __future__ import annotations

import logging

from core.interfaces.storage import TokenStorage

logger = logging.getLogger(__name__)


class CredentialHolder:
    def __init__(self, storage: TokenStorage) -> None:
        self._storage = storage

    def get(self) -> str | None:
        token = self._storage.load()
        return token or None

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._storage.save(token)
        logger.debug("Session token stored")

    def clear(self) -> None:
        self._storage.delete()
        logger.debug("Session token cleared")

    def authorization_header(self) -> dict[str, str]:
        """Cabecera `Authorization` calculada en el momento de enviar."""

        token = self.get()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
