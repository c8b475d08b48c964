"""Almacenamiento del token persistido.

- `FileTokenStorage`: equivalente de localStorage para la CLI (JSON en el
  directorio de configuración del usuario, permisos 0600).
- `MemoryTokenStorage`: sesiones efímeras y tests.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from core.interfaces.storage import TOKEN_STORAGE_KEY

logger = logging.getLogger(__name__)


class FileTokenStorage:
    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, exc)
            return None
        if not isinstance(data, dict):
            return None
        token = data.get(TOKEN_STORAGE_KEY)
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({TOKEN_STORAGE_KEY: token}) + "\n"
        fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)


class MemoryTokenStorage:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def delete(self) -> None:
        self._token = None
