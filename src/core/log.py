"""Configuración de logging.

Los módulos usan `logging.getLogger(__name__)`; aquí solo se instala el handler
(Rich sobre stderr para no mezclar logs con la salida de tablas).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGERS = ("core", "adapters", "cli")


def configure_logging(level: str | int = "WARNING") -> None:
    """Instala un `RichHandler` en los loggers del proyecto (idempotente)."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    for name in _ROOT_LOGGERS:
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if isinstance(existing, RichHandler):
                logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
