"""Taxonomía de errores del cliente.

- `SessionExpiredError`: 401 sobre una petición autenticada (sesión caducada).
- `RejectedError`: el backend rechazó la petición (credenciales, validación, reglas).
- `TransportError`: timeout, red o respuesta ilegible.

Ningún error es fatal: los servicios los capturan y devuelven `OperationResult`.
"""

from __future__ import annotations

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"


class StaffdeskError(Exception):
    """Raíz de las excepciones propias del proyecto."""


class ApiError(StaffdeskError):
    """Fallo de una llamada al backend, ya notificado al usuario."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message


class SessionExpiredError(ApiError):
    pass


class RejectedError(ApiError):
    pass


class TransportError(ApiError):
    pass


class MalformedResponseError(TransportError):
    pass


def failure_message(
    *,
    server_message: str | None = None,
    transport_message: str | None = None,
    fallback: str | None = None,
) -> str:
    """Mensaje visible para un fallo, en orden de prioridad."""

    for candidate in (server_message, transport_message, fallback):
        if candidate and candidate.strip():
            return candidate.strip()
    return GENERIC_ERROR_MESSAGE
