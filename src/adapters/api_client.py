"""Cliente del backend REST.

Responsabilidad:
- Adjuntar `Authorization: Bearer <token>` leyendo el token en el momento del envío.
- Ante un 401 de una petición autenticada: borrar el token, avisar una sola vez,
  invalidar la sesión (listeners) y navegar a login.
- Ante cualquier otro fallo: una única notificación con el mensaje del servidor,
  el del transporte o un fallback genérico.

El llamante siempre recibe la respuesta o la excepción tipada: los efectos
anteriores son secundarios y no sustituyen su propio manejo de éxito/fallo.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import ApiEnvelope
from core.errors import (
    MalformedResponseError,
    RejectedError,
    SessionExpiredError,
    TransportError,
    failure_message,
)
from core.interfaces.ui import LOGIN_PATH, Navigator, NullNavigator, NullNotifier, Notifier
from core.services.credentials import CredentialHolder

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."

UnauthorizedListener = Callable[[], None]


def _server_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _transport_message(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "Request timed out"
    text = str(exc).strip()
    return text or "Network error"


class ApiClient:
    def __init__(
        self,
        credentials: CredentialHolder,
        *,
        settings: AppSettings | None = None,
        notifier: Notifier | None = None,
        navigator: Navigator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._credentials = credentials
        self._settings = settings or AppSettings()
        self._notifier = notifier or NullNotifier()
        self._navigator = navigator or NullNavigator()
        self._client = build_async_client(self._settings, transport=transport)
        self._unauthorized_listeners: list[UnauthorizedListener] = []

    @property
    def credentials(self) -> CredentialHolder:
        return self._credentials

    def add_unauthorized_listener(self, listener: UnauthorizedListener) -> Callable[[], None]:
        self._unauthorized_listeners.append(listener)

        def _remove() -> None:
            if listener in self._unauthorized_listeners:
                self._unauthorized_listeners.remove(listener)

        return _remove

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        error_fallback: str | None = None,
        authenticated: bool = True,
        notify: bool = True,
    ) -> httpx.Response:
        """Envía la petición y traduce los fallos a excepciones tipadas.

        `authenticated=False` no adjunta el token (login, registro). Con
        `notify=False` el llamador decide si el fallo se muestra; la
        invalidación por 401 se notifica igualmente.
        """

        sent_token = self._credentials.get() if authenticated else None
        headers = {"Authorization": f"Bearer {sent_token}"} if sent_token else {}

        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            transport = _transport_message(exc)
            logger.info("%s %s failed: %s", method, path, transport)
            message = failure_message(transport_message=transport, fallback=error_fallback)
            if notify:
                self._notifier.error(message)
            raise TransportError(message) from exc

        if response.status_code == 401 and sent_token is not None:
            self._handle_unauthorized(sent_token)
            raise SessionExpiredError(
                SESSION_EXPIRED_MESSAGE,
                status_code=401,
                server_message=_server_message(response),
            )

        if response.is_error:
            server = _server_message(response)
            message = failure_message(server_message=server, fallback=error_fallback)
            logger.info("%s %s rejected with HTTP %s", method, path, response.status_code)
            if notify:
                self._notifier.error(message)
            raise RejectedError(
                message,
                status_code=response.status_code,
                server_message=server,
            )

        return response

    async def call(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        error_fallback: str | None = None,
        authenticated: bool = True,
        notify: bool = True,
    ) -> ApiEnvelope:
        """Como `request`, pero decodifica el sobre JSON estándar del backend."""

        response = await self.request(
            method,
            path,
            json=json,
            params=params,
            error_fallback=error_fallback,
            authenticated=authenticated,
            notify=notify,
        )
        try:
            return ApiEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            message = failure_message(
                transport_message="Malformed response from server",
                fallback=error_fallback,
            )
            logger.info("%s %s returned an unreadable body: %s", method, path, exc)
            if notify:
                self._notifier.error(message)
            raise MalformedResponseError(message, status_code=response.status_code) from exc

    async def get(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return await self.call("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return await self.call("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return await self.call("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> ApiEnvelope:
        return await self.call("DELETE", path, **kwargs)

    def _handle_unauthorized(self, sent_token: str) -> None:
        # Solo la primera respuesta 401 para el token vigente invalida la sesión.
        if self._credentials.get() != sent_token:
            logger.debug("Ignoring 401 for a token that is no longer current")
            return

        logger.info("Session invalidated by HTTP 401")
        self._credentials.clear()
        self._notifier.error(SESSION_EXPIRED_MESSAGE)
        for listener in list(self._unauthorized_listeners):
            listener()
        self._navigator.navigate(LOGIN_PATH)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
