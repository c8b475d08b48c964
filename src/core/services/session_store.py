"""Session Store: ciclo de vida de la sesión del usuario.

Estados: initializing -> anonymous | authenticated, con `transitioning`
durante el login. Es la única fuente de verdad sobre "¿hay usuario
autenticado?" y avisa a sus observadores de forma síncrona en cada cambio.

Las operaciones devuelven `OperationResult` y nunca propagan `ApiError`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import ValidationError

from adapters.api_client import ApiClient
from adapters.backend_api import AuthApi
from core.domain.models import OperationResult, UserProfile
from core.domain.session import Session, SessionState
from core.errors import ApiError
from core.interfaces.ui import NullNotifier, Notifier

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]

LOGIN_FALLBACK = "Login failed. Please try again."
PROFILE_FALLBACK = "Profile update failed. Please try again."
PASSWORD_FALLBACK = "Password change failed. Please try again."
NOT_SIGNED_IN = "You are not signed in."


class SessionStore:
    def __init__(
        self,
        client: ApiClient,
        *,
        notifier: Notifier | None = None,
        auth_api: AuthApi | None = None,
    ) -> None:
        self._credentials = client.credentials
        self._auth = auth_api or AuthApi(client)
        self._notifier = notifier or NullNotifier()
        self._session = Session.initializing()
        self._listeners: list[SessionListener] = []
        client.add_unauthorized_listener(self.invalidate)

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def user(self) -> UserProfile | None:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Registra un observador; devuelve la función para darlo de baja."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set(self, session: Session) -> None:
        if session == self._session:
            return
        logger.debug("Session %s -> %s", self._session.state.value, session.state.value)
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    async def restore(self) -> Session:
        """Resuelve el estado inicial a partir del token persistido."""

        if self._credentials.get() is None:
            self._set(Session.anonymous())
            return self._session

        try:
            envelope = await self._auth.me()
            if not envelope.success:
                raise ValueError(envelope.message or "profile lookup rejected")
            user = UserProfile.model_validate(envelope.data)
        except (ApiError, ValueError, ValidationError) as exc:
            logger.info("Stored session could not be restored: %s", exc)
            self._credentials.clear()
            self._set(Session.anonymous())
            return self._session

        self._set(Session.authenticated(user))
        return self._session

    async def login(self, email: str, password: str) -> OperationResult:
        previous = self._session
        self._set(Session.transitioning())

        try:
            envelope = await self._auth.login(email, password, error_fallback=LOGIN_FALLBACK)
        except ApiError as exc:
            self._restore_after_failed_login(previous)
            return OperationResult.failed(exc.server_message or LOGIN_FALLBACK)

        if not envelope.success:
            self._restore_after_failed_login(previous)
            message = envelope.message or "Login failed"
            self._notifier.error(message)
            return OperationResult.failed(message)

        data = envelope.data if isinstance(envelope.data, dict) else {}
        token = data.get("token")
        try:
            user = UserProfile.model_validate(data.get("user"))
        except ValidationError:
            user = None
        if not isinstance(token, str) or not token or user is None:
            self._restore_after_failed_login(previous)
            self._notifier.error(LOGIN_FALLBACK)
            return OperationResult.failed(LOGIN_FALLBACK)

        self._credentials.set(token)
        self._set(Session.authenticated(user))
        logger.info("Signed in as %s", user.email)
        self._notifier.success("Login successful!")
        return OperationResult.ok()

    def _restore_after_failed_login(self, previous: Session) -> None:
        # Un 401 concurrente pudo cerrar la sesión mientras tanto.
        if previous.is_authenticated and self._credentials.get() is None:
            self._set(Session.anonymous())
            return
        if previous.state is SessionState.TRANSITIONING or previous.loading:
            previous = Session.anonymous()
        self._set(previous)

    def logout(self) -> None:
        """Cierra la sesión localmente. Idempotente y sin llamadas de red."""

        was_authenticated = self._session.is_authenticated
        self._credentials.clear()
        self._set(Session.anonymous())
        if was_authenticated:
            self._notifier.success("Logged out successfully")

    def invalidate(self) -> None:
        """Hook de 401: fuerza `anonymous` desde cualquier estado."""

        self._credentials.clear()
        self._set(Session.anonymous())

    async def update_profile(self, data: dict[str, Any]) -> OperationResult:
        if not self._session.is_authenticated:
            return OperationResult.failed(NOT_SIGNED_IN)

        try:
            envelope = await self._auth.update_profile(data, error_fallback=PROFILE_FALLBACK)
        except ApiError as exc:
            return OperationResult.failed(exc.server_message or PROFILE_FALLBACK)

        if not envelope.success:
            message = envelope.message or "Profile update failed"
            self._notifier.error(message)
            return OperationResult.failed(message)

        try:
            user = UserProfile.model_validate(envelope.data)
        except ValidationError:
            self._notifier.error(PROFILE_FALLBACK)
            return OperationResult.failed(PROFILE_FALLBACK)

        # El 401 pudo llegar mientras la petición estaba en vuelo.
        if self._session.is_authenticated:
            self._set(Session.authenticated(user))
        self._notifier.success("Profile updated successfully!")
        return OperationResult.ok()

    async def change_password(self, current_password: str, new_password: str) -> OperationResult:
        if not self._session.is_authenticated:
            return OperationResult.failed(NOT_SIGNED_IN)

        try:
            envelope = await self._auth.change_password(
                current_password,
                new_password,
                error_fallback=PASSWORD_FALLBACK,
            )
        except ApiError as exc:
            return OperationResult.failed(exc.server_message or PASSWORD_FALLBACK)

        if not envelope.success:
            message = envelope.message or "Password change failed"
            self._notifier.error(message)
            return OperationResult.failed(message)

        self._notifier.success("Password changed successfully!")
        return OperationResult.ok()
