"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Aislar la configuración (sin .env del usuario ni variables STAFFDESK_*)
  - Simular el backend REST con httpx.MockTransport (sin red)
  - Proveer fakes de los contratos de UI (Notifier, Navigator, Confirmer)
"""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any, Awaitable, Callable, Union

import httpx
import pytest

from adapters.api_client import ApiClient
from adapters.token_storage import MemoryTokenStorage
from core import config as app_config
from core.config import AppSettings
from core.services.credentials import CredentialHolder

app_config.AppSettings.model_config["env_file"] = None

BASE_URL = "http://testserver/api"

ADMIN_USER: dict[str, Any] = {
    "_id": "u-admin",
    "firstName": "Ada",
    "lastName": "Admin",
    "email": "ada@example.com",
    "username": "ada",
    "role": "admin",
    "isActive": True,
    "createdAt": "2024-01-02T09:00:00Z",
}

MANAGER_USER: dict[str, Any] = {
    **ADMIN_USER,
    "_id": "u-manager",
    "firstName": "Max",
    "lastName": "Manager",
    "email": "max@example.com",
    "username": "max",
    "role": "manager",
}

EMPLOYEE_USER: dict[str, Any] = {
    **ADMIN_USER,
    "_id": "u-employee",
    "firstName": "Eve",
    "lastName": "Employee",
    "email": "eve@example.com",
    "username": "eve",
    "role": "employee",
}


def employee_payload(record_id: str, employee_id: str, department: str = "IT") -> dict[str, Any]:
    return {
        "_id": record_id,
        "employeeId": employee_id,
        "user": {
            "_id": f"user-{record_id}",
            "firstName": "Sam",
            "lastName": "Sample",
            "email": f"{record_id}@example.com",
        },
        "department": department,
        "position": "Developer",
        "salary": 70000,
        "phoneNumber": "555-0100",
        "status": "active",
    }


def json_response(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class FakeBackend:
    """Backend en memoria: rutas (método, path) -> handler, y registro de peticiones."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, handler: Handler | httpx.Response) -> None:
        if isinstance(handler, httpx.Response):
            response = handler

            def _static(request: httpx.Request) -> httpx.Response:
                return httpx.Response(
                    response.status_code,
                    content=response.content,
                    headers=response.headers,
                )

            self.routes[(method.upper(), path)] = _static
        else:
            self.routes[(method.upper(), path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method.upper() and self._path_of(r) == path
        ]

    @staticmethod
    def _path_of(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api") else path

    async def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, self._path_of(request)))
        if handler is None:
            return json_response(404, {"success": False, "message": "Route not found"})
        result = handler(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._dispatch)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class RecordingNavigator:
    def __init__(self) -> None:
        self.paths: list[str] = []

    def navigate(self, path: str) -> None:
        self.paths.append(path)


class StaticConfirmer:
    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    for key in list(os.environ):
        if key.startswith("STAFFDESK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(api_base_url=BASE_URL, http_timeout_seconds=1.0)


@pytest.fixture
def storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture
def credentials(storage: MemoryTokenStorage) -> CredentialHolder:
    return CredentialHolder(storage)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
async def client(
    credentials: CredentialHolder,
    settings: AppSettings,
    notifier: RecordingNotifier,
    navigator: RecordingNavigator,
    backend: FakeBackend,
):
    api = ApiClient(
        credentials,
        settings=settings,
        notifier=notifier,
        navigator=navigator,
        transport=backend.transport(),
    )
    yield api
    await api.aclose()
