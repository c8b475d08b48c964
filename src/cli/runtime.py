"""Cableado de la CLI.

Construye en un único sitio settings -> storage -> CredentialHolder ->
ApiClient -> SessionStore, para que cada comando use el mismo grafo.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx
import typer
from rich.console import Console

from adapters.api_client import ApiClient
from adapters.backend_api import AuthApi, DashboardApi, EmployeeApi
from adapters.token_storage import FileTokenStorage
from cli.ui_components import CliNavigator, RichNotifier, TyperConfirmer
from core.config import AppSettings
from core.domain.roles import Capability, has_capability
from core.interfaces.storage import TokenStorage
from core.services.credentials import CredentialHolder
from core.services.employee_list import EmployeeListController
from core.services.route_guard import RouteKind, guard_route
from core.services.session_store import SessionStore

console = Console()


def transport_factory() -> httpx.AsyncBaseTransport | None:
    """Transporte HTTP de la CLI (None = red real). Los tests lo sustituyen."""

    return None


@dataclass
class ClientRuntime:
    settings: AppSettings
    console: Console
    notifier: RichNotifier
    navigator: CliNavigator
    credentials: CredentialHolder
    client: ApiClient
    session: SessionStore
    auth: AuthApi
    employees: EmployeeApi
    dashboard: DashboardApi

    def employee_list(self, *, assume_yes: bool = False) -> EmployeeListController:
        return EmployeeListController(
            self.employees,
            confirmer=TyperConfirmer(assume_yes=assume_yes),
            notifier=self.notifier,
            auth_api=self.auth,
            page_size=self.settings.page_size,
        )

    def require_route(self, path: str) -> None:
        """Aplica el Route Guard; corta el comando si la vista no se puede mostrar."""

        decision = guard_route(self.session.session, path)
        if decision.kind is RouteKind.RENDER:
            return
        if decision.kind is RouteKind.FORBIDDEN:
            self.console.print("[red]Access Denied[/red]: you don't have permission to view this page.")
            raise typer.Exit(code=1)
        if decision.kind is RouteKind.REDIRECT:
            self.navigator.navigate(decision.path)
            if decision.path == "/login":
                self.console.print("[yellow]You are not signed in.[/yellow]")
                raise typer.Exit(code=1)
            return
        self.console.print("[yellow]Session is still loading.[/yellow]")
        raise typer.Exit(code=1)

    def require_capability(self, capability: Capability) -> None:
        user = self.session.user
        if user is None or not has_capability(user.role, capability):
            self.console.print("[red]Access Denied[/red]: your role cannot perform this action.")
            raise typer.Exit(code=1)


@asynccontextmanager
async def open_runtime(
    settings: AppSettings | None = None,
    *,
    storage: TokenStorage | None = None,
    restore: bool = True,
) -> AsyncIterator[ClientRuntime]:
    settings = settings or AppSettings()
    storage = storage or FileTokenStorage(settings.resolved_token_path())
    notifier = RichNotifier(console)
    navigator = CliNavigator(console)
    credentials = CredentialHolder(storage)

    client = ApiClient(
        credentials,
        settings=settings,
        notifier=notifier,
        navigator=navigator,
        transport=transport_factory(),
    )
    auth = AuthApi(client)
    session = SessionStore(client, notifier=notifier, auth_api=auth)

    async with client:
        runtime = ClientRuntime(
            settings=settings,
            console=console,
            notifier=notifier,
            navigator=navigator,
            credentials=credentials,
            client=client,
            session=session,
            auth=auth,
            employees=EmployeeApi(client),
            dashboard=DashboardApi(client),
        )
        if restore:
            await session.restore()
        yield runtime
