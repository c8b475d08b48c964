"""CLI principal (Typer).

Comandos de sesión (login/logout/whoami/register) y dashboard; los grupos
`employees`, `profile` y `doctor` viven en sus propios módulos.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from cli import doctor, employees, profile
from cli.runtime import console, open_runtime
from cli.ui_components import (
    build_chart_tables,
    build_employment_panel,
    build_profile_panel,
    build_search_table,
    build_stats_table,
    print_banner,
)
from core.config import AppSettings
from core.domain.roles import Capability, Role, has_capability
from core.errors import ApiError
from core.log import configure_logging
from core.services.route_guard import RouteKind, guard_route

app = typer.Typer(
    no_args_is_help=True,
    help="Terminal client for the employee management backend.",
)
app.add_typer(employees.app, name="employees")
app.add_typer(profile.app, name="profile")
app.add_typer(doctor.app, name="doctor")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)


@app.command()
def login(
    email: str = typer.Option(..., prompt=True, help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Account password."),
) -> None:
    """Sign in and persist the session token."""

    async def _login() -> bool:
        async with open_runtime() as runtime:
            decision = guard_route(runtime.session.session, "/login")
            if decision.kind is RouteKind.REDIRECT and runtime.session.user is not None:
                console.print(f"Already signed in as [cyan]{runtime.session.user.email}[/cyan].")
                return True
            result = await runtime.session.login(email, password)
            if result.success and runtime.session.user is not None:
                console.print(build_profile_panel(runtime.session.user))
            return result.success

    if not asyncio.run(_login()):
        raise typer.Exit(code=1)


@app.command()
def logout() -> None:
    """Forget the stored session token (no server call)."""

    async def _logout() -> None:
        async with open_runtime(restore=False) as runtime:
            runtime.session.logout()

    asyncio.run(_logout())
    console.print("Signed out.")


@app.command()
def whoami() -> None:
    """Show the signed-in user."""

    async def _whoami() -> None:
        async with open_runtime() as runtime:
            runtime.require_route("/profile")
            user = runtime.session.user
            if user is None:
                raise typer.Exit(code=1)
            console.print(build_profile_panel(user))

    asyncio.run(_whoami())


@app.command()
def register(
    first_name: str = typer.Option(..., prompt=True),
    last_name: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    username: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
    role: Role = typer.Option(Role.EMPLOYEE, case_sensitive=False),
) -> None:
    """Create a user account. Does not sign in."""

    payload = {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "username": username,
        "password": password,
        "role": role.value,
    }

    async def _register() -> bool:
        async with open_runtime(restore=False) as runtime:
            try:
                envelope = await runtime.auth.register(payload)
            except ApiError:
                return False
            if not envelope.success:
                runtime.notifier.error(envelope.message or "Registration failed")
                return False
            runtime.notifier.success("Account created. You can now sign in.")
            return True

    if not asyncio.run(_register()):
        raise typer.Exit(code=1)


@app.command()
def dashboard(
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the banner."),
) -> None:
    """Organisation statistics (role dependent)."""

    async def _dashboard() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/dashboard")
            user = runtime.session.user
            if user is None:
                raise typer.Exit(code=1)
            try:
                stats = await runtime.dashboard.stats()
                chart = None
                if has_capability(user.role, Capability.VIEW_ORG_STATS):
                    chart = await runtime.dashboard.chart_data()
            except ApiError:
                return False

            if banner:
                print_banner(console)
            console.print(build_stats_table(stats))
            if has_capability(user.role, Capability.VIEW_OWN_EMPLOYMENT) and stats.employee_info:
                console.print(build_employment_panel(stats.employee_info))
            if chart is not None:
                for table in build_chart_tables(chart):
                    console.print(table)
            return True

    if not asyncio.run(_dashboard()):
        raise typer.Exit(code=1)


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for."),
    search_type: Optional[str] = typer.Option(None, "--type", help="Restrict to a result type (e.g. employees, users)."),
) -> None:
    """Search across the organisation."""

    async def _search() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/dashboard")
            try:
                hits = await runtime.dashboard.search(query, search_type)
            except ApiError:
                return False
            console.print(build_search_table(query, hits))
            return True

    if not asyncio.run(_search()):
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
