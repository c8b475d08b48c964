"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from adapters.token_storage import FileTokenStorage
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_backend(settings: AppSettings) -> tuple[bool, str]:
    # Cualquier respuesta HTTP (incluido 401/404) demuestra que el backend responde.
    try:
        async with build_async_client(settings) as client:
            response = await client.get("auth/me")
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    token_path = settings.resolved_token_path()

    table = Table(title="staffdesk Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Page size", "OK", str(settings.page_size))

    # Session
    if FileTokenStorage(token_path).load():
        table.add_row("Session token", "OK", str(token_path))
    else:
        table.add_row("Session token", "NONE", "Not signed in -> run `staffdesk login`")

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_backend(settings))
    table.add_row("Backend connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Set the backend URL with `staffdesk doctor setup-api`."
        )


@app.command(name="setup-api")
def setup_api() -> None:
    """Interactive backend setup (stores config in the user config .env)."""

    settings = AppSettings()
    base_url = typer.prompt("API base URL", default=settings.api_base_url, show_default=True).strip()
    timeout = typer.prompt(
        "HTTP timeout (seconds)",
        default=f"{settings.http_timeout_seconds:g}",
        show_default=True,
    ).strip()

    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("base URL must start with http:// or https://")
    try:
        if float(timeout) <= 0:
            raise ValueError
    except ValueError:
        raise typer.BadParameter("timeout must be a positive number") from None

    env_path = write_user_env_vars(
        {
            "STAFFDESK_API_BASE_URL": base_url,
            "STAFFDESK_HTTP_TIMEOUT_SECONDS": timeout,
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
