"""Comandos de perfil: actualizar datos y cambiar contraseña."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer

from cli.runtime import console, open_runtime
from cli.ui_components import build_profile_panel

app = typer.Typer(no_args_is_help=True, help="View and edit your own profile.")


@app.command()
def show() -> None:
    """Show the signed-in user's profile."""

    async def _show() -> None:
        async with open_runtime() as runtime:
            runtime.require_route("/profile")
            user = runtime.session.user
            if user is None:
                raise typer.Exit(code=1)
            console.print(build_profile_panel(user))

    asyncio.run(_show())


@app.command()
def update(
    first_name: Optional[str] = typer.Option(None, "--first-name"),
    last_name: Optional[str] = typer.Option(None, "--last-name"),
    email: Optional[str] = typer.Option(None, "--email"),
) -> None:
    """Update first name, last name or email."""

    changes = {
        key: value
        for key, value in (("firstName", first_name), ("lastName", last_name), ("email", email))
        if value is not None
    }
    if not changes:
        raise typer.BadParameter("nothing to update; pass --first-name, --last-name or --email")

    async def _update() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/profile")
            user = runtime.session.user
            if user is None:
                raise typer.Exit(code=1)
            data = {"firstName": user.first_name, "lastName": user.last_name, "email": user.email}
            data.update(changes)
            result = await runtime.session.update_profile(data)
            if result.success and runtime.session.user is not None:
                console.print(build_profile_panel(runtime.session.user))
            return result.success

    if not asyncio.run(_update()):
        raise typer.Exit(code=1)


@app.command(name="change-password")
def change_password(
    current_password: str = typer.Option(..., prompt=True, hide_input=True),
    new_password: str = typer.Option(..., prompt=True, hide_input=True),
    confirm_password: str = typer.Option(..., prompt="Confirm new password", hide_input=True),
) -> None:
    """Change the account password."""

    if new_password != confirm_password:
        console.print("[red]New passwords do not match[/red]")
        raise typer.Exit(code=1)

    async def _change() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/profile")
            result = await runtime.session.change_password(current_password, new_password)
            return result.success

    if not asyncio.run(_change()):
        raise typer.Exit(code=1)
