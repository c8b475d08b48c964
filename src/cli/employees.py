"""Comandos de gestión de empleados (List Query Controller)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError

from adapters.json_exporter import export_employees_json
from cli.runtime import console, open_runtime
from cli.ui_components import (
    build_distribution_table,
    build_employee_panel,
    build_employees_table,
    build_users_table,
)
from core.domain.models import DEPARTMENTS, EmployeeDraft
from core.domain.roles import Capability
from core.errors import ApiError

app = typer.Typer(no_args_is_help=True, help="Manage employee records (admin/manager).")

_DEPARTMENT_HELP = "Department filter (" + ", ".join(DEPARTMENTS) + "); empty = all."


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", ()))
        parts.append(f"{field}: {error.get('msg')}")
    return "; ".join(parts)


@app.command(name="list")
def list_employees(
    page: int = typer.Option(1, min=1, help="Page number."),
    search: str = typer.Option("", help="Free-text search."),
    department: str = typer.Option("", help=_DEPARTMENT_HELP),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also export the page to JSON."),
) -> None:
    """List employees with pagination and filters."""

    async def _list() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            controller = runtime.employee_list()
            if search or department:
                # Filtros sin fetch; la página pedida se aplica en una sola consulta.
                await controller.set_query(search_term=search, department_filter=department, refresh=False)
            await controller.set_query(page=page)
            result = controller.result
            console.print(build_employees_table(result, page=controller.query.page))
            if json_out is not None:
                path = export_employees_json(result=result, query=controller.query, output_path=json_out)
                console.print(f"[green]Exported to:[/green] {path}")
            return True

    if not asyncio.run(_list()):
        raise typer.Exit(code=1)


@app.command()
def show(employee_id: str = typer.Argument(..., help="Record id (not the business key).")) -> None:
    """Show a single employee record."""

    async def _show() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            record = await runtime.employee_list().get(employee_id)
            if record is None:
                return False
            console.print(build_employee_panel(record))
            return True

    if not asyncio.run(_show()):
        raise typer.Exit(code=1)


@app.command(name="available-users")
def available_users() -> None:
    """Users not yet linked to an employee record."""

    async def _users() -> None:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            users = await runtime.employee_list().load_available_users()
            console.print(build_users_table(users))

    asyncio.run(_users())


@app.command()
def create(
    employee_id: str = typer.Option(..., "--employee-id", prompt=True),
    user_id: str = typer.Option(..., "--user-id", prompt=True, help="See `employees available-users`."),
    department: str = typer.Option(..., prompt=True, help=", ".join(DEPARTMENTS)),
    position: str = typer.Option(..., prompt=True),
    salary: str = typer.Option(..., prompt=True),
    phone_number: str = typer.Option("", "--phone"),
) -> None:
    """Create an employee record."""

    try:
        draft = EmployeeDraft(
            employee_id=employee_id,
            user_id=user_id,
            department=department,
            position=position,
            salary=salary,
            phone_number=phone_number,
        )
    except ValidationError as exc:
        console.print(f"[red]Invalid employee:[/red] {_validation_message(exc)}")
        raise typer.Exit(code=1)

    async def _create() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            controller = runtime.employee_list()
            controller.begin_create()
            result = await controller.create(draft)
            return result.success

    if not asyncio.run(_create()):
        raise typer.Exit(code=1)


@app.command()
def update(
    record_id: str = typer.Argument(..., help="Record id."),
    employee_id: Optional[str] = typer.Option(None, "--employee-id"),
    user_id: Optional[str] = typer.Option(None, "--user-id"),
    department: Optional[str] = typer.Option(None),
    position: Optional[str] = typer.Option(None),
    salary: Optional[str] = typer.Option(None),
    phone_number: Optional[str] = typer.Option(None, "--phone"),
) -> None:
    """Update an employee record (unspecified fields keep their value)."""

    changes: dict[str, Any] = {
        key: value
        for key, value in (
            ("employee_id", employee_id),
            ("user_id", user_id),
            ("department", department),
            ("position", position),
            ("salary", salary),
            ("phone_number", phone_number),
        )
        if value is not None
    }

    async def _update() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            controller = runtime.employee_list()
            record = await controller.get(record_id)
            if record is None:
                return False
            editor = controller.begin_edit(record)
            try:
                draft = EmployeeDraft.model_validate({**editor.draft, **changes})
            except ValidationError as exc:
                controller.cancel_edit()
                console.print(f"[red]Invalid employee:[/red] {_validation_message(exc)}")
                return False
            result = await controller.update(record_id, draft)
            return result.success

    if not asyncio.run(_update()):
        raise typer.Exit(code=1)


@app.command()
def delete(
    record_id: str = typer.Argument(..., help="Record id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete an employee record (admin only)."""

    async def _delete() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            runtime.require_capability(Capability.DELETE_EMPLOYEES)
            result = await runtime.employee_list(assume_yes=yes).delete(record_id)
            if not result.success and result.message:
                console.print(result.message)
            return result.success

    if not asyncio.run(_delete()):
        raise typer.Exit(code=1)


@app.command()
def departments() -> None:
    """Headcount per department."""

    async def _departments() -> bool:
        async with open_runtime() as runtime:
            runtime.require_route("/employees")
            try:
                entries = await runtime.employees.department_stats()
            except ApiError:
                return False
            console.print(build_distribution_table("Departments", entries))
            return True

    if not asyncio.run(_departments()):
        raise typer.Exit(code=1)
