"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Aquí viven también las implementaciones CLI de los contratos del Core
  (`Notifier`, `Navigator`, `Confirmer`).
"""

from __future__ import annotations

from typing import Any

import typer
from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import (
    ChartData,
    DashboardStats,
    EmployeeListResult,
    EmployeeRecord,
    EmployeeStatus,
    UserProfile,
)
from core.interfaces.ui import LOGIN_PATH

_STATUS_STYLES = {
    EmployeeStatus.ACTIVE: "green",
    EmployeeStatus.INACTIVE: "dim",
    EmployeeStatus.TERMINATED: "red",
}


class RichNotifier:
    """Equivalente CLI de los toasts: una línea por aviso."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def success(self, message: str) -> None:
        self._console.print(f"[green]✔[/green] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✖[/red] {message}")


class CliNavigator:
    """La CLI no tiene vistas: registra el destino y sugiere el comando."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self.last_path: str | None = None

    def navigate(self, path: str) -> None:
        self.last_path = path
        if path == LOGIN_PATH:
            self._console.print("[yellow]Run `staffdesk login` to sign in again.[/yellow]")


class TyperConfirmer:
    def __init__(self, *, assume_yes: bool = False) -> None:
        self._assume_yes = assume_yes

    def confirm(self, prompt: str) -> bool:
        if self._assume_yes:
            return True
        return typer.confirm(prompt, default=False)


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("staffdesk", style="bold cyan")
    subtitle = Text("Employees • Profiles • Organisation stats", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _format_salary(value: float) -> str:
    return f"${value:,.0f}" if float(value).is_integer() else f"${value:,.2f}"


def build_employees_table(result: EmployeeListResult, *, page: int) -> Table:
    table = Table(title=f"Employees (page {page}/{result.total_pages})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Employee", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Department", style="magenta")
    table.add_column("Position")
    table.add_column("Salary", justify="right")
    table.add_column("Status")

    for record in result.items:
        style = _STATUS_STYLES.get(record.status, "white")
        table.add_row(
            record.id,
            record.employee_id,
            record.display_name,
            record.department,
            record.position,
            _format_salary(record.salary),
            Text(record.status.value, style=style),
        )
    return table


def build_employee_panel(record: EmployeeRecord) -> Panel:
    body = Text()
    body.append(f"{record.display_name}\n", style="bold")
    if record.user and record.user.email:
        body.append(f"{record.user.email}\n", style="dim")
    body.append(f"\nEmployee ID: {record.employee_id}")
    body.append(f"\nDepartment: {record.department}")
    body.append(f"\nPosition: {record.position}")
    body.append(f"\nSalary: {_format_salary(record.salary)}")
    body.append(f"\nPhone: {record.phone_number or '-'}")
    body.append("\nStatus: ")
    body.append(record.status.value, style=_STATUS_STYLES.get(record.status, "white"))
    if record.hire_date:
        body.append(f"\nHired: {record.hire_date.date().isoformat()}")
    return Panel(body, title=Text(record.id, style="dim"), border_style="cyan")


def build_profile_panel(user: UserProfile) -> Panel:
    body = Text()
    body.append(f"{user.full_name}\n", style="bold")
    body.append(f"{user.email}\n", style="dim")
    if user.username:
        body.append(f"\nUsername: {user.username}")
    body.append(f"\nRole: {user.role.label()}")
    body.append(f"\nActive: {'yes' if user.is_active else 'no'}")
    if user.created_at:
        body.append(f"\nMember since: {user.created_at.date().isoformat()}")
    return Panel(body, title=Text("Profile", style="bold yellow"), border_style="yellow")


def build_users_table(users: list[UserProfile]) -> Table:
    table = Table(title="Available users")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Email", style="cyan")
    table.add_column("Role")
    for user in users:
        table.add_row(user.id, user.full_name, user.email, user.role.label())
    return table


def build_stats_table(stats: DashboardStats) -> Table:
    table = Table(title="Dashboard")
    table.add_column("Metric", style="bright_green", no_wrap=True)
    table.add_column("Value", justify="right")
    table.add_row("Total employees", str(stats.total_employees))
    table.add_row("Total users", str(stats.total_users))
    table.add_row("Departments", str(len(stats.department_stats)))
    table.add_row("Recent hires", str(len(stats.recent_hires)))
    return table


def _label_of(entry: dict[str, Any]) -> str:
    for key in ("_id", "name", "department", "range"):
        value = entry.get(key)
        if value:
            return str(value)
    return "-"


def _count_of(entry: dict[str, Any]) -> str:
    for key in ("count", "value", "total"):
        if key in entry:
            return str(entry[key])
    return "-"


def build_distribution_table(title: str, entries: list[dict[str, Any]]) -> Table:
    table = Table(title=title)
    table.add_column("Bucket", style="cyan")
    table.add_column("Count", justify="right")
    for entry in entries:
        table.add_row(_label_of(entry), _count_of(entry))
    return table


def build_chart_tables(chart: ChartData) -> list[Table]:
    tables: list[Table] = []
    if chart.department_distribution:
        tables.append(build_distribution_table("Department distribution", chart.department_distribution))
    if chart.salary_ranges:
        tables.append(build_distribution_table("Salary ranges", chart.salary_ranges))
    return tables


def build_employment_panel(info: dict[str, Any]) -> Panel:
    body = Text()
    body.append(f"Department: {info.get('department', '-')}")
    body.append(f"\nPosition: {info.get('position', '-')}")
    hire_date = info.get("hireDate")
    if hire_date:
        body.append(f"\nHire date: {str(hire_date)[:10]}")
    return Panel(body, title=Text("Your employment", style="bold cyan"), border_style="cyan")


def build_search_table(query: str, hits: list[dict[str, Any]]) -> Table:
    table = Table(title=f"Results for '{query}'")
    table.add_column("Type", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Email / ID", style="cyan")
    for hit in hits:
        user = hit.get("user") if isinstance(hit.get("user"), dict) else hit
        name = f"{user.get('firstName', '')} {user.get('lastName', '')}".strip() or "-"
        table.add_row(
            str(hit.get("type", "-")),
            name,
            str(user.get("email") or hit.get("employeeId") or hit.get("_id") or "-"),
        )
    return table
