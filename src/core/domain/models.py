"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta en el borde (payloads del backend y borradores
  del usuario) sin acoplar el Core a librerías de I/O.
- El backend habla camelCase y usa `_id`; los alias lo resuelven en un único sitio.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

from core.domain.roles import Role

DEPARTMENTS: tuple[str, ...] = (
    "IT",
    "HR",
    "Finance",
    "Marketing",
    "Sales",
    "Operations",
    "Engineering",
)

_WIRE_CONFIG = ConfigDict(
    extra="ignore",
    populate_by_name=True,
    alias_generator=to_camel,
)


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class UserProfile(BaseModel):
    """Identidad del usuario autenticado.

    Inmutable desde el cliente salvo vía `update_profile`, que la reemplaza
    entera con la respuesta del servidor.
    """

    model_config = ConfigDict(**_WIRE_CONFIG, frozen=True)

    id: str = Field(
        ...,
        validation_alias=AliasChoices("_id", "id"),
        description="Identificador del usuario en el backend.",
    )
    first_name: str = Field(default="", description="Nombre.")
    last_name: str = Field(default="", description="Apellidos.")
    email: str = Field(..., min_length=3, description="Email de acceso.")
    username: str | None = Field(default=None, description="Handle del usuario.")
    role: Role = Field(default=Role.EMPLOYEE, description="Rol asignado por el backend.")
    is_active: bool = Field(default=True, description="Cuenta habilitada.")
    created_at: datetime | None = Field(default=None, description="Alta de la cuenta.")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email


class EmployeeUserSummary(BaseModel):
    """Resumen desnormalizado del usuario embebido en un `EmployeeRecord`."""

    model_config = _WIRE_CONFIG

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    role: Role | None = None


class EmployeeRecord(BaseModel):
    """Ficha de empleado tal como la devuelve el backend."""

    model_config = _WIRE_CONFIG

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    employee_id: str = Field(..., min_length=1, description="Clave de negocio (única).")
    user: EmployeeUserSummary | None = Field(
        default=None,
        description="Usuario vinculado (desnormalizado para mostrar).",
    )
    department: str = ""
    position: str = ""
    salary: float = Field(default=0, ge=0)
    phone_number: str = ""
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    hire_date: datetime | None = None

    @property
    def linked_user_id(self) -> str | None:
        return self.user.id if self.user else None

    @property
    def display_name(self) -> str:
        if self.user is None:
            return "-"
        name = f"{self.user.first_name} {self.user.last_name}".strip()
        return name or (self.user.email or "-")


class EmployeeDraft(BaseModel):
    """Payload de alta/edición de un empleado.

    `salary` se coerciona a número antes de enviarse: un valor no numérico o
    negativo falla aquí (ValidationError) y nunca llega a la red.
    """

    model_config = _WIRE_CONFIG

    employee_id: str = Field(..., min_length=1)
    user_id: str = Field(default="")
    department: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    salary: float = Field(..., ge=0)
    phone_number: str = Field(default="")

    @field_validator("salary", mode="before")
    @classmethod
    def _coerce_salary(cls, value: Any) -> Any:
        if isinstance(value, str):
            text = value.strip().replace(",", "")
            if not text:
                raise ValueError("salary is required")
            return float(text)
        return value

    @field_serializer("salary")
    def _serialize_salary(self, value: float) -> int | float:
        return int(value) if float(value).is_integer() else value

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> "EmployeeDraft":
        return cls(
            employee_id=record.employee_id,
            user_id=record.linked_user_id or "",
            department=record.department,
            position=record.position,
            salary=record.salary,
            phone_number=record.phone_number,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class EmployeeListQuery(BaseModel):
    """Estado de consulta del listado (página, búsqueda, filtro)."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    search_term: str = ""
    department_filter: str = ""

    def to_params(self) -> dict[str, Any]:
        """Query params salientes; filtros vacíos significan "sin filtro" y se omiten."""

        params: dict[str, Any] = {"page": self.page, "limit": self.page_size}
        if self.search_term.strip():
            params["search"] = self.search_term.strip()
        if self.department_filter.strip():
            params["department"] = self.department_filter.strip()
        return params


class EmployeeListResult(BaseModel):
    items: list[EmployeeRecord] = Field(default_factory=list)
    total_pages: int = Field(default=1, ge=1)


class Pagination(BaseModel):
    model_config = ConfigDict(extra="ignore")

    pages: int = Field(default=1)
    page: int | None = None
    total: int | None = None


class ApiEnvelope(BaseModel):
    """Sobre JSON común del backend: `{success, message?, data?, pagination?}`."""

    model_config = ConfigDict(extra="ignore")

    success: bool = True
    message: str | None = None
    data: Any = None
    pagination: Pagination | None = None


class OperationResult(BaseModel):
    """Resultado de una operación de servicio; nunca se lanza como excepción."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str | None = None

    @classmethod
    def ok(cls, message: str | None = None) -> "OperationResult":
        return cls(success=True, message=message)

    @classmethod
    def failed(cls, message: str | None) -> "OperationResult":
        return cls(success=False, message=message)


class DashboardStats(BaseModel):
    """Estadísticas de la home (la forma depende del rol del usuario)."""

    model_config = _WIRE_CONFIG

    total_employees: int = 0
    total_users: int = 0
    department_stats: list[dict[str, Any]] = Field(default_factory=list)
    recent_hires: list[dict[str, Any]] = Field(default_factory=list)
    employee_info: dict[str, Any] | None = None


class ChartData(BaseModel):
    model_config = _WIRE_CONFIG

    department_distribution: list[dict[str, Any]] = Field(default_factory=list)
    salary_ranges: list[dict[str, Any]] = Field(default_factory=list)
