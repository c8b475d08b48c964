"""Endpoints tipados del backend.

Una clase por área (auth, empleados, dashboard). Todas delegan en `ApiClient`,
así que heredan el token, el manejo de 401 y las notificaciones de error.
"""

from __future__ import annotations

from typing import Any

from adapters.api_client import ApiClient
from core.domain.models import (
    ApiEnvelope,
    ChartData,
    DashboardStats,
    EmployeeDraft,
    EmployeeListQuery,
)


class AuthApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def login(self, email: str, password: str, *, error_fallback: str | None = None) -> ApiEnvelope:
        return await self._client.post(
            "/auth/login",
            json={"email": email, "password": password},
            error_fallback=error_fallback,
            authenticated=False,
        )

    async def register(self, payload: dict[str, Any]) -> ApiEnvelope:
        return await self._client.post(
            "/auth/register",
            json=payload,
            error_fallback="Registration failed. Please try again.",
            authenticated=False,
        )

    async def me(self) -> ApiEnvelope:
        return await self._client.get("/auth/me")

    async def update_profile(self, data: dict[str, Any], *, error_fallback: str | None = None) -> ApiEnvelope:
        return await self._client.put("/auth/profile", json=data, error_fallback=error_fallback)

    async def change_password(
        self,
        current_password: str,
        new_password: str,
        *,
        error_fallback: str | None = None,
    ) -> ApiEnvelope:
        return await self._client.post(
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
            error_fallback=error_fallback,
        )

    async def available_users(self) -> ApiEnvelope:
        return await self._client.get("/auth/users/available")


class EmployeeApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list_page(
        self,
        query: EmployeeListQuery,
        *,
        error_fallback: str | None = None,
        notify: bool = True,
    ) -> ApiEnvelope:
        return await self._client.get(
            "/employees",
            params=query.to_params(),
            error_fallback=error_fallback,
            notify=notify,
        )

    async def get(self, employee_id: str) -> ApiEnvelope:
        return await self._client.get(
            f"/employees/{employee_id}",
            error_fallback="Failed to load employee",
        )

    async def create(self, draft: EmployeeDraft, *, error_fallback: str | None = None) -> ApiEnvelope:
        return await self._client.post(
            "/employees",
            json=draft.to_payload(),
            error_fallback=error_fallback,
        )

    async def update(
        self,
        employee_id: str,
        draft: EmployeeDraft,
        *,
        error_fallback: str | None = None,
    ) -> ApiEnvelope:
        return await self._client.put(
            f"/employees/{employee_id}",
            json=draft.to_payload(),
            error_fallback=error_fallback,
        )

    async def delete(self, employee_id: str, *, error_fallback: str | None = None) -> ApiEnvelope:
        return await self._client.delete(f"/employees/{employee_id}", error_fallback=error_fallback)

    async def department_stats(self) -> list[dict[str, Any]]:
        envelope = await self._client.get(
            "/employees/departments/stats",
            error_fallback="Failed to load department statistics",
        )
        return envelope.data if isinstance(envelope.data, list) else []


class DashboardApi:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def stats(self) -> DashboardStats:
        envelope = await self._client.get(
            "/dashboard/stats",
            error_fallback="Failed to load dashboard statistics",
        )
        return DashboardStats.model_validate(envelope.data if isinstance(envelope.data, dict) else {})

    async def chart_data(self) -> ChartData:
        envelope = await self._client.get(
            "/dashboard/employees/chart",
            error_fallback="Failed to load chart data",
        )
        return ChartData.model_validate(envelope.data if isinstance(envelope.data, dict) else {})

    async def search(self, query: str, search_type: str | None = None) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"query": query}
        if search_type:
            params["type"] = search_type
        envelope = await self._client.get(
            "/dashboard/search",
            params=params,
            error_fallback="Search failed",
        )
        return envelope.data if isinstance(envelope.data, list) else []
