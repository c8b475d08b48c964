"""List Query Controller del listado de empleados.

Mantiene la consulta (página, búsqueda, departamento), el último resultado
aplicado y el estado del editor. Las mutaciones son pasarelas al backend
seguidas de un re-fetch completo: el servidor es la única fuente de verdad.

Orden de respuestas:
- Cada `fetch()` recibe un número de secuencia creciente; solo se aplica la
  respuesta del fetch emitido más recientemente. Las respuestas obsoletas se
  descartan aunque lleguen después.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from adapters.backend_api import AuthApi, EmployeeApi
from core.domain.models import (
    EmployeeDraft,
    EmployeeListQuery,
    EmployeeListResult,
    EmployeeRecord,
    OperationResult,
    UserProfile,
)
from core.errors import ApiError, SessionExpiredError
from core.interfaces.ui import Confirmer, NullNotifier, Notifier

logger = logging.getLogger(__name__)

FETCH_FALLBACK = "Failed to fetch employees"
CREATE_FALLBACK = "Failed to create employee. Please check all required fields."
UPDATE_FALLBACK = "Failed to update employee. Please check all required fields."
DELETE_FALLBACK = "Failed to delete employee"
DELETE_PROMPT = "Are you sure you want to delete this employee?"

_UNSET: Any = object()


@dataclass(frozen=True)
class EditorState:
    """Formulario abierto: alta (`record is None`) o edición de `record`."""

    draft: dict[str, Any]
    record: EmployeeRecord | None = None

    @property
    def is_edit(self) -> bool:
        return self.record is not None


def _empty_form() -> dict[str, Any]:
    return {
        "employee_id": "",
        "user_id": "",
        "department": "",
        "position": "",
        "salary": "",
        "phone_number": "",
    }


class EmployeeListController:
    def __init__(
        self,
        employees: EmployeeApi,
        *,
        confirmer: Confirmer,
        notifier: Notifier | None = None,
        auth_api: AuthApi | None = None,
        page_size: int = 10,
    ) -> None:
        self._employees = employees
        self._auth = auth_api
        self._confirmer = confirmer
        self._notifier = notifier or NullNotifier()
        self._query = EmployeeListQuery(page_size=page_size)
        self._result = EmployeeListResult()
        self._editor: EditorState | None = None
        self._sequence = itertools.count(1)
        self._latest_issued = 0
        self._in_flight = 0

    @property
    def query(self) -> EmployeeListQuery:
        return self._query

    @property
    def result(self) -> EmployeeListResult:
        return self._result

    @property
    def items(self) -> list[EmployeeRecord]:
        return self._result.items

    @property
    def total_pages(self) -> int:
        return self._result.total_pages

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def editor(self) -> EditorState | None:
        return self._editor

    async def set_query(
        self,
        *,
        page: int = _UNSET,
        search_term: str = _UNSET,
        department_filter: str = _UNSET,
        refresh: bool = True,
    ) -> EmployeeListResult | None:
        """Mezcla cambios en la consulta y relanza el fetch.

        Cambiar búsqueda o departamento vuelve siempre a la página 1. Con
        `refresh=False` solo se actualiza la consulta.
        """

        update: dict[str, Any] = {}
        if search_term is not _UNSET:
            update["search_term"] = search_term
        if department_filter is not _UNSET:
            update["department_filter"] = department_filter

        filters_changed = any(getattr(self._query, k) != v for k, v in update.items())
        if filters_changed:
            update["page"] = 1
        elif page is not _UNSET:
            if page < 1:
                raise ValueError("page must be >= 1")
            update["page"] = page

        self._query = self._query.model_copy(update=update)
        if not refresh:
            return None
        return await self.fetch()

    async def fetch(self) -> EmployeeListResult | None:
        """Consulta la página actual; devuelve el resultado si se aplicó."""

        sequence = next(self._sequence)
        self._latest_issued = sequence
        query = self._query
        self._in_flight += 1
        try:
            envelope = await self._employees.list_page(query, error_fallback=FETCH_FALLBACK, notify=False)
            items = [EmployeeRecord.model_validate(raw) for raw in (envelope.data or [])]
        except ApiError as exc:
            logger.info("Employee fetch #%d failed: %s", sequence, exc.message)
            # La expiración de sesión ya la notifica el cliente.
            if sequence == self._latest_issued and not isinstance(exc, SessionExpiredError):
                self._notifier.error(exc.message)
            return None
        except (TypeError, ValidationError) as exc:
            if sequence == self._latest_issued:
                self._notifier.error(FETCH_FALLBACK)
            logger.warning("Employee fetch #%d returned malformed records: %s", sequence, exc)
            return None
        finally:
            self._in_flight -= 1

        if sequence != self._latest_issued:
            logger.debug("Discarding stale employee fetch #%d (latest #%d)", sequence, self._latest_issued)
            return None

        pages = envelope.pagination.pages if envelope.pagination else 1
        self._result = EmployeeListResult(items=items, total_pages=max(1, pages))
        return self._result

    async def get(self, employee_id: str) -> EmployeeRecord | None:
        try:
            envelope = await self._employees.get(employee_id)
            return EmployeeRecord.model_validate(envelope.data)
        except ApiError:
            return None
        except ValidationError as exc:
            logger.warning("Employee %s returned a malformed record: %s", employee_id, exc)
            return None

    async def load_available_users(self) -> list[UserProfile]:
        """Usuarios aún sin ficha de empleado. Un fallo da lista vacía."""

        if self._auth is None:
            return []
        try:
            envelope = await self._auth.available_users()
            return [UserProfile.model_validate(raw) for raw in (envelope.data or [])]
        except (ApiError, TypeError, ValidationError) as exc:
            logger.info("Failed to fetch available users: %s", exc)
            return []

    def begin_create(self) -> EditorState:
        self._editor = EditorState(draft=_empty_form())
        return self._editor

    def begin_edit(self, record: EmployeeRecord) -> EditorState:
        draft = EmployeeDraft.from_record(record).model_dump()
        self._editor = EditorState(draft=draft, record=record)
        return self._editor

    def cancel_edit(self) -> None:
        self._editor = None

    async def create(self, draft: EmployeeDraft | dict[str, Any]) -> OperationResult:
        payload = draft if isinstance(draft, EmployeeDraft) else EmployeeDraft.model_validate(draft)
        try:
            await self._employees.create(payload, error_fallback=CREATE_FALLBACK)
        except ApiError as exc:
            return OperationResult.failed(exc.server_message or CREATE_FALLBACK)
        return await self._after_mutation("Employee created successfully!")

    async def update(self, employee_id: str, draft: EmployeeDraft | dict[str, Any]) -> OperationResult:
        payload = draft if isinstance(draft, EmployeeDraft) else EmployeeDraft.model_validate(draft)
        try:
            await self._employees.update(employee_id, payload, error_fallback=UPDATE_FALLBACK)
        except ApiError as exc:
            return OperationResult.failed(exc.server_message or UPDATE_FALLBACK)
        return await self._after_mutation("Employee updated successfully!")

    async def delete(self, employee_id: str) -> OperationResult:
        if not self._confirmer.confirm(DELETE_PROMPT):
            return OperationResult.failed("Deletion cancelled")
        try:
            await self._employees.delete(employee_id, error_fallback=DELETE_FALLBACK)
        except ApiError as exc:
            return OperationResult.failed(exc.server_message or DELETE_FALLBACK)
        return await self._after_mutation("Employee deleted successfully!")

    async def _after_mutation(self, message: str) -> OperationResult:
        self._notifier.success(message)
        self._editor = None
        await self.fetch()
        return OperationResult.ok(message)
