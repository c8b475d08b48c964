from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.backend_api import AuthApi, EmployeeApi
from core.domain.models import EmployeeDraft, EmployeeRecord
from core.services.employee_list import (
    CREATE_FALLBACK,
    DELETE_PROMPT,
    FETCH_FALLBACK,
    EmployeeListController,
)

from conftest import StaticConfirmer, employee_payload, json_response, request_json

pytestmark = pytest.mark.unit


def _page(items, pages=1):
    return {"success": True, "data": items, "pagination": {"pages": pages}}


def _list_handler(pages_by_department: dict[str, int] | None = None):
    pages_by_department = pages_by_department or {}

    def _handler(request: httpx.Request) -> httpx.Response:
        department = request.url.params.get("department", "")
        page = int(request.url.params.get("page", "1"))
        record = employee_payload(f"{department or 'all'}-{page}", f"E{page}", department or "IT")
        return json_response(200, _page([record], pages_by_department.get(department, 1)))

    return _handler


@pytest.fixture
def confirmer() -> StaticConfirmer:
    return StaticConfirmer(True)


@pytest.fixture
def controller(client, notifier, confirmer) -> EmployeeListController:
    return EmployeeListController(
        EmployeeApi(client),
        confirmer=confirmer,
        notifier=notifier,
        auth_api=AuthApi(client),
        page_size=10,
    )


def _params(request: httpx.Request) -> dict[str, str]:
    return dict(request.url.params)


class TestQuery:
    async def test_department_change_resets_page(self, controller, backend):
        backend.on("GET", "/employees", _list_handler({"IT": 2, "HR": 1}))

        await controller.set_query(department_filter="IT")
        assert controller.total_pages == 2
        await controller.set_query(page=2)
        await controller.set_query(department_filter="HR")

        calls = [_params(r) for r in backend.calls("GET", "/employees")]
        assert calls[0] == {"page": "1", "limit": "10", "department": "IT"}
        assert calls[1] == {"page": "2", "limit": "10", "department": "IT"}
        assert calls[2] == {"page": "1", "limit": "10", "department": "HR"}
        assert controller.query.page == 1

    async def test_search_change_resets_page(self, controller, backend):
        backend.on("GET", "/employees", _list_handler())

        await controller.set_query(page=3)
        await controller.set_query(search_term="ana")

        assert controller.query.page == 1
        assert controller.query.search_term == "ana"

    async def test_page_change_keeps_filters(self, controller, backend):
        backend.on("GET", "/employees", _list_handler({"IT": 3}))

        await controller.set_query(search_term="dev", department_filter="IT")
        await controller.set_query(page=3)

        assert controller.query.page == 3
        assert controller.query.search_term == "dev"
        assert controller.query.department_filter == "IT"
        assert _params(backend.calls("GET", "/employees")[-1]) == {
            "page": "3",
            "limit": "10",
            "search": "dev",
            "department": "IT",
        }

    async def test_empty_department_means_no_filter(self, controller, backend):
        backend.on("GET", "/employees", _list_handler())

        await controller.set_query(department_filter="IT")
        await controller.set_query(department_filter="")

        assert "department" not in _params(backend.calls("GET", "/employees")[-1])

    async def test_same_filter_value_does_not_reset_page(self, controller, backend):
        backend.on("GET", "/employees", _list_handler({"IT": 2}))

        await controller.set_query(department_filter="IT")
        await controller.set_query(page=2)
        await controller.set_query(department_filter="IT")

        assert controller.query.page == 2

    async def test_query_update_without_refresh(self, controller, backend):
        backend.on("GET", "/employees", _list_handler({"IT": 4}))
        await controller.set_query(page=3)

        assert await controller.set_query(department_filter="IT", refresh=False) is None
        assert controller.query.page == 1
        await controller.set_query(page=3)

        calls = backend.calls("GET", "/employees")
        assert len(calls) == 2
        assert _params(calls[-1]) == {"page": "3", "limit": "10", "department": "IT"}


class TestFetch:
    async def test_stale_response_is_discarded(self, controller, backend):
        gates = {"IT": asyncio.Event(), "HR": asyncio.Event()}

        async def _gated(request: httpx.Request) -> httpx.Response:
            department = request.url.params["department"]
            await gates[department].wait()
            return json_response(200, _page([employee_payload(department, f"E-{department}", department)], 4 if department == "IT" else 2))

        backend.on("GET", "/employees", _gated)

        first = asyncio.create_task(controller.set_query(department_filter="IT"))
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.set_query(department_filter="HR"))
        await asyncio.sleep(0)

        gates["HR"].set()
        assert (await second) is not None
        gates["IT"].set()
        assert (await first) is None

        assert [item.department for item in controller.items] == ["HR"]
        assert controller.total_pages == 2
        assert controller.loading is False

    async def test_superseded_failure_is_not_reported(self, controller, backend, notifier):
        gates = {"IT": asyncio.Event(), "HR": asyncio.Event()}

        async def _gated(request: httpx.Request) -> httpx.Response:
            department = request.url.params["department"]
            await gates[department].wait()
            if department == "IT":
                return json_response(500, {"message": "boom"})
            return json_response(200, _page([employee_payload("HR", "E-HR", "HR")]))

        backend.on("GET", "/employees", _gated)

        first = asyncio.create_task(controller.set_query(department_filter="IT"))
        await asyncio.sleep(0)
        second = asyncio.create_task(controller.set_query(department_filter="HR"))
        await asyncio.sleep(0)

        gates["HR"].set()
        assert (await second) is not None
        gates["IT"].set()
        assert (await first) is None

        assert [item.department for item in controller.items] == ["HR"]
        assert notifier.errors == []

    async def test_latest_failure_reports_server_message(self, controller, backend, notifier):
        backend.on("GET", "/employees", json_response(500, {"message": "boom"}))

        assert await controller.fetch() is None

        assert notifier.errors == ["boom"]

    async def test_failure_keeps_previous_result(self, controller, backend, notifier):
        backend.on("GET", "/employees", _list_handler())
        await controller.fetch()
        previous = controller.result

        backend.on("GET", "/employees", json_response(500, {}))
        assert await controller.fetch() is None

        assert controller.result == previous
        assert notifier.errors == [FETCH_FALLBACK]

    async def test_missing_pagination_defaults_to_one_page(self, controller, backend):
        backend.on("GET", "/employees", json_response(200, {"success": True, "data": []}))

        result = await controller.fetch()

        assert result is not None
        assert result.items == []
        assert result.total_pages == 1


class TestMutations:
    async def test_create_sends_numeric_salary_and_refetches_current_query(self, controller, backend, notifier):
        backend.on("GET", "/employees", _list_handler({"IT": 2}))
        backend.on("POST", "/employees", json_response(201, {"success": True, "data": employee_payload("new", "E100")}))
        await controller.set_query(department_filter="IT")
        await controller.set_query(page=2)
        controller.begin_create()

        result = await controller.create(
            {
                "employee_id": "E100",
                "user_id": "u1",
                "department": "IT",
                "position": "Dev",
                "salary": "75000",
                "phone_number": "555-0100",
            }
        )

        assert result.success is True
        body = request_json(backend.calls("POST", "/employees")[0])
        assert body["salary"] == 75000
        assert isinstance(body["salary"], int)
        assert body["employeeId"] == "E100"
        refetch = backend.calls("GET", "/employees")[-1]
        assert _params(refetch) == {"page": "2", "limit": "10", "department": "IT"}
        assert controller.editor is None
        assert "Employee created successfully!" in notifier.successes

    async def test_create_failure_reports_server_message(self, controller, backend, notifier):
        backend.on("POST", "/employees", json_response(400, {"success": False, "message": "Employee ID already exists"}))
        controller.begin_create()
        draft = EmployeeDraft(employee_id="E1", user_id="u1", department="IT", position="Dev", salary=1)

        result = await controller.create(draft)

        assert result.success is False
        assert result.message == "Employee ID already exists"
        assert notifier.errors == ["Employee ID already exists"]
        assert controller.editor is not None
        assert backend.calls("GET", "/employees") == []

    async def test_create_failure_without_message_uses_fallback(self, controller, backend, notifier):
        backend.on("POST", "/employees", json_response(422, {"success": False}))
        draft = EmployeeDraft(employee_id="E1", user_id="u1", department="IT", position="Dev", salary=1)

        result = await controller.create(draft)

        assert result.message == CREATE_FALLBACK
        assert notifier.errors == [CREATE_FALLBACK]

    async def test_update_refetches(self, controller, backend):
        backend.on("GET", "/employees", _list_handler())
        backend.on("PUT", "/employees/r1", json_response(200, {"success": True, "data": employee_payload("r1", "E1")}))
        record = EmployeeRecord.model_validate(employee_payload("r1", "E1"))
        editor = controller.begin_edit(record)
        assert editor.is_edit and editor.draft["user_id"] == "user-r1"

        result = await controller.update("r1", {**editor.draft, "salary": "80000"})

        assert result.success is True
        assert request_json(backend.calls("PUT", "/employees/r1")[0])["salary"] == 80000
        assert len(backend.calls("GET", "/employees")) == 1
        assert controller.editor is None

    async def test_delete_declined_makes_no_calls(self, controller, backend, confirmer):
        confirmer.answer = False

        result = await controller.delete("r1")

        assert result.success is False
        assert confirmer.prompts == [DELETE_PROMPT]
        assert backend.requests == []

    async def test_delete_confirmed_deletes_then_fetches_once(self, controller, backend):
        backend.on("DELETE", "/employees/r1", json_response(200, {"success": True}))
        backend.on("GET", "/employees", _list_handler())

        result = await controller.delete("r1")

        assert result.success is True
        assert [(r.method, r.url.path) for r in backend.requests] == [
            ("DELETE", "/api/employees/r1"),
            ("GET", "/api/employees"),
        ]


class TestLookups:
    async def test_available_users_failure_is_silent(self, controller, backend, notifier):
        backend.on("GET", "/auth/users/available", httpx.Response(200, text="not json"))

        users = await controller.load_available_users()

        assert users == []

    async def test_available_users(self, controller, backend):
        backend.on(
            "GET",
            "/auth/users/available",
            json_response(200, {"success": True, "data": [{"_id": "u9", "email": "new@example.com"}]}),
        )

        users = await controller.load_available_users()

        assert [u.id for u in users] == ["u9"]

    async def test_get_single_record(self, controller, backend):
        backend.on("GET", "/employees/r7", json_response(200, {"success": True, "data": employee_payload("r7", "E7")}))

        record = await controller.get("r7")

        assert record is not None
        assert record.employee_id == "E7"
        assert record.linked_user_id == "user-r7"
