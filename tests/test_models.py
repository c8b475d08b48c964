from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.domain.models import EmployeeDraft, EmployeeListQuery, EmployeeRecord, UserProfile
from core.domain.roles import Capability, Role, has_capability
from core.domain.session import Session, SessionState

from conftest import ADMIN_USER, employee_payload

pytestmark = pytest.mark.unit


class TestEmployeeDraft:
    def test_salary_string_is_sent_as_number(self):
        draft = EmployeeDraft(
            employee_id="E100",
            user_id="u1",
            department="IT",
            position="Dev",
            salary="75000",
            phone_number="555-0100",
        )
        payload = draft.to_payload()
        assert payload == {
            "employeeId": "E100",
            "userId": "u1",
            "department": "IT",
            "position": "Dev",
            "salary": 75000,
            "phoneNumber": "555-0100",
        }
        assert isinstance(payload["salary"], int)

    def test_fractional_salary_keeps_decimals(self):
        draft = EmployeeDraft(employee_id="E1", department="HR", position="Clerk", salary="1234.5")
        assert draft.to_payload()["salary"] == 1234.5

    @pytest.mark.parametrize("salary", ["abc", "", "-10"])
    def test_invalid_salary_is_rejected_before_sending(self, salary):
        with pytest.raises(ValidationError):
            EmployeeDraft(employee_id="E1", department="HR", position="Clerk", salary=salary)

    def test_from_record_prefills_linked_user(self):
        record = EmployeeRecord.model_validate(employee_payload("r1", "E1"))
        draft = EmployeeDraft.from_record(record)
        assert draft.user_id == "user-r1"
        assert draft.salary == 70000


class TestEmployeeListQuery:
    def test_empty_filters_are_omitted(self):
        query = EmployeeListQuery(page=2, page_size=10)
        assert query.to_params() == {"page": 2, "limit": 10}

    def test_filters_are_sent_when_present(self):
        query = EmployeeListQuery(search_term=" ana ", department_filter="HR")
        assert query.to_params() == {"page": 1, "limit": 10, "search": "ana", "department": "HR"}

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            EmployeeListQuery(page=0)


class TestUserProfile:
    def test_parses_backend_shape(self):
        user = UserProfile.model_validate(ADMIN_USER)
        assert user.id == "u-admin"
        assert user.first_name == "Ada"
        assert user.role is Role.ADMIN
        assert user.is_active is True
        assert user.created_at is not None

    def test_accepts_plain_id(self):
        user = UserProfile.model_validate({"id": "42", "email": "x@example.com"})
        assert user.id == "42"
        assert user.role is Role.EMPLOYEE


class TestSession:
    def test_authenticated_requires_user(self):
        with pytest.raises(ValidationError):
            Session(state=SessionState.AUTHENTICATED)

    def test_anonymous_cannot_carry_user(self):
        user = UserProfile.model_validate(ADMIN_USER)
        with pytest.raises(ValidationError):
            Session(state=SessionState.ANONYMOUS, user=user)

    def test_flags_follow_state(self):
        assert Session.initializing().loading is True
        assert Session.anonymous().loading is False
        assert Session.transitioning().is_authenticated is False
        user = UserProfile.model_validate(ADMIN_USER)
        assert Session.authenticated(user).is_authenticated is True


class TestCapabilities:
    def test_only_admin_can_delete(self):
        assert has_capability(Role.ADMIN, Capability.DELETE_EMPLOYEES)
        assert not has_capability(Role.MANAGER, Capability.DELETE_EMPLOYEES)
        assert not has_capability(Role.EMPLOYEE, Capability.DELETE_EMPLOYEES)

    def test_admin_and_manager_manage_employees(self):
        assert has_capability("admin", Capability.MANAGE_EMPLOYEES)
        assert has_capability("manager", Capability.MANAGE_EMPLOYEES)
        assert not has_capability("employee", Capability.MANAGE_EMPLOYEES)

    def test_unknown_role_grants_nothing(self):
        assert not has_capability("auditor", Capability.VIEW_ORG_STATS)
        assert not has_capability(None, Capability.VIEW_ORG_STATS)
