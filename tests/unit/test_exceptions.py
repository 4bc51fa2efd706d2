"""
Unit tests for custom exceptions.

This module tests the application exception hierarchy, status codes and
the structured detail handed to the HTTP exception handler.
"""

from datetime import datetime

from fastapi import HTTPException

from app.exceptions.base import (
    AppPermissionError,
    BaseAppException,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.exceptions.project import (
    ChecklistIncompleteError,
    ChecklistItemNotFoundError,
    DevLeadRequiredError,
    IllegalTransitionError,
    InvalidBatchRequestError,
    InvalidDeadlineError,
    LeadRoleMismatchError,
    LeadRoleUnfilledError,
    LifecyclePermissionError,
    ProjectNotFoundError,
    TeamMemberNotFoundError,
    UserNotFoundError,
)


class TestBaseAppException:
    """Test cases for BaseAppException."""

    def test_defaults(self):
        exc = BaseAppException("Something broke")

        assert isinstance(exc, HTTPException)
        assert exc.status_code == 500
        assert exc.error_code == "INTERNAL_ERROR"
        assert exc.details == {}
        assert exc.detail == {
            "message": "Something broke",
            "error_code": "INTERNAL_ERROR",
            "details": None,
        }

    def test_with_details(self):
        exc = BaseAppException("Bad", status_code=400, error_code="BAD", details={"field": "x"})

        assert exc.status_code == 400
        assert exc.detail["details"] == {"field": "x"}


class TestGenericExceptions:
    """Test cases for the generic HTTP-mapped exceptions."""

    def test_not_found(self):
        exc = NotFoundError()
        assert exc.status_code == 404
        assert exc.error_code == "NOT_FOUND"

    def test_permission(self):
        exc = AppPermissionError()
        assert exc.status_code == 403
        assert exc.error_code == "PERMISSION_DENIED"

    def test_validation(self):
        exc = ValidationError("Nope")
        assert exc.status_code == 422
        assert exc.message == "Nope"


class TestConflictError:
    """Test cases for ConflictError."""

    def test_carries_versions_and_timestamp(self):
        updated_at = datetime(2026, 5, 4, 12, 30)

        exc = ConflictError(current_version=4, expected_version=3, updated_at=updated_at)

        assert exc.status_code == 409
        assert exc.error_code == "VERSION_CONFLICT"
        assert exc.details == {
            "current_version": 4,
            "expected_version": 3,
            "updated_at": "2026-05-04T12:30:00",
        }
        assert "Refresh" in exc.message

    def test_without_timestamp(self):
        exc = ConflictError(current_version=None, expected_version=1)

        assert exc.details["updated_at"] is None


class TestLifecycleExceptions:
    """Test cases for lifecycle exception codes."""

    def test_not_found_family(self):
        for exc_class, code in [
            (ProjectNotFoundError, "PROJECT_NOT_FOUND"),
            (UserNotFoundError, "USER_NOT_FOUND"),
            (TeamMemberNotFoundError, "TEAM_MEMBER_NOT_FOUND"),
            (ChecklistItemNotFoundError, "CHECKLIST_ITEM_NOT_FOUND"),
        ]:
            exc = exc_class()
            assert isinstance(exc, NotFoundError)
            assert exc.status_code == 404
            assert exc.error_code == code

    def test_validation_family(self):
        for exc_class, code in [
            (IllegalTransitionError, "ILLEGAL_STAGE_TRANSITION"),
            (ChecklistIncompleteError, "CHECKLIST_INCOMPLETE"),
            (LeadRoleUnfilledError, "LEAD_ROLE_UNFILLED"),
            (DevLeadRequiredError, "DEV_LEAD_REQUIRED"),
            (LeadRoleMismatchError, "LEAD_ROLE_MISMATCH"),
            (InvalidDeadlineError, "INVALID_DEADLINE"),
            (InvalidBatchRequestError, "INVALID_BATCH_REQUEST"),
        ]:
            exc = exc_class()
            assert isinstance(exc, ValidationError)
            assert exc.status_code == 422
            assert exc.error_code == code

    def test_permission(self):
        exc = LifecyclePermissionError("Only admins")

        assert isinstance(exc, AppPermissionError)
        assert exc.status_code == 403
        assert exc.error_code == "LIFECYCLE_PERMISSION_DENIED"
        assert exc.message == "Only admins"
