# ruff: noqa: D107
"""Project lifecycle exceptions."""

from .base import AppPermissionError, NotFoundError, ValidationError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project does not exist or belongs to another tenant."""

    def __init__(self, message: str = "Project not found"):
        super().__init__(message=message, error_code="PROJECT_NOT_FOUND")


class UserNotFoundError(NotFoundError):
    """Raised when a referenced user does not exist in the caller's tenant."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class TeamMemberNotFoundError(NotFoundError):
    """Raised when a team member does not exist on the project."""

    def __init__(self, message: str = "Team member not found"):
        super().__init__(message=message, error_code="TEAM_MEMBER_NOT_FOUND")


class ChecklistItemNotFoundError(NotFoundError):
    """Raised when a checklist item id is not in the active checklist."""

    def __init__(self, message: str = "Checklist item not found"):
        super().__init__(message=message, error_code="CHECKLIST_ITEM_NOT_FOUND")


class IllegalTransitionError(ValidationError):
    """Raised when a requested stage is not the legal next stage."""

    def __init__(self, message: str = "Illegal stage transition"):
        super().__init__(message=message, error_code="ILLEGAL_STAGE_TRANSITION")


class ChecklistIncompleteError(ValidationError):
    """Raised when the active checklist is empty or has open items."""

    def __init__(self, message: str = "Checklist incomplete"):
        super().__init__(message=message, error_code="CHECKLIST_INCOMPLETE")


class LeadRoleUnfilledError(ValidationError):
    """Raised when a project is started without all three leads."""

    def __init__(self, message: str = "Lead role unfilled"):
        super().__init__(message=message, error_code="LEAD_ROLE_UNFILLED")


class DevLeadRequiredError(ValidationError):
    """Raised when a transition would score points but no dev lead is assigned."""

    def __init__(self, message: str = "Assign a Dev Lead before recording outcomes"):
        super().__init__(message=message, error_code="DEV_LEAD_REQUIRED")


class LeadRoleMismatchError(ValidationError):
    """Raised when a user's role does not fit the lead slot."""

    def __init__(self, message: str = "User role does not match the lead slot"):
        super().__init__(message=message, error_code="LEAD_ROLE_MISMATCH")


class InvalidDeadlineError(ValidationError):
    """Raised for a past deadline or a too-short justification."""

    def __init__(self, message: str = "Invalid deadline change"):
        super().__init__(message=message, error_code="INVALID_DEADLINE")


class InvalidBatchRequestError(ValidationError):
    """Raised when a batch request is malformed as a whole."""

    def __init__(self, message: str = "Invalid batch operation request"):
        super().__init__(message=message, error_code="INVALID_BATCH_REQUEST")


class LifecyclePermissionError(AppPermissionError):
    """Raised when the caller's role may not perform a lifecycle operation."""

    def __init__(self, message: str = "You are not allowed to perform this action"):
        super().__init__(message=message, error_code="LIFECYCLE_PERMISSION_DENIED")
