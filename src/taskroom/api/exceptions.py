"""Custom exceptions for API layer.

Every outcome a service can report maps to one subclass here so routers
and the WebSocket handler can render it with a stable ``code``.
"""

from typing import Any

from fastapi import HTTPException


class APIError(HTTPException):
    """Base exception for API errors.

    Extends HTTPException for native FastAPI integration.
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        detail: Any = None,
    ) -> None:
        """Initialize API error.

        Args:
            message: Error message
            code: Error code
            status_code: HTTP status code
            detail: Additional detail information
        """
        super().__init__(
            status_code=status_code,
            detail={"message": message, "code": code, "detail": detail},
        )
        self.message = message
        self.code = code


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource: Resource type (e.g., "Project", "Task", "User")
            resource_id: Resource identifier
        """
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"{resource} '{resource_id}' does not exist",
        )
        self.resource = resource
        self.resource_id = resource_id


class AuthenticationError(APIError):
    """Authentication error."""

    def __init__(
        self,
        message: str = "Not authenticated",
        detail: str | None = None,
    ) -> None:
        """Initialize authentication error.

        Args:
            message: Error message
            detail: Additional detail
        """
        super().__init__(
            message=message,
            code="AUTHENTICATION_ERROR",
            status_code=401,
            detail=detail,
        )


class AccessDeniedError(APIError):
    """Actor lacks the capability required for the action."""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
    ) -> None:
        """Initialize access denied error.

        Args:
            resource: Resource type
            resource_id: Resource identifier
        """
        super().__init__(
            message="Access denied",
            code="ACCESS_DENIED",
            status_code=403,
            detail=f"You do not have access to {resource} '{resource_id}'",
        )
        self.resource = resource
        self.resource_id = resource_id


class InvalidCollaboratorError(APIError):
    """The project creator cannot be added as a collaborator."""

    def __init__(self, project_id: Any, user_id: str) -> None:
        """Initialize invalid collaborator error.

        Args:
            project_id: Project identifier
            user_id: Rejected user
        """
        super().__init__(
            message="The project creator can not be a collaborator",
            code="INVALID_COLLABORATOR",
            status_code=400,
            detail=f"User '{user_id}' created project '{project_id}'",
        )
        self.user_id = user_id


class DuplicateCollaboratorError(APIError):
    """The user already collaborates on the project."""

    def __init__(self, project_id: Any, user_id: str) -> None:
        """Initialize duplicate collaborator error.

        Args:
            project_id: Project identifier
            user_id: User already on the project
        """
        super().__init__(
            message="The user already belongs to the project",
            code="DUPLICATE_COLLABORATOR",
            status_code=409,
            detail=f"User '{user_id}' already collaborates on project '{project_id}'",
        )
        self.user_id = user_id


class PartialFailureError(APIError):
    """One of two coupled writes succeeded and the other did not.

    Clients should re-fetch the project instead of assuming either full
    success or full rollback.
    """

    def __init__(
        self,
        operation: str,
        completed: list[str],
        failed: list[str],
    ) -> None:
        """Initialize partial failure error.

        Args:
            operation: Operation that was running (e.g. "create_task")
            completed: Steps that were persisted
            failed: Steps that were not persisted
        """
        super().__init__(
            message=f"{operation} partially failed",
            code="PARTIAL_FAILURE",
            status_code=500,
            detail={"completed": completed, "failed": failed},
        )
        self.operation = operation
        self.completed = completed
        self.failed = failed


class ConflictError(APIError):
    """Resource conflict error."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        detail: str | None = None,
    ) -> None:
        """Initialize conflict error.

        Args:
            resource: Resource type
            identifier: Resource identifier causing conflict
            detail: Additional detail
        """
        super().__init__(
            message=f"{resource} already exists",
            code="CONFLICT",
            status_code=409,
            detail=detail or f"{resource} with identifier '{identifier}' already exists",
        )
