"""
Custom exception classes for the application.

Every error carries a code, a human-readable message and an HTTP status.
Callers branch on the class or the code, never on the message text.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "JOB_ITEM_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with the current state of a resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class AccessDeniedError(AppError):
    """Caller lacks the required permission (403)."""

    def __init__(
        self,
        message: str = "Access Denied",
        code: str = "ACCESS_DENIED",
        status_code: int = 403,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# REQUEST CONTEXT ERRORS
# ===================

class ContextUnavailableError(AccessDeniedError):
    """Tenant or user is missing from the request context (401)."""

    def __init__(self, missing: list[str]):
        super().__init__(
            code="CONTEXT_UNAVAILABLE",
            message=f"Request context is missing: {', '.join(missing)}",
            status_code=401,
            details={"missing": missing}
        )


# ===================
# JOB ITEM ERRORS
# ===================

class JobItemNotFoundError(NotFoundError):
    """Job item not found."""

    def __init__(self, job_item_id: str):
        super().__init__(
            resource="Job item",
            identifier=job_item_id,
            code="JOB_ITEM_NOT_FOUND"
        )


class JobItemInProgressError(ConflictError):
    """Job item is being processed and can't be removed."""

    def __init__(self, job_item_id: str):
        super().__init__(
            code="JOB_ITEM_IN_PROGRESS",
            message="Job item is in progress and can't be deleted.",
            details={"id": job_item_id, "status": "inProgress"}
        )


class JobItemValidationError(ValidationError):
    """Job item submission is missing or has malformed fields."""

    def __init__(self, errors: list[dict]):
        fields = []
        for error in errors:
            if error["field"] not in fields:
                fields.append(error["field"])
        super().__init__(
            code="JOB_ITEM_INVALID",
            message=f"Invalid job item: {', '.join(fields)}",
            details={"fields": fields, "errors": errors}
        )


# ===================
# MAPPING ERRORS
# ===================

class MappingNotFoundError(NotFoundError):
    """Mapping template not found."""

    def __init__(self, mapping_id: str):
        super().__init__(
            resource="Mapping",
            identifier=mapping_id,
            code="MAPPING_NOT_FOUND"
        )


# ===================
# CONNECTOR ERRORS
# ===================

class ConnectorSettingsNotFoundError(NotFoundError):
    """Connector settings have not been configured yet."""

    def __init__(self, name: str):
        super().__init__(
            resource="Connector settings",
            identifier=name,
            code="CONNECTOR_SETTINGS_NOT_FOUND"
        )


class ConnectorSettingsValidationError(ValidationError):
    """Connector settings payload is invalid."""

    def __init__(self, name: str, errors: list[dict]):
        super().__init__(
            code="CONNECTOR_SETTINGS_INVALID",
            message=f"Invalid settings for {name}",
            details={"name": name, "fields": [e["field"] for e in errors], "errors": errors}
        )


class ConnectorTestError(ExternalServiceError):
    """Credential test against S3 or SFTP failed."""

    def __init__(self, service: str, message: str, details: Optional[dict] = None):
        super().__init__(
            service=service,
            message=message,
            details=details
        )
