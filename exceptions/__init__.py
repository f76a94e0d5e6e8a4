"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AccessDeniedError,
    ExternalServiceError,
    DatabaseError,

    # Request context
    ContextUnavailableError,

    # Job items
    JobItemNotFoundError,
    JobItemInProgressError,
    JobItemValidationError,

    # Mappings
    MappingNotFoundError,

    # Connectors
    ConnectorSettingsNotFoundError,
    ConnectorSettingsValidationError,
    ConnectorTestError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AccessDeniedError",
    "ExternalServiceError",
    "DatabaseError",

    # Request context
    "ContextUnavailableError",

    # Job items
    "JobItemNotFoundError",
    "JobItemInProgressError",
    "JobItemValidationError",

    # Mappings
    "MappingNotFoundError",

    # Connectors
    "ConnectorSettingsNotFoundError",
    "ConnectorSettingsValidationError",
    "ConnectorTestError",
]
