"""
Permission checks for privileged operations.

Permissions arrive with the request context. Holding "owner" grants
every permission.
"""

from typing import Optional
import structlog

from models.context import RequestContext
from exceptions import AccessDeniedError, ContextUnavailableError

logger = structlog.get_logger(__name__)

OWNER_PERMISSION = "owner"


def require_identity(context: Optional[RequestContext]) -> tuple[str, str]:
    """
    Get (tenant_id, user_id) from the request context.

    Raises:
        ContextUnavailableError: If either is missing
    """
    if context is None:
        raise ContextUnavailableError(["tenant_id", "user_id"])

    missing = context.missing_fields()
    if missing:
        logger.warning("request_context_incomplete", missing=missing)
        raise ContextUnavailableError(missing)

    return context.tenant_id, context.user_id


class PermissionService:
    """Authorization gate."""

    def has_permission(self, context: RequestContext, permission: str) -> bool:
        """Check whether the caller holds a permission."""
        granted = set(context.permissions)
        return permission in granted or OWNER_PERMISSION in granted

    def require_permission(self, context: RequestContext, permission: str) -> None:
        """
        Fail unless the caller holds a permission.

        Raises:
            AccessDeniedError: If the permission is missing
        """
        if not self.has_permission(context, permission):
            logger.warning(
                "access_denied",
                user_id=context.user_id,
                tenant_id=context.tenant_id,
                permission=permission
            )
            raise AccessDeniedError(details={"permission": permission})


_permission_service: Optional[PermissionService] = None


def get_permission_service() -> PermissionService:
    """Get or create PermissionService instance."""
    global _permission_service
    if _permission_service is None:
        _permission_service = PermissionService()
    return _permission_service
