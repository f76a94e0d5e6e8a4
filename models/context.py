"""Request context: who is calling and on behalf of which tenant."""

from pydantic import Field
from typing import Optional

from models.base import BaseSchema


class RequestContext(BaseSchema):
    """Tenant, user and permissions supplied by the calling environment."""

    tenant_id: Optional[str] = Field(None, description="Current tenant (shop) id")
    user_id: Optional[str] = Field(None, description="Current user id")
    permissions: list[str] = Field(default_factory=list, description="Permissions granted to the user")

    def missing_fields(self) -> list[str]:
        """Names of the identity fields that are not available."""
        missing = []
        if not self.tenant_id:
            missing.append("tenant_id")
        if not self.user_id:
            missing.append("user_id")
        return missing
