"""
Business logic services.

Each service handles one domain area.
"""

from services.permission_service import (
    PermissionService,
    get_permission_service,
    require_identity,
)
from services.job_item_service import (
    JobItemService,
    get_job_item_service,
    determine_mapping_action,
)
from services.connector_service import ConnectorService, get_connector_service

__all__ = [
    "PermissionService",
    "get_permission_service",
    "require_identity",
    "JobItemService",
    "get_job_item_service",
    "determine_mapping_action",
    "ConnectorService",
    "get_connector_service",
]
