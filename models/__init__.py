"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
    PaginatedResponse
)
from models.context import RequestContext
from models.mapping import (
    NO_MAPPING_SELECTED,
    NoneSelected,
    ExistingMapping,
    MappingSelection,
    selection_from_mapping_id,
    MappingAction,
    MappingDecision,
    MappingTemplateCreate,
    MappingTemplateResponse,
    MappingListResponse,
)
from models.job_item import (
    JobType,
    JobStatus,
    SaveMappingAction,
    is_valid_status_transition,
    can_remove_job_item,
    JobItemCreate,
    JobItemResponse,
    JobItemListResponse,
    JobItemSubmitResponse,
    JobItemRemoveResponse,
)
from models.connector_settings import (
    ConnectorName,
    S3Settings,
    SFTPSettings,
    ConnectorSettingsResponse,
    ConnectorTestResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",
    "PaginatedResponse",

    # Context
    "RequestContext",

    # Mappings
    "NO_MAPPING_SELECTED",
    "NoneSelected",
    "ExistingMapping",
    "MappingSelection",
    "selection_from_mapping_id",
    "MappingAction",
    "MappingDecision",
    "MappingTemplateCreate",
    "MappingTemplateResponse",
    "MappingListResponse",

    # Job items
    "JobType",
    "JobStatus",
    "SaveMappingAction",
    "is_valid_status_transition",
    "can_remove_job_item",
    "JobItemCreate",
    "JobItemResponse",
    "JobItemListResponse",
    "JobItemSubmitResponse",
    "JobItemRemoveResponse",

    # Connectors
    "ConnectorName",
    "S3Settings",
    "SFTPSettings",
    "ConnectorSettingsResponse",
    "ConnectorTestResponse",
]
