"""
Job item schemas for validation and serialization.

A job item is one CSV import or export submission. Its status is owned by
the execution pipeline; this service only creates items as pending and
reads the status to decide whether an item may be removed.
"""

from pydantic import Field, field_validator
from typing import Any, Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema, PaginatedResponse
from models.mapping import (
    NO_MAPPING_SELECTED,
    MappingSelection,
    keep_mapping_as_submitted,
    selection_from_mapping_id,
)


class JobType(str, Enum):
    """Job type values."""
    IMPORT = "import"
    EXPORT = "export"


class JobStatus(str, Enum):
    """Job item status values."""
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    FAILED = "failed"


class SaveMappingAction(str, Enum):
    """What the user asked to do with a selected mapping template."""
    NONE = "none"
    CREATE = "create"
    UPDATE = "update"


# Status order for transition validation (lower index = earlier in flow)
STATUS_ORDER = {
    JobStatus.PENDING: 0,
    JobStatus.IN_PROGRESS: 1,
    JobStatus.COMPLETED: 2,
    JobStatus.FAILED: 2,
}

TERMINAL_STATUSES = {JobStatus.COMPLETED, JobStatus.FAILED}


def is_valid_status_transition(current: JobStatus, new: JobStatus) -> bool:
    """
    Check if status transition is valid.

    Rules:
    - pending → inProgress → completed | failed
    - Can skip forward (pending → failed is OK)
    - Cannot go backward
    - completed and failed are terminal
    """
    if current in TERMINAL_STATUSES:
        return False

    return STATUS_ORDER[new] > STATUS_ORDER[current]


def can_remove_job_item(status: JobStatus) -> bool:
    """A job item can be removed unless the pipeline is processing it."""
    return status != JobStatus.IN_PROGRESS


# ===================
# REQUEST SCHEMAS
# ===================

class JobItemCreate(BaseSchema):
    """
    Submit a new job item.

    mapping_id is either the id of a saved mapping template or the
    "create" value (or null) when no template was selected.
    """

    collection: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Record type the job imports into or exports from"
    )
    file_source: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Where the raw file resides or was uploaded from"
    )
    has_header: bool = Field(
        default=False,
        description="Whether the first row is a header row"
    )
    job_type: JobType = Field(..., description="import or export")
    job_sub_type: Optional[str] = Field(
        None,
        max_length=100,
        description="Free-form refinement of job_type"
    )
    mapping: dict[str, Any] = Field(..., description="Field mapping applied to this job")
    mapping_id: Optional[str] = Field(
        NO_MAPPING_SELECTED,
        max_length=100,
        description="Selected mapping template id, or 'create' when none selected"
    )
    name: str = Field(..., min_length=1, max_length=200, description="Job label")
    new_mapping_name: Optional[str] = Field(
        None,
        max_length=200,
        description="Name for a mapping template saved from this job"
    )
    save_mapping_action: SaveMappingAction = Field(
        default=SaveMappingAction.NONE,
        description="What to do with the selected mapping template"
    )
    should_save_to_new_mapping: bool = Field(
        default=False,
        description="Save the mapping as a new template when none was selected"
    )

    @field_validator("mapping", mode="plain")
    @classmethod
    def mapping_as_submitted(cls, v: Any) -> dict:
        """Mapping is stored exactly as submitted."""
        return keep_mapping_as_submitted(v)

    @field_validator("mapping_id")
    @classmethod
    def mapping_id_not_blank(cls, v: Optional[str]) -> Optional[str]:
        """Blank ids are neither a template nor the 'create' value."""
        if v is not None and not v:
            raise ValueError("must be a mapping id or 'create'")
        return v

    @field_validator("save_mapping_action", mode="before")
    @classmethod
    def default_save_mapping_action(cls, v):
        """Treat a missing action as 'none'."""
        if v is None or v == "":
            return SaveMappingAction.NONE
        return v

    @field_validator("should_save_to_new_mapping", mode="before")
    @classmethod
    def default_should_save(cls, v):
        """Treat a missing flag as false."""
        return False if v is None else v

    @property
    def mapping_selection(self) -> MappingSelection:
        """Tagged view of mapping_id."""
        return selection_from_mapping_id(self.mapping_id)


# ===================
# RESPONSE SCHEMAS
# ===================

class JobItemResponse(BaseSchema):
    """Job item response with all fields."""

    id: str = Field(..., description="Job item UUID")
    tenant_id: str = Field(..., description="Owning tenant")
    collection: str
    file_source: str
    has_header: bool
    job_type: JobType
    job_sub_type: Optional[str] = None
    mapping: dict[str, Any] = Field(default_factory=dict)
    mapping_id: Optional[str] = Field(None, description="Referenced mapping template, if any")
    status: JobStatus
    uploaded_at: datetime
    created_by: str = Field(..., description="Submitting user id")
    name: str

    @field_validator("mapping", mode="plain")
    @classmethod
    def mapping_as_stored(cls, v: Any) -> dict:
        return keep_mapping_as_submitted(v)


class JobItemListResponse(PaginatedResponse):
    """Paginated list of job items."""

    data: list[JobItemResponse]


class JobItemSubmitResponse(BaseSchema):
    """Id of the submitted job item."""

    id: str


class JobItemRemoveResponse(BaseSchema):
    """Result of a job item removal."""

    success: bool
