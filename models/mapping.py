"""
Mapping template schemas and the mapping selection made on a job submission.

A mapping template is a reusable, named field-to-field correspondence for
one collection. Job items keep their own snapshot of the mapping they ran
with, so templates can change without touching past jobs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union
from pydantic import Field, field_validator

from models.base import BaseSchema, TimestampMixin


# Wire value meaning "no saved mapping selected" (the form's "create new" option)
NO_MAPPING_SELECTED = "create"


# ===================
# SELECTION
# ===================

@dataclass(frozen=True)
class NoneSelected:
    """No saved template was chosen; the job uses an ad hoc mapping."""


@dataclass(frozen=True)
class ExistingMapping:
    """A saved template was chosen as the starting point."""
    mapping_id: str


MappingSelection = Union[NoneSelected, ExistingMapping]


def selection_from_mapping_id(mapping_id: Optional[str]) -> MappingSelection:
    """
    Convert the submitted mapping_id into a selection.

    None and the "create" wire value both mean nothing was selected.
    """
    if mapping_id is None or mapping_id == NO_MAPPING_SELECTED:
        return NoneSelected()
    return ExistingMapping(mapping_id=mapping_id)


# ===================
# DECISION
# ===================

class MappingAction(str, Enum):
    """What to do with the mapping templates when a job is submitted."""
    NONE = "none"      # Leave templates untouched
    CREATE = "create"  # Save the submitted mapping as a new template
    UPDATE = "update"  # Overwrite the selected template's mapping


@dataclass
class MappingDecision:
    """Result of determine_mapping_action() with context for logging."""
    action: MappingAction
    reason: str
    mapping_id: Optional[str] = None
    mapping_name: Optional[str] = None


# ===================
# TEMPLATE SCHEMAS
# ===================

def keep_mapping_as_submitted(value: Any) -> dict:
    """
    Accept a mapping object without touching its keys or values.

    CSV header names keep their whitespace; schema trimming does not apply.
    """
    if not isinstance(value, dict):
        raise ValueError("must be an object")
    return value


class MappingTemplateCreate(BaseSchema):
    """Create a mapping template."""

    name: str = Field(..., min_length=1, max_length=200, description="Template name")
    collection: str = Field(..., min_length=1, max_length=200, description="Collection the mapping applies to")
    mapping: dict[str, Any] = Field(..., description="Field-to-field correspondence")

    @field_validator("mapping", mode="plain")
    @classmethod
    def mapping_as_submitted(cls, v: Any) -> dict:
        return keep_mapping_as_submitted(v)


class MappingTemplateResponse(BaseSchema, TimestampMixin):
    """Mapping template response with all fields."""

    id: str = Field(..., description="Mapping UUID")
    tenant_id: str = Field(..., description="Owning tenant")
    name: str = Field(..., description="Template name")
    collection: str = Field(..., description="Collection the mapping applies to")
    mapping: dict[str, Any] = Field(default_factory=dict, description="Field-to-field correspondence")

    @field_validator("mapping", mode="plain")
    @classmethod
    def mapping_as_stored(cls, v: Any) -> dict:
        return keep_mapping_as_submitted(v)


class MappingListResponse(BaseSchema):
    """List of mapping templates."""

    data: list[MappingTemplateResponse]
    total: int
