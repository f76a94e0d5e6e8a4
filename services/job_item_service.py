"""
Job item service: submission and removal of CSV import/export jobs.

Submitting a job stores a pending job item and, depending on what the user
picked in the mapping step, saves the mapping as a new template or
overwrites the selected one. Removal is refused while the execution
pipeline has the job in progress.
"""

import copy
from datetime import datetime, timezone
from typing import Optional, Union
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import settings
from models.context import RequestContext
from models.job_item import (
    JobItemCreate,
    JobItemResponse,
    JobStatus,
    JobType,
    SaveMappingAction,
    can_remove_job_item,
)
from models.mapping import (
    ExistingMapping,
    MappingAction,
    MappingDecision,
    MappingTemplateCreate,
    MappingTemplateResponse,
    NoneSelected,
)
from repositories.job_item_repository import JobItemRepository, get_job_item_repository
from repositories.mapping_repository import MappingRepository, get_mapping_repository
from services.permission_service import require_identity
from exceptions import (
    JobItemInProgressError,
    JobItemNotFoundError,
    JobItemValidationError,
    ValidationError,
)
from utils.validation_errors import collect_field_errors

logger = structlog.get_logger(__name__)


def determine_mapping_action(request: JobItemCreate) -> MappingDecision:
    """
    Decide what happens to mapping templates for a submission.

    Business rules:
    - Nothing selected + should_save_to_new_mapping → CREATE
    - Nothing selected otherwise → NONE
    - Template selected + save_mapping_action "create" → CREATE (save as new,
      the selected template is left alone)
    - Template selected + save_mapping_action "update" → UPDATE the selected one
    - Template selected otherwise → NONE
    """
    selection = request.mapping_selection

    if isinstance(selection, NoneSelected):
        if request.should_save_to_new_mapping:
            return MappingDecision(
                action=MappingAction.CREATE,
                reason="save_ad_hoc_mapping",
                mapping_name=request.new_mapping_name,
            )
        return MappingDecision(action=MappingAction.NONE, reason="ad_hoc_mapping")

    if request.save_mapping_action == SaveMappingAction.CREATE:
        return MappingDecision(
            action=MappingAction.CREATE,
            reason="save_selected_as_new",
            mapping_name=request.new_mapping_name,
        )

    if request.save_mapping_action == SaveMappingAction.UPDATE:
        return MappingDecision(
            action=MappingAction.UPDATE,
            reason="update_selected",
            mapping_id=selection.mapping_id,
        )

    return MappingDecision(action=MappingAction.NONE, reason="selected_mapping_unchanged")


class JobItemService:
    """
    Job item lifecycle.

    Handles submit/remove plus tenant-scoped reads of job items and
    mapping templates.
    """

    def __init__(self, job_items: JobItemRepository, mappings: MappingRepository):
        self.job_items = job_items
        self.mappings = mappings

    # ===================
    # SUBMIT
    # ===================

    def submit(
        self,
        values: Union[dict, JobItemCreate],
        context: Optional[RequestContext]
    ) -> str:
        """
        Submit a job item.

        Args:
            values: Submission fields (dict from the wire, or a parsed JobItemCreate)
            context: Caller's tenant and user

        Returns:
            Id of the new job item

        Raises:
            ContextUnavailableError: If tenant or user is missing
            JobItemValidationError: If fields are missing or malformed
            MappingNotFoundError: If the template to update does not exist
            DatabaseError: If the store fails
        """
        tenant_id, user_id = require_identity(context)
        request = self._parse_request(values)

        decision = determine_mapping_action(request)
        if decision.action == MappingAction.CREATE and not decision.mapping_name:
            raise JobItemValidationError([{
                "field": "new_mapping_name",
                "message": "required when saving the mapping as a new template",
            }])

        record = self._build_record(request, tenant_id, user_id)

        logger.info(
            "submitting_job_item",
            tenant_id=tenant_id,
            collection=request.collection,
            job_type=request.job_type.value,
            mapping_action=decision.action.value,
            reason=decision.reason
        )

        self._apply_mapping_decision(decision, request, tenant_id)
        job_item_id = self.job_items.insert(record)

        logger.info(
            "job_item_submitted",
            job_item_id=job_item_id,
            tenant_id=tenant_id,
            created_by=user_id
        )

        return job_item_id

    def _parse_request(self, values: Union[dict, JobItemCreate]) -> JobItemCreate:
        """Validate raw submission values."""
        if isinstance(values, JobItemCreate):
            return values

        if not isinstance(values, dict):
            raise JobItemValidationError([{"field": "body", "message": "must be an object"}])

        try:
            return JobItemCreate.model_validate(values)
        except PydanticValidationError as e:
            errors = collect_field_errors(e)
            logger.info("job_item_validation_failed", fields=[err["field"] for err in errors])
            raise JobItemValidationError(errors) from e

    def _build_record(self, request: JobItemCreate, tenant_id: str, user_id: str) -> dict:
        """Build the job_items row for a submission."""
        selection = request.mapping_selection
        mapping_id = selection.mapping_id if isinstance(selection, ExistingMapping) else None

        return {
            "tenant_id": tenant_id,
            "collection": request.collection,
            "file_source": request.file_source,
            "has_header": request.has_header,
            "job_type": request.job_type.value,
            "job_sub_type": request.job_sub_type,
            "mapping": copy.deepcopy(request.mapping),
            "mapping_id": mapping_id,
            "name": request.name,
            "status": JobStatus.PENDING.value,
            "uploaded_at": datetime.now(timezone.utc).isoformat(),
            "created_by": user_id,
        }

    def _apply_mapping_decision(
        self,
        decision: MappingDecision,
        request: JobItemCreate,
        tenant_id: str
    ) -> None:
        """Write mapping templates according to the decision."""
        if decision.action == MappingAction.CREATE:
            mapping_id = self.mappings.insert(
                tenant_id,
                MappingTemplateCreate(
                    name=decision.mapping_name,
                    collection=request.collection,
                    mapping=copy.deepcopy(request.mapping),
                )
            )
            logger.info("mapping_template_created", mapping_id=mapping_id, name=decision.mapping_name)

        elif decision.action == MappingAction.UPDATE:
            self.mappings.update_mapping(
                decision.mapping_id,
                tenant_id,
                copy.deepcopy(request.mapping)
            )
            logger.info("mapping_template_updated", mapping_id=decision.mapping_id)

    # ===================
    # REMOVE
    # ===================

    def remove(self, job_item_id: str, context: Optional[RequestContext]) -> bool:
        """
        Remove a job item unless it is in progress.

        The uploaded file is not cleaned up, and referenced mapping
        templates are never touched.

        Returns:
            True if removed

        Raises:
            ContextUnavailableError: If tenant or user is missing
            ValidationError: If job_item_id is blank
            JobItemNotFoundError: If the job item doesn't exist
            JobItemInProgressError: If the job item is in progress
            DatabaseError: If the store fails
        """
        tenant_id, user_id = require_identity(context)

        if not job_item_id or not job_item_id.strip():
            raise ValidationError(
                code="JOB_ITEM_ID_REQUIRED",
                message="Job item id is required",
                details={"fields": ["job_item_id"]}
            )

        logger.info("removing_job_item", job_item_id=job_item_id, tenant_id=tenant_id)

        job_item = self.job_items.find_one(job_item_id, tenant_id)
        if job_item is None:
            raise JobItemNotFoundError(job_item_id)

        if not can_remove_job_item(job_item.status):
            logger.info("job_item_remove_refused", job_item_id=job_item_id, status=job_item.status.value)
            raise JobItemInProgressError(job_item_id)

        # Conditional delete: the pipeline may pick the job up after the read above
        deleted = self.job_items.remove(
            job_item_id,
            tenant_id,
            exclude_status=JobStatus.IN_PROGRESS
        )

        if not deleted:
            current = self.job_items.find_one(job_item_id, tenant_id)
            if current is None:
                raise JobItemNotFoundError(job_item_id)
            logger.warning("job_item_started_during_remove", job_item_id=job_item_id)
            raise JobItemInProgressError(job_item_id)

        logger.info("job_item_removed", job_item_id=job_item_id, removed_by=user_id)
        return True

    # ===================
    # READ OPERATIONS
    # ===================

    def get_by_id(self, job_item_id: str, context: Optional[RequestContext]) -> JobItemResponse:
        """
        Get a job item of the caller's tenant.

        Raises:
            JobItemNotFoundError: If the job item doesn't exist
        """
        tenant_id, _ = require_identity(context)

        job_item = self.job_items.find_one(job_item_id, tenant_id)
        if job_item is None:
            raise JobItemNotFoundError(job_item_id)
        return job_item

    def get_all(
        self,
        context: Optional[RequestContext],
        page: int = 1,
        page_size: int = 20,
        status: Optional[JobStatus] = None,
        job_type: Optional[JobType] = None
    ) -> tuple[list[JobItemResponse], int]:
        """
        Get job items of the caller's tenant, newest first.

        Returns:
            Tuple of (job items, total count)
        """
        tenant_id, _ = require_identity(context)
        page_size = min(page_size, settings.job_items_page_size_max)

        logger.debug("getting_job_items", tenant_id=tenant_id, page=page, status=status)
        return self.job_items.list_for_tenant(
            tenant_id,
            page=page,
            page_size=page_size,
            status=status,
            job_type=job_type
        )

    def get_mappings(
        self,
        context: Optional[RequestContext],
        collection: Optional[str] = None
    ) -> list[MappingTemplateResponse]:
        """Get the caller's mapping templates, optionally for one collection."""
        tenant_id, _ = require_identity(context)
        return self.mappings.list_for_tenant(tenant_id, collection=collection)


# Singleton instance
_job_item_service: Optional[JobItemService] = None


def get_job_item_service() -> JobItemService:
    """Get or create JobItemService instance."""
    global _job_item_service
    if _job_item_service is None:
        _job_item_service = JobItemService(
            get_job_item_repository(),
            get_mapping_repository()
        )
    return _job_item_service
