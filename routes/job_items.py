"""
Job item API routes.

Submit, remove and browse CSV import/export jobs.
"""

from fastapi import APIRouter, Body, Depends, Query
from typing import Optional
import structlog

from models.context import RequestContext
from models.job_item import (
    JobItemListResponse,
    JobItemRemoveResponse,
    JobItemResponse,
    JobItemSubmitResponse,
    JobStatus,
    JobType,
)
from services.job_item_service import get_job_item_service
from routes.common import get_request_context, handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/job-items", tags=["Job Items"])


@router.post("", response_model=JobItemSubmitResponse, status_code=201)
async def submit_job_item(
    values: dict = Body(..., description="Job item fields"),
    context: RequestContext = Depends(get_request_context)
):
    """
    Submit a job item.

    Optionally saves the mapping as a new template or updates the selected one.

    Raises:
        401: Tenant or user missing
        404: Mapping template to update not found
        422: Invalid job item fields
    """
    try:
        service = get_job_item_service()
        job_item_id = service.submit(values, context)
        return JobItemSubmitResponse(id=job_item_id)

    except Exception as e:
        return handle_error(e)


@router.get("", response_model=JobItemListResponse)
async def list_job_items(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    status: Optional[JobStatus] = Query(None, description="Filter by status"),
    job_type: Optional[JobType] = Query(None, description="Filter by job type"),
    context: RequestContext = Depends(get_request_context)
):
    """
    List job items of the current tenant, newest first.
    """
    try:
        service = get_job_item_service()
        items, total = service.get_all(
            context,
            page=page,
            page_size=page_size,
            status=status,
            job_type=job_type
        )
        return JobItemListResponse.create(data=items, total=total, page=page, page_size=page_size)

    except Exception as e:
        return handle_error(e)


@router.get("/{job_item_id}", response_model=JobItemResponse)
async def get_job_item(
    job_item_id: str,
    context: RequestContext = Depends(get_request_context)
):
    """
    Get a job item by id.

    Raises:
        404: Job item not found
    """
    try:
        service = get_job_item_service()
        return service.get_by_id(job_item_id, context)

    except Exception as e:
        return handle_error(e)


@router.delete("/{job_item_id}", response_model=JobItemRemoveResponse)
async def remove_job_item(
    job_item_id: str,
    context: RequestContext = Depends(get_request_context)
):
    """
    Remove a job item.

    Raises:
        404: Job item not found
        409: Job item is in progress
    """
    try:
        service = get_job_item_service()
        return JobItemRemoveResponse(success=service.remove(job_item_id, context))

    except Exception as e:
        return handle_error(e)
