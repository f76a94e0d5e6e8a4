"""
Mapping template API routes.

Read-only: templates are created and updated through job submission.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
import structlog

from models.context import RequestContext
from models.mapping import MappingListResponse
from services.job_item_service import get_job_item_service
from routes.common import get_request_context, handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/mappings", tags=["Mappings"])


@router.get("", response_model=MappingListResponse)
async def list_mappings(
    collection: Optional[str] = Query(None, description="Filter by collection"),
    context: RequestContext = Depends(get_request_context)
):
    """
    List mapping templates of the current tenant, ordered by name.
    """
    try:
        service = get_job_item_service()
        mappings = service.get_mappings(context, collection=collection)
        return MappingListResponse(data=mappings, total=len(mappings))

    except Exception as e:
        return handle_error(e)
