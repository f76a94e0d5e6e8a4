"""
Connector API routes.

Configure and test S3 and SFTP credentials. All routes require the
connector admin permission.
"""

from fastapi import APIRouter, Body, Depends
import structlog

from models.context import RequestContext
from models.connector_settings import ConnectorSettingsResponse, ConnectorTestResponse
from services.connector_service import get_connector_service
from routes.common import get_request_context, handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/connectors", tags=["Connectors"])


@router.put("/s3", response_model=ConnectorSettingsResponse)
async def update_s3_settings(
    values: dict = Body(..., description="access_key, secret_access_key, bucket, region"),
    context: RequestContext = Depends(get_request_context)
):
    """Store S3 credentials for the current tenant."""
    try:
        service = get_connector_service()
        return service.update_s3_settings(values, context)

    except Exception as e:
        return handle_error(e)


@router.put("/sftp", response_model=ConnectorSettingsResponse)
async def update_sftp_settings(
    values: dict = Body(..., description="ip_address, port, username, password"),
    context: RequestContext = Depends(get_request_context)
):
    """Store SFTP credentials for the current tenant."""
    try:
        service = get_connector_service()
        return service.update_sftp_settings(values, context)

    except Exception as e:
        return handle_error(e)


@router.post("/s3/test-export", response_model=ConnectorTestResponse)
async def test_s3_for_export(context: RequestContext = Depends(get_request_context)):
    """
    Test S3 write access.

    Raises:
        404: S3 settings not configured
        503: S3 rejected the upload
    """
    try:
        service = get_connector_service()
        return service.test_s3_for_export(context)

    except Exception as e:
        return handle_error(e)


@router.post("/s3/test-import", response_model=ConnectorTestResponse)
async def test_s3_for_import(context: RequestContext = Depends(get_request_context)):
    """
    Test S3 read access.

    Raises:
        404: S3 settings not configured
        503: S3 rejected the read
    """
    try:
        service = get_connector_service()
        return service.test_s3_for_import(context)

    except Exception as e:
        return handle_error(e)


@router.post("/sftp/test", response_model=ConnectorTestResponse)
async def test_sftp(context: RequestContext = Depends(get_request_context)):
    """
    Test SFTP login.

    Raises:
        404: SFTP settings not configured
        503: SFTP server unreachable or login rejected
    """
    try:
        service = get_connector_service()
        return service.test_sftp(context)

    except Exception as e:
        return handle_error(e)
