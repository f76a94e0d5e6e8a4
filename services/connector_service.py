"""
Connector service: S3 and SFTP credentials.

Stores credentials per tenant and tests them against the real services.
Every operation requires the connector admin permission.
"""

from typing import Callable, Optional, Type, TypeVar, Union
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import settings
from models.base import BaseSchema
from models.context import RequestContext
from models.connector_settings import (
    ConnectorName,
    ConnectorSettingsResponse,
    ConnectorTestResponse,
    S3Settings,
    SFTPSettings,
)
from repositories.connector_settings_repository import (
    ConnectorSettingsRepository,
    get_connector_settings_repository,
)
from services.permission_service import (
    PermissionService,
    get_permission_service,
    require_identity,
)
from integrations.s3 import S3ConnectorClient
from integrations.sftp import SFTPConnectorClient
from exceptions import (
    ConnectorSettingsNotFoundError,
    ConnectorSettingsValidationError,
)
from utils.validation_errors import collect_field_errors

logger = structlog.get_logger(__name__)

SettingsModel = TypeVar("SettingsModel", bound=BaseSchema)


class ConnectorService:
    """
    Connector credential operations.

    Handles settings updates and the three credential tests.
    """

    def __init__(
        self,
        settings_repository: ConnectorSettingsRepository,
        permissions: PermissionService,
        s3_client_factory: Callable[[S3Settings], S3ConnectorClient] = S3ConnectorClient,
        sftp_client_factory: Callable[..., SFTPConnectorClient] = SFTPConnectorClient
    ):
        self.settings_repository = settings_repository
        self.permissions = permissions
        self.s3_client_factory = s3_client_factory
        self.sftp_client_factory = sftp_client_factory

    def _authorize(self, context: Optional[RequestContext]) -> str:
        """Check identity and permission, return the tenant id."""
        tenant_id, _ = require_identity(context)
        self.permissions.require_permission(context, settings.connector_admin_permission)
        return tenant_id

    def _parse(
        self,
        name: ConnectorName,
        model: Type[SettingsModel],
        values: Union[dict, SettingsModel]
    ) -> SettingsModel:
        if isinstance(values, model):
            return values
        if not isinstance(values, dict):
            raise ConnectorSettingsValidationError(
                name.value,
                [{"field": "body", "message": "must be an object"}]
            )
        try:
            return model.model_validate(values)
        except PydanticValidationError as e:
            raise ConnectorSettingsValidationError(name.value, collect_field_errors(e)) from e

    def _load(
        self,
        name: ConnectorName,
        model: Type[SettingsModel],
        tenant_id: str
    ) -> SettingsModel:
        stored = self.settings_repository.get(name, tenant_id)
        if not stored:
            raise ConnectorSettingsNotFoundError(name.value)
        return self._parse(name, model, stored)

    # ===================
    # SETTINGS UPDATES
    # ===================

    def update_s3_settings(
        self,
        values: Union[dict, S3Settings],
        context: Optional[RequestContext]
    ) -> ConnectorSettingsResponse:
        """
        Store S3 credentials.

        Raises:
            AccessDeniedError: If the caller lacks the connector permission
            ConnectorSettingsValidationError: If fields are missing or malformed
        """
        tenant_id = self._authorize(context)
        credentials = self._parse(ConnectorName.S3, S3Settings, values)

        updated_at = self.settings_repository.set(
            ConnectorName.S3,
            tenant_id,
            credentials.model_dump()
        )

        logger.info("connector_settings_updated", connector=ConnectorName.S3.value, bucket=credentials.bucket)
        return ConnectorSettingsResponse(name=ConnectorName.S3, updated_at=updated_at)

    def update_sftp_settings(
        self,
        values: Union[dict, SFTPSettings],
        context: Optional[RequestContext]
    ) -> ConnectorSettingsResponse:
        """
        Store SFTP credentials.

        Raises:
            AccessDeniedError: If the caller lacks the connector permission
            ConnectorSettingsValidationError: If fields are missing or malformed
        """
        tenant_id = self._authorize(context)
        credentials = self._parse(ConnectorName.SFTP, SFTPSettings, values)

        updated_at = self.settings_repository.set(
            ConnectorName.SFTP,
            tenant_id,
            credentials.model_dump()
        )

        logger.info(
            "connector_settings_updated",
            connector=ConnectorName.SFTP.value,
            host=credentials.ip_address,
            port=credentials.port
        )
        return ConnectorSettingsResponse(name=ConnectorName.SFTP, updated_at=updated_at)

    # ===================
    # CREDENTIAL TESTS
    # ===================

    def test_s3_for_export(self, context: Optional[RequestContext]) -> ConnectorTestResponse:
        """Check the stored S3 credentials can write to the bucket."""
        tenant_id = self._authorize(context)
        credentials = self._load(ConnectorName.S3, S3Settings, tenant_id)

        client = self.s3_client_factory(credentials)
        success = client.check_write_access(settings.s3_test_export_key)
        return ConnectorTestResponse(connector=ConnectorName.S3, check="export", success=success)

    def test_s3_for_import(self, context: Optional[RequestContext]) -> ConnectorTestResponse:
        """Check the stored S3 credentials can read from the bucket."""
        tenant_id = self._authorize(context)
        credentials = self._load(ConnectorName.S3, S3Settings, tenant_id)

        client = self.s3_client_factory(credentials)
        success = client.check_read_access(settings.s3_test_import_key)
        return ConnectorTestResponse(connector=ConnectorName.S3, check="import", success=success)

    def test_sftp(self, context: Optional[RequestContext]) -> ConnectorTestResponse:
        """Check the stored SFTP credentials can log in."""
        tenant_id = self._authorize(context)
        credentials = self._load(ConnectorName.SFTP, SFTPSettings, tenant_id)

        client = self.sftp_client_factory(credentials, timeout=settings.sftp_timeout_seconds)
        success = client.check_connection()
        return ConnectorTestResponse(connector=ConnectorName.SFTP, check="connect", success=success)


# Singleton instance
_connector_service: Optional[ConnectorService] = None


def get_connector_service() -> ConnectorService:
    """Get or create ConnectorService instance."""
    global _connector_service
    if _connector_service is None:
        _connector_service = ConnectorService(
            get_connector_settings_repository(),
            get_permission_service()
        )
    return _connector_service
