"""
Connector settings schemas.

Credentials for the S3 and SFTP connectors are stored as opaque blobs,
one per tenant and connector name.
"""

from pydantic import ConfigDict, Field
from typing import Optional
from enum import Enum
from datetime import datetime

from models.base import BaseSchema


class ConnectorName(str, Enum):
    """Settings keys for each connector."""
    S3 = "connector-settings-aws-s3"
    SFTP = "connector-settings-sftp"


class S3Settings(BaseSchema):
    """S3 credentials and target bucket."""

    # Credentials are stored verbatim
    model_config = ConfigDict(str_strip_whitespace=False)

    access_key: str = Field(..., min_length=1, description="AWS access key id")
    secret_access_key: str = Field(..., min_length=1, description="AWS secret access key")
    bucket: str = Field(..., min_length=1, max_length=255, description="Bucket name")
    region: Optional[str] = Field(None, max_length=50, description="AWS region")


class SFTPSettings(BaseSchema):
    """SFTP server credentials."""

    model_config = ConfigDict(str_strip_whitespace=False)

    ip_address: str = Field(..., min_length=1, max_length=255, description="Host name or IP")
    port: int = Field(..., ge=1, le=65535, description="SSH port")
    username: str = Field(..., min_length=1, description="Login user")
    password: str = Field(..., description="Login password")


class ConnectorSettingsResponse(BaseSchema):
    """Acknowledges a settings update. Secrets are never echoed back."""

    name: ConnectorName
    updated_at: datetime


class ConnectorTestResponse(BaseSchema):
    """Result of a credential test."""

    connector: ConnectorName
    check: str = Field(..., description="export, import or connect")
    success: bool
