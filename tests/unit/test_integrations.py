"""
Unit tests for the S3 and SFTP connector clients.

Run: pytest tests/unit/test_integrations.py -v
"""

import pytest
from unittest.mock import MagicMock, patch

import paramiko
from botocore.exceptions import ClientError, EndpointConnectionError

from integrations.s3 import S3ConnectorClient, TEST_EXPORT_BODY, build_s3_client
from integrations.sftp import SFTPConnectorClient
from models.connector_settings import S3Settings, SFTPSettings
from exceptions import ConnectorTestError


def client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_credentials():
    return S3Settings(access_key="AKIAEXAMPLE", secret_access_key="secret", bucket="shop-exports")


@pytest.fixture
def sftp_credentials():
    return SFTPSettings(ip_address="10.0.0.5", port=2222, username="shop", password="hunter2")


# ===================
# S3
# ===================

class TestS3ConnectorClient:
    """Tests for S3ConnectorClient."""

    def test_write_access_uploads_test_body(self, s3_credentials):
        """Should put the test object into the configured bucket."""
        boto_client = MagicMock()
        client = S3ConnectorClient(s3_credentials, client=boto_client)

        assert client.check_write_access("probe.txt") is True
        boto_client.put_object.assert_called_once_with(
            Bucket="shop-exports", Key="probe.txt", Body=TEST_EXPORT_BODY
        )

    def test_write_access_denied(self, s3_credentials):
        """AWS errors become ConnectorTestError."""
        boto_client = MagicMock()
        boto_client.put_object.side_effect = client_error("AccessDenied", "PutObject")
        client = S3ConnectorClient(s3_credentials, client=boto_client)

        with pytest.raises(ConnectorTestError) as exc_info:
            client.check_write_access("probe.txt")

        assert exc_info.value.code == "S3_ERROR"
        assert exc_info.value.details["check"] == "export"
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_read_access_existing_object(self, s3_credentials):
        """Reading an existing object passes."""
        boto_client = MagicMock()
        client = S3ConnectorClient(s3_credentials, client=boto_client)

        assert client.check_read_access("test.txt") is True
        boto_client.get_object.assert_called_once_with(Bucket="shop-exports", Key="test.txt")

    def test_read_access_missing_object_passes(self, s3_credentials):
        """NoSuchKey still proves read access."""
        boto_client = MagicMock()
        boto_client.get_object.side_effect = client_error("NoSuchKey")
        client = S3ConnectorClient(s3_credentials, client=boto_client)

        assert client.check_read_access("test.txt") is True

    @pytest.mark.parametrize("code", ["AccessDenied", "NoSuchBucket", "InvalidAccessKeyId"])
    def test_read_access_rejected(self, s3_credentials, code):
        """Other AWS errors fail the check."""
        boto_client = MagicMock()
        boto_client.get_object.side_effect = client_error(code)
        client = S3ConnectorClient(s3_credentials, client=boto_client)

        with pytest.raises(ConnectorTestError) as exc_info:
            client.check_read_access("test.txt")

        assert exc_info.value.details["aws_code"] == code

    def test_read_access_network_failure(self, s3_credentials):
        """botocore transport errors fail the check."""
        boto_client = MagicMock()
        boto_client.get_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")
        client = S3ConnectorClient(s3_credentials, client=boto_client)

        with pytest.raises(ConnectorTestError):
            client.check_read_access("test.txt")

    def test_build_s3_client_uses_credentials(self, s3_credentials):
        """Should pass stored keys to boto3."""
        with patch("integrations.s3.boto3.client") as boto_factory:
            build_s3_client(s3_credentials)

        boto_factory.assert_called_once_with(
            "s3",
            aws_access_key_id="AKIAEXAMPLE",
            aws_secret_access_key="secret",
            region_name=None,
        )


# ===================
# SFTP
# ===================

class TestSFTPConnectorClient:
    """Tests for SFTPConnectorClient."""

    def test_check_connection_logs_in_and_closes(self, sftp_credentials):
        """Should connect, open an SFTP session and close everything."""
        ssh = MagicMock()
        client = SFTPConnectorClient(sftp_credentials, timeout=5.0, client_factory=lambda: ssh)

        assert client.check_connection() is True

        args, kwargs = ssh.connect.call_args
        assert args == ("10.0.0.5",)
        assert kwargs["port"] == 2222
        assert kwargs["username"] == "shop"
        assert kwargs["password"] == "hunter2"
        assert kwargs["timeout"] == 5.0
        ssh.open_sftp.return_value.close.assert_called_once()
        ssh.close.assert_called_once()

    def test_check_connection_auth_failure(self, sftp_credentials):
        """Rejected logins become ConnectorTestError and the client is closed."""
        ssh = MagicMock()
        ssh.connect.side_effect = paramiko.AuthenticationException("Authentication failed.")
        client = SFTPConnectorClient(sftp_credentials, client_factory=lambda: ssh)

        with pytest.raises(ConnectorTestError) as exc_info:
            client.check_connection()

        assert exc_info.value.code == "SFTP_ERROR"
        assert exc_info.value.details["host"] == "10.0.0.5"
        ssh.close.assert_called_once()

    def test_check_connection_unreachable(self, sftp_credentials):
        """Socket errors become ConnectorTestError."""
        ssh = MagicMock()
        ssh.connect.side_effect = TimeoutError()
        client = SFTPConnectorClient(sftp_credentials, client_factory=lambda: ssh)

        with pytest.raises(ConnectorTestError) as exc_info:
            client.check_connection()

        assert exc_info.value.message == "TimeoutError"
        ssh.close.assert_called_once()
