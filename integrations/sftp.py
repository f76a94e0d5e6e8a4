"""
SFTP integration for connector credential tests.
"""

from typing import Callable
import paramiko
import structlog

from models.connector_settings import SFTPSettings
from exceptions import ConnectorTestError

logger = structlog.get_logger(__name__)


class SFTPConnectorClient:
    """Connectivity check against the configured SFTP server."""

    def __init__(
        self,
        credentials: SFTPSettings,
        timeout: float = 10.0,
        client_factory: Callable[[], paramiko.SSHClient] = paramiko.SSHClient
    ):
        self.credentials = credentials
        self.timeout = timeout
        self.client_factory = client_factory

    def check_connection(self) -> bool:
        """
        Log in and open an SFTP session, then close it.

        Raises:
            ConnectorTestError: If the server can't be reached or rejects the login
        """
        host = self.credentials.ip_address
        port = self.credentials.port
        client = self.client_factory()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        try:
            client.connect(
                host,
                port=port,
                username=self.credentials.username,
                password=self.credentials.password,
                timeout=self.timeout,
                banner_timeout=self.timeout,
                auth_timeout=self.timeout,
                look_for_keys=False,
                allow_agent=False,
            )
            sftp = client.open_sftp()
            sftp.close()
        except (paramiko.SSHException, OSError) as e:
            logger.warning("sftp_check_failed", host=host, port=port, error=str(e))
            raise ConnectorTestError(
                "sftp",
                str(e) or type(e).__name__,
                details={"check": "connect", "host": host, "port": port}
            ) from e
        finally:
            client.close()

        logger.info("sftp_check_passed", host=host, port=port)
        return True
