"""
S3 integration for connector credential tests.

Only checks access; moving CSV files to and from buckets is the
execution pipeline's job.
"""

from typing import Any
import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from models.connector_settings import S3Settings
from exceptions import ConnectorTestError

logger = structlog.get_logger(__name__)

TEST_EXPORT_BODY = b"This is just a sample CSV export file from the CSV connector."


def build_s3_client(credentials: S3Settings):
    """Create a boto3 S3 client from stored credentials."""
    return boto3.client(
        "s3",
        aws_access_key_id=credentials.access_key,
        aws_secret_access_key=credentials.secret_access_key,
        region_name=credentials.region,
    )


class S3ConnectorClient:
    """Read/write access checks against the configured bucket."""

    def __init__(self, credentials: S3Settings, client: Any = None):
        self.bucket = credentials.bucket
        self.client = client if client is not None else build_s3_client(credentials)

    def check_write_access(self, key: str) -> bool:
        """
        Upload a small text object to the bucket.

        Raises:
            ConnectorTestError: If the upload fails
        """
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=TEST_EXPORT_BODY)
        except (ClientError, BotoCoreError) as e:
            logger.warning("s3_write_check_failed", bucket=self.bucket, error=str(e))
            raise ConnectorTestError(
                "s3",
                str(e),
                details={"check": "export", "bucket": self.bucket}
            ) from e

        logger.info("s3_write_check_passed", bucket=self.bucket)
        return True

    def check_read_access(self, key: str) -> bool:
        """
        Read an object from the bucket.

        A missing object still proves the credentials can read the bucket.

        Raises:
            ConnectorTestError: If the read is rejected
        """
        try:
            self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            if error_code == "NoSuchKey":
                logger.info("s3_read_check_passed", bucket=self.bucket, object_found=False)
                return True
            logger.warning("s3_read_check_failed", bucket=self.bucket, error_code=error_code)
            raise ConnectorTestError(
                "s3",
                str(e),
                details={"check": "import", "bucket": self.bucket, "aws_code": error_code}
            ) from e
        except BotoCoreError as e:
            logger.warning("s3_read_check_failed", bucket=self.bucket, error=str(e))
            raise ConnectorTestError(
                "s3",
                str(e),
                details={"check": "import", "bucket": self.bucket}
            ) from e

        logger.info("s3_read_check_passed", bucket=self.bucket, object_found=True)
        return True
