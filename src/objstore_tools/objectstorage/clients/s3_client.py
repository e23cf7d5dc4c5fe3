"""S3 connection handle and backend error translation.

This module turns a ConnectionConfig into a live boto3 S3 client bound to an
S3-compatible endpoint (MinIO, AWS S3 and friends) and provides the single
place where SDK failures are mapped onto the objstore-tools exception
hierarchy.

A StorageConnection is an explicit handle: every operation function takes
one as its first argument, so several connections can live side by side in
one process (and in one test session) without shared state.
"""

from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from objstore_tools.core import get_logger
from objstore_tools.core.exceptions import (
    BackendError,
    ConnectionFailureError,
    NotFoundError,
)
from objstore_tools.schemas import ConnectionConfig

logger = get_logger(__name__)

NOT_FOUND_CODES = frozenset(
    {"404", "NoSuchKey", "NoSuchBucket", "NotFound", "NoSuchBucketPolicy"}
)


def error_code(exc: ClientError) -> str:
    """Return the backend error code carried by a ClientError."""
    return str(exc.response.get("Error", {}).get("Code", ""))


def backend_error(exc: Exception, context: str) -> Exception:
    """Map an SDK exception to NotFoundError or BackendError.

    Args:
        exc: Exception raised by boto3/botocore
        context: Human readable description of the failed operation

    Returns:
        The exception to raise, chained by the caller with ``from exc``
    """
    if isinstance(exc, ClientError) and error_code(exc) in NOT_FOUND_CODES:
        return NotFoundError(f"{context}: {exc}")
    return BackendError(f"{context}: {exc}")


class StorageConnection:
    """Live connection to one S3-compatible endpoint."""

    def __init__(self, config: ConnectionConfig, client: Optional[Any] = None):
        """Initialize the connection handle.

        Args:
            config: Connection configuration
            client: Pre-built boto3 S3 client; created lazily from config if omitted
        """
        self.config = config
        self._client = client
        logger.info(
            "Storage connection initialized",
            endpoint=config.endpoint_url,
            region=config.region,
        )

    @property
    def client(self):
        """Get or create the S3 client instance."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """Create a boto3 S3 client for the configured endpoint."""
        kwargs: dict[str, Any] = {
            "endpoint_url": self.config.endpoint_url,
            "region_name": self.config.region,
            "aws_access_key_id": self.config.access_key,
            "aws_secret_access_key": self.config.secret_key,
            "use_ssl": self.config.use_ssl,
            # MinIO serves buckets on the path, not as virtual hosts
            "config": Config(
                signature_version="s3v4", s3={"addressing_style": "path"}
            ),
        }

        client = boto3.client("s3", **kwargs)  # type: ignore
        logger.info("S3 client created", endpoint=self.config.endpoint_url)
        return client

    def test_connection(self) -> bool:
        """Probe the endpoint by listing buckets.

        Returns:
            True if the probe succeeded

        Raises:
            ConnectionFailureError: If the probe fails
        """
        try:
            self.client.list_buckets()
            logger.info("Storage connection test successful")
            return True
        except (BotoCoreError, ClientError, ValueError) as e:
            error_msg = (
                f"Failed to connect to storage endpoint "
                f"'{self.config.endpoint_url}': {e}"
            )
            logger.error(error_msg)
            raise ConnectionFailureError(error_msg) from e


def connect(
    config: ConnectionConfig, client: Optional[Any] = None
) -> StorageConnection:
    """Create a connection handle and verify it with a probe call.

    Args:
        config: Connection configuration
        client: Optional pre-built boto3 S3 client

    Returns:
        A verified StorageConnection

    Raises:
        ConnectionFailureError: If the probe call fails
    """
    connection = StorageConnection(config, client=client)
    connection.test_connection()
    return connection
