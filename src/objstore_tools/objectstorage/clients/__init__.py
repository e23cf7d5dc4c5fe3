"""S3 connection management."""

from .s3_client import StorageConnection, backend_error, connect

__all__ = ["StorageConnection", "backend_error", "connect"]
