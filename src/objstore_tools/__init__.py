"""Object storage operations exposed as callable tools.

This package wraps an S3-compatible object store (MinIO, AWS S3 and others)
in a small set of operations suited to an AI-assistant tool server: buckets,
objects, presigned URLs, bucket policies, batch transfers and storage
statistics. Uploads accept either a local path or an http(s) URL.

Key Features:
    - Explicit connection handles, no process-global state
    - Remote URL sources fetched to temporary files with guaranteed cleanup
    - Batch operations with per-item success/failure accounting
    - Storage statistics across every bucket
    - CLI interface

Recommended Usage:
    Use the client facade for most operations:

    >>> from objstore_tools import ConnectionConfig, ObjectStorageClient
    >>> client = ObjectStorageClient()
    >>> client.connect(ConnectionConfig(
    ...     endpoint="localhost", access_key="minioadmin", secret_key="minioadmin"
    ... ))
    >>> client.list_buckets()

Advanced Usage:
    Call the operation functions directly with a connection handle:

    >>> from objstore_tools.objectstorage import connect, list_objects
    >>> conn = connect(config)
    >>> list_objects(conn, "photos", prefix="2024/", recursive=True)
"""

__version__ = "0.1.0"

from .client import ObjectStorageClient
from .core.exceptions import (
    BackendError,
    ConnectionFailureError,
    NotConnectedError,
    NotFoundError,
    ObjstoreToolsError,
    RemoteFetchError,
    UnsupportedMethodError,
    ValidationError,
)
from .objectstorage import StorageConnection, connect
from .schemas import (
    BatchItemError,
    BatchResult,
    BucketInfo,
    BucketStats,
    ConnectionConfig,
    DownloadItem,
    ObjectInfo,
    PresignOptions,
    StorageStats,
    UploadItem,
)

__all__ = [
    # Client
    "ObjectStorageClient",
    "StorageConnection",
    "connect",
    # Schemas
    "BatchItemError",
    "BatchResult",
    "BucketInfo",
    "BucketStats",
    "ConnectionConfig",
    "DownloadItem",
    "ObjectInfo",
    "PresignOptions",
    "StorageStats",
    "UploadItem",
    # Errors
    "BackendError",
    "ConnectionFailureError",
    "NotConnectedError",
    "NotFoundError",
    "ObjstoreToolsError",
    "RemoteFetchError",
    "UnsupportedMethodError",
    "ValidationError",
]
