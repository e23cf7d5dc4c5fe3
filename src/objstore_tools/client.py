"""Stateful client facade over the object storage operations.

ObjectStorageClient is what a tool-dispatch layer holds on to: one instance
per configured endpoint, one method per exposed tool. It owns a single
StorageConnection, replaced wholesale by each successful connect().

Example:
    >>> client = ObjectStorageClient()
    >>> client.connect(ConnectionConfig(endpoint="localhost",
    ...                                 access_key="minioadmin",
    ...                                 secret_key="minioadmin"))
    >>> client.upload_file("photos", "cat.jpg", "https://example.com/cat.jpg")
"""

import functools
from typing import Any, BinaryIO, Callable, Optional, Sequence, TypeVar

import httpx

from objstore_tools.core import get_logger, get_tracer
from objstore_tools.core.exceptions import NotConnectedError
from objstore_tools.objectstorage import batch, buckets, inventory, objects, transfer
from objstore_tools.objectstorage.clients import StorageConnection, connect
from objstore_tools.schemas import (
    BatchResult,
    BucketInfo,
    ConnectionConfig,
    DownloadItem,
    ObjectInfo,
    PresignOptions,
    StorageStats,
    UploadItem,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _traced(func: F) -> F:
    """Run a client method inside an OpenTelemetry span."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        with tracer.start_as_current_span(f"objstore.{func.__name__}"):
            return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class ObjectStorageClient:
    """Object storage tool surface bound to one connection at a time."""

    def __init__(self, http_client: Optional[httpx.Client] = None):
        """Initialize an unconnected client.

        Args:
            http_client: Optional httpx.Client used to fetch remote upload sources
        """
        self._connection: Optional[StorageConnection] = None
        self._http_client = http_client

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> StorageConnection:
        """The live connection handle.

        Raises:
            NotConnectedError: If connect() has not succeeded yet
        """
        if self._connection is None:
            raise NotConnectedError(
                "Not connected to a storage endpoint, call connect() first"
            )
        return self._connection

    @_traced
    def connect(self, config: ConnectionConfig, client: Optional[Any] = None) -> None:
        """Connect to an endpoint, replacing any previous connection.

        The previous connection is kept if the probe call fails.

        Raises:
            ConnectionFailureError: If the endpoint cannot be reached
        """
        self._connection = connect(config, client=client)
        logger.info("Client connected", endpoint=config.endpoint_url)

    # Buckets

    @_traced
    def list_buckets(self) -> list[BucketInfo]:
        return inventory.list_buckets(self.connection)

    @_traced
    def create_bucket(self, bucket: str, region: Optional[str] = None) -> None:
        buckets.create_bucket(self.connection, bucket, region=region)

    @_traced
    def delete_bucket(self, bucket: str) -> None:
        buckets.delete_bucket(self.connection, bucket)

    @_traced
    def bucket_exists(self, bucket: str) -> bool:
        return buckets.bucket_exists(self.connection, bucket)

    @_traced
    def set_bucket_policy(self, bucket: str, policy: str) -> None:
        buckets.set_bucket_policy(self.connection, bucket, policy)

    @_traced
    def get_bucket_policy(self, bucket: str) -> str:
        return buckets.get_bucket_policy(self.connection, bucket)

    @_traced
    def delete_bucket_policy(self, bucket: str) -> None:
        buckets.delete_bucket_policy(self.connection, bucket)

    # Objects

    @_traced
    def list_objects(
        self, bucket: str, prefix: Optional[str] = None, recursive: bool = False
    ) -> list[ObjectInfo]:
        return inventory.list_objects(
            self.connection, bucket, prefix=prefix, recursive=recursive
        )

    @_traced
    def upload_file(
        self,
        bucket: str,
        object_name: str,
        source: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Upload a local file or http(s) URL to an object."""
        transfer.upload_file(
            self.connection,
            bucket,
            object_name,
            source,
            metadata=metadata,
            http_client=self._http_client,
        )

    @_traced
    def upload_stream(
        self,
        bucket: str,
        object_name: str,
        stream: BinaryIO,
        size: Optional[int] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        transfer.upload_stream(
            self.connection, bucket, object_name, stream, size=size, metadata=metadata
        )

    @_traced
    def download_file(self, bucket: str, object_name: str, destination: str) -> None:
        transfer.download_file(self.connection, bucket, object_name, destination)

    @_traced
    def get_object_stream(self, bucket: str, object_name: str) -> Any:
        return transfer.get_object_stream(self.connection, bucket, object_name)

    @_traced
    def delete_object(self, bucket: str, object_name: str) -> None:
        objects.delete_object(self.connection, bucket, object_name)

    @_traced
    def copy_object(
        self,
        source_bucket: str,
        source_object: str,
        dest_bucket: str,
        dest_object: str,
    ) -> None:
        objects.copy_object(
            self.connection, source_bucket, source_object, dest_bucket, dest_object
        )

    @_traced
    def get_object_info(self, bucket: str, object_name: str) -> ObjectInfo:
        return objects.get_object_info(self.connection, bucket, object_name)

    @_traced
    def generate_presigned_url(
        self,
        bucket: str,
        object_name: str,
        method: str = "GET",
        options: Optional[PresignOptions] = None,
    ) -> str:
        return objects.generate_presigned_url(
            self.connection, bucket, object_name, method=method, options=options
        )

    # Batches and statistics

    @_traced
    def upload_files(self, bucket: str, items: Sequence[UploadItem]) -> BatchResult:
        return batch.upload_files(
            self.connection, bucket, items, http_client=self._http_client
        )

    @_traced
    def download_files(self, bucket: str, items: Sequence[DownloadItem]) -> BatchResult:
        return batch.download_files(self.connection, bucket, items)

    @_traced
    def delete_objects(self, bucket: str, object_names: Sequence[str]) -> BatchResult:
        return batch.delete_objects(self.connection, bucket, object_names)

    @_traced
    def get_storage_stats(self) -> StorageStats:
        """Aggregate object counts and sizes across all buckets.

        Lists every object of every bucket on each call.
        """
        return inventory.get_storage_stats(self.connection)
