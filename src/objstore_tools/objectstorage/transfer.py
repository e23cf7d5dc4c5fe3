"""Single-item upload and download operations."""

import mimetypes
from pathlib import Path
from typing import Any, BinaryIO, Optional

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from objstore_tools.core import get_logger
from objstore_tools.core.exceptions import NotFoundError
from objstore_tools.objectstorage.clients import StorageConnection, backend_error
from objstore_tools.objectstorage.remote_fetch import (
    download_to_temp_file,
    is_remote_url,
    remove_temp_file,
)

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(object_name: str) -> str:
    """Guess a content type from the object name's extension."""
    content_type, _ = mimetypes.guess_type(object_name)
    return content_type or DEFAULT_CONTENT_TYPE


def upload_file(
    conn: StorageConnection,
    bucket: str,
    object_name: str,
    source: str,
    metadata: Optional[dict[str, str]] = None,
    http_client: Optional[httpx.Client] = None,
) -> None:
    """Upload a local file or a remote URL to an object.

    When source is an http(s) URL it is fetched into a temporary file first.
    That file is removed after the upload attempt whether or not it succeeded.

    Args:
        conn: Storage connection
        bucket: Target bucket
        object_name: Target object name
        source: Local file path or http(s) URL
        metadata: Optional user metadata stored with the object
        http_client: Optional httpx.Client used for remote sources

    Raises:
        RemoteFetchError: If a remote source cannot be fetched
        NotFoundError: If the local file does not exist
        BackendError: If the storage backend rejects the upload
    """
    temp_path: Optional[Path] = None

    try:
        if is_remote_url(source):
            temp_path = download_to_temp_file(source, http_client=http_client)
            local_path = temp_path
        else:
            local_path = Path(source)

        if not local_path.is_file():
            raise NotFoundError(f"File not found: {local_path}")

        size = local_path.stat().st_size
        logger.info(
            "Uploading file",
            bucket=bucket,
            object_name=object_name,
            source=source,
            size=size,
        )

        try:
            with open(local_path, "rb") as fh:
                conn.client.put_object(
                    Bucket=bucket,
                    Key=object_name,
                    Body=fh,
                    ContentLength=size,
                    ContentType=guess_content_type(object_name),
                    Metadata=metadata or {},
                )
        except (BotoCoreError, ClientError) as e:
            error = backend_error(
                e, f"Failed to upload '{source}' to {bucket}/{object_name}"
            )
            logger.error(str(error))
            raise error from e

        logger.info("File uploaded", bucket=bucket, object_name=object_name)

    finally:
        if temp_path is not None:
            remove_temp_file(temp_path)


def upload_stream(
    conn: StorageConnection,
    bucket: str,
    object_name: str,
    stream: BinaryIO,
    size: Optional[int] = None,
    metadata: Optional[dict[str, str]] = None,
) -> None:
    """Upload the contents of an open binary stream to an object.

    With a known size the stream is sent in a single request. Without one the
    SDK's managed transfer reads the stream in parts.
    """
    logger.info("Uploading stream", bucket=bucket, object_name=object_name, size=size)

    try:
        if size is not None:
            conn.client.put_object(
                Bucket=bucket,
                Key=object_name,
                Body=stream,
                ContentLength=size,
                ContentType=guess_content_type(object_name),
                Metadata=metadata or {},
            )
        else:
            conn.client.upload_fileobj(
                stream,
                bucket,
                object_name,
                ExtraArgs={
                    "ContentType": guess_content_type(object_name),
                    "Metadata": metadata or {},
                },
            )
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to upload stream to {bucket}/{object_name}")
        logger.error(str(error))
        raise error from e

    logger.info("Stream uploaded", bucket=bucket, object_name=object_name)


def download_file(
    conn: StorageConnection,
    bucket: str,
    object_name: str,
    destination: str,
) -> None:
    """Download an object to a local path, creating parent directories."""
    destination_path = Path(destination)
    destination_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Downloading object",
        bucket=bucket,
        object_name=object_name,
        destination=destination,
    )

    try:
        conn.client.download_file(bucket, object_name, str(destination_path))
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to download {bucket}/{object_name}")
        logger.error(str(error))
        raise error from e

    logger.info("Object downloaded", bucket=bucket, object_name=object_name)


def get_object_stream(conn: StorageConnection, bucket: str, object_name: str) -> Any:
    """Return a readable stream over an object's content.

    The caller owns the returned stream and should close it when done.
    """
    try:
        response = conn.client.get_object(Bucket=bucket, Key=object_name)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to read {bucket}/{object_name}")
        logger.error(str(error))
        raise error from e

    return response["Body"]
