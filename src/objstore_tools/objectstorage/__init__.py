"""Object storage operations for S3-compatible services."""

from .batch import delete_objects, download_files, upload_files
from .buckets import (
    bucket_exists,
    create_bucket,
    delete_bucket,
    delete_bucket_policy,
    get_bucket_policy,
    set_bucket_policy,
)
from .clients import StorageConnection, connect
from .inventory import get_storage_stats, list_buckets, list_objects
from .objects import (
    copy_object,
    delete_object,
    generate_presigned_url,
    get_object_info,
)
from .remote_fetch import download_to_temp_file, is_remote_url
from .transfer import download_file, get_object_stream, upload_file, upload_stream

__all__ = [
    "StorageConnection",
    "connect",
    "bucket_exists",
    "create_bucket",
    "delete_bucket",
    "delete_bucket_policy",
    "get_bucket_policy",
    "set_bucket_policy",
    "copy_object",
    "delete_object",
    "generate_presigned_url",
    "get_object_info",
    "delete_objects",
    "download_files",
    "upload_files",
    "download_file",
    "get_object_stream",
    "upload_file",
    "upload_stream",
    "download_to_temp_file",
    "is_remote_url",
    "get_storage_stats",
    "list_buckets",
    "list_objects",
]
