"""Bucket and object listings, and storage statistics.

Listings drain the backend's pagination fully and return plain lists.

Storage statistics are recomputed from a full recursive listing of every
bucket on each call. The cost is proportional to the total number of objects
in the deployment; nothing is cached or sampled.
"""

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from objstore_tools.core import get_logger, settings
from objstore_tools.objectstorage.clients import StorageConnection, backend_error
from objstore_tools.schemas import BucketInfo, BucketStats, ObjectInfo, StorageStats

logger = get_logger(__name__)

DELIMITER = "/"


def list_buckets(conn: StorageConnection) -> list[BucketInfo]:
    """List every bucket visible to the connection's credentials."""
    try:
        response = conn.client.list_buckets()
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, "Failed to list buckets")
        logger.error(str(error))
        raise error from e

    buckets = [
        BucketInfo(name=bucket["Name"], creation_date=bucket.get("CreationDate"))
        for bucket in response.get("Buckets", [])
    ]
    logger.info("Buckets listed", bucket_count=len(buckets))
    return buckets


def list_objects(
    conn: StorageConnection,
    bucket: str,
    prefix: Optional[str] = None,
    recursive: bool = False,
) -> list[ObjectInfo]:
    """List objects in a bucket, optionally under a prefix.

    Non-recursive listings group deeper names by "/" and return each group as
    a directory entry whose name ends with "/".

    Args:
        conn: Storage connection
        bucket: Bucket name
        prefix: Only return names starting with this prefix
        recursive: List every object under the prefix instead of one level

    Returns:
        Objects in backend order, directory entries after the objects of
        each page
    """
    logger.info("Listing objects", bucket=bucket, prefix=prefix, recursive=recursive)

    paginate_kwargs: dict = {"Bucket": bucket}
    if prefix:
        paginate_kwargs["Prefix"] = prefix
    if not recursive:
        paginate_kwargs["Delimiter"] = DELIMITER

    objects: list[ObjectInfo] = []

    try:
        paginator = conn.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(**paginate_kwargs):
            for obj in page.get("Contents", []):
                objects.append(
                    ObjectInfo(
                        name=obj["Key"],
                        size=obj.get("Size", 0),
                        last_modified=obj.get("LastModified"),
                        etag=obj.get("ETag", "").strip('"') or None,
                    )
                )
            for common_prefix in page.get("CommonPrefixes", []):
                objects.append(ObjectInfo(name=common_prefix["Prefix"]))
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to list objects in bucket '{bucket}'")
        logger.error(str(error))
        raise error from e

    logger.info(
        "Objects listed", bucket=bucket, prefix=prefix, object_count=len(objects)
    )
    return objects


def get_storage_stats(conn: StorageConnection) -> StorageStats:
    """Count objects and bytes across every bucket."""
    buckets = list_buckets(conn)

    bucket_stats = []
    total_objects = 0
    total_size = 0

    for bucket in buckets:
        objects = list_objects(conn, bucket.name, recursive=True)
        bucket_size = sum(obj.size for obj in objects)

        bucket_stats.append(
            BucketStats(
                bucket_name=bucket.name,
                object_count=len(objects),
                total_size=bucket_size,
            )
        )
        total_objects += len(objects)
        total_size += bucket_size

    if total_objects > settings.stats_warn_object_count:
        logger.warning(
            "Storage statistics scanned a large number of objects",
            total_objects=total_objects,
            threshold=settings.stats_warn_object_count,
        )

    stats = StorageStats(
        total_buckets=len(buckets),
        total_objects=total_objects,
        total_size=total_size,
        bucket_stats=bucket_stats,
    )
    logger.info(
        "Storage statistics computed",
        total_buckets=stats.total_buckets,
        total_objects=stats.total_objects,
        total_size=stats.total_size,
    )
    return stats
