"""Batch transfer and delete operations with partial-success accounting.

Every batch path reports one outcome per requested item, so
``success_count + failure_count`` always equals the number of items. A failed
item is recorded and the batch moves on to the next one.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, TypeVar

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from objstore_tools.core import get_logger
from objstore_tools.objectstorage.clients import StorageConnection
from objstore_tools.objectstorage.objects import delete_object
from objstore_tools.objectstorage.transfer import download_file, upload_file
from objstore_tools.schemas import BatchItemError, BatchResult, DownloadItem, UploadItem

logger = get_logger(__name__)

T = TypeVar("T")

# S3 accepts at most this many keys per DeleteObjects request
MAX_DELETE_KEYS = 1000


@dataclass(frozen=True)
class ItemOutcome:
    """Result of one batch item: error is None on success."""

    item: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def attempt(item: str, operation: Callable[[], None]) -> ItemOutcome:
    """Run one item's operation and capture its failure as a value."""
    try:
        operation()
    except Exception as e:
        logger.warning("Batch item failed", item=item, error=str(e))
        return ItemOutcome(item=item, error=str(e))
    return ItemOutcome(item=item)


def collect(outcomes: Iterable[ItemOutcome]) -> BatchResult:
    """Fold per-item outcomes into a BatchResult, preserving order."""
    success_count = 0
    errors = []
    for outcome in outcomes:
        if outcome.ok:
            success_count += 1
        else:
            errors.append(BatchItemError(item=outcome.item, error=outcome.error or ""))

    return BatchResult(
        success_count=success_count,
        failure_count=len(errors),
        errors=errors,
    )


def run_batch(
    items: Sequence[T],
    operation: Callable[[T], None],
    identify: Callable[[T], str],
) -> BatchResult:
    """Apply operation to each item in order and aggregate the outcomes."""
    result = collect(
        attempt(identify(item), lambda item=item: operation(item)) for item in items
    )
    logger.info(
        "Batch completed",
        item_count=len(items),
        success_count=result.success_count,
        failure_count=result.failure_count,
    )
    return result


def upload_files(
    conn: StorageConnection,
    bucket: str,
    items: Sequence[UploadItem],
    http_client: Optional[httpx.Client] = None,
) -> BatchResult:
    """Upload several files or URLs; items are identified by their source."""
    logger.info("Batch upload started", bucket=bucket, item_count=len(items))
    return run_batch(
        items,
        lambda item: upload_file(
            conn,
            bucket,
            item.object_name,
            item.source,
            metadata=item.metadata,
            http_client=http_client,
        ),
        lambda item: item.source,
    )


def download_files(
    conn: StorageConnection, bucket: str, items: Sequence[DownloadItem]
) -> BatchResult:
    """Download several objects; items are identified by their object name."""
    logger.info("Batch download started", bucket=bucket, item_count=len(items))
    return run_batch(
        items,
        lambda item: download_file(conn, bucket, item.object_name, item.local_path),
        lambda item: item.object_name,
    )


def _delete_chunk(
    conn: StorageConnection, bucket: str, names: Sequence[str]
) -> list[ItemOutcome]:
    """Delete one chunk of names in a single request.

    If the request itself fails, each name is retried with its own delete
    call so that every name still gets an individual outcome.
    """
    try:
        response = conn.client.delete_objects(
            Bucket=bucket,
            Delete={"Objects": [{"Key": name} for name in names], "Quiet": True},
        )
    except (BotoCoreError, ClientError) as e:
        logger.warning(
            "Bulk delete failed, deleting objects one by one",
            bucket=bucket,
            item_count=len(names),
            error=str(e),
        )
        return [
            attempt(name, lambda name=name: delete_object(conn, bucket, name))
            for name in names
        ]

    failed = {
        err["Key"]: f"{err.get('Code', 'Error')}: {err.get('Message', '')}"
        for err in response.get("Errors", [])
    }
    return [ItemOutcome(item=name, error=failed.get(name)) for name in names]


def delete_objects(
    conn: StorageConnection, bucket: str, names: Sequence[str]
) -> BatchResult:
    """Delete many objects using bulk requests with per-name accounting."""
    logger.info("Batch delete started", bucket=bucket, item_count=len(names))

    outcomes: list[ItemOutcome] = []
    for start in range(0, len(names), MAX_DELETE_KEYS):
        chunk = names[start : start + MAX_DELETE_KEYS]
        outcomes.extend(_delete_chunk(conn, bucket, chunk))

    result = collect(outcomes)
    logger.info(
        "Batch delete completed",
        bucket=bucket,
        success_count=result.success_count,
        failure_count=result.failure_count,
    )
    return result
