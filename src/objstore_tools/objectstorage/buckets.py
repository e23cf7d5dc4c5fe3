"""Bucket management and bucket policy operations."""

import json
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from objstore_tools.core import get_logger
from objstore_tools.core.exceptions import ValidationError
from objstore_tools.objectstorage.clients import StorageConnection, backend_error
from objstore_tools.objectstorage.clients.s3_client import NOT_FOUND_CODES, error_code

logger = get_logger(__name__)

# Region that must not be sent as a LocationConstraint
DEFAULT_REGION = "us-east-1"


def create_bucket(
    conn: StorageConnection, bucket: str, region: Optional[str] = None
) -> None:
    """Create a bucket, in the connection's region unless one is given."""
    region = region or conn.config.region or DEFAULT_REGION
    logger.info("Creating bucket", bucket=bucket, region=region)

    kwargs: dict = {"Bucket": bucket}
    if region != DEFAULT_REGION:
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}

    try:
        conn.client.create_bucket(**kwargs)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to create bucket '{bucket}'")
        logger.error(str(error))
        raise error from e

    logger.info("Bucket created", bucket=bucket)


def delete_bucket(conn: StorageConnection, bucket: str) -> None:
    """Delete an empty bucket."""
    logger.info("Deleting bucket", bucket=bucket)
    try:
        conn.client.delete_bucket(Bucket=bucket)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to delete bucket '{bucket}'")
        logger.error(str(error))
        raise error from e

    logger.info("Bucket deleted", bucket=bucket)


def bucket_exists(conn: StorageConnection, bucket: str) -> bool:
    """Return whether a bucket exists."""
    try:
        conn.client.head_bucket(Bucket=bucket)
        return True
    except ClientError as e:
        if error_code(e) in NOT_FOUND_CODES:
            return False
        error = backend_error(e, f"Failed to check bucket '{bucket}'")
        logger.error(str(error))
        raise error from e
    except BotoCoreError as e:
        error = backend_error(e, f"Failed to check bucket '{bucket}'")
        logger.error(str(error))
        raise error from e


def set_bucket_policy(conn: StorageConnection, bucket: str, policy: str) -> None:
    """Attach a JSON policy document to a bucket.

    Raises:
        ValidationError: If the policy is not a JSON document
        BackendError: If the backend rejects the policy
    """
    try:
        json.loads(policy)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Bucket policy must be valid JSON: {e}") from e

    logger.info("Setting bucket policy", bucket=bucket)
    try:
        conn.client.put_bucket_policy(Bucket=bucket, Policy=policy)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to set policy on bucket '{bucket}'")
        logger.error(str(error))
        raise error from e


def get_bucket_policy(conn: StorageConnection, bucket: str) -> str:
    """Return a bucket's policy document as a JSON string.

    Raises:
        NotFoundError: If the bucket, or its policy, does not exist
    """
    try:
        response = conn.client.get_bucket_policy(Bucket=bucket)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to get policy of bucket '{bucket}'")
        logger.error(str(error))
        raise error from e

    return response["Policy"]


def delete_bucket_policy(conn: StorageConnection, bucket: str) -> None:
    """Remove a bucket's policy.

    MinIO treats this the same as setting an empty policy.
    """
    logger.info("Deleting bucket policy", bucket=bucket)
    try:
        conn.client.delete_bucket_policy(Bucket=bucket)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to delete policy of bucket '{bucket}'")
        logger.error(str(error))
        raise error from e
