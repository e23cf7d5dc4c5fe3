"""Single-object operations: delete, copy, stat and presigned URLs."""

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from objstore_tools.core import get_logger
from objstore_tools.core.exceptions import UnsupportedMethodError, ValidationError
from objstore_tools.objectstorage.clients import StorageConnection, backend_error
from objstore_tools.schemas import ObjectInfo, PresignOptions

logger = get_logger(__name__)

PRESIGN_CLIENT_METHODS = {
    "GET": "get_object",
    "PUT": "put_object",
    "DELETE": "delete_object",
}


def delete_object(conn: StorageConnection, bucket: str, object_name: str) -> None:
    """Delete a single object."""
    logger.info("Deleting object", bucket=bucket, object_name=object_name)
    try:
        conn.client.delete_object(Bucket=bucket, Key=object_name)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to delete {bucket}/{object_name}")
        logger.error(str(error))
        raise error from e


def copy_object(
    conn: StorageConnection,
    source_bucket: str,
    source_object: str,
    dest_bucket: str,
    dest_object: str,
) -> None:
    """Server-side copy of an object."""
    logger.info(
        "Copying object",
        source=f"{source_bucket}/{source_object}",
        destination=f"{dest_bucket}/{dest_object}",
    )
    try:
        conn.client.copy_object(
            Bucket=dest_bucket,
            Key=dest_object,
            CopySource={"Bucket": source_bucket, "Key": source_object},
        )
    except (BotoCoreError, ClientError) as e:
        error = backend_error(
            e,
            f"Failed to copy {source_bucket}/{source_object} "
            f"to {dest_bucket}/{dest_object}",
        )
        logger.error(str(error))
        raise error from e


def get_object_info(
    conn: StorageConnection, bucket: str, object_name: str
) -> ObjectInfo:
    """Fetch an object's metadata without reading its content."""
    try:
        head = conn.client.head_object(Bucket=bucket, Key=object_name)
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to stat {bucket}/{object_name}")
        logger.error(str(error))
        raise error from e

    return ObjectInfo(
        name=object_name,
        size=head.get("ContentLength", 0),
        last_modified=head.get("LastModified"),
        etag=head.get("ETag", "").strip('"') or None,
        content_type=head.get("ContentType"),
        metadata=head.get("Metadata", {}),
    )


def _request_param_name(name: str) -> str:
    """Convert query-style names to boto3 parameter names.

    'response-content-type' becomes 'ResponseContentType' and 'versionId'
    becomes 'VersionId'.
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("-"))


def _request_params(
    conn: StorageConnection, method: str, request_params: dict[str, str]
) -> dict[str, str]:
    """Map request parameters onto the presigned operation's input members.

    Raises:
        ValidationError: If the operation does not take one of the parameters
    """
    client_method = PRESIGN_CLIENT_METHODS[method]
    api_name = conn.client.meta.method_to_api_mapping[client_method]
    operation = conn.client.meta.service_model.operation_model(api_name)
    members = operation.input_shape.members

    params = {}
    for name, value in request_params.items():
        param = _request_param_name(name)
        if param not in members or param in ("Bucket", "Key"):
            raise ValidationError(
                f"Unsupported request parameter for presigned {method}: {name}"
            )
        params[param] = value
    return params


def generate_presigned_url(
    conn: StorageConnection,
    bucket: str,
    object_name: str,
    method: str = "GET",
    options: Optional[PresignOptions] = None,
) -> str:
    """Generate a time-limited URL for GET, PUT or DELETE on an object.

    Args:
        conn: Storage connection
        bucket: Bucket name
        object_name: Object name
        method: One of GET, PUT or DELETE (case-insensitive)
        options: Expiry and request parameter overrides

    Returns:
        The presigned URL

    Raises:
        UnsupportedMethodError: If method is not GET, PUT or DELETE
        ValidationError: If a request parameter does not apply to the method
    """
    method = method.upper()
    if method not in PRESIGN_CLIENT_METHODS:
        raise UnsupportedMethodError(
            f"Unsupported HTTP method for presigned URL: {method}. "
            f"Must be one of {', '.join(PRESIGN_CLIENT_METHODS)}"
        )

    options = options or PresignOptions()
    params: dict = {"Bucket": bucket, "Key": object_name}
    if options.request_params:
        params.update(_request_params(conn, method, options.request_params))

    if options.request_date is not None:
        # SigV4 presigning always signs at the current time
        logger.debug(
            "Ignoring requested signing date",
            request_date=options.request_date.isoformat(),
        )

    try:
        url = conn.client.generate_presigned_url(
            ClientMethod=PRESIGN_CLIENT_METHODS[method],
            Params=params,
            ExpiresIn=options.expires,
            HttpMethod=method,
        )
    except (BotoCoreError, ClientError) as e:
        error = backend_error(e, f"Failed to presign {method} {bucket}/{object_name}")
        logger.error(str(error))
        raise error from e

    logger.info(
        "Presigned URL generated",
        bucket=bucket,
        object_name=object_name,
        method=method,
        expires=options.expires,
    )
    return url
