"""Download remote http(s) resources into temporary files.

Uploads accept either a local path or a URL as their source. URLs are fetched
into a uniquely named file in the system temp directory first, and the caller
removes that file once the upload attempt is over.
"""

import secrets
import tempfile
import time
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx

from objstore_tools.core import get_logger, settings
from objstore_tools.core.exceptions import RemoteFetchError

logger = get_logger(__name__)

REMOTE_SCHEMES = ("http", "https")
CHUNK_SIZE = 64 * 1024


def is_remote_url(value: str) -> bool:
    """Return True if value is an http(s) URL that can be fetched.

    Anything else, including strings that fail to parse, is treated as a
    local path by callers.
    """
    try:
        parsed = urlparse(value)
    except (TypeError, ValueError):
        return False
    return parsed.scheme in REMOTE_SCHEMES and bool(parsed.netloc)


def make_temp_path() -> Path:
    """Return a collision-resistant path in the system temp directory."""
    name = f"{settings.temp_file_prefix}{secrets.token_hex(16)}"
    return Path(tempfile.gettempdir()) / name


def remove_temp_file(path: Path) -> None:
    """Remove a temporary file, logging instead of raising on failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Failed to remove temporary file", path=str(path), error=str(e))


def download_to_temp_file(
    url: str,
    timeout: Optional[float] = None,
    http_client: Optional[httpx.Client] = None,
) -> Path:
    """Stream a remote resource into a new temporary file.

    The body is copied chunk by chunk, so arbitrarily large responses never
    sit in memory. The timeout applies separately to each network phase
    (connect, waiting for headers, each body read). The body copy also aborts
    once timeout seconds have passed since the request started. A server that stalls before its headers can
    still hold the request for up to about twice the timeout.

    Args:
        url: http(s) URL to fetch
        timeout: Timeout in seconds, defaults to settings.fetch_timeout_seconds
        http_client: Optional httpx.Client for dependency injection (testing)

    Returns:
        Path of the temporary file holding the full response body

    Raises:
        RemoteFetchError: On a non-2xx status, a transport error or a timeout.
            No partial file is left behind in any of these cases.
    """
    if timeout is None:
        timeout = settings.fetch_timeout_seconds

    temp_path = make_temp_path()
    owns_client = http_client is None
    client = http_client or httpx.Client()
    deadline = time.monotonic() + timeout

    logger.info("Downloading remote resource", url=url, temp_path=str(temp_path))

    try:
        with client.stream(
            "GET", url, timeout=timeout, follow_redirects=True
        ) as response:
            if not response.is_success:
                raise RemoteFetchError(
                    f"Failed to download '{url}': "
                    f"{response.status_code} {response.reason_phrase}",
                    status_code=response.status_code,
                )

            with open(temp_path, "wb") as fh:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    if time.monotonic() > deadline:
                        raise httpx.ReadTimeout(
                            f"Download exceeded {timeout}s", request=response.request
                        )
                    fh.write(chunk)

    except RemoteFetchError as e:
        remove_temp_file(temp_path)
        logger.error("Remote download failed", url=url, error=str(e))
        raise
    except httpx.TimeoutException as e:
        remove_temp_file(temp_path)
        error_msg = f"Download of '{url}' timed out after {timeout}s"
        logger.error(error_msg, error=str(e))
        raise RemoteFetchError(error_msg) from e
    except (httpx.HTTPError, OSError) as e:
        remove_temp_file(temp_path)
        error_msg = f"Failed to download '{url}': {e}"
        logger.error(error_msg, error=str(e))
        raise RemoteFetchError(error_msg) from e
    finally:
        if owns_client:
            client.close()

    logger.info(
        "Remote resource downloaded",
        url=url,
        temp_path=str(temp_path),
        size=temp_path.stat().st_size,
    )
    return temp_path
