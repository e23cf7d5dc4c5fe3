"""Tests for fetching remote URLs into temporary files."""

import itertools

import httpx
import pytest

from objstore_tools.core import settings
from objstore_tools.core.exceptions import RemoteFetchError
from objstore_tools.objectstorage import remote_fetch
from objstore_tools.objectstorage.remote_fetch import (
    download_to_temp_file,
    is_remote_url,
)


class TestIsRemoteUrl:
    """Test URL sniffing."""

    @pytest.mark.parametrize(
        "value",
        [
            "http://example.com/file.txt",
            "https://example.com/path/to/file?x=1",
            "HTTPS://EXAMPLE.COM/f",
        ],
    )
    def test_http_urls_are_remote(self, value):
        """Test that http and https URLs are fetchable."""
        assert is_remote_url(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "/tmp/real.txt",
            "relative/path.txt",
            "C:\\data\\file.txt",
            "ftp://example.com/file.txt",
            "file:///etc/hosts",
            "s3://bucket/key",
            "http://",
            "http://[::1",
            "",
        ],
    )
    def test_other_values_are_local(self, value):
        """Test that anything else is treated as a local path."""
        assert is_remote_url(value) is False


class TestDownloadToTempFile:
    """Test streaming a URL into a temporary file."""

    def test_download_success(self, temp_dir, make_http_client):
        """Test the body lands in a uniquely named file in the temp dir."""
        client = make_http_client(body=b"0123456789")

        path = download_to_temp_file("https://example.com/f", http_client=client)

        assert path.parent == temp_dir
        assert path.name.startswith(settings.temp_file_prefix)
        assert len(path.name) == len(settings.temp_file_prefix) + 32
        assert path.read_bytes() == b"0123456789"

    def test_temp_names_are_unique(self, temp_dir, make_http_client):
        """Test two downloads never share a file."""
        client = make_http_client()

        first = download_to_temp_file("https://example.com/a", http_client=client)
        second = download_to_temp_file("https://example.com/a", http_client=client)

        assert first != second
        assert len(list(temp_dir.iterdir())) == 2

    def test_large_body_streamed(self, temp_dir, make_http_client):
        """Test bodies spanning many chunks are copied completely."""
        body = b"x" * (remote_fetch.CHUNK_SIZE * 5 + 17)
        client = make_http_client(body=body)

        path = download_to_temp_file("https://example.com/big", http_client=client)

        assert path.stat().st_size == len(body)

    def test_not_found_status(self, temp_dir, make_http_client):
        """Test a 404 response fails with the status and leaves no file."""
        client = make_http_client(status_code=404)

        with pytest.raises(RemoteFetchError, match="404") as exc_info:
            download_to_temp_file("https://example.com/missing", http_client=client)

        assert exc_info.value.status_code == 404
        assert "Not Found" in str(exc_info.value)
        assert list(temp_dir.iterdir()) == []

    def test_server_error_status(self, temp_dir, make_http_client):
        """Test a 5xx response is terminal."""
        client = make_http_client(status_code=503)

        with pytest.raises(RemoteFetchError, match="503"):
            download_to_temp_file("https://example.com/f", http_client=client)

        assert list(temp_dir.iterdir()) == []

    def test_transport_error(self, temp_dir, make_http_client):
        """Test connection errors are wrapped and leave no file."""
        client = make_http_client(raise_error=httpx.ConnectError("Connection refused"))

        with pytest.raises(RemoteFetchError, match="Connection refused"):
            download_to_temp_file("https://example.com/f", http_client=client)

        assert list(temp_dir.iterdir()) == []

    def test_timeout(self, temp_dir, make_http_client):
        """Test a request timeout fails with a timeout error."""
        client = make_http_client(raise_error=httpx.ReadTimeout("timed out"))

        with pytest.raises(RemoteFetchError, match="timed out"):
            download_to_temp_file("https://example.com/f", http_client=client)

        assert list(temp_dir.iterdir()) == []

    def test_error_mid_stream_removes_partial_file(self, temp_dir):
        """Test a failure after some bytes were written removes the file."""

        def body():
            yield b"partial data"
            raise httpx.ReadError("connection reset")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body())

        client = httpx.Client(transport=httpx.MockTransport(handler))

        with pytest.raises(RemoteFetchError, match="connection reset"):
            download_to_temp_file("https://example.com/f", http_client=client)

        assert list(temp_dir.iterdir()) == []

    def test_overall_deadline(self, temp_dir, make_http_client, monkeypatch):
        """Test the copy loop aborts once the overall deadline has passed."""
        clock = itertools.chain([0.0], itertools.repeat(100.0))
        monkeypatch.setattr(remote_fetch.time, "monotonic", lambda: next(clock))
        client = make_http_client(body=b"slow body")

        with pytest.raises(RemoteFetchError, match="timed out"):
            download_to_temp_file(
                "https://example.com/f", timeout=30.0, http_client=client
            )

        assert list(temp_dir.iterdir()) == []

    def test_default_timeout_from_settings(self):
        """Test the default timeout is thirty seconds."""
        assert settings.fetch_timeout_seconds == 30.0

    def test_injected_client_not_closed(self, temp_dir, make_http_client):
        """Test a caller-owned client stays usable after a download."""
        client = make_http_client()

        download_to_temp_file("https://example.com/f", http_client=client)

        assert client.is_closed is False
