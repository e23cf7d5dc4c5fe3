"""Test configuration and fixtures for objstore-tools."""

import tempfile
from typing import Callable, Optional

import boto3
import httpx
import pytest
from moto import mock_aws

from objstore_tools.objectstorage.clients import StorageConnection
from objstore_tools.schemas import ConnectionConfig

TEST_BUCKET = "test-bucket"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Keep boto3 away from any real credentials."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    """Create a mocked S3 client."""
    with mock_aws():
        yield boto3.client(
            "s3",
            aws_access_key_id="test_key",
            aws_secret_access_key="test_secret",
            region_name="us-east-1",
        )


@pytest.fixture
def connection_config():
    """Connection configuration for a local MinIO-style endpoint."""
    return ConnectionConfig(
        endpoint="localhost",
        access_key="test_key",
        secret_key="test_secret",
    )


@pytest.fixture
def connection(s3_client, connection_config):
    """Connection handle backed by the mocked S3 client."""
    return StorageConnection(connection_config, client=s3_client)


@pytest.fixture
def bucket(s3_client):
    """Create an empty test bucket."""
    s3_client.create_bucket(Bucket=TEST_BUCKET)
    return TEST_BUCKET


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    """Redirect the system temp directory to an isolated, empty directory."""
    isolated = tmp_path / "system-tmp"
    isolated.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(isolated))
    return isolated


@pytest.fixture
def make_http_client() -> Callable[..., httpx.Client]:
    """Build httpx clients answered by a MockTransport."""

    def _make_client(
        status_code: int = 200,
        body: bytes = b"remote content",
        raise_error: Optional[Exception] = None,
    ) -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            if raise_error is not None:
                raise raise_error
            return httpx.Response(status_code=status_code, content=body)

        return httpx.Client(transport=httpx.MockTransport(handler))

    return _make_client
