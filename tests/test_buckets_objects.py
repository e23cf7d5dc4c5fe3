"""Tests for bucket, policy and single-object operations."""

import json
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from objstore_tools.core.exceptions import (
    BackendError,
    NotFoundError,
    UnsupportedMethodError,
    ValidationError,
)
from objstore_tools.objectstorage.buckets import (
    bucket_exists,
    create_bucket,
    delete_bucket,
    delete_bucket_policy,
    get_bucket_policy,
    set_bucket_policy,
)
from objstore_tools.objectstorage.clients import StorageConnection
from objstore_tools.objectstorage.objects import (
    copy_object,
    delete_object,
    generate_presigned_url,
    get_object_info,
)
from objstore_tools.schemas import PresignOptions

PUBLIC_READ_POLICY = json.dumps(
    {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": "*",
                "Action": ["s3:GetObject"],
                "Resource": ["arn:aws:s3:::test-bucket/*"],
            }
        ],
    }
)


class TestBuckets:
    """Test bucket management."""

    def test_create_and_exists(self, connection):
        """Test a created bucket exists."""
        assert bucket_exists(connection, "new-bucket") is False

        create_bucket(connection, "new-bucket")

        assert bucket_exists(connection, "new-bucket") is True

    def test_create_in_region(self, connection, s3_client):
        """Test a non-default region is sent as a location constraint."""
        create_bucket(connection, "eu-bucket", region="eu-west-1")

        location = s3_client.get_bucket_location(Bucket="eu-bucket")
        assert location["LocationConstraint"] == "eu-west-1"

    def test_create_bucket_backend_error(self, connection_config):
        """Test other backend failures surface as BackendError."""
        client = Mock()
        client.create_bucket.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}},
            "CreateBucket",
        )
        conn = StorageConnection(connection_config, client=client)

        with pytest.raises(BackendError, match="AccessDenied"):
            create_bucket(conn, "b")

    def test_bucket_exists_backend_error(self, connection_config):
        """Test non-404 failures are not reported as a missing bucket."""
        client = Mock()
        client.head_bucket.side_effect = ClientError(
            {"Error": {"Code": "403", "Message": "Forbidden"}}, "HeadBucket"
        )
        conn = StorageConnection(connection_config, client=client)

        with pytest.raises(BackendError):
            bucket_exists(conn, "b")

    def test_delete_bucket(self, connection, bucket):
        """Test a deleted bucket no longer exists."""
        delete_bucket(connection, bucket)

        assert bucket_exists(connection, bucket) is False

    def test_delete_missing_bucket(self, connection):
        """Test deleting a missing bucket fails with NotFoundError."""
        with pytest.raises(NotFoundError):
            delete_bucket(connection, "no-such-bucket")


class TestBucketPolicy:
    """Test bucket policy operations."""

    def test_set_and_get_policy(self, connection, bucket):
        """Test a policy round-trips as the same document."""
        set_bucket_policy(connection, bucket, PUBLIC_READ_POLICY)

        policy = get_bucket_policy(connection, bucket)

        assert json.loads(policy) == json.loads(PUBLIC_READ_POLICY)

    def test_invalid_policy(self, connection, bucket):
        """Test a non-JSON policy is rejected before any backend call."""
        with pytest.raises(ValidationError, match="valid JSON"):
            set_bucket_policy(connection, bucket, "not json")

    def test_get_missing_policy(self, connection, bucket):
        """Test a bucket without a policy fails with NotFoundError."""
        with pytest.raises(NotFoundError):
            get_bucket_policy(connection, bucket)

    def test_delete_policy(self, connection, bucket):
        """Test a deleted policy can no longer be read."""
        set_bucket_policy(connection, bucket, PUBLIC_READ_POLICY)

        delete_bucket_policy(connection, bucket)

        with pytest.raises(NotFoundError):
            get_bucket_policy(connection, bucket)


class TestObjects:
    """Test single-object operations."""

    def test_delete_object(self, connection, bucket, s3_client):
        """Test a deleted object is gone."""
        s3_client.put_object(Bucket=bucket, Key="file.txt", Body=b"data")

        delete_object(connection, bucket, "file.txt")

        assert "Contents" not in s3_client.list_objects_v2(Bucket=bucket)

    def test_copy_object(self, connection, bucket, s3_client):
        """Test an object is copied across buckets."""
        s3_client.create_bucket(Bucket="dest-bucket")
        s3_client.put_object(Bucket=bucket, Key="src.txt", Body=b"copy me")

        copy_object(connection, bucket, "src.txt", "dest-bucket", "dst.txt")

        body = s3_client.get_object(Bucket="dest-bucket", Key="dst.txt")["Body"].read()
        assert body == b"copy me"

    def test_copy_missing_object(self, connection, bucket):
        """Test copying a missing object fails with NotFoundError."""
        with pytest.raises(NotFoundError):
            copy_object(connection, bucket, "missing", bucket, "dst")

    def test_get_object_info(self, connection, bucket, s3_client):
        """Test metadata is read without the content."""
        s3_client.put_object(
            Bucket=bucket,
            Key="doc.html",
            Body=b"<html></html>",
            ContentType="text/html",
            Metadata={"author": "bob"},
        )

        info = get_object_info(connection, bucket, "doc.html")

        assert info.name == "doc.html"
        assert info.size == 13
        assert info.content_type == "text/html"
        assert info.metadata == {"author": "bob"}
        assert info.etag and not info.etag.startswith('"')
        assert info.last_modified is not None
        assert info.is_dir is False

    def test_get_object_info_missing(self, connection, bucket):
        """Test stat of a missing object fails with NotFoundError."""
        with pytest.raises(NotFoundError):
            get_object_info(connection, bucket, "missing")


class TestPresignedUrls:
    """Test presigned URL generation."""

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "get"])
    def test_supported_methods(self, connection, bucket, method):
        """Test URLs are generated for GET, PUT and DELETE."""
        url = generate_presigned_url(connection, bucket, "data/file.txt", method)

        assert "test-bucket" in url
        assert "data/file.txt" in url

    def test_request_params(self, connection, bucket):
        """Test GET response overrides are signed into the URL."""
        url = generate_presigned_url(
            connection,
            bucket,
            "file.txt",
            options=PresignOptions(
                expires=600,
                request_params={"response-content-type": "text/plain"},
            ),
        )

        assert "response-content-type=text%2Fplain" in url

    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_version_id_param(self, connection, bucket, method):
        """Test a query-style versionId is signed into GET and DELETE URLs."""
        url = generate_presigned_url(
            connection,
            bucket,
            "file.txt",
            method,
            options=PresignOptions(request_params={"versionId": "abc"}),
        )

        assert "versionId=abc" in url

    def test_param_not_taken_by_method(self, connection, bucket):
        """Test a response override on DELETE is rejected before signing."""
        with pytest.raises(ValidationError, match="response-content-type"):
            generate_presigned_url(
                connection,
                bucket,
                "file.txt",
                "DELETE",
                options=PresignOptions(
                    request_params={"response-content-type": "text/plain"}
                ),
            )

    def test_request_date_accepted(self, connection, bucket):
        """Test a requested signing date does not break generation."""
        url = generate_presigned_url(
            connection,
            bucket,
            "file.txt",
            options=PresignOptions(request_date=datetime.now(timezone.utc)),
        )

        assert url

    def test_unsupported_method(self, connection_config):
        """Test PATCH fails without any backend call."""
        client = Mock()
        conn = StorageConnection(connection_config, client=client)

        with pytest.raises(UnsupportedMethodError, match="PATCH"):
            generate_presigned_url(conn, "b", "k", method="PATCH")

        client.generate_presigned_url.assert_not_called()

    def test_presign_against_endpoint(self, connection_config, aws_credentials):
        """Test URLs for a MinIO endpoint are path-style and signed."""
        conn = StorageConnection(connection_config)

        url = generate_presigned_url(
            conn, "photos", "cat.jpg", options=PresignOptions(expires=600)
        )

        assert url.startswith("http://localhost:9000/photos/cat.jpg?")
        assert "X-Amz-Expires=600" in url
        assert "X-Amz-Signature=" in url
