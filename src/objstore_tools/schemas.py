"""Connection, descriptor and result schemas for objstore-tools."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ConnectionConfig(BaseModel):
    """Configuration for an S3-compatible endpoint such as MinIO.

    Example:
        config = ConnectionConfig(
            endpoint="localhost",
            access_key="minioadmin",
            secret_key="minioadmin",
        )
        config.endpoint_url  # "http://localhost:9000"
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    endpoint: str = Field(..., description="Endpoint host name, without scheme")
    port: int = Field(default=9000, ge=1, le=65535, description="Endpoint port")
    use_ssl: bool = Field(default=False, description="Connect over HTTPS")
    access_key: str = Field(..., description="Access key")
    secret_key: str = Field(..., description="Secret key")
    region: str = Field(default="us-east-1", description="Region name")

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("endpoint must not be empty")
        if "://" in value:
            raise ValueError(f"endpoint must be a host name, not a URL: {value}")
        # A single colon is host:port, IPv6 literals carry several
        if value.count(":") == 1:
            raise ValueError(
                f"endpoint must not include a port, use the port field: {value}"
            )
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def endpoint_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.endpoint}:{self.port}"


class BucketInfo(BaseModel):
    """Snapshot of a bucket as returned by a listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    creation_date: Optional[datetime] = None


class ObjectInfo(BaseModel):
    """Snapshot of one stored object's metadata."""

    model_config = ConfigDict(frozen=True)

    name: str
    size: int = Field(default=0, ge=0)
    last_modified: Optional[datetime] = None
    etag: Optional[str] = None
    content_type: Optional[str] = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_dir(self) -> bool:
        return self.name.endswith("/")


class BatchItemError(BaseModel):
    """A failed item within a batch operation."""

    model_config = ConfigDict(frozen=True)

    item: str
    error: str


class BatchResult(BaseModel):
    """Aggregated outcome of applying one operation to many items."""

    model_config = ConfigDict(frozen=True)

    success_count: int = 0
    failure_count: int = 0
    errors: list[BatchItemError] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return self.failure_count == 0


class BucketStats(BaseModel):
    """Object count and byte total for one bucket."""

    model_config = ConfigDict(frozen=True)

    bucket_name: str
    object_count: int
    total_size: int


class StorageStats(BaseModel):
    """Aggregate statistics across every bucket."""

    model_config = ConfigDict(frozen=True)

    total_buckets: int = 0
    total_objects: int = 0
    total_size: int = 0
    bucket_stats: list[BucketStats] = Field(default_factory=list)


class UploadItem(BaseModel):
    """One entry of a batch upload."""

    source: str = Field(..., description="Local file path or http(s) URL")
    object_name: str = Field(..., description="Target object name")
    metadata: Optional[dict[str, str]] = Field(
        default=None, description="User metadata stored with the object"
    )


class DownloadItem(BaseModel):
    """One entry of a batch download."""

    object_name: str = Field(..., description="Object to download")
    local_path: str = Field(..., description="Destination file path")


class PresignOptions(BaseModel):
    """Options for presigned URL generation."""

    expires: int = Field(
        default=3600, ge=1, le=604800, description="Expiry in seconds"
    )
    request_params: Optional[dict[str, str]] = Field(
        default=None, description="Response header overrides for GET URLs"
    )
    request_date: Optional[datetime] = Field(
        default=None, description="Requested signing date"
    )
