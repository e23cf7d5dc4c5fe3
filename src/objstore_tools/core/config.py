"""Configuration management for objstore-tools."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "objstore-tools"

    # Remote fetch
    fetch_timeout_seconds: float = 30.0
    temp_file_prefix: str = "objstore_tools_temp_"

    # Storage statistics
    stats_warn_object_count: int = 100_000

    # Connection defaults used by the CLI
    endpoint: Optional[str] = None
    port: int = 9000
    use_ssl: bool = False
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"

    model_config = {
        "env_prefix": "OBJSTORE_TOOLS_",
        "case_sensitive": False,
    }


settings = Settings()
