# src/uploader/settings.py
import logging
from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"


class DiskConfig(BaseModel):
    """Configuration of a single named disk."""

    driver: str = Field(
        default="local",
        description="Storage driver: local, s3, or a driver registered with UploadManager.extend"
    )

    # Local driver
    root: str = Field(
        default="storage",
        description="Root directory for the local driver"
    )

    # Public base URL; for s3 disks this overrides the bucket URL
    url: Optional[str] = Field(
        default=None,
        description="Base URL used to build public file URLs"
    )

    # S3 driver
    bucket: Optional[str] = Field(
        default=None,
        description="S3 bucket name"
    )
    prefix: str = Field(
        default="",
        description="Key prefix prepended to every object on this disk"
    )
    region: Optional[str] = Field(
        default=None,
        description="AWS region (falls back to AWS_DEFAULT_REGION)"
    )
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint for S3-compatible stores (falls back to AWS_ENDPOINT_URL)"
    )

    visibility: Optional[str] = Field(
        default=None,
        description="Default visibility for writes when the caller sets none"
    )

    @field_validator("driver")
    @classmethod
    def normalize_driver(cls, v):
        return v.strip().lower()

    @field_validator("visibility")
    @classmethod
    def validate_visibility(cls, v):
        if v is None:
            return v
        valid = [VISIBILITY_PUBLIC, VISIBILITY_PRIVATE]
        if v not in valid:
            raise ValueError(f"Invalid visibility: {v}. Must be one of {valid}")
        return v


def _default_disks() -> Dict[str, DiskConfig]:
    return {
        "local": DiskConfig(driver="local", root="storage", url="/storage"),
        "s3": DiskConfig(driver="s3", bucket="uploads"),
    }


class Settings(BaseSettings):
    """
    Single source of truth for uploader settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Disks are configured as JSON, e.g.
    UPLOADER_DISKS='{"local": {"driver": "local", "root": "/srv/uploads"}}'

    Usage:
        from uploader.settings import get_settings
        settings = get_settings()
        disk = settings.disk_config("s3")
    """

    # Application Settings
    app_name: str = Field(
        default="uploader",
        description="Application name"
    )

    # Disks
    default_disk: str = Field(
        default="local",
        description="Disk used when a caller does not name one"
    )

    disks: Dict[str, DiskConfig] = Field(
        default_factory=_default_disks,
        description="Named disk configurations"
    )

    temporary_url_ttl_seconds: int = Field(
        default=3600,
        gt=0,
        description="Default lifetime of temporary URLs"
    )

    # AWS Core Settings, shared defaults for s3 disks
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log_level: {v}")
        return level

    def disk_config(self, name: Optional[str] = None) -> Optional[DiskConfig]:
        """Return the configuration of the named (or default) disk, if any."""
        return self.disks.get(name or self.default_disk)

    @property
    def disk_names(self) -> List[str]:
        return sorted(self.disks.keys())

    model_config = SettingsConfigDict(
        env_prefix="UPLOADER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
