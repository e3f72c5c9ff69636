####################################
# --- Request/response schemas --- #
####################################

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from uploader.naming import Strategy


class UploadResponse(BaseModel):
    """Response model for `POST /v1/uploads`."""
    path: str = Field(
        description="The stored path of the file, relative to the disk root.",
        json_schema_extra={"example": "avatars/photo_3.jpg"},
    )
    url: str = Field(description="Public URL of the stored file.")
    disk: str = Field(description="The disk the file was written to.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "path": "avatars/photo_3.jpg",
                "url": "https://uploads.s3.us-east-1.amazonaws.com/avatars/photo_3.jpg",
                "disk": "s3",
            }
        }
    )


class UrlQueryParams(BaseModel):
    """Query parameters for `GET /v1/uploads/url`."""
    path: str = Field(description="Stored path, or an absolute URL.")
    disk: Optional[str] = Field(None, description="Disk name; the default disk when omitted.")
    expires_in: Optional[int] = Field(
        None,
        gt=0,
        description="Lifetime in seconds; when set a temporary URL is requested.",
    )


class UrlResponse(BaseModel):
    """Response model for `GET /v1/uploads/url`."""
    path: str
    url: str
    temporary: bool = Field(description="Whether a time-limited URL was requested.")


class DeleteUploadResponse(BaseModel):
    """Response model for `DELETE /v1/uploads/:path`."""
    path: str
    deleted: bool


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str
    default_disk: str
    disks: List[str]


# Exposed so the form field and the CLI share the same choices
STRATEGY_CHOICES = [strategy.value for strategy in Strategy]
