from fastapi import APIRouter, Depends

from uploader.dependencies import get_app_settings
from uploader.schemas import HealthResponse
from uploader.settings import Settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Health check reporting the configured disks."""
    return HealthResponse(
        status="ok",
        default_disk=settings.default_disk,
        disks=settings.disk_names,
    )
