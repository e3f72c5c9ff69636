import logging
from datetime import timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from uploader.dependencies import get_upload_manager
from uploader.files import UploadedFile
from uploader.manager import UploadManager
from uploader.naming import Strategy
from uploader.schemas import (
    DeleteUploadResponse,
    UploadResponse,
    UrlQueryParams,
    UrlResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/uploads",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadResponse,
)
def upload_file(
    file: UploadFile = File(..., description="The file to upload"),
    disk: Optional[str] = Form(None, description="Disk name; the default disk when omitted"),
    directory: Optional[str] = Form(None, description="Target directory"),
    name: Optional[str] = Form(None, description="Literal file name"),
    strategy: Optional[Strategy] = Form(None, description="Generated naming strategy"),
    visibility: Optional[Literal["public", "private"]] = Form(None, description="Access control for the stored file"),
    manager: UploadManager = Depends(get_upload_manager),
) -> UploadResponse:
    """
    Store an uploaded file on a disk.

    The file keeps its original name unless a name or strategy is given. A
    name that is already taken is replaced with a unique one.
    """
    disk_name = disk or manager.settings.default_disk
    adapter = manager.disk(disk_name).dir(directory).name(name)
    if strategy is not None:
        adapter.use_strategy(strategy)
    if visibility is not None:
        adapter.visibility(visibility)

    with UploadedFile.spooled(file.file, file.filename or "upload") as uploaded:
        stored_path = adapter.upload(uploaded)

    if stored_path is False:
        logger.error(f"Disk '{disk_name}' failed to store {file.filename}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Disk '{disk_name}' failed to store the file",
        )

    return UploadResponse(path=stored_path, url=adapter.url(stored_path), disk=disk_name)


@router.get("/uploads/url", response_model=UrlResponse)
def get_upload_url(
    query_params: UrlQueryParams = Depends(),
    manager: UploadManager = Depends(get_upload_manager),
) -> UrlResponse:
    """Public URL of a stored file, or a temporary one when `expires_in` is set."""
    adapter = manager.disk(query_params.disk)
    if query_params.expires_in:
        url = adapter.temporary_url(query_params.path, timedelta(seconds=query_params.expires_in))
    else:
        url = adapter.url(query_params.path)
    return UrlResponse(path=query_params.path, url=url, temporary=bool(query_params.expires_in))


@router.delete("/uploads/{path:path}", response_model=DeleteUploadResponse)
def delete_upload(
    path: str,
    disk: Optional[str] = None,
    manager: UploadManager = Depends(get_upload_manager),
) -> DeleteUploadResponse:
    """Delete a stored file. Deleting a missing file succeeds."""
    deleted = manager.disk(disk).destroy(path)
    return DeleteUploadResponse(path=path, deleted=deleted)
