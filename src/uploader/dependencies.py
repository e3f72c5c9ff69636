from fastapi import Request

from uploader.manager import UploadManager
from uploader.settings import Settings


def get_upload_manager(request: Request) -> UploadManager:
    """The manager created with the app; one per application."""
    return request.app.state.upload_manager


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
