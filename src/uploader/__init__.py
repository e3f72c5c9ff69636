"""
File upload helper.

Picks a directory and a file name for an upload, resolving name collisions,
and delegates the write to a configured storage disk (local or S3).
"""
from uploader.adapter import UploaderAdapter
from uploader.files import File, UploadedFile
from uploader.manager import UploadManager
from uploader.naming import Strategy

__all__ = ["File", "Strategy", "UploadManager", "UploadedFile", "UploaderAdapter"]
