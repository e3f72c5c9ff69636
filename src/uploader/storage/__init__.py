"""
Storage backends ("disks") the uploader writes to.

Contains the storage protocols plus local filesystem and S3 implementations.
"""
from uploader.storage.base import CloudFilesystem, Filesystem
from uploader.storage.local import LocalFilesystem
from uploader.storage.s3 import S3Filesystem

__all__ = ["CloudFilesystem", "Filesystem", "LocalFilesystem", "S3Filesystem"]
