"""Local filesystem disk."""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from uploader.exceptions import StorageError
from uploader.files import File
from uploader.settings import VISIBILITY_PRIVATE, VISIBILITY_PUBLIC
from uploader.storage.base import join_path, relative_to_base

logger = logging.getLogger(__name__)

PERMISSIONS = {
    VISIBILITY_PUBLIC: 0o644,
    VISIBILITY_PRIVATE: 0o600,
}


class LocalFilesystem:
    """Stores files under a root directory; URLs are built from a base URL."""

    def __init__(self, root: Union[str, Path], url: Optional[str] = None, visibility: Optional[str] = None):
        self._root = Path(root).resolve()
        self.base_url = (url or "/storage").rstrip("/")
        self.default_visibility = visibility
        logger.info(f"LocalFilesystem initialized at: {self._root}")

    @classmethod
    def from_config(cls, config, settings=None) -> "LocalFilesystem":
        return cls(root=config.root, url=config.url, visibility=config.visibility)

    @property
    def root(self) -> Path:
        return self._root

    def ensure_ready(self):
        self._root.mkdir(parents=True, exist_ok=True)

    def path(self, path: str) -> Path:
        """Absolute location of a relative storage path; refuses to leave the root."""
        full = (self._root / path.lstrip("/")).resolve()
        if full != self._root and self._root not in full.parents:
            raise StorageError(
                f"Path escapes storage root: {path}",
                details={"root": str(self._root), "path": path},
            )
        return full

    def exists(self, path: str) -> bool:
        return self.path(path).is_file()

    def delete(self, path: str) -> bool:
        try:
            self.path(path).unlink()
            logger.info(f"Deleted {path} from {self._root}")
            return True
        except (OSError, StorageError) as e:
            logger.error(f"Error deleting {path}: {str(e)}")
            return False

    def write_as(self, directory: str, file: File, name: str, visibility: Optional[str] = None):
        stored_path = join_path(directory, name)
        visibility = visibility or self.default_visibility
        try:
            dest_path = self.path(stored_path)
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(str(file.path), str(dest_path))
            if visibility in PERMISSIONS:
                os.chmod(dest_path, PERMISSIONS[visibility])
            logger.info(f"Stored {file.path} as {stored_path}")
            return stored_path
        except (OSError, StorageError) as e:
            logger.error(f"Error storing {stored_path}: {str(e)}")
            return False

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def path_from_url(self, url: str) -> Optional[str]:
        """Relative path behind one of this disk's URLs; None for other URLs."""
        return relative_to_base(url, self.base_url)
