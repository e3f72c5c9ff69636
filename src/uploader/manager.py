import logging
from typing import Callable, Dict, Optional

from uploader.adapter import UploaderAdapter
from uploader.exceptions import DiskNotConfiguredError
from uploader.settings import DiskConfig, Settings, get_settings
from uploader.storage.base import Filesystem
from uploader.storage.local import LocalFilesystem
from uploader.storage.s3 import S3Filesystem

logger = logging.getLogger(__name__)

DriverFactory = Callable[[DiskConfig, Settings], Filesystem]


class UploadManager:
    """Resolves disk names to storage backends and hands out upload adapters."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._drivers: Dict[str, DriverFactory] = {
            "local": LocalFilesystem.from_config,
            "s3": S3Filesystem.from_config,
        }
        self._disks: Dict[str, Filesystem] = {}

    def extend(self, driver: str, factory: DriverFactory) -> "UploadManager":
        """Register a custom driver: factory(disk_config, settings) -> Filesystem."""
        self._drivers[driver.lower()] = factory
        return self

    def disk(self, name: Optional[str] = None, default_directory: Optional[str] = None) -> UploaderAdapter:
        """A fresh adapter bound to the named disk (the default disk when None)."""
        return UploaderAdapter(self.storage(name), default_directory=default_directory)

    def storage(self, name: Optional[str] = None) -> Filesystem:
        """The storage backend of the named disk, built on first use."""
        name = name or self.settings.default_disk
        if name not in self._disks:
            self._disks[name] = self._resolve(name)
        return self._disks[name]

    def _resolve(self, name: str) -> Filesystem:
        config = self.settings.disk_config(name)
        if config is None:
            raise DiskNotConfiguredError(
                f"Disk [{name}] does not have a configured driver.",
                details={"disk": name, "configured": ", ".join(self.settings.disk_names)},
            )

        factory = self._drivers.get(config.driver)
        if factory is None:
            raise DiskNotConfiguredError(
                f"Driver [{config.driver}] is not supported.",
                details={"disk": name, "driver": config.driver},
            )

        logger.info(f"Creating storage for disk '{name}' with driver '{config.driver}'")
        return factory(config, self.settings)
