"""Exception hierarchy for the uploader package."""

from typing import Dict, Optional


class UploaderError(Exception):
    """Base exception for all uploader errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(UploaderError):
    """Raised when configuration is invalid or missing."""
    pass


class DiskNotConfiguredError(ConfigurationError):
    """Raised when a disk name or driver has no configuration."""
    pass


class StorageError(UploaderError):
    """Raised by storage backends when an operation fails at runtime."""
    pass


class TemporaryUrlError(StorageError):
    """Raised when a time-limited URL cannot be generated."""
    pass
