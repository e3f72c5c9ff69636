"""Storage protocols consumed by the uploader."""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Union, runtime_checkable
from urllib.parse import unquote, urlsplit, urlunsplit

from uploader.files import File


@runtime_checkable
class Filesystem(Protocol):
    def exists(self, path: str) -> bool:
        ...

    def delete(self, path: str) -> bool:
        ...

    def write_as(
        self,
        directory: str,
        file: File,
        name: str,
        visibility: Optional[str] = None,
    ) -> Union[str, bool]:  # stored path, or False on failure
        ...

    def url(self, path: str) -> str:
        ...


@runtime_checkable
class CloudFilesystem(Filesystem, Protocol):
    def temporary_url(self, path: str, expiration: datetime) -> str:  # raises StorageError
        ...


def join_path(directory: str, name: str) -> str:
    """Join a directory and a name into a relative storage path."""
    directory = directory.strip("/")
    name = name.lstrip("/")
    return f"{directory}/{name}" if directory else name


def relative_to_base(url: str, base: str) -> Optional[str]:
    """
    Storage path of ``url`` when it lies under ``base``, else None.

    A base without a host (e.g. ``/storage``) is matched against the URL's
    path only. Query strings and fragments are ignored.
    """
    parts = urlsplit(url)
    base_parts = urlsplit(base)
    if base_parts.netloc:
        url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    else:
        url = parts.path
        base = base_parts.path
    base = base.rstrip("/") + "/"
    if not url.startswith(base):
        return None
    return unquote(url[len(base):]) or None
