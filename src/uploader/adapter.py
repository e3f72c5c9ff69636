"""
Upload adapter: decides where a file goes and under which name, then hands
the write to a storage backend.

Usage:
    adapter = UploaderAdapter(storage)
    path = adapter.dir("avatars").sequence_name().visibility("public").upload(file)
"""
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional, Union
from urllib.parse import urlparse

from uploader import naming
from uploader.exceptions import StorageError
from uploader.files import File, UploadedFile
from uploader.naming import (
    ClientName,
    ComputedName,
    GeneratedName,
    LiteralName,
    NamingStrategy,
    Strategy,
)
from uploader.storage.base import CloudFilesystem, Filesystem, join_path

logger = logging.getLogger(__name__)

URL_PREFIXES = ("//", "http://", "https://")


def is_valid_url(path: str) -> bool:
    """True for absolute URLs (including protocol-relative ones)."""
    if path.startswith(URL_PREFIXES):
        return True
    parsed = urlparse(path)
    return bool(parsed.scheme and parsed.netloc)


class UploaderAdapter:
    """Resolves the directory and name of an upload and writes it to a disk."""

    NAME_UNIQUE = Strategy.UNIQUE
    NAME_DATETIME = Strategy.DATETIME
    NAME_SEQUENCE = Strategy.SEQUENCE
    NAME_MD5 = Strategy.MD5
    NAME_HASH = Strategy.HASH

    DIRECTORY_FILE = "files"
    DIRECTORY_IMAGE = "images"

    def __init__(self, storage: Filesystem, default_directory: Optional[str] = None):
        self.storage = storage
        self._default_directory = default_directory or self.DIRECTORY_FILE

        self._directory: Union[str, Callable] = ""
        self._name: Optional[Union[LiteralName, ComputedName]] = None
        self._generate_name: Optional[Strategy] = None
        # None means "use the backend default"
        self._visibility: Optional[str] = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def default_directory(self) -> str:
        return self._default_directory

    def dir(self, directory: Union[str, Callable]) -> "UploaderAdapter":
        """Set the target directory: a path segment or fn(adapter, file)."""
        if directory:
            self._directory = directory
        return self

    def name(self, name: Union[str, Callable]) -> "UploaderAdapter":
        """Set the file name: a literal or fn(adapter, file)."""
        if name:
            self._name = ComputedName(name) if callable(name) else LiteralName(name)
        return self

    def unique_name(self) -> "UploaderAdapter":
        return self.use_strategy(Strategy.UNIQUE)

    def datetime_name(self) -> "UploaderAdapter":
        return self.use_strategy(Strategy.DATETIME)

    def sequence_name(self) -> "UploaderAdapter":
        return self.use_strategy(Strategy.SEQUENCE)

    def md5_name(self) -> "UploaderAdapter":
        return self.use_strategy(Strategy.MD5)

    def hash_name(self) -> "UploaderAdapter":
        return self.use_strategy(Strategy.HASH)

    def use_strategy(self, strategy: Union[Strategy, str]) -> "UploaderAdapter":
        """Select a generated naming strategy; the last selection wins."""
        self._generate_name = Strategy(strategy)
        return self

    def visibility(self, visibility: str) -> "UploaderAdapter":
        """Set the access-control flag (e.g. 'public' or 'private') for the write."""
        self._visibility = visibility
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_storage(self) -> Filesystem:
        return self.storage

    def get_visibility(self) -> Optional[str]:
        return self._visibility

    def get_strategy(self) -> NamingStrategy:
        """The naming strategy that resolution will apply."""
        if self._generate_name is not None:
            return GeneratedName(self._generate_name)
        if self._name is not None:
            return self._name
        return ClientName()

    def get_directory(self, file: Optional[File] = None) -> str:
        """
        Directory the file will be stored in.

        A callable directory is evaluated against ``file``; without a file
        (or when it yields nothing) the default directory is used.
        """
        directory = self._directory
        if callable(directory):
            directory = directory(self, file) if file is not None else None
        return directory or self.default_directory()

    # ------------------------------------------------------------------
    # URLs and deletion
    # ------------------------------------------------------------------

    def url(self, path: str) -> str:
        """Public URL of a stored path; absolute URLs are returned unchanged."""
        if is_valid_url(path):
            return path
        return self.storage.url(path)

    def temporary_url(self, path: str, expiration: Union[datetime, timedelta]) -> str:
        """
        Time-limited URL of a stored path.

        Falls back to the public URL when the disk cannot sign URLs or
        signing fails. Disks signal a failed signature with StorageError
        or any other RuntimeError.
        """
        if isinstance(expiration, timedelta):
            expiration = datetime.now(timezone.utc) + expiration

        if isinstance(self.storage, CloudFilesystem):
            try:
                return self.storage.temporary_url(path, expiration)
            except (StorageError, RuntimeError) as e:
                logger.error(f"Error creating temporary URL for {path}: {str(e)}", exc_info=True)
        return self.url(path)

    def destroy(self, path: Optional[str] = None) -> bool:
        """
        Delete a stored file.

        Missing or empty paths count as already deleted. A URL produced by
        this disk is mapped back to its stored path; any other URL is
        reduced to its path component.

        Returns:
            False when the disk failed to check or delete the file
        """
        if not path:
            return True
        if is_valid_url(path):
            path = self.path_from_url(path)
        if not path:
            return True

        try:
            if not self.storage.exists(path):
                return True
        except StorageError as e:
            logger.error(f"Error checking {path} before deleting it: {e.message}")
            return False
        return self.storage.delete(path)

    def path_from_url(self, url: str) -> str:
        """Stored path behind a URL, asking the disk first when it knows its own URLs."""
        path_from_url = getattr(self.storage, "path_from_url", None)
        if path_from_url is not None:
            path = path_from_url(url)
            if path is not None:
                return path
        return urlparse(url).path.lstrip("/")

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------

    def get_store_name(self, file: File, directory: Optional[str] = None) -> str:
        """
        Resolve the stored file name. Generated strategies take precedence.

        ``directory`` is where the sequence strategy looks for taken names;
        it defaults to the adapter's directory for ``file``.
        """
        strategy = self.get_strategy()
        if isinstance(strategy, GeneratedName):
            if strategy.strategy is Strategy.SEQUENCE:
                return self.generate_sequence_name(file, directory)
            return self._generate(strategy.strategy, file)
        if isinstance(strategy, ComputedName):
            return strategy.fn(self, file)
        if isinstance(strategy, LiteralName):
            return strategy.name
        return self.generate_client_name(file)

    def _generate(self, strategy: Strategy, file: File) -> str:
        generators = {
            Strategy.UNIQUE: self.generate_unique_name,
            Strategy.DATETIME: self.generate_datetime_name,
            Strategy.MD5: self.generate_md5_name,
            Strategy.HASH: self.generate_hash_name,
        }
        return generators[strategy](file)

    def rename_if_exists(self, file: File, name: str, directory: Optional[str] = None) -> str:
        """Swap ``name`` for a unique name when it is already taken."""
        directory = directory or self.get_directory(file)
        if self.storage.exists(join_path(directory, name)):
            new_name = self.generate_unique_name(file)
            logger.info(f"{name} already exists, storing as {new_name}")
            return new_name
        return name

    def generate_unique_name(self, file: File) -> str:
        return naming.unique_name(file.extension)

    def generate_datetime_name(self, file: File) -> str:
        return naming.datetime_name(file.extension)

    def generate_md5_name(self, file: File) -> str:
        return naming.md5_name(file, file.extension)

    def generate_hash_name(self, file: File) -> str:
        return naming.hash_name(file, file.extension)

    def generate_sequence_name(self, file: File, directory: Optional[str] = None) -> str:
        """First free name of the form {stem}_{index}.{extension}, counting from 1."""
        directory = directory or self.get_directory(file)
        stem = naming.stem_of(self.generate_client_name(file))
        extension = file.extension

        index = 1
        candidate = naming.sequence_candidate(stem, index, extension)
        while self.storage.exists(join_path(directory, candidate)):
            index += 1
            candidate = naming.sequence_candidate(stem, index, extension)
        return candidate

    def generate_client_name(self, file: File) -> str:
        """The client's original name for uploads, the file name otherwise."""
        if isinstance(file, UploadedFile):
            return file.client_original_name
        return file.filename

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def upload(self, file: File) -> Union[str, bool]:
        """
        Store an uploaded file.

        Returns:
            The stored relative path, or False when the disk failed to
            check for taken names or to write
        """
        directory = self.get_directory(file)
        try:
            name = self.get_store_name(file, directory)
            if not isinstance(self.get_strategy(), GeneratedName):
                name = self.rename_if_exists(file, name, directory)
        except StorageError as e:
            logger.error(f"Error resolving a name for {file.filename} in {directory}: {e.message}")
            return False
        return self._write(file, directory, name)

    def store(self, path: Union[str, Path]) -> Union[str, bool]:
        """Store a file that already lives on the local disk."""
        return self.upload(File(Path(path)))

    def _write(self, file: File, directory: str, name: str) -> Union[str, bool]:
        if self._visibility is not None:
            return self.storage.write_as(directory, file, name, visibility=self._visibility)
        return self.storage.write_as(directory, file, name)
