"""
File handles passed to the uploader.

``File`` is a file already resident on local disk. ``UploadedFile`` is a
transient client upload: the bytes live in a local temp file while the name
and extension come from what the client sent.
"""
import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def _extension_of(name: str) -> str:
    """Extension without the leading dot, '' when there is none."""
    return Path(name).suffix.lstrip(".")


@dataclass(frozen=True)
class File:
    """A file on the local filesystem."""
    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path))

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def extension(self) -> str:
        return _extension_of(self.path.name)

    @property
    def original_name(self) -> str:
        """Name the file is known by to the caller."""
        return self.filename

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def open(self) -> BinaryIO:
        return open(self.path, "rb")

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class UploadedFile(File):
    """A client upload stored in a temporary file."""
    client_original_name: str = field(default="")

    @property
    def extension(self) -> str:
        return _extension_of(self.client_original_name)

    @property
    def original_name(self) -> str:
        return self.client_original_name

    @classmethod
    @contextmanager
    def spooled(cls, stream: BinaryIO, client_original_name: str) -> Iterator["UploadedFile"]:
        """
        Copy an incoming stream into a temporary file for the duration of a block.

        Args:
            stream: Readable binary stream, e.g. FastAPI's ``UploadFile.file``
            client_original_name: The filename the client sent

        Yields:
            UploadedFile backed by the temporary copy, removed on exit
        """
        with tempfile.TemporaryDirectory(prefix="uploader-") as tmp_dir:
            tmp_path = Path(tmp_dir) / "upload"
            with open(tmp_path, "wb") as out:
                shutil.copyfileobj(stream, out, CHUNK_SIZE)
            logger.debug(f"Spooled upload '{client_original_name}' to {tmp_path}")
            yield cls(path=tmp_path, client_original_name=client_original_name)
