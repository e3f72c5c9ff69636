"""
Naming strategies for stored files.

A strategy is one tagged value: a literal name, a name-computing function,
or one of the generated strategies.
"""
import hashlib
import random
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from uploader.files import File

HASH_CHUNK_SIZE = 64 * 1024


class Strategy(str, Enum):
    """Generated naming strategies."""
    UNIQUE = "unique"
    DATETIME = "datetime"
    SEQUENCE = "sequence"
    MD5 = "md5"
    HASH = "hash"


@dataclass(frozen=True)
class LiteralName:
    name: str


@dataclass(frozen=True)
class ComputedName:
    # Called as fn(adapter, file) and must return the file name.
    fn: Callable


@dataclass(frozen=True)
class GeneratedName:
    strategy: Strategy


@dataclass(frozen=True)
class ClientName:
    """Keep the name the client (or local file) already has."""
    pass


NamingStrategy = Union[LiteralName, ComputedName, GeneratedName, ClientName]


def with_extension(base: str, extension: str) -> str:
    if not extension:
        return base
    return f"{base}.{extension}"


def stem_of(name: str) -> str:
    """Name without its final extension."""
    return Path(name).stem


def _file_digest(file: File, algorithm: str) -> str:
    digest = hashlib.new(algorithm)
    with file.open() as fh:
        for chunk in iter(lambda: fh.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def unique_name(extension: str) -> str:
    """32 hex chars from randomness and the current time."""
    seed = f"{uuid.uuid4().hex}{time.time_ns()}"
    return with_extension(hashlib.md5(seed.encode()).hexdigest(), extension)


def datetime_name(extension: str, now: Optional[datetime] = None) -> str:
    """Timestamp followed by a random 5 digit suffix, e.g. 2024010112000012345."""
    now = now or datetime.now()
    suffix = random.randint(10000, 99999)
    return with_extension(f"{now.strftime('%Y%m%d%H%M%S')}{suffix}", extension)


def md5_name(file: File, extension: str) -> str:
    return with_extension(_file_digest(file, "md5"), extension)


def hash_name(file: File, extension: str) -> str:
    return with_extension(_file_digest(file, "sha1"), extension)


def sequence_candidate(stem: str, index: int, extension: str) -> str:
    return with_extension(f"{stem}_{index}", extension)
