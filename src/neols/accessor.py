"""Filesystem metadata access: stat and directory reads via os."""

from __future__ import annotations

import logging
import os
import stat as stat_mod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from neols import PathNotAccessible

logger = logging.getLogger(__name__)


class FileKind(Enum):
    """Closed set of file types.

    Declaration order is classification precedence: the first kind whose
    predicate matches an ``st_mode`` wins. Values are the type glyphs.
    """

    REGULAR = "-"
    DIRECTORY = "d"
    SYMLINK = "l"
    BLOCK_DEVICE = "b"
    CHAR_DEVICE = "c"
    FIFO = "p"
    SOCKET = "s"
    UNKNOWN = "?"


_KIND_PREDICATES = (
    (FileKind.REGULAR, stat_mod.S_ISREG),
    (FileKind.DIRECTORY, stat_mod.S_ISDIR),
    (FileKind.SYMLINK, stat_mod.S_ISLNK),
    (FileKind.BLOCK_DEVICE, stat_mod.S_ISBLK),
    (FileKind.CHAR_DEVICE, stat_mod.S_ISCHR),
    (FileKind.FIFO, stat_mod.S_ISFIFO),
    (FileKind.SOCKET, stat_mod.S_ISSOCK),
)


def classify_mode(st_mode: int) -> FileKind:
    """Return the file kind encoded in a raw ``st_mode``.

    Args:
        st_mode: Mode field of an ``os.stat_result``.

    Returns:
        FileKind: First matching kind, ``UNKNOWN`` when none match.
    """
    for kind, predicate in _KIND_PREDICATES:
        if predicate(st_mode):
            return kind
    return FileKind.UNKNOWN


@dataclass(frozen=True, slots=True)
class MetadataRecord:
    """Snapshot of one entry's metadata.

    Attributes:
        kind: File type classification.
        mode: Permission bits (``st_mode`` without the type bits).
        nlink: Hard-link count.
        uid: Owner user id.
        gid: Owner group id.
        size: Length in bytes.
        mtime: Modification time as a POSIX timestamp.
    """

    kind: FileKind
    mode: int
    nlink: int
    uid: int
    gid: int
    size: int
    mtime: float

    @classmethod
    def from_stat(cls, result: os.stat_result) -> MetadataRecord:
        return cls(
            kind=classify_mode(result.st_mode),
            mode=stat_mod.S_IMODE(result.st_mode),
            nlink=result.st_nlink,
            uid=result.st_uid,
            gid=result.st_gid,
            size=result.st_size,
            mtime=result.st_mtime,
        )

    @property
    def is_dir(self) -> bool:
        return self.kind is FileKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is FileKind.REGULAR

    @property
    def is_symlink(self) -> bool:
        return self.kind is FileKind.SYMLINK

    @property
    def is_block_device(self) -> bool:
        return self.kind is FileKind.BLOCK_DEVICE

    @property
    def is_char_device(self) -> bool:
        return self.kind is FileKind.CHAR_DEVICE

    @property
    def is_fifo(self) -> bool:
        return self.kind is FileKind.FIFO

    @property
    def is_socket(self) -> bool:
        return self.kind is FileKind.SOCKET


@dataclass(frozen=True, slots=True)
class RawDirEntry:
    """One child of a directory as returned by ``read_dir``.

    Metadata is fetched on demand with ``lstat`` so symlinks are
    reported as links rather than as their targets.
    """

    path: Path
    name: str

    def metadata(self) -> MetadataRecord:
        """Return this entry's metadata.

        Raises:
            PathNotAccessible: If the entry vanished or cannot be stat-ed.
        """
        return stat(self.path, follow_symlinks=False)


def stat(path: str | os.PathLike[str], follow_symlinks: bool = True) -> MetadataRecord:
    """Stat a path and return its metadata record.

    Args:
        path: Path to inspect.
        follow_symlinks: Whether a symlink reports its target's metadata.

    Returns:
        MetadataRecord: Metadata snapshot.

    Raises:
        PathNotAccessible: On any ``OSError`` from the underlying call.
    """
    try:
        result = os.stat(path, follow_symlinks=follow_symlinks)
    except OSError as exc:
        raise PathNotAccessible(
            os.fspath(path), f"cannot access '{os.fspath(path)}': {exc.strerror}"
        ) from exc
    return MetadataRecord.from_stat(result)


def read_dir(path: str | os.PathLike[str]) -> list[RawDirEntry]:
    """Read the children of a directory, unordered.

    Args:
        path: Directory to read.

    Returns:
        list[RawDirEntry]: One entry per child, ``.`` and ``..`` excluded.

    Raises:
        PathNotAccessible: If the directory cannot be opened.
    """
    try:
        with os.scandir(path) as it:
            entries = [RawDirEntry(path=Path(e.path), name=e.name) for e in it]
    except OSError as exc:
        raise PathNotAccessible(
            os.fspath(path),
            f"cannot open directory '{os.fspath(path)}': {exc.strerror}",
        ) from exc
    logger.debug("Read %d entries from %s", len(entries), path)
    return entries
