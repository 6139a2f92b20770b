"""Directory entry collection: visibility filtering and path ordering."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from pathlib import Path

from neols import accessor
from neols.accessor import MetadataRecord, RawDirEntry

logger = logging.getLogger(__name__)


class VisibilityPolicy(Enum):
    """Which dot-prefixed entries a directory listing includes."""

    ALL = "all"
    ALMOST_ALL = "almost-all"
    VISIBLE_ONLY = "visible"


@total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class FsEntry:
    """A filesystem entry paired with its metadata snapshot.

    Ordering, equality and hashing use the path's string form only;
    metadata never takes part in comparisons.

    Attributes:
        path: Path of the entry.
        name: Name shown in the listing.
        metadata: Metadata captured when the entry was collected.
    """

    path: Path
    name: str
    metadata: MetadataRecord

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FsEntry):
            return NotImplemented
        return str(self.path) == str(other.path)

    def __lt__(self, other: FsEntry) -> bool:
        if not isinstance(other, FsEntry):
            return NotImplemented
        return str(self.path) < str(other.path)

    def __hash__(self) -> int:
        return hash(str(self.path))


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def implied_entries(directory: FsEntry) -> list[FsEntry]:
    """Build the ``.`` and ``..`` pseudo-entries for a directory.

    Args:
        directory: The directory being listed.

    Returns:
        list[FsEntry]: ``.`` (the directory itself) and ``..`` (its parent).

    Raises:
        PathNotAccessible: If the parent cannot be stat-ed.
    """
    parent = directory.path / ".."
    return [
        FsEntry(path=directory.path, name=".", metadata=directory.metadata),
        FsEntry(path=parent, name="..", metadata=accessor.stat(parent)),
    ]


def filter_and_sort(
    raw_entries: Iterable[RawDirEntry],
    policy: VisibilityPolicy,
    directory: FsEntry | None = None,
) -> list[FsEntry]:
    """Collect raw directory children into an ordered entry list.

    Metadata is fetched for every raw entry before filtering; the first
    failure propagates and no partial list is returned.

    Args:
        raw_entries: Unordered children from ``accessor.read_dir``.
        policy: Visibility policy for dot-prefixed names.
        directory: The listed directory; required for ``.``/``..`` under
            ``VisibilityPolicy.ALL``.

    Returns:
        list[FsEntry]: Surviving entries sorted by path, preceded by
        ``.`` and ``..`` when they are synthesized.

    Raises:
        PathNotAccessible: If any entry's metadata cannot be read.
    """
    entries = [
        FsEntry(path=raw.path, name=raw.name, metadata=raw.metadata())
        for raw in raw_entries
    ]

    # Hidden file filtering (unless -a/-A)
    if policy is VisibilityPolicy.VISIBLE_ONLY:
        entries = [e for e in entries if not is_hidden(e.name)]
    entries.sort()
    logger.debug("Collected %d entries under %s policy", len(entries), policy.value)

    # Pseudo-entries lead the listing regardless of how children sort
    if policy is VisibilityPolicy.ALL and directory is not None:
        return implied_entries(directory) + entries
    return entries
