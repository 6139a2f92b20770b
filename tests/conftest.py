"""Shared fixtures for neols tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

# Fixed modification time so rendered timestamps are stable.
FIXED_MTIME = 1_700_000_000


class FakeResolver:
    """Name resolver with a fixed user and group table."""

    def __init__(
        self,
        users: dict[int, str] | None = None,
        groups: dict[int, str] | None = None,
    ) -> None:
        self.users = users if users is not None else {1000: "alice", 0: "root"}
        self.groups = groups if groups is not None else {1000: "staff", 0: "wheel"}

    def user_name(self, uid: int) -> str | None:
        return self.users.get(uid)

    def group_name(self, gid: int) -> str | None:
        return self.groups.get(gid)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def sample_dir(tmp_path: Path) -> Path:
    """Create a directory with one hidden and two visible files.

    Structure::

        root/
        ├── .hidden
        ├── a.txt
        └── b.txt
    """
    root = tmp_path / "sample"
    root.mkdir()
    for name in (".hidden", "b.txt", "a.txt"):
        (root / name).write_text(name)
        os.utime(root / name, (FIXED_MTIME, FIXED_MTIME))
    return root


@pytest.fixture
def two_dirs(tmp_path: Path) -> tuple[Path, Path]:
    """Create two sibling directories with distinct contents.

    Structure::

        first/
        └── one.txt
        second/
        ├── three.txt
        └── two.txt
    """
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "one.txt").write_text("1")
    (second / "two.txt").write_text("22")
    (second / "three.txt").write_text("333")
    return first, second
