"""Tests for neols.listing — print_listing end to end on real directories."""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest
from colorama import Style

from conftest import FIXED_MTIME, FakeResolver
from neols import ListingError
from neols.formatter.color import ColorPolicy
from neols.formatter.columns import Layout, format_timestamp
from neols.listing import ListingOptions, print_listing
from neols.scanner import VisibilityPolicy


class _TtyBuffer(io.StringIO):
    def isatty(self) -> bool:
        return True


def _listing(
    paths: list[str],
    options: ListingOptions | None = None,
    err: io.StringIO | None = None,
) -> str:
    """Run print_listing into a buffer and return what was written.

    Args:
        paths: Input paths.
        options: Listing options. Defaults to ``ListingOptions()``.
        err: Optional diagnostic buffer.

    Returns:
        str: Written output.
    """
    out = io.StringIO()
    print_listing(
        paths,
        options or ListingOptions(),
        out=out,
        err=err or io.StringIO(),
        names=FakeResolver(),
    )
    return out.getvalue()


class TestSinglePath:
    def test_visible_entries(self, sample_dir: Path) -> None:
        assert _listing([str(sample_dir)]) == "a.txt\nb.txt\n"

    def test_no_header_for_single_path(self, sample_dir: Path) -> None:
        assert f"{sample_dir}:" not in _listing([str(sample_dir)])

    def test_almost_all(self, sample_dir: Path) -> None:
        options = ListingOptions(visibility=VisibilityPolicy.ALMOST_ALL)
        assert _listing([str(sample_dir)], options) == ".hidden\na.txt\nb.txt\n"

    def test_all_includes_implied_entries(self, sample_dir: Path) -> None:
        options = ListingOptions(visibility=VisibilityPolicy.ALL)
        assert _listing([str(sample_dir)], options) == ".\n..\n.hidden\na.txt\nb.txt\n"

    def test_file_listed_as_given(self, sample_dir: Path) -> None:
        target = str(sample_dir / "a.txt")
        assert _listing([target]) == f"{target}\n"

    def test_directory_itself(self, sample_dir: Path) -> None:
        options = ListingOptions(list_directories=False)
        assert _listing([str(sample_dir)], options) == f"{sample_dir}\n"

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert _listing([str(tmp_path)]) == ""

    def test_long_format(self, sample_dir: Path) -> None:
        (sample_dir / "a.txt").chmod(0o600)
        options = ListingOptions(layout=Layout.LONG, numeric_ids=True)
        lines = _listing([str(sample_dir)], options).splitlines()
        uid, gid = os.getuid(), os.getgid()
        stamp = format_timestamp(FIXED_MTIME)
        assert lines[0] == f"-rw------- 1 {uid} {gid} 5 {stamp} a.txt"
        assert lines[1].endswith(f" 5 {stamp} b.txt")

    def test_deterministic(self, sample_dir: Path) -> None:
        options = ListingOptions(layout=Layout.LONG, visibility=VisibilityPolicy.ALL)
        assert _listing([str(sample_dir)], options) == _listing([str(sample_dir)], options)


class TestMultiPath:
    def test_headers_precede_each_directory(self, two_dirs: tuple[Path, Path]) -> None:
        first, second = two_dirs
        options = ListingOptions(show_headers=True)
        output = _listing([str(first), str(second)], options)
        assert output == f"{first}:\none.txt\n\n{second}:\nthree.txt\ntwo.txt\n"

    def test_paths_processed_in_given_order(self, two_dirs: tuple[Path, Path]) -> None:
        first, second = two_dirs
        options = ListingOptions(show_headers=True)
        output = _listing([str(second), str(first)], options)
        assert output.index(f"{second}:") < output.index(f"{first}:")

    def test_file_then_directory(self, two_dirs: tuple[Path, Path]) -> None:
        first, second = two_dirs
        target = str(second / "two.txt")
        options = ListingOptions(show_headers=True)
        output = _listing([target, str(first)], options)
        assert output == f"{target}\n\n{first}:\none.txt\n"

    def test_file_after_directory_is_separated(self, two_dirs: tuple[Path, Path]) -> None:
        first, second = two_dirs
        target = str(second / "two.txt")
        options = ListingOptions(show_headers=True)
        output = _listing([str(first), target], options)
        assert output == f"{first}:\none.txt\n\n{target}\n"

    def test_consecutive_files_are_not_separated(self, two_dirs: tuple[Path, Path]) -> None:
        _, second = two_dirs
        files = [str(second / "two.txt"), str(second / "three.txt")]
        options = ListingOptions(show_headers=True)
        assert _listing(files, options) == f"{files[0]}\n{files[1]}\n"

    def test_all_pins_implied_entries_first(self, tmp_path: Path) -> None:
        (tmp_path / "+x").write_text("x")
        options = ListingOptions(visibility=VisibilityPolicy.ALL)
        assert _listing([str(tmp_path)], options) == ".\n..\n+x\n"

    def test_widths_computed_per_block(self, two_dirs: tuple[Path, Path]) -> None:
        first, second = two_dirs
        (second / "big.bin").write_bytes(b"x" * 12345)
        options = ListingOptions(layout=Layout.GROUP_LONG, show_headers=True)
        output = _listing([str(first), str(second)], options)
        one_line = next(line for line in output.splitlines() if line.endswith("one.txt"))
        assert " 1 " in one_line
        assert "    1 " not in one_line


class TestFailures:
    def test_missing_path_reported_and_run_continues(
        self, two_dirs: tuple[Path, Path], tmp_path: Path
    ) -> None:
        first, _ = two_dirs
        missing = str(tmp_path / "missing")
        out = io.StringIO()
        err = io.StringIO()
        with pytest.raises(ListingError) as info:
            print_listing(
                [missing, str(first)],
                ListingOptions(show_headers=True),
                out=out,
                err=err,
                names=FakeResolver(),
            )
        assert err.getvalue() == (
            f"nls: cannot access '{missing}': No such file or directory\n"
        )
        assert out.getvalue() == f"{first}:\none.txt\n"
        assert [f.path for f in info.value.failures] == [missing]

    def test_every_failure_collected(self, tmp_path: Path) -> None:
        missing = [str(tmp_path / "x"), str(tmp_path / "y")]
        with pytest.raises(ListingError) as info:
            _listing(missing)
        assert [f.path for f in info.value.failures] == missing

    @pytest.mark.skipif(os.geteuid() == 0, reason="root can read any directory")
    def test_unreadable_directory(self, tmp_path: Path) -> None:
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret").write_text("s")
        locked.chmod(0o000)
        err = io.StringIO()
        try:
            with pytest.raises(ListingError):
                _listing([str(locked)], err=err)
        finally:
            locked.chmod(0o755)
        assert "cannot open directory" in err.getvalue()


class TestColor:
    def test_auto_plain_when_not_terminal(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        options = ListingOptions(color=ColorPolicy.AUTO)
        assert _listing([str(tmp_path)], options) == "sub\n"

    def test_auto_colors_on_terminal_stream(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        out = _TtyBuffer()
        print_listing(
            [str(tmp_path)],
            ListingOptions(color=ColorPolicy.AUTO),
            out=out,
            err=io.StringIO(),
            names=FakeResolver(),
        )
        assert out.getvalue().rstrip("\n").endswith(f"sub{Style.RESET_ALL}")
