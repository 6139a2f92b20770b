"""Listing driver: stat each input path and print its rendered block."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from neols import PROG, ListingError, PathNotAccessible, accessor
from neols.formatter.color import ColorPolicy
from neols.formatter.columns import Layout, RowOptions, render_rows
from neols.formatter.size import SizeConvention
from neols.names import NameResolver, SystemNameResolver
from neols.scanner import FsEntry, VisibilityPolicy, filter_and_sort

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ListingOptions:
    """Options for one listing run, built by the CLI.

    Attributes:
        layout: Row layout.
        size: Size column convention.
        color: Name color policy.
        visibility: Hidden-entry policy for directory contents.
        numeric_ids: Show uid/gid instead of names.
        show_headers: Print ``<path>:`` before each directory's contents;
            set when more than one path was given.
        list_directories: List a directory's contents rather than the
            directory itself.
    """

    layout: Layout = Layout.SHORT
    size: SizeConvention = SizeConvention.MACHINE
    color: ColorPolicy = ColorPolicy.NEVER
    visibility: VisibilityPolicy = VisibilityPolicy.VISIBLE_ONLY
    numeric_ids: bool = False
    show_headers: bool = False
    list_directories: bool = True

    def row_options(self) -> RowOptions:
        return RowOptions(
            size=self.size,
            color=self.color,
            numeric_ids=self.numeric_ids,
            show_header=self.show_headers,
        )


def _stream_is_terminal(stream: TextIO) -> Callable[[], bool]:
    def probe() -> bool:
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    return probe


def render_path(
    path: str,
    options: ListingOptions,
    names: NameResolver,
    is_terminal: Callable[[], bool],
) -> tuple[list[str], bool]:
    """Render the whole output block for one input path.

    Args:
        path: Input path as given.
        options: Listing options.
        names: Owner/group resolver.
        is_terminal: Terminal probe for color.

    Returns:
        tuple[list[str], bool]: Lines of the block, and whether the block
        is an expanded directory.

    Raises:
        PathNotAccessible: If the path or directory cannot be read.
    """
    meta = accessor.stat(path, follow_symlinks=options.list_directories)
    root = FsEntry(path=Path(path), name=path, metadata=meta)
    row_opts = options.row_options()

    if not (meta.is_dir and options.list_directories):
        return render_rows([root], options.layout, row_opts, None, names, is_terminal), False

    entries = filter_and_sort(
        accessor.read_dir(path),
        options.visibility,
        directory=root,
    )
    logger.debug("Listing %d entries of %s", len(entries), path)
    return render_rows(entries, options.layout, row_opts, root, names, is_terminal), True


def print_listing(
    paths: Sequence[str],
    options: ListingOptions,
    out: TextIO | None = None,
    err: TextIO | None = None,
    names: NameResolver | None = None,
    is_terminal: Callable[[], bool] | None = None,
) -> None:
    """List each path in order, writing lines to *out*.

    A path that cannot be accessed is reported on *err* as
    ``nls: <reason>`` and the run continues with the next path. Each
    block is rendered in full before any of it is written.

    Args:
        paths: Input paths, processed in the order given.
        options: Listing options.
        out: Output stream. Defaults to ``sys.stdout``.
        err: Diagnostic stream. Defaults to ``sys.stderr``.
        names: Owner/group resolver. Defaults to the system databases.
        is_terminal: Terminal probe. Defaults to ``out.isatty``.

    Raises:
        ListingError: After all paths, if any of them failed.
    """
    out = out if out is not None else sys.stdout
    err = err if err is not None else sys.stderr
    resolver = names or SystemNameResolver()
    probe = is_terminal or _stream_is_terminal(out)

    failures: list[PathNotAccessible] = []
    wrote_any = False
    after_dir_block = False
    for path in paths:
        try:
            lines, is_dir_block = render_path(path, options, resolver, probe)
        except PathNotAccessible as exc:
            err.write(f"{PROG}: {exc.message}\n")
            failures.append(exc)
            continue

        # Directory blocks are set apart from whatever precedes or follows them
        if options.show_headers and wrote_any and (is_dir_block or after_dir_block):
            out.write("\n")
        for line in lines:
            out.write(line + "\n")
        if lines:
            wrote_any = True
            after_dir_block = is_dir_block

    if failures:
        raise ListingError(failures)
