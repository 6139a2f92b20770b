"""Column layout engine: short, long and group-long rows with batch widths."""

from __future__ import annotations

import logging
import sys
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Final

from neols import MalformedName
from neols.formatter.color import ColorPolicy, decorate
from neols.formatter.permissions import render_type_and_permissions
from neols.formatter.size import SizeConvention, render_size
from neols.names import NameResolver, SystemNameResolver
from neols.scanner import FsEntry

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT: Final[str] = "%b %d %H:%M"

UNKNOWN_NAME: Final[str] = "?"


class Layout(Enum):
    """Row layout of a listing."""

    SHORT = "short"  # name only
    LONG = "long"  # permissions, links, owner, group, size, time, name
    GROUP_LONG = "group-long"  # like LONG without the owner column


# (field, alignment) for the padded columns between permissions and name.
_LONG_COLUMNS: Final[tuple[tuple[str, str], ...]] = (
    ("nlink", ">"),
    ("owner", "<"),
    ("group", "<"),
    ("size", ">"),
    ("timestamp", "<"),
)

_COLUMNS_BY_LAYOUT: Final[dict[Layout, tuple[tuple[str, str], ...]]] = {
    Layout.SHORT: (),
    Layout.LONG: _LONG_COLUMNS,
    Layout.GROUP_LONG: tuple(c for c in _LONG_COLUMNS if c[0] != "owner"),
}


@dataclass(frozen=True, slots=True)
class RowOptions:
    """Options for row rendering.

    Attributes:
        size: Size column convention.
        color: Color policy for the name column.
        numeric_ids: Show uid/gid instead of resolved names.
        show_header: Emit a ``<path>:`` line before directory contents.
    """

    size: SizeConvention = SizeConvention.MACHINE
    color: ColorPolicy = ColorPolicy.NEVER
    numeric_ids: bool = False
    show_header: bool = False


@dataclass(frozen=True, slots=True)
class RenderedField:
    """Every display field of one entry, unpadded."""

    type_glyph: str
    permissions: str
    nlink: str
    owner: str
    group: str
    size: str
    timestamp: str
    name: str


def format_timestamp(mtime: float) -> str:
    """Format a modification time in local time, e.g. ``Mar 04 17:30``."""
    return datetime.fromtimestamp(mtime).strftime(TIMESTAMP_FORMAT)


def ensure_displayable(name: str) -> str:
    """Return *name* if it can be written as UTF-8 text.

    Names holding undecodable bytes carry lone surrogates after
    ``os.fsdecode`` and cannot be encoded.

    Raises:
        MalformedName: If *name* is not representable.
    """
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MalformedName(f"cannot display name {name!r}") from exc
    return name


def _id_display(
    ident: int, numeric: bool, lookup: Callable[[int], str | None]
) -> str:
    if numeric:
        return str(ident)
    resolved = lookup(ident)
    return resolved if resolved is not None else UNKNOWN_NAME


def render_field(
    entry: FsEntry,
    options: RowOptions,
    names: NameResolver,
    is_terminal: Callable[[], bool],
) -> RenderedField:
    """Render all display fields of one entry.

    Raises:
        MalformedName: If the entry name cannot be displayed.
    """
    meta = entry.metadata
    name = ensure_displayable(entry.name)
    type_glyph, permissions = render_type_and_permissions(meta)
    return RenderedField(
        type_glyph=type_glyph,
        permissions=permissions,
        nlink=str(meta.nlink),
        owner=_id_display(meta.uid, options.numeric_ids, names.user_name),
        group=_id_display(meta.gid, options.numeric_ids, names.group_name),
        size=render_size(meta.size, options.size),
        timestamp=format_timestamp(meta.mtime),
        name=decorate(name, type_glyph, options.color, is_terminal),
    )


def display_width(text: str) -> int:
    """Return the number of terminal cells *text* occupies.

    Combining marks take no cells and East Asian wide or fullwidth
    characters take two.
    """
    width = 0
    for ch in text:
        if unicodedata.combining(ch):
            continue
        width += 2 if unicodedata.east_asian_width(ch) in {"W", "F"} else 1
    return width


def pad(text: str, width: int, align: str) -> str:
    """Pad *text* to *width* cells, right-aligned when *align* is ``>``."""
    fill = " " * max(0, width - display_width(text))
    return fill + text if align == ">" else text + fill


def column_widths(
    fields: Sequence[RenderedField], columns: Sequence[tuple[str, str]]
) -> dict[str, int]:
    """Return the widest rendered value of each column across the batch."""
    return {
        attr: max((display_width(getattr(f, attr)) for f in fields), default=0)
        for attr, _ in columns
    }


def _format_row(
    field: RenderedField,
    columns: Sequence[tuple[str, str]],
    widths: dict[str, int],
) -> str:
    if not columns:
        return field.name
    padded = " ".join(
        pad(getattr(field, attr), widths[attr], align) for attr, align in columns
    )
    return f"{field.type_glyph}{field.permissions} {padded} {field.name}"


def render_rows(
    entries: Sequence[FsEntry],
    layout: Layout,
    options: RowOptions | None = None,
    root: FsEntry | None = None,
    names: NameResolver | None = None,
    is_terminal: Callable[[], bool] | None = None,
) -> list[str]:
    """Render a batch of entries as aligned lines.

    Every field of every entry is rendered before widths are computed,
    so each column is exactly as wide as its widest value in the batch.
    Entries are emitted in the order given.

    Args:
        entries: Ordered entries printed together.
        layout: Row layout.
        options: Rendering options. Defaults to ``RowOptions()``.
        root: Directory whose contents *entries* are; drives the header.
        names: Owner/group resolver. Defaults to the system databases.
        is_terminal: Terminal probe for ``ColorPolicy.AUTO``. Defaults to
            ``sys.stdout.isatty``.

    Returns:
        list[str]: Output lines without trailing newlines.
    """
    opts = options or RowOptions()
    resolver = names or SystemNameResolver()
    probe = is_terminal or sys.stdout.isatty

    fields: list[RenderedField] = []
    for entry in entries:
        try:
            fields.append(render_field(entry, opts, resolver, probe))
        except MalformedName as exc:
            logger.warning("Skipping %s: %s", entry.path, exc)

    lines: list[str] = []
    if root is not None and opts.show_header and root.metadata.is_dir:
        lines.append(f"{root.name}:")

    columns = _COLUMNS_BY_LAYOUT[layout]
    widths = column_widths(fields, columns)
    lines.extend(_format_row(f, columns, widths) for f in fields)
    return lines
