"""Type glyph and rwx permission string rendering."""

from __future__ import annotations

from typing import Final

from neols.accessor import MetadataRecord

# Shift of each 3-bit group within the mode, in display order.
_GROUP_SHIFTS: Final[tuple[int, ...]] = (6, 3, 0)

_FLAGS: Final[tuple[tuple[int, str], ...]] = ((4, "r"), (2, "w"), (1, "x"))


def extract_bits(value: int, start: int, end: int) -> int:
    """Return bits ``[start, end)`` of *value*, counted from the right."""
    mask = (1 << (end - start)) - 1
    return (value >> start) & mask


def render_triplet(bits: int) -> str:
    return "".join(ch if bits & flag else "-" for flag, ch in _FLAGS)


def render_permission_string(mode: int) -> str:
    """Render the owner, group and other permission groups of *mode*.

    Args:
        mode: POSIX mode integer; only the low nine bits are read.

    Returns:
        str: Nine characters, e.g. ``rwxr-xr--``.
    """
    return "".join(
        render_triplet(extract_bits(mode, shift, shift + 3)) for shift in _GROUP_SHIFTS
    )


def render_type_and_permissions(meta: MetadataRecord) -> tuple[str, str]:
    """Return the type glyph and permission string for an entry.

    Args:
        meta: Metadata record of the entry.

    Returns:
        tuple[str, str]: ``(type_glyph, permission_string)``. The full
        long-format column is their concatenation.
    """
    return meta.kind.value, render_permission_string(meta.mode)


def parse_permission_string(text: str) -> int:
    """Rebuild the mode bits encoded by a nine-character permission string.

    Args:
        text: String as produced by ``render_permission_string``.

    Returns:
        int: Mode bits in ``0..0o777``.

    Raises:
        ValueError: If *text* is not a well-formed permission string.
    """
    if len(text) != 9:
        raise ValueError(f"Permission string must be 9 characters: {text!r}")

    mode = 0
    for group, shift in enumerate(_GROUP_SHIFTS):
        chunk = text[group * 3 : group * 3 + 3]
        for (flag, ch), got in zip(_FLAGS, chunk):
            if got == ch:
                mode |= flag << shift
            elif got != "-":
                raise ValueError(f"Unexpected {got!r} in permission string {text!r}")
    return mode
