"""File size rendering: raw byte counts or ceiling-rounded unit strings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SizeConvention(Enum):
    """How the size column is rendered."""

    MACHINE = "machine"  # raw byte count
    HUMAN = "human"  # powers of 1024, K M G T P
    SI = "si"  # powers of 1000, k m g t p


@dataclass(frozen=True, slots=True)
class UnitLadder:
    """Unit base and labels, smallest unit first.

    Attributes:
        base: Multiplier between consecutive units.
        labels: Suffix for each unit; the first unit equals ``base``.
    """

    base: int
    labels: tuple[str, ...]

    def unit(self, index: int) -> int:
        return self.base ** (index + 1)


BINARY_UNITS = UnitLadder(base=1024, labels=("K", "M", "G", "T", "P"))
DECIMAL_UNITS = UnitLadder(base=1000, labels=("k", "m", "g", "t", "p"))


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def _largest_unit_index(byte_len: int, ladder: UnitLadder) -> int | None:
    index = None
    for i in range(len(ladder.labels)):
        if byte_len >= ladder.unit(i):
            index = i
    return index


def render_scaled(byte_len: int, ladder: UnitLadder) -> str:
    """Render *byte_len* in the largest unit of *ladder* not exceeding it.

    Below ten units one fractional digit is shown, otherwise a whole
    number. Both round up, so the displayed value never understates the
    size. A whole number that rounds up to ``base`` is carried into the
    next unit (``1024K`` becomes ``1.0M``).

    Args:
        byte_len: Size in bytes.
        ladder: Unit ladder to scale against.

    Returns:
        str: e.g. ``1023``, ``1.0K``, ``9.9K``, ``20M``.
    """
    index = _largest_unit_index(byte_len, ladder)
    if index is None:
        return str(byte_len)

    while True:
        unit = ladder.unit(index)
        label = ladder.labels[index]
        if byte_len < 10 * unit:
            tenths = _ceil_div(byte_len * 10, unit)
            return f"{tenths // 10}.{tenths % 10}{label}"

        whole = _ceil_div(byte_len, unit)
        if whole >= ladder.base and index + 1 < len(ladder.labels):
            index += 1
            continue
        return f"{whole}{label}"


def render_size(byte_len: int, convention: SizeConvention) -> str:
    """Render a byte count for the size column.

    Args:
        byte_len: Size in bytes.
        convention: Active size convention.

    Returns:
        str: Rendered size without padding.
    """
    if convention is SizeConvention.HUMAN:
        return render_scaled(byte_len, BINARY_UNITS)
    if convention is SizeConvention.SI:
        return render_scaled(byte_len, DECIMAL_UNITS)
    return str(byte_len)
