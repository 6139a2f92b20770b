"""Name coloring by file type, using colorama's ANSI sequences."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Final

from colorama import Back, Fore, Style

from neols.accessor import FileKind


class ColorPolicy(Enum):
    """When names are decorated with color."""

    ALWAYS = "always"
    AUTO = "auto"
    NEVER = "never"


# Device and directory treatments; other glyphs stay plain.
_DEVICE_STYLE: Final[str] = Fore.YELLOW + Style.BRIGHT + Back.BLACK
_DIRECTORY_STYLE: Final[str] = Fore.BLUE + Style.BRIGHT

_GLYPH_STYLES: Final[dict[str, str]] = {
    FileKind.BLOCK_DEVICE.value: _DEVICE_STYLE,
    FileKind.CHAR_DEVICE.value: _DEVICE_STYLE,
    FileKind.DIRECTORY.value: _DIRECTORY_STYLE,
}


def should_color(policy: ColorPolicy, is_terminal: Callable[[], bool]) -> bool:
    """Resolve a color policy; the terminal probe runs only for ``AUTO``."""
    if policy is ColorPolicy.ALWAYS:
        return True
    if policy is ColorPolicy.NEVER:
        return False
    return is_terminal()


def decorate(
    name: str,
    type_glyph: str,
    policy: ColorPolicy,
    is_terminal: Callable[[], bool],
) -> str:
    """Return *name*, wrapped in color codes when policy and type call for it.

    Args:
        name: Display name.
        type_glyph: Type glyph of the entry (``d``, ``b``, ``c``, ...).
        policy: Active color policy.
        is_terminal: Probe reporting whether output is interactive.

    Returns:
        str: Decorated or unchanged name.
    """
    style = _GLYPH_STYLES.get(type_glyph)
    if style is None or not should_color(policy, is_terminal):
        return name
    return f"{style}{name}{Style.RESET_ALL}"
