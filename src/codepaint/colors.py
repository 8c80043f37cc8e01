"""Terminal escape constants and 24-bit color encoding."""

import re

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
ITALIC = "\033[3m"
REVERSE = "\033[7m"

_FOREGROUND_RGB = "\033[38;2;{}m"
_BACKGROUND_RGB = "\033[48;2;{}m"

_HEX_TAIL_RE = re.compile(r"[0-9A-Fa-f]{6}")


class FormatError(ValueError):
    """A color string could not be parsed as a hex triplet."""


def hex_to_rgb_triplet(color: str | None) -> str | None:
    """Convert a hex color to the ``R;G;B`` decimal form used by SGR escapes.

    Only the last six characters are read, so ``#RRGGBB`` and ARGB values such
    as ``#FF569CD6`` both work. ``None`` and ``""`` mean "no color" and are
    returned unchanged.
    """
    if not color:
        return color
    if len(color) < 6:
        raise FormatError("color {!r} is shorter than six hex digits".format(color))
    tail = color[-6:]
    if not _HEX_TAIL_RE.fullmatch(tail):
        raise FormatError("color {!r} does not end in six hex digits".format(color))
    return ";".join(str(int(tail[i:i + 2], 16)) for i in (0, 2, 4))


def foreground_escape(color: str | None) -> str:
    triplet = hex_to_rgb_triplet(color)
    return _FOREGROUND_RGB.format(triplet) if triplet else ""


def background_escape(color: str | None) -> str:
    triplet = hex_to_rgb_triplet(color)
    return _BACKGROUND_RGB.format(triplet) if triplet else ""
