"""Style tables: scope name -> visual attributes.

Tables are read-only mappings built once at startup and passed explicitly to
the renderer. Lookup is by exact scope name; a missing name is the common case
(punctuation, identifiers) and resolves to the empty style.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from codepaint.lexing import TOKEN_SCOPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Style:
    foreground: str | None = None
    background: str | None = None
    italic: bool = False
    bold: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.foreground or self.background or self.italic or self.bold)


EMPTY_STYLE = Style()

StyleTable = Mapping[str, Style]


def resolve(class_name: str, table: StyleTable) -> Style:
    return table.get(class_name, EMPTY_STYLE)


# Colors use the theme's ARGB notation; only the trailing RGB is rendered.
DEFAULT_DARK: StyleTable = MappingProxyType({
    "Comment": Style(foreground="#FF57A64A", italic=True),
    "Keyword": Style(foreground="#FF569CD6"),
    "Preprocessor Keyword": Style(foreground="#FF9B9B9B"),
    "String": Style(foreground="#FFD69D85"),
    "String Escape": Style(foreground="#FFFFD68F"),
    "String Interpolation": Style(foreground="#FF569CD6"),
    "Number": Style(foreground="#FFB5CEA8"),
    "Operator": Style(foreground="#FFB4B4B4"),
    "Type": Style(foreground="#FF4EC9B0"),
    "Class Name": Style(foreground="#FF4EC9B0"),
    "Function": Style(foreground="#FFDCDCAA"),
    "Builtin Function": Style(foreground="#FFDCDCAA"),
    "Attribute": Style(foreground="#FF4EC9B0"),
    "HTML Element Name": Style(foreground="#FF569CD6"),
    "HTML Attribute Name": Style(foreground="#FF9CDCFE"),
    "Markdown Header": Style(foreground="#FF569CD6", bold=True),
    "Markdown Emphasis": Style(italic=True),
    "Markdown Bold": Style(bold=True),
    "Inserted": Style(foreground="#FFB5CEA8"),
    "Deleted": Style(foreground="#FFD69D85"),
    "Error": Style(foreground="#FFF44747", bold=True),
})

DEFAULT_LIGHT: StyleTable = MappingProxyType({
    "Comment": Style(foreground="#FF008000", italic=True),
    "Keyword": Style(foreground="#FF0000FF"),
    "Preprocessor Keyword": Style(foreground="#FF808080"),
    "String": Style(foreground="#FFA31515"),
    "String Escape": Style(foreground="#FFEE0000"),
    "String Interpolation": Style(foreground="#FF0000FF"),
    "Number": Style(foreground="#FF098658"),
    "Type": Style(foreground="#FF2B91AF"),
    "Class Name": Style(foreground="#FF2B91AF"),
    "Function": Style(foreground="#FF795E26"),
    "Builtin Function": Style(foreground="#FF795E26"),
    "Attribute": Style(foreground="#FF2B91AF"),
    "HTML Element Name": Style(foreground="#FF800000"),
    "HTML Attribute Name": Style(foreground="#FFFF0000"),
    "Markdown Header": Style(foreground="#FF0000FF", bold=True),
    "Markdown Emphasis": Style(italic=True),
    "Markdown Bold": Style(bold=True),
    "Inserted": Style(foreground="#FF098658"),
    "Deleted": Style(foreground="#FFA31515"),
    "Error": Style(foreground="#FFE51400", bold=True),
})

_BUILTIN_TABLES = {
    "dark": DEFAULT_DARK,
    "light": DEFAULT_LIGHT,
}

_PYGMENTS_PREFIX = "pygments:"
_HEX_COLOR_RE = re.compile(r"#?[0-9A-Fa-f]{6}")


def _hex_color(value: str | None) -> str | None:
    # Pygments also allows named ANSI colors ("ansiblue"); those have no RGB form.
    if value and _HEX_COLOR_RE.fullmatch(value):
        return value
    return None


def style_table_from_pygments(style_name: str) -> StyleTable:
    """Build a table from a Pygments style, one entry per mapped token type.

    When several token types share a scope name, the first one listed in
    TOKEN_SCOPES supplies the style.
    """
    try:
        pygments_style = get_style_by_name(style_name)
    except ClassNotFound as e:
        raise ValueError("unknown pygments style: {}".format(style_name)) from e

    table: dict[str, Style] = {}
    for ttype, name in TOKEN_SCOPES.items():
        if name in table:
            continue
        attrs = pygments_style.style_for_token(ttype)
        style = Style(
            foreground=_hex_color(attrs["color"]),
            background=_hex_color(attrs["bgcolor"]),
            italic=bool(attrs["italic"]),
            bold=bool(attrs["bold"]),
        )
        if not style.is_empty:
            table[name] = style
    return MappingProxyType(table)


def get_style_table(theme: str) -> StyleTable:
    """Return the table for ``dark``, ``light`` or ``pygments:<style>``.

    Unknown names fall back to the dark table.
    """
    if theme.startswith(_PYGMENTS_PREFIX):
        try:
            return style_table_from_pygments(theme[len(_PYGMENTS_PREFIX):])
        except ValueError:
            logger.warning("unknown theme %r, using dark", theme)
            return DEFAULT_DARK
    table = _BUILTIN_TABLES.get(theme)
    if table is None:
        logger.warning("unknown theme %r, using dark", theme)
        return DEFAULT_DARK
    return table


def merge_overrides(table: StyleTable, overrides: Mapping[str, Mapping]) -> StyleTable:
    """Layer per-scope attribute overrides (from settings) over ``table``.

    Each override names only the attributes it changes:
    ``{"Keyword": {"foreground": "#FFAA00", "bold": true}}``.
    """
    merged = dict(table)
    for name, attrs in overrides.items():
        unknown = set(attrs) - {"foreground", "background", "italic", "bold"}
        if unknown:
            raise ValueError(
                "unknown style attribute(s) for {!r}: {}".format(name, ", ".join(sorted(unknown)))
            )
        merged[name] = replace(merged.get(name, EMPTY_STYLE), **attrs)
    return MappingProxyType(merged)
