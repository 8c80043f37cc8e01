"""Flatten a scope tree into ordered events and compose the escaped output.

Nesting is carried by traversal order: a pre-order walk puts every parent's
Open before its descendants' events and its Close after them, and the stable
sort by position keeps that order for events that share an offset.

Every Close emits a full RESET. An outer scope's style is therefore not
restored when an inner scope closes inside it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter

from codepaint.colors import BOLD, ITALIC, RESET, background_escape, foreground_escape
from codepaint.scopes import Scope, ScopeError
from codepaint.styles import Style, StyleTable, resolve


class EventKind(Enum):
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class Event:
    position: int
    kind: EventKind
    scope: Scope | None = None  # set for OPEN
    code: str = ""  # set for CLOSE


def flatten(root: Scope) -> list[Event]:
    """Return the tree's Open/Close events sorted by position.

    Ties keep generation order; ``sorted`` is guaranteed stable.
    """
    events: list[Event] = []
    _walk(root, events)
    return sorted(events, key=attrgetter("position"))


def _walk(scope: Scope, events: list[Event]) -> None:
    events.append(Event(scope.start, EventKind.OPEN, scope=scope))
    for child in scope.children:
        _walk(child, events)
    events.append(Event(scope.end, EventKind.CLOSE, code=RESET))


def open_sequence(style: Style) -> str:
    """Escape codes for a style: colors first, then italic and bold."""
    if style.is_empty:
        return ""
    parts = [
        foreground_escape(style.foreground),
        background_escape(style.background),
    ]
    if style.italic:
        parts.append(ITALIC)
    if style.bold:
        parts.append(BOLD)
    return "".join(parts)


def compose(text: str, events: Iterable[Event], table: StyleTable) -> str:
    """Interleave ``text`` with the escape codes for ``events``.

    Every character of ``text`` is copied exactly once and in order. A
    FormatError from a bad color propagates and nothing is returned.
    """
    out: list[str] = []
    offset = 0
    for event in events:
        if event.position < offset or event.position > len(text):
            raise ScopeError(
                "event at {} is out of order or outside text of length {}".format(
                    event.position, len(text)
                )
            )
        out.append(text[offset:event.position])
        if event.kind is EventKind.OPEN:
            out.append(open_sequence(resolve(event.scope.class_name, table)))
        else:
            out.append(event.code)
        offset = event.position
    out.append(text[offset:])
    return "".join(out)


def highlight(text: str, root: Scope, table: StyleTable) -> str:
    return compose(text, flatten(root), table)
