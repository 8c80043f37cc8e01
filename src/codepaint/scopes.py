"""Scope tree model: nested, tagged regions of a source text.

A tree is built once per rendered unit (one code block or one inline span) by
the tokenizer adapter, handed to the flattener, then dropped. Offsets are
``str`` indices into the text being rendered.
"""

from __future__ import annotations

from dataclasses import dataclass


class ScopeError(ValueError):
    """A scope tree or event stream does not fit the text it describes."""


@dataclass(frozen=True)
class Scope:
    start: int
    length: int
    class_name: str
    children: tuple[Scope, ...] = ()

    @property
    def end(self) -> int:
        return self.start + self.length


def validate(root: Scope, text_length: int) -> None:
    """Raise ScopeError unless ``root`` is a well-formed tree over the text.

    Children must lie inside their parent; siblings must be ordered by start
    and may touch but not overlap. Zero-length scopes are allowed anywhere.
    """
    if root.start < 0 or root.length < 0:
        raise ScopeError("negative offset in scope {!r}".format(root.class_name))
    if root.end > text_length:
        raise ScopeError(
            "scope {!r} ends at {} past text length {}".format(
                root.class_name, root.end, text_length
            )
        )
    _validate_children(root)


def _validate_children(parent: Scope) -> None:
    prev_end = parent.start
    for child in parent.children:
        if child.start < 0 or child.length < 0:
            raise ScopeError("negative offset in scope {!r}".format(child.class_name))
        if child.start < parent.start or child.end > parent.end:
            raise ScopeError(
                "scope {!r} [{}, {}) escapes parent {!r} [{}, {})".format(
                    child.class_name, child.start, child.end,
                    parent.class_name, parent.start, parent.end,
                )
            )
        if child.start < prev_end:
            raise ScopeError(
                "scope {!r} at {} overlaps or precedes its previous sibling".format(
                    child.class_name, child.start
                )
            )
        prev_end = child.end
        _validate_children(child)


def count_scopes(root: Scope) -> int:
    return 1 + sum(count_scopes(child) for child in root.children)
