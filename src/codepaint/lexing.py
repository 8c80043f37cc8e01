"""Pygments adapter that supplies scope trees for the compositor.

Pygments yields a flat token stream. Adjacent tokens that map to the same
scope name are merged into one run, tokens that map to plain text produce no
scope of their own (the root covers them), and string escapes/interpolations
are nested under the ``String`` run that encloses them.
"""

from __future__ import annotations

import logging

from pygments.lexer import Lexer
from pygments.lexers import PythonLexer, get_lexer_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from codepaint.scopes import Scope

logger = logging.getLogger(__name__)

TokenType = type(Token)

PLAIN_TEXT = "Plain Text"

# Lookups walk up the token hierarchy to the nearest listed type. When several
# types share a scope name, the first one listed is the canonical one.
TOKEN_SCOPES: dict[TokenType, str] = {
    Token.Comment: "Comment",
    Token.Comment.Preproc: "Preprocessor Keyword",
    Token.Keyword: "Keyword",
    Token.Keyword.Type: "Type",
    Token.Name.Class: "Class Name",
    Token.Name.Exception: "Class Name",
    Token.Name.Function: "Function",
    Token.Name.Builtin: "Builtin Function",
    Token.Name.Decorator: "Attribute",
    Token.Name.Tag: "HTML Element Name",
    Token.Name.Attribute: "HTML Attribute Name",
    Token.String: "String",
    Token.String.Escape: "String Escape",
    Token.String.Interpol: "String Interpolation",
    Token.Comment.PreprocFile: "String",
    Token.Number: "Number",
    Token.Operator: "Operator",
    Token.Operator.Word: "Keyword",
    Token.Generic.Heading: "Markdown Header",
    Token.Generic.Subheading: "Markdown Header",
    Token.Generic.Emph: "Markdown Emphasis",
    Token.Generic.Strong: "Markdown Bold",
    Token.Generic.Inserted: "Inserted",
    Token.Generic.Deleted: "Deleted",
    Token.Error: "Error",
}

# Child scope name -> the run it nests inside when directly adjacent.
NESTED_SCOPES = {
    "String Escape": "String",
    "String Interpolation": "String",
}


def scope_name(token_type: TokenType) -> str:
    """Map a Pygments token type to the scope name used as a style key."""
    ttype = token_type
    while ttype not in TOKEN_SCOPES and ttype.parent is not None:
        ttype = ttype.parent
    return TOKEN_SCOPES.get(ttype, PLAIN_TEXT)


def find_language(tag: str | None) -> Lexer | None:
    """Look up a lexer by fence info tag. Empty or unknown tags give None."""
    if not tag or not tag.strip():
        return None
    try:
        return get_lexer_by_name(tag.strip().lower())
    except ClassNotFound:
        return None


def fallback_lexer(tag: str | None, fallback_language: str = "python") -> Lexer:
    """Return the lexer for ``tag``, or the fallback language's lexer."""
    lexer = find_language(tag)
    if lexer is not None:
        return lexer
    if tag:
        logger.debug("unknown language tag %r, using %r", tag, fallback_language)
    return find_language(fallback_language) or PythonLexer()


class _Run:
    __slots__ = ("start", "end", "name", "children")

    def __init__(self, start: int, end: int, name: str):
        self.start = start
        self.end = end
        self.name = name
        self.children: list[_Run] = []

    def extend_or_add(self, start: int, end: int, name: str) -> None:
        last = self.children[-1] if self.children else None
        if last is not None and last.name == name and last.end == start:
            last.end = end
        else:
            self.children.append(_Run(start, end, name))
        self.end = end

    def freeze(self) -> Scope:
        return Scope(
            self.start,
            self.end - self.start,
            self.name,
            tuple(child.freeze() for child in self.children),
        )


def build_scope_tree(text: str, lexer: Lexer) -> Scope:
    """Tokenize ``text`` and return a root scope covering all of it."""
    runs: list[_Run] = []
    # Line-oriented lexers (REPL, fixed-form source) restart the reported
    # index on every line, so offsets are summed from the token values.
    pos = 0
    for _, ttype, value in lexer.get_tokens_unprocessed(text):
        if pos >= len(text):
            break
        start, pos = pos, min(pos + len(value), len(text))
        if start == pos:
            continue
        name = scope_name(ttype)
        if name == PLAIN_TEXT:
            continue
        last = runs[-1] if runs else None
        adjacent = last is not None and last.end == start
        if adjacent and NESTED_SCOPES.get(name) == last.name:
            last.extend_or_add(start, pos, name)
        elif adjacent and last.name == name:
            last.end = pos
        else:
            runs.append(_Run(start, pos, name))
    return Scope(0, len(text), PLAIN_TEXT, tuple(run.freeze() for run in runs))
