"""Markdown surroundings for highlighted code.

Inline code spans get a dim, reverse-video run. Fenced code blocks get a
banner sized to the terminal, the highlighted code, and a closing rule. Text
outside code passes through unchanged.
"""

from __future__ import annotations

import logging

from rich.console import Console

from codepaint.colors import DIM, RESET, REVERSE, FormatError
from codepaint.compositor import highlight
from codepaint.lexing import build_scope_tree, fallback_lexer, find_language
from codepaint.segmentation import BlockKind, find_inline_code, segment
from codepaint.styles import StyleTable

logger = logging.getLogger(__name__)

# Fence tags whose tab indentation is meaningful and must not be expanded
LITERAL_TAB_LANGUAGES = frozenset({"make", "makefile", "mf", "bsdmake"})


def terminal_width() -> int:
    return Console().width


def render_inline_code(content: str) -> str:
    return DIM + REVERSE + content + RESET


def render_inline_spans(text: str) -> str:
    """Replace every inline code span in ``text`` with its styled run."""
    parts: list[str] = []
    pos = 0
    for code in find_inline_code(text):
        parts.append(text[pos:code.span.start])
        parts.append(render_inline_code(text[code.content_span.start:code.content_span.end]))
        pos = code.span.end
    parts.append(text[pos:])
    return "".join(parts)


def _banner(info: str | None, width: int) -> str:
    lexer = find_language(info)
    label = "++++ {} Code ".format(lexer.name) if lexer is not None else "++++ Code "
    return label.ljust(width, "+")


def _prepare_code(code: str, info: str | None, tab_width: int) -> str:
    if info and info.strip().lower() in LITERAL_TAB_LANGUAGES:
        return code
    return code.expandtabs(tab_width)


def render_code_block(
    code: str,
    info: str | None,
    table: StyleTable,
    width: int,
    fallback_language: str = "python",
    tab_width: int = 4,
) -> str:
    """Render one fenced block: banner, highlighted code, closing rule.

    Unknown or missing info tags are highlighted as ``fallback_language``.
    Raises FormatError when the table holds an unparseable color.
    """
    code = _prepare_code(code, info, tab_width)
    lexer = fallback_lexer(info, fallback_language)
    body = highlight(code, build_scope_tree(code, lexer), table)
    return "\n".join([_banner(info, width), body, "+" * width])


def render_plain_code_block(code: str, info: str | None, width: int, tab_width: int = 4) -> str:
    """Same layout as render_code_block with no color."""
    code = _prepare_code(code, info, tab_width)
    return "\n".join([_banner(info, width), code, "+" * width])


def render_document(
    text: str,
    table: StyleTable,
    width: int,
    fallback_language: str = "python",
    tab_width: int = 4,
) -> str:
    """Render a markdown document with highlighted fences and inline code.

    A block whose colors cannot be parsed is logged and rendered uncolored;
    other blocks are unaffected.
    """
    result = segment(text)
    for error in result.errors:
        logger.warning("%s at offset %d", error.details, error.span.start)

    parts: list[str] = []
    for block in result.blocks:
        if block.kind is BlockKind.TEXT:
            parts.append(render_inline_spans(text[block.span.start:block.span.end]))
            continue
        inner = text[block.meta.inner_span.start:block.meta.inner_span.end]
        try:
            rendered = render_code_block(
                inner, block.meta.info, table, width, fallback_language, tab_width
            )
        except FormatError as e:
            logger.warning("code block at offset %d rendered uncolored: %s", block.span.start, e)
            rendered = render_plain_code_block(inner, block.meta.info, width, tab_width)
        parts.append(rendered + "\n")
    return "".join(parts)
