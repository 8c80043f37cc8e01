"""Split markdown text into plain-text regions and fenced code blocks.

Single linear scan: each fence claims its span up to the matching close
marker, and the gaps between fences become TEXT blocks. Inline code spans are
found separately, inside TEXT regions only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


# ─── Data model ──────────────────────────────────────────────────────────────


class BlockKind(Enum):
    TEXT = "text"
    CODE_FENCE = "code_fence"


class ParseErrorKind(Enum):
    UNCLOSED_FENCE = "unclosed_fence"


@dataclass(frozen=True)
class Span:
    start: int
    end: int  # exclusive


@dataclass(frozen=True)
class FenceMeta:
    marker_char: str  # "`" or "~"
    marker_len: int  # 3 or more
    info: str | None  # first word of the info string, None when absent
    inner_span: Span  # content between opening and closing fence lines


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    span: Span
    meta: FenceMeta | None = None


@dataclass(frozen=True)
class ParseError:
    kind: ParseErrorKind
    span: Span
    details: str


@dataclass(frozen=True)
class SegmentResult:
    blocks: tuple[Block, ...]
    errors: tuple[ParseError, ...]


@dataclass(frozen=True)
class InlineCode:
    span: Span  # including the backticks
    content_span: Span


# ─── Regex patterns ──────────────────────────────────────────────────────────

# Fence open: optional indent, 3+ backticks or tildes, optional info string
FENCE_OPEN_RE = re.compile(r"^([ \t]*)((`{3,})|(~{3,}))(.*)", re.MULTILINE)

# Inline code: a backtick run closed by a run of the same length on one line
INLINE_CODE_RE = re.compile(r"(?<!`)(`+)(?!`)(.+?)(?<!`)\1(?!`)")


# ─── Segmentation ────────────────────────────────────────────────────────────


def segment(raw_text: str) -> SegmentResult:
    """Segment markdown into TEXT and CODE_FENCE blocks in document order."""
    if not raw_text:
        return SegmentResult((), ())

    errors: list[ParseError] = []
    fences: list[Block] = []
    pos = 0

    while pos < len(raw_text):
        m = FENCE_OPEN_RE.search(raw_text, pos)
        if not m:
            break
        block = _process_fence(raw_text, m, errors)
        fences.append(block)
        pos = block.span.end

    text_blocks = _fill_text_gaps(fences, len(raw_text))
    all_blocks = sorted(fences + text_blocks, key=lambda b: b.span.start)
    return SegmentResult(tuple(all_blocks), tuple(errors))


def _process_fence(
    text: str, m: re.Match, errors: list[ParseError]
) -> Block:
    """Process a fence opening match into a Block."""
    marker_str = m.group(3) or m.group(4)
    marker_char = marker_str[0]
    marker_len = len(marker_str)
    info_raw = m.group(5).strip()
    fence_start = m.start()

    opening_end = text.find("\n", m.start())
    content_start = (opening_end + 1) if opening_end != -1 else len(text)

    info = info_raw.split()[0] if info_raw else None

    # Close: same char, length >= opening, on its own line
    close_re = re.compile(
        r"^[ \t]*" + re.escape(marker_char) + "{" + str(marker_len) + r",}[ \t]*$",
        re.MULTILINE,
    )
    cm = close_re.search(text, content_start)

    if cm:
        close_end = text.find("\n", cm.start())
        fence_end = (close_end + 1) if close_end != -1 else len(text)
        # Drop the newline that ends the last content line
        inner_end = cm.start() - 1 if cm.start() > content_start else cm.start()
        inner = Span(content_start, inner_end)
    else:
        fence_end = len(text)
        inner = Span(content_start, fence_end)
        errors.append(
            ParseError(
                ParseErrorKind.UNCLOSED_FENCE,
                Span(fence_start, fence_end),
                f"Unclosed {marker_char * marker_len} fence",
            )
        )

    return Block(
        BlockKind.CODE_FENCE,
        Span(fence_start, fence_end),
        FenceMeta(marker_char, marker_len, info, inner),
    )


def _fill_text_gaps(fences: list[Block], text_length: int) -> list[Block]:
    """Fill gaps between fences with TEXT blocks."""
    blocks: list[Block] = []
    pos = 0
    for fence in fences:
        if fence.span.start > pos:
            blocks.append(Block(BlockKind.TEXT, Span(pos, fence.span.start)))
        pos = fence.span.end
    if pos < text_length:
        blocks.append(Block(BlockKind.TEXT, Span(pos, text_length)))
    return blocks


def find_inline_code(text: str) -> list[InlineCode]:
    """Find single-line inline code spans in a TEXT region."""
    return [
        InlineCode(Span(m.start(), m.end()), Span(m.start(2), m.end(2)))
        for m in INLINE_CODE_RE.finditer(text)
    ]
