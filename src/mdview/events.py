"""Markdown event stream: the closed set of events the renderer consumes.

``iter_events`` adapts markdown-it-py's open/close token model into a flat
stream of block start/end, inline start/end and leaf events:

- markdown-it nests inline content in ``token.children`` of ``inline``
  tokens; those children are spliced into the stream in place.
- Tight-list paragraphs are marked ``hidden`` by markdown-it and produce no
  paragraph events, so looseness is visible to the consumer.
- Table alignments live on the header cells; they are read ahead and
  reported on ``TableStart``.
- Task checkboxes, footnotes and ``$`` math come from mdit-py-plugins.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin


class Alignment(enum.Enum):
    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


# ---------------------------------------------------------------------------
# Block events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeadingStart:
    level: int


@dataclass(frozen=True)
class HeadingEnd:
    pass


@dataclass(frozen=True)
class ParagraphStart:
    pass


@dataclass(frozen=True)
class ParagraphEnd:
    pass


@dataclass(frozen=True)
class BlockQuoteStart:
    pass


@dataclass(frozen=True)
class BlockQuoteEnd:
    pass


@dataclass(frozen=True)
class ListStart:
    """``start`` is the first number of an ordered list, ``None`` for bullets."""

    start: int | None = None


@dataclass(frozen=True)
class ListEnd:
    pass


@dataclass(frozen=True)
class ItemStart:
    pass


@dataclass(frozen=True)
class ItemEnd:
    pass


@dataclass(frozen=True)
class CodeBlockStart:
    language: str | None = None


@dataclass(frozen=True)
class CodeBlockEnd:
    pass


@dataclass(frozen=True)
class TableStart:
    alignments: tuple[Alignment, ...] = ()


@dataclass(frozen=True)
class TableEnd:
    pass


@dataclass(frozen=True)
class TableHeadStart:
    pass


@dataclass(frozen=True)
class TableHeadEnd:
    pass


@dataclass(frozen=True)
class TableRowStart:
    pass


@dataclass(frozen=True)
class TableRowEnd:
    pass


@dataclass(frozen=True)
class TableCellStart:
    pass


@dataclass(frozen=True)
class TableCellEnd:
    pass


@dataclass(frozen=True)
class FootnoteDefinitionStart:
    label: str


@dataclass(frozen=True)
class FootnoteDefinitionEnd:
    pass


# ---------------------------------------------------------------------------
# Inline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmphasisStart:
    pass


@dataclass(frozen=True)
class EmphasisEnd:
    pass


@dataclass(frozen=True)
class StrongStart:
    pass


@dataclass(frozen=True)
class StrongEnd:
    pass


@dataclass(frozen=True)
class StrikethroughStart:
    pass


@dataclass(frozen=True)
class StrikethroughEnd:
    pass


@dataclass(frozen=True)
class LinkStart:
    destination: str


@dataclass(frozen=True)
class LinkEnd:
    pass


# ---------------------------------------------------------------------------
# Leaf events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Code:
    code: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class TaskMarker:
    checked: bool


@dataclass(frozen=True)
class Html:
    html: str


@dataclass(frozen=True)
class InlineHtml:
    html: str


@dataclass(frozen=True)
class FootnoteReference:
    label: str


@dataclass(frozen=True)
class InlineMath:
    math: str


@dataclass(frozen=True)
class DisplayMath:
    math: str


@dataclass(frozen=True)
class Image:
    alt: str
    destination: str


Event = Union[
    HeadingStart, HeadingEnd,
    ParagraphStart, ParagraphEnd,
    BlockQuoteStart, BlockQuoteEnd,
    ListStart, ListEnd,
    ItemStart, ItemEnd,
    CodeBlockStart, CodeBlockEnd,
    TableStart, TableEnd,
    TableHeadStart, TableHeadEnd,
    TableRowStart, TableRowEnd,
    TableCellStart, TableCellEnd,
    FootnoteDefinitionStart, FootnoteDefinitionEnd,
    EmphasisStart, EmphasisEnd,
    StrongStart, StrongEnd,
    StrikethroughStart, StrikethroughEnd,
    LinkStart, LinkEnd,
    Text, Code, SoftBreak, HardBreak, Rule, TaskMarker,
    Html, InlineHtml, FootnoteReference, InlineMath, DisplayMath, Image,
]


# ---------------------------------------------------------------------------
# markdown-it adapter
# ---------------------------------------------------------------------------

_ALIGN_RE = re.compile(r"text-align:\s*(left|center|right)")

# Leaf-like block tokens that carry no children.
_SIMPLE_BLOCKS: dict[str, type] = {
    "blockquote_open": BlockQuoteStart,
    "blockquote_close": BlockQuoteEnd,
    "list_item_open": ItemStart,
    "list_item_close": ItemEnd,
    "table_close": TableEnd,
    "thead_open": TableHeadStart,
    "thead_close": TableHeadEnd,
    "th_open": TableCellStart,
    "td_open": TableCellStart,
    "th_close": TableCellEnd,
    "td_close": TableCellEnd,
    "footnote_close": FootnoteDefinitionEnd,
    "hr": Rule,
}

_SIMPLE_INLINES: dict[str, type] = {
    "softbreak": SoftBreak,
    "hardbreak": HardBreak,
    "em_open": EmphasisStart,
    "em_close": EmphasisEnd,
    "strong_open": StrongStart,
    "strong_close": StrongEnd,
    "s_open": StrikethroughStart,
    "s_close": StrikethroughEnd,
    "link_close": LinkEnd,
}


@lru_cache(maxsize=1)
def _parser() -> MarkdownIt:
    md = MarkdownIt("commonmark").enable("table").enable("strikethrough")
    md.use(tasklists_plugin)
    md.use(footnote_plugin)
    md.use(dollarmath_plugin, allow_digits=False, allow_space=False)
    return md


def iter_events(source: str) -> Iterator[Event]:
    """Tokenize *source* and yield its events in document order."""
    tokens = _parser().parse(source)
    in_head = False

    for index, tok in enumerate(tokens):
        t = tok.type

        simple = _SIMPLE_BLOCKS.get(t)
        if simple is not None:
            yield simple()
            continue

        if t == "inline":
            yield from _inline_events(tok.children or [])
        elif t == "heading_open":
            yield HeadingStart(_heading_level(tok))
        elif t == "heading_close":
            yield HeadingEnd()
        elif t == "paragraph_open":
            if not tok.hidden:
                yield ParagraphStart()
        elif t == "paragraph_close":
            if not tok.hidden:
                yield ParagraphEnd()
        elif t == "bullet_list_open":
            yield ListStart(None)
        elif t == "ordered_list_open":
            yield ListStart(_list_start(tok))
        elif t in ("bullet_list_close", "ordered_list_close"):
            yield ListEnd()
        elif t in ("fence", "code_block"):
            language = None
            if t == "fence" and tok.info.strip():
                language = tok.info.split()[0]
            yield CodeBlockStart(language)
            if tok.content:
                yield Text(tok.content)
            yield CodeBlockEnd()
        elif t == "html_block":
            yield Html(tok.content)
        elif t == "table_open":
            yield TableStart(_table_alignments(tokens, index))
        elif t == "tr_open":
            if not in_head:
                yield TableRowStart()
        elif t == "tr_close":
            if not in_head:
                yield TableRowEnd()
        elif t == "footnote_open":
            yield FootnoteDefinitionStart(_footnote_label(tok))
        elif t in ("math_block", "math_block_label"):
            yield DisplayMath(tok.content.strip("\n"))

        # Track whether header rows are being walked
        if t == "thead_open":
            in_head = True
        elif t == "thead_close":
            in_head = False


def _inline_events(children: list[Token]) -> Iterator[Event]:
    strip_next = False

    for child in children:
        ct = child.type

        simple = _SIMPLE_INLINES.get(ct)
        if simple is not None:
            yield simple()
            continue

        if ct == "text":
            text = child.content
            if strip_next:
                text = text.lstrip(" ")
                strip_next = False
            if text:
                yield Text(text)
        elif ct == "code_inline":
            yield Code(child.content)
        elif ct == "link_open":
            yield LinkStart(str(child.attrs.get("href", "")))
        elif ct == "image":
            yield Image(child.content, str(child.attrs.get("src", "")))
        elif ct == "html_inline":
            if "task-list-item-checkbox" in child.content:
                yield TaskMarker('checked="checked"' in child.content)
                strip_next = True
            else:
                yield InlineHtml(child.content)
        elif ct == "footnote_ref":
            yield FootnoteReference(_footnote_label(child))
        elif ct in ("math_inline", "math_inline_double"):
            yield InlineMath(child.content)
        elif ct == "footnote_anchor":
            continue
        elif child.content:
            yield Text(child.content)


def _heading_level(tok: Token) -> int:
    if tok.tag and tok.tag[0] == "h" and tok.tag[1:].isdigit():
        return int(tok.tag[1:])
    return 1


def _list_start(tok: Token) -> int:
    start = tok.attrs.get("start")
    if start is None:
        return 1
    try:
        return int(start)
    except (TypeError, ValueError):
        return 1


def _table_alignments(tokens: list[Token], table_index: int) -> tuple[Alignment, ...]:
    """Read column alignments from the header cells following ``table_open``."""
    alignments: list[Alignment] = []
    for tok in tokens[table_index + 1 :]:
        if tok.type == "thead_close" or tok.type == "table_close":
            break
        if tok.type != "th_open":
            continue
        match = _ALIGN_RE.search(str(tok.attrs.get("style", "")))
        alignments.append(Alignment(match.group(1)) if match else Alignment.NONE)
    return tuple(alignments)


def _footnote_label(tok: Token) -> str:
    meta = tok.meta or {}
    label = meta.get("label")
    if label:
        return str(label)
    return str(meta.get("id", 0) + 1)
