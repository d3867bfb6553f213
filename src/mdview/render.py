"""Markdown renderer -- folds the markdown event stream into styled lines.

A single left-to-right pass over :func:`mdview.events.iter_events` with no
lookahead.  All nesting (inline styles, lists, blockquotes, tables, code
blocks) is tracked on one :class:`Renderer` instance that lives for exactly
one call to :func:`render`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from mdview.events import (
    Alignment,
    BlockQuoteEnd,
    BlockQuoteStart,
    Code,
    CodeBlockEnd,
    CodeBlockStart,
    DisplayMath,
    EmphasisEnd,
    EmphasisStart,
    Event,
    FootnoteDefinitionEnd,
    FootnoteDefinitionStart,
    FootnoteReference,
    HardBreak,
    HeadingEnd,
    HeadingStart,
    Html,
    Image,
    InlineHtml,
    InlineMath,
    ItemEnd,
    ItemStart,
    LinkEnd,
    LinkStart,
    ListEnd,
    ListStart,
    ParagraphEnd,
    ParagraphStart,
    Rule,
    SoftBreak,
    StrikethroughEnd,
    StrikethroughStart,
    StrongEnd,
    StrongStart,
    TableCellEnd,
    TableCellStart,
    TableEnd,
    TableHeadEnd,
    TableHeadStart,
    TableRowEnd,
    TableRowStart,
    TableStart,
    TaskMarker,
    Text,
    iter_events,
)
from mdview.highlight import highlight_code
from mdview.style import DEFAULT_STYLE, Document, Line, Span, Style, fold_styles
from mdview.table import TableRenderer
from mdview.theme import DEFAULT_THEME, MarkdownTheme
from mdview.utils import text_width

Highlighter = Callable[[str, "str | None"], list[Line]]


@dataclass
class _ListState:
    ordered: bool
    next_index: int
    bullet_width: int = 0


@dataclass
class _TableState:
    alignments: tuple[Alignment, ...] = ()
    header: list[list[Span]] = field(default_factory=list)
    rows: list[list[list[Span]]] = field(default_factory=list)
    cell: list[Span] = field(default_factory=list)
    in_head: bool = False


class Renderer:
    """Render state for one pass: style stack, list stack, buffers, output."""

    def __init__(
        self,
        width: int,
        *,
        theme: MarkdownTheme = DEFAULT_THEME,
        highlighter: Highlighter = highlight_code,
    ) -> None:
        self.width = max(width, 0)
        self.theme = theme
        self.highlighter = highlighter

        self.lines: list[Line] = []
        self.spans: list[Span] = []

        self.style_stack: list[Style] = [DEFAULT_STYLE]
        self.list_stack: list[_ListState] = []
        self.blockquote_depth = 0
        self.item_paragraph_count = 0

        self.in_code_block = False
        self.code_language: str | None = None
        self.code_buf: list[str] = []

        self.table: _TableState | None = None
        self.link_url = ""
        self.pending_footnote: str | None = None

        self._table_renderer = TableRenderer(theme)

    # -- public API ---------------------------------------------------------

    def process(self, events: Iterable[Event]) -> Document:
        for event in events:
            self.handle(event)
        self.flush_line()
        return Document(tuple(self.lines))

    def handle(self, event: Event) -> None:  # noqa: C901 -- one arm per event kind
        match event:
            case HeadingStart(level=level):
                self.start_heading(level)
            case HeadingEnd():
                self.pop_style()
                self.flush_line()
                self.push_blank()
            case ParagraphStart():
                self.start_paragraph()
            case ParagraphEnd():
                self.end_paragraph()
            case BlockQuoteStart():
                self.flush_line()
                self.blockquote_depth += 1
            case BlockQuoteEnd():
                self.blockquote_depth = max(self.blockquote_depth - 1, 0)
                self.flush_line()
            case ListStart(start=start):
                self.flush_line()
                self.list_stack.append(_ListState(ordered=start is not None, next_index=start or 1))
            case ListEnd():
                self.end_list()
            case ItemStart():
                self.start_item()
            case ItemEnd():
                self.flush_line()
            case CodeBlockStart(language=language):
                self.flush_line()
                self.in_code_block = True
                self.code_language = language
                self.code_buf = []
            case CodeBlockEnd():
                self.end_code_block()
            case TableStart(alignments=alignments):
                self.flush_line()
                self.table = _TableState(alignments=alignments)
            case TableHeadStart():
                if self.table is not None:
                    self.table.in_head = True
            case TableHeadEnd():
                if self.table is not None:
                    self.table.in_head = False
            case TableRowStart():
                if self.table is not None and not self.table.in_head:
                    self.table.rows.append([])
            case TableRowEnd():
                pass
            case TableCellStart():
                if self.table is not None:
                    self.table.cell = []
            case TableCellEnd():
                self.end_cell()
            case TableEnd():
                self.end_table()
            case FootnoteDefinitionStart(label=label):
                self.flush_line()
                self.pending_footnote = label
            case FootnoteDefinitionEnd():
                self.pending_footnote = None
                self.flush_line()
            case EmphasisStart():
                self.push_style(self.theme.emphasis)
            case StrongStart():
                self.push_style(self.theme.strong)
            case StrikethroughStart():
                self.push_style(self.theme.strikethrough)
            case EmphasisEnd() | StrongEnd() | StrikethroughEnd():
                self.pop_style()
            case LinkStart(destination=destination):
                self.push_style(self.theme.link)
                self.link_url = destination
            case LinkEnd():
                self.pop_style()
                url, self.link_url = self.link_url, ""
                if url:
                    self.emit(Span(f" ({url})", self.theme.link_url))
            case Text(text=text):
                self.text(text)
            case Code(code=code):
                self.emit(Span(f"`{code}`", self.theme.inline_code))
            case SoftBreak():
                self.emit(Span(" "))
            case HardBreak():
                self.hard_break()
            case Rule():
                self.rule()
            case TaskMarker(checked=checked):
                self.task_marker(checked)
            case Html(html=html):
                self.flush_line()
                prefix = self.blockquote_prefix()
                for line in html.splitlines():
                    self.lines.append(Line.from_spans(prefix + [Span(line, self.theme.html)]))
            case InlineHtml(html=html):
                self.emit(Span(html, self.theme.html))
            case FootnoteReference(label=label):
                self.emit(Span(f"[{label}]", self.theme.footnote))
            case InlineMath(math=math):
                self.emit(Span(math, self.theme.math))
            case DisplayMath(math=math):
                self.flush_line()
                prefix = self.blockquote_prefix()
                for line in math.splitlines() or [""]:
                    self.lines.append(Line.from_spans(prefix + [Span(line, self.theme.math)]))
                self.push_blank()
            case Image(alt=alt, destination=destination):
                self.emit(Span(f"[{alt}]", self.current_style().patch(self.theme.link)))
                if destination:
                    self.emit(Span(f" ({destination})", self.theme.link_url))

    # -- style stack --------------------------------------------------------

    def current_style(self) -> Style:
        return fold_styles(self.style_stack)

    def push_style(self, style: Style) -> None:
        self.style_stack.append(style)

    def pop_style(self) -> None:
        if len(self.style_stack) > 1:
            self.style_stack.pop()

    # -- line buffer --------------------------------------------------------

    def flush_line(self) -> None:
        if self.spans:
            self.lines.append(Line.from_spans(self.spans))
            self.spans = []

    def push_blank(self) -> None:
        self.flush_line()
        self.lines.append(Line())

    def blockquote_prefix(self) -> list[Span]:
        return [Span(self.theme.blockquote_prefix, self.theme.blockquote)] * self.blockquote_depth

    def list_indent(self) -> str:
        return self.theme.list_indent * max(len(self.list_stack) - 1, 0)

    def seed_line(self) -> None:
        """Start a fresh line with the blockquote prefix and any footnote label."""
        if self.spans:
            return
        self.spans = self.blockquote_prefix()
        if self.pending_footnote is not None:
            self.spans.append(Span(f"[{self.pending_footnote}]: ", self.theme.footnote))
            self.pending_footnote = None

    def emit(self, span: Span) -> None:
        """Append an inline span to the open table cell or the current line."""
        if self.table is not None:
            self.table.cell.append(span)
            return
        self.seed_line()
        self.spans.append(span)

    # -- blocks -------------------------------------------------------------

    def start_heading(self, level: int) -> None:
        self.flush_line()
        heading = self.theme.heading(level)
        self.push_style(heading.style)
        self.seed_line()
        self.spans.append(Span(heading.marker, heading.style))

    def start_paragraph(self) -> None:
        if self.table is not None:
            return
        if not self.list_stack:
            self.flush_line()
            return

        self.item_paragraph_count += 1
        if self.item_paragraph_count > 1:
            self.flush_line()
            indent = self.list_indent() + " " * self.list_stack[-1].bullet_width
            self.spans = self.blockquote_prefix() + [Span(indent)]

    def end_paragraph(self) -> None:
        if self.table is not None:
            return
        self.flush_line()
        # Loose list items and top-level paragraphs are followed by a blank line
        self.push_blank()

    def end_list(self) -> None:
        if self.list_stack:
            self.list_stack.pop()
        if not self.list_stack:
            self.flush_line()
            if not self.lines or self.lines[-1].spans:
                self.push_blank()

    def start_item(self) -> None:
        self.flush_line()
        self.item_paragraph_count = 0
        prefix = self.blockquote_prefix()

        if self.list_stack:
            state = self.list_stack[-1]
            if state.ordered:
                marker = f"{state.next_index}. "
                state.next_index += 1
            else:
                marker = f"{self.theme.bullet(len(self.list_stack))} "
            state.bullet_width = text_width(marker)
            prefix.append(Span(self.list_indent() + marker, self.theme.list_marker))

        self.spans = prefix

    def end_code_block(self) -> None:
        self.in_code_block = False
        code = "".join(self.code_buf)
        language = self.code_language
        self.code_buf = []
        self.code_language = None

        prefix = self.blockquote_prefix() + [Span(self.theme.code_indent)]
        for line in self.highlighter(code, language):
            self.lines.append(Line.from_spans(prefix + list(line.spans)))
        self.push_blank()

    def end_cell(self) -> None:
        table = self.table
        if table is None:
            return
        cell, table.cell = table.cell, []
        if table.in_head:
            table.header.append(cell)
        elif table.rows:
            table.rows[-1].append(cell)

    def end_table(self) -> None:
        table = self.table
        self.table = None
        if table is None:
            return
        self.lines.extend(
            self._table_renderer.render(table.alignments, table.header, table.rows, self.width)
        )
        self.push_blank()

    # -- leaves -------------------------------------------------------------

    def text(self, text: str) -> None:
        if self.in_code_block:
            self.code_buf.append(text)
            return
        self.emit(Span(text, self.current_style()))

    def hard_break(self) -> None:
        if self.table is not None:
            self.table.cell.append(Span(" "))
            return
        self.flush_line()
        if self.blockquote_depth > 0:
            self.spans = self.blockquote_prefix()

    def rule(self) -> None:
        self.flush_line()
        glyphs = self.theme.rule_glyph * max(self.width - 2, 0)
        self.lines.append(Line.styled(glyphs, self.theme.rule))
        self.push_blank()

    def task_marker(self, checked: bool) -> None:
        theme = self.theme
        if checked:
            self.emit(Span(theme.task_checked_marker, theme.task_checked))
        else:
            self.emit(Span(theme.task_unchecked_marker, theme.task_unchecked))


def render(
    source: str,
    width: int,
    *,
    theme: MarkdownTheme = DEFAULT_THEME,
    highlighter: Highlighter = highlight_code,
) -> Document:
    """Render markdown *source* for a terminal *width* columns wide."""
    return Renderer(width, theme=theme, highlighter=highlighter).process(iter_events(source))
