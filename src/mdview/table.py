"""Table layout: column-width budgeting and bordered, zebra-striped rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from mdview.events import Alignment
from mdview.style import DEFAULT_STYLE, Color, Line, Span, Style
from mdview.theme import DEFAULT_THEME, MarkdownTheme
from mdview.wrap import wrap_spans

Cell = Sequence[Span]
Row = Sequence[Cell]

MIN_NATURAL_WIDTH = 3
MIN_COLUMN_WIDTH = 5


def table_chrome(num_columns: int) -> int:
    """Columns spent on borders and cell padding for *num_columns* columns."""
    return num_columns * 3 + 1


# ---------------------------------------------------------------------------
# Column budgeting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnWidthPlan:
    natural: tuple[int, ...]
    allocated: tuple[int, ...]

    @property
    def chrome(self) -> int:
        return table_chrome(len(self.natural))

    @property
    def total_width(self) -> int:
        return sum(self.allocated) + self.chrome


def cell_width(cell: Cell) -> int:
    return sum(span.width for span in cell)


def natural_widths(header: Sequence[Cell], rows: Sequence[Row]) -> list[int]:
    """Widest cell per header column, floored at ``MIN_NATURAL_WIDTH``."""
    widths: list[int] = []
    for col, head in enumerate(header):
        widest = cell_width(head)
        for row in rows:
            if col < len(row):
                widest = max(widest, cell_width(row[col]))
        widths.append(max(widest, MIN_NATURAL_WIDTH))
    return widths


def budget_columns(natural: Sequence[int], terminal_width: int) -> list[int]:
    """Allocate column widths so the table fits in *terminal_width* columns.

    Tables that fit keep their natural widths.  Otherwise narrow columns are
    locked first (anything at or under ``MIN_COLUMN_WIDTH`` gets exactly that
    much), then every column that fits within the fair share of what is left
    is locked at its natural width, repeatedly, and whatever budget remains
    is split evenly across the columns still unlocked, with the remainder
    going one column at a time to the leftmost of them.
    """
    num_cols = len(natural)
    available = max(terminal_width - table_chrome(num_cols), 0)

    if sum(natural) <= available:
        return list(natural)

    widths = [0] * num_cols
    locked = [False] * num_cols
    budget = available

    for i, nat in enumerate(natural):
        if nat <= MIN_COLUMN_WIDTH:
            widths[i] = min(MIN_COLUMN_WIDTH, budget)
            budget -= widths[i]
            locked[i] = True

    while True:
        unlocked = [i for i in range(num_cols) if not locked[i]]
        if not unlocked:
            break

        fair = budget // len(unlocked)
        newly_locked = False
        for i in unlocked:
            if natural[i] <= fair:
                widths[i] = natural[i]
                budget -= natural[i]
                locked[i] = True
                newly_locked = True

        if not newly_locked:
            share, leftover = divmod(budget, len(unlocked))
            for i in unlocked:
                extra = 1 if leftover > 0 else 0
                leftover -= extra
                widths[i] = share + extra
            break

    return widths


def plan_columns(header: Sequence[Cell], rows: Sequence[Row], terminal_width: int) -> ColumnWidthPlan:
    natural = natural_widths(header, rows)
    return ColumnWidthPlan(tuple(natural), tuple(budget_columns(natural, terminal_width)))


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TableRenderer:
    """Lays out one table's header and body rows as bordered lines."""

    def __init__(self, theme: MarkdownTheme = DEFAULT_THEME) -> None:
        self._theme = theme

    def render(
        self,
        alignments: Sequence[Alignment],
        header: Sequence[Cell],
        rows: Sequence[Row],
        width: int,
    ) -> list[Line]:
        if not header:
            return []

        theme = self._theme
        plan = plan_columns(header, rows, width)
        widths = plan.allocated

        lines = [self._border(widths, "┌", "┬", "┐")]
        lines.extend(self._wrapped_row(header, widths, alignments, theme.table_header, None))
        lines.append(self._border(widths, "├", "┼", "┤"))

        for row_idx, row in enumerate(rows):
            row_bg = theme.table_zebra if row_idx % 2 == 1 else None
            lines.extend(self._wrapped_row(row, widths, alignments, DEFAULT_STYLE, row_bg))

        lines.append(self._border(widths, "└", "┴", "┘"))
        return lines

    # -- pieces -------------------------------------------------------------

    def _border(self, widths: Sequence[int], left: str, mid: str, right: str) -> Line:
        parts = [left]
        for i, w in enumerate(widths):
            parts.append("─" * (w + 2))
            parts.append(mid if i + 1 < len(widths) else right)
        return Line.styled("".join(parts), self._theme.table_border)

    def _empty_row(self, widths: Sequence[int]) -> Line:
        border = Span("│", self._theme.table_border)
        spans = [border]
        for w in widths:
            spans.append(Span(" " * (w + 2)))
            spans.append(border)
        return Line.from_spans(spans)

    def _wrapped_row(
        self,
        cells: Row,
        widths: Sequence[int],
        alignments: Sequence[Alignment],
        base_style: Style,
        row_bg: Color | None,
    ) -> list[Line]:
        theme = self._theme
        wrapped = [
            wrap_spans(
                cells[i] if i < len(cells) else (),
                w,
                theme.table_max_cell_lines,
                base_style,
                ellipsis=theme.ellipsis,
                ellipsis_style=theme.ellipsis_style,
            )
            for i, w in enumerate(widths)
        ]
        num_visual_rows = max((len(w) for w in wrapped), default=1)
        multiline = num_visual_rows > 1

        pad_style = Style(bg=row_bg)
        border = Span("│", theme.table_border)
        out: list[Line] = []

        if multiline:
            out.append(self._empty_row(widths))

        for vrow in range(num_visual_rows):
            spans = [border]
            for i, max_w in enumerate(widths):
                cell_line = wrapped[i][vrow] if vrow < len(wrapped[i]) else []
                padding = max(max_w - sum(s.width for s in cell_line), 0)
                align = alignments[i] if i < len(alignments) else Alignment.NONE
                pad_left, pad_right = _split_padding(padding, align if vrow == 0 else Alignment.LEFT)

                spans.append(Span(" ", pad_style))
                if pad_left:
                    spans.append(Span(" " * pad_left, pad_style))
                for span in cell_line:
                    style = span.style
                    if row_bg is not None and style.bg is None:
                        style = style.with_bg(row_bg)
                    spans.append(Span(span.text, style))
                if pad_right:
                    spans.append(Span(" " * pad_right, pad_style))
                spans.append(Span(" ", pad_style))
                spans.append(border)
            out.append(Line.from_spans(spans))

        if multiline:
            out.append(self._empty_row(widths))

        return out


def _split_padding(padding: int, align: Alignment) -> tuple[int, int]:
    if align is Alignment.CENTER:
        return padding // 2, padding - padding // 2
    if align is Alignment.RIGHT:
        return padding, 0
    return 0, padding
