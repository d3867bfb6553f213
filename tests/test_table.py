"""Tests for mdview.table -- column budgeting and table rendering."""

from __future__ import annotations

from mdview.events import Alignment
from mdview.style import Color, Modifier, Span, Style
from mdview.table import (
    ColumnWidthPlan,
    TableRenderer,
    budget_columns,
    natural_widths,
    plan_columns,
    table_chrome,
)
from mdview.theme import DEFAULT_THEME


def _cell(text: str) -> list[Span]:
    return [Span(text)]


# ---------------------------------------------------------------------------
# budget_columns
# ---------------------------------------------------------------------------


class TestBudgetColumns:
    def test_natural_fits(self) -> None:
        assert budget_columns([10, 15, 8], 80) == [10, 15, 8]

    def test_narrow_terminal(self) -> None:
        natural = [20, 30, 25]
        result = budget_columns(natural, 40)
        assert sum(result) <= 40 - table_chrome(3)

    def test_many_columns_tiny_terminal(self) -> None:
        natural = [10] * 5
        result = budget_columns(natural, 30)
        assert sum(result) <= max(30 - table_chrome(5), 0)

    def test_single_column(self) -> None:
        assert budget_columns([50], 30) == [30 - table_chrome(1)]

    def test_small_columns_lock_at_minimum(self) -> None:
        result = budget_columns([3, 50, 4], 40)
        assert sum(result) <= 40 - table_chrome(3)
        assert result[0] == 5
        assert result[2] == 5

    def test_fair_share_locks_narrow_columns(self) -> None:
        # available = 50 - 13 = 37; after the 4-wide column takes 5 the fair share is 10
        result = budget_columns([10, 40, 40, 4], 50)
        assert result[0] == 10
        assert result[3] == 5
        assert result[1] + result[2] == 37 - 15
        assert abs(result[1] - result[2]) <= 1

    def test_remainder_goes_left(self) -> None:
        result = budget_columns([30, 30], 20)
        # available = 13 -> 7 + 6
        assert result == [7, 6]

    def test_zero_width_terminal(self) -> None:
        assert budget_columns([10, 10], 0) == [0, 0]


class TestPlan:
    def test_natural_widths_floor(self) -> None:
        assert natural_widths([_cell("a"), _cell("abcd")], []) == [3, 4]

    def test_natural_widths_uses_body(self) -> None:
        header = [_cell("A"), _cell("B")]
        rows = [[_cell("longer"), _cell("x")]]
        assert natural_widths(header, rows) == [6, 3]

    def test_plan_total_width(self) -> None:
        plan = plan_columns([_cell("abc"), _cell("defg")], [], 80)
        assert plan == ColumnWidthPlan((3, 4), (3, 4))
        assert plan.chrome == 7
        assert plan.total_width == 14


# ---------------------------------------------------------------------------
# TableRenderer
# ---------------------------------------------------------------------------


class TestTableRenderer:
    def _render(self, header, rows, width=80, alignments=()):
        return TableRenderer(DEFAULT_THEME).render(alignments, header, rows, width)

    def test_empty_header_renders_nothing(self) -> None:
        assert self._render([], []) == []

    def test_borders(self) -> None:
        lines = self._render([_cell("A"), _cell("B")], [[_cell("1"), _cell("2")]])
        plain = [line.plain for line in lines]
        assert plain[0] == "┌─────┬─────┐"
        assert plain[1] == "│ A   │ B   │"
        assert plain[2] == "├─────┼─────┤"
        assert plain[3] == "│ 1   │ 2   │"
        assert plain[4] == "└─────┴─────┘"

    def test_column_count(self) -> None:
        header = [_cell("A"), _cell("B"), _cell("C")]
        lines = self._render(header, [[_cell("1"), _cell("2"), _cell("3")]])
        content = [line.plain for line in lines if line.plain.startswith("│")]
        assert content
        for text in content:
            assert text.count("│") == 4

    def test_header_is_bold(self) -> None:
        lines = self._render([_cell("Name")], [])
        name = next(s for s in lines[1].spans if s.text == "Name")
        assert Modifier.BOLD in name.style.modifiers

    def test_zebra_on_odd_rows(self) -> None:
        rows = [[_cell("r0")], [_cell("r1")], [_cell("r2")]]
        lines = self._render([_cell("H")], rows)
        zebra = DEFAULT_THEME.table_zebra
        by_text = {s.text: s for line in lines for s in line.spans}
        assert by_text["r0"].style.bg is None
        assert by_text["r1"].style.bg == zebra
        assert by_text["r2"].style.bg is None

    def test_zebra_does_not_override_cell_bg(self) -> None:
        own = Color.indexed(239)
        rows = [[_cell("r0")], [[Span("code", Style(bg=own))]]]
        lines = self._render([_cell("H")], rows)
        code = next(s for line in lines for s in line.spans if s.text == "code")
        assert code.style.bg == own

    def test_alignment(self) -> None:
        alignments = (Alignment.RIGHT, Alignment.CENTER)
        header = [_cell("Right"), _cell("Center")]
        lines = self._render(header, [[_cell("1"), _cell("ab")]], alignments=alignments)
        assert lines[3].plain == "│     1 │   ab   │"

    def test_fits_width(self) -> None:
        header = [_cell("Name"), _cell("Description")]
        rows = [[_cell("x"), _cell("a fairly long description that has to wrap around")]]
        lines = self._render(header, rows, width=30)
        assert all(line.width <= 30 for line in lines)

    def test_multiline_rows_get_spacers(self) -> None:
        rows = [[_cell("one two three four five six")]]
        lines = self._render([_cell("H")], rows, width=15)
        plain = [line.plain for line in lines]
        # top border, header, separator, spacer, wrapped..., spacer, bottom
        assert plain[3].strip("│ ") == ""
        assert plain[-2].strip("│ ") == ""
        assert len(plain) > 6

    def test_cell_truncated_after_max_lines(self) -> None:
        words = " ".join(["word"] * 40)
        lines = self._render([_cell("H")], [[_cell(words)]], width=12)
        # header block (3) + spacer + 5 visual lines + spacer + bottom border
        assert len(lines) == 3 + 1 + DEFAULT_THEME.table_max_cell_lines + 1 + 1
        assert any("…" in line.plain for line in lines)

    def test_long_word_wraps_within_width(self) -> None:
        rows = [[_cell("/very/long/path/to/some/deeply/nested/file.txt")]]
        lines = self._render([_cell("Path")], rows, width=30)
        assert all(line.width <= 30 for line in lines)

    def test_wide_cells_in_narrow_terminal_fit_width(self) -> None:
        header = [_cell("x"), _cell("中文"), _cell("q")]
        lines = self._render(header, [[_cell("1"), _cell("中"), _cell("2")]], width=10)
        assert lines
        assert all(line.width <= 10 for line in lines)
