"""Tests for mdview.style -- the styled text model."""

from __future__ import annotations

from mdview.style import (
    BLUE,
    CYAN,
    DEFAULT_STYLE,
    RED,
    Color,
    Document,
    Line,
    Modifier,
    Span,
    Style,
    fold_styles,
    patch,
)

# ---------------------------------------------------------------------------
# Style.patch
# ---------------------------------------------------------------------------


class TestPatch:
    def test_overlay_colour_wins(self) -> None:
        base = Style(fg=RED, bg=BLUE)
        assert base.patch(Style(fg=CYAN)) == Style(fg=CYAN, bg=BLUE)

    def test_unset_overlay_keeps_base(self) -> None:
        base = Style(fg=RED, modifiers=Modifier.BOLD)
        assert base.patch(DEFAULT_STYLE) == base

    def test_modifiers_are_unioned(self) -> None:
        base = Style(modifiers=Modifier.BOLD)
        result = patch(base, Style(modifiers=Modifier.ITALIC))
        assert Modifier.BOLD in result.modifiers
        assert Modifier.ITALIC in result.modifiers

    def test_fold_applies_in_order(self) -> None:
        result = fold_styles([Style(fg=RED), Style(fg=CYAN), Style(modifiers=Modifier.UNDERLINE)])
        assert result.fg == CYAN
        assert result.modifiers == Modifier.UNDERLINE

    def test_fold_of_nothing_is_default(self) -> None:
        assert fold_styles([]) == DEFAULT_STYLE


class TestStyleHelpers:
    def test_default_is_plain(self) -> None:
        assert DEFAULT_STYLE.is_plain

    def test_with_bg(self) -> None:
        style = Style(fg=RED).with_bg(Color.indexed(235))
        assert style.bg == Color.indexed(235)
        assert style.fg == RED
        assert not style.is_plain

    def test_colour_kinds_differ(self) -> None:
        assert Color.indexed(1) != Color.from_rgb(1, 0, 0)
        assert Color.from_rgb(1, 2, 3).rgb == (1, 2, 3)


# ---------------------------------------------------------------------------
# Span / Line / Document
# ---------------------------------------------------------------------------


class TestLine:
    def test_width_sums_spans(self) -> None:
        line = Line.from_spans([Span("ab"), Span("中文")])
        assert line.width == 6

    def test_plain_drops_styles(self) -> None:
        line = Line.from_spans([Span("a", Style(fg=RED)), Span("b")])
        assert line.plain == "ab"

    def test_styled_constructor(self) -> None:
        line = Line.styled("x", Style(fg=CYAN))
        assert len(line) == 1
        assert line.spans[0].style.fg == CYAN

    def test_empty_line(self) -> None:
        assert Line().width == 0
        assert list(Line()) == []


class TestDocument:
    def test_height_and_plain(self) -> None:
        doc = Document((Line.styled("one"), Line(), Line.styled("two")))
        assert doc.height == 3
        assert doc.plain() == "one\n\ntwo"

    def test_indexing(self) -> None:
        doc = Document((Line.styled("one"), Line.styled("two")))
        assert doc[1].plain == "two"
        assert [line.plain for line in doc] == ["one", "two"]
