"""Tests for mdview.theme."""

from __future__ import annotations

from mdview.style import CYAN, WHITE, Modifier, Style
from mdview.theme import DEFAULT_THEME, MarkdownTheme


class TestHeadings:
    def test_level_one(self) -> None:
        heading = DEFAULT_THEME.heading(1)
        assert heading.marker == "# "
        assert heading.style == Style(fg=CYAN, modifiers=Modifier.BOLD)

    def test_deep_levels_reuse_level_four(self) -> None:
        for level in (4, 5, 6):
            assert DEFAULT_THEME.heading(level).marker == "#### "
            assert DEFAULT_THEME.heading(level).style.fg == WHITE

    def test_out_of_range_low(self) -> None:
        assert DEFAULT_THEME.heading(0) == DEFAULT_THEME.heading(1)


class TestBullets:
    def test_by_depth(self) -> None:
        assert [DEFAULT_THEME.bullet(d) for d in (1, 2, 3)] == ["•", "◦", "▪"]

    def test_deeper_reuses_last(self) -> None:
        assert DEFAULT_THEME.bullet(7) == "▪"


class TestCustomTheme:
    def test_override_glyphs(self) -> None:
        theme = MarkdownTheme(bullets=("-",), blockquote_prefix="> ")
        assert theme.bullet(3) == "-"
        assert theme.blockquote_prefix == "> "
