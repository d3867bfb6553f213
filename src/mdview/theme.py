"""Colour / glyph theme for the markdown renderer."""

from __future__ import annotations

from dataclasses import dataclass

from mdview.style import (
    BLUE,
    CYAN,
    DARK_GRAY,
    GREEN,
    WHITE,
    YELLOW,
    Color,
    Modifier,
    Style,
)

_BOLD = Modifier.BOLD


@dataclass(frozen=True)
class HeadingStyle:
    style: Style
    marker: str


@dataclass(frozen=True)
class MarkdownTheme:
    """Every style and glyph the renderer emits.

    ``headings`` holds levels 1 through 4; deeper headings reuse the last
    entry.
    """

    headings: tuple[HeadingStyle, ...] = (
        HeadingStyle(Style(fg=CYAN, modifiers=_BOLD), "# "),
        HeadingStyle(Style(fg=GREEN, modifiers=_BOLD), "## "),
        HeadingStyle(Style(fg=YELLOW, modifiers=_BOLD), "### "),
        HeadingStyle(Style(fg=WHITE, modifiers=_BOLD), "#### "),
    )

    # Lists
    bullets: tuple[str, ...] = ("•", "◦", "▪")
    list_marker: Style = Style(fg=DARK_GRAY)
    list_indent: str = "  "

    # Blockquotes
    blockquote_prefix: str = "│ "
    blockquote: Style = Style(fg=DARK_GRAY)

    # Inline
    emphasis: Style = Style(modifiers=Modifier.ITALIC)
    strong: Style = Style(modifiers=Modifier.BOLD)
    strikethrough: Style = Style(modifiers=Modifier.STRIKETHROUGH)
    link: Style = Style(fg=BLUE, modifiers=Modifier.UNDERLINE)
    link_url: Style = Style(fg=DARK_GRAY)
    inline_code: Style = Style(bg=Color.indexed(239))

    # Leaves
    rule_glyph: str = "─"
    rule: Style = Style(fg=DARK_GRAY)
    task_checked_marker: str = "[✓] "
    task_checked: Style = Style(fg=GREEN)
    task_unchecked_marker: str = "[ ] "
    task_unchecked: Style = Style(fg=DARK_GRAY)
    html: Style = Style(modifiers=Modifier.DIM)
    footnote: Style = Style(fg=CYAN)
    math: Style = Style(fg=YELLOW, modifiers=Modifier.ITALIC)

    # Code blocks
    code_indent: str = "  "

    # Tables
    table_border: Style = Style(fg=DARK_GRAY)
    table_header: Style = Style(modifiers=_BOLD)
    table_zebra: Color = Color.indexed(235)
    table_max_cell_lines: int = 5
    ellipsis: str = "…"
    ellipsis_style: Style = Style(fg=DARK_GRAY)

    def heading(self, level: int) -> HeadingStyle:
        index = min(max(level, 1), len(self.headings)) - 1
        return self.headings[index]

    def bullet(self, depth: int) -> str:
        """Bullet glyph for a list nested *depth* levels deep (1-based)."""
        index = min(max(depth, 1), len(self.bullets)) - 1
        return self.bullets[index]


DEFAULT_THEME = MarkdownTheme()
