"""Styled text model: colours, modifiers, styles, spans, lines and documents.

Everything here is an immutable value.  Styles compose with :func:`patch`,
which is how nested scopes (emphasis inside a link inside a heading, a row
tint under a cell's own colours) are layered onto each other.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Iterable

from mdview.utils import text_width

# ---------------------------------------------------------------------------
# Colour
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Color:
    """A terminal colour.

    Exactly one of the fields is set: *name* for one of the sixteen named
    ANSI colours, *index* for the 256-colour palette, or *rgb* for 24-bit
    colour.
    """

    name: str | None = None
    index: int | None = None
    rgb: tuple[int, int, int] | None = None

    @classmethod
    def indexed(cls, index: int) -> Color:
        return cls(index=index)

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> Color:
        return cls(rgb=(r, g, b))

    def __repr__(self) -> str:
        if self.name is not None:
            return f"Color({self.name})"
        if self.index is not None:
            return f"Color.indexed({self.index})"
        return f"Color.from_rgb{self.rgb}"


BLACK = Color("black")
RED = Color("red")
GREEN = Color("green")
YELLOW = Color("yellow")
BLUE = Color("blue")
MAGENTA = Color("magenta")
CYAN = Color("cyan")
GRAY = Color("gray")
DARK_GRAY = Color("dark_gray")
LIGHT_RED = Color("light_red")
LIGHT_GREEN = Color("light_green")
LIGHT_YELLOW = Color("light_yellow")
LIGHT_BLUE = Color("light_blue")
LIGHT_MAGENTA = Color("light_magenta")
LIGHT_CYAN = Color("light_cyan")
WHITE = Color("white")


# ---------------------------------------------------------------------------
# Modifier flags
# ---------------------------------------------------------------------------


class Modifier(enum.Flag):
    NONE = 0
    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINE = enum.auto()
    STRIKETHROUGH = enum.auto()


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Style:
    """Foreground, background and modifier flags.

    ``None`` colours mean "unset": they inherit from whatever style this one
    is patched onto.
    """

    fg: Color | None = None
    bg: Color | None = None
    modifiers: Modifier = Modifier.NONE

    def patch(self, overlay: Style) -> Style:
        """Return this style with every field *overlay* sets layered on top.

        Colours set in *overlay* win, unset ones keep ours; modifier flags
        are unioned.
        """
        return Style(
            fg=overlay.fg if overlay.fg is not None else self.fg,
            bg=overlay.bg if overlay.bg is not None else self.bg,
            modifiers=self.modifiers | overlay.modifiers,
        )

    def with_bg(self, color: Color | None) -> Style:
        return replace(self, bg=color)

    @property
    def is_plain(self) -> bool:
        return self.fg is None and self.bg is None and not self.modifiers


DEFAULT_STYLE = Style()


def patch(base: Style, overlay: Style) -> Style:
    """Functional form of :meth:`Style.patch`."""
    return base.patch(overlay)


def fold_styles(styles: Iterable[Style]) -> Style:
    """Patch *styles* onto each other from first to last."""
    return reduce(patch, styles, DEFAULT_STYLE)


# ---------------------------------------------------------------------------
# Span / Line / Document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Span:
    text: str
    style: Style = DEFAULT_STYLE

    @property
    def width(self) -> int:
        return text_width(self.text)


@dataclass(frozen=True)
class Line:
    """One terminal row: spans left to right."""

    spans: tuple[Span, ...] = ()

    @classmethod
    def from_spans(cls, spans: Iterable[Span]) -> Line:
        return cls(tuple(spans))

    @classmethod
    def styled(cls, text: str, style: Style = DEFAULT_STYLE) -> Line:
        return cls((Span(text, style),))

    @property
    def width(self) -> int:
        return sum(span.width for span in self.spans)

    @property
    def plain(self) -> str:
        return "".join(span.text for span in self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    def __iter__(self):
        return iter(self.spans)


@dataclass(frozen=True)
class Document:
    """The complete render output: an ordered sequence of lines."""

    lines: tuple[Line, ...] = field(default_factory=tuple)

    @property
    def height(self) -> int:
        return len(self.lines)

    def plain(self) -> str:
        """Return the text content with styling dropped, one line per row."""
        return "\n".join(line.plain for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]
