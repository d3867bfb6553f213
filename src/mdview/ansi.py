"""Conversion between styled lines and ANSI SGR escape sequences.

``parse_ansi`` reads escape-coded text (what terminal syntax highlighters
produce) into :class:`~mdview.style.Line` objects; ``encode_line`` and
``encode_document`` go the other way for non-interactive output.
"""

from __future__ import annotations

from mdview.style import Color, Document, Line, Modifier, Span, Style
from mdview.utils import extract_ansi_code

# Named colours with their foreground SGR codes; backgrounds are +10.
_NAMED_FG: dict[str, int] = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "gray": 37,
    "dark_gray": 90,
    "light_red": 91,
    "light_green": 92,
    "light_yellow": 93,
    "light_blue": 94,
    "light_magenta": 95,
    "light_cyan": 96,
    "white": 97,
}
_FG_NAMES: dict[int, str] = {code: name for name, code in _NAMED_FG.items()}

_MODIFIER_CODES: tuple[tuple[Modifier, int], ...] = (
    (Modifier.BOLD, 1),
    (Modifier.DIM, 2),
    (Modifier.ITALIC, 3),
    (Modifier.UNDERLINE, 4),
    (Modifier.STRIKETHROUGH, 9),
)

RESET = "\x1b[0m"


# ---------------------------------------------------------------------------
# SgrState
# ---------------------------------------------------------------------------


class SgrState:
    """Track the active SGR (Select Graphic Rendition) attributes.

    Feeds on ``ESC[...m`` sequences and exposes the result as a
    :class:`Style`.  Attributes without a ``Style`` counterpart (blink,
    inverse, hidden) are accepted and ignored.
    """

    def __init__(self) -> None:
        self.fg: Color | None = None
        self.bg: Color | None = None
        self.modifiers = Modifier.NONE

    @property
    def style(self) -> Style:
        return Style(fg=self.fg, bg=self.bg, modifiers=self.modifiers)

    def clear(self) -> None:
        self.fg = None
        self.bg = None
        self.modifiers = Modifier.NONE

    def process(self, code: str) -> None:
        """Update state from an SGR sequence like ``\\x1b[1;31m``.

        Raises ``ValueError`` for parameters that are not integers or for a
        truncated extended-colour parameter list.
        """
        if not code.startswith("\x1b[") or not code.endswith("m"):
            return

        params_str = code[2:-1]
        if not params_str:
            self.clear()
            return

        params = [int(p) if p else 0 for p in params_str.split(";")]
        i = 0
        while i < len(params):
            val = params[i]

            if val == 0:
                self.clear()
            elif val == 1:
                self.modifiers |= Modifier.BOLD
            elif val == 2:
                self.modifiers |= Modifier.DIM
            elif val == 3:
                self.modifiers |= Modifier.ITALIC
            elif val == 4:
                self.modifiers |= Modifier.UNDERLINE
            elif val == 9:
                self.modifiers |= Modifier.STRIKETHROUGH
            elif val == 22:
                self.modifiers &= ~(Modifier.BOLD | Modifier.DIM)
            elif val == 23:
                self.modifiers &= ~Modifier.ITALIC
            elif val == 24:
                self.modifiers &= ~Modifier.UNDERLINE
            elif val == 29:
                self.modifiers &= ~Modifier.STRIKETHROUGH
            elif 30 <= val <= 37 or 90 <= val <= 97:
                self.fg = Color(_FG_NAMES[val])
            elif 40 <= val <= 47 or 100 <= val <= 107:
                self.bg = Color(_FG_NAMES[val - 10])
            elif val in (38, 48):
                color, consumed = _extended_color(params, i)
                if val == 38:
                    self.fg = color
                else:
                    self.bg = color
                i += consumed
            elif val == 39:
                self.fg = None
            elif val == 49:
                self.bg = None

            i += 1


def _extended_color(params: list[int], i: int) -> tuple[Color, int]:
    """Decode ``38;5;N`` / ``38;2;R;G;B`` starting at ``params[i]``."""
    if i + 1 < len(params):
        mode = params[i + 1]
        if mode == 5 and i + 2 < len(params):
            return Color.indexed(params[i + 2]), 2
        if mode == 2 and i + 4 < len(params):
            return Color.from_rgb(params[i + 2], params[i + 3], params[i + 4]), 4
    msg = f"Incomplete extended colour in SGR parameters {params!r}"
    raise ValueError(msg)


# ---------------------------------------------------------------------------
# parse_ansi
# ---------------------------------------------------------------------------


def parse_ansi(text: str) -> list[Line]:
    """Split escape-coded *text* into styled lines.

    SGR state carries across newlines.  Other CSI and OSC sequences are
    dropped.  A stray ``ESC`` that does not begin a complete sequence raises
    ``ValueError``.
    """
    state = SgrState()
    lines: list[Line] = []
    spans: list[Span] = []
    buf: list[str] = []

    def flush_span() -> None:
        if buf:
            spans.append(Span("".join(buf), state.style))
            buf.clear()

    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\x1b":
            extracted = extract_ansi_code(text, i)
            if extracted is None:
                msg = f"Malformed escape sequence at offset {i}"
                raise ValueError(msg)
            code, length = extracted
            flush_span()
            state.process(code)
            i += length
            continue

        if ch == "\n":
            flush_span()
            lines.append(Line.from_spans(spans))
            spans = []
        elif ch != "\r":
            buf.append(ch)
        i += 1

    flush_span()
    if spans:
        lines.append(Line.from_spans(spans))
    return lines


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _color_code(color: Color, background: bool) -> str:
    if color.name is not None:
        code = _NAMED_FG[color.name]
        return str(code + 10 if background else code)
    lead = "48" if background else "38"
    if color.index is not None:
        return f"{lead};5;{color.index}"
    r, g, b = color.rgb or (0, 0, 0)
    return f"{lead};2;{r};{g};{b}"


def sgr_params(style: Style) -> str:
    """Return the ``;``-joined SGR parameters for *style* (empty when plain)."""
    parts: list[str] = []
    if style.fg is not None:
        parts.append(_color_code(style.fg, background=False))
    if style.bg is not None:
        parts.append(_color_code(style.bg, background=True))
    for flag, code in _MODIFIER_CODES:
        if flag in style.modifiers:
            parts.append(str(code))
    return ";".join(parts)


def encode_line(line: Line) -> str:
    """Encode *line* as text with one SGR preamble and reset per styled span."""
    out: list[str] = []
    for span in line.spans:
        if span.style.is_plain:
            out.append(span.text)
        else:
            out.append(f"\x1b[{sgr_params(span.style)}m{span.text}{RESET}")
    return "".join(out)


def encode_document(document: Document) -> str:
    """Encode every line of *document*, each terminated by a newline."""
    return "".join(encode_line(line) + "\n" for line in document.lines)
