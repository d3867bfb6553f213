"""Terminal text utilities: display width measurement and ANSI escape scanning.

Widths follow the terminal's cell model: wide characters such as CJK
ideographs and most emoji occupy two columns, combining marks and control
characters occupy none.  Text is measured per grapheme cluster, so an emoji
sequence joined with ZWJ or a flag pair counts as the one glyph the terminal
draws.
"""

from __future__ import annotations

import unicodedata
from typing import Iterator

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


# ---------------------------------------------------------------------------
# Character / grapheme width
# ---------------------------------------------------------------------------


def char_width(ch: str) -> int:
    """Return the number of terminal columns a single code point occupies."""
    cp = ord(ch)
    if cp < 0x20 or (0x7F <= cp <= 0x9F):
        return 0
    if cp < 0x7F:
        return 1
    return max(_wcwidth.wcwidth(ch), 0)


def graphemes(text: str) -> Iterator[str]:
    """Yield the grapheme clusters of *text*, one code point at a time for ASCII."""
    if text.isascii():
        return iter(text)
    return grapheme.graphemes(text)


def grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster.

    Rules:
    1. Zero-width characters (control, combining marks, etc.) -> 0
    2. Emoji (VS16, ZWJ sequences, flags, skin tones) -> 2
    3. Otherwise delegate to wcwidth for the first code point.
    """
    if not g:
        return 0

    if len(g) == 1:
        return char_width(g)

    for ch in g:
        cp = ord(ch)
        if cp == 0xFE0F:  # VS16
            return 2
        if cp == 0x200D:  # ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF:  # Skin tone modifiers
            return 2
        if 0x1F1E6 <= cp <= 0x1F1FF:  # Regional indicators
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return char_width(g[0])


def text_width(text: str) -> int:
    """Display width of *text* (no escape handling)."""
    if text.isascii():
        return sum(1 for ch in text if 0x20 <= ord(ch) < 0x7F)
    cached = _width_cache.get(text)
    if cached is not None:
        return cached
    return _cache_width(text, sum(grapheme_width(g) for g in grapheme.graphemes(text)))


# ---------------------------------------------------------------------------
# extract_ansi_code
# ---------------------------------------------------------------------------


def extract_ansi_code(text: str, pos: int) -> tuple[str, int] | None:
    """Extract an ANSI escape sequence starting at *pos* in *text*.

    Returns ``(code, length)`` where *code* is the full escape sequence and
    *length* the number of characters consumed, or ``None`` when *pos* does
    not start a complete CSI or OSC sequence.

    Handles:
    * CSI sequences: ``ESC[`` <params> <final letter>
    * OSC sequences: ``ESC]`` ... ``BEL`` / ``ST``
    """
    if pos >= len(text) or text[pos] != "\x1b":
        return None

    if pos + 1 >= len(text):
        return None

    next_ch = text[pos + 1]

    if next_ch == "[":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch.isascii() and ch.isalpha():
                code = text[pos : i + 1]
                return (code, len(code))
            if ch.isdigit() or ch == ";":
                i += 1
                continue
            break
        return None

    if next_ch == "]":
        i = pos + 2
        while i < len(text):
            ch = text[i]
            if ch == "\x07":
                code = text[pos : i + 1]
                return (code, len(code))
            if ch == "\x1b" and i + 1 < len(text) and text[i + 1] == "\\":
                code = text[pos : i + 2]
                return (code, len(code))
            i += 1
        return None

    return None
