"""Style-preserving word wrap with ellipsis truncation.

Spans are flattened to one ``(cluster, width, style)`` triple per grapheme
cluster, so a line break or a truncation point can fall anywhere, including
mid-span, without any character losing its style or an emoji sequence being
torn apart.  Output lines are re-coalesced into the fewest spans that keep
every style boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from mdview.style import DEFAULT_STYLE, Span, Style
from mdview.utils import grapheme_width, graphemes

ELLIPSIS = "…"

_StyledChar = tuple[str, int, Style]


@dataclass
class _StyledWord:
    chars: list[_StyledChar] = field(default_factory=list)
    width: int = 0
    trailing_space: bool = False


def wrap_spans(
    spans: Sequence[Span],
    max_width: int,
    max_lines: int | None = None,
    base_style: Style = DEFAULT_STYLE,
    *,
    ellipsis: str = ELLIPSIS,
    ellipsis_style: Style = DEFAULT_STYLE,
) -> list[list[Span]]:
    """Wrap *spans* into lines no wider than *max_width* columns.

    Each span's style is patched onto *base_style*.  Content that fits on one
    line comes back as the original spans.  When more than *max_lines* lines
    would be needed, the last allowed line is cut to ``max_width - 1``
    columns and *ellipsis* is appended.  ``max_lines=None`` never truncates.

    Always returns at least one (possibly empty) line.
    """
    max_width = max(max_width, 0)
    if max_lines is not None:
        max_lines = max(max_lines, 1)

    flat = _flatten(spans, base_style)
    total_width = sum(w for _, w, _ in flat)

    if total_width <= max_width:
        return [[Span(s.text, base_style.patch(s.style)) for s in spans]]

    lines: list[list[Span]] = []
    cur_chars: list[tuple[str, Style]] = []
    cur_width = 0

    def at_limit() -> bool:
        return max_lines is not None and len(lines) + 1 >= max_lines

    def truncated() -> list[list[Span]]:
        return _finish_truncated(lines, cur_chars, max_width, ellipsis, ellipsis_style)

    for word in _split_words(flat):
        if cur_width > 0 and cur_width + word.width > max_width:
            if at_limit():
                return truncated()
            lines.append(_coalesce(cur_chars))
            cur_chars = []
            cur_width = 0

        if word.width > max_width:
            # Hard-split a word that cannot fit on any line; a character wider
            # than the whole line is dropped
            for ch, cw, style in word.chars:
                if cw > max_width:
                    continue
                if cur_width > 0 and cur_width + cw > max_width:
                    if at_limit():
                        return truncated()
                    lines.append(_coalesce(cur_chars))
                    cur_chars = []
                    cur_width = 0
                cur_chars.append((ch, style))
                cur_width += cw
        else:
            cur_chars.extend((ch, style) for ch, _, style in word.chars)
            cur_width += word.width

        if word.trailing_space and cur_width < max_width:
            cur_chars.append((" ", word.chars[-1][2]))
            cur_width += 1

    if cur_chars:
        lines.append(_coalesce(cur_chars))

    if not lines:
        lines.append([])

    return lines


def truncate_spans(spans: Sequence[Span], budget: int) -> list[Span]:
    """Keep the leading *budget* columns of *spans*, splitting mid-span if needed."""
    out: list[Span] = []
    remaining = budget

    for span in spans:
        if remaining <= 0:
            break
        w = span.width
        if w <= remaining:
            out.append(span)
            remaining -= w
            continue

        kept: list[str] = []
        for ch in graphemes(span.text):
            cw = grapheme_width(ch)
            if cw > remaining:
                break
            kept.append(ch)
            remaining -= cw
        if kept:
            out.append(Span("".join(kept), span.style))
        break

    return out


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------


def _flatten(spans: Sequence[Span], base_style: Style) -> list[_StyledChar]:
    out: list[_StyledChar] = []
    for span in spans:
        style = base_style.patch(span.style)
        out.extend((g, grapheme_width(g), style) for g in graphemes(span.text))
    return out


def _split_words(chars: list[_StyledChar]) -> list[_StyledWord]:
    """Split at spaces; a word followed by a space is flagged, the space dropped."""
    words: list[_StyledWord] = []
    current = _StyledWord()

    for ch, cw, style in chars:
        if ch == " ":
            if current.chars:
                current.trailing_space = True
                words.append(current)
                current = _StyledWord()
            continue
        current.chars.append((ch, cw, style))
        current.width += cw

    if current.chars:
        words.append(current)

    return words


def _coalesce(chars: list[tuple[str, Style]]) -> list[Span]:
    """Merge runs of identically styled characters into spans."""
    spans: list[Span] = []
    buf: list[str] = []
    cur_style = DEFAULT_STYLE

    for ch, style in chars:
        if buf and style != cur_style:
            spans.append(Span("".join(buf), cur_style))
            buf = []
        cur_style = style
        buf.append(ch)

    if buf:
        spans.append(Span("".join(buf), cur_style))

    return spans


def _finish_truncated(
    lines: list[list[Span]],
    cur_chars: list[tuple[str, Style]],
    max_width: int,
    ellipsis: str,
    ellipsis_style: Style,
) -> list[list[Span]]:
    last = truncate_spans(_coalesce(cur_chars), max_width - 1)
    if max_width >= 1:
        last.append(Span(ellipsis, ellipsis_style))
    lines.append(last)
    return lines
