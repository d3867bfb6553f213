"""Syntax highlighting for fenced code blocks, backed by pygments."""

from __future__ import annotations

import logging
from functools import lru_cache

from pygments import highlight
from pygments.formatters import TerminalTrueColorFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from mdview.ansi import parse_ansi
from mdview.style import Line

logger = logging.getLogger(__name__)

DEFAULT_CODE_THEME = "monokai"


@lru_cache(maxsize=8)
def _formatter(style: str) -> TerminalTrueColorFormatter:
    return TerminalTrueColorFormatter(style=style)


def _lexer(language: str | None) -> Lexer:
    if language:
        try:
            return get_lexer_by_name(language, stripnl=False, ensurenl=True)
        except ClassNotFound:
            logger.debug("No lexer for %r, rendering as plain text", language)
    return TextLexer(stripnl=False, ensurenl=True)


def plain_lines(code: str) -> list[Line]:
    """One unstyled line per source line."""
    return [Line.styled(line) for line in code.splitlines()]


def highlight_code(code: str, language: str | None = None, *, style: str = DEFAULT_CODE_THEME) -> list[Line]:
    """Return *code* as styled lines, one per source line.

    Unknown languages are highlighted as plain text.  Any failure inside
    pygments or while reading its escape-coded output falls back to
    :func:`plain_lines`.
    """
    code = code.replace("\t", "   ")
    expected = len(code.splitlines())
    if expected == 0:
        return []

    try:
        rendered = highlight(code, _lexer(language), _formatter(style))
        lines = parse_ansi(rendered)
    except Exception:
        logger.debug("Highlighting failed for language %r", language, exc_info=True)
        return plain_lines(code)

    if len(lines) < expected:
        logger.debug("Highlighter returned %d of %d lines", len(lines), expected)
        return plain_lines(code)

    return lines[:expected]
