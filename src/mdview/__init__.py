"""mdview: terminal markdown viewer with styled, width-aware rendering."""

# Styled text model
from mdview.style import (
    DEFAULT_STYLE,
    Color,
    Document,
    Line,
    Modifier,
    Span,
    Style,
)

# Theme
from mdview.theme import DEFAULT_THEME, HeadingStyle, MarkdownTheme

# Markdown events
from mdview.events import Alignment, iter_events

# Rendering
from mdview.render import Renderer, render
from mdview.table import ColumnWidthPlan, TableRenderer, budget_columns
from mdview.wrap import truncate_spans, wrap_spans

# Escape-code conversion and highlighting
from mdview.ansi import encode_document, encode_line, parse_ansi
from mdview.highlight import highlight_code

# Utilities
from mdview.utils import grapheme_width, text_width

__all__ = [
    # Styled text model
    "DEFAULT_STYLE",
    "Color",
    "Document",
    "Line",
    "Modifier",
    "Span",
    "Style",
    # Theme
    "DEFAULT_THEME",
    "HeadingStyle",
    "MarkdownTheme",
    # Markdown events
    "Alignment",
    "iter_events",
    # Rendering
    "Renderer",
    "render",
    "ColumnWidthPlan",
    "TableRenderer",
    "budget_columns",
    "truncate_spans",
    "wrap_spans",
    # Escape-code conversion and highlighting
    "encode_document",
    "encode_line",
    "parse_ansi",
    "highlight_code",
    # Utilities
    "grapheme_width",
    "text_width",
]
