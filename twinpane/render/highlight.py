"""Pygments syntax coloring for pane content.

Each pane is highlighted as one document so multi-line tokens (docstrings,
block comments) color correctly, then split back into exactly one rendered
string per input line.
"""

from __future__ import annotations

import logging
import re

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..diffsource.files import split_lines

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_INVALID_STYLES: set[str] = set()


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", source)


def _normalize_style(style: str) -> str:
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown pygments style %r, using %s", style, DEFAULT_STYLE)
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_lines(lines: list[str], filename: str, style: str = DEFAULT_STYLE) -> list[str]:
    """Colorize ``lines`` as a ``filename`` document, one output entry per line.

    Falls back to the sanitized plain lines when Pygments output does not
    split back into the same number of lines.
    """
    plain = [sanitize_terminal_text(line) for line in lines]
    if not plain:
        return plain

    source = "\n".join(plain) + "\n"
    # Leading blank lines must survive so output lines stay aligned with input.
    try:
        lexer = get_lexer_for_filename(filename, source, stripnl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False)
    formatter = _formatter_for_style(_normalize_style(style))
    rendered_lines = split_lines(highlight(source, lexer, formatter))
    if len(rendered_lines) != len(plain):
        logger.debug("highlighted %s into %d lines, expected %d", filename, len(rendered_lines), len(plain))
        return plain
    return rendered_lines
