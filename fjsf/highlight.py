"""Terminal-safe text and shell-command highlighting for detail rows.

Script commands are coloured with Pygments' Bash lexer. Every string shown on
screen first has its control bytes neutralized.
"""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import BashLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_LEXER = BashLexer(ensurenl=False, stripnl=False)


def sanitize_terminal_text(text: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(text) is None:
        return text
    return _CONTROL_RE.sub(lambda match: f"\\x{ord(match.group(0)):02x}", text)


def normalize_style(style: str | None) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    if not style:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_command(command: str, style: str | None = DEFAULT_STYLE) -> str:
    """Colour a shell command line; the returned text has no trailing newline."""
    safe = sanitize_terminal_text(command)
    if not safe:
        return safe
    rendered = highlight(safe, _LEXER, _formatter_for_style(normalize_style(style)))
    return rendered.rstrip("\n")
