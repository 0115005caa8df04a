"""Viewport windowing and frame rendering for the match list.

``compute_visible_window`` decides which slice of ranked matches is on screen;
the row renderers turn each visible match into one or two styled lines.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .discovery import JsonEntry, ScriptEntry
from .highlight import DEFAULT_STYLE, highlight_command, sanitize_terminal_text
from .search import FuzzyMatch
from .state import SessionState
from .ui_theme import UITheme, paint

SELECTED_MARKER = "❯"
WIDGET_MAX_VISIBLE = 8

_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

RowRenderer = Callable[[FuzzyMatch[Any], bool, UITheme], list[str]]


@dataclass(frozen=True)
class VisibleWindow:
    """Half-open ``[start_index, end_index)`` slice of the match list."""

    start_index: int
    end_index: int

    def __len__(self) -> int:
        return self.end_index - self.start_index

    def selected_offset(self, selected_index: int) -> int:
        return selected_index - self.start_index


def compute_visible_window(matches: Sequence[object], selected_index: int, max_visible: int) -> VisibleWindow:
    """Center the selection in a ``max_visible`` row window.

    Near the end of the list the window slides left so it stays full whenever
    there are enough matches to fill it.
    """
    if max_visible <= 0:
        return VisibleWindow(0, 0)
    total = len(matches)
    half = max_visible // 2
    start = max(0, selected_index - half)
    end = min(total, start + max_visible)
    if end - start < max_visible and total >= max_visible:
        start = max(0, end - max_visible)
    return VisibleWindow(start, end)


def _display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_line(text: str, max_cols: int | None) -> str:
    """Trim a styled line to ``max_cols`` display columns, keeping escapes.

    ``None`` disables clipping. A reset is appended when styling was cut.
    """
    if max_cols is None:
        return text
    out: list[str] = []
    col = 0
    i = 0
    clipped = False
    while i < len(text):
        if text[i] == "\x1b":
            match = _ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        width = _display_width(text[i])
        if col + width > max_cols:
            clipped = True
            break
        out.append(text[i])
        col += width
        i += 1
    result = "".join(out)
    if clipped and "\x1b" in result:
        result += "\x1b[0m"
    return result


def _paint_chars(text: str, positions: Sequence[int], base_color: str, theme: UITheme) -> str:
    hits = set(positions)
    return "".join(
        paint(sanitize_terminal_text(ch), theme.match_hit if idx in hits else base_color, theme)
        for idx, ch in enumerate(text)
    )


def highlight_positions(text: str, positions: Sequence[int], theme: UITheme) -> str:
    """Paint the characters of ``text`` whose indices appear in ``positions``."""
    return _paint_chars(text, positions, "", theme)


def split_positions(positions: Sequence[int], head_length: int) -> tuple[list[int], list[int]]:
    """Split positions over ``"<head> <tail>"`` into per-part indices."""
    head = [pos for pos in positions if pos < head_length]
    tail = [pos - head_length - 1 for pos in positions if pos > head_length]
    return head, tail


def _selection_prefix(selected: bool, theme: UITheme) -> str:
    return paint(SELECTED_MARKER, theme.selection_marker, theme) if selected else " "


def _label_line(label: str, workspace: str, positions: Sequence[int], selected: bool, theme: UITheme) -> str:
    label_hits, workspace_hits = split_positions(positions, len(label))
    workspace_text = "".join(
        [
            paint("[", theme.workspace, theme),
            _paint_chars(workspace, workspace_hits, theme.workspace, theme),
            paint("]", theme.workspace, theme),
        ]
    )
    return f"{_selection_prefix(selected, theme)} {highlight_positions(label, label_hits, theme)} {workspace_text}"


def script_rows(
    match: FuzzyMatch[ScriptEntry],
    selected: bool,
    theme: UITheme,
    style: str | None = DEFAULT_STYLE,
) -> list[str]:
    """Two rows: name with workspace tag, then the indented command."""
    script = match.item
    if theme.reset:
        command = highlight_command(script.command, style)
    else:
        command = sanitize_terminal_text(script.command)
    return [
        _label_line(script.name, script.workspace, match.positions, selected, theme),
        f"  {command}",
    ]


def json_rows(match: FuzzyMatch[JsonEntry], selected: bool, theme: UITheme) -> list[str]:
    """Two rows: highlighted path with workspace tag, then the dimmed value."""
    entry = match.item
    return [
        _label_line(entry.path, entry.workspace, match.positions, selected, theme),
        f"  {paint(sanitize_terminal_text(entry.value), theme.detail, theme)}",
    ]


def render_screen(
    state: SessionState[Any],
    title: str,
    max_visible: int,
    theme: UITheme,
    row_renderer: RowRenderer,
    max_cols: int | None = None,
) -> list[str]:
    """Build every line of the full-screen frame, top to bottom."""
    lines = [
        paint(title, theme.title, theme),
        "",
        f"{paint('Search:', theme.prompt_label, theme)} {paint(sanitize_terminal_text(state.query), theme.query, theme)}",
        "",
    ]
    if not state.matches:
        lines.append(paint("No matches", theme.empty_hint, theme))
        return [clip_line(line, max_cols) for line in lines]

    window = compute_visible_window(state.matches, state.selected_index, max_visible)
    for idx in range(window.start_index, window.end_index):
        lines.extend(row_renderer(state.matches[idx], idx == state.selected_index, theme))

    remaining = len(state.matches) - max_visible
    if remaining > 0:
        lines.append("")
        lines.append(paint(f"... {remaining} more", theme.more_hint, theme))
    return [clip_line(line, max_cols) for line in lines]


def render_widget_lines(
    state: SessionState[ScriptEntry],
    theme: UITheme,
    max_visible: int = WIDGET_MAX_VISIBLE,
    max_cols: int | None = None,
) -> list[str]:
    """Compact one-row-per-script list drawn below the shell prompt."""
    if not state.matches:
        return [paint("No matches", theme.empty_hint, theme)]

    window = compute_visible_window(state.matches, state.selected_index, max_visible)
    lines = [
        _label_line(
            state.matches[idx].item.name,
            state.matches[idx].item.workspace,
            state.matches[idx].positions,
            idx == state.selected_index,
            theme,
        )
        for idx in range(window.start_index, window.end_index)
    ]
    remaining = len(state.matches) - max_visible
    if remaining > 0:
        lines.append(paint(f"... {remaining} more", theme.more_hint, theme))
    return [clip_line(line, max_cols) for line in lines]
