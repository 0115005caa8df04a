"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the search prompt, match list and detail rows.
Syntax highlighting of script commands remains a separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    title: str
    prompt_label: str
    query: str
    selection_marker: str
    match_hit: str
    workspace: str
    detail: str
    more_hint: str
    empty_hint: str
    error: str
    announce: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    title="\033[1m\033[36m",
    prompt_label="",
    query="",
    selection_marker="\033[32m",
    match_hit="\033[1m\033[36m",
    workspace="\033[2m",
    detail="\033[90m",
    more_hint="\033[2m",
    empty_hint="\033[2m",
    error="\033[33m",
    announce="\033[1m\033[32m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    title="\033[1;38;5;45m",
    prompt_label="\033[38;5;110m",
    query="\033[1;38;5;153m",
    selection_marker="\033[38;5;39m",
    match_hit="\033[1;38;5;45m",
    workspace="\033[2;38;5;110m",
    detail="\033[38;5;73m",
    more_hint="\033[2;38;5;110m",
    empty_hint="\033[2;38;5;110m",
    error="\033[38;5;215m",
    announce="\033[1;38;5;84m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    title="",
    prompt_label="",
    query="",
    selection_marker="",
    match_hit="",
    workspace="",
    detail="",
    more_hint="",
    empty_hint="",
    error="",
    announce="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


def paint(text: str, color: str, theme: UITheme) -> str:
    """Wrap ``text`` in ``color`` plus the theme reset; plain themes pass through."""
    if not color:
        return text
    return f"{color}{text}{theme.reset}"


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "paint",
    "resolve_theme",
]
