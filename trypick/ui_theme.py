"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the picker chrome, rows, and match highlights.
The plain theme disables every escape code except screen control.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    reset: str
    title: str
    separator: str
    query_label: str
    marker: str
    selected: str
    selected_end: str
    match: str
    match_end: str
    date: str
    dim_end: str
    meta: str
    prompt: str
    hint: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    title="\033[1;33m",
    separator="\033[90m",
    query_label="\033[1;33m",
    marker="\033[1;33m",
    selected="\033[7m",
    selected_end="\033[27m",
    match="\033[1;33m",
    match_end="\033[22;39m",
    date="\033[90m",
    dim_end="\033[39m",
    meta="\033[90m",
    prompt="\033[1;36m",
    hint="\033[90m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    title="\033[1;38;5;45m",
    separator="\033[2;38;5;31m",
    query_label="\033[1;38;5;45m",
    marker="\033[38;5;39m",
    selected="\033[7m",
    selected_end="\033[27m",
    match="\033[1;38;5;153m",
    match_end="\033[22;39m",
    date="\033[2;38;5;110m",
    dim_end="\033[22;39m",
    meta="\033[2;38;5;110m",
    prompt="\033[1;38;5;39m",
    hint="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    title="",
    separator="",
    query_label="",
    marker="",
    selected="",
    selected_end="",
    match="",
    match_end="",
    date="",
    dim_end="",
    meta="",
    prompt="",
    hint="",
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


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
