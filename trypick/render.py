"""Rendering for the try-directory picker.

Each frame is a full redraw: header, query echo, the visible window of the
virtual list, and a footer. Frames are composed as strings so they can be
inspected without a terminal; ``render_frame`` writes one out.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .ansi import clip_ansi_line, display_width
from .candidates import Candidate, CandidateItem, ListItem
from .scoring import match_positions, split_date_name
from .ui_theme import DEFAULT_THEME, UITheme

CLEAR_SCREEN = "\033[2J"
HOME = "\033[H"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"

TITLE = "📁 Try Directory Selection"
KEY_HINT = "↑↓: Navigate  Enter: Select  ESC: Cancel"
CHROME_ROWS = 8
MIN_VISIBLE_ROWS = 3


@dataclass
class RenderContext:
    items: list[ListItem]
    cursor: int
    scroll_offset: int
    width: int
    height: int
    query: str
    now: float
    theme: UITheme = DEFAULT_THEME


def visible_rows(height: int) -> int:
    """Return list rows left after header and footer chrome."""
    return max(MIN_VISIBLE_ROWS, height - CHROME_ROWS)


def format_relative_time(mtime: float, now: float) -> str:
    """Describe how long ago ``mtime`` was, e.g. ``5m ago``."""
    if mtime <= 0:
        return "?"
    secs = now - mtime
    mins = secs / 60
    hours = mins / 60
    days = hours / 24
    if secs < 10:
        return "just now"
    if mins < 60:
        return f"{int(mins)}m ago"
    if hours < 24:
        return f"{int(hours)}h ago"
    if days < 30:
        return f"{int(days)}d ago"
    if days < 365:
        return f"{int(days / 30)}mo ago"
    return f"{int(days / 365)}y ago"


def highlight_matches(text: str, query: str, theme: UITheme) -> str:
    """Wrap each character of ``text`` aligned with ``query`` in match style."""
    if not query:
        return text
    positions = set(match_positions(text, query))
    out: list[str] = []
    for idx, ch in enumerate(text):
        if idx in positions:
            out.append(f"{theme.match}{ch}{theme.match_end}")
        else:
            out.append(ch)
    return "".join(out)


def _candidate_row_body(candidate: Candidate, query: str, width: int, now: float, theme: UITheme) -> str:
    parts = split_date_name(candidate.basename)
    if parts is None:
        shown = candidate.basename
        styled = highlight_matches(shown, query, theme)
    else:
        date_part, name_part = parts
        separator_style = theme.match if "-" in query else theme.date
        separator_end = theme.match_end if "-" in query else theme.dim_end
        styled = (
            f"{theme.date}{date_part}{theme.dim_end}"
            f"{separator_style}-{separator_end}"
            f"{highlight_matches(name_part, query, theme)}"
        )
        shown = f"{date_part}-{name_part}"

    meta = f"{format_relative_time(candidate.modified_at, now)}, {candidate.score:.1f}"
    padding = max(1, width - 5 - display_width(shown) - (len(meta) + 1))
    return f"{styled}{' ' * padding} {theme.meta}{meta}{theme.dim_end}"


def _create_row_body(query: str, width: int) -> str:
    shown = f"Create new: {query}" if query else "Create new"
    padding = max(1, width - 5 - display_width(shown))
    return f"{shown}{' ' * padding}"


def format_row(item: ListItem, selected: bool, context: RenderContext) -> str:
    theme = context.theme
    marker = f"{theme.marker}→ {theme.reset}" if selected else "  "
    if isinstance(item, CandidateItem):
        icon = "📁 "
        body = _candidate_row_body(item.candidate, context.query, context.width, context.now, theme)
    else:
        icon = "+ "
        body = _create_row_body(context.query, context.width)
    if selected:
        body = f"{theme.selected}{body}{theme.selected_end}"
    return clip_ansi_line(f"{marker}{icon}{body}", context.width) + theme.reset


def build_frame(context: RenderContext) -> str:
    """Compose one full frame for ``context`` as a string."""
    theme = context.theme
    width = context.width
    sep = f"{theme.separator}{'─' * max(1, width - 1)}{theme.reset}"
    lines = [
        f"{theme.title}{TITLE}{theme.reset}",
        sep,
        f"{theme.query_label}Search: {theme.reset}{context.query}",
        sep,
    ]

    total = len(context.items)
    window = visible_rows(context.height)
    start = context.scroll_offset
    end = min(start + window, total)
    has_candidates = total > 1
    for idx in range(start, end):
        item = context.items[idx]
        if has_candidates and not isinstance(item, CandidateItem):
            lines.append("")
        lines.append(format_row(item, idx == context.cursor, context))

    if total > window:
        lines.append(sep)
        lines.append(f"{theme.hint}[{start + 1}-{end}/{total}]{theme.reset}")
    lines.append(sep)
    lines.append(f"{theme.hint}{KEY_HINT}{theme.reset}")
    return CLEAR_SCREEN + HOME + "\r\n".join(lines)


def build_prompt(date_prefix: str, theme: UITheme = DEFAULT_THEME) -> str:
    """Compose the new-name prompt shown in cooked mode."""
    return (
        f"{CLEAR_SCREEN}{HOME}{theme.prompt}Enter new try name{theme.reset}\r\n"
        f"> {theme.date}{date_prefix}-{theme.dim_end}{SHOW_CURSOR}"
    )


def render_frame(context: RenderContext, write: Callable[[str], None]) -> None:
    write(build_frame(context))
