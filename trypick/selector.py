"""Interactive selector session: state, key transitions, and the main loop.

``Selector`` owns the query buffer, cursor, and scroll offset. Each loop
iteration ranks the cached candidates, restores the viewport invariant,
redraws the full frame, and blocks for one key. The loop ends once a
``SelectionResult`` exists.
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .candidates import Candidate, CandidateItem, CandidateStore, ListItem, virtual_list
from .keys import is_printable_query_char
from .render import (
    CLEAR_SCREEN,
    HIDE_CURSOR,
    HOME,
    SHOW_CURSOR,
    RenderContext,
    build_prompt,
    render_frame,
    visible_rows,
)
from .scoring import rank_candidates
from .terminal import TerminalController, require_interactive
from .ui_theme import DEFAULT_THEME, UITheme

logger = logging.getLogger(__name__)

BROWSING = "browsing"
PROMPTING_NEW_NAME = "prompting_new_name"
DONE = "done"

ENTER_EXISTING = "enter_existing"
CREATE_NEW = "create_new"
CANCELLED = "cancelled"


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of a session: ``enter_existing``, ``create_new`` or ``cancelled``."""

    kind: str
    path: Path | None = None

    @classmethod
    def enter_existing(cls, path: Path) -> SelectionResult:
        return cls(ENTER_EXISTING, path)

    @classmethod
    def create_new(cls, path: Path) -> SelectionResult:
        return cls(CREATE_NEW, path)

    @classmethod
    def cancelled(cls) -> SelectionResult:
        return cls(CANCELLED)


def normalize_query(text: str) -> str:
    """Turn tabs into spaces, trim, and replace inner spaces with hyphens."""
    return text.replace("\t", " ").strip().replace(" ", "-")


def new_directory_name(date_prefix: str, text: str) -> str:
    return f"{date_prefix}-{text}".replace(" ", "-")


@dataclass
class SelectorSession:
    query: str = ""
    cursor: int = 0
    scroll_offset: int = 0
    width: int = 80
    height: int = 24
    state: str = BROWSING

    def restore_viewport(self, total_items: int, window: int) -> None:
        """Clamp cursor to the list and scroll so the cursor row is visible."""
        self.cursor = max(0, min(self.cursor, total_items - 1))
        if self.cursor < self.scroll_offset:
            self.scroll_offset = self.cursor
        elif self.cursor >= self.scroll_offset + window:
            self.scroll_offset = self.cursor - window + 1
        self.scroll_offset = max(0, self.scroll_offset)


class Selector:
    """Drive one interactive selection over the directories in ``base_path``."""

    def __init__(
        self,
        base_path: Path,
        initial_query: str = "",
        *,
        terminal=None,
        theme: UITheme = DEFAULT_THEME,
        clock: Callable[[], float] = time.time,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.base_path = Path(base_path)
        self.store = CandidateStore(self.base_path)
        self.session = SelectorSession(query=normalize_query(initial_query))
        self.terminal = terminal
        self.theme = theme
        self.clock = clock
        self.today = today or date.today
        self.result: SelectionResult | None = None

    def ranked(self) -> list[Candidate]:
        return rank_candidates(self.store.load(), self.session.query, self.clock())

    def items(self) -> list[ListItem]:
        return virtual_list(self.ranked())

    def date_prefix(self) -> str:
        return self.today().strftime("%Y-%m-%d")

    def _finish(self, result: SelectionResult) -> SelectionResult:
        self.result = result
        self.session.state = DONE
        logger.debug("session finished: %s %s", result.kind, result.path)
        return result

    def handle_key(self, key: str, items: list[ListItem]) -> SelectionResult | None:
        """Apply one key in the browsing state."""
        session = self.session
        if key in {"UP", "CTRL_P"}:
            session.cursor = max(0, session.cursor - 1)
        elif key in {"DOWN", "CTRL_N"}:
            session.cursor = min(len(items) - 1, session.cursor + 1)
        elif key == "ENTER":
            item = items[session.cursor]
            if isinstance(item, CandidateItem):
                return self._finish(SelectionResult.enter_existing(item.candidate.path))
            if session.query:
                name = new_directory_name(self.date_prefix(), session.query)
                return self._finish(SelectionResult.create_new(self.base_path / name))
            session.state = PROMPTING_NEW_NAME
        elif key == "BACKSPACE":
            session.query = session.query[:-1]
            session.cursor = 0
        elif key in {"CTRL_C", "ESC", ""}:
            # An empty token means input was closed.
            return self._finish(SelectionResult.cancelled())
        elif is_printable_query_char(key):
            session.query += key
            session.cursor = 0
        return None

    def prompt_new_name(self) -> SelectionResult | None:
        """Read a directory name in cooked mode; empty input resumes browsing."""
        self.terminal.write(build_prompt(self.date_prefix(), self.theme))
        line = self.terminal.read_line().strip()
        self.terminal.write(HIDE_CURSOR)
        if not line:
            self.session.state = BROWSING
            return None
        name = new_directory_name(self.date_prefix(), line)
        return self._finish(SelectionResult.create_new(self.base_path / name))

    def step(self) -> SelectionResult | None:
        """Run one loop iteration: rank, render, read, and apply one key."""
        session = self.session
        session.width, session.height = self.terminal.query_viewport_size()
        items = self.items()
        session.restore_viewport(len(items), visible_rows(session.height))
        render_frame(
            RenderContext(
                items=items,
                cursor=session.cursor,
                scroll_offset=session.scroll_offset,
                width=session.width,
                height=session.height,
                query=session.query,
                now=self.clock(),
                theme=self.theme,
            ),
            self.terminal.write,
        )
        result = self.handle_key(self.terminal.read_key(), items)
        if session.state == PROMPTING_NEW_NAME:
            result = self.prompt_new_name()
        return result

    def run(self) -> SelectionResult:
        self.terminal.write(HIDE_CURSOR + CLEAR_SCREEN + HOME)
        try:
            with self.terminal.raw_mode():
                while self.session.state != DONE:
                    self.step()
        finally:
            self.terminal.write(CLEAR_SCREEN + HOME + SHOW_CURSOR)
        return self.result


def run_selector(
    initial_query: str,
    base_path: Path | str,
    *,
    terminal=None,
    theme: UITheme = DEFAULT_THEME,
) -> SelectionResult:
    """Run an interactive session and return its result.

    Without an explicit ``terminal`` both stdin and stderr must be TTYs; the
    UI is drawn on stderr so stdout stays free for the caller's script.
    """
    if terminal is None:
        require_interactive(sys.stdin, sys.stderr)
        terminal = TerminalController(sys.stdin.fileno(), sys.stderr.fileno())
    selector = Selector(Path(base_path), initial_query, terminal=terminal, theme=theme)
    return selector.run()
