"""Selector state-machine tests driven through ``ScriptedTerminal``."""

from __future__ import annotations

import io
import os
import tempfile
import unittest
from datetime import date
from pathlib import Path

from trypick.candidates import CREATE_NEW as CREATE_NEW_ITEM
from trypick.candidates import CandidateItem
from trypick.render import SHOW_CURSOR
from trypick.selector import (
    BROWSING,
    CANCELLED,
    CREATE_NEW,
    DONE,
    ENTER_EXISTING,
    PROMPTING_NEW_NAME,
    SelectionResult,
    Selector,
    SelectorSession,
    normalize_query,
    run_selector,
)
from trypick.terminal import ScriptedTerminal
from trypick.ui_theme import PLAIN_THEME

NOW = 1_700_000_000.0
TODAY = date(2026, 10, 17)


class SelectorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def make_dirs(self, *names: str, age: float = 3600.0) -> None:
        for offset, name in enumerate(names):
            path = self.root / name
            path.mkdir()
            stamp = NOW - age - offset
            os.utime(path, (stamp, stamp))

    def selector(self, keys, lines=(), query: str = "", size=(80, 24)) -> Selector:
        terminal = ScriptedTerminal(keys, lines=lines, size=size, output=io.StringIO())
        return Selector(
            self.root,
            query,
            terminal=terminal,
            theme=PLAIN_THEME,
            clock=lambda: NOW,
            today=lambda: TODAY,
        )


class NormalizeQueryTests(unittest.TestCase):
    def test_trims_and_hyphenates(self) -> None:
        self.assertEqual(normalize_query("  my\tnew idea "), "my-new-idea")
        self.assertEqual(normalize_query(""), "")


class SessionViewportTests(unittest.TestCase):
    def test_cursor_is_clamped_to_list(self) -> None:
        session = SelectorSession(cursor=9)
        session.restore_viewport(total_items=3, window=5)
        self.assertEqual((session.cursor, session.scroll_offset), (2, 0))

    def test_scrolls_down_to_keep_cursor_visible(self) -> None:
        session = SelectorSession(cursor=7)
        session.restore_viewport(total_items=10, window=3)
        self.assertEqual(session.scroll_offset, 5)

    def test_scrolls_up_to_keep_cursor_visible(self) -> None:
        session = SelectorSession(cursor=1, scroll_offset=4)
        session.restore_viewport(total_items=10, window=3)
        self.assertEqual(session.scroll_offset, 1)


class HandleKeyTests(SelectorTestCase):
    def test_navigation_stays_in_bounds(self) -> None:
        self.make_dirs("alpha", "beta")
        selector = self.selector([])
        items = selector.items()

        selector.handle_key("UP", items)
        self.assertEqual(selector.session.cursor, 0)
        for _ in range(5):
            selector.handle_key("CTRL_N", items)
        self.assertEqual(selector.session.cursor, len(items) - 1)
        selector.handle_key("CTRL_P", items)
        self.assertEqual(selector.session.cursor, len(items) - 2)

    def test_typing_appends_and_resets_cursor(self) -> None:
        selector = self.selector([])
        items = selector.items()
        selector.session.cursor = 0
        selector.handle_key("a", items)
        selector.handle_key("/", items)
        selector.handle_key("b", items)
        self.assertEqual(selector.session.query, "ab")
        self.assertEqual(selector.session.cursor, 0)

    def test_backspace_on_empty_query_is_harmless(self) -> None:
        selector = self.selector([])
        selector.handle_key("BACKSPACE", selector.items())
        self.assertEqual(selector.session.query, "")
        self.assertEqual(selector.session.state, BROWSING)

    def test_closed_input_cancels(self) -> None:
        selector = self.selector([])
        result = selector.handle_key("", selector.items())
        self.assertEqual(result, SelectionResult.cancelled())
        self.assertEqual(selector.session.state, DONE)

    def test_enter_on_create_row_without_query_prompts(self) -> None:
        selector = self.selector([])
        items = selector.items()
        self.assertEqual(items, [CREATE_NEW_ITEM])
        self.assertIsNone(selector.handle_key("ENTER", items))
        self.assertEqual(selector.session.state, PROMPTING_NEW_NAME)


class RunTests(SelectorTestCase):
    def test_enter_selects_top_ranked_directory(self) -> None:
        self.make_dirs("2024-01-01-alpha", "2024-06-01-beta")
        result = self.selector(["b", "e", "ENTER"]).run()
        self.assertEqual(result, SelectionResult.enter_existing(self.root / "2024-06-01-beta"))

    def test_enter_with_query_on_create_row_creates_dated_name(self) -> None:
        result = self.selector(["ENTER"], query="new idea").run()
        self.assertEqual(result.kind, CREATE_NEW)
        self.assertEqual(result.path, self.root / "2026-10-17-new-idea")

    def test_backspace_widens_results_and_resets_cursor(self) -> None:
        self.make_dirs("2024-01-01-alpha", "2024-01-02-alpine", "2024-01-03-beta")
        selector = self.selector([])
        for key in ["a", "l", "p", "h"]:
            selector.handle_key(key, selector.items())
        self.assertEqual([item.candidate.basename for item in selector.items()[:-1]], ["2024-01-01-alpha"])

        selector.handle_key("DOWN", selector.items())
        selector.handle_key("BACKSPACE", selector.items())

        self.assertEqual(selector.session.query, "alp")
        self.assertEqual(selector.session.cursor, 0)
        names = {item.candidate.basename for item in selector.items() if isinstance(item, CandidateItem)}
        self.assertEqual(names, {"2024-01-01-alpha", "2024-01-02-alpine"})

    def test_prompt_answer_creates_directory_result(self) -> None:
        result = self.selector(["ENTER"], lines=["my idea\n"]).run()
        self.assertEqual(result, SelectionResult.create_new(self.root / "2026-10-17-my-idea"))

    def test_empty_prompt_returns_to_browsing(self) -> None:
        selector = self.selector(["ENTER", "ESC"], lines=["   \n"])
        result = selector.run()
        self.assertEqual(result.kind, CANCELLED)
        self.assertIsNone(result.path)

    def test_escape_cancels_and_restores_cursor(self) -> None:
        self.make_dirs("alpha")
        selector = self.selector(["DOWN", "ESC"])
        result = selector.run()

        self.assertEqual(result, SelectionResult.cancelled())
        self.assertFalse(selector.terminal.raw)
        self.assertTrue(selector.terminal.output.getvalue().endswith(SHOW_CURSOR))

    def test_exhausted_script_cancels(self) -> None:
        self.assertEqual(self.selector(["a"]).run().kind, CANCELLED)

    def test_cursor_stays_visible_while_scrolling(self) -> None:
        self.make_dirs(*[f"2024-01-{day:02d}-item" for day in range(1, 21)])
        selector = self.selector([], size=(80, 12))
        window = 4
        for key in ["DOWN"] * 19 + ["UP"] * 12:
            items = selector.items()
            selector.session.restore_viewport(len(items), window)
            selector.handle_key(key, items)
            selector.session.restore_viewport(len(items), window)
            session = selector.session
            self.assertLessEqual(session.scroll_offset, session.cursor)
            self.assertLess(session.cursor, session.scroll_offset + window)

    def test_frames_are_written_to_terminal(self) -> None:
        self.make_dirs("2024-01-01-alpha")
        selector = self.selector(["ESC"])
        selector.run()
        output = selector.terminal.output.getvalue()
        self.assertIn("Search: ", output)
        self.assertIn("2024-01-01-alpha", output)


class RunSelectorTests(SelectorTestCase):
    def test_uses_given_terminal(self) -> None:
        self.make_dirs("alpha")
        terminal = ScriptedTerminal(["ENTER"], output=io.StringIO())
        result = run_selector("alp", self.root, terminal=terminal, theme=PLAIN_THEME)
        self.assertEqual(result.kind, ENTER_EXISTING)
        self.assertEqual(result.path, self.root / "alpha")


if __name__ == "__main__":
    unittest.main()
