"""Terminal control helpers for the selector session.

Owns the raw-mode lifecycle, viewport size queries, and raw key reads.
``TerminalController`` is the only code that touches termios; the selector and
renderer depend on its methods, never on platform specifics.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
from collections.abc import Iterable
from typing import TextIO

from .errors import NotInteractiveError, TerminalControlError
from .keys import EscapeSequenceDecoder, decode_key

logger = logging.getLogger(__name__)

FALLBACK_SIZE = (80, 24)

# termios.tcgetattr list layout.
_IFLAG, _OFLAG, _CFLAG, _LFLAG, _ISPEED, _OSPEED, _CC = range(7)


def require_interactive(stdin: TextIO, stderr: TextIO) -> None:
    """Fail fast unless both streams are attached to a terminal."""
    for stream in (stdin, stderr):
        try:
            interactive = stream.isatty()
        except (AttributeError, ValueError):
            interactive = False
        if not interactive:
            raise NotInteractiveError("try requires an interactive terminal")


def raw_attributes(saved: list) -> list:
    """Return a copy of ``saved`` with line buffering, echo and signals off."""
    attrs = list(saved)
    attrs[_CC] = list(saved[_CC])
    attrs[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    attrs[_IFLAG] &= ~(termios.IXON | termios.ICRNL | termios.INLCR | termios.IGNCR)
    attrs[_OFLAG] &= ~termios.OPOST
    attrs[_CC][termios.VMIN] = 1
    attrs[_CC][termios.VTIME] = 0
    return attrs


class TerminalController:
    """Manage raw-mode transitions and raw input for one session."""

    def __init__(self, stdin_fd: int, ui_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.ui_fd = ui_fd
        self._saved_tty_state: list | None = None
        self._pending = b""

    def enter_raw_mode(self) -> list:
        """Capture current attributes and switch the input descriptor to raw mode."""
        try:
            saved = termios.tcgetattr(self.stdin_fd)
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw_attributes(saved))
        except (termios.error, OSError) as exc:
            raise TerminalControlError(f"cannot enter raw mode: {exc}") from exc
        if self._saved_tty_state is None:
            self._saved_tty_state = saved
        return saved

    def restore(self, saved: list | None = None) -> None:
        """Reapply saved attributes; failures are logged and suppressed."""
        state = saved if saved is not None else self._saved_tty_state
        if state is None:
            return
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, state)
        except (termios.error, OSError):
            logger.debug("terminal restore failed", exc_info=True)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that keeps the terminal raw for the enclosed block."""
        saved = self.enter_raw_mode()
        try:
            yield saved
        finally:
            self.restore(saved)
            self._saved_tty_state = None

    def query_viewport_size(self) -> tuple[int, int]:
        """Return ``(columns, rows)``, falling back to 80x24 when unknown."""
        try:
            size = os.get_terminal_size(self.stdin_fd)
        except OSError:
            return FALLBACK_SIZE
        if size.columns <= 0 or size.lines <= 0:
            return FALLBACK_SIZE
        return size.columns, size.lines

    def _read_byte(self) -> bytes:
        if self._pending:
            byte, self._pending = self._pending[:1], self._pending[1:]
            return byte
        return os.read(self.stdin_fd, 1)

    def read_key(self) -> str:
        """Block for one keypress and return its decoded token.

        Only the first byte blocks. Escape and UTF-8 continuation bytes are
        drained without blocking, so a lone Escape or a stray high byte
        returns immediately instead of waiting for another key.
        """
        first = self._read_byte()
        if not first:
            return ""
        decoder = EscapeSequenceDecoder()
        if decoder.feed(first):
            return decode_key(decoder.sequence)

        os.set_blocking(self.stdin_fd, False)
        try:
            while not decoder.complete:
                try:
                    more = self._read_byte()
                except BlockingIOError:
                    break
                if not more:
                    break
                decoder.feed(more)
        finally:
            os.set_blocking(self.stdin_fd, True)
        self._pending = decoder.rejected + self._pending
        return decode_key(decoder.sequence)

    def read_line(self) -> str:
        """Read one cooked-mode line, then re-enter raw mode unconditionally."""
        self.restore()
        try:
            chunks: list[bytes] = []
            while True:
                chunk = os.read(self.stdin_fd, 1024)
                if not chunk:
                    break
                chunks.append(chunk)
                if chunk.endswith(b"\n"):
                    break
            return b"".join(chunks).decode("utf-8", errors="replace")
        finally:
            try:
                termios.tcsetattr(
                    self.stdin_fd,
                    termios.TCSAFLUSH,
                    raw_attributes(self._saved_tty_state or termios.tcgetattr(self.stdin_fd)),
                )
            except (termios.error, OSError):
                logger.debug("re-entering raw mode failed", exc_info=True)

    def write(self, text: str) -> None:
        os.write(self.ui_fd, text.encode("utf-8", errors="replace"))


class ScriptedTerminal:
    """Terminal stand-in that replays a fixed key script.

    Used for non-interactive runs. Once the script is exhausted the session
    receives ``CTRL_C`` and cancels.
    """

    def __init__(
        self,
        keys: Iterable[str],
        lines: Iterable[str] = (),
        size: tuple[int, int] = FALLBACK_SIZE,
        output: TextIO | None = None,
    ) -> None:
        self._keys = list(keys)
        self._lines = list(lines)
        self.size = size
        self.output = output
        self.raw = False

    def enter_raw_mode(self) -> list:
        self.raw = True
        return []

    def restore(self, saved: list | None = None) -> None:
        self.raw = False

    @contextlib.contextmanager
    def raw_mode(self):
        saved = self.enter_raw_mode()
        try:
            yield saved
        finally:
            self.restore(saved)

    def query_viewport_size(self) -> tuple[int, int]:
        return self.size

    def read_key(self) -> str:
        if not self._keys:
            return "CTRL_C"
        return self._keys.pop(0)

    def read_line(self) -> str:
        if not self._lines:
            return "\n"
        return self._lines.pop(0)

    def write(self, text: str) -> None:
        if self.output is not None:
            self.output.write(text)
