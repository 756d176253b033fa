"""Error types raised by the selector session."""

from __future__ import annotations


class TrypickError(RuntimeError):
    """Base class for failures that abort a selector session."""


class NotInteractiveError(TrypickError):
    """Input or error stream is not attached to an interactive terminal."""


class TerminalControlError(TrypickError):
    """Reading or applying terminal attributes failed."""


class GitRemoteError(TrypickError):
    """A clone source could not be parsed into a host, user and repository."""
