"""Git remote parsing and dated directory names for cloned tries."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from .errors import GitRemoteError

_GIT_URI_PATTERNS = (
    re.compile(r"^https?://(?P<host>[^/]+)/(?P<user>[^/]+)/(?P<repo>[^/]+)"),
    re.compile(r"^git@(?P<host>[^:]+):(?P<user>[^/]+)/(?P<repo>[^/]+)"),
)


@dataclass(frozen=True)
class GitRemote:
    host: str
    user: str
    repo: str


def is_git_uri(text: str | None) -> bool:
    """Return whether ``text`` looks like something ``git clone`` accepts."""
    if not text:
        return False
    return (
        text.startswith(("http://", "https://", "git@"))
        or "github.com" in text
        or "gitlab.com" in text
        or text.endswith(".git")
    )


def parse_git_uri(uri: str) -> GitRemote | None:
    """Split an HTTPS or SSH remote into host, user and repository.

    A trailing ``.git`` is dropped from the repository name. Returns ``None``
    for anything else, including bare ``host/user/repo`` forms.
    """
    trimmed = uri.removesuffix(".git")
    for pattern in _GIT_URI_PATTERNS:
        match = pattern.match(trimmed)
        if match:
            return GitRemote(match["host"], match["user"], match["repo"])
    return None


def clone_directory_name(uri: str, custom_name: str | None = None, today: date | None = None) -> str:
    """Return ``YYYY-MM-DD-user-repo`` for ``uri``, or ``custom_name`` when given."""
    if custom_name and custom_name.strip():
        return custom_name.strip().replace(" ", "-")
    remote = parse_git_uri(uri)
    if remote is None:
        raise GitRemoteError(f"unable to parse git URI: {uri}")
    prefix = (today or date.today()).strftime("%Y-%m-%d")
    return f"{prefix}-{remote.user}-{remote.repo}"
