"""Shell snippets emitted for the calling shell function to ``eval``."""

from __future__ import annotations

from pathlib import Path

from .selector import CREATE_NEW, ENTER_EXISTING, SelectionResult

SCRIPT_WARNING = "# if you can read this, you didn't launch try from an alias. run try --help."


def quote(text: str) -> str:
    """Single-quote ``text`` for POSIX shells."""
    return "'" + text.replace("'", "'\"'\"'") + "'"


def script_cd(path: Path) -> list[str]:
    return [f"touch {quote(str(path))}", f"cd {quote(str(path))}"]


def script_mkdir_cd(path: Path) -> list[str]:
    return [f"mkdir -p {quote(str(path))}", *script_cd(path)]


def script_clone(path: Path, uri: str) -> list[str]:
    """Create ``path``, clone ``uri`` into it, then enter it."""
    return [
        f"mkdir -p {quote(str(path))}",
        f"echo {quote(f'Using git clone to create this trial from {uri}.')}",
        f"git clone {quote(uri)} {quote(str(path))}",
        *script_cd(path),
    ]


def commands_for_result(result: SelectionResult) -> list[str]:
    """Return the shell commands that carry out ``result``; empty on cancel."""
    if result.path is None:
        return []
    if result.kind == CREATE_NEW:
        return script_mkdir_cd(result.path)
    if result.kind == ENTER_EXISTING:
        return script_cd(result.path)
    return []


def emit_script(commands: list[str]) -> str:
    """Join commands with ``&&`` continuations under the warning comment."""
    if not commands:
        return ""
    body = " && \\\n  ".join(commands)
    return f"{SCRIPT_WARNING}\n{body}\n"


def init_snippet(executable: str, tries_path: Path) -> str:
    """Return the ``try`` shell function that wraps ``executable cd``."""
    return (
        "try() {\n"
        f"  script_path={quote(executable)};\n"
        f"  cmd=$(\"$script_path\" cd --path {quote(str(tries_path))} \"$@\" 2>/dev/tty);\n"
        "  [ $? -eq 0 ] && eval \"$cmd\" || echo \"$cmd\";\n"
        "}\n"
    )
