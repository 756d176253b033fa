"""Command-line front door for trypick.

Parses CLI options, resolves the tries directory, and dispatches to the
shell-integration snippet, the interactive selector, git clones, or config
updates. Only shell code ever goes to stdout; the UI and messages use stderr.
"""

from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path

from . import config
from .clone import clone_directory_name, is_git_uri
from .errors import TrypickError
from .keys import parse_key_script
from .selector import run_selector
from .shell import commands_for_result, emit_script, init_snippet, script_clone
from .terminal import ScriptedTerminal
from .ui_theme import available_theme_names, normalize_theme_name, resolve_theme


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trypick",
        description=(
            "Fuzzy-pick a dated scratch directory or create a new one. "
            "Add `eval \"$(trypick init ~/src/tries)\"` to your shell rc file."
        ),
    )
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Print the `try` shell function.")
    init_parser.add_argument("tries_dir", nargs="?", default=None, help="Tries directory (same as --path).")
    init_parser.add_argument("--path", default=None, help="Tries directory.")

    cd_parser = subparsers.add_parser("cd", help="Run the selector and print shell commands.")
    cd_parser.add_argument("query", nargs="*", help="Initial search query.")
    cd_parser.add_argument("--path", default=None, help="Tries directory.")
    cd_parser.add_argument("--theme", default=None, help=f"UI theme name ({', '.join(available_theme_names())}).")
    cd_parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    cd_parser.add_argument(
        "--and-keys",
        default=None,
        metavar="KEYS",
        help=(
            "Replay comma-separated keys (e.g. 'DOWN,ENTER' or 'TYPE=foo') instead of reading "
            "the terminal. A lone space between commas types a space."
        ),
    )
    cd_parser.add_argument("--and-type", default=None, metavar="TEXT", help="Type TEXT before any scripted keys.")
    cd_parser.add_argument("--and-name", default=None, metavar="NAME", help="Answer the new-name prompt with NAME.")

    clone_parser = subparsers.add_parser("clone", help="Clone a git repository into a dated try directory.")
    clone_parser.add_argument("uri", help="Git remote, e.g. https://github.com/user/repo.")
    clone_parser.add_argument("name", nargs="?", default=None, help="Directory name instead of YYYY-MM-DD-user-repo.")
    clone_parser.add_argument("--path", default=None, help="Tries directory.")

    config_parser = subparsers.add_parser("config", help="Show or update saved defaults.")
    config_parser.add_argument("--tries-path", default=None, help="Save the default tries directory.")
    config_parser.add_argument("--theme", default=None, help="Save the default UI theme.")
    return parser


def _init_command(args: argparse.Namespace) -> None:
    tries_path = config.resolve_tries_path(args.tries_dir or args.path)
    executable = shutil.which("trypick") or str(Path(sys.argv[0]).absolute())
    sys.stdout.write(init_snippet(executable, tries_path))


def _scripted_terminal(args: argparse.Namespace) -> ScriptedTerminal | None:
    if args.and_keys is None and args.and_type is None:
        return None
    keys = list(args.and_type or "") + parse_key_script(args.and_keys)
    lines = [args.and_name + "\n"] if args.and_name else []
    return ScriptedTerminal(keys, lines=lines, output=sys.stderr)


def _emit_clone(uri: str, name: str | None, tries_path: Path) -> None:
    try:
        dir_name = clone_directory_name(uri, name)
    except TrypickError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1) from exc
    sys.stdout.write(emit_script(script_clone(tries_path / dir_name, uri)))


def _clone_command(args: argparse.Namespace) -> None:
    _emit_clone(args.uri, args.name, config.resolve_tries_path(args.path))


def _cd_command(args: argparse.Namespace) -> None:
    tries_path = config.resolve_tries_path(args.path)
    if args.query and is_git_uri(args.query[0]):
        _emit_clone(args.query[0], " ".join(args.query[1:]) or None, tries_path)
        return
    theme = resolve_theme(
        args.theme or config.load_theme_name(),
        no_color=args.no_color or config.no_color_requested(),
    )
    try:
        result = run_selector(
            " ".join(args.query),
            tries_path,
            terminal=_scripted_terminal(args),
            theme=theme,
        )
    except TrypickError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1) from exc
    sys.stdout.write(emit_script(commands_for_result(result)))


def _config_command(args: argparse.Namespace) -> None:
    if args.tries_path:
        config.save_tries_path(Path(args.tries_path).expanduser().absolute())
    if args.theme:
        config.save_theme_name(normalize_theme_name(args.theme))
    sys.stderr.write(f"config: {config.CONFIG_PATH}\n")
    sys.stderr.write(f"tries path: {config.resolve_tries_path()}\n")
    sys.stderr.write(f"theme: {normalize_theme_name(config.load_theme_name())}\n")


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the requested command.

    With no command the help text goes to stderr and the exit status is 2.
    """
    config.configure_logging()
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command == "init":
        _init_command(args)
    elif args.command == "cd":
        _cd_command(args)
    elif args.command == "clone":
        _clone_command(args)
    elif args.command == "config":
        _config_command(args)
    else:
        parser.print_help(sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
