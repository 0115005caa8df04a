"""Command-line front door for fjsf.

Parses the mode words and options, runs discovery, then drives an interactive
session and hands the confirmed item to the matching action.
"""

from __future__ import annotations

import argparse
import os
import shutil
import sys
import termios
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from loguru import logger

from . import __version__
from .cache import JsonCache
from .config import load_log_level, load_max_visible, load_style_name, load_theme_name
from .discovery import (
    ROOT_MANIFEST,
    JsonEntry,
    ScriptEntry,
    discover_files_by_name,
    discover_json_entries,
    discover_scripts,
    discover_scripts_from_file,
)
from .errors import FjsfError, NoItemsError
from .executor import run_json_key, run_script
from .log import configure_logging, resolve_log_level
from .render import WIDGET_MAX_VISIBLE, RowRenderer, json_rows, render_screen, render_widget_lines, script_rows
from .search import FuzzyMatch
from .session import SessionOutcome, SessionResult, drive_session
from .state import SessionState, json_entry_text, script_text
from .terminal import TerminalController
from .ui_theme import UITheme, available_theme_names, paint, resolve_theme

T = TypeVar("T")

SCRIPTS_TITLE = "Fuzzy NPM Scripts"

EPILOG = """\
modes:
  fjsf                      search and run package scripts (default)
  fjsf <package.json>       search the scripts of one manifest
  fjsf find|f <file>        find every <file> below here and search its JSON
  fjsf path|p <file>        search one JSON file
  fjsf run|r <file> <key>   run scripts.<name> from <file> directly
  fjsf completions [query]  print "name:[workspace] command" lines

keys:
  type to filter, Up/Down to move, Enter to select, q/Esc/Ctrl-C to quit
"""

_FIND_WORDS = {"find", "f"}
_PATH_WORDS = {"path", "p"}
_RUN_WORDS = {"run", "r", "exec", "e"}
_COMPLETION_WORDS = {"completions", "--completions"}
_QUIT_WORDS = {"quit", "q"}
_HELP_WORDS = {"help", "h"}


@dataclass(frozen=True)
class Command:
    """Mode selected by the positional words."""

    mode: str
    file_path: str | None = None
    key: str | None = None
    query: str = ""


def parse_command(words: list[str]) -> Command:
    """Interpret positional words; unknown words fall back to scripts mode."""
    if not words:
        return Command("scripts")
    head, rest = words[0], words[1:]
    if head in _QUIT_WORDS:
        return Command("quit")
    if head in _HELP_WORDS:
        return Command("help")
    if head in _FIND_WORDS:
        return Command("find", file_path=rest[0] if rest else ROOT_MANIFEST)
    if head in _PATH_WORDS:
        return Command("path", file_path=rest[0] if rest else None)
    if head in _RUN_WORDS:
        return Command(
            "run",
            file_path=rest[0] if rest else None,
            key=rest[1] if len(rest) > 1 else None,
        )
    if head in _COMPLETION_WORDS:
        return Command("completions", query=rest[0] if rest else "")
    if head.endswith(".json"):
        return Command("scripts", file_path=head)
    return Command("scripts")


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fjsf",
        description="Fuzzy JSON search & filter: pick package scripts or JSON values interactively.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("words", nargs="*", help="Mode word and its arguments (see modes below).")
    parser.add_argument("-v", "--version", action="version", version=f"fjsf {__version__}")
    parser.add_argument(
        "-w",
        "--widget",
        nargs="?",
        const="",
        default=None,
        metavar="QUERY",
        help="Inline script picker for shell widgets; prints the chosen script name.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default=None, help="Pygments style used to highlight script commands.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--max-visible", type=_positive_int, default=None, help="Matches shown at once.")
    parser.add_argument("--log-level", default=None, help="Loguru level for diagnostics on stderr.")
    parser.add_argument("--cwd", default=None, help="Directory to search from (default: current directory).")
    return parser


def format_completion(script: ScriptEntry) -> str:
    return f"{script.name}:[{script.workspace}] {script.command}"


def completion_lines(scripts: list[ScriptEntry], query: str) -> list[str]:
    """Case-insensitive substring filter over script name and workspace."""
    needle = query.casefold()
    return [
        format_completion(script)
        for script in scripts
        if needle in script.name.casefold() or needle in script.workspace.casefold()
    ]


def _open_terminal(stdout_fd: int | None = None, *, alternate_screen: bool = True) -> TerminalController:
    """Bind a controller to stdin, drawing on ``stdout_fd`` (stdout by default)."""
    if stdout_fd is None:
        stdout_fd = sys.stdout.fileno()
    try:
        return TerminalController(sys.stdin.fileno(), stdout_fd, alternate_screen=alternate_screen)
    except termios.error as exc:
        raise FjsfError("Interactive mode requires a terminal on stdin") from exc


def _terminal_columns() -> int:
    return max(1, shutil.get_terminal_size((80, 24)).columns)


def _run_fullscreen(
    items: Sequence[T],
    get_text: Callable[[T], str],
    title: str,
    row_renderer: RowRenderer,
    theme: UITheme,
    max_visible: int,
) -> SessionResult[T]:
    terminal = _open_terminal()

    def render(state: SessionState[T]) -> None:
        terminal.draw_screen(render_screen(state, title, max_visible, theme, row_renderer, _terminal_columns()))

    return drive_session(items, get_text, render, terminal=terminal)


def _run_scripts(scripts: list[ScriptEntry], cwd: Path, theme: UITheme, max_visible: int, style: str | None) -> int:
    if not scripts:
        raise NoItemsError("No scripts found in this repository")

    def rows(match: FuzzyMatch[ScriptEntry], selected: bool, row_theme: UITheme) -> list[str]:
        return script_rows(match, selected, row_theme, style)

    result = _run_fullscreen(scripts, script_text, SCRIPTS_TITLE, rows, theme, max_visible)
    if result.outcome is SessionOutcome.EXITED:
        return 0
    if result.item is None:
        raise FjsfError("No matching script selected")
    return run_script(result.item, cwd, announce=lambda text: print(paint(text, theme.announce, theme), flush=True))


def _run_json(entries: list[JsonEntry], title: str, theme: UITheme, max_visible: int) -> int:
    if not entries:
        raise NoItemsError("No JSON entries found")
    result = _run_fullscreen(entries, json_entry_text, title, json_rows, theme, max_visible)
    if result.outcome is SessionOutcome.EXITED:
        return 0
    if result.item is None:
        raise FjsfError("No matching entry selected")
    print(result.item.value)
    return 0


def run_widget(scripts: list[ScriptEntry], query: str, cwd: Path, theme: UITheme) -> int:
    """Inline picker drawn on ``/dev/tty`` so stdout stays free for the result."""
    if not scripts:
        return 0
    try:
        tty_fd = os.open("/dev/tty", os.O_WRONLY)
    except OSError as exc:
        raise FjsfError(f"Cannot open terminal: {exc.strerror or exc}") from exc

    try:
        terminal = _open_terminal(tty_fd, alternate_screen=False)

        def render(state: SessionState[ScriptEntry]) -> None:
            terminal.draw_inline(render_widget_lines(state, theme, WIDGET_MAX_VISIBLE, _terminal_columns()))

        result = drive_session(scripts, script_text, render, terminal=terminal, initial_query=query)
    finally:
        os.close(tty_fd)

    if result.outcome is SessionOutcome.EXITED or result.item is None:
        return 0
    if sys.stdout.isatty():
        return run_script(result.item, cwd)
    sys.stdout.write(result.item.name)
    sys.stdout.flush()
    return 0


def dispatch(command: Command, args: argparse.Namespace, cwd: Path) -> int:
    no_color = args.no_color or not sys.stdout.isatty()
    theme = resolve_theme(args.theme or load_theme_name(), no_color=no_color)
    max_visible = args.max_visible or load_max_visible()
    style = args.style or load_style_name()
    cache = JsonCache()

    if command.mode == "quit":
        return 0
    if command.mode == "help":
        print(build_parser().format_help())
        return 0
    if command.mode == "run":
        return run_json_key(command.file_path, command.key, cwd)
    if command.mode == "find":
        entries = discover_files_by_name(command.file_path or ROOT_MANIFEST, cwd, cache.read_json)
        return _run_json(entries, f"Find: {command.file_path}", theme, max_visible)
    if command.mode == "path":
        if not command.file_path:
            raise FjsfError("No file path provided")
        entries = discover_json_entries([command.file_path], cwd, cache.read_json)
        return _run_json(entries, f"Path: {command.file_path}", theme, max_visible)

    if command.file_path:
        scripts = discover_scripts_from_file(command.file_path, cwd, cache.read_json)
    else:
        scripts = discover_scripts(cwd, cache.read_json)

    if command.mode == "completions":
        for line in completion_lines(scripts, command.query):
            print(line)
        return 0
    if args.widget is not None:
        widget_theme = resolve_theme(args.theme or load_theme_name(), no_color=args.no_color)
        return run_widget(scripts, args.widget, cwd, widget_theme)
    return _run_scripts(scripts, cwd, theme, max_visible, style)


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments, run the selected mode and return the exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(resolve_log_level(args.log_level, load_log_level()))
    cwd = Path(args.cwd or Path.cwd())
    if not cwd.is_dir():
        raise SystemExit(f"Path not found: {cwd}")

    command = parse_command(args.words)
    logger.debug("mode={} cwd={}", command.mode, cwd)
    try:
        return dispatch(command, args, cwd)
    except FjsfError as exc:
        error_theme = resolve_theme(None, no_color=args.no_color or not sys.stderr.isatty())
        sys.stderr.write(paint(f"Error: {exc.message}", error_theme.error, error_theme) + "\n")
        return exc.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
