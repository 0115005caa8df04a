"""Hand-off of a confirmed script to the project's package manager.

Detects the package manager from lock files, builds the run command for root
or workspace scripts, and runs it with inherited stdio.
"""

from __future__ import annotations

import enum
import shlex
import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path

from loguru import logger

from .cache import read_json_uncached
from .discovery import ScriptEntry
from .discovery.fs import is_file
from .errors import FjsfError

SCRIPTS_PREFIX = "scripts."


class PackageManager(str, enum.Enum):
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"


# Checked in order; the first lock file present wins.
LOCK_FILES: tuple[tuple[str, PackageManager], ...] = (
    ("bun.lockb", PackageManager.BUN),
    ("bun.lock", PackageManager.BUN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("yarn.lock", PackageManager.YARN),
    ("package-lock.json", PackageManager.NPM),
)

Runner = Callable[..., subprocess.CompletedProcess]


def detect_package_manager(cwd: Path | str) -> PackageManager:
    base = Path(cwd)
    for lock_name, manager in LOCK_FILES:
        if is_file(base / lock_name):
            return manager
    return PackageManager.NPM


def build_run_command(script: ScriptEntry, manager: PackageManager) -> list[str]:
    """Build argv for ``script``; workspace scripts use the manager's filter flag."""
    if script.is_root:
        return build_simple_run_command(manager, script.name)
    workspace = script.workspace
    if manager is PackageManager.BUN:
        return ["bun", "run", "--filter", workspace, script.name]
    if manager is PackageManager.PNPM:
        return ["pnpm", "--filter", workspace, "run", script.name]
    if manager is PackageManager.YARN:
        return ["yarn", "workspace", workspace, script.name]
    return ["npm", "run", "--workspace", workspace, script.name]


def build_simple_run_command(manager: PackageManager, script_name: str) -> list[str]:
    if manager is PackageManager.YARN:
        return ["yarn", script_name]
    return [manager.value, "run", script_name]


def _spawn(cmd: list[str], cwd: Path, runner: Runner) -> int:
    logger.debug("spawning {} in {}", cmd, cwd)
    try:
        completed = runner(cmd, cwd=cwd, check=False)
    except FileNotFoundError as exc:
        raise FjsfError(f"Could not start {cmd[0]}: {exc.strerror or exc}", exit_code=127) from exc
    return completed.returncode


def run_script(
    script: ScriptEntry,
    cwd: Path | str,
    announce: Callable[[str], None] = print,
    runner: Runner = subprocess.run,
) -> int:
    """Run ``script`` through the detected package manager; returns its exit code."""
    base = Path(cwd)
    cmd = build_run_command(script, detect_package_manager(base))
    announce(f"Running: {shlex.join(cmd)}")
    return _spawn(cmd, base, runner)


def resolve_nested_value(document: object, dotted_path: str) -> object:
    """Walk ``document`` along dot-separated object keys.

    Raises ``KeyError`` when a segment is missing or a parent is not an object.
    """
    current = document
    for key in dotted_path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            raise KeyError(dotted_path)
        current = current[key]
    return current


def run_json_key(
    file_path: str | None,
    key: str | None,
    cwd: Path | str,
    announce: Callable[[str], None] = print,
    runner: Runner = subprocess.run,
) -> int:
    """Run the script stored at ``key`` (``scripts.<name>``) inside ``file_path``.

    Raises ``FjsfError`` for missing arguments, unreadable files, absent keys
    and keys that do not name a string script.
    """
    if not file_path:
        raise FjsfError("No file path provided")
    if not key:
        raise FjsfError("No key provided")

    path = Path(file_path)
    if not path.is_absolute():
        path = Path(cwd) / path
    if not is_file(path):
        raise FjsfError(f"Could not read {file_path}")
    document = read_json_uncached(path)
    if document is None:
        raise FjsfError(f"Invalid JSON in {file_path}")

    try:
        value = resolve_nested_value(document, key)
    except KeyError:
        raise FjsfError(f'Key "{key}" not found in {file_path}') from None
    if not isinstance(value, str):
        raise FjsfError(f'Cannot run "{key}" - value is not a string')
    if not key.startswith(SCRIPTS_PREFIX):
        raise FjsfError(f'Cannot run "{key}" - not a script (must start with "{SCRIPTS_PREFIX}")')

    package_dir = path.parent
    cmd = build_simple_run_command(detect_package_manager(package_dir), key[len(SCRIPTS_PREFIX):])
    announce(f"Running: {shlex.join(cmd)}")
    announce(f"From: {file_path}")
    return _spawn(cmd, package_dir, runner)
