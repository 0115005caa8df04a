"""Depth-capped directory traversal shared by manifest and JSON discovery."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

MAX_DEPTH = 5
SKIPPED_DIRECTORY_NAMES = frozenset({"node_modules"})


def should_skip_entry(name: str) -> bool:
    """Return whether traversal must not descend into ``name``."""
    return name in SKIPPED_DIRECTORY_NAMES or name.startswith(".")


def list_directory(directory: Path) -> list[os.DirEntry[str]]:
    """Return directory entries sorted by name, or ``[]`` when unreadable."""
    try:
        with os.scandir(directory) as entries:
            return sorted(entries, key=lambda entry: entry.name)
    except OSError as exc:
        logger.debug("skipping unreadable directory {}: {}", directory, exc)
        return []


def is_directory(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError:
        return False


def is_file(path: Path) -> bool:
    """``Path.is_file`` that treats any OSError (EACCES, ENAMETOOLONG...) as absent."""
    try:
        return path.is_file()
    except OSError as exc:
        logger.debug("cannot stat {}: {}", path, exc)
        return False


def is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as exc:
        logger.debug("cannot stat {}: {}", path, exc)
        return False


def list_subdirectories(directory: Path) -> list[Path]:
    return [Path(entry.path) for entry in list_directory(directory) if is_directory(entry)]


def find_files_by_name(root: Path, file_name: str, max_depth: int = MAX_DEPTH) -> list[Path]:
    """Collect every ``file_name`` under ``root`` in depth-first pre-order.

    ``root`` is depth 0; directories deeper than ``max_depth`` are not listed.
    Within a directory, its own match precedes matches from subdirectories.
    ``node_modules`` and dot-directories are never entered; dotfiles never match.
    """
    found: list[Path] = []
    pending: list[tuple[Path, int]] = [(root, 0)]
    while pending:
        directory, depth = pending.pop()
        if depth > max_depth:
            continue
        subdirectories: list[Path] = []
        for entry in list_directory(directory):
            if should_skip_entry(entry.name):
                continue
            if is_directory(entry):
                subdirectories.append(Path(entry.path))
                continue
            if entry.name == file_name:
                found.append(Path(entry.path))
        # Reverse so the alphabetically first subdirectory is popped next.
        for subdirectory in reversed(subdirectories):
            pending.append((subdirectory, depth + 1))
    return found


def find_package_manifests(root: Path, max_depth: int = MAX_DEPTH) -> list[Path]:
    return find_files_by_name(root, "package.json", max_depth=max_depth)


def to_relative(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` as POSIX text.

    Falls back to the absolute POSIX path when ``path`` is outside ``root``.
    """
    try:
        relative = path.resolve().relative_to(root.resolve())
    except (OSError, ValueError):
        return path.as_posix()
    text = relative.as_posix()
    return "" if text == "." else text
