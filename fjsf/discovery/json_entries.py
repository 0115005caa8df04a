"""JSON-entry discovery for the ``find`` and ``path`` modes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from loguru import logger

from ..cache import read_json_uncached
from .flatten import flatten_json
from .fs import MAX_DEPTH, find_files_by_name, is_file, to_relative
from .types import ROOT_MANIFEST, ROOT_WORKSPACE, JsonEntry, ReadJson


def document_workspace(document: object, relative_path: str) -> str:
    """Name the workspace a document belongs to.

    Uses the document's string ``name`` field, then ``root`` for the working
    directory's own ``package.json``, then the relative file path.
    """
    if isinstance(document, Mapping):
        name = document.get("name")
        if isinstance(name, str):
            return name
    if relative_path == ROOT_MANIFEST:
        return ROOT_WORKSPACE
    return relative_path


def discover_json_entries(
    file_paths: Iterable[Path | str],
    cwd: Path | str,
    read_json: ReadJson | None = None,
) -> list[JsonEntry]:
    """Flatten every readable JSON file in ``file_paths``.

    Missing, unreadable and malformed files are skipped silently.
    """
    reader = read_json or read_json_uncached
    base = Path(cwd)
    entries: list[JsonEntry] = []
    for raw_path in file_paths:
        path = Path(raw_path)
        if not path.is_absolute():
            path = base / path
        if not is_file(path):
            logger.debug("skipping missing JSON file {}", path)
            continue
        document = reader(path)
        if document is None:
            continue
        relative_path = to_relative(path, base)
        entries.extend(flatten_json(document, relative_path, document_workspace(document, relative_path)))
    return entries


def discover_files_by_name(
    file_name: str,
    cwd: Path | str,
    read_json: ReadJson | None = None,
    max_depth: int = MAX_DEPTH,
) -> list[JsonEntry]:
    base = Path(cwd)
    return discover_json_entries(find_files_by_name(base, file_name, max_depth=max_depth), base, read_json)
