"""Mtime-keyed JSON document cache.

Discovery receives ``read_json`` as a plain callable, so a ``JsonCache`` can be
passed in when repeated reads of the same manifests are expected.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from loguru import logger


def _file_mtime(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except OSError:
        return 0


def read_json_uncached(path: Path | str) -> object | None:
    """Read and parse ``path``; any read or decode failure yields ``None``."""
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError, RecursionError) as exc:
        logger.debug("could not load JSON from {}: {}", path, exc)
        return None


@dataclass(frozen=True)
class CacheEntry:
    data: object
    mtime: int


class JsonCache:
    """Memoise parsed JSON documents until their modification time changes."""

    def __init__(self) -> None:
        self._entries: dict[Path, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, path: Path | str) -> CacheEntry | None:
        return self._entries.get(Path(path))

    def set(self, path: Path | str, data: object, mtime: int) -> None:
        self._entries[Path(path)] = CacheEntry(data=data, mtime=mtime)

    def clear(self) -> None:
        self._entries.clear()

    def read_json(self, path: Path | str) -> object | None:
        """Return the parsed document at ``path``, reusing a still-valid entry.

        An entry stays valid while the file's mtime is positive and equal to
        the one recorded at load time. Failed loads evict the entry.
        """
        key = Path(path)
        cached = self._entries.get(key)
        if cached is not None:
            current = _file_mtime(key)
            if current > 0 and current == cached.mtime:
                return cached.data

        data = read_json_uncached(key)
        if data is None:
            self._entries.pop(key, None)
            return None

        self.set(key, data, _file_mtime(key))
        return data
