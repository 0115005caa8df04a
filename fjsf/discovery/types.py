"""Candidate item datatypes produced by discovery."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

ROOT_WORKSPACE = "root"
ROOT_MANIFEST = "package.json"

ReadJson = Callable[[Path], object | None]


@dataclass(frozen=True)
class ScriptEntry:
    """One named script from a package manifest."""

    name: str
    command: str
    workspace: str
    package_path: str

    @property
    def is_root(self) -> bool:
        return self.package_path == ROOT_MANIFEST


@dataclass(frozen=True)
class JsonEntry:
    """One flattened node of a JSON document.

    ``path`` uses dotted keys and bracketed indices (``scripts.build``,
    ``keywords[0]``); ``value`` is already formatted for display.
    """

    path: str
    value: str
    key: str
    file_path: str
    workspace: str


__all__ = [
    "ROOT_MANIFEST",
    "ROOT_WORKSPACE",
    "JsonEntry",
    "ReadJson",
    "ScriptEntry",
]
