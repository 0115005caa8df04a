"""Package-manifest script discovery.

Reads the root ``package.json``, expands its workspace globs (or, without
workspaces, scans nested manifests) and emits one ``ScriptEntry`` per script.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from loguru import logger

from ..cache import read_json_uncached
from .flatten import format_value
from .fs import find_package_manifests, is_dir, is_file, list_subdirectories, to_relative
from .types import ROOT_MANIFEST, ROOT_WORKSPACE, ReadJson, ScriptEntry


def _load_manifest(path: Path, read_json: ReadJson) -> Mapping[str, object] | None:
    if not is_file(path):
        return None
    data = read_json(path)
    if not isinstance(data, Mapping):
        if data is not None:
            logger.debug("ignoring {}: top-level JSON value is not an object", path)
        return None
    return data


def workspace_patterns(manifest: Mapping[str, object]) -> list[str]:
    """Normalize ``workspaces`` into a list of pattern strings.

    Accepts a bare list of patterns or ``{"packages": [...]}``. Any other
    shape, and any non-string pattern, is ignored.
    """
    workspaces = manifest.get("workspaces")
    if isinstance(workspaces, Mapping):
        workspaces = workspaces.get("packages")
    if not isinstance(workspaces, list):
        return []
    return [pattern for pattern in workspaces if isinstance(pattern, str) and pattern]


def _expand_glob_pattern(root: Path, pattern: str) -> list[Path]:
    base = root / pattern.split("*", 1)[0]
    if not is_dir(base):
        return []
    return [path for path in list_subdirectories(base) if is_file(path / ROOT_MANIFEST)]


def _expand_direct_pattern(root: Path, pattern: str) -> list[Path]:
    directory = root / pattern
    return [directory] if is_file(directory / ROOT_MANIFEST) else []


def expand_workspaces(root: Path, patterns: list[str]) -> list[Path]:
    """Resolve workspace patterns into directories that hold a manifest.

    A pattern containing ``*`` lists the subdirectories of everything before
    the first ``*``; other patterns name one directory directly.
    """
    directories: list[Path] = []
    for pattern in patterns:
        if "*" in pattern:
            directories.extend(_expand_glob_pattern(root, pattern))
        else:
            directories.extend(_expand_direct_pattern(root, pattern))
    return directories


def _scripts_from_manifest(
    manifest: Mapping[str, object],
    workspace: str,
    package_path: str,
) -> list[ScriptEntry]:
    scripts = manifest.get("scripts")
    if not isinstance(scripts, Mapping):
        return []
    return [
        ScriptEntry(
            name=str(name),
            command=format_value(command),
            workspace=workspace,
            package_path=package_path,
        )
        for name, command in scripts.items()
    ]


def _manifest_name(manifest: Mapping[str, object]) -> str | None:
    name = manifest.get("name")
    return name if isinstance(name, str) and name else None


def _nested_scripts(cwd: Path, manifest_path: Path, read_json: ReadJson) -> list[ScriptEntry]:
    manifest = _load_manifest(manifest_path, read_json)
    if manifest is None:
        return []
    workspace = _manifest_name(manifest) or to_relative(manifest_path.parent, cwd) or ROOT_WORKSPACE
    return _scripts_from_manifest(manifest, workspace, to_relative(manifest_path, cwd))


def discover_scripts(start_dir: Path | str, read_json: ReadJson | None = None) -> list[ScriptEntry]:
    """Discover scripts of the project rooted at ``start_dir``.

    Absence is never an error: a missing or malformed root manifest yields an
    empty list, and unreadable nested manifests are skipped.
    """
    reader = read_json or read_json_uncached
    cwd = Path(start_dir)
    root_manifest_path = cwd / ROOT_MANIFEST
    root_manifest = _load_manifest(root_manifest_path, reader)
    if root_manifest is None:
        logger.debug("no usable {} in {}", ROOT_MANIFEST, cwd)
        return []

    scripts = _scripts_from_manifest(
        root_manifest,
        _manifest_name(root_manifest) or ROOT_WORKSPACE,
        ROOT_MANIFEST,
    )

    patterns = workspace_patterns(root_manifest)
    if patterns:
        for directory in expand_workspaces(cwd, patterns):
            scripts.extend(_nested_scripts(cwd, directory / ROOT_MANIFEST, reader))
        return scripts

    root_resolved = root_manifest_path.resolve()
    for manifest_path in find_package_manifests(cwd):
        if manifest_path.resolve() == root_resolved:
            continue
        scripts.extend(_nested_scripts(cwd, manifest_path, reader))
    logger.debug("discovered {} scripts under {}", len(scripts), cwd)
    return scripts


def discover_scripts_from_file(
    manifest_path: Path | str,
    cwd: Path | str,
    read_json: ReadJson | None = None,
) -> list[ScriptEntry]:
    """Return the scripts of one explicitly named manifest."""
    reader = read_json or read_json_uncached
    base = Path(cwd)
    path = Path(manifest_path)
    if not path.is_absolute():
        path = base / path
    return _nested_scripts(base, path, reader)
