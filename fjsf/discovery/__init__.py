"""Candidate discovery: package scripts and flattened JSON entries.

This package contains the non-interactive half of fjsf:
- item datatypes shared by the matcher and renderers
- depth-capped directory traversal
- workspace-aware manifest script discovery
- JSON flattening and per-file entry discovery
"""

from __future__ import annotations

from .flatten import flatten_json, format_value
from .fs import MAX_DEPTH, find_files_by_name, find_package_manifests, to_relative
from .json_entries import discover_files_by_name, discover_json_entries, document_workspace
from .scripts import discover_scripts, discover_scripts_from_file, expand_workspaces, workspace_patterns
from .types import ROOT_MANIFEST, ROOT_WORKSPACE, JsonEntry, ReadJson, ScriptEntry

__all__ = [
    "MAX_DEPTH",
    "ROOT_MANIFEST",
    "ROOT_WORKSPACE",
    "JsonEntry",
    "ReadJson",
    "ScriptEntry",
    "discover_files_by_name",
    "discover_json_entries",
    "discover_scripts",
    "discover_scripts_from_file",
    "document_workspace",
    "expand_workspaces",
    "find_files_by_name",
    "find_package_manifests",
    "flatten_json",
    "format_value",
    "to_relative",
    "workspace_patterns",
]
