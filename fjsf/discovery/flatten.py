"""JSON document flattening into searchable ``JsonEntry`` rows."""

from __future__ import annotations

import json
from collections.abc import Mapping

from .types import JsonEntry


def format_value(value: object) -> str:
    """Render a JSON value for display.

    Strings pass through, ``null``/booleans use JSON spelling, integral floats
    drop their fractional part, and containers collapse to ``Array(n)`` /
    ``Object(n)``.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return json.dumps(value)
    if isinstance(value, list):
        return f"Array({len(value)})"
    if isinstance(value, Mapping):
        return f"Object({len(value)})"
    return str(value)


def _children(value: object, prefix: str) -> list[tuple[str, str, object]]:
    """Return ``(path, key, child)`` triples for a container, ``[]`` otherwise."""
    if isinstance(value, Mapping):
        return [(f"{prefix}.{key}" if prefix else str(key), str(key), child) for key, child in value.items()]
    if isinstance(value, list):
        return [(f"{prefix}[{idx}]", f"[{idx}]", item) for idx, item in enumerate(value)]
    return []


def flatten_json(document: object, file_path: str, workspace: str) -> list[JsonEntry]:
    """Flatten ``document`` depth-first, parents before their children.

    The root container itself gets no entry; a top-level array flattens to
    ``[0]``, ``[1]``... and a bare scalar document yields nothing.
    """
    out: list[JsonEntry] = []
    # Worklist instead of recursion; documents may nest past the recursion limit.
    pending = list(reversed(_children(document, "")))
    while pending:
        path, key, value = pending.pop()
        out.append(JsonEntry(path=path, value=format_value(value), key=key, file_path=file_path, workspace=workspace))
        pending.extend(reversed(_children(value, path)))
    return out
