"""Immutable interactive search state and its transitions.

Every transition returns a fresh ``SessionState``; renderers and tests rely on
comparing the before/after snapshots.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Generic, TypeVar

from .discovery import JsonEntry, ScriptEntry
from .search import FuzzyMatch, fuzzy_search

T = TypeVar("T")


@dataclass(frozen=True)
class SessionState(Generic[T]):
    """Query, ranked matches, selection and the original item list."""

    query: str
    selected_index: int
    matches: tuple[FuzzyMatch[T], ...]
    items: tuple[T, ...]
    get_text: Callable[[T], str] = field(default=str, compare=False, repr=False)


def _max_index(matches: Sequence[object]) -> int:
    return max(0, len(matches) - 1)


def create_initial(items: Sequence[T], get_text: Callable[[T], str] = str) -> SessionState[T]:
    frozen_items = tuple(items)
    return SessionState(
        query="",
        selected_index=0,
        matches=tuple(fuzzy_search(frozen_items, "", get_text)),
        items=frozen_items,
        get_text=get_text,
    )


def update_query(state: SessionState[T], query: str) -> SessionState[T]:
    """Re-rank items for ``query`` and move the selection back to the top."""
    return replace(
        state,
        query=query,
        selected_index=0,
        matches=tuple(fuzzy_search(state.items, query, state.get_text)),
    )


def update_selection(state: SessionState[T], delta: int) -> SessionState[T]:
    """Move the selection by ``delta``, clamped to the match list (no wrap)."""
    index = max(0, min(_max_index(state.matches), state.selected_index + delta))
    return replace(state, selected_index=index)


def append_char(state: SessionState[T], ch: str) -> SessionState[T]:
    return update_query(state, state.query + ch)


def delete_char(state: SessionState[T]) -> SessionState[T]:
    if not state.query:
        return state
    return update_query(state, state.query[:-1])


def get_selected(state: SessionState[T]) -> T | None:
    if not state.matches:
        return None
    return state.matches[state.selected_index].item


def selected_match(state: SessionState[T]) -> FuzzyMatch[T] | None:
    if not state.matches:
        return None
    return state.matches[state.selected_index]


def script_text(entry: ScriptEntry) -> str:
    return f"{entry.name} {entry.workspace}"


def json_entry_text(entry: JsonEntry) -> str:
    return f"{entry.path} {entry.workspace}"
