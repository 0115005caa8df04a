"""Interactive search loop.

Blocks on one input chunk at a time, decodes it, applies the matching state
transition and re-renders. Exit and confirm are the only terminal states.
"""

from __future__ import annotations

import contextlib
import enum
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

from .input import DecodedInput, InputAction, decode_input, read_chunk
from .state import (
    SessionState,
    append_char,
    create_initial,
    delete_char,
    get_selected,
    update_query,
    update_selection,
)

T = TypeVar("T")


class SessionOutcome(enum.Enum):
    EXITED = "exited"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class SessionResult(Generic[T]):
    """How the session ended and, when confirmed, the selected item."""

    outcome: SessionOutcome
    item: T | None = None
    state: SessionState[T] | None = None


@dataclass(frozen=True)
class Transition(Generic[T]):
    state: SessionState[T]
    outcome: SessionOutcome | None = None
    changed: bool = False


def apply_input(state: SessionState[T], decoded: DecodedInput) -> Transition[T]:
    """Apply one decoded action without performing any I/O."""
    action = decoded.action
    if action is InputAction.EXIT:
        return Transition(state, SessionOutcome.EXITED)
    if action is InputAction.CONFIRM:
        return Transition(state, SessionOutcome.CONFIRMED)
    if action is InputAction.MOVE_UP:
        return Transition(update_selection(state, -1), changed=True)
    if action is InputAction.MOVE_DOWN:
        return Transition(update_selection(state, 1), changed=True)
    if action is InputAction.DELETE:
        updated = delete_char(state)
        return Transition(updated, changed=updated is not state)
    if action is InputAction.INSERT:
        return Transition(append_char(state, decoded.char), changed=True)
    return Transition(state)


def drive_session(
    items: Sequence[T],
    get_text: Callable[[T], str],
    render: Callable[[SessionState[T]], None],
    *,
    read: Callable[[], bytes] | None = None,
    terminal: Any | None = None,
    initial_query: str = "",
) -> SessionResult[T]:
    """Run the loop to completion and report the outcome.

    ``terminal`` only needs a ``raw_mode()`` context manager; when omitted the
    caller owns terminal setup. End of input counts as an exit.
    """
    reader = read or (lambda: read_chunk(sys.stdin.fileno()))
    state = create_initial(items, get_text)
    if initial_query:
        state = update_query(state, initial_query)

    mode = terminal.raw_mode() if terminal is not None else contextlib.nullcontext()
    with mode:
        render(state)
        while True:
            chunk = reader()
            if not chunk:
                logger.debug("input closed; leaving session")
                return SessionResult(SessionOutcome.EXITED, state=state)
            transition = apply_input(state, decode_input(chunk))
            state = transition.state
            if transition.outcome is SessionOutcome.EXITED:
                return SessionResult(SessionOutcome.EXITED, state=state)
            if transition.outcome is SessionOutcome.CONFIRMED:
                return SessionResult(SessionOutcome.CONFIRMED, get_selected(state), state=state)
            if transition.changed:
                render(state)


def run_session(
    items: Sequence[T],
    get_text: Callable[[T], str],
    render: Callable[[SessionState[T]], None],
    **kwargs: Any,
) -> T | None:
    """Convenience wrapper returning only the confirmed item (or ``None``)."""
    return drive_session(items, get_text, render, **kwargs).item
