from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

MATCH_POINTS = 100
CONSECUTIVE_BONUS = 5
PREFIX_BONUS = 10


@dataclass(frozen=True)
class FuzzyMatch(Generic[T]):
    """One surviving candidate with its score and highlighted text indices."""

    item: T
    score: int
    positions: tuple[int, ...] = ()


def find_positions(text: str, pattern: str) -> tuple[int, ...] | None:
    """Greedy left-to-right subsequence scan, case-insensitive.

    Characters are folded one at a time so returned indices address ``text``
    itself. Returns ``None`` when some pattern character is never consumed.
    """
    if not pattern:
        return ()
    needles = [ch.casefold() for ch in pattern]
    positions: list[int] = []
    cursor = 0
    for idx, ch in enumerate(text):
        if ch.casefold() == needles[cursor]:
            positions.append(idx)
            cursor += 1
            if cursor == len(needles):
                return tuple(positions)
    return None


def score_positions(text: str, pattern: str, positions: tuple[int, ...]) -> int:
    score = MATCH_POINTS * len(positions)
    for prev, cur in zip(positions, positions[1:]):
        if cur == prev + 1:
            score += CONSECUTIVE_BONUS
    if positions and positions[0] == 0:
        score += PREFIX_BONUS
    score -= len(text) - len(pattern)
    return score


def fuzzy_search(
    items: Iterable[T],
    pattern: str,
    get_text: Callable[[T], str],
) -> list[FuzzyMatch[T]]:
    """Rank ``items`` against ``pattern``.

    An empty pattern passes every item through unscored and in input order.
    Otherwise non-matching items are dropped and the rest are sorted by
    descending score; ``sorted`` is stable, so ties keep input order.
    """
    if not pattern:
        return [FuzzyMatch(item=item, score=0) for item in items]

    scored: list[FuzzyMatch[T]] = []
    for item in items:
        text = get_text(item)
        positions = find_positions(text, pattern)
        if positions is None:
            continue
        scored.append(FuzzyMatch(item=item, score=score_positions(text, pattern, positions), positions=positions))
    return sorted(scored, key=lambda match: -match.score)
