"""Search package exports.

Ordered-subsequence matching with per-character positions for highlighting.
"""

from __future__ import annotations

from .fuzzy import (
    CONSECUTIVE_BONUS,
    MATCH_POINTS,
    PREFIX_BONUS,
    FuzzyMatch,
    find_positions,
    fuzzy_search,
    score_positions,
)

__all__ = [
    "CONSECUTIVE_BONUS",
    "MATCH_POINTS",
    "PREFIX_BONUS",
    "FuzzyMatch",
    "find_positions",
    "fuzzy_search",
    "score_positions",
]
