"""Subsequence fuzzy matching with match positions.

A candidate matches when every query character appears in it, in order,
ignoring case. Matches are ranked by a score that favours matches at the
start of the text, after separators, at camel-case boundaries and in
consecutive runs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

FIRST_CHAR_BONUS = 10
SEPARATOR_BONUS = 8
CAMEL_BONUS = 6
ADJACENT_BONUS = 5
MATCH_SCORE = 1
LEADING_GAP_PENALTY = -1
MAX_LEADING_GAP_PENALTY = -5
GAP_PENALTY = -1

SEPARATORS = frozenset("-_ ./:\\()[]")


@dataclass(frozen=True)
class Match:
    text: str
    index: int
    positions: tuple[int, ...] = ()
    score: int = 0


def _char_bonus(text: str, pos: int) -> int:
    if pos == 0:
        return FIRST_CHAR_BONUS
    prev = text[pos - 1]
    if prev in SEPARATORS:
        return SEPARATOR_BONUS
    if prev.islower() and text[pos].isupper():
        return CAMEL_BONUS
    return 0


def match_positions(query: str, text: str) -> tuple[int, ...] | None:
    """Greedy left-to-right subsequence positions, or None."""
    positions: list[int] = []
    pos = 0
    for ch in query:
        needle = ch.lower()
        # Compare per character so positions index the original text.
        while pos < len(text) and text[pos].lower() != needle:
            pos += 1
        if pos == len(text):
            return None
        positions.append(pos)
        pos += 1
    return tuple(positions)


def score_positions(text: str, positions: Sequence[int]) -> int:
    if not positions:
        return 0
    score = 0
    prev = -1
    for pos in positions:
        score += MATCH_SCORE + _char_bonus(text, pos)
        if prev >= 0:
            if pos == prev + 1:
                score += ADJACENT_BONUS
            else:
                score += GAP_PENALTY
        prev = pos
    score += max(MAX_LEADING_GAP_PENALTY, LEADING_GAP_PENALTY * positions[0])
    return score


def find(query: str, candidates: Sequence[str]) -> list[Match]:
    """Match ``query`` against ``candidates``.

    An empty query returns every candidate in original order with no
    positions. Otherwise only matching candidates are returned, best score
    first; ties keep the original order.
    """
    if not query:
        return [Match(text, index) for index, text in enumerate(candidates)]
    matches = []
    for index, text in enumerate(candidates):
        positions = match_positions(query, text)
        if positions is None:
            continue
        matches.append(Match(text, index, positions, score_positions(text, positions)))
    matches.sort(key=lambda match: (-match.score, match.index))
    return matches


__all__ = ["Match", "find", "match_positions", "score_positions"]
