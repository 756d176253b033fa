"""Fuzzy scoring and ranking for try-directory names.

Scores reward dated names, subsequence matches that start words or sit close
together, short names, and recent activity. A non-empty query that is not a
subsequence of the name scores exactly ``0.0`` and is filtered out.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import replace

from .candidates import Candidate

DATE_TOKEN_BONUS = 2.0
CREATED_WEIGHT = 2.0
MODIFIED_WEIGHT = 3.0
_ASCII_ALNUM = frozenset("abcdefghijklmnopqrstuvwxyz0123456789")


def _parses_as_int(text: str) -> bool:
    try:
        int(text)
    except ValueError:
        return False
    return True


def is_date_token_name(name: str) -> bool:
    """Return whether ``name`` starts with a ``YYYY-MM-DD-`` token."""
    return (
        len(name) >= 11
        and name[4] == "-"
        and name[7] == "-"
        and name[10] == "-"
        and _parses_as_int(name[:4])
    )


def split_date_name(name: str) -> tuple[str, str] | None:
    """Split ``2024-03-02-demo`` into ``("2024-03-02", "demo")``."""
    if not is_date_token_name(name):
        return None
    return name[:10], name[11:]


def match_positions(text: str, query: str) -> list[int]:
    """Greedy case-insensitive subsequence alignment of ``query`` in ``text``.

    Returns the matched character positions in order. The list is shorter
    than ``query`` when the query is not a full subsequence.
    """
    needles = query.lower()
    positions: list[int] = []
    if not needles:
        return positions
    idx = 0
    for pos, ch in enumerate(text):
        if ch.lower() == needles[idx]:
            positions.append(pos)
            idx += 1
            if idx >= len(needles):
                break
    return positions


def _is_word_start(text: str, pos: int) -> bool:
    return pos == 0 or text[pos - 1].lower() not in _ASCII_ALNUM


def fuzzy_match_score(name: str, query: str) -> float:
    """Score the subsequence match alone; ``0.0`` when ``query`` does not match."""
    needles = query.lower()
    positions = match_positions(name, needles)
    if not needles or len(positions) < len(needles):
        return 0.0
    points = 0.0
    last_pos = -1
    for pos in positions:
        points += 1.0
        if _is_word_start(name, pos):
            points += 1.0
        if last_pos >= 0:
            gap = pos - last_pos - 1
            points += 1.0 / math.sqrt(gap + 1)
        last_pos = pos
    # Can exceed 1.0 for short early matches; ranking only depends on order.
    points *= len(needles) / (last_pos + 1)
    points *= 10.0 / (len(name) + 10.0)
    return points


def recency_bonus(created_at: float, modified_at: float, now: float) -> float:
    bonus = 0.0
    if created_at > 0:
        days = (now - created_at) / 86400.0
        bonus += CREATED_WEIGHT / math.sqrt(max(0.0, days) + 1)
    if modified_at > 0:
        hours = (now - modified_at) / 3600.0
        bonus += MODIFIED_WEIGHT / math.sqrt(max(0.0, hours) + 1)
    return bonus


def score(name: str, query: str, created_at: float, modified_at: float, now: float) -> float:
    """Rank ``name`` against ``query``; higher is better."""
    total = DATE_TOKEN_BONUS if is_date_token_name(name) else 0.0
    if query:
        match = fuzzy_match_score(name, query)
        if match <= 0.0:
            return 0.0
        total += match
    return total + recency_bonus(created_at, modified_at, now)


def rank_candidates(candidates: Iterable[Candidate], query: str, now: float) -> list[Candidate]:
    """Attach fresh scores and order candidates best-first.

    With a query, candidates scoring ``<= 0`` are dropped. The sort is stable.
    """
    scored = [
        replace(c, score=score(c.basename, query, c.created_at, c.modified_at, now))
        for c in candidates
    ]
    if query:
        scored = [c for c in scored if c.score > 0]
    return sorted(scored, key=lambda c: -c.score)
