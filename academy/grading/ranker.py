"""Competition ranker with positional percentile. Deterministic, stable on ties."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TypeVar

K = TypeVar("K", bound=Hashable)


def positional_percentile(rank: int, total: int) -> float:
    """
    Positional percentile: rank / total * 100.

    Lower is better; the top scorer gets the smallest value. This is not a
    cumulative-distribution percentile.
    """
    if total <= 0:
        return 0.0
    return rank / total * 100


def rank_by_score(items: Sequence[tuple[K, float]]) -> list[tuple[K, int, float]]:
    """
    Compute competition rank (1=best) and positional percentile from (key, score) pairs.

    - Sort by score desc; equal scores keep their input order (stable sort).
    - rank = 1 + number of strictly greater scores, so ties share a rank and the
      next distinct score skips ahead by the size of the tie group.
    - percentile = rank / n * 100.

    Returns:
        List of (key, rank, percentile) in ranked order.
    """
    if not items:
        return []

    sorted_items = sorted(items, key=lambda x: -x[1])

    n = len(sorted_items)
    result: list[tuple[K, int, float]] = []

    rank = 0
    previous: float | None = None
    for idx, (key, score) in enumerate(sorted_items):
        if previous is None or score != previous:
            rank = idx + 1
            previous = score
        result.append((key, rank, positional_percentile(rank, n)))

    return result
