"""Tests for the competition ranker: ties, percentile, determinism."""

import pytest

from academy.grading.ranker import positional_percentile, rank_by_score


def test_ranker_ties_share_rank_and_skip():
    """Equal scores share a rank; the next score jumps by the tie size."""
    r = rank_by_score([("a", 90.0), ("b", 90.0), ("c", 70.0), ("d", 60.0)])
    assert [(k, rank) for k, rank, _ in r] == [("a", 1), ("b", 1), ("c", 3), ("d", 4)]


def test_ranker_percentile_is_positional():
    """percentile = rank / n * 100, lowest for the best score."""
    r = rank_by_score([("a", 90.0), ("b", 90.0), ("c", 70.0)])
    pct = {k: p for k, _, p in r}
    assert pct["a"] == pytest.approx(100 / 3)
    assert pct["b"] == pytest.approx(100 / 3)
    assert pct["c"] == 100.0


def test_ranker_sorts_desc_and_keeps_tie_order():
    """Input order is kept among equal scores."""
    r = rank_by_score([("low", 10.0), ("t1", 50.0), ("high", 80.0), ("t2", 50.0)])
    assert [k for k, _, _ in r] == ["high", "t1", "t2", "low"]


def test_ranker_deterministic():
    """Same input -> same output."""
    items = [("x", 3.0), ("y", 5.0), ("z", 3.0)]
    assert rank_by_score(items) == rank_by_score(items)


def test_ranker_single_item():
    """Single item gets rank 1, percentile 100."""
    assert rank_by_score([("u", 50.0)]) == [("u", 1, 100.0)]


def test_ranker_empty():
    """Empty input returns empty list."""
    assert rank_by_score([]) == []


def test_positional_percentile_guard():
    """No division when there are no participants."""
    assert positional_percentile(1, 0) == 0.0
    assert positional_percentile(2, 4) == 50.0
