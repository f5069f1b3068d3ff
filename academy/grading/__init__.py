"""Grading engine: competition ranking, exam summaries, school breakdowns."""

from academy.grading.calculator import calculate
from academy.grading.summary import breakdown, summarize

__all__ = ["calculate", "summarize", "breakdown"]
