"""Scoring module for the five pairwise score components."""

from .components import (
    score_wait_time,
    score_segment_consistency,
    score_audience_difference,
    score_match_history,
    score_activity,
    LONG_WAIT_SECONDS,
)

__all__ = [
    "score_wait_time",
    "score_segment_consistency",
    "score_audience_difference",
    "score_match_history",
    "score_activity",
    "LONG_WAIT_SECONDS",
]
