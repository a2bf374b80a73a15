"""Reporting and statistics for match results."""

from .metrics import (
    PoolStatistics,
    TieBreakCheck,
    compute_pool_statistics,
    rejection_reason_counts,
    check_tie_break_uniformity,
    run_tie_break_trials,
)
from .report import MatchReport, create_match_report, details_to_frame, top_candidates

__all__ = [
    "PoolStatistics",
    "TieBreakCheck",
    "compute_pool_statistics",
    "rejection_reason_counts",
    "check_tie_break_uniformity",
    "run_tie_break_trials",
    "MatchReport",
    "create_match_report",
    "details_to_frame",
    "top_candidates",
]
