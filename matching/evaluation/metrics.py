"""
Statistics over match results.

Covers:
1. Pool statistics (how many candidates were eligible vs rejected)
2. Rejection reason tallies
3. Tie-break fairness (chi-square test of selection frequencies)
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Any, Optional, Sequence

import numpy as np
from scipy.stats import chisquare

from ..entities.schema import Entity, MatchConfig, MatchDetail
from ..engine.matcher import Matcher

logger = logging.getLogger(__name__)


@dataclass
class PoolStatistics:
    """Counts of eligible and rejected candidates for one match call."""
    total: int
    valid: int
    rejected: int
    valid_pct: float
    rejected_pct: float
    max_score: Optional[int]
    mean_score: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": int(self.total),
            "valid": int(self.valid),
            "rejected": int(self.rejected),
            "valid_pct": float(self.valid_pct),
            "rejected_pct": float(self.rejected_pct),
            "max_score": None if self.max_score is None else int(self.max_score),
            "mean_score": None if self.mean_score is None else float(self.mean_score)
        }


@dataclass
class TieBreakCheck:
    """Result of the tie-break uniformity check."""
    n_trials: int
    n_candidates: int
    chi2: float
    p_value: float
    is_uniform: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_trials": int(self.n_trials),
            "n_candidates": int(self.n_candidates),
            "chi2": float(self.chi2),
            "p_value": float(self.p_value),
            "is_uniform": bool(self.is_uniform)
        }


def compute_pool_statistics(details: Sequence[MatchDetail]) -> PoolStatistics:
    """
    Summarize eligible vs rejected candidates.

    Args:
        details: MatchDetail list from one match call

    Returns:
        PoolStatistics (percentages are 0 for an empty list)
    """
    total = len(details)
    scores = np.array([d.total_score for d in details if not d.rejected], dtype=int)
    valid = len(scores)
    rejected = total - valid

    return PoolStatistics(
        total=total,
        valid=valid,
        rejected=rejected,
        valid_pct=100.0 * valid / total if total else 0.0,
        rejected_pct=100.0 * rejected / total if total else 0.0,
        max_score=int(scores.max()) if valid else None,
        mean_score=float(scores.mean()) if valid else None
    )


def rejection_reason_counts(details: Sequence[MatchDetail]) -> Dict[str, int]:
    """Tally rejection reasons, most frequent first."""
    counts = Counter(d.reject_reason for d in details if d.rejected)
    return dict(counts.most_common())


def check_tie_break_uniformity(
    selection_counts: Dict[str, int],
    alpha: float = 0.01
) -> TieBreakCheck:
    """
    Test whether tied candidates were selected uniformly.

    Uses a chi-square goodness-of-fit test against equal expected counts.

    Args:
        selection_counts: Candidate id -> number of times selected. Tied
            candidates never selected must be present with a count of 0.
        alpha: Significance level below which uniformity is rejected

    Returns:
        TieBreakCheck
    """
    if len(selection_counts) < 2:
        raise ValueError("Need at least two tied candidates to check uniformity")

    observed = np.array(list(selection_counts.values()), dtype=float)
    chi2, p_value = chisquare(observed)

    check = TieBreakCheck(
        n_trials=int(observed.sum()),
        n_candidates=len(observed),
        chi2=float(chi2),
        p_value=float(p_value),
        is_uniform=bool(p_value >= alpha)
    )
    logger.info(
        f"Tie-break check: chi2={check.chi2:.3f}, p={check.p_value:.4f}, "
        f"uniform={check.is_uniform}"
    )
    return check


def run_tie_break_trials(
    seeker: Entity,
    pool: Sequence[Entity],
    seeker_id: str,
    n_trials: int,
    config: Optional[MatchConfig] = None,
    current_time: Optional[int] = None,
    random_seed: Optional[int] = None
) -> Dict[str, int]:
    """
    Repeat a match and count how often each candidate wins.

    Args:
        seeker: Entity requesting the match
        pool: Candidate entities
        seeker_id: Identifier used for blacklist and cooldown lookups
        n_trials: Number of repeated matches
        config: MatchConfig (defaults to DEFAULT_MATCH_CONFIG)
        current_time: Unix timestamp for cooldown checks
        random_seed: Seed for the shared tie-break generator

    Returns:
        Candidate id -> selection count. Every top-scoring candidate is
        present, including those never selected.
    """
    matcher = Matcher(config, random_state=random_seed)
    selected, details = matcher.match_detailed(seeker, pool, seeker_id, current_time)
    if selected is None:
        return {}

    best_score = max(d.total_score for d in details if not d.rejected)
    counts = {
        d.candidate.entity_id: 0
        for d in details
        if not d.rejected and d.total_score == best_score
    }
    counts[selected.entity_id] += 1

    for _ in range(n_trials - 1):
        selected = matcher.match(seeker, pool, seeker_id, current_time)
        counts[selected.entity_id] += 1

    return counts
