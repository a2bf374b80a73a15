"""
Single-seeker matching.

For every candidate in the pool the matcher runs the eligibility filter,
scores the survivors, and records a MatchDetail either way. The best-scoring
eligible candidates are collected in one pass, and one of them is chosen
uniformly at random.

Key Design Decisions:
- Every candidate gets a MatchDetail, so callers can explain a failed match
- Ties at the top score are broken at random so that first-seen order
  never decides between equal candidates
- The random source is injectable for deterministic tests
"""

import logging
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..entities.schema import (
    Entity,
    MatchConfig,
    MatchDetail,
    Eligible,
    DEFAULT_MATCH_CONFIG,
)
from ..filtering.eligibility import check_eligibility
from ..scoring.components import (
    score_wait_time,
    score_segment_consistency,
    score_audience_difference,
    score_match_history,
    score_activity,
)
from ..segmentation.classifier import get_segment

logger = logging.getLogger(__name__)


def check_random_state(random_state=None):
    """
    Turn a seed into a random source.

    Args:
        random_state: None (fresh entropy), an integer seed, or any object
            exposing numpy's ``randint(high)``

    Returns:
        Object with a ``randint`` method
    """
    if random_state is None:
        return np.random.RandomState()
    if isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        return np.random.RandomState(random_state)
    if hasattr(random_state, "randint"):
        return random_state
    raise ValueError(f"Cannot use {random_state!r} as a random state")


def score_candidate(
    seeker: Entity,
    candidate: Entity,
    seeker_id: str,
    config: MatchConfig,
    current_time: int,
    seeker_segment: Optional[int] = None
) -> MatchDetail:
    """
    Evaluate one candidate against the seeker.

    Args:
        seeker: Entity requesting the match
        candidate: Pool member under evaluation
        seeker_id: Identifier used for blacklist and cooldown lookups
        config: Matching configuration
        current_time: Unix timestamp for the cooldown check
        seeker_segment: Precomputed seeker tier (computed if omitted)

    Returns:
        MatchDetail with either an Eligible total or a Rejected reason
    """
    if seeker_segment is None:
        seeker_segment = get_segment(seeker.mic_count)

    detail = MatchDetail(
        candidate=candidate,
        seeker_segment=seeker_segment,
        candidate_segment=get_segment(candidate.mic_count)
    )

    rejection = check_eligibility(
        seeker, candidate, seeker_id, config, current_time,
        seeker_segment=seeker_segment,
        candidate_segment=detail.candidate_segment
    )
    if rejection is not None:
        detail.outcome = rejection
        return detail

    detail.wait_score = score_wait_time(candidate.wait_seconds, config)
    segment_outcome = score_segment_consistency(
        seeker_segment, detail.candidate_segment, candidate.wait_seconds
    )
    if not isinstance(segment_outcome, Eligible):
        logger.debug(f"Candidate {candidate.entity_id} rejected: {segment_outcome.reason}")
        detail.outcome = segment_outcome
        return detail

    detail.segment_score = segment_outcome.score
    detail.audience_score = score_audience_difference(seeker.audience_count, candidate.audience_count)
    detail.history_score = score_match_history(candidate.match_history)
    detail.activity_score = score_activity(candidate.activity_level)

    detail.outcome = Eligible(
        detail.wait_score + detail.segment_score + detail.audience_score
        + detail.history_score + detail.activity_score
    )
    return detail


class Matcher:
    """
    Matches one seeker against a candidate pool.

    Attributes:
        config: MatchConfig with matching parameters
        random_state: Random source used for tie-breaking
    """

    def __init__(self, config: Optional[MatchConfig] = None, random_state=None):
        """
        Initialize the matcher.

        Args:
            config: MatchConfig instance (defaults to DEFAULT_MATCH_CONFIG)
            random_state: Seed or random source for tie-breaking
        """
        self.config = config if config is not None else DEFAULT_MATCH_CONFIG
        self.config.validate()
        self.random_state = check_random_state(random_state)

    def match_detailed(
        self,
        seeker: Entity,
        pool: Sequence[Entity],
        seeker_id: str,
        current_time: Optional[int] = None
    ) -> Tuple[Optional[Entity], List[MatchDetail]]:
        """
        Find the best candidate and explain every decision.

        Args:
            seeker: Entity requesting the match
            pool: Candidate entities
            seeker_id: Identifier used for blacklist and cooldown lookups
            current_time: Unix timestamp for cooldown checks (defaults to now)

        Returns:
            Tuple of (selected candidate or None, one MatchDetail per candidate)
        """
        if len(pool) == 0:
            return None, []

        if current_time is None:
            current_time = int(time.time())
        seeker_segment = get_segment(seeker.mic_count)

        details = []
        best_score = None
        best_candidates = []

        for candidate in pool:
            detail = score_candidate(
                seeker, candidate, seeker_id, self.config, current_time, seeker_segment
            )
            details.append(detail)

            if detail.rejected:
                continue

            if best_score is None or detail.total_score > best_score:
                best_score = detail.total_score
                best_candidates = [candidate]
            elif detail.total_score == best_score:
                best_candidates.append(candidate)

        if not best_candidates:
            logger.info(f"No eligible candidate for {seeker.entity_id} among {len(pool)}")
            return None, details

        selected = best_candidates[self.random_state.randint(len(best_candidates))]
        logger.info(
            f"Matched {seeker.entity_id} with {selected.entity_id} "
            f"(score={best_score}, tied={len(best_candidates)}, pool={len(pool)})"
        )
        return selected, details

    def match(
        self,
        seeker: Entity,
        pool: Sequence[Entity],
        seeker_id: str,
        current_time: Optional[int] = None
    ) -> Optional[Entity]:
        """Find the best candidate without returning diagnostics."""
        selected, _ = self.match_detailed(seeker, pool, seeker_id, current_time)
        return selected


def match_detailed(
    seeker: Entity,
    pool: Sequence[Entity],
    seeker_id: str,
    config: Optional[MatchConfig] = None,
    current_time: Optional[int] = None,
    random_state=None
) -> Tuple[Optional[Entity], List[MatchDetail]]:
    """
    Convenience wrapper around Matcher.match_detailed.

    Args:
        seeker: Entity requesting the match
        pool: Candidate entities
        seeker_id: Identifier used for blacklist and cooldown lookups
        config: MatchConfig (defaults to DEFAULT_MATCH_CONFIG)
        current_time: Unix timestamp for cooldown checks (defaults to now)
        random_state: Seed or random source for tie-breaking

    Returns:
        Tuple of (selected candidate or None, list of MatchDetail)
    """
    matcher = Matcher(config, random_state=random_state)
    return matcher.match_detailed(seeker, pool, seeker_id, current_time)


def match(
    seeker: Entity,
    pool: Sequence[Entity],
    seeker_id: str,
    config: Optional[MatchConfig] = None,
    current_time: Optional[int] = None,
    random_state=None
) -> Optional[Entity]:
    """Convenience wrapper around Matcher.match."""
    matcher = Matcher(config, random_state=random_state)
    return matcher.match(seeker, pool, seeker_id, current_time)
