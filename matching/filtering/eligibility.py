"""
Hard eligibility constraints applied before scoring.

A candidate is rejected outright when:
1. The candidate has blacklisted the seeker
2. The pair was matched less than cooldown_seconds ago
3. The candidate has waited under a minute and the tier gap exceeds 1

The third check only fires for a gap > 1. A gap of exactly 1 under a short
wait is rejected later by the segment-consistency scorer instead.
"""

import logging
from typing import Optional

from ..entities.schema import Entity, MatchConfig, Rejected
from ..scoring.components import LONG_WAIT_SECONDS
from ..segmentation.classifier import get_segment, segment_gap

logger = logging.getLogger(__name__)

BLACKLIST_REASON = "blocked by candidate"


def check_blacklist(candidate: Entity, seeker_id: str) -> Optional[Rejected]:
    """Reject if the candidate blocks the seeker."""
    if seeker_id in candidate.blacklist:
        return Rejected(BLACKLIST_REASON)
    return None


def check_cooldown(
    candidate: Entity,
    seeker_id: str,
    config: MatchConfig,
    current_time: int
) -> Optional[Rejected]:
    """
    Reject if the pair was matched too recently.

    Elapsed time exactly equal to the cooldown is allowed.
    """
    last_time = candidate.last_matched.get(seeker_id)
    if last_time is None:
        return None

    elapsed = current_time - last_time
    if elapsed < config.cooldown_seconds:
        return Rejected(f"cooldown not elapsed (matched {elapsed}s ago)")
    return None


def check_segment_gap(seeker_segment: int, candidate: Entity, candidate_segment: int) -> Optional[Rejected]:
    """Reject short-waiting candidates whose tier is more than one step away."""
    if candidate.wait_seconds >= LONG_WAIT_SECONDS:
        return None

    if segment_gap(seeker_segment, candidate_segment) > 1:
        return Rejected(
            f"insufficient wait and segment gap too large "
            f"(seeker segment {seeker_segment}, candidate segment {candidate_segment})"
        )
    return None


def check_eligibility(
    seeker: Entity,
    candidate: Entity,
    seeker_id: str,
    config: MatchConfig,
    current_time: int,
    seeker_segment: Optional[int] = None,
    candidate_segment: Optional[int] = None
) -> Optional[Rejected]:
    """
    Run all hard constraints in order and return the first rejection.

    Args:
        seeker: Entity requesting the match
        candidate: Pool member under evaluation
        seeker_id: Identifier the seeker is known by in blacklists and history
        config: Matching configuration
        current_time: Unix timestamp used for the cooldown check
        seeker_segment: Precomputed seeker tier (computed if omitted)
        candidate_segment: Precomputed candidate tier (computed if omitted)

    Returns:
        Rejected(reason) for an ineligible candidate, None otherwise
    """
    rejection = check_blacklist(candidate, seeker_id)
    if rejection is None:
        rejection = check_cooldown(candidate, seeker_id, config, current_time)
    if rejection is None:
        if seeker_segment is None:
            seeker_segment = get_segment(seeker.mic_count)
        if candidate_segment is None:
            candidate_segment = get_segment(candidate.mic_count)
        rejection = check_segment_gap(seeker_segment, candidate, candidate_segment)

    if rejection is not None:
        logger.debug(f"Candidate {candidate.entity_id} rejected: {rejection.reason}")
    return rejection
