"""
Component scoring functions.

Each function scores one aspect of a (seeker, candidate) pair. All of them
are pure: the result depends only on the arguments and the configuration.

Total score of an eligible pair:
    total = wait + segment + audience + history + activity

Wait-time score (rewards long waits more steeply past one minute):
    wait <= min_wait        -> 0
    min_wait < wait <= 60   -> (wait - min_wait) // 10
    wait > 60               -> 4 + ((wait - 60) // 10) * 2

Segment-consistency score (d = tier distance):
    d == 0                  -> 10
    d == 1 and wait >= 60   -> 3
    d >= 2 and wait >= 60   -> 0
    d >= 1 and wait < 60    -> rejected
"""

from typing import Tuple

from ..entities.schema import ActivityLevel, MatchConfig, Eligible, Rejected, ScoreOutcome
from ..segmentation.classifier import segment_gap

# Wait time (seconds) after which a candidate is considered long-waiting
LONG_WAIT_SECONDS = 60

SAME_SEGMENT_SCORE = 10
ADJACENT_SEGMENT_SCORE = 3

# Indexed by absolute audience difference; larger differences score 0
AUDIENCE_DIFF_SCORES: Tuple[int, ...] = (5, 4, 3, 2, 1, 0)

ACTIVITY_SCORES = {
    ActivityLevel.LOW: 0,
    ActivityLevel.MEDIUM: 2,
    ActivityLevel.HIGH: 3,
}

SEGMENT_MISMATCH_REASON = "segment mismatch"


def score_wait_time(wait_seconds: int, config: MatchConfig) -> int:
    """
    Score accumulated wait time.

    Args:
        wait_seconds: Seconds the candidate has been waiting
        config: Matching configuration (uses min_wait_seconds)

    Returns:
        Non-negative wait score
    """
    if wait_seconds <= config.min_wait_seconds:
        return 0
    if wait_seconds <= LONG_WAIT_SECONDS:
        return (wait_seconds - config.min_wait_seconds) // 10
    return 4 + (wait_seconds - LONG_WAIT_SECONDS) // 10 * 2


def score_segment_consistency(
    seeker_segment: int,
    candidate_segment: int,
    candidate_wait_seconds: int
) -> ScoreOutcome:
    """
    Score how well the two occupancy tiers line up.

    Args:
        seeker_segment: Tier of the seeker
        candidate_segment: Tier of the candidate
        candidate_wait_seconds: Seconds the candidate has been waiting

    Returns:
        Eligible(score), or Rejected when the tiers differ and the candidate
        has not waited long enough to relax the constraint
    """
    gap = segment_gap(seeker_segment, candidate_segment)
    if gap == 0:
        return Eligible(SAME_SEGMENT_SCORE)

    long_wait = candidate_wait_seconds >= LONG_WAIT_SECONDS
    if gap == 1 and long_wait:
        return Eligible(ADJACENT_SEGMENT_SCORE)
    if long_wait:
        return Eligible(0)
    return Rejected(SEGMENT_MISMATCH_REASON)


def score_audience_difference(seeker_audience: int, candidate_audience: int) -> int:
    """Score the closeness of audience sizes (5 for equal, down to 0)."""
    diff = abs(seeker_audience - candidate_audience)
    if diff < len(AUDIENCE_DIFF_SCORES):
        return AUDIENCE_DIFF_SCORES[diff]
    return 0


def score_match_history(match_history: int) -> int:
    """Score the candidate's count of past successful matches."""
    if match_history >= 10:
        return 4
    if match_history >= 5:
        return 2
    return 0


def score_activity(level: ActivityLevel) -> int:
    """Score the candidate's activity tier."""
    return ACTIVITY_SCORES.get(level, 0)
