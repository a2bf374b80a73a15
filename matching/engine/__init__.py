"""Matching engine: single-seeker and batch matching."""

from .matcher import Matcher, match, match_detailed, score_candidate, check_random_state
from .batch import BatchMatcher, batch_match, create_batch_matcher_from_config

__all__ = [
    "Matcher",
    "match",
    "match_detailed",
    "score_candidate",
    "check_random_state",
    "BatchMatcher",
    "batch_match",
    "create_batch_matcher_from_config",
]
