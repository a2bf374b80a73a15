"""Participant, configuration and match-detail data structures."""

from .schema import (
    ActivityLevel,
    Entity,
    MatchConfig,
    DEFAULT_MATCH_CONFIG,
    Eligible,
    Rejected,
    ScoreOutcome,
    MatchDetail,
    REJECTED_SCORE,
)

__all__ = [
    "ActivityLevel",
    "Entity",
    "MatchConfig",
    "DEFAULT_MATCH_CONFIG",
    "Eligible",
    "Rejected",
    "ScoreOutcome",
    "MatchDetail",
    "REJECTED_SCORE",
]
