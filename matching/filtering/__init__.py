"""Filtering module for hard eligibility constraints."""

from .eligibility import (
    check_eligibility,
    check_blacklist,
    check_cooldown,
    check_segment_gap,
    BLACKLIST_REASON,
)

__all__ = [
    "check_eligibility",
    "check_blacklist",
    "check_cooldown",
    "check_segment_gap",
    "BLACKLIST_REASON",
]
