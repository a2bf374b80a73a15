"""
Occupancy segmentation.

Quantizes a mic-slot count into one of four ordinal tiers so that
compatibility checks become cheap tier comparisons.
"""

from typing import Tuple

# Tier for mic counts 0..15; larger counts clamp to the top tier
SEGMENT_TABLE: Tuple[int, ...] = (0, 1, 1, 1, 2, 2, 2, 3, 3, 3, 3, 3, 3, 3, 3, 3)
MAX_SEGMENT = 3


def get_segment(mic_count: int) -> int:
    """
    Map an occupancy count to its tier.

    Args:
        mic_count: Number of occupied mic slots (>= 0)

    Returns:
        Tier in [0, 3]
    """
    if mic_count <= 0:
        return 0
    if mic_count < len(SEGMENT_TABLE):
        return SEGMENT_TABLE[mic_count]
    return MAX_SEGMENT


def segment_gap(seeker_segment: int, candidate_segment: int) -> int:
    """Absolute tier distance between two segments."""
    return abs(seeker_segment - candidate_segment)
