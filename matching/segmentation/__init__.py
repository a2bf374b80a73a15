"""Segmentation module for occupancy tiers."""

from .classifier import get_segment, segment_gap, SEGMENT_TABLE, MAX_SEGMENT

__all__ = ["get_segment", "segment_gap", "SEGMENT_TABLE", "MAX_SEGMENT"]
