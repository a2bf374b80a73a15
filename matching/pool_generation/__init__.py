"""Synthetic candidate pool generation."""

from .generator import PoolGenerator

__all__ = ["PoolGenerator"]
