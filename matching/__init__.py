"""
Co-Broadcast Matching Engine

This package pairs a seeking entity (e.g. a live room looking for a
co-broadcast partner) with the best candidate from a pool, using a
multi-factor compatibility score.

Key Design Decisions:
- Occupancy is quantized into ordinal segments before comparison
- Five independent component scores are summed into a total
- Hard constraints (blacklist, cooldown, segment gap) reject candidates
  outright instead of penalizing them
- Ties at the top score are broken uniformly at random
- Batch matching treats every seeker independently over a shared pool
"""

__version__ = "1.0.0"
