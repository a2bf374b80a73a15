"""
Batch matching of many seekers against one shared pool.

Each seeker is matched independently; nothing stops two seekers from being
given the same candidate. The pool is snapshotted into a tuple before the
fan-out and is only read afterwards, so seekers can be matched on worker
threads without locking.

Randomness: one seed per seeker position is drawn from the batch random
state up front, and every seeker gets its own RandomState. Results for a
given seed are therefore identical for any n_jobs.
"""

import logging
import time
from typing import Dict, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from ..entities.schema import Entity, MatchConfig, DEFAULT_MATCH_CONFIG
from .matcher import Matcher, check_random_state

logger = logging.getLogger(__name__)

_MAX_SEED = np.iinfo(np.int32).max


class BatchMatcher:
    """
    Matches several seekers against a shared candidate pool.

    Attributes:
        config: MatchConfig with matching parameters
        n_jobs: Number of worker threads (1 runs sequentially, -1 uses all cores)
        shared_timestamp: Use one current time for the whole batch
        random_state: numpy RandomState that seeds the per-seeker generators
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        n_jobs: int = 1,
        shared_timestamp: bool = True,
        random_state=None
    ):
        """
        Initialize the batch matcher.

        Args:
            config: MatchConfig instance (defaults to DEFAULT_MATCH_CONFIG)
            n_jobs: Number of worker threads
            shared_timestamp: Capture current time once per batch instead of per seeker
            random_state: Integer seed or numpy RandomState
        """
        self.config = config if config is not None else DEFAULT_MATCH_CONFIG
        self.config.validate()
        if n_jobs == 0:
            raise ValueError("n_jobs must be non-zero")
        self.n_jobs = n_jobs
        self.shared_timestamp = shared_timestamp
        self.random_state = check_random_state(random_state)

    def batch_match(
        self,
        seekers: Sequence[Optional[Entity]],
        pool: Sequence[Entity],
        seeker_ids: Sequence[str],
        current_time: Optional[int] = None
    ) -> Dict[str, Entity]:
        """
        Match every seeker against the pool.

        Args:
            seekers: Seeking entities; None entries are skipped
            pool: Candidate entities shared by all seekers
            seeker_ids: Identifier for each seeker, position by position
            current_time: Unix timestamp for cooldown checks (defaults to now)

        Returns:
            Mapping of seeker entity_id -> selected candidate. Seekers without
            a match have no entry.

        Raises:
            ValueError: If seekers and seeker_ids differ in length
        """
        if len(seekers) != len(seeker_ids):
            raise ValueError(
                f"seekers and seeker_ids must have same length: "
                f"{len(seekers)} vs {len(seeker_ids)}"
            )

        pool_snapshot = tuple(pool)
        if current_time is None and self.shared_timestamp:
            current_time = int(time.time())

        seeds = [int(self.random_state.randint(_MAX_SEED)) for _ in seekers]
        jobs = [
            (seeker, seeker_id, seed)
            for seeker, seeker_id, seed in zip(seekers, seeker_ids, seeds)
            if seeker is not None
        ]

        matched = Parallel(n_jobs=self.n_jobs, prefer="threads")(
            delayed(self._match_one)(seeker, pool_snapshot, seeker_id, seed, current_time)
            for seeker, seeker_id, seed in jobs
        )

        results = {}
        for (seeker, _, _), candidate in zip(jobs, matched):
            if candidate is not None:
                results[seeker.entity_id] = candidate

        logger.info(
            f"Batch matched {len(results)}/{len(jobs)} seekers "
            f"against pool of {len(pool_snapshot)}"
        )
        return results

    def _match_one(
        self,
        seeker: Entity,
        pool: Sequence[Entity],
        seeker_id: str,
        seed: int,
        current_time: Optional[int]
    ) -> Optional[Entity]:
        matcher = Matcher(self.config, random_state=np.random.RandomState(seed))
        return matcher.match(seeker, pool, seeker_id, current_time)


def batch_match(
    seekers: Sequence[Optional[Entity]],
    pool: Sequence[Entity],
    seeker_ids: Sequence[str],
    config: Optional[MatchConfig] = None,
    current_time: Optional[int] = None,
    random_state=None,
    n_jobs: int = 1
) -> Dict[str, Entity]:
    """Convenience wrapper around BatchMatcher.batch_match."""
    batch_matcher = BatchMatcher(config, n_jobs=n_jobs, random_state=random_state)
    return batch_matcher.batch_match(seekers, pool, seeker_ids, current_time)


def create_batch_matcher_from_config(config: Dict, random_state=None) -> BatchMatcher:
    """
    Factory function to create BatchMatcher from config.

    Args:
        config: Main configuration dictionary
        random_state: Seed or RandomState (defaults to global.random_seed)

    Returns:
        Configured BatchMatcher instance
    """
    batch_config = config.get("batch", {})
    if random_state is None:
        random_state = config.get("global", {}).get("random_seed")

    return BatchMatcher(
        MatchConfig.from_config(config),
        n_jobs=batch_config.get("n_jobs", 1),
        shared_timestamp=batch_config.get("shared_timestamp", True),
        random_state=random_state
    )
