"""
Synthetic candidate pool generation.

This module produces random Entity values for demos, smoke tests and
tie-break analysis when no real pool is available.

Key Design Decisions:
- All value ranges are inclusive and configurable
- Some entities carry recent-match history and blacklists, so the
  eligibility filter has something to reject
- Reproducible given a random seed
"""

import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..entities.schema import ActivityLevel, Entity

logger = logging.getLogger(__name__)

ACTIVITY_LEVELS = [ActivityLevel.LOW, ActivityLevel.MEDIUM, ActivityLevel.HIGH]


class PoolGenerator:
    """
    Generator for random candidate entities.

    Attributes:
        mic_count_range: Inclusive (low, high) for mic_count
        audience_count_range: Inclusive (low, high) for audience_count
        wait_seconds_range: Inclusive (low, high) for wait_seconds
        match_history_range: Inclusive (low, high) for match_history
        last_matched_probability: Chance an entity has recent-match history
        last_matched_max_users: Max users in that history
        last_matched_max_age_seconds: Max age of a recorded match
        blacklist_probability: Chance an entity has a blacklist
        blacklist_max_users: Max users in that blacklist
        user_id_space: Referenced user ids are drawn from user0..user<space-1>
        id_prefix: Prefix for generated entity ids
        random_state: Numpy RandomState for reproducibility
    """

    def __init__(
        self,
        mic_count_range: Tuple[int, int] = (1, 15),
        audience_count_range: Tuple[int, int] = (10, 209),
        wait_seconds_range: Tuple[int, int] = (10, 309),
        match_history_range: Tuple[int, int] = (0, 19),
        last_matched_probability: float = 0.3,
        last_matched_max_users: int = 3,
        last_matched_max_age_seconds: int = 1200,
        blacklist_probability: float = 0.2,
        blacklist_max_users: int = 2,
        user_id_space: int = 1000,
        id_prefix: str = "entity",
        random_seed: Optional[int] = None
    ):
        self.mic_count_range = tuple(mic_count_range)
        self.audience_count_range = tuple(audience_count_range)
        self.wait_seconds_range = tuple(wait_seconds_range)
        self.match_history_range = tuple(match_history_range)
        self.last_matched_probability = last_matched_probability
        self.last_matched_max_users = last_matched_max_users
        self.last_matched_max_age_seconds = last_matched_max_age_seconds
        self.blacklist_probability = blacklist_probability
        self.blacklist_max_users = blacklist_max_users
        self.user_id_space = user_id_space
        self.id_prefix = id_prefix
        self.random_state = np.random.RandomState(random_seed)

    @classmethod
    def from_config(cls, config: Dict[str, Any], random_seed: Optional[int] = None) -> "PoolGenerator":
        """Create from main config dictionary."""
        pool_config = config.get("pool_generation", {})
        if random_seed is None:
            random_seed = config.get("global", {}).get("random_seed")

        return cls(
            mic_count_range=pool_config.get("mic_count_range", (1, 15)),
            audience_count_range=pool_config.get("audience_count_range", (10, 209)),
            wait_seconds_range=pool_config.get("wait_seconds_range", (10, 309)),
            match_history_range=pool_config.get("match_history_range", (0, 19)),
            last_matched_probability=pool_config.get("last_matched_probability", 0.3),
            last_matched_max_users=pool_config.get("last_matched_max_users", 3),
            last_matched_max_age_seconds=pool_config.get("last_matched_max_age_seconds", 1200),
            blacklist_probability=pool_config.get("blacklist_probability", 0.2),
            blacklist_max_users=pool_config.get("blacklist_max_users", 2),
            user_id_space=pool_config.get("user_id_space", 1000),
            id_prefix=pool_config.get("id_prefix", "entity"),
            random_seed=random_seed
        )

    def _randint_inclusive(self, bounds: Tuple[int, int]) -> int:
        low, high = bounds
        return int(self.random_state.randint(low, high + 1))

    def _random_user_id(self) -> str:
        return f"user{self.random_state.randint(self.user_id_space)}"

    def generate_entity(self, entity_id: str, current_time: Optional[int] = None) -> Entity:
        """
        Generate one random entity.

        Args:
            entity_id: Identifier for the new entity
            current_time: Reference unix timestamp for match history (defaults to now)

        Returns:
            Random Entity
        """
        if current_time is None:
            current_time = int(time.time())

        last_matched = {}
        if self.random_state.random_sample() < self.last_matched_probability:
            n_users = self.random_state.randint(1, self.last_matched_max_users + 1)
            for _ in range(n_users):
                age = self.random_state.randint(self.last_matched_max_age_seconds + 1)
                last_matched[self._random_user_id()] = current_time - int(age)

        blacklist = set()
        if self.random_state.random_sample() < self.blacklist_probability:
            n_users = self.random_state.randint(1, self.blacklist_max_users + 1)
            for _ in range(n_users):
                blacklist.add(self._random_user_id())

        return Entity(
            entity_id=entity_id,
            last_matched=last_matched,
            blacklist=frozenset(blacklist),
            mic_count=self._randint_inclusive(self.mic_count_range),
            audience_count=self._randint_inclusive(self.audience_count_range),
            wait_seconds=self._randint_inclusive(self.wait_seconds_range),
            match_history=self._randint_inclusive(self.match_history_range),
            activity_level=ACTIVITY_LEVELS[self.random_state.randint(len(ACTIVITY_LEVELS))]
        )

    def generate_pool(self, count: int, current_time: Optional[int] = None) -> List[Entity]:
        """
        Generate a pool of random entities named <prefix>_001, <prefix>_002, ...

        Args:
            count: Number of entities
            current_time: Reference unix timestamp for match history (defaults to now)

        Returns:
            List of random entities
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if current_time is None:
            current_time = int(time.time())

        pool = [
            self.generate_entity(f"{self.id_prefix}_{i + 1:03d}", current_time)
            for i in range(count)
        ]
        logger.info(f"Generated pool of {len(pool)} entities")
        return pool
