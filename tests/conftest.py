"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from matching.entities import ActivityLevel, Entity, MatchConfig

NOW = 1_700_000_000
SEEKER_ID = "user123"


def make_entity(entity_id: str = "cand", **overrides) -> Entity:
    """Build an entity with neutral defaults (tier 1, long wait, nothing blocked)."""
    values = dict(
        mic_count=3,
        audience_count=50,
        wait_seconds=80,
        match_history=0,
        activity_level=ActivityLevel.LOW,
    )
    values.update(overrides)
    return Entity(entity_id=entity_id, **values)


class FixedIndex:
    """Random source that always picks the same tie index."""

    def __init__(self, index: int):
        self.index = index
        self.calls = []

    def randint(self, high):
        self.calls.append(high)
        return min(self.index, high - 1)


@pytest.fixture()
def config():
    return MatchConfig(cooldown_seconds=600, max_wait_seconds=300, min_wait_seconds=20)


@pytest.fixture()
def seeker():
    return make_entity("current", mic_count=3, audience_count=50, wait_seconds=80)


@pytest.fixture()
def default_config_path():
    return Path(__file__).resolve().parents[1] / "configs" / "config.yaml"
