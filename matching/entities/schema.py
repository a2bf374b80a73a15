"""
Data structures shared by the matching engine.

Defines the participants (seekers and pool members), the matching
configuration, the tagged scoring outcome and the per-candidate match detail.

Key Design Decisions:
- Entities are frozen: the engine only ever reads them
- A scoring outcome is either Eligible(score) or Rejected(reason), never a
  magic number mixed into the score range
- MatchDetail still exposes a numeric total_score for reporting; rejected
  details report REJECTED_SCORE, which is below any attainable score
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any, Optional, Union, FrozenSet

logger = logging.getLogger(__name__)

# Floor reported as total score for rejected candidates
REJECTED_SCORE = -999


class ActivityLevel(Enum):
    """Activity tier of a participant."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, level: str) -> "ActivityLevel":
        """Parse a level name; unknown names fall back to LOW."""
        if level == "high":
            return cls.HIGH
        if level == "medium":
            return cls.MEDIUM
        return cls.LOW

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Entity:
    """
    A participant, either the seeker or a member of the candidate pool.

    Attributes:
        entity_id: Stable identifier
        last_matched: Mapping of participant id -> unix timestamp of last match
        blacklist: Participant ids this entity refuses to be matched with
        mic_count: Number of occupied mic slots
        audience_count: Number of audience members
        wait_seconds: Seconds spent seeking so far
        match_history: Count of historically successful matches
        activity_level: Activity tier
    """
    entity_id: str
    last_matched: Dict[str, int] = field(default_factory=dict)
    blacklist: FrozenSet[str] = field(default_factory=frozenset)
    mic_count: int = 0
    audience_count: int = 0
    wait_seconds: int = 0
    match_history: int = 0
    activity_level: ActivityLevel = ActivityLevel.LOW

    def __post_init__(self):
        """Validate counts and coerce loosely typed inputs."""
        if isinstance(self.activity_level, str):
            object.__setattr__(self, "activity_level", ActivityLevel.parse(self.activity_level))
        if not isinstance(self.blacklist, frozenset):
            object.__setattr__(self, "blacklist", frozenset(self.blacklist))

        for attr in ["mic_count", "audience_count", "wait_seconds", "match_history"]:
            val = getattr(self, attr)
            if isinstance(val, bool) or not isinstance(val, int) or val < 0:
                raise ValueError(f"{attr} must be a non-negative integer, got {val!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with JSON-friendly values."""
        return {
            "entity_id": self.entity_id,
            "last_matched": dict(self.last_matched),
            "blacklist": sorted(self.blacklist),
            "mic_count": self.mic_count,
            "audience_count": self.audience_count,
            "wait_seconds": self.wait_seconds,
            "match_history": self.match_history,
            "activity_level": self.activity_level.value
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entity":
        """Create from dictionary."""
        return cls(
            entity_id=data["entity_id"],
            last_matched=dict(data.get("last_matched", {})),
            blacklist=frozenset(data.get("blacklist", [])),
            mic_count=data.get("mic_count", 0),
            audience_count=data.get("audience_count", 0),
            wait_seconds=data.get("wait_seconds", 0),
            match_history=data.get("match_history", 0),
            activity_level=data.get("activity_level", ActivityLevel.LOW.value)
        )


@dataclass(frozen=True)
class MatchConfig:
    """
    Configuration for the matching engine.

    Attributes:
        cooldown_seconds: A previous pairing more recent than this blocks a rematch
        max_wait_seconds: Carried for future use, not consulted by any score
        min_wait_seconds: Wait time at or below this earns no wait score
    """
    cooldown_seconds: int = 600
    max_wait_seconds: int = 300
    min_wait_seconds: int = 20

    def validate(self) -> None:
        """Validate configuration values."""
        if self.cooldown_seconds < 0:
            raise ValueError(f"cooldown_seconds must be >= 0, got {self.cooldown_seconds}")
        if self.min_wait_seconds < 0:
            raise ValueError(f"min_wait_seconds must be >= 0, got {self.min_wait_seconds}")
        if self.max_wait_seconds < self.min_wait_seconds:
            raise ValueError(
                f"max_wait_seconds ({self.max_wait_seconds}) must be >= "
                f"min_wait_seconds ({self.min_wait_seconds})"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MatchConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "MatchConfig":
        """Create from main config dictionary."""
        matching_config = config.get("matching", {})
        match_config = cls(
            cooldown_seconds=matching_config.get("cooldown_seconds", 600),
            max_wait_seconds=matching_config.get("max_wait_seconds", 300),
            min_wait_seconds=matching_config.get("min_wait_seconds", 20)
        )
        match_config.validate()
        return match_config

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved match config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "MatchConfig":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)


DEFAULT_MATCH_CONFIG = MatchConfig()


@dataclass(frozen=True)
class Eligible:
    """Scoring outcome for a pair that may be matched."""
    score: int


@dataclass(frozen=True)
class Rejected:
    """Scoring outcome for a pair that must not be matched."""
    reason: str


ScoreOutcome = Union[Eligible, Rejected]


@dataclass
class MatchDetail:
    """
    Evaluation of one (seeker, candidate) pair within a single match call.

    Component scores computed after a rejection stay at 0 and carry no meaning.

    Attributes:
        candidate: The evaluated pool member
        seeker_segment: Tier of the seeker
        candidate_segment: Tier of the candidate
        wait_score: Wait-time contribution
        segment_score: Segment-consistency contribution
        audience_score: Audience-difference contribution
        history_score: Match-history contribution
        activity_score: Activity contribution
        outcome: Eligible(total) or Rejected(reason)
    """
    candidate: Entity
    seeker_segment: int
    candidate_segment: int
    wait_score: int = 0
    segment_score: int = 0
    audience_score: int = 0
    history_score: int = 0
    activity_score: int = 0
    outcome: Optional[ScoreOutcome] = None

    @property
    def rejected(self) -> bool:
        return isinstance(self.outcome, Rejected)

    @property
    def reject_reason(self) -> Optional[str]:
        if isinstance(self.outcome, Rejected):
            return self.outcome.reason
        return None

    @property
    def total_score(self) -> int:
        if isinstance(self.outcome, Eligible):
            return self.outcome.score
        return REJECTED_SCORE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a flat dictionary (one row of a report)."""
        return {
            "candidate_id": self.candidate.entity_id,
            "mic_count": self.candidate.mic_count,
            "audience_count": self.candidate.audience_count,
            "wait_seconds": self.candidate.wait_seconds,
            "match_history": self.candidate.match_history,
            "activity_level": self.candidate.activity_level.value,
            "seeker_segment": self.seeker_segment,
            "candidate_segment": self.candidate_segment,
            "wait_score": self.wait_score,
            "segment_score": self.segment_score,
            "audience_score": self.audience_score,
            "history_score": self.history_score,
            "activity_score": self.activity_score,
            "total_score": self.total_score,
            "rejected": self.rejected,
            "reject_reason": self.reject_reason
        }
