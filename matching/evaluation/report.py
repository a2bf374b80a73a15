"""
Human-readable match reports.

Turns the MatchDetail list of a single match call into a pandas table,
a top-N ranking, and a text summary that explains the decision.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Sequence

import pandas as pd

from ..entities.schema import Entity, MatchDetail
from ..segmentation.classifier import get_segment
from .metrics import compute_pool_statistics, rejection_reason_counts

logger = logging.getLogger(__name__)

DETAIL_COLUMNS = [
    "candidate_id", "mic_count", "audience_count", "wait_seconds",
    "match_history", "activity_level", "seeker_segment", "candidate_segment",
    "wait_score", "segment_score", "audience_score", "history_score",
    "activity_score", "total_score", "rejected", "reject_reason",
]


def details_to_frame(details: Sequence[MatchDetail]) -> pd.DataFrame:
    """Convert MatchDetail records to a DataFrame (one row per candidate)."""
    return pd.DataFrame([d.to_dict() for d in details], columns=DETAIL_COLUMNS)


def top_candidates(details: Sequence[MatchDetail], n: int = 5) -> List[MatchDetail]:
    """
    Rank eligible candidates by total score.

    Equal scores keep their pool order.

    Args:
        details: MatchDetail list from one match call
        n: Number of candidates to return

    Returns:
        Up to n eligible MatchDetail records, best first
    """
    eligible = [d for d in details if not d.rejected]
    return sorted(eligible, key=lambda d: d.total_score, reverse=True)[:n]


@dataclass
class MatchReport:
    """
    Report for one match call.

    Attributes:
        seeker: The seeking entity
        selected: Chosen candidate, or None
        details: One MatchDetail per evaluated candidate
        top_n: Length of the ranking shown in the summary
    """
    seeker: Entity
    selected: Optional[Entity]
    details: List[MatchDetail] = field(default_factory=list)
    top_n: int = 5

    @property
    def selected_detail(self) -> Optional[MatchDetail]:
        if self.selected is None:
            return None
        for detail in self.details:
            if detail.candidate.entity_id == self.selected.entity_id:
                return detail
        return None

    def to_dict(self) -> Dict[str, Any]:
        selected_detail = self.selected_detail
        return {
            "seeker": self.seeker.to_dict(),
            "selected_id": self.selected.entity_id if self.selected else None,
            "selected_detail": selected_detail.to_dict() if selected_detail else None,
            "top_candidates": [d.to_dict() for d in top_candidates(self.details, self.top_n)],
            "rejection_reasons": rejection_reason_counts(self.details),
            "statistics": compute_pool_statistics(self.details).to_dict()
        }

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved match report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        seeker = self.seeker
        lines = [
            "Match Details",
            "=" * 50,
            f"Seeker: {seeker.entity_id} (mics: {seeker.mic_count}, "
            f"audience: {seeker.audience_count}, wait: {seeker.wait_seconds}s, "
            f"segment: {get_segment(seeker.mic_count)})",
        ]

        detail = self.selected_detail
        if detail is not None:
            candidate = detail.candidate
            lines.extend([
                f"Matched: {candidate.entity_id}",
                "Score breakdown:",
                f"  - Wait time:  {detail.wait_score} (waited {candidate.wait_seconds}s)",
                f"  - Segment:    {detail.segment_score} (seeker segment {detail.seeker_segment}, "
                f"candidate segment {detail.candidate_segment})",
                f"  - Audience:   {detail.audience_score} "
                f"(difference {seeker.audience_count - candidate.audience_count})",
                f"  - History:    {detail.history_score} ({candidate.match_history} past matches)",
                f"  - Activity:   {detail.activity_score} ({candidate.activity_level})",
                f"  - Total:      {detail.total_score}",
                "",
                f"Top {self.top_n} candidates:",
            ])
            for rank, ranked in enumerate(top_candidates(self.details, self.top_n), start=1):
                c = ranked.candidate
                marker = " *" if c.entity_id == candidate.entity_id else ""
                lines.append(
                    f"  {rank}. {c.entity_id} (score: {ranked.total_score}, mics: {c.mic_count}, "
                    f"audience: {c.audience_count}, wait: {c.wait_seconds}s){marker}"
                )
        else:
            lines.append("No match found")
            lines.append("Rejection reasons:")
            for reason, count in rejection_reason_counts(self.details).items():
                lines.append(f"  - {reason}: {count}")

        stats = compute_pool_statistics(self.details)
        lines.extend([
            "",
            "Statistics:",
            f"  Total candidates: {stats.total}",
            f"  Valid:    {stats.valid} ({stats.valid_pct:.1f}%)",
            f"  Rejected: {stats.rejected} ({stats.rejected_pct:.1f}%)",
        ])
        return "\n".join(lines)


def create_match_report(
    seeker: Entity,
    selected: Optional[Entity],
    details: Sequence[MatchDetail],
    top_n: int = 5
) -> MatchReport:
    """Factory function to build a MatchReport from a match_detailed result."""
    return MatchReport(seeker=seeker, selected=selected, details=list(details), top_n=top_n)
