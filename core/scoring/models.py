#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from enum import Enum
from typing import Optional
from dataclasses import dataclass


class ScoreOutcome(str, Enum):
    """How a score value was arrived at."""
    COMPUTED = "computed"
    # Recoverable data-quality case scored by policy (e.g. fill before job open)
    ANOMALY = "anomaly"
    # Missing or invalid input
    DEFAULTED = "defaulted"
    # Unexpected fault while computing
    FAILED = "failed"


@dataclass(frozen=True)
class ScoreResult:
    """A 0-100 score together with the path that produced it."""
    value: int
    outcome: ScoreOutcome = ScoreOutcome.COMPUTED
    reason: Optional[str] = None

    @property
    def is_computed(self) -> bool:
        return self.outcome == ScoreOutcome.COMPUTED

    @classmethod
    def defaulted(cls, reason: str) -> "ScoreResult":
        return cls(value=0, outcome=ScoreOutcome.DEFAULTED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "ScoreResult":
        return cls(value=0, outcome=ScoreOutcome.FAILED, reason=reason)


@dataclass(frozen=True)
class PlacementScores:
    """Velocity, ROI and overall score for one placement."""
    velocity: ScoreResult
    roi: ScoreResult
    overall: int

    def as_fields(self) -> dict:
        """Score fields as attached to placement records."""
        return {
            "velocityScore": self.velocity.value,
            "roiScore": self.roi.value,
            "overallScore": self.overall,
        }
