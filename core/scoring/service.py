#!/usr/bin/env python3
"""
Scoring Service - per-placement velocity, ROI and overall scores.

Pure functions over in-memory records: no I/O, no caching. Scores are
recomputed on every call and attached to copies of the input records.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.scoring.attribution import calculate_service_line_attribution
from core.scoring.models import PlacementScores
from core.scoring.overall import (
    DEFAULT_WEIGHTS,
    calculate_overall_score,
    get_score_tier,
    normalize_weights,
)
from core.scoring.roi import roi_score_result
from core.scoring.velocity import velocity_score_result

logger = logging.getLogger(__name__)


def score_placement(
    placement: Optional[Dict[str, Any]],
    job: Optional[Dict[str, Any]] = None,
    attribution: Optional[Dict[str, Any]] = None,
    weights: Optional[Mapping[str, float]] = None
) -> PlacementScores:
    """Compute all three scores for one placement."""
    velocity = velocity_score_result(placement, job)
    roi = roi_score_result(placement, attribution)
    overall = calculate_overall_score(velocity.value, roi.value, weights)
    return PlacementScores(velocity=velocity, roi=roi, overall=overall)


def batch_calculate_scores(
    placements: Iterable[Dict[str, Any]],
    weights: Optional[Mapping[str, float]] = None
) -> List[Dict[str, Any]]:
    """
    Score a batch of placements.

    Each placement is scored against its embedded 'job' (velocity) and
    'attribution' (ROI), when present.

    Returns:
        New dicts, in input order, with the original fields plus
        velocityScore, roiScore and overallScore. Inputs are not mutated.
    """
    scored = []
    for placement in placements:
        scores = score_placement(
            placement,
            job=placement.get("job"),
            attribution=placement.get("attribution"),
            weights=weights
        )
        scored.append({**placement, **scores.as_fields()})

    logger.debug(f"Scored {len(scored)} placements")
    return scored


class ScoringService:
    """
    Scoring façade bound to a weight configuration.

    Usage:
        service = ScoringService(config.scoring.weights)
        scored = service.batch_calculate_scores(placements)
    """

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        self.weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        # Fail fast on negative weights
        normalize_weights(self.weights)

    def calculate_velocity_score(self, placement, job) -> int:
        return velocity_score_result(placement, job).value

    def calculate_roi_score(self, placement, attribution=None) -> int:
        return roi_score_result(placement, attribution).value

    def calculate_overall_score(self, velocity_score, roi_score, weights=None) -> int:
        return calculate_overall_score(
            velocity_score,
            roi_score,
            self.weights if weights is None else weights
        )

    def get_score_tier(self, score) -> str:
        return get_score_tier(score)

    def calculate_service_line_attribution(self, placements) -> Dict[str, Dict[str, Any]]:
        return calculate_service_line_attribution(placements)

    def score_placement(self, placement, job=None, attribution=None) -> PlacementScores:
        return score_placement(placement, job, attribution, self.weights)

    def batch_calculate_scores(self, placements) -> List[Dict[str, Any]]:
        return batch_calculate_scores(placements, self.weights)
