#!/usr/bin/env python3
"""
Scoring Module - placement performance scores.

Public API:
- ScoringService: Scoring façade bound to configured weights
- ScoreResult / ScoreOutcome: score value plus the path that produced it

Modules:
- records.py: Normalization of raw TrackerRMS dicts
- velocity.py: Velocity score (time to fill)
- roi.py: ROI score (revenue vs. attributed cost, or margin proxy)
- overall.py: Weighted overall score and tier classification
- attribution.py: Service line grouping
- service.py: Batch scoring and ScoringService
"""

from core.scoring.models import ScoreOutcome, ScoreResult, PlacementScores
from core.scoring.velocity import calculate_velocity_score, velocity_score_result
from core.scoring.roi import calculate_roi_score, roi_score_result
from core.scoring.overall import (
    calculate_overall_score,
    get_score_tier,
    normalize_weights,
    SCORE_TIERS,
)
from core.scoring.attribution import calculate_service_line_attribution
from core.scoring.service import ScoringService, batch_calculate_scores, score_placement

__all__ = [
    'ScoringService',
    'ScoreOutcome',
    'ScoreResult',
    'PlacementScores',
    'SCORE_TIERS',
    'calculate_velocity_score',
    'velocity_score_result',
    'calculate_roi_score',
    'roi_score_result',
    'calculate_overall_score',
    'normalize_weights',
    'get_score_tier',
    'calculate_service_line_attribution',
    'batch_calculate_scores',
    'score_placement',
]
