#!/usr/bin/env python3
"""
Overall Score and Tiers.

overall = w_velocity * velocity_score + w_roi * roi_score, with the weights
normalized to sum to 1.
"""

from typing import Dict, List, Mapping, Optional, Tuple

from core.utils import clamp, round_half_up

DEFAULT_WEIGHTS: Dict[str, float] = {"velocity": 0.4, "roi": 0.6}
EVEN_WEIGHTS: Dict[str, float] = {"velocity": 0.5, "roi": 0.5}

# (tier, inclusive lower bound), highest first
SCORE_TIERS: List[Tuple[str, int]] = [
    ("excellent", 90),
    ("good", 75),
    ("average", 50),
    ("below_average", 25),
    ("poor", 0),
]


def normalize_weights(weights: Mapping[str, float]) -> Dict[str, float]:
    """
    Scale velocity/roi weights so that all weights sum to 1.

    The sum runs over every value in the mapping. A zero sum falls back to
    an even split.

    Raises:
        ValueError: If any weight is negative.
    """
    negative = {k: v for k, v in weights.items() if v < 0}
    if negative:
        raise ValueError(f"Weights must be non-negative, got {negative}")

    total = sum(weights.values())
    if total == 0:
        return dict(EVEN_WEIGHTS)

    return {
        "velocity": (weights.get("velocity") or 0) / total,
        "roi": (weights.get("roi") or 0) / total,
    }


def calculate_overall_score(
    velocity_score: float,
    roi_score: float,
    weights: Optional[Mapping[str, float]] = None
) -> int:
    """
    Weighted combination of velocity and ROI scores.

    Args:
        velocity_score: Velocity score (0-100)
        roi_score: ROI score (0-100)
        weights: velocity/roi weights, any non-negative numbers
            (default 0.4/0.6)

    Returns:
        Overall score (0-100)
    """
    normalized = normalize_weights(DEFAULT_WEIGHTS if weights is None else weights)
    combined = velocity_score * normalized["velocity"] + roi_score * normalized["roi"]
    return int(clamp(round_half_up(combined), 0, 100))


def get_score_tier(score: float) -> str:
    """Tier label for a score; boundary values belong to the higher tier."""
    for tier, lower_bound in SCORE_TIERS:
        if score >= lower_bound:
            return tier
    return SCORE_TIERS[-1][0]
