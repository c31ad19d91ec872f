#!/usr/bin/env python3
"""
Score distribution histogram over the five score tiers.
"""

from typing import Dict, Iterable

from core.scoring.overall import SCORE_TIERS, get_score_tier

DISTRIBUTION_BUCKETS: Dict[str, str] = {
    "excellent": "excellent (90-100)",
    "good": "good (75-89)",
    "average": "average (50-74)",
    "below_average": "below_average (25-49)",
    "poor": "poor (0-24)",
}


def calculate_score_distribution(scores: Iterable[float]) -> Dict[str, int]:
    """
    Count scores per tier bucket.

    Every bucket is present, zero-valued when empty, in tier order.
    """
    buckets = {DISTRIBUTION_BUCKETS[tier]: 0 for tier, _ in SCORE_TIERS}
    for score in scores:
        buckets[DISTRIBUTION_BUCKETS[get_score_tier(score)]] += 1
    return buckets
