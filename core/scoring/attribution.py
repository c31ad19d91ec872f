#!/usr/bin/env python3
"""
Service Line Attribution - per-line totals of placements.
"""

from typing import Any, Dict, Iterable, List

from core.scoring.records import service_line_of
from core.utils import mean, round_half_up, safe_amount


def calculate_service_line_attribution(
    placements: Iterable[Dict[str, Any]]
) -> Dict[str, Dict[str, Any]]:
    """
    Group placements by service line.

    Placements without a service line land in 'Unassigned'. Only placements
    that already carry a velocityScore contribute to averageVelocity; the
    others are left out of the average rather than counted as zero.

    Returns:
        Dict keyed by service line (first-seen order) of
        {serviceLine, placementCount, totalRevenue, totalMargin, averageVelocity}
    """
    attribution: Dict[str, Dict[str, Any]] = {}
    velocity_scores: Dict[str, List[float]] = {}

    for placement in placements:
        service_line = service_line_of(placement)

        if service_line not in attribution:
            attribution[service_line] = {
                "serviceLine": service_line,
                "placementCount": 0,
                "totalRevenue": 0,
                "totalMargin": 0,
                "averageVelocity": 0,
            }
            velocity_scores[service_line] = []

        line = attribution[service_line]
        line["placementCount"] += 1
        line["totalRevenue"] += safe_amount(placement.get("revenue"), "revenue")
        line["totalMargin"] += safe_amount(placement.get("margin"), "margin")

        if placement.get("velocityScore"):
            velocity_scores[service_line].append(placement["velocityScore"])

    for service_line, scores in velocity_scores.items():
        if scores:
            attribution[service_line]["averageVelocity"] = round_half_up(mean(scores))

    return attribution
