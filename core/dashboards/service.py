#!/usr/bin/env python3
"""
Dashboard Service - aggregate reporting views over scored placements.

Produces the four dashboard shapes served by /api/dashboards:
- Service line attribution (revenue/margin by line, chart series)
- Placement velocity (by line, monthly trend, histogram)
- ROI (by line, cost breakdown, histogram)
- Executive summary (all three plus fill rate)

Inputs are lists of TrackerRMS placement/job dicts that have already been
fetched. Nothing here performs I/O or mutates its inputs.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.dashboards.distribution import calculate_score_distribution
from core.scoring.records import fill_timestamp_of, service_line_of
from core.scoring.service import ScoringService
from core.utils import mean, parse_timestamp, round_half_up, safe_amount, utc_iso_timestamp

logger = logging.getLogger(__name__)


def _percentage(part: float, whole: float) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


def _roi_percentage(revenue: float, cost: float) -> int:
    return round_half_up((revenue - cost) / cost * 100) if cost > 0 else 0


def _costs(placement: Dict[str, Any]):
    attribution = placement.get("attribution") or {}
    if not isinstance(attribution, dict):
        logger.warning(
            f"Non-mapping attribution {attribution!r} on placement {placement.get('id')} treated as zero cost"
        )
        return 0, 0
    return (
        safe_amount(attribution.get("marketingCost"), "marketingCost"),
        safe_amount(attribution.get("salesCost"), "salesCost"),
    )


def _fill_month(placement: Dict[str, Any]) -> Optional[str]:
    """UTC YYYY-MM of the placement's fill date, None if unparsable."""
    fill_date = parse_timestamp(fill_timestamp_of(placement))
    if fill_date is None:
        return None
    return fill_date.astimezone(timezone.utc).strftime("%Y-%m")


class DashboardService:
    """Builds dashboard payloads from placement and job lists."""

    def __init__(self, scoring_service: Optional[ScoringService] = None):
        self.scoring_service = scoring_service or ScoringService()

    def get_service_line_attribution_data(self, placements: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Revenue attribution by service line.

        Returns:
            {summary, serviceLines, chartData}; serviceLines and the chartData
            series share the same order.
        """
        attribution = self.scoring_service.calculate_service_line_attribution(placements)
        lines = list(attribution.values())

        total_revenue = sum(line["totalRevenue"] for line in lines)
        total_margin = sum(line["totalMargin"] for line in lines)

        return {
            "summary": {
                "totalRevenue": total_revenue,
                "totalMargin": total_margin,
                "totalPlacements": len(placements),
                "averageMarginPercentage": _percentage(total_margin, total_revenue),
            },
            "serviceLines": [
                {**line, "revenuePercentage": _percentage(line["totalRevenue"], total_revenue)}
                for line in lines
            ],
            "chartData": {
                "labels": list(attribution.keys()),
                "revenue": [line["totalRevenue"] for line in lines],
                "placements": [line["placementCount"] for line in lines],
            },
        }

    def get_placement_velocity_data(self, placements: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Placement velocity statistics.

        Placements should carry their job under 'job'; without it the
        velocity score is 0. Placements whose fill date cannot be parsed
        are left out of the monthly trend only.

        Returns:
            {summary, byServiceLine, trend, distribution}
        """
        scored = self.scoring_service.batch_calculate_scores(placements)

        scores_by_line: Dict[str, List[int]] = defaultdict(list)
        scores_by_month: Dict[str, List[int]] = defaultdict(list)

        for placement in scored:
            velocity = placement["velocityScore"]
            scores_by_line[service_line_of(placement)].append(velocity)

            month = _fill_month(placement)
            if month is None:
                logger.warning(
                    f"Placement {placement.get('id')} has no valid fill date; "
                    f"excluded from velocity trend"
                )
                continue
            scores_by_month[month].append(velocity)

        by_service_line = [
            {
                "serviceLine": name,
                "averageVelocity": round_half_up(mean(scores)),
                "placementCount": len(scores),
                "tier": self.scoring_service.get_score_tier(mean(scores)),
            }
            for name, scores in scores_by_line.items()
        ]

        trend = [
            {"month": month, "averageVelocity": round_half_up(mean(scores_by_month[month]))}
            for month in sorted(scores_by_month)
        ]

        all_scores = [p["velocityScore"] for p in scored]
        overall_average = round_half_up(mean(all_scores)) if all_scores else 0

        return {
            "summary": {
                "overallAverageVelocity": overall_average,
                "tier": self.scoring_service.get_score_tier(overall_average),
                "totalPlacements": len(placements),
            },
            "byServiceLine": by_service_line,
            "trend": trend,
            "distribution": calculate_score_distribution(all_scores),
        }

    def get_roi_dashboard_data(self, placements: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        ROI statistics.

        Missing attribution counts as zero cost.

        Returns:
            {summary, byServiceLine, costBreakdown, distribution}
        """
        scored = self.scoring_service.batch_calculate_scores(placements)

        total_revenue = 0
        total_margin = 0
        total_marketing = 0
        total_sales = 0
        lines: Dict[str, Dict[str, Any]] = {}

        for placement in scored:
            revenue = safe_amount(placement.get("revenue"), "revenue")
            marketing, sales = _costs(placement)

            total_revenue += revenue
            total_margin += safe_amount(placement.get("margin"), "margin")
            total_marketing += marketing
            total_sales += sales

            line = lines.setdefault(
                service_line_of(placement),
                {"revenue": 0, "cost": 0, "scores": []}
            )
            line["revenue"] += revenue
            line["cost"] += marketing + sales
            line["scores"].append(placement["roiScore"])

        total_cost = total_marketing + total_sales
        roi_scores = [p["roiScore"] for p in scored]
        average_roi_score = round_half_up(mean(roi_scores)) if roi_scores else 0

        return {
            "summary": {
                "totalRevenue": total_revenue,
                "totalMargin": total_margin,
                "totalCost": total_cost,
                "overallROI": _roi_percentage(total_revenue, total_cost),
                "averageROIScore": average_roi_score,
                "tier": self.scoring_service.get_score_tier(average_roi_score),
            },
            "byServiceLine": [
                {
                    "serviceLine": name,
                    "revenue": data["revenue"],
                    "cost": data["cost"],
                    "roi": _roi_percentage(data["revenue"], data["cost"]),
                    "averageScore": round_half_up(mean(data["scores"])),
                }
                for name, data in lines.items()
            ],
            "costBreakdown": {
                "marketing": total_marketing,
                "sales": total_sales,
            },
            "distribution": calculate_score_distribution(roi_scores),
        }

    def get_executive_dashboard_data(
        self,
        placements: List[Dict[str, Any]],
        jobs: Optional[List[Dict[str, Any]]] = None,
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        All dashboards combined, plus an overview with the fill rate.

        Args:
            placements: Placements, ideally with their job embedded
            jobs: All jobs (for the fill rate)
            now: Generation time (defaults to the current UTC time)
        """
        jobs = jobs or []

        return {
            "serviceLineAttribution": self.get_service_line_attribution_data(placements),
            "placementVelocity": self.get_placement_velocity_data(placements),
            "roi": self.get_roi_dashboard_data(placements),
            "overview": {
                "totalJobs": len(jobs),
                "totalPlacements": len(placements),
                "fillRate": _percentage(len(placements), len(jobs)),
                "generatedAt": utc_iso_timestamp(now),
            },
        }

    def calculate_score_distribution(self, scores) -> Dict[str, int]:
        return calculate_score_distribution(scores)
