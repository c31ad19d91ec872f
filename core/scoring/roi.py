#!/usr/bin/env python3
"""
ROI Score - return on the marketing and sales spend behind a placement.

With cost data:     score = clamp(round(roi / 5), 0, 100)
                    roi   = (revenue - cost) / cost * 100
                    (500% ROI or better scores 100)
Without cost data:  score = clamp(round(margin% * 2), 0, 100)
                    (50% margin or better scores 100)
"""

import logging
from typing import Any, Dict, Optional

from core.exceptions import InvalidRecordError
from core.scoring.models import ScoreResult
from core.scoring.records import Attribution, PlacementRecord
from core.utils import clamp, round_half_up

logger = logging.getLogger(__name__)

ROI_POINTS_DIVISOR = 5
MARGIN_MULTIPLIER = 2


def _margin_proxy_score(revenue: float, margin: float) -> int:
    margin_percentage = (margin / revenue) * 100 if revenue > 0 else 0
    return int(clamp(round_half_up(margin_percentage * MARGIN_MULTIPLIER), 0, 100))


def _roi_score(revenue: float, total_cost: float) -> int:
    roi = ((revenue - total_cost) / total_cost) * 100
    return int(clamp(round_half_up(roi / ROI_POINTS_DIVISOR), 0, 100))


def roi_score_result(
    placement: Optional[Dict[str, Any]],
    attribution: Optional[Dict[str, Any]] = None
) -> ScoreResult:
    """
    Score a placement's revenue against its attributed cost.

    Args:
        placement: Placement record with revenue and margin
        attribution: Optional marketingCost/salesCost data

    Returns:
        ScoreResult in [0, 100]; value 0 with DEFAULTED outcome when the
        placement is missing or carries non-numeric amounts.
    """
    if placement is None:
        return ScoreResult.defaulted("placement missing")

    try:
        record = PlacementRecord.from_raw(placement)
        costs = Attribution.from_raw(attribution)

        if costs.total_cost == 0:
            return ScoreResult(value=_margin_proxy_score(record.revenue, record.margin))

        return ScoreResult(value=_roi_score(record.revenue, costs.total_cost))

    except InvalidRecordError as e:
        logger.error(f"Error calculating ROI score: {e}")
        return ScoreResult.defaulted(str(e))
    except Exception as e:
        logger.error(f"Error calculating ROI score: {e}")
        return ScoreResult.failed(str(e))


def calculate_roi_score(
    placement: Optional[Dict[str, Any]],
    attribution: Optional[Dict[str, Any]] = None
) -> int:
    """ROI score (0-100) for a placement and its attribution data."""
    return roi_score_result(placement, attribution).value
