#!/usr/bin/env python3
"""
Velocity Score - how quickly a job was filled.

Formula: clamp(100 - 2 * days_to_fill, 10, 100), rounded half up.

- Same-day fill scores 100, each elapsed day costs 2 points.
- The floor of 10 is reached at 45 days.
- A fill recorded before the job opened is a data-quality anomaly and
  scores 100.
"""

import logging
from typing import Any, Dict, Optional

from core.scoring.models import ScoreOutcome, ScoreResult
from core.scoring.records import JobRecord, fill_timestamp_of
from core.utils import clamp, parse_timestamp, round_half_up

logger = logging.getLogger(__name__)

MAX_VELOCITY_SCORE = 100
MIN_VELOCITY_SCORE = 10
POINTS_PER_DAY = 2
SECONDS_PER_DAY = 24 * 60 * 60


def velocity_score_result(
    placement: Optional[Dict[str, Any]],
    job: Optional[Dict[str, Any]]
) -> ScoreResult:
    """
    Score the time between a job opening and its placement.

    Args:
        placement: Placement record supplying startDate or createdAt
        job: Job record supplying createdAt or openDate

    Returns:
        ScoreResult in [0, 100]; value 0 with DEFAULTED outcome when either
        record or timestamp is missing or unparsable.
    """
    if placement is None or job is None:
        return ScoreResult.defaulted("placement or job missing")

    try:
        job_record = JobRecord.from_raw(job)
        raw_fill = fill_timestamp_of(placement)
        fill_date = parse_timestamp(raw_fill)

        if job_record.open_date is None or fill_date is None:
            logger.warning(
                f"Invalid dates for velocity calculation: "
                f"job_date={job_record.raw_open_date!r}, placement_date={raw_fill!r}"
            )
            return ScoreResult.defaulted("invalid dates")

        days_to_fill = (fill_date - job_record.open_date).total_seconds() / SECONDS_PER_DAY

        if days_to_fill < 0:
            logger.warning(
                f"Placement date is before job creation date: "
                f"job_date={job_record.open_date.isoformat()}, "
                f"placement_date={fill_date.isoformat()}"
            )
            return ScoreResult(
                value=MAX_VELOCITY_SCORE,
                outcome=ScoreOutcome.ANOMALY,
                reason="placement date before job creation"
            )

        score = clamp(
            MAX_VELOCITY_SCORE - days_to_fill * POINTS_PER_DAY,
            MIN_VELOCITY_SCORE,
            MAX_VELOCITY_SCORE
        )
        return ScoreResult(value=round_half_up(score))

    except Exception as e:
        logger.error(f"Error calculating velocity score: {e}")
        return ScoreResult.failed(str(e))


def calculate_velocity_score(
    placement: Optional[Dict[str, Any]],
    job: Optional[Dict[str, Any]]
) -> int:
    """Velocity score (0-100) for a placement against its job."""
    return velocity_score_result(placement, job).value
