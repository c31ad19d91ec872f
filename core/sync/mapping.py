#!/usr/bin/env python3
"""
TrackerRMS -> HubSpot deal property mapping.
"""

from typing import Any, Dict, Optional

from core.scoring.models import PlacementScores
from core.utils import is_number

DEFAULT_DEAL_STAGE = "appointmentscheduled"

JOB_STATUS_TO_DEAL_STAGE: Dict[str, str] = {
    "open": "appointmentscheduled",
    "active": "qualifiedtobuy",
    "interviewing": "presentationscheduled",
    "offer": "decisionmakerboughtin",
    "filled": "closedwon",
    "closed": "closedlost",
    "cancelled": "closedlost",
}

VELOCITY_SCORE_PROPERTY = "trackerrms_velocity_score"
ROI_SCORE_PROPERTY = "trackerrms_roi_score"


def map_job_status_to_deal_stage(status: Optional[str]) -> str:
    """HubSpot deal stage id for a TrackerRMS job status (case-insensitive)."""
    if not status:
        return DEFAULT_DEAL_STAGE
    return JOB_STATUS_TO_DEAL_STAGE.get(str(status).lower(), DEFAULT_DEAL_STAGE)


def map_job_to_deal_properties(job: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "dealname": job.get("title") or job.get("name"),
        "amount": job.get("estimatedRevenue") or 0,
        "dealstage": map_job_status_to_deal_stage(job.get("status")),
        "closedate": job.get("targetDate") or None,
        "trackerrms_job_id": job.get("id"),
        "trackerrms_service_line": job.get("serviceLine") or job.get("category") or "",
    }


def _placement_amount(placement: Dict[str, Any]) -> float:
    if placement.get("revenue"):
        return placement["revenue"]
    bill_rate, hours = placement.get("billRate"), placement.get("hours")
    if is_number(bill_rate) and is_number(hours):
        return bill_rate * hours
    return 0


def map_placement_to_deal_properties(placement: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "dealname": placement.get("title") or f"Placement: {placement.get('candidateName')}",
        "amount": _placement_amount(placement),
        "dealstage": "closedwon",
        "closedate": placement.get("startDate") or placement.get("createdAt"),
        "trackerrms_placement_id": placement.get("id"),
        "trackerrms_job_id": placement.get("jobId") or "",
        "trackerrms_service_line": placement.get("serviceLine") or "",
        "trackerrms_revenue": placement.get("revenue") or 0,
        "trackerrms_margin": placement.get("margin") or 0,
        "trackerrms_placement_date": placement.get("startDate") or None,
    }


def map_scores_to_deal_properties(scores: PlacementScores) -> Dict[str, Any]:
    """The score properties written onto placement deals."""
    return {
        VELOCITY_SCORE_PROPERTY: scores.velocity.value,
        ROI_SCORE_PROPERTY: scores.roi.value,
    }
