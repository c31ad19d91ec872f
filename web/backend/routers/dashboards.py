#!/usr/bin/env python3
"""
Dashboard endpoints - attribution, velocity, ROI and executive views.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from core.dashboards import DashboardService, enrich_placements_with_jobs
from core.exceptions import TrackerRMSError
from core.trackerrms import TrackerRMSClient
from ..dependencies import get_dashboard_service, get_trackerrms_client
from ..models.responses import DashboardResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboards", tags=["dashboards"])


def _placements_with_jobs(trackerrms: TrackerRMSClient) -> List[Dict[str, Any]]:
    """Placements with their job fetched one by one; missing jobs are skipped."""
    placements = []
    for placement in trackerrms.get_placements():
        placement = dict(placement)
        job_id = placement.get("jobId")
        if job_id:
            try:
                placement["job"] = trackerrms.get_job(job_id)
            except TrackerRMSError as e:
                logger.warning(f"Job {job_id} unavailable for placement {placement.get('id')}: {e}")
        placements.append(placement)
    return placements


@router.get("/attribution", response_model=DashboardResponse)
def get_attribution_dashboard(
    trackerrms: TrackerRMSClient = Depends(get_trackerrms_client),
    dashboards: DashboardService = Depends(get_dashboard_service)
):
    """Revenue, margin and placement counts per service line."""
    placements = trackerrms.get_placements()
    return DashboardResponse(success=True, data=dashboards.get_service_line_attribution_data(placements))


@router.get("/velocity", response_model=DashboardResponse)
def get_velocity_dashboard(
    trackerrms: TrackerRMSClient = Depends(get_trackerrms_client),
    dashboards: DashboardService = Depends(get_dashboard_service)
):
    """Velocity distribution, per-line averages and the monthly trend."""
    placements = _placements_with_jobs(trackerrms)
    return DashboardResponse(success=True, data=dashboards.get_placement_velocity_data(placements))


@router.get("/roi", response_model=DashboardResponse)
def get_roi_dashboard(
    trackerrms: TrackerRMSClient = Depends(get_trackerrms_client),
    dashboards: DashboardService = Depends(get_dashboard_service)
):
    """ROI overall, per service line and the cost breakdown."""
    placements = trackerrms.get_placements()
    return DashboardResponse(success=True, data=dashboards.get_roi_dashboard_data(placements))


@router.get("/executive", response_model=DashboardResponse)
def get_executive_dashboard(
    trackerrms: TrackerRMSClient = Depends(get_trackerrms_client),
    dashboards: DashboardService = Depends(get_dashboard_service)
):
    """All dashboards combined, plus totals and the fill rate."""
    placements = trackerrms.get_placements()
    jobs = trackerrms.get_jobs()
    placements = enrich_placements_with_jobs(placements, jobs)
    return DashboardResponse(success=True, data=dashboards.get_executive_dashboard_data(placements, jobs))
