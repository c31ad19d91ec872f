#!/usr/bin/env python3
"""
CRM card endpoints - data fetch URLs for HubSpot CRM cards.

HubSpot renders whatever these return, so failures are reported as an
error card with status 200 rather than as an HTTP error.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header

from core.crm_cards import CRMCardService
from core.exceptions import IntegrationError
from core.scoring import ScoringService
from core.trackerrms import TrackerRMSClient
from core.utils import safe_amount
from ..config import get_config
from ..dependencies import get_crm_card_service, get_scoring_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/crm-cards", tags=["crm-cards"])

MISSING_KEY_MESSAGE = "TrackerRMS API key required in header"


def _client(api_key: str) -> TrackerRMSClient:
    return TrackerRMSClient.from_config(get_config().trackerrms, api_key)


@router.get("/job/{job_id}")
def get_job_card(
    job_id: str,
    x_trackerrms_api_key: Optional[str] = Header(default=None),
    cards: CRMCardService = Depends(get_crm_card_service)
):
    """Job details plus up to five candidates."""
    if not x_trackerrms_api_key:
        return cards.build_error_card(MISSING_KEY_MESSAGE)

    trackerrms = _client(x_trackerrms_api_key)
    try:
        job = dict(trackerrms.get_job(job_id))
        try:
            job["candidates"] = trackerrms.get_candidates_by_job(job_id)
        except IntegrationError as e:
            logger.warning(f"Candidates unavailable for job {job_id}: {e}")
            job["candidates"] = []
        return cards.build_job_card(job)
    except Exception as e:
        logger.error(f"Failed to get job card for {job_id}: {e}")
        return cards.build_error_card(f"Failed to load job: {e}")
    finally:
        trackerrms.close()


@router.get("/placement/{placement_id}")
def get_placement_card(
    placement_id: str,
    x_trackerrms_api_key: Optional[str] = Header(default=None),
    cards: CRMCardService = Depends(get_crm_card_service),
    scoring_service: ScoringService = Depends(get_scoring_service)
):
    """Placement details, revenue and the velocity, ROI and overall scores."""
    if not x_trackerrms_api_key:
        return cards.build_error_card(MISSING_KEY_MESSAGE)

    trackerrms = _client(x_trackerrms_api_key)
    try:
        placement = dict(trackerrms.get_placement(placement_id))

        job = None
        if placement.get("jobId"):
            try:
                job = trackerrms.get_job(placement["jobId"])
            except IntegrationError as e:
                logger.warning(f"Job {placement['jobId']} not found for placement {placement_id}: {e}")

        scores = scoring_service.score_placement(placement, job=job, attribution=placement.get("attribution"))
        placement.update(scores.as_fields())
        return cards.build_placement_card(placement)
    except Exception as e:
        logger.error(f"Failed to get placement card for {placement_id}: {e}")
        return cards.build_error_card(f"Failed to load placement: {e}")
    finally:
        trackerrms.close()


@router.get("/attribution/{deal_id}")
def get_attribution_card(
    deal_id: str,
    x_trackerrms_api_key: Optional[str] = Header(default=None),
    cards: CRMCardService = Depends(get_crm_card_service),
    scoring_service: ScoringService = Depends(get_scoring_service)
):
    """Revenue attribution across all placements, by service line."""
    if not x_trackerrms_api_key:
        return cards.build_error_card(MISSING_KEY_MESSAGE)

    trackerrms = _client(x_trackerrms_api_key)
    try:
        placements = trackerrms.get_placements()
        attribution = scoring_service.calculate_service_line_attribution(placements)
        return cards.build_attribution_card({
            "totalRevenue": sum(safe_amount(line["totalRevenue"]) for line in attribution.values()),
            "totalPlacements": len(placements),
            "serviceLines": attribution,
        })
    except Exception as e:
        logger.error(f"Failed to get attribution card for deal {deal_id}: {e}")
        return cards.build_error_card(f"Failed to load attribution: {e}")
    finally:
        trackerrms.close()
