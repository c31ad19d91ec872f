#!/usr/bin/env python3
"""
Sync Service - mirror TrackerRMS jobs and placements into HubSpot deals.

Usage:
    service = SyncService(hubspot, trackerrms, scoring_service)
    result = service.full_sync()

Each record is upserted by its trackerrms_*_id deal property. A failure on
one record is counted and recorded; it does not stop the run. A failure to
fetch the record list itself propagates to the caller.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from core.exceptions import IntegrationError
from core.hubspot.crm import HubSpotService
from core.scoring.service import ScoringService
from core.sync.mapping import (
    map_job_to_deal_properties,
    map_placement_to_deal_properties,
    map_scores_to_deal_properties,
)
from core.trackerrms.client import TrackerRMSClient

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    created: int = 0
    updated: int = 0
    errors: int = 0
    items: List[Dict[str, Any]] = field(default_factory=list)

    def record(self, item: Dict[str, Any]) -> None:
        self.items.append(item)
        if item["action"] == "created":
            self.created += 1
        elif item["action"] == "updated":
            self.updated += 1

    def record_error(self, item: Dict[str, Any]) -> None:
        self.errors += 1
        self.items.append({**item, "action": "error"})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SyncService:
    """Upserts TrackerRMS records into HubSpot deals for one portal."""

    def __init__(
        self,
        hubspot: HubSpotService,
        trackerrms: TrackerRMSClient,
        scoring_service: Optional[ScoringService] = None
    ):
        self.hubspot = hubspot
        self.trackerrms = trackerrms
        self.scoring_service = scoring_service or ScoringService()

    # ============ JOBS ============

    def sync_jobs(self, params: Optional[Dict[str, Any]] = None) -> SyncResult:
        result = SyncResult()
        jobs = self.trackerrms.get_jobs(params)

        for job in jobs:
            try:
                result.record(self.sync_single_job(job))
            except Exception as e:
                result.record_error({"jobId": job.get("id"), "error": str(e)})
                logger.error(f"Failed to sync job {job.get('id')}: {e}")

        logger.info(f"Job sync completed: created={result.created}, updated={result.updated}, errors={result.errors}")
        return result

    def sync_single_job(self, job: Dict[str, Any]) -> Dict[str, Any]:
        properties = map_job_to_deal_properties(job)
        existing = self.hubspot.search_deals("trackerrms_job_id", job["id"])

        if existing:
            deal = self.hubspot.update_deal(existing[0]["id"], properties)
            return {"jobId": job["id"], "dealId": deal["id"], "action": "updated"}

        deal = self.hubspot.create_deal(properties)
        return {"jobId": job["id"], "dealId": deal["id"], "action": "created"}

    # ============ PLACEMENTS ============

    def sync_placements(self, params: Optional[Dict[str, Any]] = None) -> SyncResult:
        result = SyncResult()
        placements = self.trackerrms.get_placements(params)

        for placement in placements:
            try:
                result.record(self.sync_single_placement(placement))
            except Exception as e:
                result.record_error({"placementId": placement.get("id"), "error": str(e)})
                logger.error(f"Failed to sync placement {placement.get('id')}: {e}")

        logger.info(
            f"Placement sync completed: created={result.created}, "
            f"updated={result.updated}, errors={result.errors}"
        )
        return result

    def _job_for(self, placement: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if placement.get("job"):
            return placement["job"]
        if not placement.get("jobId"):
            return None
        try:
            return self.trackerrms.get_job(placement["jobId"])
        except IntegrationError as e:
            logger.warning(f"Job {placement['jobId']} unavailable for velocity scoring: {e}")
            return None

    def placement_deal_properties(self, placement: Dict[str, Any]) -> Dict[str, Any]:
        """Deal properties for a placement, including its velocity and ROI scores."""
        scores = self.scoring_service.score_placement(
            placement,
            job=self._job_for(placement),
            attribution=placement.get("attribution")
        )
        return {
            **map_placement_to_deal_properties(placement),
            **map_scores_to_deal_properties(scores),
        }

    def sync_single_placement(self, placement: Dict[str, Any]) -> Dict[str, Any]:
        """
        Upsert a placement deal.

        Lookup order: the placement's own deal, then the parent job's deal
        (which is updated in place), otherwise a new deal is created.
        """
        properties = self.placement_deal_properties(placement)
        placement_id = placement["id"]

        existing = self.hubspot.search_deals("trackerrms_placement_id", placement_id)
        if existing:
            deal = self.hubspot.update_deal(existing[0]["id"], properties)
            return {"placementId": placement_id, "dealId": deal["id"], "action": "updated"}

        job_id = placement.get("jobId")
        if job_id:
            job_deals = self.hubspot.search_deals("trackerrms_job_id", job_id)
            if job_deals:
                deal = self.hubspot.update_deal(job_deals[0]["id"], properties)
                return {"placementId": placement_id, "jobId": job_id, "dealId": deal["id"], "action": "updated"}

        deal = self.hubspot.create_deal(properties)
        return {"placementId": placement_id, "dealId": deal["id"], "action": "created"}

    # ============ REVENUE ============

    def sync_revenue(self) -> SyncResult:
        """Refresh revenue and margin on the deals of active placements."""
        result = SyncResult()
        placements = self.trackerrms.get_placements({"status": "active"})

        for placement in placements:
            placement_id = placement.get("id")
            try:
                revenue = self.trackerrms.get_placement_revenue(placement_id)
                deals = self.hubspot.search_deals("trackerrms_placement_id", placement_id)
                if not deals:
                    continue

                total_revenue = revenue.get("totalRevenue") or 0
                self.hubspot.update_deal(deals[0]["id"], {
                    "trackerrms_revenue": total_revenue,
                    "trackerrms_margin": revenue.get("margin") or 0,
                    "amount": total_revenue,
                })
                result.record({
                    "placementId": placement_id,
                    "dealId": deals[0]["id"],
                    "revenue": revenue.get("totalRevenue"),
                    "action": "updated",
                })
            except Exception as e:
                result.record_error({"placementId": placement_id, "error": str(e)})
                logger.error(f"Failed to sync revenue for placement {placement_id}: {e}")

        logger.info(f"Revenue sync completed: updated={result.updated}, errors={result.errors}")
        return result

    def full_sync(self) -> Dict[str, SyncResult]:
        """Jobs, then placements, then revenue."""
        logger.info("Starting full sync")

        results = {
            "jobs": self.sync_jobs(),
            "placements": self.sync_placements(),
            "revenue": self.sync_revenue(),
        }

        logger.info(
            f"Full sync completed: jobs_created={results['jobs'].created}, "
            f"jobs_updated={results['jobs'].updated}, "
            f"placements_created={results['placements'].created}, "
            f"placements_updated={results['placements'].updated}, "
            f"revenue_updated={results['revenue'].updated}"
        )
        return results
