#!/usr/bin/env python3
"""
Timeline events for placements, job status changes and revenue milestones.

Builds HubSpot timeline event payloads (template id, object id, tokens)
for the app's event template.
"""

import time
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class TimelineService:
    """Timeline event builder for one event template."""

    def __init__(self, event_template_id: Optional[str]):
        self.event_template_id = event_template_id

    def create_placement_event(
        self,
        contact_id: str,
        placement: Dict[str, Any],
        job: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        tokens = {
            "placementId": placement.get("id"),
            "candidateName": placement.get("candidateName") or "Unknown",
            "jobTitle": (job or {}).get("title") or placement.get("jobTitle") or "Unknown Job",
            "clientName": placement.get("clientName") or "Unknown Client",
            "startDate": placement.get("startDate"),
            "billRate": placement.get("billRate") or 0,
            "revenue": placement.get("revenue") or 0,
            "serviceLine": placement.get("serviceLine") or "N/A",
        }
        return self.create_event("contacts", contact_id, "placement_created", tokens)

    def create_job_status_event(
        self,
        contact_id: str,
        job: Dict[str, Any],
        previous_status: Optional[str],
        new_status: str
    ) -> Dict[str, Any]:
        tokens = {
            "jobId": job.get("id"),
            "jobTitle": job.get("title"),
            "clientName": job.get("clientName") or "Unknown",
            "previousStatus": previous_status or "N/A",
            "newStatus": new_status,
            "serviceLine": job.get("serviceLine") or "N/A",
        }
        return self.create_event("contacts", contact_id, "job_status_changed", tokens)

    def create_revenue_milestone_event(
        self,
        deal_id: str,
        placement: Dict[str, Any],
        milestone: str,
        total_revenue: float
    ) -> Dict[str, Any]:
        tokens = {
            "placementId": placement.get("id"),
            "candidateName": placement.get("candidateName") or "Unknown",
            "milestone": milestone,
            "totalRevenue": total_revenue,
            "serviceLine": placement.get("serviceLine") or "N/A",
        }
        return self.create_event("deals", deal_id, "revenue_milestone", tokens)

    def create_event(
        self,
        object_type: str,
        object_id: str,
        event_type: str,
        tokens: Dict[str, Any],
        extra_data: Optional[Dict[str, Any]] = None,
        timestamp: Optional[int] = None
    ) -> Dict[str, Any]:
        """Build a timeline event payload; timestamp is epoch milliseconds."""
        event = {
            "eventTemplateId": self.event_template_id,
            "objectId": object_id,
            "tokens": tokens,
            "extraData": extra_data or {},
            "timestamp": timestamp if timestamp is not None else int(time.time() * 1000),
        }
        logger.info(f"Creating timeline event: object_type={object_type}, object_id={object_id}, event_type={event_type}")
        return event

    def create_batch_events(self, events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Build several events; each entry holds create_event keyword arguments.

        Returns:
            One {success, event} or {success, error} dict per entry.
        """
        results = []
        for entry in events:
            try:
                results.append({"success": True, "event": self.create_event(**entry)})
            except TypeError as e:
                logger.error(f"Failed to create timeline event: {e}")
                results.append({"success": False, "error": str(e)})
        return results
