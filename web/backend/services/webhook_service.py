#!/usr/bin/env python3
"""
Webhook handling for HubSpot deal events and TrackerRMS record events.

HubSpot signs requests with its v3 scheme:
    base64(HMAC-SHA256(client_secret, method + uri + body + timestamp))
and sends the millisecond timestamp alongside. Requests older than five
minutes are rejected.
"""

import hmac
import time
import base64
import hashlib
import logging
from typing import Any, Dict, List, Optional, Union

from core.sync import SyncService

logger = logging.getLogger(__name__)

MAX_TIMESTAMP_SKEW_MS = 5 * 60 * 1000

JOB_SYNC_EVENTS = {"job.created", "job.updated", "job.filled"}
PLACEMENT_SYNC_EVENTS = {"placement.created", "placement.updated", "placement.ended"}
REVENUE_EVENT = "placement.revenue_updated"


def compute_hubspot_signature(method: str, uri: str, body: str, timestamp: str, secret: str) -> str:
    source = f"{method}{uri}{body}{timestamp}"
    digest = hmac.new(secret.encode("utf-8"), source.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_hubspot_signature(
    method: str,
    uri: str,
    body: Union[str, bytes],
    signature: Optional[str],
    timestamp: Optional[str],
    secret: Optional[str],
    now: Optional[float] = None
) -> bool:
    """
    Check an X-HubSpot-Signature-v3 header.

    Args:
        method: HTTP method of the request
        uri: Full request URI as HubSpot called it
        body: Raw request body
        signature: X-HubSpot-Signature-v3 header value
        timestamp: X-HubSpot-Request-Timestamp header value (epoch ms)
        secret: The app's client secret
        now: Current epoch seconds (defaults to time.time())

    Returns:
        True only for a well-formed, fresh and matching signature.
    """
    if not signature or not timestamp or not secret:
        return False

    try:
        timestamp_ms = int(timestamp)
    except ValueError:
        return False

    now_ms = (time.time() if now is None else now) * 1000
    if abs(now_ms - timestamp_ms) > MAX_TIMESTAMP_SKEW_MS:
        return False

    if isinstance(body, bytes):
        body = body.decode("utf-8")

    expected = compute_hubspot_signature(method, uri, body, timestamp, secret)
    return hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8"))


class WebhookService:
    """Dispatches webhook events; TrackerRMS events go to the sync service."""

    def __init__(self, sync_service: Optional[SyncService] = None):
        self.sync_service = sync_service

    def handle_hubspot_deal_events(self, events: List[Dict[str, Any]]) -> int:
        """Log HubSpot deal events. Returns the number of events seen."""
        for event in events:
            subscription_type = event.get("subscriptionType")
            deal_id = event.get("objectId")
            logger.info(f"HubSpot deal webhook received: event_type={subscription_type}, deal_id={deal_id}")

            if subscription_type == "deal.propertyChange":
                logger.info(
                    f"Deal property changed: deal_id={deal_id}, "
                    f"property={event.get('propertyName')}, value={event.get('propertyValue')}"
                )
            elif subscription_type == "deal.creation":
                logger.info(f"New deal created: deal_id={deal_id}")
            elif subscription_type == "deal.deletion":
                logger.info(f"Deal deleted: deal_id={deal_id}")

        return len(events)

    def _require_sync_service(self) -> SyncService:
        if self.sync_service is None:
            raise RuntimeError("WebhookService has no sync service for TrackerRMS events")
        return self.sync_service

    def handle_trackerrms_job_event(self, event: str, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Sync the job named by a TrackerRMS job event.

        job.filled also syncs the placements embedded in the event data.

        Returns:
            One sync item per record written; empty for unhandled events.
        """
        logger.info(f"TrackerRMS job webhook received: event={event}, job_id={data.get('id')}")
        if event not in JOB_SYNC_EVENTS:
            logger.info(f"Ignoring TrackerRMS job event: {event}")
            return []

        sync_service = self._require_sync_service()
        items = [sync_service.sync_single_job(data)]

        if event == "job.filled":
            for placement in data.get("placements") or []:
                items.append(sync_service.sync_single_placement(placement))

        return items

    def handle_trackerrms_placement_event(self, event: str, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Sync the placement named by a TrackerRMS placement event.

        placement.revenue_updated refreshes revenue on every active placement deal.
        """
        logger.info(f"TrackerRMS placement webhook received: event={event}, placement_id={data.get('id')}")

        if event in PLACEMENT_SYNC_EVENTS:
            return [self._require_sync_service().sync_single_placement(data)]

        if event == REVENUE_EVENT:
            return self._require_sync_service().sync_revenue().items

        logger.info(f"Ignoring TrackerRMS placement event: {event}")
        return []
