#!/usr/bin/env python3
"""
Webhook endpoints - HubSpot deal events and TrackerRMS record events.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from core.exceptions import AuthenticationError
from core.hubspot import HubSpotOAuth, HubSpotService
from core.scoring import ScoringService
from core.sync import SyncService
from core.trackerrms import TrackerRMSClient
from ..config import get_config
from ..dependencies import get_oauth, get_scoring_service
from ..exceptions import InvalidWebhookSignatureException
from ..models.requests import TrackerRMSWebhookPayload
from ..models.responses import WebhookAckResponse
from ..services.webhook_service import WebhookService, verify_hubspot_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post("/hubspot/deals", response_model=WebhookAckResponse)
async def hubspot_deal_webhook(
    request: Request,
    x_hubspot_signature_v3: Optional[str] = Header(default=None),
    x_hubspot_request_timestamp: Optional[str] = Header(default=None)
):
    """
    Receive HubSpot deal subscription events (a single event or a list).

    Signatures are enforced in production only.
    """
    body = await request.body()
    config = get_config()

    if config.server.is_production and not verify_hubspot_signature(
        request.method,
        str(request.url),
        body,
        x_hubspot_signature_v3,
        x_hubspot_request_timestamp,
        config.hubspot.client_secret
    ):
        logger.warning("Invalid HubSpot webhook signature")
        raise InvalidWebhookSignatureException("Invalid signature")

    try:
        payload = json.loads(body or b"[]")
    except ValueError:
        raise HTTPException(status_code=400, detail="Webhook body is not valid JSON")

    events = payload if isinstance(payload, list) else [payload]
    WebhookService().handle_hubspot_deal_events(events)
    return WebhookAckResponse(success=True)


def _webhook_sync_service(
    portal_id: Optional[str],
    api_key: Optional[str],
    oauth: HubSpotOAuth,
    scoring_service: ScoringService
) -> SyncService:
    if not portal_id or not api_key:
        raise HTTPException(status_code=400, detail="Missing portal ID or TrackerRMS API key")

    try:
        access_token = oauth.get_valid_access_token(portal_id)
    except AuthenticationError:
        raise HTTPException(status_code=401, detail="Portal not authenticated")

    config = get_config()
    hubspot = HubSpotService(
        access_token,
        base_url=config.hubspot.base_url,
        request_timeout_seconds=config.hubspot.request_timeout_seconds
    )
    trackerrms = TrackerRMSClient.from_config(config.trackerrms, api_key)
    return SyncService(hubspot, trackerrms, scoring_service)


@router.post("/trackerrms/jobs", response_model=WebhookAckResponse)
def trackerrms_job_webhook(
    payload: TrackerRMSWebhookPayload,
    x_portal_id: Optional[str] = Header(default=None),
    x_trackerrms_api_key: Optional[str] = Header(default=None),
    oauth: HubSpotOAuth = Depends(get_oauth),
    scoring_service: ScoringService = Depends(get_scoring_service)
):
    """job.created / job.updated / job.filled -> sync the job (and filled placements)."""
    sync_service = _webhook_sync_service(x_portal_id, x_trackerrms_api_key, oauth, scoring_service)
    try:
        WebhookService(sync_service).handle_trackerrms_job_event(payload.event, payload.data)
    except Exception as e:
        logger.error(f"Error processing TrackerRMS job webhook: {e}")
        raise HTTPException(status_code=500, detail="Webhook processing failed")
    finally:
        sync_service.trackerrms.close()
    return WebhookAckResponse(success=True)


@router.post("/trackerrms/placements", response_model=WebhookAckResponse)
def trackerrms_placement_webhook(
    payload: TrackerRMSWebhookPayload,
    x_portal_id: Optional[str] = Header(default=None),
    x_trackerrms_api_key: Optional[str] = Header(default=None),
    oauth: HubSpotOAuth = Depends(get_oauth),
    scoring_service: ScoringService = Depends(get_scoring_service)
):
    """placement.* -> sync the placement; placement.revenue_updated -> revenue sync."""
    sync_service = _webhook_sync_service(x_portal_id, x_trackerrms_api_key, oauth, scoring_service)
    try:
        WebhookService(sync_service).handle_trackerrms_placement_event(payload.event, payload.data)
    except Exception as e:
        logger.error(f"Error processing TrackerRMS placement webhook: {e}")
        raise HTTPException(status_code=500, detail="Webhook processing failed")
    finally:
        sync_service.trackerrms.close()
    return WebhookAckResponse(success=True)
