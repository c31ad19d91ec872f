#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

Portal identity comes from the http-only portal_id cookie set by the
OAuth callback, or from an X-Portal-Id header for API clients. HubSpot
tokens live in the TokenStore kept on app.state.
"""

import logging
from dataclasses import dataclass
from typing import Generator, Optional

from fastapi import Cookie, Depends, Header, Request

from core.crm_cards import CRMCardService
from core.dashboards import DashboardService
from core.exceptions import AuthenticationError
from core.hubspot import HubSpotOAuth, HubSpotService, TokenStore
from core.scoring import ScoringService
from core.sync import SyncService
from core.trackerrms import TrackerRMSClient
from .config import get_config
from .exceptions import MissingApiKeyException, NotAuthenticatedException

logger = logging.getLogger(__name__)

PORTAL_COOKIE = "portal_id"
STATE_COOKIE = "oauth_state"


@dataclass
class PortalAuth:
    """A connected HubSpot portal and a currently valid access token."""
    portal_id: str
    access_token: str


def get_token_store(request: Request) -> TokenStore:
    return request.app.state.token_store


def get_oauth(token_store: TokenStore = Depends(get_token_store)) -> HubSpotOAuth:
    return HubSpotOAuth(get_config().hubspot, token_store)


def get_portal_id(
    portal_id: Optional[str] = Cookie(default=None),
    x_portal_id: Optional[str] = Header(default=None)
) -> Optional[str]:
    """Portal id from the session cookie, falling back to the X-Portal-Id header."""
    return portal_id or x_portal_id


def require_portal_auth(
    portal_id: Optional[str] = Depends(get_portal_id),
    oauth: HubSpotOAuth = Depends(get_oauth)
) -> PortalAuth:
    """
    FastAPI dependency that requires a connected HubSpot portal.

    Expired tokens are refreshed on the way.

    Raises:
        NotAuthenticatedException: No portal id, or no tokens for it.
    """
    if not portal_id:
        logger.warning("Authentication required - no portal ID in request")
        raise NotAuthenticatedException("Authentication required")

    try:
        access_token = oauth.get_valid_access_token(portal_id)
    except AuthenticationError:
        logger.warning(f"Authentication required - no tokens found for portal {portal_id}")
        raise NotAuthenticatedException("Authentication required")

    return PortalAuth(portal_id=portal_id, access_token=access_token)


def require_trackerrms_key(x_trackerrms_api_key: Optional[str] = Header(default=None)) -> str:
    """
    TrackerRMS API key from the X-TrackerRMS-API-Key header.

    Only the header is accepted, so keys never end up in logged URLs.
    """
    if not x_trackerrms_api_key:
        raise MissingApiKeyException("TrackerRMS API key required in X-TrackerRMS-API-Key header")
    return x_trackerrms_api_key


def get_trackerrms_client(
    api_key: str = Depends(require_trackerrms_key)
) -> Generator[TrackerRMSClient, None, None]:
    """
    FastAPI dependency that yields a TrackerRMS client for the caller's key.

    Yields:
        TrackerRMSClient: Client that will be closed after the request.
    """
    client = TrackerRMSClient.from_config(get_config().trackerrms, api_key)
    try:
        yield client
    finally:
        client.close()


def get_hubspot_service(auth: PortalAuth = Depends(require_portal_auth)) -> HubSpotService:
    hubspot = get_config().hubspot
    return HubSpotService(
        auth.access_token,
        base_url=hubspot.base_url,
        request_timeout_seconds=hubspot.request_timeout_seconds
    )


def get_scoring_service() -> ScoringService:
    return ScoringService(get_config().scoring.weights)


def get_dashboard_service(
    scoring_service: ScoringService = Depends(get_scoring_service)
) -> DashboardService:
    return DashboardService(scoring_service)


def get_crm_card_service() -> CRMCardService:
    return CRMCardService(get_config().trackerrms.app_url)


def get_sync_service(
    hubspot: HubSpotService = Depends(get_hubspot_service),
    trackerrms: TrackerRMSClient = Depends(get_trackerrms_client),
    scoring_service: ScoringService = Depends(get_scoring_service)
) -> SyncService:
    return SyncService(hubspot, trackerrms, scoring_service)
