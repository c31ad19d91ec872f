#!/usr/bin/env python3
"""
OAuth endpoints - connect and disconnect a HubSpot portal.
"""

import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Query
from fastapi.responses import JSONResponse, RedirectResponse

from core.exceptions import IntegrationError
from core.hubspot import HubSpotOAuth, TokenStore
from ..config import get_config
from ..dependencies import PORTAL_COOKIE, STATE_COOKIE, get_oauth, get_portal_id, get_token_store
from ..exceptions import InvalidOAuthStateException, MissingAuthorizationCodeException, ServiceException
from ..models.responses import ConnectionStatusResponse, LogoutResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["oauth"])

STATE_MAX_AGE_SECONDS = 10 * 60
PORTAL_MAX_AGE_SECONDS = 24 * 60 * 60


def _set_cookie(response: RedirectResponse, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        httponly=True,
        secure=get_config().server.is_production,
        samesite="lax"
    )


@router.get("/authorize")
def authorize(oauth: HubSpotOAuth = Depends(get_oauth)):
    """
    Start the HubSpot install flow.

    Redirects to HubSpot with a fresh state value, which is also kept in
    an http-only cookie for the callback to check.
    """
    state = uuid.uuid4().hex
    logger.info(f"Initiating OAuth flow: state={state}")

    response = RedirectResponse(oauth.get_authorization_url(state), status_code=302)
    _set_cookie(response, STATE_COOKIE, state, STATE_MAX_AGE_SECONDS)
    return response


@router.get("/callback")
def callback(
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    oauth_state: Optional[str] = Cookie(default=None),
    oauth: HubSpotOAuth = Depends(get_oauth)
):
    """
    Finish the install flow: check state, exchange the code, remember the portal.
    """
    if not state or state != oauth_state:
        logger.warning(f"OAuth state mismatch: expected={oauth_state}, received={state}")
        raise InvalidOAuthStateException("Invalid state parameter")

    if not code:
        logger.warning("No authorization code received")
        raise MissingAuthorizationCodeException("No authorization code provided")

    try:
        tokens = oauth.complete_authorization(code)
    except IntegrationError as e:
        logger.error(f"OAuth callback error: {e}")
        raise ServiceException("Failed to complete authentication") from e

    logger.info(f"OAuth flow completed successfully: portal_id={tokens.portal_id}")

    response = RedirectResponse("/dashboard", status_code=302)
    response.delete_cookie(STATE_COOKIE)
    _set_cookie(response, PORTAL_COOKIE, tokens.portal_id, PORTAL_MAX_AGE_SECONDS)
    return response


@router.post("/logout")
def logout(
    portal_id: Optional[str] = Depends(get_portal_id),
    token_store: TokenStore = Depends(get_token_store)
):
    """Forget the portal's tokens and clear the portal cookie."""
    response_body = LogoutResponse(success=True, message="Logged out successfully")

    if portal_id:
        token_store.remove(portal_id)
        logger.info(f"User logged out: portal_id={portal_id}")

    response = JSONResponse(content=response_body.model_dump())
    response.delete_cookie(PORTAL_COOKIE)
    return response


@router.get("/status", response_model=ConnectionStatusResponse)
def connection_status(
    portal_id: Optional[str] = Depends(get_portal_id),
    token_store: TokenStore = Depends(get_token_store)
):
    """Whether the caller's portal has stored tokens."""
    connected = bool(portal_id) and portal_id in token_store
    return ConnectionStatusResponse(
        connected=connected,
        portalId=portal_id if connected else None
    )
