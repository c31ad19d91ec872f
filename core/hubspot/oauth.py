#!/usr/bin/env python3
"""
HubSpot OAuth 2.0 - authorization URL, token exchange and refresh.

Tokens are kept in a TokenStore keyed by portal (hub) id. The store is an
explicit object handed to whoever needs it (the web app keeps one on
app.state) rather than module-level state.
"""

import time
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlencode

import requests

from core.config_loader import HubSpotConfig
from core.exceptions import AuthenticationError, HubSpotError

logger = logging.getLogger(__name__)

# Treat tokens as expired this many seconds before their real expiry
EXPIRY_MARGIN_SECONDS = 300


@dataclass(frozen=True)
class TokenSet:
    access_token: str
    refresh_token: str
    expires_at: float  # epoch seconds
    portal_id: str

    def is_expired(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.expires_at - EXPIRY_MARGIN_SECONDS

    @classmethod
    def from_response(cls, portal_id: str, payload: Dict[str, Any], now: Optional[float] = None) -> "TokenSet":
        """Build from a HubSpot /oauth/v1/token response body."""
        now = time.time() if now is None else now
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload["refresh_token"],
            expires_at=now + int(payload.get("expires_in", 0)),
            portal_id=str(portal_id),
        )


class TokenStore:
    """Thread-safe in-memory map of portal id -> TokenSet."""

    def __init__(self):
        self._tokens: Dict[str, TokenSet] = {}
        self._lock = threading.Lock()

    def store(self, tokens: TokenSet) -> None:
        with self._lock:
            self._tokens[tokens.portal_id] = tokens
        logger.info(f"Tokens stored for portal {tokens.portal_id}")

    def get(self, portal_id: Optional[str]) -> Optional[TokenSet]:
        if portal_id is None:
            return None
        with self._lock:
            return self._tokens.get(str(portal_id))

    def remove(self, portal_id: str) -> None:
        with self._lock:
            self._tokens.pop(str(portal_id), None)
        logger.info(f"Tokens removed for portal {portal_id}")

    def portal_ids(self) -> List[str]:
        with self._lock:
            return list(self._tokens.keys())

    def __contains__(self, portal_id) -> bool:
        return self.get(portal_id) is not None


class HubSpotOAuth:
    """OAuth flow against HubSpot for one public app."""

    def __init__(
        self,
        config: HubSpotConfig,
        token_store: TokenStore,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time
    ):
        self.config = config
        self.token_store = token_store
        self.session = session or requests.Session()
        self.clock = clock

    def get_authorization_url(self, state: str) -> str:
        """URL that starts the install flow; state guards against CSRF."""
        query = urlencode({
            "client_id": self.config.client_id or "",
            "redirect_uri": self.config.redirect_uri,
            "scope": " ".join(self.config.scopes),
            "state": state,
        })
        return f"{self.config.authorize_url}?{query}"

    def _request_tokens(self, form: Dict[str, str], action: str) -> Dict[str, Any]:
        form = {
            **form,
            "client_id": self.config.client_id or "",
            "client_secret": self.config.client_secret or "",
        }
        try:
            response = self.session.post(
                f"{self.config.base_url}/oauth/v1/token",
                data=form,
                timeout=self.config.request_timeout_seconds
            )
            response.raise_for_status()
        except requests.RequestException as e:
            response = getattr(e, 'response', None)
            status_code = response.status_code if response is not None else None
            logger.error(f"Failed to {action}: {e}")
            raise HubSpotError(f"Failed to {action}: {e}", status_code) from e

        logger.info(f"Successfully completed: {action}")
        return response.json()

    def exchange_code_for_tokens(self, code: str) -> Dict[str, Any]:
        return self._request_tokens({
            "grant_type": "authorization_code",
            "redirect_uri": self.config.redirect_uri,
            "code": code,
        }, action="exchange code for tokens")

    def refresh_access_token(self, refresh_token: str) -> Dict[str, Any]:
        return self._request_tokens({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }, action="refresh access token")

    def get_portal_id(self, access_token: str) -> str:
        """Look up the hub id an access token belongs to."""
        try:
            response = self.session.get(
                f"{self.config.base_url}/oauth/v1/access-tokens/{access_token}",
                timeout=self.config.request_timeout_seconds
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to look up access token info: {e}")
            raise HubSpotError(f"Failed to look up access token info: {e}") from e
        return str(response.json()["hub_id"])

    def store_tokens(self, portal_id: str, payload: Dict[str, Any]) -> TokenSet:
        tokens = TokenSet.from_response(portal_id, payload, now=self.clock())
        self.token_store.store(tokens)
        return tokens

    def complete_authorization(self, code: str) -> TokenSet:
        """Exchange an authorization code and store the tokens under their portal."""
        payload = self.exchange_code_for_tokens(code)
        portal_id = self.get_portal_id(payload["access_token"])
        return self.store_tokens(portal_id, payload)

    def get_valid_access_token(self, portal_id: str) -> str:
        """
        Access token for a portal, refreshed first if it is about to expire.

        Raises:
            AuthenticationError: If the portal has no stored tokens.
        """
        tokens = self.token_store.get(portal_id)
        if tokens is None:
            raise AuthenticationError(f"No tokens found for portal {portal_id}")

        if tokens.is_expired(self.clock()):
            logger.info(f"Access token for portal {portal_id} expired, refreshing")
            payload = self.refresh_access_token(tokens.refresh_token)
            tokens = self.store_tokens(portal_id, payload)

        return tokens.access_token
