#!/usr/bin/env python3
"""
Sync endpoints - push TrackerRMS jobs, placements and revenue into HubSpot.

All endpoints need a connected portal; the run endpoints also need the
caller's TrackerRMS API key in the X-TrackerRMS-API-Key header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.sync import SyncService
from core.utils import utc_iso_timestamp
from ..dependencies import PortalAuth, get_sync_service, require_portal_auth
from ..models.requests import SyncFilterRequest
from ..models.responses import FullSyncResponse, SyncResponse, SyncResultModel, SyncStatusResponse

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/sync", tags=["sync"])

SYNC_RATE_LIMIT = "10/minute"


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "type": "RateLimitExceeded"}
    )


def _record_sync(request: Request, portal_id: str) -> None:
    request.app.state.last_sync[portal_id] = utc_iso_timestamp()


def _params(filters: Optional[SyncFilterRequest]):
    return filters.to_params() if filters else None


@router.post("/jobs", response_model=SyncResponse)
@limiter.limit(SYNC_RATE_LIMIT)
def sync_jobs(
    request: Request,
    filters: Optional[SyncFilterRequest] = None,
    auth: PortalAuth = Depends(require_portal_auth),
    sync_service: SyncService = Depends(get_sync_service)
):
    """Upsert every TrackerRMS job (optionally filtered) as a HubSpot deal."""
    result = sync_service.sync_jobs(_params(filters))
    _record_sync(request, auth.portal_id)
    return SyncResponse(success=True, results=SyncResultModel(**result.to_dict()))


@router.post("/placements", response_model=SyncResponse)
@limiter.limit(SYNC_RATE_LIMIT)
def sync_placements(
    request: Request,
    filters: Optional[SyncFilterRequest] = None,
    auth: PortalAuth = Depends(require_portal_auth),
    sync_service: SyncService = Depends(get_sync_service)
):
    """Upsert every TrackerRMS placement, with its scores, as a HubSpot deal."""
    result = sync_service.sync_placements(_params(filters))
    _record_sync(request, auth.portal_id)
    return SyncResponse(success=True, results=SyncResultModel(**result.to_dict()))


@router.post("/revenue", response_model=SyncResponse)
@limiter.limit(SYNC_RATE_LIMIT)
def sync_revenue(
    request: Request,
    auth: PortalAuth = Depends(require_portal_auth),
    sync_service: SyncService = Depends(get_sync_service)
):
    """Refresh revenue and margin on active placement deals."""
    result = sync_service.sync_revenue()
    _record_sync(request, auth.portal_id)
    return SyncResponse(success=True, results=SyncResultModel(**result.to_dict()))


@router.post("/full", response_model=FullSyncResponse)
@limiter.limit(SYNC_RATE_LIMIT)
def full_sync(
    request: Request,
    auth: PortalAuth = Depends(require_portal_auth),
    sync_service: SyncService = Depends(get_sync_service)
):
    """Jobs, then placements, then revenue."""
    results = sync_service.full_sync()
    _record_sync(request, auth.portal_id)
    return FullSyncResponse(
        success=True,
        results={stage: SyncResultModel(**result.to_dict()) for stage, result in results.items()}
    )


@router.get("/status", response_model=SyncStatusResponse)
def sync_status(request: Request, auth: PortalAuth = Depends(require_portal_auth)):
    """Connection state and the time of the portal's last completed sync."""
    return SyncStatusResponse(
        connected=True,
        portalId=auth.portal_id,
        lastSync=request.app.state.last_sync.get(auth.portal_id)
    )
