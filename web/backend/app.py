#!/usr/bin/env python3
"""
TrackerRMS Revenue Attribution - FastAPI Application

Connects TrackerRMS jobs and placements to HubSpot deals and serves
the attribution, velocity and ROI dashboards.

Usage:
    python main.py serve

Then open:
    - http://localhost:3000/oauth/authorize - Connect a HubSpot portal
    - http://localhost:3000/docs - API Documentation (Swagger UI)
"""

import time
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import IntegrationError
from core.hubspot import TokenStore
from core.utils import utc_iso_timestamp
from .config import get_config
from .dependencies import get_portal_id
from .exceptions import (
    ServiceException,
    service_exception_handler,
    integration_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import (
    auth_router,
    sync_router,
    crm_cards_router,
    dashboards_router,
    webhooks_router
)
from .models.responses import HealthResponse
from .routers.sync import add_rate_limit_handlers

APP_NAME = "HubSpot TrackerRMS Revenue Attribution App"
APP_VERSION = "1.0.0"

# Load configuration
config = get_config()

# Configure logging
logging.basicConfig(
    level=config.logging.level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="TrackerRMS Revenue Attribution API",
    description="Connects TrackerRMS Jobs and Placements to HubSpot Deals for end-to-end revenue attribution",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Per-process state: HubSpot tokens by portal and last sync time by portal
app.state.token_store = TokenStore()
app.state.last_sync = {}

# Configure rate limiting
add_rate_limit_handlers(app)

# Register exception handlers
app.add_exception_handler(ServiceException, service_exception_handler)
app.add_exception_handler(IntegrationError, integration_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(auth_router)
app.include_router(sync_router)
app.include_router(crm_cards_router)
app.include_router(dashboards_router)
app.include_router(webhooks_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration_ms:.0f}ms"
    )
    return response


def _is_connected(request: Request, portal_id: Optional[str]) -> bool:
    return bool(portal_id) and portal_id in request.app.state.token_store


@app.get("/")
def read_root(request: Request, portal_id: Optional[str] = Depends(get_portal_id)):
    """App summary and entry points."""
    return {
        "name": APP_NAME,
        "description": app.description,
        "version": APP_VERSION,
        "connected": _is_connected(request, portal_id),
        "endpoints": {
            "auth": "/oauth/authorize",
            "sync": "/api/sync",
            "crmCards": "/api/crm-cards",
            "dashboards": "/api/dashboards",
            "webhooks": "/api/webhooks",
        },
    }


@app.get("/dashboard")
def dashboard(request: Request, portal_id: Optional[str] = Depends(get_portal_id)):
    """Landing page after OAuth; unconnected callers are sent to authorize."""
    if not _is_connected(request, portal_id):
        return RedirectResponse("/oauth/authorize", status_code=302)

    return {
        "message": "Welcome to HubSpot TrackerRMS Integration Dashboard",
        "portalId": portal_id,
        "actions": {
            "syncJobs": "POST /api/sync/jobs",
            "syncPlacements": "POST /api/sync/placements",
            "syncRevenue": "POST /api/sync/revenue",
            "fullSync": "POST /api/sync/full",
            "viewDashboards": {
                "attribution": "GET /api/dashboards/attribution",
                "velocity": "GET /api/dashboards/velocity",
                "roi": "GET /api/dashboards/roi",
                "executive": "GET /api/dashboards/executive",
            },
        },
    }


@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", timestamp=utc_iso_timestamp(), version=APP_VERSION)


def main():
    """Run the web server."""
    import uvicorn

    logger.info(f"Starting server on {config.server.host}:{config.server.port} ({config.server.environment})")
    logger.info(f"Connect a portal: http://localhost:{config.server.port}/oauth/authorize")
    logger.info(f"API Docs: http://localhost:{config.server.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.server.host,
        port=config.server.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    main()
