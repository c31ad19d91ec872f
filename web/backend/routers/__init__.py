"""API route handlers."""

from .auth import router as auth_router
from .sync import router as sync_router
from .crm_cards import router as crm_cards_router
from .dashboards import router as dashboards_router
from .webhooks import router as webhooks_router
