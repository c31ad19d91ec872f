"""Business logic services."""

from .webhook_service import WebhookService, verify_hubspot_signature
