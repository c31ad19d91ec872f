"""HubSpot collaborators: OAuth, CRM records and timeline events."""

from core.hubspot.oauth import HubSpotOAuth, TokenSet, TokenStore
from core.hubspot.crm import HubSpotService, TRACKERRMS_DEAL_PROPERTIES
from core.hubspot.timeline import TimelineService

__all__ = [
    'HubSpotOAuth',
    'HubSpotService',
    'TimelineService',
    'TokenSet',
    'TokenStore',
    'TRACKERRMS_DEAL_PROPERTIES',
]
