"""HubSpot CRM card payloads."""

from core.crm_cards.service import CRMCardService

__all__ = ['CRMCardService']
