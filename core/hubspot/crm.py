#!/usr/bin/env python3
"""
HubSpot CRM service - deals, contacts, associations and custom properties.

Thin wrapper over the HubSpot v3/v4 REST API using a portal access token.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from core.exceptions import HubSpotError
from core.http_retry import api_retry

logger = logging.getLogger(__name__)

DEAL_SEARCH_PROPERTIES = [
    "dealname",
    "amount",
    "dealstage",
    "closedate",
    "trackerrms_job_id",
    "trackerrms_placement_id",
]

# Deal properties written by the sync, created on demand
TRACKERRMS_DEAL_PROPERTIES: List[Dict[str, str]] = [
    {"name": "trackerrms_job_id", "label": "TrackerRMS Job ID", "type": "string", "fieldType": "text"},
    {"name": "trackerrms_placement_id", "label": "TrackerRMS Placement ID", "type": "string", "fieldType": "text"},
    {"name": "trackerrms_service_line", "label": "TrackerRMS Service Line", "type": "string", "fieldType": "text"},
    {"name": "trackerrms_revenue", "label": "TrackerRMS Revenue", "type": "number", "fieldType": "number"},
    {"name": "trackerrms_margin", "label": "TrackerRMS Margin", "type": "number", "fieldType": "number"},
    {"name": "trackerrms_placement_date", "label": "TrackerRMS Placement Date", "type": "date", "fieldType": "date"},
    {"name": "trackerrms_velocity_score", "label": "Placement Velocity Score", "type": "number", "fieldType": "number"},
    {"name": "trackerrms_roi_score", "label": "ROI Score", "type": "number", "fieldType": "number"},
]

# HubSpot-defined association type: deal -> contact
DEAL_TO_CONTACT_ASSOCIATION_TYPE = 3


class HubSpotService:
    """CRM operations for one HubSpot portal."""

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.hubapi.com",
        request_timeout_seconds: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.request_timeout_seconds = request_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        })

    @api_retry()
    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            timeout=self.request_timeout_seconds,
            **kwargs
        )
        response.raise_for_status()
        return response

    def _request(self, method: str, path: str, action: str, **kwargs) -> Any:
        try:
            response = self._send(method, path, **kwargs)
        except requests.RequestException as e:
            response = getattr(e, 'response', None)
            status_code = response.status_code if response is not None else None
            raise HubSpotError(f"Failed to {action}: {e}", status_code) from e
        return response.json() if response.content else None

    # ============ DEALS ============

    def create_deal(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        try:
            deal = self._request("POST", "/crm/v3/objects/deals", "create deal", json={"properties": properties})
        except HubSpotError as e:
            logger.error(f"Failed to create deal in HubSpot: {e}")
            raise
        logger.info(f"Created deal in HubSpot: deal_id={deal['id']}")
        return deal

    def update_deal(self, deal_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        try:
            deal = self._request(
                "PATCH", f"/crm/v3/objects/deals/{deal_id}", f"update deal {deal_id}",
                json={"properties": properties}
            )
        except HubSpotError as e:
            logger.error(f"Failed to update deal {deal_id} in HubSpot: {e}")
            raise
        logger.info(f"Updated deal in HubSpot: deal_id={deal_id}")
        return deal

    def get_deal(self, deal_id: str, properties: Optional[List[str]] = None) -> Dict[str, Any]:
        params = {"properties": ",".join(properties)} if properties else None
        return self._request("GET", f"/crm/v3/objects/deals/{deal_id}", f"get deal {deal_id}", params=params)

    def search_deals(self, property_name: str, value: Any) -> List[Dict[str, Any]]:
        """Deals whose property_name equals value."""
        body = {
            "filterGroups": [{
                "filters": [{"propertyName": property_name, "operator": "EQ", "value": str(value)}]
            }],
            "properties": DEAL_SEARCH_PROPERTIES,
        }
        try:
            result = self._request("POST", "/crm/v3/objects/deals/search", "search deals", json=body)
        except HubSpotError as e:
            logger.error(f"Failed to search deals in HubSpot ({property_name}={value}): {e}")
            raise
        return result.get("results", [])

    # ============ CONTACTS ============

    def create_contact(self, properties: Dict[str, Any]) -> Dict[str, Any]:
        contact = self._request("POST", "/crm/v3/objects/contacts", "create contact", json={"properties": properties})
        logger.info(f"Created contact in HubSpot: contact_id={contact['id']}")
        return contact

    def update_contact(self, contact_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        contact = self._request(
            "PATCH", f"/crm/v3/objects/contacts/{contact_id}", f"update contact {contact_id}",
            json={"properties": properties}
        )
        logger.info(f"Updated contact in HubSpot: contact_id={contact_id}")
        return contact

    def find_contact_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        body = {
            "filterGroups": [{
                "filters": [{"propertyName": "email", "operator": "EQ", "value": email}]
            }]
        }
        result = self._request("POST", "/crm/v3/objects/contacts/search", "search contacts", json=body)
        results = result.get("results", [])
        return results[0] if results else None

    # ============ ASSOCIATIONS ============

    def associate_deal_with_contact(self, deal_id: str, contact_id: str) -> Dict[str, Any]:
        body = [{
            "associationCategory": "HUBSPOT_DEFINED",
            "associationTypeId": DEAL_TO_CONTACT_ASSOCIATION_TYPE,
        }]
        result = self._request(
            "PUT", f"/crm/v4/objects/deals/{deal_id}/associations/contacts/{contact_id}",
            f"associate deal {deal_id} with contact {contact_id}",
            json=body
        )
        logger.info(f"Associated deal {deal_id} with contact {contact_id}")
        return result

    # ============ CUSTOM PROPERTIES ============

    def create_deal_property(self, definition: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        Create a custom deal property.

        Returns:
            The created property, or None if it already exists.
        """
        body = {
            "name": definition["name"],
            "label": definition["label"],
            "type": definition.get("type", "string"),
            "fieldType": definition.get("fieldType", "text"),
            "groupName": definition.get("groupName", "dealinformation"),
            "description": definition.get("description", ""),
        }
        try:
            created = self._request("POST", "/crm/v3/properties/deals", f"create property {body['name']}", json=body)
        except HubSpotError as e:
            if e.status_code == 409:
                logger.info(f"Deal property already exists: {body['name']}")
                return None
            logger.error(f"Failed to create deal property {body['name']}: {e}")
            raise
        logger.info(f"Created deal property in HubSpot: {body['name']}")
        return created

    def ensure_custom_properties(self) -> List[str]:
        """
        Create the TrackerRMS deal properties that are missing.

        Returns:
            Names of properties that could not be created.
        """
        failed = []
        for definition in TRACKERRMS_DEAL_PROPERTIES:
            try:
                self.create_deal_property(definition)
            except HubSpotError as e:
                logger.warning(f"Could not create property {definition['name']}: {e}")
                failed.append(definition["name"])
        return failed
