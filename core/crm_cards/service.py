#!/usr/bin/env python3
"""
CRM Card service - HubSpot CRM card payloads for jobs, placements and
revenue attribution.
"""

from typing import Any, Dict, List, Optional

CANDIDATE_PREVIEW_LIMIT = 5
IFRAME_WIDTH = 890
IFRAME_HEIGHT = 748


def _prop(label: str, value: Any, data_type: str = "STRING") -> Dict[str, Any]:
    return {"label": label, "value": value, "dataType": data_type}


def _card(sections: List[Dict[str, Any]], actions: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    actions = actions or []
    return {
        "results": sections,
        "primaryAction": actions[0] if actions else None,
        "secondaryActions": actions[1:],
    }


class CRMCardService:
    """Builds CRM card responses."""

    def __init__(self, trackerrms_app_url: str = "https://app.trackerrms.com"):
        self.trackerrms_app_url = trackerrms_app_url.rstrip("/")

    def _view_action(self, kind: str, record_id: Any) -> Dict[str, Any]:
        return {
            "type": "IFRAME",
            "width": IFRAME_WIDTH,
            "height": IFRAME_HEIGHT,
            "uri": f"{self.trackerrms_app_url}/{kind}/{record_id}",
            "label": "View in TrackerRMS",
        }

    def build_job_card(self, job: Dict[str, Any]) -> Dict[str, Any]:
        sections = [{
            "id": "job_details",
            "title": "Job Details",
            "topLevelProperties": [
                _prop("Job Title", job.get("title") or "N/A"),
                _prop("Status", job.get("status") or "N/A", "STATUS"),
            ],
            "properties": [
                _prop("Job ID", job.get("id")),
                _prop("Client", job.get("clientName") or "N/A"),
                _prop("Location", job.get("location") or "N/A"),
                _prop("Service Line", job.get("serviceLine") or "N/A"),
                _prop("Open Date", job.get("openDate") or job.get("createdAt"), "DATE"),
                _prop("Target Date", job.get("targetDate") or "N/A", "DATE"),
                _prop("Bill Rate", f"${job.get('billRate') or 0}/hr"),
                _prop("Estimated Revenue", job.get("estimatedRevenue"), "CURRENCY"),
            ],
        }]

        candidates = job.get("candidates") or []
        if candidates:
            sections.append({
                "id": "candidates",
                "title": "Candidates",
                "properties": [
                    _prop(f"Candidate {index}", f"{c.get('name')} - {c.get('status')}")
                    for index, c in enumerate(candidates[:CANDIDATE_PREVIEW_LIMIT], start=1)
                ],
            })

        return _card(sections, [self._view_action("jobs", job.get("id"))])

    def build_placement_card(self, placement: Dict[str, Any]) -> Dict[str, Any]:
        """Placement card; a scores section is added when the placement carries scores."""
        sections = [
            {
                "id": "placement_details",
                "title": "Placement Details",
                "topLevelProperties": [
                    _prop("Candidate", placement.get("candidateName") or "N/A"),
                    _prop("Status", placement.get("status") or "Active", "STATUS"),
                ],
                "properties": [
                    _prop("Placement ID", placement.get("id")),
                    _prop("Job", placement.get("jobTitle") or "N/A"),
                    _prop("Client", placement.get("clientName") or "N/A"),
                    _prop("Start Date", placement.get("startDate"), "DATE"),
                    _prop("End Date", placement.get("endDate") or "Ongoing", "DATE"),
                    _prop("Bill Rate", f"${placement.get('billRate') or 0}/hr"),
                    _prop("Pay Rate", f"${placement.get('payRate') or 0}/hr"),
                ],
            },
            {
                "id": "revenue",
                "title": "Revenue",
                "properties": [
                    _prop("Total Revenue", placement.get("revenue"), "CURRENCY"),
                    _prop("Total Margin", placement.get("margin"), "CURRENCY"),
                    _prop("Margin %", f"{placement.get('marginPercentage') or 0}%"),
                    _prop("Hours Worked", placement.get("hoursWorked") or 0, "NUMERIC"),
                ],
            },
        ]

        if placement.get("velocityScore") or placement.get("roiScore"):
            sections.append({
                "id": "scores",
                "title": "Performance Scores",
                "properties": [
                    _prop("Velocity Score", placement.get("velocityScore") or 0, "NUMERIC"),
                    _prop("ROI Score", placement.get("roiScore") or 0, "NUMERIC"),
                    _prop("Overall Score", placement.get("overallScore") or 0, "NUMERIC"),
                ],
            })

        return _card(sections, [self._view_action("placements", placement.get("id"))])

    def build_attribution_card(self, attribution_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Revenue attribution card.

        Args:
            attribution_data: {totalRevenue, totalPlacements, serviceLines}
                where serviceLines is the service line attribution mapping
        """
        sections = [{
            "id": "summary",
            "title": "Revenue Attribution Summary",
            "topLevelProperties": [
                _prop("Total Revenue", attribution_data.get("totalRevenue"), "CURRENCY"),
                _prop("Total Placements", attribution_data.get("totalPlacements"), "NUMERIC"),
            ],
            "properties": [],
        }]

        service_lines = attribution_data.get("serviceLines")
        if service_lines:
            sections.append({
                "id": "service_lines",
                "title": "By Service Line",
                "properties": [
                    _prop(line, f"{data['placementCount']} placements - ${data['totalRevenue']}")
                    for line, data in service_lines.items()
                ],
            })

        return _card(sections)

    def build_error_card(self, message: str) -> Dict[str, Any]:
        return _card([{
            "id": "error",
            "title": "Error",
            "properties": [_prop("Message", message)],
        }])
