#!/usr/bin/env python3
"""
Record Normalization - strict internal views of staffing records.

TrackerRMS records arrive as loosely shaped dicts: optional fields and two
names for the same timestamp (startDate/createdAt, createdAt/openDate).
These records resolve the naming and apply the defaults once, so the
scoring formulas can assume every field is present.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from core.exceptions import InvalidRecordError
from core.utils import is_number, parse_timestamp

UNASSIGNED_SERVICE_LINE = "Unassigned"


def _amount(raw: Dict[str, Any], key: str) -> float:
    value = raw.get(key)
    if not value:
        return 0
    if not is_number(value):
        raise InvalidRecordError(f"{key} must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        value = float(value)
    return 0 if isinstance(value, float) and not math.isfinite(value) else value


def service_line_of(raw: Dict[str, Any]) -> str:
    """Service line label of a placement, 'Unassigned' when absent."""
    return raw.get("serviceLine") or UNASSIGNED_SERVICE_LINE


def fill_timestamp_of(raw: Dict[str, Any]) -> Any:
    """Raw fill timestamp of a placement (startDate, falling back to createdAt)."""
    return raw.get("startDate") or raw.get("createdAt")


def open_timestamp_of(raw: Dict[str, Any]) -> Any:
    """Raw open timestamp of a job (createdAt, falling back to openDate)."""
    return raw.get("createdAt") or raw.get("openDate")


@dataclass(frozen=True)
class Attribution:
    marketing_cost: float = 0
    sales_cost: float = 0

    @property
    def total_cost(self) -> float:
        return self.marketing_cost + self.sales_cost

    @classmethod
    def from_raw(cls, raw: Optional[Dict[str, Any]]) -> "Attribution":
        if not raw:
            return cls()
        return cls(
            marketing_cost=_amount(raw, "marketingCost"),
            sales_cost=_amount(raw, "salesCost"),
        )


@dataclass(frozen=True)
class JobRecord:
    id: Optional[str]
    open_date: Optional[datetime]
    raw_open_date: Any = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "JobRecord":
        raw_open = open_timestamp_of(raw)
        return cls(id=raw.get("id"), open_date=parse_timestamp(raw_open), raw_open_date=raw_open)


@dataclass(frozen=True)
class PlacementRecord:
    id: Optional[str]
    fill_date: Optional[datetime]
    revenue: float = 0
    margin: float = 0
    service_line: str = UNASSIGNED_SERVICE_LINE
    raw_fill_date: Any = None

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "PlacementRecord":
        """
        Normalize a placement dict.

        Raises:
            InvalidRecordError: If revenue or margin is present but not a number.
        """
        raw_fill = fill_timestamp_of(raw)
        return cls(
            id=raw.get("id"),
            fill_date=parse_timestamp(raw_fill),
            revenue=_amount(raw, "revenue"),
            margin=_amount(raw, "margin"),
            service_line=service_line_of(raw),
            raw_fill_date=raw_fill,
        )
