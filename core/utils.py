import math
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2).

    Python's round() uses banker's rounding; scores and percentages are
    rounded half up instead.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def is_number(value: Any) -> bool:
    """True for int/float/Decimal values (bool excluded)."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def safe_amount(value: Optional[Any], field_name: str = "amount") -> float:
    """
    Read a monetary amount for aggregation.

    Missing or falsy values count as 0. A non-numeric value is logged and
    counted as 0 so one bad record cannot abort a report.
    """
    if not value:
        return 0
    if is_number(value):
        value = float(value) if isinstance(value, Decimal) else value
        return 0 if isinstance(value, float) and not math.isfinite(value) else value
    logger.warning(f"Non-numeric {field_name} {value!r} treated as 0")
    return 0


def mean(values) -> float:
    values = list(values)
    return sum(values) / len(values) if values else 0.0


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a record timestamp into an aware UTC-comparable datetime.

    Accepts datetime/date objects, epoch milliseconds and ISO-8601 strings
    (a trailing 'Z' is allowed). Naive values are taken as UTC.

    Returns:
        The parsed datetime, or None if the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_iso_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a moment as ISO-8601 UTC with milliseconds, e.g. 2024-01-01T00:00:00.000Z."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"
