"""
Attribute normalization and value coercion.

Performance history is written by several dashboards over time, so the same
field can arrive as a number, a numeric string, null, or be missing entirely.
Everything that reads raw history goes through the helpers here:

- coerce_number(): any value -> finite float (default 0.0)
- normalize_attributes(): raw attribute mapping -> complete AttributeSet
- parse_event_timestamp(): any date representation -> naive pandas Timestamp or None
"""
import logging
import math
import numbers
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)


def coerce_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a finite number out of a raw field.

    Booleans, NaN, infinities, non-numeric strings and other objects
    all collapse to `default`.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, numbers.Real):
        result = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            result = float(text)
        except ValueError:
            return default
    else:
        return default

    if not math.isfinite(result):
        return default
    return result


def is_numeric(value: Any) -> bool:
    """True if coerce_number() would read a real value out of `value`."""
    return not math.isnan(coerce_number(value, default=math.nan))


def normalize_attributes(raw: Any, names: Iterable[str]) -> Dict[str, float]:
    """
    Map every expected attribute name to a number.

    Args:
        raw: Raw attribute mapping (may be None or not a mapping at all)
        names: Ordered attribute names to produce

    Returns:
        Dict with one float per name, 0.0 where the raw value is missing or invalid
    """
    if not isinstance(raw, Mapping):
        raw = {}
    return {name: coerce_number(raw.get(name)) for name in names}


def positive_values(raw: Any, names: Optional[Iterable[str]] = None) -> List[float]:
    """Positive numeric values of an attribute mapping, optionally restricted to `names`."""
    if not isinstance(raw, Mapping):
        return []

    keys = raw.keys() if names is None else names
    values = []
    for key in keys:
        value = coerce_number(raw.get(key))
        if value > 0:
            values.append(value)
    return values


# =============================================================================
# DATES
# =============================================================================

def parse_event_timestamp(value: Any, tz: str = "UTC") -> Optional[pd.Timestamp]:
    """
    Parse an event date into a timezone-naive Timestamp.

    Accepts ISO strings, date/datetime objects, pandas Timestamps,
    epoch milliseconds and Mongo extended JSON ({"$date": ...}).
    Aware timestamps are converted to `tz` before the zone is dropped.
    Returns None when the value cannot be placed on a timeline.
    """
    if isinstance(value, Mapping) and "$date" in value:
        value = value["$date"]
        if isinstance(value, Mapping) and "$numberLong" in value:
            value = coerce_number(value["$numberLong"], default=math.nan)

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Real):
        if not math.isfinite(value):
            return None
        parsed = pd.to_datetime(value, unit="ms", errors="coerce")
    elif isinstance(value, (str, date, datetime, pd.Timestamp)):
        if isinstance(value, str) and not value.strip():
            return None
        parsed = pd.to_datetime(value, errors="coerce")
    else:
        return None

    if parsed is None or pd.isna(parsed):
        logger.debug(f"Unparseable event date: {value!r}")
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert(tz).tz_localize(None)
    return parsed


def parse_event_day(value: Any, tz: str = "UTC") -> Optional[pd.Timestamp]:
    """Like parse_event_timestamp() but truncated to midnight."""
    parsed = parse_event_timestamp(value, tz=tz)
    if parsed is None:
        return None
    return parsed.normalize()
