"""
Attribute history projection and time-range bucketing for trend charts.

Two stages:
1. project_attribute_history() turns raw history into ascending per-date
   attribute snapshots, keeping None where an attribute was not reported.
2. bucketize_time_range() lays those snapshots over a fixed window of
   reference dates, carrying the last known value forward and showing 0
   before an attribute was first observed.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from academy_metrics.config.constants import (
    ACADEMY_ATTRIBUTES, BUCKET_COUNT, DATE_LABEL_FORMAT, DAYS_PER_WEEK, Granularity
)
from academy_metrics.models.entities import iter_events
from academy_metrics.processors.match_points import resolve_points_value
from academy_metrics.processors.normalizer import (
    coerce_number, is_numeric, parse_event_day, positive_values
)

logger = logging.getLogger(__name__)

# Earliest whole day a pandas Timestamp can hold
EARLIEST_DAY = pd.Timestamp.min.ceil("D")


def _label(day: pd.Timestamp) -> str:
    return day.strftime(DATE_LABEL_FORMAT)


def _attribute_value(raw: Any) -> Optional[float]:
    """Reported numeric value, or None for absent / non-numeric."""
    if raw is None or not is_numeric(raw):
        return None
    return coerce_number(raw)


# =============================================================================
# PROJECTION
# =============================================================================

def project_attribute_history(
    history: Optional[Iterable[Any]],
    names: Sequence[str] = ACADEMY_ATTRIBUTES,
    tz: str = "UTC"
) -> List[Dict[str, Any]]:
    """
    Project raw history into ascending per-date attribute snapshots.

    Only entries with at least one positive value among `names` are kept.
    Entries whose date cannot be parsed are dropped.

    Returns:
        List of {"date": "YYYY-MM-DD", name: float | None, ...}
    """
    rows: List[Tuple[pd.Timestamp, int, Dict[str, Any]]] = []

    for index, event in enumerate(iter_events(history)):
        if not positive_values(event.attributes, names):
            continue

        timestamp = event.timestamp(tz)
        if timestamp is None:
            logger.debug(f"Dropping history entry {index} with unparseable date {event.date!r}")
            continue

        entry: Dict[str, Any] = {"date": _label(timestamp)}
        for name in names:
            entry[name] = _attribute_value(event.attributes.get(name))
        rows.append((timestamp, index, entry))

    rows.sort(key=lambda row: (row[0], row[1]))
    return [entry for _, _, entry in rows]


# =============================================================================
# BUCKETING
# =============================================================================

def _now(tz: str) -> pd.Timestamp:
    return pd.Timestamp.now(tz=tz)


def resolve_today(today: Any = None, tz: str = "UTC") -> pd.Timestamp:
    """Midnight of the given day in `tz`; None reads the clock."""
    if today is None:
        return _now(tz).tz_localize(None).normalize()

    day = parse_event_day(today, tz=tz)
    if day is None:
        raise ValueError(f"Cannot interpret {today!r} as a date")
    return day


def reference_dates(
    granularity: Any,
    offset: Any = 0,
    today: Any = None,
    bucket_count: int = BUCKET_COUNT,
    tz: str = "UTC"
) -> List[pd.Timestamp]:
    """
    The bucket dates of one trend window, oldest first.

    The window ends at `today` and each step of `offset` moves it back by
    one whole window (bucket_count days, weeks, months or years).
    Negative offsets are treated as 0 so no date lies in the future, and
    dates further back than pandas can represent clamp to EARLIEST_DAY.
    """
    granularity = Granularity.parse(granularity)
    end = resolve_today(today, tz=tz)
    shift = max(0, int(coerce_number(offset))) * bucket_count

    dates = []
    for i in range(bucket_count - 1, -1, -1):
        steps = shift + i
        try:
            if granularity is Granularity.DAILY:
                day = end - pd.Timedelta(days=steps)
            elif granularity is Granularity.WEEKLY:
                day = end - pd.Timedelta(days=DAYS_PER_WEEK * steps)
            elif granularity is Granularity.MONTHLY:
                day = end - pd.DateOffset(months=steps)
            else:
                day = end - pd.DateOffset(years=steps)
        except (OverflowError, ValueError):
            # OutOfBoundsDatetime/OutOfBoundsTimedelta are ValueErrors
            logger.debug(f"Reference date {steps} {granularity.value} steps back is out of range")
            day = EARLIEST_DAY
        dates.append(day)

    return dates


def _parse_projected(
    projected: Optional[Iterable[Any]],
    names: Sequence[str],
    tz: str
) -> List[Tuple[pd.Timestamp, Dict[str, Optional[float]]]]:
    entries = []
    if projected is None:
        return entries
    for item in projected:
        if not isinstance(item, Mapping):
            continue
        day = parse_event_day(item.get("date"), tz=tz)
        if day is None:
            logger.debug(f"Dropping projected entry with unparseable date {item.get('date')!r}")
            continue
        entries.append((day, {name: _attribute_value(item.get(name)) for name in names}))

    # Stable: entries sharing a day keep their projected order
    entries.sort(key=lambda entry: entry[0])
    return entries


def bucketize_time_range(
    projected: Optional[Iterable[Any]],
    granularity: Any,
    offset: Any = 0,
    names: Sequence[str] = ACADEMY_ATTRIBUTES,
    today: Any = None,
    bucket_count: int = BUCKET_COUNT,
    tz: str = "UTC"
) -> List[Dict[str, Any]]:
    """
    Lay projected attribute history over a fixed window of buckets.

    Args:
        projected: Output of project_attribute_history()
        granularity: 'daily' | 'weekly' | 'monthly' | 'yearly' (or Granularity)
        offset: Whole windows to step back from the most recent one
        names: Attribute names to resolve
        today: Reference "now" (date, datetime or ISO string); None = current day in `tz`
        bucket_count: Buckets per window

    Returns:
        Exactly `bucket_count` dicts {"date": "YYYY-MM-DD", name: float},
        oldest first. Each value is the last one reported on or before the
        bucket date, or 0.0 before the attribute was first reported.
    """
    dates = reference_dates(granularity, offset, today=today, bucket_count=bucket_count, tz=tz)
    entries = _parse_projected(projected, names, tz)

    first_appearance: Dict[str, pd.Timestamp] = {}
    for day, values in entries:
        for name in names:
            if values[name] is not None and name not in first_appearance:
                first_appearance[name] = day

    last_known: Dict[str, Optional[float]] = {name: None for name in names}
    cursor = 0
    buckets = []

    for bucket_date in dates:
        # Later in-window observations supersede earlier ones per attribute
        while cursor < len(entries) and entries[cursor][0] <= bucket_date:
            for name, value in entries[cursor][1].items():
                if value is not None:
                    last_known[name] = value
            cursor += 1

        bucket: Dict[str, Any] = {"date": _label(bucket_date)}
        for name in names:
            first = first_appearance.get(name)
            if first is None or bucket_date < first or last_known[name] is None:
                bucket[name] = 0.0
            else:
                bucket[name] = last_known[name]
        buckets.append(bucket)

    return buckets


def buckets_to_frame(buckets: List[Dict[str, Any]], names: Sequence[str] = ACADEMY_ATTRIBUTES) -> pd.DataFrame:
    """Tabular view of a bucket series, indexed by date label."""
    frame = pd.DataFrame(list(buckets), columns=["date", *names])
    return frame.set_index("date")


# =============================================================================
# CHART SERIES
# =============================================================================

def training_rating_series(history: Optional[Iterable[Any]], tz: str = "UTC") -> List[Dict[str, Any]]:
    """Ascending session ratings of training entries that have one."""
    rows = []
    for index, event in enumerate(iter_events(history)):
        if not event.is_training_like or event.quality_score <= 0:
            continue
        timestamp = event.timestamp(tz)
        if timestamp is None:
            continue
        rows.append((timestamp, index, {"date": _label(timestamp), "rating": event.quality_score}))

    rows.sort(key=lambda row: (row[0], row[1]))
    return [entry for _, _, entry in rows]


def match_points_series(history: Optional[Iterable[Any]], tz: str = "UTC") -> List[Dict[str, Any]]:
    """Ascending resolved match points of match entries that scored."""
    rows = []
    for index, event in enumerate(iter_events(history)):
        if not event.is_match:
            continue
        points = resolve_points_value(event.match_points)
        if points <= 0:
            continue
        timestamp = event.timestamp(tz)
        if timestamp is None:
            continue
        rows.append((timestamp, index, {"date": _label(timestamp), "points": points}))

    rows.sort(key=lambda row: (row[0], row[1]))
    return [entry for _, _, entry in rows]
