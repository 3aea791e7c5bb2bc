"""
Rating calculators - scalar summaries over a player's performance history.

Every calculator is a pure function over the history it is given: inputs are
never mutated and an empty or malformed history yields 0, never NaN.
"""
import logging
from typing import Any, Dict, Iterable, Optional, Sequence

from academy_metrics.config.constants import (
    ACADEMY_ATTRIBUTES, MATCH_STAT_FIELDS, PERCENT_SCALE, ATTR_MAX
)
from academy_metrics.models.entities import iter_events
from academy_metrics.processors.match_points import resolve_points_value
from academy_metrics.processors.normalizer import (
    coerce_number, normalize_attributes, positive_values
)
from academy_metrics.utils.helpers import safe_avg, safe_divide, round_rating

logger = logging.getLogger(__name__)


# =============================================================================
# SNAPSHOT RATINGS
# =============================================================================

def overall_rating(attributes: Any, names: Sequence[str] = ACADEMY_ATTRIBUTES) -> float:
    """Mean of the named attributes (missing = 0), rounded to one decimal."""
    values = normalize_attributes(attributes, names)
    return round_rating(safe_avg(values.values()))


def overall_rating_percent(attributes: Any, names: Sequence[str] = ACADEMY_ATTRIBUTES) -> int:
    """Overall rating on a 0-100 scale, as shown on the profile page."""
    values = normalize_attributes(attributes, names)
    mean = safe_avg(values.values())
    return int(round(safe_divide(mean, ATTR_MAX) * PERCENT_SCALE))


# =============================================================================
# HISTORY RATINGS
# =============================================================================

def training_performance(history: Optional[Iterable[Any]]) -> float:
    """
    Average training score across training entries.

    Each qualifying entry (training or untyped, with at least one positive
    attribute) contributes the mean of its positive attribute values; the
    result is the mean of those per-entry means.
    """
    session_means = []
    for event in iter_events(history):
        if not event.is_training_like:
            continue
        values = positive_values(event.attributes)
        if values:
            session_means.append(safe_avg(values))

    return round_rating(safe_avg(session_means))


def match_performance(history: Optional[Iterable[Any]]) -> float:
    """Average of the positive resolved match points across match entries."""
    points = []
    for event in iter_events(history):
        if not event.is_match:
            continue
        value = resolve_points_value(event.match_points)
        if value > 0:
            points.append(value)

    return round_rating(safe_avg(points))


def match_stats(history: Optional[Iterable[Any]]) -> Dict[str, float]:
    """Cumulative goals, assists and clean sheets across match entries."""
    totals = {key: 0.0 for key in MATCH_STAT_FIELDS}

    for event in iter_events(history):
        if not event.is_match or event.stats is None:
            continue
        for key in MATCH_STAT_FIELDS:
            totals[key] += coerce_number(event.stats.get(key))

    return {key: int(value) if value.is_integer() else value for key, value in totals.items()}


def average_performance(history: Optional[Iterable[Any]]) -> float:
    """
    Blended per-entry score used on the player profile.

    For every entry, average whichever of these it has:
    - mean of its positive attribute values
    - its positive session rating
    - its positive match points (match entries only)
    then average over the entries that had at least one.
    """
    entry_scores = []
    for event in iter_events(history):
        parts = []

        values = positive_values(event.attributes)
        if values:
            parts.append(safe_avg(values))

        if event.quality_score > 0:
            parts.append(event.quality_score)

        if event.is_match:
            points = resolve_points_value(event.match_points)
            if points > 0:
                parts.append(points)

        if parts:
            entry_scores.append(safe_avg(parts))

    return round_rating(safe_avg(entry_scores))


# =============================================================================
# LIFETIME AVERAGES
# =============================================================================

def overall_average_attributes(
    latest: Any,
    history: Optional[Iterable[Any]],
    names: Sequence[str] = ACADEMY_ATTRIBUTES,
    sessions_attended: Optional[int] = None
) -> Dict[str, float]:
    """
    Per-attribute average over the latest snapshot and every history entry.

    Only positive occurrences count, so an attribute that was never scored
    averages to 0 rather than being dragged down by empty sessions.

    Args:
        latest: Current attribute snapshot
        history: Performance history entries
        names: Attribute names to average
        sessions_attended: When given and <= 0 the normalized snapshot is
            returned as-is (nothing to average yet)
    """
    if sessions_attended is not None and sessions_attended <= 0:
        logger.debug("No sessions attended, using latest attribute snapshot")
        return normalize_attributes(latest, names)

    events = list(iter_events(history))
    snapshot = normalize_attributes(latest, names)
    averages = {}
    for name in names:
        occurrences = []
        if snapshot[name] > 0:
            occurrences.append(snapshot[name])
        for event in events:
            if event.attributes is None:
                continue
            value = coerce_number(event.attributes.get(name))
            if value > 0:
                occurrences.append(value)
        averages[name] = round_rating(safe_avg(occurrences))

    return averages

