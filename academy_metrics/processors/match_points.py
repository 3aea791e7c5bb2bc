"""
Match Points Resolver - unwraps the edit history stored on match entries.

Coaches can override a match score after the fact, and an override can itself
be overridden, so `stats.matchPoints` arrives in any of these shapes:

    7
    {"current": 7}
    {"current": {"current": 7}}
    {"edited": 7}
    {"current": {"edited": 7}}

The innermost `current` wins; `edited` is only consulted when a level has no
`current`.
"""
from collections.abc import Mapping
from typing import Any

from academy_metrics.models.entities import PerformanceEvent
from academy_metrics.processors.normalizer import coerce_number

# Guard against self-referencing structures
MAX_NESTING_DEPTH = 32


def resolve_points_value(points: Any, _depth: int = 0) -> float:
    """Resolve a bare matchPoints value to a number >= 0."""
    if _depth > MAX_NESTING_DEPTH:
        return 0.0

    if isinstance(points, Mapping):
        # A present zero is a real score; only a missing/null current falls through
        if points.get("current") is not None:
            return resolve_points_value(points["current"], _depth + 1)
        if "edited" in points:
            return max(0.0, coerce_number(points["edited"]))
        return 0.0

    return max(0.0, coerce_number(points))


def resolve_match_points(event: Any) -> float:
    """
    Resolve the match points recorded on one history entry.

    Args:
        event: PerformanceEvent or raw history mapping

    Returns:
        Finite number >= 0 (0 when the entry has no points)
    """
    event = PerformanceEvent.coerce(event)
    if event is None:
        return 0.0
    return resolve_points_value(event.match_points)
