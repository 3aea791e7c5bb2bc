"""
Player summary - one call that composes every calculator for a player document.

Dashboards (player, coach, coordinator, owner) each showed the same metrics
block; they now pass the player document, the session roster and their own
attribute schema here.
"""
import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from academy_metrics.config.constants import ACADEMY_ATTRIBUTES, AttributeView
from academy_metrics.engines.attendance import sessions_attended
from academy_metrics.engines.rating_engine import (
    overall_rating, training_performance, match_performance,
    match_stats, average_performance, overall_average_attributes
)
from academy_metrics.engines.timeseries import resolve_today
from academy_metrics.models.entities import PlayerPerformanceSummary
from academy_metrics.processors.normalizer import coerce_number, normalize_attributes
from academy_metrics.utils.helpers import calculate_age

logger = logging.getLogger(__name__)


def summarize_player(
    player: Mapping,
    sessions: Optional[Iterable[Any]] = None,
    names: Sequence[str] = ACADEMY_ATTRIBUTES,
    attribute_view: Any = AttributeView.LATEST,
    today: Any = None
) -> PlayerPerformanceSummary:
    """
    Build the calculated metrics block for one player.

    Args:
        player: Player document with attributes and performanceHistory
        sessions: Academy session roster (None = attendance not counted)
        names: Attribute schema used by the calling dashboard
        attribute_view: 'latest' snapshot or 'overall' lifetime averages
        today: Reference date for the age calculation; None = today (UTC)

    Raises:
        ValueError: Unknown attribute view
    """
    view = attribute_view if isinstance(attribute_view, AttributeView) else AttributeView(attribute_view)

    player_id = player.get("id", player.get("_id"))
    player_id = str(player_id) if player_id is not None else None

    history = player.get("performanceHistory")
    if not isinstance(history, (list, tuple)):
        history = []

    latest = player.get("attributes")
    attended = sessions_attended(player_id, sessions) if sessions is not None else 0

    if view is AttributeView.OVERALL:
        gate = attended if sessions is not None else None
        attributes = overall_average_attributes(latest, history, names, sessions_attended=gate)
    else:
        attributes = normalize_attributes(latest, names)

    if player.get("dob"):
        today_day: date = resolve_today(today).date()
        age = calculate_age(player.get("dob"), today_day)
    else:
        age = int(coerce_number(player.get("age")))

    summary = PlayerPerformanceSummary(
        player_id=player_id,
        name=player.get("name"),
        overall_rating=overall_rating(latest, names),
        training_performance=training_performance(history),
        match_performance=match_performance(history),
        average_performance=average_performance(history),
        match_stats=match_stats(history),
        sessions_attended=attended,
        attribute_view=view,
        attributes=attributes,
        age=age,
    )

    logger.debug(
        f"Summarized player {player_id}: {len(history)} history entries, "
        f"{attended} sessions attended"
    )
    return summary
