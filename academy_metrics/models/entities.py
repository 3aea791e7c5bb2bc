"""
Core entity models for performance history, sessions and player summaries.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

import pandas as pd

from academy_metrics.config.constants import EventType, AttributeView
from academy_metrics.processors.normalizer import coerce_number, parse_event_timestamp


@dataclass(frozen=True)
class PerformanceEvent:
    """One entry in a player's append-only performance history."""
    date: Any
    event_type: EventType = EventType.UNSPECIFIED

    # Training entries
    attributes: Optional[Dict[str, Any]] = None
    session_rating: Any = None

    # Match entries
    stats: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, raw: Mapping) -> "PerformanceEvent":
        """Build an event from a raw history document, copying nested mappings."""
        attributes = raw.get("attributes")
        stats = raw.get("stats")

        session_rating = raw.get("sessionRating")
        if not coerce_number(session_rating):
            session_rating = raw.get("rating")

        return cls(
            date=raw.get("date"),
            event_type=EventType.parse(raw.get("type")),
            attributes=dict(attributes) if isinstance(attributes, Mapping) else None,
            session_rating=session_rating,
            stats=dict(stats) if isinstance(stats, Mapping) else None,
        )

    @classmethod
    def coerce(cls, item: Any) -> Optional["PerformanceEvent"]:
        """Accept an event or a raw mapping; anything else yields None."""
        if isinstance(item, cls):
            return item
        if isinstance(item, Mapping):
            return cls.from_dict(item)
        return None

    @property
    def is_match(self) -> bool:
        return self.event_type is EventType.MATCH

    @property
    def is_training_like(self) -> bool:
        return self.event_type.is_training_like

    @property
    def quality_score(self) -> float:
        """Coach's session rating for the entry, 0 when not recorded."""
        return coerce_number(self.session_rating)

    @property
    def match_points(self) -> Any:
        """Raw matchPoints field (number or nested edit structure)."""
        if self.stats is None:
            return None
        return self.stats.get("matchPoints")

    def timestamp(self, tz: str = "UTC") -> Optional[pd.Timestamp]:
        return parse_event_timestamp(self.date, tz=tz)


def iter_events(history: Optional[Iterable[Any]]) -> Iterator[PerformanceEvent]:
    """Yield well-formed events from a raw history, skipping junk items."""
    if not history:
        return
    for item in history:
        event = PerformanceEvent.coerce(item)
        if event is not None:
            yield event


@dataclass(frozen=True)
class SessionRecord:
    """A training session as exported by the sessions API (consumed, not owned)."""
    session_id: Optional[str] = None
    name: Optional[str] = None
    assigned_players: Tuple[str, ...] = ()

    # player_id -> lower-cased status
    attendance: Dict[str, Optional[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping) -> "SessionRecord":
        assigned = raw.get("assignedPlayers")
        if isinstance(assigned, (list, tuple, set)):
            assigned_players = tuple(str(pid) for pid in assigned)
        else:
            assigned_players = ()

        attendance = {}
        raw_attendance = raw.get("attendance")
        if isinstance(raw_attendance, Mapping):
            for pid, entry in raw_attendance.items():
                status = entry.get("status") if isinstance(entry, Mapping) else None
                attendance[str(pid)] = status.strip().lower() if isinstance(status, str) else None

        session_id = raw.get("id", raw.get("_id"))
        return cls(
            session_id=str(session_id) if session_id is not None else None,
            name=raw.get("name"),
            assigned_players=assigned_players,
            attendance=attendance,
        )

    def is_assigned(self, player_id: Any) -> bool:
        return str(player_id) in self.assigned_players

    def status_for(self, player_id: Any) -> Optional[str]:
        return self.attendance.get(str(player_id))


@dataclass
class PlayerPerformanceSummary:
    """Calculated metrics for one player, as shown on the dashboards."""
    player_id: Optional[str]
    name: Optional[str]

    overall_rating: float = 0.0
    training_performance: float = 0.0
    match_performance: float = 0.0
    average_performance: float = 0.0
    match_stats: Dict[str, float] = field(default_factory=dict)
    sessions_attended: int = 0

    attribute_view: AttributeView = AttributeView.LATEST
    attributes: Dict[str, float] = field(default_factory=dict)
    age: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.player_id,
            "name": self.name,
            "age": self.age,
            "attributeView": self.attribute_view.value,
            "attributes": dict(self.attributes),
            "calculatedMetrics": {
                "overallRating": self.overall_rating,
                "trainingPerformance": self.training_performance,
                "matchPerformance": self.match_performance,
                "averagePerformance": self.average_performance,
                "matchStats": dict(self.match_stats),
                "sessionsAttended": self.sessions_attended,
            },
        }
