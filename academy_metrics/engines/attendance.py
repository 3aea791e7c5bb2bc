"""
Attendance counting against the academy session roster.
"""
from collections import Counter
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Optional

from academy_metrics.config.constants import PRESENT_STATUS, UNMARKED_STATUS
from academy_metrics.models.entities import SessionRecord


def _iter_sessions(sessions: Optional[Iterable[Any]]) -> Iterator[SessionRecord]:
    if not sessions:
        return
    for item in sessions:
        if isinstance(item, SessionRecord):
            yield item
        elif isinstance(item, Mapping):
            yield SessionRecord.from_dict(item)


def sessions_attended(player_id: Any, sessions: Optional[Iterable[Any]]) -> int:
    """
    Count sessions the player was assigned to and marked present for.

    Status matching is case-insensitive. Sessions without an attendance
    entry for the player are simply not counted.
    """
    if player_id is None:
        return 0

    return sum(
        1 for session in _iter_sessions(sessions)
        if session.is_assigned(player_id) and session.status_for(player_id) == PRESENT_STATUS
    )


def attendance_breakdown(player_id: Any, sessions: Optional[Iterable[Any]]) -> Dict[str, int]:
    """
    Count assigned sessions per attendance status.

    Returns:
        Dict of lower-cased status -> count, with 'unmarked' for sessions
        that have no status recorded for the player
    """
    counts = Counter()
    if player_id is None:
        return {}

    for session in _iter_sessions(sessions):
        if not session.is_assigned(player_id):
            continue
        counts[session.status_for(player_id) or UNMARKED_STATUS] += 1

    return dict(counts)
