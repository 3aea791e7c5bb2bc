from __future__ import annotations

import copy

import pytest

from academy_metrics.config.constants import ACADEMY_ATTRIBUTES, PROFILE_ATTRIBUTES
from academy_metrics.engines.rating_engine import (
    average_performance,
    match_performance,
    match_stats,
    overall_average_attributes,
    overall_rating,
    overall_rating_percent,
    training_performance,
)


SCENARIO_HISTORY = [
    {"date": "2024-01-01", "type": "training", "attributes": {"shooting": 5, "pace": 5}},
    {"date": "2024-02-01", "type": "training", "attributes": {"shooting": 7}},
]


def _match(points=None, **stats) -> dict:
    if points is not None:
        stats["matchPoints"] = points
    return {"date": "2024-03-01", "type": "match", "stats": stats}


# =============================================================================
# overall_rating
# =============================================================================

def test_overall_rating_zero_for_empty_input() -> None:
    assert overall_rating({}) == 0
    assert overall_rating(None) == 0
    assert overall_rating({"Attack": "x", "pace": None}) == 0
    assert overall_rating({name: 0 for name in ACADEMY_ATTRIBUTES}) == 0


def test_overall_rating_mean_of_named_attributes() -> None:
    attributes = {"Attack": 6, "pace": 7, "Physicality": 8, "Defense": 5, "passing": 6, "Technique": 7}
    assert overall_rating(attributes) == 6.5


def test_overall_rating_missing_attributes_count_as_zero() -> None:
    assert overall_rating({"shooting": 6, "pace": 6}, PROFILE_ATTRIBUTES) == 2.0


def test_overall_rating_empty_name_list() -> None:
    assert overall_rating({"Attack": 9}, ()) == 0


def test_overall_rating_percent() -> None:
    assert overall_rating_percent({name: 9.1 for name in PROFILE_ATTRIBUTES}, PROFILE_ATTRIBUTES) == 91
    assert overall_rating_percent(None) == 0


# =============================================================================
# training_performance
# =============================================================================

def test_training_performance_empty() -> None:
    assert training_performance([]) == 0
    assert training_performance(None) == 0


def test_training_performance_scenario() -> None:
    assert training_performance(SCENARIO_HISTORY) == 6.0


def test_training_performance_ignores_match_entries() -> None:
    history = [
        {"type": "match", "attributes": {"shooting": 10}},
        {"type": "training", "attributes": {"shooting": 4, "pace": 6}},
    ]
    assert training_performance(history) == 5.0


def test_training_performance_counts_untyped_entries() -> None:
    assert training_performance([{"attributes": {"pace": 8}}]) == 8.0


def test_training_performance_skips_other_event_types() -> None:
    history = [
        {"type": "training", "attributes": {"pace": 4}},
        {"type": "assessment", "attributes": {"pace": 10}},
        {"type": "Friendly", "attributes": {"pace": 9}},
    ]
    assert training_performance(history) == 4.0


def test_training_performance_counts_blank_type_as_training() -> None:
    history = [
        {"type": "", "attributes": {"pace": 6}},
        {"type": None, "attributes": {"pace": 8}},
    ]
    assert training_performance(history) == 7.0


def test_training_performance_uses_positive_values_only() -> None:
    history = [
        {"type": "training", "attributes": {"shooting": 0, "pace": "abc", "passing": 6}},
        {"type": "training", "attributes": {"shooting": 0}},
        {"type": "training"},
    ]
    assert training_performance(history) == 6.0


def test_training_performance_rounds_to_one_decimal() -> None:
    history = [
        {"type": "training", "attributes": {"a": 7}},
        {"type": "training", "attributes": {"a": 8}},
        {"type": "training", "attributes": {"a": 8}},
    ]
    assert training_performance(history) == 7.7


# =============================================================================
# match_performance / match_stats
# =============================================================================

def test_match_performance_averages_positive_points() -> None:
    history = [
        _match({"current": {"current": 7}}),
        _match(5),
        _match({"edited": 3}),
        _match(0),
        _match(),
        {"type": "training", "stats": {"matchPoints": 10}},
    ]
    assert match_performance(history) == 5.0


def test_match_performance_empty() -> None:
    assert match_performance([]) == 0
    assert match_performance([{"type": "training", "attributes": {"pace": 5}}]) == 0


def test_match_stats_sums_across_matches() -> None:
    history = [
        {"type": "match", "stats": {"goals": 2, "assists": 1}},
        {"type": "match", "stats": {"goals": 1, "cleanSheets": 1}},
    ]
    assert match_stats(history) == {"goals": 3, "assists": 1, "cleanSheets": 1}


def test_match_stats_skips_non_match_and_statless_entries() -> None:
    history = [
        {"type": "training", "stats": {"goals": 5}},
        {"type": "match"},
        {"type": "match", "stats": {"goals": "2", "assists": None}},
    ]
    assert match_stats(history) == {"goals": 2, "assists": 0, "cleanSheets": 0}


def test_match_stats_empty() -> None:
    assert match_stats(None) == {"goals": 0, "assists": 0, "cleanSheets": 0}


# =============================================================================
# average_performance
# =============================================================================

def test_average_performance_blends_available_scores() -> None:
    history = [
        {"type": "training", "attributes": {"a": 6, "b": 8}, "sessionRating": 9},
        _match({"current": 6}),
        {"type": "training"},
    ]
    assert average_performance(history) == 7.0


def test_average_performance_falls_back_to_rating_field() -> None:
    assert average_performance([{"rating": 4}]) == 4.0
    assert average_performance([]) == 0


# =============================================================================
# overall_average_attributes
# =============================================================================

def test_overall_average_attributes_includes_latest_snapshot() -> None:
    history = [
        {"attributes": {"Attack": 6, "pace": 5}},
        {"attributes": {"Attack": 0}},
        {"type": "match"},
    ]
    result = overall_average_attributes({"Attack": 8}, history)

    assert result["Attack"] == 7.0
    assert result["pace"] == 5.0
    assert result["Physicality"] == 0
    assert list(result) == list(ACADEMY_ATTRIBUTES)


def test_overall_average_attributes_rounds() -> None:
    history = [{"attributes": {"Attack": 8}}, {"attributes": {"Attack": 8}}]
    assert overall_average_attributes({"Attack": 7}, history)["Attack"] == pytest.approx(7.7)


def test_overall_average_attributes_without_sessions_returns_snapshot() -> None:
    history = [{"attributes": {"Attack": 2}}]
    result = overall_average_attributes({"Attack": 8}, history, sessions_attended=0)
    assert result["Attack"] == 8.0

    result = overall_average_attributes({"Attack": 8}, history, sessions_attended=3)
    assert result["Attack"] == 5.0


# =============================================================================
# purity
# =============================================================================

def test_calculators_are_idempotent_and_do_not_mutate() -> None:
    history = SCENARIO_HISTORY + [
        _match({"current": {"current": 7}}, goals=1),
        {"type": "training", "attributes": {"shooting": "6"}, "sessionRating": 8},
    ]
    before = copy.deepcopy(history)

    for calculator in (training_performance, match_performance, match_stats, average_performance):
        assert calculator(history) == calculator(history)

    latest = {"Attack": 5}
    assert overall_average_attributes(latest, history) == overall_average_attributes(latest, history)
    assert history == before
    assert latest == {"Attack": 5}
