"""
Command line entry point for the academy performance metrics engine.

Usage:
    academy-metrics --player player.json                       # Latest profile
    academy-metrics --player player.json --sessions s.json --view overall
    academy-metrics --player player.json --trend --range monthly --offset 1
    academy-metrics --player player.json --trend --today 2024-06-30
"""
import argparse
import json
import logging
import sys
from typing import Any, List, Optional, Sequence

from academy_metrics.config.constants import (
    ATTRIBUTE_SCHEMAS, AttributeView, Granularity, get_attribute_schema
)
from academy_metrics.config.settings import EngineConfig
from academy_metrics.engines.attendance import attendance_breakdown
from academy_metrics.engines.summary import summarize_player
from academy_metrics.engines.timeseries import (
    project_attribute_history, bucketize_time_range, buckets_to_frame
)
from academy_metrics.models.entities import PlayerPerformanceSummary
from academy_metrics.utils.helpers import format_rating, rating_to_description
from academy_metrics.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def load_document(path: str) -> Any:
    """Load a JSON export, unwrapping the API's {"success", "data"} envelope."""
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)

    if isinstance(document, dict) and "data" in document and "success" in document:
        document = document["data"]
    return document


def show_player_profile(
    summary: PlayerPerformanceSummary,
    breakdown: Optional[dict] = None
):
    """Display a player's calculated metrics."""
    print("\n" + "=" * 60)
    print(f"PLAYER PROFILE: {summary.name or summary.player_id}")
    print("=" * 60)
    if summary.age:
        print(f"Age:                  {summary.age}")
    print(f"Overall Rating:       {format_rating(summary.overall_rating)}  "
          f"({rating_to_description(summary.overall_rating)})")
    print(f"Training Performance: {format_rating(summary.training_performance)}/10")
    print(f"Match Performance:    {format_rating(summary.match_performance)}/10")
    print(f"Average Performance:  {format_rating(summary.average_performance)}")
    print(f"Sessions Attended:    {summary.sessions_attended}")

    stats = summary.match_stats
    print(f"Goals / Assists / Clean Sheets: "
          f"{stats.get('goals', 0)} / {stats.get('assists', 0)} / {stats.get('cleanSheets', 0)}")

    if breakdown:
        statuses = ", ".join(f"{status}: {count}" for status, count in sorted(breakdown.items()))
        print(f"Attendance:           {statuses}")

    print(f"\nAttributes ({summary.attribute_view.value}, 0-10 scale):")
    print("-" * 40)
    for code, value in summary.attributes.items():
        print(f"  {code:12} {value:5.1f}")

    print("=" * 60 + "\n")


def show_trend(
    player: dict,
    names: Sequence[str],
    granularity: str,
    offset: int,
    today: Optional[str],
    config: EngineConfig
):
    """Display the bucketed attribute growth table."""
    projected = project_attribute_history(player.get("performanceHistory"), names, tz=config.timezone)
    buckets = bucketize_time_range(
        projected, granularity, offset, names,
        today=today, bucket_count=config.bucket_count, tz=config.timezone
    )
    frame = buckets_to_frame(buckets, names)

    print("\n" + "=" * 60)
    print(f"ATTRIBUTE GROWTH ({granularity}, offset {offset})")
    print("=" * 60)
    print(frame.to_string(float_format=lambda v: f"{v:.1f}"))
    print(f"\n{len(projected)} rated entries in history")
    print("=" * 60 + "\n")


def build_parser(config: EngineConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Academy performance metrics - ratings, attendance and attribute trends"
    )

    # Inputs
    parser.add_argument('--player', type=str, metavar='FILE',
                        help='Player JSON document (attributes + performanceHistory)')
    parser.add_argument('--sessions', type=str, metavar='FILE',
                        help='Academy sessions JSON (for attendance)')

    # Options
    parser.add_argument('--schema', choices=sorted(ATTRIBUTE_SCHEMAS), default=config.schema,
                        help='Attribute schema used by the dashboard')
    parser.add_argument('--view', choices=[v.value for v in AttributeView],
                        default=AttributeView.LATEST.value,
                        help='Show latest snapshot or lifetime averages')
    parser.add_argument('--trend', action='store_true',
                        help='Show the attribute growth table')
    parser.add_argument('--range', dest='granularity', choices=[g.value for g in Granularity],
                        default=config.granularity,
                        help='Trend bucket granularity')
    parser.add_argument('--offset', type=int, default=0,
                        help='Windows to step back from the most recent one')
    parser.add_argument('--today', type=str, metavar='DATE',
                        help='Reference date for trends and age (YYYY-MM-DD)')
    parser.add_argument('--log-file', type=str, default=config.log_file,
                        help='Also write logs to this file')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    config = EngineConfig.from_env()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    setup_logging(args.log_file, logging.DEBUG if args.verbose else config.log_level)

    if not args.player:
        parser.print_help()
        return 0

    try:
        player = load_document(args.player)
        sessions = load_document(args.sessions) if args.sessions else None
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    if not isinstance(player, dict):
        logger.error(f"Player document in {args.player} is not a JSON object")
        return 1
    if sessions is not None and not isinstance(sessions, list):
        logger.error(f"Sessions document in {args.sessions} is not a JSON array")
        return 1

    names = get_attribute_schema(args.schema)
    logger.info(f"Loaded player {player.get('id', player.get('_id'))} "
                f"with {len(player.get('performanceHistory') or [])} history entries")

    try:
        summary = summarize_player(player, sessions, names, args.view, today=args.today)
        breakdown = attendance_breakdown(summary.player_id, sessions) if sessions is not None else None
        show_player_profile(summary, breakdown)

        if args.trend:
            show_trend(player, names, args.granularity, args.offset, args.today, config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
