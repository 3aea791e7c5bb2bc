"""
Core constants for the performance metrics engine.
All schemas and thresholds defined here for easy tuning.
"""
from enum import Enum
from typing import Dict, Tuple


# =============================================================================
# ATTRIBUTE SCHEMAS
# =============================================================================

# Skill attributes scored by coaches on the academy dashboards
ACADEMY_ATTRIBUTES: Tuple[str, ...] = (
    "Attack",
    "pace",
    "Physicality",
    "Defense",
    "passing",
    "Technique",
)

# Skill attributes shown on the player profile / coordinator pages
PROFILE_ATTRIBUTES: Tuple[str, ...] = (
    "shooting",
    "pace",
    "positioning",
    "passing",
    "ballControl",
    "crossing",
)

ATTRIBUTE_SCHEMAS: Dict[str, Tuple[str, ...]] = {
    "academy": ACADEMY_ATTRIBUTES,
    "profile": PROFILE_ATTRIBUTES,
}

DEFAULT_SCHEMA = "academy"

# Scale: 0-10
ATTR_MAX = 10


def get_attribute_schema(name: str) -> Tuple[str, ...]:
    """Look up an attribute name list by schema name."""
    try:
        return ATTRIBUTE_SCHEMAS[name]
    except KeyError:
        raise ValueError(
            f"Unknown attribute schema '{name}' (expected one of {sorted(ATTRIBUTE_SCHEMAS)})"
        )


# =============================================================================
# EVENT TYPES
# =============================================================================

class EventType(Enum):
    """Kind of performance history entry."""
    TRAINING = "training"
    MATCH = "match"
    UNSPECIFIED = "unspecified"   # Legacy entries with no type, training-like
    OTHER = "other"               # Any other recorded type, neither training nor match

    @classmethod
    def parse(cls, raw) -> "EventType":
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls.UNSPECIFIED
        if isinstance(raw, str):
            value = raw.strip().lower()
            if not value:
                return cls.UNSPECIFIED
            if value == cls.TRAINING.value:
                return cls.TRAINING
            if value == cls.MATCH.value:
                return cls.MATCH
        return cls.OTHER

    @property
    def is_training_like(self) -> bool:
        return self in (EventType.TRAINING, EventType.UNSPECIFIED)


# Match stat line fields summed by the match stats calculator
MATCH_STAT_FIELDS: Tuple[str, ...] = ("goals", "assists", "cleanSheets")


# =============================================================================
# TIME SERIES CONSTANTS
# =============================================================================

class Granularity(Enum):
    """Bucketing resolution for attribute trend charts."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, raw) -> "Granularity":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown granularity '{raw}' (expected one of {[g.value for g in cls]})"
            )


# Buckets per trend window, the same for every granularity
BUCKET_COUNT = 10

DEFAULT_GRANULARITY = Granularity.WEEKLY

DAYS_PER_WEEK = 7

# Date label format for projected history and buckets
DATE_LABEL_FORMAT = "%Y-%m-%d"


# =============================================================================
# ATTENDANCE CONSTANTS
# =============================================================================

PRESENT_STATUS = "present"
UNMARKED_STATUS = "unmarked"


# =============================================================================
# OUTPUT
# =============================================================================

RATING_DECIMALS = 1
PERCENT_SCALE = 100


class AttributeView(Enum):
    """Which attribute values a summary displays."""
    LATEST = "latest"     # Most recent snapshot
    OVERALL = "overall"   # Lifetime average across history
