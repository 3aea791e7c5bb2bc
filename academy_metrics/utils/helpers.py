"""
Utility functions and helpers.
"""
from datetime import date, datetime
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

from academy_metrics.config.constants import RATING_DECIMALS


# =============================================================================
# STAT AGGREGATION HELPERS
# =============================================================================

def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safe division with default for zero denominator."""
    if denominator == 0:
        return default
    return numerator / denominator


def safe_avg(values: Iterable[float], default: float = 0.0) -> float:
    """Safe average that returns default for empty input."""
    values = list(values)
    if not values:
        return default
    result = float(np.mean(values))
    if not np.isfinite(result):
        return default
    return result


def round_rating(value: float, decimals: int = RATING_DECIMALS) -> float:
    """Round a rating for output, mapping NaN/inf to 0."""
    if value is None or not np.isfinite(value):
        return 0.0
    return round(float(value), decimals)


# =============================================================================
# DATE HELPERS
# =============================================================================

DateLike = Union[str, date, datetime, pd.Timestamp]


def calculate_age(dob: Optional[DateLike], today: date) -> int:
    """
    Whole years between a date of birth and today.

    Returns 0 for a missing or unparseable date of birth.
    """
    if not dob:
        return 0

    born = pd.to_datetime(dob, errors="coerce")
    if pd.isna(born):
        return 0

    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return max(0, age)


# =============================================================================
# FORMATTING HELPERS
# =============================================================================

def format_rating(rating: float) -> str:
    """Format rating for display."""
    return f"{rating:.1f}"


def rating_to_description(value: float) -> str:
    """Convert a 0-10 rating to a description."""
    if value >= 9:
        return "Excellent"
    elif value >= 7.5:
        return "Very Good"
    elif value >= 6:
        return "Good"
    elif value >= 4:
        return "Average"
    elif value > 0:
        return "Developing"
    else:
        return "Not Rated"
