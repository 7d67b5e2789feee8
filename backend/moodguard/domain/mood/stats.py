"""
Time-series statistics over mood samples (intensity on a 0-10 scale).

Every windowed function takes `now` explicitly. Buckets use the UTC clock of
the sample timestamps.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Sequence

import numpy as np

from moodguard.schemas.mood import (
    MOOD_SCALE_MAX,
    MoodSample,
    TemporalBucket,
    TemporalPatterns,
    TrendLabel,
)
from moodguard.utils.time import as_utc

__all__ = [
    "volatility",
    "temporal_patterns",
    "time_slot",
    "baseline",
    "recent_trend",
    "weekly_trend",
    "monthly_trend",
    "ols_slope",
    "newest_first",
]

DEFAULT_BASELINE = 5.0
RECENT_WINDOW = 3
WEEK = timedelta(days=7)
MONTH = timedelta(days=30)
MIN_MONTHLY_POINTS = 5

RECENT_THRESHOLD = 1.0
WEEKLY_THRESHOLD = 0.5
SLOPE_THRESHOLD = 0.1


def newest_first(samples: Sequence[MoodSample]) -> List[MoodSample]:
    return sorted(samples, key=lambda s: s.at, reverse=True)


def _values(samples: Sequence[MoodSample]) -> np.ndarray:
    return np.asarray([s.intensity for s in samples], dtype=float)


def _label(delta: float, threshold: float) -> TrendLabel:
    if delta > threshold:
        return "improving"
    if delta < -threshold:
        return "declining"
    return "stable"


def volatility(samples: Sequence[MoodSample]) -> float:
    """Population std-dev of intensity, normalised to 0-1."""
    if len(samples) < 2:
        return 0.0
    arr = _values(samples)
    if np.ptp(arr) == 0:
        return 0.0
    return float(np.std(arr)) / MOOD_SCALE_MAX


def time_slot(hour: int) -> str:
    if hour < 6:
        return "night"
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    return "evening"


def day_key(at: datetime) -> int:
    """Weekday bucket key, Sunday=0 .. Saturday=6."""
    return (at.weekday() + 1) % 7


def temporal_patterns(samples: Sequence[MoodSample]) -> TemporalPatterns:
    by_day: Dict[int, TemporalBucket] = {}
    by_slot: Dict[str, TemporalBucket] = {}

    for s in samples:
        at = s.at
        for buckets, key in ((by_day, day_key(at)), (by_slot, time_slot(at.hour))):
            b = buckets.setdefault(key, TemporalBucket())  # type: ignore[arg-type]
            b.total += s.intensity
            b.count += 1

    for b in (*by_day.values(), *by_slot.values()):
        b.average = b.total / b.count

    return TemporalPatterns(day_of_week=by_day, time_of_day=by_slot)


def baseline(samples: Sequence[MoodSample]) -> float:
    if not samples:
        return DEFAULT_BASELINE
    return float(np.mean(_values(samples)))


def recent_trend(samples: Sequence[MoodSample]) -> TrendLabel:
    """Newest 3 samples against the 3 before them."""
    if len(samples) < RECENT_WINDOW:
        return "insufficient_data"
    ordered = newest_first(samples)
    recent = _values(ordered[:RECENT_WINDOW])
    older = _values(ordered[RECENT_WINDOW:2 * RECENT_WINDOW])
    recent_avg = float(recent.mean())
    older_avg = float(older.mean()) if older.size else recent_avg
    return _label(recent_avg - older_avg, RECENT_THRESHOLD)


def weekly_trend(samples: Sequence[MoodSample], now: datetime) -> TrendLabel:
    now = as_utc(now)
    week_ago = now - WEEK
    two_weeks_ago = week_ago - WEEK

    this_week = [s for s in samples if s.at >= week_ago]
    last_week = [s for s in samples if two_weeks_ago <= s.at < week_ago]
    if not this_week:
        return "no_data"

    recent_avg = float(_values(this_week).mean())
    previous_avg = float(_values(last_week).mean()) if last_week else recent_avg
    return _label(recent_avg - previous_avg, WEEKLY_THRESHOLD)


def ols_slope(values: Sequence[float]) -> float:
    """Least-squares slope of values against their index 0..n-1."""
    y = np.asarray(values, dtype=float)
    if y.size < 2:
        return 0.0
    x = np.arange(y.size, dtype=float)
    slope, _intercept = np.polyfit(x, y, 1)
    return float(slope)


def monthly_trend(samples: Sequence[MoodSample], now: datetime) -> TrendLabel:
    month_ago = as_utc(now) - MONTH
    window = sorted((s for s in samples if s.at >= month_ago), key=lambda s: s.at)
    if len(window) < MIN_MONTHLY_POINTS:
        return "insufficient_data"
    return _label(ols_slope([s.intensity for s in window]), SLOPE_THRESHOLD)
