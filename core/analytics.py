# =============================================================================
# core/analytics.py - Click Aggregation
# =============================================================================
# Pure functions that turn a card's raw click list into what the analytics
# view renders:
# - filter_by_window: keep clicks inside a trailing window of N days
# - counts_by_type:   clicks per action type, busiest first
# - counts_by_day:    clicks per local calendar day, oldest first
# - summarize_clicks: all of the above for one window, against one "now"
#
# Nothing here does I/O or raises on well-formed clicks; fetch failures are
# handled upstream by returning an empty click list.
#
# Usage:
#   from core.analytics import summarize_clicks
#   summary = summarize_clicks(clicks, TimeWindow.DAYS_30, tz="Europe/Berlin")
# =============================================================================

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Sequence

import pandas as pd

from core.models.click import AnalyticsSummary, Click, DayCount, TimeWindow, TypeCount


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _window_days(window: TimeWindow | int | float | None) -> int | float | None:
    if isinstance(window, TimeWindow):
        return window.days
    return window


def filter_by_window(
    clicks: Sequence[Click],
    days: TimeWindow | int | float | None,
    now: datetime | None = None,
) -> list[Click]:
    """
    Keep the clicks recorded within the last `days` days.

    The boundary is inclusive: a click stamped exactly `now - days` is kept.
    An unbounded window (None, math.inf or TimeWindow.ALL) returns every
    click unchanged.

    Args:
        clicks: Clicks in any order; order is preserved
        days: Window length in days, or unbounded
        now: Reference time (defaults to the current time, read once)

    Returns:
        The matching clicks in their original order

    Raises:
        ValueError: If a bounded window is not positive
    """
    days = _window_days(days)
    if days is None or days == math.inf:
        return list(clicks)
    if days <= 0:
        raise ValueError(f"Window must be a positive number of days, got {days}")

    reference = _as_utc(now) if now else datetime.now(timezone.utc)
    cutoff = reference - timedelta(days=days)

    return [c for c in clicks if _as_utc(c.created_at) >= cutoff]


def counts_by_type(clicks: Sequence[Click]) -> list[TypeCount]:
    """
    Count clicks per action type.

    Types are compared case-insensitively and capitalized for display
    ("phone" and "PHONE" both count as "Phone"). Results are sorted by count
    descending; ties keep the order in which each type first appears.
    """
    if not clicks:
        return []

    types = pd.Series([c.type.lower() for c in clicks], dtype="object")

    # sort=False keeps first-occurrence order, the stable sort keeps it for ties
    counts = types.groupby(types, sort=False).size()
    counts = counts.sort_values(ascending=False, kind="stable")

    return [TypeCount(name=name.capitalize(), count=int(n)) for name, n in counts.items()]


def counts_by_day(
    clicks: Sequence[Click],
    tz: str | tzinfo = "UTC",
) -> list[DayCount]:
    """
    Count clicks per calendar day in the viewer's time zone.

    Only days with at least one click are returned (no zero-filled gaps),
    sorted ascending by date.

    Args:
        clicks: Clicks in any order
        tz: IANA zone name or tzinfo used to decide which day a click falls on
    """
    if not clicks:
        return []

    stamps = pd.to_datetime([_as_utc(c.created_at) for c in clicks], utc=True)
    local_days = pd.Series(stamps.tz_convert(tz).strftime("%Y-%m-%d"))

    counts = local_days.groupby(local_days).size().sort_index()

    return [DayCount(date=day, count=int(n)) for day, n in counts.items()]


def summarize_clicks(
    clicks: Sequence[Click],
    window: TimeWindow | int | None = TimeWindow.DAYS_30,
    now: datetime | None = None,
    tz: str | tzinfo = "UTC",
) -> AnalyticsSummary:
    """
    Filter once and aggregate, so every figure shares the same `now`.

    Args:
        clicks: All clicks for a card
        window: Trailing window (TimeWindow, days, or None for All Time)
        now: Reference time (defaults to the current time)
        tz: Time zone for the per-day series

    Returns:
        AnalyticsSummary for the window
    """
    days = _window_days(window)
    reference = now or datetime.now(timezone.utc)
    filtered = filter_by_window(clicks, days, now=reference)

    return AnalyticsSummary(
        window_days=None if days is None or days == math.inf else int(days),
        total_clicks=len(filtered),
        by_type=counts_by_type(filtered),
        by_day=counts_by_day(filtered, tz=tz),
    )
