"""Aggregation of the analytics provider's daily series into an analytics bundle.

Key invariants:
  - sessions, users, pageviews, goal completions and revenue are summed.
  - bounce rate and session duration are the unweighted mean of the daily values.
  - pages_per_session = pageviews / sessions, 0 when there are no sessions.
  - conversion_rate = goal completions / users * 100, 0 when there are no users.
  - An empty series produces no bundle (None): the source counts as absent.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from business_overview.core.arithmetic import safe_divide
from business_overview.core.models import (
    AnalyticsMetrics,
    ConversionMetrics,
    DailyAnalytics,
    Direction,
    EngagementMetrics,
    TrafficMetrics,
)


@dataclass(frozen=True)
class MetricComparison:
    """Current-versus-previous comparison of one metric."""

    current: float
    previous: float
    change: float
    change_percent: float
    trend: Direction


def conversion_rate(goal_completions: float, users: float) -> float:
    """Goal completions per user, as a percentage."""
    return safe_divide(goal_completions, users) * 100


def aggregate_daily_analytics(daily: Sequence[DailyAnalytics]) -> AnalyticsMetrics | None:
    """Roll a daily analytics series up into an analytics bundle.

    Args:
        daily: Daily samples for the requested range, in any order.

    Returns:
        AnalyticsMetrics with the series sorted by date, or None when empty.
    """
    if not daily:
        return None

    series = tuple(sorted(daily, key=lambda row: row.date))
    sessions = sum(row.sessions for row in series)
    users = sum(row.users for row in series)
    pageviews = sum(row.pageviews for row in series)
    goal_completions = sum(row.goal_completions for row in series)

    return AnalyticsMetrics(
        traffic=TrafficMetrics(sessions=sessions, users=users, pageviews=pageviews),
        engagement=EngagementMetrics(
            bounce_rate=safe_divide(sum(row.bounce_rate for row in series), len(series)),
            session_duration=safe_divide(sum(row.session_duration for row in series), len(series)),
            pages_per_session=safe_divide(pageviews, sessions),
        ),
        conversions=ConversionMetrics(
            conversion_rate=conversion_rate(goal_completions, users),
            goal_completions=goal_completions,
            revenue=sum(row.revenue for row in series),
        ),
        daily=series,
    )


def compare(current: float, previous: float) -> MetricComparison:
    """Compare a metric against its value in the previous period.

    change_percent is 0 when the previous value is not positive.
    """
    change = current - previous
    change_percent = safe_divide(change, previous) * 100 if previous > 0 else 0.0
    if change > 0:
        trend: Direction = "up"
    elif change < 0:
        trend = "down"
    else:
        trend = "stable"
    return MetricComparison(
        current=current,
        previous=previous,
        change=change,
        change_percent=change_percent,
        trend=trend,
    )
