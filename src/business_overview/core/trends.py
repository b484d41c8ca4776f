"""Daily charting series combining analytics samples with automation success.

One row per day over a fixed lookback window ending at the reference date
(inclusive), oldest first. Lookups are exact matches only, never
interpolated:
  - traffic / engagement / conversion by calendar date against the daily series;
  - automation by ``YYYY-MM`` against the monthly execution trends.

overall_health is a chart-only heuristic, not a score:

    round_half_up(mean(traffic / 1000, (100 - engagement) / 100, conversion * 10, automation))
"""

from __future__ import annotations

from datetime import date, timedelta

from business_overview.core.arithmetic import round_half_up
from business_overview.core.models import AnalyticsMetrics, AutomationMetrics, BusinessTrend

DEFAULT_LOOKBACK_DAYS = 30


def chart_health(traffic: float, engagement: float, conversion: float, automation: float) -> int:
    """Single-number rollup of one day's components for charting."""
    return round_half_up((traffic / 1000 + (100 - engagement) / 100 + conversion * 10 + automation) / 4)


def build_trend_series(
    analytics: AnalyticsMetrics | None,
    automation: AutomationMetrics | None,
    as_of: date,
    days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[BusinessTrend]:
    """Build the daily trend series for the lookback window.

    Args:
        analytics: Analytics bundle carrying the daily series (None when absent).
        automation: Automation bundle carrying monthly trends (None when absent).
        as_of: Last day of the window.
        days: Window length in days.

    Returns:
        ``days`` BusinessTrend rows, oldest first.
    """
    daily = {row.date: row for row in analytics.daily} if analytics is not None else {}
    monthly = {row.month: row for row in automation.monthly_trends} if automation is not None else {}

    series: list[BusinessTrend] = []
    for offset in range(days - 1, -1, -1):
        day = as_of - timedelta(days=offset)

        sample = daily.get(day)
        traffic = float(sample.sessions) if sample else 0.0
        engagement = sample.bounce_rate if sample else 0.0
        conversion = sample.conversion_rate if sample else 0.0

        month = monthly.get(day.strftime("%Y-%m"))
        automation_rate = month.success_rate if month else 0.0

        series.append(
            BusinessTrend(
                date=day,
                traffic=traffic,
                engagement=engagement,
                conversion=conversion,
                automation=automation_rate,
                overall_health=chart_health(traffic, engagement, conversion, automation_rate),
            )
        )

    return series
