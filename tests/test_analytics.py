"""Unit tests for analytics aggregation and period comparison."""

from datetime import date

import pytest

from business_overview.core.analytics import aggregate_daily_analytics, compare
from business_overview.core.models import DailyAnalytics


def _day(day: int, sessions: int, users: int, bounce: float, duration: float, goals: int) -> DailyAnalytics:
    return DailyAnalytics(
        date=date(2026, 2, day),
        sessions=sessions,
        users=users,
        pageviews=sessions * 2,
        bounce_rate=bounce,
        session_duration=duration,
        goal_completions=goals,
        revenue=goals * 10.0,
    )


class TestAggregateDailyAnalytics:
    """Tests for aggregate_daily_analytics()."""

    def test_empty_series_is_absent(self) -> None:
        assert aggregate_daily_analytics([]) is None

    def test_totals_means_and_ratios(self) -> None:
        bundle = aggregate_daily_analytics(
            [
                _day(2, sessions=300, users=200, bounce=50.0, duration=100.0, goals=6),
                _day(1, sessions=100, users=100, bounce=30.0, duration=200.0, goals=3),
            ]
        )

        assert bundle is not None
        assert bundle.traffic.sessions == 400
        assert bundle.traffic.users == 300
        assert bundle.engagement.bounce_rate == pytest.approx(40.0)
        assert bundle.engagement.session_duration == pytest.approx(150.0)
        assert bundle.engagement.pages_per_session == pytest.approx(2.0)
        assert bundle.conversions.goal_completions == 9
        assert bundle.conversions.conversion_rate == pytest.approx(3.0)
        assert bundle.conversions.revenue == pytest.approx(90.0)
        assert [row.date.day for row in bundle.daily] == [1, 2]

    def test_zero_users_and_sessions_are_guarded(self) -> None:
        bundle = aggregate_daily_analytics([_day(1, sessions=0, users=0, bounce=0.0, duration=0.0, goals=0)])

        assert bundle is not None
        assert bundle.engagement.pages_per_session == 0.0
        assert bundle.conversions.conversion_rate == 0.0


class TestCompare:
    """Tests for compare()."""

    def test_increase(self) -> None:
        result = compare(150.0, 100.0)

        assert result.change == 50.0
        assert result.change_percent == pytest.approx(50.0)
        assert result.trend == "up"

    def test_decrease(self) -> None:
        assert compare(50.0, 100.0).trend == "down"

    def test_zero_previous_gives_zero_percent(self) -> None:
        result = compare(10.0, 0.0)

        assert result.change_percent == 0.0
        assert result.trend == "up"

    def test_no_change_is_stable(self) -> None:
        assert compare(7.0, 7.0).trend == "stable"
