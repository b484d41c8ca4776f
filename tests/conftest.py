"""Shared test fixtures for business-overview tests."""

import sys
from pathlib import Path

# Ensure the src/ layout is importable without installing the package.
_SRC_PATH = Path(__file__).parent.parent / "src"
if str(_SRC_PATH) not in sys.path:
    sys.path.insert(0, str(_SRC_PATH))

from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from typing import Any

import pytest

from business_overview.core.models import (
    AnalyticsMetrics,
    AutomationMetrics,
    ConversionMetrics,
    DailyAnalytics,
    EngagementMetrics,
    ExecutionEvent,
    MILLISECONDS_PER_HOUR,
    TrafficMetrics,
    WorkflowStatus,
)
from business_overview.settings import Settings


@pytest.fixture
def settings() -> Settings:
    """Provide test settings with safe defaults."""
    return Settings(
        analytics_base_url="http://analytics-test:8080",
        workflow_base_url="http://workflow-test:5678",
        analytics_property_id="prop-test",
        event_page_size=2,
        max_events=10,
        hourly_labor_cost_usd=50.0,
        monthly_automation_cost_usd=100.0,
        trend_lookback_days=30,
        compare_previous_period=False,
        fail_on_all_sources_unavailable=False,
    )


@pytest.fixture
def now() -> datetime:
    """Provide a consistent reference time."""
    return datetime(2026, 2, 26, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_event(now: datetime) -> Callable[..., ExecutionEvent]:
    """Factory for ExecutionEvent records with sensible defaults."""
    counter = {"n": 0}

    def _make(
        workflow_id: str = "wf-1",
        status: str = "completed",
        duration_ms: float | None = 60_000.0,
        created_at: datetime | None = None,
        workflow_name: str | None = None,
        **overrides: Any,
    ) -> ExecutionEvent:
        counter["n"] += 1
        created = created_at or now - timedelta(minutes=counter["n"])
        fields: dict[str, Any] = {
            "id": f"evt-{counter['n']}",
            "workflow_id": workflow_id,
            "workflow_name": workflow_name or f"Workflow {workflow_id}",
            "execution_id": f"exec-{counter['n']}",
            "event_type": "workflow_failed" if status == "failed" else "workflow_completed",
            "status": status,
            "start_time": created,
            "created_at": created,
            "duration_ms": duration_ms,
        }
        fields.update(overrides)
        return ExecutionEvent(**fields)

    return _make


@pytest.fixture
def make_workflow(now: datetime) -> Callable[..., WorkflowStatus]:
    """Factory for WorkflowStatus records."""

    def _make(
        workflow_id: str = "wf-1",
        total: int = 10,
        successful: int = 10,
        failed: int = 0,
        average_ms: float = 1_000.0,
        time_saved_ms: float = 10_000.0,
        success_rate: float | None = None,
    ) -> WorkflowStatus:
        rate = success_rate if success_rate is not None else (successful / total * 100 if total else 0.0)
        return WorkflowStatus(
            id=workflow_id,
            name=f"Workflow {workflow_id}",
            status="completed",
            execution_id="exec-1",
            start_time=now,
            end_time=None,
            duration_ms=None,
            total_executions=total,
            successful_executions=successful,
            failed_executions=failed,
            success_rate=rate,
            average_execution_time_ms=average_ms,
            time_saved_ms=time_saved_ms,
            last_run=now,
        )

    return _make


@pytest.fixture
def make_analytics() -> Callable[..., AnalyticsMetrics]:
    """Factory for analytics bundles with chosen headline values."""

    def _make(
        sessions: int = 2_000,
        users: int = 1_500,
        pageviews: int = 5_000,
        bounce_rate: float = 45.0,
        session_duration: float = 150.0,
        conversion_rate: float = 4.0,
        daily: tuple[DailyAnalytics, ...] = (),
    ) -> AnalyticsMetrics:
        return AnalyticsMetrics(
            traffic=TrafficMetrics(sessions=sessions, users=users, pageviews=pageviews),
            engagement=EngagementMetrics(
                bounce_rate=bounce_rate,
                session_duration=session_duration,
                pages_per_session=pageviews / sessions if sessions else 0.0,
            ),
            conversions=ConversionMetrics(conversion_rate=conversion_rate, goal_completions=60, revenue=1_200.0),
            daily=daily,
        )

    return _make


@pytest.fixture
def make_automation() -> Callable[..., AutomationMetrics]:
    """Factory for automation bundles with chosen success rate and hours saved."""

    def _make(success_rate: float = 96.0, hours_saved: float = 120.0, **overrides: Any) -> AutomationMetrics:
        fields: dict[str, Any] = {
            "total_workflows": 3,
            "active_workflows": 1,
            "total_executions": 100,
            "successful_executions": int(success_rate),
            "failed_executions": 100 - int(success_rate),
            "average_execution_time_ms": 5_000.0,
            "total_time_saved_ms": hours_saved * MILLISECONDS_PER_HOUR,
            "success_rate": success_rate,
        }
        fields.update(overrides)
        return AutomationMetrics(**fields)

    return _make


@pytest.fixture
def reference_date() -> date:
    return date(2026, 2, 26)
