"""Abstract interfaces (Protocol classes) for the business overview engine.

Services depend on these interfaces, not on the HTTP clients or stores in
adapters/. This keeps the orchestration testable with AsyncMock doubles.
"""

from datetime import date
from typing import Protocol, runtime_checkable

from business_overview.core.models import AnalyticsMetrics, BusinessGoal, CustomMetric, ExecutionEvent


@runtime_checkable
class IAnalyticsProvider(Protocol):
    """Source of web analytics for a date range."""

    async def get_metrics(self, start: date, end: date) -> AnalyticsMetrics | None:
        """Return the analytics bundle for [start, end], or None when there is no data."""
        ...


@runtime_checkable
class IWorkflowEventSource(Protocol):
    """Source of raw workflow execution events."""

    async def list_events(self, integration_id: str) -> list[ExecutionEvent]:
        """Return every known execution event for the integration."""
        ...


@runtime_checkable
class IGoalStore(Protocol):
    """Read-only store of business goals."""

    async def list_goals(self) -> list[BusinessGoal]:
        """Return all business goals."""
        ...


@runtime_checkable
class ICustomMetricStore(Protocol):
    """Read-only store of user-defined metrics."""

    async def list_custom_metrics(self) -> list[CustomMetric]:
        """Return all custom metrics."""
        ...
