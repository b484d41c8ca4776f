"""Domain value objects for the business overview engine.

All records are frozen dataclasses. Derived records (WorkflowStatus,
ROIRecord, PerformanceAlert, HealthScore, BusinessKPI, BusinessTrend,
Recommendation, BusinessOverview) are rebuilt from their inputs on every
call and never mutated after construction.

Time units:
  - Execution durations and time-saved totals are milliseconds.
  - Session duration is seconds.
  - Rates (bounce, conversion, success) are percentages in [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal

MILLISECONDS_PER_HOUR = 3_600_000

EventType = Literal[
    "workflow_started",
    "workflow_completed",
    "workflow_failed",
    "workflow_cancelled",
]
ExecutionState = Literal["running", "completed", "failed", "cancelled", "waiting", "error"]
AlertType = Literal["success_rate_drop", "execution_time_increase", "failure_spike"]
Severity = Literal["low", "medium", "high", "critical"]
HealthTrend = Literal["improving", "declining", "stable"]
Direction = Literal["up", "down", "stable"]
KPIStatus = Literal["good", "warning", "critical"]
KPICategory = Literal["traffic", "engagement", "conversion", "automation", "business"]
Impact = Literal["high", "medium", "low"]
RecommendationCategory = Literal["traffic", "engagement", "conversion", "automation", "general"]
GoalStatus = Literal["on-track", "at-risk", "behind", "completed"]

EVENT_TYPES: tuple[str, ...] = (
    "workflow_started",
    "workflow_completed",
    "workflow_failed",
    "workflow_cancelled",
)
EXECUTION_STATES: tuple[str, ...] = ("running", "completed", "failed", "cancelled", "waiting", "error")


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range requested by the caller."""

    start: date
    end: date

    @property
    def days(self) -> int:
        """Number of calendar days covered, at least 1."""
        return max(1, (self.end - self.start).days + 1)


# ---------------------------------------------------------------------------
# Workflow automation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExecutionEvent:
    """One workflow run transition reported by the workflow platform.

    Attributes:
        id: Event identifier assigned by the platform.
        workflow_id: Workflow the execution belongs to.
        workflow_name: Human-readable workflow name.
        execution_id: Execution (run) identifier.
        event_type: Transition kind.
        status: Execution state at the time of the event.
        start_time: When the execution started.
        end_time: When the execution finished (None while running).
        duration_ms: Execution duration in milliseconds, when known.
        input_data: Free-form input payload.
        output_data: Free-form output payload.
        error_message: Failure description for failed executions.
        metadata: Free-form metadata (category, priority, tags).
        created_at: When the platform recorded the event.
    """

    id: str
    workflow_id: str
    workflow_name: str
    execution_id: str
    event_type: EventType
    status: ExecutionState
    start_time: datetime
    created_at: datetime
    end_time: datetime | None = None
    duration_ms: float | None = None
    input_data: dict[str, Any] = field(default_factory=dict)
    output_data: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkflowStatus:
    """Per-workflow operational status derived from its execution events.

    Invariant: successful_executions + failed_executions <= total_executions.
    """

    id: str
    name: str
    status: ExecutionState
    execution_id: str
    start_time: datetime
    end_time: datetime | None
    duration_ms: float | None
    total_executions: int
    successful_executions: int
    failed_executions: int
    success_rate: float
    average_execution_time_ms: float
    time_saved_ms: float
    last_run: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthlyExecutionTrend:
    """Execution counters bucketed by calendar month (``YYYY-MM``)."""

    month: str
    executions: int
    success_rate: float
    time_saved_ms: float


@dataclass(frozen=True)
class AutomationMetrics:
    """Integration-level automation bundle consumed by the scoring layer."""

    total_workflows: int
    active_workflows: int
    total_executions: int
    successful_executions: int
    failed_executions: int
    average_execution_time_ms: float
    total_time_saved_ms: float
    success_rate: float
    last_execution_at: datetime | None = None
    monthly_trends: tuple[MonthlyExecutionTrend, ...] = ()

    @property
    def total_time_saved_hours(self) -> float:
        """Total time saved expressed in hours."""
        return self.total_time_saved_ms / MILLISECONDS_PER_HOUR


@dataclass(frozen=True)
class ROIRecord:
    """Return on investment for one automated workflow."""

    workflow_id: str
    workflow_name: str
    time_saved_per_execution_ms: float
    total_executions: int
    total_time_saved_ms: float
    estimated_cost_savings: float
    automation_cost: float
    roi: float
    payback_period_months: float


@dataclass(frozen=True)
class PerformanceAlert:
    """A threshold breach for one workflow."""

    id: str
    workflow_id: str
    workflow_name: str
    alert_type: AlertType
    severity: Severity
    message: str
    threshold: float
    current_value: float
    triggered_at: datetime
    is_resolved: bool = False
    resolved_at: datetime | None = None


# ---------------------------------------------------------------------------
# Web analytics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DailyAnalytics:
    """One day of analytics samples."""

    date: date
    sessions: int
    users: int
    pageviews: int
    bounce_rate: float = 0.0
    session_duration: float = 0.0
    goal_completions: int = 0
    revenue: float = 0.0
    conversion_rate: float = 0.0


@dataclass(frozen=True)
class TrafficMetrics:
    sessions: int
    users: int
    pageviews: int


@dataclass(frozen=True)
class EngagementMetrics:
    bounce_rate: float
    session_duration: float
    pages_per_session: float


@dataclass(frozen=True)
class ConversionMetrics:
    conversion_rate: float
    goal_completions: int
    revenue: float


@dataclass(frozen=True)
class AnalyticsMetrics:
    """Analytics bundle for a date range: aggregates plus the daily series."""

    traffic: TrafficMetrics
    engagement: EngagementMetrics
    conversions: ConversionMetrics
    daily: tuple[DailyAnalytics, ...] = ()


# ---------------------------------------------------------------------------
# Overview artifacts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HealthScore:
    """Composite 0-100 business health score with category sub-scores."""

    overall: int
    traffic: int
    engagement: int
    conversion: int
    automation: int
    trend: HealthTrend
    recommendations: tuple[str, ...]
    last_updated: datetime


@dataclass(frozen=True)
class BusinessKPI:
    """A display-ready key performance indicator."""

    id: str
    name: str
    value: float
    unit: str
    change: float
    change_percent: float
    trend: Direction
    category: KPICategory
    status: KPIStatus
    target: float | None = None


@dataclass(frozen=True)
class BusinessTrend:
    """One day of the charting trend series."""

    date: date
    traffic: float
    engagement: float
    conversion: float
    automation: float
    overall_health: int


@dataclass(frozen=True)
class BusinessGoal:
    """A business goal supplied by the goal store (read-only)."""

    id: str
    name: str
    target: float
    current: float
    unit: str
    deadline: date
    progress: float
    status: GoalStatus


@dataclass(frozen=True)
class CustomMetric:
    """A user-defined metric supplied by the custom metric store (read-only)."""

    id: str
    name: str
    formula: str
    description: str
    category: str
    unit: str
    is_active: bool
    created_at: datetime
    last_calculated: datetime
    value: float | None = None


@dataclass(frozen=True)
class Recommendation:
    """A prioritized, human-readable action item."""

    id: str
    title: str
    description: str
    impact: Impact
    category: RecommendationCategory
    priority: int
    actionable: bool
    estimated_effort: str


@dataclass(frozen=True)
class OverviewFilters:
    """Caller-supplied options for assembling a business overview.

    Attributes:
        date_range: Reporting period.
        categories: KPI categories to keep (empty keeps all).
        include_custom_metrics: When False the custom metric list is empty.
        include_recommendations: When False the recommendation list is empty.
    """

    date_range: DateRange
    categories: tuple[str, ...] = ()
    include_custom_metrics: bool = True
    include_recommendations: bool = True


@dataclass(frozen=True)
class BusinessOverview:
    """Aggregate root returned to the presentation layer."""

    kpis: tuple[BusinessKPI, ...]
    health_score: HealthScore
    trends: tuple[BusinessTrend, ...]
    goals: tuple[BusinessGoal, ...]
    recommendations: tuple[Recommendation, ...]
    custom_metrics: tuple[CustomMetric, ...]
    last_updated: datetime
    date_range: DateRange


@dataclass(frozen=True)
class WorkflowExportBundle:
    """Everything known about an integration's automation, for reporting."""

    integration_id: str
    workflows: tuple[WorkflowStatus, ...]
    metrics: AutomationMetrics
    events: tuple[ExecutionEvent, ...]
    alerts: tuple[PerformanceAlert, ...]
    roi: tuple[ROIRecord, ...]
    exported_at: datetime
    date_range: DateRange | None = None
