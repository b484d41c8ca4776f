"""Folds raw execution events into per-workflow status and integration metrics.

Key invariants:
  - Single pass, grouped by workflow_id; no event ordering is assumed.
  - last_run and the "current" fields come from the event with the newest
    created_at (max comparison, not stream order; ties keep the first seen).
  - successful counts status == completed, failed counts status == failed;
    running / waiting / cancelled / error count toward total only.
  - time_saved_ms sums every known duration; average_execution_time_ms
    divides it by total executions.
  - Empty input yields an empty map (or zeroed metrics), never an error.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from business_overview.core.arithmetic import safe_divide
from business_overview.core.models import (
    AutomationMetrics,
    ExecutionEvent,
    MonthlyExecutionTrend,
    WorkflowStatus,
)

_ACTIVE_STATES = frozenset({"running", "waiting"})


@dataclass
class _WorkflowAccumulator:
    """Mutable running totals for one workflow during the fold."""

    latest: ExecutionEvent
    total: int = 0
    successful: int = 0
    failed: int = 0
    time_saved_ms: float = 0.0

    def add(self, event: ExecutionEvent) -> None:
        self.total += 1
        if event.status == "completed":
            self.successful += 1
        elif event.status == "failed":
            self.failed += 1
        if event.duration_ms:
            self.time_saved_ms += event.duration_ms
        if event.created_at > self.latest.created_at:
            self.latest = event

    def to_status(self) -> WorkflowStatus:
        latest = self.latest
        return WorkflowStatus(
            id=latest.workflow_id,
            name=latest.workflow_name,
            status=latest.status,
            execution_id=latest.execution_id,
            start_time=latest.start_time,
            end_time=latest.end_time,
            duration_ms=latest.duration_ms,
            total_executions=self.total,
            successful_executions=self.successful,
            failed_executions=self.failed,
            success_rate=safe_divide(self.successful, self.total) * 100,
            average_execution_time_ms=safe_divide(self.time_saved_ms, self.total),
            time_saved_ms=self.time_saved_ms,
            last_run=latest.created_at,
            metadata=dict(latest.metadata),
        )


def aggregate_workflow_status(events: Iterable[ExecutionEvent]) -> dict[str, WorkflowStatus]:
    """Group execution events by workflow and derive each workflow's status.

    Args:
        events: Execution events for one integration, in any order.

    Returns:
        Mapping of workflow_id -> WorkflowStatus, in first-seen order.
    """
    groups: dict[str, _WorkflowAccumulator] = {}
    for event in events:
        accumulator = groups.get(event.workflow_id)
        if accumulator is None:
            accumulator = _WorkflowAccumulator(latest=event)
            groups[event.workflow_id] = accumulator
        accumulator.add(event)

    return {workflow_id: acc.to_status() for workflow_id, acc in groups.items()}


@dataclass
class _MonthAccumulator:
    executions: int = 0
    successful: int = 0
    time_saved_ms: float = 0.0


def compute_execution_metrics(events: Iterable[ExecutionEvent]) -> AutomationMetrics:
    """Build the integration-level automation bundle from raw events.

    Unlike the per-workflow fold, time saved and average execution time here
    only consider completed executions that carry a duration.

    Args:
        events: Execution events for one integration, in any order.

    Returns:
        AutomationMetrics with zeroed counters when no events are given.
    """
    events = list(events)
    statuses = aggregate_workflow_status(events)

    successful = 0
    failed = 0
    completed_durations: list[float] = []
    last_execution_at: datetime | None = None
    months: dict[str, _MonthAccumulator] = {}

    for event in events:
        month = months.setdefault(event.created_at.strftime("%Y-%m"), _MonthAccumulator())
        month.executions += 1

        if event.status == "completed":
            successful += 1
            month.successful += 1
            if event.duration_ms:
                completed_durations.append(event.duration_ms)
                month.time_saved_ms += event.duration_ms
        elif event.status == "failed":
            failed += 1

        if last_execution_at is None or event.created_at > last_execution_at:
            last_execution_at = event.created_at

    total_time_saved = sum(completed_durations)
    monthly_trends = tuple(
        MonthlyExecutionTrend(
            month=key,
            executions=bucket.executions,
            success_rate=safe_divide(bucket.successful, bucket.executions) * 100,
            time_saved_ms=bucket.time_saved_ms,
        )
        for key, bucket in sorted(months.items())
    )

    return AutomationMetrics(
        total_workflows=len(statuses),
        active_workflows=sum(1 for status in statuses.values() if status.status in _ACTIVE_STATES),
        total_executions=len(events),
        successful_executions=successful,
        failed_executions=failed,
        average_execution_time_ms=safe_divide(total_time_saved, len(completed_durations)),
        total_time_saved_ms=total_time_saved,
        success_rate=safe_divide(successful, len(events)) * 100,
        last_execution_at=last_execution_at,
        monthly_trends=monthly_trends,
    )
