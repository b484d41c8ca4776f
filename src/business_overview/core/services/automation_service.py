"""Automation reporting for one workflow integration.

Every call fetches the integration's execution events once and derives its
answer from that list; nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from business_overview.core.alerts import evaluate_alerts
from business_overview.core.interfaces import IWorkflowEventSource
from business_overview.core.models import (
    AutomationMetrics,
    DateRange,
    ExecutionEvent,
    PerformanceAlert,
    ROIRecord,
    WorkflowExportBundle,
    WorkflowStatus,
)
from business_overview.core.roi import calculate_roi
from business_overview.core.workflow_aggregator import aggregate_workflow_status, compute_execution_metrics
from business_overview.observability import get_logger
from business_overview.settings import Settings

logger = get_logger(__name__)


def events_in_range(events: list[ExecutionEvent], date_range: DateRange) -> list[ExecutionEvent]:
    """Keep events whose creation date falls inside the inclusive range."""
    return [event for event in events if date_range.start <= event.created_at.date() <= date_range.end]


class AutomationReportService:
    """Derives workflow status, metrics, ROI and alerts from execution events.

    Args:
        event_source: Workflow execution event source.
        settings: Service configuration (ROI constants).
        clock: Returns the current time; stamped on alerts and exports.
    """

    def __init__(
        self,
        event_source: IWorkflowEventSource,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._event_source = event_source
        self._settings = settings
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    async def _events(self, integration_id: str, date_range: DateRange | None = None) -> list[ExecutionEvent]:
        events = await self._event_source.list_events(integration_id)
        if date_range is not None:
            events = events_in_range(events, date_range)
        logger.debug("execution_events_loaded", integration_id=integration_id, count=len(events))
        return events

    async def list_workflows(self, integration_id: str) -> list[WorkflowStatus]:
        """Current status of every workflow in the integration."""
        events = await self._events(integration_id)
        return list(aggregate_workflow_status(events).values())

    async def get_metrics(self, integration_id: str) -> AutomationMetrics:
        """Integration-level automation metrics."""
        events = await self._events(integration_id)
        return compute_execution_metrics(events)

    async def calculate_roi(self, integration_id: str) -> list[ROIRecord]:
        """ROI record per workflow using the configured cost constants."""
        workflows = await self.list_workflows(integration_id)
        return calculate_roi(
            workflows,
            hourly_labor_cost=self._settings.hourly_labor_cost_usd,
            automation_cost=self._settings.monthly_automation_cost_usd,
        )

    async def get_alerts(self, integration_id: str) -> list[PerformanceAlert]:
        """Performance alerts for every workflow breaching a threshold."""
        workflows = await self.list_workflows(integration_id)
        alerts = evaluate_alerts(workflows, now=self._clock())
        if alerts:
            logger.info("performance_alerts_triggered", integration_id=integration_id, count=len(alerts))
        return alerts

    async def export_bundle(
        self,
        integration_id: str,
        date_range: DateRange | None = None,
    ) -> WorkflowExportBundle:
        """Gather workflows, metrics, events, alerts and ROI into one export bundle.

        Args:
            integration_id: Workflow integration to export.
            date_range: Optional inclusive range restricting events by creation date.

        Returns:
            WorkflowExportBundle derived from a single event fetch.
        """
        events = await self._events(integration_id, date_range)
        now = self._clock()
        workflows = list(aggregate_workflow_status(events).values())

        bundle = WorkflowExportBundle(
            integration_id=integration_id,
            workflows=tuple(workflows),
            metrics=compute_execution_metrics(events),
            events=tuple(events),
            alerts=tuple(evaluate_alerts(workflows, now=now)),
            roi=tuple(
                calculate_roi(
                    workflows,
                    hourly_labor_cost=self._settings.hourly_labor_cost_usd,
                    automation_cost=self._settings.monthly_automation_cost_usd,
                )
            ),
            exported_at=now,
            date_range=date_range,
        )
        logger.info(
            "workflow_bundle_exported",
            integration_id=integration_id,
            workflow_count=len(bundle.workflows),
            event_count=len(bundle.events),
        )
        return bundle
