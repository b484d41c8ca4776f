"""Threshold-based performance alerts over aggregated workflow status.

Each rule checks one observed value per workflow against a breach threshold
and grades the breach by walking an ordered severity table (first match
wins, otherwise the rule's base severity applies). Alerts are recomputed on
every call and are never deduplicated or persisted.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from business_overview.core.models import AlertType, PerformanceAlert, Severity, WorkflowStatus
from business_overview.observability import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AlertRule:
    """A single alert rule.

    Attributes:
        alert_type: Alert category emitted when the rule breaches.
        id_suffix: Suffix used in the deterministic alert id.
        observe: Extracts the observed value from a WorkflowStatus.
        breached: Comparison of (observed, threshold) that signals a breach.
        threshold: Breach threshold.
        escalations: Ordered (limit, severity) pairs checked with ``breached``.
        base_severity: Severity when no escalation matches.
        describe: Formats the alert message from the observed value.
    """

    alert_type: AlertType
    id_suffix: str
    observe: Callable[[WorkflowStatus], float]
    breached: Callable[[float, float], bool]
    threshold: float
    escalations: tuple[tuple[float, Severity], ...]
    base_severity: Severity
    describe: Callable[[float], str]

    def grade(self, value: float) -> Severity:
        for limit, severity in self.escalations:
            if self.breached(value, limit):
                return severity
        return self.base_severity


ALERT_RULES: tuple[AlertRule, ...] = (
    AlertRule(
        alert_type="success_rate_drop",
        id_suffix="success-rate",
        observe=lambda wf: wf.success_rate,
        breached=operator.lt,
        threshold=90.0,
        escalations=((70.0, "critical"), (80.0, "high")),
        base_severity="medium",
        describe=lambda value: f"Success rate dropped to {value:.1f}%",
    ),
    AlertRule(
        alert_type="execution_time_increase",
        id_suffix="execution-time",
        observe=lambda wf: wf.average_execution_time_ms,
        breached=operator.gt,
        threshold=10_000.0,  # 10 seconds
        escalations=((30_000.0, "critical"),),
        base_severity="medium",
        describe=lambda value: f"Average execution time increased to {value / 1000:.1f}s",
    ),
    AlertRule(
        alert_type="failure_spike",
        id_suffix="failure-spike",
        observe=lambda wf: float(wf.failed_executions),
        breached=operator.gt,
        threshold=5.0,
        escalations=((10.0, "critical"),),
        base_severity="high",
        describe=lambda value: f"Failure count increased to {int(value)}",
    ),
)


def evaluate_alerts(
    workflows: Iterable[WorkflowStatus],
    now: datetime | None = None,
    rules: tuple[AlertRule, ...] = ALERT_RULES,
) -> list[PerformanceAlert]:
    """Apply every alert rule to every workflow.

    Args:
        workflows: Aggregated workflow statuses.
        now: Trigger timestamp stamped on every alert (defaults to current UTC time).
        rules: Alert rule table, evaluated in order per workflow.

    Returns:
        Alerts grouped by workflow, in rule order within each workflow.
    """
    triggered_at = now or datetime.now(tz=timezone.utc)
    alerts: list[PerformanceAlert] = []

    for workflow in workflows:
        for rule in rules:
            value = rule.observe(workflow)
            if not rule.breached(value, rule.threshold):
                continue

            severity = rule.grade(value)
            alerts.append(
                PerformanceAlert(
                    id=f"alert-{workflow.id}-{rule.id_suffix}",
                    workflow_id=workflow.id,
                    workflow_name=workflow.name,
                    alert_type=rule.alert_type,
                    severity=severity,
                    message=rule.describe(value),
                    threshold=rule.threshold,
                    current_value=value,
                    triggered_at=triggered_at,
                )
            )
            logger.debug(
                "performance_alert_triggered",
                workflow_id=workflow.id,
                alert_type=rule.alert_type,
                severity=severity,
                current_value=round(value, 3),
                threshold=rule.threshold,
            )

    return alerts
