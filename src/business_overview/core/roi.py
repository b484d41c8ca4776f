"""Return-on-investment calculation for automated workflows.

Formula:
    hours_saved       = time_saved_ms / 3_600_000
    cost_savings      = hours_saved * hourly_labor_cost
    roi_pct           = (cost_savings - automation_cost) / automation_cost * 100
    payback_months    = automation_cost / (cost_savings / 12)

Guards:
    roi_pct is 0 when cost_savings <= 0 or automation_cost <= 0.
    payback_months is 0 when cost_savings <= 0.
"""

from collections.abc import Iterable

from business_overview.core.arithmetic import safe_divide
from business_overview.core.models import MILLISECONDS_PER_HOUR, ROIRecord, WorkflowStatus

DEFAULT_HOURLY_LABOR_COST_USD = 50.0
DEFAULT_MONTHLY_AUTOMATION_COST_USD = 100.0


def compute_roi_pct(cost_savings: float, automation_cost: float) -> float:
    """ROI percentage of a workflow's cost savings over its automation cost."""
    if cost_savings <= 0 or automation_cost <= 0:
        return 0.0
    return (cost_savings - automation_cost) / automation_cost * 100


def compute_payback_period(cost_savings: float, automation_cost: float) -> float:
    """Months until cumulative savings cover the automation cost.

    Returns:
        Payback period in months, or 0.0 when the workflow saves nothing.
    """
    if cost_savings <= 0:
        return 0.0
    return safe_divide(automation_cost, cost_savings / 12)


def calculate_workflow_roi(
    workflow: WorkflowStatus,
    hourly_labor_cost: float = DEFAULT_HOURLY_LABOR_COST_USD,
    automation_cost: float = DEFAULT_MONTHLY_AUTOMATION_COST_USD,
) -> ROIRecord:
    """Derive the ROI record for a single workflow.

    Args:
        workflow: Aggregated workflow status.
        hourly_labor_cost: Cost of one hour of the manual work being replaced.
        automation_cost: Fixed monthly cost of running the workflow.

    Returns:
        ROIRecord with finite savings, ROI and payback values.
    """
    hours_saved = workflow.time_saved_ms / MILLISECONDS_PER_HOUR
    cost_savings = hours_saved * hourly_labor_cost

    return ROIRecord(
        workflow_id=workflow.id,
        workflow_name=workflow.name,
        time_saved_per_execution_ms=workflow.average_execution_time_ms,
        total_executions=workflow.total_executions,
        total_time_saved_ms=workflow.time_saved_ms,
        estimated_cost_savings=cost_savings,
        automation_cost=automation_cost,
        roi=compute_roi_pct(cost_savings, automation_cost),
        payback_period_months=compute_payback_period(cost_savings, automation_cost),
    )


def calculate_roi(
    workflows: Iterable[WorkflowStatus],
    hourly_labor_cost: float = DEFAULT_HOURLY_LABOR_COST_USD,
    automation_cost: float = DEFAULT_MONTHLY_AUTOMATION_COST_USD,
) -> list[ROIRecord]:
    """Derive one ROI record per workflow, preserving input order."""
    return [
        calculate_workflow_roi(workflow, hourly_labor_cost, automation_cost)
        for workflow in workflows
    ]
