"""Pydantic response schemas for the business overview API.

Responses are built from the frozen domain records with
``model_validate(record)`` (``from_attributes``); handlers never return raw dicts.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


class DateRangeResponse(BaseModel):
    start: date
    end: date

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------


class HealthScoreResponse(BaseModel):
    """Composite health score with its four category sub-scores."""

    overall: int = Field(ge=0, le=100)
    traffic: int = Field(ge=0, le=100)
    engagement: int = Field(ge=0, le=100)
    conversion: int = Field(ge=0, le=100)
    automation: int = Field(ge=0, le=100)
    trend: str
    recommendations: list[str]
    last_updated: datetime

    model_config = {"from_attributes": True}


class BusinessKPIResponse(BaseModel):
    id: str
    name: str
    value: float
    unit: str
    change: float
    change_percent: float
    trend: str
    category: str
    status: str
    target: float | None

    model_config = {"from_attributes": True}


class BusinessTrendResponse(BaseModel):
    date: date
    traffic: float
    engagement: float
    conversion: float
    automation: float
    overall_health: int

    model_config = {"from_attributes": True}


class BusinessGoalResponse(BaseModel):
    id: str
    name: str
    target: float
    current: float
    unit: str
    deadline: date
    progress: float
    status: str

    model_config = {"from_attributes": True}


class CustomMetricResponse(BaseModel):
    id: str
    name: str
    formula: str
    description: str
    category: str
    unit: str
    is_active: bool
    created_at: datetime
    last_calculated: datetime
    value: float | None

    model_config = {"from_attributes": True}


class RecommendationResponse(BaseModel):
    id: str
    title: str
    description: str
    impact: str
    category: str
    priority: int
    actionable: bool
    estimated_effort: str

    model_config = {"from_attributes": True}


class BusinessOverviewResponse(BaseModel):
    """Full business overview for a reporting period."""

    kpis: list[BusinessKPIResponse]
    health_score: HealthScoreResponse
    trends: list[BusinessTrendResponse]
    goals: list[BusinessGoalResponse]
    recommendations: list[RecommendationResponse]
    custom_metrics: list[CustomMetricResponse]
    last_updated: datetime
    date_range: DateRangeResponse

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Automation
# ---------------------------------------------------------------------------


class ExecutionEventResponse(BaseModel):
    """A normalized workflow execution event."""

    id: str
    workflow_id: str
    workflow_name: str
    execution_id: str
    event_type: str
    status: str
    start_time: datetime
    end_time: datetime | None
    duration_ms: float | None
    input_data: dict[str, Any]
    output_data: dict[str, Any]
    error_message: str | None
    metadata: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}


class WorkflowStatusResponse(BaseModel):
    id: str
    name: str
    status: str
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
    metadata: dict[str, Any]

    model_config = {"from_attributes": True}


class MonthlyExecutionTrendResponse(BaseModel):
    month: str
    executions: int
    success_rate: float
    time_saved_ms: float

    model_config = {"from_attributes": True}


class AutomationMetricsResponse(BaseModel):
    """Integration-level automation metrics."""

    total_workflows: int
    active_workflows: int
    total_executions: int
    successful_executions: int
    failed_executions: int
    average_execution_time_ms: float
    total_time_saved_ms: float
    total_time_saved_hours: float
    success_rate: float
    last_execution_at: datetime | None
    monthly_trends: list[MonthlyExecutionTrendResponse]

    model_config = {"from_attributes": True}


class ROIRecordResponse(BaseModel):
    workflow_id: str
    workflow_name: str
    time_saved_per_execution_ms: float
    total_executions: int
    total_time_saved_ms: float
    estimated_cost_savings: float
    automation_cost: float
    roi: float
    payback_period_months: float

    model_config = {"from_attributes": True}


class PerformanceAlertResponse(BaseModel):
    id: str
    workflow_id: str
    workflow_name: str
    alert_type: str
    severity: str
    message: str
    threshold: float
    current_value: float
    triggered_at: datetime
    is_resolved: bool
    resolved_at: datetime | None

    model_config = {"from_attributes": True}


class WorkflowExportResponse(BaseModel):
    """Everything known about an integration's automation."""

    integration_id: str
    workflows: list[WorkflowStatusResponse]
    metrics: AutomationMetricsResponse
    events: list[ExecutionEventResponse]
    alerts: list[PerformanceAlertResponse]
    roi: list[ROIRecordResponse]
    exported_at: datetime
    date_range: DateRangeResponse | None

    model_config = {"from_attributes": True}


class EventValidationResponse(BaseModel):
    """Outcome of validating one raw execution event payload."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]
    event: ExecutionEventResponse | None

    model_config = {"from_attributes": True}
