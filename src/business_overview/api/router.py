"""FastAPI router for the business overview API.

All routes are thin: they validate inputs, call services, and return
Pydantic response models. No business logic belongs here.

Endpoints:
  GET    /api/v1/overview                                   Business overview for a period
  GET    /api/v1/overview/export                            KPI table as CSV (or full overview as JSON)
  GET    /api/v1/automation/{integration_id}/workflows      Per-workflow status
  GET    /api/v1/automation/{integration_id}/metrics        Integration-level automation metrics
  GET    /api/v1/automation/{integration_id}/roi            Per-workflow ROI
  GET    /api/v1/automation/{integration_id}/alerts         Performance alerts
  GET    /api/v1/automation/{integration_id}/export         Full automation export bundle
  POST   /api/v1/automation/events/validate                 Validate a raw execution event payload
"""

from datetime import date, timedelta
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from fastapi.responses import Response

from business_overview.adapters.analytics_client import AnalyticsClient
from business_overview.adapters.exporter import export_kpis_csv, export_overview_json
from business_overview.adapters.stores import InMemoryCustomMetricStore, InMemoryGoalStore
from business_overview.adapters.workflow_client import WorkflowEventClient
from business_overview.api.schemas import (
    AutomationMetricsResponse,
    BusinessOverviewResponse,
    EventValidationResponse,
    PerformanceAlertResponse,
    ROIRecordResponse,
    WorkflowExportResponse,
    WorkflowStatusResponse,
)
from business_overview.core.event_normalizer import validate_event_payload
from business_overview.core.models import BusinessOverview, DateRange, OverviewFilters
from business_overview.core.services import AutomationReportService, BusinessOverviewService
from business_overview.settings import Settings

router = APIRouter(tags=["business-overview"])
settings = Settings()

_goal_store = InMemoryGoalStore()
_custom_metric_store = InMemoryCustomMetricStore()


# ---------------------------------------------------------------------------
# Dependency factories
# ---------------------------------------------------------------------------


def _get_overview_service() -> BusinessOverviewService:
    """Build BusinessOverviewService with all required dependencies."""
    return BusinessOverviewService(
        analytics_provider=AnalyticsClient(settings) if settings.analytics_enabled else None,
        event_source=WorkflowEventClient(settings) if settings.workflow_enabled else None,
        goal_store=_goal_store,
        custom_metric_store=_custom_metric_store,
        settings=settings,
    )


def _get_automation_service() -> AutomationReportService:
    """Build AutomationReportService with all required dependencies."""
    return AutomationReportService(event_source=WorkflowEventClient(settings), settings=settings)


def _resolve_range(start: date | None, end: date | None) -> DateRange:
    """Default to the trailing lookback window ending today."""
    end = end or date.today()
    start = start or end - timedelta(days=settings.trend_lookback_days - 1)
    if start > end:
        raise HTTPException(status_code=422, detail="start must not be after end")
    return DateRange(start=start, end=end)


async def _load_overview(
    service: BusinessOverviewService,
    start: date | None,
    end: date | None,
    categories: list[str] | None,
    include_custom_metrics: bool,
    include_recommendations: bool,
    integration_id: str | None,
) -> BusinessOverview:
    filters = OverviewFilters(
        date_range=_resolve_range(start, end),
        categories=tuple(categories or ()),
        include_custom_metrics=include_custom_metrics,
        include_recommendations=include_recommendations,
    )
    return await service.get_business_overview(filters, integration_id=integration_id)


# ---------------------------------------------------------------------------
# Overview endpoints
# ---------------------------------------------------------------------------


@router.get("/overview", response_model=BusinessOverviewResponse, summary="Get business overview")
async def get_overview(
    start: Annotated[date | None, Query(description="First day of the period (defaults to lookback window)")] = None,
    end: Annotated[date | None, Query(description="Last day of the period (defaults to today)")] = None,
    categories: Annotated[list[str] | None, Query(description="KPI categories to include")] = None,
    include_custom_metrics: Annotated[bool, Query()] = True,
    include_recommendations: Annotated[bool, Query()] = True,
    integration_id: Annotated[str | None, Query(description="Workflow integration to report on")] = None,
    service: Annotated[BusinessOverviewService, Depends(_get_overview_service)] = ...,
) -> BusinessOverviewResponse:
    """Assemble KPIs, health score, trends, goals and recommendations for a period."""
    overview = await _load_overview(
        service, start, end, categories, include_custom_metrics, include_recommendations, integration_id
    )
    return BusinessOverviewResponse.model_validate(overview)


@router.get("/overview/export", summary="Export business overview")
async def export_overview(
    start: Annotated[date | None, Query()] = None,
    end: Annotated[date | None, Query()] = None,
    categories: Annotated[list[str] | None, Query()] = None,
    export_format: Annotated[Literal["csv", "json"], Query(alias="format")] = "csv",
    integration_id: Annotated[str | None, Query()] = None,
    service: Annotated[BusinessOverviewService, Depends(_get_overview_service)] = ...,
) -> Response:
    """Download the KPI table as CSV, or the whole overview as JSON."""
    overview = await _load_overview(service, start, end, categories, True, True, integration_id)
    stamp = overview.last_updated.date().isoformat()
    if export_format == "json":
        return Response(
            content=export_overview_json(overview),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="business-overview-{stamp}.json"'},
        )
    return Response(
        content=export_kpis_csv(overview),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="business-overview-{stamp}.csv"'},
    )


# ---------------------------------------------------------------------------
# Automation endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/automation/events/validate",
    response_model=EventValidationResponse,
    summary="Validate an execution event payload",
)
async def validate_event(payload: Annotated[dict[str, Any], Body()]) -> EventValidationResponse:
    """Validate and normalize a raw event without storing it."""
    return EventValidationResponse.model_validate(validate_event_payload(payload))


@router.get(
    "/automation/{integration_id}/workflows",
    response_model=list[WorkflowStatusResponse],
    summary="List workflow status",
)
async def list_workflows(
    integration_id: str,
    service: Annotated[AutomationReportService, Depends(_get_automation_service)] = ...,
) -> list[WorkflowStatusResponse]:
    workflows = await service.list_workflows(integration_id)
    return [WorkflowStatusResponse.model_validate(w) for w in workflows]


@router.get(
    "/automation/{integration_id}/metrics",
    response_model=AutomationMetricsResponse,
    summary="Get automation metrics",
)
async def get_automation_metrics(
    integration_id: str,
    service: Annotated[AutomationReportService, Depends(_get_automation_service)] = ...,
) -> AutomationMetricsResponse:
    return AutomationMetricsResponse.model_validate(await service.get_metrics(integration_id))


@router.get(
    "/automation/{integration_id}/roi",
    response_model=list[ROIRecordResponse],
    summary="Calculate workflow ROI",
)
async def get_workflow_roi(
    integration_id: str,
    service: Annotated[AutomationReportService, Depends(_get_automation_service)] = ...,
) -> list[ROIRecordResponse]:
    """ROI per workflow using the configured labor and automation costs."""
    records = await service.calculate_roi(integration_id)
    return [ROIRecordResponse.model_validate(r) for r in records]


@router.get(
    "/automation/{integration_id}/alerts",
    response_model=list[PerformanceAlertResponse],
    summary="Get performance alerts",
)
async def get_performance_alerts(
    integration_id: str,
    service: Annotated[AutomationReportService, Depends(_get_automation_service)] = ...,
) -> list[PerformanceAlertResponse]:
    alerts = await service.get_alerts(integration_id)
    return [PerformanceAlertResponse.model_validate(a) for a in alerts]


@router.get(
    "/automation/{integration_id}/export",
    response_model=WorkflowExportResponse,
    summary="Export automation data",
)
async def export_automation(
    integration_id: str,
    start: Annotated[date | None, Query(description="Only events created on or after this day")] = None,
    end: Annotated[date | None, Query(description="Only events created on or before this day")] = None,
    service: Annotated[AutomationReportService, Depends(_get_automation_service)] = ...,
) -> WorkflowExportResponse:
    """Workflows, metrics, raw events, alerts and ROI from a single event fetch."""
    date_range = _resolve_range(start, end) if start or end else None
    bundle = await service.export_bundle(integration_id, date_range=date_range)
    return WorkflowExportResponse.model_validate(bundle)
