"""API endpoint tests for the business overview service.

Services are replaced through FastAPI dependency overrides; collaborators
are AsyncMock doubles, so no upstream service is contacted.
"""

from collections.abc import Callable, Iterator
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from business_overview.api import router as router_module
from business_overview.core.models import AnalyticsMetrics, ExecutionEvent
from business_overview.core.services import AutomationReportService, BusinessOverviewService
from business_overview.errors import OverviewFetchError
from business_overview.main import app
from business_overview.settings import Settings


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def event_source(make_event: Callable[..., ExecutionEvent]) -> AsyncMock:
    source = AsyncMock()
    source.list_events = AsyncMock(
        return_value=[
            make_event(workflow_id="wf-1", status="completed", duration_ms=4_000),
            make_event(workflow_id="wf-2", status="failed", duration_ms=1_000),
        ]
    )
    return source


@pytest.fixture
def overview_service(
    make_analytics: Callable[..., AnalyticsMetrics],
    event_source: AsyncMock,
    settings: Settings,
    now: datetime,
) -> BusinessOverviewService:
    analytics_provider = AsyncMock()
    analytics_provider.get_metrics = AsyncMock(return_value=make_analytics(bounce_rate=75.0, conversion_rate=1.5))
    goal_store = AsyncMock()
    goal_store.list_goals = AsyncMock(return_value=[])
    custom_metric_store = AsyncMock()
    custom_metric_store.list_custom_metrics = AsyncMock(return_value=[])
    return BusinessOverviewService(
        analytics_provider=analytics_provider,
        event_source=event_source,
        goal_store=goal_store,
        custom_metric_store=custom_metric_store,
        settings=settings,
        clock=lambda: now,
    )


@pytest.fixture
def client(
    overview_service: BusinessOverviewService,
    event_source: AsyncMock,
    settings: Settings,
    now: datetime,
) -> Iterator[TestClient]:
    automation_service = AutomationReportService(event_source=event_source, settings=settings, clock=lambda: now)
    app.dependency_overrides[router_module._get_overview_service] = lambda: overview_service
    app.dependency_overrides[router_module._get_automation_service] = lambda: automation_service
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Overview endpoint tests
# ---------------------------------------------------------------------------


class TestOverviewEndpoints:
    """Tests for /api/v1/overview endpoints."""

    def test_get_overview(self, client: TestClient) -> None:
        response = client.get("/api/v1/overview", params={"start": "2026-02-01", "end": "2026-02-26"})

        assert response.status_code == 200
        body = response.json()
        assert body["date_range"] == {"start": "2026-02-01", "end": "2026-02-26"}
        assert body["kpis"][-1]["id"] == "kpi-business-health"
        assert len(body["trends"]) == 30
        assert [r["id"] for r in body["recommendations"]] == ["rec-1", "rec-4", "rec-2", "rec-3"]

    def test_category_filter(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/overview",
            params={"start": "2026-02-01", "end": "2026-02-26", "categories": ["automation"]},
        )

        assert response.status_code == 200
        assert {kpi["category"] for kpi in response.json()["kpis"]} == {"automation"}

    def test_start_after_end_is_rejected(self, client: TestClient) -> None:
        response = client.get("/api/v1/overview", params={"start": "2026-03-01", "end": "2026-02-01"})

        assert response.status_code == 422

    def test_fetch_error_maps_to_bad_gateway(self, client: TestClient) -> None:
        failing = AsyncMock()
        failing.get_business_overview = AsyncMock(side_effect=OverviewFetchError("boom"))
        app.dependency_overrides[router_module._get_overview_service] = lambda: failing

        response = client.get("/api/v1/overview")

        assert response.status_code == 502
        assert response.json()["detail"].startswith("Failed to fetch business overview")

    def test_export_csv(self, client: TestClient) -> None:
        response = client.get("/api/v1/overview/export", params={"start": "2026-02-01", "end": "2026-02-26"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().split("\n")
        assert lines[0] == '"Metric","Value","Unit","Change","Change %","Status"'
        assert len(lines) == 1 + 8

    def test_export_json(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/overview/export",
            params={"start": "2026-02-01", "end": "2026-02-26", "format": "json"},
        )

        assert response.status_code == 200
        assert response.json()["health_score"]["overall"] > 0


# ---------------------------------------------------------------------------
# Automation endpoint tests
# ---------------------------------------------------------------------------


class TestAutomationEndpoints:
    """Tests for /api/v1/automation endpoints."""

    def test_list_workflows(self, client: TestClient, event_source: AsyncMock) -> None:
        response = client.get("/api/v1/automation/acme/workflows")

        assert response.status_code == 200
        assert [w["id"] for w in response.json()] == ["wf-1", "wf-2"]
        event_source.list_events.assert_awaited_with("acme")

    def test_metrics_include_hours(self, client: TestClient) -> None:
        response = client.get("/api/v1/automation/acme/metrics")

        assert response.status_code == 200
        body = response.json()
        assert body["total_executions"] == 2
        assert body["success_rate"] == 50.0
        assert body["total_time_saved_hours"] == pytest.approx(4_000 / 3_600_000)

    def test_roi(self, client: TestClient) -> None:
        response = client.get("/api/v1/automation/acme/roi")

        assert response.status_code == 200
        assert {r["workflow_id"] for r in response.json()} == {"wf-1", "wf-2"}

    def test_alerts(self, client: TestClient) -> None:
        response = client.get("/api/v1/automation/acme/alerts")

        assert response.status_code == 200
        alerts = response.json()
        assert [(a["workflow_id"], a["alert_type"]) for a in alerts] == [("wf-2", "success_rate_drop")]

    def test_export_bundle(self, client: TestClient) -> None:
        response = client.get("/api/v1/automation/acme/export")

        assert response.status_code == 200
        body = response.json()
        assert body["integration_id"] == "acme"
        assert len(body["events"]) == 2
        assert body["date_range"] is None

    def test_validate_event(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/automation/events/validate",
            json={"ExecutionID": "42", "Status": "success", "Timestamp": "2026-02-01T10:00:00Z"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is True
        assert body["event"]["status"] == "completed"

    def test_validate_invalid_event(self, client: TestClient) -> None:
        response = client.post("/api/v1/automation/events/validate", json={"workflowId": "wf-1"})

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is False
        assert body["event"] is None
        assert "executionId is required" in body["errors"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
