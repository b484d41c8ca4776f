"""Tests for the analytics and workflow HTTP clients using httpx.MockTransport."""

from datetime import date
from typing import Any

import httpx
import pytest

from business_overview.adapters.analytics_client import AnalyticsClient, parse_daily_row
from business_overview.adapters.workflow_client import WorkflowEventClient
from business_overview.errors import CollaboratorUnavailableError
from business_overview.settings import Settings


def _event_payload(n: int) -> dict[str, Any]:
    return {
        "workflowId": "wf-1",
        "workflowName": "Lead Sync",
        "executionId": f"exec-{n}",
        "eventType": "workflow_completed",
        "status": "completed",
        "startTime": "2026-02-01T10:00:00Z",
        "endTime": "2026-02-01T10:00:05Z",
    }


class TestAnalyticsClient:
    """Tests for AnalyticsClient."""

    @pytest.mark.asyncio
    async def test_get_metrics_aggregates_daily_rows(self, settings: Settings) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "rows": [
                        {"date": "20260201", "sessions": 100, "users": 80, "pageviews": 250, "goalCompletions": 4},
                        {"date": "2026-02-02", "sessions": 300, "users": 120, "pageviews": 550, "goalCompletions": 6},
                    ]
                },
            )

        client = AnalyticsClient(settings, transport=httpx.MockTransport(handler))

        metrics = await client.get_metrics(date(2026, 2, 1), date(2026, 2, 2))

        assert metrics is not None
        assert metrics.traffic.sessions == 400
        assert metrics.conversions.conversion_rate == pytest.approx(5.0)
        assert seen[0].url.path == "/properties/prop-test/daily"
        assert seen[0].url.params["startDate"] == "2026-02-01"

    @pytest.mark.asyncio
    async def test_empty_report_is_absent(self, settings: Settings) -> None:
        client = AnalyticsClient(settings, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))

        assert await client.get_metrics(date(2026, 2, 1), date(2026, 2, 2)) is None

    @pytest.mark.asyncio
    async def test_http_errors_are_reraised(self, settings: Settings) -> None:
        client = AnalyticsClient(settings, transport=httpx.MockTransport(lambda r: httpx.Response(503)))

        with pytest.raises(httpx.HTTPStatusError):
            await client.get_metrics(date(2026, 2, 1), date(2026, 2, 2))

    @pytest.mark.asyncio
    async def test_disabled_client_raises(self, settings: Settings) -> None:
        client = AnalyticsClient(settings.model_copy(update={"analytics_enabled": False}))

        with pytest.raises(CollaboratorUnavailableError):
            await client.get_metrics(date(2026, 2, 1), date(2026, 2, 2))

    def test_parse_daily_row_defaults_missing_metrics(self) -> None:
        row = parse_daily_row({"date": "2026-02-03", "sessions": "12"})

        assert row.date == date(2026, 2, 3)
        assert row.sessions == 12
        assert row.bounce_rate == 0.0


class TestWorkflowEventClient:
    """Tests for WorkflowEventClient."""

    @pytest.mark.asyncio
    async def test_pages_until_short_page(self, settings: Settings) -> None:
        # page_size=2 in test settings; 5 events -> pages of 2, 2, 1
        events = [_event_payload(n) for n in range(5)]
        offsets: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            limit = int(request.url.params["limit"])
            offset = int(request.url.params["offset"])
            offsets.append(offset)
            return httpx.Response(200, json={"data": events[offset : offset + limit]})

        client = WorkflowEventClient(settings, transport=httpx.MockTransport(handler))

        parsed = await client.list_events("acme")

        assert offsets == [0, 2, 4]
        assert [event.execution_id for event in parsed] == [f"exec-{n}" for n in range(5)]
        assert parsed[0].duration_ms == 5_000.0

    @pytest.mark.asyncio
    async def test_stops_at_max_events(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            limit = int(request.url.params["limit"])
            offset = int(request.url.params["offset"])
            return httpx.Response(200, json=[_event_payload(offset + i) for i in range(limit)])

        client = WorkflowEventClient(
            settings.model_copy(update={"max_events": 5}),
            transport=httpx.MockTransport(handler),
        )

        payloads = await client.fetch_event_payloads("acme")

        assert len(payloads) == 5

    @pytest.mark.asyncio
    async def test_invalid_payloads_are_skipped(self, settings: Settings) -> None:
        body = [_event_payload(1), {"bogus": True}, _event_payload(2)]

        def handler(request: httpx.Request) -> httpx.Response:
            offset = int(request.url.params["offset"])
            return httpx.Response(200, json=body[offset : offset + int(request.url.params["limit"])])

        client = WorkflowEventClient(settings, transport=httpx.MockTransport(handler))

        parsed = await client.list_events("acme")

        assert [event.execution_id for event in parsed] == ["exec-1", "exec-2"]

    @pytest.mark.asyncio
    async def test_connection_errors_are_reraised(self, settings: Settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = WorkflowEventClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.ConnectError):
            await client.list_events("acme")

    @pytest.mark.asyncio
    async def test_null_data_is_an_empty_page(self, settings: Settings) -> None:
        client = WorkflowEventClient(
            settings, transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"data": None}))
        )

        assert await client.list_events("acme") == []
