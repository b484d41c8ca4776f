"""Tests for overview and automation export adapters."""

import csv
import io
import json
from collections.abc import Callable
from datetime import date, datetime

from business_overview.adapters.exporter import (
    KPI_CSV_COLUMNS,
    export_kpis_csv,
    export_overview_json,
    export_workflow_bundle_json,
)
from business_overview.core.health_score import calculate_health_score
from business_overview.core.kpis import synthesize_kpis
from business_overview.core.models import (
    AnalyticsMetrics,
    AutomationMetrics,
    BusinessOverview,
    DateRange,
    ExecutionEvent,
    WorkflowExportBundle,
)
from business_overview.core.workflow_aggregator import aggregate_workflow_status, compute_execution_metrics


def _overview(
    analytics: AnalyticsMetrics | None,
    automation: AutomationMetrics | None,
    now: datetime,
) -> BusinessOverview:
    health = calculate_health_score(analytics, automation, now=now)
    return BusinessOverview(
        kpis=tuple(synthesize_kpis(analytics, automation, health)),
        health_score=health,
        trends=(),
        goals=(),
        recommendations=(),
        custom_metrics=(),
        last_updated=now,
        date_range=DateRange(start=date(2026, 2, 1), end=date(2026, 2, 26)),
    )


class TestExportKPIsCSV:
    """Tests for export_kpis_csv()."""

    def test_one_row_per_kpi_plus_header(
        self,
        make_analytics: Callable[..., AnalyticsMetrics],
        make_automation: Callable[..., AutomationMetrics],
        now: datetime,
    ) -> None:
        overview = _overview(make_analytics(), make_automation(), now)

        rows = list(csv.reader(io.StringIO(export_kpis_csv(overview))))

        assert rows[0] == KPI_CSV_COLUMNS
        assert len(rows) == len(overview.kpis) + 1

    def test_every_cell_is_quoted(self, now: datetime) -> None:
        text = export_kpis_csv(_overview(None, None, now))

        lines = text.strip().split("\n")
        assert lines[0] == '"Metric","Value","Unit","Change","Change %","Status"'
        assert lines[1] == '"Business Health Score","50","/100","0","0%","critical"'

    def test_fractional_values_are_kept(
        self, make_analytics: Callable[..., AnalyticsMetrics], now: datetime
    ) -> None:
        overview = _overview(make_analytics(bounce_rate=42.5), None, now)

        rows = {row["Metric"]: row for row in csv.DictReader(io.StringIO(export_kpis_csv(overview)))}

        assert rows["Bounce Rate"]["Value"] == "42.5"
        assert rows["Bounce Rate"]["Unit"] == "%"

    def test_export_does_not_change_overview(self, now: datetime) -> None:
        overview = _overview(None, None, now)
        before = overview.kpis

        export_kpis_csv(overview)

        assert overview.kpis == before


class TestJSONExports:
    """Tests for the JSON export helpers."""

    def test_overview_json_uses_iso_dates(self, now: datetime) -> None:
        payload = json.loads(export_overview_json(_overview(None, None, now)))

        assert payload["date_range"] == {"start": "2026-02-01", "end": "2026-02-26"}
        assert payload["last_updated"] == now.isoformat()
        assert payload["health_score"]["overall"] == 50

    def test_workflow_bundle_json_includes_hours(
        self, make_event: Callable[..., ExecutionEvent], now: datetime
    ) -> None:
        events = [make_event(duration_ms=3_600_000.0)]
        bundle = WorkflowExportBundle(
            integration_id="acme",
            workflows=tuple(aggregate_workflow_status(events).values()),
            metrics=compute_execution_metrics(events),
            events=tuple(events),
            alerts=(),
            roi=(),
            exported_at=now,
        )

        payload = json.loads(export_workflow_bundle_json(bundle))

        assert payload["integration_id"] == "acme"
        assert payload["metrics"]["total_time_saved_hours"] == 1.0
        assert len(payload["events"]) == 1
        assert payload["date_range"] is None
