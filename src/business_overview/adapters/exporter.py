"""Export adapters for overview and automation artifacts.

Exports are read-only projections: nothing here recomputes or mutates the
artifacts they serialize.

KPI CSV columns, in order:
    Metric, Value, Unit, Change, Change %, Status

One header row plus one row per KPI; every cell is quoted.
"""

from __future__ import annotations

import csv
import dataclasses
import io
import json
from datetime import date, datetime
from typing import Any

from business_overview.core.models import BusinessOverview, WorkflowExportBundle
from business_overview.observability import get_logger

logger = get_logger(__name__)

KPI_CSV_COLUMNS = ["Metric", "Value", "Unit", "Change", "Change %", "Status"]


def _format_number(value: float) -> str:
    """Whole numbers without a trailing ``.0``, everything else as repr."""
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def export_kpis_csv(overview: BusinessOverview) -> str:
    """Render the overview's KPI table as CSV.

    Args:
        overview: Assembled business overview.

    Returns:
        CSV text with a header row and one row per KPI.
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=KPI_CSV_COLUMNS,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    writer.writeheader()
    for kpi in overview.kpis:
        writer.writerow(
            {
                "Metric": kpi.name,
                "Value": _format_number(kpi.value),
                "Unit": kpi.unit,
                "Change": _format_number(kpi.change),
                "Change %": f"{_format_number(kpi.change_percent)}%",
                "Status": kpi.status,
            }
        )

    logger.debug("kpis_exported_csv", row_count=len(overview.kpis))
    return buffer.getvalue()


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def export_overview_json(overview: BusinessOverview, indent: int | None = 2) -> str:
    """Serialize the full overview as JSON with ISO 8601 dates."""
    return json.dumps(dataclasses.asdict(overview), default=_json_default, indent=indent)


def export_workflow_bundle_json(bundle: WorkflowExportBundle, indent: int | None = 2) -> str:
    """Serialize a workflow export bundle as JSON with ISO 8601 dates."""
    payload = dataclasses.asdict(bundle)
    # Derived hours are a property, not a field.
    payload["metrics"]["total_time_saved_hours"] = bundle.metrics.total_time_saved_hours
    return json.dumps(payload, default=_json_default, indent=indent)
