"""HTTP client for the web analytics provider.

Fetches the daily report for a property and rolls it up into an analytics
bundle. The provider answers ``GET /properties/{property_id}/daily`` with:

    {"rows": [{"date": "2026-02-01", "sessions": 120, "users": 95,
               "pageviews": 310, "bounceRate": 42.5, "sessionDuration": 150.0,
               "goalCompletions": 4, "revenue": 180.0, "conversionRate": 4.2}, ...]}

Dates may also arrive in the compact ``YYYYMMDD`` form.
"""

from datetime import date, datetime
from typing import Any

import httpx

from business_overview.core.analytics import aggregate_daily_analytics
from business_overview.core.models import AnalyticsMetrics, DailyAnalytics
from business_overview.errors import CollaboratorUnavailableError
from business_overview.observability import get_logger
from business_overview.settings import Settings

logger = get_logger(__name__)


def _parse_date(value: str) -> date:
    if len(value) == 8 and value.isdigit():
        return datetime.strptime(value, "%Y%m%d").date()
    return date.fromisoformat(value[:10])


def parse_daily_row(row: dict[str, Any]) -> DailyAnalytics:
    """Convert one provider report row into a DailyAnalytics sample."""
    return DailyAnalytics(
        date=_parse_date(str(row["date"])),
        sessions=int(row.get("sessions") or 0),
        users=int(row.get("users") or 0),
        pageviews=int(row.get("pageviews") or 0),
        bounce_rate=float(row.get("bounceRate") or 0.0),
        session_duration=float(row.get("sessionDuration") or 0.0),
        goal_completions=int(row.get("goalCompletions") or 0),
        revenue=float(row.get("revenue") or 0.0),
        conversion_rate=float(row.get("conversionRate") or 0.0),
    )


class AnalyticsClient:
    """Async HTTP client for the analytics provider.

    Implements IAnalyticsProvider from core/interfaces.py.

    Args:
        settings: Service settings with the provider URL, property id and timeout.
        transport: Optional httpx transport, used to stub the provider in tests.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = settings.analytics_base_url.rstrip("/")
        self._property_id = settings.analytics_property_id
        self._timeout = settings.collaborator_timeout_seconds
        self._enabled = settings.analytics_enabled
        self._transport = transport

    async def get_daily_report(self, start: date, end: date) -> list[DailyAnalytics]:
        """Fetch the daily report rows for [start, end].

        Raises:
            CollaboratorUnavailableError: If the analytics integration is disabled.
            httpx.HTTPError: On HTTP or connection errors.
        """
        if not self._enabled:
            raise CollaboratorUnavailableError(
                "analytics", "integration is disabled (BUSINESS_OVERVIEW_ANALYTICS_ENABLED=false)"
            )

        url = f"{self._base_url}/properties/{self._property_id}/daily"
        params = {"startDate": start.isoformat(), "endDate": end.isoformat()}

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(url, params=params)
                response.raise_for_status()
                rows: list[dict[str, Any]] = response.json().get("rows", [])
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "analytics_http_error",
                    url=url,
                    status_code=exc.response.status_code,
                    response_text=exc.response.text[:500],
                )
                raise
            except httpx.RequestError as exc:
                logger.error("analytics_connection_error", url=url, error=str(exc))
                raise

        daily = [parse_daily_row(row) for row in rows]
        logger.debug("analytics_report_fetched", start=start.isoformat(), end=end.isoformat(), rows=len(daily))
        return daily

    async def get_metrics(self, start: date, end: date) -> AnalyticsMetrics | None:
        """Fetch and aggregate analytics for [start, end]; None when the report is empty."""
        return aggregate_daily_analytics(await self.get_daily_report(start, end))
