"""Business overview orchestration.

Fetches the upstream bundles concurrently, derives health, KPIs, trends and
recommendations from one snapshot, and assembles the overview aggregate.

Key invariants:
  - A collaborator that raises or returns no data counts as absent; the
    derivations fall back to neutral defaults and a warning is logged.
  - Derivations see a single immutable snapshot; nothing is mutated after fetch.
  - Any unexpected failure after the fan-out surfaces as one OverviewFetchError.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timedelta, timezone
from typing import Any

from business_overview.core.health_score import calculate_health_score
from business_overview.core.interfaces import (
    IAnalyticsProvider,
    ICustomMetricStore,
    IGoalStore,
    IWorkflowEventSource,
)
from business_overview.core.kpis import synthesize_kpis
from business_overview.core.models import (
    AnalyticsMetrics,
    AutomationMetrics,
    BusinessKPI,
    BusinessOverview,
    DateRange,
    HealthScore,
    OverviewFilters,
)
from business_overview.core.recommendations import generate_recommendations
from business_overview.core.trends import build_trend_series
from business_overview.core.workflow_aggregator import compute_execution_metrics
from business_overview.errors import OverviewFetchError
from business_overview.observability import get_logger
from business_overview.settings import Settings

logger = get_logger(__name__)


def previous_period(date_range: DateRange) -> DateRange:
    """The equal-length period immediately preceding ``date_range``."""
    end = date_range.start - timedelta(days=1)
    return DateRange(start=end - timedelta(days=date_range.days - 1), end=end)


def filter_kpis(kpis: list[BusinessKPI], categories: tuple[str, ...]) -> list[BusinessKPI]:
    """Keep KPIs whose category is listed; an empty selection keeps everything."""
    if not categories:
        return kpis
    return [kpi for kpi in kpis if kpi.category in categories]


class BusinessOverviewService:
    """Assembles the business overview from its collaborators.

    Args:
        analytics_provider: Web analytics source (None when not configured).
        event_source: Workflow execution event source (None when not configured).
        goal_store: Read-only business goal store.
        custom_metric_store: Read-only custom metric store.
        settings: Service configuration.
        clock: Returns the current time; stamped on every derived artifact.
    """

    def __init__(
        self,
        analytics_provider: IAnalyticsProvider | None,
        event_source: IWorkflowEventSource | None,
        goal_store: IGoalStore,
        custom_metric_store: ICustomMetricStore,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._analytics_provider = analytics_provider
        self._event_source = event_source
        self._goal_store = goal_store
        self._custom_metric_store = custom_metric_store
        self._settings = settings
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    async def get_business_overview(
        self,
        filters: OverviewFilters,
        integration_id: str | None = None,
    ) -> BusinessOverview:
        """Build the business overview for the requested period.

        Args:
            filters: Reporting period, KPI categories and include flags.
            integration_id: Workflow integration to report on (defaults to settings).

        Returns:
            A freshly assembled BusinessOverview.

        Raises:
            OverviewFetchError: If every upstream source is unavailable and the
                service is configured to fail, or if assembly fails unexpectedly.
        """
        integration_id = integration_id or self._settings.default_integration_id
        date_range = filters.date_range

        analytics, automation, previous_analytics = await self._fetch_bundles(date_range, integration_id)

        if analytics is None and automation is None:
            logger.warning("all_sources_unavailable", integration_id=integration_id)
            if self._settings.fail_on_all_sources_unavailable:
                raise OverviewFetchError("all upstream sources are unavailable")

        try:
            goals, custom_metrics = await asyncio.gather(
                self._goal_store.list_goals(),
                self._custom_metric_store.list_custom_metrics(),
            )
            now = self._clock()

            health = calculate_health_score(analytics, automation, now=now)
            previous_health: HealthScore | None = None
            if previous_analytics is not None:
                previous_health = calculate_health_score(previous_analytics, automation, now=now)

            kpis = synthesize_kpis(
                analytics,
                automation,
                health,
                previous_analytics=previous_analytics,
                previous_health=previous_health,
            )
            trends = build_trend_series(
                analytics,
                automation,
                as_of=date_range.end,
                days=self._settings.trend_lookback_days,
            )
            recommendations = (
                generate_recommendations(analytics, automation, health)
                if filters.include_recommendations
                else []
            )
        except OverviewFetchError:
            raise
        except Exception as exc:
            logger.error("overview_assembly_failed", error=str(exc))
            raise OverviewFetchError("overview assembly failed", cause=exc) from exc

        overview = BusinessOverview(
            kpis=tuple(filter_kpis(kpis, filters.categories)),
            health_score=health,
            trends=tuple(trends),
            goals=tuple(goals),
            recommendations=tuple(recommendations),
            custom_metrics=tuple(custom_metrics) if filters.include_custom_metrics else (),
            last_updated=now,
            date_range=date_range,
        )

        logger.info(
            "overview_assembled",
            integration_id=integration_id,
            kpi_count=len(overview.kpis),
            health_overall=health.overall,
            analytics_available=analytics is not None,
            automation_available=automation is not None,
        )
        return overview

    # ------------------------------------------------------------------
    # Collaborator fan-out
    # ------------------------------------------------------------------

    async def _fetch_bundles(
        self,
        date_range: DateRange,
        integration_id: str,
    ) -> tuple[AnalyticsMetrics | None, AutomationMetrics | None, AnalyticsMetrics | None]:
        """Fetch current analytics, automation and (optionally) previous analytics concurrently."""
        fetches: list[tuple[str, Awaitable[Any]]] = [
            ("analytics", self._fetch_analytics(date_range.start, date_range.end)),
            ("automation", self._fetch_automation(integration_id)),
        ]
        if self._settings.compare_previous_period:
            previous = previous_period(date_range)
            fetches.append(("previous_analytics", self._fetch_analytics(previous.start, previous.end)))

        results = await asyncio.gather(*(fetch for _, fetch in fetches), return_exceptions=True)

        bundles: dict[str, Any] = {}
        for (source, _), result in zip(fetches, results):
            if isinstance(result, BaseException):
                logger.warning("source_unavailable", source=source, error=str(result))
                bundles[source] = None
                continue
            if result is None:
                logger.warning("source_returned_no_data", source=source)
            bundles[source] = result

        return bundles["analytics"], bundles["automation"], bundles.get("previous_analytics")

    async def _fetch_analytics(self, start: date, end: date) -> AnalyticsMetrics | None:
        if self._analytics_provider is None:
            return None
        return await self._analytics_provider.get_metrics(start, end)

    async def _fetch_automation(self, integration_id: str) -> AutomationMetrics | None:
        if self._event_source is None:
            return None
        events = await self._event_source.list_events(integration_id)
        if not events:
            return None
        return compute_execution_metrics(events)
