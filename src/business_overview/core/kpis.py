"""Projection of upstream bundles and the health score into display KPIs.

A KPI is emitted only when its source bundle is present; it is omitted, not
zero-filled, otherwise. The health-score KPI is always emitted.

Status is independent of trend: every KPI's status is graded from its
category's sub-score (the health KPI from the overall score) with the same
rule: good >= 75, warning > 50, else critical.

Change values compare against an optional previous-period bundle; without
one they are 0 and the trend is stable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from business_overview.core.analytics import compare
from business_overview.core.arithmetic import round_half_up
from business_overview.core.models import (
    AnalyticsMetrics,
    AutomationMetrics,
    BusinessKPI,
    HealthScore,
    KPICategory,
    KPIStatus,
)

GOOD_AT_OR_ABOVE = 75
WARNING_ABOVE = 50


@dataclass(frozen=True)
class KPIDefinition:
    """Catalogue entry describing how one KPI is read from its source bundle."""

    id: str
    name: str
    unit: str
    category: KPICategory
    source: str  # analytics | automation
    extract: Callable[[Any], float]
    target: float | None = None


KPI_CATALOGUE: tuple[KPIDefinition, ...] = (
    KPIDefinition(
        id="kpi-traffic-sessions",
        name="Total Sessions",
        unit="sessions",
        category="traffic",
        source="analytics",
        extract=lambda bundle: bundle.traffic.sessions,
    ),
    KPIDefinition(
        id="kpi-traffic-users",
        name="Unique Users",
        unit="users",
        category="traffic",
        source="analytics",
        extract=lambda bundle: bundle.traffic.users,
    ),
    KPIDefinition(
        id="kpi-engagement-bounce",
        name="Bounce Rate",
        unit="%",
        category="engagement",
        source="analytics",
        extract=lambda bundle: bundle.engagement.bounce_rate,
        target=30.0,
    ),
    KPIDefinition(
        id="kpi-engagement-duration",
        name="Session Duration",
        unit="minutes",
        category="engagement",
        source="analytics",
        extract=lambda bundle: round_half_up(bundle.engagement.session_duration / 60),
    ),
    KPIDefinition(
        id="kpi-conversion-rate",
        name="Conversion Rate",
        unit="%",
        category="conversion",
        source="analytics",
        extract=lambda bundle: bundle.conversions.conversion_rate,
        target=5.0,
    ),
    KPIDefinition(
        id="kpi-automation-success",
        name="Automation Success Rate",
        unit="%",
        category="automation",
        source="automation",
        extract=lambda bundle: bundle.success_rate,
    ),
    KPIDefinition(
        id="kpi-automation-time",
        name="Time Saved",
        unit="hours",
        category="automation",
        source="automation",
        extract=lambda bundle: round_half_up(bundle.total_time_saved_hours),
    ),
)


def classify_status(score: int) -> KPIStatus:
    """Grade a 0-100 score as good / warning / critical."""
    if score >= GOOD_AT_OR_ABOVE:
        return "good"
    if score > WARNING_ABOVE:
        return "warning"
    return "critical"


def _build_kpi(
    definition: KPIDefinition,
    bundle: Any,
    previous: Any | None,
    score: int,
) -> BusinessKPI:
    value = float(definition.extract(bundle))
    if previous is not None:
        comparison = compare(value, float(definition.extract(previous)))
        change, change_percent, trend = comparison.change, comparison.change_percent, comparison.trend
    else:
        change, change_percent, trend = 0.0, 0.0, "stable"

    return BusinessKPI(
        id=definition.id,
        name=definition.name,
        value=value,
        unit=definition.unit,
        change=change,
        change_percent=change_percent,
        trend=trend,
        category=definition.category,
        status=classify_status(score),
        target=definition.target,
    )


def synthesize_kpis(
    analytics: AnalyticsMetrics | None,
    automation: AutomationMetrics | None,
    health: HealthScore,
    previous_analytics: AnalyticsMetrics | None = None,
    previous_automation: AutomationMetrics | None = None,
    previous_health: HealthScore | None = None,
) -> list[BusinessKPI]:
    """Build the ordered KPI list for the overview.

    Args:
        analytics: Current-period analytics bundle (None when unavailable).
        automation: Automation bundle (None when unavailable).
        health: Already-computed health score.
        previous_analytics: Previous-period analytics bundle for change values.
        previous_automation: Previous-period automation bundle for change values.
        previous_health: Previous-period health score for the health KPI change.

    Returns:
        KPIs in catalogue order followed by the business health KPI.
    """
    bundles = {"analytics": analytics, "automation": automation}
    previous_bundles = {"analytics": previous_analytics, "automation": previous_automation}
    category_scores = {
        "traffic": health.traffic,
        "engagement": health.engagement,
        "conversion": health.conversion,
        "automation": health.automation,
    }

    kpis: list[BusinessKPI] = []
    for definition in KPI_CATALOGUE:
        bundle = bundles[definition.source]
        if bundle is None:
            continue
        kpis.append(
            _build_kpi(
                definition,
                bundle,
                previous_bundles[definition.source],
                category_scores[definition.category],
            )
        )

    previous_overall = previous_health.overall if previous_health else health.overall
    health_change = compare(float(health.overall), float(previous_overall))
    kpis.append(
        BusinessKPI(
            id="kpi-business-health",
            name="Business Health Score",
            value=float(health.overall),
            unit="/100",
            change=health_change.change,
            change_percent=health_change.change_percent,
            trend=health_change.trend,
            category="business",
            status=classify_status(health.overall),
        )
    )
    return kpis
