"""Rule-based generation of prioritized recommendations.

Every rule is an independent predicate over one immutable snapshot of the
upstream bundles and the health score. Rules never see each other's output.
The accumulated list is sorted by impact (high > medium > low) and then by
ascending priority; the sort is stable, so rules with equal keys keep their
table order.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from business_overview.core.models import (
    AnalyticsMetrics,
    AutomationMetrics,
    HealthScore,
    Recommendation,
)

IMPACT_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}


@dataclass(frozen=True)
class RecommendationSnapshot:
    """Inputs visible to every rule."""

    analytics: AnalyticsMetrics | None
    automation: AutomationMetrics | None
    health: HealthScore


@dataclass(frozen=True)
class RecommendationRule:
    """Emits ``recommendation`` when ``applies`` holds for the snapshot."""

    applies: Callable[[RecommendationSnapshot], bool]
    recommendation: Recommendation


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        applies=lambda s: s.analytics is not None and s.analytics.engagement.bounce_rate > 70,
        recommendation=Recommendation(
            id="rec-1",
            title="Reduce Bounce Rate",
            description=(
                "Your bounce rate is high. Consider improving page load speed, "
                "content quality, and user experience."
            ),
            impact="high",
            category="engagement",
            priority=1,
            actionable=True,
            estimated_effort="2-3 weeks",
        ),
    ),
    RecommendationRule(
        applies=lambda s: s.analytics is not None and s.analytics.conversions.conversion_rate < 2,
        recommendation=Recommendation(
            id="rec-2",
            title="Improve Conversion Rate",
            description=(
                "Low conversion rate suggests issues with call-to-action placement "
                "or landing page optimization."
            ),
            impact="high",
            category="conversion",
            priority=2,
            actionable=True,
            estimated_effort="3-4 weeks",
        ),
    ),
    RecommendationRule(
        applies=lambda s: s.automation is not None and s.automation.success_rate < 90,
        recommendation=Recommendation(
            id="rec-3",
            title="Fix Automation Failures",
            description=(
                "Automation success rate is below optimal. Review failed workflows "
                "and implement error handling."
            ),
            impact="medium",
            category="automation",
            priority=3,
            actionable=True,
            estimated_effort="1-2 weeks",
        ),
    ),
    RecommendationRule(
        applies=lambda s: s.health.overall < 60,
        recommendation=Recommendation(
            id="rec-4",
            title="Overall Business Health",
            description=(
                "Business health score indicates areas need attention. "
                "Focus on improving weakest metrics first."
            ),
            impact="high",
            category="general",
            priority=1,
            actionable=True,
            estimated_effort="4-6 weeks",
        ),
    ),
)


def sort_recommendations(recommendations: list[Recommendation]) -> list[Recommendation]:
    """Order by impact descending, then priority ascending."""
    return sorted(
        recommendations,
        key=lambda rec: (-IMPACT_RANK.get(rec.impact, 0), rec.priority),
    )


def generate_recommendations(
    analytics: AnalyticsMetrics | None,
    automation: AutomationMetrics | None,
    health: HealthScore,
    rules: tuple[RecommendationRule, ...] = RECOMMENDATION_RULES,
) -> list[Recommendation]:
    """Evaluate every rule against the same snapshot and sort the results."""
    snapshot = RecommendationSnapshot(analytics=analytics, automation=automation, health=health)
    fired = [rule.recommendation for rule in rules if rule.applies(snapshot)]
    return sort_recommendations(fired)
