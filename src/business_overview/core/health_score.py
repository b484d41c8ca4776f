"""Composite business health score.

Four category sub-scores (traffic, engagement, conversion, automation) are
assigned by banded rules over the raw upstream metrics. Bands are data: an
ordered tuple of ScoreBand evaluated top-down, first match wins, and the
floor score applies when nothing matches. A category whose source bundle is
absent scores NEUTRAL_SCORE.

    overall = round_half_up(mean(traffic, engagement, conversion, automation))
    trend   = improving if overall > 75, declining if overall < 50, else stable
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from business_overview.core.arithmetic import round_half_up
from business_overview.core.models import AnalyticsMetrics, AutomationMetrics, HealthScore, HealthTrend

NEUTRAL_SCORE = 50
FLOOR_SCORE = 40
RECOMMENDATION_FLOOR = 60
IMPROVING_ABOVE = 75
DECLINING_BELOW = 50


@dataclass(frozen=True)
class Condition:
    """``metrics[metric] <compare> threshold``."""

    metric: str
    compare: Callable[[float, float], bool]
    threshold: float

    def holds(self, metrics: Mapping[str, float]) -> bool:
        return self.compare(metrics[self.metric], self.threshold)


@dataclass(frozen=True)
class ScoreBand:
    """A score awarded when every condition holds."""

    score: int
    conditions: tuple[Condition, ...]

    def matches(self, metrics: Mapping[str, float]) -> bool:
        return all(condition.holds(metrics) for condition in self.conditions)


def above(metric: str, threshold: float) -> Condition:
    return Condition(metric, operator.gt, threshold)


def below(metric: str, threshold: float) -> Condition:
    return Condition(metric, operator.lt, threshold)


TRAFFIC_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(90, (above("sessions", 10_000),)),
    ScoreBand(75, (above("sessions", 5_000),)),
    ScoreBand(60, (above("sessions", 1_000),)),
)

# Top band requires low bounce AND long sessions (duration in seconds).
ENGAGEMENT_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(90, (below("bounce_rate", 30), above("session_duration", 180))),
    ScoreBand(75, (below("bounce_rate", 50), above("session_duration", 120))),
    ScoreBand(60, (below("bounce_rate", 70), above("session_duration", 60))),
)

CONVERSION_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(90, (above("conversion_rate", 5),)),
    ScoreBand(75, (above("conversion_rate", 3),)),
    ScoreBand(60, (above("conversion_rate", 1),)),
)

AUTOMATION_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(90, (above("success_rate", 95), above("time_saved_hours", 100))),
    ScoreBand(75, (above("success_rate", 90), above("time_saved_hours", 50))),
    ScoreBand(60, (above("success_rate", 80), above("time_saved_hours", 20))),
)

# Emitted in this order when the matching score is below RECOMMENDATION_FLOOR.
_OVERALL_TEXT = "Focus on improving core business metrics"
_CATEGORY_TEXTS: tuple[tuple[str, str], ...] = (
    ("traffic", "Increase marketing efforts and SEO optimization"),
    ("engagement", "Improve website user experience and content quality"),
    ("conversion", "Optimize conversion funnels and landing pages"),
    ("automation", "Review and fix automation workflows"),
)


def evaluate_bands(
    bands: tuple[ScoreBand, ...],
    metrics: Mapping[str, float],
    floor: int = FLOOR_SCORE,
) -> int:
    """Return the score of the first matching band, or the floor."""
    for band in bands:
        if band.matches(metrics):
            return band.score
    return floor


def traffic_score(analytics: AnalyticsMetrics | None) -> int:
    if analytics is None:
        return NEUTRAL_SCORE
    return evaluate_bands(TRAFFIC_BANDS, {"sessions": analytics.traffic.sessions})


def engagement_score(analytics: AnalyticsMetrics | None) -> int:
    if analytics is None:
        return NEUTRAL_SCORE
    return evaluate_bands(
        ENGAGEMENT_BANDS,
        {
            "bounce_rate": analytics.engagement.bounce_rate,
            "session_duration": analytics.engagement.session_duration,
        },
    )


def conversion_score(analytics: AnalyticsMetrics | None) -> int:
    if analytics is None:
        return NEUTRAL_SCORE
    return evaluate_bands(CONVERSION_BANDS, {"conversion_rate": analytics.conversions.conversion_rate})


def automation_score(automation: AutomationMetrics | None) -> int:
    if automation is None:
        return NEUTRAL_SCORE
    return evaluate_bands(
        AUTOMATION_BANDS,
        {
            "success_rate": automation.success_rate,
            "time_saved_hours": automation.total_time_saved_hours,
        },
    )


def classify_trend(overall: int) -> HealthTrend:
    """Map an overall score onto its trend label."""
    if overall > IMPROVING_ABOVE:
        return "improving"
    if overall < DECLINING_BELOW:
        return "declining"
    return "stable"


def health_recommendations(overall: int, sub_scores: Mapping[str, int]) -> tuple[str, ...]:
    """Fixed guidance texts for every score below the recommendation floor."""
    texts: list[str] = []
    if overall < RECOMMENDATION_FLOOR:
        texts.append(_OVERALL_TEXT)
    for category, text in _CATEGORY_TEXTS:
        if sub_scores[category] < RECOMMENDATION_FLOOR:
            texts.append(text)
    return tuple(texts)


def calculate_health_score(
    analytics: AnalyticsMetrics | None,
    automation: AutomationMetrics | None,
    now: datetime | None = None,
) -> HealthScore:
    """Compute the composite health score from the two upstream bundles.

    Args:
        analytics: Analytics bundle, or None when the provider was unavailable.
        automation: Automation bundle, or None when the platform was unavailable.
        now: Timestamp recorded as last_updated (defaults to current UTC time).

    Returns:
        HealthScore with integer scores in [0, 100].
    """
    sub_scores = {
        "traffic": traffic_score(analytics),
        "engagement": engagement_score(analytics),
        "conversion": conversion_score(analytics),
        "automation": automation_score(automation),
    }
    overall = round_half_up(sum(sub_scores.values()) / len(sub_scores))

    return HealthScore(
        overall=overall,
        traffic=sub_scores["traffic"],
        engagement=sub_scores["engagement"],
        conversion=sub_scores["conversion"],
        automation=sub_scores["automation"],
        trend=classify_trend(overall),
        recommendations=health_recommendations(overall, sub_scores),
        last_updated=now or datetime.now(tz=timezone.utc),
    )
