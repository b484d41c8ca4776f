"""In-memory goal and custom-metric stores.

Both stores are read-only from the engine's point of view; they are seeded
at construction and hand out copies of their contents.
"""

from collections.abc import Iterable

from business_overview.core.models import BusinessGoal, CustomMetric


class InMemoryGoalStore:
    """Implements IGoalStore over a fixed list of goals."""

    def __init__(self, goals: Iterable[BusinessGoal] = ()) -> None:
        self._goals = list(goals)

    async def list_goals(self) -> list[BusinessGoal]:
        return list(self._goals)


class InMemoryCustomMetricStore:
    """Implements ICustomMetricStore over a fixed list of metrics."""

    def __init__(self, metrics: Iterable[CustomMetric] = ()) -> None:
        self._metrics = list(metrics)

    async def list_custom_metrics(self) -> list[CustomMetric]:
        return list(self._metrics)
