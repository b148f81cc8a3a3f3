"""Statistics response contract — Pydantic v2 models.

Python attributes are snake_case; the wire format uses the camelCase names
the dashboard charts read (`goalStats`, `weeklyAverage`, ...).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoalStat(_WireModel):
    name: str
    total_count: int | float
    weekly_average: str | int
    best_week: int | float
    consistency: str  # e.g. "67%"


class MostConsistentGoal(_WireModel):
    """Same fields as GoalStat; only name/consistency exist when there are no goals."""

    name: str
    consistency: str
    total_count: int | float | None = None
    weekly_average: str | int | None = None
    best_week: int | float | None = None


class WeeklyTrendPoint(_WireModel):
    week: str
    goals: dict[str, int | float] = Field(default_factory=dict)


class CurrentWeekStats(_WireModel):
    total_actions: int | float = 0
    percent_from_average: int = 0


class SummaryStats(_WireModel):
    most_consistent_goal: MostConsistentGoal
    total_actions: int | float = 0
    current_week_stats: CurrentWeekStats = Field(default_factory=CurrentWeekStats)


class GoalStatistics(_WireModel):
    """Top-level stats response — always constructible from aggregator output."""

    goal_stats: list[GoalStat] = Field(default_factory=list)
    weekly_trends: list[WeeklyTrendPoint] = Field(default_factory=list)
    summary: SummaryStats
