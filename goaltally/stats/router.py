"""Stats HTTP router — aggregate statistics over a user's goal history."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from goaltally.auth import verify_api_key
from goaltally.config import settings
from goaltally.dependencies import get_goals_repository
from goaltally.goals.repository import GoalsRepository
from goaltally.stats import analytics
from goaltally.stats.models import GoalStatistics

router = APIRouter(prefix="/stats", tags=["stats"], dependencies=[Depends(verify_api_key)])


@router.get("", response_model=GoalStatistics, response_model_exclude_none=True)
async def get_stats(repo: GoalsRepository = Depends(get_goals_repository)) -> GoalStatistics:
    history = await repo.get_all_historical_goals()
    return GoalStatistics.model_validate(analytics.compute_statistics(history))


@router.get("/top-goals")
async def get_top_goals(
    repo: GoalsRepository = Depends(get_goals_repository),
    limit: int | None = Query(default=None, ge=1, description="Number of goals (default from settings)"),
) -> list[str]:
    """Goals to chart by default: the ones with the most total actions."""
    history = await repo.get_all_historical_goals()
    goal_stats = analytics.compute_statistics(history)["goal_stats"]
    return analytics.top_goals(goal_stats, limit or settings.stats_max_visible_goals)
