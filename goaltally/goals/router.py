"""Goals HTTP router — weeks, goal CRUD and counters."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from goaltally.auth import verify_api_key
from goaltally.dependencies import get_goals_repository
from goaltally.goals.models import Goal, NewGoal, WeeklyRecord
from goaltally.goals.repository import (
    GoalsRepository,
    GoalsRepositoryError,
    increment_goal,
    increment_subgoal,
    suggest_goal_titles,
)
from goaltally.weeks import current_week_key, is_week_key

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(verify_api_key)])


def _parse_week(week_id: str) -> str:
    if not is_week_key(week_id):
        raise HTTPException(status_code=422, detail=f"Invalid week id: {week_id}")
    return week_id


def _not_found(exc: GoalsRepositoryError) -> HTTPException:
    logger.warning("Goal lookup failed: %s", exc)
    return HTTPException(status_code=404, detail=str(exc))


# ---------------------------------------------------------------------------
# /goals/weeks
# ---------------------------------------------------------------------------


@router.get("/weeks")
async def list_weeks(repo: GoalsRepository = Depends(get_goals_repository)) -> list[str]:
    """Weeks with goals, newest first; the current week is always offered."""
    weeks = await repo.get_available_weeks()
    current = current_week_key()
    if current not in weeks:
        weeks.insert(0, current)
    return weeks


@router.get("/history", response_model=list[WeeklyRecord], response_model_exclude_none=True)
async def get_history(repo: GoalsRepository = Depends(get_goals_repository)) -> list[dict]:
    """Every week with its goals, oldest first."""
    return await repo.get_all_historical_goals()


@router.get("/weeks/{week_id}", response_model=list[Goal], response_model_exclude_none=True)
async def get_week(
    week_id: str,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> list[dict]:
    return await repo.get_weekly_goals(_parse_week(week_id))


@router.get("/weeks/{week_id}/suggestions")
async def get_suggestions(
    week_id: str,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> list[str]:
    """Goal titles from earlier weeks that this week is not tracking yet."""
    history = await repo.get_all_historical_goals()
    return suggest_goal_titles(history, _parse_week(week_id))


@router.post("/weeks/{week_id}", status_code=status.HTTP_201_CREATED)
async def add_goal(
    week_id: str,
    goal: NewGoal,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> dict[str, str]:
    goal_id = await repo.add_goal(_parse_week(week_id), goal.model_dump(exclude_none=True))
    return {"id": goal_id}


@router.put("/weeks/{week_id}/{goal_id}", response_model=Goal, response_model_exclude_none=True)
async def update_goal(
    week_id: str,
    goal_id: str,
    goal: Goal,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> Goal:
    updated = goal.model_copy(update={"id": goal_id})
    try:
        await repo.update_goal(_parse_week(week_id), updated.model_dump(exclude_none=True))
    except GoalsRepositoryError as exc:
        raise _not_found(exc)
    return updated


@router.delete("/weeks/{week_id}/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    week_id: str,
    goal_id: str,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> Response:
    try:
        await repo.delete_goal(_parse_week(week_id), goal_id)
    except GoalsRepositoryError as exc:
        raise _not_found(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------


@router.post("/weeks/{week_id}/{goal_id}/increment", response_model=Goal, response_model_exclude_none=True)
async def increment(
    week_id: str,
    goal_id: str,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> dict:
    try:
        return await increment_goal(repo, _parse_week(week_id), goal_id)
    except GoalsRepositoryError as exc:
        raise _not_found(exc)


@router.post(
    "/weeks/{week_id}/{goal_id}/subgoals/{subgoal_id}/increment",
    response_model=Goal,
    response_model_exclude_none=True,
)
async def increment_sub(
    week_id: str,
    goal_id: str,
    subgoal_id: str,
    repo: GoalsRepository = Depends(get_goals_repository),
) -> dict:
    try:
        return await increment_subgoal(repo, _parse_week(week_id), goal_id, subgoal_id)
    except GoalsRepositoryError as exc:
        raise _not_found(exc)
