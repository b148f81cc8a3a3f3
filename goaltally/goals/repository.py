"""Goals repository — per-user storage of week documents.

A week document is `{"id": <week key>, "goals": [<goal dict>, ...]}`. Goals
are kept as plain dicts so the stats aggregator can consume
`get_all_historical_goals()` directly.
"""

from __future__ import annotations

import abc
import copy
import logging
from typing import Any, Sequence

from sqlalchemy import bindparam, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession

from goaltally.weeks import generate_id

logger = logging.getLogger(__name__)


class GoalsRepositoryError(Exception):
    """Base class for repository lookups that fail."""


class WeekNotFoundError(GoalsRepositoryError):
    def __init__(self, week_id: str):
        super().__init__("Week not found")
        self.week_id = week_id


class GoalNotFoundError(GoalsRepositoryError):
    def __init__(self, goal_id: str):
        super().__init__(f"Goal with id {goal_id} not found")
        self.goal_id = goal_id


class GoalsRepository(abc.ABC):
    """Storage interface for one user's weekly goals."""

    @abc.abstractmethod
    async def get_weekly_goals(self, week_id: str) -> list[dict[str, Any]]:
        """Goals of a week; an unknown week has no goals."""

    @abc.abstractmethod
    async def add_goal(self, week_id: str, goal: dict[str, Any]) -> str:
        """Append a goal (creating the week if needed) and return its new id."""

    @abc.abstractmethod
    async def update_goal(self, week_id: str, goal: dict[str, Any]) -> None:
        """Replace the goal with the same id.

        Raises WeekNotFoundError or GoalNotFoundError.
        """

    @abc.abstractmethod
    async def delete_goal(self, week_id: str, goal_id: str) -> None:
        """Remove a goal; the week itself goes away once it is empty.

        Raises WeekNotFoundError or GoalNotFoundError.
        """

    @abc.abstractmethod
    async def get_available_weeks(self) -> list[str]:
        """Week ids, newest first."""

    @abc.abstractmethod
    async def get_all_historical_goals(self) -> list[dict[str, Any]]:
        """Every week document, oldest first."""


def _find_goal(goals: Sequence[dict[str, Any]], goal_id: str) -> int:
    for index, goal in enumerate(goals):
        if goal.get("id") == goal_id:
            return index
    raise GoalNotFoundError(goal_id)


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class InMemoryGoalsRepository(GoalsRepository):
    """Dict-backed repository for development and tests.

    `initial_data` maps week id -> {"goals": [...]}; it is copied, never
    shared with the caller.
    """

    def __init__(self, initial_data: dict[str, dict[str, Any]] | None = None):
        self.weeks: dict[str, dict[str, Any]] = copy.deepcopy(initial_data or {})

    async def get_weekly_goals(self, week_id: str) -> list[dict[str, Any]]:
        week = self.weeks.get(week_id)
        return copy.deepcopy(week["goals"]) if week else []

    async def add_goal(self, week_id: str, goal: dict[str, Any]) -> str:
        new_goal = {**copy.deepcopy(goal), "id": generate_id()}
        self.weeks.setdefault(week_id, {"goals": []})["goals"].append(new_goal)
        logger.info("Added goal %s to week %s", new_goal["id"], week_id)
        return new_goal["id"]

    async def update_goal(self, week_id: str, goal: dict[str, Any]) -> None:
        week = self.weeks.get(week_id)
        if week is None:
            raise WeekNotFoundError(week_id)
        index = _find_goal(week["goals"], goal["id"])
        week["goals"][index] = copy.deepcopy(goal)
        logger.info("Updated goal %s in week %s", goal["id"], week_id)

    async def delete_goal(self, week_id: str, goal_id: str) -> None:
        week = self.weeks.get(week_id)
        if week is None:
            raise WeekNotFoundError(week_id)
        index = _find_goal(week["goals"], goal_id)
        del week["goals"][index]
        if not week["goals"]:
            del self.weeks[week_id]
        logger.info("Deleted goal %s from week %s", goal_id, week_id)

    async def get_available_weeks(self) -> list[str]:
        return sorted(self.weeks, reverse=True)

    async def get_all_historical_goals(self) -> list[dict[str, Any]]:
        return [
            {"id": week_id, "goals": copy.deepcopy(self.weeks[week_id]["goals"])}
            for week_id in sorted(self.weeks)
        ]


# ---------------------------------------------------------------------------
# SQL implementation (goal_weeks table, see goaltally.db.SCHEMA_SQL)
# ---------------------------------------------------------------------------

_UPSERT_WEEK = text(
    "INSERT INTO goal_weeks (user_id, week_id, goals, updated_at) "
    "VALUES (:user_id, :week_id, :goals, now()) "
    "ON CONFLICT (user_id, week_id) "
    "DO UPDATE SET goals = EXCLUDED.goals, updated_at = now()"
).bindparams(bindparam("goals", type_=JSONB))


class SqlGoalsRepository(GoalsRepository):
    """Postgres-backed repository; each week is one row with a JSONB goals list."""

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id

    async def _fetch_week(self, week_id: str) -> list[dict[str, Any]] | None:
        result = await self.session.execute(
            text("SELECT goals FROM goal_weeks WHERE user_id = :user_id AND week_id = :week_id"),
            {"user_id": self.user_id, "week_id": week_id},
        )
        row = result.fetchone()
        if row is None:
            return None
        return list(row[0] or [])

    async def _save_week(self, week_id: str, goals: list[dict[str, Any]]) -> None:
        await self.session.execute(
            _UPSERT_WEEK,
            {"user_id": self.user_id, "week_id": week_id, "goals": goals},
        )
        await self.session.commit()

    async def get_weekly_goals(self, week_id: str) -> list[dict[str, Any]]:
        goals = await self._fetch_week(week_id)
        return goals or []

    async def add_goal(self, week_id: str, goal: dict[str, Any]) -> str:
        goals = await self._fetch_week(week_id) or []
        new_goal = {**goal, "id": generate_id()}
        await self._save_week(week_id, [*goals, new_goal])
        logger.info("Added goal %s to week %s for user %s", new_goal["id"], week_id, self.user_id)
        return new_goal["id"]

    async def update_goal(self, week_id: str, goal: dict[str, Any]) -> None:
        goals = await self._fetch_week(week_id)
        if goals is None:
            raise WeekNotFoundError(week_id)
        index = _find_goal(goals, goal["id"])
        goals[index] = goal
        await self._save_week(week_id, goals)
        logger.info("Updated goal %s in week %s for user %s", goal["id"], week_id, self.user_id)

    async def delete_goal(self, week_id: str, goal_id: str) -> None:
        goals = await self._fetch_week(week_id)
        if goals is None:
            raise WeekNotFoundError(week_id)
        index = _find_goal(goals, goal_id)
        del goals[index]
        if goals:
            await self._save_week(week_id, goals)
        else:
            await self.session.execute(
                text("DELETE FROM goal_weeks WHERE user_id = :user_id AND week_id = :week_id"),
                {"user_id": self.user_id, "week_id": week_id},
            )
            await self.session.commit()
        logger.info("Deleted goal %s from week %s for user %s", goal_id, week_id, self.user_id)

    async def get_available_weeks(self) -> list[str]:
        result = await self.session.execute(
            text("SELECT week_id FROM goal_weeks WHERE user_id = :user_id ORDER BY week_id DESC"),
            {"user_id": self.user_id},
        )
        return [row[0] for row in result.fetchall()]

    async def get_all_historical_goals(self) -> list[dict[str, Any]]:
        result = await self.session.execute(
            text("SELECT week_id, goals FROM goal_weeks WHERE user_id = :user_id ORDER BY week_id"),
            {"user_id": self.user_id},
        )
        return [{"id": week_id, "goals": list(goals or [])} for week_id, goals in result.fetchall()]


# ---------------------------------------------------------------------------
# Operations built on the interface
# ---------------------------------------------------------------------------

async def increment_goal(repo: GoalsRepository, week_id: str, goal_id: str) -> dict[str, Any]:
    """Add one to a goal's own count and return the stored goal."""
    goals = await repo.get_weekly_goals(week_id)
    if not goals:
        raise WeekNotFoundError(week_id)
    goal = goals[_find_goal(goals, goal_id)]
    updated = {**goal, "count": goal.get("count", 0) + 1}
    await repo.update_goal(week_id, updated)
    return updated


async def increment_subgoal(
    repo: GoalsRepository,
    week_id: str,
    goal_id: str,
    subgoal_id: str,
) -> dict[str, Any]:
    """Add one to a subgoal's count and return the parent goal."""
    goals = await repo.get_weekly_goals(week_id)
    if not goals:
        raise WeekNotFoundError(week_id)
    goal = goals[_find_goal(goals, goal_id)]
    subgoals = goal.get("subgoals") or []
    if not any(sub.get("id") == subgoal_id for sub in subgoals):
        raise GoalNotFoundError(subgoal_id)
    updated = {
        **goal,
        "subgoals": [
            {**sub, "count": sub.get("count", 0) + 1} if sub.get("id") == subgoal_id else sub
            for sub in subgoals
        ],
    }
    await repo.update_goal(week_id, updated)
    return updated


def suggest_goal_titles(weekly_goals: Sequence[dict[str, Any]], week_id: str) -> list[str]:
    """Titles tracked in other weeks that the given week does not have yet.

    Most recent weeks first; each title appears once.
    """
    current = next((w for w in weekly_goals if w["id"] == week_id), None)
    taken = {g["title"] for g in current["goals"]} if current else set()

    suggestions: dict[str, None] = {}
    for week in sorted(weekly_goals, key=lambda w: w["id"], reverse=True):
        if week["id"] == week_id:
            continue
        for goal in week["goals"]:
            if goal["title"] not in taken:
                suggestions.setdefault(goal["title"], None)
    return list(suggestions)
