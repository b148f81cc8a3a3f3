"""Goal statistics — pure stateless aggregation over weekly goal records.

Input is the plain shape the goals repository returns:

    [{"id": "2024-01-01", "goals": [{"id": ..., "title": ..., "count": ..., "subgoals": [...]}]}]

ordered oldest-to-newest. Goals are matched across weeks by title. Nothing
here validates, sorts or mutates its input; every call builds fresh output.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Sequence

logger = logging.getLogger(__name__)

Week = Mapping[str, Any]
GoalEntry = Mapping[str, Any]


def _round_half_up(value: float, places: int = 0) -> Decimal:
    """Round the exact value of `value` half away from zero."""
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_one_decimal(value: float) -> str:
    return str(_round_half_up(value, 1))


def format_percent(ratio: float) -> str:
    """Whole-number percentage string, e.g. 0.5 -> "50%"."""
    return f"{_round_half_up(ratio * 100)}%"


def _percent_value(consistency: str) -> int:
    return int(consistency.rstrip("%"))


def effective_count(goal: GoalEntry) -> Any:
    """Subgoal total when the goal has subgoals, its own count otherwise."""
    subgoals = goal.get("subgoals")
    if subgoals:
        return sum(sub["count"] for sub in subgoals)
    return goal["count"]


def collect_goal_titles(weekly_goals: Sequence[Week]) -> list[str]:
    """Unique goal titles across all weeks, first-seen order."""
    titles: dict[str, None] = {}
    for week in weekly_goals:
        for goal in week["goals"]:
            titles.setdefault(goal["title"], None)
    return list(titles)


# ---------------------------------------------------------------------------
# Per-goal statistics
# ---------------------------------------------------------------------------

def calculate_goal_stats(goal_title: str, weekly_goals: Sequence[Week]) -> dict[str, Any]:
    """Totals, average, best week and consistency for one goal title.

    Weeks where the goal is missing count towards the denominator of the
    average and consistency but contribute nothing else.
    """
    total_count = 0
    best_week = 0
    active_weeks = 0
    total_weeks = len(weekly_goals)

    for week in weekly_goals:
        goal = next((g for g in week["goals"] if g["title"] == goal_title), None)
        if goal is None:
            continue
        count = effective_count(goal)
        total_count += count
        best_week = max(best_week, count)
        if count > 0:
            active_weeks += 1

    return {
        "name": goal_title,
        "total_count": total_count,
        "weekly_average": format_one_decimal(total_count / total_weeks) if total_weeks > 0 else 0,
        "best_week": best_week,
        "consistency": format_percent(active_weeks / total_weeks) if total_weeks > 0 else "0%",
    }


# ---------------------------------------------------------------------------
# Trend series
# ---------------------------------------------------------------------------

def calculate_weekly_trends(weekly_goals: Sequence[Week]) -> list[dict[str, Any]]:
    """One point per week; goals not tracked that week are left out, not zeroed."""
    return [
        {
            "week": week["id"],
            "goals": {goal["title"]: effective_count(goal) for goal in week["goals"]},
        }
        for week in weekly_goals
    ]


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def _empty_summary() -> dict[str, Any]:
    return {
        "most_consistent_goal": {"name": "", "consistency": "0%"},
        "total_actions": 0,
        "current_week_stats": {"total_actions": 0, "percent_from_average": 0},
    }


def calculate_summary_stats(
    goal_stats: Sequence[Mapping[str, Any]],
    weekly_trends: Sequence[Mapping[str, Any]],
) -> dict[str, Any]:
    """Roll goal stats and trends up into the summary block.

    The current week is the last trend point. Ties on consistency keep the
    goal seen first.
    """
    if not goal_stats:
        return _empty_summary()

    most_consistent = goal_stats[0]
    for stat in goal_stats[1:]:
        if _percent_value(stat["consistency"]) > _percent_value(most_consistent["consistency"]):
            most_consistent = stat

    total_actions = sum(stat["total_count"] for stat in goal_stats)

    current_week_actions = 0
    if weekly_trends:
        current_week_actions = sum(count or 0 for count in weekly_trends[-1]["goals"].values())

    average_actions = total_actions / len(weekly_trends) if weekly_trends else 0
    percent_from_average = 0
    if average_actions > 0:
        percent_from_average = int(
            _round_half_up((current_week_actions - average_actions) / average_actions * 100)
        )

    return {
        "most_consistent_goal": dict(most_consistent),
        "total_actions": total_actions,
        "current_week_stats": {
            "total_actions": current_week_actions,
            "percent_from_average": percent_from_average,
        },
    }


def compute_statistics(weekly_goals: Sequence[Week]) -> dict[str, Any]:
    """Derive goal stats, weekly trends and the summary from weekly records."""
    goal_stats = [calculate_goal_stats(title, weekly_goals) for title in collect_goal_titles(weekly_goals)]
    weekly_trends = calculate_weekly_trends(weekly_goals)
    logger.debug("Computed stats for %d goal(s) over %d week(s)", len(goal_stats), len(weekly_trends))
    return {
        "goal_stats": goal_stats,
        "weekly_trends": weekly_trends,
        "summary": calculate_summary_stats(goal_stats, weekly_trends),
    }


def top_goals(goal_stats: Sequence[Mapping[str, Any]], limit: int = 3) -> list[str]:
    """Names of the goals with the highest total count, best first."""
    ranked = sorted(goal_stats, key=lambda stat: stat["total_count"], reverse=True)
    return [stat["name"] for stat in ranked[:limit]]
