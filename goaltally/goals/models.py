"""Goal documents as stored per week and accepted by the API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class Subgoal(BaseModel):
    id: str
    title: str
    count: int = Field(0, ge=0)


class Goal(BaseModel):
    id: str
    title: str
    count: int = Field(0, ge=0)
    # When non-empty, the subgoal counts replace `count` in statistics
    subgoals: list[Subgoal] | None = None


class NewGoal(BaseModel):
    title: str
    count: int = Field(0, ge=0)
    subgoals: list[Subgoal] | None = None

    @field_validator("title")
    @classmethod
    def _strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Goal title must not be empty")
        return value


class WeeklyRecord(BaseModel):
    """One week document: the week key and the goals recorded in it."""

    id: str  # ISO date of the week's Monday
    goals: list[Goal] = Field(default_factory=list)
