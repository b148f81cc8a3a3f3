"""FastAPI dependencies shared by the goals and stats routers."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from goaltally.auth import current_user
from goaltally.config import settings
from goaltally.db import get_session
from goaltally.goals.repository import GoalsRepository, InMemoryGoalsRepository, SqlGoalsRepository

# Per-user stores for the "memory" backend; lost on restart.
_memory_repositories: dict[str, InMemoryGoalsRepository] = {}


async def get_goals_repository(
    user_id: str = Depends(current_user),
    session: AsyncSession = Depends(get_session),
) -> GoalsRepository:
    if settings.goals_backend == "memory":
        return _memory_repositories.setdefault(user_id, InMemoryGoalsRepository())
    return SqlGoalsRepository(session, user_id)
