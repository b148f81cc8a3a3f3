"""Shared fixtures for the test suite."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import Depends
from httpx import ASGITransport, AsyncClient

from goaltally.auth import current_user
from goaltally.dependencies import get_goals_repository
from goaltally.goals.repository import InMemoryGoalsRepository
from goaltally.main import app

USER_HEADERS = {"X-User-Id": "user-1"}


# ---------------------------------------------------------------------------
# Fake DB session (no real Postgres needed)
# ---------------------------------------------------------------------------

class FakeSession:
    """Minimal stand-in for AsyncSession used in SQL repository tests.

    Every execute() returns the configured rows; statements and params are
    recorded so tests can assert on writes.
    """

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self._rows = rows or []
        self.executed: list[tuple[str, dict[str, Any] | None]] = []
        self.commits = 0

    async def execute(self, stmt, params=None):
        self.executed.append((str(stmt), params))
        return FakeResult(self._rows)

    async def commit(self):
        self.commits += 1

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchall(self):
        return [tuple(r[k] for k in self._keys) for r in self._rows]

    def fetchone(self):
        rows = self.fetchall()
        return rows[0] if rows else None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def repo():
    """Empty in-memory repository (seed `repo.weeks` in tests if needed)."""
    return InMemoryGoalsRepository()


@pytest.fixture()
def override_repo(repo):
    """Override the repository dependency so no real DB is needed."""
    async def _override(_: str = Depends(current_user)):
        return repo

    app.dependency_overrides[get_goals_repository] = _override
    yield repo
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_repo):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_goal(
    title: str,
    count: int = 0,
    goal_id: str = "1",
    subgoals: list[tuple[str, int]] | None = None,
) -> dict[str, Any]:
    """Helper to build a goal dict as the repository stores it."""
    goal: dict[str, Any] = {"id": goal_id, "title": title, "count": count}
    if subgoals is not None:
        goal["subgoals"] = [
            {"id": f"{goal_id}-sub{i}", "title": sub_title, "count": sub_count}
            for i, (sub_title, sub_count) in enumerate(subgoals)
        ]
    return goal


def make_week(week_id: str, *goals: dict[str, Any]) -> dict[str, Any]:
    return {"id": week_id, "goals": list(goals)}
