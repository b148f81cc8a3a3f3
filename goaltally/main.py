from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from goaltally.config import settings
from goaltally.db import create_schema
from goaltally.goals.router import router as goals_router
from goaltally.logging_config import configure_logging
from goaltally.stats.router import router as stats_router

configure_logging(Path(settings.log_path) if settings.log_path else None, settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.goals_backend == "sql":
        await create_schema()
    yield


app = FastAPI(title="GoalTally", version="0.1.0", lifespan=lifespan)
app.include_router(goals_router)
app.include_router(stats_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "goals": {
            "weeks": "/goals/weeks",
            "week": "/goals/weeks/{week_id}",
            "suggestions": "/goals/weeks/{week_id}/suggestions",
            "increment": "/goals/weeks/{week_id}/{goal_id}/increment",
        },
        "stats": {
            "summary": "/stats",
            "top_goals": "/stats/top-goals",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
