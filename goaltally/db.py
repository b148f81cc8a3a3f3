from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from goaltally.config import settings

_raw_url = settings.database_url

if _raw_url.startswith("postgres://"):
    _raw_url = _raw_url.replace("postgres://", "postgresql+asyncpg://", 1)
elif _raw_url.startswith("postgresql://"):
    _raw_url = _raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)

engine = create_async_engine(_raw_url, pool_pre_ping=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# One row per (user, week); goals are stored as the JSON list the API exposes.
SCHEMA_SQL = (
    "CREATE TABLE IF NOT EXISTS goal_weeks ("
    "user_id TEXT NOT NULL, "
    "week_id TEXT NOT NULL, "
    "goals JSONB NOT NULL DEFAULT '[]'::jsonb, "
    "updated_at TIMESTAMPTZ NOT NULL DEFAULT now(), "
    "PRIMARY KEY (user_id, week_id))"
)


async def create_schema(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.execute(text(SCHEMA_SQL))


async def get_session() -> AsyncSession:  # type: ignore[misc]
    async with async_session() as session:
        yield session
