from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/goaltally"
    default_tz: str = "UTC"  # Timezone used to resolve the current week key
    api_key: str | None = None

    # "sql" persists weeks in Postgres, "memory" keeps them in-process (dev only)
    goals_backend: str = "sql"

    # Number of goals selected by default on the stats chart
    stats_max_visible_goals: int = 3

    log_level: str = "INFO"
    log_path: str | None = None

    model_config = {"env_file": ".env", "env_prefix": "GOALTALLY_", "extra": "ignore"}


settings = Settings()
