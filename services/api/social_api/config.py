"""
Configuration management using Pydantic BaseSettings.
All values can be overridden via environment variables or a .env file.
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database (PostgreSQL in production, SQLite for local runs/tests) ────
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/postgres"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # ── Feed ───────────────────────────────────────────────────────────────
    feed_page_size: int = 20             # most recent posts per refresh
    feed_placeholder_count: int = 3      # skeleton blocks while loading
    suggested_users_limit: int = 5

    # ── HTTP ───────────────────────────────────────────────────────────────
    cors_origins: list[str] = ["*"]

    # ── Observability ──────────────────────────────────────────────────────
    otel_enabled: bool = False
    otel_exporter_otlp_endpoint: str = "http://jaeger:4317"
    service_name: str = "social-api"
    environment: str = "development"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
