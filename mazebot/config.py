"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        env_prefix="MAZEBOT_",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Maze Robot"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./mazebot.db"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:8080,http://127.0.0.1:5500"

    # Rate limiting
    rate_limit_requests: int = 100  # requests per minute for general endpoints
    rate_limit_solves: int = 10  # full solves per minute

    # Maze library
    mazes_dir: Path = BASE_DIR / "mazes"

    # Traversal
    tick_interval_seconds: float = 1.0  # console animation pacing
    max_active_runs: int = 50
    max_solve_ticks: int = 100_000

    @field_validator("tick_interval_seconds")
    @classmethod
    def validate_tick_interval(cls, v: float) -> float:
        """Reject negative pacing intervals."""
        if v < 0:
            raise ValueError("TICK_INTERVAL_SECONDS must not be negative")
        return v

    @field_validator("max_active_runs", "max_solve_ticks")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Run limits must be at least 1")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
