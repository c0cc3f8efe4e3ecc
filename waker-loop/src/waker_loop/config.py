"""Runtime settings, read from WAKER_LOOP_* environment variables or a .env file."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """waker-loop configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WAKER_LOOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Executor
    wait_for_wakeups: bool = True

    # Timers
    timer_thread_prefix: str = "waker-loop-timer"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        """Accepts level names in any case."""
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
