from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OPENING_HOURS_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Internal zone used when a service is built without an explicit timezone
    DEFAULT_TIMEZONE: str = "UTC"

    # Same-day intervals closer than this are merged into one
    ADJACENCY_TOLERANCE_MINUTES: int = 1

    # 60 minutes * 24 hours * 7 days
    MAX_WINDOW_MINUTES: int = 60 * 24 * 7

    # Observability Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "json" or "console"

    @field_validator("ADJACENCY_TOLERANCE_MINUTES")
    @classmethod
    def _non_negative_tolerance(cls, v: int) -> int:
        if v < 0:
            raise ValueError("ADJACENCY_TOLERANCE_MINUTES cannot be negative")
        return v


settings = Settings()  # type: ignore
