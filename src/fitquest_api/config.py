"""Configuration settings for the FitQuest API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Workout generation
    DEFAULT_DURATION_MINUTES: int = 60
    MIN_EXERCISE_COUNT: int = 3

    # Progression
    XP_PER_WORKOUT: int = 50

    # HTTP
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            self.LOG_LEVEL = log_level
        else:
            self.LOG_LEVEL = "INFO"

        # Workout generation
        self.DEFAULT_DURATION_MINUTES = _int_env("DEFAULT_DURATION_MINUTES", 60)
        self.MIN_EXERCISE_COUNT = _int_env("MIN_EXERCISE_COUNT", 3)

        # Progression
        self.XP_PER_WORKOUT = _int_env("XP_PER_WORKOUT", 50)

        # HTTP
        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        self.CORS_ALLOW_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()] or ["*"]


settings = Settings()
