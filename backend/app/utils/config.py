"""
Configuration module for loading and validating environment variables.
"""

import logging
import os

from pydantic import BaseModel, Field

logger = logging.getLogger("squadstats.config")

STAT_CACHE_MODES = ("recompute", "increment", "off")
STAT_CACHE_BACKENDS = ("memory", "redis")


class Settings(BaseModel):
    """Application settings loaded from environment variables with defaults."""

    # Application Settings
    APP_NAME: str = "SquadStats API"
    APP_VERSION: str = "1.0.0"
    APP_DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")

    # Stat cache
    # recompute: overwrite cached records from a fresh aggregation pass
    # increment: add single deltas per recorded event (not idempotent)
    # off: never write cached records
    STAT_CACHE_MODE: str = Field(default="recompute")
    STAT_CACHE_BACKEND: str = Field(default="memory")
    STAT_CACHE_PREFIX: str = Field(default="squadstats")
    REDIS_URL: str = Field(default="")

    # Match rules
    LOCK_COMPLETED_MATCHES: bool = Field(default=True)
    RECENT_FORM_SIZE: int = Field(default=5)
    MATCH_DURATION_MINUTES: int = Field(default=90)

    # Record store seeding: "demo" or the path of a JSON export; empty disables it
    SEED_DATA: str = Field(default="")

    # Other settings
    LOG_LEVEL: str = Field(default="INFO")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "t")


# Create global settings object
settings = Settings(
    APP_DEBUG=_env_flag("APP_DEBUG", "False"),
    ENVIRONMENT=os.getenv("ENVIRONMENT", "development"),
    LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    STAT_CACHE_MODE=os.getenv("STAT_CACHE_MODE", "recompute").lower(),
    STAT_CACHE_BACKEND=os.getenv("STAT_CACHE_BACKEND", "memory").lower(),
    STAT_CACHE_PREFIX=os.getenv("STAT_CACHE_PREFIX", "squadstats"),
    REDIS_URL=os.getenv("REDIS_URL", ""),
    LOCK_COMPLETED_MATCHES=_env_flag("LOCK_COMPLETED_MATCHES", "True"),
    RECENT_FORM_SIZE=int(os.getenv("RECENT_FORM_SIZE", "5")),
    MATCH_DURATION_MINUTES=int(os.getenv("MATCH_DURATION_MINUTES", "90")),
    SEED_DATA=os.getenv("SEED_DATA", ""),
)


def verify_env_variables():
    """
    Verify that the environment describes a usable configuration.
    Returns False (after logging why) when something is missing or invalid.
    """
    problems = []

    if settings.STAT_CACHE_MODE not in STAT_CACHE_MODES:
        problems.append(f"STAT_CACHE_MODE must be one of {', '.join(STAT_CACHE_MODES)}")

    if settings.STAT_CACHE_BACKEND not in STAT_CACHE_BACKENDS:
        problems.append(f"STAT_CACHE_BACKEND must be one of {', '.join(STAT_CACHE_BACKENDS)}")

    if settings.STAT_CACHE_BACKEND == "redis" and not settings.REDIS_URL:
        problems.append("REDIS_URL is required when STAT_CACHE_BACKEND=redis")

    if settings.SEED_DATA and settings.SEED_DATA != "demo" and not os.path.isfile(settings.SEED_DATA):
        problems.append(f"SEED_DATA file not found: {settings.SEED_DATA}")

    if problems:
        for problem in problems:
            logger.warning(problem)
        return False

    return True
