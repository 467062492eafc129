"""FastAPI dependencies for dependency injection."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from api.config import Settings, get_settings
from readiness.crawler.fetcher import PageFetcher
from readiness.engine import ReadinessEngine

__all__ = ["SettingsDep", "EngineDep", "get_engine"]


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache
def get_engine() -> ReadinessEngine:
    """Build the scoring engine once per process from settings."""
    settings = get_settings()
    fetcher = PageFetcher(
        user_agent=settings.fetch_user_agent,
        timeout=settings.fetch_timeout_seconds,
    )
    return ReadinessEngine(config=settings.engine_config(), fetcher=fetcher)


EngineDep = Annotated[ReadinessEngine, Depends(get_engine)]
