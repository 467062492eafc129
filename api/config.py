"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from readiness.engine import DEFAULT_NEXT_STEP_URL, EngineConfig
from readiness.scoring.composite import THREE_FACTOR_WEIGHTS, TWO_FACTOR_WEIGHTS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Authentication (sent by callers in the x-key header)
    api_key: str

    # Website fetch
    fetch_timeout_seconds: float = 8.0
    fetch_user_agent: str = "Mozilla/5.0 GapScoreBot"

    # Scoring
    compliance_model: Literal["penalty", "ratio"] = "penalty"
    include_carbon: bool = True  # False selects the two-factor weighting
    next_step_url: str = DEFAULT_NEXT_STEP_URL

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.env == "test"

    def engine_config(self) -> EngineConfig:
        """Build the scoring engine configuration."""
        return EngineConfig(
            compliance_model=self.compliance_model,
            weights=THREE_FACTOR_WEIGHTS if self.include_carbon else TWO_FACTOR_WEIGHTS,
            next_step_url=self.next_step_url,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()  # type: ignore[call-arg]
    except Exception as e:
        if "validation" in type(e).__name__.lower() or "required" in str(e).lower():
            raise RuntimeError(
                "Missing required environment variables. Set API_KEY "
                "(the shared secret callers send in the x-key header)."
            ) from e
        raise
