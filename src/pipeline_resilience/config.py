"""
Configuration settings for the Pipeline Resilience Engine.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).

The decision engine itself never reads these settings directly: it receives
an immutable ResilienceSettings value built by Settings.resilience().
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL_FALLBACKS: dict[str, list[str]] = {
    "claude-sonnet-4-20250514": ["claude-3-5-sonnet-20241022", "gpt-4o"],
    "gpt-4o": ["gpt-4o-mini", "claude-sonnet-4-20250514"],
    "ollama/llama3.2": ["ollama/mistral", "gpt-4o-mini"],
}


class ResilienceSettings(BaseModel):
    """
    Immutable decision-engine configuration.

    Passed explicitly into DecisionEngine at construction so that no
    process-wide mutable state influences a decision.
    """
    model_config = ConfigDict(frozen=True)

    default_retries: int = Field(default=3, ge=1, description="Default max attempts per operation")
    default_retry_delay_ms: int = Field(default=15000, ge=0, description="Base delay when a classification has none")
    use_exponential_backoff: bool = Field(default=True, description="Disable to always wait the base delay")
    backoff_multiplier: float = Field(default=2.0, ge=1.0, description="Exponential growth factor per attempt")
    max_backoff_ms: int = Field(default=120000, ge=0, description="Ceiling applied after jitter")
    jitter_ratio: float = Field(default=0.1, ge=0.0, le=1.0, description="Symmetric jitter fraction (0.1 = ±10%)")
    max_fallback_depth: int = Field(default=3, ge=1, description="Hops inspected when checking chains for cycles")
    model_fallbacks: dict[str, tuple[str, ...]] = Field(
        default_factory=lambda: {k: tuple(v) for k, v in DEFAULT_MODEL_FALLBACKS.items()},
        description="Ordered fallback chain per model identifier",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Pipeline Resilience Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    DECISION_LOG_LEVEL: Optional[str] = None  # per-decision engine logs; defaults to LOG_LEVEL
    ENVIRONMENT: str = "development"

    # === Retry & Backoff ===
    DEFAULT_RETRIES: int = 3
    DEFAULT_RETRY_DELAY_MS: int = 15000  # 15 seconds for rate limit recovery
    USE_EXPONENTIAL_BACKOFF: bool = True
    BACKOFF_MULTIPLIER: float = 2.0
    MAX_BACKOFF_MS: int = 120000  # 2 minutes max
    JITTER_RATIO: float = 0.1  # ±10%

    # === Fallback Models ===
    # JSON mapping in env, e.g. MODEL_FALLBACKS='{"gpt-4o": ["gpt-4o-mini"]}'
    MODEL_FALLBACKS: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_MODEL_FALLBACKS.items()}
    )
    MAX_FALLBACK_DEPTH: int = 3

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.DEFAULT_RETRIES < 1:
            raise ValueError("DEFAULT_RETRIES must be >= 1")
        if self.DEFAULT_RETRY_DELAY_MS < 0 or self.MAX_BACKOFF_MS < 0:
            raise ValueError("retry delays must be >= 0")
        if self.BACKOFF_MULTIPLIER < 1.0:
            raise ValueError("BACKOFF_MULTIPLIER must be >= 1")
        if not 0.0 <= self.JITTER_RATIO <= 1.0:
            raise ValueError("JITTER_RATIO must be within [0, 1]")
        return self

    def resilience(self) -> ResilienceSettings:
        """Build the immutable engine configuration from these settings."""
        return ResilienceSettings(
            default_retries=self.DEFAULT_RETRIES,
            default_retry_delay_ms=self.DEFAULT_RETRY_DELAY_MS,
            use_exponential_backoff=self.USE_EXPONENTIAL_BACKOFF,
            backoff_multiplier=self.BACKOFF_MULTIPLIER,
            max_backoff_ms=self.MAX_BACKOFF_MS,
            jitter_ratio=self.JITTER_RATIO,
            max_fallback_depth=self.MAX_FALLBACK_DEPTH,
            model_fallbacks={k: tuple(v) for k, v in self.MODEL_FALLBACKS.items()},
        )
