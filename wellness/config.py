"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Scoring constants stay in code; only operational knobs live here
"""

import os
from functools import lru_cache
from typing import Literal, cast
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class OrchestratorConfig(BaseModel):
    """Settings for gathering inputs and persisting daily scores."""

    history_days: int = Field(
        default=30, gt=0, description="How many past daily scores to load from the history store"
    )
    default_age: int = Field(
        default=30, gt=0, lt=150, description="Age used when the profile birth date is unusable"
    )
    metric_timeout_seconds: float = Field(
        default=5.0, gt=0.0, description="Timeout for a single health metric read"
    )
    collaborator_timeout_seconds: float = Field(
        default=15.0, gt=0.0, description="Timeout for identity, profile and history calls"
    )
    timezone: str | None = Field(
        default=None, description="IANA timezone deciding the calendar day; None uses host time"
    )

    @field_validator("timezone")
    def validate_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Environment"
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    orchestrator: OrchestratorConfig = Field(default_factory=OrchestratorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Literal["development", "staging", "production"]:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        v = val.strip().upper()
        return cast(
            Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO",
        )

    # Detect environment
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development"

    orchestrator_config = OrchestratorConfig(
        history_days=int(os.getenv("WELLNESS_HISTORY_DAYS", "30")),
        default_age=int(os.getenv("WELLNESS_DEFAULT_AGE", "30")),
        metric_timeout_seconds=float(os.getenv("WELLNESS_METRIC_TIMEOUT_SECONDS", "5.0")),
        collaborator_timeout_seconds=float(
            os.getenv("WELLNESS_COLLABORATOR_TIMEOUT_SECONDS", "15.0")
        ),
        timezone=os.getenv("WELLNESS_TIMEZONE") or None,
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
        format="console" if debug else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        orchestrator=orchestrator_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def validate_config() -> None:
    """Validate configuration at startup."""
    try:
        config = get_config()
        print(f"Configuration loaded for {config.environment} environment")
    except Exception as e:
        print(f"Configuration validation failed: {e}")
        raise


def print_config_summary() -> None:
    """Print configuration summary for debugging."""
    config = get_config()

    print("\nCONFIGURATION SUMMARY")
    print(f"Environment: {config.environment}")
    print(f"Debug Mode: {config.debug}")
    print(f"Log Level: {config.logging.level}")

    print("\nSCORING CONFIGURATION")
    print(f"History Window: {config.orchestrator.history_days} days")
    print(f"Default Age: {config.orchestrator.default_age}")
    print(f"Metric Timeout: {config.orchestrator.metric_timeout_seconds}s")
    print(f"Timezone: {config.orchestrator.timezone or 'host local time'}")


if __name__ == "__main__":
    validate_config()
    print_config_summary()
