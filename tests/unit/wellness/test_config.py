"""
Tests for configuration management in `wellness/config.py`.

Covers:
- Environment parsing and debug defaults
- Logging level coercion to the expected Literal
- Orchestrator knobs read from WELLNESS_* variables
- Timezone validation and the fixed consistency window
- get_config cache behavior
- AppConfig validation (debug only allowed in development)
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from wellness.config import (
    AppConfig,
    LoggingConfig,
    OrchestratorConfig,
    get_config,
    load_config_from_env,
)
from wellness.services.calculator import CONSISTENCY_DAYS

WELLNESS_VARS = (
    "WELLNESS_HISTORY_DAYS",
    "WELLNESS_DEFAULT_AGE",
    "WELLNESS_METRIC_TIMEOUT_SECONDS",
    "WELLNESS_COLLABORATOR_TIMEOUT_SECONDS",
    "WELLNESS_TIMEZONE",
)


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    """Ensure get_config cache is cleared before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove any scoring overrides a local .env may have set."""
    for name in WELLNESS_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return monkeypatch


def test_load_config_dev_defaults(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ENVIRONMENT", "development")

    config = load_config_from_env()

    assert config.environment == "development"
    assert config.debug is True
    assert config.logging.format == "console"
    assert config.logging.level == "INFO"
    assert config.orchestrator == OrchestratorConfig()


def test_orchestrator_defaults() -> None:
    config = OrchestratorConfig()

    assert config.history_days == 30
    assert config.default_age == 30
    assert config.metric_timeout_seconds == 5.0
    assert config.collaborator_timeout_seconds == 15.0
    assert config.timezone is None


def test_production_uses_json_logs(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ENVIRONMENT", "prod")

    config = load_config_from_env()

    assert config.environment == "production"
    assert config.debug is False
    assert config.logging.format == "json"


def test_staging_aliases(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ENVIRONMENT", " Stage ")
    assert load_config_from_env().environment == "staging"


def test_orchestrator_env_overrides(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ENVIRONMENT", "production")
    clean_env.setenv("WELLNESS_HISTORY_DAYS", "14")
    clean_env.setenv("WELLNESS_DEFAULT_AGE", "45")
    clean_env.setenv("WELLNESS_METRIC_TIMEOUT_SECONDS", "2.5")
    clean_env.setenv("WELLNESS_COLLABORATOR_TIMEOUT_SECONDS", "8")
    clean_env.setenv("WELLNESS_TIMEZONE", "Europe/Berlin")

    orchestrator = load_config_from_env().orchestrator

    assert orchestrator.history_days == 14
    assert orchestrator.default_age == 45
    assert orchestrator.metric_timeout_seconds == 2.5
    assert orchestrator.collaborator_timeout_seconds == 8.0
    assert orchestrator.timezone == "Europe/Berlin"


def test_blank_timezone_means_host_time(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("WELLNESS_TIMEZONE", "")
    assert load_config_from_env().orchestrator.timezone is None


def test_logging_level_literal_coercion(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ENVIRONMENT", "staging")

    # Unknown level should coerce to INFO
    clean_env.setenv("LOG_LEVEL", "unknown")
    config = load_config_from_env()
    assert config.logging.level == "INFO"

    # Known level should pass through
    clean_env.setenv("LOG_LEVEL", "error")
    config = load_config_from_env()
    assert config.logging.level == "ERROR"


def test_unknown_timezone_rejected() -> None:
    with pytest.raises(ValidationError, match="Unknown timezone"):
        OrchestratorConfig(timezone="Mars/Olympus_Mons")


def test_consistency_window_is_not_configurable() -> None:
    assert "consistency_window" not in OrchestratorConfig.model_fields
    assert CONSISTENCY_DAYS == 7


@pytest.mark.parametrize(
    "field,value",
    [
        ("history_days", 0),
        ("default_age", 0),
        ("default_age", 150),
        ("metric_timeout_seconds", 0.0),
        ("collaborator_timeout_seconds", -1.0),
    ],
)
def test_orchestrator_bounds(field: str, value: float) -> None:
    with pytest.raises(ValidationError):
        OrchestratorConfig(**{field: value})


def test_non_numeric_env_value_fails_fast(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("WELLNESS_HISTORY_DAYS", "a month")
    with pytest.raises(ValueError):
        load_config_from_env()


def test_get_config_cache(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ENVIRONMENT", "development")

    # First call populates cache
    c1 = get_config()
    c2 = get_config()
    assert c1 is c2  # same object due to lru_cache


def test_app_config_debug_only_in_dev_validation() -> None:
    with pytest.raises(ValueError, match="debug mode is only allowed"):
        AppConfig(
            environment="production",
            debug=True,
            orchestrator=OrchestratorConfig(),
            logging=LoggingConfig(),
        )
