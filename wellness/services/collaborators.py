"""
Collaborator contracts for the wellness score service.

Key patterns:
- Protocol-based dependency injection (no app-wide singletons)
- Generic Result type for expected failures
- A small exception hierarchy carrying user-facing messages
"""

import logging
from datetime import date
from typing import Generic, Protocol, TypeVar

import structlog

from wellness.config import LoggingConfig, get_config
from wellness.domain.models import HealthMetric, UserProfile, WellnessScoreComponents
from wellness.domain.records import WellnessScoreRow


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Configure structured logging for the whole package."""
    config = config or get_config().logging
    logging.basicConfig(level=config.level, format="%(message)s")

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()

logger = structlog.get_logger(__name__)


class WellnessError(Exception):
    """Base error for failures surfaced to the user."""

    user_message = "Something went wrong"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return f"{self.user_message}: {self.detail}" if self.detail else self.user_message


class NotSignedInError(WellnessError):
    """No signed-in user identity."""

    user_message = "Not signed in"


class ProfileNotFoundError(WellnessError):
    """Identity exists but there is no profile record for it."""

    user_message = "Profile not found"


class CollaboratorUnavailableError(WellnessError):
    """A network or storage collaborator failed or timed out."""

    user_message = "Calculation failed"

    def __init__(self, detail: str | None = None, user_message: str | None = None) -> None:
        if user_message is not None:
            self.user_message = user_message
        super().__init__(detail)


ValueT = TypeVar("ValueT")


class Result(Generic[ValueT]):
    """
    Explicit error handling without exceptions for expected failures.

    The service layer returns these instead of raising, so callers always
    get either a score or the error that was recorded on the service state.
    """

    def __init__(self, value: ValueT | None = None, error: Exception | None = None) -> None:
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if value is None and error is None:
            raise ValueError("Result must have either value or error")
        self._value: ValueT | None = value
        self._error: Exception | None = error

    @classmethod
    def ok(cls, value: ValueT) -> "Result[ValueT]":
        return cls(value=value)

    @classmethod
    def err(cls, error: Exception) -> "Result[ValueT]":
        return cls(error=error)

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    def unwrap(self) -> ValueT:
        if self._error:
            raise self._error
        return self._value  # type: ignore

    def unwrap_or(self, default: ValueT) -> ValueT:
        return self._value if self._error is None else default  # type: ignore

    def unwrap_err(self) -> Exception:
        if self._error is None:
            raise ValueError("Called unwrap_err() on an Ok value")
        return self._error


class IdentityProvider(Protocol):
    """Source of the currently signed-in user."""

    async def current_user_id(self) -> str | None:
        """Return the signed-in user id, or None when nobody is signed in."""
        ...


class ProfileProvider(Protocol):
    """Source of profile attributes (birth date, biological sex)."""

    async def fetch_profile(self, user_id: str) -> UserProfile | None:
        """Return the user's profile, or None when no record exists."""
        ...


class HealthProvider(Protocol):
    """
    Best currently known value for each health signal.

    Each read is independent and may return None when the signal is unknown.
    """

    async def latest_value(self, metric: HealthMetric) -> float | None:
        ...


class HistoryStore(Protocol):
    """Daily score history keyed by (user_id, calculation_date)."""

    async def fetch_recent(self, user_id: str, limit: int) -> list[WellnessScoreRow]:
        """
        Return up to ``limit`` stored rows, most recent calculation date first.

        Rows carry the ``calculation_date`` they were upserted under, which is
        what decides whether a day already has a score.
        """
        ...

    async def upsert(
        self, user_id: str, calculation_date: date, score: WellnessScoreComponents
    ) -> None:
        """Insert or replace the score stored for that user and day."""
        ...
