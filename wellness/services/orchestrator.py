"""
Score orchestration: gather inputs, calculate, persist, expose state.

Pipeline for one daily score:
1. Resolve the signed-in user and their profile
2. Read every health signal concurrently (a slow or failing read becomes "absent")
3. Feed the last week of totals into the calculator
4. Upsert the result on (user, today) and publish it as the current score

Collaborator failures never escape this layer. They are recorded on
``error_message`` and the previously published score stays in place.
"""

import asyncio
from collections.abc import Awaitable, Sequence
from datetime import UTC, date, datetime, tzinfo
from typing import TypeVar
from zoneinfo import ZoneInfo

import structlog

from wellness.config import OrchestratorConfig, get_config
from wellness.domain.models import (
    HealthMetric,
    MetricSnapshot,
    UserProfile,
    WellnessScoreComponents,
)
from wellness.domain.records import WellnessScoreRow
from wellness.services.calculator import CONSISTENCY_DAYS, Clock, WellnessScoreCalculator
from wellness.services.collaborators import (
    CollaboratorUnavailableError,
    HealthProvider,
    HistoryStore,
    IdentityProvider,
    NotSignedInError,
    ProfileNotFoundError,
    ProfileProvider,
    Result,
    WellnessError,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Snapshot field fed by each health signal
SNAPSHOT_FIELDS: dict[HealthMetric, str] = {
    HealthMetric.VO2_MAX: "vo2_max",
    HealthMetric.RESTING_HEART_RATE: "resting_heart_rate",
    HealthMetric.BLOOD_OXYGEN_PERCENT: "blood_oxygen_percent",
    HealthMetric.TOTAL_SLEEP_HOURS: "total_sleep_hours",
    HealthMetric.DEEP_SLEEP_HOURS: "deep_sleep_hours",
    HealthMetric.REM_SLEEP_HOURS: "rem_sleep_hours",
    HealthMetric.SLEEP_AWAKENINGS: "sleep_awakenings",
    HealthMetric.MINUTES_AWAKE_DURING_SLEEP: "minutes_awake_during_sleep",
    HealthMetric.STEP_COUNT: "steps",
    HealthMetric.EXERCISE_MINUTES: "active_minutes",
    HealthMetric.WORKOUT_MINUTES: "workout_minutes",
    HealthMetric.HEART_RATE_VARIABILITY: "heart_rate_variability",
}

INTEGER_METRICS = frozenset(
    {
        HealthMetric.SLEEP_AWAKENINGS,
        HealthMetric.STEP_COUNT,
        HealthMetric.EXERCISE_MINUTES,
        HealthMetric.WORKOUT_MINUTES,
    }
)


def score_trend(records: Sequence[WellnessScoreComponents]) -> float:
    """Difference between the two most recent totals; positive means improving."""
    if len(records) < 2:
        return 0.0
    ordered = sorted(records, key=lambda r: r.calculated_at)
    return ordered[-1].total_score - ordered[-2].total_score


def age_from_birth_date(birth_date: str | None, today: date, default_age: int) -> int:
    """Whole years since ``birth_date``; ``default_age`` when missing or unparseable."""
    if not birth_date:
        return default_age
    try:
        born = datetime.fromisoformat(birth_date.strip()).date()
    except ValueError:
        return default_age

    age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
    return age if age >= 0 else default_age


class WellnessScoreService:
    """
    Orchestrates daily wellness scoring against injected collaborators.

    State read by the presentation layer:
    - current_score: last score that was loaded or successfully persisted
    - history: recent scores, most recent calculation date first
    - is_loading / error_message: progress and the last user-facing failure
    """

    def __init__(
        self,
        identity: IdentityProvider,
        profiles: ProfileProvider,
        health: HealthProvider,
        history_store: HistoryStore,
        calculator: WellnessScoreCalculator | None = None,
        config: OrchestratorConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.identity = identity
        self.profiles = profiles
        self.health = health
        self.history_store = history_store
        self.config = config or get_config().orchestrator
        self._clock: Clock = clock or (lambda: datetime.now(UTC))
        self.calculator = calculator or WellnessScoreCalculator(clock=self._clock)
        self._timezone: tzinfo | None = (
            ZoneInfo(self.config.timezone) if self.config.timezone else None
        )
        self.logger = logger.bind(component="wellness_score_service")

        self.current_score: WellnessScoreComponents | None = None
        self.history_rows: list[WellnessScoreRow] = []
        self.is_loading = False
        self.error_message: str | None = None

    @property
    def history(self) -> list[WellnessScoreComponents]:
        return [row.to_components() for row in self.history_rows]

    def today(self) -> date:
        """Calendar day used as the persistence key."""
        # astimezone(None) converts to host local time
        return self._clock().astimezone(self._timezone).date()

    async def load_latest_or_compute(self) -> Result[WellnessScoreComponents]:
        """
        Publish today's stored score, computing and persisting one if missing.

        Returns:
            Result with today's score, or the error recorded on error_message
        """
        self.is_loading = True
        self.error_message = None

        try:
            user_id = await self._require_user()
            try:
                self.history_rows = await self._call(
                    self.history_store.fetch_recent(user_id, self.config.history_days)
                )
            except CollaboratorUnavailableError as e:
                raise CollaboratorUnavailableError(
                    e.detail, user_message="Failed loading wellness"
                ) from e

            today = self.today()
            todays_row = next((r for r in self.history_rows if r.calculation_date == today), None)
            if todays_row is not None:
                todays_score = todays_row.to_components()
                self.current_score = todays_score
                self.logger.info(
                    "todays_score_reused", user_id=user_id, total_score=todays_score.total_score
                )
                return Result.ok(todays_score)

            return Result.ok(await self._compute_and_persist(user_id))

        except WellnessError as e:
            return self._fail(e)
        finally:
            self.is_loading = False

    async def compute_and_persist(self) -> Result[WellnessScoreComponents]:
        """
        Calculate today's score from fresh readings and upsert it.

        Returns:
            Result with the new score, or the error recorded on error_message
        """
        self.is_loading = True
        self.error_message = None

        try:
            user_id = await self._require_user()
            self.history_rows = await self._call(
                self.history_store.fetch_recent(user_id, self.config.history_days)
            )
            return Result.ok(await self._compute_and_persist(user_id))
        except WellnessError as e:
            return self._fail(e)
        finally:
            self.is_loading = False

    def trend(self) -> float:
        """Change in total score between the two most recent history entries."""
        return score_trend(self.history)

    async def _compute_and_persist(self, user_id: str) -> WellnessScoreComponents:
        profile = await self._require_profile(user_id)
        today = self.today()
        age = age_from_birth_date(profile.date_of_birth, today, self.config.default_age)

        readings = await self._read_health_metrics()
        snapshot = MetricSnapshot(
            age=age,
            gender=profile.gender or "unknown",
            last_7_day_total_scores=self._recent_totals(),
            **{SNAPSHOT_FIELDS[metric]: value for metric, value in readings.items()},
        )

        score = self.calculator.calculate(snapshot)

        # Only a complete calculation reaches the store
        await self._call(self.history_store.upsert(user_id, today, score))

        self.current_score = score
        self.history_rows = [WellnessScoreRow.from_components(user_id, today, score)] + [
            row for row in self.history_rows if row.calculation_date != today
        ]
        self.logger.info(
            "wellness_score_persisted",
            user_id=user_id,
            calculation_date=today.isoformat(),
            total_score=round(score.total_score, 2),
            category=score.category.value,
        )
        return score

    def _recent_totals(self) -> tuple[float, ...] | None:
        if len(self.history_rows) < CONSISTENCY_DAYS:
            return None
        return tuple(row.total_wellness_score for row in self.history_rows[:CONSISTENCY_DAYS])

    async def _read_health_metrics(self) -> dict[HealthMetric, float | int | None]:
        """
        Read every health signal with structured concurrency.

        Each read has its own timeout; failures degrade to None instead of
        cancelling the sibling reads.
        """
        async with asyncio.TaskGroup() as task_group:
            tasks = {
                metric: task_group.create_task(self._read_metric(metric))
                for metric in HealthMetric
            }

        readings = {metric: task.result() for metric, task in tasks.items()}
        self.logger.debug(
            "health_metrics_read",
            available=sorted(m.value for m, v in readings.items() if v is not None),
        )
        return readings

    async def _read_metric(self, metric: HealthMetric) -> float | int | None:
        try:
            value = await asyncio.wait_for(
                self.health.latest_value(metric),
                timeout=self.config.metric_timeout_seconds,
            )
            if value is None:
                return None
            return int(value) if metric in INTEGER_METRICS else float(value)
        except TimeoutError:
            self.logger.warning(
                "health_metric_timeout",
                metric=metric.value,
                timeout_seconds=self.config.metric_timeout_seconds,
            )
            return None
        except Exception as e:
            self.logger.warning("health_metric_unavailable", metric=metric.value, error=str(e))
            return None

    async def _require_user(self) -> str:
        user_id = await self._call(self.identity.current_user_id())
        if not user_id:
            raise NotSignedInError()
        return user_id

    async def _require_profile(self, user_id: str) -> UserProfile:
        profile = await self._call(self.profiles.fetch_profile(user_id))
        if profile is None:
            raise ProfileNotFoundError()
        return profile

    async def _call(self, operation: Awaitable[T]) -> T:
        """Await a collaborator call, translating failures into CollaboratorUnavailableError."""
        try:
            return await asyncio.wait_for(
                operation, timeout=self.config.collaborator_timeout_seconds
            )
        except TimeoutError as e:
            raise CollaboratorUnavailableError(
                f"timed out after {self.config.collaborator_timeout_seconds}s"
            ) from e
        except WellnessError:
            raise
        except Exception as e:
            raise CollaboratorUnavailableError(str(e)) from e

    def _fail(self, error: WellnessError) -> Result[WellnessScoreComponents]:
        self.error_message = error.message
        self.logger.error(
            "wellness_score_failed",
            error_type=type(error).__name__,
            error=error.message,
        )
        return Result.err(error)

