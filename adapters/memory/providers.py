"""
In-memory collaborators for the wellness score service.

These back the demo and the tests, and double as reference adapters:
- Identity, profile and health providers answer from plain dictionaries
- The history store keeps JSON-ready rows keyed by (user_id, calculation_date),
  so every upsert goes through the same codec a remote table would
"""

import asyncio
from datetime import date
from typing import Any

import structlog

from wellness.domain.models import HealthMetric, UserProfile, WellnessScoreComponents
from wellness.domain.records import WellnessScoreRow

logger = structlog.get_logger(__name__)


class StaticIdentityProvider:
    """Identity provider with a fixed signed-in user (or nobody)."""

    def __init__(self, user_id: str | None) -> None:
        self.user_id = user_id

    async def current_user_id(self) -> str | None:
        return self.user_id

    def sign_out(self) -> None:
        self.user_id = None


class InMemoryProfileProvider:
    """Profiles held in a dict keyed by user id."""

    def __init__(self, profiles: list[UserProfile] | None = None) -> None:
        self._profiles: dict[str, UserProfile] = {p.user_id: p for p in profiles or []}

    def add_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.user_id] = profile

    async def fetch_profile(self, user_id: str) -> UserProfile | None:
        return self._profiles.get(user_id)


class StaticHealthProvider:
    """
    Health provider answering from fixed readings.

    Optional per-metric delays and failures make it usable for timeout and
    degradation scenarios.
    """

    def __init__(
        self,
        values: dict[HealthMetric, float] | None = None,
        delays: dict[HealthMetric, float] | None = None,
        failures: dict[HealthMetric, Exception] | None = None,
    ) -> None:
        self.values: dict[HealthMetric, float] = dict(values or {})
        self.delays: dict[HealthMetric, float] = dict(delays or {})
        self.failures: dict[HealthMetric, Exception] = dict(failures or {})
        self.reads: list[HealthMetric] = []

    @classmethod
    def demo(cls) -> "StaticHealthProvider":
        """Reasonable readings for a demo run without a wearable attached."""
        return cls(
            {
                HealthMetric.VO2_MAX: 42.5,
                HealthMetric.BLOOD_OXYGEN_PERCENT: 97.0,
                HealthMetric.STEP_COUNT: 8500,
                HealthMetric.RESTING_HEART_RATE: 62.0,
                HealthMetric.TOTAL_SLEEP_HOURS: 7.2,
                HealthMetric.EXERCISE_MINUTES: 28,
            }
        )

    async def latest_value(self, metric: HealthMetric) -> float | None:
        self.reads.append(metric)
        delay = self.delays.get(metric)
        if delay:
            await asyncio.sleep(delay)
        if metric in self.failures:
            raise self.failures[metric]
        return self.values.get(metric)


class InMemoryHistoryStore:
    """History store with upsert semantics on (user_id, calculation_date)."""

    def __init__(self) -> None:
        self._rows: dict[tuple[str, date], dict[str, Any]] = {}
        self.upsert_count = 0
        self.logger = logger.bind(component="in_memory_history_store")

    def seed(self, user_id: str, calculation_date: date, score: WellnessScoreComponents) -> None:
        """Store a score without counting it as an upsert."""
        row = WellnessScoreRow.from_components(user_id, calculation_date, score)
        self._rows[row.key] = row.model_dump(mode="json")

    def rows(self, user_id: str) -> list[WellnessScoreRow]:
        """Stored rows for a user, most recent day first."""
        rows = [
            WellnessScoreRow.model_validate(raw)
            for (owner, _), raw in self._rows.items()
            if owner == user_id
        ]
        return sorted(rows, key=lambda r: r.calculation_date, reverse=True)

    async def fetch_recent(self, user_id: str, limit: int) -> list[WellnessScoreRow]:
        return self.rows(user_id)[:limit]

    async def upsert(
        self, user_id: str, calculation_date: date, score: WellnessScoreComponents
    ) -> None:
        row = WellnessScoreRow.from_components(user_id, calculation_date, score)
        replaced = row.key in self._rows
        self._rows[row.key] = row.model_dump(mode="json")
        self.upsert_count += 1
        self.logger.debug(
            "wellness_score_row_upserted",
            user_id=user_id,
            calculation_date=calculation_date.isoformat(),
            replaced=replaced,
        )
