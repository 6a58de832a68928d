"""
Domain models for wellness scoring.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation but could be swapped to dataclasses if needed.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WellnessCategory(str, Enum):
    """Label buckets for the 0-100 total score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    BELOW_AVERAGE = "Below Average"
    NEEDS_IMPROVEMENT = "Needs Improvement"


class HealthMetric(str, Enum):
    """Health signals that can be read independently from a health data source."""

    VO2_MAX = "vo2_max"
    RESTING_HEART_RATE = "resting_heart_rate"
    BLOOD_OXYGEN_PERCENT = "blood_oxygen_percent"
    TOTAL_SLEEP_HOURS = "total_sleep_hours"
    DEEP_SLEEP_HOURS = "deep_sleep_hours"
    REM_SLEEP_HOURS = "rem_sleep_hours"
    SLEEP_AWAKENINGS = "sleep_awakenings"
    MINUTES_AWAKE_DURING_SLEEP = "minutes_awake_during_sleep"
    STEP_COUNT = "step_count"
    EXERCISE_MINUTES = "exercise_minutes"
    WORKOUT_MINUTES = "workout_minutes"
    HEART_RATE_VARIABILITY = "heart_rate_variability"


class MetricSnapshot(BaseModel):
    """
    Bundle of current readings fed into one calculation.

    Every reading is optional. ``None`` means unknown, so a step count of 0 is
    still a real reading.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    vo2_max: float | None = Field(None, description="mL/kg/min")
    age: int
    gender: str = Field(default="unknown", description="Biological sex for benchmark lookup")

    total_sleep_hours: float | None = None
    deep_sleep_hours: float | None = None
    rem_sleep_hours: float | None = None
    sleep_awakenings: int | None = None
    minutes_awake_during_sleep: float | None = None

    steps: int | None = None
    active_minutes: int | None = None
    workout_minutes: int | None = None

    resting_heart_rate: float | None = None
    blood_oxygen_percent: float | None = None
    heart_rate_variability: float | None = None

    last_7_day_total_scores: tuple[float, ...] | None = Field(
        None, description="Past daily totals, only used when exactly 7 are present"
    )


class WellnessScoreComponents(BaseModel):
    """Result of one wellness calculation. Immutable once computed."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    cardiovascular_fitness: float = Field(ge=0.0, le=10.0)
    sleep_quality: float = Field(ge=0.0, le=10.0)
    physical_activity: float = Field(ge=0.0, le=10.0)
    heart_health: float = Field(ge=0.0, le=10.0)
    recovery: float = Field(ge=0.0, le=10.0)
    consistency: float = Field(ge=0.0, le=10.0)

    total_score: float = Field(ge=0.0, le=100.0)
    category: WellnessCategory
    calculated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class UserProfile(BaseModel):
    """Profile attributes the score depends on."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    date_of_birth: str | None = Field(None, description="ISO-8601 date or datetime")
    gender: str | None = None


class Insight(BaseModel):
    """Actionable recommendation derived from a score."""

    model_config = ConfigDict(frozen=True)

    title: str
    message: str
    component: str | None = Field(
        None, description="Component the insight is about, None for the overall score"
    )
