"""
Wellness score calculation.

Turns a MetricSnapshot into six component scores (0-10 each), a weighted
total (0-100) and a category label. The calculator is a pure transform:
no I/O, no shared state, and it never raises for missing readings. Absent
data falls back to a documented neutral contribution instead.
"""

import math
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

import structlog

from wellness.domain.models import MetricSnapshot, WellnessCategory, WellnessScoreComponents

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

NEUTRAL_SCORE = 5.0
MAX_COMPONENT_SCORE = 10.0
MAX_TOTAL_SCORE = 100.0
TOTAL_SCORE_PRECISION = 6

# Component weights (must sum to 1.0)
CARDIO_WEIGHT = 0.25
SLEEP_WEIGHT = 0.25
ACTIVITY_WEIGHT = 0.20
HEART_WEIGHT = 0.15
RECOVERY_WEIGHT = 0.10
CONSISTENCY_WEIGHT = 0.05

WEIGHTS: dict[str, float] = {
    "cardiovascular_fitness": CARDIO_WEIGHT,
    "sleep_quality": SLEEP_WEIGHT,
    "physical_activity": ACTIVITY_WEIGHT,
    "heart_health": HEART_WEIGHT,
    "recovery": RECOVERY_WEIGHT,
    "consistency": CONSISTENCY_WEIGHT,
}

# VO2 max benchmarks as (bracket_floor, (excellent, good, fair)), in mL/kg/min.
# Ages whose decade bracket is not listed get the neutral score.
VO2_MAX_BENCHMARKS: dict[str, tuple[tuple[int, tuple[float, float, float]], ...]] = {
    "male": (
        (20, (55.0, 48.0, 41.0)),
        (30, (52.0, 45.0, 38.0)),
        (40, (48.0, 42.0, 35.0)),
        (50, (43.0, 37.0, 30.0)),
        (60, (39.0, 33.0, 26.0)),
    ),
    "female": (
        (20, (49.0, 42.0, 35.0)),
        (30, (45.0, 38.0, 31.0)),
        (40, (41.0, 34.0, 27.0)),
        (50, (37.0, 30.0, 23.0)),
        (60, (33.0, 26.0, 19.0)),
    ),
}

# HRV baselines as (age upper bound, baseline ms); ages past the last bound use the fallback.
HRV_BASELINES: tuple[tuple[int, float], ...] = ((30, 60.0), (40, 55.0), (50, 45.0), (60, 40.0))
HRV_BASELINE_FALLBACK = 35.0

# Lower bounds are inclusive, checked top-down.
CATEGORY_BANDS: tuple[tuple[float, WellnessCategory], ...] = (
    (85.0, WellnessCategory.EXCELLENT),
    (70.0, WellnessCategory.GOOD),
    (55.0, WellnessCategory.FAIR),
    (40.0, WellnessCategory.BELOW_AVERAGE),
)

CONSISTENCY_DAYS = 7


def categorize_score(total_score: float) -> WellnessCategory:
    """Map a total score onto its category band."""
    for lower_bound, category in CATEGORY_BANDS:
        if total_score >= lower_bound:
            return category
    return WellnessCategory.NEEDS_IMPROVEMENT


def _clamp(value: float, upper: float) -> float:
    return max(0.0, min(upper, value))


class WellnessScoreCalculator:
    """
    Calculates the composite wellness score.

    The total is weighted across six components:
    - Cardiovascular fitness (25%)
    - Sleep quality (25%)
    - Physical activity (20%)
    - Heart health (15%)
    - Recovery (10%)
    - Consistency (5%)
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or (lambda: datetime.now(UTC))
        self.logger = logger.bind(component="wellness_score_calculator")

    def calculate(self, snapshot: MetricSnapshot) -> WellnessScoreComponents:
        """
        Compute the wellness score for one snapshot.

        Args:
            snapshot: Current readings, any of which may be absent

        Returns:
            Component scores, weighted total and category
        """
        components = {
            "cardiovascular_fitness": self._cardiovascular_score(
                snapshot.vo2_max, snapshot.age, snapshot.gender
            ),
            "sleep_quality": self._sleep_score(
                snapshot.total_sleep_hours,
                snapshot.deep_sleep_hours,
                snapshot.rem_sleep_hours,
                snapshot.sleep_awakenings,
                snapshot.minutes_awake_during_sleep,
            ),
            "physical_activity": self._activity_score(
                snapshot.steps, snapshot.active_minutes, snapshot.workout_minutes
            ),
            "heart_health": self._heart_score(
                snapshot.resting_heart_rate, snapshot.blood_oxygen_percent, snapshot.age
            ),
            "recovery": self._recovery_score(snapshot.heart_rate_variability, snapshot.age),
            "consistency": self._consistency_score(snapshot.last_7_day_total_scores),
        }
        components = {
            name: _clamp(score, MAX_COMPONENT_SCORE) for name, score in components.items()
        }

        weighted = math.fsum(score * WEIGHTS[name] for name, score in components.items())
        # Rounded so totals landing on a band edge are not pushed below it by float error
        total_score = _clamp(round(weighted * 10, TOTAL_SCORE_PRECISION), MAX_TOTAL_SCORE)
        category = categorize_score(total_score)

        score = WellnessScoreComponents(
            **components,
            total_score=total_score,
            category=category,
            calculated_at=self._clock(),
        )

        self.logger.info(
            "wellness_score_calculated",
            total_score=round(total_score, 2),
            category=category.value,
            **{name: round(value, 2) for name, value in components.items()},
        )
        return score

    def _cardiovascular_score(self, vo2_max: float | None, age: int, gender: str) -> float:
        """Rate VO2 max against age- and sex-specific benchmarks."""
        if vo2_max is None:
            return NEUTRAL_SCORE

        brackets = VO2_MAX_BENCHMARKS.get(gender.strip().lower())
        if brackets is None:
            return NEUTRAL_SCORE

        age_bracket = (age // 10) * 10
        benchmark = next(
            (thresholds for floor, thresholds in brackets if floor == age_bracket), None
        )
        if benchmark is None:
            return NEUTRAL_SCORE

        excellent, good, fair = benchmark
        if vo2_max >= excellent:
            return 10.0
        elif vo2_max >= good:
            return 7.5
        elif vo2_max >= fair:
            return 5.0
        elif vo2_max >= fair * 0.85:
            return 3.0
        else:
            return 1.0

    def _sleep_score(
        self,
        total_hours: float | None,
        deep_hours: float | None,
        rem_hours: float | None,
        awakenings: int | None,
        minutes_awake: float | None,
    ) -> float:
        """
        Score last night's sleep.

        Duration contributes up to 5, stage balance up to 3 and interruptions
        up to 2. Stage and interruption parts only count when their inputs are
        all present.
        """
        if total_hours is None:
            return NEUTRAL_SCORE

        # Duration (max 5)
        if total_hours >= 7.83:
            score = 5.0
        elif total_hours >= 7.0:
            score = 4.5
        elif total_hours >= 6.5:
            score = 4.0
        elif total_hours >= 6.0:
            score = 3.0
        elif total_hours >= 5.0:
            score = 2.0
        else:
            score = 1.0

        # Sleep stages (max 3)
        if deep_hours is not None and rem_hours is not None and total_hours > 0:
            deep_fraction = deep_hours / total_hours
            rem_fraction = rem_hours / total_hours

            if 0.13 <= deep_fraction <= 0.23:
                score += 1.5
            elif 0.10 <= deep_fraction <= 0.27:
                score += 1.0
            else:
                score += 0.5

            if 0.20 <= rem_fraction <= 0.25:
                score += 1.5
            elif 0.15 <= rem_fraction <= 0.30:
                score += 1.0
            else:
                score += 0.5

        # Interruptions (max 2)
        if minutes_awake is not None and awakenings is not None:
            if minutes_awake <= 11 and awakenings <= 2:
                score += 2.0
            elif minutes_awake <= 25 and awakenings <= 4:
                score += 1.5
            elif minutes_awake <= 40 and awakenings <= 6:
                score += 1.0
            else:
                score += 0.5

        return min(MAX_COMPONENT_SCORE, score)

    def _activity_score(
        self, steps: int | None, active_minutes: int | None, workout_minutes: int | None
    ) -> float:
        """Sum independent contributions from steps, active minutes and workouts."""
        score = 0.0

        if steps is not None:
            if steps >= 10000:
                score += 4.0
            elif steps >= 7500:
                score += 3.5
            elif steps >= 5000:
                score += 2.5
            elif steps >= 2500:
                score += 1.5
            else:
                score += 0.5

        if active_minutes is not None:
            if active_minutes >= 40:
                score += 3.0
            elif active_minutes >= 25:
                score += 2.5
            elif active_minutes >= 15:
                score += 2.0
            elif active_minutes >= 10:
                score += 1.0
            else:
                score += 0.5

        if workout_minutes is not None:
            if workout_minutes >= 30:
                score += 3.0
            elif workout_minutes >= 20:
                score += 2.0
            elif workout_minutes >= 10:
                score += 1.0
            elif workout_minutes > 0:
                score += 0.5

        return min(MAX_COMPONENT_SCORE, score)

    def _heart_score(
        self, resting_hr: float | None, blood_oxygen: float | None, age: int
    ) -> float:
        """Score resting heart rate (max 6) and blood oxygen (max 4)."""
        # age does not change the heart rules
        score = 0.0

        if resting_hr is not None:
            if resting_hr <= 60:
                score += 6.0
            elif resting_hr <= 70:
                score += 5.0
            elif resting_hr <= 80:
                score += 4.0
            elif resting_hr <= 90:
                score += 2.5
            else:
                score += 1.0

        if blood_oxygen is not None:
            if blood_oxygen >= 97:
                score += 4.0
            elif blood_oxygen >= 95:
                score += 3.5
            elif blood_oxygen >= 92:
                score += 2.5
            elif blood_oxygen >= 90:
                score += 1.5
            else:
                score += 0.5

        return min(MAX_COMPONENT_SCORE, score)

    def _recovery_score(self, hrv: float | None, age: int) -> float:
        """Rate heart rate variability relative to an age baseline."""
        if hrv is None:
            return NEUTRAL_SCORE

        baseline = next(
            (value for upper, value in HRV_BASELINES if age < upper), HRV_BASELINE_FALLBACK
        )

        if hrv >= baseline * 1.2:
            return 10.0
        elif hrv >= baseline:
            return 8.0
        elif hrv >= baseline * 0.8:
            return 6.0
        elif hrv >= baseline * 0.6:
            return 4.0
        else:
            return 2.0

    def _consistency_score(self, historical_scores: Sequence[float] | None) -> float:
        """Reward low day-to-day variability across the last week of totals."""
        if historical_scores is None or len(historical_scores) != CONSISTENCY_DAYS:
            return NEUTRAL_SCORE

        mean = sum(historical_scores) / CONSISTENCY_DAYS
        variance = sum((s - mean) ** 2 for s in historical_scores) / CONSISTENCY_DAYS
        std_dev = math.sqrt(variance)

        if std_dev < 5:
            return 10.0
        elif std_dev < 10:
            return 8.0
        elif std_dev < 15:
            return 6.0
        elif std_dev < 20:
            return 4.0
        else:
            return 2.0
