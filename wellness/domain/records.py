"""
Row shape used by history stores.

Columns follow the ``wellness_scores`` table: one row per user per calendar day,
upserted on ``(user_id, calculation_date)``.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from wellness.domain.models import WellnessCategory, WellnessScoreComponents


class WellnessScoreRow(BaseModel):
    """Persisted form of a WellnessScoreComponents record."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    cardiovascular_fitness_score: float = Field(ge=0.0, le=10.0)
    sleep_quality_score: float = Field(ge=0.0, le=10.0)
    physical_activity_score: float = Field(ge=0.0, le=10.0)
    heart_health_score: float = Field(ge=0.0, le=10.0)
    recovery_score: float = Field(ge=0.0, le=10.0)
    consistency_score: float = Field(ge=0.0, le=10.0)
    total_wellness_score: float = Field(ge=0.0, le=100.0)
    score_category: WellnessCategory
    calculation_date: date
    calculated_at: datetime

    @property
    def key(self) -> tuple[str, date]:
        return (self.user_id, self.calculation_date)

    @classmethod
    def from_components(
        cls, user_id: str, calculation_date: date, score: WellnessScoreComponents
    ) -> "WellnessScoreRow":
        return cls(
            user_id=user_id,
            cardiovascular_fitness_score=score.cardiovascular_fitness,
            sleep_quality_score=score.sleep_quality,
            physical_activity_score=score.physical_activity,
            heart_health_score=score.heart_health,
            recovery_score=score.recovery,
            consistency_score=score.consistency,
            total_wellness_score=score.total_score,
            score_category=score.category,
            calculation_date=calculation_date,
            calculated_at=score.calculated_at,
        )

    def to_components(self) -> WellnessScoreComponents:
        return WellnessScoreComponents(
            cardiovascular_fitness=self.cardiovascular_fitness_score,
            sleep_quality=self.sleep_quality_score,
            physical_activity=self.physical_activity_score,
            heart_health=self.heart_health_score,
            recovery=self.recovery_score,
            consistency=self.consistency_score,
            total_score=self.total_wellness_score,
            category=self.score_category,
            calculated_at=self.calculated_at,
        )
