"""Recommendations shown next to a computed wellness score."""

from wellness.domain.models import Insight, WellnessCategory, WellnessScoreComponents

LOW_COMPONENT_THRESHOLD = 5.0


def build_insights(score: WellnessScoreComponents) -> list[Insight]:
    """
    Generate actionable recommendations for a score.

    Args:
        score: Computed wellness score

    Returns:
        Insights in display order, possibly empty
    """
    insights: list[Insight] = []

    if score.category == WellnessCategory.EXCELLENT:
        insights.append(
            Insight(
                title="Great Work!",
                message="You're maintaining excellent health. Keep up the great habits!",
            )
        )
    elif score.cardiovascular_fitness < LOW_COMPONENT_THRESHOLD:
        insights.append(
            Insight(
                title="Boost Cardio",
                message="Try increasing aerobic exercise like running or cycling.",
                component="cardiovascular_fitness",
            )
        )

    if score.sleep_quality < LOW_COMPONENT_THRESHOLD:
        insights.append(
            Insight(
                title="Improve Sleep",
                message="Aim for 7-8 hours and maintain a consistent sleep schedule.",
                component="sleep_quality",
            )
        )

    if score.physical_activity < LOW_COMPONENT_THRESHOLD:
        insights.append(
            Insight(
                title="Increase Activity",
                message="Target 10,000 steps and 30 minutes of exercise daily.",
                component="physical_activity",
            )
        )

    return insights
