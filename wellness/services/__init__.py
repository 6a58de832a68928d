"""
Core services for the application.

This package contains the score calculator, the insight rules and the
orchestration service that gathers inputs and persists daily scores.
"""

from .calculator import WellnessScoreCalculator, categorize_score
from .collaborators import (
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
from .insights import build_insights
from .orchestrator import WellnessScoreService, score_trend

__all__ = [
    "CollaboratorUnavailableError",
    "HealthProvider",
    "HistoryStore",
    "IdentityProvider",
    "NotSignedInError",
    "ProfileNotFoundError",
    "ProfileProvider",
    "Result",
    "WellnessError",
    "WellnessScoreCalculator",
    "categorize_score",
    "build_insights",
    "WellnessScoreService",
    "score_trend",
]
