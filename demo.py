"""
End-to-end demo of the wellness scoring pipeline.

This script walks through:
1. Configuration loading and validation
2. Computing today's score from in-memory collaborators
3. Insights and trend for the computed score
4. Reusing the stored score on a second load the same day
5. Error handling when nobody is signed in

Run with: uv run python demo.py
"""

import asyncio
from datetime import UTC, datetime, timedelta

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adapters.memory.providers import (
    InMemoryHistoryStore,
    InMemoryProfileProvider,
    StaticHealthProvider,
    StaticIdentityProvider,
)
from wellness.config import get_config, print_config_summary, validate_config
from wellness.domain.models import UserProfile, WellnessScoreComponents
from wellness.services.calculator import WellnessScoreCalculator, categorize_score
from wellness.services.insights import build_insights
from wellness.services.orchestrator import WellnessScoreService

console = Console()

DEMO_USER = "demo-user"
PAST_TOTALS = [61.0, 64.5, 63.0, 66.0, 65.5, 67.0, 68.5]


def seed_history(store: InMemoryHistoryStore, now: datetime) -> None:
    """Store a week of earlier daily scores, oldest first."""
    for days_ago, total in zip(range(len(PAST_TOTALS), 0, -1), PAST_TOTALS, strict=True):
        calculated_at = now - timedelta(days=days_ago)
        store.seed(
            DEMO_USER,
            calculated_at.astimezone().date(),
            WellnessScoreComponents(
                cardiovascular_fitness=5.0,
                sleep_quality=6.0,
                physical_activity=6.0,
                heart_health=8.0,
                recovery=5.0,
                consistency=5.0,
                total_score=total,
                category=categorize_score(total),
                calculated_at=calculated_at,
            ),
        )


def render_score(score: WellnessScoreComponents) -> None:
    table = Table(title=f"Wellness Score: {score.total_score:.1f} ({score.category.value})")
    table.add_column("Component", style="cyan")
    table.add_column("Score (0-10)", style="green")

    table.add_row("Cardiovascular fitness", f"{score.cardiovascular_fitness:.1f}")
    table.add_row("Sleep quality", f"{score.sleep_quality:.1f}")
    table.add_row("Physical activity", f"{score.physical_activity:.1f}")
    table.add_row("Heart health", f"{score.heart_health:.1f}")
    table.add_row("Recovery", f"{score.recovery:.1f}")
    table.add_row("Consistency", f"{score.consistency:.1f}")

    console.print(table)


async def run_demo() -> None:
    console.print(Panel("Wellness Score Engine - Demo", style="bold blue"))

    validate_config()
    print_config_summary()

    now = datetime.now(UTC)
    history_store = InMemoryHistoryStore()
    seed_history(history_store, now)

    calculator = WellnessScoreCalculator()
    service = WellnessScoreService(
        identity=StaticIdentityProvider(DEMO_USER),
        profiles=InMemoryProfileProvider(
            [UserProfile(user_id=DEMO_USER, date_of_birth="1990-04-12", gender="female")]
        ),
        health=StaticHealthProvider.demo(),
        history_store=history_store,
        calculator=calculator,
        config=get_config().orchestrator,
    )

    console.print(Panel("Computing today's score", style="blue"))
    result = await service.load_latest_or_compute()
    if result.is_err():
        console.print(f"Scoring failed: {service.error_message}", style="red")
        return

    score = result.unwrap()
    render_score(score)

    insights = build_insights(score)
    if insights:
        console.print("\nInsights & Recommendations:")
        for insight in insights:
            console.print(f"  - [bold]{insight.title}[/bold] {insight.message}")
    console.print(f"\nTrend vs. previous day: {service.trend():+.1f}")

    console.print(Panel("Loading again the same day", style="blue"))
    again = await service.load_latest_or_compute()
    reused = again.is_ok() and again.unwrap() == score
    console.print(
        "Stored score reused" if reused else "Score was recomputed",
        style="green" if reused else "yellow",
    )
    console.print(f"Upserts performed: {history_store.upsert_count}")

    console.print(Panel("Signed-out user", style="blue"))
    service.identity = StaticIdentityProvider(None)
    failed = await service.load_latest_or_compute()
    console.print(f"Error surfaced: {service.error_message}", style="yellow")
    console.print(
        f"Current score still shown: {service.current_score is not None and failed.is_err()}"
    )


if __name__ == "__main__":
    try:
        asyncio.run(run_demo())
    except KeyboardInterrupt:
        console.print("\nDemo stopped by user", style="yellow")
