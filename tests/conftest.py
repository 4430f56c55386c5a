"""Root conftest for all tests.

Shared worklog fixtures and fake complexity scorers.
"""

from collections.abc import Callable

import pytest

from worklog_engine.distribution.models import ScoringItem, TimeEntry


@pytest.fixture
def three_entries() -> list[TimeEntry]:
    """Three one-hour worklogs with comments of increasing length."""
    return [
        TimeEntry(id="wl-1", group_key="PROJ-WL-1", label="Work on wl-1", current_seconds=3600, comment_text="Fixed typo"),
        TimeEntry(id="wl-2", group_key="PROJ-WL-2", label="Work on wl-2", current_seconds=3600, comment_text="Implemented the export endpoint and wired pagination"),
        TimeEntry(id="wl-3", group_key="PROJ-WL-3", label="Work on wl-3", current_seconds=3600, comment_text="Reworked the sync engine " * 10),
    ]


@pytest.fixture
def scorer_from() -> Callable[[dict[str, object]], Callable]:
    """Build an async scorer returning fixed scores and recording its calls."""

    def build(scores: dict[str, object]):
        calls: list[list[ScoringItem]] = []

        async def scorer(items: list[ScoringItem]) -> list[dict[str, object]]:
            calls.append(items)
            return [{"id": item_id, "score": score} for item_id, score in scores.items()]

        scorer.calls = calls  # type: ignore[attr-defined]
        return scorer

    return build

@pytest.fixture
def failing_scorer() -> Callable:
    """Async scorer that always raises, as an unreachable LLM would."""

    async def scorer(items: list[ScoringItem]) -> list[dict[str, object]]:
        raise RuntimeError("AI service unavailable")

    return scorer
