"""Tests for the distribution service (validate -> weigh -> allocate)."""

from unittest.mock import AsyncMock, patch

import pytest

from worklog_engine.config.settings import Settings
from worklog_engine.distribution.engine import distribute_time
from worklog_engine.distribution.errors import DistributionPreconditionError
from worklog_engine.distribution.models import DistributionMode, TimeEntry, WeightSource
from worklog_engine.distribution.policies import by_largest_fraction


def make_entry(entry_id: str) -> TimeEntry:
    return TimeEntry(id=entry_id, group_key=f"PROJ-{entry_id.upper()}", label=f"Work on {entry_id}", current_seconds=3600)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        max_batch_size=50,
        scoring_timeout_seconds=5.0,
        fallback_chars_per_point=20,
        llm_provider="test",
    )


@pytest.mark.asyncio
async def test_equal_distribution(three_entries: list[TimeEntry], test_settings: Settings):
    outcome = await distribute_time(three_entries, 8.05, "equal", settings=test_settings)

    assert outcome.mode == DistributionMode.EQUAL
    assert outcome.target_minutes == 483
    assert [r.new_minutes for r in outcome.results] == [161, 161, 161]
    assert outcome.total_minutes == 483
    assert outcome.total_hours == 8.05
    assert outcome.used_fallback is False


@pytest.mark.asyncio
async def test_smart_distribution_follows_scores(test_settings: Settings, scorer_from):
    entries = [make_entry("a"), make_entry("b")]

    outcome = await distribute_time(entries, 8.0, "smart", scorer_from({"a": 7, "b": 3}), settings=test_settings)

    assert [r.new_minutes for r in outcome.results] == [336, 144]
    assert [w.value for w in outcome.weights] == [7, 3]
    assert outcome.used_fallback is False


@pytest.mark.asyncio
async def test_smart_distribution_survives_scorer_failure(three_entries: list[TimeEntry], test_settings: Settings, failing_scorer):
    outcome = await distribute_time(three_entries, 8.0, "smart", failing_scorer, settings=test_settings)

    assert outcome.used_fallback is True
    assert outcome.warnings
    assert all(w.source == WeightSource.HEURISTIC for w in outcome.weights)
    assert outcome.total_minutes == 480


@pytest.mark.asyncio
async def test_preconditions_checked_before_scoring(test_settings: Settings):
    scorer = AsyncMock(return_value=[])

    with pytest.raises(DistributionPreconditionError) as exc_info:
        await distribute_time([], 8.0, "smart", scorer, settings=test_settings)
    assert exc_info.value.code == "EMPTY_ENTRIES"

    with pytest.raises(DistributionPreconditionError) as exc_info:
        await distribute_time([make_entry("a")], 30, "smart", scorer, settings=test_settings)
    assert exc_info.value.code == "TARGET_OUT_OF_RANGE"

    scorer.assert_not_awaited()


@pytest.mark.asyncio
async def test_batch_ceiling_comes_from_settings(three_entries: list[TimeEntry]):
    with pytest.raises(DistributionPreconditionError) as exc_info:
        await distribute_time(three_entries, 8.0, "equal", settings=Settings(max_batch_size=2))
    assert exc_info.value.code == "TOO_MANY_ENTRIES"


@pytest.mark.asyncio
async def test_unknown_mode_rejected(three_entries: list[TimeEntry], test_settings: Settings):
    with pytest.raises(DistributionPreconditionError) as exc_info:
        await distribute_time(three_entries, 8.0, "proportional", settings=test_settings)
    assert exc_info.value.code == "UNKNOWN_MODE"


@pytest.mark.asyncio
async def test_smart_mode_defaults_to_configured_llm_scorer(three_entries: list[TimeEntry], test_settings: Settings, scorer_from):
    scorer = scorer_from({"wl-1": 2, "wl-2": 2, "wl-3": 4})

    with patch("worklog_engine.distribution.engine.build_llm_scorer", return_value=scorer) as build:
        outcome = await distribute_time(three_entries, 8.0, "smart", settings=test_settings)

    build.assert_called_once_with(test_settings)
    assert [r.new_minutes for r in outcome.results] == [120, 120, 240]


@pytest.mark.asyncio
async def test_remainder_policy_is_swappable(test_settings: Settings, scorer_from):
    entries = [make_entry("a"), make_entry("b"), make_entry("c")]
    scorer = scorer_from({"a": 3, "b": 1, "c": 1})

    default = await distribute_time(entries, 7 / 60, "smart", scorer, settings=test_settings)
    hamilton = await distribute_time(
        entries, 7 / 60, "smart", scorer, remainder_order=by_largest_fraction(7), settings=test_settings
    )

    assert [r.new_minutes for r in default.results] == [5, 1, 1]
    assert [r.new_minutes for r in hamilton.results] == [4, 2, 1]


@pytest.mark.asyncio
async def test_duplicate_ids_rejected_before_scoring(test_settings: Settings):
    scorer = AsyncMock(return_value=[])

    with pytest.raises(DistributionPreconditionError) as exc_info:
        await distribute_time([make_entry("a"), make_entry("a")], 8.0, "smart", scorer, settings=test_settings)
    assert exc_info.value.code == "DUPLICATE_ENTRY_ID"
    scorer.assert_not_awaited()
