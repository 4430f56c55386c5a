"""Time distribution service.

Entry point used by the API and CLI:
1. Validate the request (no scorer call on bad input)
2. Resolve weights (equal or smart)
3. Allocate integer minutes
4. Log a summary of target vs allocated time

Nothing is written back; see apply.py for the caller-side write helper.
"""

from collections.abc import Sequence

from loguru import logger

from worklog_engine.config.settings import Settings
from worklog_engine.config.settings import settings as default_settings
from worklog_engine.distribution.allocator import allocate, validate_distribution_request
from worklog_engine.distribution.models import (
    DistributionMode,
    DistributionOutcome,
    ScoreFn,
    TimeEntry,
)
from worklog_engine.distribution.policies import RemainderOrder, by_weight_descending
from worklog_engine.distribution.rounding import hours_to_minutes
from worklog_engine.distribution.weights import parse_mode, resolve_weights
from worklog_engine.scoring.llm_scorer import build_llm_scorer


async def distribute_time(
    entries: Sequence[TimeEntry],
    target_hours: float,
    mode: DistributionMode | str,
    scorer: ScoreFn | None = None,
    *,
    remainder_order: RemainderOrder = by_weight_descending,
    settings: Settings | None = None,
) -> DistributionOutcome:
    """Distribute target hours across worklogs.

    Args:
        entries: Worklogs to distribute across
        target_hours: Desired total (e.g., 8.05)
        mode: "equal" or "smart"
        scorer: Complexity scorer for smart mode. Defaults to the configured
            LLM scorer.
        remainder_order: Remainder tie-break policy
        settings: Settings override, mainly for tests

    Returns:
        DistributionOutcome with per-entry results and the weights used

    Raises:
        DistributionPreconditionError: If the request is invalid
        DistributionInvariantError: If the allocation is internally inconsistent
    """
    cfg = settings or default_settings
    resolved_mode = parse_mode(mode)
    validate_distribution_request(entries, target_hours, cfg.max_batch_size)

    target_minutes = hours_to_minutes(target_hours)
    logger.info(
        "Distributing time",
        target_hours=target_hours,
        target_minutes=target_minutes,
        entries=len(entries),
        mode=resolved_mode.value,
    )

    if resolved_mode == DistributionMode.SMART and scorer is None:
        scorer = build_llm_scorer(cfg)

    resolution = await resolve_weights(
        entries,
        resolved_mode,
        scorer,
        timeout=cfg.scoring_timeout_seconds,
        chars_per_point=cfg.fallback_chars_per_point,
    )

    results = allocate(
        entries,
        target_hours,
        resolution.weights,
        remainder_order=remainder_order,
        max_entries=cfg.max_batch_size,
    )

    outcome = DistributionOutcome(
        mode=resolved_mode,
        target_hours=target_hours,
        target_minutes=target_minutes,
        results=results,
        weights=resolution.weights,
        used_fallback=resolution.used_fallback,
        warnings=resolution.warnings,
    )

    total_seconds = sum(r.new_seconds for r in results)
    logger.info(
        "Distribution summary",
        target_hours=target_hours,
        actual_hours=outcome.total_hours,
        target_seconds=target_minutes * 60,
        actual_seconds=total_seconds,
        used_fallback=resolution.used_fallback,
    )

    return outcome
