"""Weight Resolver.

Produces one weight in [1, 10] per worklog, in input order:
- equal mode: every worklog weighs 1
- smart mode: weights come from an injected complexity scorer, sanitized
  (missing ids default to 5, scores rounded and clamped). If the scorer fails
  outright, comment-length scoring takes over.

The resolver never raises because of the scorer. Failures are logged as
warnings and reported on the returned WeightResolution.
"""

import asyncio
import math
from collections.abc import Mapping, Sequence

from loguru import logger

from worklog_engine.distribution.errors import DistributionPreconditionError
from worklog_engine.distribution.fallback import DEFAULT_CHARS_PER_POINT, heuristic_weights
from worklog_engine.distribution.models import (
    MAX_WEIGHT,
    MIN_WEIGHT,
    NEUTRAL_WEIGHT,
    ComplexityScore,
    DistributionMode,
    ScoreFn,
    ScoringItem,
    TimeEntry,
    Weight,
    WeightResolution,
    WeightSource,
)
from worklog_engine.distribution.rounding import round_half_up


def parse_mode(mode: DistributionMode | str) -> DistributionMode:
    """Normalize a distribution mode.

    Raises:
        DistributionPreconditionError: If the mode is not recognized
    """
    try:
        return DistributionMode(mode)
    except ValueError as e:
        raise DistributionPreconditionError(
            "UNKNOWN_MODE",
            [f"Unknown distribution mode {mode!r}. Valid modes: {', '.join(m.value for m in DistributionMode)}"],
        ) from e


def clamp_score(score: float) -> int:
    """Round a raw score to the nearest integer and clamp it into [1, 10]."""
    return max(MIN_WEIGHT, min(MAX_WEIGHT, round_half_up(score)))


def _coerce_score(raw: object) -> float | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None
    return value if math.isfinite(value) else None


def _extract_pair(item: object) -> tuple[str, object] | None:
    if isinstance(item, ComplexityScore):
        return item.id, item.score
    if isinstance(item, Mapping):
        item_id = item.get("id")
        if item_id is None:
            return None
        return str(item_id), item.get("score")
    return None


def _collect_scores(response: Sequence[object]) -> tuple[dict[str, float], list[str]]:
    """Index usable scores by worklog id.

    The first occurrence of an id wins; malformed items are dropped.
    """
    scores: dict[str, float] = {}
    problems: list[str] = []

    for item in response:
        pair = _extract_pair(item)
        if pair is None:
            problems.append(f"Ignored malformed score item: {item!r}")
            continue
        item_id, raw_score = pair
        if item_id in scores:
            continue
        score = _coerce_score(raw_score)
        if score is None:
            problems.append(f"Ignored non-numeric score for {item_id}: {raw_score!r}")
            continue
        scores[item_id] = score

    return scores, problems


def _uniform(entries: Sequence[TimeEntry]) -> WeightResolution:
    return WeightResolution(
        mode=DistributionMode.EQUAL,
        weights=[Weight(entry_id=entry.id, value=MIN_WEIGHT, source=WeightSource.UNIFORM) for entry in entries],
    )


def _fallback(entries: Sequence[TimeEntry], reason: str, chars_per_point: int) -> WeightResolution:
    logger.warning("Using fallback: comment length as complexity", reason=reason)
    return WeightResolution(
        mode=DistributionMode.SMART,
        weights=heuristic_weights(list(entries), chars_per_point),
        used_fallback=True,
        warnings=[f"Complexity scoring failed, weights derived from comment length: {reason}"],
    )


async def resolve_weights(
    entries: Sequence[TimeEntry],
    mode: DistributionMode | str,
    scorer: ScoreFn | None,
    *,
    timeout: float | None = None,
    chars_per_point: int = DEFAULT_CHARS_PER_POINT,
) -> WeightResolution:
    """Resolve one weight per worklog.

    Args:
        entries: Worklogs to weigh
        mode: "equal" or "smart" ("ai" is accepted for smart)
        scorer: Async complexity scorer, called once in smart mode
        timeout: Seconds to wait for the scorer, None waits indefinitely
        chars_per_point: Comment-length fallback calibration

    Returns:
        WeightResolution with exactly len(entries) weights, in input order

    Raises:
        DistributionPreconditionError: If the mode is unknown
    """
    resolved_mode = parse_mode(mode)

    if resolved_mode == DistributionMode.EQUAL:
        return _uniform(entries)

    if not entries:
        return WeightResolution(mode=resolved_mode, weights=[])

    if scorer is None:
        return _fallback(entries, "no complexity scorer configured", chars_per_point)

    items = [ScoringItem.from_entry(entry) for entry in entries]

    try:
        if timeout is not None:
            response = await asyncio.wait_for(scorer(items), timeout=timeout)
        else:
            response = await scorer(items)
    except TimeoutError as e:
        logger.warning("Complexity scoring timed out", timeout_seconds=timeout, entries=len(entries))
        return _fallback(entries, f"scorer timed out: {e}" if str(e) else "scorer timed out", chars_per_point)
    except Exception as e:
        logger.warning(
            "Complexity scoring failed",
            error_type=type(e).__name__,
            error_message=str(e),
            entries=len(entries),
        )
        return _fallback(entries, f"{type(e).__name__}: {e}", chars_per_point)

    if isinstance(response, (str, bytes, Mapping)) or not isinstance(response, Sequence):
        return _fallback(entries, f"scorer returned {type(response).__name__}, expected a list", chars_per_point)

    scores, warnings = _collect_scores(response)

    weights: list[Weight] = []
    missing: list[str] = []
    for entry in entries:
        if entry.id in scores:
            weights.append(Weight(entry_id=entry.id, value=clamp_score(scores[entry.id]), source=WeightSource.SCORED))
        else:
            missing.append(entry.id)
            weights.append(Weight(entry_id=entry.id, value=NEUTRAL_WEIGHT, source=WeightSource.DEFAULTED))

    if missing:
        warnings.append(f"No usable score for {len(missing)} worklog(s), defaulted to {NEUTRAL_WEIGHT}: {', '.join(missing)}")

    for warning in warnings:
        logger.warning("Complexity scoring response issue", detail=warning)

    logger.info(
        "Complexity scores resolved",
        scores=", ".join(f"{w.entry_id[-4:]}: {w.value}" for w in weights),
        defaulted=len(missing),
    )

    return WeightResolution(mode=resolved_mode, weights=weights, warnings=warnings)
