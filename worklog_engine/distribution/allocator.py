"""Proportional Allocator - Math Core.

Splits a target duration across worklogs in whole minutes so that the
allocation adds up to the target exactly.

Minutes are the only currency here. Hours are converted once, at the boundary,
and everything after that is integer arithmetic:

    share_i   = floor(weight_i * target_minutes / total_weight)
    remainder = target_minutes - sum(share_i)        # 0 <= remainder < n
    top up `remainder` entries by one minute, in policy order

Rounding each share independently can drift the total by several minutes when
many small entries round the same way. Floor-then-top-up is exact by
construction.
"""

import math
from collections.abc import Sequence

from loguru import logger

from worklog_engine.distribution.errors import DistributionInvariantError, DistributionPreconditionError
from worklog_engine.distribution.logging import log_distribution_invariant_failure
from worklog_engine.distribution.models import AllocationResult, TimeEntry, Weight
from worklog_engine.distribution.policies import RemainderOrder, by_weight_descending
from worklog_engine.distribution.rounding import hours_to_minutes

MAX_TARGET_HOURS = 24
MAX_BATCH_SIZE = 50


def validate_distribution_request(
    entries: Sequence[TimeEntry],
    target_hours: float,
    max_entries: int = MAX_BATCH_SIZE,
) -> None:
    """Reject unusable distribution input before any work is done.

    Args:
        entries: Worklogs to distribute across
        target_hours: Desired total in hours
        max_entries: Batch ceiling

    Raises:
        DistributionPreconditionError: If any precondition is violated
    """
    if not entries:
        raise DistributionPreconditionError("EMPTY_ENTRIES", ["No worklogs to distribute"])

    if len(entries) > max_entries:
        raise DistributionPreconditionError(
            "TOO_MANY_ENTRIES",
            [f"Too many worklogs: {len(entries)} (max {max_entries})"],
        )

    seen: set[str] = set()
    duplicates: list[str] = []
    for entry in entries:
        if entry.id in seen and entry.id not in duplicates:
            duplicates.append(entry.id)
        seen.add(entry.id)
    if duplicates:
        raise DistributionPreconditionError(
            "DUPLICATE_ENTRY_ID",
            [f"Worklog {entry_id!r} appears more than once" for entry_id in duplicates],
        )

    if (
        isinstance(target_hours, bool)
        or not isinstance(target_hours, (int, float))
        or not math.isfinite(target_hours)
        or target_hours <= 0
        or target_hours > MAX_TARGET_HOURS
    ):
        raise DistributionPreconditionError(
            "TARGET_OUT_OF_RANGE",
            [f"Target hours must be greater than 0 and at most {MAX_TARGET_HOURS}, got {target_hours!r}"],
        )


def _validate_weights(entries: Sequence[TimeEntry], weights: Sequence[Weight]) -> None:
    if len(weights) != len(entries):
        raise DistributionPreconditionError(
            "WEIGHT_COUNT_MISMATCH",
            [f"Expected {len(entries)} weights, got {len(weights)}"],
        )

    mismatched = [
        f"index {i}: weight for {weight.entry_id!r}, entry {entry.id!r}"
        for i, (entry, weight) in enumerate(zip(entries, weights, strict=True))
        if weight.entry_id != entry.id
    ]
    if mismatched:
        raise DistributionPreconditionError("WEIGHT_ENTRY_MISMATCH", mismatched)


def split_minutes(
    target_minutes: int,
    weights: Sequence[int],
    remainder_order: RemainderOrder = by_weight_descending,
) -> list[int]:
    """Split whole minutes proportionally to integer weights.

    Args:
        target_minutes: Minutes to hand out (>= 0)
        weights: Positive integer weights, one per slot
        remainder_order: Policy ordering the remainder top-up

    Returns:
        Minutes per slot, same order as weights, summing to target_minutes

    Raises:
        DistributionInvariantError: If weights sum to zero or the split
            does not add up to the target
    """
    total_weight = sum(weights)
    if total_weight <= 0:
        err = DistributionInvariantError("ZERO_TOTAL_WEIGHT", [f"Total weight is {total_weight}"])
        log_distribution_invariant_failure(err, {"target_minutes": target_minutes, "slots": len(weights)})
        raise err

    shares = [(weight * target_minutes) // total_weight for weight in weights]
    distributed = sum(shares)
    remainder = target_minutes - distributed

    logger.debug(
        "Initial distribution",
        distributed=distributed,
        target_minutes=target_minutes,
        remainder=remainder,
    )

    if remainder > 0:
        order = remainder_order(weights)
        for index in order[:remainder]:
            shares[index] += 1
        logger.debug("Remainder distributed", remainder=remainder, recipients=order[:remainder])

    final_total = sum(shares)
    if final_total != target_minutes or any(share < 0 for share in shares):
        err = DistributionInvariantError(
            "SUM_MISMATCH",
            [f"Allocated {final_total} minutes, target {target_minutes}"],
        )
        log_distribution_invariant_failure(
            err,
            {
                "target_minutes": target_minutes,
                "allocated_minutes": final_total,
                "difference": abs(target_minutes - final_total),
            },
        )
        raise err

    return shares


def allocate(
    entries: Sequence[TimeEntry],
    target_hours: float,
    weights: Sequence[Weight],
    *,
    remainder_order: RemainderOrder = by_weight_descending,
    max_entries: int = MAX_BATCH_SIZE,
) -> list[AllocationResult]:
    """Allocate target hours across worklogs proportionally to their weights.

    Args:
        entries: Worklogs to reallocate (read only)
        target_hours: Desired total, 0 < target_hours <= 24
        weights: One weight per entry, same order
        remainder_order: Remainder tie-break policy
        max_entries: Batch ceiling

    Returns:
        One AllocationResult per entry, same order. new_minutes sums to
        round(target_hours * 60) exactly.

    Raises:
        DistributionPreconditionError: If input is invalid
        DistributionInvariantError: If the allocation is internally inconsistent
    """
    validate_distribution_request(entries, target_hours, max_entries)
    _validate_weights(entries, weights)

    target_minutes = hours_to_minutes(target_hours)
    minutes = split_minutes(target_minutes, [w.value for w in weights], remainder_order)

    logger.debug(
        "Allocation verified",
        target_hours=target_hours,
        target_minutes=target_minutes,
        entries=len(entries),
    )

    return [AllocationResult.from_entry(entry, new_minutes) for entry, new_minutes in zip(entries, minutes, strict=True)]
