"""Apply an allocation back to the time tracker.

Caller-side helper. Every worklog is written independently: one failed write
does not roll back or block the others, and the in-memory allocation stays
valid for the entries that did succeed.

A minimum-duration floor may be applied here. It is policy, not math: raising
short entries to the floor can push the total above the target, which is why
the allocator itself never applies it.
"""

import asyncio
from collections.abc import Sequence

from loguru import logger

from worklog_engine.distribution.errors import DistributionPreconditionError
from worklog_engine.distribution.models import AllocationResult, ApplyReport, TimeEntry, WorklogWriter


def _pair_results(entries: Sequence[TimeEntry], results: Sequence[AllocationResult]) -> list[tuple[TimeEntry, AllocationResult]]:
    result_ids = [r.entry_id for r in results]
    repeated = sorted({entry_id for entry_id in result_ids if result_ids.count(entry_id) > 1})
    if repeated:
        raise DistributionPreconditionError(
            "DUPLICATE_ENTRY_ID",
            [f"More than one allocation result for {entry_id!r}" for entry_id in repeated],
        )

    by_id = {entry.id: entry for entry in entries}
    missing = [r.entry_id for r in results if r.entry_id not in by_id]
    if missing:
        raise DistributionPreconditionError(
            "UNKNOWN_RESULT_ENTRY",
            [f"No worklog for allocation result {entry_id!r}" for entry_id in missing],
        )
    return [(by_id[r.entry_id], r) for r in results]


async def apply_allocation(
    entries: Sequence[TimeEntry],
    results: Sequence[AllocationResult],
    writer: WorklogWriter,
    *,
    min_seconds: int = 0,
) -> ApplyReport:
    """Write new durations for every changed worklog.

    Args:
        entries: Worklogs the allocation was computed for
        results: Allocation results
        writer: Async callable persisting (entry, new_seconds)
        min_seconds: Minimum duration per worklog, 0 disables the floor

    Returns:
        ApplyReport listing applied, skipped (unchanged) and failed entries

    Raises:
        DistributionPreconditionError: If a result refers to an unknown worklog
            or a worklog has more than one result
    """
    pairs = _pair_results(entries, results)
    report = ApplyReport()

    planned: list[tuple[TimeEntry, int]] = []
    for entry, result in pairs:
        new_seconds = max(min_seconds, result.new_seconds)
        if new_seconds == entry.current_seconds:
            report.skipped.append(entry.id)
        else:
            planned.append((entry, new_seconds))

    floored_total = sum(max(min_seconds, r.new_seconds) for _, r in pairs)
    allocated_total = sum(r.new_seconds for _, r in pairs)
    if floored_total != allocated_total:
        logger.warning(
            "Minimum duration floor changes the distributed total",
            min_seconds=min_seconds,
            allocated_seconds=allocated_total,
            written_seconds=floored_total,
        )

    outcomes = await asyncio.gather(
        *(writer(entry, new_seconds) for entry, new_seconds in planned),
        return_exceptions=True,
    )

    for (entry, new_seconds), outcome in zip(planned, outcomes, strict=True):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            report.failed[entry.id] = str(outcome) or type(outcome).__name__
            logger.error(
                "Worklog update failed",
                entry_id=entry.id,
                group_key=entry.group_key,
                new_seconds=new_seconds,
                error_type=type(outcome).__name__,
                error_message=str(outcome),
            )
        else:
            report.applied.append(entry.id)

    logger.info(
        "Allocation applied",
        applied=len(report.applied),
        skipped=len(report.skipped),
        failed=len(report.failed),
    )

    return report
