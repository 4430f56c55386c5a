"""Canonical distribution error types.

Two failure classes leave the engine:
- DistributionPreconditionError: the caller supplied unusable input.
  Nothing was computed; fix the input and retry the whole call.
- DistributionInvariantError: the allocator produced an inconsistent result.
  This is a bug in the engine, never a caller mistake.

Standard error codes:
- EMPTY_ENTRIES: No worklogs to distribute
- TOO_MANY_ENTRIES: Batch exceeds the configured ceiling
- DUPLICATE_ENTRY_ID: The same worklog id appears more than once
- TARGET_OUT_OF_RANGE: Target hours not in (0, 24]
- WEIGHT_COUNT_MISMATCH: Weight vector length differs from entry count
- WEIGHT_ENTRY_MISMATCH: Weight at index i is bound to a different entry
- UNKNOWN_MODE: Distribution mode not recognized
- ZERO_TOTAL_WEIGHT: Sum of weights is zero
- SUM_MISMATCH: Allocated minutes do not add up to the target
- UNKNOWN_RESULT_ENTRY: An allocation result refers to a worklog that was not supplied
"""


class DistributionError(Exception):
    """Base exception for all distribution errors.

    Attributes:
        code: Error code (e.g., "EMPTY_ENTRIES", "SUM_MISMATCH")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str] | None = None):
        self.code = code
        self.details = details or []
        super().__init__(f"{code}: {self.details}")


class DistributionPreconditionError(DistributionError, ValueError):
    """Raised when distribution input violates a precondition."""

    pass


class DistributionInvariantError(DistributionError, RuntimeError):
    """Raised when an allocation invariant is violated."""

    pass


class ScoringResponseError(ValueError):
    """Raised when a complexity scoring response cannot be parsed."""

    pass
