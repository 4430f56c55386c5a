"""Distribution invariant observability.

Call this before raising DistributionInvariantError.
"""

from loguru import logger

from worklog_engine.distribution.errors import DistributionInvariantError


def log_distribution_invariant_failure(
    err: DistributionInvariantError,
    context: dict[str, str | int | float | bool | None],
) -> None:
    """Log a distribution invariant failure with context.

    Args:
        err: The DistributionInvariantError about to be raised
        context: Additional context dictionary for logging
    """
    logger.error(
        "DISTRIBUTION_INVARIANT_FAILED",
        code=err.code,
        details=err.details,
        **context,
    )
