"""Fallback complexity scoring.

Deterministic scoring used when the complexity scorer fails. The comment
length is the only signal: a longer comment suggests more work. The mapping
is an uncalibrated proxy, kept monotonic in length and clamped to [1, 10].
"""

import math

from loguru import logger

from worklog_engine.distribution.models import MAX_WEIGHT, MIN_WEIGHT, TimeEntry, Weight, WeightSource

DEFAULT_CHARS_PER_POINT = 20


def comment_length_score(comment_text: str, chars_per_point: int = DEFAULT_CHARS_PER_POINT) -> int:
    """Score a comment by length.

    Args:
        comment_text: Worklog comment
        chars_per_point: Characters per complexity point

    Returns:
        ceil(len / chars_per_point), clamped to [1, 10]
    """
    raw = math.ceil(len(comment_text or "") / chars_per_point)
    return max(MIN_WEIGHT, min(MAX_WEIGHT, raw))


def heuristic_weights(entries: list[TimeEntry], chars_per_point: int = DEFAULT_CHARS_PER_POINT) -> list[Weight]:
    weights = [
        Weight(
            entry_id=entry.id,
            value=comment_length_score(entry.comment_text, chars_per_point),
            source=WeightSource.HEURISTIC,
        )
        for entry in entries
    ]
    logger.info(
        "Fallback weights generated from comment length",
        entries=len(entries),
        chars_per_point=chars_per_point,
    )
    return weights
