"""Remainder distribution policies.

Flooring every proportional share loses less than one minute per entry. The
lost minutes (the remainder) are handed out one at a time, and a policy decides
who gets them first. The policy never changes the total, only which entries
absorb the rounding.

A policy maps the weight vector to an ordering of entry indices. The allocator
gives one extra minute to each of the first `remainder` indices.
"""

from collections.abc import Callable, Sequence

RemainderOrder = Callable[[Sequence[int]], list[int]]


def by_weight_descending(weights: Sequence[int]) -> list[int]:
    """Highest weight first, ties by input position.

    Default policy: rounding leans toward the more complex worklogs.
    """
    return sorted(range(len(weights)), key=lambda i: (-weights[i], i))


def by_input_order(weights: Sequence[int]) -> list[int]:
    """Input position only, as the editor's plain equal split does."""
    return list(range(len(weights)))


def by_largest_fraction(target_minutes: int) -> RemainderOrder:
    """Largest fractional share first (Hamilton apportionment).

    Ties fall back to descending weight, then input position.

    Args:
        target_minutes: Target the shares were computed against

    Returns:
        Policy bound to the given target
    """

    def order(weights: Sequence[int]) -> list[int]:
        total = sum(weights)
        if total <= 0:
            return by_weight_descending(weights)
        # Fraction numerators over the common denominator `total`
        fractions = [(w * target_minutes) % total for w in weights]
        return sorted(range(len(weights)), key=lambda i: (-fractions[i], -weights[i], i))

    return order
