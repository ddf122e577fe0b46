"""
Random subset selection for variable-size nested lists.

Used by the entity factories for permits, order types and package tags.
"""

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """
    Return a shuffled copy of items (Fisher-Yates).

    Walks i from the last index down to 1 and swaps position i with a
    uniformly chosen index in [0, i]. The input is not modified.
    """
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def random_subset(items: Sequence[T], rng: random.Random) -> list[T]:
    """
    Pick a random non-empty subset of items without replacement.

    The subset size is uniform in [1, len(items)]. Order of the returned
    elements is random.

    Args:
        items: Candidate elements (must be non-empty)
        rng: Random source, usually Faker.random

    Returns:
        New list of 1..len(items) elements of items, each at most once

    Raises:
        ValueError: If items is empty
    """
    if not items:
        raise ValueError("random_subset() requires at least one candidate")

    count = rng.randint(1, len(items))
    return shuffled(items, rng)[:count]
