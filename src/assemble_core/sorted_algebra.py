"""Set algebra over sequences that are already sorted ascending.

Every merge-style operation here trusts the caller's ordering. Unsorted
input is not detected and yields wrong answers rather than errors.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")
Comparator = Callable[[Any, Any], int]


def natural_compare(left: Any, right: Any) -> int:
    """Three-way comparison using the elements' natural ordering."""
    if left < right:
        return -1
    if right < left:
        return 1
    return 0


def compare(a: Sequence[T] | None, b: Sequence[T] | None) -> int:
    """Compare two sequences lexicographically.

    ``None`` sorts before any sequence and ``None`` elements sort before any
    present element. When one sequence is a prefix of the other, the shorter
    one sorts first. The result is zero exactly when both sequences hold equal
    elements in the same order.

    Lists and tuples are both accepted; a tuple compares equal to a list with
    the same elements.
    """
    if a is b:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1

    for left, right in zip(a, b):
        if left is right:
            continue
        if left is None:
            return -1
        if right is None:
            return 1
        comparison = natural_compare(left, right)
        if comparison != 0:
            return comparison

    return len(a) - len(b)


def contains_all(
    a: Sequence[T],
    b: Sequence[T],
    comparator: Comparator | None = None,
) -> bool:
    """Return whether sorted ``a`` holds every element of sorted ``b``.

    ``comparator`` replaces natural ordering when given; both sequences must
    be sorted by the same order it implements.
    """
    if a is None or b is None:
        raise ValueError("contains_all requires two sequences, got None")
    cmp = comparator or natural_compare

    i = 0
    j = 0
    while True:
        if j == len(b):
            return True
        if i == len(a):
            return False

        comparison = cmp(a[i], b[j])
        if comparison > 0:
            return False

        i += 1
        if comparison == 0:
            j += 1


def retain(a: Sequence[T], b: Sequence[T]) -> list[T]:
    """Intersect two sorted sequences, keeping the elements taken from ``a``.

    Returns an empty list when nothing is shared.
    """
    if a is None or b is None:
        raise ValueError("retain requires two sequences, got None")

    retained: list[T] = []
    i = 0
    j = 0
    while i < len(a) and j < len(b):
        left = a[i]
        right = b[j]
        comparison = 0 if left is right else natural_compare(left, right)
        if comparison == 0:
            retained.append(left)
            i += 1
            j += 1
        elif comparison < 0:
            i += 1
        else:
            j += 1
    return retained


def sort(values: Sequence[T] | None) -> list[T] | None:
    if values is None:
        return None
    return sorted(values)
