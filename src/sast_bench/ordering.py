"""Partial-order helpers.

Comparisons in this package return an ``Ordering`` when the two values are
comparable and ``None`` when they are not. Keeping the incomparable case
explicit lets the selector compute maximal elements under a partial order
instead of forcing a total one.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from enum import IntEnum
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from sast_bench.models.finding import Region

T = TypeVar("T")


class Ordering(IntEnum):
    """Result of a comparison between two comparable values."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    def reverse(self) -> Ordering:
        """Return the ordering seen from the other operand."""
        return Ordering(-self.value)


def compare(left: Any, right: Any) -> Ordering:
    """Compare two totally ordered values (bools, ints, tuples of those)."""
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL


def is_at_least(ordering: Ordering | None) -> bool:
    """True for EQUAL or GREATER, False for LESS or incomparable."""
    return ordering is not None and ordering >= Ordering.EQUAL


def combine_orderings(orderings: Iterable[Ordering | None]) -> Ordering | None:
    """Combine independent orderings into a single product ordering.

    All EQUAL gives EQUAL. Otherwise every non-EQUAL ordering must point the
    same way; a disagreement or any incomparable component gives None.
    """
    direction = Ordering.EQUAL
    for ordering in orderings:
        if ordering is None:
            return None
        if ordering == Ordering.EQUAL:
            continue
        if direction == Ordering.EQUAL:
            direction = ordering
        elif direction != ordering:
            return None
    return direction


def maximal_elements(
    items: Sequence[T], partial_cmp: Callable[[T, T], Ordering | None]
) -> list[T]:
    """Return the items not strictly dominated by any other item.

    Items keep their input order. Equal and incomparable items are all
    retained; the caller decides how to collapse duplicates.
    """
    maximal = []
    for i, candidate in enumerate(items):
        dominated = False
        for j, other in enumerate(items):
            if i != j and partial_cmp(candidate, other) == Ordering.LESS:
                dominated = True
                break
        if not dominated:
            maximal.append(candidate)
    return maximal


def span_order(start_ord: Ordering, end_ord: Ordering) -> Ordering | None:
    """Order two intervals by containment from their boundary comparisons.

    A wider interval (starts earlier or ends later, and not the reverse on
    the other side) is GREATER; overlapping intervals are incomparable.
    """
    if start_ord == end_ord:
        # Both boundaries moved the same way: shifted, not nested.
        return Ordering.EQUAL if start_ord == Ordering.EQUAL else None
    if start_ord == Ordering.LESS or end_ord == Ordering.GREATER:
        return Ordering.GREATER
    return Ordering.LESS


def _start_column_order(left: int | None, right: int | None) -> Ordering:
    # Column 1 and an unspecified start column both mean "start of line".
    left_key = 1 if left is None else left
    right_key = 1 if right is None else right
    return compare(left_key, right_key)


def _end_column_order(left: int | None, right: int | None) -> Ordering:
    if left is None and right is None:
        return Ordering.EQUAL
    if left is None:
        return Ordering.GREATER
    if right is None:
        return Ordering.LESS
    return compare(left, right)


def region_order(left: Region, right: Region) -> Ordering | None:
    """Order two source regions by containment.

    GREATER means ``left`` covers ``right``; LESS means ``left`` lies inside
    ``right``. Regions that partially overlap, or whose lines nest one way
    while their columns nest the other, are incomparable.
    """
    start_line_ord = compare(left.start_line, right.start_line)
    end_line_ord = compare(left.last_line, right.last_line)
    line_ord = span_order(start_line_ord, end_line_ord)
    if line_ord is None:
        return None

    if line_ord == Ordering.LESS:
        reverse_ord = region_order(right, left)
        return None if reverse_ord is None else reverse_ord.reverse()

    start_column_ord = _start_column_order(left.start_column, right.start_column)
    end_column_ord = _end_column_order(left.end_column, right.end_column)

    if line_ord == Ordering.EQUAL:
        return span_order(start_column_ord, end_column_ord)

    # left spans more lines; a shared boundary line must not be narrower.
    if start_line_ord == Ordering.EQUAL:
        return None if start_column_ord == Ordering.GREATER else Ordering.GREATER
    if end_line_ord == Ordering.EQUAL:
        return None if end_column_ord == Ordering.LESS else Ordering.GREATER
    return Ordering.GREATER
