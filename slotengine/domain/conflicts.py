"""
Forward-only cursors over sorted conflict ranges.

The scanner queries candidate windows in ascending order, so each cursor only
ever moves forward and the whole sweep stays linear in the number of ranges.
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, List, Sequence, Tuple, TypeVar

from .models import Booking, TimeRange

T = TypeVar("T")


class ConflictCursor(Generic[T]):
    """
    Monotonic cursor over half-open ranges sorted by start.

    Ranges may overlap each other. Queries must arrive with non-decreasing
    start values.
    """

    def __init__(self, ranges: Sequence[Tuple[T, T]]):
        self._ranges: List[Tuple[Any, Any]] = sorted(ranges)
        self._index = 0

    @classmethod
    def from_time_ranges(cls, ranges: Iterable[TimeRange]) -> "ConflictCursor":
        """Build a cursor over valid ranges; invalid sentinels never conflict."""
        return cls([(r.start, r.end) for r in ranges if r.valid])

    @classmethod
    def from_bookings(cls, bookings: Iterable[Booking]) -> "ConflictCursor":
        """Build a cursor over bookings that still occupy time."""
        return cls.from_time_ranges(b.time_range for b in bookings if b.is_blocking)

    def __len__(self) -> int:
        return len(self._ranges)

    def blocks(self, start: T, end: T) -> bool:
        """Return True if any range intersects ``[start, end)``."""
        ranges = self._ranges

        while self._index < len(ranges) and ranges[self._index][1] <= start:
            self._index += 1

        for index in range(self._index, len(ranges)):
            range_start, range_end = ranges[index]
            if range_start >= end:
                # Sorted by start: nothing further can reach back.
                return False
            if start < range_end and range_start < end:
                return True

        return False
