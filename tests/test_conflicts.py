"""
Tests for forward-only conflict cursors.
"""

import pendulum

from slotengine.domain.conflicts import ConflictCursor
from slotengine.domain.models import Booking, TimeRange


class TestConflictCursor:
    """Tests for ConflictCursor."""

    def test_touching_ranges_do_not_block(self):
        """Half-open ranges: ending at start or starting at end is not a conflict."""
        cursor = ConflictCursor([(60, 120)])
        assert not cursor.blocks(0, 60)
        assert not cursor.blocks(120, 180)

    def test_overlap_blocks(self):
        cursor = ConflictCursor([(60, 120)])
        assert cursor.blocks(30, 90)

    def test_overlapping_ranges_are_all_considered(self):
        """A short range after a long one must not hide the long one."""
        cursor = ConflictCursor([(0, 100), (10, 20), (30, 40)])
        assert cursor.blocks(50, 60)
        assert not cursor.blocks(100, 110)

    def test_cursor_only_moves_forward(self):
        cursor = ConflictCursor([(10, 20), (30, 40), (50, 60)])
        assert not cursor.blocks(20, 30)
        assert cursor.blocks(35, 45)
        assert not cursor.blocks(60, 70)
        # Ranges already passed are not revisited.
        assert not cursor.blocks(10, 20)

    def test_input_order_does_not_matter(self):
        cursor = ConflictCursor([(50, 60), (10, 20)])
        assert cursor.blocks(15, 16)
        assert cursor.blocks(55, 56)

    def test_from_time_ranges_skips_invalid(self):
        cursor = ConflictCursor.from_time_ranges(
            [TimeRange.invalid(), TimeRange.from_values("2025-12-22T10:00:00Z", "2025-12-22T11:00:00Z")]
        )
        assert len(cursor) == 1
        assert cursor.blocks(
            pendulum.datetime(2025, 12, 22, 10, 30, tz="UTC"),
            pendulum.datetime(2025, 12, 22, 11, 30, tz="UTC"),
        )

    def test_from_bookings_ignores_cancelled(self):
        bookings = [
            Booking.from_dict({"start": "2025-12-22T10:00:00Z", "end": "2025-12-22T11:00:00Z", "status": "cancelled"}),
            Booking.from_dict({"start": "2025-12-22T12:00:00Z", "end": "2025-12-22T13:00:00Z", "status": "confirmed"}),
        ]
        cursor = ConflictCursor.from_bookings(bookings)
        assert len(cursor) == 1
