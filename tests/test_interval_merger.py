"""
Tests for break window merging.
"""

from slotengine.domain.interval_merger import merge_intervals


class TestMergeIntervals:
    """Tests for merge_intervals."""

    def test_empty_input(self):
        assert merge_intervals([]) == []

    def test_disjoint_windows_are_sorted(self):
        """Unsorted, disjoint windows come back sorted and untouched."""
        assert merge_intervals([(900, 930), (600, 630)]) == [(600, 630), (900, 930)]

    def test_overlapping_windows_merge(self):
        assert merge_intervals([(720, 780), (750, 810)]) == [(720, 810)]

    def test_adjacent_windows_merge(self):
        """Windows that touch are merged into one."""
        assert merge_intervals([(720, 780), (780, 800)]) == [(720, 800)]

    def test_contained_window_keeps_outer_end(self):
        assert merge_intervals([(600, 900), (650, 700)]) == [(600, 900)]

    def test_chain_of_overlaps(self):
        windows = [(810, 840), (720, 750), (740, 800), (800, 815)]
        assert merge_intervals(windows) == [(720, 840)]

    def test_empty_and_reversed_windows_are_dropped(self):
        assert merge_intervals([(720, 720), (800, 780), (600, 630)]) == [(600, 630)]

    def test_result_is_pairwise_disjoint(self):
        merged = merge_intervals([(5, 10), (1, 3), (2, 6), (20, 25), (12, 14)])
        assert merged == [(1, 10), (12, 14), (20, 25)]
        for (_, left_end), (right_start, _) in zip(merged, merged[1:]):
            assert left_end < right_start
