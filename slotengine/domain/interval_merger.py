"""
Merging of local minute-offset windows.
"""

from typing import Iterable, List, Tuple

Interval = Tuple[int, int]


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Merge overlapping or adjacent ``[start, end)`` windows.

    Empty or reversed windows contain no time and are dropped.

    Example: [(720, 780), (600, 660), (660, 700)] -> [(600, 700), (720, 780)]
    """
    ordered = sorted((start, end) for start, end in intervals if end > start)
    if not ordered:
        return []

    merged: List[Interval] = [ordered[0]]

    for start, end in ordered[1:]:
        last_start, last_end = merged[-1]

        if start <= last_end:
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))

    return merged
