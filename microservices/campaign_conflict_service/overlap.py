"""
Date window arithmetic shared by the schedule and budget checks.

Day counts are the absolute length of the intersection rounded up to
whole days, so any partial day counts as a full one.
"""

from datetime import datetime, timedelta

_DAY = timedelta(days=1)


def _ceil_days(delta: timedelta) -> int:
    # Integer arithmetic on microseconds avoids float rounding at day edges
    microseconds = abs(delta) // timedelta(microseconds=1)
    per_day = _DAY // timedelta(microseconds=1)
    return -(-microseconds // per_day)


def windows_intersect(
    start1: datetime, end1: datetime, start2: datetime, end2: datetime
) -> bool:
    """Closed-interval intersection test"""
    return max(start1, start2) <= min(end1, end2)


def calculate_overlap_days(
    start1: datetime, end1: datetime, start2: datetime, end2: datetime
) -> int:
    """
    Number of days two windows overlap.

    Returns 0 when the windows are disjoint or either one is inverted.
    Touching windows (one ends exactly when the other starts) overlap
    for 0 days.
    """
    overlap_start = max(start1, start2)
    overlap_end = min(end1, end2)
    if overlap_start > overlap_end:
        return 0
    return _ceil_days(overlap_end - overlap_start)


def duration_days(start: datetime, end: datetime) -> int:
    """Length of a single window in whole days, rounded up"""
    return _ceil_days(end - start)


__all__ = ["windows_intersect", "calculate_overlap_days", "duration_days"]
