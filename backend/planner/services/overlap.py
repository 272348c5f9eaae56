from __future__ import annotations

from planner.schemas.slot import Frequency, Slot


def is_complementary_parity(a: Frequency, b: Frequency) -> bool:
    return {a, b} == {Frequency.odd, Frequency.even}


def time_ranges_intersect(start_a: float, end_a: float, start_b: float, end_b: float) -> bool:
    return max(start_a, start_b) < min(end_a, end_b)


def slots_overlap(a: Slot, b: Slot) -> bool:
    """Two slots clash when they share a day and hours, unless one runs only in
    odd weeks and the other only in even weeks.

    Week-range availability is resolved by the caller before this check.
    """
    if a.day != b.day:
        return False
    if not time_ranges_intersect(a.start, a.end, b.start, b.end):
        return False
    return not is_complementary_parity(a.frequency, b.frequency)
