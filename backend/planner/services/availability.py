from __future__ import annotations

from typing import Iterable

from planner.schemas.calendar import WeekPair
from planner.schemas.slot import (
    AllWeeks,
    Frequency,
    SingleWeek,
    Slot,
    WeekSet,
    WeekSpan,
    parse_week_range,
)


def is_active_in_week(weeks, week: int | None) -> bool:
    """Whether a week range covers ``week``.

    Raw catalog strings are accepted and parsed on the fly. Absent ranges,
    a missing week and any unrecognised value count as active.
    """
    if weeks is None or not week:
        return True
    if isinstance(weeks, str):
        weeks = parse_week_range(weeks)
    if isinstance(weeks, AllWeeks):
        return True
    if isinstance(weeks, WeekSpan):
        return weeks.lo <= week <= weeks.hi
    if isinstance(weeks, WeekSet):
        return week in weeks.weeks
    if isinstance(weeks, SingleWeek):
        return weeks.week == week
    return True


def is_active_in_pair(weeks, odd_week: int, even_week: int) -> bool:
    return is_active_in_week(weeks, odd_week) or is_active_in_week(weeks, even_week)


def slot_active_in_pair(slot: Slot, pair: WeekPair) -> bool:
    return is_active_in_pair(slot.weeks, pair.odd_week, pair.even_week)


def frequency_matches_week(frequency: Frequency, week: int) -> bool:
    if frequency == Frequency.odd:
        return week % 2 == 1
    if frequency == Frequency.even:
        return week % 2 == 0
    return True


def visible_in_week(slot: Slot, week: int) -> bool:
    return is_active_in_week(slot.weeks, week) and frequency_matches_week(slot.frequency, week)


def visible_slots(schedule: Iterable[Slot], week: int) -> list[Slot]:
    return [slot for slot in schedule if visible_in_week(slot, week)]
