from __future__ import annotations

from datetime import date, datetime

from planner.core.config import get_settings
from planner.schemas.calendar import WeekInfo, WeekPair

DEFAULT_SEMESTER_WEEKS = 14


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def current_week(
    today: date | datetime | None = None,
    semester_start: date | None = None,
    *,
    total_weeks: int | None = None,
) -> int:
    settings = get_settings()
    today = _as_date(today or date.today())
    semester_start = semester_start or settings.semester_start_date
    total_weeks = total_weeks or settings.semester_weeks

    week_number = (today - semester_start).days // 7 + 1
    return min(max(week_number, 1), total_weeks)


def current_week_info(
    today: date | datetime | None = None,
    semester_start: date | None = None,
    *,
    total_weeks: int | None = None,
) -> WeekInfo:
    week_number = current_week(today, semester_start, total_weeks=total_weeks)
    return WeekInfo(week_number=week_number, is_odd=week_number % 2 == 1)


def week_pair_of(week_number: int) -> WeekPair:
    odd_week = week_number if week_number % 2 == 1 else week_number - 1
    return WeekPair(odd_week=odd_week, even_week=odd_week + 1)


def week_pairs(total_weeks: int = DEFAULT_SEMESTER_WEEKS) -> list[WeekPair]:
    return [WeekPair(odd_week=2 * i + 1, even_week=2 * i + 2) for i in range(total_weeks // 2)]


WEEK_PAIRS: tuple[WeekPair, ...] = tuple(week_pairs())


def week_pair_index(pair: WeekPair, pairs: tuple[WeekPair, ...] | list[WeekPair] = WEEK_PAIRS) -> int:
    for index, candidate in enumerate(pairs):
        if candidate.odd_week == pair.odd_week:
            return index
    return 0
