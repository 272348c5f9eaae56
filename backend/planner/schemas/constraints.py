from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from planner.schemas.slot import Frequency, Weekday, normalize_weekday


class WeekRole(str, Enum):
    odd = "odd"
    even = "even"


def occupied_roles(frequency: Frequency) -> tuple[WeekRole, ...]:
    if frequency == Frequency.odd:
        return (WeekRole.odd,)
    if frequency == Frequency.even:
        return (WeekRole.even,)
    return (WeekRole.odd, WeekRole.even)


class BusyInterval(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    start: int = Field(alias="from", ge=0, le=24)
    end: int = Field(alias="to", ge=0, le=24)

    @model_validator(mode="after")
    def validate_order(self) -> "BusyInterval":
        if self.end <= self.start:
            raise ValueError("Busy interval 'to' must be after 'from'")
        return self

    def intersects(self, start: int, end: int) -> bool:
        return max(start, self.start) < min(end, self.end)


DayIntervals = dict[Weekday, list[BusyInterval]]


def _normalize_day_intervals(value: Any) -> Any:
    if value is None:
        return {}
    if not isinstance(value, dict):
        return value
    normalized: dict[Any, list[Any]] = {}
    for day, intervals in value.items():
        if intervals is None:
            continue
        # Older records store a single {from, to} object per day.
        if isinstance(intervals, (dict, BusyInterval)):
            intervals = [intervals]
        normalized.setdefault(normalize_weekday(day), []).extend(intervals)
    return normalized


class FreeTimeConstraints(BaseModel):
    """Busy hours the student wants kept clear, one map per week role."""

    model_config = ConfigDict(populate_by_name=True)

    odd: DayIntervals = Field(default_factory=dict, alias="oddFreeIntervals")
    even: DayIntervals = Field(default_factory=dict, alias="evenFreeIntervals")

    @field_validator("odd", "even", mode="before")
    @classmethod
    def normalize_intervals(cls, value: Any) -> Any:
        return _normalize_day_intervals(value)

    def intervals_for(self, role: WeekRole, day: Weekday) -> list[BusyInterval]:
        source = self.odd if role == WeekRole.odd else self.even
        return source.get(day, [])

    def mirrored(self) -> "FreeTimeConstraints":
        return FreeTimeConstraints(
            odd={day: list(items) for day, items in self.odd.items()},
            even={day: list(items) for day, items in self.odd.items()},
        )

    def is_empty(self) -> bool:
        return not any(self.odd.values()) and not any(self.even.values())
