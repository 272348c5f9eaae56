from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class Weekday(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"


WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)

DAY_ALIASES = {
    "mon": Weekday.monday,
    "tue": Weekday.tuesday,
    "wed": Weekday.wednesday,
    "thu": Weekday.thursday,
    "fri": Weekday.friday,
    "luni": Weekday.monday,
    "marti": Weekday.tuesday,
    "marți": Weekday.tuesday,
    "miercuri": Weekday.wednesday,
    "joi": Weekday.thursday,
    "vineri": Weekday.friday,
}


class SessionType(str, Enum):
    lecture = "lecture"
    lab = "lab"
    project = "project"
    seminar = "seminar"


SESSION_TYPE_ALIASES = {
    "curs": SessionType.lecture,
    "course": SessionType.lecture,
    "proiect": SessionType.project,
    "sem": SessionType.seminar,
}


class Frequency(str, Enum):
    weekly = "weekly"
    odd = "odd"
    even = "even"


def normalize_weekday(value: Any) -> Any:
    if isinstance(value, Weekday) or not isinstance(value, str):
        return value
    cleaned = value.strip()
    lowered = cleaned.lower()
    if lowered in DAY_ALIASES:
        return DAY_ALIASES[lowered]
    for day in WEEKDAYS:
        if day.value.lower() == lowered:
            return day
    return cleaned


def normalize_session_type(value: Any) -> Any:
    if isinstance(value, SessionType) or not isinstance(value, str):
        return value
    lowered = value.strip().lower()
    return SESSION_TYPE_ALIASES.get(lowered, lowered)


class AllWeeks(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["all"] = "all"


class WeekSpan(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["span"] = "span"
    lo: int = Field(ge=1)
    hi: int = Field(ge=1)


class WeekSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["set"] = "set"
    weeks: frozenset[int]


class SingleWeek(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    week: int = Field(ge=1)


WeekRange = Annotated[Union[AllWeeks, WeekSpan, WeekSet, SingleWeek], Field(discriminator="kind")]

_SPAN_PATTERN = re.compile(r"^s?(\d+)-s?(\d+)$")
_SET_PATTERN = re.compile(r"^s?\d+(?:,s?\d+)+$")
_SINGLE_PATTERN = re.compile(r"^s?(\d+)$")
_LABEL_PATTERN = re.compile(r"^(.*\S)\s*\(([^)]+)\)$")


def parse_week_range(value: str | None) -> AllWeeks | WeekSpan | WeekSet | SingleWeek:
    """Parse catalog week text ("all", "s1-7", "s1,s3", "s5") into a week range.

    Anything unrecognised parses as all weeks so that a typo in the catalog
    never hides a section.
    """
    if value is None:
        return AllWeeks()
    text = re.sub(r"\s", "", value.lower())
    if not text or text == "all":
        return AllWeeks()

    match = _SPAN_PATTERN.match(text)
    if match:
        lo, hi = int(match.group(1)), int(match.group(2))
        if 1 <= lo <= hi:
            return WeekSpan(lo=lo, hi=hi)
    elif _SET_PATTERN.match(text):
        weeks = frozenset(int(part.lstrip("s")) for part in text.split(","))
        if min(weeks) >= 1:
            return WeekSet(weeks=weeks)
    else:
        match = _SINGLE_PATTERN.match(text)
        if match and int(match.group(1)) >= 1:
            return SingleWeek(week=int(match.group(1)))

    logger.warning("Unrecognised week range treated as all weeks | value=%r", value)
    return AllWeeks()


class SubjectKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str = Field(min_length=1, max_length=100)
    type: SessionType

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return normalize_session_type(value)

    @property
    def label(self) -> str:
        return f"{self.subject} ({self.type.value})"

    @classmethod
    def parse(cls, label: str) -> "SubjectKey":
        match = _LABEL_PATTERN.match(label.strip())
        if match is None:
            raise ValueError(f"Subject key must look like 'SUBJECT (type)': {label!r}")
        return cls(subject=match.group(1), type=match.group(2))

    def __str__(self) -> str:
        return self.label


class Slot(BaseModel):
    """One concrete offering of a subject section, as read from the catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: str = Field(min_length=1, max_length=100)
    type: SessionType
    day: Weekday
    start: int = Field(ge=0, le=24)
    end: int = Field(ge=0, le=24)
    room: str = ""
    weeks: WeekRange = Field(default_factory=AllWeeks, validation_alias=AliasChoices("weeks", "weeksActive"))
    frequency: Frequency = Frequency.weekly
    group_id: str | None = Field(default=None, alias="groupId", max_length=50)
    full_name: str | None = Field(default=None, alias="fullName", max_length=200)
    professor: str | None = Field(default=None, alias="prof", max_length=200)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return normalize_session_type(value)

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value: Any) -> Any:
        return normalize_weekday(value)

    @field_validator("weeks", mode="before")
    @classmethod
    def parse_weeks(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return parse_week_range(value)
        return value

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, value: Any) -> Any:
        if value is None:
            return Frequency.weekly
        if isinstance(value, str):
            return value.strip().lower() or Frequency.weekly
        return value

    @field_validator("group_id", mode="before")
    @classmethod
    def normalize_group(cls, value: Any) -> Any:
        if value is None:
            return None
        trimmed = str(value).strip()
        return trimmed or None

    @model_validator(mode="after")
    def validate_time_order(self) -> "Slot":
        if self.end <= self.start:
            raise ValueError("End hour must be after start hour")
        return self

    @property
    def key(self) -> SubjectKey:
        return SubjectKey(subject=self.subject, type=self.type)

    def content_signature(self) -> tuple[str, str, str, int, int, str, str]:
        return (
            self.subject,
            self.type.value,
            self.day.value,
            self.start,
            self.end,
            self.frequency.value,
            self.group_id or "",
        )
