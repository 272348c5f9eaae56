from __future__ import annotations

from typing import Any, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from planner.schemas.calendar import WeekPair
from planner.schemas.constraints import FreeTimeConstraints
from planner.schemas.slot import SubjectKey


class SessionSettingsRecord(BaseModel):
    """Decoded form of an exported planner settings file.

    Reading and writing the file itself belongs to the caller. A record without
    a mirror flag mirrors odd busy hours onto even weeks. Records written
    before odd/even busy hours existed carry a single ``freeIntervals`` map,
    which applies to both week roles.
    """

    model_config = ConfigDict(populate_by_name=True)

    selected_subjects: list[SubjectKey] = Field(default_factory=list, alias="selectedSubjects")
    preferred_group: str | None = Field(default=None, alias="preferredGroup", max_length=50)
    week_pair_index: int | None = Field(
        default=None,
        validation_alias=AliasChoices("weekPairIndex", "selectedPairIdx", "week_pair_index"),
        ge=0,
    )
    odd_free_intervals: dict[str, Any] | None = Field(default=None, alias="oddFreeIntervals")
    even_free_intervals: dict[str, Any] | None = Field(default=None, alias="evenFreeIntervals")
    mirror_free_time: bool = Field(
        default=True,
        validation_alias=AliasChoices("mirrorFreeTime", "mirrorFlag", "mirror_free_time"),
    )
    free_intervals: dict[str, Any] | None = Field(default=None, alias="freeIntervals")

    @field_validator("selected_subjects", mode="before")
    @classmethod
    def parse_subject_labels(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple, set)):
            return value
        return [SubjectKey.parse(item) if isinstance(item, str) else item for item in value]

    @field_validator("preferred_group")
    @classmethod
    def normalize_preferred_group(cls, value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None

    def to_constraints(self) -> FreeTimeConstraints:
        if self.odd_free_intervals is None and self.even_free_intervals is None and self.free_intervals:
            return FreeTimeConstraints(odd=self.free_intervals, even=self.free_intervals)
        constraints = FreeTimeConstraints(
            odd=self.odd_free_intervals or {},
            even=self.even_free_intervals or {},
        )
        if self.mirror_free_time:
            return constraints.mirrored()
        return constraints

    def week_pair(self, pairs: Sequence[WeekPair]) -> WeekPair | None:
        if self.week_pair_index is None or self.week_pair_index >= len(pairs):
            return None
        return pairs[self.week_pair_index]
