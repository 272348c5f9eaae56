from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from planner.schemas.calendar import WeekPair
from planner.schemas.slot import Slot, SubjectKey


class ConflictPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    a: SubjectKey
    b: SubjectKey


class ConflictReport(BaseModel):
    pairs: list[ConflictPair] = Field(default_factory=list)
    involved: list[SubjectKey] = Field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.pairs)


class GeneratedSchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    slots: tuple[Slot, ...]
    preference_score: int = 0


class GenerationResult(BaseModel):
    schedules: list[GeneratedSchedule] = Field(default_factory=list)
    skipped_subjects: list[SubjectKey] = Field(default_factory=list)
    total_found: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return not self.schedules


class PreferenceMatch(BaseModel):
    exact: int = Field(default=0, ge=0)
    partial: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class PlanResult(BaseModel):
    week_pair: WeekPair
    conflicts: ConflictReport
    generation: GenerationResult
