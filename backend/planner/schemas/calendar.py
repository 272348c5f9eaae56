from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WeekPair(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    odd_week: int = Field(alias="oddWeek", ge=1)
    even_week: int = Field(alias="evenWeek", ge=2)

    @model_validator(mode="after")
    def validate_pairing(self) -> "WeekPair":
        if self.odd_week % 2 != 1:
            raise ValueError("odd_week must be an odd week number")
        if self.even_week != self.odd_week + 1:
            raise ValueError("even_week must directly follow odd_week")
        return self

    @property
    def weeks(self) -> tuple[int, int]:
        return self.odd_week, self.even_week

    @property
    def label(self) -> str:
        return f"Weeks {self.odd_week}-{self.even_week}"


class WeekInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    week_number: int = Field(ge=1)
    is_odd: bool
