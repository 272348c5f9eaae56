from datetime import date
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so scripts work from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="PLANNER_",
    )

    project_name: str = "Week Pair Planner"

    # Week 1 starts Monday 23 Feb 2026.
    semester_start_date: date = date(2026, 2, 23)
    semester_weeks: int = 14

    max_schedules: int = 10
    max_search_nodes: int | None = None

    day_start_hour: int = 8
    day_end_hour: int = 21

    catalog_path: str | None = None
    log_level: str = "INFO"

    @field_validator("semester_start_date", mode="before")
    @classmethod
    def parse_start_date(cls, value: str | date) -> date:
        if isinstance(value, str):
            return date.fromisoformat(value.strip())
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        if self.semester_weeks < 2 or self.semester_weeks % 2:
            raise ValueError("semester_weeks must be a positive even number")
        if self.max_schedules < 1:
            raise ValueError("max_schedules must be at least 1")
        if self.max_search_nodes is not None and self.max_search_nodes < 1:
            raise ValueError("max_search_nodes must be at least 1 when set")
        if not 0 <= self.day_start_hour < self.day_end_hour <= 24:
            raise ValueError("day_start_hour must be before day_end_hour within 0..24")
        return self

    @property
    def week_pair_count(self) -> int:
        return self.semester_weeks // 2


@lru_cache
def get_settings() -> Settings:
    return Settings()
