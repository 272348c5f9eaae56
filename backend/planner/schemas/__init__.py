from planner.schemas.calendar import WeekInfo, WeekPair  # noqa: F401
from planner.schemas.constraints import BusyInterval, FreeTimeConstraints, WeekRole  # noqa: F401
from planner.schemas.generator import (  # noqa: F401
    ConflictPair,
    ConflictReport,
    GeneratedSchedule,
    GenerationResult,
    PlanResult,
    PreferenceMatch,
)
from planner.schemas.settings import SessionSettingsRecord  # noqa: F401
from planner.schemas.slot import (  # noqa: F401
    AllWeeks,
    Frequency,
    SessionType,
    SingleWeek,
    Slot,
    SubjectKey,
    Weekday,
    WeekSet,
    WeekSpan,
    parse_week_range,
)
