from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from planner.schemas.calendar import WeekPair
from planner.schemas.constraints import FreeTimeConstraints
from planner.schemas.generator import GeneratedSchedule, PlanResult
from planner.schemas.slot import Slot, SubjectKey
from planner.services.availability import visible_slots
from planner.services.catalog import Catalog
from planner.services.conflict_service import ConflictService
from planner.services.generator import ScheduleGenerator
from planner.services.layout import LayoutEntry, compute_overlap_layout


@dataclass(frozen=True)
class WeekView:
    week: int
    events: tuple[Slot, ...]
    layout: tuple[LayoutEntry, ...]


def plan(
    catalog: Catalog,
    selected: Sequence[SubjectKey],
    week_pair: WeekPair,
    constraints: FreeTimeConstraints | None = None,
    preferred_group: str | None = None,
    *,
    max_schedules: int | None = None,
    max_search_nodes: int | None = None,
) -> PlanResult:
    selected = list(selected)
    conflicts = ConflictService(catalog, week_pair).detect_conflicts(selected)
    generator = ScheduleGenerator(
        catalog=catalog,
        week_pair=week_pair,
        constraints=constraints,
        preferred_group=preferred_group,
        max_schedules=max_schedules,
        max_search_nodes=max_search_nodes,
    )
    return PlanResult(week_pair=week_pair, conflicts=conflicts, generation=generator.run(selected))


def week_view(schedule: GeneratedSchedule | Sequence[Slot], week: int) -> WeekView:
    slots = schedule.slots if isinstance(schedule, GeneratedSchedule) else schedule
    events = visible_slots(slots, week)
    return WeekView(week=week, events=tuple(events), layout=tuple(compute_overlap_layout(events)))


def week_pair_views(schedule: GeneratedSchedule | Sequence[Slot], week_pair: WeekPair) -> tuple[WeekView, WeekView]:
    return week_view(schedule, week_pair.odd_week), week_view(schedule, week_pair.even_week)
