from __future__ import annotations

import logging
import re
from time import perf_counter
from typing import Iterable, Sequence

from planner.core.config import get_settings
from planner.core.exceptions import SchedulerError
from planner.schemas.calendar import WeekPair
from planner.schemas.constraints import FreeTimeConstraints, occupied_roles
from planner.schemas.generator import GeneratedSchedule, GenerationResult, PreferenceMatch
from planner.schemas.slot import Slot, SubjectKey
from planner.services.catalog import Catalog
from planner.services.overlap import slots_overlap

logger = logging.getLogger(__name__)

NO_PREFERENCE = "any"

Fingerprint = tuple[tuple[str, str, str, int, int, str, str], ...]


def schedule_fingerprint(slots: Iterable[Slot]) -> Fingerprint:
    return tuple(sorted(slot.content_signature() for slot in slots))


def slot_clears_constraints(slot: Slot, constraints: FreeTimeConstraints) -> bool:
    # Weekly slots sit in both week roles and must clear both.
    for role in occupied_roles(slot.frequency):
        for interval in constraints.intervals_for(role, slot.day):
            if interval.intersects(slot.start, slot.end):
                return False
    return True


def _normalize_preference(preferred_group: str | None) -> tuple[str, str] | None:
    if not preferred_group:
        return None
    group = preferred_group.strip().lower()
    if not group or group == NO_PREFERENCE:
        return None
    return group, re.sub(r"[a-z]$", "", group)


def _match_kind(group_id: str | None, preference: tuple[str, str]) -> str | None:
    if not group_id:
        return None
    group, base = preference
    gid = group_id.lower()
    if gid == group:
        return "exact"
    if gid.startswith(base) or base.startswith(gid):
        return "partial"
    return None


def preference_score(slots: Iterable[Slot], preferred_group: str | None) -> int:
    preference = _normalize_preference(preferred_group)
    if preference is None:
        return 0
    score = 0
    for slot in slots:
        kind = _match_kind(slot.group_id, preference)
        if kind == "exact":
            score += 2
        elif kind == "partial":
            score += 1
    return score


def preference_match(slots: Iterable[Slot], preferred_group: str | None) -> PreferenceMatch | None:
    preference = _normalize_preference(preferred_group)
    if preference is None:
        return None
    exact = partial = total = 0
    for slot in slots:
        if not slot.group_id:
            continue
        total += 1
        kind = _match_kind(slot.group_id, preference)
        if kind == "exact":
            exact += 1
        elif kind == "partial":
            partial += 1
    return PreferenceMatch(exact=exact, partial=partial, total=total)


class ScheduleGenerator:
    """Exhaustive depth-first search for one non-clashing slot per subject.

    Every distinct combination is collected before ranking, so ``total_found``
    always reports the full count even though only the top schedules are
    returned.
    """

    def __init__(
        self,
        *,
        catalog: Catalog,
        week_pair: WeekPair,
        constraints: FreeTimeConstraints | None = None,
        preferred_group: str | None = None,
        max_schedules: int | None = None,
        max_search_nodes: int | None = None,
    ) -> None:
        settings = get_settings()
        self.catalog = catalog
        self.week_pair = week_pair
        self.constraints = constraints or FreeTimeConstraints()
        self.preferred_group = preferred_group
        self.max_schedules = max_schedules if max_schedules is not None else settings.max_schedules
        self.max_search_nodes = max_search_nodes if max_search_nodes is not None else settings.max_search_nodes
        self.nodes_visited = 0

    def partition(self, selected: Sequence[SubjectKey]) -> tuple[list[SubjectKey], list[SubjectKey], list[list[Slot]]]:
        active: list[SubjectKey] = []
        skipped: list[SubjectKey] = []
        buckets: list[list[Slot]] = []
        for key in selected:
            slots = self.catalog.available_for_pair(key, self.week_pair)
            if slots:
                active.append(key)
                buckets.append(slots)
            else:
                skipped.append(key)
        return active, skipped, buckets

    def run(self, selected: Sequence[SubjectKey]) -> GenerationResult:
        started = perf_counter()
        self.nodes_visited = 0
        active, skipped, buckets = self.partition(selected)
        for key in skipped:
            logger.debug(
                "Subject has no slots in week pair | subject=%s weeks=%s-%s",
                key.label,
                self.week_pair.odd_week,
                self.week_pair.even_week,
            )
        if not active:
            return GenerationResult(schedules=[], skipped_subjects=skipped, total_found=0)

        found: list[tuple[Slot, ...]] = []
        seen: set[Fingerprint] = set()
        self._search(0, buckets, [], seen, found)

        ranked = [
            GeneratedSchedule(slots=slots, preference_score=preference_score(slots, self.preferred_group))
            for slots in found
        ]
        if _normalize_preference(self.preferred_group) is not None:
            # list.sort is stable, so equal scores keep discovery order.
            ranked.sort(key=lambda schedule: schedule.preference_score, reverse=True)

        logger.info(
            "Schedule generation finished | weeks=%s-%s active=%s skipped=%s found=%s returned=%s nodes=%s elapsed_ms=%.1f",
            self.week_pair.odd_week,
            self.week_pair.even_week,
            len(active),
            len(skipped),
            len(ranked),
            min(len(ranked), self.max_schedules),
            self.nodes_visited,
            (perf_counter() - started) * 1000,
        )
        return GenerationResult(
            schedules=ranked[: self.max_schedules],
            skipped_subjects=skipped,
            total_found=len(ranked),
        )

    def _search(
        self,
        depth: int,
        buckets: list[list[Slot]],
        current: list[Slot],
        seen: set[Fingerprint],
        found: list[tuple[Slot, ...]],
    ) -> None:
        self._count_node()
        if depth == len(buckets):
            if not all(slot_clears_constraints(slot, self.constraints) for slot in current):
                return
            fingerprint = schedule_fingerprint(current)
            if fingerprint in seen:
                return
            seen.add(fingerprint)
            found.append(tuple(current))
            return

        for slot in buckets[depth]:
            if any(slots_overlap(slot, chosen) for chosen in current):
                continue
            current.append(slot)
            self._search(depth + 1, buckets, current, seen, found)
            current.pop()

    def _count_node(self) -> None:
        self.nodes_visited += 1
        if self.max_search_nodes is not None and self.nodes_visited > self.max_search_nodes:
            raise SchedulerError(
                "Schedule search exceeded the configured node budget",
                max_search_nodes=self.max_search_nodes,
                nodes_visited=self.nodes_visited,
                week_pair=self.week_pair.weeks,
            )


def generate_schedules(
    selected: Sequence[SubjectKey],
    catalog: Catalog,
    week_pair: WeekPair,
    constraints: FreeTimeConstraints | None = None,
    preferred_group: str | None = None,
    *,
    max_schedules: int | None = None,
    max_search_nodes: int | None = None,
) -> GenerationResult:
    generator = ScheduleGenerator(
        catalog=catalog,
        week_pair=week_pair,
        constraints=constraints,
        preferred_group=preferred_group,
        max_schedules=max_schedules,
        max_search_nodes=max_search_nodes,
    )
    return generator.run(selected)
