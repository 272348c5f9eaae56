from __future__ import annotations

import logging
from typing import Sequence

from planner.schemas.calendar import WeekPair
from planner.schemas.generator import ConflictPair, ConflictReport
from planner.schemas.slot import Slot, SubjectKey
from planner.services.catalog import Catalog
from planner.services.overlap import slots_overlap

logger = logging.getLogger(__name__)


def can_coexist(slots_a: Sequence[Slot], slots_b: Sequence[Slot]) -> bool:
    for a in slots_a:
        for b in slots_b:
            if not slots_overlap(a, b):
                return True
    return False


class ConflictService:
    def __init__(self, catalog: Catalog, week_pair: WeekPair):
        self.catalog = catalog
        self.week_pair = week_pair

    def detect_conflicts(self, selected: Sequence[SubjectKey]) -> ConflictReport:
        pairs: list[ConflictPair] = []
        involved: list[SubjectKey] = []

        available = {key: self.catalog.available_for_pair(key, self.week_pair) for key in selected}

        for i, key_a in enumerate(selected):
            slots_a = available[key_a]
            # Subjects with nothing on offer this pair are skipped, not conflicting.
            if not slots_a:
                continue
            for key_b in selected[i + 1:]:
                slots_b = available[key_b]
                if not slots_b:
                    continue
                if can_coexist(slots_a, slots_b):
                    continue
                pairs.append(ConflictPair(a=key_a, b=key_b))
                for key in (key_a, key_b):
                    if key not in involved:
                        involved.append(key)
                logger.debug(
                    "Hard conflict | a=%s b=%s weeks=%s-%s",
                    key_a.label,
                    key_b.label,
                    self.week_pair.odd_week,
                    self.week_pair.even_week,
                )

        return ConflictReport(pairs=pairs, involved=involved)


def find_hard_conflicts(selected: Sequence[SubjectKey], catalog: Catalog, week_pair: WeekPair) -> ConflictReport:
    return ConflictService(catalog, week_pair).detect_conflicts(list(selected))
