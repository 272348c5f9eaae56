from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from planner.core.exceptions import CatalogError
from planner.schemas.calendar import WeekPair
from planner.schemas.slot import SessionType, Slot, SubjectKey
from planner.services.availability import is_active_in_week, slot_active_in_pair

logger = logging.getLogger(__name__)

DEFAULT_SELECTED_TYPES = frozenset({SessionType.lab, SessionType.project, SessionType.seminar})


def _natural_key(value: str) -> tuple:
    return tuple(int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", value))


def group_by_subject(slots: Iterable[Slot]) -> dict[SubjectKey, list[Slot]]:
    grouped: dict[SubjectKey, list[Slot]] = {}
    for slot in slots:
        grouped.setdefault(slot.key, []).append(slot)
    return grouped


def unique_groups(slots: Iterable[Slot]) -> list[str]:
    return sorted({slot.group_id for slot in slots if slot.group_id}, key=_natural_key)


class Catalog:
    """Read-only view over the loaded slots, grouped by subject key.

    Slot order inside each subject follows the catalog order, which is also
    the order the generator tries them in.
    """

    def __init__(self, slots: Iterable[Slot]) -> None:
        self.slots: tuple[Slot, ...] = tuple(slots)
        self.by_subject = group_by_subject(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def subject_keys(self) -> list[SubjectKey]:
        return sorted(self.by_subject, key=lambda key: key.label)

    def slots_for(self, key: SubjectKey) -> list[Slot]:
        return list(self.by_subject.get(key, []))

    def available_for_pair(self, key: SubjectKey, pair: WeekPair) -> list[Slot]:
        return [slot for slot in self.by_subject.get(key, []) if slot_active_in_pair(slot, pair)]

    def available_for_week(self, key: SubjectKey, week: int) -> list[Slot]:
        return [slot for slot in self.by_subject.get(key, []) if is_active_in_week(slot.weeks, week)]

    def availability_counts(self, pair: WeekPair) -> dict[SubjectKey, int]:
        return {
            key: len(self.available_for_week(key, pair.odd_week)) + len(self.available_for_week(key, pair.even_week))
            for key in self.subject_keys()
        }

    def unique_groups(self) -> list[str]:
        return unique_groups(self.slots)

    def default_selection(self) -> list[SubjectKey]:
        return [key for key in self.subject_keys() if key.type in DEFAULT_SELECTED_TYPES]


def parse_catalog(records: Iterable[dict[str, Any]]) -> Catalog:
    slots: list[Slot] = []
    for index, record in enumerate(records):
        try:
            slots.append(Slot.model_validate(record))
        except ValidationError as exc:
            raise CatalogError(
                f"Catalog record {index} is invalid",
                index=index,
                errors=exc.errors(include_url=False),
            ) from exc
    logger.debug("Catalog parsed | slots=%s", len(slots))
    return Catalog(slots)


def load_catalog(path: str | Path) -> Catalog:
    catalog_path = Path(path)
    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Unable to read catalog file {catalog_path}", path=str(catalog_path)) from exc

    records = raw.get("slots") if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        raise CatalogError("Catalog file must contain a list of slot records", path=str(catalog_path))
    catalog = parse_catalog(records)
    logger.info("Catalog loaded | path=%s slots=%s subjects=%s", catalog_path, len(catalog), len(catalog.by_subject))
    return catalog
