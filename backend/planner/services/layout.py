from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class LayoutEntry:
    column: int
    total_columns: int


def to_minutes(value: int | float | str) -> int:
    """Hours (8, 10.5) or clock text ("10:30", "9") to minutes after midnight."""
    if isinstance(value, (int, float)):
        return round(value * 60)
    text = value.strip()
    if ":" not in text:
        return int(text) * 60
    hours, _, minutes = text.partition(":")
    return int(hours) * 60 + int(minutes or 0)


def _day_of(event: Any) -> Any:
    day = event.day
    return getattr(day, "value", day)


def compute_overlap_layout(events: Sequence[Any]) -> list[LayoutEntry]:
    """Assign side-by-side columns to one rendered week of events.

    Events are grouped per day, placed greedily in the first column that is
    free by their start time, and every event in a chain of overlapping
    events shares the chain's column count. Input order is preserved in the
    output; nothing is dropped.
    """
    result: list[LayoutEntry | None] = [None] * len(events)
    by_day: dict[Any, list[int]] = defaultdict(list)
    for index, event in enumerate(events):
        by_day[_day_of(event)].append(index)

    for indices in by_day.values():
        bounds = {index: (to_minutes(events[index].start), to_minutes(events[index].end)) for index in indices}
        indices.sort(key=lambda index: bounds[index])

        column_ends: list[int] = []
        column_of: dict[int, int] = {}
        for index in indices:
            start, end = bounds[index]
            for column, column_end in enumerate(column_ends):
                if column_end <= start:
                    column_ends[column] = end
                    column_of[index] = column
                    break
            else:
                column_of[index] = len(column_ends)
                column_ends.append(end)

        clusters: list[list[int]] = []
        cluster_end = 0
        for index in indices:
            start, end = bounds[index]
            if clusters and start < cluster_end:
                clusters[-1].append(index)
                cluster_end = max(cluster_end, end)
            else:
                clusters.append([index])
                cluster_end = end

        for cluster in clusters:
            total_columns = max(column_of[index] for index in cluster) + 1
            for index in cluster:
                result[index] = LayoutEntry(column=column_of[index], total_columns=total_columns)

    return [entry or LayoutEntry(column=0, total_columns=1) for entry in result]
