"""Generate conflict-free timetables for a week pair from a catalog file.

Run:
  PYTHONPATH=backend python scripts/plan_schedule.py --catalog scripts/data/sample_catalog.json
  PYTHONPATH=backend python scripts/plan_schedule.py --settings my-settings.json --pair 3
  PYTHONPATH=backend python scripts/plan_schedule.py --subject "PS (lab)" --subject "IA (lab)" --max-nodes 0

The search stops after --max-nodes visited nodes (0 means unbounded); a full
default selection over a large catalog easily runs to millions of combinations.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from planner.core.config import get_settings
from planner.core.exceptions import AppError, ConfigurationError
from planner.schemas.constraints import FreeTimeConstraints
from planner.schemas.settings import SessionSettingsRecord
from planner.schemas.slot import WEEKDAYS, SubjectKey
from planner.services.calendar import current_week_info, week_pair_of, week_pair_index, week_pairs
from planner.services.catalog import load_catalog
from planner.services.generator import preference_match
from planner.services.planner import plan, week_pair_views

logger = logging.getLogger("plan_schedule")

DEFAULT_CATALOG = Path(__file__).resolve().parent / "data" / "sample_catalog.json"
DEFAULT_MAX_SEARCH_NODES = 200_000


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Week pair timetable planner")
    parser.add_argument("--catalog", help="Catalog JSON file (defaults to PLANNER_CATALOG_PATH or the bundled sample)")
    parser.add_argument("--settings", help="Exported planner settings JSON file")
    parser.add_argument("--pair", type=int, help="Week pair number, 1-based (defaults to the current week's pair)")
    parser.add_argument("--group", help="Preferred group label, e.g. 33a")
    parser.add_argument("--subject", action="append", default=[], help="Subject key such as 'PS (lab)'; repeatable")
    parser.add_argument("--show", type=int, default=1, help="How many schedules to print in full")
    parser.add_argument(
        "--max-nodes",
        type=int,
        help=f"Search node budget; 0 disables it (defaults to PLANNER_MAX_SEARCH_NODES or {DEFAULT_MAX_SEARCH_NODES})",
    )
    return parser.parse_args(argv)


def _resolve_catalog_path(cli_value: str | None) -> Path:
    settings = get_settings()
    candidate = cli_value or settings.catalog_path
    path = Path(candidate) if candidate else DEFAULT_CATALOG
    if not path.is_file():
        raise ConfigurationError(f"Catalog file not found: {path}", source=str(path))
    return path


def _load_settings_record(path: str | None) -> tuple[SessionSettingsRecord, FreeTimeConstraints]:
    if not path:
        record = SessionSettingsRecord()
        return record, record.to_constraints()
    try:
        record = SessionSettingsRecord.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))
        # Busy hours are kept raw on the record and only checked here.
        return record, record.to_constraints()
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ConfigurationError(f"Unable to read settings file {path}: {exc}", source=path) from exc


def _search_budget(cli_value: int | None) -> int | None:
    if cli_value is not None:
        return cli_value or None
    return get_settings().max_search_nodes or DEFAULT_MAX_SEARCH_NODES


def _fmt_hour(value: int) -> str:
    return f"{value:02d}:00"


def _print_week(view, day_start: int, day_end: int) -> None:
    print(f"  Week {view.week} ({'odd' if view.week % 2 else 'even'})")
    if not view.events:
        print("    (no classes)")
        return
    rows = sorted(zip(view.events, view.layout), key=lambda item: (WEEKDAYS.index(item[0].day), item[0].start))
    for slot, entry in rows:
        if slot.end <= day_start or slot.start >= day_end:
            continue
        column = f"col {entry.column + 1}/{entry.total_columns}" if entry.total_columns > 1 else ""
        print(
            f"    {slot.day.value:<9} {_fmt_hour(slot.start)}-{_fmt_hour(slot.end)}  "
            f"{slot.key.label:<18} {slot.group_id or '-':<5} {slot.room:<14} {column}"
        )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        catalog = load_catalog(_resolve_catalog_path(args.catalog))
        record, constraints = _load_settings_record(args.settings)
    except AppError as exc:
        logger.error("%s | details=%s", exc.message, exc.details)
        return exc.exit_code
    if args.max_nodes is not None and args.max_nodes < 0:
        logger.error("--max-nodes must be 0 or a positive number")
        return 2

    pairs = week_pairs(settings.semester_weeks)
    if args.pair is not None:
        if not 1 <= args.pair <= len(pairs):
            logger.error("Week pair must be between 1 and %s", len(pairs))
            return 2
        pair = pairs[args.pair - 1]
    else:
        pair = record.week_pair(pairs) or pairs[week_pair_index(week_pair_of(current_week_info().week_number), pairs)]

    selected = [*record.selected_subjects]
    for label in args.subject:
        try:
            selected.append(SubjectKey.parse(label))
        except ValueError as exc:
            logger.error("%s", exc)
            return 2
    if not selected:
        selected = catalog.default_selection()
    preferred_group = args.group or record.preferred_group

    try:
        result = plan(
            catalog,
            selected,
            pair,
            constraints,
            preferred_group,
            max_search_nodes=_search_budget(args.max_nodes),
        )
    except AppError as exc:
        logger.error("%s | details=%s", exc.message, exc.details)
        return exc.exit_code

    print(f"{settings.project_name}: {pair.label}, {len(selected)} subject(s) selected")
    for key in result.generation.skipped_subjects:
        print(f"  skipped (not offered in these weeks): {key.label}")
    for pair_conflict in result.conflicts.pairs:
        print(f"  hard conflict: {pair_conflict.a.label} <-> {pair_conflict.b.label}")

    generation = result.generation
    if generation.is_empty:
        print("No valid schedule found.")
        return 0

    print(f"Top {len(generation.schedules)} of {generation.total_found} schedule(s)")
    for rank, schedule in enumerate(generation.schedules[: max(args.show, 0)], start=1):
        match = preference_match(schedule.slots, preferred_group)
        summary = ""
        if match is not None:
            summary = f" score={schedule.preference_score} exact={match.exact} partial={match.partial} of {match.total}"
        print(f"#{rank}{summary}")
        for view in week_pair_views(schedule, pair):
            _print_week(view, settings.day_start_hour, settings.day_end_hour)
    return 0


if __name__ == "__main__":
    sys.exit(main())
