from itertools import combinations

import pytest

from planner.core.exceptions import SchedulerError
from planner.schemas.calendar import WeekPair
from planner.schemas.constraints import FreeTimeConstraints, occupied_roles
from planner.schemas.slot import SubjectKey
from planner.services.generator import (
    ScheduleGenerator,
    generate_schedules,
    preference_match,
    preference_score,
    schedule_fingerprint,
    slot_clears_constraints,
)
from planner.services.overlap import slots_overlap

PAIR_1 = WeekPair(odd_week=1, even_week=2)


def key(label):
    return SubjectKey.parse(label)


@pytest.fixture
def wide_catalog(make_catalog):
    # 3 x 4 x 3 alternatives spread over the week, a few clashing.
    return make_catalog(
        {"subject": "PS", "type": "lab", "day": "Monday", "start": 8, "end": 10, "group_id": "31a"},
        {"subject": "PS", "type": "lab", "day": "Tuesday", "start": 12, "end": 14, "group_id": "32a", "frequency": "odd"},
        {"subject": "PS", "type": "lab", "day": "Thursday", "start": 12, "end": 14, "group_id": "33a", "frequency": "even"},
        {"subject": "IA", "type": "lab", "day": "Monday", "start": 9, "end": 11, "group_id": "31b"},
        {"subject": "IA", "type": "lab", "day": "Tuesday", "start": 12, "end": 14, "group_id": "33b", "frequency": "even"},
        {"subject": "IA", "type": "lab", "day": "Wednesday", "start": 12, "end": 14, "group_id": "33a", "frequency": "odd"},
        {"subject": "IA", "type": "lab", "day": "Thursday", "start": 8, "end": 10, "group_id": "32"},
        {"subject": "PAW", "type": "project", "day": "Friday", "start": 10, "end": 12, "group_id": "31", "frequency": "odd"},
        {"subject": "PAW", "type": "project", "day": "Friday", "start": 10, "end": 12, "group_id": "33", "frequency": "even"},
        {"subject": "PAW", "type": "project", "day": "Thursday", "start": 9, "end": 11, "group_id": "32"},
    )


WIDE_SELECTION = [key("PS (lab)"), key("IA (lab)"), key("PAW (project)")]


def test_scenario_weekly_clash_yields_nothing(make_catalog):
    catalog = make_catalog(
        {"subject": "A", "type": "lab", "day": "Monday", "start": 10, "end": 12},
        {"subject": "B", "type": "lab", "day": "Monday", "start": 11, "end": 13},
    )
    result = generate_schedules([key("A (lab)"), key("B (lab)")], catalog, PAIR_1)

    assert result.is_empty
    assert result.total_found == 0
    assert result.skipped_subjects == []


def test_scenario_odd_role_constraint_removes_blocked_slot(make_catalog):
    catalog = make_catalog(
        {"subject": "C", "type": "lab", "day": "Tuesday", "start": 8, "end": 10, "frequency": "odd"},
        {"subject": "C", "type": "lab", "day": "Tuesday", "start": 14, "end": 16, "frequency": "odd"},
    )
    constraints = FreeTimeConstraints(odd={"Tuesday": [{"from": 8, "to": 10}]})

    result = generate_schedules([key("C (lab)")], catalog, PAIR_1, constraints)

    assert result.total_found == 1
    [schedule] = result.schedules
    assert [(slot.start, slot.end) for slot in schedule.slots] == [(14, 16)]


def test_even_role_constraint_does_not_touch_odd_slot(make_catalog):
    catalog = make_catalog(
        {"subject": "C", "type": "lab", "day": "Tuesday", "start": 8, "end": 10, "frequency": "odd"},
    )
    constraints = FreeTimeConstraints(even={"Tuesday": [{"from": 8, "to": 10}]})
    assert generate_schedules([key("C (lab)")], catalog, PAIR_1, constraints).total_found == 1


def test_weekly_slot_must_clear_both_roles(make_slot):
    weekly = make_slot(day="Tuesday", start=8, end=10)
    constraints = FreeTimeConstraints(even={"Tuesday": [{"from": 9, "to": 11}]})
    assert len(occupied_roles(weekly.frequency)) == 2
    assert not slot_clears_constraints(weekly, constraints)
    assert slot_clears_constraints(make_slot(day="Tuesday", start=8, end=10, frequency="odd"), constraints)


def test_generated_schedules_are_pairwise_non_overlapping(wide_catalog):
    result = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, max_schedules=100)

    assert result.total_found > 0
    assert result.total_found == len(result.schedules)
    for schedule in result.schedules:
        assert [slot.key for slot in schedule.slots] == WIDE_SELECTION
        for a, b in combinations(schedule.slots, 2):
            assert not slots_overlap(a, b)


def test_total_found_counts_every_valid_combination(wide_catalog):
    buckets = [wide_catalog.available_for_pair(subject, PAIR_1) for subject in WIDE_SELECTION]
    expected = 0
    for ps in buckets[0]:
        for ia in buckets[1]:
            for paw in buckets[2]:
                if not any(slots_overlap(x, y) for x, y in combinations((ps, ia, paw), 2)):
                    expected += 1

    result = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, max_schedules=3)

    assert len(result.schedules) == 3
    assert result.total_found == expected


def test_result_is_capped_at_configured_maximum(wide_catalog, monkeypatch):
    monkeypatch.setenv("PLANNER_MAX_SCHEDULES", "2")
    result = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1)
    assert len(result.schedules) == 2
    assert result.total_found > 2


def test_default_cap_is_ten(make_catalog):
    records = [
        {"subject": subject, "type": "lab", "day": day, "start": 8, "end": 10}
        for subject, day in [("X", "Monday"), ("X", "Tuesday"), ("X", "Wednesday"), ("X", "Thursday")]
    ] + [
        {"subject": "Y", "type": "lab", "day": "Friday", "start": start, "end": start + 1}
        for start in range(8, 12)
    ]
    result = generate_schedules([key("X (lab)"), key("Y (lab)")], make_catalog(*records), PAIR_1)
    assert result.total_found == 16
    assert len(result.schedules) == 10


def test_duplicate_catalog_rows_are_deduplicated(make_catalog):
    catalog = make_catalog(
        {"subject": "PS", "type": "lab", "day": "Monday", "start": 8, "end": 10, "group_id": "31", "room": "G306"},
        {"subject": "PS", "type": "lab", "day": "Monday", "start": 8, "end": 10, "group_id": "31", "room": "G308"},
        {"subject": "PS", "type": "lab", "day": "Friday", "start": 8, "end": 10, "group_id": "32"},
    )
    result = generate_schedules([key("PS (lab)")], catalog, PAIR_1)

    assert result.total_found == 2
    fingerprints = {schedule_fingerprint(schedule.slots) for schedule in result.schedules}
    assert len(fingerprints) == len(result.schedules)


def test_fingerprint_ignores_slot_order(make_slot):
    a = make_slot(subject="A")
    b = make_slot(subject="B", day="Friday")
    assert schedule_fingerprint([a, b]) == schedule_fingerprint([b, a])


def test_subjects_without_slots_in_pair_are_skipped(make_catalog):
    catalog = make_catalog(
        {"subject": "LFT", "type": "lab", "day": "Monday", "start": 18, "end": 20, "weeks": "s1-7"},
        {"subject": "LFT", "type": "project", "day": "Monday", "start": 18, "end": 20, "weeks": "s8-14"},
    )
    result = generate_schedules([key("LFT (lab)"), key("LFT (project)")], catalog, PAIR_1)

    assert result.skipped_subjects == [key("LFT (project)")]
    assert result.total_found == 1


def test_nothing_selected_or_available_returns_immediately(make_catalog):
    catalog = make_catalog({"subject": "LFT", "type": "project", "day": "Monday", "start": 18, "end": 20, "weeks": "s8-14"})
    generator = ScheduleGenerator(catalog=catalog, week_pair=PAIR_1)

    result = generator.run([key("LFT (project)")])

    assert result.schedules == []
    assert result.total_found == 0
    assert result.skipped_subjects == [key("LFT (project)")]
    assert generator.nodes_visited == 0


def test_preference_ranking_is_monotonic_and_stable(wide_catalog):
    unranked = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, max_schedules=100)
    ranked = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, preferred_group="33a", max_schedules=100)

    scores = [schedule.preference_score for schedule in ranked.schedules]
    assert scores == sorted(scores, reverse=True)
    assert scores[0] > 0

    discovery = [schedule_fingerprint(schedule.slots) for schedule in unranked.schedules]
    for score in set(scores):
        tied = [schedule_fingerprint(s.slots) for s in ranked.schedules if s.preference_score == score]
        assert tied == [fp for fp in discovery if fp in tied]


def test_any_preference_keeps_discovery_order(wide_catalog):
    plain = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, max_schedules=100)
    any_group = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, preferred_group="Any", max_schedules=100)
    assert plain == any_group
    assert all(schedule.preference_score == 0 for schedule in any_group.schedules)


def test_generation_is_deterministic(wide_catalog):
    first = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, preferred_group="32")
    second = generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, preferred_group="32")
    assert first == second


def test_preference_score_exact_and_partial(make_slot):
    slots = [
        make_slot(group_id="31A"),
        make_slot(group_id="31"),
        make_slot(group_id="31b"),
        make_slot(group_id="32a"),
        make_slot(),
    ]
    # 31A exact (+2), 31 and 31b share the "31" prefix (+1 each).
    assert preference_score(slots, "31a") == 4
    assert preference_score(slots, "any") == 0
    assert preference_score(slots, None) == 0

    match = preference_match(slots, "31a")
    assert (match.exact, match.partial, match.total) == (1, 2, 4)
    assert preference_match(slots, "Any") is None


def test_search_budget_raises_scheduler_error(wide_catalog):
    with pytest.raises(SchedulerError) as exc_info:
        generate_schedules(WIDE_SELECTION, wide_catalog, PAIR_1, max_search_nodes=3)
    assert exc_info.value.max_search_nodes == 3
    assert exc_info.value.nodes_visited == 4
    assert exc_info.value.week_pair == (1, 2)
