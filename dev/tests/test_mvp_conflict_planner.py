from __future__ import annotations

from device_partitioner.app.conflict_planner import (
    apply_plan,
    compute_reassignment_groups,
    plan_device_addition,
    resolve_selection_overlap,
)
from device_partitioner.core.paths import PathRelation, relate
from device_partitioner.core.records import PointRecord

POINTS = [
    PointRecord("root/A/1"),
    PointRecord("root/A/2"),
    PointRecord("root/A/sub/3"),
    PointRecord("root/B/1"),
]


def _no_nested_devices(devices) -> bool:
    return all(
        relate(a, b) is not PathRelation.ANCESTOR
        for a in devices
        for b in devices
        if a != b
    )


def test_descendant_candidate_replaces_upstream_device() -> None:
    plan = plan_device_addition(["root/A"], ["root/A/sub"], POINTS)

    assert plan.to_add == ["root/A/sub"]
    assert plan.to_remove == ["root/A"]
    assert plan.upstream_conflicts == ["root/A"]
    assert plan.downstream_conflicts == []
    assert plan.requires_confirmation is True

    assert len(plan.reassignment_groups) == 1
    group = plan.reassignment_groups[0]
    assert group.from_device_path == "root/A"
    assert group.to_device_path == "root/A/sub"
    # Points left without an owner are not reassignments.
    assert group.point_paths == ["root/A/sub/3"]
    assert plan.reassigned_point_count == 1

    assert apply_plan(["root/A"], plan) == ["root/A/sub"]


def test_ancestor_candidate_replaces_downstream_devices() -> None:
    plan = plan_device_addition(["root/A/sub", "root/B"], ["root/A"], POINTS)

    assert plan.to_remove == ["root/A/sub"]
    assert plan.downstream_conflicts == ["root/A/sub"]
    assert [g.key for g in plan.reassignment_groups] == ["root/A/sub→root/A"]
    assert apply_plan(["root/A/sub", "root/B"], plan) == ["root/A", "root/B"]


def test_selection_keeps_most_specific_candidate() -> None:
    to_add, dropped = resolve_selection_overlap(["root/X", "root/X/Y"])
    assert to_add == ["root/X/Y"]
    assert dropped == ["root/X"]

    plan = plan_device_addition([], ["root/X", "root/X/Y"], [])
    assert plan.to_add == ["root/X/Y"]
    assert plan.dropped_from_selection == ["root/X"]
    assert plan.requires_confirmation is True


def test_unrelated_candidate_needs_no_confirmation() -> None:
    plan = plan_device_addition(["root/A"], ["root/B"], POINTS)
    assert plan.requires_confirmation is False
    assert plan.reassignment_groups == []
    assert apply_plan(["root/A"], plan) == ["root/A", "root/B"]


def test_candidate_equal_to_existing_device_is_noop() -> None:
    plan = plan_device_addition(["root/A"], ["root/A"], POINTS)
    assert plan.requires_confirmation is False
    assert plan.to_remove == []
    assert apply_plan(["root/A"], plan) == ["root/A"]


def test_applied_plans_never_nest_devices() -> None:
    devices = []
    for selection in (["root/A"], ["root/A/sub"], ["root/A", "root/B"], ["root/A/sub/deep", "root/B"]):
        plan = plan_device_addition(devices, selection, POINTS)
        devices = apply_plan(devices, plan)
        assert _no_nested_devices(devices)
    assert devices == ["root/A/sub/deep", "root/B"]


def test_compute_reassignment_groups_sorted_by_key() -> None:
    points = [PointRecord("root/B/x/1"), PointRecord("root/A/x/1")]
    groups = compute_reassignment_groups(points, ["root/A", "root/B"], ["root/A/x", "root/B/x"])
    assert [g.from_device_path for g in groups] == ["root/A", "root/B"]


def test_equivalent_spellings_are_one_candidate() -> None:
    to_add, dropped = resolve_selection_overlap(["A", "root/A/", "root/A", "root", ""])
    assert to_add == ["root/A"]
    assert dropped == []


def test_existing_devices_are_compared_canonically() -> None:
    plan = plan_device_addition(["A"], ["root/A/sub"], POINTS)

    assert plan.to_remove == ["root/A"]
    assert apply_plan(["A"], plan) == ["root/A/sub"]

    same = plan_device_addition(["A/"], ["root/A"], POINTS)
    assert same.requires_confirmation is False
    assert apply_plan(["A/"], same) == ["root/A"]


def test_reassignment_groups_ordered_by_group_key() -> None:
    points = [PointRecord("root/B/x/1"), PointRecord("root/A/x/1"), PointRecord("root/A/y/1")]
    groups = compute_reassignment_groups(points, ["root/A", "root/B"], ["root/A/y", "root/A/x", "root/B/x"])
    keys = [g.key for g in groups]
    assert keys == sorted(keys)
    assert keys[0] == "root/A→root/A/x"
