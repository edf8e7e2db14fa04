from __future__ import annotations

from device_partitioner.app.merge_manager import MergeManager, new_merge_id
from device_partitioner.app.models import MergedDevice


def test_begin_merge_requires_two_distinct_paths() -> None:
    manager = MergeManager()
    assert manager.begin_merge(["root/A"]) is False
    assert manager.begin_merge(["root/A", "root/A", ""]) is False
    assert manager.pending is None

    assert manager.begin_merge(["root/B", "root/A"], "B") is True
    assert manager.pending is not None
    assert manager.pending.suggested_name == "B"


def test_confirm_merge_with_blank_name_keeps_pending() -> None:
    manager = MergeManager()
    manager.begin_merge(["root/A", "root/B"])

    assert manager.confirm_merge("   ") is None
    assert manager.pending is not None
    assert manager.groups == []


def test_confirm_merge_creates_group() -> None:
    manager = MergeManager()
    manager.begin_merge(["root/B", "root/A"])

    group = manager.confirm_merge("  Pumps ")

    assert group is not None
    assert group.name == "Pumps"
    assert group.member_paths == ("root/A", "root/B")
    assert group.id.startswith("merged_")
    assert manager.pending is None
    assert manager.merged_name_by_path() == {"root/A": "Pumps", "root/B": "Pumps"}
    assert manager.group_for("root/A") == group


def test_overlapping_merge_replaces_existing_group() -> None:
    manager = MergeManager()
    manager.begin_merge(["root/A", "root/B"])
    manager.confirm_merge("first")
    manager.begin_merge(["root/B", "root/C"])
    second = manager.confirm_merge("second")

    assert manager.groups == [second]
    assert manager.group_for("root/A") is None
    assert sorted(manager.member_paths()) == ["root/B", "root/C"]


def test_prune_drops_members_and_empty_groups() -> None:
    manager = MergeManager([
        MergedDevice(id="g1", name="one", member_paths=("root/A", "root/B")),
        MergedDevice(id="g2", name="two", member_paths=("root/C", "root/D")),
    ])

    assert manager.prune(["root/A", "root/C", "root/D"]) is True
    assert [g.member_paths for g in manager.groups] == [("root/A",), ("root/C", "root/D")]

    assert manager.prune(["root/C", "root/D"]) is True
    assert [g.id for g in manager.groups] == ["g2"]

    assert manager.prune(["root/C", "root/D"]) is False


def test_unmerge() -> None:
    manager = MergeManager([MergedDevice(id="g1", name="one", member_paths=("root/A", "root/B"))])
    assert manager.unmerge("missing") is False
    assert manager.unmerge("g1") is True
    assert manager.groups == []


def test_new_merge_id_is_unique() -> None:
    assert new_merge_id() != new_merge_id()


def test_begin_merge_rejects_nested_members() -> None:
    manager = MergeManager()
    assert manager.begin_merge(["root/A", "root/A/sub"]) is False
    assert manager.begin_merge(["root/A/sub", "A"]) is False
    assert manager.pending is None
