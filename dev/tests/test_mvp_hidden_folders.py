from __future__ import annotations

from device_partitioner.core.hidden_folders import (
    is_at_or_downstream_of_any,
    is_downstream_of_any,
    normalize_hidden_paths,
)


def test_hiding_descendant_of_hidden_folder_is_absorbed() -> None:
    hidden = normalize_hidden_paths(["root/A"])
    hidden = normalize_hidden_paths([*hidden, "root/A/B"])
    assert hidden == ["root/A"]


def test_normalize_is_idempotent() -> None:
    once = normalize_hidden_paths(["root/B/x", "root/A", "A/C", "root/B"])
    assert once == ["root/A", "root/B"]
    assert normalize_hidden_paths(once) == once


def test_equivalent_spellings_collapse_to_one_entry() -> None:
    assert normalize_hidden_paths(["root/A", "root/A/", "A"]) == ["root/A"]


def test_root_and_non_strings_are_dropped() -> None:
    assert normalize_hidden_paths(["root", "", None, 3]) == []


def test_paths_missing_from_tree_are_dropped() -> None:
    folders = frozenset({"root", "root/A", "root/A/B"})
    assert normalize_hidden_paths(["root/Z", "root/A/B"], folders) == ["root/A/B"]


def test_no_tree_keeps_all_paths() -> None:
    assert normalize_hidden_paths(["root/Z"], frozenset()) == ["root/Z"]


def test_downstream_checks() -> None:
    assert is_downstream_of_any("root/A/B", ["root/A"]) is True
    assert is_downstream_of_any("root/A", ["root/A"]) is False
    assert is_at_or_downstream_of_any("root/A", ["root/A"]) is True
    assert is_at_or_downstream_of_any("root/AB", ["root/A"]) is False
    assert is_at_or_downstream_of_any("root/A/x", ["root"]) is False
