from __future__ import annotations

import pytest

from device_partitioner.core.paths import (
    PathRelation,
    canonical_folder_path,
    decode_segment,
    folder_key_for_point,
    leaf_display_name,
    locale_sort_key,
    normalize_path,
    relate,
)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("root/A", "root/A/B", PathRelation.ANCESTOR),
        ("root/A/B", "root/A", PathRelation.DESCENDANT),
        ("root/A", "root/A", PathRelation.SAME),
        ("A/B", "root/A/B", PathRelation.SAME),
        ("root/AB", "root/A", PathRelation.DISJOINT),
        ("root/A/x", "root/B/x", PathRelation.DISJOINT),
        ("root", "root/A", PathRelation.DISJOINT),
        ("", "root/A", PathRelation.DISJOINT),
    ],
)
def test_relate(a, b, expected) -> None:
    assert relate(a, b) is expected


def test_relate_is_antisymmetric() -> None:
    pairs = [("root/A", "root/A/B"), ("root/A", "root/C"), ("root/A", "A")]
    for a, b in pairs:
        assert relate(b, a) is relate(a, b).inverse()


def test_decode_segment_hex_escapes() -> None:
    assert decode_segment("My$20Folder") == "My Folder"
    assert decode_segment("A$2FB") == "A/B"
    assert decode_segment("cost$") == "cost$"


def test_normalize_path_collapses_separators() -> None:
    assert normalize_path(" root//A\\B ") == "root/A/B"
    assert normalize_path(None) == ""


def test_canonical_folder_path() -> None:
    assert canonical_folder_path("A/B/") == "root/A/B"
    assert canonical_folder_path("root/A") == "root/A"
    assert canonical_folder_path("root") == "root"
    assert canonical_folder_path("  ") == ""


def test_leaf_display_name_decodes_last_segment() -> None:
    assert leaf_display_name("root/A/My$20Pump") == "My Pump"
    assert leaf_display_name("root/A") == "A"


def test_folder_key_for_point() -> None:
    assert folder_key_for_point("root/A/1") == "root/A"
    assert folder_key_for_point("A/B/1") == "root/A/B"
    assert folder_key_for_point("root/1") == "root"
    assert folder_key_for_point("lonely") is None


def test_locale_sort_key_is_case_insensitive_lowercase_first() -> None:
    assert sorted(["b", "B", "a"], key=locale_sort_key) == ["a", "b", "B"]
