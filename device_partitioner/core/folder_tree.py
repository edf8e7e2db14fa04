"""Folder hierarchy built from flat point paths.

The tree is an arena: every node is stored once in a dict keyed by its raw
path (``root/a/b``) and parents keep the keys of their children. It is built
from scratch for each data upload and never patched afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .paths import (
    ROOT_NAME,
    comparable_segments,
    decode_segment,
    locale_sort_key,
)
from .hidden_folders import is_at_or_downstream_of_any
from .records import DEFAULT_TYPE_LABEL, PointRecord


@dataclass(frozen=True)
class FolderNode:
    name: str
    path: str
    children: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LeafPointsByType:
    type: str
    points: List[str] = field(default_factory=list)


class FolderTree:
    """Immutable folder arena rooted at ``root_name``."""

    def __init__(self, nodes: Dict[str, FolderNode], root_name: str = ROOT_NAME):
        self._nodes = nodes
        self._root_name = root_name

    @property
    def root(self) -> FolderNode:
        return self._nodes[self._root_name]

    def get(self, path: str) -> Optional[FolderNode]:
        return self._nodes.get(path)

    def children_of(self, path: str) -> List[FolderNode]:
        node = self._nodes.get(path)
        if node is None:
            return []
        return [self._nodes[key] for key in node.children]

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def folder_paths(self) -> frozenset:
        return frozenset(self._nodes)

    def walk(self) -> Iterator[FolderNode]:
        """Pre-order traversal starting at the root."""
        stack = [self._root_name]
        while stack:
            node = self._nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def visible_paths(self, hidden_paths: Sequence[str]) -> List[str]:
        """Pre-order folder paths with hidden subtrees left out (root always kept)."""
        out: List[str] = []
        stack = [self._root_name]
        while stack:
            node = self._nodes[stack.pop()]
            if node.path != self._root_name and hidden_paths and is_at_or_downstream_of_any(node.path, hidden_paths):
                continue
            out.append(node.path)
            stack.extend(reversed(node.children))
        return out

    def to_dict(self, path: Optional[str] = None) -> Dict[str, Any]:
        node = self._nodes[path or self._root_name]
        return {
            "name": node.name,
            "path": node.path,
            "children": [self.to_dict(key) for key in node.children],
        }


def _folder_segments(path_value: str) -> List[str]:
    segments = comparable_segments(path_value)
    # The final segment is the point itself; only folders are kept.
    if len(segments) <= 1:
        return []
    return segments[:-1]


def build_folder_tree(paths: Iterable[str], root_name: str = ROOT_NAME) -> FolderTree:
    """Build a deduplicated folder tree from full point paths.

    Node keys stay raw (``root/My$20Folder``); only display names are decoded.
    """
    names: Dict[str, str] = {root_name: root_name}
    children: Dict[str, List[str]] = {root_name: []}

    for path_value in paths:
        current_key = root_name
        for segment in _folder_segments(path_value):
            next_key = f"{current_key}/{segment}"
            if next_key not in names:
                names[next_key] = decode_segment(segment)
                children[next_key] = []
                children[current_key].append(next_key)
            current_key = next_key

    nodes: Dict[str, FolderNode] = {}
    for key, child_keys in children.items():
        ordered = sorted(child_keys, key=lambda k: locale_sort_key(names[k]))
        nodes[key] = FolderNode(name=names[key], path=key, children=tuple(ordered))
    return FolderTree(nodes, root_name)


def _leaf_under_folder(folder_segments: List[str], point_path: str) -> Optional[str]:
    segments = comparable_segments(point_path)
    if len(segments) <= 1:
        return None
    folders = segments[:-1]
    if folders[:len(folder_segments)] != folder_segments:
        return None
    return segments[-1]


def list_leaf_points_under_folder(folder_path: str, full_paths: Iterable[str]) -> List[str]:
    """Unique leaf names of the points that descend from ``folder_path``."""
    folder_segments = comparable_segments(folder_path)
    out = set()
    for point_path in full_paths:
        leaf = _leaf_under_folder(folder_segments, point_path)
        if leaf is not None:
            out.add(leaf)
    return sorted(out, key=locale_sort_key)


def list_leaf_points_by_type(folder_path: str, points: Iterable[PointRecord]) -> List[LeafPointsByType]:
    """Leaf names under ``folder_path`` grouped by point type."""
    folder_segments = comparable_segments(folder_path)
    by_type: Dict[str, set] = {}
    for record in points:
        leaf = _leaf_under_folder(folder_segments, record.path)
        if leaf is None:
            continue
        type_label = (record.type or "").strip() or DEFAULT_TYPE_LABEL
        by_type.setdefault(type_label, set()).add(leaf)

    return [
        LeafPointsByType(type=type_label, points=sorted(leafs, key=locale_sort_key))
        for type_label, leafs in sorted(by_type.items(), key=lambda item: locale_sort_key(item[0]))
    ]


def count_points_under_folder(folder_path: str, points: Iterable[PointRecord]) -> int:
    groups = list_leaf_points_by_type(folder_path, points)
    return len({leaf for group in groups for leaf in group.points})
