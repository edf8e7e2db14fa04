"""Ownership resolution for points."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .paths import PathRelation, folder_depth, folder_key_for_point, relate
from .records import PointRecord


@dataclass(frozen=True)
class UnassignedStats:
    total_points: int = 0
    unassigned_points: int = 0
    unassigned_folder_paths: List[str] = field(default_factory=list)


def owner_of(point_path: str, device_paths: Iterable[str]) -> Optional[str]:
    """Return the deepest device folder containing ``point_path``.

    The device set is normally free of nested entries, but the deepest match
    wins if it is not.
    """
    best: Optional[str] = None
    best_depth = -1
    for device_path in device_paths:
        rel = relate(device_path, point_path)
        if rel is not PathRelation.ANCESTOR and rel is not PathRelation.SAME:
            continue
        depth = folder_depth(device_path)
        if depth > best_depth:
            best = device_path
            best_depth = depth
    return best


def compute_unassigned_stats(points: Sequence[PointRecord], device_paths: Sequence[str]) -> UnassignedStats:
    unassigned = 0
    folders = set()
    for record in points:
        if owner_of(record.path, device_paths) is not None:
            continue
        unassigned += 1
        folder_key = folder_key_for_point(record.path)
        if folder_key:
            folders.add(folder_key)

    return UnassignedStats(
        total_points=len(points),
        unassigned_points=unassigned,
        unassigned_folder_paths=sorted(folders),
    )
