"""Device conflict planning.

Marking folders as devices must never leave a point with two owners. The
planner turns a raw selection into a :class:`DeviceConflictPlan` describing
what would be added, which existing devices would be replaced, and which
points would silently move from one device to another.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..core.ownership import owner_of
from ..core.paths import PathRelation, canonical_paths, relate
from ..core.records import PointRecord
from .models import DeviceConflictPlan, ReassignmentGroup

logger = logging.getLogger(__name__)


def resolve_selection_overlap(candidates: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Split a selection into (to_add, dropped).

    Candidates are compared in canonical form (``A/`` and ``root/A`` are one
    folder). A candidate that is a strict ancestor of another selected
    candidate is dropped so that only the most specific folders are kept.
    """
    unique = canonical_paths(candidates)

    to_add: List[str] = []
    dropped: List[str] = []
    for candidate in unique:
        if any(
            candidate != other and relate(candidate, other) is PathRelation.ANCESTOR
            for other in unique
        ):
            dropped.append(candidate)
        else:
            to_add.append(candidate)
    return to_add, dropped


def compute_reassignment_groups(
    points: Sequence[PointRecord],
    current_devices: Sequence[str],
    next_devices: Sequence[str],
) -> List[ReassignmentGroup]:
    """Group points whose owner changes from one device to another.

    Points that become owned or become unowned are not reported.
    """
    grouped: Dict[Tuple[Optional[str], Optional[str]], Set[str]] = {}
    for record in points:
        before = owner_of(record.path, current_devices)
        after = owner_of(record.path, next_devices)
        if before == after or before is None or after is None:
            continue
        grouped.setdefault((before, after), set()).add(record.path)

    groups = [
        ReassignmentGroup(from_device_path=before, to_device_path=after, point_paths=sorted(paths))
        for (before, after), paths in grouped.items()
    ]
    groups.sort(key=lambda g: g.key)
    return groups


def plan_device_addition(
    current_devices: Sequence[str],
    candidates: Iterable[str],
    points: Sequence[PointRecord],
) -> DeviceConflictPlan:
    """Plan adding ``candidates`` to the device set.

    Args:
        current_devices: Current device folder paths
        candidates: Folder paths the user wants to mark as devices
        points: All known points, used for the reassignment report

    Returns:
        DeviceConflictPlan (no state is changed)
    """
    to_add, dropped = resolve_selection_overlap(candidates)

    upstream: Set[str] = set()
    downstream: Set[str] = set()
    current_devices = canonical_paths(current_devices)
    for existing in current_devices:
        for incoming in to_add:
            rel = relate(existing, incoming)
            if rel is PathRelation.ANCESTOR:
                upstream.add(existing)
            elif rel is PathRelation.DESCENDANT:
                downstream.add(existing)

    to_remove = upstream | downstream
    next_devices = project_next_devices(current_devices, to_add, to_remove)
    groups = compute_reassignment_groups(points, current_devices, next_devices)

    plan = DeviceConflictPlan(
        to_add=sorted(to_add),
        to_remove=sorted(to_remove),
        dropped_from_selection=sorted(dropped),
        upstream_conflicts=sorted(upstream),
        downstream_conflicts=sorted(downstream),
        reassignment_groups=groups,
    )
    logger.debug(
        "Device plan: add=%d remove=%d dropped=%d reassigned=%d",
        len(plan.to_add),
        len(plan.to_remove),
        len(plan.dropped_from_selection),
        plan.reassigned_point_count,
    )
    return plan


def project_next_devices(
    current_devices: Iterable[str],
    to_add: Iterable[str],
    to_remove: Iterable[str],
) -> List[str]:
    remove_set = set(canonical_paths(to_remove))
    out = {path for path in canonical_paths(current_devices) if path not in remove_set}
    out.update(canonical_paths(to_add))
    return sorted(out)


def apply_plan(current_devices: Iterable[str], plan: DeviceConflictPlan) -> List[str]:
    return project_next_devices(current_devices, plan.to_add, plan.to_remove)
