"""Shared type aliases and dataclasses for the device workspace."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional, Tuple

from ..core.records import PointRecord

DeviceListKind = Literal["merged", "device"]

DisplayNameResolver = Callable[[str], str]

UNASSIGNED_MARKER = "∅"


@dataclass(frozen=True)
class ReassignmentGroup:
    from_device_path: Optional[str]
    to_device_path: Optional[str]
    point_paths: List[str]

    @property
    def key(self) -> str:
        return f"{self.from_device_path or UNASSIGNED_MARKER}→{self.to_device_path or UNASSIGNED_MARKER}"


@dataclass(frozen=True)
class DeviceConflictPlan:
    to_add: List[str]
    to_remove: List[str]
    dropped_from_selection: List[str]
    upstream_conflicts: List[str]
    downstream_conflicts: List[str]
    reassignment_groups: List[ReassignmentGroup]

    @property
    def requires_confirmation(self) -> bool:
        return bool(self.to_remove or self.dropped_from_selection)

    @property
    def reassigned_point_count(self) -> int:
        return sum(len(group.point_paths) for group in self.reassignment_groups)


@dataclass(frozen=True)
class MergedDevice:
    id: str
    name: str
    member_paths: Tuple[str, ...]


@dataclass(frozen=True)
class PendingMerge:
    member_paths: Tuple[str, ...]
    suggested_name: str


@dataclass(frozen=True)
class DeviceListItem:
    kind: DeviceListKind
    key: str
    name: str
    member_paths: Tuple[str, ...]
    group_id: Optional[str] = None


@dataclass(frozen=True)
class TabularData:
    columns: List[str]
    rows: List[dict] = field(default_factory=list)


@dataclass(frozen=True)
class PointSet:
    paths: List[str]
    points: List[PointRecord]


@dataclass(frozen=True)
class ExportSummary:
    rows: int
    assigned: int
    unassigned: int
    hidden: int
