"""Device workspace controller.

:class:`DeviceWorkspace` owns every piece of shared state: the loaded rows,
the folder tree, the device set, merged devices, name overrides, hidden
folders and the current selection. Collaborators read it through properties
and change it only through the methods below. Each method either applies
completely or leaves the state untouched.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..config.models import MergedDeviceModel, PersistedState
from ..core.folder_tree import FolderTree, build_folder_tree
from ..core.hidden_folders import is_at_or_downstream_of_any, normalize_hidden_paths
from ..core.ownership import UnassignedStats, compute_unassigned_stats, owner_of
from ..core.paths import (
    ROOT_NAME,
    PathRelation,
    canonical_folder_path,
    canonical_paths,
    leaf_display_name,
    locale_sort_key,
    relate,
)
from ..core.records import PointRecord
from ..logging_config import LoggingTimer
from .conflict_planner import apply_plan, plan_device_addition, resolve_selection_overlap
from .csv_source import extract_points, parse_csv_text
from .export import format_csv, project_rows
from .merge_manager import MergeManager
from .models import (
    DeviceConflictPlan,
    DeviceListItem,
    ExportSummary,
    MergedDevice,
    PendingMerge,
    TabularData,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[PersistedState], None]


class DeviceWorkspace:
    """Single-user engine for partitioning points into devices."""

    def __init__(
        self,
        state: Optional[PersistedState] = None,
        *,
        on_change: Optional[StateListener] = None,
        root_name: str = ROOT_NAME,
    ):
        self._root_name = root_name
        self._on_change = on_change

        self._data: Optional[TabularData] = None
        self._path_column = ""
        self._type_column = ""
        self._points: List[PointRecord] = []
        self._tree: Optional[FolderTree] = None

        self._devices: Set[str] = set()
        self._merges = MergeManager()
        self._name_by_path: Dict[str, str] = {}
        self._hidden: List[str] = []
        self._selection: List[str] = []
        self._pending_plan: Optional[DeviceConflictPlan] = None
        # Constructor state waits for the first path column selection.
        self._pending_state: Optional[PersistedState] = None

        if state is not None:
            self._restore(state)
            self._pending_state = state

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def columns(self) -> List[str]:
        return list(self._data.columns) if self._data else []

    @property
    def path_column(self) -> str:
        return self._path_column

    @property
    def type_column(self) -> str:
        return self._type_column

    @property
    def points(self) -> Tuple[PointRecord, ...]:
        return tuple(self._points)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(p.path for p in self._points)

    @property
    def tree(self) -> Optional[FolderTree]:
        return self._tree

    @property
    def device_paths(self) -> Tuple[str, ...]:
        return tuple(sorted(self._devices))

    @property
    def merged_devices(self) -> Tuple[MergedDevice, ...]:
        return tuple(self._merges.groups)

    @property
    def name_overrides(self) -> Dict[str, str]:
        return dict(self._name_by_path)

    @property
    def hidden_folder_paths(self) -> Tuple[str, ...]:
        return tuple(self._hidden)

    @property
    def selection(self) -> Tuple[str, ...]:
        return tuple(self._selection)

    @property
    def pending_plan(self) -> Optional[DeviceConflictPlan]:
        return self._pending_plan

    @property
    def pending_merge(self) -> Optional[PendingMerge]:
        return self._merges.pending

    def display_name(self, path: str) -> str:
        """Merged group name, then manual override, then the decoded leaf segment."""
        key = canonical_folder_path(path)
        merged_name = self._merges.merged_name_by_path().get(key, "").strip()
        if merged_name:
            return merged_name
        override = self._name_by_path.get(key, "").strip()
        if override:
            return override
        return leaf_display_name(path)

    def owner_of(self, point_path: str) -> Optional[str]:
        return owner_of(point_path, self._devices)

    @property
    def device_entity_count(self) -> int:
        merged_members = set(self._merges.member_paths())
        unmerged = sum(1 for p in self._devices if p not in merged_members)
        return len(self._merges.groups) + unmerged

    def device_list_items(self) -> List[DeviceListItem]:
        """Merged groups by name, then standalone devices by path."""
        items = [
            DeviceListItem(
                kind="merged",
                key=f"m:{group.id}",
                name=group.name,
                member_paths=group.member_paths,
                group_id=group.id,
            )
            for group in sorted(self._merges.groups, key=lambda g: locale_sort_key(g.name))
        ]
        merged_members = set(self._merges.member_paths())
        for path in sorted(self._devices):
            if path in merged_members:
                continue
            items.append(
                DeviceListItem(kind="device", key=f"p:{path}", name=self.display_name(path), member_paths=(path,))
            )
        return items

    def unassigned_stats(self) -> UnassignedStats:
        return compute_unassigned_stats(self._points, list(self._devices))

    def visible_unassigned_folder_paths(self) -> List[str]:
        folders = self.unassigned_stats().unassigned_folder_paths
        if not self._hidden:
            return folders
        return [p for p in folders if not is_at_or_downstream_of_any(p, self._hidden)]

    def snapshot(self) -> PersistedState:
        return PersistedState(
            device_paths=sorted(self._devices),
            name_by_path=dict(sorted(self._name_by_path.items())),
            merged_devices=[
                MergedDeviceModel(id=g.id, name=g.name, member_paths=list(g.member_paths))
                for g in self._merges.groups
            ],
            hidden_folder_paths=list(self._hidden),
        )

    # ------------------------------------------------------------------
    # Data loading
    # ------------------------------------------------------------------

    def load_csv_text(self, text: str) -> List[str]:
        """Load new tabular data; columns must be chosen again afterwards."""
        self._data = parse_csv_text(text)
        self._path_column = ""
        self._type_column = ""
        self._set_points([])
        self._reset_partition()
        logger.info("Loaded %d rows with columns: %s", len(self._data.rows), ", ".join(self._data.columns))
        return self.columns

    def select_path_column(self, column: str) -> int:
        """Choose the path column; devices, selection and hidden folders are reset.

        Returns the number of points extracted.
        """
        if self._data is None or not column:
            self._path_column = column or ""
            self._set_points([])
            self._reset_partition()
            return 0

        point_set = extract_points(self._data, column, self._type_column or None)
        self._path_column = column
        self._set_points(point_set.points)
        self._reset_partition()
        if self._pending_state is not None and self._points:
            state, self._pending_state = self._pending_state, None
            self._restore(state)
            self._notify()
        logger.info("Path column '%s' yields %d points", column, len(self._points))
        return len(self._points)

    def select_type_column(self, column: str) -> None:
        """Choose the type column; only point types are re-derived."""
        if self._data is None or not self._path_column:
            self._type_column = column or ""
            self._points = []
            return
        point_set = extract_points(self._data, self._path_column, column or None)
        self._type_column = column or ""
        self._points = list(point_set.points)

    def restore(self, state: PersistedState) -> None:
        """Apply persisted state on top of the loaded data."""
        self._pending_state = None
        self._restore(state)
        self._notify()

    def _restore(self, state: PersistedState) -> None:
        devices = list(state.device_paths)
        for group in state.merged_devices:
            devices.extend(group.member_paths)
        devices = canonical_paths(devices)
        folders = self._folder_path_set()
        if folders:
            stale = [p for p in devices if p not in folders]
            if stale:
                logger.info("Ignoring %d persisted device(s) missing from the tree", len(stale))
            devices = [p for p in devices if p in folders]
        kept, dropped = resolve_selection_overlap(devices)
        if dropped:
            logger.warning("Ignoring %d persisted device(s) that contain other devices", len(dropped))
        self._devices = set(kept)
        self._merges = MergeManager(
            MergedDevice(id=g.id, name=g.name, member_paths=tuple(sorted(canonical_paths(g.member_paths))))
            for g in state.merged_devices
        )
        self._name_by_path = {}
        for raw_path, name in state.name_by_path.items():
            for path in canonical_paths([raw_path]):
                self._name_by_path[path] = name
        self._hidden = normalize_hidden_paths(state.hidden_folder_paths, self._folder_path_set())
        self._prune_device_state()

    def _set_points(self, points: Sequence[PointRecord]) -> None:
        self._points = list(points)
        with LoggingTimer("build_folder_tree"):
            self._tree = build_folder_tree([p.path for p in self._points], self._root_name) if self._points else None
        self._hidden = normalize_hidden_paths(self._hidden, self._folder_path_set())

    def _reset_partition(self) -> None:
        self._pending_plan = None
        self._merges.cancel_merge()
        self._selection = []
        self._hidden = []
        self._set_devices(set())

    def _folder_path_set(self) -> Optional[frozenset]:
        return self._tree.folder_paths() if self._tree is not None else None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def set_selection(self, paths: Iterable[str]) -> None:
        self._selection = canonical_paths(paths)

    def toggle_selection(self, path: str) -> None:
        path = canonical_folder_path(path)
        if path == ROOT_NAME:
            return
        if path in self._selection:
            self._selection = [p for p in self._selection if p != path]
        elif path:
            self._selection.append(path)

    def select_single(self, path: str) -> None:
        self._selection = canonical_paths([path])

    def clear_selection(self) -> None:
        self._selection = []

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    def mark_selection_as_devices(self) -> Optional[DeviceConflictPlan]:
        """Plan marking the selection as devices.

        Without conflicts the change is applied at once and the selection
        cleared. Otherwise the plan is kept in :attr:`pending_plan` until
        confirmed or cancelled. Returns None for an empty selection.
        """
        if not self._selection:
            return None

        self._pending_plan = None
        with LoggingTimer("plan_device_addition"):
            plan = plan_device_addition(sorted(self._devices), self._selection, self._points)

        if plan.requires_confirmation:
            self._pending_plan = plan
            logger.info(
                "Device change needs confirmation: %d to remove, %d dropped from selection",
                len(plan.to_remove),
                len(plan.dropped_from_selection),
            )
            return plan

        self._set_devices(set(apply_plan(self._devices, plan)))
        self._selection = []
        logger.info("Marked %d folder(s) as devices", len(plan.to_add))
        return plan

    def mark_as_devices(self, paths: Iterable[str], *, confirm: bool = False) -> Optional[DeviceConflictPlan]:
        """Select ``paths`` and mark them; ``confirm`` accepts any conflict plan."""
        self.set_selection(paths)
        plan = self.mark_selection_as_devices()
        if plan is not None and confirm and self._pending_plan is not None:
            self.confirm_device_conflict()
        return plan

    def confirm_device_conflict(self) -> bool:
        plan = self._pending_plan
        if plan is None:
            return False
        self._set_devices(set(apply_plan(self._devices, plan)))
        self._pending_plan = None
        self._selection = []
        logger.info("Applied device plan: +%d / -%d", len(plan.to_add), len(plan.to_remove))
        return True

    def cancel_device_conflict(self) -> None:
        self._pending_plan = None

    def remove_devices(self, paths: Iterable[str]) -> bool:
        remove_set = set(canonical_paths(paths))
        if not remove_set & self._devices:
            return False
        self._set_devices(self._devices - remove_set)
        return True

    def rename_device(self, path: str, name: str) -> None:
        """Set a display name override; an empty name removes it."""
        path = canonical_folder_path(path)
        if not path or path == ROOT_NAME:
            return
        trimmed = (name or "").strip()
        if trimmed:
            self._name_by_path[path] = trimmed
        else:
            self._name_by_path.pop(path, None)
        self._notify()

    def _set_devices(self, devices: Set[str]) -> None:
        self._devices = set(devices)
        self._prune_device_state()
        self._notify()

    def _prune_device_state(self) -> None:
        """Drop merged members and name overrides for paths that are not devices."""
        self._merges.prune(self._devices)
        stale = [p for p in self._name_by_path if p not in self._devices]
        for path in stale:
            del self._name_by_path[path]

    # ------------------------------------------------------------------
    # Merges
    # ------------------------------------------------------------------

    def begin_merge(self, paths: Iterable[str], suggested_name: Optional[str] = None) -> bool:
        """Stage a merge; members nested in or around an existing device are rejected."""
        members = canonical_paths(paths)
        for member in members:
            for device in self._devices:
                if relate(member, device) in (PathRelation.ANCESTOR, PathRelation.DESCENDANT):
                    logger.debug("Merge rejected: %s overlaps device %s", member, device)
                    return False
        if suggested_name is None:
            suggested_name = self.display_name(members[0]) if members else ""
        return self._merges.begin_merge(members, suggested_name)

    def confirm_merge(self, name: str) -> Optional[MergedDevice]:
        """Commit the staged merge; staged folders become devices if needed."""
        pending = self._merges.pending
        if pending is None:
            return None
        missing = set(pending.member_paths) - self._devices
        group = self._merges.confirm_merge(name)
        if group is None:
            return None
        if missing:
            logger.info("Merge promoted %d folder(s) to devices", len(missing))
        self._set_devices(self._devices | set(group.member_paths))
        logger.info("Created merged device '%s' with %d members", group.name, len(group.member_paths))
        return group

    def cancel_merge(self) -> None:
        self._merges.cancel_merge()

    def unmerge(self, group_id: str) -> bool:
        changed = self._merges.unmerge(group_id)
        if changed:
            self._notify()
        return changed

    # ------------------------------------------------------------------
    # Hidden folders
    # ------------------------------------------------------------------

    def hide_folders(self, paths: Iterable[str]) -> List[str]:
        to_hide = [p.strip() for p in paths if isinstance(p, str) and p.strip()]
        if not to_hide:
            return list(self._hidden)
        self._hidden = normalize_hidden_paths([*self._hidden, *to_hide], self._folder_path_set())
        self._selection = [p for p in self._selection if not is_at_or_downstream_of_any(p, to_hide)]
        self._notify()
        return list(self._hidden)

    def unhide_folders(self, paths: Iterable[str]) -> List[str]:
        remove_set = set(canonical_paths(paths))
        if remove_set & set(self._hidden):
            self._hidden = [p for p in self._hidden if p not in remove_set]
            self._notify()
        return list(self._hidden)

    def visible_folder_paths(self) -> List[str]:
        if self._tree is None:
            return []
        return self._tree.visible_paths(self._hidden)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_rows(self) -> Optional[Tuple[List[str], List[dict], ExportSummary]]:
        if self._data is None or not self._path_column:
            return None
        with LoggingTimer("export_rows"):
            return project_rows(
                self._data,
                self._path_column,
                sorted(self._devices),
                self._hidden,
                self.display_name,
            )

    def export_csv_text(self) -> Optional[str]:
        projected = self.export_rows()
        if projected is None:
            return None
        columns, rows, _summary = projected
        return format_csv(columns, rows)

    def _notify(self) -> None:
        # Persisted state stays untouched until the constructor state is applied.
        if self._pending_state is not None:
            return
        if self._on_change is not None:
            self._on_change(self.snapshot())
