"""Public API surface for UIs and integrations.

Centralizes stable imports to keep callers decoupled from module internals.
"""

from __future__ import annotations

from ..config import PersistedState, StateStore, load_state, save_state
from ..core.folder_tree import (
    FolderNode,
    FolderTree,
    LeafPointsByType,
    build_folder_tree,
    list_leaf_points_by_type,
    list_leaf_points_under_folder,
)
from ..core.hidden_folders import is_at_or_downstream_of_any, is_downstream_of_any, normalize_hidden_paths
from ..core.ownership import UnassignedStats, compute_unassigned_stats, owner_of
from ..core.paths import PathRelation, decode_segment, display_path, normalize_path, relate
from ..core.records import PointRecord
from .conflict_planner import apply_plan, compute_reassignment_groups, plan_device_addition, resolve_selection_overlap
from .controller import DeviceWorkspace
from .csv_source import extract_points, parse_csv_text, read_text_file
from .export import DEVICE_NAME_COLUMN, HIDDEN_MARKER, device_name_for_path, format_csv, project_rows, write_csv
from .merge_manager import MergeManager
from .models import (
    DeviceConflictPlan,
    DeviceListItem,
    ExportSummary,
    MergedDevice,
    PendingMerge,
    PointSet,
    ReassignmentGroup,
    TabularData,
)

__all__ = [
    "DEVICE_NAME_COLUMN",
    "HIDDEN_MARKER",
    "DeviceConflictPlan",
    "DeviceListItem",
    "DeviceWorkspace",
    "ExportSummary",
    "FolderNode",
    "FolderTree",
    "LeafPointsByType",
    "MergeManager",
    "MergedDevice",
    "PathRelation",
    "PendingMerge",
    "PersistedState",
    "PointRecord",
    "PointSet",
    "ReassignmentGroup",
    "StateStore",
    "TabularData",
    "UnassignedStats",
    "apply_plan",
    "build_folder_tree",
    "compute_reassignment_groups",
    "compute_unassigned_stats",
    "decode_segment",
    "device_name_for_path",
    "display_path",
    "extract_points",
    "format_csv",
    "is_at_or_downstream_of_any",
    "is_downstream_of_any",
    "list_leaf_points_by_type",
    "list_leaf_points_under_folder",
    "load_state",
    "normalize_hidden_paths",
    "normalize_path",
    "owner_of",
    "parse_csv_text",
    "plan_device_addition",
    "project_rows",
    "read_text_file",
    "relate",
    "resolve_selection_overlap",
    "save_state",
    "write_csv",
]
