#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Device Partitioner - Core Package

Path handling, folder tree construction, ownership and hidden folder rules.
"""

from .paths import (
    ROOT_NAME,
    PathRelation,
    canonical_folder_path,
    canonical_paths,
    decode_segment,
    display_path,
    folder_depth,
    normalize_path,
    relate,
)
from .records import PointRecord
from .hidden_folders import (
    is_at_or_downstream_of_any,
    is_downstream_of_any,
    normalize_hidden_paths,
)
from .folder_tree import (
    FolderNode,
    FolderTree,
    LeafPointsByType,
    build_folder_tree,
    list_leaf_points_by_type,
    list_leaf_points_under_folder,
)
from .ownership import UnassignedStats, compute_unassigned_stats, owner_of

__all__ = [
# Paths
    'ROOT_NAME',
    'PathRelation',
    'canonical_folder_path',
    'canonical_paths',
    'decode_segment',
    'display_path',
    'folder_depth',
    'normalize_path',
    'relate',

    # Records
    'PointRecord',

# Hidden folders
    'is_at_or_downstream_of_any',
    'is_downstream_of_any',
    'normalize_hidden_paths',

    # Folder tree
    'FolderNode',
    'FolderTree',
    'LeafPointsByType',
    'build_folder_tree',
    'list_leaf_points_by_type',
    'list_leaf_points_under_folder',

# Ownership
    'UnassignedStats',
    'compute_unassigned_stats',
    'owner_of',
]
