"""Merged device management.

Several device folders can be shown as one logical device. A folder belongs
to at most one merged group; creating a group that shares a member with an
existing group replaces that group entirely.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Dict, Iterable, List, Optional, Sequence, Set

from ..core.paths import PathRelation, relate
from .models import MergedDevice, PendingMerge

logger = logging.getLogger(__name__)


def new_merge_id() -> str:
    return f"merged_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"


class MergeManager:
    """Owns merged groups and the merge staged for confirmation."""

    def __init__(self, groups: Optional[Iterable[MergedDevice]] = None):
        self._groups: List[MergedDevice] = []
        self._pending: Optional[PendingMerge] = None
        for group in groups or ():
            self._install(group)

    @property
    def groups(self) -> List[MergedDevice]:
        return list(self._groups)

    @property
    def pending(self) -> Optional[PendingMerge]:
        return self._pending

    def _install(self, group: MergedDevice) -> None:
        members = set(group.member_paths)
        replaced = [g for g in self._groups if members.intersection(g.member_paths)]
        if replaced:
            logger.info(
                "Merged device '%s' replaces %d overlapping group(s)",
                group.name,
                len(replaced),
            )
        self._groups = [g for g in self._groups if not members.intersection(g.member_paths)]
        self._groups.append(group)

    def begin_merge(self, paths: Iterable[str], suggested_name: str = "") -> bool:
        """Stage a merge of at least two distinct, non-nested folder paths."""
        member_paths: List[str] = []
        for path in paths:
            if path and path not in member_paths:
                member_paths.append(path)
        if len(member_paths) < 2:
            logger.debug("Merge needs at least two folders, got %d", len(member_paths))
            return False
        for i, first in enumerate(member_paths):
            for second in member_paths[i + 1:]:
                if relate(first, second) is not PathRelation.DISJOINT:
                    logger.debug("Merge rejected: %s and %s overlap", first, second)
                    return False
        self._pending = PendingMerge(member_paths=tuple(member_paths), suggested_name=suggested_name)
        return True

    def confirm_merge(self, name: str) -> Optional[MergedDevice]:
        """Commit the staged merge under ``name``.

        Returns the new group, or None when nothing is staged or the name is
        blank (the staged merge is kept in that case).
        """
        if self._pending is None:
            return None
        trimmed = (name or "").strip()
        if not trimmed:
            logger.debug("Merge name is empty; merge not confirmed")
            return None

        group = MergedDevice(
            id=new_merge_id(),
            name=trimmed,
            member_paths=tuple(sorted(set(self._pending.member_paths))),
        )
        self._install(group)
        self._pending = None
        return group

    def cancel_merge(self) -> None:
        self._pending = None

    def unmerge(self, group_id: str) -> bool:
        before = len(self._groups)
        self._groups = [g for g in self._groups if g.id != group_id]
        return len(self._groups) != before

    def prune(self, device_paths: Iterable[str]) -> bool:
        """Drop members that are no longer devices; delete emptied groups."""
        device_set: Set[str] = set(device_paths)
        changed = False
        kept_groups: List[MergedDevice] = []
        for group in self._groups:
            kept = tuple(p for p in group.member_paths if p in device_set)
            if not kept:
                changed = True
                continue
            if len(kept) != len(group.member_paths):
                changed = True
                kept_groups.append(MergedDevice(id=group.id, name=group.name, member_paths=kept))
            else:
                kept_groups.append(group)
        if changed:
            self._groups = kept_groups
        return changed

    def merged_name_by_path(self) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for group in self._groups:
            name = group.name.strip()
            if not name:
                continue
            for path in group.member_paths:
                out[path] = name
        return out

    def group_for(self, path: str) -> Optional[MergedDevice]:
        for group in self._groups:
            if path in group.member_paths:
                return group
        return None

    def member_paths(self) -> Sequence[str]:
        return [p for g in self._groups for p in g.member_paths]
