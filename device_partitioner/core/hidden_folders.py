"""Hidden folder bookkeeping.

The hidden set is always kept in its most general form: no entry is covered
by another one, so a folder is hidden iff it sits at or beneath an entry.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, List, Optional, Sequence

from .paths import ROOT_NAME, PathRelation, canonical_folder_path, comparable_segments, relate

logger = logging.getLogger(__name__)


def _matches_prefix(path_segments: List[str], ancestor_segments: List[str]) -> bool:
    return path_segments[:len(ancestor_segments)] == ancestor_segments


def is_downstream_of_any(path: str, ancestor_paths: Sequence[str]) -> bool:
    """True when ``path`` is a strict descendant of any of ``ancestor_paths``."""
    path_segments = comparable_segments(path)
    if not path_segments:
        return False
    for ancestor in ancestor_paths:
        ancestor_segments = comparable_segments(ancestor)
        if not ancestor_segments or len(path_segments) <= len(ancestor_segments):
            continue
        if _matches_prefix(path_segments, ancestor_segments):
            return True
    return False


def is_at_or_downstream_of_any(path: str, ancestor_paths: Sequence[str]) -> bool:
    """True when ``path`` equals or descends from any of ``ancestor_paths``."""
    path_segments = comparable_segments(path)
    if not path_segments:
        return False
    for ancestor in ancestor_paths:
        ancestor_segments = comparable_segments(ancestor)
        if not ancestor_segments or len(path_segments) < len(ancestor_segments):
            continue
        if _matches_prefix(path_segments, ancestor_segments):
            return True
    return False


def normalize_hidden_paths(
    candidates: Iterable[str],
    folder_paths: Optional[AbstractSet[str]] = None,
) -> List[str]:
    """Reduce ``candidates`` to a minimal, sorted set of hidden folder paths.

    Args:
        candidates: Raw folder paths, possibly overlapping or stale
        folder_paths: Paths of the current folder tree; when empty or None
            (no data loaded) paths are not checked for presence

    Returns:
        Sorted list where no path is covered by another
    """
    unique: List[str] = []
    seen = set()
    for raw in candidates:
        if not isinstance(raw, str):
            continue
        path = canonical_folder_path(raw)
        if not path or path == ROOT_NAME or path in seen:
            continue
        seen.add(path)
        unique.append(path)

    if folder_paths:
        stale = [p for p in unique if p not in folder_paths]
        if stale:
            logger.debug("Dropping %d hidden folder(s) missing from the tree", len(stale))
        unique = [p for p in unique if p in folder_paths]

    kept: List[str] = []
    for path in unique:
        covered = False
        for other in unique:
            if other == path:
                continue
            if relate(other, path) in (PathRelation.ANCESTOR, PathRelation.SAME):
                covered = True
                break
        if not covered:
            kept.append(path)

    return sorted(kept)
