"""Path normalization and relation helpers.

Every containment question in the project (ownership, conflicts, hidden
folders) is answered by :func:`relate`, which compares two slash-delimited
paths segment by segment after dropping a leading ``root`` segment.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, Optional

ROOT_NAME = "root"

_ESCAPE_RE = re.compile(r"\$([0-9a-fA-F]{2})")
_MULTI_SLASH_RE = re.compile(r"/+")


class PathRelation(str, Enum):
    """Relation of path ``a`` to path ``b``."""

    SAME = "same"
    ANCESTOR = "ancestor"
    DESCENDANT = "descendant"
    DISJOINT = "disjoint"

    def inverse(self) -> "PathRelation":
        if self is PathRelation.ANCESTOR:
            return PathRelation.DESCENDANT
        if self is PathRelation.DESCENDANT:
            return PathRelation.ANCESTOR
        return self


def decode_segment(value: str) -> str:
    """Replace ``$XX`` hex escapes with their character (``My$20Folder`` -> ``My Folder``)."""
    return _ESCAPE_RE.sub(lambda m: chr(int(m.group(1), 16)), value)


def normalize_path(value: Optional[str]) -> str:
    if not isinstance(value, str):
        return ""
    return _MULTI_SLASH_RE.sub("/", value.strip().replace("\\", "/"))


def split_segments(value: Optional[str]) -> List[str]:
    normalized = normalize_path(value)
    if not normalized:
        return []
    return [seg.strip() for seg in normalized.split("/") if seg.strip()]


def strip_root(segments: List[str]) -> List[str]:
    if segments and segments[0] == ROOT_NAME:
        return segments[1:]
    return segments


def comparable_segments(value: Optional[str]) -> List[str]:
    return strip_root(split_segments(value))


def canonical_folder_path(value: Optional[str]) -> str:
    """Return ``root/a/b`` for any spelling of a folder path, or ``""``."""
    segments = comparable_segments(value)
    if not segments:
        return ROOT_NAME if split_segments(value) else ""
    return "/".join([ROOT_NAME, *segments])


def canonical_paths(paths: Iterable[str]) -> List[str]:
    """Canonical spellings in first-seen order; empty and root-only entries are dropped."""
    out: List[str] = []
    seen = set()
    for raw in paths:
        path = canonical_folder_path(raw) if isinstance(raw, str) else ""
        if path and path != ROOT_NAME and path not in seen:
            seen.add(path)
            out.append(path)
    return out


def relate(a: Optional[str], b: Optional[str]) -> PathRelation:
    """Compare two folder paths ignoring a leading ``root`` segment.

    - ``ANCESTOR``: ``a`` is a strict ancestor of ``b``
    - ``DESCENDANT``: ``a`` is a strict descendant of ``b``

    Root-only or empty paths are always ``DISJOINT``.
    """
    a_segs = comparable_segments(a)
    b_segs = comparable_segments(b)
    if not a_segs or not b_segs:
        return PathRelation.DISJOINT

    for a_seg, b_seg in zip(a_segs, b_segs):
        if a_seg != b_seg:
            return PathRelation.DISJOINT

    if len(a_segs) == len(b_segs):
        return PathRelation.SAME
    if len(a_segs) < len(b_segs):
        return PathRelation.ANCESTOR
    return PathRelation.DESCENDANT


def folder_depth(path: Optional[str]) -> int:
    return len(comparable_segments(path))


def display_path(path: str) -> str:
    prefix = f"{ROOT_NAME}/"
    return path[len(prefix):] if path.startswith(prefix) else path


def leaf_display_name(path: str) -> str:
    shown = display_path(path)
    raw = shown.split("/")[-1] if shown else shown
    return decode_segment(raw)


def folder_key_for_point(point_path: str) -> Optional[str]:
    """Folder key (``root/...``) holding a point, or None for single-segment paths."""
    segments = split_segments(point_path)
    if len(segments) <= 1:
        return None
    folders = segments[:-1]
    if folders[0] == ROOT_NAME:
        return "/".join(folders)
    return "/".join([ROOT_NAME, *folders])


def locale_sort_key(value: str):
    """Case-insensitive ordering with lowercase-first tie-break."""
    return (value.casefold(), value.swapcase())
