#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Device Partitioner - Point Records

Central data model for the rows consumed from the tabular input.
"""

from dataclasses import dataclass

DEFAULT_TYPE_LABEL = "Unknown"
NO_TYPE_COLUMN_LABEL = "Points"


@dataclass(frozen=True)
class PointRecord:
    """One source row with a non-empty path value."""

# Full path including the leaf (point) segment
    path: str

# Display-only type label, already defaulted by the loader
    type: str = NO_TYPE_COLUMN_LABEL
