"""Tabular input helpers (CSV text in, point records out)."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Optional

from ..core.records import DEFAULT_TYPE_LABEL, NO_TYPE_COLUMN_LABEL, PointRecord
from ..exceptions import ColumnNotFoundError, FileOperationError
from .models import PointSet, TabularData

logger = logging.getLogger(__name__)


def read_text_file(path: str | Path) -> str:
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(f"Cannot read {path}: {exc}", file_path=str(path), operation="read") from exc


def parse_csv_text(text: str) -> TabularData:
    """Parse CSV text with a header row into columns and row dicts."""
    if text.startswith("\ufeff"):
        text = text[1:]
    reader = csv.DictReader(io.StringIO(text, newline=""))
    columns = list(reader.fieldnames or [])
    rows = []
    for row in reader:
        # Short rows yield None for missing cells; extra cells are dropped.
        rows.append({col: ("" if row.get(col) is None else row.get(col)) for col in columns})
    logger.debug("Parsed CSV: %d columns, %d rows", len(columns), len(rows))
    return TabularData(columns=columns, rows=rows)


def extract_points(data: TabularData, path_column: str, type_column: Optional[str] = None) -> PointSet:
    """Build point records from the designated path (and optional type) column.

    Rows with an empty path are skipped. The type defaults to "Unknown" when
    the type cell is empty and to "Points" when no type column is chosen.
    """
    if path_column not in data.columns:
        raise ColumnNotFoundError(
            f"Path column '{path_column}' not found",
            column=path_column,
            available=data.columns,
        )
    if type_column and type_column not in data.columns:
        raise ColumnNotFoundError(
            f"Type column '{type_column}' not found",
            column=type_column,
            available=data.columns,
        )

    points = []
    for row in data.rows:
        path = str(row.get(path_column) or "").strip()
        if not path:
            continue
        if type_column:
            type_label = str(row.get(type_column) or "").strip() or DEFAULT_TYPE_LABEL
        else:
            type_label = NO_TYPE_COLUMN_LABEL
        points.append(PointRecord(path=path, type=type_label))

    return PointSet(paths=[p.path for p in points], points=points)
