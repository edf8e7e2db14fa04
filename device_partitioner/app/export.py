"""Export source rows annotated with their owning device name."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from ..core.hidden_folders import is_at_or_downstream_of_any
from ..core.ownership import owner_of
from ..exceptions import ColumnNotFoundError, FileOperationError
from .models import DisplayNameResolver, ExportSummary, TabularData

logger = logging.getLogger(__name__)

DEVICE_NAME_COLUMN = "device_name"
HIDDEN_MARKER = "-"


def export_columns(columns: Sequence[str]) -> List[str]:
    if DEVICE_NAME_COLUMN in columns:
        return list(columns)
    return [*columns, DEVICE_NAME_COLUMN]


def device_name_for_path(
    point_path: str,
    device_paths: Sequence[str],
    hidden_paths: Sequence[str],
    display_name: DisplayNameResolver,
) -> str:
    """``-`` for hidden points, the owner's display name, or ``""`` if unowned."""
    if not point_path:
        return ""
    if hidden_paths and is_at_or_downstream_of_any(point_path, hidden_paths):
        return HIDDEN_MARKER
    owner = owner_of(point_path, device_paths)
    return display_name(owner) if owner else ""


def project_rows(
    data: TabularData,
    path_column: str,
    device_paths: Sequence[str],
    hidden_paths: Sequence[str],
    display_name: DisplayNameResolver,
) -> Tuple[List[str], List[Dict[str, str]], ExportSummary]:
    """Annotate every row with ``device_name``; row order and other cells are kept."""
    if path_column not in data.columns:
        raise ColumnNotFoundError(
            f"Path column '{path_column}' not found",
            column=path_column,
            available=data.columns,
        )

    columns = export_columns(data.columns)
    out_rows: List[Dict[str, str]] = []
    assigned = unassigned = hidden = 0
    for row in data.rows:
        point_path = str(row.get(path_column) or "").strip()
        name = device_name_for_path(point_path, device_paths, hidden_paths, display_name)
        if name == HIDDEN_MARKER:
            hidden += 1
        elif name:
            assigned += 1
        else:
            unassigned += 1
        out_rows.append({**row, DEVICE_NAME_COLUMN: name})

    summary = ExportSummary(rows=len(out_rows), assigned=assigned, unassigned=unassigned, hidden=hidden)
    logger.info(
        "Export projected %d rows (assigned=%d, unassigned=%d, hidden=%d)",
        summary.rows,
        summary.assigned,
        summary.unassigned,
        summary.hidden,
    )
    return columns, out_rows, summary


def format_csv(columns: Sequence[str], rows: Sequence[Dict[str, str]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(columns), extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def write_csv(text: str, filename: str | Path) -> None:
    path = Path(filename)
    try:
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as exc:
        raise FileOperationError(f"Cannot write {path}: {exc}", file_path=str(path), operation="write") from exc
