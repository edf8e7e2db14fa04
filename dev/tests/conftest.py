from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure repo root on path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


SAMPLE_CSV = (
    "Path,Type,Description\n"
    "root/A/1,AI,first\n"
    "root/A/2,AO,second\n"
    "root/A/sub/3,AI,third\n"
    "root/B/1,BI,fourth\n"
    "root/H/x,AI,hidden\n"
)


@pytest.fixture
def sample_csv_text() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_csv_file(tmp_path) -> Path:
    path = tmp_path / "points.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def workspace(sample_csv_text):
    from device_partitioner.app.controller import DeviceWorkspace

    ws = DeviceWorkspace()
    ws.load_csv_text(sample_csv_text)
    ws.select_path_column("Path")
    ws.select_type_column("Type")
    return ws
