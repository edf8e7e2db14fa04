"""Ensure the public API surface resolves and stays lightweight."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def test_api_exports_resolve() -> None:
    from device_partitioner.app import api

    missing = [name for name in api.__all__ if not hasattr(api, name)]
    assert missing == []


def test_package_version() -> None:
    import device_partitioner

    assert isinstance(device_partitioner.__version__, str)
    assert device_partitioner.__version__


def test_core_import_does_not_pull_yaml() -> None:
    code = (
        "import sys; import importlib; "
        "importlib.import_module('device_partitioner.core'); "
        "print('yaml' in sys.modules)"
    )
    result = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
    )
    assert result.returncode == 0
    assert result.stdout.strip() == "False"
