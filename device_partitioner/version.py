"""Version utilities for Device Partitioner."""

from __future__ import annotations

from importlib import metadata

DEFAULT_VERSION = "1.0.0"


def load_version() -> str:
    try:
        return metadata.version("device-partitioner")
    except metadata.PackageNotFoundError:
        return DEFAULT_VERSION
