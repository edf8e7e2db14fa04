"""Persisted state I/O (json or yaml, chosen by file suffix)."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..exceptions import StateSaveError
from .models import PersistedState, validate_state

logger = logging.getLogger(__name__)

STATE_PATH_ENV = "DEVICE_PARTITIONER_STATE"
DEFAULT_STATE_FILENAME = "device_state.json"

_YAML_SUFFIXES = (".yaml", ".yml")


def get_state_path() -> Path:
    override = os.environ.get(STATE_PATH_ENV, "").strip()
    if override:
        return Path(override)
    return Path.cwd() / DEFAULT_STATE_FILENAME


def _parse_state_file(path: Path, raw: str) -> Any:
    if path.suffix.lower() in _YAML_SUFFIXES:
        return yaml.safe_load(raw)
    return json.loads(raw)


def load_state(state_path: Optional[str | Path] = None) -> PersistedState:
    """Load persisted state; a missing or malformed file yields the empty state."""
    path = Path(state_path) if state_path is not None else get_state_path()
    if not path.exists():
        return PersistedState()
    try:
        raw = path.read_text(encoding="utf-8")
        data = _parse_state_file(path, raw)
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
        logger.debug("Ignoring unreadable state file %s: %s", path, exc)
        return PersistedState()
    return validate_state(data)


def save_state(state: PersistedState, state_path: Optional[str | Path] = None) -> Path:
    path = Path(state_path) if state_path is not None else get_state_path()
    payload = state.model_dump(mode="json")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() in _YAML_SUFFIXES:
            text = yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
        else:
            text = json.dumps(payload, indent=2, ensure_ascii=False)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise StateSaveError(f"State file could not be written: {exc}", file_path=str(path)) from exc
    logger.debug("Saved workspace state to %s", path)
    return path


@dataclass
class StateStore:
    """Load-before-construct / save-after-mutate collaborator."""

    path: Optional[Path] = None

    def load(self) -> PersistedState:
        return load_state(self.path)

    def save(self, state: PersistedState) -> Path:
        return save_state(state, self.path)
