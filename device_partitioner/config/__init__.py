#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""Device Partitioner - Configuration Package.

Persisted workspace state (name overrides, merged devices, hidden folders)
and its json/yaml storage.
"""

from .io import DEFAULT_STATE_FILENAME, STATE_PATH_ENV, StateStore, get_state_path, load_state, save_state
from .models import MergedDeviceModel, PersistedState, validate_state

__all__ = [
    'DEFAULT_STATE_FILENAME',
    'STATE_PATH_ENV',
    'MergedDeviceModel',
    'PersistedState',
    'StateStore',
    'get_state_path',
    'load_state',
    'save_state',
    'validate_state',
]
