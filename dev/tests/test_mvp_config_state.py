from __future__ import annotations

import json

import pytest

pytest.importorskip("pydantic")
pytest.importorskip("yaml")

from device_partitioner.config import (
    STATE_PATH_ENV,
    PersistedState,
    StateStore,
    get_state_path,
    load_state,
    save_state,
    validate_state,
)
from device_partitioner.exceptions import StateSaveError


def test_validate_state_accepts_camel_case_keys() -> None:
    state = validate_state({
        "nameByPath": {"root/A": " Pump "},
        "mergedDevices": [{"id": "g1", "name": "Both", "memberPaths": ["root/A", "root/B"]}],
        "hiddenFolderPaths": ["root/H"],
        "devicePaths": ["root/A", "root/B"],
    })

    assert state.name_by_path == {"root/A": "Pump"}
    assert state.merged_devices[0].member_paths == ["root/A", "root/B"]
    assert state.hidden_folder_paths == ["root/H"]
    assert state.device_paths == ["root/A", "root/B"]


def test_validate_state_discards_malformed_entries() -> None:
    state = validate_state({
        "name_by_path": {"root/A": "", "root/B": 3, "root/C": "ok"},
        "merged_devices": [
            {"id": "", "name": "x", "member_paths": ["root/A"]},
            {"id": "g1", "name": "y", "member_paths": []},
            "nonsense",
            {"id": "g2", "name": "z", "member_paths": ["root/A", 5]},
        ],
        "hidden_folder_paths": "root/H",
    })

    assert state.name_by_path == {"root/C": "ok"}
    assert [g.id for g in state.merged_devices] == ["g2"]
    assert state.merged_devices[0].member_paths == ["root/A"]
    assert state.hidden_folder_paths == []


def test_validate_state_non_mapping_is_empty() -> None:
    assert validate_state(["root/A"]) == PersistedState()
    assert validate_state(None) == PersistedState()


@pytest.mark.parametrize("filename", ["state.json", "state.yaml"])
def test_save_and_load_roundtrip(tmp_path, filename) -> None:
    state = PersistedState(
        device_paths=["root/A"],
        name_by_path={"root/A": "Pump"},
        hidden_folder_paths=["root/H"],
    )
    store = StateStore(tmp_path / filename)

    path = store.save(state)

    assert path.exists()
    assert store.load() == state


def test_load_state_missing_or_malformed_is_empty(tmp_path) -> None:
    assert load_state(tmp_path / "missing.json") == PersistedState()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_state(broken) == PersistedState()

    broken_yaml = tmp_path / "broken.yaml"
    broken_yaml.write_text("a: [1, 2", encoding="utf-8")
    assert load_state(broken_yaml) == PersistedState()


def test_save_state_writes_snake_case_json(tmp_path) -> None:
    path = save_state(PersistedState(device_paths=["root/A"]), tmp_path / "s.json")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["device_paths"] == ["root/A"]
    assert set(payload) == {"device_paths", "name_by_path", "merged_devices", "hidden_folder_paths"}


def test_save_state_failure_raises(tmp_path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(StateSaveError) as excinfo:
        save_state(PersistedState(), blocker / "state.json")
    assert excinfo.value.error_code == "STATE_SAVE_ERROR"


def test_state_path_env_override(tmp_path, monkeypatch) -> None:
    target = tmp_path / "custom.yaml"
    monkeypatch.setenv(STATE_PATH_ENV, str(target))
    assert get_state_path() == target
