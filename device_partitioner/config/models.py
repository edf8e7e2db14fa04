"""Pydantic models for the persisted workspace state.

Persisted values are sanitized item by item: a malformed entry is dropped
instead of invalidating the whole payload.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class _BaseStateModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MergedDeviceModel(_BaseStateModel):
    id: str
    name: str
    member_paths: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("member_paths", "memberPaths"),
    )

    @field_validator("id", "name", mode="before")
    @classmethod
    def _non_empty_text(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("must be a non-empty string")
        return value.strip()

    @field_validator("member_paths", mode="before")
    @classmethod
    def _string_members(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            raise ValueError("member_paths must be a list")
        members = [p for p in value if isinstance(p, str) and p.strip()]
        if not members:
            raise ValueError("member_paths must not be empty")
        return members


class PersistedState(_BaseStateModel):
    device_paths: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("device_paths", "devicePaths"),
    )
    name_by_path: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("name_by_path", "nameByPath"),
    )
    merged_devices: List[MergedDeviceModel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("merged_devices", "mergedDevices"),
    )
    hidden_folder_paths: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("hidden_folder_paths", "hiddenFolderPaths"),
    )

    @field_validator("name_by_path", mode="before")
    @classmethod
    def _clean_names(cls, value: Any) -> Dict[str, str]:
        if not isinstance(value, dict):
            return {}
        out: Dict[str, str] = {}
        for key, name in value.items():
            if not isinstance(key, str) or not isinstance(name, str):
                continue
            trimmed = name.strip()
            if trimmed:
                out[key] = trimmed
        return out

    @field_validator("merged_devices", mode="before")
    @classmethod
    def _clean_merged(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        out = []
        for item in value:
            try:
                out.append(MergedDeviceModel.model_validate(item))
            except ValidationError:
                logger.debug("Discarding malformed merged device entry: %r", item)
        return out

    @field_validator("device_paths", "hidden_folder_paths", mode="before")
    @classmethod
    def _clean_path_list(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [p for p in value if isinstance(p, str) and p.strip()]


def validate_state(payload: Any) -> PersistedState:
    """Validate a raw payload; anything unusable becomes the empty state."""
    if not isinstance(payload, dict):
        return PersistedState()
    try:
        return PersistedState.model_validate(payload)
    except ValidationError as exc:
        logger.debug("Persisted state rejected: %s", exc)
        return PersistedState()
