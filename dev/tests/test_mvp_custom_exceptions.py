import pytest

from device_partitioner.exceptions import (
    BaseError,
    ColumnNotFoundError,
    ConfigurationError,
    DataError,
    FileOperationError,
    StateSaveError,
)


def test_column_not_found_details():
    err = ColumnNotFoundError("missing", column="Path", available=("A", "B"))

    assert isinstance(err, DataError)
    payload = err.to_dict()
    assert payload["error_code"] == "COLUMN_NOT_FOUND"
    assert payload["details"] == {"column": "Path", "available": ["A", "B"]}
    assert payload["message"] == "missing"
    assert "timestamp" in payload


def test_state_save_error_is_configuration_error():
    err = StateSaveError("nope", file_path="/tmp/state.json")
    assert isinstance(err, ConfigurationError)
    assert err.error_code == "STATE_SAVE_ERROR"
    assert err.details["file_path"] == "/tmp/state.json"


def test_file_operation_error_is_base_error():
    with pytest.raises(BaseError) as excinfo:
        raise FileOperationError("bad", file_path="in.csv", operation="read")
    assert excinfo.value.details == {"file_path": "in.csv", "operation": "read"}


def test_default_error_code():
    assert BaseError("x").error_code == "ERROR"
