#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Device Partitioner - Consolidated Exception Classes

All exception classes raised by the project live here. Invalid user actions
(merging fewer than two folders, empty merge names, ...) are not errors: the
workspace turns them into no-ops. Exceptions are reserved for collaborator
failures such as unreadable input files or a missing path column.
"""

from datetime import datetime
from typing import Dict, Any, Optional, Sequence


class BaseError(Exception):
    """Base class for all project-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code or "ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """Converts the exception to a dictionary for structured logging."""
        return {
            'error_code': self.error_code,
            'message': str(self),
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


# =====================================================================================================
# Configuration-related errors
# =====================================================================================================

class ConfigurationError(BaseError):
    """Base class for configuration and persisted state errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        config_details = details or {}
        if file_path:
            config_details['file_path'] = str(file_path)
        super().__init__(message, error_code or "CONFIG_ERROR", config_details)


class StateSaveError(ConfigurationError):
    """Raised when the persisted workspace state cannot be written."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "STATE_SAVE_ERROR", file_path, details)


# =====================================================================================================
# IO and data-related errors
# =====================================================================================================

class DataError(BaseError):
    """Base class for data-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code or "DATA_ERROR", details)


class ColumnNotFoundError(DataError):
    """Raised when a designated column is missing from the tabular input."""

    def __init__(self, message: str, column: Optional[str] = None,
                 available: Optional[Sequence[str]] = None,
                 details: Optional[Dict[str, Any]] = None):
        column_details = details or {}
        if column is not None:
            column_details['column'] = column
        if available is not None:
            column_details['available'] = list(available)
        super().__init__(message, "COLUMN_NOT_FOUND", column_details)


class FileOperationError(DataError):
    """Raised when file operation errors occur."""

    def __init__(self, message: str, file_path: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        file_details = details or {}
        if file_path:
            file_details['file_path'] = str(file_path)
        if operation:
            file_details['operation'] = operation
        super().__init__(message, "FILE_OP_ERROR", file_details)
