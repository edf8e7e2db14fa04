#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Logging setup for Device Partitioner.

Features:
- Level-keyed console/file formatter with optional colors
- Structured JSON formatter (DEVICE_PARTITIONER_LOG_JSON=1)
- Rotating log files with a separate warnings/errors file
- Timing helper that records recomputation cost and flags slow operations
"""

import logging
import logging.handlers
import os
import sys
import time
import json
from collections import defaultdict
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Optional, Dict, Any

LOGGER_PREFIX = "device_partitioner"
LOG_JSON_ENV = "DEVICE_PARTITIONER_LOG_JSON"
SLOW_OPERATION_SECONDS = 1.0

# =====================================================================================================
# Formatters
# =====================================================================================================

class FastFormatter(logging.Formatter):
    """Formatter with one pre-built format per level."""

    _FORMATS = {
        logging.ERROR: "[{asctime}] ERROR   [{name}] {message}",
        logging.WARNING: "[{asctime}] WARNING [{name}] {message}",
        logging.INFO: "[{asctime}] INFO    {message}",
        logging.DEBUG: "[{asctime}] DEBUG   {name}:{lineno} - {message}",
    }

    _COLORS = {
        logging.ERROR: '\033[91m',     # Red
        logging.WARNING: '\033[93m',   # Yellow
        logging.INFO: '\033[92m',      # Green
        logging.DEBUG: '\033[94m',     # Blue
    }
    _RESET = '\033[0m'

    def __init__(self, enable_colors: bool = False):
        super().__init__()
        self.enable_colors = enable_colors
        self._formatters = {
            level: logging.Formatter(fmt, style='{', datefmt='%H:%M:%S')
            for level, fmt in self._FORMATS.items()
        }

    def format(self, record):
        level = record.levelno
        if level not in self._formatters:
            level = logging.ERROR if level > logging.ERROR else logging.INFO
        text = self._formatters[level].format(record)
        if self.enable_colors and level in self._COLORS:
            return f"{self._COLORS[level]}{text}{self._RESET}"
        return text


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter (optional)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "thread": record.threadName,
            "process": record.process,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

# =====================================================================================================
# Performance logger
# =====================================================================================================

class SimplePerformanceLogger:
    """Accumulates operation timings; only slow operations are logged."""

    def __init__(self, name: str = f"{LOGGER_PREFIX}.performance"):
        self.logger = logging.getLogger(name)
        self.metrics = defaultdict(float)
        self.counts = defaultdict(int)

    def log_timing(self, operation: str, duration: float):
        self.metrics[operation] += duration
        self.counts[operation] += 1

        if duration > SLOW_OPERATION_SECONDS:
            self.logger.warning("SLOW: %s took %.2fs", operation, duration)

    def get_stats(self) -> Dict[str, Any]:
        stats = {}
        for operation, total in self.metrics.items():
            count = self.counts[operation]
            stats[operation] = {
                'count': count,
                'total_time': total,
                'avg_time': total / count if count > 0 else 0
            }
        return stats

    def reset(self):
        self.metrics.clear()
        self.counts.clear()


_performance_logger = SimplePerformanceLogger()


def get_performance_stats() -> Dict[str, Any]:
    return _performance_logger.get_stats()


class LoggingTimer:
    """Times a block and records it with the performance logger."""

    def __init__(self, operation_name: str):
        self.operation_name = operation_name
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            duration = time.perf_counter() - self.start_time
            _performance_logger.log_timing(self.operation_name, duration)

# =====================================================================================================
# Setup
# =====================================================================================================

def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_size_string(size_str: str) -> int:
    """Parse size string ("10MB", "512KB", "2048") into bytes."""
    size_str = size_str.upper().strip()

    multipliers = {
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            try:
                return int(float(size_str[:-len(suffix)].strip()) * multiplier)
            except ValueError:
                continue

    try:
        return int(float(size_str))
    except ValueError:
        return 10 * 1024 * 1024  # Default 10MB


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
    max_log_size: str = "10MB",
    backup_count: int = 3,
    structured_json: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Configure the root logger for the CLI.

    Console output goes to stderr so exported CSV on stdout stays clean.
    File logging writes ``device_partitioner.log`` and ``errors.log``.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    use_json = structured_json if structured_json is not None else _env_bool(LOG_JSON_ENV)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    handlers = {}

    if enable_console_logging:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        enable_colors = (hasattr(sys.stderr, 'isatty') and
                         sys.stderr.isatty() and
                         os.environ.get('TERM') != 'dumb')
        console_handler.setFormatter(JsonFormatter() if use_json else FastFormatter(enable_colors=enable_colors))
        root_logger.addHandler(console_handler)
        handlers['console'] = console_handler

    log_dir_path = Path(log_dir) if log_dir else Path("logs")
    if enable_file_logging:
        log_dir_path.mkdir(parents=True, exist_ok=True)
        size_bytes = _parse_size_string(max_log_size)

        main_handler = logging.handlers.RotatingFileHandler(
            str(log_dir_path / "device_partitioner.log"),
            maxBytes=size_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        main_handler.setLevel(numeric_level)
        main_handler.setFormatter(JsonFormatter() if use_json else FastFormatter())
        root_logger.addHandler(main_handler)
        handlers['main_file'] = main_handler

        error_handler = logging.handlers.RotatingFileHandler(
            str(log_dir_path / "errors.log"),
            maxBytes=size_bytes // 2,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(JsonFormatter() if use_json else FastFormatter())
        root_logger.addHandler(error_handler)
        handlers['error_file'] = error_handler

    get_logger("main").debug(
        "Logging initialized (level=%s, file=%s, json=%s)", log_level, enable_file_logging, use_json
    )
    return {
        'handlers': handlers,
        'log_dir': log_dir_path,
    }


@lru_cache(maxsize=32)
def get_logger(name: str) -> logging.Logger:
    """Get cached logger instance under the package prefix."""
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")
