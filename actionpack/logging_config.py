"""
Structured logging configuration.

Emits both human-readable and JSON logs for debugging.
JSON logs include:
- Timestamp
- Level
- Subsystem
- Action type
- Lifecycle stage
- Transaction ID
- Latency from start to settlement
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

# Record attributes rendered by the formatters, in output order
STRUCTURED_FIELDS = ("subsystem", "action_type", "lifecycle", "transaction", "latency_ms")


def log_fields(
    subsystem: str = "general",
    action_type: Optional[str] = None,
    lifecycle: Optional[str] = None,
    transaction: Optional[str] = None,
    latency_ms: Optional[float] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Build an ``extra=`` mapping understood by the formatters below."""
    fields: Dict[str, Any] = {
        "subsystem": subsystem,
        "action_type": action_type,
        "lifecycle": getattr(lifecycle, "value", lifecycle),
        "transaction": transaction,
        "latency_ms": latency_ms,
    }
    if extra:
        fields["extra_data"] = extra
    return fields


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "ts": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            log_data.update(extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=repr)


class HumanFormatter(logging.Formatter):
    """Human-readable format with colors."""

    COLORS = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        level = record.levelname[:4]

        prefix_parts = [f"{timestamp} {level}"]

        subsystem = getattr(record, "subsystem", "general")
        if subsystem and subsystem != "general":
            prefix_parts.append(f"[{subsystem}]")
        if getattr(record, "action_type", None):
            prefix_parts.append(f"type={record.action_type}")
        if getattr(record, "lifecycle", None):
            prefix_parts.append(f"stage={record.lifecycle}")
        if getattr(record, "transaction", None):
            prefix_parts.append(f"txn={record.transaction[:8]}")

        prefix = " ".join(prefix_parts)
        message = record.getMessage()

        latency_ms = getattr(record, "latency_ms", None)
        if latency_ms is not None:
            message = f"{message} ({latency_ms:.1f}ms)"

        line = f"{prefix}: {message}"

        if self.use_colors and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname, "")
            line = f"{color}{line}{self.RESET}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def configure_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    json_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files
        json_file: Path for JSON logs (in log_dir if relative)
        max_bytes: Max size per log file
        backup_count: Number of backup files to keep
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    root_logger.handlers = []

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(HumanFormatter())
    root_logger.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

        human_handler = RotatingFileHandler(
            os.path.join(log_dir, "actionpack.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        human_handler.setFormatter(HumanFormatter(use_colors=False))
        root_logger.addHandler(human_handler)

        json_path = json_file or "actionpack.json.log"
        if not os.path.isabs(json_path):
            json_path = os.path.join(log_dir, json_path)

        json_handler = RotatingFileHandler(
            json_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        json_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(json_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the actionpack namespace."""
    if name != "actionpack" and not name.startswith("actionpack."):
        name = f"actionpack.{name}"
    return logging.getLogger(name)
