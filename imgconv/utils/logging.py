import logging
import logging.handlers
import os
import re
import sys
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import structlog

SENSITIVE_KEYS = {
    "password",
    "token",
    "secret",
    "authorization",
    "file_path",
    "path",
    "directory",
    "ip_address",
    "content",
    "image_data",
    "blob",
}

_PATH_PATTERN = re.compile(r"^(/|[A-Za-z]:\\|\\\\)")


def filter_sensitive_data(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask sensitive values and raw bytes in log entries."""

    def _recursive_filter(obj: Any, depth: int = 0) -> Any:
        if depth > 10:
            return "***DEPTH_LIMIT***"

        if isinstance(obj, dict):
            filtered = {}
            for key, value in obj.items():
                key_lower = str(key).lower()
                if any(
                    sensitive == key_lower
                    or f"_{sensitive}" in key_lower
                    or f"{sensitive}_" in key_lower
                    for sensitive in SENSITIVE_KEYS
                ):
                    filtered[key] = "***REDACTED***"
                else:
                    filtered[key] = _recursive_filter(value, depth + 1)
            return filtered
        elif isinstance(obj, list):
            return [_recursive_filter(item, depth + 1) for item in obj]
        elif isinstance(obj, (bytes, bytearray)):
            return f"<{len(obj)} bytes>"
        elif isinstance(obj, str) and _PATH_PATTERN.match(obj):
            return "***PATH_REDACTED***"
        return obj

    return _recursive_filter(event_dict)


def add_correlation_id(_, __, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation ID to log entries."""
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = structlog.contextvars.get_contextvars().get(
            "correlation_id", str(uuid.uuid4())
        )
    return event_dict


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    enable_file_logging: bool = True,
    log_dir: str = "./logs",
    max_log_size_mb: int = 10,
    backup_count: int = 3,
) -> None:
    """Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Use JSON format for logs
        enable_file_logging: Enable logging to a rotating file
        log_dir: Directory for log files
        max_log_size_mb: Maximum size of each log file in MB
        backup_count: Number of backup files to keep
    """
    handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, log_level.upper()))
    handlers.append(console_handler)

    if enable_file_logging:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, "app.log"),
            maxBytes=max_log_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, log_level.upper()))
        handlers.append(file_handler)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_correlation_id,
        filter_sensitive_data,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    # Suppress noisy loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


class LoggingContext:
    """Context manager for adding context to logs."""

    def __init__(self, **kwargs) -> None:
        self.context = kwargs
        self.tokens = None

    def __enter__(self) -> "LoggingContext":
        self.tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.reset_contextvars(**self.tokens)


def cleanup_old_logs(log_dir: str, retention_hours: int = 24) -> int:
    """Remove log files older than the retention period.

    Args:
        log_dir: Directory containing log files
        retention_hours: Hours to retain logs

    Returns:
        Number of files removed
    """
    if not os.path.exists(log_dir):
        return 0

    cutoff_time = datetime.now() - timedelta(hours=retention_hours)
    removed = 0

    for filename in os.listdir(log_dir):
        if ".log" not in filename:
            continue
        filepath = os.path.join(log_dir, filename)
        try:
            file_time = datetime.fromtimestamp(os.path.getmtime(filepath))
            if file_time < cutoff_time:
                os.remove(filepath)
                removed += 1
        except OSError as e:
            get_logger(__name__).warning("Failed to remove old log file", error=str(e))

    return removed
