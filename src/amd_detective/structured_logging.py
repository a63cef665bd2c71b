"""
Structured logging configuration for amd-detective.

Provides consistent, machine-readable logging for extraction runs and
batch file scans.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_RESERVED_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "component": getattr(record, "component", record.name),
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class ExtractionLogger:
    """Structured logger for extraction events."""

    def __init__(self, name: str = "amd_detective"):
        self.logger = logging.getLogger(name)
        self._setup_logger()
        self.file_context: Dict[str, Any] = {}

    def _setup_logger(self) -> None:
        """Setup logger with structured formatting."""
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.WARNING)

    def set_file_context(self, file_path: Optional[str] = None) -> None:
        """Set the file currently being processed."""
        self.file_context = {}
        if file_path:
            self.file_context["file_path"] = file_path

    def clear_file_context(self) -> None:
        """Clear file context."""
        self.file_context.clear()

    def _log(self, level: str, event_type: str, **kwargs) -> None:
        log_data = {"event_type": event_type, **self.file_context, **kwargs}
        getattr(self.logger, level.lower())(event_type, extra=log_data)

    def info(self, event_type: str, **kwargs) -> None:
        """Log info level event."""
        self._log("info", event_type, **kwargs)

    def warning(self, event_type: str, **kwargs) -> None:
        """Log warning level event."""
        self._log("warning", event_type, **kwargs)

    def error(self, event_type: str, **kwargs) -> None:
        """Log error level event."""
        self._log("error", event_type, **kwargs)

    def debug(self, event_type: str, **kwargs) -> None:
        """Log debug level event."""
        self._log("debug", event_type, **kwargs)


# Global logger instances
_detective_logger = ExtractionLogger("amd_detective.detective")
_scanner_logger = ExtractionLogger("amd_detective.scanner")


def get_detective_logger() -> ExtractionLogger:
    """Get extraction core logger."""
    return _detective_logger


def get_scanner_logger() -> ExtractionLogger:
    """Get file scanner logger."""
    return _scanner_logger


def log_extraction_start(source_kind: str, skip_lazy_loaded: bool) -> None:
    """Log the start of a single extraction."""
    get_detective_logger().debug(
        "extraction_started",
        source_kind=source_kind,
        skip_lazy_loaded=skip_lazy_loaded,
    )


def log_extraction_complete(
    dependency_count: int, discarded_count: int, duration_ms: float
) -> None:
    """Log the end of a single extraction."""
    get_detective_logger().debug(
        "extraction_completed",
        dependency_count=dependency_count,
        discarded=discarded_count,
        duration_ms=round(duration_ms, 3),
    )


def log_degraded_dependency(node_type: str, line: int, reason: str) -> None:
    """Log a dependency expression that could not be read as a literal."""
    get_detective_logger().debug(
        "dependency_degraded",
        node_type=node_type,
        line=line,
        reason=reason,
    )


def log_scan_complete(
    file_count: int, error_count: int, dependency_count: int, duration_ms: int
) -> None:
    """Log the end of a batch file scan."""
    logger = get_scanner_logger()
    log_data = {
        "file_count": file_count,
        "error_count": error_count,
        "dependency_count": dependency_count,
        "scan_duration_ms": duration_ms,
    }
    if error_count:
        logger.warning("scan_completed_with_errors", **log_data)
    else:
        logger.info("scan_completed", **log_data)
    logger.clear_file_context()


def set_file_context(file_path: Optional[str] = None) -> None:
    """Set file context for all loggers."""
    for logger in [_detective_logger, _scanner_logger]:
        logger.set_file_context(file_path)


def clear_file_context() -> None:
    """Clear file context for all loggers."""
    for logger in [_detective_logger, _scanner_logger]:
        logger.clear_file_context()


def configure_logging(log_level: str = "WARNING", enable_json: bool = True) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.WARNING)

    for logger in [_detective_logger, _scanner_logger]:
        logger.logger.setLevel(level)
        for handler in logger.logger.handlers:
            if enable_json:
                handler.setFormatter(StructuredFormatter())
            else:
                handler.setFormatter(
                    logging.Formatter(
                        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
                    )
                )
