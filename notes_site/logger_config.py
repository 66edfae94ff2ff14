"""Logging setup for the Notes Site pipeline.

Two loggers are configured at import time:
- ``pipeline_logger`` records every pipeline stage call and its result in a
  rotating log file.
- ``error_logger`` emits structured JSON lines for warnings and errors so
  they can be collected by log tooling.
"""

import functools
import json
import logging
import os
import sys
import traceback
from datetime import datetime
from datetime import timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Attributes every LogRecord has; anything else was passed through ``extra``.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class ErrorCategory(Enum):
    """Severity categories for structured error logging."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_CATEGORY_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}


class StructuredLogFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


# --- Logging Setup ---
pipeline_logger = logging.getLogger("pipeline_logger")
pipeline_logger.setLevel(logging.INFO)

log_dir = Path(os.environ.get("NOTES_SITE_LOG_DIR", Path(__file__).resolve().parent))
log_file_path = log_dir / "pipeline_calls.log"

# maxBytes: 10MB per file, backupCount: 5 files (total ~50MB)
try:
    file_handler = RotatingFileHandler(log_file_path, maxBytes=10 * 1024 * 1024, backupCount=5)
except OSError:
    # Read-only install location
    file_handler = logging.NullHandler()
file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
pipeline_logger.addHandler(file_handler)
pipeline_logger.propagate = False

error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)
_error_handler = logging.StreamHandler(sys.stderr)
_error_handler.setLevel(logging.WARNING)
_error_handler.setFormatter(StructuredLogFormatter())
error_logger.addHandler(_error_handler)
error_logger.propagate = False


def configure_logging(level: str = "INFO", structured: bool = True) -> None:
    """Apply settings-driven level and format to the error logger."""
    _error_handler.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if structured:
        _error_handler.setFormatter(StructuredLogFormatter())
    else:
        _error_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: Exception | None = None,
    context: dict | None = None,
    operation: str | None = None,
    **kwargs,
) -> None:
    """Log an error with category, operation and context fields attached."""
    extra = {"error_category": category.value}
    if operation:
        extra["operation"] = operation
    if context:
        extra.update(context)
    extra.update(kwargs)

    error_logger.log(
        _CATEGORY_LEVELS[category],
        message,
        exc_info=exception is not None,
        extra=extra,
    )


def safe_operation(
    operation_name: str,
    func,
    *args,
    error_category: ErrorCategory = ErrorCategory.ERROR,
    context: dict | None = None,
    **kwargs,
):
    """Run ``func`` and return ``(success, result, error)`` instead of raising."""
    try:
        return True, func(*args, **kwargs), None
    except Exception as e:
        log_structured_error(
            category=error_category,
            message=f"Operation '{operation_name}' failed: {e}",
            exception=e,
            context=context,
            operation=operation_name,
        )
        return False, None, e


def _describe(value) -> str:
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json(indent=None, exclude_none=True)
    return repr(value)


# --- Decorator for Logging Pipeline Stage Calls ---
def log_async_pipeline_call(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        func_name = getattr(func, "__name__", "unknown_function")
        pipeline_logger.info(f"Calling stage: {func_name} with args={[_describe(a) for a in args]}")
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            pipeline_logger.error(f"Stage {func_name} raised exception: {e}", exc_info=True)
            log_structured_error(
                category=ErrorCategory.ERROR,
                message=f"Stage {func_name} failed: {e}",
                exception=e,
                operation="pipeline_stage",
                function=func_name,
            )
            raise
        pipeline_logger.info(f"Stage {func_name} returned: {_describe(result)}")
        return result

    return wrapper
