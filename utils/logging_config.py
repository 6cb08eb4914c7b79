"""
Logging setup for the UI and the chat API server.

Debug runs log human-readable lines; everything else logs one JSON object
per line. Fields passed through `extra=` are kept under "extra".
"""

import json
import logging
import logging.handlers
import time
from collections import Counter
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from config.app_config import AppConfig, get_config


# Attributes every LogRecord carries; anything else came from `extra=`
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_RECORD_ATTRS}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, ensure_ascii=False, default=str)


class StreamlitLogHandler(logging.Handler):
    """Echoes warnings and errors onto the Streamlit page"""

    def emit(self, record: logging.LogRecord):
        try:
            import streamlit as st

            text = self.format(record)
            if record.levelno >= logging.ERROR:
                st.error(text, icon="🚨")
            else:
                st.warning(text, icon="⚠️")
        except Exception:
            self.handleError(record)


def _level(config: AppConfig) -> int:
    return getattr(logging, config.logging.level, logging.INFO)


def _console_handler(config: AppConfig) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(_level(config))
    if config.debug:
        handler.setFormatter(logging.Formatter(config.logging.format))
    else:
        handler.setFormatter(StructuredFormatter())
    return handler


def _file_handler(config: AppConfig) -> logging.Handler:
    log_file = Path(config.logging.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(StructuredFormatter())
    return handler


def setup_logging(enable_streamlit_handler: bool = False) -> logging.Logger:
    """
    Configure the root logger from the application config

    Args:
        enable_streamlit_handler: Also show warnings in the Streamlit page.
            Only honoured for debug runs in the development environment.

    Returns:
        logging.Logger: The root logger
    """
    config = get_config()

    root = logging.getLogger()
    root.setLevel(_level(config))
    root.handlers.clear()
    root.addHandler(_console_handler(config))

    if config.logging.enable_file_logging:
        root.addHandler(_file_handler(config))

    if enable_streamlit_handler and config.debug and config.environment == "development":
        streamlit_handler = StreamlitLogHandler(level=logging.WARNING)
        streamlit_handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(streamlit_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


@contextmanager
def log_execution_time(logger: logging.Logger, operation: str, **fields):
    """
    Log the start, duration and outcome of a block

    Failures are logged at WARNING and re-raised.
    """
    logger.debug(f"Starting {operation}", extra={"operation": operation, **fields})
    started = time.perf_counter()

    try:
        yield
    except Exception as e:
        logger.warning(f"Failed {operation}: {e}", extra={
            "operation": operation,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            "status": "error",
            "error_type": type(e).__name__,
            **fields
        })
        raise

    logger.info(f"Completed {operation}", extra={
        "operation": operation,
        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        "status": "success",
        **fields
    })


def log_model_usage(logger: logging.Logger, model: str, tokens_used: int, **details):
    """Record one upstream completion (tokens_used is 0 when the provider reports none)"""
    logger.info("Model usage", extra={
        "event_type": "model_usage",
        "model": model,
        "tokens_used": tokens_used,
        **details
    })


def log_conversation_event(logger: logging.Logger, event_type: str, conversation_id: str, **details):
    """Record a session store change (created, renamed, message_added, removed)"""
    logger.debug("Conversation event", extra={
        "event_type": "conversation_event",
        "conversation_event_type": event_type,
        "conversation_id": conversation_id,
        **details
    })


class ErrorTracker:
    """
    Logs errors with their context and counts them by "<type>:<context>"
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.error_counts: Counter = Counter()

    def track_error(self, error: Exception, context: str = "", **extra_info):
        error_type = type(error).__name__
        key = f"{error_type}:{context}"
        self.error_counts[key] += 1

        self.logger.error(f"Error in {context}: {error}", extra={
            "event_type": "error",
            "error_type": error_type,
            "error_message": str(error),
            "context": context,
            "error_count": self.error_counts[key],
            **extra_info
        }, exc_info=error)

    def get_error_summary(self) -> Dict[str, Any]:
        return {
            "total_errors": sum(self.error_counts.values()),
            "unique_errors": len(self.error_counts),
            "error_breakdown": dict(self.error_counts),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }


_logger_setup = False
_error_tracker: Optional[ErrorTracker] = None


def initialize_logging(enable_streamlit_handler: bool = False) -> ErrorTracker:
    """Configure logging once per process and return the shared error tracker"""
    global _logger_setup

    if not _logger_setup:
        setup_logging(enable_streamlit_handler=enable_streamlit_handler)
        _logger_setup = True

    return get_error_tracker()


def get_error_tracker() -> ErrorTracker:
    """Shared error tracker; does not touch handler configuration"""
    global _error_tracker
    if _error_tracker is None:
        _error_tracker = ErrorTracker(logging.getLogger("ds_assistant.errors"))
    return _error_tracker
