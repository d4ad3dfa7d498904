"""
Core Logging Module

Logging configuration with a per-request trace id.

The trace id lives in a ContextVar so it follows a request through async
handlers and into the redirect/session helpers without being passed
around explicitly.

Usage:
    from portal.core.logging import setup_logging, set_trace_id
    import logging

    setup_logging()
    set_trace_id("abc123")
    logging.getLogger(__name__).info("Resolving dashboard")
"""

import logging
import sys
from contextvars import ContextVar
from typing import Optional

# ==================== Context Variables ====================

TRACE_ID: ContextVar[str] = ContextVar("trace_id", default="-")

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(trace_id)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def set_trace_id(trace_id: str) -> None:
    """Set the trace_id for the current context."""
    TRACE_ID.set(trace_id)


def get_trace_id() -> str:
    """Get the trace_id for the current context ("-" when unset)."""
    return TRACE_ID.get()


def clear_trace_id() -> None:
    TRACE_ID.set("-")


# ==================== Log Filters ====================

class TraceIdFilter(logging.Filter):
    """Inject the current trace_id into every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


# ==================== Logging Setup ====================

_logging_setup_done = False


def setup_logging(log_level: Optional[str] = None, force: bool = False) -> None:
    """
    Configure application-wide logging with trace_id support.

    Idempotent unless force=True.

    Args:
        log_level: Optional level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        force: Drop existing root handlers and reconfigure
    """
    global _logging_setup_done

    if _logging_setup_done and not force:
        return

    if log_level is None:
        from portal.core.config import settings
        log_level = settings.LOG_LEVEL

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    if force:
        root_logger.handlers.clear()

    if not root_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        console_handler.addFilter(TraceIdFilter())
        root_logger.addHandler(console_handler)

    _logging_setup_done = True

    logging.getLogger(__name__).info(f"Logging configured with level: {log_level.upper()}")
