"""
Observability module.

Logging configuration and safe structured-logging helpers.
"""

from rag_engine.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from rag_engine.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "log_exception_with_context",
    "log_with_context",
    "safe_log_value",
]
