"""Structured logging for clipchain.

Provides configurable logging with JSON format support, file rotation and
run/stage tagging of records.
"""

from clipchain.logging.config import configure_logging
from clipchain.logging.context import (
    RunContextFilter,
    get_run_context,
    run_context,
    stage_context,
)
from clipchain.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "RunContextFilter",
    "configure_logging",
    "get_run_context",
    "run_context",
    "stage_context",
]
