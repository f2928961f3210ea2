"""Shared utilities package."""

from subburn.shared.logging import setup_logger, get_logger, LoggerAdapter
from subburn.shared.metrics import MetricsCollector
from subburn.shared.types import PathLike

__all__ = [
    "setup_logger",
    "get_logger",
    "LoggerAdapter",
    "MetricsCollector",
    "PathLike",
]
