"""
Common utilities shared across the advisory tooling
"""

from .logging_config import configure_logging, get_logger
from .rate_limit_manager import RateLimitManager, RateLimitStatus
from .telemetry import trace_function, trace_operation

__all__ = [
    "configure_logging",
    "get_logger",
    "trace_function",
    "trace_operation",
    "RateLimitManager",
    "RateLimitStatus",
]
