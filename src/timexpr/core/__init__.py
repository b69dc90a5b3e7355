"""Core modules for timexpr.

Clock, configuration, logging and error handling shared by the
processors and the resolver.
"""

from .clock import Clock, FixedClock, SystemClock, get_clock, reset_clock, set_clock
from .config_manager import AppConfig, ConfigManager
from .error_handler import (
    TimexprError,
    ExpressionSyntaxError,
    TimestampRangeError,
    ResolutionError,
    ConfigurationError,
    ErrorHandler,
    ErrorSeverity
)
from .logging_manager import LoggingManager

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_clock",
    "set_clock",
    "reset_clock",
    "AppConfig",
    "ConfigManager",
    "TimexprError",
    "ExpressionSyntaxError",
    "TimestampRangeError",
    "ResolutionError",
    "ConfigurationError",
    "ErrorHandler",
    "ErrorSeverity",
    "LoggingManager"
]
