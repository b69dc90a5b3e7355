"""Error Handling for timexpr

Exception hierarchy for parsing and resolution failures plus a central
handler that logs errors at a severity-appropriate level.
"""

import logging
import sys
import traceback
from enum import Enum
from typing import Optional, Tuple


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TimexprError(Exception):
    """Base exception class for timexpr."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class ExpressionSyntaxError(TimexprError):
    """Raised when input text does not match the time expression grammar.

    Attributes:
        text: The offending input
        offset: Character position where matching failed
        expected: Descriptions of the tokens that would have been accepted
    """

    def __init__(self, message: str, text: str, offset: int = 0,
                 expected: Tuple[str, ...] = ()):
        self.text = text
        self.offset = offset
        self.expected = tuple(expected)

        detail = f"{message} at offset {offset}"
        if self.expected:
            detail += f" (expected {', '.join(self.expected)})"
        super().__init__(detail, severity=ErrorSeverity.LOW)


class TimestampRangeError(TimexprError):
    """Raised when applying an offset leaves the representable datetime range."""

    def __init__(self, message: str):
        super().__init__(message, severity=ErrorSeverity.LOW)


class ResolutionError(TimexprError):
    """Error raised when a time expression cannot be resolved.

    Wraps the underlying failure and names the original input.
    """

    def __init__(self, text: str, cause: TimexprError):
        self.text = text
        self.cause = cause
        super().__init__(
            f"failed to resolve time expression {text!r}: {cause}",
            severity=cause.severity
        )


class ConfigurationError(TimexprError):
    """Error raised when configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(message, severity=ErrorSeverity.HIGH)


class ErrorHandler:
    """Central error handler for timexpr front ends."""

    def __init__(self, install_excepthook: bool = False):
        """Initialize error handler.

        Args:
            install_excepthook: Route unhandled exceptions through this handler
        """
        self.logger = logging.getLogger(__name__)
        if install_excepthook:
            self.setup_exception_handlers()

    def setup_exception_handlers(self):
        """Set up global exception handlers."""
        sys.excepthook = self._handle_unhandled_exception

    def handle_error(self, error: Exception, context: Optional[str] = None) -> ErrorSeverity:
        """Log an error at the level its severity calls for.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            The severity the error was handled at
        """
        severity = self._get_error_severity(error)
        error_message = self._format_error_message(error, context)

        self._log_error(error, error_message, severity)

        return severity

    def _get_error_severity(self, error: Exception) -> ErrorSeverity:
        """Determine error severity based on exception type.

        Args:
            error: The exception to analyze

        Returns:
            Appropriate severity level
        """
        if isinstance(error, TimexprError):
            return error.severity

        return ErrorSeverity.MEDIUM

    def _format_error_message(self, error: Exception, context: Optional[str] = None) -> str:
        """Format error message for logging and display.

        Args:
            error: The exception
            context: Additional context

        Returns:
            Formatted error message
        """
        message = str(error)
        if context:
            message = f"{context}: {message}"

        return message

    def _log_error(self, error: Exception, message: str, severity: ErrorSeverity):
        """Log error with appropriate level."""
        log_methods = {
            ErrorSeverity.LOW: self.logger.info,
            ErrorSeverity.MEDIUM: self.logger.warning,
            ErrorSeverity.HIGH: self.logger.error,
            ErrorSeverity.CRITICAL: self.logger.critical,
        }

        # User input errors do not need a traceback
        exc_info = None if severity == ErrorSeverity.LOW else error
        log_methods[severity](message, exc_info=exc_info)

    def _handle_unhandled_exception(self, exc_type, exc_value, exc_traceback):
        """Handle unhandled exceptions.

        Args:
            exc_type: Exception type
            exc_value: Exception instance
            exc_traceback: Exception traceback
        """
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        error_message = ''.join(traceback.format_exception(
            exc_type, exc_value, exc_traceback
        ))

        self.logger.critical(f"Unhandled exception: {error_message}")
