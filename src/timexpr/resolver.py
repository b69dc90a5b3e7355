"""Time Expression Resolver

Facade that parses a time expression and, for relative expressions,
evaluates it against a reference instant.
"""

from datetime import datetime, timezone
from typing import Optional

from .core.clock import Clock, get_clock
from .core.config_manager import AppConfig
from .core.error_handler import ResolutionError, TimexprError
from .core.logging_manager import LoggingManager
from .processors.core.expression import AbsoluteInstant
from .processors.core.grammar import ExpressionParser
from .processors.core.offset_evaluator import apply


def is_zero_reference(reference: datetime) -> bool:
    """True for the zero instant (0001-01-01T00:00:00), naive or UTC."""
    if reference.tzinfo is not None:
        if reference.utcoffset():
            return False
        reference = reference.replace(tzinfo=None)
    return reference == datetime.min


class TimeExpressionResolver:
    """Resolves time expressions to timezone-aware datetimes."""

    def __init__(self, config: Optional[AppConfig] = None, clock: Optional[Clock] = None):
        """Initialize resolver.

        Args:
            config: Parser and resolver settings; defaults apply when omitted
            clock: Clock used for "now"; the process-wide clock when omitted
        """
        self.config = config or AppConfig()
        self.clock = clock
        self.parser = ExpressionParser(max_input_length=self.config.parser.max_input_length)
        self.logger = LoggingManager.get_logger(__name__)

    def resolve(self, text: str, reference: Optional[datetime] = None,
                clock: Optional[Clock] = None) -> datetime:
        """Resolve a time expression.

        Args:
            text: Expression such as ``"yesterday"`` or ``"6M ago"``
            reference: Instant relative expressions are measured from
            clock: Clock for this call only, used when no reference is given

        Returns:
            Timezone-aware datetime. Timestamp literals are returned unchanged
            and ignore the reference.

        Raises:
            ResolutionError: If the text cannot be parsed or the result is out of range
        """
        try:
            expression = self.parser.parse(text)

            if isinstance(expression, AbsoluteInstant):
                self.logger.debug(f"Resolved {text!r} to literal {expression.value.isoformat()}")
                return expression.value

            reference = self._reference(reference, clock)
            result = apply(expression, reference)
        except TimexprError as e:
            self.logger.info(f"Could not resolve time expression {text!r}: {e}")
            raise ResolutionError(text, e) from e

        self.logger.debug(
            f"Resolved {text!r} against {reference.isoformat()} to {result.isoformat()}"
        )
        return result

    def _reference(self, reference: Optional[datetime], clock: Optional[Clock]) -> datetime:
        unset = reference is None or (
            self.config.resolver.treat_zero_reference_as_unset and is_zero_reference(reference)
        )
        if unset:
            reference = (clock or self.clock or get_clock()).now()

        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=timezone.utc)
        return reference


_default_resolver = TimeExpressionResolver()


def resolve(text: str, reference: Optional[datetime] = None,
            clock: Optional[Clock] = None) -> datetime:
    """Resolve text with the default resolver."""
    return _default_resolver.resolve(text, reference, clock)


def parse_with_reference(text: str, reference: datetime) -> datetime:
    """Resolve text against an explicit reference instant."""
    return _default_resolver.resolve(text, reference)
