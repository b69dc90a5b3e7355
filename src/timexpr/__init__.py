"""timexpr - Time Expression Resolver

Turns short time phrases such as "yesterday", "6h ago" or "next 2d", and
full RFC 3339 timestamps, into timezone-aware datetimes relative to a
reference instant.
"""

__version__ = "0.1.0"
__description__ = "Time expression parser and resolver"

from .core.clock import Clock, FixedClock, SystemClock, get_clock, reset_clock, set_clock
from .core.error_handler import (
    ExpressionSyntaxError,
    ResolutionError,
    TimestampRangeError,
    TimexprError,
)
from .processors.core.expression import AbsoluteInstant, AnchorKind, Expression, RelativeOffset, Unit
from .processors.core.grammar import ExpressionParser, parse
from .processors.core.offset_evaluator import apply
from .resolver import TimeExpressionResolver, parse_with_reference, resolve

__all__ = [
    "resolve",
    "parse_with_reference",
    "parse",
    "apply",
    "TimeExpressionResolver",
    "ExpressionParser",
    "Expression",
    "AbsoluteInstant",
    "RelativeOffset",
    "Unit",
    "AnchorKind",
    "Clock",
    "SystemClock",
    "FixedClock",
    "get_clock",
    "set_clock",
    "reset_clock",
    "TimexprError",
    "ExpressionSyntaxError",
    "TimestampRangeError",
    "ResolutionError",
]
