"""Expression Processing Module

Grammar engine and offset evaluator for time expressions.
"""

from .core.expression import AbsoluteInstant, AnchorKind, Expression, RelativeOffset, Unit
from .core.grammar import ExpressionParser, parse
from .core.offset_evaluator import apply, start_of_day

__all__ = [
    "AbsoluteInstant",
    "AnchorKind",
    "Expression",
    "RelativeOffset",
    "Unit",
    "ExpressionParser",
    "parse",
    "apply",
    "start_of_day"
]
