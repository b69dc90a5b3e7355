"""Core Expression Processors

Tokenizer, grammar engine and offset evaluator.
"""

from .expression import AbsoluteInstant, AnchorKind, Expression, RelativeOffset, Unit
from .tokenizer import Token, TokenKind, tokenize
from .grammar import ExpressionParser, parse
from .offset_evaluator import apply, start_of_day

__all__ = [
    "AbsoluteInstant",
    "AnchorKind",
    "Expression",
    "RelativeOffset",
    "Unit",
    "Token",
    "TokenKind",
    "tokenize",
    "ExpressionParser",
    "parse",
    "apply",
    "start_of_day"
]
