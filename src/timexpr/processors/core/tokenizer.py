"""Tokenizer for time expressions.

Splits input into positioned tokens. Unit codes are case-significant
(``m`` is minute, ``M`` is month), so the lexer never folds case.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ...core.error_handler import ExpressionSyntaxError
from .expression import Unit


class TokenKind(Enum):
    """Token categories produced by the tokenizer."""
    QUANTITY = "quantity"  # magnitude with attached unit code: 6h, 2M
    NUMBER = "number"      # bare magnitude: 6
    WORD = "word"          # keyword or unit word: ago, hours


UNIT_CODES: Dict[str, Unit] = {
    "s": Unit.SECOND,
    "m": Unit.MINUTE,
    "h": Unit.HOUR,
    "d": Unit.DAY,
    "M": Unit.MONTH,
    "y": Unit.YEAR,
}

# Explicit ASCII classes: \d would admit non-ASCII digits that int() accepts
_TOKEN_PATTERN = re.compile(
    r"(?P<space>\s+)"
    r"|(?P<quantity>(?P<q_digits>[0-9]+)(?P<q_code>[smhdMy]))(?![A-Za-z0-9])"
    r"|(?P<number>[0-9]+)(?![A-Za-z0-9])"
    r"|(?P<word>[A-Za-z]+)(?![A-Za-z0-9])"
)


@dataclass(frozen=True)
class Token:
    """A lexed token and its position in the original input."""
    kind: TokenKind
    text: str
    offset: int
    magnitude: Optional[int] = None
    unit: Optional[Unit] = None


def tokenize(text: str) -> List[Token]:
    """Split text into tokens.

    Args:
        text: Raw input

    Returns:
        Tokens in input order, whitespace dropped

    Raises:
        ExpressionSyntaxError: On any character sequence that is not a token
    """
    tokens: List[Token] = []
    position = 0

    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise ExpressionSyntaxError(
                f"unexpected input {_fragment(text, position)!r}",
                text=text,
                offset=position,
                expected=("magnitude", "unit code", "keyword")
            )

        kind = match.lastgroup
        if kind == "quantity":
            tokens.append(Token(
                kind=TokenKind.QUANTITY,
                text=match.group("quantity"),
                offset=position,
                magnitude=int(match.group("q_digits")),
                unit=UNIT_CODES[match.group("q_code")]
            ))
        elif kind == "number":
            tokens.append(Token(
                kind=TokenKind.NUMBER,
                text=match.group("number"),
                offset=position,
                magnitude=int(match.group("number"))
            ))
        elif kind == "word":
            tokens.append(Token(kind=TokenKind.WORD, text=match.group("word"), offset=position))

        position = match.end()

    return tokens


def _fragment(text: str, position: int) -> str:
    """Return the non-space run starting at position, for error messages."""
    end = position
    while end < len(text) and not text[end].isspace():
        end += 1
    return text[position:max(end, position + 1)]
