"""Grammar Engine for Time Expressions

Parses a whole input string into an ``Expression``. The accepted
language is small and fixed:

    expression := timestamp
                | keyword
                | QUANTITY post-anchor
                | NUMBER unit-word post-anchor
                | pre-anchor (unit-word | QUANTITY)

    keyword     := now | today | yesterday | tomorrow
    post-anchor := ago | later
    pre-anchor  := next | last

A timestamp literal is tried first and short-circuits the relative
productions. Exactly one magnitude/unit pair is allowed and the whole
input must be consumed; anything else raises ``ExpressionSyntaxError``.
"""

import re
from typing import Dict, List, Optional, Tuple

from dateutil.parser import isoparse

from ...core.error_handler import ExpressionSyntaxError
from .expression import AbsoluteInstant, AnchorKind, Expression, RelativeOffset, Unit
from .tokenizer import Token, TokenKind, tokenize

DEFAULT_MAX_INPUT_LENGTH = 256

TIMESTAMP_PATTERN = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})"
    r"[Tt ]"
    r"(?P<time>[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{1,9})?)"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"
)

KEYWORDS: Dict[str, RelativeOffset] = {
    "now": RelativeOffset(magnitude=0, unit=Unit.SECOND),
    "today": RelativeOffset(magnitude=0, unit=Unit.DAY, day_aligned=True),
    "yesterday": RelativeOffset(magnitude=1, unit=Unit.DAY, anchor=AnchorKind.PAST, day_aligned=True),
    "tomorrow": RelativeOffset(magnitude=1, unit=Unit.DAY, anchor=AnchorKind.FUTURE, day_aligned=True),
}

POST_ANCHORS: Dict[str, AnchorKind] = {
    "ago": AnchorKind.PAST,
    "later": AnchorKind.FUTURE,
}

PRE_ANCHORS: Dict[str, AnchorKind] = {
    "next": AnchorKind.FUTURE,
    "last": AnchorKind.PAST,
}

# Week has no unit code and is only reachable through "next week" / "last week"
_COUNTABLE_UNITS = (Unit.SECOND, Unit.MINUTE, Unit.HOUR, Unit.DAY, Unit.MONTH, Unit.YEAR)

SINGULAR_UNIT_WORDS: Dict[str, Unit] = {unit.value: unit for unit in Unit}
UNIT_WORDS: Dict[str, Unit] = {}
for _unit in _COUNTABLE_UNITS:
    UNIT_WORDS[_unit.value] = _unit
    UNIT_WORDS[_unit.value + "s"] = _unit


class _TokenStream:
    """Cursor over a token list with expectation-aware errors."""

    def __init__(self, text: str, tokens: List[Token]):
        self.text = text
        self.tokens = tokens
        self.index = 0

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def fail(self, message: str, expected: Tuple[str, ...]) -> ExpressionSyntaxError:
        token = self.peek()
        if token is None:
            return ExpressionSyntaxError(
                f"{message}, found end of input",
                text=self.text, offset=len(self.text), expected=expected
            )
        return ExpressionSyntaxError(
            f"{message}, found {token.text!r}",
            text=self.text, offset=token.offset, expected=expected
        )

    def expect_end(self):
        if self.peek() is not None:
            raise self.fail("unexpected trailing input", ("end of input",))


class ExpressionParser:
    """Parses time expression text into ``Expression`` values.

    Instances hold no per-call state and are safe to share across threads.
    """

    def __init__(self, max_input_length: int = DEFAULT_MAX_INPUT_LENGTH):
        self.max_input_length = max_input_length

    def parse(self, text: str) -> Expression:
        """Parse a time expression.

        Args:
            text: Expression such as ``"6h ago"`` or ``"2023-10-10T10:00:00Z"``

        Returns:
            ``AbsoluteInstant`` for timestamp literals, ``RelativeOffset`` otherwise

        Raises:
            ExpressionSyntaxError: If the text is not a complete expression
        """
        if not isinstance(text, str):
            raise ExpressionSyntaxError(
                f"expected text, got {type(text).__name__}", text=repr(text)
            )
        if len(text) > self.max_input_length:
            raise ExpressionSyntaxError(
                f"input longer than {self.max_input_length} characters",
                text=text, offset=self.max_input_length
            )

        stripped = text.strip()
        if not stripped:
            raise ExpressionSyntaxError(
                "empty time expression", text=text, offset=0,
                expected=("timestamp", "keyword", "duration")
            )

        instant = self._parse_timestamp(text, stripped)
        if instant is not None:
            return instant

        stream = _TokenStream(text, tokenize(text))
        expression = self._parse_relative(stream)
        stream.expect_end()
        return expression

    def _parse_timestamp(self, text: str, stripped: str) -> Optional[AbsoluteInstant]:
        """Decode an RFC 3339 literal, or return None if the text is not one."""
        if TIMESTAMP_PATTERN.fullmatch(stripped) is None:
            return None

        normalized = stripped[:10] + "T" + stripped[11:].upper()
        try:
            value = isoparse(normalized)
        except (ValueError, OverflowError) as e:
            raise ExpressionSyntaxError(
                f"invalid timestamp literal: {e}",
                text=text, offset=text.index(stripped[0]),
                expected=("valid calendar date and time",)
            ) from e
        return AbsoluteInstant(value)

    def _parse_relative(self, stream: _TokenStream) -> RelativeOffset:
        token = stream.peek()
        expected = ("keyword", "magnitude", "'next'", "'last'")

        if token is None:
            raise stream.fail("expected time expression", expected)

        if token.kind is TokenKind.WORD:
            if token.text in KEYWORDS:
                stream.advance()
                return KEYWORDS[token.text]
            if token.text in PRE_ANCHORS:
                stream.advance()
                return self._parse_pre_anchored(stream, PRE_ANCHORS[token.text])
            raise stream.fail("unknown word", expected)

        if token.kind is TokenKind.QUANTITY:
            stream.advance()
            return self._offset(stream, token, token.unit, self._parse_post_anchor(stream))

        # Bare number: a spelled-out unit word must follow
        stream.advance()
        unit_token = stream.peek()
        if unit_token is None or unit_token.kind is not TokenKind.WORD or unit_token.text not in UNIT_WORDS:
            raise stream.fail("expected unit word after magnitude", ("unit word",))
        stream.advance()
        return self._offset(stream, token, UNIT_WORDS[unit_token.text], self._parse_post_anchor(stream))

    def _parse_pre_anchored(self, stream: _TokenStream, anchor: AnchorKind) -> RelativeOffset:
        token = stream.peek()
        expected = ("singular unit word", "magnitude with unit code")

        if token is not None and token.kind is TokenKind.WORD and token.text in SINGULAR_UNIT_WORDS:
            stream.advance()
            return RelativeOffset(magnitude=1, unit=SINGULAR_UNIT_WORDS[token.text], anchor=anchor)

        if token is not None and token.kind is TokenKind.QUANTITY:
            stream.advance()
            return self._offset(stream, token, token.unit, anchor)

        raise stream.fail("expected unit after anchor", expected)

    def _parse_post_anchor(self, stream: _TokenStream) -> AnchorKind:
        token = stream.peek()
        if token is not None and token.kind is TokenKind.WORD and token.text in POST_ANCHORS:
            stream.advance()
            return POST_ANCHORS[token.text]
        raise stream.fail("expected anchor", ("'ago'", "'later'"))

    def _offset(self, stream: _TokenStream, magnitude_token: Token, unit: Unit,
                anchor: AnchorKind) -> RelativeOffset:
        if magnitude_token.magnitude == 0:
            raise ExpressionSyntaxError(
                "magnitude must be at least 1",
                text=stream.text, offset=magnitude_token.offset,
                expected=("positive magnitude",)
            )
        return RelativeOffset(magnitude=magnitude_token.magnitude, unit=unit, anchor=anchor)


_default_parser = ExpressionParser()


def parse(text: str) -> Expression:
    """Parse text with the default parser settings."""
    return _default_parser.parse(text)
