"""Time Expression Data Model

Values produced by the grammar engine. An expression is either an
absolute instant taken verbatim from a timestamp literal, or a relative
offset that still needs a reference instant to become a point in time.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class Unit(Enum):
    """Units a relative offset can be expressed in."""
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def is_calendar_field(self) -> bool:
        """Months and years move calendar fields instead of adding a duration."""
        return self in (Unit.MONTH, Unit.YEAR)


class AnchorKind(Enum):
    """Direction of a relative offset."""
    PAST = "past"
    FUTURE = "future"

    @property
    def sign(self) -> int:
        return -1 if self is AnchorKind.PAST else 1


@dataclass(frozen=True)
class AbsoluteInstant:
    """A fully specified point in time."""
    value: datetime

    def __post_init__(self):
        if self.value.tzinfo is None:
            raise ValueError("AbsoluteInstant requires a timezone-aware datetime")


@dataclass(frozen=True)
class RelativeOffset:
    """A signed, unit-tagged adjustment pending a reference instant.

    Attributes:
        magnitude: Number of units, never negative
        unit: Unit the magnitude is counted in
        anchor: Direction; ``None`` only for zero-magnitude keywords
        day_aligned: Truncate the reference to the start of its day first
    """
    magnitude: int
    unit: Unit
    anchor: Optional[AnchorKind] = None
    day_aligned: bool = False

    def __post_init__(self):
        if isinstance(self.magnitude, bool) or not isinstance(self.magnitude, int):
            raise TypeError(f"magnitude must be an int, got {type(self.magnitude).__name__}")
        if self.magnitude < 0:
            raise ValueError("magnitude must not be negative; use the anchor for direction")
        if (self.magnitude == 0) != (self.anchor is None):
            raise ValueError("anchor is required exactly when magnitude is non-zero")

    @property
    def signed_magnitude(self) -> int:
        if self.anchor is None:
            return 0
        return self.anchor.sign * self.magnitude

    def normalized(self) -> "RelativeOffset":
        """Return the offset with weeks rewritten as days."""
        if self.unit is not Unit.WEEK:
            return self
        return RelativeOffset(
            magnitude=self.magnitude * 7,
            unit=Unit.DAY,
            anchor=self.anchor,
            day_aligned=self.day_aligned
        )


Expression = Union[AbsoluteInstant, RelativeOffset]
