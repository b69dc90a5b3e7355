"""Offset Evaluator

Applies a ``RelativeOffset`` to a reference instant. Seconds through days
are fixed durations of elapsed time; months and years move the calendar
field, keep the wall-clock time of day and clamp
the day of month to the last valid day (31 Jan + 1 month = 28/29 Feb).
"""

from datetime import datetime, timedelta, timezone

from dateutil.relativedelta import relativedelta

from ...core.error_handler import TimestampRangeError
from .expression import RelativeOffset, Unit


def start_of_day(reference: datetime) -> datetime:
    """Truncate to 00:00:00 in the reference's own zone."""
    return reference.replace(hour=0, minute=0, second=0, microsecond=0)


def _delta(offset: RelativeOffset):
    amount = offset.signed_magnitude
    unit = offset.unit

    if unit is Unit.SECOND:
        return timedelta(seconds=amount)
    if unit is Unit.MINUTE:
        return timedelta(minutes=amount)
    if unit is Unit.HOUR:
        return timedelta(hours=amount)
    if unit is Unit.DAY:
        return timedelta(days=amount)
    if unit is Unit.MONTH:
        return relativedelta(months=amount)
    if unit is Unit.YEAR:
        return relativedelta(years=amount)
    raise ValueError(f"unit {unit} must be normalized before evaluation")


def apply(offset: RelativeOffset, reference: datetime) -> datetime:
    """Resolve an offset against a reference instant.

    Args:
        offset: Offset produced by the grammar engine
        reference: Reference instant; naive values are taken as UTC

    Returns:
        The resulting instant, in the reference's zone

    Raises:
        TimestampRangeError: If the result falls outside years 1-9999
    """
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)

    offset = offset.normalized()
    base = start_of_day(reference) if offset.day_aligned else reference

    if offset.magnitude == 0:
        return base

    try:
        # Day-aligned keywords step whole calendar days on the wall clock
        if offset.unit.is_calendar_field or offset.day_aligned:
            return base + _delta(offset)
        # Elapsed time is measured in UTC so DST transitions do not stretch it
        try:
            shifted = base.astimezone(timezone.utc) + _delta(offset)
            return shifted.astimezone(base.tzinfo)
        except OverflowError:
            # The UTC view of an edge-of-range instant may not exist; a fixed
            # offset makes wall and elapsed arithmetic agree
            wall = base + _delta(offset)
            if wall.utcoffset() != base.utcoffset():
                raise
            return wall
    except (OverflowError, ValueError) as e:
        raise TimestampRangeError(
            f"{offset.signed_magnitude:+d} {offset.unit.value}(s) from "
            f"{base.isoformat()} is outside the supported range: {e}"
        ) from e
