"""
Integration tests for the resolve() facade.

Runs text through the grammar engine, clock selection and offset
evaluator together.
"""

from datetime import datetime, timedelta, timezone

import pytest

import timexpr
from timexpr.core.clock import FixedClock
from timexpr.core.config_manager import AppConfig
from timexpr.core.error_handler import ExpressionSyntaxError, ResolutionError, TimestampRangeError
from timexpr.resolver import TimeExpressionResolver, is_zero_reference, parse_with_reference, resolve
from tests.fixtures.sample_data import INVALID_EXPRESSIONS, REFERENCE_TIME, VALID_EXPRESSIONS

UTC = timezone.utc


class TestResolveScenarios:
    """Expression table against a fixed reference"""

    @pytest.mark.integration
    @pytest.mark.parametrize("text,expected", VALID_EXPRESSIONS)
    def test_explicit_reference(self, text, expected):
        assert resolve(text, REFERENCE_TIME) == expected

    @pytest.mark.integration
    @pytest.mark.parametrize("text,expected", VALID_EXPRESSIONS)
    def test_installed_clock(self, installed_clock, text, expected):
        assert resolve(text) == expected

    @pytest.mark.integration
    @pytest.mark.parametrize("text", INVALID_EXPRESSIONS)
    def test_invalid_expressions_fail(self, text):
        with pytest.raises(ResolutionError) as exc_info:
            resolve(text, REFERENCE_TIME)

        assert exc_info.value.text == text
        assert isinstance(exc_info.value.cause, ExpressionSyntaxError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    @pytest.mark.integration
    @pytest.mark.parametrize("n", [1, 2, 7, 30])
    @pytest.mark.parametrize("code,word,delta", [
        ("s", "second", lambda n: timedelta(seconds=n)),
        ("m", "minute", lambda n: timedelta(minutes=n)),
        ("h", "hour", lambda n: timedelta(hours=n)),
        ("d", "day", lambda n: timedelta(days=n)),
    ])
    def test_fixed_units_both_spellings(self, n, code, word, delta):
        plural = word if n == 1 else word + "s"

        assert resolve(f"{n}{code} ago", REFERENCE_TIME) == REFERENCE_TIME - delta(n)
        assert resolve(f"{n}{code} later", REFERENCE_TIME) == REFERENCE_TIME + delta(n)
        assert resolve(f"{n} {plural} ago", REFERENCE_TIME) == REFERENCE_TIME - delta(n)
        assert resolve(f"{n} {plural} later", REFERENCE_TIME) == REFERENCE_TIME + delta(n)

    @pytest.mark.integration
    def test_calendar_units_both_spellings(self):
        assert resolve("2M later", REFERENCE_TIME) == datetime(2021, 12, 10, 10, tzinfo=UTC)
        assert resolve("2 months later", REFERENCE_TIME) == datetime(2021, 12, 10, 10, tzinfo=UTC)
        assert resolve("3y ago", REFERENCE_TIME) == datetime(2018, 10, 10, 10, tzinfo=UTC)
        assert resolve("3 years ago", REFERENCE_TIME) == datetime(2018, 10, 10, 10, tzinfo=UTC)

    @pytest.mark.integration
    def test_month_clamping_end_to_end(self):
        reference = datetime(2021, 1, 31, 8, 15, tzinfo=UTC)

        assert resolve("1M later", reference) == datetime(2021, 2, 28, 8, 15, tzinfo=UTC)


class TestReferenceHandling:
    """Reference selection rules"""

    @pytest.mark.integration
    @pytest.mark.parametrize("reference", [
        datetime(1999, 1, 1, tzinfo=UTC),
        datetime(2030, 6, 15, 12, 30, tzinfo=timezone(timedelta(hours=-7))),
        None,
    ])
    def test_literal_ignores_reference(self, reference):
        assert resolve("2023-10-10T10:00:00Z", reference) == datetime(2023, 10, 10, 10, tzinfo=UTC)

    @pytest.mark.integration
    def test_now_equals_reference(self):
        reference = datetime(2030, 6, 15, 12, 30, 45, 123456, tzinfo=UTC)

        assert resolve("now", reference) == reference

    @pytest.mark.integration
    @pytest.mark.parametrize("zero", [datetime.min, datetime.min.replace(tzinfo=UTC)])
    def test_zero_reference_uses_clock(self, resolver, zero):
        assert resolver.resolve("now", zero) == REFERENCE_TIME

    @pytest.mark.integration
    def test_zero_reference_can_be_taken_literally(self, fixed_clock):
        config = AppConfig()
        config.resolver.treat_zero_reference_as_unset = False
        resolver = TimeExpressionResolver(config=config, clock=fixed_clock)

        result = resolver.resolve("1d later", datetime.min)

        assert result == datetime(1, 1, 2, tzinfo=UTC)

    @pytest.mark.integration
    def test_is_zero_reference(self):
        assert is_zero_reference(datetime.min)
        assert not is_zero_reference(datetime(1970, 1, 1))
        assert not is_zero_reference(datetime.min.replace(tzinfo=timezone(timedelta(hours=1))))

    @pytest.mark.integration
    def test_call_clock_beats_resolver_clock(self, resolver):
        other = FixedClock(datetime(2000, 1, 1, tzinfo=UTC))

        assert resolver.resolve("now", clock=other) == datetime(2000, 1, 1, tzinfo=UTC)
        assert resolver.resolve("now") == REFERENCE_TIME

    @pytest.mark.integration
    def test_resolver_clock_beats_process_clock(self, installed_clock):
        resolver = TimeExpressionResolver(clock=FixedClock(datetime(2000, 1, 1, tzinfo=UTC)))

        assert resolver.resolve("today") == datetime(2000, 1, 1, tzinfo=UTC)

    @pytest.mark.integration
    def test_naive_reference_is_utc(self):
        assert resolve("6s ago", datetime(2021, 10, 10, 10)) == datetime(2021, 10, 10, 9, 59, 54, tzinfo=UTC)

    @pytest.mark.integration
    def test_parse_with_reference(self):
        assert parse_with_reference("6M ago", REFERENCE_TIME) == datetime(2021, 4, 10, 10, tzinfo=UTC)


class TestResolveErrors:
    """Error wrapping"""

    @pytest.mark.integration
    def test_range_errors_are_wrapped(self):
        with pytest.raises(ResolutionError) as exc_info:
            resolve("9000y later", REFERENCE_TIME)

        assert isinstance(exc_info.value.cause, TimestampRangeError)

    @pytest.mark.integration
    def test_configured_input_limit(self, fixed_clock):
        config = AppConfig()
        config.parser.max_input_length = 5
        resolver = TimeExpressionResolver(config=config, clock=fixed_clock)

        assert resolver.resolve("now") == REFERENCE_TIME
        with pytest.raises(ResolutionError):
            resolver.resolve("6 hours ago")

    @pytest.mark.integration
    def test_package_exports(self):
        assert timexpr.resolve is resolve
        assert issubclass(timexpr.ResolutionError, timexpr.TimexprError)
