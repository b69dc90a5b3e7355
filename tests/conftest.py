"""
Pytest configuration and shared fixtures for timexpr testing.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest
import yaml

from timexpr.core.clock import FixedClock, reset_clock, set_clock
from timexpr.processors.core.grammar import ExpressionParser
from timexpr.resolver import TimeExpressionResolver

from .fixtures.sample_data import REFERENCE_TIME


@dataclass
class TestConfig:
    """Test configuration settings"""
    __test__ = False

    fuzz_iterations: int = 2000
    fuzz_seed: int = 1337


@pytest.fixture(scope="session")
def test_config():
    """Global test configuration"""
    return TestConfig()


@pytest.fixture
def reference_time():
    """Fixed reference instant shared by the expression tables"""
    return REFERENCE_TIME


@pytest.fixture
def fixed_clock(reference_time):
    """Clock frozen at the reference instant"""
    return FixedClock(reference_time)


@pytest.fixture
def installed_clock(fixed_clock):
    """Install the fixed clock process-wide and restore the system clock afterwards"""
    set_clock(fixed_clock)
    yield fixed_clock
    reset_clock()


@pytest.fixture
def parser():
    return ExpressionParser()


@pytest.fixture
def resolver(fixed_clock):
    """Resolver whose "now" is the reference instant"""
    return TimeExpressionResolver(clock=fixed_clock)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove TIMEXPR_* variables so configuration tests start from defaults"""
    for key in list(os.environ):
        if key.startswith("TIMEXPR_"):
            monkeypatch.delenv(key, raising=False)
    yield monkeypatch


@pytest.fixture
def temp_config_dir():
    """Temporary directory holding a default configuration file"""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_dir = Path(temp_dir) / "config"
        config_dir.mkdir()

        default_config = {
            "environment": "testing",
            "parser": {
                "max_input_length": 64
            },
            "resolver": {
                "treat_zero_reference_as_unset": True
            },
            "logging": {
                "level": "DEBUG",
                "log_to_console": False
            }
        }

        with open(config_dir / "default_config.yaml", "w") as f:
            yaml.dump(default_config, f)

        yield config_dir
