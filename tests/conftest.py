"""
Pytest configuration and shared fixtures for the procrate test suite.
"""

import math
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from procrate.models import IntervalReport, ProcessObservation  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def base_time():
    """Fixed reference timestamp for deterministic observations."""
    return T0


@pytest.fixture
def make_observation():
    """Factory for ProcessObservation values relative to a fixed start time."""

    def _make(role="alpha", pid=100, seconds=0.0, cpu=0.0, vms=4096, rss=1024):
        return ProcessObservation(
            role=role,
            pid=pid,
            timestamp=T0 + timedelta(seconds=seconds),
            cpu_time=cpu,
            virtual_memory_bytes=vms,
            rss_bytes=rss,
        )

    return _make


@pytest.fixture
def make_report():
    """Factory for IntervalReport values; rates default to NaN."""

    def _make(role="alpha", pid=100, age_seconds=30.0, **overrides):
        fields = dict(
            role=role,
            pid=pid,
            first_seen=T0,
            last_seen=T0 + timedelta(seconds=age_seconds),
            age=timedelta(seconds=age_seconds),
            window_rate=math.nan,
            standard_dev=math.nan,
            lifetime_rate=math.nan,
            current_rate=math.nan,
            times_restarted=0,
            virtual_memory_bytes=8192,
            rss_bytes=2048,
            rate_histogram={"0-10%": 0, "10%+": 0},
        )
        fields.update(overrides)
        return IntervalReport(**fields)

    return _make


@pytest.fixture
def sample_config_data():
    """Sample raw [monitor] table for testing."""
    return {
        "collection": {
            "sampling_interval_seconds": 0.5,
        },
        "reporting": {
            "report_interval_seconds": 5.0,
            "output_format": "json",
            "metric_prefix": "procrate",
            "output_file": "",
            "flush_on_exit": True,
        },
        "statistics": {
            "window_size": 4,
            "histogram_boundaries": [0.1, 0.5, 1.0],
        },
    }


@pytest.fixture
def sample_roles_data():
    """Sample raw [[roles]] tables for testing."""
    return [
        {"name": "proxy", "pattern": "bro.*proxy"},
        {"name": "worker", "pattern": "bro.*worker"},
    ]


CONFIG_TOML = """
[monitor.collection]
sampling_interval_seconds = 0.05

[monitor.reporting]
report_interval_seconds = 0.1
output_format = "json"
metric_prefix = "testrate"

[monitor.statistics]
window_size = 3
histogram_boundaries = [0.25, 0.5]

[[roles]]
name = "alpha"
pattern = "alpha-service"
"""


@pytest.fixture
def config_file(tmp_path):
    """Write a complete config.toml to a temporary directory."""
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Ensure no test sees configuration cached by another."""
    from procrate.config import clear_config_cache

    clear_config_cache()
    yield
    clear_config_cache()
