"""
procrate: CPU-rate telemetry for long-lived processes.

The package samples a fixed set of processes identified by role, turns their
cumulative CPU time into rate statistics and publishes the latest snapshot
per role as JSON or Prometheus-style text.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Observations, reports and configuration data structures
- validation: Input validation and the error taxonomy
- stats: Sample windows, rate histograms and the rate computer
- reporting: Report store, serialization, sinks and the reporting scheduler
- collectors: psutil process discovery and the sampling worker
- cli: Command-line interface and pipeline assembly

Usage:
    From command line:
        procrate --config conf/config.toml

    Programmatically:
        from procrate import MonitorRunner, get_config
        runner = MonitorRunner(get_config())
        runner.run(duration=60)
"""

from .config import get_config, clear_config_cache, set_config_path
from .cli import MonitorRunner, main_cli

from .models import (
    AppConfig,
    IntervalReport,
    MonitorConfig,
    ProcessObservation,
    RoleConfig,
)

from .stats import RateComputer, RateHistogram, SampleWindow

from .reporting import ReportStore, ReportingScheduler

from .validation import (
    EmptyStoreError,
    ReportStoreError,
    RoleNotFoundError,
    SerializationError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "MonitorRunner",
    "main_cli",
    # Models
    "AppConfig",
    "IntervalReport",
    "MonitorConfig",
    "ProcessObservation",
    "RoleConfig",
    # Core
    "RateComputer",
    "RateHistogram",
    "SampleWindow",
    "ReportStore",
    "ReportingScheduler",
    # Errors
    "EmptyStoreError",
    "ReportStoreError",
    "RoleNotFoundError",
    "SerializationError",
    "ValidationError",
]
