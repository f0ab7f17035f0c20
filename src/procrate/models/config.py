"""
Configuration data models.

This module contains the configuration structures for monitored roles and
for the monitor's sampling, statistics and reporting behaviour.
"""

from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_HISTOGRAM_BOUNDARIES: List[float] = [0.10, 0.25, 0.50, 0.75, 1.00]


@dataclass
class RoleConfig:
    """
    A monitored role, loaded from the `[[roles]]` tables of `config.toml`.
    """

    # Logical name reported in every metric (e.g., "proxy", "worker").
    name: str
    # Regex matched against the process name and full command line.
    pattern: str


@dataclass
class MonitorConfig:
    """
    Configuration for the monitor's global behaviour, loaded from `config.toml`.
    """

    # [monitor.collection]
    sampling_interval_seconds: float = 1.0

    # [monitor.reporting]
    report_interval_seconds: float = 10.0
    output_format: str = "json"  # "json" or "text"
    metric_prefix: str = "procrate"
    output_file: Optional[str] = None  # None writes to stdout
    flush_on_exit: bool = True

    # [monitor.statistics]
    window_size: int = 10
    histogram_boundaries: List[float] = field(
        default_factory=lambda: list(DEFAULT_HISTOGRAM_BOUNDARIES)
    )


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    monitor: MonitorConfig
    roles: List[RoleConfig]
