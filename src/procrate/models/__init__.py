"""
Data models for the monitoring system.

Configuration Models:
- Monitor-wide sampling, statistics and reporting settings
- Role definitions used for process discovery

Runtime Models:
- Raw process observations fed to the rate computer
- Interval reports published through the report store
"""

from .config import AppConfig, MonitorConfig, RoleConfig, DEFAULT_HISTOGRAM_BOUNDARIES
from .observation import ProcessObservation
from .report import IntervalReport

__all__ = [
    # Configuration
    "AppConfig",
    "MonitorConfig",
    "RoleConfig",
    "DEFAULT_HISTOGRAM_BOUNDARIES",
    # Runtime
    "ProcessObservation",
    "IntervalReport",
]
