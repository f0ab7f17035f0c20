"""
Command-line interface for the procrate package.
"""

from .main import main_cli
from .orchestrator import MonitorRunner

__all__ = [
    "main_cli",
    "MonitorRunner",
]
