"""
Rate statistics: sample windows, rate histograms and the per-role rate computer.
"""

from .histogram import RateHistogram, bucket_labels
from .rate_computer import RateComputer, RoleState
from .window import SampleWindow

__all__ = [
    "RateComputer",
    "RateHistogram",
    "RoleState",
    "SampleWindow",
    "bucket_labels",
]
