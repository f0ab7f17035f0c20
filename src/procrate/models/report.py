"""
Published per-role snapshot.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class IntervalReport:
    """
    Point-in-time view of a process' CPU usage.

    Rate figures are fractions of one CPU and are NaN until enough history
    exists to compute them:

    - window_rate: mean of the most recent samples; smooths out noise.
    - standard_dev: population standard deviation of the same samples.
    - lifetime_rate: CPU time over wall time since first seen (or since the
      last restart); least volatile.
    - current_rate: derivative between the last two observations; most volatile.
    """

    role: str
    pid: int
    first_seen: datetime
    last_seen: datetime
    age: timedelta
    window_rate: float
    standard_dev: float
    lifetime_rate: float
    current_rate: float
    times_restarted: int = 0
    virtual_memory_bytes: int = 0
    rss_bytes: int = 0
    rate_histogram: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the histogram so later updates by the computer never leak in.
        object.__setattr__(
            self, "rate_histogram", MappingProxyType(dict(self.rate_histogram))
        )
