"""
Raw process observation produced by a process lister.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProcessObservation:
    """
    A single reading of one process, taken at one sampling tick.

    Attributes:
        role: Logical identifier of the monitored service; stable across restarts.
        pid: OS process ID at the time of the reading.
        timestamp: When the reading was taken (timezone-aware).
        cpu_time: Cumulative user + system CPU time of the process, in seconds.
        virtual_memory_bytes: Virtual memory size in bytes.
        rss_bytes: Resident set size in bytes.
    """

    role: str
    pid: int
    timestamp: datetime
    cpu_time: float
    virtual_memory_bytes: int = 0
    rss_bytes: int = 0
