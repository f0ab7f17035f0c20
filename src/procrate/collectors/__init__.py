"""
Process discovery and sampling.
"""

from .base import AbstractProcessLister
from .psutil_lister import PsutilProcessLister
from .sampling_worker import SamplingWorker

__all__ = [
    "AbstractProcessLister",
    "PsutilProcessLister",
    "SamplingWorker",
]
