"""
Fixed-capacity window of recent rate samples.
"""

import math
from collections import deque
from typing import Deque, List


class SampleWindow:
    """
    Ring buffer holding the last `capacity` rate samples of one role.

    Pushing beyond capacity evicts the oldest sample. Statistics are computed
    on demand; an empty window has a NaN mean and a window with fewer than two
    samples has a NaN standard deviation.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"SampleWindow capacity must be >= 1, got {capacity}")
        self._samples: Deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def __len__(self) -> int:
        return len(self._samples)

    def push(self, sample: float) -> None:
        self._samples.append(float(sample))

    def clear(self) -> None:
        self._samples.clear()

    def samples(self) -> List[float]:
        """Return a copy of the current contents, oldest first."""
        return list(self._samples)

    def mean(self) -> float:
        if not self._samples:
            return math.nan
        return sum(self._samples) / len(self._samples)

    def stddev(self) -> float:
        """Population standard deviation using the two-pass formula."""
        n = len(self._samples)
        if n < 2:
            return math.nan
        mean = sum(self._samples) / n
        squared = sum((s - mean) ** 2 for s in self._samples)
        return math.sqrt(squared / n)
