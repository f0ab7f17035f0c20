"""
Bucketed counts of instantaneous CPU rates.

Boundaries are fractions of one CPU. For boundaries `[0.1, 0.25, 1.0]` the
buckets are `[0, 0.1)`, `[0.1, 0.25)`, `[0.25, 1.0)` and `[1.0, inf)`,
labelled "0-10%", "10-25%", "25-100%" and "100%+".
"""

import bisect
import math
from typing import Dict, List, Optional, Sequence


def _percent(value: float) -> str:
    return f"{value * 100:g}"


def bucket_labels(boundaries: Sequence[float]) -> List[str]:
    """Build the ordered bucket labels for a list of ascending boundaries."""
    labels = []
    lower = 0.0
    for upper in boundaries:
        labels.append(f"{_percent(lower)}-{_percent(upper)}%")
        lower = upper
    labels.append(f"{_percent(lower)}%+")
    return labels


class RateHistogram:
    """
    Occurrence counts of rates per labelled bucket.

    Every bucket is present from construction with a zero count, so consumers
    always see the same set of keys for a given configuration.
    """

    def __init__(self, boundaries: Sequence[float]):
        if not boundaries:
            raise ValueError("RateHistogram needs at least one boundary")
        if any(b2 <= b1 for b1, b2 in zip(boundaries, boundaries[1:])):
            raise ValueError(f"RateHistogram boundaries must be strictly ascending: {list(boundaries)}")
        self._boundaries = [float(b) for b in boundaries]
        self._labels = bucket_labels(self._boundaries)
        self._counts = [0] * len(self._labels)

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def label_for(self, rate: float) -> Optional[str]:
        """Bucket label for `rate`, or None for NaN, which is never counted."""
        if math.isnan(rate):
            return None
        # bisect_right keeps lower bounds inclusive; negatives land in bucket 0.
        return self._labels[bisect.bisect_right(self._boundaries, rate)]

    def add(self, rate: float) -> None:
        """Count `rate` in its bucket; NaN rates are ignored."""
        if math.isnan(rate):
            return
        self._counts[bisect.bisect_right(self._boundaries, rate)] += 1

    def total(self) -> int:
        return sum(self._counts)

    def snapshot(self) -> Dict[str, int]:
        return dict(zip(self._labels, self._counts))
