"""
Conversion of raw per-process observations into interval reports.

The RateComputer keeps one RoleState per role and, for each new observation,
derives four complementary CPU rate figures:

- current rate: CPU time delta over wall time delta between two observations
- window rate: mean of the last N current rates
- standard deviation: dispersion of the same N current rates
- lifetime rate: accumulated CPU time over accumulated wall time

A change of PID for a role is treated as a restart of the underlying process.
The restart resets everything tied to the dead process instance (lifetime
accumulators and window samples) while the role's identity (first-seen time,
restart counter and rate histogram) carries over.
"""

import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from ..models.config import DEFAULT_HISTOGRAM_BOUNDARIES
from ..models.observation import ProcessObservation
from ..models.report import IntervalReport
from .histogram import RateHistogram
from .window import SampleWindow

logger = logging.getLogger(__name__)


@dataclass
class RoleState:
    """
    Cross-tick state of a single role, owned by the RateComputer.

    Attributes:
        first_seen: Timestamp of the very first observation of the role.
        last_seen: Timestamp of the most recent accepted observation.
        last_pid: PID of the most recent accepted observation.
        last_cpu_time: Cumulative CPU time of the most recent accepted observation.
        window: Recent current-rate samples of the running process instance.
        histogram: Bucketed current rates over the role's whole lifetime.
        times_restarted: Number of PID changes observed so far.
        lifetime_cpu_seconds: CPU time accumulated since first seen or last restart.
        lifetime_wall_seconds: Wall time accumulated since first seen or last restart.
    """

    first_seen: datetime
    last_seen: datetime
    last_pid: int
    last_cpu_time: float
    window: SampleWindow
    histogram: RateHistogram
    times_restarted: int = 0
    lifetime_cpu_seconds: float = 0.0
    lifetime_wall_seconds: float = 0.0

    def reset_instance(self, observation: ProcessObservation) -> None:
        """Start tracking a new process instance from `observation`."""
        self.last_seen = observation.timestamp
        self.last_pid = observation.pid
        self.last_cpu_time = observation.cpu_time
        self.window.clear()
        self.lifetime_cpu_seconds = 0.0
        self.lifetime_wall_seconds = 0.0


class RateComputer:
    """
    Stateful per-role rate engine.

    `observe()` must be fed observations of a given role in non-decreasing
    timestamp order. Calls are serialized internally so several producer
    threads may share one computer.
    """

    def __init__(
        self,
        window_size: int = 10,
        histogram_boundaries: Optional[Sequence[float]] = None,
    ):
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self.window_size = window_size
        self.histogram_boundaries = list(
            histogram_boundaries if histogram_boundaries is not None else DEFAULT_HISTOGRAM_BOUNDARIES
        )
        # Fail fast on bad boundaries instead of at the first observation.
        RateHistogram(self.histogram_boundaries)
        self._states: Dict[str, RoleState] = {}
        self._lock = threading.Lock()

    def roles(self) -> List[str]:
        with self._lock:
            return list(self._states)

    def state_for(self, role: str) -> Optional[RoleState]:
        with self._lock:
            return self._states.get(role)

    def observe(self, observation: ProcessObservation) -> Optional[IntervalReport]:
        """
        Fold one observation into its role's state and build a report.

        Returns:
            The new IntervalReport, or None when the observation carries no
            elapsed time relative to the previous one and was ignored.
        """
        with self._lock:
            state = self._states.get(observation.role)
            if state is None:
                return self._first_observation(observation)

            if observation.pid != state.last_pid:
                logger.info(
                    f"Role '{observation.role}' restarted: PID {state.last_pid} -> {observation.pid}"
                )
                return self._restart(state, observation)

            elapsed = (observation.timestamp - state.last_seen).total_seconds()
            if elapsed <= 0:
                logger.debug(
                    f"Ignoring observation of role '{observation.role}' with non-positive "
                    f"time delta ({elapsed:.6f}s)"
                )
                return None

            cpu_delta = observation.cpu_time - state.last_cpu_time
            if cpu_delta < 0:
                logger.info(
                    f"Role '{observation.role}' CPU time went backwards for PID {observation.pid} "
                    f"({state.last_cpu_time:.3f}s -> {observation.cpu_time:.3f}s); treating as restart"
                )
                return self._restart(state, observation)

            current_rate = cpu_delta / elapsed
            state.window.push(current_rate)
            state.histogram.add(current_rate)
            state.lifetime_cpu_seconds += cpu_delta
            state.lifetime_wall_seconds += elapsed
            state.last_seen = observation.timestamp
            state.last_cpu_time = observation.cpu_time

            return self._build_report(
                state,
                observation,
                current_rate=current_rate,
                lifetime_rate=state.lifetime_cpu_seconds / state.lifetime_wall_seconds,
            )

    def _first_observation(self, observation: ProcessObservation) -> IntervalReport:
        logger.info(f"Started tracking role '{observation.role}' (PID {observation.pid})")
        state = RoleState(
            first_seen=observation.timestamp,
            last_seen=observation.timestamp,
            last_pid=observation.pid,
            last_cpu_time=observation.cpu_time,
            window=SampleWindow(self.window_size),
            histogram=RateHistogram(self.histogram_boundaries),
        )
        self._states[observation.role] = state
        return self._build_report(state, observation, current_rate=math.nan, lifetime_rate=math.nan)

    def _restart(self, state: RoleState, observation: ProcessObservation) -> IntervalReport:
        state.times_restarted += 1
        state.reset_instance(observation)
        return self._build_report(state, observation, current_rate=math.nan, lifetime_rate=math.nan)

    @staticmethod
    def _build_report(
        state: RoleState,
        observation: ProcessObservation,
        current_rate: float,
        lifetime_rate: float,
    ) -> IntervalReport:
        return IntervalReport(
            role=observation.role,
            pid=observation.pid,
            first_seen=state.first_seen,
            last_seen=observation.timestamp,
            age=observation.timestamp - state.first_seen,
            window_rate=state.window.mean(),
            standard_dev=state.window.stddev(),
            lifetime_rate=lifetime_rate,
            current_rate=current_rate,
            times_restarted=state.times_restarted,
            virtual_memory_bytes=observation.virtual_memory_bytes,
            rss_bytes=observation.rss_bytes,
            rate_histogram=state.histogram.snapshot(),
        )
