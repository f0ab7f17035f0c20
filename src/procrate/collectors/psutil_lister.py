"""
Process lister implementation using the 'psutil' library.

Processes are matched to roles by applying each role's regex pattern to the
process name and full command line. CPU time is the sum of user and system
time; memory figures come from `memory_info()`.
"""

import logging
import os
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

import psutil

from ..models.config import RoleConfig
from ..models.observation import ProcessObservation
from .base import AbstractProcessLister

logger = logging.getLogger(__name__)


class PsutilProcessLister(AbstractProcessLister):
    """
    Lists monitored processes with psutil.

    When several processes match one role, the one created earliest is
    reported; processes are never aggregated within a role. The monitor's
    own process is always skipped.
    """

    def __init__(self, roles: Sequence[RoleConfig]):
        super().__init__(roles)
        self._patterns: List[Tuple[str, re.Pattern]] = []
        for role in self.roles:
            try:
                self._patterns.append((role.name, re.compile(role.pattern)))
            except re.error as e:
                logger.error(f"Invalid regex pattern for role '{role.name}': '{role.pattern}'. Error: {e}")
                raise ValueError(f"Invalid regular expression pattern: {role.pattern}") from e
        self._own_pid = os.getpid()
        self._iter_attrs = ["pid", "name", "cmdline", "create_time"]

    def _match_role(self, proc_name: str, cmdline_str: str) -> Optional[str]:
        for role_name, pattern in self._patterns:
            if pattern.search(proc_name) or (cmdline_str and pattern.search(cmdline_str)):
                return role_name
        return None

    def _observe(self, proc: psutil.Process, role: str) -> Optional[ProcessObservation]:
        """Read CPU and memory counters of a matched process."""
        try:
            with proc.oneshot():
                cpu = proc.cpu_times()
                mem = proc.memory_info()
            return ProcessObservation(
                role=role,
                pid=proc.pid,
                timestamp=datetime.now(timezone.utc),
                cpu_time=float(cpu.user + cpu.system),
                virtual_memory_bytes=int(mem.vms),
                rss_bytes=int(mem.rss),
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return None

    def list_processes(self) -> List[ProcessObservation]:
        candidates: Dict[str, Tuple[float, psutil.Process]] = {}
        processes_scanned = 0

        for proc in psutil.process_iter(self._iter_attrs):
            processes_scanned += 1
            try:
                info = proc.info
                if info["pid"] == self._own_pid:
                    continue
                proc_name: str = info.get("name") or ""
                cmdline_str: str = " ".join(info.get("cmdline") or [])
                create_time: float = info.get("create_time") or 0.0
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

            role = self._match_role(proc_name, cmdline_str)
            if role is None:
                continue

            current = candidates.get(role)
            if current is not None:
                logger.debug(
                    f"Multiple processes match role '{role}' (PIDs {current[1].pid}, {info['pid']}); "
                    "keeping the oldest"
                )
                if create_time >= current[0]:
                    continue
            candidates[role] = (create_time, proc)

        observations: List[ProcessObservation] = []
        for role, (_, proc) in candidates.items():
            observation = self._observe(proc, role)
            if observation is not None:
                observations.append(observation)

        logger.debug(
            f"Scanned {processes_scanned} processes, observed {len(observations)} "
            f"of {len(self.roles)} roles"
        )
        return observations
