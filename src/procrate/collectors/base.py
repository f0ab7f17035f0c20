"""
Defines the abstract interface for process listers.

A process lister turns the operating system's process table into one
ProcessObservation per monitored role and per sampling tick.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models.config import RoleConfig
from ..models.observation import ProcessObservation

logger = logging.getLogger(__name__)


class AbstractProcessLister(ABC):
    """
    Abstract base class for process listers.

    Subclasses implement `list_processes()`, returning at most one
    observation per configured role. Roles whose process is not running are
    simply absent from the result.
    """

    def __init__(self, roles: Sequence[RoleConfig]):
        self.roles = list(roles)
        logger.info(
            f"Initializing {self.__class__.__name__} for roles: "
            f"{[role.name for role in self.roles]}"
        )

    @abstractmethod
    def list_processes(self) -> List[ProcessObservation]:
        """
        Take one reading of every monitored role.

        Returns:
            A list with at most one ProcessObservation per role.
        """
        pass
