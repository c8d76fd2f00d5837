from abc import ABC, abstractmethod
from typing import Dict
from signal_grid.domain.models import Intersection, Direction, SignalState

class Controller(ABC):
    """Signal policy for one intersection, evaluated once per tick."""

    @abstractmethod
    def compute_signals(self, intersection: Intersection, queues: Dict[Direction, int],
                        now_ms: float) -> Dict[Direction, SignalState]:
        pass
