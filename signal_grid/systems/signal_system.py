from typing import Dict, Iterable, List, Optional
from signal_grid.controllers.base import Controller
from signal_grid.controllers.implementations import CONTROLLERS, apply_blocked_direction
from signal_grid.domain.models import (
    Intersection, Vehicle, Direction, ControlMode, MovementState
)
from signal_grid.domain.directions import OPPOSITE, forward_distance, lateral_distance
from signal_grid.domain import config

class SignalSystem:
    def __init__(self, controllers: Optional[Dict[ControlMode, Controller]] = None):
        self.controllers = controllers or CONTROLLERS

    def update(self, intersections: Iterable[Intersection], vehicles: List[Vehicle],
               mode: ControlMode, now_ms: float):
        """Recompute queues and signals from a pre-tick vehicle snapshot."""
        if mode == ControlMode.MANUAL:
            # Operator owns every light; queues and signals stay frozen
            return

        controller = self.controllers[mode]
        for intersection in intersections:
            if intersection.manualOverride:
                continue

            queues = count_queues(intersection, vehicles)
            signals = controller.compute_signals(intersection, queues, now_ms)
            intersection.queueLengths = queues
            intersection.signals = apply_blocked_direction(intersection, signals)

def count_queues(intersection: Intersection, vehicles: List[Vehicle]) -> Dict[Direction, int]:
    """Vehicles inside each approach's detection band behind the stop line.

    The `north` approach holds southbound traffic above the junction, and so
    on for the other arms.
    """
    queues = {d: 0 for d in Direction}
    near = config.STOP_LINE_DISTANCE
    far = config.STOP_LINE_DISTANCE + config.DETECTION_WINDOW
    for v in vehicles:
        if v.movementState == MovementState.CRASHED:
            continue
        if lateral_distance(v.direction, v.x, v.y, intersection.x, intersection.y) >= config.LATERAL_TOLERANCE:
            continue
        distance = forward_distance(v.direction, v.x, v.y, intersection.x, intersection.y)
        if near < distance < far:
            queues[OPPOSITE[v.direction]] += 1
    return queues
