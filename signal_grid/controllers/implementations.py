from typing import Dict, Tuple
from signal_grid.controllers.base import Controller
from signal_grid.domain.models import (
    Intersection, Direction, SignalState, Axis, ControlMode
)
from signal_grid.domain import config

# (phase end as fraction of cycle, active axis, active colour)
FIXED_TIME_PHASES = [
    (0.45, Axis.HORIZONTAL, SignalState.GREEN),
    (0.50, Axis.HORIZONTAL, SignalState.YELLOW),
    (0.95, Axis.VERTICAL, SignalState.GREEN),
    (1.00, Axis.VERTICAL, SignalState.YELLOW),
]

def axis_signals(axis: Axis, colour: SignalState = SignalState.GREEN) -> Dict[Direction, SignalState]:
    """Paired signals with `axis` showing `colour` and the other axis red."""
    vertical = colour if axis == Axis.VERTICAL else SignalState.RED
    horizontal = colour if axis == Axis.HORIZONTAL else SignalState.RED
    return {
        Direction.NORTH: vertical,
        Direction.SOUTH: vertical,
        Direction.EAST: horizontal,
        Direction.WEST: horizontal,
    }

def cycle_fraction(now_ms: float, cycle_ms: float = config.CYCLE_MS) -> float:
    return (now_ms % cycle_ms) / cycle_ms

def fixed_time_phase(now_ms: float, cycle_ms: float = config.CYCLE_MS) -> Tuple[Axis, SignalState, float]:
    """Active axis, its colour and the milliseconds left in the current phase."""
    fraction = cycle_fraction(now_ms, cycle_ms)
    for end, axis, colour in FIXED_TIME_PHASES:
        if fraction < end:
            return axis, colour, (end - fraction) * cycle_ms
    # Floating point can land exactly on 1.0
    end, axis, colour = FIXED_TIME_PHASES[-1]
    return axis, colour, 0.0

def apply_blocked_direction(intersection: Intersection, signals: Dict[Direction, SignalState]) -> Dict[Direction, SignalState]:
    if intersection.blockedDirection is not None:
        signals[intersection.blockedDirection] = SignalState.RED
    return signals

class StaticController(Controller):
    def compute_signals(self, intersection, queues, now_ms):
        axis, colour, _ = fixed_time_phase(now_ms)
        return axis_signals(axis, colour)

class AdaptiveController(Controller):
    def __init__(self, margin: int = config.ADAPTIVE_MARGIN):
        self.margin = margin
        self.fallback = StaticController()

    def compute_signals(self, intersection, queues, now_ms):
        vertical_queue = queues[Direction.NORTH] + queues[Direction.SOUTH]
        horizontal_queue = queues[Direction.EAST] + queues[Direction.WEST]

        # Congestion preemption skips the yellow transition
        if vertical_queue > horizontal_queue + self.margin:
            return axis_signals(Axis.VERTICAL)
        if horizontal_queue > vertical_queue + self.margin:
            return axis_signals(Axis.HORIZONTAL)
        return self.fallback.compute_signals(intersection, queues, now_ms)

CONTROLLERS: Dict[ControlMode, Controller] = {
    ControlMode.STATIC: StaticController(),
    ControlMode.ADAPTIVE: AdaptiveController(),
}
