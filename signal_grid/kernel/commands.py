import logging
from abc import ABC, abstractmethod
from typing import Any, Optional
from signal_grid.controllers.implementations import axis_signals, apply_blocked_direction
from signal_grid.domain.models import Axis, ControlMode, SignalState, VehicleType, Direction

logger = logging.getLogger(__name__)

class Command(ABC):
    @abstractmethod
    def execute(self, kernel: Any):
        pass

class SetModeCommand(Command):
    def __init__(self, mode: ControlMode):
        self.mode = mode

    def execute(self, kernel: Any):
        if kernel.state.mode != self.mode:
            logger.info("Control mode %s -> %s", kernel.state.mode.value, self.mode.value)
        kernel.state.mode = self.mode

class SetManualSignalCommand(Command):
    def __init__(self, intersection_id: str, axis: Axis):
        self.intersection_id = intersection_id
        self.axis = axis

    def execute(self, kernel: Any):
        intersection = kernel.state.intersections.get(self.intersection_id)
        if not intersection:
            logger.warning("Manual signal for unknown intersection %s ignored", self.intersection_id)
            return None
        intersection.manualOverride = True
        intersection.signals = apply_blocked_direction(intersection, axis_signals(self.axis))
        logger.info("%s forced %s green", intersection.id, self.axis.value)
        return intersection

class ReleaseManualCommand(Command):
    def __init__(self, intersection_id: str):
        self.intersection_id = intersection_id

    def execute(self, kernel: Any):
        intersection = kernel.state.intersections.get(self.intersection_id)
        if not intersection:
            logger.warning("Release for unknown intersection %s ignored", self.intersection_id)
            return None
        if intersection.manualOverride:
            logger.info("%s returned to %s control", intersection.id, kernel.state.mode.value)
        intersection.manualOverride = False
        return intersection

class CycleManualSignalCommand(Command):
    """Junction click: auto -> vertical -> horizontal -> auto."""

    def __init__(self, intersection_id: str):
        self.intersection_id = intersection_id

    def execute(self, kernel: Any):
        intersection = kernel.state.intersections.get(self.intersection_id)
        if not intersection:
            logger.warning("Cycle for unknown intersection %s ignored", self.intersection_id)
            return None
        if not intersection.manualOverride:
            return SetManualSignalCommand(self.intersection_id, Axis.VERTICAL).execute(kernel)
        vertical_green = SignalState.GREEN in (
            intersection.signals[Direction.NORTH], intersection.signals[Direction.SOUTH]
        )
        if vertical_green:
            return SetManualSignalCommand(self.intersection_id, Axis.HORIZONTAL).execute(kernel)
        return ReleaseManualCommand(self.intersection_id).execute(kernel)

class SelectLocationCommand(Command):
    def __init__(self, name: str):
        self.name = name

    def execute(self, kernel: Any):
        kernel.select_location(self.name)

class SpawnVehicleCommand(Command):
    def __init__(self, vehicle_type: Optional[VehicleType] = None):
        self.vehicle_type = vehicle_type

    def execute(self, kernel: Any):
        # Force a spawn attempt
        kernel.spawn_vehicle(self.vehicle_type)
