import logging
import random
import time
from typing import Callable, List, Optional
from signal_grid.domain.models import (
    Intersection, Vehicle, VehicleType, ControlMode, MovementState, SignalState, Direction,
    LocationConfig, SimulationStats, HistorySample, GridState, SignalDetails,
    IntersectionSummary, RoadOverview, GridOverview, InsightSnapshot, Axis
)
from signal_grid.domain.state import SimulationState
from signal_grid.controllers.implementations import (
    fixed_time_phase, axis_signals, apply_blocked_direction
)
from signal_grid.systems.grid_builder import build_grid
from signal_grid.systems.spawner import VehicleSpawner
from signal_grid.systems.signal_system import SignalSystem
from signal_grid.systems.vehicle_system import VehicleSystem
from signal_grid.kernel.command_queue import CommandQueue
from signal_grid.kernel.commands import Command
from signal_grid.kernel.snapshot_builder import SnapshotBuilder
from signal_grid.domain import config

logger = logging.getLogger(__name__)

def wall_clock_ms() -> float:
    return time.time() * 1000.0

class SimulationKernel:
    def __init__(self, clock: Callable[[], float] = wall_clock_ms):
        self.state = SimulationState()
        self.dt = config.TICK_INTERVAL_MS / 1000.0
        self.clock = clock
        self.rng = random.Random()
        self.command_queue = CommandQueue()
        self.signal_system = SignalSystem()
        self.vehicle_system = VehicleSystem(self.rng)
        self.spawner = VehicleSpawner(self.rng)
        self.snapshot_builder = SnapshotBuilder()
        self.initialized = False

    def initialize(self, seed: int = config.SEED):
        if self.initialized:
            # Queued commands refer to the grid being replaced
            self.command_queue.discard()
        self.state.tick_id = 0
        self.state.time = 0.0
        self.rng.seed(seed)
        self.spawner = VehicleSpawner(self.rng)
        self._initialize_grid()
        self.initialized = True
        logger.info("Kernel Initialized (Seed: %s, Location: %s)", seed, self.state.location.name)

    def _initialize_grid(self):
        self.state.intersections, self.state.road_network = build_grid(self.rng)
        self.state.vehicles = []
        self.state.stats = SimulationStats()

    def select_location(self, name: str) -> bool:
        for location in config.LOCATIONS:
            if location["name"] == name:
                self.state.location = LocationConfig(**location)
                self._initialize_grid()
                logger.info("Location changed to %s, grid regenerated", name)
                return True
        logger.warning("Unknown location %s ignored", name)
        return False

    def spawn_vehicle(self, vehicle_type: Optional[VehicleType] = None) -> Optional[Vehicle]:
        if len(self.state.vehicles) >= config.MAX_VEHICLES:
            return None
        vehicle = self.spawner.spawn(self.state.tick_id, vehicle_type)
        self.state.vehicles.append(vehicle)
        return vehicle

    def queue_command(self, command: Command):
        self.command_queue.add(command)

    def run(self):
        if not self.state.running:
            logger.info("Simulation resumed at tick %d", self.state.tick_id)
        self.state.running = True

    def pause(self):
        if self.state.running:
            logger.info("Simulation paused at tick %d", self.state.tick_id)
        self.state.running = False

    def run_tick(self):
        if not self.initialized:
            self.initialize()

        # 1. Process Commands
        self.command_queue.apply_all(self)

        if not self.state.running:
            return

        # 2. Logic, both systems read the same pre-tick vehicle list
        snapshot = list(self.state.vehicles)
        intersections = list(self.state.intersections.values())
        self.signal_system.update(intersections, snapshot, self.state.mode, self.clock())
        vehicles, passages = self.vehicle_system.update(snapshot, intersections)

        # 3. Commit
        self.state.vehicles = vehicles
        for intersection_id in passages:
            self.state.intersections[intersection_id].throughput += 1

        # 4. Spawning and culling
        if len(self.state.vehicles) < config.MAX_VEHICLES and self.rng.random() < config.SPAWN_CHANCE:
            self.spawn_vehicle()
        self._cull_vehicles()

        # 5. Time Advance
        self.state.time += self.dt
        self.state.tick_id += 1

        self._collect_metrics(len(passages))

    def _cull_vehicles(self):
        margin = config.CULL_MARGIN
        self.state.vehicles = [
            v for v in self.state.vehicles
            if -margin <= v.x <= config.WIDTH + margin and -margin <= v.y <= config.HEIGHT + margin
        ]

    def _collect_metrics(self, passed: int):
        stats = self.state.stats
        vehicles = self.state.vehicles
        waiting = sum(1 for v in vehicles if v.movementState == MovementState.WAITING)

        stats.activeVehicles = len(vehicles)
        stats.congestionLevel = waiting / (len(vehicles) or 1)
        stats.averageWaitTime = sum(v.waitTime for v in vehicles) / (len(vehicles) or 1)
        stats.totalThroughput += passed

        if self.state.tick_id % config.HISTORY_INTERVAL_TICKS == 0:
            stats.history.append(HistorySample(
                time=round(self.state.time, 2),
                throughput=stats.totalThroughput,
                waitTime=round(stats.averageWaitTime, 2),
            ))
            del stats.history[:-config.HISTORY_LENGTH]

    # Getters for API
    def get_state(self) -> GridState:
        return self.snapshot_builder.build(self.state)

    def get_stats(self) -> SimulationStats:
        return self.state.stats.model_copy(deep=True)

    def get_insight_snapshot(self) -> InsightSnapshot:
        return self.snapshot_builder.build_insight(self.state)

    def list_intersections(self) -> List[IntersectionSummary]:
        summary = []
        for i_id in sorted(self.state.intersections.keys()):
            intersection = self.state.intersections[i_id]
            summary.append(IntersectionSummary(
                id=i_id,
                name=f"{intersection.roadNames.vertical} / {intersection.roadNames.horizontal}",
                status="manual" if intersection.manualOverride else "auto",
            ))
        return summary

    def get_intersection_details(self, intersection_id: str) -> Optional[SignalDetails]:
        intersection = self.state.intersections.get(intersection_id)
        if not intersection:
            return None
        neighbors = self.state.road_network.neighbors(intersection.id) if self.state.road_network else []
        return SignalDetails(
            intersectionId=intersection.id,
            type=intersection.type,
            blockedDirection=intersection.blockedDirection,
            signals=dict(intersection.signals),
            queueLengths=dict(intersection.queueLengths),
            currentPhase=current_phase(intersection),
            phaseRemainingMs=self._phase_remaining_ms(intersection),
            throughput=intersection.throughput,
            manualOverride=intersection.manualOverride,
            neighbors=neighbors,
            roadNames=intersection.roadNames,
        )

    def _phase_remaining_ms(self, intersection: Intersection) -> int:
        # Only a fixed-time phase has a known end
        if intersection.manualOverride or self.state.mode == ControlMode.MANUAL:
            return 0
        axis, colour, remaining = fixed_time_phase(self.clock())
        if intersection.signals != apply_blocked_direction(intersection, axis_signals(axis, colour)):
            return 0
        return int(remaining)

    def get_grid_overview(self) -> GridOverview:
        roads: List[RoadOverview] = []
        if self.state.road_network is None:
            return GridOverview(roads=roads)

        for u, v, data in self.state.road_network.roads():
            queue = self.state.intersections[v].queueLengths[Direction(data["approach"])]
            congestion = min(1.0, queue / 3.0)
            status = "optimal"
            if congestion >= 0.75: status = "congested"
            elif congestion >= 0.5: status = "moderate"
            roads.append(RoadOverview(
                fromId=u, toId=v, name=data["name"], axis=Axis(data["axis"]),
                congestion=round(congestion, 2), flow=status
            ))
        return GridOverview(roads=roads)

def current_phase(intersection: Intersection) -> str:
    def axis_colour(axis_directions):
        colours = [
            intersection.signals[d] for d in axis_directions
            if d != intersection.blockedDirection
        ]
        return colours[0] if colours else SignalState.RED

    vertical = axis_colour((Direction.NORTH, Direction.SOUTH))
    horizontal = axis_colour((Direction.EAST, Direction.WEST))
    if vertical == SignalState.GREEN: return "VERTICAL"
    if horizontal == SignalState.GREEN: return "HORIZONTAL"
    if vertical == SignalState.YELLOW: return "VERTICAL-YELLOW"
    if horizontal == SignalState.YELLOW: return "HORIZONTAL-YELLOW"
    return "ALL-RED"
