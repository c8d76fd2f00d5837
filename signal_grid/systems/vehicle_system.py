import random
from typing import List, Optional, Sequence, Tuple
from signal_grid.domain.models import (
    Vehicle, Intersection, Direction, SignalState, MovementState
)
from signal_grid.domain.directions import (
    OPPOSITE, LANE_OFFSETS, forward_distance, lateral_distance, lane_position, advance
)
from signal_grid.domain import config

TICK_SECONDS = config.TICK_INTERVAL_MS / 1000.0

class VehicleSystem:
    """Per-tick kinematics for every active vehicle.

    All vehicles are stepped against the same pre-tick snapshot and the new
    states are returned as a fresh list; nothing in the snapshot is mutated.
    """

    def __init__(self, rng: random.Random):
        self.rng = rng

    def update(self, vehicles: Sequence[Vehicle], intersections: Sequence[Intersection]) -> Tuple[List[Vehicle], List[str]]:
        """Returns the next vehicle states and the ids of intersections passed this tick."""
        next_vehicles: List[Vehicle] = []
        passages: List[str] = []
        for v in vehicles:
            if v.movementState == MovementState.CRASHED:
                next_vehicles.append(v)
                continue
            updated, passed = self.step_vehicle(v, vehicles, intersections)
            next_vehicles.append(updated)
            if passed:
                passages.append(passed)
        return next_vehicles, passages

    def step_vehicle(self, v: Vehicle, snapshot: Sequence[Vehicle],
                     intersections: Sequence[Intersection]) -> Tuple[Vehicle, Optional[str]]:
        x, y, direction = v.x, v.y, v.direction
        last_intersection_id = v.lastIntersectionId
        target_speed = v.baseSpeed
        state = MovementState.MOVING
        passed = None

        # A. Signal / stop line
        upcoming = find_nearest_intersection(direction, x, y, intersections)
        if upcoming:
            intersection, distance = upcoming
            target_speed, state = resolve_stop_line(v.baseSpeed, intersection.signals[direction], distance)

            # B. Turn decision, once per intersection
            if distance < config.TURN_THRESHOLD and last_intersection_id != intersection.id:
                direction, x, y = self.decide_turn(direction, x, y, intersection)
                last_intersection_id = intersection.id
                passed = intersection.id

        # C. Lead vehicle
        leader = find_leader(v.id, direction, x, y, LANE_OFFSETS[direction], snapshot)
        if leader is not None:
            target_speed = follow_target(target_speed, leader.speed)

        # D. Integrate
        speed = integrate_speed(v.speed, target_speed, v.baseSpeed)
        if speed > config.MOVE_EPSILON:
            x, y = advance(direction, x, y, speed)

        wait_time = v.waitTime + TICK_SECONDS if state == MovementState.WAITING else v.waitTime
        return v.model_copy(update={
            "x": x,
            "y": y,
            "direction": direction,
            "speed": speed,
            "laneOffset": LANE_OFFSETS[direction],
            "movementState": state,
            "lastIntersectionId": last_intersection_id,
            "waitTime": wait_time,
        }), passed

    def decide_turn(self, direction: Direction, x: float, y: float,
                    intersection: Intersection) -> Tuple[Direction, float, float]:
        exits = [
            d for d in Direction
            if d != OPPOSITE[direction] and d != intersection.blockedDirection
        ]
        if not exits:
            return direction, x, y

        if direction in exits and self.rng.random() < config.STRAIGHT_PROBABILITY:
            next_direction = direction
        else:
            next_direction = self.rng.choice(exits)

        if next_direction == direction:
            return direction, x, y
        lane_x, lane_y = lane_position(next_direction, intersection.x, intersection.y)
        return next_direction, lane_x, lane_y

def find_nearest_intersection(direction: Direction, x: float, y: float,
                              intersections: Sequence[Intersection]) -> Optional[Tuple[Intersection, float]]:
    """Closest intersection strictly ahead on the current road.

    Junctions whose blocked arm matches the heading are transparent.
    """
    best: Optional[Tuple[Intersection, float]] = None
    for intersection in intersections:
        if intersection.blockedDirection == direction:
            continue
        if lateral_distance(direction, x, y, intersection.x, intersection.y) >= config.LATERAL_TOLERANCE:
            continue
        distance = forward_distance(direction, x, y, intersection.x, intersection.y)
        if distance <= 0:
            continue
        if best is None or distance < best[1]:
            best = (intersection, distance)
    return best

def resolve_stop_line(base_speed: float, signal: SignalState, distance: float) -> Tuple[float, MovementState]:
    """Target speed and movement state for a vehicle `distance` from the junction centre."""
    if signal == SignalState.GREEN:
        return base_speed, MovementState.MOVING
    if distance < config.STOP_LINE_DISTANCE:
        # Already over the line, clear the junction
        return base_speed, MovementState.MOVING

    gap = distance - config.STOP_LINE_DISTANCE
    if gap < config.HARD_STOP_GAP:
        return 0.0, MovementState.WAITING
    if gap < config.BRAKE_ZONE:
        return min(base_speed, base_speed * gap / config.BRAKE_ZONE), MovementState.WAITING
    return base_speed * config.CAUTION_FACTOR, MovementState.MOVING

def find_leader(vehicle_id: str, direction: Direction, x: float, y: float, lane_offset: float,
                snapshot: Sequence[Vehicle]) -> Optional[Vehicle]:
    leader: Optional[Vehicle] = None
    leader_gap = config.SAFE_GAP
    for other in snapshot:
        if other.id == vehicle_id or other.direction != direction:
            continue
        if abs(other.laneOffset - lane_offset) > config.LANE_TOLERANCE:
            continue
        # Same lane offset on a parallel road is a different lane
        if lateral_distance(direction, x, y, other.x, other.y) > config.LANE_TOLERANCE:
            continue
        gap = forward_distance(direction, x, y, other.x, other.y)
        if 0 < gap < leader_gap:
            leader, leader_gap = other, gap
    return leader

def follow_target(target_speed: float, leader_speed: float) -> float:
    target_speed = min(target_speed, leader_speed * config.FOLLOW_FACTOR)
    if target_speed < config.CRAWL_SPEED:
        return 0.0
    return target_speed

def integrate_speed(speed: float, target_speed: float, base_speed: float) -> float:
    target_speed = max(0.0, min(target_speed, base_speed))
    if speed < target_speed:
        speed = min(speed + config.ACCELERATION, target_speed)
    elif speed > target_speed:
        speed = max(speed - config.DECELERATION, target_speed)
    return max(0.0, min(speed, base_speed))
