import random
from typing import Dict, Tuple
from signal_grid.domain.models import (
    Intersection, Direction, SignalState, JunctionType, RoadNames, Axis
)
from signal_grid.domain.graph import RoadNetwork
from signal_grid.controllers.implementations import apply_blocked_direction
from signal_grid.domain import config

DIRECTIONS = list(Direction)

def default_signals() -> Dict[Direction, SignalState]:
    return {
        Direction.NORTH: SignalState.RED,
        Direction.SOUTH: SignalState.RED,
        Direction.EAST: SignalState.GREEN,
        Direction.WEST: SignalState.GREEN,
    }

def grid_position(row: int, col: int, grid_size: int = config.GRID_SIZE) -> Tuple[float, float]:
    x = (config.WIDTH / (grid_size + 1)) * (col + 1)
    y = (config.HEIGHT / (grid_size + 1)) * (row + 1)
    return x, y

def build_grid(rng: random.Random, grid_size: int = config.GRID_SIZE) -> Tuple[Dict[str, Intersection], RoadNetwork]:
    intersections: Dict[str, Intersection] = {}
    network = RoadNetwork()

    for row in range(grid_size):
        for col in range(grid_size):
            intersection_id = f"NODE_{row}{col}"
            x, y = grid_position(row, col, grid_size)
            is_t = rng.random() < config.T_JUNCTION_PROBABILITY
            blocked = rng.choice(DIRECTIONS) if is_t else None

            intersections[intersection_id] = Intersection(
                id=intersection_id,
                x=x,
                y=y,
                type=JunctionType.T_JUNCTION if is_t else JunctionType.CROSS,
                blockedDirection=blocked,
                signals=default_signals(),
                roadNames=RoadNames(
                    horizontal=rng.choice(config.ROAD_NAMES_POOL),
                    vertical=rng.choice(config.ROAD_NAMES_POOL),
                ),
            )
            apply_blocked_direction(intersections[intersection_id], intersections[intersection_id].signals)
            network.add_intersection(intersection_id, (x, y))

    # Roads between neighbours; a blocked arm has no road attached to it
    for row in range(grid_size):
        for col in range(grid_size):
            here = intersections[f"NODE_{row}{col}"]
            if col + 1 < grid_size:
                east = intersections[f"NODE_{row}{col + 1}"]
                _link(network, here, east, Direction.EAST, Axis.HORIZONTAL, here.roadNames.horizontal)
            if row + 1 < grid_size:
                south = intersections[f"NODE_{row + 1}{col}"]
                _link(network, here, south, Direction.SOUTH, Axis.VERTICAL, here.roadNames.vertical)

    return intersections, network

def _link(network: RoadNetwork, a: Intersection, b: Intersection, arm: Direction, axis: Axis, name: str):
    back = {Direction.EAST: Direction.WEST, Direction.SOUTH: Direction.NORTH}[arm]
    if a.blockedDirection == arm or b.blockedDirection == back:
        return
    length = abs(b.x - a.x) + abs(b.y - a.y)
    network.add_road(a.id, b.id, length, axis.value, name, approach=back.value)
    network.add_road(b.id, a.id, length, axis.value, name, approach=arm.value)
