"""Heading geometry for the grid plane.

Screen coordinates: x grows to the east, y grows to the south. Traffic keeps
to the left, so every heading owns a fixed signed offset from the centreline
of the road it travels on.
"""
from typing import Dict, Tuple
from signal_grid.domain.models import Direction, Axis
from signal_grid.domain import config

OPPOSITE: Dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

AXIS_OF: Dict[Direction, Axis] = {
    Direction.NORTH: Axis.VERTICAL,
    Direction.SOUTH: Axis.VERTICAL,
    Direction.EAST: Axis.HORIZONTAL,
    Direction.WEST: Axis.HORIZONTAL,
}

AXIS_DIRECTIONS: Dict[Axis, Tuple[Direction, Direction]] = {
    Axis.VERTICAL: (Direction.NORTH, Direction.SOUTH),
    Axis.HORIZONTAL: (Direction.EAST, Direction.WEST),
}

# Unit step per heading
STEP: Dict[Direction, Tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}

LANE_OFFSETS: Dict[Direction, float] = {
    Direction.SOUTH: config.LANE_OFFSET,
    Direction.NORTH: -config.LANE_OFFSET,
    Direction.EAST: -config.LANE_OFFSET,
    Direction.WEST: config.LANE_OFFSET,
}


def forward_distance(direction: Direction, x: float, y: float, tx: float, ty: float) -> float:
    """Signed distance from (x, y) to (tx, ty) measured along the heading."""
    dx, dy = STEP[direction]
    return (tx - x) * dx + (ty - y) * dy


def lateral_distance(direction: Direction, x: float, y: float, tx: float, ty: float) -> float:
    if AXIS_OF[direction] == Axis.VERTICAL:
        return abs(tx - x)
    return abs(ty - y)


def lane_position(direction: Direction, cx: float, cy: float) -> Tuple[float, float]:
    """Point in the lane for `direction` on the roads crossing at (cx, cy)."""
    offset = LANE_OFFSETS[direction]
    if AXIS_OF[direction] == Axis.VERTICAL:
        return cx + offset, cy
    return cx, cy + offset


def advance(direction: Direction, x: float, y: float, distance: float) -> Tuple[float, float]:
    dx, dy = STEP[direction]
    return x + dx * distance, y + dy * distance
