import random
from typing import Optional
from signal_grid.domain.models import Vehicle, VehicleType, Direction, Axis
from signal_grid.domain.directions import OPPOSITE, LANE_OFFSETS, AXIS_OF
from signal_grid.systems.grid_builder import grid_position
from signal_grid.domain import config

class VehicleSpawner:
    """Creates vehicles just outside one edge of the plane, heading inward."""

    def __init__(self, rng: random.Random, grid_size: int = config.GRID_SIZE):
        self.rng = rng
        self.grid_size = grid_size
        self._sequence = 0

    def spawn(self, tick_id: int, vehicle_type: Optional[VehicleType] = None,
              side: Optional[Direction] = None) -> Vehicle:
        side = side or self.rng.choice(list(Direction))
        road_idx = self.rng.randrange(self.grid_size)
        direction = OPPOSITE[side]
        offset = LANE_OFFSETS[direction]

        road_x, road_y = grid_position(road_idx, road_idx, self.grid_size)
        if AXIS_OF[direction] == Axis.VERTICAL:
            x = road_x + offset
            y = -config.SPAWN_MARGIN if side == Direction.NORTH else config.HEIGHT + config.SPAWN_MARGIN
        else:
            y = road_y + offset
            x = -config.SPAWN_MARGIN if side == Direction.WEST else config.WIDTH + config.SPAWN_MARGIN

        vehicle_type = vehicle_type or VehicleType(self.rng.choice(config.SPAWN_TYPE_POOL))
        vehicle_config = config.VEHICLE_CONFIGS[vehicle_type.value]
        low, high = vehicle_config["speed_range"]

        self._sequence += 1
        return Vehicle(
            id=f"v-{tick_id}-{self._sequence}",
            type=vehicle_type,
            plateNumber=self._plate_number(),
            x=x,
            y=y,
            direction=direction,
            speed=0.0,
            baseSpeed=low + self.rng.random() * (high - low),
            laneOffset=offset,
            color=vehicle_config["color"],
        )

    def _plate_number(self) -> str:
        district = self.rng.randint(10, 98)
        series = chr(65 + self.rng.randrange(25))
        number = self.rng.randint(1000, 9998)
        return f"TN-{district}{series}-{number}"
