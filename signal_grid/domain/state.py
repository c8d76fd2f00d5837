from typing import List, Dict, Optional
from pydantic import BaseModel, ConfigDict
from signal_grid.domain.models import (
    Intersection, Vehicle, ControlMode, LocationConfig, SimulationStats
)
from signal_grid.domain.graph import RoadNetwork
from signal_grid.domain import config

class SimulationState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    tick_id: int = 0
    time: float = 0.0
    intersections: Dict[str, Intersection] = {}
    vehicles: List[Vehicle] = []
    mode: ControlMode = ControlMode.ADAPTIVE
    running: bool = True
    location: LocationConfig = LocationConfig(**config.LOCATIONS[0])
    stats: SimulationStats = SimulationStats()

    # Graph based structure
    road_network: Optional[RoadNetwork] = None
