from enum import Enum
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

class Direction(str, Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

class Axis(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"

class SignalState(str, Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"

class ControlMode(str, Enum):
    STATIC = "static"
    ADAPTIVE = "adaptive"
    MANUAL = "manual"

class JunctionType(str, Enum):
    CROSS = "cross"
    T_JUNCTION = "t-junction"

class VehicleType(str, Enum):
    CAR = "car"
    BIKE = "bike"
    AUTO = "auto"
    BUS = "bus"
    AMBULANCE = "ambulance"
    POLICE = "police"

class MovementState(str, Enum):
    MOVING = "moving"
    WAITING = "waiting"
    CRASHED = "crashed"

def zero_queues() -> Dict[Direction, int]:
    return {d: 0 for d in Direction}

class RoadNames(BaseModel):
    horizontal: str
    vertical: str

class Intersection(BaseModel):
    id: str  # e.g., "NODE_01"
    x: float
    y: float
    type: JunctionType = JunctionType.CROSS
    blockedDirection: Optional[Direction] = None
    signals: Dict[Direction, SignalState]
    queueLengths: Dict[Direction, int] = Field(default_factory=zero_queues)
    throughput: int = 0
    manualOverride: bool = False
    roadNames: RoadNames

class Vehicle(BaseModel):
    id: str
    type: VehicleType
    plateNumber: str
    x: float
    y: float
    direction: Direction # heading of travel
    speed: float = 0.0
    baseSpeed: float # free-flow cruising speed
    laneOffset: float
    movementState: MovementState = MovementState.MOVING
    lastIntersectionId: Optional[str] = None
    color: str = "#f8fafc"
    waitTime: float = 0.0 # seconds spent waiting

class LocationConfig(BaseModel):
    name: str
    lat: float
    lng: float
    description: str

class HistorySample(BaseModel):
    time: float
    throughput: int
    waitTime: float

class SimulationStats(BaseModel):
    averageWaitTime: float = 0.0
    totalThroughput: int = 0
    activeVehicles: int = 0
    congestionLevel: float = 0.0
    history: List[HistorySample] = []

# API/Response Models

class GridState(BaseModel):
    tick: int
    mode: ControlMode
    running: bool
    intersections: List[Intersection]
    vehicles: List[Vehicle]

class ModeUpdate(BaseModel):
    mode: ControlMode

class ManualSignalRequest(BaseModel):
    axis: Axis

class LocationSelect(BaseModel):
    name: str

class SpawnRequest(BaseModel):
    type: Optional[VehicleType] = None

class SignalDetails(BaseModel):
    intersectionId: str
    type: JunctionType
    blockedDirection: Optional[Direction] = None
    signals: Dict[Direction, SignalState]
    queueLengths: Dict[Direction, int]
    currentPhase: str
    phaseRemainingMs: int
    throughput: int
    manualOverride: bool
    neighbors: List[str]
    roadNames: RoadNames

class IntersectionSummary(BaseModel):
    id: str
    name: str
    status: str

class RoadOverview(BaseModel):
    fromId: str
    toId: str
    name: str
    axis: Axis
    congestion: float
    flow: str # "optimal", "moderate", "congested"

class GridOverview(BaseModel):
    roads: List[RoadOverview]

class InsightSnapshot(BaseModel):
    activeVehicleCount: int
    congestionLevel: float
    throughput: int
    intersections: List[Intersection]
    location: LocationConfig

class InsightResult(BaseModel):
    text: str
    groundingChunks: List[Dict[str, Any]] = []

class InsightStatus(BaseModel):
    available: bool
    pending: bool
    insight: Optional[InsightResult] = None
