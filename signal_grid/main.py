import asyncio
import logging
import time
from fastapi import FastAPI, HTTPException
from typing import List, Set
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from signal_grid.kernel.simulation_kernel import SimulationKernel
from signal_grid.kernel.commands import (
    SetModeCommand, SetManualSignalCommand, ReleaseManualCommand,
    CycleManualSignalCommand, SelectLocationCommand, SpawnVehicleCommand
)
from signal_grid.domain.models import (
    GridState, Intersection, ModeUpdate, ManualSignalRequest, LocationSelect,
    LocationConfig, SpawnRequest, SimulationStats, SignalDetails,
    IntersectionSummary, GridOverview, InsightStatus
)
from signal_grid.services.insights import InsightService
from signal_grid.logging_setup import setup_logging
from signal_grid.domain import config

logger = logging.getLogger(__name__)

# Initialize Kernel
kernel = SimulationKernel()
insight_service = InsightService()
_insight_tasks: Set[asyncio.Task] = set()

# Background task for simulation loop
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Start the simulation loop
    setup_logging()
    kernel.initialize(seed=config.SEED)
    loop_task = asyncio.create_task(run_simulation())
    yield
    # Shutdown
    loop_task.cancel()

app = FastAPI(lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

async def run_simulation():
    """Runs the simulation update loop on the fixed tick period"""
    dt = config.TICK_INTERVAL_MS / 1000.0

    while True:
        start_time = time.time()

        kernel.run_tick()

        # Sleep to maintain tick rate
        elapsed = time.time() - start_time
        sleep_time = max(0.0, dt - elapsed)
        await asyncio.sleep(sleep_time)

def _require_intersection(intersection_id: str) -> Intersection:
    intersection = kernel.state.intersections.get(intersection_id)
    if not intersection:
        raise HTTPException(status_code=404, detail="Intersection not found")
    return intersection

@app.get("/api/grid/state", response_model=GridState)
async def get_grid_state():
    """Returns the current state of the simulation grid"""
    return kernel.get_state()

@app.get("/api/stats", response_model=SimulationStats)
async def get_stats():
    return kernel.get_stats()

@app.get("/api/grid/overview", response_model=GridOverview)
async def get_grid_overview():
    """Returns per-road congestion for visualization"""
    return kernel.get_grid_overview()

@app.get("/api/intersections", response_model=List[IntersectionSummary])
async def get_intersections():
    """Returns a list of all intersections with their status"""
    return kernel.list_intersections()

@app.get("/api/signals/{intersection_id}", response_model=SignalDetails)
async def get_signal_state(intersection_id: str):
    """Returns the details of a specific intersection"""
    details = kernel.get_intersection_details(intersection_id)
    if not details:
        raise HTTPException(status_code=404, detail="Intersection not found")
    return details

@app.post("/api/mode")
async def set_mode(update: ModeUpdate):
    """Switches the signal control mode from the next tick onward"""
    kernel.queue_command(SetModeCommand(update.mode))
    return {"status": "Mode Updated (queued)", "mode": update.mode}

# Commands are queued for the next tick; the response carries the current
# (pre-update) intersection.
@app.post("/api/signals/{intersection_id}/manual", response_model=Intersection)
async def set_manual_signal(intersection_id: str, request: ManualSignalRequest):
    intersection = _require_intersection(intersection_id)
    kernel.queue_command(SetManualSignalCommand(intersection_id, request.axis))
    return intersection

@app.post("/api/signals/{intersection_id}/release", response_model=Intersection)
async def release_manual(intersection_id: str):
    intersection = _require_intersection(intersection_id)
    kernel.queue_command(ReleaseManualCommand(intersection_id))
    return intersection

@app.post("/api/signals/{intersection_id}/cycle", response_model=Intersection)
async def cycle_manual_signal(intersection_id: str):
    """Canvas click: auto -> vertical -> horizontal -> auto"""
    intersection = _require_intersection(intersection_id)
    kernel.queue_command(CycleManualSignalCommand(intersection_id))
    return intersection

@app.post("/api/simulation/run")
async def run_simulation_clock():
    kernel.run()
    return {"running": True}

@app.post("/api/simulation/pause")
async def pause_simulation_clock():
    kernel.pause()
    return {"running": False}

@app.get("/api/locations", response_model=List[LocationConfig])
async def get_locations():
    return [LocationConfig(**location) for location in config.LOCATIONS]

@app.post("/api/location")
async def select_location(selection: LocationSelect):
    """Regenerates the grid for a new location on the next tick"""
    if selection.name not in {location["name"] for location in config.LOCATIONS}:
        raise HTTPException(status_code=404, detail="Location not found")
    kernel.queue_command(SelectLocationCommand(selection.name))
    return {"status": "Location Selected (queued)", "location": selection.name}

@app.post("/api/vehicles/spawn")
async def spawn_vehicle(request: SpawnRequest):
    kernel.queue_command(SpawnVehicleCommand(request.type))
    return {"status": "Spawn queued", "type": request.type}

@app.post("/api/insights", status_code=202)
async def request_insights():
    """Starts an advisory analysis in the background; never blocks the tick loop"""
    snapshot = kernel.get_insight_snapshot()
    task = asyncio.create_task(insight_service.request_insight(snapshot))
    _insight_tasks.add(task)
    task.add_done_callback(_insight_tasks.discard)
    return {"status": "Insight requested", "location": snapshot.location.name}

@app.get("/api/insights", response_model=InsightStatus)
async def get_insights():
    latest = insight_service.latest
    return InsightStatus(available=latest is not None, pending=insight_service.pending, insight=latest)

@app.get("/")
def read_root():
    return {"status": "Signal Grid Backend Running (Deterministic Kernel)"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
