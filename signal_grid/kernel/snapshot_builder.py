from signal_grid.domain.models import GridState, InsightSnapshot
from signal_grid.domain.state import SimulationState

class SnapshotBuilder:
    """Read-only views of the kernel state for the renderer and the advisory service."""

    def build(self, state: SimulationState) -> GridState:
        return GridState(
            tick=state.tick_id,
            mode=state.mode,
            running=state.running,
            intersections=[i.model_copy(deep=True) for i in state.intersections.values()],
            vehicles=[v.model_copy(deep=True) for v in state.vehicles],
        )

    def build_insight(self, state: SimulationState) -> InsightSnapshot:
        return InsightSnapshot(
            activeVehicleCount=state.stats.activeVehicles,
            congestionLevel=state.stats.congestionLevel,
            throughput=state.stats.totalThroughput,
            intersections=[i.model_copy(deep=True) for i in state.intersections.values()],
            location=state.location.model_copy(),
        )
