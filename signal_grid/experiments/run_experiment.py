import json
import logging
import time
from signal_grid.kernel.simulation_kernel import SimulationKernel
from signal_grid.kernel.commands import SetModeCommand
from signal_grid.domain.models import ControlMode

logger = logging.getLogger(__name__)

def run_headless_experiment(output_path: str, seed: int = 42, duration_ticks: int = 600,
                            mode: ControlMode = ControlMode.ADAPTIVE):
    # Simulated clock so fixed-time phases follow tick time, not the wall clock
    kernel = SimulationKernel()
    kernel.clock = lambda: kernel.state.time * 1000.0
    kernel.initialize(seed=seed)
    kernel.queue_command(SetModeCommand(mode))

    results = []

    start_time = time.time()
    for i in range(duration_ticks):
        kernel.run_tick()
        stats = kernel.state.stats
        results.append({
            "tick": i,
            "vehicle_count": stats.activeVehicles,
            "congestion": round(stats.congestionLevel, 4),
            "throughput": stats.totalThroughput,
        })

    end_time = time.time()
    logger.info("Experiment (%s, %d ticks) finished in %.4fs", mode.value, duration_ticks, end_time - start_time)

    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2)
    return results

if __name__ == "__main__":
    import sys
    from signal_grid.logging_setup import setup_logging
    setup_logging(log_file=None)
    if len(sys.argv) > 2:
        run_headless_experiment(sys.argv[1], duration_ticks=int(sys.argv[2]),
                                mode=ControlMode(sys.argv[3]) if len(sys.argv) > 3 else ControlMode.ADAPTIVE)
    elif len(sys.argv) > 1:
        run_headless_experiment(sys.argv[1])
    else:
        print("Usage: python -m signal_grid.experiments.run_experiment <output> [ticks] [mode]")
