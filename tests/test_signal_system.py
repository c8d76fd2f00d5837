import unittest
from signal_grid.controllers.implementations import (
    AdaptiveController, StaticController, fixed_time_phase, axis_signals
)
from signal_grid.domain.models import (
    Intersection, Vehicle, Direction, SignalState, ControlMode, RoadNames,
    JunctionType, VehicleType, Axis
)
from signal_grid.systems.grid_builder import default_signals
from signal_grid.systems.signal_system import SignalSystem, count_queues

G, Y, R = SignalState.GREEN, SignalState.YELLOW, SignalState.RED
N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST

def make_intersection(blocked=None, x=400.0, y=300.0, **kwargs):
    return Intersection(
        id="NODE_11", x=x, y=y,
        type=JunctionType.T_JUNCTION if blocked else JunctionType.CROSS,
        blockedDirection=blocked,
        signals=default_signals(),
        roadNames=RoadNames(horizontal="OMR", vertical="ECR"),
        **kwargs
    )

def make_vehicle(vid, direction, x, y, speed=0.0):
    return Vehicle(
        id=vid, type=VehicleType.CAR, plateNumber="TN-10A-1000",
        x=x, y=y, direction=direction, speed=speed, baseSpeed=4.0, laneOffset=32.0
    )

def vertical_queue_vehicles():
    # 3 southbound above the junction, 2 northbound below it, all inside the detection band
    return [
        make_vehicle("s1", S, 432.0, 100.0),
        make_vehicle("s2", S, 432.0, 120.0),
        make_vehicle("s3", S, 432.0, 140.0),
        make_vehicle("n1", N, 368.0, 450.0),
        make_vehicle("n2", N, 368.0, 460.0),
    ]

class TestQueueCounting(unittest.TestCase):
    def test_counts_each_approach(self):
        queues = count_queues(make_intersection(), vertical_queue_vehicles())
        self.assertEqual(queues, {N: 3, S: 2, E: 0, W: 0})

    def test_ignores_vehicles_past_stop_line_or_outside_band(self):
        intersection = make_intersection()
        vehicles = [
            make_vehicle("past", S, 432.0, 250.0),    # 50 from centre, beyond stop line
            make_vehicle("far", S, 432.0, 0.0),       # 300 from centre, before the band
            make_vehicle("away", N, 432.0, 100.0),    # leaving the junction
            make_vehicle("other_road", S, 632.0, 100.0),
            make_vehicle("eastbound", E, 200.0, 268.0),
        ]
        queues = count_queues(intersection, vehicles)
        self.assertEqual(queues, {N: 0, S: 0, E: 0, W: 1})

class TestFixedTimeRotation(unittest.TestCase):
    def test_phase_boundaries(self):
        controller = StaticController()
        intersection = make_intersection()
        queues = {d: 0 for d in Direction}
        expected = [
            (0.0, {N: R, S: R, E: G, W: G}),
            (0.44, {N: R, S: R, E: G, W: G}),
            (0.47, {N: R, S: R, E: Y, W: Y}),
            (0.5, {N: G, S: G, E: R, W: R}),
            (0.9, {N: G, S: G, E: R, W: R}),
            (0.96, {N: Y, S: Y, E: R, W: R}),
        ]
        for fraction, signals in expected:
            self.assertEqual(controller.compute_signals(intersection, queues, fraction * 30000), signals, fraction)

    def test_static_mode_at_047_is_horizontal_yellow(self):
        intersection = make_intersection()
        SignalSystem().update([intersection], [], ControlMode.STATIC, 0.47 * 30000)
        self.assertEqual(intersection.signals, {N: R, S: R, E: Y, W: Y})

    def test_static_ignores_queues(self):
        intersection = make_intersection()
        SignalSystem().update([intersection], vertical_queue_vehicles(), ControlMode.STATIC, 1000)
        self.assertEqual(intersection.signals, {N: R, S: R, E: G, W: G})
        self.assertEqual(intersection.queueLengths[N], 3)

    def test_phase_is_synchronised_on_wall_clock(self):
        self.assertEqual(fixed_time_phase(1000)[:2], fixed_time_phase(31000)[:2])
        axis, colour, remaining = fixed_time_phase(0.47 * 30000)
        self.assertEqual((axis, colour), (Axis.HORIZONTAL, Y))
        self.assertAlmostEqual(remaining, 900.0)

class TestAdaptiveController(unittest.TestCase):
    def test_blocked_west_vertical_queue_preempts(self):
        intersection = make_intersection(blocked=W)
        SignalSystem().update([intersection], vertical_queue_vehicles(), ControlMode.ADAPTIVE, 0)
        self.assertEqual(intersection.signals, {N: G, S: G, E: R, W: R})
        self.assertEqual(intersection.queueLengths, {N: 3, S: 2, E: 0, W: 0})

    def test_preemption_has_no_yellow(self):
        queues = {N: 0, S: 0, E: 4, W: 1}
        # Fixed-time would show vertical yellow here
        signals = AdaptiveController().compute_signals(make_intersection(), queues, 0.97 * 30000)
        self.assertEqual(signals, {N: R, S: R, E: G, W: G})

    def test_margin_not_exceeded_falls_back_to_rotation(self):
        queues = {N: 2, S: 1, E: 0, W: 0}
        signals = AdaptiveController().compute_signals(make_intersection(), queues, 0)
        self.assertEqual(signals, {N: R, S: R, E: G, W: G})

    def test_flips_between_policies_without_hysteresis(self):
        intersection = make_intersection()
        system = SignalSystem()
        system.update([intersection], vertical_queue_vehicles(), ControlMode.ADAPTIVE, 0)
        self.assertEqual(intersection.signals[N], G)
        system.update([intersection], vertical_queue_vehicles()[:3], ControlMode.ADAPTIVE, 0)
        self.assertEqual(intersection.signals[N], R)

class TestSignalSystem(unittest.TestCase):
    def test_manual_override_is_skipped(self):
        intersection = make_intersection(manualOverride=True)
        intersection.signals = axis_signals(Axis.VERTICAL)
        SignalSystem().update([intersection], vertical_queue_vehicles(), ControlMode.STATIC, 0)
        self.assertEqual(intersection.signals, {N: G, S: G, E: R, W: R})
        self.assertEqual(intersection.queueLengths, {N: 0, S: 0, E: 0, W: 0})

    def test_manual_mode_freezes_signals_and_queues(self):
        intersection = make_intersection()
        intersection.queueLengths = {N: 1, S: 0, E: 0, W: 0}
        SignalSystem().update([intersection], vertical_queue_vehicles(), ControlMode.MANUAL, 0.6 * 30000)
        self.assertEqual(intersection.signals, {N: R, S: R, E: G, W: G})
        self.assertEqual(intersection.queueLengths, {N: 1, S: 0, E: 0, W: 0})

        fresh = make_intersection()
        SignalSystem().update([fresh], [make_vehicle("s1", S, 432.0, 100.0)], ControlMode.MANUAL, 0)
        self.assertEqual(fresh.queueLengths[N], 0)

    def test_blocked_direction_always_red_and_axes_paired(self):
        system = SignalSystem()
        for blocked in Direction:
            for mode in (ControlMode.STATIC, ControlMode.ADAPTIVE):
                for step in range(0, 30000, 500):
                    intersection = make_intersection(blocked=blocked)
                    system.update([intersection], vertical_queue_vehicles(), mode, step)
                    signals = intersection.signals
                    self.assertEqual(signals[blocked], R)

                    vertical = {signals[d] for d in (N, S) if d != blocked}
                    horizontal = {signals[d] for d in (E, W) if d != blocked}
                    self.assertEqual(len(vertical), 1)
                    self.assertEqual(len(horizontal), 1)
                    # exactly one axis is not red
                    self.assertEqual([vertical == {R}, horizontal == {R}].count(True), 1)

if __name__ == '__main__':
    unittest.main()
