import pytest

from robosim.models.metrics import (
    DroneFlightPath,
    DroneSimulationMetrics,
    SimulationMetrics,
)
from robosim.telemetry.analyzer import (
    analyze_drone_flight_path,
    analyze_drone_telemetry,
    analyze_telemetry,
    frame_interval_s,
    generate_drone_telemetry_summary,
    generate_telemetry_summary,
)


class TestGroundMetrics:
    def test_empty_input_gives_zeros(self):
        assert analyze_telemetry([]) == SimulationMetrics()

    def test_orientation_penalty(self, make_ground_frame):
        frames = [
            make_ground_frame(timestamp=0, pitch=15.0, roll=-10.0),
            make_ground_frame(timestamp=20, pitch=5.0, roll=2.0),
        ]

        metrics = analyze_telemetry(frames)

        assert metrics.stability_score == 75
        assert metrics.max_pitch_deviation == 15.0
        assert metrics.max_roll_deviation == 10.0
        assert metrics.slip_events == 0

    def test_energy_uses_fixed_sample_step(self, make_ground_frame):
        frames = [
            make_ground_frame(timestamp=0, voltage=24.0, current=3.0),
            make_ground_frame(timestamp=20, voltage=24.0, current=3.0),
        ]

        metrics = analyze_telemetry(frames)

        assert metrics.total_energy_consumed == pytest.approx(1.44)
        assert metrics.efficiency_score == 99
        assert metrics.avg_joint_temperature == 40.0

    def test_slip_penalty(self, make_ground_frame):
        frames = [
            make_ground_frame(timestamp=0, slipping_leg="leg_3"),
            make_ground_frame(timestamp=20),
        ]

        metrics = analyze_telemetry(frames)

        assert metrics.slip_events == 1
        assert metrics.stability_score == 75

    def test_scores_are_clamped(self, make_ground_frame):
        frames = [
            make_ground_frame(timestamp=0, pitch=30.0, roll=20.0, slipping_leg="leg_1", current=500.0)
        ]

        metrics = analyze_telemetry(frames)

        assert metrics.stability_score == 0
        assert metrics.efficiency_score == 0
        assert 0.0 <= metrics.gait_symmetry <= 1.0

    def test_energy_ignores_sample_rate(self, make_ground_frame):
        fast = [make_ground_frame(timestamp=0), make_ground_frame(timestamp=10)]
        slow = [make_ground_frame(timestamp=0), make_ground_frame(timestamp=40)]

        assert (
            analyze_telemetry(fast).total_energy_consumed
            == analyze_telemetry(slow).total_energy_consumed
        )


class TestDroneMetrics:
    def test_empty_input_gives_zeros(self):
        assert analyze_drone_telemetry([]) == DroneSimulationMetrics()
        assert analyze_drone_flight_path([]) == DroneFlightPath()

    def test_hover_metrics(self, make_drone_frame):
        frames = [
            make_drone_frame(timestamp=0, alt=10.0, roll=0.0, remaining=90.0),
            make_drone_frame(timestamp=20, alt=10.3, roll=5.0, remaining=89.0),
        ]

        metrics = analyze_drone_telemetry(frames)

        assert metrics.hover_accuracy == 100
        assert metrics.altitude_stability == 97
        assert metrics.max_altitude_deviation == 0.3
        assert metrics.wind_compensation_events == 1
        assert metrics.avg_rotor_rpm == 4500
        assert metrics.gps_quality_avg == 95
        assert 0 <= metrics.battery_efficiency <= 100

    def test_half_percent_rounds_up(self, make_drone_frame):
        frames = [make_drone_frame(timestamp=0, alt=10.0)] + [
            make_drone_frame(timestamp=i * 20, alt=12.0) for i in range(1, 40)
        ]

        metrics = analyze_drone_telemetry(frames)

        # 1 of 40 frames in tolerance is exactly 2.5%
        assert metrics.hover_accuracy == 3
        assert metrics.altitude_stability == 80

    def test_average_gps_quality_rounds_half_up(self, make_drone_frame):
        frames = [
            make_drone_frame(timestamp=0, gps_quality=94),
            make_drone_frame(timestamp=20, gps_quality=95),
        ]

        assert analyze_drone_telemetry(frames).gps_quality_avg == 95

    def test_single_frame_interval_default(self, make_drone_frame):
        assert frame_interval_s([make_drone_frame()]) == 0.02

    def test_flight_path(self, make_drone_frame):
        frames = [
            make_drone_frame(timestamp=0, lat=37.7749),
            make_drone_frame(timestamp=20, lat=37.7759, vx=3.0),
        ]

        path = analyze_drone_flight_path(frames)

        assert path.total_distance == pytest.approx(111.0, abs=0.1)
        assert path.waypoints_completed == 4
        assert path.max_speed == 3.0
        assert path.avg_speed == 3.0

    def test_single_frame_flight_path(self, make_drone_frame):
        assert analyze_drone_flight_path([make_drone_frame()]) == DroneFlightPath()


class TestSummaries:
    def test_ground_summary_mentions_first_slip(self, make_ground_frame):
        frames = [
            make_ground_frame(timestamp=0),
            make_ground_frame(timestamp=1500, slipping_leg="leg_2"),
        ]
        metrics = analyze_telemetry(frames)

        summary = generate_telemetry_summary(frames, metrics)

        assert summary.startswith("Gait cycle completed with minor issues.")
        assert "Minor slip detected at t=1.5s on leg 2 tarsus." in summary
        assert f"Stability score: {metrics.stability_score}%" in summary

    def test_ground_summary_warns_on_heat(self, make_ground_frame):
        frames = [make_ground_frame(temperature=52.0)]

        summary = generate_telemetry_summary(frames, analyze_telemetry(frames))

        assert "Gait cycle completed successfully." in summary
        assert "Elevated joint temperatures (avg 52.0°C)" in summary

    def test_drone_summary_empty(self):
        summary = generate_drone_telemetry_summary(
            [], DroneSimulationMetrics(), DroneFlightPath()
        )

        assert summary == "No flight telemetry recorded."

    def test_drone_summary_low_battery(self, make_drone_frame):
        frames = [
            make_drone_frame(timestamp=0, remaining=30.0),
            make_drone_frame(timestamp=20, remaining=12.0),
        ]
        metrics = analyze_drone_telemetry(frames)

        summary = generate_drone_telemetry_summary(
            frames, metrics, analyze_drone_flight_path(frames)
        )

        assert summary.startswith("Flight completed.")
        assert "Warning: Low battery (12%)." in summary
