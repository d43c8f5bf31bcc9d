import pytest

from robosim.core.drone_failure_injector import (
    detect_drone_frame_events,
    drone_failure_weights,
    generate_drone_simulation_events,
    should_drone_simulation_fail,
)
from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.event_type import DroneEventType
from robosim.enums.severity import Severity
from robosim.models.physics import DronePhysicsConfig
from conftest import PinnedNoise


@pytest.mark.parametrize(
    "quality, severity", [(60, Severity.WARNING), (40, Severity.ERROR)]
)
def test_gps_degradation(make_drone_frame, quality, severity):
    events = detect_drone_frame_events(make_drone_frame(gps_quality=quality))

    assert [e.type for e in events] == [DroneEventType.GPS_LOSS]
    assert events[0].severity == severity


def test_depleted_battery_fails_flight(make_drone_frame):
    events = detect_drone_frame_events(make_drone_frame(remaining=5.0))

    assert events[0].type == DroneEventType.LOW_BATTERY
    assert events[0].severity == Severity.CRITICAL
    assert should_drone_simulation_fail(events)


def test_low_battery_warning(make_drone_frame):
    events = detect_drone_frame_events(make_drone_frame(remaining=15.0))

    assert events[0].severity == Severity.WARNING
    assert not should_drone_simulation_fail(events)


def test_rotor_variance(make_drone_frame):
    events = detect_drone_frame_events(
        make_drone_frame(rotor_speeds=[4500, 4500, 4500, 6000])
    )

    assert len(events) == 1
    assert events[0].type == DroneEventType.MOTOR_FAILURE
    assert events[0].severity == Severity.ERROR
    assert events[0].data["rotor"] == 3
    assert events[0].message == "Rotor 4 showing 1125 RPM variance"


def test_weak_signal_and_attitude(make_drone_frame):
    events = detect_drone_frame_events(make_drone_frame(signal_strength=-80, roll=20.0))

    assert [e.type for e in events] == [
        DroneEventType.SIGNAL_LOST,
        DroneEventType.WIND_WARNING,
    ]


def test_nominal_flight_has_no_events(make_drone_frame):
    frames = [make_drone_frame(timestamp=i * 20) for i in range(30)]

    events = generate_drone_simulation_events(frames, DronePhysicsConfig(), PinnedNoise(0.99))

    assert events == []


def test_injection_stops_after_three_errors(make_drone_frame):
    frames = [make_drone_frame(timestamp=i * 20) for i in range(30)]

    events = generate_drone_simulation_events(frames, DronePhysicsConfig(), PinnedNoise(0.0))

    assert len(events) == 3
    assert all(e.type == DroneEventType.MOTOR_FAILURE for e in events)
    assert events[0].data == {"affectedComponents": ["rotor_fr"]}


def test_weights_scale_with_wind_and_progress():
    physics = DronePhysicsConfig(
        wind_speed=10.0, airspace_condition=AirspaceCondition.LIGHT_WIND
    )

    weights = drone_failure_weights(physics, 0.5)

    assert weights[DroneEventType.WIND_WARNING] == pytest.approx(0.5 * 2.0)
    assert weights[DroneEventType.LOW_BATTERY] == pytest.approx(1.2 * 0.8)
    assert weights[DroneEventType.GPS_LOSS] == pytest.approx(0.8 * 0.85)
    assert weights[DroneEventType.FLYAWAY] == pytest.approx(0.5 * 0.1)
