import pytest

from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.flight_phase import FlightPhase
from robosim.models.physics import DronePhysicsConfig
from robosim.telemetry.drone_generator import flight_phase, generate_drone_telemetry
from robosim.utils.noise import NoiseSource
from conftest import PinnedNoise


@pytest.mark.parametrize(
    "t, phase",
    [
        (0.0, FlightPhase.TAKEOFF),
        (1.49, FlightPhase.TAKEOFF),
        (1.5, FlightPhase.HOVER),
        (3.99, FlightPhase.HOVER),
        (4.0, FlightPhase.WAYPOINT),
        (7.99, FlightPhase.WAYPOINT),
        (8.0, FlightPhase.LAND),
    ],
)
def test_flight_phase_boundaries(t, phase):
    assert flight_phase(t, 10.0) == phase


def test_frame_count():
    frames = generate_drone_telemetry(2.0, DronePhysicsConfig(), 50, NoiseSource(seed=1))

    assert len(frames) == 100
    assert frames[1].timestamp == 20.0


def test_empty_for_zero_duration():
    assert generate_drone_telemetry(0, DronePhysicsConfig()) == []


def test_physical_bounds():
    physics = DronePhysicsConfig(
        wind_speed=8.0, airspace_condition=AirspaceCondition.TURBULENT
    )
    frames = generate_drone_telemetry(10.0, physics, 50, NoiseSource(seed=2))

    for frame in frames:
        assert len(frame.rotor_speeds) == 4
        assert all(0 <= rpm <= 8000 for rpm in frame.rotor_speeds)
        assert 14.0 <= frame.battery.voltage <= 16.8
        assert 0 <= frame.gps_quality <= 100
        assert frame.position.alt >= 0
        assert -30 <= frame.attitude.pitch <= 30
        assert -30 <= frame.attitude.roll <= 30

    airborne = [f for f in frames if f.timestamp < 4000]
    assert all(rpm >= 1000 for f in airborne for rpm in f.rotor_speeds)

    remaining = [f.battery.remaining for f in frames]
    assert remaining == sorted(remaining, reverse=True)


def test_turbulence_degrades_gps():
    calm = generate_drone_telemetry(
        10.0, DronePhysicsConfig(airspace_condition=AirspaceCondition.CALM), 50, PinnedNoise()
    )
    turbulent = generate_drone_telemetry(
        10.0,
        DronePhysicsConfig(airspace_condition=AirspaceCondition.TURBULENT),
        50,
        PinnedNoise(),
    )

    # end of the hover phase, well above the ground-effect band
    assert calm[199].gps_quality == 95
    assert turbulent[199].gps_quality == 90


def test_hover_reaches_target_altitude():
    frames = generate_drone_telemetry(10.0, DronePhysicsConfig(), 50, PinnedNoise())

    assert frames[199].position.alt == pytest.approx(10.0, abs=1.0)


def test_seed_reproduces_stream():
    physics = DronePhysicsConfig()
    a = generate_drone_telemetry(2.0, physics, 50, NoiseSource(seed=9))
    b = generate_drone_telemetry(2.0, physics, 50, NoiseSource(seed=9))

    assert a == b
