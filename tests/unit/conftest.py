from typing import List, Optional
from unittest.mock import patch

import pytest

from robosim.config import Config
from robosim.core.session_store import InMemoryStateStore
from robosim.models.telemetry_data import (
    Attitude,
    DroneBattery,
    DroneTelemetryFrame,
    GpsPosition,
    ImuReading,
    LegContact,
    PowerReading,
    TelemetryFrame,
    Velocity,
)
from robosim.models.physics import HEXAPOD_JOINTS, HEXAPOD_LEGS
from robosim.service import SimulationService
from robosim.utils.delay import ComputeDelay
from robosim.utils.noise import NoiseSource


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class PinnedNoise(NoiseSource):
    """Deterministic draws: fixed uniform value, zero-mean gaussians return the mean."""

    def __init__(self, uniform_value: float = 0.5):
        super().__init__(seed=0)
        self.uniform_value = uniform_value

    def uniform(self) -> float:
        return self.uniform_value

    def gaussian(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        return mean


def ground_frame(
    timestamp: float = 0.0,
    pitch: float = 0.0,
    roll: float = 0.0,
    temperature: float = 40.0,
    slipping_leg: Optional[str] = None,
    voltage: float = 24.0,
    current: float = 3.0,
) -> TelemetryFrame:
    contacts: List[LegContact] = [
        LegContact(
            leg_id=leg_id,
            in_contact=int(leg_id[-1]) % 2 == 1,
            force=8.0 if int(leg_id[-1]) % 2 == 1 else 0.0,
            slip_detected=leg_id == slipping_leg,
        )
        for leg_id in HEXAPOD_LEGS
    ]
    zeros = {joint_id: 0.0 for joint_id in HEXAPOD_JOINTS}
    return TelemetryFrame(
        timestamp=timestamp,
        joint_positions=zeros,
        joint_velocities=zeros,
        joint_torques=zeros,
        imu=ImuReading(pitch=pitch, roll=roll, yaw=0, accel_x=0, accel_y=0, accel_z=9.81),
        power=PowerReading(voltage=voltage, current=current, temperature=temperature),
        contacts=contacts,
    )


def drone_frame(
    timestamp: float = 0.0,
    alt: float = 10.0,
    lat: float = 37.7749,
    lon: float = -122.4194,
    roll: float = 0.0,
    pitch: float = 0.0,
    rotor_speeds: Optional[List[int]] = None,
    remaining: float = 90.0,
    gps_quality: int = 95,
    signal_strength: int = -45,
    vx: float = 0.0,
) -> DroneTelemetryFrame:
    return DroneTelemetryFrame(
        timestamp=timestamp,
        position=GpsPosition(lat=lat, lon=lon, alt=alt),
        velocity=Velocity(vx=vx, vy=0, vz=0),
        attitude=Attitude(pitch=pitch, roll=roll, yaw=0),
        rotor_speeds=rotor_speeds or [4500, 4500, 4500, 4500],
        battery=DroneBattery(voltage=16.0, current=20.0, remaining=remaining),
        gps_quality=gps_quality,
        signal_strength=signal_strength,
    )


@pytest.fixture
def make_ground_frame():
    return ground_frame


@pytest.fixture
def make_drone_frame():
    return drone_frame


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    with patch.dict(
        "os.environ",
        {"SIMULATED_DELAY_SCALE": "0", "RANDOM_SEED": "7"},
        clear=True,
    ):
        yield Config()


@pytest.fixture
def store(clock):
    return InMemoryStateStore(clock=clock)


@pytest.fixture
def service(config, store, clock):
    return SimulationService(
        config=config,
        store=store,
        noise=NoiseSource(seed=7),
        delay=ComputeDelay(NoiseSource(seed=1), scale=0),
        clock=clock,
    )
