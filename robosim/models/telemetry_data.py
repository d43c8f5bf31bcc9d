from typing import Dict, List

from pydantic import BaseModel, ConfigDict


class ImuReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    pitch: float
    roll: float
    yaw: float
    accel_x: float
    accel_y: float
    accel_z: float


class PowerReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    voltage: float
    current: float
    temperature: float


class LegContact(BaseModel):
    model_config = ConfigDict(frozen=True)

    leg_id: str
    in_contact: bool
    force: float
    slip_detected: bool


class TelemetryFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: float
    joint_positions: Dict[str, float]
    joint_velocities: Dict[str, float]
    joint_torques: Dict[str, float]
    imu: ImuReading
    power: PowerReading
    contacts: List[LegContact]


class GpsPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    alt: float


class Velocity(BaseModel):
    model_config = ConfigDict(frozen=True)

    vx: float
    vy: float
    vz: float


class Attitude(BaseModel):
    model_config = ConfigDict(frozen=True)

    pitch: float
    roll: float
    yaw: float


class DroneBattery(BaseModel):
    model_config = ConfigDict(frozen=True)

    voltage: float
    current: float
    remaining: float


class DroneTelemetryFrame(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: float
    position: GpsPosition
    velocity: Velocity
    attitude: Attitude
    rotor_speeds: List[int]
    battery: DroneBattery
    gps_quality: int
    signal_strength: int
