from typing import Dict, List

from pydantic import BaseModel, Field

from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.terrain_type import TerrainType


class PhysicsConfig(BaseModel):
    gravity: float = 9.81
    friction_coefficient: float = Field(default=0.5, ge=0.0, le=1.0)
    terrain_type: TerrainType = TerrainType.CONCRETE
    terrain_roughness: float = Field(default=0.3, ge=0.0, le=1.0)


class MotorParams(BaseModel):
    joint_id: str
    torque_limit: float = 5.0
    pid_p: float = 1.0
    pid_i: float = 0.1
    pid_d: float = 0.05
    max_velocity: float = 5.0


class DronePhysicsConfig(BaseModel):
    air_density: float = 1.225
    wind_speed: float = 2.0
    wind_direction: float = 180.0
    airspace_condition: AirspaceCondition = AirspaceCondition.LIGHT_WIND


class RotorParams(BaseModel):
    max_rpm: float = 8000.0
    min_rpm: float = 1000.0
    hover_rpm: float = 4500.0


HEXAPOD_LEGS: List[str] = [f"leg_{leg}" for leg in range(1, 7)]

HEXAPOD_JOINTS: List[str] = [
    f"{leg}_{joint}" for leg in HEXAPOD_LEGS for joint in ("coxa", "femur", "tibia")
]

QUADCOPTER_ROTORS: List[str] = ["rotor_fl", "rotor_fr", "rotor_bl", "rotor_br"]


def default_motor_map() -> Dict[str, MotorParams]:
    return {joint_id: MotorParams(joint_id=joint_id) for joint_id in HEXAPOD_JOINTS}
