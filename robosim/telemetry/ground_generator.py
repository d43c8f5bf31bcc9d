import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from loguru import logger

from robosim.models.physics import (
    HEXAPOD_JOINTS,
    HEXAPOD_LEGS,
    MotorParams,
    PhysicsConfig,
)
from robosim.models.telemetry_data import (
    ImuReading,
    LegContact,
    PowerReading,
    TelemetryFrame,
)
from robosim.telemetry.environment import terrain_params
from robosim.utils.noise import NoiseSource, clamp

GAIT_FREQUENCY_HZ = 2.0
GAIT_AMPLITUDE_RAD: Dict[str, float] = {"coxa": 0.3, "femur": 0.6, "tibia": 0.8}
DEFAULT_AMPLITUDE_RAD = 0.5

MAX_JOINT_VELOCITY = 5.0
MAX_PITCH_DEG = 30.0
MAX_ROLL_DEG = 20.0

START_TEMPERATURE_C = 35.0
MAX_TEMPERATURE_C = 55.0
TEMPERATURE_STEP_C = 0.001

STANCE_FORCE_N = 8.0
NOMINAL_GRAVITY = 9.81


@dataclass
class JointState:
    position: float
    velocity: float = 0.0
    torque: float = 0.0


def leg_number(identifier: str) -> int:
    """Leg index from 'leg_<n>' or 'leg_<n>_<joint>'."""
    return int(identifier.split("_")[1])


def joint_kind(joint_id: str) -> str:
    return joint_id.split("_")[2]


def tripod_offset(leg: int) -> float:
    """Even legs swing in antiphase to odd legs."""
    return math.pi if leg % 2 == 0 else 0.0


def pid_response(
    current: float,
    target: float,
    pid_p: float,
    pid_d: float,
    velocity: float,
    dt: float,
) -> JointState:
    """
    One step of the velocity-feedback joint controller.

    Only the proportional and derivative terms act. Position integrates the
    unclamped velocity; the returned velocity is clamped to the joint limit.
    """
    error = target - current
    acceleration = pid_p * error - pid_d * velocity
    new_velocity = velocity + acceleration * dt
    new_position = current + new_velocity * dt

    return JointState(
        position=new_position,
        velocity=clamp(new_velocity, -MAX_JOINT_VELOCITY, MAX_JOINT_VELOCITY),
    )


def generate_telemetry(
    duration_seconds: float,
    physics: PhysicsConfig,
    motors: Mapping[str, MotorParams],
    sample_rate_hz: float = 100,
    noise: Optional[NoiseSource] = None,
) -> List[TelemetryFrame]:
    """
    Simulate a hexapod walking a tripod gait and return one frame per sample.

    Produces floor(duration * rate) frames spaced 1000 / rate ms apart.
    Degenerate durations or rates give an empty stream.
    """
    noise = noise or NoiseSource()
    total_samples = math.floor(duration_seconds * sample_rate_hz)
    if total_samples <= 0:
        return []

    dt = 1.0 / sample_rate_hz
    interval_ms = 1000.0 / sample_rate_hz
    terrain = terrain_params(physics.terrain_type)
    gravity_ratio = physics.gravity / NOMINAL_GRAVITY
    noise_scale = 0.01 * (1 + terrain.friction_variance)
    slip_chance = terrain.slip_probability * (1 - physics.friction_coefficient)

    joints: Dict[str, JointState] = {
        joint_id: JointState(position=noise.gaussian(0, 0.1))
        for joint_id in HEXAPOD_JOINTS
    }
    pitch = roll = yaw = 0.0
    temperature = START_TEMPERATURE_C

    frames: List[TelemetryFrame] = []

    for i in range(total_samples):
        t = i * dt
        gait_phase = (t * GAIT_FREQUENCY_HZ * 2 * math.pi) % (2 * math.pi)

        positions: Dict[str, float] = {}
        velocities: Dict[str, float] = {}
        torques: Dict[str, float] = {}

        for joint_id in HEXAPOD_JOINTS:
            motor = motors.get(joint_id) or MotorParams(joint_id=joint_id)
            state = joints[joint_id]

            amplitude = GAIT_AMPLITUDE_RAD.get(joint_kind(joint_id), DEFAULT_AMPLITUDE_RAD)
            target = amplitude * math.sin(gait_phase + tripod_offset(leg_number(joint_id)))

            step = pid_response(
                state.position, target, motor.pid_p, motor.pid_d, state.velocity, dt
            )

            state.position = step.position + noise.gaussian(0, noise_scale)
            state.velocity = step.velocity + noise.gaussian(0, noise_scale * 2)
            state.torque = clamp(
                motor.pid_p * (target - state.position) + noise.gaussian(0, 0.1),
                -motor.torque_limit,
                motor.torque_limit,
            )

            positions[joint_id] = state.position
            velocities[joint_id] = state.velocity
            torques[joint_id] = state.torque

        pitch_oscillation = 2 * math.sin(gait_phase * 2) * gravity_ratio
        roll_oscillation = 1.5 * math.sin(gait_phase * 2 + math.pi / 4) * gravity_ratio

        pitch = clamp(
            pitch * 0.95 + pitch_oscillation * 0.05 + noise.gaussian(0, 0.3),
            -MAX_PITCH_DEG,
            MAX_PITCH_DEG,
        )
        roll = clamp(
            roll * 0.95 + roll_oscillation * 0.05 + noise.gaussian(0, 0.2),
            -MAX_ROLL_DEG,
            MAX_ROLL_DEG,
        )
        yaw += noise.gaussian(0, 0.1)

        temperature = min(
            MAX_TEMPERATURE_C,
            temperature + TEMPERATURE_STEP_C + abs(noise.gaussian(0, 0.01)),
        )

        mean_abs_torque = sum(abs(v) for v in torques.values()) / len(HEXAPOD_JOINTS)
        current = 2 + mean_abs_torque * 0.5 + noise.gaussian(0, 0.2)

        contacts: List[LegContact] = []
        for leg_id in HEXAPOD_LEGS:
            leg_phase = (gait_phase + tripod_offset(leg_number(leg_id))) % (2 * math.pi)
            in_contact = leg_phase < math.pi
            slip_detected = in_contact and noise.uniform() < slip_chance * 0.1

            contacts.append(
                LegContact(
                    leg_id=leg_id,
                    in_contact=in_contact,
                    force=STANCE_FORCE_N + noise.gaussian(0, 2) if in_contact else 0.0,
                    slip_detected=slip_detected,
                )
            )

        frames.append(
            TelemetryFrame(
                timestamp=round(i * interval_ms, 3),
                joint_positions=positions,
                joint_velocities=velocities,
                joint_torques=torques,
                imu=ImuReading(
                    pitch=round(pitch, 2),
                    roll=round(roll, 2),
                    yaw=round(yaw, 2),
                    accel_x=round(noise.gaussian(0, 0.5), 3),
                    accel_y=round(noise.gaussian(0, 0.5), 3),
                    accel_z=round(physics.gravity + noise.gaussian(0, 0.3), 3),
                ),
                power=PowerReading(
                    voltage=round(24 - current * 0.1 + noise.gaussian(0, 0.05), 2),
                    current=round(current, 2),
                    temperature=round(temperature, 1),
                ),
                contacts=contacts,
            )
        )

    logger.debug(
        f"Generated {len(frames)} ground frames on {physics.terrain_type.value} "
        f"at {sample_rate_hz}Hz"
    )
    return frames
