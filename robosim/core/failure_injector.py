"""
Failure injection for hexapod runs.

Two passes share the same sample points: rule-based detection of anomalies
already present in the telemetry, and a Bernoulli-gated weighted draw over a
catalog of scripted failure scenarios. Injection stops once a critical event
exists or three warning/error events have accumulated.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from loguru import logger

from robosim.enums.event_type import DroneEventType, GroundEventType
from robosim.enums.severity import Severity
from robosim.enums.terrain_type import TerrainType
from robosim.models.events import DroneSimulationEvent, SimulationEvent
from robosim.models.physics import PhysicsConfig
from robosim.models.telemetry_data import TelemetryFrame
from robosim.utils.noise import NoiseSource
from robosim.utils.sampling import weighted_choice

BASE_FAILURE_RATE = 0.12
SAMPLE_POINTS = 10
MAX_EVENTS = 10
MAX_WARNING_EVENTS = 3

STABILITY_PITCH_DEG = 20.0
STABILITY_ERROR_PITCH_DEG = 25.0
ROLLOVER_PITCH_DEG = 30.0
ROLLOVER_ROLL_DEG = 25.0
OVERHEAT_TEMPERATURE_C = 50.0

NOMINAL_GRAVITY = 9.81


@dataclass(frozen=True)
class FailureScenario:
    type: Union[GroundEventType, DroneEventType]
    severity: Severity
    message: str
    recoverable: bool
    affected_components: List[str] = field(default_factory=list)


FAILURE_SCENARIOS: Dict[GroundEventType, FailureScenario] = {
    GroundEventType.MOTOR_OVERHEAT: FailureScenario(
        type=GroundEventType.MOTOR_OVERHEAT,
        severity=Severity.WARNING,
        message="Motor temperature exceeded threshold",
        recoverable=True,
        affected_components=["leg_2_femur", "leg_5_femur"],
    ),
    GroundEventType.SLIP_EVENT: FailureScenario(
        type=GroundEventType.SLIP_EVENT,
        severity=Severity.WARNING,
        message="Traction loss detected during stance phase",
        recoverable=True,
        affected_components=["leg_1", "leg_4"],
    ),
    GroundEventType.GAIT_MISMATCH: FailureScenario(
        type=GroundEventType.GAIT_MISMATCH,
        severity=Severity.WARNING,
        message="Gait phase synchronization error between leg pairs",
        recoverable=True,
        affected_components=["leg_2", "leg_5"],
    ),
    GroundEventType.ROLLOVER: FailureScenario(
        type=GroundEventType.ROLLOVER,
        severity=Severity.CRITICAL,
        message="Body orientation exceeded safe limits - rollover imminent",
        recoverable=False,
    ),
    GroundEventType.POWER_FLUCTUATION: FailureScenario(
        type=GroundEventType.POWER_FLUCTUATION,
        severity=Severity.INFO,
        message="Minor power supply fluctuation detected",
        recoverable=True,
    ),
    GroundEventType.SENSOR_NOISE: FailureScenario(
        type=GroundEventType.SENSOR_NOISE,
        severity=Severity.INFO,
        message="Elevated sensor noise detected in IMU readings",
        recoverable=True,
    ),
    GroundEventType.JOINT_LIMIT_EXCEEDED: FailureScenario(
        type=GroundEventType.JOINT_LIMIT_EXCEEDED,
        severity=Severity.ERROR,
        message="Joint position limit exceeded - emergency stop triggered",
        recoverable=True,
        affected_components=["leg_3_tibia"],
    ),
}

TERRAIN_MODIFIERS: Dict[TerrainType, Dict[GroundEventType, float]] = {
    TerrainType.SAND: {
        GroundEventType.MOTOR_OVERHEAT: 1.5,
        GroundEventType.SLIP_EVENT: 2.0,
        GroundEventType.GAIT_MISMATCH: 1.3,
        GroundEventType.ROLLOVER: 1.4,
        GroundEventType.POWER_FLUCTUATION: 1.2,
        GroundEventType.SENSOR_NOISE: 1.1,
        GroundEventType.JOINT_LIMIT_EXCEEDED: 1.2,
    },
    TerrainType.CONCRETE: {
        GroundEventType.MOTOR_OVERHEAT: 0.8,
        GroundEventType.SLIP_EVENT: 0.3,
        GroundEventType.GAIT_MISMATCH: 0.7,
        GroundEventType.ROLLOVER: 0.6,
        GroundEventType.POWER_FLUCTUATION: 0.9,
        GroundEventType.SENSOR_NOISE: 0.8,
        GroundEventType.JOINT_LIMIT_EXCEEDED: 1.1,
    },
    TerrainType.GRASS: {
        GroundEventType.MOTOR_OVERHEAT: 1.0,
        GroundEventType.SLIP_EVENT: 1.2,
        GroundEventType.GAIT_MISMATCH: 1.0,
        GroundEventType.ROLLOVER: 0.9,
        GroundEventType.POWER_FLUCTUATION: 1.0,
        GroundEventType.SENSOR_NOISE: 1.0,
        GroundEventType.JOINT_LIMIT_EXCEEDED: 0.9,
    },
    TerrainType.GRAVEL: {
        GroundEventType.MOTOR_OVERHEAT: 1.3,
        GroundEventType.SLIP_EVENT: 1.5,
        GroundEventType.GAIT_MISMATCH: 1.4,
        GroundEventType.ROLLOVER: 1.3,
        GroundEventType.POWER_FLUCTUATION: 1.1,
        GroundEventType.SENSOR_NOISE: 1.2,
        GroundEventType.JOINT_LIMIT_EXCEEDED: 1.3,
    },
}


def terrain_modifiers(terrain: Union[TerrainType, str]) -> Dict[GroundEventType, float]:
    parsed = TerrainType.parse(terrain) or TerrainType.CONCRETE
    return TERRAIN_MODIFIERS[parsed]


def sample_indices(frame_count: int, points: int = SAMPLE_POINTS) -> range:
    """
    Frame indices inspected for events: every (count // points)-th frame,
    skipping frame 0. Short sequences are inspected in full.
    """
    step = frame_count // points
    if step == 0:
        return range(frame_count)
    return range(step, frame_count, step)


def injection_suppressed(
    events: Sequence[Union[SimulationEvent, DroneSimulationEvent]],
) -> bool:
    if any(e.severity == Severity.CRITICAL for e in events):
        return True
    serious = sum(1 for e in events if e.severity in (Severity.WARNING, Severity.ERROR))
    return serious >= MAX_WARNING_EVENTS


def failure_weights(
    physics: PhysicsConfig, simulation_progress: float
) -> Dict[GroundEventType, float]:
    modifiers = terrain_modifiers(physics.terrain_type)
    weights: Dict[GroundEventType, float] = {}

    for failure_type in FAILURE_SCENARIOS:
        weight = modifiers[failure_type]
        if failure_type == GroundEventType.SLIP_EVENT:
            weight *= 1.2 - physics.friction_coefficient
        elif failure_type == GroundEventType.MOTOR_OVERHEAT:
            weight *= 0.5 + simulation_progress
        elif failure_type == GroundEventType.ROLLOVER:
            weight *= (physics.gravity / NOMINAL_GRAVITY) * 0.3
        weights[failure_type] = weight

    return weights


def should_inject_failure(
    physics: PhysicsConfig,
    simulation_progress: float,
    existing_events: Sequence[SimulationEvent],
    noise: NoiseSource,
    base_rate: float = BASE_FAILURE_RATE,
) -> Optional[FailureScenario]:
    if injection_suppressed(existing_events):
        return None

    if noise.uniform() > base_rate:
        return None

    weights = failure_weights(physics, simulation_progress)
    picked = weighted_choice(list(weights.keys()), list(weights.values()), noise)
    if picked is None:
        return None

    failure_type, probability = picked
    logger.debug(
        f"Injecting {failure_type.value} at progress {simulation_progress:.2f} "
        f"(p={probability:.3f})"
    )
    return FAILURE_SCENARIOS[failure_type]


def detect_frame_events(frame: TelemetryFrame) -> List[SimulationEvent]:
    """Rule-based anomalies visible in a single frame."""
    events: List[SimulationEvent] = []
    pitch = frame.imu.pitch
    roll = frame.imu.roll

    for contact in frame.contacts:
        if contact.slip_detected:
            events.append(
                SimulationEvent(
                    timestamp=frame.timestamp,
                    type=GroundEventType.SLIP,
                    severity=Severity.WARNING,
                    message=f"Slippage detected on {contact.leg_id} tarsus",
                    data={"leg": contact.leg_id, "force": contact.force},
                )
            )
            break

    if abs(pitch) > STABILITY_PITCH_DEG:
        events.append(
            SimulationEvent(
                timestamp=frame.timestamp,
                type=GroundEventType.STABILITY_WARNING,
                severity=(
                    Severity.ERROR
                    if pitch > STABILITY_ERROR_PITCH_DEG
                    else Severity.WARNING
                ),
                message=f"Body pitch deviation: {pitch:.1f}°",
                data={"pitch": pitch, "roll": roll},
            )
        )

    if abs(pitch) > ROLLOVER_PITCH_DEG or abs(roll) > ROLLOVER_ROLL_DEG:
        events.append(
            SimulationEvent(
                timestamp=frame.timestamp,
                type=GroundEventType.ROLLOVER,
                severity=Severity.CRITICAL,
                message="Orientation exceeded safe limits",
                data={"pitch": pitch, "roll": roll},
            )
        )

    if frame.power.temperature > OVERHEAT_TEMPERATURE_C:
        events.append(
            SimulationEvent(
                timestamp=frame.timestamp,
                type=GroundEventType.OVERHEAT,
                severity=Severity.WARNING,
                message=f"Motor temperature elevated: {frame.power.temperature}°C",
                data={"temperature": frame.power.temperature},
            )
        )

    return events


def generate_simulation_events(
    frames: Sequence[TelemetryFrame],
    physics: PhysicsConfig,
    noise: Optional[NoiseSource] = None,
) -> List[SimulationEvent]:
    noise = noise or NoiseSource()
    events: List[SimulationEvent] = []

    for i in sample_indices(len(frames)):
        frame = frames[i]
        events.extend(detect_frame_events(frame))

        scenario = should_inject_failure(physics, i / len(frames), events, noise)
        if scenario:
            events.append(
                SimulationEvent(
                    timestamp=frame.timestamp,
                    type=scenario.type,
                    severity=scenario.severity,
                    message=scenario.message,
                    data={"affectedComponents": list(scenario.affected_components)},
                )
            )

    return events[:MAX_EVENTS]


def should_simulation_fail(events: Sequence[SimulationEvent]) -> bool:
    return any(e.severity == Severity.CRITICAL for e in events)
