from typing import Dict, List, Optional, Sequence, Union

from loguru import logger

from robosim.core.failure_injector import (
    MAX_EVENTS,
    FailureScenario,
    injection_suppressed,
    sample_indices,
)
from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.event_type import DroneEventType
from robosim.enums.severity import Severity
from robosim.models.events import DroneSimulationEvent
from robosim.models.physics import DronePhysicsConfig
from robosim.models.telemetry_data import DroneTelemetryFrame
from robosim.utils.noise import NoiseSource
from robosim.utils.sampling import weighted_choice

DRONE_BASE_FAILURE_RATE = 0.08

GPS_WARNING_QUALITY = 70
GPS_ERROR_QUALITY = 50
BATTERY_WARNING_PCT = 20.0
BATTERY_CRITICAL_PCT = 10.0
SIGNAL_WARNING_DBM = -70
ATTITUDE_WARNING_DEG = 15.0
ROTOR_VARIANCE_WARNING_RPM = 500.0
ROTOR_VARIANCE_ERROR_RPM = 1000.0

DRONE_FAILURE_SCENARIOS: Dict[DroneEventType, FailureScenario] = {
    DroneEventType.MOTOR_FAILURE: FailureScenario(
        type=DroneEventType.MOTOR_FAILURE,
        severity=Severity.ERROR,
        message="Motor RPM variance exceeded threshold - degraded performance",
        recoverable=True,
        affected_components=["rotor_fr"],
    ),
    DroneEventType.GPS_LOSS: FailureScenario(
        type=DroneEventType.GPS_LOSS,
        severity=Severity.WARNING,
        message="GPS signal degraded - position accuracy reduced",
        recoverable=True,
    ),
    DroneEventType.LOW_BATTERY: FailureScenario(
        type=DroneEventType.LOW_BATTERY,
        severity=Severity.WARNING,
        message="Battery level critical - return to home recommended",
        recoverable=True,
    ),
    DroneEventType.SIGNAL_LOST: FailureScenario(
        type=DroneEventType.SIGNAL_LOST,
        severity=Severity.ERROR,
        message="RC link signal strength below threshold",
        recoverable=True,
    ),
    DroneEventType.GEOFENCE_BREACH: FailureScenario(
        type=DroneEventType.GEOFENCE_BREACH,
        severity=Severity.WARNING,
        message="Approaching operational boundary - course correction initiated",
        recoverable=True,
    ),
    DroneEventType.WIND_WARNING: FailureScenario(
        type=DroneEventType.WIND_WARNING,
        severity=Severity.WARNING,
        message="Wind speed exceeding safe operational limits",
        recoverable=True,
    ),
    DroneEventType.OBSTACLE_DETECTED: FailureScenario(
        type=DroneEventType.OBSTACLE_DETECTED,
        severity=Severity.INFO,
        message="Obstacle detected - avoidance maneuver executed",
        recoverable=True,
    ),
    DroneEventType.FLYAWAY: FailureScenario(
        type=DroneEventType.FLYAWAY,
        severity=Severity.CRITICAL,
        message="Loss of control detected - failsafe triggered",
        recoverable=False,
    ),
}

AIRSPACE_MODIFIERS: Dict[AirspaceCondition, Dict[DroneEventType, float]] = {
    AirspaceCondition.CALM: {
        DroneEventType.MOTOR_FAILURE: 0.5,
        DroneEventType.GPS_LOSS: 0.6,
        DroneEventType.LOW_BATTERY: 1.0,
        DroneEventType.SIGNAL_LOST: 0.7,
        DroneEventType.GEOFENCE_BREACH: 0.8,
        DroneEventType.WIND_WARNING: 0.1,
        DroneEventType.OBSTACLE_DETECTED: 1.0,
        DroneEventType.FLYAWAY: 0.3,
    },
    AirspaceCondition.LIGHT_WIND: {
        DroneEventType.MOTOR_FAILURE: 0.8,
        DroneEventType.GPS_LOSS: 0.8,
        DroneEventType.LOW_BATTERY: 1.2,
        DroneEventType.SIGNAL_LOST: 0.9,
        DroneEventType.GEOFENCE_BREACH: 1.0,
        DroneEventType.WIND_WARNING: 0.5,
        DroneEventType.OBSTACLE_DETECTED: 1.0,
        DroneEventType.FLYAWAY: 0.5,
    },
    AirspaceCondition.GUSTY: {
        DroneEventType.MOTOR_FAILURE: 1.2,
        DroneEventType.GPS_LOSS: 1.0,
        DroneEventType.LOW_BATTERY: 1.5,
        DroneEventType.SIGNAL_LOST: 1.2,
        DroneEventType.GEOFENCE_BREACH: 1.3,
        DroneEventType.WIND_WARNING: 2.0,
        DroneEventType.OBSTACLE_DETECTED: 0.8,
        DroneEventType.FLYAWAY: 1.0,
    },
    AirspaceCondition.TURBULENT: {
        DroneEventType.MOTOR_FAILURE: 1.8,
        DroneEventType.GPS_LOSS: 1.3,
        DroneEventType.LOW_BATTERY: 2.0,
        DroneEventType.SIGNAL_LOST: 1.5,
        DroneEventType.GEOFENCE_BREACH: 1.5,
        DroneEventType.WIND_WARNING: 3.0,
        DroneEventType.OBSTACLE_DETECTED: 0.6,
        DroneEventType.FLYAWAY: 1.5,
    },
}


def airspace_modifiers(
    condition: Union[AirspaceCondition, str],
) -> Dict[DroneEventType, float]:
    parsed = AirspaceCondition.parse(condition) or AirspaceCondition.CALM
    return AIRSPACE_MODIFIERS[parsed]


def drone_failure_weights(
    physics: DronePhysicsConfig, flight_progress: float
) -> Dict[DroneEventType, float]:
    modifiers = airspace_modifiers(physics.airspace_condition)
    weights: Dict[DroneEventType, float] = {}

    for failure_type in DRONE_FAILURE_SCENARIOS:
        weight = modifiers[failure_type]
        if failure_type == DroneEventType.WIND_WARNING:
            weight *= physics.wind_speed / 5
        elif failure_type == DroneEventType.LOW_BATTERY:
            weight *= 0.3 + flight_progress
        elif failure_type == DroneEventType.GPS_LOSS:
            weight *= 1 - flight_progress * 0.3
        elif failure_type == DroneEventType.FLYAWAY:
            weight *= 0.1
        weights[failure_type] = weight

    return weights


def should_inject_drone_failure(
    physics: DronePhysicsConfig,
    flight_progress: float,
    existing_events: Sequence[DroneSimulationEvent],
    noise: NoiseSource,
    base_rate: float = DRONE_BASE_FAILURE_RATE,
) -> Optional[FailureScenario]:
    if injection_suppressed(existing_events):
        return None

    if noise.uniform() > base_rate:
        return None

    weights = drone_failure_weights(physics, flight_progress)
    picked = weighted_choice(list(weights.keys()), list(weights.values()), noise)
    if picked is None:
        return None

    failure_type, probability = picked
    logger.debug(
        f"Injecting {failure_type.value} at progress {flight_progress:.2f} "
        f"(p={probability:.3f})"
    )
    return DRONE_FAILURE_SCENARIOS[failure_type]


def detect_drone_frame_events(frame: DroneTelemetryFrame) -> List[DroneSimulationEvent]:
    events: List[DroneSimulationEvent] = []

    if frame.gps_quality < GPS_WARNING_QUALITY:
        events.append(
            DroneSimulationEvent(
                timestamp=frame.timestamp,
                type=DroneEventType.GPS_LOSS,
                severity=(
                    Severity.ERROR
                    if frame.gps_quality < GPS_ERROR_QUALITY
                    else Severity.WARNING
                ),
                message=f"GPS quality degraded to {frame.gps_quality}%",
                data={"gps_quality": frame.gps_quality},
            )
        )

    remaining = frame.battery.remaining
    if remaining < BATTERY_WARNING_PCT:
        events.append(
            DroneSimulationEvent(
                timestamp=frame.timestamp,
                type=DroneEventType.LOW_BATTERY,
                severity=(
                    Severity.CRITICAL
                    if remaining < BATTERY_CRITICAL_PCT
                    else Severity.WARNING
                ),
                message=f"Battery critical: {remaining:.0f}% remaining",
                data={"battery_remaining": remaining, "voltage": frame.battery.voltage},
            )
        )

    if frame.signal_strength < SIGNAL_WARNING_DBM:
        events.append(
            DroneSimulationEvent(
                timestamp=frame.timestamp,
                type=DroneEventType.SIGNAL_LOST,
                severity=Severity.WARNING,
                message=f"RC signal weak: {frame.signal_strength}dBm",
                data={"signal_strength": frame.signal_strength},
            )
        )

    roll = frame.attitude.roll
    pitch = frame.attitude.pitch
    if abs(roll) > ATTITUDE_WARNING_DEG or abs(pitch) > ATTITUDE_WARNING_DEG:
        events.append(
            DroneSimulationEvent(
                timestamp=frame.timestamp,
                type=DroneEventType.WIND_WARNING,
                severity=Severity.WARNING,
                message=(
                    f"Excessive attitude deviation: roll={roll:.1f}°, pitch={pitch:.1f}°"
                ),
                data={"roll": roll, "pitch": pitch},
            )
        )

    if frame.rotor_speeds:
        avg_rpm = sum(frame.rotor_speeds) / len(frame.rotor_speeds)
        deviations = [abs(rpm - avg_rpm) for rpm in frame.rotor_speeds]
        max_variance = max(deviations)
        if max_variance > ROTOR_VARIANCE_WARNING_RPM:
            rotor = deviations.index(max_variance)
            events.append(
                DroneSimulationEvent(
                    timestamp=frame.timestamp,
                    type=DroneEventType.MOTOR_FAILURE,
                    severity=(
                        Severity.ERROR
                        if max_variance > ROTOR_VARIANCE_ERROR_RPM
                        else Severity.WARNING
                    ),
                    message=f"Rotor {rotor + 1} showing {max_variance:.0f} RPM variance",
                    data={
                        "rotor": rotor,
                        "variance": max_variance,
                        "rpm": frame.rotor_speeds[rotor],
                    },
                )
            )

    return events


def generate_drone_simulation_events(
    frames: Sequence[DroneTelemetryFrame],
    physics: DronePhysicsConfig,
    noise: Optional[NoiseSource] = None,
) -> List[DroneSimulationEvent]:
    noise = noise or NoiseSource()
    events: List[DroneSimulationEvent] = []

    for i in sample_indices(len(frames)):
        frame = frames[i]
        events.extend(detect_drone_frame_events(frame))

        scenario = should_inject_drone_failure(physics, i / len(frames), events, noise)
        if scenario:
            events.append(
                DroneSimulationEvent(
                    timestamp=frame.timestamp,
                    type=scenario.type,
                    severity=scenario.severity,
                    message=scenario.message,
                    data={"affectedComponents": list(scenario.affected_components)},
                )
            )

    return events[:MAX_EVENTS]


def should_drone_simulation_fail(events: Sequence[DroneSimulationEvent]) -> bool:
    return any(e.severity == Severity.CRITICAL for e in events)
