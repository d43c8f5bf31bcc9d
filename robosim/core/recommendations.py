from typing import Iterable, List, Sequence

from robosim.enums.event_type import DroneEventType, GroundEventType
from robosim.models.events import DroneSimulationEvent, SimulationEvent
from robosim.models.physics import DronePhysicsConfig, PhysicsConfig

MAX_GROUND_RECOMMENDATIONS = 5
MAX_DRONE_RECOMMENDATIONS = 4

FRICTION_RAISE_THRESHOLD = 0.7
FRICTION_RAISE_STEP = 0.15
STRONG_WIND_MS = 5.0


def _unique(items: Iterable[str], limit: int) -> List[str]:
    return list(dict.fromkeys(items))[:limit]


def _ground_advice(event: SimulationEvent, physics: PhysicsConfig) -> List[str]:
    kind = event.type

    if kind in (GroundEventType.SLIP, GroundEventType.SLIP_EVENT):
        advice = []
        if physics.friction_coefficient < FRICTION_RAISE_THRESHOLD:
            raised = min(1.0, physics.friction_coefficient + FRICTION_RAISE_STEP)
            advice.append(
                f"Increase friction_coefficient to {raised:.2f} "
                f"for {physics.terrain_type.value} terrain"
            )
        advice.append("Consider reducing gait speed during stance phase")
        return advice

    if kind in (GroundEventType.OVERHEAT, GroundEventType.MOTOR_OVERHEAT):
        return [
            "Reduce pid_p gain to decrease motor effort",
            "Consider implementing thermal throttling",
        ]

    if kind in (GroundEventType.STABILITY_WARNING, GroundEventType.ROLLOVER):
        return [
            "Lower center of mass by reducing femur joint angles",
            "Increase pid_d on affected legs to dampen oscillations",
        ]

    if kind == GroundEventType.GAIT_MISMATCH:
        components = event.data.get("affectedComponents") or ["leg_2"]
        return [
            f"Reduce pid_p on {components[0]}_femur to dampen oscillation",
            "Verify gait timing synchronization",
        ]

    if kind == GroundEventType.JOINT_LIMIT_EXCEEDED:
        components = event.data.get("affectedComponents") or ["leg_3_tibia"]
        return [
            f"Lower torque_limit on {components[0]} to stay inside its range of motion",
        ]

    if kind == GroundEventType.POWER_FLUCTUATION:
        return ["Check supply voltage under peak joint load"]

    if kind == GroundEventType.SENSOR_NOISE:
        return ["Recalibrate the IMU and check its mounting for vibration"]

    return []


def _drone_advice(event: DroneSimulationEvent, physics: DronePhysicsConfig) -> List[str]:
    kind = event.type

    if kind == DroneEventType.MOTOR_FAILURE:
        return [
            "Check motor and ESC connections for affected rotor",
            "Calibrate ESCs to ensure synchronized response",
        ]
    if kind == DroneEventType.GPS_LOSS:
        return [
            "Consider GPS/visual odometry fusion for improved positioning",
            "Avoid flying near structures that cause multipath interference",
        ]
    if kind == DroneEventType.LOW_BATTERY:
        return [
            "Reduce flight time or use higher capacity battery",
            "Monitor power consumption and optimize flight profile",
        ]
    if kind == DroneEventType.SIGNAL_LOST:
        return [
            "Check antenna alignment and orientation",
            "Consider using diversity receiver for better coverage",
        ]
    if kind == DroneEventType.WIND_WARNING:
        advice = [
            "Increase roll PID gains for better wind rejection",
            "Reduce flight altitude in gusty conditions",
        ]
        if physics.wind_speed > STRONG_WIND_MS:
            advice.append("Consider postponing flight until wind conditions improve")
        return advice
    if kind == DroneEventType.GEOFENCE_BREACH:
        return [
            "Review and expand geofence boundaries if safe",
            "Enable automatic return-to-home at boundary",
        ]
    if kind == DroneEventType.OBSTACLE_DETECTED:
        return [
            "Verify obstacle avoidance sensor calibration",
            "Increase minimum safe distance parameter",
        ]
    if kind == DroneEventType.FLYAWAY:
        return [
            "Check compass calibration and magnetic interference",
            "Verify failsafe settings are configured correctly",
            "Review flight logs for root cause analysis",
        ]
    return []


def generate_recommendations(
    events: Sequence[SimulationEvent], physics: PhysicsConfig
) -> List[str]:
    """Remediation advice for a hexapod run, deduplicated, at most five."""
    advice = (line for event in events for line in _ground_advice(event, physics))
    return _unique(advice, MAX_GROUND_RECOMMENDATIONS)


def generate_drone_recommendations(
    events: Sequence[DroneSimulationEvent], physics: DronePhysicsConfig
) -> List[str]:
    """Remediation advice for a flight, deduplicated, at most four."""
    advice = (line for event in events for line in _drone_advice(event, physics))
    return _unique(advice, MAX_DRONE_RECOMMENDATIONS)
