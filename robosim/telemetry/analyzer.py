"""
Telemetry reduction: scalar quality metrics and run summaries.

Each analyzer walks the frame sequence once. Empty input yields an all-zero
record instead of dividing by zero.
"""

import math
from typing import List, Sequence, Union

from robosim.models.metrics import (
    DroneFlightPath,
    DroneSimulationMetrics,
    SimulationMetrics,
)
from robosim.models.telemetry_data import DroneTelemetryFrame, TelemetryFrame
from robosim.telemetry.ground_generator import leg_number
from robosim.utils.noise import round_half_up

PITCH_PENALTY_WEIGHT = 30.0
ROLL_PENALTY_WEIGHT = 20.0
SLIP_PENALTY_WEIGHT = 50.0
PITCH_PENALTY_RANGE_DEG = 30.0
ROLL_PENALTY_RANGE_DEG = 20.0

HOVER_ALTITUDE_M = 10.0
HOVER_TOLERANCE_M = 0.5
ATTITUDE_JUMP_DEG = 3.0
MAX_WIND_EVENTS = 10
THEORETICAL_DRAIN_PCT_PER_S = 0.1

METERS_PER_DEGREE = 111000.0
WAYPOINT_DISTANCE_MARKS_M = (10.0, 30.0, 60.0, 100.0)

ENERGY_SAMPLE_S = 0.01
DEFAULT_FRAME_INTERVAL_S = 0.02


def frame_interval_s(
    frames: Sequence[Union[TelemetryFrame, DroneTelemetryFrame]],
    default: float = DEFAULT_FRAME_INTERVAL_S,
) -> float:
    """Sample spacing in seconds, read from the first two timestamps."""
    if len(frames) < 2:
        return default
    spacing = (frames[1].timestamp - frames[0].timestamp) / 1000.0
    return spacing if spacing > 0 else default


def analyze_telemetry(frames: Sequence[TelemetryFrame]) -> SimulationMetrics:
    if not frames:
        return SimulationMetrics()

    max_pitch = 0.0
    max_roll = 0.0
    slip_events = 0
    total_energy = 0.0
    temperature_sum = 0.0
    odd_stance = 0
    even_stance = 0

    for frame in frames:
        max_pitch = max(max_pitch, abs(frame.imu.pitch))
        max_roll = max(max_roll, abs(frame.imu.roll))

        for contact in frame.contacts:
            if contact.slip_detected:
                slip_events += 1
            if contact.in_contact:
                if leg_number(contact.leg_id) % 2 == 1:
                    odd_stance += 1
                else:
                    even_stance += 1

        total_energy += frame.power.voltage * frame.power.current * ENERGY_SAMPLE_S
        temperature_sum += frame.power.temperature

    count = len(frames)
    penalty = (
        (max_pitch / PITCH_PENALTY_RANGE_DEG) * PITCH_PENALTY_WEIGHT
        + (max_roll / ROLL_PENALTY_RANGE_DEG) * ROLL_PENALTY_WEIGHT
        + (slip_events / count) * SLIP_PENALTY_WEIGHT
    )
    stability_score = max(0, min(100, round_half_up(100 - penalty)))

    efficiency_raw = 100 - (total_energy / count) * 2
    efficiency_score = max(0, min(100, round_half_up(efficiency_raw)))

    symmetry_diff = abs(odd_stance - even_stance) / count
    gait_symmetry = round(max(0.0, min(1.0, 1 - symmetry_diff * 0.5)), 2)

    return SimulationMetrics(
        stability_score=stability_score,
        efficiency_score=efficiency_score,
        gait_symmetry=gait_symmetry,
        max_pitch_deviation=round(max_pitch, 1),
        max_roll_deviation=round(max_roll, 1),
        slip_events=slip_events,
        total_energy_consumed=round(total_energy, 2),
        avg_joint_temperature=round(temperature_sum / count, 1),
    )


def analyze_drone_telemetry(
    frames: Sequence[DroneTelemetryFrame],
) -> DroneSimulationMetrics:
    if not frames:
        return DroneSimulationMetrics()

    within_tolerance = 0
    max_alt_deviation = 0.0
    total_rpm = 0.0
    total_gps_quality = 0
    wind_events = 0
    prev_roll = 0.0
    prev_pitch = 0.0

    for frame in frames:
        alt_deviation = abs(frame.position.alt - HOVER_ALTITUDE_M)
        max_alt_deviation = max(max_alt_deviation, alt_deviation)
        if alt_deviation < HOVER_TOLERANCE_M:
            within_tolerance += 1

        total_rpm += sum(frame.rotor_speeds) / max(len(frame.rotor_speeds), 1)
        total_gps_quality += frame.gps_quality

        roll_change = abs(frame.attitude.roll - prev_roll)
        pitch_change = abs(frame.attitude.pitch - prev_pitch)
        if roll_change > ATTITUDE_JUMP_DEG or pitch_change > ATTITUDE_JUMP_DEG:
            wind_events += 1
        prev_roll = frame.attitude.roll
        prev_pitch = frame.attitude.pitch

    count = len(frames)
    hover_accuracy = round_half_up(within_tolerance / count * 100)
    altitude_stability = max(0, min(100, round_half_up(100 - max_alt_deviation * 10)))

    actual_drain = frames[0].battery.remaining - frames[-1].battery.remaining
    flight_seconds = count * frame_interval_s(frames)
    theoretical_drain = flight_seconds * THEORETICAL_DRAIN_PCT_PER_S
    battery_efficiency = round_half_up(
        min(100.0, theoretical_drain / max(actual_drain, 0.1) * 100)
    )

    return DroneSimulationMetrics(
        hover_accuracy=hover_accuracy,
        altitude_stability=altitude_stability,
        battery_efficiency=battery_efficiency,
        wind_compensation_events=min(wind_events, MAX_WIND_EVENTS),
        max_altitude_deviation=round(max_alt_deviation, 2),
        avg_rotor_rpm=round_half_up(total_rpm / count),
        gps_quality_avg=round_half_up(total_gps_quality / count),
    )


def analyze_drone_flight_path(
    frames: Sequence[DroneTelemetryFrame],
) -> DroneFlightPath:
    if len(frames) < 2:
        return DroneFlightPath()

    total_distance = 0.0
    max_speed = 0.0
    total_speed = 0.0

    for prev, curr in zip(frames, frames[1:]):
        dx = (curr.position.lat - prev.position.lat) * METERS_PER_DEGREE
        dy = (
            (curr.position.lon - prev.position.lon)
            * METERS_PER_DEGREE
            * math.cos(math.radians(curr.position.lat))
        )
        dz = curr.position.alt - prev.position.alt
        total_distance += math.sqrt(dx * dx + dy * dy + dz * dz)

        speed = math.sqrt(
            curr.velocity.vx**2 + curr.velocity.vy**2 + curr.velocity.vz**2
        )
        max_speed = max(max_speed, speed)
        total_speed += speed

    waypoints_completed = sum(
        1 for mark in WAYPOINT_DISTANCE_MARKS_M if total_distance > mark
    )

    return DroneFlightPath(
        waypoints_completed=waypoints_completed,
        total_distance=round(total_distance, 1),
        max_speed=round(max_speed, 1),
        avg_speed=round(total_speed / (len(frames) - 1), 1),
    )


def generate_telemetry_summary(
    frames: Sequence[TelemetryFrame], metrics: SimulationMetrics
) -> str:
    parts: List[str] = []

    if metrics.stability_score >= 90:
        parts.append("Gait cycle completed successfully.")
    elif metrics.stability_score >= 70:
        parts.append("Gait cycle completed with minor issues.")
    else:
        parts.append("Gait cycle completed with significant stability concerns.")

    if metrics.slip_events > 0:
        for frame in frames:
            slipping = [c for c in frame.contacts if c.slip_detected]
            if slipping:
                leg = slipping[0].leg_id.replace("leg_", "")
                parts.append(
                    f"Minor slip detected at t={frame.timestamp / 1000:.1f}s "
                    f"on leg {leg} tarsus."
                )
                break

    parts.append(f"Stability score: {metrics.stability_score}%")

    if metrics.avg_joint_temperature > 50:
        parts.append(
            f"Warning: Elevated joint temperatures (avg {metrics.avg_joint_temperature}°C)."
        )

    return " ".join(parts)


def generate_drone_telemetry_summary(
    frames: Sequence[DroneTelemetryFrame],
    metrics: DroneSimulationMetrics,
    flight_path: DroneFlightPath,
) -> str:
    if not frames:
        return "No flight telemetry recorded."

    parts: List[str] = []

    if metrics.hover_accuracy >= 90 and metrics.altitude_stability >= 90:
        parts.append("Flight completed.")
    elif metrics.hover_accuracy >= 70:
        parts.append("Flight completed with minor deviations.")
    else:
        parts.append("Flight completed with significant position errors.")

    parts.append(
        f"Hover stability maintained within {metrics.max_altitude_deviation:.1f}m."
    )

    if flight_path.waypoints_completed > 0:
        parts.append(
            f"Covered {flight_path.total_distance:.1f}m "
            f"({flight_path.waypoints_completed} waypoints)."
        )

    if metrics.wind_compensation_events > 0:
        for prev, curr in zip(frames, frames[1:]):
            if abs(curr.attitude.roll - prev.attitude.roll) > ATTITUDE_JUMP_DEG:
                parts.append(
                    f"Wind compensation active at t={curr.timestamp / 1000:.1f}s."
                )
                break

    final_battery = frames[-1].battery.remaining
    if final_battery < 20:
        parts.append(f"Warning: Low battery ({final_battery:.0f}%).")
    else:
        parts.append("Battery consumption nominal.")

    return " ".join(parts)
