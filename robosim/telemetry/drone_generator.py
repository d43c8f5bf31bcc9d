import math
from typing import List, Optional, Tuple

from loguru import logger

from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.flight_phase import FlightPhase
from robosim.models.physics import DronePhysicsConfig, QUADCOPTER_ROTORS, RotorParams
from robosim.models.telemetry_data import (
    Attitude,
    DroneBattery,
    DroneTelemetryFrame,
    GpsPosition,
    Velocity,
)
from robosim.telemetry.environment import airspace_params
from robosim.utils.noise import NoiseSource, clamp, round_half_up

START_LAT = 37.7749
START_LON = -122.4194

TARGET_ALTITUDE_M = 10.0
MAX_ALTITUDE_M = 50.0
MAX_ATTITUDE_DEG = 30.0

TAKEOFF_SHARE = 0.15
HOVER_SHARE = 0.25
WAYPOINT_SHARE = 0.40
LAND_SHARE = 0.20

WAYPOINT_OFFSETS: List[Tuple[float, float]] = [
    (0.0001, 0.0001),
    (0.0002, 0.0),
    (0.0001, -0.0001),
    (0.0, 0.0),
]
WAYPOINT_REACHED_DEG = 0.00002
SEEK_GAIN = 50000.0
SEEK_STEP_DEG = 0.00001

WIND_DRIFT_DEG = 0.000001

FULL_VOLTAGE = 16.8
EMPTY_VOLTAGE = 14.0


def flight_phase(t: float, duration_seconds: float) -> FlightPhase:
    takeoff_end = duration_seconds * TAKEOFF_SHARE
    hover_end = takeoff_end + duration_seconds * HOVER_SHARE
    waypoint_end = hover_end + duration_seconds * WAYPOINT_SHARE

    if t < takeoff_end:
        return FlightPhase.TAKEOFF
    if t < hover_end:
        return FlightPhase.HOVER
    if t < waypoint_end:
        return FlightPhase.WAYPOINT
    return FlightPhase.LAND


def generate_drone_telemetry(
    duration_seconds: float,
    physics: DronePhysicsConfig,
    sample_rate_hz: float = 50,
    noise: Optional[NoiseSource] = None,
    rotors: Optional[RotorParams] = None,
) -> List[DroneTelemetryFrame]:
    """
    Fly a quadcopter through takeoff, hover, waypoint and landing phases.

    Phases are split by elapsed fraction of the duration (15/25/40/20 %).
    Wind from the airspace table drifts the position and gusts kick the
    attitude, which then decays back toward level.
    """
    noise = noise or NoiseSource()
    rotors = rotors or RotorParams()
    total_samples = math.floor(duration_seconds * sample_rate_hz)
    if total_samples <= 0:
        return []

    dt = 1.0 / sample_rate_hz
    interval_ms = 1000.0 / sample_rate_hz
    airspace = airspace_params(physics.airspace_condition)
    turbulent = physics.airspace_condition == AirspaceCondition.TURBULENT

    takeoff_duration = duration_seconds * TAKEOFF_SHARE
    land_duration = duration_seconds * LAND_SHARE

    waypoints = [(START_LAT + dlat, START_LON + dlon) for dlat, dlon in WAYPOINT_OFFSETS]
    current_waypoint = 0

    lat, lon, alt = START_LAT, START_LON, 0.0
    vx = vy = vz = 0.0
    pitch = roll = yaw = 0.0
    battery_remaining = 100.0
    rotor_speeds = [0.0] * len(QUADCOPTER_ROTORS)

    wind_effect = physics.wind_speed * airspace.turbulence_intensity
    wind_angle = math.radians(physics.wind_direction)

    frames: List[DroneTelemetryFrame] = []

    for i in range(total_samples):
        t = i * dt
        phase = flight_phase(t, duration_seconds)

        if phase == FlightPhase.TAKEOFF:
            progress = t / takeoff_duration
            target_alt = TARGET_ALTITUDE_M * math.sin(progress * math.pi / 2)
            vz = (target_alt - alt) * 2
            alt += vz * dt
            rpm = rotors.min_rpm + (rotors.hover_rpm - rotors.min_rpm) * progress
            rotor_speeds = [
                clamp(rpm + noise.gaussian(0, 50), rotors.min_rpm, rotors.max_rpm)
                for _ in rotor_speeds
            ]

        elif phase == FlightPhase.HOVER:
            vz = (TARGET_ALTITUDE_M - alt) * 0.5 + noise.gaussian(0, 0.1)
            alt = clamp(alt + vz * dt, 0, MAX_ALTITUDE_M)
            rotor_speeds = [
                clamp(
                    rotors.hover_rpm + noise.gaussian(0, 100),
                    rotors.min_rpm,
                    rotors.max_rpm,
                )
                for _ in rotor_speeds
            ]

        elif phase == FlightPhase.WAYPOINT:
            wp_lat, wp_lon = waypoints[current_waypoint]
            lat_error = wp_lat - lat
            lon_error = wp_lon - lon
            distance = math.hypot(lat_error, lon_error)

            if distance < WAYPOINT_REACHED_DEG and current_waypoint < len(waypoints) - 1:
                current_waypoint += 1

            vx = lat_error * SEEK_GAIN
            vy = lon_error * SEEK_GAIN
            lat += vx * dt * SEEK_STEP_DEG
            lon += vy * dt * SEEK_STEP_DEG

            vz = (TARGET_ALTITUDE_M - alt) * 0.3
            alt = clamp(alt + vz * dt, 0, MAX_ALTITUDE_M)

            movement_boost = abs(vx) + abs(vy)
            rotor_speeds = [
                clamp(
                    rotors.hover_rpm + movement_boost * 10 + noise.gaussian(0, 150),
                    rotors.min_rpm,
                    rotors.max_rpm,
                )
                for _ in rotor_speeds
            ]

        else:
            progress = (t - (duration_seconds - land_duration)) / land_duration
            vz = -2 * (1 - progress * 0.5)
            alt = clamp(alt + vz * dt, 0, MAX_ALTITUDE_M)
            floor_rpm = rotors.min_rpm if alt > 0.5 else 0
            rotor_speeds = [
                clamp(
                    rotors.hover_rpm * (1 - progress * 0.6) + noise.gaussian(0, 50),
                    floor_rpm,
                    rotors.max_rpm,
                )
                for _ in rotor_speeds
            ]

        # steady drift along the wind vector plus turbulence jitter
        lat += math.cos(wind_angle) * wind_effect * WIND_DRIFT_DEG * dt
        lon += math.sin(wind_angle) * wind_effect * WIND_DRIFT_DEG * dt
        lat += noise.gaussian(0, airspace.position_variance) * WIND_DRIFT_DEG * dt
        lon += noise.gaussian(0, airspace.position_variance) * WIND_DRIFT_DEG * dt

        if noise.uniform() < airspace.gust_probability * dt:
            roll += noise.gaussian(0, 5) * airspace.turbulence_intensity
            pitch += noise.gaussian(0, 5) * airspace.turbulence_intensity

        pitch = clamp(pitch * 0.95 + noise.gaussian(0, 0.5), -MAX_ATTITUDE_DEG, MAX_ATTITUDE_DEG)
        roll = clamp(roll * 0.95 + noise.gaussian(0, 0.5), -MAX_ATTITUDE_DEG, MAX_ATTITUDE_DEG)
        yaw += noise.gaussian(0, 0.2)

        power_drain = 0.001 + abs(vz) * 0.002 + (abs(vx) + abs(vy)) * 0.0001
        battery_remaining = clamp(battery_remaining - power_drain, 0, 100)
        battery_voltage = EMPTY_VOLTAGE + (battery_remaining / 100) * (
            FULL_VOLTAGE - EMPTY_VOLTAGE
        )

        avg_rpm = sum(rotor_speeds) / len(rotor_speeds)
        current = 5 + (avg_rpm / rotors.hover_rpm) * 15

        gps_quality = 95 + noise.gaussian(0, 3)
        if alt < 2:
            gps_quality -= 10
        if turbulent:
            gps_quality -= 5
        gps_quality = clamp(gps_quality, 0, 100)

        signal_strength = -45 + noise.gaussian(0, 3)

        frames.append(
            DroneTelemetryFrame(
                timestamp=round(i * interval_ms, 3),
                position=GpsPosition(
                    lat=round(lat, 6), lon=round(lon, 6), alt=round(alt, 2)
                ),
                velocity=Velocity(vx=round(vx, 2), vy=round(vy, 2), vz=round(vz, 2)),
                attitude=Attitude(
                    pitch=round(pitch, 1), roll=round(roll, 1), yaw=round(yaw, 1)
                ),
                rotor_speeds=[round_half_up(rpm) for rpm in rotor_speeds],
                battery=DroneBattery(
                    voltage=round(battery_voltage, 2),
                    current=round(current, 1),
                    remaining=round(battery_remaining, 1),
                ),
                gps_quality=round_half_up(gps_quality),
                signal_strength=round_half_up(signal_strength),
            )
        )

    logger.debug(
        f"Generated {len(frames)} flight frames in "
        f"{physics.airspace_condition.value} airspace at {sample_rate_hz}Hz"
    )
    return frames
