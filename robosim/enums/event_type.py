from enum import Enum


class GroundEventType(str, Enum):
    # Rule-based detections
    SLIP = "slip"
    OVERHEAT = "overheat"
    COLLISION = "collision"
    GAIT_MISMATCH = "gait_mismatch"
    STABILITY_WARNING = "stability_warning"
    ROLLOVER = "rollover"

    # Injected scenarios
    MOTOR_OVERHEAT = "motor_overheat"
    SLIP_EVENT = "slip_event"
    POWER_FLUCTUATION = "power_fluctuation"
    SENSOR_NOISE = "sensor_noise"
    JOINT_LIMIT_EXCEEDED = "joint_limit_exceeded"


class DroneEventType(str, Enum):
    MOTOR_FAILURE = "motor_failure"
    GPS_LOSS = "gps_loss"
    LOW_BATTERY = "low_battery"
    SIGNAL_LOST = "signal_lost"
    GEOFENCE_BREACH = "geofence_breach"
    WIND_WARNING = "wind_warning"
    OBSTACLE_DETECTED = "obstacle_detected"
    FLYAWAY = "flyaway"
