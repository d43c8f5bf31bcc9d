from pydantic import BaseModel


class SimulationMetrics(BaseModel):
    stability_score: int = 0
    efficiency_score: int = 0
    gait_symmetry: float = 0.0
    max_pitch_deviation: float = 0.0
    max_roll_deviation: float = 0.0
    slip_events: int = 0
    total_energy_consumed: float = 0.0
    avg_joint_temperature: float = 0.0


class DroneSimulationMetrics(BaseModel):
    hover_accuracy: int = 0
    altitude_stability: int = 0
    battery_efficiency: int = 0
    wind_compensation_events: int = 0
    max_altitude_deviation: float = 0.0
    avg_rotor_rpm: int = 0
    gps_quality_avg: int = 0


class DroneFlightPath(BaseModel):
    waypoints_completed: int = 0
    total_distance: float = 0.0
    max_speed: float = 0.0
    avg_speed: float = 0.0
