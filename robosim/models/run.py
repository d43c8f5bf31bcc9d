from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from robosim.enums.run_status import RunStatus
from robosim.models.events import DroneSimulationEvent, SimulationEvent
from robosim.models.metrics import (
    DroneFlightPath,
    DroneSimulationMetrics,
    SimulationMetrics,
)
from robosim.models.physics import DronePhysicsConfig, MotorParams, PhysicsConfig
from robosim.models.telemetry_data import DroneTelemetryFrame, TelemetryFrame


class SimulationRun(BaseModel):
    run_id: str
    status: RunStatus
    started_at: float
    completed_at: Optional[float] = None
    duration_requested: float
    duration_actual: Optional[float] = None
    physics_config: PhysicsConfig
    motor_configs: Dict[str, MotorParams]
    telemetry: List[TelemetryFrame] = Field(default_factory=list)
    events: List[SimulationEvent] = Field(default_factory=list)
    metrics: Optional[SimulationMetrics] = None
    video_url: Optional[str] = None


class DroneSimulationRun(BaseModel):
    run_id: str
    status: RunStatus
    started_at: float
    completed_at: Optional[float] = None
    duration_requested: float
    duration_actual: Optional[float] = None
    physics_config: DronePhysicsConfig
    telemetry: List[DroneTelemetryFrame] = Field(default_factory=list)
    events: List[DroneSimulationEvent] = Field(default_factory=list)
    metrics: Optional[DroneSimulationMetrics] = None
    flight_path: Optional[DroneFlightPath] = None
    video_url: Optional[str] = None
