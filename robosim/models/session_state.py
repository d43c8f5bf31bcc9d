from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from robosim.models.physics import MotorParams, PhysicsConfig, default_motor_map
from robosim.models.run import DroneSimulationRun, SimulationRun

AnyRun = Union[SimulationRun, DroneSimulationRun]


@dataclass
class SessionState:
    session_id: str
    created_at: float
    last_accessed: float
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    motors: Dict[str, MotorParams] = field(default_factory=default_motor_map)
    runs: List[AnyRun] = field(default_factory=list)
    current_run: Optional[AnyRun] = None
