from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from robosim.enums.event_type import DroneEventType, GroundEventType
from robosim.enums.severity import Severity


class SimulationEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: float
    type: GroundEventType
    severity: Severity
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)


class DroneSimulationEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: float
    type: DroneEventType
    severity: Severity
    message: str
    data: Dict[str, Any] = Field(default_factory=dict)
