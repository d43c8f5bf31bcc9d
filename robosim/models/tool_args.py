from typing import Optional

from pydantic import BaseModel, ConfigDict


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ConfigurePhysicsArgs(ToolArgs):
    gravity: Optional[float] = None
    friction_coefficient: Optional[float] = None
    terrain_type: Optional[str] = None
    terrain_roughness: Optional[float] = None


class UpdateMotorArgs(ToolArgs):
    joint_id: Optional[str] = None
    torque_limit: Optional[float] = None
    pid_p: Optional[float] = None
    pid_i: Optional[float] = None
    pid_d: Optional[float] = None
    max_velocity: Optional[float] = None


class RunSimulationArgs(ToolArgs):
    duration_seconds: Optional[float] = None
    robot_type: Optional[str] = None
    wind_speed: Optional[float] = None
    airspace_condition: Optional[str] = None


class AnalyzeVideoArgs(ToolArgs):
    run_id: Optional[str] = None
    focus_area: Optional[str] = None
    robot_type: Optional[str] = None


class SearchKnowledgeBaseArgs(ToolArgs):
    query: Optional[str] = None


class StartResearchArgs(ToolArgs):
    research_goal: Optional[str] = None
    max_iterations: Optional[int] = None
    success_criteria: Optional[str] = None
