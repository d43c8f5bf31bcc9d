from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from robosim.enums.error_code import ErrorCode
from robosim.models.metrics import (
    DroneFlightPath,
    DroneSimulationMetrics,
    SimulationMetrics,
)
from robosim.models.physics import MotorParams, PhysicsConfig


class ToolError(BaseModel):
    code: ErrorCode
    message: str
    recoverable: bool
    details: Optional[Dict[str, Any]] = None


class ToolExecutionResult(BaseModel):
    success: bool
    result: Optional[Any] = None
    error: Optional[ToolError] = None
    execution_time_ms: int = Field(serialization_alias="executionTimeMs")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ConfigurePhysicsResult(BaseModel):
    status: Literal["success", "partial", "failed"]
    message: str
    applied_config: PhysicsConfig
    warnings: Optional[List[str]] = None


class UpdateMotorResult(BaseModel):
    status: Literal["success", "failed"]
    message: str
    joint_id: str
    applied_params: MotorParams


class RunSimulationResult(BaseModel):
    run_id: str
    status: Literal["completed", "failed", "interrupted"]
    telemetry_summary: str
    video_url: str
    duration_actual: float
    metrics: SimulationMetrics
    events_summary: Optional[List[str]] = None


class DroneRunSimulationResult(BaseModel):
    run_id: str
    status: Literal["completed", "failed", "interrupted"]
    telemetry_summary: str
    video_url: str
    duration_actual: float
    metrics: DroneSimulationMetrics
    flight_path: DroneFlightPath
    events_summary: Optional[List[str]] = None


class FrameAnnotation(BaseModel):
    frame: int
    annotation: str
    confidence: float


class AnalyzeVideoResult(BaseModel):
    analysis: str
    findings: List[str]
    recommendations: List[str]
    confidence: float
    video_url: Optional[str] = None
    frame_annotations: Optional[List[FrameAnnotation]] = None


class KnowledgeEntry(BaseModel):
    date: str
    experiment: str
    outcome: str
    key_findings: List[str] = Field(default_factory=list)


class KnowledgeMatch(KnowledgeEntry):
    relevance_score: float


class SearchKnowledgeBaseResult(BaseModel):
    query: str
    results: List[KnowledgeMatch]
    total_matches: int


class ParameterRange(BaseModel):
    min: float
    max: float
    step: float


class ResearchPhase(BaseModel):
    id: int
    name: str
    iterations: int
    focus: str


class ResearchPlan(BaseModel):
    phases: List[ResearchPhase]
    initial_hypothesis: str
    parameter_ranges: Dict[str, ParameterRange]


class ResearchCheckpoint(BaseModel):
    after_iteration: int
    expected_metric: str
    action_if_failed: str


class EarlyTermination(BaseModel):
    success_threshold: float
    failure_conditions: List[str]


class AutonomousResearchResult(BaseModel):
    status: Literal["initiated", "failed"]
    research_id: str
    message: str
    max_iterations: int
    success_criteria: str
    estimated_duration_minutes: int
    research_plan: ResearchPlan
    checkpoints: List[ResearchCheckpoint]
    early_termination: EarlyTermination
