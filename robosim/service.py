import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from loguru import logger
from pydantic import ValidationError

from robosim.config import Config
from robosim.core.drone_failure_injector import (
    generate_drone_simulation_events,
    should_drone_simulation_fail,
)
from robosim.core.failure_injector import (
    generate_simulation_events,
    should_simulation_fail,
)
from robosim.core.knowledge_base import search_knowledge_base
from robosim.core.research_planner import (
    build_checkpoints,
    build_research_plan,
    early_termination,
    estimate_duration_minutes,
    resolve_limits,
)
from robosim.core.session_store import InMemoryStateStore
from robosim.core.state_machine import StateMachine
from robosim.core.video_analyzer import (
    CANNED_FLIGHT_EVENTS,
    analyze_flight,
    analyze_ground_run,
    no_run_analysis,
)
from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.error_code import ErrorCode
from robosim.enums.terrain_type import TerrainType
from robosim.enums.tool_name import ToolName
from robosim.exceptions.tool_exceptions import (
    MissingParamException,
    MissingSessionException,
    MissingToolException,
    ToolException,
    UnknownToolException,
)
from robosim.models.events import DroneSimulationEvent, SimulationEvent
from robosim.models.physics import DronePhysicsConfig, PhysicsConfig
from robosim.models.run import DroneSimulationRun, SimulationRun
from robosim.models.tool_args import (
    AnalyzeVideoArgs,
    ConfigurePhysicsArgs,
    RunSimulationArgs,
    SearchKnowledgeBaseArgs,
    StartResearchArgs,
    UpdateMotorArgs,
)
from robosim.models.tool_results import (
    AnalyzeVideoResult,
    AutonomousResearchResult,
    ConfigurePhysicsResult,
    DroneRunSimulationResult,
    RunSimulationResult,
    SearchKnowledgeBaseResult,
    ToolError,
    ToolExecutionResult,
    UpdateMotorResult,
)
from robosim.telemetry.analyzer import (
    analyze_drone_flight_path,
    analyze_drone_telemetry,
    analyze_telemetry,
    generate_drone_telemetry_summary,
    generate_telemetry_summary,
)
from robosim.telemetry.drone_generator import generate_drone_telemetry
from robosim.telemetry.ground_generator import generate_telemetry
from robosim.utils.delay import ComputeDelay
from robosim.utils.ids import generate_id
from robosim.utils.noise import NoiseSource, clamp

AERIAL_ROBOT_TYPES = ("drone", "uav", "quadcopter", "aerial")
FLIGHT_RUN_PREFIX = "flight_"

DEFAULT_GROUND_DURATION_S = 5.0
DEFAULT_DRONE_DURATION_S = 30.0
DEFAULT_ROBOT_TYPE = "hexapod"
MAX_EVENT_SUMMARIES = 3

CONFIGURE_DELAY_MS = (300, 700)
MOTOR_DELAY_MS = (200, 400)
GROUND_RUN_DELAY_MS = (2000, 4500)
DRONE_RUN_DELAY_MS = (2000, 4000)
VIDEO_DELAY_MS = (1500, 2800)
SEARCH_DELAY_MS = (500, 1200)
RESEARCH_DELAY_MS = (300, 600)


def is_aerial(robot_type: Optional[str]) -> bool:
    key = (robot_type or "").lower()
    return any(kind in key for kind in AERIAL_ROBOT_TYPES)


def summarize_events(
    events: List[Union[SimulationEvent, DroneSimulationEvent]],
) -> Optional[List[str]]:
    if not events:
        return None
    return [
        f"[{e.severity.value.upper()}] {e.message} at t={e.timestamp / 1000:.1f}s"
        for e in events[:MAX_EVENT_SUMMARIES]
    ]


class SimulationService:
    """
    Tool dispatcher for the simulation backend.

    Every tool call goes through ``execute``, which serializes calls per session,
    waits out an artificial compute delay and wraps the outcome in a
    ``ToolExecutionResult`` envelope. Failures never escape ``execute``.
    """

    def __init__(
        self,
        config: Config,
        store: InMemoryStateStore,
        noise: NoiseSource,
        delay: ComputeDelay,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.store = store
        self.noise = noise
        self.delay = delay
        self.clock = clock
        self.__tools: Dict[ToolName, Callable[[str, Dict[str, Any]], Awaitable[Any]]] = {
            ToolName.CONFIGURE_PHYSICS: self.configure_physics,
            ToolName.UPDATE_MOTOR_PARAMS: self.update_motor_params,
            ToolName.RUN_SIMULATION: self.run_simulation,
            ToolName.ANALYZE_SIMULATION_VIDEO: self.analyze_simulation_video,
            ToolName.SEARCH_KNOWLEDGE_BASE: self.search_knowledge_base,
            ToolName.START_AUTONOMOUS_RESEARCH: self.start_autonomous_research,
        }

    @property
    def drone_video_url(self) -> str:
        return f"{self.config.video_base_url}/uav_scenes.mp4"

    def video_url_for(self, robot_type: str, run_id: str) -> str:
        if is_aerial(robot_type):
            return self.drone_video_url
        return f"https://picsum.photos/800/450?grayscale&random={run_id}"

    async def execute(
        self, session_id: str, tool_name: str, args: Optional[Dict[str, Any]] = None
    ) -> ToolExecutionResult:
        started = self.clock()
        args = args or {}
        logger.info(f"Executing {tool_name} for session {session_id}")

        try:
            if not session_id:
                raise MissingSessionException()
            if not tool_name:
                raise MissingToolException()

            tool = ToolName.get(tool_name)
            if tool is None:
                raise UnknownToolException(tool_name)

            async with self.store.lock(session_id):
                result = await self.__tools[tool](session_id, args)

            return ToolExecutionResult(
                success=True, result=result, execution_time_ms=self._elapsed_ms(started)
            )

        except ToolException as e:
            logger.warning(f"{tool_name} rejected: {e.message}")
            error = ToolError(
                code=e.code, message=e.message, recoverable=e.recoverable, details=e.details
            )
        except ValidationError as e:
            logger.warning(f"{tool_name} received invalid arguments: {e}")
            error = ToolError(
                code=ErrorCode.EXECUTION_ERROR,
                message=f"Invalid arguments for {tool_name}",
                recoverable=True,
                details={
                    "fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]
                },
            )
        except Exception as e:
            logger.error(f"Error executing {tool_name}: {e}")
            error = ToolError(
                code=ErrorCode.INTERNAL_ERROR, message=str(e), recoverable=False
            )

        return ToolExecutionResult(
            success=False, error=error, execution_time_ms=self._elapsed_ms(started)
        )

    def _elapsed_ms(self, started: float) -> int:
        return max(0, round((self.clock() - started) * 1000))

    async def configure_physics(
        self, session_id: str, args: Dict[str, Any]
    ) -> ConfigurePhysicsResult:
        params = ConfigurePhysicsArgs.model_validate(args)
        await self.delay(*CONFIGURE_DELAY_MS)

        warnings: List[str] = []
        changes: Dict[str, Any] = {}

        if params.gravity is not None:
            changes["gravity"] = params.gravity

        if params.friction_coefficient is not None:
            friction = clamp(params.friction_coefficient, 0.0, 1.0)
            if friction != params.friction_coefficient:
                warnings.append("friction_coefficient clamped to valid range [0, 1]")
            changes["friction_coefficient"] = friction

        if params.terrain_roughness is not None:
            roughness = clamp(params.terrain_roughness, 0.0, 1.0)
            if roughness != params.terrain_roughness:
                warnings.append("terrain_roughness clamped to valid range [0, 1]")
            changes["terrain_roughness"] = roughness

        if params.terrain_type:
            terrain = TerrainType.parse(params.terrain_type)
            if terrain is None:
                terrain = TerrainType.CONCRETE
                warnings.append("Unknown terrain type, defaulting to concrete")
            changes["terrain_type"] = terrain

        for warning in warnings:
            logger.warning(f"configure_physics for {session_id}: {warning}")

        physics = self.store.update_physics(session_id, PhysicsConfig(**changes))

        return ConfigurePhysicsResult(
            status="partial" if warnings else "success",
            message=(
                f"Physics configuration updated. Terrain={physics.terrain_type.value}, "
                f"Friction={physics.friction_coefficient}, Gravity={physics.gravity}m/s²"
            ),
            applied_config=physics,
            warnings=warnings or None,
        )

    async def update_motor_params(
        self, session_id: str, args: Dict[str, Any]
    ) -> UpdateMotorResult:
        params = UpdateMotorArgs.model_validate(args)
        await self.delay(*MOTOR_DELAY_MS)

        if not params.joint_id:
            raise MissingParamException("joint_id")

        motor = self.store.update_motor(
            session_id,
            params.joint_id,
            torque_limit=params.torque_limit,
            pid_p=params.pid_p,
            pid_i=params.pid_i,
            pid_d=params.pid_d,
            max_velocity=params.max_velocity,
        )

        return UpdateMotorResult(
            status="success",
            message=(
                f"Motor {params.joint_id} parameters updated. P={motor.pid_p}, "
                f"I={motor.pid_i}, D={motor.pid_d}, Torque={motor.torque_limit}Nm"
            ),
            joint_id=params.joint_id,
            applied_params=motor,
        )

    async def run_simulation(
        self, session_id: str, args: Dict[str, Any]
    ) -> Union[RunSimulationResult, DroneRunSimulationResult]:
        params = RunSimulationArgs.model_validate(args)
        if is_aerial(params.robot_type):
            return await self.run_drone_simulation(session_id, params)

        started = self.clock()
        await self.delay(*GROUND_RUN_DELAY_MS)

        session = self.store.get_or_create(session_id)
        physics = session.physics.model_copy(deep=True)
        motors = {joint: m.model_copy(deep=True) for joint, m in session.motors.items()}
        duration = params.duration_seconds or DEFAULT_GROUND_DURATION_S
        run_id = generate_id("sim", started, self.noise)

        lifecycle = StateMachine()
        lifecycle.trigger("start")

        telemetry = generate_telemetry(
            duration, physics, motors, self.config.ground_sample_rate_hz, self.noise
        )
        metrics = analyze_telemetry(telemetry)
        events = generate_simulation_events(telemetry, physics, self.noise)
        lifecycle.trigger("fail" if should_simulation_fail(events) else "complete")

        video_url = self.video_url_for(params.robot_type or DEFAULT_ROBOT_TYPE, run_id)
        run = SimulationRun(
            run_id=run_id,
            status=lifecycle.get_state(),
            started_at=started,
            completed_at=self.clock(),
            duration_requested=duration,
            duration_actual=round(duration + self.noise.uniform() * 0.5, 3),
            physics_config=physics,
            motor_configs=motors,
            telemetry=telemetry,
            events=events,
            metrics=metrics,
            video_url=video_url,
        )
        self.store.add_run(session_id, run)
        logger.info(
            f"Run {run_id} {run.status.value}: {len(telemetry)} frames, {len(events)} events"
        )

        return RunSimulationResult(
            run_id=run_id,
            status=run.status.value,
            telemetry_summary=generate_telemetry_summary(telemetry, metrics),
            video_url=video_url,
            duration_actual=run.duration_actual,
            metrics=metrics,
            events_summary=summarize_events(events),
        )

    async def run_drone_simulation(
        self, session_id: str, params: RunSimulationArgs
    ) -> DroneRunSimulationResult:
        started = self.clock()
        await self.delay(*DRONE_RUN_DELAY_MS)

        defaults = DronePhysicsConfig()
        airspace = defaults.airspace_condition
        if params.airspace_condition:
            airspace = AirspaceCondition.parse(params.airspace_condition)
            if airspace is None:
                logger.warning(
                    f"Unknown airspace condition {params.airspace_condition}, using calm"
                )
                airspace = AirspaceCondition.CALM

        physics = defaults.model_copy(
            update={
                "wind_speed": (
                    params.wind_speed if params.wind_speed is not None else defaults.wind_speed
                ),
                "airspace_condition": airspace,
            }
        )
        duration = params.duration_seconds or DEFAULT_DRONE_DURATION_S
        run_id = generate_id("flight", started, self.noise)

        lifecycle = StateMachine()
        lifecycle.trigger("start")

        telemetry = generate_drone_telemetry(
            duration, physics, self.config.drone_sample_rate_hz, self.noise
        )
        metrics = analyze_drone_telemetry(telemetry)
        flight_path = analyze_drone_flight_path(telemetry)
        events = generate_drone_simulation_events(telemetry, physics, self.noise)
        lifecycle.trigger("fail" if should_drone_simulation_fail(events) else "complete")

        run = DroneSimulationRun(
            run_id=run_id,
            status=lifecycle.get_state(),
            started_at=started,
            completed_at=self.clock(),
            duration_requested=duration,
            duration_actual=round(duration + self.noise.uniform() * 0.5, 3),
            physics_config=physics,
            telemetry=telemetry,
            events=events,
            metrics=metrics,
            flight_path=flight_path,
            video_url=self.drone_video_url,
        )
        self.store.add_run(session_id, run)
        logger.info(
            f"Flight {run_id} {run.status.value}: {len(telemetry)} frames, {len(events)} events"
        )

        return DroneRunSimulationResult(
            run_id=run_id,
            status=run.status.value,
            telemetry_summary=generate_drone_telemetry_summary(
                telemetry, metrics, flight_path
            ),
            video_url=self.drone_video_url,
            duration_actual=run.duration_actual,
            metrics=metrics,
            flight_path=flight_path,
            events_summary=summarize_events(events),
        )

    async def analyze_simulation_video(
        self, session_id: str, args: Dict[str, Any]
    ) -> AnalyzeVideoResult:
        params = AnalyzeVideoArgs.model_validate(args)
        await self.delay(*VIDEO_DELAY_MS)

        run_id = params.run_id or ""
        run = self.store.get_run(session_id, run_id) if run_id else None
        aerial = run_id.startswith(FLIGHT_RUN_PREFIX) or is_aerial(params.robot_type)

        if run is None and not aerial:
            run = self.store.get_latest_run(session_id)

        if isinstance(run, DroneSimulationRun):
            return analyze_flight(
                run_id,
                run.events,
                run.physics_config,
                self.noise,
                self.drone_video_url,
                params.focus_area,
                run=run,
            )
        if aerial:
            # flight unknown to this process
            return analyze_flight(
                run_id,
                CANNED_FLIGHT_EVENTS,
                DronePhysicsConfig(),
                self.noise,
                self.drone_video_url,
                params.focus_area,
            )
        if run is None:
            return no_run_analysis(run_id)

        return analyze_ground_run(
            run_id, run, run.physics_config, self.noise, params.focus_area
        )

    async def search_knowledge_base(
        self, session_id: str, args: Dict[str, Any]
    ) -> SearchKnowledgeBaseResult:
        params = SearchKnowledgeBaseArgs.model_validate(args)
        await self.delay(*SEARCH_DELAY_MS)

        if params.query is None:
            raise MissingParamException("query")

        results = search_knowledge_base(params.query)
        logger.debug(f"Knowledge base query '{params.query}' matched {len(results)}")

        return SearchKnowledgeBaseResult(
            query=params.query, results=results, total_matches=len(results)
        )

    async def start_autonomous_research(
        self, session_id: str, args: Dict[str, Any]
    ) -> AutonomousResearchResult:
        params = StartResearchArgs.model_validate(args)
        await self.delay(*RESEARCH_DELAY_MS)

        if not params.research_goal:
            raise MissingParamException("research_goal")

        max_iterations, success_criteria = resolve_limits(
            params.max_iterations, params.success_criteria
        )
        research_id = generate_id("research", self.clock(), self.noise)
        logger.info(f"Research {research_id} planned for session {session_id}")

        return AutonomousResearchResult(
            status="initiated",
            research_id=research_id,
            message=(
                f"Autonomous research initiated: {params.research_goal}. System will "
                f"execute up to {max_iterations} simulation cycles with adaptive "
                f"parameter tuning."
            ),
            max_iterations=max_iterations,
            success_criteria=success_criteria,
            estimated_duration_minutes=estimate_duration_minutes(max_iterations),
            research_plan=build_research_plan(params.research_goal),
            checkpoints=build_checkpoints(max_iterations, success_criteria),
            early_termination=early_termination(),
        )
