import math
from typing import List, Optional, Tuple

from robosim.models.tool_results import (
    EarlyTermination,
    ParameterRange,
    ResearchCheckpoint,
    ResearchPhase,
    ResearchPlan,
)

DEFAULT_MAX_ITERATIONS = 10
DEFAULT_SUCCESS_CRITERIA = "stability > 95%"
MINUTES_PER_ITERATION = 0.8
SUCCESS_THRESHOLD = 97

DRONE_KEYWORDS = ("drone", "flight", "hover", "quadcopter")
GAIT_KEYWORDS = ("gait", "stability")

DRONE_HYPOTHESIS = (
    "Hover instability may be caused by suboptimal altitude PID gains combined "
    "with delayed wind compensation. Hypothesis: Increasing D-gain while reducing "
    "I-gain should improve transient response without introducing oscillation."
)
SAND_GAIT_HYPOTHESIS = (
    "Sand terrain instability is caused by low friction coefficient (0.3) combined "
    "with aggressive pid_p (1.2). Hypothesis: Increasing friction to 0.5-0.7 while "
    "reducing pid_p to 0.8-1.0 should improve traction and reduce oscillation."
)
DEFAULT_HYPOTHESIS = (
    "Current configuration may have suboptimal parameter combinations. "
    "Hypothesis: Systematic exploration of PID gains and physics parameters will "
    "identify more stable operating points."
)


def _phases(*specs) -> List[ResearchPhase]:
    return [
        ResearchPhase(id=i, name=name, iterations=iterations, focus=focus)
        for i, (name, iterations, focus) in enumerate(specs, start=1)
    ]


def build_research_plan(research_goal: str) -> ResearchPlan:
    """Pick a drone, sand-gait or generic tuning plan from the goal wording."""
    goal = research_goal.lower()

    if any(k in goal for k in DRONE_KEYWORDS):
        return ResearchPlan(
            initial_hypothesis=DRONE_HYPOTHESIS,
            parameter_ranges={
                "pid_p": ParameterRange(min=0.6, max=1.2, step=0.1),
                "pid_d": ParameterRange(min=0.2, max=0.5, step=0.05),
            },
            phases=_phases(
                (
                    "Baseline Assessment",
                    2,
                    "Establish current hover metrics and identify primary instability modes",
                ),
                ("PID Exploration", 4, "Systematic sweep of altitude and attitude PID gains"),
                ("Wind Response Tuning", 3, "Optimize gust rejection with varying wind profiles"),
                ("Validation", 1, "Confirm stability under combined perturbations"),
            ),
        )

    if "sand" in goal and any(k in goal for k in GAIT_KEYWORDS):
        return ResearchPlan(
            initial_hypothesis=SAND_GAIT_HYPOTHESIS,
            parameter_ranges={
                "friction_coefficient": ParameterRange(min=0.4, max=0.8, step=0.1),
                "pid_p": ParameterRange(min=0.6, max=1.2, step=0.1),
                "pid_d": ParameterRange(min=0.03, max=0.08, step=0.01),
            },
            phases=_phases(
                ("Baseline Assessment", 2, "Establish current performance metrics on sand"),
                ("Parameter Exploration", 4, "Systematic friction/PID sweep"),
                ("Fine Tuning", 3, "Gradient descent on best candidates"),
                ("Validation", 1, "Confirm stability under perturbation"),
            ),
        )

    return ResearchPlan(
        initial_hypothesis=DEFAULT_HYPOTHESIS,
        parameter_ranges={
            "pid_p": ParameterRange(min=0.5, max=1.5, step=0.1),
            "pid_d": ParameterRange(min=0.02, max=0.1, step=0.01),
        },
        phases=_phases(
            ("Baseline Assessment", 2, "Establish current performance metrics"),
            ("Parameter Exploration", 5, "Systematic parameter sweep"),
            ("Optimization", 2, "Fine-tune best configuration"),
            ("Validation", 1, "Verify stability margins"),
        ),
    )


def estimate_duration_minutes(max_iterations: int) -> int:
    return math.ceil(max_iterations * MINUTES_PER_ITERATION)


def build_checkpoints(
    max_iterations: int, success_criteria: str
) -> List[ResearchCheckpoint]:
    return [
        ResearchCheckpoint(
            after_iteration=2,
            expected_metric="stability_score >= 70",
            action_if_failed="Widen parameter search",
        ),
        ResearchCheckpoint(
            after_iteration=math.floor(max_iterations * 0.6),
            expected_metric="stability_score >= 85",
            action_if_failed="Switch to alternative approach",
        ),
        ResearchCheckpoint(
            after_iteration=max_iterations,
            expected_metric=success_criteria,
            action_if_failed="Report best achieved with recommendations",
        ),
    ]


def early_termination() -> EarlyTermination:
    return EarlyTermination(
        success_threshold=SUCCESS_THRESHOLD,
        failure_conditions=[
            "3 consecutive critical failures",
            "motor_overheat detected",
            "system_error",
        ],
    )


def resolve_limits(
    max_iterations: Optional[int], success_criteria: Optional[str]
) -> Tuple[int, str]:
    """Fall back to the defaults for missing or non-positive values."""
    iterations = max_iterations if max_iterations and max_iterations > 0 else DEFAULT_MAX_ITERATIONS
    criteria = success_criteria or DEFAULT_SUCCESS_CRITERIA
    return iterations, criteria
