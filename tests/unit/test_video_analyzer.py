from robosim.core.video_analyzer import (
    CANNED_FLIGHT_EVENTS,
    analyze_flight,
    analyze_ground_run,
    frame_number,
    no_run_analysis,
)
from robosim.enums.event_type import GroundEventType
from robosim.enums.run_status import RunStatus
from robosim.enums.severity import Severity
from robosim.models.events import SimulationEvent
from robosim.models.metrics import SimulationMetrics
from robosim.models.physics import DronePhysicsConfig, PhysicsConfig
from robosim.models.run import SimulationRun
from robosim.utils.noise import NoiseSource

VIDEO = "https://videos.example.com/uav_scenes.mp4"


def ground_run(events=None, stability=88) -> SimulationRun:
    return SimulationRun(
        run_id="sim_1_abcd",
        status=RunStatus.COMPLETED,
        started_at=0,
        duration_requested=5,
        duration_actual=5.25,
        physics_config=PhysicsConfig(),
        motor_configs={},
        events=events or [],
        metrics=SimulationMetrics(stability_score=stability),
        video_url="https://picsum.photos/800/450?grayscale&random=sim_1_abcd",
    )


def test_frame_number():
    assert frame_number(0) == 0
    assert frame_number(1519.9) == 75


def test_no_run():
    result = no_run_analysis("sim_x")

    assert result.confidence == 0.5
    assert result.findings == ["No telemetry data available for analysis"]


def test_quiet_ground_run():
    result = analyze_ground_run("sim_1_abcd", ground_run(), PhysicsConfig(), NoiseSource(seed=1))

    assert result.findings == [
        "Gait cycle appears nominal",
        "Average stability maintained at 88%",
    ]
    assert result.recommendations[0] == "Current parameters appear optimal for this terrain"
    assert result.frame_annotations is None
    assert 0.88 <= result.confidence <= 0.98
    assert result.analysis.endswith("Analyzed 0 frames over 5.25s.")


def test_ground_run_with_slip():
    events = [
        SimulationEvent(
            timestamp=2000,
            type=GroundEventType.SLIP,
            severity=Severity.WARNING,
            message="Slippage detected on leg_3 tarsus",
            data={"leg": "leg_3", "force": 7.5},
        )
    ]

    result = analyze_ground_run(
        "sim_1_abcd", ground_run(events), PhysicsConfig(), NoiseSource(seed=1), "rear legs"
    )

    assert result.findings[0] == "Frame 100: Slippage detected on leg_3 tarsus (confidence: 0.94)"
    assert result.findings[-1].startswith("Detailed analysis of rear legs")
    assert result.frame_annotations[0].frame == 100
    assert 0.85 <= result.frame_annotations[0].confidence <= 0.95
    assert len(result.recommendations) <= 3


def test_canned_flight_analysis():
    result = analyze_flight(
        "flight_1_abcd", CANNED_FLIGHT_EVENTS, DronePhysicsConfig(), NoiseSource(seed=2), VIDEO
    )

    assert result.findings[0] == "Frame 620: Wind gust detected - 15° roll compensation initiated"
    assert len(result.findings) == 3
    assert len(result.recommendations) == 4
    assert result.analysis.endswith("Analyzed 2250 frames over 45.2s.")
    assert result.video_url == VIDEO


def test_quiet_flight_adds_landing_finding():
    result = analyze_flight(
        "flight_1_abcd", [], DronePhysicsConfig(), NoiseSource(seed=2), VIDEO, "landing"
    )

    assert result.findings[0] == "Frame 2100: Descent rate exceeded 2m/s during landing approach"
    assert result.frame_annotations[0].confidence == 0.92
    assert result.recommendations[0] == "Current flight parameters appear nominal"
    assert result.analysis.endswith("Analyzed 1500 frames over 30.0s.")
