"""
Keyword search over the archive of past experiments.

Scores are additive: a phrase hit in the experiment name, outcome or any
finding, then per-word hits for words of three letters or more, then topic
bonuses when the query and experiment share a domain keyword. Scores are
capped at 1.0 and rounded to two decimals.
"""

from typing import List, Sequence, Tuple

from robosim.models.tool_results import KnowledgeEntry, KnowledgeMatch

MAX_RESULTS = 5
MIN_WORD_LENGTH = 3

KNOWLEDGE_BASE: List[KnowledgeEntry] = [
    KnowledgeEntry(
        date="2023-10-01",
        experiment="Sand Gait V1",
        outcome="Failed - motor overheating after 45s",
        key_findings=["friction_coefficient too low (0.3)", "pid_p too aggressive"],
    ),
    KnowledgeEntry(
        date="2023-10-15",
        experiment="Sand Gait V2",
        outcome="Partial success - stability issues",
        key_findings=["Increased friction to 0.5", "Slip events at high speed"],
    ),
    KnowledgeEntry(
        date="2023-11-01",
        experiment="Sand Gait V3",
        outcome="Success - low speed operation",
        key_findings=["friction_coefficient 0.6 optimal", "Reduced gait frequency"],
    ),
    KnowledgeEntry(
        date="2023-11-15",
        experiment="Concrete Walking",
        outcome="Success - stable at all speeds",
        key_findings=["Default parameters work well", "Sharp impacts on joints"],
    ),
    KnowledgeEntry(
        date="2023-12-01",
        experiment="Grass Terrain Test",
        outcome="Success with minor slip",
        key_findings=[
            "Moderate friction required (0.5)",
            "Dew conditions increase slip",
        ],
    ),
    KnowledgeEntry(
        date="2024-01-10",
        experiment="PID Optimization Study",
        outcome="Completed",
        key_findings=["pid_p=0.8 reduces oscillation", "pid_d critical for sand"],
    ),
    KnowledgeEntry(
        date="2024-02-01",
        experiment="Thermal Management Test",
        outcome="Success",
        key_findings=["Max safe temp 55°C", "Throttling at 50°C recommended"],
    ),
    KnowledgeEntry(
        date="2024-03-01",
        experiment="Quad Hover Stability",
        outcome="Success",
        key_findings=[
            "Altitude PID gains: P=0.8, I=0.1, D=0.3 optimal",
            "Position hold accuracy within 0.3m",
            "Battery consumption 12% per 5min hover",
        ],
    ),
    KnowledgeEntry(
        date="2024-03-15",
        experiment="Wind Resistance Test - Gusty Conditions",
        outcome="Partial success - stable up to 8m/s gusts",
        key_findings=[
            "Roll PID gains critical for gust rejection",
            "Altitude hold degraded above 6m/s sustained wind",
            "Battery drain increased 23% in windy conditions",
        ],
    ),
    KnowledgeEntry(
        date="2024-04-01",
        experiment="Autonomous Waypoint Navigation",
        outcome="Success",
        key_findings=[
            "Path following accuracy within 0.5m",
            "Smooth transitions between waypoints",
            "Optimal cruise speed 4-6m/s for efficiency",
        ],
    ),
    KnowledgeEntry(
        date="2024-04-10",
        experiment="Urban Canyon Navigation",
        outcome="Success with GPS backup",
        key_findings=[
            "Visual odometry essential in GPS-denied areas",
            "Wind tunneling effect between buildings",
            "Signal reflection caused control latency",
        ],
    ),
    KnowledgeEntry(
        date="2024-05-01",
        experiment="Low Battery RTH Test",
        outcome="Success",
        key_findings=[
            "RTH triggered reliably at 15% battery",
            "Safe landing with 8% remaining",
            "Altitude reduction improves range by 15%",
        ],
    ),
]

# (query keyword, experiment keywords that earn the bonus, bonus)
TOPIC_BONUSES: List[Tuple[Tuple[str, ...], Tuple[str, ...], float]] = [
    (("sand",), ("sand",), 0.4),
    (("concrete",), ("concrete",), 0.4),
    (("grass",), ("grass",), 0.4),
    (("pid",), ("pid",), 0.4),
    (("thermal",), ("thermal",), 0.4),
    (("hover",), ("hover",), 0.5),
    (("quadcopter", "quad"), ("quad",), 0.5),
    (
        ("drone", "flight", "uav"),
        ("hover", "waypoint", "wind", "urban", "rth", "battery"),
        0.4,
    ),
    (("stability",), ("stability", "hover"), 0.4),
    (("gps",), ("urban", "waypoint"), 0.4),
    (("battery",), ("battery", "rth"), 0.5),
    (("navigation",), ("waypoint", "navigation", "urban"), 0.5),
]
WIND_BONUS = 0.5


def score_entry(entry: KnowledgeEntry, query: str) -> float:
    query = query.lower()
    experiment = entry.experiment.lower()
    outcome = entry.outcome.lower()
    findings = [finding.lower() for finding in entry.key_findings]
    score = 0.0

    if query in experiment:
        score += 0.5
    if query in outcome:
        score += 0.3
    score += 0.2 * sum(1 for finding in findings if query in finding)

    for word in query.split():
        if len(word) < MIN_WORD_LENGTH:
            continue
        if word in experiment:
            score += 0.15
        if word in outcome:
            score += 0.1
        score += 0.1 * sum(1 for finding in findings if word in finding)

    for query_keys, experiment_keys, bonus in TOPIC_BONUSES:
        if any(k in query for k in query_keys) and any(
            k in experiment for k in experiment_keys
        ):
            score += bonus

    # wind also counts when only a finding mentions it
    if "wind" in query and (
        "wind" in experiment or any("wind" in finding for finding in findings)
    ):
        score += WIND_BONUS

    return round(min(1.0, score), 2)


def search_knowledge_base(
    query: str,
    entries: Sequence[KnowledgeEntry] = KNOWLEDGE_BASE,
    limit: int = MAX_RESULTS,
) -> List[KnowledgeMatch]:
    matches = [
        KnowledgeMatch(**entry.model_dump(), relevance_score=score_entry(entry, query))
        for entry in entries
    ]
    matches = [m for m in matches if m.relevance_score > 0]
    matches.sort(key=lambda m: m.relevance_score, reverse=True)
    return matches[:limit]
