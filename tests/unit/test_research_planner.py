import unittest

from robosim.core.research_planner import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_SUCCESS_CRITERIA,
    build_checkpoints,
    build_research_plan,
    early_termination,
    estimate_duration_minutes,
    resolve_limits,
)


class ResearchPlannerTest(unittest.TestCase):
    def test_drone_goal(self):
        plan = build_research_plan("Stabilize quadcopter hover in wind")

        self.assertEqual(
            [p.name for p in plan.phases],
            ["Baseline Assessment", "PID Exploration", "Wind Response Tuning", "Validation"],
        )
        self.assertEqual(set(plan.parameter_ranges), {"pid_p", "pid_d"})
        self.assertEqual(plan.parameter_ranges["pid_d"].step, 0.05)

    def test_drone_keywords_win_over_sand(self):
        plan = build_research_plan("flight stability over sand dunes")

        self.assertIn("Hover instability", plan.initial_hypothesis)

    def test_sand_gait_goal(self):
        plan = build_research_plan("Optimize gait on SAND")

        self.assertIn("friction_coefficient", plan.parameter_ranges)
        self.assertEqual(plan.parameter_ranges["friction_coefficient"].max, 0.8)
        self.assertEqual(sum(p.iterations for p in plan.phases), 10)

    def test_sand_without_gait_falls_back_to_default(self):
        plan = build_research_plan("sand traction")

        self.assertEqual(plan.phases[1].iterations, 5)
        self.assertEqual(plan.parameter_ranges["pid_p"].min, 0.5)

    def test_phase_ids_are_sequential(self):
        plan = build_research_plan("anything")

        self.assertEqual([p.id for p in plan.phases], [1, 2, 3, 4])

    def test_duration_estimate(self):
        self.assertEqual(estimate_duration_minutes(10), 8)
        self.assertEqual(estimate_duration_minutes(7), 6)

    def test_checkpoints(self):
        checkpoints = build_checkpoints(7, "stability > 90%")

        self.assertEqual([c.after_iteration for c in checkpoints], [2, 4, 7])
        self.assertEqual(checkpoints[-1].expected_metric, "stability > 90%")

    def test_early_termination(self):
        termination = early_termination()

        self.assertEqual(termination.success_threshold, 97)
        self.assertEqual(len(termination.failure_conditions), 3)

    def test_limits(self):
        self.assertEqual(
            resolve_limits(None, None), (DEFAULT_MAX_ITERATIONS, DEFAULT_SUCCESS_CRITERIA)
        )
        self.assertEqual(resolve_limits(0, ""), (10, "stability > 95%"))
        self.assertEqual(resolve_limits(4, "x"), (4, "x"))


if __name__ == "__main__":
    unittest.main()
