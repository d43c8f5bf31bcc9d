import os
import tempfile
import unittest
from unittest.mock import patch

from robosim.config import Config, DEFAULT_VIDEO_BASE_URL
from robosim.exceptions.config_exceptions import ConfigTypeException, ConfigValueException


class ConfigTest(unittest.TestCase):

    @patch.dict("os.environ", {}, clear=True)
    def test_defaults(self):
        config = Config()

        assert config.verbose is False
        assert config.session_ttl_seconds == 1800
        assert config.session_cleanup_interval_seconds == 300
        assert config.max_runs_per_session == 10
        assert config.ground_sample_rate_hz == 50
        assert config.drone_sample_rate_hz == 50
        assert config.simulated_delay_scale == 1.0
        assert config.random_seed is None
        assert config.video_base_url == DEFAULT_VIDEO_BASE_URL

    @patch.dict(
        "os.environ",
        {
            "VERBOSE": "true",
            "SESSION_TTL_SECONDS": "60",
            "MAX_RUNS_PER_SESSION": "3",
            "SIMULATED_DELAY_SCALE": "0",
            "RANDOM_SEED": "42",
            "VIDEO_BASE_URL": "https://videos.example.com/",
        },
        clear=True,
    )
    def test_config_load_success(self):
        config = Config()

        assert config.verbose is True
        assert config.session_ttl_seconds == 60
        assert config.max_runs_per_session == 3
        assert config.simulated_delay_scale == 0.0
        assert config.random_seed == 42
        assert config.video_base_url == "https://videos.example.com"

    def test_load_from_env_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, ".config.env")
            with open(path, "w") as f:
                f.write("GROUND_SAMPLE_RATE_HZ=100\nDRONE_SAMPLE_RATE_HZ=25\n")

            config = Config(path)

        assert config.ground_sample_rate_hz == 100
        assert config.drone_sample_rate_hz == 25

    @patch.dict("os.environ", {"SESSION_TTL_SECONDS": "soon"}, clear=True)
    def test_invalid_integer(self):
        with self.assertRaises(ConfigTypeException) as ctx:
            Config()

        assert "must be integer" in str(ctx.exception)

    @patch.dict("os.environ", {"SIMULATED_DELAY_SCALE": "fast"}, clear=True)
    def test_invalid_float(self):
        with self.assertRaises(ConfigTypeException) as ctx:
            Config()

        assert "SIMULATED_DELAY_SCALE" in str(ctx.exception)

    @patch.dict("os.environ", {"VERBOSE": "maybe"}, clear=True)
    def test_invalid_bool(self):
        with self.assertRaises(ConfigTypeException):
            Config()

    @patch.dict("os.environ", {"GROUND_SAMPLE_RATE_HZ": "0"}, clear=True)
    def test_non_positive_rate(self):
        with self.assertRaises(ConfigValueException) as ctx:
            Config()

        assert "GROUND_SAMPLE_RATE_HZ" in str(ctx.exception)

    @patch.dict("os.environ", {"SIMULATED_DELAY_SCALE": "-1"}, clear=True)
    def test_negative_delay_scale(self):
        with self.assertRaises(ConfigValueException):
            Config()


if __name__ == "__main__":
    unittest.main()
