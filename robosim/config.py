import os
from os import _Environ
from typing import Optional

from dotenv import dotenv_values

from robosim.exceptions.config_exceptions import ConfigTypeException, ConfigValueException

DEFAULT_VIDEO_BASE_URL = "https://pub-d81bd376745a4ee1b9073461f2c2651d.r2.dev"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class Config:
    def __init__(self, config_file: Optional[str] = None):
        if config_file:
            raw: dict[str, str | None] = dotenv_values(config_file)
        else:
            raw: _Environ[str] = os.environ

        self.verbose: bool = self._optional_bool(raw, "VERBOSE", False)
        self.session_ttl_seconds: int = self._optional_int(raw, "SESSION_TTL_SECONDS", 1800)
        self.session_cleanup_interval_seconds: int = self._optional_int(
            raw, "SESSION_CLEANUP_INTERVAL_SECONDS", 300
        )
        self.max_runs_per_session: int = self._optional_int(raw, "MAX_RUNS_PER_SESSION", 10)
        self.ground_sample_rate_hz: int = self._optional_int(raw, "GROUND_SAMPLE_RATE_HZ", 50)
        self.drone_sample_rate_hz: int = self._optional_int(raw, "DRONE_SAMPLE_RATE_HZ", 50)
        self.simulated_delay_scale: float = self._optional_float(
            raw, "SIMULATED_DELAY_SCALE", 1.0
        )
        self.random_seed: Optional[int] = self._optional_int(raw, "RANDOM_SEED", None)
        self.video_base_url: str = (
            raw.get("VIDEO_BASE_URL") or DEFAULT_VIDEO_BASE_URL
        ).rstrip("/")

        for key, value in (
            ("SESSION_TTL_SECONDS", self.session_ttl_seconds),
            ("SESSION_CLEANUP_INTERVAL_SECONDS", self.session_cleanup_interval_seconds),
            ("MAX_RUNS_PER_SESSION", self.max_runs_per_session),
            ("GROUND_SAMPLE_RATE_HZ", self.ground_sample_rate_hz),
            ("DRONE_SAMPLE_RATE_HZ", self.drone_sample_rate_hz),
        ):
            if value <= 0:
                raise ConfigValueException(f"{key} must be positive")

        if self.simulated_delay_scale < 0:
            raise ConfigValueException("SIMULATED_DELAY_SCALE must not be negative")

    def _optional_int(self, config: dict | _Environ[str], key: str, default):
        value = config.get(key)
        if value is None or value == "":
            return default
        try:
            return int(value)
        except ValueError:
            raise ConfigTypeException(f"{key} must be integer")

    def _optional_float(self, config: dict | _Environ[str], key: str, default: float) -> float:
        value = config.get(key)
        if value is None or value == "":
            return default
        try:
            return float(value)
        except ValueError:
            raise ConfigTypeException(f"{key} must be a number")

    def _optional_bool(self, config: dict | _Environ[str], key: str, default: bool) -> bool:
        value = config.get(key)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ConfigTypeException(f"{key} must be boolean")
