import math
import string
from typing import Optional

import numpy as np

_ID_ALPHABET = string.digits + string.ascii_lowercase


def clamp(value: float, minimum: float, maximum: float) -> float:
    return min(max(value, minimum), maximum)


def round_half_up(value: float) -> int:
    """Nearest integer, with halves rounded toward positive infinity."""
    return math.floor(value + 0.5)


class NoiseSource:
    """
    Single source of randomness for telemetry generation and failure injection.

    Wraps a numpy Generator so a run can be replayed by passing the same seed.
    Tests substitute a subclass to pin individual draws.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng: np.random.Generator = np.random.default_rng(seed)

    def gaussian(self, mean: float = 0.0, std_dev: float = 1.0) -> float:
        return float(self._rng.normal(mean, std_dev))

    def uniform(self) -> float:
        """Uniform draw in [0, 1)."""
        return float(self._rng.random())

    def randint(self, low: int, high: int) -> int:
        """Uniform integer draw in [low, high], both ends inclusive."""
        return int(self._rng.integers(low, high, endpoint=True))

    def token(self, length: int = 4) -> str:
        indices = self._rng.integers(0, len(_ID_ALPHABET), size=length)
        return "".join(_ID_ALPHABET[i] for i in indices)
