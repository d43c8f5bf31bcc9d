import asyncio

from loguru import logger

from robosim.utils.noise import NoiseSource


class ComputeDelay:
    """Randomized sleep that emulates the cost of a real simulation backend."""

    def __init__(self, noise: NoiseSource, scale: float = 1.0) -> None:
        self.noise = noise
        self.scale = max(0.0, scale)

    def pick(self, min_ms: int, max_ms: int) -> int:
        return self.noise.randint(min_ms, max_ms)

    async def __call__(self, min_ms: int, max_ms: int) -> int:
        """Sleep for a random span in [min_ms, max_ms] and return the span drawn."""
        delay_ms = self.pick(min_ms, max_ms)
        scaled = delay_ms * self.scale
        if scaled > 0:
            logger.debug(f"Simulated compute delay {scaled:.0f}ms")
            await asyncio.sleep(scaled / 1000.0)
        return delay_ms
