from robosim.utils.noise import NoiseSource


def generate_id(prefix: str, epoch_seconds: float, noise: NoiseSource) -> str:
    return f"{prefix}_{int(epoch_seconds)}_{noise.token(4)}"
