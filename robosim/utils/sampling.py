from typing import Optional, Sequence, Tuple, TypeVar

from robosim.utils.noise import NoiseSource

T = TypeVar("T")


def weighted_choice(
    options: Sequence[T], weights: Sequence[float], noise: NoiseSource
) -> Optional[Tuple[T, float]]:
    """
    Pick one option with probability proportional to its weight.

    Returns the option and its normalized probability, or None when no option
    carries positive weight. Zero-weight options are never selected.
    """
    if len(options) != len(weights):
        raise ValueError("options and weights must have the same length")

    total = sum(w for w in weights if w > 0)
    if total <= 0:
        return None

    draw = noise.uniform() * total
    cumulative = 0.0
    last_positive: Optional[int] = None

    for index, weight in enumerate(weights):
        if weight <= 0:
            continue
        cumulative += weight
        last_positive = index
        if draw < cumulative:
            return options[index], weight / total

    # float round-off can leave the draw a hair above the final cumulative sum
    return options[last_positive], weights[last_positive] / total
