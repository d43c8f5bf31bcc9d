import string

import pytest

from robosim.utils.ids import generate_id
from robosim.utils.noise import NoiseSource, clamp, round_half_up
from robosim.utils.sampling import weighted_choice
from conftest import PinnedNoise


def test_clamp():
    assert clamp(1.5, 0, 1) == 1
    assert clamp(-0.2, 0, 1) == 0
    assert clamp(0.4, 0, 1) == 0.4


@pytest.mark.parametrize(
    "value, expected",
    [(2.5, 3), (0.5, 1), (94.5, 95), (-2.5, -2), (-70.5, -70), (97.4, 97), (97.6, 98)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_seeded_sources_repeat():
    a = NoiseSource(seed=11)
    b = NoiseSource(seed=11)

    assert [a.gaussian(0, 1) for _ in range(5)] == [b.gaussian(0, 1) for _ in range(5)]
    assert [a.uniform() for _ in range(5)] == [b.uniform() for _ in range(5)]


def test_randint_is_inclusive():
    noise = NoiseSource(seed=3)
    draws = {noise.randint(1, 3) for _ in range(200)}

    assert draws == {1, 2, 3}


def test_uniform_range():
    noise = NoiseSource(seed=5)
    assert all(0 <= noise.uniform() < 1 for _ in range(100))


def test_token_alphabet():
    token = NoiseSource(seed=9).token(4)

    assert len(token) == 4
    assert set(token) <= set(string.digits + string.ascii_lowercase)


def test_generate_id_format():
    run_id = generate_id("sim", 1700000000.9, NoiseSource(seed=1))
    prefix, epoch, suffix = run_id.split("_")

    assert prefix == "sim"
    assert epoch == "1700000000"
    assert len(suffix) == 4


class TestWeightedChoice:
    def test_zero_weights_never_selected(self):
        noise = NoiseSource(seed=21)
        for _ in range(200):
            option, _ = weighted_choice(["a", "b", "c"], [0.0, 1.0, 0.0], noise)
            assert option == "b"

    def test_zero_draw_skips_leading_zero_weight(self):
        option, probability = weighted_choice(["a", "b"], [0.0, 2.0], PinnedNoise(0.0))

        assert option == "b"
        assert probability == 1.0

    def test_all_zero_returns_none(self):
        assert weighted_choice(["a", "b"], [0.0, 0.0], NoiseSource(seed=1)) is None

    def test_empty_returns_none(self):
        assert weighted_choice([], [], NoiseSource(seed=1)) is None

    def test_probability_is_normalized(self):
        option, probability = weighted_choice(["a", "b"], [1.0, 3.0], PinnedNoise(0.9))

        assert option == "b"
        assert probability == pytest.approx(0.75)

    def test_draw_just_below_one(self):
        option, _ = weighted_choice(["a", "b"], [1.0, 1.0], PinnedNoise(0.999999999))
        assert option == "b"

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            weighted_choice(["a"], [1.0, 2.0], NoiseSource(seed=1))
