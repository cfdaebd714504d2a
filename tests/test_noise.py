import math
import statistics

from src.noise import deterministic_axis_noise_mas, fnv1a_32, mulberry32, noise_key


def test_fnv1a_reference_values():
    assert fnv1a_32("") == 2166136261
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


def test_mulberry32_is_repeatable_and_in_unit_interval():
    first = mulberry32(12345)
    second = mulberry32(12345)
    values = [next(first) for _ in range(1000)]

    assert values == [next(second) for _ in range(1000)]
    assert all(0.0 <= v < 1.0 for v in values)
    assert len(set(values)) > 990


def test_noise_is_repeatable_for_the_same_key():
    args = dict(epoch_label="A", phase_deg=43.28, distance_pc=25.0, sigma_mas=2.0)

    assert deterministic_axis_noise_mas(**args) == deterministic_axis_noise_mas(**args)


def test_noise_changes_when_the_key_changes():
    base = deterministic_axis_noise_mas("A", 43.2, 25.0, 2.0)

    assert deterministic_axis_noise_mas("B", 43.2, 25.0, 2.0) != base
    assert deterministic_axis_noise_mas("A", 90.0, 25.0, 2.0) != base
    assert deterministic_axis_noise_mas("A", 43.2, 30.0, 2.0) != base
    assert deterministic_axis_noise_mas("A", 43.2, 25.0, 2.0, salt="other") != base


def test_phase_jitter_below_rounding_gives_same_draw():
    assert noise_key("A", 43.21, 25.0, 2.0) == noise_key("A", 43.24, 25.0, 2.0)
    assert deterministic_axis_noise_mas("A", 43.21, 25.0, 2.0) == deterministic_axis_noise_mas("A", 43.24, 25.0, 2.0)


def test_non_positive_sigma_means_no_noise():
    for sigma in (0.0, -1.0, -1e-9):
        assert deterministic_axis_noise_mas("A", 12.3, 40.0, sigma) == 0.0
        assert deterministic_axis_noise_mas("B", 271.0, 1.5, sigma, salt="x") == 0.0


def test_noise_draws_look_gaussian():
    draws = [deterministic_axis_noise_mas("A", 0.0, 1.0 + 0.01 * i, 1.0) for i in range(4000)]

    assert all(math.isfinite(d) for d in draws)
    assert abs(statistics.fmean(draws)) < 0.1
    assert 0.85 < statistics.pstdev(draws) < 1.15
