import numpy as np
import pytest

from slicedoptim.rng import make_rng, _reset_shared_engine
from slicedoptim.directions import (
    BRANCH_AXIS_X,
    BRANCH_AXIS_Y,
    BRANCH_STRATIFIED,
    DirectionSampler,
    choose_directions,
    choose_directions_shared,
    classify_directions,
)


@pytest.fixture(autouse=True)
def fresh_shared_engine():
    _reset_shared_engine()
    yield
    _reset_shared_engine()


@pytest.mark.parametrize("dim", [1, 2, 3, 5, 16])
def test_directions_have_unit_norm(dim):
    d = choose_directions(dim, 500, make_rng(7))
    assert d.shape == (500, dim)
    np.testing.assert_allclose(np.linalg.norm(d, axis=1), 1.0, atol=1e-9)


def test_2d_branch_frequencies():
    n = 100_000
    tags = classify_directions(choose_directions(2, n, make_rng(42)))
    freq = np.bincount(tags, minlength=3) / n
    # binomial std at n=1e5 is ~0.0015, allow ~5 sigma
    assert abs(freq[BRANCH_STRATIFIED] - 0.70) < 0.008
    assert abs(freq[BRANCH_AXIS_X] - 0.15) < 0.006
    assert abs(freq[BRANCH_AXIS_Y] - 0.15) < 0.006


def test_2d_stratified_angle_stays_in_its_bin():
    count = 64
    d = choose_directions(2, count, make_rng(3))
    tags = classify_directions(d)
    theta = np.mod(np.arctan2(d[:, 1], d[:, 0]), 2.0 * np.pi)
    k = np.arange(count)
    lo = k / count * 2.0 * np.pi
    hi = (k + 1) / count * 2.0 * np.pi
    s = tags == BRANCH_STRATIFIED
    assert np.all(theta[s] >= lo[s] - 1e-12)
    assert np.all(theta[s] <= hi[s] + 1e-12)


def test_same_seed_same_directions():
    a = choose_directions(3, 10, make_rng(11))
    b = choose_directions(3, 10, make_rng(11))
    np.testing.assert_array_equal(a, b)


def test_shared_engine_ignores_later_seeds():
    choose_directions_shared(3, 8, seed=1)
    second_a = choose_directions_shared(3, 8, seed=2)

    _reset_shared_engine()
    choose_directions_shared(3, 8, seed=1)
    second_b = choose_directions_shared(3, 8, seed=99)

    np.testing.assert_array_equal(second_a, second_b)


def test_shared_engine_first_seed_wins():
    first = choose_directions_shared(2, 16, seed=5)
    expected = choose_directions(2, 16, make_rng(5))
    np.testing.assert_array_equal(first, expected)


def test_sampler_instances_are_independent():
    s1 = DirectionSampler(4, seed=10)
    s2 = DirectionSampler(4, seed=10)
    s1.sample(5)  # advancing s1 must not disturb s2
    np.testing.assert_array_equal(s2.sample(5), DirectionSampler(4, seed=10).sample(5))


@pytest.mark.parametrize("dim,count", [(0, 4), (-1, 4), (3, 0), (2, -2)])
def test_invalid_arguments_fail_fast(dim, count):
    with pytest.raises(ValueError):
        choose_directions(dim, count, make_rng(0))
    with pytest.raises(ValueError):
        choose_directions_shared(dim, count, seed=0)


def test_classify_rejects_non_2d():
    with pytest.raises(ValueError):
        classify_directions(np.zeros((4, 3)))


def test_sampler_rejects_rng_and_seed_together():
    with pytest.raises(ValueError):
        DirectionSampler(3, rng=make_rng(1), seed=1)
