"""
Seed session and random seed placement tests.
"""

import numpy as np
import pytest

from config import RANDOM_SEEDS_MIN, RANDOM_SEEDS_MAX
from errors import InvalidDimension, InvalidSeed
from seeds import SeedSession, random_seeds


def test_add_returns_index():
    session = SeedSession(16, 16)
    assert session.add(1, 2) == 0
    assert session.add(5, 5) == 1
    assert len(session) == 2
    assert session.points() == [(1, 2), (5, 5)]


def test_constructor_seeds():
    session = SeedSession(8, 8, [(0, 0), (7, 7)])
    assert list(session) == [(0, 0), (7, 7)]


@pytest.mark.parametrize("seed", [(-1, 0), (8, 0), (0, 8), (3, -2)])
def test_add_outside_grid_raises(seed):
    session = SeedSession(8, 8)
    with pytest.raises(InvalidSeed):
        session.add(*seed)
    assert len(session) == 0


def test_invalid_dimensions():
    with pytest.raises(InvalidDimension):
        SeedSession(0, 4)


def test_move_and_remove():
    session = SeedSession(10, 10, [(1, 1), (2, 2), (3, 3)])
    session.move(1, 9, 0)
    assert session.points() == [(1, 1), (9, 0), (3, 3)]
    assert session.remove(0) == (1, 1)
    assert session.points() == [(9, 0), (3, 3)]
    with pytest.raises(InvalidSeed):
        session.move(0, 10, 0)
    assert session.points() == [(9, 0), (3, 3)]


def test_points_is_a_copy():
    session = SeedSession(4, 4, [(1, 1)])
    pts = session.points()
    pts.append((2, 2))
    assert len(session) == 1


def test_clear():
    session = SeedSession(4, 4, [(1, 1), (2, 2)])
    session.clear()
    assert len(session) == 0


def test_pick_first_within_radius():
    session = SeedSession(100, 100, [(10, 10), (12, 10), (50, 50)])
    # Both of the first two seeds are within reach; insertion order wins
    assert session.pick(11, 10, radius=3) == 0
    assert session.pick(50, 53, radius=3) == 2
    assert session.pick(50, 54, radius=3) is None
    assert session.pick(80, 80) is None


def test_random_seeds_count_and_bounds():
    seeds = random_seeds(20, 10, 15, rng=0)
    assert len(seeds) == 15
    assert len(set(seeds)) == 15
    for x, y in seeds:
        assert 0 <= x < 20
        assert 0 <= y < 10


def test_random_seeds_deterministic():
    assert random_seeds(64, 64, 10, rng=3) == random_seeds(64, 64, 10, rng=3)
    assert random_seeds(64, 64, 10, rng=np.random.default_rng(3)) == random_seeds(64, 64, 10, rng=3)


def test_random_seeds_default_count():
    seeds = random_seeds(64, 64, rng=11)
    assert RANDOM_SEEDS_MIN <= len(seeds) <= RANDOM_SEEDS_MAX


def test_random_seeds_default_count_clipped_to_grid():
    seeds = random_seeds(2, 1, rng=11)
    assert sorted(seeds) == [(0, 0), (1, 0)]


def test_random_seeds_fill_grid():
    seeds = random_seeds(3, 3, 9, rng=1)
    assert sorted(seeds) == [(x, y) for x in range(3) for y in range(3)]


@pytest.mark.parametrize("count", [-1, 10])
def test_random_seeds_bad_count(count):
    with pytest.raises(ValueError):
        random_seeds(3, 3, count, rng=0)


def test_random_seeds_zero():
    assert random_seeds(5, 5, 0, rng=0) == []
