"""
Taichi kernel strategy tests (CPU backend).

The kernel must reproduce the scalar sweep exactly, including tie-breaking,
since every cell runs the same sequential neighbor scan.
"""

import numpy as np
import pytest

from config import UNSET, TI_MAX_EXTENT
from errors import InvalidDimension
from jfa import JFAEngine, NO_SEEDS
from seeds import random_seeds
from strategies import SweepStrategy, NumpyStrategy, make_strategy
import kernels
import run
from kernels import TaichiStrategy, init_taichi


@pytest.fixture(scope="module")
def taichi_strategy():
    init_taichi("cpu")
    return TaichiStrategy(arch="cpu")


def run_field(strategy, width, height, seeds, steps=None):
    engine = JFAEngine(strategy)
    engine.initialize(width, height)
    engine.load_seeds(seeds)
    result = engine.compute(steps=steps)
    return engine, result


@pytest.mark.parametrize("width,height,n,rng", [(32, 32, 12, 1), (40, 23, 30, 2), (17, 9, 4, 3)])
def test_kernel_matches_sweep(taichi_strategy, width, height, n, rng):
    seeds = random_seeds(width, height, n, rng=rng)
    gpu, _ = run_field(taichi_strategy, width, height, seeds)
    cpu, _ = run_field(SweepStrategy(), width, height, seeds)
    assert np.array_equal(gpu.field(), cpu.field())


def test_kernel_matches_numpy_with_custom_steps(taichi_strategy):
    seeds = random_seeds(20, 20, 7, rng=4)
    steps = [1, 8, 4, 2, 1, 1]
    gpu, _ = run_field(taichi_strategy, 20, 20, seeds, steps)
    cpu, _ = run_field(NumpyStrategy(), 20, 20, seeds, steps)
    assert np.array_equal(gpu.field(), cpu.field())


def test_kernel_eight_by_eight_example(taichi_strategy):
    engine, result = run_field(taichi_strategy, 8, 8, [(1, 1), (6, 6)])
    assert result.num_passes == 3
    assert result.active_buffer == "B"
    assert engine.nearest_seed_at(0, 0) == (1, 1)
    assert engine.nearest_seed_at(7, 7) == (6, 6)


def test_kernel_seeds_hold_themselves(taichi_strategy):
    seeds = random_seeds(64, 48, 20, rng=8)
    engine, _ = run_field(taichi_strategy, 64, 48, seeds)
    for sx, sy in seeds:
        assert engine.nearest_seed_at(sx, sy) == (sx, sy)


def test_kernel_unreachable_cells_stay_unset(taichi_strategy):
    engine, _ = run_field(taichi_strategy, 10, 1, [(0, 0)])
    assert engine.nearest_seed_at(9, 0) is None
    # Device-side count agrees with the downloaded field
    final = 0 if engine.active_buffer == "A" else 1
    assert taichi_strategy.unset_cells(final) == engine.unset_count() == 1


def test_kernel_no_seeds(taichi_strategy):
    engine = JFAEngine(taichi_strategy)
    engine.initialize(4, 4)
    engine.load_seeds([])
    assert engine.compute().status == NO_SEEDS
    assert (engine.field() == UNSET).all()


def test_kernel_deterministic_across_resizes(taichi_strategy):
    seeds = random_seeds(16, 16, 5, rng=6)
    first, _ = run_field(taichi_strategy, 16, 16, seeds)
    first_field = first.field().copy()
    run_field(taichi_strategy, 9, 30, [(4, 4)])
    again, _ = run_field(taichi_strategy, 16, 16, seeds)
    assert np.array_equal(first_field, again.field())


def test_init_taichi_is_idempotent(taichi_strategy, capsys):
    init_taichi("cpu")
    init_taichi("vulkan")
    assert "Already initialized" in capsys.readouterr().out
    assert kernels._ti_arch == "cpu"


def test_make_strategy_taichi(taichi_strategy):
    strategy = make_strategy("taichi", arch="cpu")
    assert isinstance(strategy, TaichiStrategy)
    assert strategy.describe() == "taichi (arch=cpu)"


def test_kernel_rejects_grids_beyond_i32_distances(taichi_strategy):
    engine = JFAEngine(taichi_strategy)
    with pytest.raises(InvalidDimension):
        engine.initialize(TI_MAX_EXTENT + 1, 1)
    assert not engine.initialized
    engine.initialize(TI_MAX_EXTENT, 1)

    # Host strategies use wide integers and have no such limit
    wide = JFAEngine("numpy")
    wide.initialize(TI_MAX_EXTENT + 1, 1)
    assert wide.initialized


def test_run_reports_device_unset_count(taichi_strategy, capsys):
    assert run.main(["--width", "16", "--height", "16", "--seeds", "3",
                     "--strategy", "taichi", "--arch", "cpu"]) == 0
    out = capsys.readouterr().out
    assert "[Taichi] Device field A: 0 unset cells" in out
