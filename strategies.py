"""
CPU execution strategies for the JFA pass loop.

A strategy runs one pass: read every cell of buffers[read], write every cell
of buffers[write]. The engine owns the buffers and the pass loop; strategies
only implement the per-cell update and whatever synchronization is needed for
all writes of a pass to be visible before the next pass starts.

Strategies:
- SweepStrategy: scalar reference, direct double loop over (x, y), optionally
  split into row bands across worker threads
- NumpyStrategy: the same rule as whole-grid array operations
- TaichiStrategy (kernels.py): the same rule as a parallel Taichi kernel

All strategies produce bit-identical fields for the same inputs.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from config import UNSET, SWEEP_WORKERS
from grid import NEIGHBOR_OFFSETS, squared_distance


class Strategy:
    """
    Interface for a pass executor.

    check_grid(width, height) runs on every JFAEngine.initialize().

    Call order per computation:
        begin(buffers)
        run_pass(buffers, read, write, step); barrier()   (once per step)
        finish(buffers, final)
    """

    name = "base"

    def check_grid(self, width, height):
        """Raise InvalidDimension if this strategy cannot run a width x height grid."""

    def begin(self, buffers):
        pass

    def run_pass(self, buffers, read, write, step):
        raise NotImplementedError

    def barrier(self):
        pass

    def finish(self, buffers, final):
        pass

    def describe(self):
        return self.name


# ==============================================================================
# Scalar sweep (reference implementation)
# ==============================================================================

def jump_cell(cells, x, y, step, width, height):
    """
    Per-cell JFA update: best seed for (x, y) after looking `step` cells away.

    Args:
        cells: Read buffer as nested lists, cells[y][x] = [sx, sy]
        x, y: Cell being updated
        step: Jump length for this pass
        width, height: Grid size

    Returns:
        [sx, sy] of the nearest seed known so far (may be UNSET)
    """
    p = cells[y][x]
    best = p  # keep the current estimate if no neighbor improves on it

    if p[0] == x and p[1] == y:
        return best

    if p[0] == UNSET:
        dist = -1  # unknown
    else:
        dist = squared_distance(x, y, p[0], p[1])

    for kx, ky in NEIGHBOR_OFFSETS:
        nx = x + kx * step
        ny = y + ky * step
        if nx < 0 or nx >= width or ny < 0 or ny >= height:
            continue

        pk = cells[ny][nx]
        if pk[0] == UNSET:
            continue

        new_dist = squared_distance(x, y, pk[0], pk[1])
        # Strict '<': an equidistant later candidate never replaces an earlier one
        if dist == -1 or new_dist < dist:
            best = pk
            dist = new_dist

    return best


def sweep_rows(cells, rows, width, height, step, y0, y1):
    """Update rows [y0, y1) into `rows`. Reads only `cells`."""
    for y in range(y0, y1):
        rows[y] = [jump_cell(cells, x, y, step, width, height) for x in range(width)]


def row_bands(height, workers):
    """Split [0, height) into at most `workers` contiguous, near-equal bands."""
    workers = max(1, min(workers, height))
    base, extra = divmod(height, workers)
    bands = []
    y0 = 0
    for i in range(workers):
        y1 = y0 + base + (1 if i < extra else 0)
        bands.append((y0, y1))
        y0 = y1
    return bands


class SweepStrategy(Strategy):
    """
    Direct double loop over all cells, one pass at a time.

    With workers > 1 the rows are split into bands and swept on a thread
    pool. No locking is needed: within a pass the read buffer is never
    written and each band writes disjoint rows. Joining every band is the
    pass barrier.
    """

    name = "sweep"

    def __init__(self, workers=SWEEP_WORKERS):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.workers = workers

    def run_pass(self, buffers, read, write, step):
        src = buffers[read]
        height, width = src.shape[:2]
        cells = src.tolist()
        rows = [None] * height

        if self.workers == 1:
            sweep_rows(cells, rows, width, height, step, 0, height)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                futures = [
                    pool.submit(sweep_rows, cells, rows, width, height, step, y0, y1)
                    for y0, y1 in row_bands(height, self.workers)
                ]
                for f in futures:
                    f.result()  # re-raises worker exceptions

        buffers[write][...] = rows

    def describe(self):
        return f"{self.name} (workers={self.workers})"


# ==============================================================================
# Vectorized sweep
# ==============================================================================

class NumpyStrategy(Strategy):
    """
    Whole-grid version of jump_cell().

    Offsets are applied one at a time in NEIGHBOR_OFFSETS order, so every cell
    sees its candidates in the same order as the scalar sweep and ties resolve
    identically.
    """

    name = "numpy"

    def __init__(self):
        self._shape = None
        self._xs = None
        self._ys = None

    def begin(self, buffers):
        shape = buffers[0].shape[:2]
        if shape != self._shape:
            self._ys, self._xs = np.indices(shape)
            self._shape = shape

    def run_pass(self, buffers, read, write, step):
        src = buffers[read]
        height, width = src.shape[:2]
        xs, ys = self._xs, self._ys

        sx = src[..., 0].astype(np.int64)
        sy = src[..., 1].astype(np.int64)
        best = src.copy()

        is_seed = (sx == xs) & (sy == ys)
        unset = sx == UNSET
        dist = np.where(unset, -1, (sx - xs) ** 2 + (sy - ys) ** 2)

        for kx, ky in NEIGHBOR_OFFSETS:
            nx = xs + kx * step
            ny = ys + ky * step
            inside = (nx >= 0) & (nx < width) & (ny >= 0) & (ny < height)

            pk = np.full_like(src, UNSET)
            pk[inside] = src[ny[inside], nx[inside]]
            pkx = pk[..., 0].astype(np.int64)
            pky = pk[..., 1].astype(np.int64)

            new_dist = (pkx - xs) ** 2 + (pky - ys) ** 2
            adopt = (
                inside
                & ~is_seed
                & (pkx != UNSET)
                & ((dist == -1) | (new_dist < dist))
            )
            best[adopt] = pk[adopt]
            dist = np.where(adopt, new_dist, dist)

        buffers[write][...] = best


# ==============================================================================
# Factory
# ==============================================================================

STRATEGY_NAMES = ("sweep", "numpy", "taichi")


def make_strategy(name, **kwargs):
    """
    Build a strategy by name.

    Args:
        name: "sweep", "numpy" or "taichi"
        **kwargs: Passed to the strategy constructor
                  (sweep: workers; taichi: arch)
    """
    if name == "sweep":
        return SweepStrategy(**kwargs)
    if name == "numpy":
        return NumpyStrategy(**kwargs)
    if name == "taichi":
        from kernels import TaichiStrategy  # Taichi is only loaded when requested
        return TaichiStrategy(**kwargs)
    raise ValueError(f"Unknown strategy {name!r}; expected one of {', '.join(STRATEGY_NAMES)}")
