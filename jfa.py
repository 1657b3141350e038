"""
Jump Flood Algorithm (JFA) engine for discrete 2D Voronoi diagrams.

Given seed cells on a W x H raster, the engine assigns every cell the
coordinates of its (approximately) nearest seed in O(log(max(W, H))) passes
instead of a brute-force O(N·W·H) search.

Key Features:
- Two owned ping-pong buffers (A/B) plus a flag for which one is current
- Pass schedule fixed by grid size: max(W,H)/2, /4, ..., 1
- 8-neighbor jump sampling with strict '<' (ties keep the first candidate)
- Pluggable execution strategy: scalar sweep, numpy, or Taichi kernel

Algorithm Flow:
1. Clear buffer A and write each seed's own coordinates into its cell
2. For each step: every cell samples its 8 neighbors `step` cells away in
   the read buffer and keeps the closest seed found, writing the write buffer
3. Halve the step, swap read/write, repeat until step 1 has run
4. The buffer written last holds the field

JFA is approximate by construction: in adversarial seed layouts a cell can
end up with a near but not globally nearest seed.
"""

import threading
import time
from dataclasses import dataclass, field as dc_field

import numpy as np

from config import UNSET, DEFAULT_STRATEGY, JFA_VERBOSE
from errors import NotInitialized
from grid import (
    validate_dimensions, validate_seed, step_schedule,
    allocate_buffers, clear_buffer, write_seeds, unset_mask,
)
from strategies import Strategy, make_strategy

# Compute status
OK = "ok"
NO_SEEDS = "no_seeds"

BUFFER_NAMES = ("A", "B")


@dataclass
class JFAResult:
    """Summary of one compute() call."""

    status: str
    strategy: str
    width: int
    height: int
    steps: list = dc_field(default_factory=list)
    active_buffer: str = "A"
    elapsed_ms: float = 0.0

    @property
    def num_passes(self):
        return len(self.steps)

    @property
    def ok(self):
        return self.status == OK


class JFAEngine:
    """
    Nearest-seed field over a 2D grid.

    Typical use:
        engine = JFAEngine()
        engine.initialize(1024, 768)
        engine.load_seeds([(10, 20), (500, 400)])
        result = engine.compute()
        engine.nearest_seed_at(0, 0)   # -> (10, 20)

    An instance is not reentrant: one compute() at a time.
    """

    def __init__(self, strategy=None, verbose=JFA_VERBOSE):
        """
        Args:
            strategy: Strategy instance or name ("sweep", "numpy", "taichi");
                      defaults to config.DEFAULT_STRATEGY
            verbose: Print pass-by-pass progress
        """
        if strategy is None:
            strategy = DEFAULT_STRATEGY
        if isinstance(strategy, str):
            strategy = make_strategy(strategy)
        if not isinstance(strategy, Strategy):
            raise TypeError(f"strategy must be a Strategy or a name, got {type(strategy).__name__}")

        self.strategy = strategy
        self.verbose = verbose

        self.width = 0
        self.height = 0
        self._buffers = None
        self._active = 0        # index of the buffer holding the current field
        self._seeds = None      # None until load_seeds(); [] is an empty seed set
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    @property
    def initialized(self):
        return self._buffers is not None

    def initialize(self, width, height):
        """
        Allocate (or resize) both buffers to width x height.

        Previously loaded seeds are dropped when the size changes; call
        load_seeds() again before the next compute().

        Raises:
            InvalidDimension: if width or height is not a positive integer,
                or the strategy cannot run a grid that large
        """
        width, height = validate_dimensions(width, height)
        self.strategy.check_grid(width, height)

        if self._buffers is None or (width, height) != (self.width, self.height):
            self._buffers = allocate_buffers(width, height)
            self._seeds = None
        self.width = width
        self.height = height
        self._active = 0

    def reset(self):
        """Fill buffer A with UNSET. Buffer B is left as is."""
        self._require_initialized()
        clear_buffer(self._buffers[0])
        self._active = 0

    def load_seeds(self, seeds):
        """
        Validate seeds and write them into buffer A.

        Replaces any previously loaded seed set. Seeds sharing a cell are
        accepted (last write wins). Nothing is written if any seed is invalid.

        Raises:
            NotInitialized: before initialize()
            InvalidSeed: if a seed is not an integer pair inside the grid
        """
        self._require_initialized()
        validated = [validate_seed(s, self.width, self.height) for s in seeds]

        self._seeds = validated
        write_seeds(self._buffers[0], validated)
        self._active = 0

    def release(self):
        """Free both buffers and forget the seeds."""
        self._buffers = None
        self._seeds = None
        self._active = 0
        self.width = 0
        self.height = 0

    @property
    def seeds(self):
        return list(self._seeds or [])

    # ------------------------------------------------------------------
    # Pass loop
    # ------------------------------------------------------------------

    def compute(self, steps=None):
        """
        Run the JFA pass loop over the loaded seeds.

        Args:
            steps: Optional explicit step sequence (positive ints) replacing
                   the default schedule, e.g. [1] * n for plain flooding

        Returns:
            JFAResult; status is NO_SEEDS (field all UNSET) when the loaded
            seed set is empty, OK otherwise

        Raises:
            NotInitialized: before initialize() or load_seeds(); a resize
                drops the loaded seeds
            RuntimeError: if another compute() is running on this engine
        """
        self._require_initialized()
        if self._seeds is None:
            raise NotInitialized("Call load_seeds(...) first")

        if not self._lock.acquire(blocking=False):
            raise RuntimeError("compute() is already running on this engine")
        try:
            return self._compute(steps)
        finally:
            self._lock.release()

    def _compute(self, steps):
        width, height = self.width, self.height
        buffers = self._buffers
        for buf in buffers:
            assert buf.shape == (height, width, 2), "buffer size does not match the grid"

        # Start from a clean A on every call so repeated computes are identical
        clear_buffer(buffers[0])
        self._active = 0

        if not self._seeds:
            if self.verbose:
                print("[JFA] Seed set is empty: add at least one seed.")
            return JFAResult(NO_SEEDS, self.strategy.name, width, height)

        write_seeds(buffers[0], self._seeds)

        if steps is None:
            steps = step_schedule(width, height)
        else:
            steps = [int(s) for s in steps]
            if any(s < 1 for s in steps):
                raise ValueError(f"steps must be positive, got {steps}")

        if self.verbose:
            print(f"[JFA] Executing Jump Flooding: {width}x{height}, "
                  f"{len(self._seeds)} seeds, {len(steps)} passes, {self.strategy.describe()}")

        t0 = time.perf_counter()

        read, write = 0, 1
        self.strategy.begin(buffers)
        for pass_idx, step in enumerate(steps):
            if self.verbose:
                print(f"[JFA] Pass {pass_idx + 1}/{len(steps)}: step={step}")
            self.strategy.run_pass(buffers, read, write, step)
            self.strategy.barrier()
            read, write = write, read
        # After the last swap `read` names the buffer written last
        self.strategy.finish(buffers, read)
        self._active = read

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        if self.verbose:
            print(f"[JFA] Done in {elapsed_ms:.2f} ms, field in buffer {BUFFER_NAMES[read]}")

        return JFAResult(
            status=OK,
            strategy=self.strategy.name,
            width=width,
            height=height,
            steps=list(steps),
            active_buffer=BUFFER_NAMES[read],
            elapsed_ms=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def active_buffer(self):
        """Name ("A" or "B") of the buffer holding the current field."""
        return BUFFER_NAMES[self._active]

    def field(self):
        """Read-only (H, W, 2) view of the current field."""
        self._require_initialized()
        view = self._buffers[self._active].view()
        view.flags.writeable = False
        return view

    def flat_field(self):
        """Read-only (H*W, 2) view, indexed by y*W + x."""
        return self.field().reshape(self.width * self.height, 2)

    def nearest_seed_at(self, x, y):
        """
        Nearest seed for cell (x, y).

        Returns:
            (sx, sy), or None if no seed reached the cell (UNSET)
        """
        self._require_initialized()
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"Cell ({x}, {y}) is outside the {self.width}x{self.height} grid")

        sx, sy = self._buffers[self._active][y, x]
        if sx == UNSET:
            return None
        return int(sx), int(sy)

    def region_sizes(self):
        """
        Cell count per seed region.

        Returns:
            dict {(sx, sy): cells}; UNSET cells are not counted
        """
        self._require_initialized()
        cells = self.flat_field()
        cells = cells[cells[:, 0] != UNSET]
        if len(cells) == 0:
            return {}
        coords, counts = np.unique(cells, axis=0, return_counts=True)
        return {(int(sx), int(sy)): int(n) for (sx, sy), n in zip(coords, counts)}

    def unset_count(self):
        self._require_initialized()
        return int(unset_mask(self._buffers[self._active]).sum())

    # ------------------------------------------------------------------
    # Debug / info
    # ------------------------------------------------------------------

    def print_config(self):
        """Print engine configuration and buffer memory."""
        steps = step_schedule(self.width, self.height) if self.initialized else []
        buffer_mem_mb = 0.0
        if self.initialized:
            buffer_mem_mb = sum(b.nbytes for b in self._buffers) / (1024 ** 2)

        print(f"[JFA] Configuration:")
        print(f"      Grid: {self.width}x{self.height} cells")
        print(f"      Strategy: {self.strategy.describe()}")
        print(f"      Seeds: {len(self._seeds or [])}")
        print(f"      Passes: {len(steps)} (steps {steps})")
        print(f"      Memory: ~{buffer_mem_mb:.2f} MB (2 buffers)")

    def _require_initialized(self):
        if self._buffers is None:
            raise NotInitialized("Call initialize(width, height) first")
