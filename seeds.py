"""
Seed list bookkeeping for drivers of the JFA engine.

SeedSession holds the editable seed list (add / move / remove / pick / clear)
that an interactive or scripted front end maintains between computations.
It knows nothing about buffers; callers feed session.points() into
JFAEngine.load_seeds() before each compute().
"""

import numpy as np

from config import SEED_PICK_RADIUS, RANDOM_SEEDS_MIN, RANDOM_SEEDS_MAX
from grid import validate_dimensions, validate_seed, squared_distance


class SeedSession:
    """Ordered, editable list of seed cells on a fixed-size grid."""

    def __init__(self, width, height, seeds=()):
        self.width, self.height = validate_dimensions(width, height)
        self._seeds = []
        for s in seeds:
            self.add(*s)

    def __len__(self):
        return len(self._seeds)

    def __iter__(self):
        return iter(self._seeds)

    def points(self):
        return list(self._seeds)

    def add(self, x, y):
        """Append a seed and return its index. Raises InvalidSeed if outside the grid."""
        self._seeds.append(validate_seed((x, y), self.width, self.height))
        return len(self._seeds) - 1

    def move(self, index, x, y):
        self._seeds[index] = validate_seed((x, y), self.width, self.height)

    def remove(self, index):
        return self._seeds.pop(index)

    def clear(self):
        self._seeds.clear()

    def pick(self, x, y, radius=SEED_PICK_RADIUS):
        """
        Index of the first seed within `radius` cells of (x, y).

        Seeds are tested in insertion order with d² <= radius².

        Returns:
            Seed index, or None if no seed is close enough
        """
        r_sq = radius * radius
        for i, (sx, sy) in enumerate(self._seeds):
            if squared_distance(x, y, sx, sy) <= r_sq:
                return i
        return None


def random_seeds(width, height, count=None, rng=None):
    """
    Distinct random seed cells.

    Args:
        width, height: Grid size
        count: Number of seeds; random in [RANDOM_SEEDS_MIN, RANDOM_SEEDS_MAX]
               when None (clipped to the number of cells)
        rng: numpy Generator, or an int seed for np.random.default_rng

    Returns:
        List of (x, y) tuples
    """
    width, height = validate_dimensions(width, height)
    if rng is None or isinstance(rng, (int, np.integer)):
        rng = np.random.default_rng(rng)

    n_cells = width * height
    if count is None:
        count = min(int(rng.integers(RANDOM_SEEDS_MIN, RANDOM_SEEDS_MAX + 1)), n_cells)
    if count < 0 or count > n_cells:
        raise ValueError(f"Cannot place {count} distinct seeds on a {width}x{height} grid")

    idx = rng.choice(n_cells, size=count, replace=False)
    return [(int(i % width), int(i // width)) for i in idx]
