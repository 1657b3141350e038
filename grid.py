"""
Grid and seed bookkeeping shared by every JFA strategy.

This module provides:
- Dimension and seed validation
- The pass schedule (step sequence) derived from the grid size
- Host buffer allocation, clearing and seeding
- The fixed 8-neighbor scan order used for tie-breaking

Buffers are numpy arrays of shape (H, W, 2): buffer[y, x] = (sx, sy), or
(UNSET, UNSET) when no seed has reached the cell yet.
"""

import numbers

import numpy as np

from config import UNSET, CELL_DTYPE
from errors import InvalidDimension, InvalidSeed

# ==============================================================================
# Neighborhood
# ==============================================================================

# Row-major scan order (ky outer, kx inner, each -1..1), center excluded.
# Ties between equidistant candidates keep the first one found in this order.
NEIGHBOR_OFFSETS = tuple(
    (kx, ky)
    for ky in (-1, 0, 1)
    for kx in (-1, 0, 1)
    if (kx, ky) != (0, 0)
)


# ==============================================================================
# Validation
# ==============================================================================

def _is_int(v):
    return isinstance(v, numbers.Integral) and not isinstance(v, bool)


def validate_dimensions(width, height):
    """
    Check that width and height are positive integers.

    Raises:
        InvalidDimension: if either is not an integer or is <= 0
    """
    if not (_is_int(width) and _is_int(height)) or width <= 0 or height <= 0:
        raise InvalidDimension(width, height)
    return int(width), int(height)


def validate_seed(seed, width, height):
    """
    Normalize a seed to an (x, y) tuple of Python ints inside the grid.

    Raises:
        InvalidSeed: if the seed is not an integer pair or is out of range
    """
    try:
        x, y = seed
    except (TypeError, ValueError):
        raise InvalidSeed(seed, width, height) from None

    if not (_is_int(x) and _is_int(y)):
        raise InvalidSeed(seed, width, height)
    if not (0 <= x < width and 0 <= y < height):
        raise InvalidSeed(seed, width, height)
    return int(x), int(y)


# ==============================================================================
# Addressing / metric
# ==============================================================================

def cell_index(x, y, width):
    """Linear index of cell (x, y) in a row-major grid of the given width."""
    return y * width + x


def squared_distance(x0, y0, x1, y1):
    dx = x1 - x0
    dy = y1 - y0
    return dx * dx + dy * dy


# ==============================================================================
# Pass schedule
# ==============================================================================

def step_schedule(width, height):
    """
    Jump lengths for one computation: max(W,H)>>1, max(W,H)>>2, ..., 1.

    Depends on grid size only. A 1x1 grid has an empty schedule.

    Example:
        step_schedule(1024, 768) -> [512, 256, 128, 64, 32, 16, 8, 4, 2, 1]
    """
    steps = []
    step = max(width, height) // 2
    while step >= 1:
        steps.append(step)
        step //= 2
    return steps


# ==============================================================================
# Buffers
# ==============================================================================

def allocate_buffers(width, height):
    """
    Allocate the A/B buffer pair for a width x height grid.

    Buffer A starts cleared; B is left uninitialized because the first pass
    overwrites every cell of it before it is read.
    """
    buffer_a = np.full((height, width, 2), UNSET, dtype=CELL_DTYPE)
    buffer_b = np.empty((height, width, 2), dtype=CELL_DTYPE)
    return [buffer_a, buffer_b]


def clear_buffer(buf):
    buf.fill(UNSET)


def write_seeds(buf, seeds):
    """
    Write each seed's own coordinates into its cell.

    Seeds sharing a cell resolve last-write-wins; since the value written is
    the cell's coordinates the outcome is identical either way.
    """
    for x, y in seeds:
        buf[y, x, 0] = x
        buf[y, x, 1] = y


def unset_mask(buf):
    return buf[..., 0] == UNSET
