"""
Configuration parameters for the Jump Flooding Voronoi engine.

This module defines the engine defaults:
- Cell encoding (UNSET sentinel)
- Grid defaults (width, height)
- Seed generation and picking
- Backend selection (sweep threads, Taichi arch)
- Logging

Coordinates are integer cell indices. Grid cells are addressed (x, y) with
0 <= x < W and 0 <= y < H, linearized as y*W + x.
"""

# ==============================================================================
# Cell encoding
# ==============================================================================

UNSET = -1                  # Sentinel stored in both components of an empty cell
                            # Disjoint from every valid coordinate (>= 0)

CELL_DTYPE = "int32"        # Host buffer dtype; buffers are (H, W, 2) arrays
                            # [..., 0] = seed x, [..., 1] = seed y

# ==============================================================================
# Grid defaults
# ==============================================================================

DEFAULT_WIDTH = 1024        # Default raster width (cells)
DEFAULT_HEIGHT = 768        # Default raster height (cells)
                            # Non-square grids use max(W, H) for the step schedule

# ==============================================================================
# Seeds
# ==============================================================================

SEED_PICK_RADIUS = 8        # Pick radius (cells) when selecting an existing seed
                            # Compared against squared distance: d² <= r²

RANDOM_SEEDS_MIN = 4        # Random seed count range (inclusive) when no count
RANDOM_SEEDS_MAX = 30       # is given to random_seeds()

RNG_SEED = 42               # Default RNG seed for run.py / bench.py (reproducible)

# ==============================================================================
# Execution strategies
# ==============================================================================

DEFAULT_STRATEGY = "numpy"  # One of: "sweep", "numpy", "taichi"
                            #   sweep  = scalar reference loop (slow, exact)
                            #   numpy  = vectorized sweep (same rule, same output)
                            #   taichi = parallel kernel, one invocation per cell

SWEEP_WORKERS = 1           # Threads for the scalar sweep (rows split into bands)
                            # 1 = plain single-threaded double loop

TI_ARCH = "cpu"             # Taichi backend: "cpu", "gpu", "cuda", "vulkan", "metal"
                            # "gpu" lets Taichi pick (Metal on Mac, CUDA on NVIDIA)

TI_MAX_EXTENT = 32768       # Largest W or H the Taichi kernel accepts
                            # Squared distances are i32: 2 * 32767² < 2³¹

# ==============================================================================
# Logging
# ==============================================================================

JFA_VERBOSE = False         # Print one line per pass plus a completion line
