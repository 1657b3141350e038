"""
Parallel kernel strategy for the Jump Flood Algorithm (Taichi).

The per-cell update is a pure function of (x, y, step, read field), invoked
once per cell per pass from a Taichi kernel. Every invocation reads only the
source field and writes only its own cell of the destination field, so the
cells of a pass can run in any order, in parallel.

Pass flow (driven by jfa.JFAEngine):
1. begin():    upload the seeded host buffer A into device field 0
2. run_pass(): jfa_pass(src, dst, step) over all cells
3. barrier():  ti.sync(), all writes of this pass land before the next reads
4. finish():   download the field holding the final result

Fields are (H, W) Vector(2, i32) fields, matching the (H, W, 2) host buffers
one-to-one through from_numpy / to_numpy.
"""

import taichi as ti

from config import UNSET, TI_ARCH, TI_MAX_EXTENT
from errors import InvalidDimension
from strategies import Strategy

# Taichi can only be initialized once per process without discarding fields
_ti_arch = None


def init_taichi(arch=TI_ARCH):
    """
    Initialize Taichi once for this process.

    Args:
        arch: Backend name ("cpu", "gpu", "cuda", "vulkan", "metal")

    Later calls are no-ops; a different arch is reported and ignored.
    """
    global _ti_arch

    if _ti_arch is not None:
        if arch != _ti_arch:
            print(f"[Taichi] Already initialized with arch={_ti_arch}; ignoring arch={arch}")
        return

    backend = getattr(ti, arch, None)
    if backend is None:
        raise ValueError(f"Unknown Taichi arch {arch!r}")

    ti.init(arch=backend)
    _ti_arch = arch
    print(f"[Taichi] Initialized with backend: {ti.cfg.arch}")


# ============================================================================
# PER-CELL RULE
# ============================================================================

@ti.func
def jump_candidate(src: ti.template(), x: ti.i32, y: ti.i32, step: ti.i32) -> ti.math.ivec2:
    """
    Nearest known seed for cell (x, y) after sampling 8 neighbors `step` away.

    Neighbors are visited row-major (ky outer, kx inner); a candidate replaces
    the current best only if strictly closer, so ties keep the first found.

    Args:
        src: Read field, src[y, x] = (sx, sy) or (UNSET, UNSET)
        x, y: Cell being updated
        step: Jump length for this pass

    Returns:
        (sx, sy) of the best seed, or (UNSET, UNSET)
    """
    height = src.shape[0]
    width = src.shape[1]

    best = src[y, x]

    # Seed cells always hold themselves
    if best[0] != x or best[1] != y:
        dist = -1  # unknown
        if best[0] != UNSET:
            dx = best[0] - x
            dy = best[1] - y
            dist = dx * dx + dy * dy

        for ky in ti.static(range(-1, 2)):
            for kx in ti.static(range(-1, 2)):
                if ti.static(kx != 0 or ky != 0):
                    nx = x + kx * step
                    ny = y + ky * step

                    if nx >= 0 and nx < width and ny >= 0 and ny < height:
                        pk = src[ny, nx]

                        if pk[0] != UNSET:
                            ex = pk[0] - x
                            ey = pk[1] - y
                            new_dist = ex * ex + ey * ey

                            if dist == -1 or new_dist < dist:
                                best = pk
                                dist = new_dist

    return best


# ============================================================================
# KERNELS
# ============================================================================

@ti.kernel
def jfa_pass(src: ti.template(), dst: ti.template(), step: ti.i32):
    """
    One JFA pass: read src, write dst.

    Args:
        src: Read field (unchanged by this kernel)
        dst: Write field (every cell overwritten)
        step: Jump length
    """
    for y, x in src:
        dst[y, x] = jump_candidate(src, x, y, step)


@ti.kernel
def count_unset(field: ti.template()) -> ti.i32:
    """Number of cells still holding UNSET (device-side reduction)."""
    total = 0
    for y, x in field:
        if field[y, x][0] == UNSET:
            total += 1
    return total


# ============================================================================
# STRATEGY
# ============================================================================

class TaichiStrategy(Strategy):
    """
    Run every pass as a Taichi kernel dispatch.

    Device fields are allocated on first use and reallocated only when the
    grid size changes.
    """

    name = "taichi"

    def __init__(self, arch=TI_ARCH):
        init_taichi(arch)
        self.arch = arch
        self._fields = None
        self._shape = None

    def check_grid(self, width, height):
        if max(width, height) > TI_MAX_EXTENT:
            raise InvalidDimension(width, height, f"exceed {TI_MAX_EXTENT} cells per side for i32 distances")

    def begin(self, buffers):
        shape = buffers[0].shape[:2]
        if shape != self._shape:
            self._fields = [
                ti.Vector.field(2, dtype=ti.i32, shape=shape),  # A
                ti.Vector.field(2, dtype=ti.i32, shape=shape),  # B
            ]
            self._shape = shape
        self._fields[0].from_numpy(buffers[0])

    def run_pass(self, buffers, read, write, step):
        jfa_pass(self._fields[read], self._fields[write], step)

    def barrier(self):
        ti.sync()

    def finish(self, buffers, final):
        buffers[final][...] = self._fields[final].to_numpy()

    def unset_cells(self, index):
        """Count UNSET cells of device field `index` without a download."""
        return int(count_unset(self._fields[index]))

    def describe(self):
        return f"{self.name} (arch={self.arch})"
