"""
Quick import test to verify all modules load correctly.
This doesn't run a computation, just checks that all imports work.

Run directly (python test_import.py) or through pytest.
"""


def test_imports():
    import taichi as ti
    print(f"✓ Taichi imported ({ti.__version__})")

    import numpy as np
    print(f"✓ NumPy imported ({np.__version__})")

    from config import UNSET, DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_STRATEGY
    print(f"✓ Config imported (grid {DEFAULT_WIDTH}x{DEFAULT_HEIGHT}, strategy={DEFAULT_STRATEGY})")
    assert UNSET == -1

    from errors import JFAError, InvalidDimension, InvalidSeed, NotInitialized
    print("✓ Errors imported (4 classes)")
    for cls in (InvalidDimension, InvalidSeed, NotInitialized):
        assert issubclass(cls, JFAError)

    from grid import step_schedule, allocate_buffers, write_seeds, NEIGHBOR_OFFSETS
    print(f"✓ Grid helpers imported ({len(NEIGHBOR_OFFSETS)} neighbor offsets)")

    from strategies import STRATEGY_NAMES, SweepStrategy, NumpyStrategy
    print(f"✓ Strategies imported ({', '.join(STRATEGY_NAMES)})")

    from kernels import TaichiStrategy, jfa_pass, jump_candidate
    print("✓ Taichi kernels imported (1 kernel + 1 func)")

    from jfa import JFAEngine, JFAResult
    from seeds import SeedSession, random_seeds
    print("✓ Engine and seed session imported")


if __name__ == '__main__':
    print("Testing imports...")
    test_imports()
    print("\n" + "="*60)
    print("ALL IMPORTS SUCCESSFUL!")
    print("="*60)
    print("\nReady to run: python run.py")
