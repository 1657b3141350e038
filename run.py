#!/usr/bin/env python3
"""
Main entry point for the Jump Flooding Voronoi engine.

This script:
1. Builds a seed session (random seeds, reproducible RNG)
2. Initializes the engine with the requested strategy
3. Runs the JFA pass loop
4. Prints the result summary and the region size of every seed

Usage:
    python run.py [--width W] [--height H] [--seeds N] [--strategy NAME]

Example:
    python run.py --width 512 --height 512 --seeds 16 --strategy taichi --verbose
"""

import argparse
import sys

from config import (
    DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_STRATEGY, SWEEP_WORKERS, TI_ARCH,
    RNG_SEED, JFA_VERBOSE,
)
from errors import JFAError
from jfa import BUFFER_NAMES, JFAEngine
from seeds import SeedSession, random_seeds
from strategies import STRATEGY_NAMES, make_strategy


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Compute a Voronoi field with the Jump Flooding Algorithm')
    parser.add_argument('--width', type=int, default=DEFAULT_WIDTH,
                        help=f'Grid width in cells (default: {DEFAULT_WIDTH})')
    parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT,
                        help=f'Grid height in cells (default: {DEFAULT_HEIGHT})')
    parser.add_argument('--seeds', type=int, default=None,
                        help='Number of random seeds (default: random count)')
    parser.add_argument('--seed', type=int, default=RNG_SEED,
                        help=f'RNG seed for reproducibility (default: {RNG_SEED})')
    parser.add_argument('--strategy', choices=STRATEGY_NAMES, default=DEFAULT_STRATEGY,
                        help=f'Execution strategy (default: {DEFAULT_STRATEGY})')
    parser.add_argument('--workers', type=int, default=SWEEP_WORKERS,
                        help=f'Threads for the sweep strategy (default: {SWEEP_WORKERS})')
    parser.add_argument('--arch', default=TI_ARCH,
                        help=f'Taichi arch for the taichi strategy (default: {TI_ARCH})')
    parser.add_argument('--flood-only', action='store_true',
                        help='Disable jumping: run max(W,H) passes of step 1')
    parser.add_argument('--verbose', action='store_true', default=JFA_VERBOSE,
                        help='Print one line per pass')
    return parser.parse_args(argv)


def build_strategy(args):
    if args.strategy == "sweep":
        return make_strategy("sweep", workers=args.workers)
    if args.strategy == "taichi":
        return make_strategy("taichi", arch=args.arch)
    return make_strategy(args.strategy)


def run(args):
    """
    Compute one field and print its summary.

    Returns:
        (engine, result)
    """
    session = SeedSession(args.width, args.height)
    for x, y in random_seeds(args.width, args.height, args.seeds, rng=args.seed):
        session.add(x, y)
    print(f"[Init] Seeded {len(session)} seeds on a {args.width}x{args.height} grid (rng={args.seed})")

    engine = JFAEngine(build_strategy(args), verbose=args.verbose)
    engine.initialize(args.width, args.height)
    engine.load_seeds(session.points())
    engine.print_config()

    steps = None
    if args.flood_only:
        steps = [1] * max(args.width, args.height)

    result = engine.compute(steps=steps)
    if not result.ok:
        print("[JFA] Nothing computed: add at least one seed.")
        return engine, result

    print(f"[JFA] {result.num_passes} passes in {result.elapsed_ms:.2f} ms "
          f"(field in buffer {result.active_buffer}, {engine.unset_count()} unset cells)")
    if args.strategy == "taichi":
        final = BUFFER_NAMES.index(result.active_buffer)
        print(f"[Taichi] Device field {result.active_buffer}: "
              f"{engine.strategy.unset_cells(final)} unset cells")

    sizes = engine.region_sizes()
    total = args.width * args.height
    print(f"[Regions] {len(sizes)} regions:")
    for (sx, sy), n in sorted(sizes.items(), key=lambda kv: -kv[1]):
        print(f"      ({sx:4d}, {sy:4d}): {n:8d} cells ({100.0 * n / total:5.1f}%)")

    return engine, result


def main(argv=None):
    args = parse_args(argv)
    try:
        run(args)
    except JFAError as e:
        print(f"[Error] {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
