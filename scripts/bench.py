#!/usr/bin/env python3
"""
Benchmark script for the JFA engine - Reproducible Performance Testing
======================================================================

Runs a fixed number of computations per strategy on one deterministic seed
set and reports:
- Mean / min time per compute (ms)
- Computes per second (the interactive demo's FPS read-out)
- Whether every strategy produced the identical field

Usage:
    python scripts/bench.py [--width W] [--height H] [--seeds N] [--repeats N]
                            [--strategies sweep,numpy,taichi]

Example:
    python scripts/bench.py --width 256 --height 256 --seeds 32 --strategies numpy,taichi
"""

import sys
import os
import argparse
import numpy as np

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import RNG_SEED, SWEEP_WORKERS, TI_ARCH
from errors import JFAError
from grid import step_schedule
from jfa import JFAEngine
from seeds import random_seeds
from strategies import STRATEGY_NAMES, make_strategy


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Benchmark JFA strategies')
    parser.add_argument('--width', type=int, default=256,
                        help='Grid width (default: 256)')
    parser.add_argument('--height', type=int, default=256,
                        help='Grid height (default: 256)')
    parser.add_argument('--seeds', type=int, default=32,
                        help='Number of seeds (default: 32)')
    parser.add_argument('--repeats', type=int, default=10,
                        help='Timed computes per strategy (default: 10)')
    parser.add_argument('--strategies', default='numpy,taichi',
                        help='Comma-separated strategies (default: numpy,taichi)')
    parser.add_argument('--workers', type=int, default=SWEEP_WORKERS,
                        help=f'Threads for the sweep strategy (default: {SWEEP_WORKERS})')
    parser.add_argument('--arch', default=TI_ARCH,
                        help=f'Taichi arch (default: {TI_ARCH})')
    parser.add_argument('--seed', type=int, default=RNG_SEED,
                        help=f'Random seed for reproducibility (default: {RNG_SEED})')
    return parser.parse_args(argv)


def strategy_kwargs(name, args):
    if name == "sweep":
        return {"workers": args.workers}
    if name == "taichi":
        return {"arch": args.arch}
    return {}


def bench_strategy(name, args, seeds):
    """
    Time one strategy.

    Returns:
        (stats dict, final field copy)
    """
    engine = JFAEngine(make_strategy(name, **strategy_kwargs(name, args)))
    engine.initialize(args.width, args.height)
    engine.load_seeds(seeds)

    # Warm-up (first compute includes Taichi JIT compilation)
    result = engine.compute()

    times = []
    for _ in range(args.repeats):
        result = engine.compute()
        times.append(result.elapsed_ms)

    mean_ms = float(np.mean(times))
    stats = {
        'strategy': engine.strategy.describe(),
        'mean_ms': mean_ms,
        'min_ms': float(np.min(times)),
        'per_sec': 1000.0 / mean_ms if mean_ms > 0 else 0.0,
        'passes': result.num_passes,
    }
    return stats, engine.field().copy()


def run_benchmark(args):
    """
    Run benchmark and collect performance statistics.

    Args:
        args: Parsed command line arguments

    Returns:
        Dictionary with benchmark results
    """
    if args.repeats < 1:
        raise ValueError(f"--repeats must be >= 1, got {args.repeats}")

    names = [n.strip() for n in args.strategies.split(',') if n.strip()]
    for name in names:
        if name not in STRATEGY_NAMES:
            raise ValueError(f"Unknown strategy {name!r}")

    print(f"\n{'='*70}")
    print(f"JFA BENCHMARK")
    print(f"{'='*70}\n")

    print(f"Configuration:")
    print(f"  Grid:          {args.width}x{args.height}")
    print(f"  Seeds:         {args.seeds}")
    print(f"  Passes:        {len(step_schedule(args.width, args.height))}")
    print(f"  Repeats:       {args.repeats}")
    print(f"  RNG seed:      {args.seed}")
    print(f"  Strategies:    {', '.join(names)}")
    print(f"\n")

    seeds = random_seeds(args.width, args.height, args.seeds, rng=args.seed)

    results = []
    fields = []
    for name in names:
        print(f"[Bench] {name}...")
        stats, field = bench_strategy(name, args, seeds)
        results.append(stats)
        fields.append(field)

    identical = all(np.array_equal(fields[0], f) for f in fields[1:])

    print(f"\n{'='*70}")
    print(f"BENCHMARK RESULTS")
    print(f"{'='*70}\n")
    for stats in results:
        print(f"  {stats['strategy']:<28s} mean {stats['mean_ms']:9.2f}ms  "
              f"min {stats['min_ms']:9.2f}ms  {stats['per_sec']:8.1f}/s")
    print(f"\n  Fields identical across strategies: {'yes' if identical else 'NO'}\n")

    return {
        'results': results,
        'identical': identical,
        'config': {
            'width': args.width,
            'height': args.height,
            'seeds': args.seeds,
            'repeats': args.repeats,
            'seed': args.seed,
        }
    }


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    try:
        results = run_benchmark(args)
    except (JFAError, ValueError) as e:
        print(f"[Error] {e}", file=sys.stderr)
        return 2

    print(f"Benchmark complete!")
    print(f"{'='*70}\n")

    return 0 if results['identical'] else 1


if __name__ == '__main__':
    sys.exit(main())
