"""
Benchmark Suite

Throughput of the explicit cavity step.
Compares the vectorized NumPy step against the Numba kernel.
"""

import numpy as np
import time
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from cavity.field import VelocityField
from cavity.stencil import step, step_fast


def benchmark_step(step_func, n, re, num_steps, warmup_steps=20):
    """
    Benchmark one step implementation on an n x n cavity.

    Returns
    -------
    mlups : float
        Million cell updates per second
    """
    nu = 1.0 / re
    field = VelocityField.create(n, n)

    # Warmup (JIT compilation)
    for _ in range(warmup_steps):
        field = step_func(field, n, n, nu)

    start = time.perf_counter()
    for _ in range(num_steps):
        field = step_func(field, n, n, nu)
    elapsed = time.perf_counter() - start

    if not np.all(np.isfinite(field.u)):
        print(f"  Warning: non-finite values after {num_steps} steps at {n}x{n}")

    return num_steps * n * n / elapsed / 1e6


def run_full_benchmark(grid_sizes=None, re=100, num_steps=500):
    """
    Run the benchmark for both implementations.

    Parameters
    ----------
    grid_sizes : list of int
        Cells per side
    re : float
        Reynolds number
    num_steps : int
        Timed steps per grid

    Returns
    -------
    results : dict
        {'numpy': {n: mlups}, 'numba': {n: mlups}}
    """
    if grid_sizes is None:
        grid_sizes = [20, 50, 100, 200, 400]

    print("=" * 60)
    print("Cavity Step Benchmark")
    print("=" * 60)
    print(f"Re: {re}")
    print(f"Steps: {num_steps}")
    print()

    results = {'numpy': {}, 'numba': {}}

    for name, func in (('numpy', step), ('numba', step_fast)):
        print(f"Benchmarking {name}...")
        print("-" * 40)
        for n in grid_sizes:
            try:
                mlups = benchmark_step(func, n, re, num_steps)
                results[name][n] = mlups
                print(f"  {n:4d} x {n:4d}: {mlups:8.2f} MLUPS")
            except Exception as e:
                print(f"  {n:4d} x {n:4d}: Error - {e}")
                results[name][n] = 0.0
        print()

    print("=" * 60)
    print(f"{'Grid':<12} {'NumPy':>10} {'Numba':>10} {'Speedup':>10}")
    print("-" * 60)
    for n in grid_sizes:
        cpu = results['numpy'].get(n, 0)
        fast = results['numba'].get(n, 0)
        speedup = f"{fast / cpu:.1f}x" if cpu > 0 and fast > 0 else "N/A"
        print(f"{n:4d}x{n:<4d}    {cpu:>10.2f} {fast:>10.2f} {speedup:>10}")
    print("=" * 60)

    return results


if __name__ == "__main__":
    run_full_benchmark()
