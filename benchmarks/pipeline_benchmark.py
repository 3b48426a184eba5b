#!/usr/bin/env python3
"""
Materialization benchmark for ndpipe.

Times ``build`` for a map-only pipeline and a map+filter pipeline over
one-dimensional and two-dimensional sources, next to the equivalent
vectorised NumPy expression for reference.
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from typing import Callable, List

import numpy as np

from ndpipe import from_array


@dataclass
class BenchmarkResult:
    name: str
    elements: int
    min_s: float
    mean_s: float
    iterations: int

    @property
    def elements_per_s(self) -> float:
        return self.elements / self.min_s if self.min_s > 0 else float("inf")


def _time(fn: Callable[[], object], iterations: int) -> List[float]:
    timings = []
    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return timings


def run(size: int, iterations: int, seed: int) -> List[BenchmarkResult]:
    rng = np.random.default_rng(seed)
    flat = rng.integers(0, 1000, size=size, dtype=np.int64)
    side = max(1, int(size**0.5))
    grid = rng.integers(0, 1000, size=(side, side), dtype=np.int64)

    cases = {
        "map_1d": (flat.size, lambda: from_array(flat).map(lambda v: v * 2).build()),
        "map_filter_1d": (
            flat.size,
            lambda: from_array(flat).map(lambda v: v + 1).filter(lambda v: v % 3 == 0).build(),
        ),
        "map_2d": (grid.size, lambda: from_array(grid, 2).map(lambda v: v - 1).build()),
        "numpy_map_1d": (flat.size, lambda: flat * 2),
    }

    results = []
    for name, (elements, fn) in cases.items():
        timings = _time(fn, iterations)
        results.append(
            BenchmarkResult(
                name=name,
                elements=elements,
                min_s=min(timings),
                mean_s=sum(timings) / len(timings),
                iterations=iterations,
            )
        )
    return results


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--size", type=int, default=100_000)
    parser.add_argument("--iterations", type=int, default=5)
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    for result in run(args.size, args.iterations, args.seed):
        print(
            f"{result.name:>16}: min={result.min_s * 1e3:8.2f}ms "
            f"mean={result.mean_s * 1e3:8.2f}ms "
            f"({result.elements_per_s:,.0f} elem/s over {result.iterations} runs)"
        )


if __name__ == "__main__":
    main()
