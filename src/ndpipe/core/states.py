"""Runtime cursors produced by preparing an operation chain.

Every state yields ``product(shape)`` values through ``next()`` in row-major
order and then raises ``StopIteration``. States are single-pass.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import numpy as np

from .shapes import Shape, advance, product, read, zero_position
from .stats import BuildStats


class State:
    shape: Shape
    grain_type: np.dtype

    def __init__(self, shape: Shape, grain_type: np.dtype):
        self.shape = tuple(shape)
        self.grain_type = grain_type
        self.remaining = product(self.shape)

    def __iter__(self) -> "State":
        return self

    def __next__(self) -> Any:
        if self.remaining <= 0:
            raise StopIteration
        self.remaining -= 1
        return self._produce()

    next = __next__

    def _produce(self) -> Any:
        raise NotImplementedError


class SupplyState(State):
    def __init__(self, source: Any, shape: Shape, grain_type: np.dtype):
        super().__init__(shape, grain_type)
        self.source = source
        self.positions = zero_position(self.shape)

    def _produce(self) -> Any:
        value = read(self.source, self.positions)
        advance(self.positions, self.shape)
        return value


class MapState(State):
    def __init__(
        self,
        upstream: State,
        func: Callable[[Any], Any],
        grain_type: np.dtype,
        stats: Optional[BuildStats] = None,
    ):
        super().__init__(upstream.shape, grain_type)
        self.upstream = upstream
        self.func = func
        self.stats = stats

    def _produce(self) -> Any:
        value = self.func(self.upstream.next())
        if self.stats is not None:
            self.stats.transform_calls += 1
        return value


class FilterState(State):
    """Walks an already-materialized buffer, skipping positions whose keep flag is false."""

    def __init__(self, values: np.ndarray, keeps: np.ndarray, count: int, grain_type: np.dtype):
        super().__init__((count,), grain_type)
        self.values = values
        self.keeps = keeps
        self.count = count
        self.cursor = 0

    def _produce(self) -> Any:
        while not self.keeps[self.cursor]:
            self.cursor += 1
        value = self.values[self.cursor]
        self.cursor += 1
        return value
