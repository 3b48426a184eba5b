from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .shapes import advance, allocate, product, write, zero_position
from .states import State
from .stats import BuildStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    """
    Switches shared by pipeline construction and materialization.

    * ``copy_source`` snapshots the source when the pipeline is created so a
      later mutation of the caller's array does not leak into a deferred build.
    * ``collect_stats`` records a :class:`BuildStats` for each materialization.
    """

    copy_source: bool = False
    collect_stats: bool = True

    def normalized(self) -> "PipelineConfig":
        return replace(
            self,
            copy_source=bool(self.copy_source),
            collect_stats=bool(self.collect_stats),
        )


def materialize(state: State, stats: Optional[BuildStats] = None) -> np.ndarray:
    """Drain ``state`` into a freshly allocated container.

    ``next()`` is called exactly ``product(state.shape)`` times and each value
    is written at the next row-major coordinate.
    """
    shape = state.shape
    result = allocate(state.grain_type, shape)
    total = product(shape)
    position = zero_position(shape)
    start = time.perf_counter()
    for _ in range(total):
        write(result, position, state.next())
        advance(position, shape)
    elapsed = time.perf_counter() - start
    if stats is not None:
        stats.elements_written += total
    logger.debug(
        "materialized %d elements into shape %s (%s) in %.6fs",
        total,
        shape,
        state.grain_type,
        elapsed,
    )
    return result
