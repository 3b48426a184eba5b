from __future__ import annotations

import logging
import numbers
import time
from collections.abc import Sequence
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .exceptions import (
    EmptyReduceError,
    InvalidDepthError,
    ShapeMismatchError,
    UnsupportedRankError,
)
from .materialize import PipelineConfig, materialize
from .ops import Filter, MapTo, Operation, OpKind, Supply, chain_of, prepare_chain
from .shapes import Shape, check_shape, grain_at_depth
from .stats import BuildStats

logger = logging.getLogger(__name__)

ANY = np.dtype(object)


def _func_name(func: Callable[..., Any]) -> str:
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    return str(name) if name else repr(func)


def _is_typed(source: Any) -> bool:
    return hasattr(source, "shape") and hasattr(source, "dtype")


def from_array(
    source: Any,
    depth: int = 1,
    *,
    config: Optional[PipelineConfig] = None,
) -> "Pipeline":
    """Start a pipeline over ``source`` treating its first ``depth`` axes as the shape.

    Axes nested deeper than ``depth`` become part of each element (the grain),
    e.g. ``from_array(np.zeros((4, 3)), depth=1)`` yields four rows of three.
    Untyped flat sequences (lists, tuples, ranges) carry the object dtype and
    only support ``depth=1``.
    """
    if isinstance(depth, bool) or not isinstance(depth, numbers.Integral):
        raise InvalidDepthError("Depth must be an integer", depth=depth)
    if depth <= 0:
        raise InvalidDepthError("Depth must be at least 1", depth=depth)
    depth = int(depth)
    cfg = (config or PipelineConfig()).normalized()

    if _is_typed(source):
        full_shape = tuple(source.shape)
        if len(full_shape) < depth:
            raise ShapeMismatchError("Depth too large", shape=full_shape, depth=depth)
        shape = check_shape(full_shape[:depth])
        grain = grain_at_depth(source.dtype, full_shape, depth)
        if cfg.copy_source:
            source = np.array(source, copy=True)
    elif isinstance(source, Sequence) and not isinstance(source, (str, bytes)):
        if depth != 1:
            raise ShapeMismatchError("Depth too large", shape=(len(source),), depth=depth)
        shape = check_shape((len(source),))
        grain = ANY
        if cfg.copy_source:
            source = list(source)
    else:
        raise ShapeMismatchError(
            f"Cannot take the shape of a {type(source).__name__} source", depth=depth
        )

    logger.debug("created pipeline over shape %s with grain %s", shape, grain)
    return Pipeline(Supply(source, grain, shape), config=cfg)


class Pipeline:
    """Chainable, immutable view over an operation chain.

    ``map``/``map_to``/``filter`` return new pipelines and never run user code.
    ``build`` and ``reduce`` prepare a fresh state chain on every call, so one
    pipeline may be materialized any number of times.

    ``filter`` is not free at build time: preparing it drains everything
    upstream into a buffer before the first kept value is produced.
    """

    def __init__(self, operation: Operation, *, config: Optional[PipelineConfig] = None):
        self.operation = operation
        self.config = config or PipelineConfig()

    def __repr__(self) -> str:
        return f"Pipeline(depth={self.depth}, grain_type={self.grain_type}, steps={len(self.steps())})"

    # Introspection --------------------------------------------------------

    @property
    def depth(self) -> int:
        return self.operation.depth

    @property
    def grain_type(self) -> np.dtype:
        return self.operation.grain_type

    @property
    def shape(self) -> Optional[Shape]:
        """Static output shape, ``None`` when a filter makes the length data dependent."""
        steps = self.steps()
        if any(step.kind is OpKind.FILTER for step in steps):
            return None
        supply = steps[0]
        if not isinstance(supply, Supply):
            raise TypeError(f"Operation chain must start with a supply, got {supply.kind.value}")
        return supply.shape

    def steps(self) -> List[Operation]:
        return chain_of(self.operation)

    # Construction ---------------------------------------------------------

    def _derive(self, operation: Operation) -> "Pipeline":
        return Pipeline(operation, config=self.config)

    def map(self, func: Callable[[Any], Any]) -> "Pipeline":
        """Apply ``func`` to every element, keeping the current grain type.

        Results are cast to that grain when written, so fixed-width grains
        truncate or wrap (``"<U2"`` strings are cut to two characters, ``uint8``
        wraps past 255). Use :meth:`map_to` to declare a wider or different type.
        """
        return self.map_to(self.grain_type, func)

    def map_to(self, grain_type: Any, func: Callable[[Any], Any]) -> "Pipeline":
        return self._derive(MapTo(self.operation, np.dtype(grain_type), func))

    def filter(self, func: Callable[[Any], Any]) -> "Pipeline":
        if self.depth != 1:
            raise UnsupportedRankError(
                "Cannot filter a pipeline unless depth is 1", rank=self.depth
            )
        return self._derive(Filter(self.operation, func))

    # Materialization ------------------------------------------------------

    def build(self, *, config: Optional[PipelineConfig] = None) -> np.ndarray:
        result, _ = self.build_with_stats(config=config)
        return result

    def build_with_stats(
        self, *, config: Optional[PipelineConfig] = None
    ) -> Tuple[np.ndarray, Optional[BuildStats]]:
        cfg = (config or self.config).normalized()
        stats = BuildStats() if cfg.collect_stats else None
        start = time.perf_counter()
        state = prepare_chain(self.operation, stats)
        result = materialize(state, stats)
        if stats is not None:
            stats.shape = tuple(state.shape)
            stats.grain_type = str(state.grain_type)
            stats.elapsed_s = time.perf_counter() - start
        return result, stats

    def reduce(
        self, func: Callable[[Any, Any], Any], *, config: Optional[PipelineConfig] = None
    ) -> Any:
        if self.depth != 1:
            raise UnsupportedRankError(
                "Cannot reduce a pipeline unless depth is 1", rank=self.depth
            )
        values = self.build(config=config)
        if len(values) == 0:
            raise EmptyReduceError("Cannot reduce an empty pipeline")
        accum = values[0]
        for idx in range(1, len(values)):
            accum = func(accum, values[idx])
        return accum

    # Explain --------------------------------------------------------------

    def explain(self, *, json: bool = False) -> Any:
        entries: List[Dict[str, Any]] = []
        for idx, step in enumerate(self.steps()):
            entry: Dict[str, Any] = {
                "index": idx,
                "kind": step.kind.value,
                "depth": step.depth,
                "grain_type": str(step.grain_type),
            }
            if isinstance(step, Supply):
                entry["shape"] = list(step.shape)
                entry["source"] = type(step.source).__name__
            elif isinstance(step, MapTo):
                entry["func"] = _func_name(step.func)
            elif isinstance(step, Filter):
                entry["func"] = _func_name(step.func)
                entry["eager"] = True
            entries.append(entry)

        if json:
            return {"depth": self.depth, "grain_type": str(self.grain_type), "steps": entries}

        lines = []
        for entry in entries:
            line = f"[{entry['index']}] {entry['kind']}: depth={entry['depth']} grain={entry['grain_type']}"
            if "shape" in entry:
                line += f" shape={tuple(entry['shape'])} source={entry['source']}"
            if "func" in entry:
                line += f" func={entry['func']}"
            if entry.get("eager"):
                line += " (drains upstream at build time)"
            lines.append(line)
        return "\n".join(lines)
