"""Immutable operation descriptors forming a backward-linked chain.

``Supply`` is always the head of a chain; ``MapTo`` and ``Filter`` each hold
their upstream operation. Nothing here evaluates user functions: that only
happens once :func:`prepare_chain` turns the chain into states.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

import numpy as np

from .materialize import materialize
from .shapes import Shape
from .states import FilterState, MapState, State, SupplyState
from .stats import BuildStats

logger = logging.getLogger(__name__)


class OpKind(str, Enum):
    SUPPLY = "supply"
    MAP_TO = "map_to"
    FILTER = "filter"


class Operation(ABC):
    kind: OpKind
    grain_type: np.dtype

    @property
    @abstractmethod
    def upstream(self) -> Optional["Operation"]:
        """Previous operation in the chain, ``None`` for the supply."""

    @property
    @abstractmethod
    def depth(self) -> int:
        """Rank of the values this operation produces."""

    @abstractmethod
    def prepare(self, upstream: Optional[State], stats: Optional[BuildStats] = None) -> State:
        """Create the runtime state for this step given its upstream state."""


@dataclass(frozen=True, eq=False)
class Supply(Operation):
    source: Any
    grain_type: np.dtype
    shape: Shape
    kind = OpKind.SUPPLY

    @property
    def upstream(self) -> Optional[Operation]:
        return None

    @property
    def depth(self) -> int:
        return len(self.shape)

    def prepare(self, upstream: Optional[State], stats: Optional[BuildStats] = None) -> State:
        return SupplyState(self.source, self.shape, self.grain_type)


@dataclass(frozen=True, eq=False)
class MapTo(Operation):
    prev: Operation
    grain_type: np.dtype
    func: Callable[[Any], Any]
    kind = OpKind.MAP_TO

    @property
    def upstream(self) -> Optional[Operation]:
        return self.prev

    @property
    def depth(self) -> int:
        return self.prev.depth

    def prepare(self, upstream: Optional[State], stats: Optional[BuildStats] = None) -> State:
        if upstream is None:
            raise TypeError("map_to cannot be prepared without an upstream state")
        return MapState(upstream, self.func, self.grain_type, stats=stats)


@dataclass(frozen=True, eq=False)
class Filter(Operation):
    """Keep the values for which ``func`` is truthy.

    Preparing a filter drains its whole upstream into a buffer before the
    first value can be handed out, since the output length is only known once
    every predicate result is in. The drain happens once per preparation.
    """

    prev: Operation
    func: Callable[[Any], Any]
    kind = OpKind.FILTER

    @property
    def grain_type(self) -> np.dtype:  # type: ignore[override]
        return self.prev.grain_type

    @property
    def upstream(self) -> Optional[Operation]:
        return self.prev

    @property
    def depth(self) -> int:
        return 1

    def prepare(self, upstream: Optional[State], stats: Optional[BuildStats] = None) -> State:
        if upstream is None:
            raise TypeError("filter cannot be prepared without an upstream state")
        values = materialize(upstream)
        drained = len(values)
        keeps = np.zeros(drained, dtype=bool)
        count = 0
        for idx in range(drained):
            if self.func(values[idx]):
                keeps[idx] = True
                count += 1
        if stats is not None:
            stats.record_filter(drained, count)
        logger.debug("filter drained %d upstream values, kept %d", drained, count)
        return FilterState(values, keeps, count, upstream.grain_type)


def chain_of(op: Operation) -> List[Operation]:
    """Operations from the supply to ``op``, inclusive."""
    steps: List[Operation] = []
    current: Optional[Operation] = op
    while current is not None:
        steps.append(current)
        current = current.upstream
    steps.reverse()
    return steps


def prepare_chain(op: Operation, stats: Optional[BuildStats] = None) -> State:
    """Turn the chain ending at ``op`` into a fresh state chain.

    Walks the chain iteratively so long pipelines do not recurse once per step.
    """
    steps = chain_of(op)
    if steps[0].kind is not OpKind.SUPPLY:
        raise TypeError(f"Operation chain must start with a supply, got {steps[0].kind.value}")
    state = steps[0].prepare(None, stats)
    for step in steps[1:]:
        state = step.prepare(state, stats)
    return state
