"""Shape and coordinate helpers shared by states and the materializer.

Positions are plain ``list`` objects mutated in place; shapes are tuples of
ints. Traversal is row-major: the last axis varies fastest and carries move
leftward.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterator, List, MutableSequence, Sequence, Tuple

import numpy as np

from .exceptions import ShapeMismatchError

Shape = Tuple[int, ...]


def product(shape: Sequence[int]) -> int:
    result = 1
    for extent in shape:
        result *= int(extent)
    return int(result)


def check_shape(shape: Sequence[Any]) -> Shape:
    """Return ``shape`` as a tuple of ints, rejecting non-integral or negative extents."""
    extents: List[int] = []
    for extent in shape:
        if isinstance(extent, bool) or not isinstance(extent, numbers.Integral):
            raise ShapeMismatchError("Invalid shape: extents must be integers", shape=shape)
        if extent < 0:
            raise ShapeMismatchError("Invalid shape: extents must be non-negative", shape=shape)
        extents.append(int(extent))
    return tuple(extents)


def zero_position(shape: Sequence[int]) -> List[int]:
    return [0] * len(shape)


def advance(position: MutableSequence[int], shape: Sequence[int]) -> bool:
    """Odometer increment of ``position`` within ``shape``.

    Returns ``False`` once every axis has carried past its extent, at which
    point ``position`` has wrapped back to all zeros.
    """
    for axis in range(len(position) - 1, -1, -1):
        position[axis] += 1
        if position[axis] < shape[axis]:
            return True
        position[axis] = 0
    return False


def iter_positions(shape: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    total = product(shape)
    position = zero_position(shape)
    for _ in range(total):
        yield tuple(position)
        advance(position, shape)


def read(container: Any, position: Sequence[int]) -> Any:
    if isinstance(container, np.ndarray):
        return container[tuple(position)]
    value = container
    for index in position:
        value = value[index]
    return value


def write(container: Any, position: Sequence[int], value: Any) -> None:
    if isinstance(container, np.ndarray):
        container[tuple(position)] = value
        return
    target = container
    for index in position[:-1]:
        target = target[index]
    target[position[-1]] = value


def allocate(grain_type: Any, shape: Sequence[int]) -> np.ndarray:
    """Allocate a zero-filled container of ``shape`` holding ``grain_type`` leaves.

    Sub-array grains such as ``np.dtype(("u4", (3,)))`` fold into trailing
    axes of the returned array.
    """
    return np.zeros(check_shape(shape), dtype=np.dtype(grain_type))


def grain_at_depth(dtype: Any, shape: Sequence[int], depth: int) -> np.dtype:
    """Element type left over once the first ``depth`` axes of ``shape`` are indexed."""
    base = np.dtype(dtype)
    inner = tuple(shape[depth:])
    if not inner:
        return base
    return np.dtype((base, inner))
