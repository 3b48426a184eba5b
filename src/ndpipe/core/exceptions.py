from __future__ import annotations

from typing import Optional, Sequence


class PipelineError(Exception):
    """Base class for ndpipe-specific exceptions."""


class InvalidDepthError(PipelineError, ValueError):
    def __init__(self, message: str, *, depth: object = None):
        super().__init__(message)
        self.depth = depth


class ShapeMismatchError(PipelineError, ValueError):
    def __init__(
        self,
        message: str,
        *,
        shape: Optional[Sequence[object]] = None,
        depth: Optional[int] = None,
    ):
        super().__init__(f"{message}{_format_shape(shape, depth)}")
        self.shape = tuple(shape) if shape is not None else None
        self.depth = depth


class UnsupportedRankError(PipelineError, ValueError):
    def __init__(self, message: str, *, rank: Optional[int] = None):
        detail = f" (rank {rank})" if rank is not None else ""
        super().__init__(f"{message}{detail}")
        self.rank = rank


class EmptyReduceError(PipelineError, ValueError):
    pass


def _format_shape(shape: Optional[Sequence[object]], depth: Optional[int]) -> str:
    if shape is None and depth is None:
        return ""
    parts = []
    if shape is not None:
        parts.append(f"shape {tuple(shape)}")
    if depth is not None:
        parts.append(f"depth {depth}")
    return f" ({', '.join(parts)})"
