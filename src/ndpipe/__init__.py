from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _load_version

from .core.exceptions import (
    EmptyReduceError,
    InvalidDepthError,
    PipelineError,
    ShapeMismatchError,
    UnsupportedRankError,
)
from .core.materialize import PipelineConfig
from .core.ops import Filter, MapTo, Operation, OpKind, Supply
from .core.pipeline import ANY, Pipeline, from_array
from .core.stats import BuildStats, FilterStats

try:
    __version__ = _load_version("ndpipe")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "from_array",
    "Pipeline",
    "PipelineConfig",
    "BuildStats",
    "FilterStats",
    "Operation",
    "OpKind",
    "Supply",
    "MapTo",
    "Filter",
    "ANY",
    "PipelineError",
    "InvalidDepthError",
    "ShapeMismatchError",
    "UnsupportedRankError",
    "EmptyReduceError",
    "__version__",
]
