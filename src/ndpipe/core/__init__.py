"""Core modules for ndpipe."""

__all__ = [
    "exceptions",
    "materialize",
    "ops",
    "pipeline",
    "shapes",
    "states",
    "stats",
]
