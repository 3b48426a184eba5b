from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class FilterStats:
    drained: int = 0
    kept: int = 0

    @property
    def dropped(self) -> int:
        return self.drained - self.kept


@dataclass
class BuildStats:
    shape: Optional[tuple] = None
    grain_type: Optional[str] = None
    elements_written: int = 0
    transform_calls: int = 0
    filters: List[FilterStats] = field(default_factory=list)
    elapsed_s: float = 0.0

    def record_filter(self, drained: int, kept: int) -> FilterStats:
        entry = FilterStats(drained=drained, kept=kept)
        self.filters.append(entry)
        return entry

    def as_dict(self) -> Dict[str, Any]:
        return {
            "shape": list(self.shape) if self.shape is not None else None,
            "grain_type": self.grain_type,
            "elements_written": int(self.elements_written),
            "transform_calls": int(self.transform_calls),
            "filters": [
                {"drained": f.drained, "kept": f.kept, "dropped": f.dropped}
                for f in self.filters
            ],
            "elapsed_s": float(self.elapsed_s),
        }
