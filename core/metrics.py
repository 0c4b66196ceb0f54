"""Timing and size heuristics for engine operations.

Wall-clock reads go through an injectable `Clock` so tests can supply
deterministic timings. Memory figures are display-only estimates.
"""

from __future__ import annotations

import json
import logging
import time as _time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple, TypeVar

from core.records import SaleRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAP_ENTRY_BYTES = 50
SET_ENTRY_BYTES = 20


class Clock(Protocol):
    def __call__(self) -> float: ...


@dataclass
class PerformanceMetrics:
    processing_time_ms: float = 0.0
    operations_per_second: int = 0
    memory_kb: int = 0
    last_operation: Optional[str] = None
    timings: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def throughput(size: int, elapsed_ms: float) -> float:
    if elapsed_ms <= 0:
        return 0.0
    return size / (elapsed_ms / 1000)


def _serialized_length(records: Sequence[SaleRecord]) -> int:
    return len(json.dumps([r.to_dict() for r in records], separators=(",", ":")))


def estimate_memory(
    full: Sequence[SaleRecord],
    view: Sequence[SaleRecord],
    *,
    map_entries: int = 0,
    set_entries: int = 0,
) -> int:
    """Rough KB footprint: serialized datasets plus a flat per-entry overhead."""
    total = (
        _serialized_length(full)
        + _serialized_length(view)
        + map_entries * MAP_ENTRY_BYTES
        + set_entries * SET_ENTRY_BYTES
    )
    return int(round(total / 1024))


class MetricsRecorder:
    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or _time.perf_counter
        self.metrics = PerformanceMetrics()

    def time(self, operation: Callable[[], T], *, label: Optional[str] = None) -> Tuple[T, float]:
        start = self.clock()
        result = operation()
        elapsed_ms = (self.clock() - start) * 1000.0
        name = label or getattr(operation, "__name__", "operation")
        self.metrics.processing_time_ms = elapsed_ms
        self.metrics.last_operation = name
        self.metrics.timings[name] = elapsed_ms
        logger.debug("%s took %.3fms", name, elapsed_ms)
        return result, elapsed_ms

    def record_throughput(self, size: int, elapsed_ms: float) -> int:
        ops = int(round(throughput(size, elapsed_ms)))
        self.metrics.operations_per_second = ops
        return ops

    def record_memory(
        self,
        full: Sequence[SaleRecord],
        view: Sequence[SaleRecord],
        *,
        map_entries: int = 0,
        set_entries: int = 0,
    ) -> int:
        kb = estimate_memory(full, view, map_entries=map_entries, set_entries=set_entries)
        self.metrics.memory_kb = kb
        return kb

    def snapshot(self) -> Dict[str, Any]:
        out = self.metrics.to_dict()
        out["timings"] = dict(self.metrics.timings)
        return out
