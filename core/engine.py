from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, TypeVar, Union

from core import aggregation, sets
from core.data import DataProvider
from core.filters import (
    ALL_CRITERIA,
    FilterCriteria,
    SortKey,
    Thresholds,
    apply_filter,
    normalize_filters,
    sort_view,
)
from core.metrics import Clock, MetricsRecorder
from core.records import RecordStore, SaleRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnalyticsEngine:
    """One analytics session: a record store, its metrics and thresholds.

    Build one per session and pass it to whatever needs it; nothing here is
    module-level state.
    """

    def __init__(
        self,
        *,
        thresholds: Optional[Thresholds] = None,
        clock: Optional[Clock] = None,
        store: Optional[RecordStore] = None,
    ) -> None:
        self.store = store or RecordStore()
        self.recorder = MetricsRecorder(clock)
        self.thresholds = thresholds or Thresholds()
        self.criteria: FilterCriteria = ALL_CRITERIA

    # ---------- dataset ----------

    def load(self, records: Iterable[SaleRecord]) -> int:
        _, elapsed = self.recorder.time(lambda: self.store.load(records), label="load")
        self.criteria = ALL_CRITERIA
        self._refresh_memory()
        logger.info("Loaded %d records in %.2fms", len(self.store), elapsed)
        return len(self.store)

    def load_from(self, provider: DataProvider) -> int:
        return self.load(provider.records())

    @property
    def full_dataset(self) -> Tuple[SaleRecord, ...]:
        return self.store.full_dataset

    @property
    def view(self) -> Tuple[SaleRecord, ...]:
        return self.store.active_view

    # ---------- filter / reset / sort ----------

    def apply_filter(self, criteria: Union[FilterCriteria, Dict[str, Any]]) -> Tuple[SaleRecord, ...]:
        crit = criteria if isinstance(criteria, FilterCriteria) else normalize_filters(criteria)
        full = self.store.full_dataset
        view, elapsed = self.recorder.time(lambda: apply_filter(full, crit), label="filter")
        self.store.set_active_view(view)
        self.criteria = crit
        self.recorder.record_throughput(len(full), elapsed)
        self._refresh_memory()
        logger.info("Applying filters %s: %d -> %d records", asdict(crit), len(full), len(view))
        return view

    def reset(self) -> Tuple[SaleRecord, ...]:
        self.store.reset()
        self.criteria = ALL_CRITERIA
        self._refresh_memory()
        logger.info("Filters reset")
        return self.store.active_view

    def sort(self, key: SortKey) -> Tuple[SaleRecord, ...]:
        current = self.store.active_view
        view, _ = self.recorder.time(lambda: sort_view(current, key), label=f"sort_{key}")
        self.store.set_active_view(view)
        return view

    def filter_ratio(self) -> float:
        full = len(self.store.full_dataset)
        return len(self.store.active_view) / full if full else 0.0

    # ---------- timed computations over the active view ----------

    def timed(self, label: str, fn: Callable[[], T]) -> T:
        result, _ = self.recorder.time(fn, label=label)
        return result

    def by_region(self) -> aggregation.Grouping:
        view = self.view
        return self.timed("aggregate_by_region", lambda: aggregation.aggregate_by_region(view))

    def by_product(self) -> aggregation.Grouping:
        view = self.view
        return self.timed("aggregate_by_product", lambda: aggregation.aggregate_by_product(view))

    def by_month(self) -> aggregation.Grouping:
        view = self.view
        return self.timed("aggregate_by_month", lambda: aggregation.aggregate_by_month(view))

    def by_category(self) -> aggregation.Grouping:
        view = self.view
        return self.timed("aggregate_by_category", lambda: aggregation.aggregate_by_category(view))

    def category_region_matrix(self) -> aggregation.Grouping:
        view = self.view
        return self.timed(
            "aggregate_category_region_matrix", lambda: aggregation.aggregate_category_region_matrix(view)
        )

    def unique_values(self, field: str) -> frozenset:
        view = self.view
        return self.timed(f"unique_{field}", lambda: sets.unique_values(view, field))

    def duplicate_rate(self, field: str) -> float:
        view = self.view
        return self.timed(f"duplicate_rate_{field}", lambda: sets.duplicate_rate(view, field))

    def compare_categories(self, left: str, right: str) -> sets.CategoryComparison:
        view = self.view
        return self.timed("compare_categories", lambda: sets.compare_categories(view, left, right))

    # ---------- metrics ----------

    def _refresh_memory(self, *, map_entries: int = 0, set_entries: int = 0) -> int:
        return self.recorder.record_memory(
            self.store.full_dataset,
            self.store.active_view,
            map_entries=map_entries,
            set_entries=set_entries,
        )

    def performance(self) -> Dict[str, Any]:
        products = aggregation.aggregate_by_product(self.view)
        regions = sets.unique_values(self.store.full_dataset, "region")
        self._refresh_memory(map_entries=len(products), set_entries=len(regions))
        return self.recorder.snapshot()
