"""Grouped statistics over a record collection.

Every function here is pure: it reads the records, groups them with pandas
(``sort=False``, so groups come out in first-occurrence order) and returns a
freshly built, read-only `Grouping`. Nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

import pandas as pd

from core.errors import ValidationError
from core.records import SaleRecord, records_to_frame

B = TypeVar("B")


def _average(total: float, count: int) -> float:
    return total / count if count else 0.0


@dataclass(frozen=True)
class RegionBucket:
    key: str
    count: int
    total_revenue: float
    avg_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {"region": self.key, "count": self.count, "total_revenue": self.total_revenue, "avg_amount": self.avg_amount}


@dataclass(frozen=True)
class ProductBucket:
    key: str
    count: int
    total_revenue: float
    avg_amount: float
    regions: frozenset
    max_sale: float
    min_sale: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product": self.key,
            "count": self.count,
            "total_revenue": self.total_revenue,
            "avg_amount": self.avg_amount,
            "regions": sorted(self.regions),
            "max_sale": self.max_sale if self.count else None,
            "min_sale": self.min_sale if self.count else None,
        }


@dataclass(frozen=True)
class MonthBucket:
    key: str
    count: int
    total_revenue: float
    avg_amount: float
    categories: Mapping = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.key,
            "count": self.count,
            "total_revenue": self.total_revenue,
            "avg_amount": self.avg_amount,
            "categories": dict(self.categories),
        }


@dataclass(frozen=True)
class CategoryBucket:
    key: str
    count: int
    total_revenue: float
    avg_amount: float
    products: frozenset
    max_sale: float
    min_sale: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.key,
            "count": self.count,
            "total_revenue": self.total_revenue,
            "avg_amount": self.avg_amount,
            "products": sorted(self.products),
            "max_sale": self.max_sale if self.count else None,
            "min_sale": self.min_sale if self.count else None,
        }


@dataclass(frozen=True)
class MatrixCell:
    key: str
    category: str
    region: str
    count: int
    revenue: float
    products: frozenset

    @property
    def total_revenue(self) -> float:
        return self.revenue

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "category": self.category,
            "region": self.region,
            "count": self.count,
            "revenue": self.revenue,
            "products": sorted(self.products),
        }


class Grouping(Mapping, Generic[B]):
    """Read-only, insertion-ordered mapping of group key to bucket."""

    def __init__(self, buckets: Dict[str, B], *, total_entries: int) -> None:
        self._buckets = MappingProxyType(dict(buckets))
        self.total_entries = total_entries

    def __getitem__(self, key: str) -> B:
        return self._buckets[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._buckets)

    def __len__(self) -> int:
        return len(self._buckets)

    @property
    def distinct_keys(self) -> int:
        return len(self._buckets)

    def to_records(self) -> List[Dict[str, Any]]:
        return [bucket.to_dict() for bucket in self._buckets.values()]  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"Grouping({dict(self._buckets)!r}, total_entries={self.total_entries})"


EMPTY: Grouping = Grouping({}, total_entries=0)


def _unique_sets(df: pd.DataFrame, by: Sequence[str] | str, col: str) -> Dict[Any, frozenset]:
    return {k: frozenset(v) for k, v in df.groupby(by, sort=False)[col].unique().items()}


def _totals(df: pd.DataFrame, by: Sequence[str] | str) -> pd.DataFrame:
    return df.groupby(by, sort=False).agg(
        count=("amount", "size"),
        total_revenue=("amount", "sum"),
        max_sale=("amount", "max"),
        min_sale=("amount", "min"),
    )


def aggregate_by_region(records: Sequence[SaleRecord]) -> Grouping[RegionBucket]:
    if not records:
        return EMPTY
    df = records_to_frame(records)
    out: Dict[str, RegionBucket] = {}
    for region, row in _totals(df, "region").iterrows():
        count, total = int(row["count"]), float(row["total_revenue"])
        out[str(region)] = RegionBucket(key=str(region), count=count, total_revenue=total, avg_amount=_average(total, count))
    return Grouping(out, total_entries=len(records))


def aggregate_by_product(records: Sequence[SaleRecord]) -> Grouping[ProductBucket]:
    if not records:
        return EMPTY
    df = records_to_frame(records)
    regions = _unique_sets(df, "product", "region")
    out: Dict[str, ProductBucket] = {}
    for product, row in _totals(df, "product").iterrows():
        count, total = int(row["count"]), float(row["total_revenue"])
        out[str(product)] = ProductBucket(
            key=str(product),
            count=count,
            total_revenue=total,
            avg_amount=_average(total, count),
            regions=regions[product],
            max_sale=float(row["max_sale"]),
            min_sale=float(row["min_sale"]),
        )
    return Grouping(out, total_entries=len(records))


def aggregate_by_month(records: Sequence[SaleRecord]) -> Grouping[MonthBucket]:
    if not records:
        return EMPTY
    df = records_to_frame(records)
    by_category: Dict[str, Dict[str, float]] = {}
    for (month, category), revenue in df.groupby(["month", "category"], sort=False)["amount"].sum().items():
        by_category.setdefault(str(month), {})[str(category)] = float(revenue)
    out: Dict[str, MonthBucket] = {}
    for month, row in _totals(df, "month").iterrows():
        count, total = int(row["count"]), float(row["total_revenue"])
        out[str(month)] = MonthBucket(
            key=str(month),
            count=count,
            total_revenue=total,
            avg_amount=_average(total, count),
            categories=MappingProxyType(by_category.get(str(month), {})),
        )
    return Grouping(out, total_entries=len(records))


def aggregate_by_category(records: Sequence[SaleRecord]) -> Grouping[CategoryBucket]:
    if not records:
        return EMPTY
    df = records_to_frame(records)
    products = _unique_sets(df, "category", "product")
    out: Dict[str, CategoryBucket] = {}
    for category, row in _totals(df, "category").iterrows():
        count, total = int(row["count"]), float(row["total_revenue"])
        out[str(category)] = CategoryBucket(
            key=str(category),
            count=count,
            total_revenue=total,
            avg_amount=_average(total, count),
            products=products[category],
            max_sale=float(row["max_sale"]),
            min_sale=float(row["min_sale"]),
        )
    return Grouping(out, total_entries=len(records))


def matrix_key(category: str, region: str) -> str:
    return f"{category}-{region}"


def aggregate_category_region_matrix(records: Sequence[SaleRecord]) -> Grouping[MatrixCell]:
    """Cells keyed by `matrix_key`.

    Grouping is on the joined key, so two pairs that render to the same key
    (`"Home-Office" + "EU"` and `"Home" + "Office-EU"`) share one cell. Such a
    cell reports the first-seen category and region.
    """
    if not records:
        return EMPTY
    df = records_to_frame(records)
    df["key"] = [matrix_key(c, r) for c, r in zip(df["category"], df["region"])]
    products = _unique_sets(df, "key", "product")
    pairs = df.groupby("key", sort=False)[["category", "region"]].first()
    out: Dict[str, MatrixCell] = {}
    for key, row in _totals(df, "key").iterrows():
        out[str(key)] = MatrixCell(
            key=str(key),
            category=str(pairs.at[key, "category"]),
            region=str(pairs.at[key, "region"]),
            count=int(row["count"]),
            revenue=float(row["total_revenue"]),
            products=products[key],
        )
    return Grouping(out, total_entries=len(records))


def _value(bucket: object, field_name: str) -> float:
    try:
        return getattr(bucket, field_name)
    except AttributeError:
        raise ValidationError(f"bucket has no field {field_name!r}", field=field_name) from None


def top_performer(grouping: Mapping, field_name: str = "total_revenue") -> Optional[Tuple[str, Any]]:
    """Best bucket by `field_name`, scanning in grouping order.

    A bucket replaces the current best only when strictly greater, so equal
    values keep the first one seen. That tie-break is a side effect of the
    scan, not a business rule.
    """
    best: Optional[Tuple[str, Any]] = None
    best_value = 0.0
    for key, bucket in grouping.items():
        value = _value(bucket, field_name)
        if value > best_value:
            best, best_value = (key, bucket), value
    return best


def ranked(grouping: Mapping, field_name: str = "total_revenue", *, limit: Optional[int] = None) -> List[Tuple[str, Any]]:
    # sorted() is stable, equal values keep grouping order
    items = sorted(grouping.items(), key=lambda kv: _value(kv[1], field_name), reverse=True)
    return items[:limit] if limit is not None else items
