from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, Iterable, Sequence

from core.errors import ValidationError
from core.records import RECORD_FIELDS, SaleRecord


def _check_field(field: str) -> None:
    if field not in RECORD_FIELDS:
        raise ValidationError(f"unknown record field {field!r}; expected one of {', '.join(RECORD_FIELDS)}", field=field)


def unique_values(records: Iterable[SaleRecord], field: str) -> frozenset:
    _check_field(field)
    return frozenset(getattr(r, field) for r in records)


def duplicate_rate(records: Sequence[SaleRecord], field: str) -> float:
    """Share of records whose `field` value repeats an earlier record's value."""
    if not records:
        _check_field(field)
        return 0.0
    return (len(records) - len(unique_values(records, field))) / len(records)


def intersect(a: AbstractSet, b: AbstractSet) -> frozenset:
    return frozenset(a) & frozenset(b)


def union(a: AbstractSet, b: AbstractSet) -> frozenset:
    return frozenset(a) | frozenset(b)


def difference(a: AbstractSet, b: AbstractSet) -> frozenset:
    return frozenset(a) - frozenset(b)


def category_products(records: Iterable[SaleRecord], category: str) -> frozenset:
    return unique_values((r for r in records if r.category == category), "product")


def high_value_products(records: Iterable[SaleRecord], threshold: float) -> frozenset:
    return unique_values((r for r in records if r.amount > threshold), "product")


@dataclass(frozen=True)
class CategoryComparison:
    left: str
    right: str
    left_products: frozenset
    right_products: frozenset
    both: frozenset
    either: frozenset
    left_only: frozenset

    def to_dict(self) -> Dict[str, Any]:
        return {
            "left": self.left,
            "right": self.right,
            "left_products": sorted(self.left_products),
            "right_products": sorted(self.right_products),
            "intersection": sorted(self.both),
            "union": sorted(self.either),
            "left_only": sorted(self.left_only),
        }


def compare_categories(records: Sequence[SaleRecord], left: str, right: str) -> CategoryComparison:
    a = category_products(records, left)
    b = category_products(records, right)
    return CategoryComparison(
        left=left,
        right=right,
        left_products=a,
        right_products=b,
        both=intersect(a, b),
        either=union(a, b),
        left_only=difference(a, b),
    )
