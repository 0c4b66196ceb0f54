from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Literal, Optional, Tuple

from core.errors import ValidationError
from core.records import SaleRecord, parse_iso_date

ALL = "all"
SortKey = Literal["amount", "date"]


@dataclass(frozen=True)
class Thresholds:
    high_value: float = 2000.0
    premium_amount: float = 1500.0
    premium_category: str = "Electronics"
    premium_regions: Tuple[str, ...] = ("North America", "Europe")
    recent_cutoff: str = "2024-06-01"
    search_cutoff: str = "2024-09-01"
    search_amount: float = 4000.0
    search_high_value: float = 3000.0
    profit_margin: float = 0.2
    table_limit: int = 100
    top_n: int = 5


@dataclass(frozen=True)
class FilterCriteria:
    region: str = ALL
    product: str = ALL
    min_amount: float = 0.0

    @property
    def is_identity(self) -> bool:
        return self.region == ALL and self.product == ALL and self.min_amount <= 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_amount", parse_min_amount(self.min_amount))


def _as_choice(value: Optional[object]) -> str:
    if value is None:
        return ALL
    s = str(value).strip()
    return s if s else ALL


def parse_min_amount(value: Optional[object]) -> float:
    """Parse the minimum-amount input; blank means no floor, garbage is rejected."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValidationError(f"min_amount must be a number, got {value!r}", field="min_amount")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"min_amount must be a number, got {value!r}", field="min_amount") from None
    if not math.isfinite(out) or out < 0:
        raise ValidationError(f"min_amount must be a non-negative number, got {value!r}", field="min_amount")
    return out


ALL_CRITERIA = FilterCriteria()


def normalize_filters(raw: dict) -> FilterCriteria:
    return FilterCriteria(
        region=_as_choice(raw.get("region")),
        product=_as_choice(raw.get("product")),
        min_amount=parse_min_amount(raw.get("min_amount", raw.get("minAmount"))),
    )


def normalize_thresholds(raw: Optional[dict]) -> Thresholds:
    t = raw or {}
    base = Thresholds()
    regions = t.get("premium_regions")
    for cutoff in ("recent_cutoff", "search_cutoff"):
        if cutoff in t and parse_iso_date(t[cutoff]) is None:
            raise ValidationError(f"{cutoff} must be an ISO date, got {t[cutoff]!r}", field=cutoff)
    try:
        return Thresholds(
            high_value=float(t.get("high_value", base.high_value)),
            premium_amount=float(t.get("premium_amount", base.premium_amount)),
            premium_category=str(t.get("premium_category", base.premium_category)),
            premium_regions=tuple(str(x) for x in regions) if regions else base.premium_regions,
            recent_cutoff=str(t.get("recent_cutoff", base.recent_cutoff)),
            search_cutoff=str(t.get("search_cutoff", base.search_cutoff)),
            search_amount=float(t.get("search_amount", base.search_amount)),
            search_high_value=float(t.get("search_high_value", base.search_high_value)),
            profit_margin=float(t.get("profit_margin", base.profit_margin)),
            table_limit=max(1, int(t.get("table_limit", base.table_limit))),
            top_n=max(1, min(200, int(t.get("top_n", base.top_n)))),
        )
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"invalid threshold override: {exc}") from None


def matches(record: SaleRecord, criteria: FilterCriteria) -> bool:
    if criteria.region != ALL and record.region != criteria.region:
        return False
    if criteria.product != ALL and record.product != criteria.product:
        return False
    return record.amount >= criteria.min_amount


def apply_filter(records: Iterable[SaleRecord], criteria: FilterCriteria) -> Tuple[SaleRecord, ...]:
    """Single pass over `records`, keeping order and the original objects."""
    return tuple(r for r in records if matches(r, criteria))


def sort_view(records: Iterable[SaleRecord], key: SortKey) -> Tuple[SaleRecord, ...]:
    if key == "amount":
        return tuple(sorted(records, key=lambda r: r.amount, reverse=True))
    if key == "date":
        return tuple(sorted(records, key=lambda r: r.date, reverse=True))
    raise ValidationError(f"unknown sort key {key!r}; expected 'amount' or 'date'", field="sort")
