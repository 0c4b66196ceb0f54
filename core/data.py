from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, Sequence

import numpy as np
import pandas as pd

from core.records import SaleRecord

PRODUCTS = [
    "Laptop Pro",
    "Smartphone X",
    "Tablet Air",
    "Headphones Premium",
    "Smart Watch",
    "Gaming Console",
    "Wireless Mouse",
    "Mechanical Keyboard",
    "Monitor 4K",
    "Webcam HD",
    "Speaker Set",
    "Power Bank",
    "USB Drive 64GB",
    "External Hard Drive",
    "Graphics Card RTX",
]

REGIONS = ["North America", "Europe", "Asia Pacific", "South America", "Africa", "Middle East"]

CATEGORIES = ["Electronics", "Accessories", "Gaming", "Computing", "Mobile"]

MIN_AMOUNT = 100
AMOUNT_SPAN = 5000
MAX_DAY = 28


class DataProvider(Protocol):
    def records(self) -> Iterable[SaleRecord]: ...


class StaticProvider:
    """Serves an already materialized list of records."""

    def __init__(self, records: Sequence[SaleRecord]) -> None:
        self._records = list(records)

    def records(self) -> List[SaleRecord]:
        return list(self._records)


class SyntheticSalesProvider:
    """Uniform random sales for one calendar year.

    Product, region and category are drawn independently; amounts are whole
    numbers in [100, 5099]; days run 1-28 so every month is valid.
    """

    def __init__(
        self,
        size: int = 500,
        *,
        year: int = 2024,
        seed: Optional[int] = None,
        products: Sequence[str] = PRODUCTS,
        regions: Sequence[str] = REGIONS,
        categories: Sequence[str] = CATEGORIES,
    ) -> None:
        if size < 0:
            raise ValueError("size must be >= 0")
        self.size = size
        self.year = year
        self.seed = seed
        self.products = list(products)
        self.regions = list(regions)
        self.categories = list(categories)

    def frame(self) -> pd.DataFrame:
        n = self.size
        if n == 0:
            return pd.DataFrame(columns=["id", "product", "amount", "region", "date", "category"])
        rng = np.random.default_rng(self.seed)
        months = rng.integers(1, 13, size=n)
        days = rng.integers(1, MAX_DAY + 1, size=n)
        dates = pd.to_datetime(pd.DataFrame({"year": np.full(n, self.year), "month": months, "day": days}))
        return pd.DataFrame(
            {
                "id": np.arange(1, n + 1),
                "product": rng.choice(self.products, size=n),
                "amount": rng.integers(0, AMOUNT_SPAN, size=n) + MIN_AMOUNT,
                "region": rng.choice(self.regions, size=n),
                "date": dates.dt.strftime("%Y-%m-%d"),
                "category": rng.choice(self.categories, size=n),
            }
        )

    def records(self) -> List[SaleRecord]:
        df = self.frame()
        return [
            SaleRecord(
                id=int(row.id),
                product=str(row.product),
                amount=float(row.amount),
                region=str(row.region),
                date=str(row.date),
                category=str(row.category),
            )
            for row in df.itertuples(index=False)
        ]
