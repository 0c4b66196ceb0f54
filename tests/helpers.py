from __future__ import annotations

from core.records import SaleRecord


def make_record(
    id: int,
    *,
    product: str = "Laptop Pro",
    amount: float = 100.0,
    region: str = "North America",
    date: str = "2024-01-15",
    category: str = "Electronics",
) -> SaleRecord:
    return SaleRecord(id=id, product=product, amount=amount, region=region, date=date, category=category)


class FakeClock:
    """Returns the queued readings in order (seconds)."""

    def __init__(self, *readings: float) -> None:
        self.readings = list(readings)

    def __call__(self) -> float:
        return self.readings.pop(0)
