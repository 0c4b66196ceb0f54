from __future__ import annotations

from core.data import CATEGORIES, PRODUCTS, REGIONS, SyntheticSalesProvider
from core.records import RecordStore, parse_iso_date


def test_synthetic_records_satisfy_invariants():
    records = SyntheticSalesProvider(500, seed=7).records()
    store = RecordStore()
    store.load(records)

    assert len(records) == 500
    assert [r.id for r in records] == list(range(1, 501))
    for r in records:
        assert 100 <= r.amount <= 5099
        assert r.product in PRODUCTS
        assert r.region in REGIONS
        assert r.category in CATEGORIES
        d = parse_iso_date(r.date)
        assert d is not None and d.year == 2024 and 1 <= d.day <= 28


def test_seed_makes_output_reproducible():
    assert SyntheticSalesProvider(50, seed=11).records() == SyntheticSalesProvider(50, seed=11).records()


def test_zero_size_provider():
    assert SyntheticSalesProvider(0).records() == []
