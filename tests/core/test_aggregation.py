from __future__ import annotations

import pytest

from core.aggregation import (
    aggregate_by_category,
    aggregate_by_month,
    aggregate_by_product,
    aggregate_by_region,
    aggregate_category_region_matrix,
    ranked,
    top_performer,
)
from core.filters import FilterCriteria, apply_filter
from tests.helpers import make_record


def test_region_scenario():
    data = [
        make_record(1, region="NA", amount=100),
        make_record(2, region="EU", amount=200),
        make_record(3, region="NA", amount=300),
    ]
    out = aggregate_by_region(data)

    assert list(out) == ["NA", "EU"]
    assert out["NA"].count == 2
    assert out["NA"].total_revenue == 400
    assert out["NA"].avg_amount == 200
    assert out["EU"].count == 1
    assert out["EU"].total_revenue == 200
    assert out["EU"].avg_amount == 200
    assert out.total_entries == 3
    assert out.distinct_keys == 2


@pytest.mark.parametrize("criteria", [FilterCriteria(), FilterCriteria(region="NA"), FilterCriteria(min_amount=150)])
def test_region_totals_conserve_revenue(sample_records, criteria):
    view = apply_filter(sample_records, criteria)
    grouping = aggregate_by_region(view)
    assert sum(b.total_revenue for b in grouping.values()) == pytest.approx(sum(r.amount for r in view))
    assert sum(b.count for b in grouping.values()) == len(view)


@pytest.mark.parametrize(
    "fn",
    [aggregate_by_region, aggregate_by_product, aggregate_by_month, aggregate_by_category, aggregate_category_region_matrix],
)
def test_every_grouping_conserves_revenue(sample_records, fn):
    grouping = fn(sample_records)
    assert sum(b.total_revenue for b in grouping.values()) == pytest.approx(sum(r.amount for r in sample_records))


@pytest.mark.parametrize(
    "fn",
    [aggregate_by_region, aggregate_by_product, aggregate_by_month, aggregate_by_category, aggregate_category_region_matrix],
)
def test_empty_input_gives_empty_grouping(fn):
    out = fn([])
    assert len(out) == 0
    assert out.total_entries == 0
    assert top_performer(out) is None
    assert ranked(out) == []


def test_product_bucket_tracks_regions_and_range(sample_records):
    out = aggregate_by_product(sample_records)
    console = out["Gaming Console"]
    assert console.count == 2
    assert console.regions == frozenset({"EU", "APAC"})
    assert console.max_sale == 1800
    assert console.min_sale == 200
    assert console.avg_amount == 1000


def test_month_bucket_has_category_breakdown(sample_records):
    out = aggregate_by_month(sample_records)
    assert list(out) == ["2024-01", "2024-02", "2024-07", "2024-09"]
    feb = out["2024-02"]
    assert feb.count == 2
    assert dict(feb.categories) == {"Electronics": 300.0, "Gaming": 50.0}
    assert sum(feb.categories.values()) == feb.total_revenue


def test_matrix_keys_and_products(sample_records):
    out = aggregate_category_region_matrix(sample_records)
    assert "Electronics-NA" in out
    cell = out["Electronics-NA"]
    assert cell.revenue == 400
    assert cell.count == 2
    assert cell.products == frozenset({"Laptop Pro"})
    assert (cell.category, cell.region) == ("Electronics", "NA")


def test_matrix_merges_pairs_that_share_a_key():
    data = [
        make_record(1, category="Home-Office", region="EU", amount=100, product="Desk"),
        make_record(2, category="Home", region="Office-EU", amount=250, product="Lamp"),
    ]
    out = aggregate_category_region_matrix(data)

    assert list(out) == ["Home-Office-EU"]
    cell = out["Home-Office-EU"]
    assert cell.revenue == 350
    assert cell.count == 2
    assert cell.products == frozenset({"Desk", "Lamp"})
    assert (cell.category, cell.region) == ("Home-Office", "EU")
    assert sum(c.revenue for c in out.values()) == sum(r.amount for r in data)


def test_category_bucket(sample_records):
    out = aggregate_by_category(sample_records)
    gaming = out["Gaming"]
    assert gaming.products == frozenset({"Gaming Console", "Smart Watch"})
    assert gaming.min_sale == 50


def test_top_performer_first_seen_wins_on_ties():
    data = [
        make_record(1, region="B", amount=100),
        make_record(2, region="A", amount=100),
        make_record(3, region="C", amount=50),
    ]
    key, bucket = top_performer(aggregate_by_region(data))
    assert key == "B"
    assert bucket.total_revenue == 100


def test_top_performer_picks_strictly_greater():
    data = [make_record(1, region="B", amount=100), make_record(2, region="A", amount=150)]
    key, _ = top_performer(aggregate_by_region(data))
    assert key == "A"


def test_ranked_is_descending_and_stable():
    data = [
        make_record(1, region="B", amount=100),
        make_record(2, region="A", amount=300),
        make_record(3, region="C", amount=100),
    ]
    keys = [k for k, _ in ranked(aggregate_by_region(data))]
    assert keys == ["A", "B", "C"]
    assert [k for k, _ in ranked(aggregate_by_region(data), limit=1)] == ["A"]


def test_grouping_is_read_only_and_input_untouched(sample_records):
    before = list(sample_records)
    out = aggregate_by_region(sample_records)
    with pytest.raises(TypeError):
        out["NA"] = None  # type: ignore[index]
    assert sample_records == before


def test_calls_do_not_share_state(sample_records):
    first = aggregate_by_region(sample_records)
    second = aggregate_by_region(sample_records[:1])
    assert first["NA"].count == 3
    assert second["NA"].count == 1
