from __future__ import annotations

import pytest

from core.errors import ValidationError
from core.filters import (
    ALL_CRITERIA,
    FilterCriteria,
    Thresholds,
    apply_filter,
    normalize_filters,
    normalize_thresholds,
    sort_view,
)
from tests.helpers import make_record


def _scenario():
    return [
        make_record(1, region="NA", amount=100),
        make_record(2, region="EU", amount=200),
        make_record(3, region="NA", amount=300),
    ]


def test_region_filter_returns_single_eu_record():
    data = _scenario()
    out = apply_filter(data, FilterCriteria(region="EU"))
    assert out == (data[1],)
    assert out[0] is data[1]


def test_identity_criteria_returns_full_dataset(sample_records):
    out = apply_filter(sample_records, ALL_CRITERIA)
    assert list(out) == sample_records
    assert all(a is b for a, b in zip(out, sample_records))


@pytest.mark.parametrize(
    "criteria",
    [
        FilterCriteria(region="NA"),
        FilterCriteria(product="Gaming Console"),
        FilterCriteria(min_amount=250),
        FilterCriteria(region="EU", product="Wireless Mouse", min_amount=1000),
        FilterCriteria(region="Nowhere"),
    ],
)
def test_filter_is_idempotent(sample_records, criteria):
    once = apply_filter(sample_records, criteria)
    assert apply_filter(once, criteria) == once


def test_filter_preserves_order_and_membership(sample_records):
    out = apply_filter(sample_records, FilterCriteria(min_amount=200))
    assert [r.id for r in out] == [2, 3, 4, 5]
    assert all(any(r is s for s in sample_records) for r in out)


def test_min_amount_is_inclusive(sample_records):
    out = apply_filter(sample_records, FilterCriteria(min_amount=300))
    assert 3 in [r.id for r in out]


def test_normalize_filters_defaults():
    crit = normalize_filters({})
    assert crit == ALL_CRITERIA
    assert crit.is_identity


def test_normalize_filters_blank_values_mean_all():
    crit = normalize_filters({"region": "  ", "product": "", "min_amount": ""})
    assert crit == ALL_CRITERIA


def test_normalize_filters_parses_numeric_strings():
    crit = normalize_filters({"region": "EU", "minAmount": "150.5"})
    assert crit.region == "EU"
    assert crit.min_amount == 150.5


@pytest.mark.parametrize("value", ["abc", "-1", "nan", "inf", True, [1]])
def test_normalize_filters_rejects_bad_min_amount(value):
    with pytest.raises(ValidationError) as exc:
        normalize_filters({"min_amount": value})
    assert exc.value.field == "min_amount"


def test_sort_view_by_amount_is_descending_and_stable():
    data = [make_record(1, amount=10), make_record(2, amount=30), make_record(3, amount=10)]
    assert [r.id for r in sort_view(data, "amount")] == [2, 1, 3]


def test_sort_view_by_date_newest_first(sample_records):
    out = sort_view(sample_records, "date")
    assert [r.date for r in out] == sorted((r.date for r in sample_records), reverse=True)


def test_sort_view_rejects_unknown_key(sample_records):
    with pytest.raises(ValidationError):
        sort_view(sample_records, "region")


def test_normalize_thresholds_overrides_and_clamps():
    t = normalize_thresholds({"high_value": "2500", "top_n": 1000, "premium_regions": ["Europe"]})
    assert t.high_value == 2500.0
    assert t.top_n == 200
    assert t.premium_regions == ("Europe",)
    assert normalize_thresholds(None) == Thresholds()


def test_normalize_thresholds_rejects_bad_dates():
    with pytest.raises(ValidationError):
        normalize_thresholds({"recent_cutoff": "June"})


@pytest.mark.parametrize("value", [-10, "abc", float("nan")])
def test_filter_criteria_rejects_bad_min_amount(value):
    with pytest.raises(ValidationError) as exc:
        FilterCriteria(min_amount=value)
    assert exc.value.field == "min_amount"


def test_filter_criteria_coerces_min_amount():
    assert FilterCriteria(min_amount="150").min_amount == 150.0
    assert FilterCriteria(min_amount="") == ALL_CRITERIA
