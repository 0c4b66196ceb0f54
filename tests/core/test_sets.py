from __future__ import annotations

import pytest

from core.errors import ValidationError
from core.sets import (
    category_products,
    compare_categories,
    difference,
    duplicate_rate,
    high_value_products,
    intersect,
    union,
    unique_values,
)
from tests.helpers import make_record


def test_unique_values_and_duplicate_rate():
    data = [make_record(1, product="A"), make_record(2, product="B"), make_record(3, product="A")]
    assert len(unique_values(data, "product")) == 2
    assert duplicate_rate(data, "product") == pytest.approx(1 / 3)


def test_set_algebra_scenario():
    a, b = {"A", "B"}, {"B", "C"}
    assert intersect(a, b) == {"B"}
    assert union(a, b) == {"A", "B", "C"}
    assert difference(a, b) == {"A"}
    assert difference(b, a) == {"C"}


@pytest.mark.parametrize(
    "a, b",
    [
        ({"A", "B"}, {"B", "C"}),
        (set(), {"X"}),
        ({"X", "Y"}, {"X", "Y"}),
        (frozenset({1, 2, 3}), {4}),
    ],
)
def test_set_bounds(a, b):
    both = intersect(a, b)
    assert both <= a and both <= b
    assert len(union(a, b)) >= max(len(a), len(b))
    assert len(both) <= min(len(a), len(b))


def test_results_are_fresh_frozensets():
    a = {"A"}
    out = union(a, set())
    a.add("B")
    assert out == {"A"}
    assert isinstance(out, frozenset)


def test_unique_count_never_exceeds_records(sample_records):
    for field in ("product", "region", "category", "date", "id", "amount"):
        assert len(unique_values(sample_records, field)) <= len(sample_records)


def test_empty_inputs_are_safe():
    assert unique_values([], "product") == frozenset()
    assert duplicate_rate([], "product") == 0.0
    assert intersect(set(), set()) == frozenset()
    assert category_products([], "Gaming") == frozenset()


def test_unknown_field_is_rejected(sample_records):
    with pytest.raises(ValidationError):
        unique_values(sample_records, "price")
    with pytest.raises(ValidationError):
        duplicate_rate([], "price")


def test_category_scoped_sets(sample_records):
    assert category_products(sample_records, "Electronics") == {"Laptop Pro", "Gaming Console"}
    assert category_products(sample_records, "Gaming") == {"Gaming Console", "Smart Watch"}
    assert high_value_products(sample_records, 2000) == {"Wireless Mouse"}


def test_compare_categories(sample_records):
    cmp = compare_categories(sample_records, "Electronics", "Gaming")
    assert cmp.both == {"Gaming Console"}
    assert cmp.either == {"Laptop Pro", "Gaming Console", "Smart Watch"}
    assert cmp.left_only == {"Laptop Pro"}
    assert cmp.to_dict()["intersection"] == ["Gaming Console"]
