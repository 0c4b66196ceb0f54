from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.engine import AnalyticsEngine
from core.sets import category_products, duplicate_rate, high_value_products, unique_values

SCOPED_CATEGORIES = ("Electronics", "Gaming", "Accessories")


def compute_set_analysis(engine: AnalyticsEngine, *, left: str = "Electronics", right: str = "Gaming") -> Dict[str, Any]:
    view = engine.view
    if not view:
        return {
            "criteria": asdict(engine.criteria),
            "empty": True,
            "unique_counts": {"products": 0, "categories": 0, "regions": 0, "trading_days": 0},
            "category_sets": {c: 0 for c in SCOPED_CATEGORIES},
            "comparison": None,
            "high_value_products": [],
            "duplicate_rate_pct": 0.0,
            "sample_products": [],
        }

    def _analyze() -> Dict[str, Any]:
        products = unique_values(view, "product")
        comparison = engine.compare_categories(left, right)
        high_value = high_value_products(view, engine.thresholds.high_value)
        return {
            "unique_counts": {
                "products": len(products),
                "categories": len(unique_values(view, "category")),
                "regions": len(unique_values(view, "region")),
                "trading_days": len(unique_values(view, "date")),
            },
            "category_sets": {c: len(category_products(view, c)) for c in SCOPED_CATEGORIES},
            "comparison": {
                **comparison.to_dict(),
                "intersection_size": len(comparison.both),
                "union_size": len(comparison.either),
                "left_only_size": len(comparison.left_only),
            },
            "high_value_products": sorted(high_value),
            "duplicate_rate_pct": round(duplicate_rate(view, "product") * 100, 1),
            "sample_products": sorted(products)[:8],
        }

    payload = engine.timed("set_analysis", _analyze)
    return {"criteria": asdict(engine.criteria), "empty": False, **payload}
