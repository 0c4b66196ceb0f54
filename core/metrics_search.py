from __future__ import annotations

from dataclasses import asdict
from typing import Any, Callable, Dict, Optional, Sequence

from core.engine import AnalyticsEngine
from core.records import SaleRecord


def _find(records: Sequence[SaleRecord], pred: Callable[[SaleRecord], bool]) -> Optional[Dict[str, Any]]:
    return next((r.to_dict() for r in records if pred(r)), None)


def _find_index(records: Sequence[SaleRecord], pred: Callable[[SaleRecord], bool]) -> Optional[int]:
    return next((i for i, r in enumerate(records) if pred(r)), None)


def compute_search(engine: AnalyticsEngine, *, region: str = "North America", product_term: str = "laptop") -> Dict[str, Any]:
    view = engine.view
    t = engine.thresholds
    if not view:
        return {"criteria": asdict(engine.criteria), "empty": True, "find": {}, "checks": {}, "indexes": {}, "top_in_region": None}

    term = product_term.lower()
    in_region = [r for r in view if r.region == region]
    top_in_region = max(in_region, key=lambda r: r.amount) if in_region else None
    year_start = f"{t.search_cutoff[:4]}-01-01"

    return {
        "criteria": asdict(engine.criteria),
        "empty": False,
        "find": {
            "expensive": _find(view, lambda r: r.amount > t.search_amount),
            "product_match": _find(view, lambda r: term in r.product.lower()),
            "recent": _find(view, lambda r: r.date > t.search_cutoff),
        },
        "checks": {
            "has_high_value": any(r.amount > t.search_high_value for r in view),
            "all_positive": all(r.amount > 0 for r in view),
            "has_europe": any(r.region == "Europe" for r in view),
            "all_after_year_start": all(r.date > year_start for r in view),
        },
        "indexes": {
            "first_gaming": _find_index(view, lambda r: r.category == "Gaming"),
            "first_high_value": _find_index(view, lambda r: r.amount > t.search_high_value),
        },
        "top_in_region": top_in_region.to_dict() if top_in_region else None,
    }
