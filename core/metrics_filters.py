from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from core.engine import AnalyticsEngine
from core.records import SaleRecord


def _avg(records: Sequence[SaleRecord]) -> float:
    return sum(r.amount for r in records) / len(records) if records else 0.0


def _pct(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def compute_filter_analysis(engine: AnalyticsEngine) -> Dict[str, Any]:
    """High-value, premium and recent subsets of the active view."""
    view = engine.view
    t = engine.thresholds
    if not view:
        return {"criteria": asdict(engine.criteria), "empty": True, "high_value": None, "premium": None, "recent": None}

    high_value: List[SaleRecord] = [r for r in view if r.amount > t.high_value]
    premium = [
        r
        for r in view
        if r.category == t.premium_category and r.amount > t.premium_amount and r.region in t.premium_regions
    ]
    recent = [r for r in view if r.date >= t.recent_cutoff]

    return {
        "criteria": asdict(engine.criteria),
        "empty": False,
        "total": len(view),
        "high_value": {
            "threshold": t.high_value,
            "count": len(high_value),
            "pct": _pct(len(high_value), len(view)),
            "avg_amount": _avg(high_value),
            "total_value": float(sum(r.amount for r in high_value)),
        },
        "premium": {
            "category": t.premium_category,
            "regions": list(t.premium_regions),
            "min_amount": t.premium_amount,
            "count": len(premium),
            "first_product": premium[0].product if premium else None,
            "avg_amount": _avg(premium),
        },
        "recent": {
            "cutoff": t.recent_cutoff,
            "count": len(recent),
            "pct": _pct(len(recent), len(view)),
        },
    }
