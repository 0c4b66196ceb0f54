from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.aggregation import ranked, top_performer
from core.engine import AnalyticsEngine


def compute_category_stats(engine: AnalyticsEngine) -> Dict[str, Any]:
    view = engine.view
    if not view:
        return {
            "criteria": asdict(engine.criteria),
            "empty": True,
            "region_totals": [],
            "top_region": None,
            "top_category": None,
            "overall_average": 0.0,
            "categories": [],
            "month_count": 0,
            "latest_month": None,
        }

    by_region = engine.by_region()
    by_category = engine.by_category()
    by_month = engine.by_month()
    best_region = top_performer(by_region)
    best_category = top_performer(by_category)
    latest = max(by_month) if by_month else None

    return {
        "criteria": asdict(engine.criteria),
        "empty": False,
        "region_totals": [{"region": k, "total_revenue": b.total_revenue} for k, b in ranked(by_region)],
        "top_region": {"name": best_region[0], "revenue": best_region[1].total_revenue} if best_region else None,
        "top_category": {"name": best_category[0], "revenue": best_category[1].total_revenue} if best_category else None,
        "overall_average": sum(r.amount for r in view) / len(view),
        "categories": [
            {**b.to_dict(), "product_count": len(b.products)} for _, b in ranked(by_category)
        ],
        "month_count": len(by_month),
        "latest_month": {"month": latest, "total_revenue": by_month[latest].total_revenue} if latest else None,
    }
