from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.aggregation import ranked, top_performer
from core.charts import monthly_trend, revenue_bar
from core.engine import AnalyticsEngine


def compute_groupings(engine: AnalyticsEngine) -> Dict[str, Any]:
    by_region = engine.by_region()
    by_product = engine.by_product()
    by_month = engine.by_month()
    matrix = engine.category_region_matrix()
    top_n = engine.thresholds.top_n

    if not engine.view:
        return {
            "criteria": asdict(engine.criteria),
            "empty": True,
            "regions": [],
            "top_region": None,
            "top_product": None,
            "months": [],
            "month_count": 0,
            "matrix": [],
            "total_entries": 0,
            "charts": {},
        }

    best_region = top_performer(by_region)
    best_product = top_performer(by_product)
    top_region = {"name": best_region[0], "revenue": best_region[1].total_revenue} if best_region else None
    top_product = (
        {
            "name": best_product[0],
            "revenue": best_product[1].total_revenue,
            "regions": len(best_product[1].regions),
            "sales": best_product[1].count,
        }
        if best_product
        else None
    )

    latest_months = sorted(by_month.items(), key=lambda kv: kv[0], reverse=True)[:3]

    return {
        "criteria": asdict(engine.criteria),
        "empty": False,
        "regions": [bucket.to_dict() for _, bucket in ranked(by_region)],
        "top_region": top_region,
        "top_product": top_product,
        "months": [bucket.to_dict() for _, bucket in latest_months],
        "month_count": len(by_month),
        "matrix": [cell.to_dict() for _, cell in ranked(matrix, "revenue", limit=top_n)],
        "total_entries": len(by_region) + len(by_product) + len(by_month) + len(matrix),
        "charts": {
            "region_revenue": revenue_bar(by_region.to_records(), "region", title="Region"),
            "monthly_trend": monthly_trend(by_month.to_records()),
        },
    }
