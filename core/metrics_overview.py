from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.aggregation import aggregate_by_product, aggregate_by_region, top_performer
from core.charts import revenue_bar
from core.engine import AnalyticsEngine
from core.sets import unique_values


def compute_overview(engine: AnalyticsEngine) -> Dict[str, Any]:
    view = engine.view
    full = engine.full_dataset

    def _stats() -> Dict[str, Any]:
        products = aggregate_by_product(view)
        top = top_performer(products)
        return {
            "sales_count": len(view),
            "total_revenue": float(sum(r.amount for r in view)),
            "top_product": top[0] if top else None,
            "top_product_revenue": top[1].total_revenue if top else 0.0,
            "unique_regions": len(unique_values(view, "region")),
        }

    stats = engine.timed("overview", _stats)
    regions = aggregate_by_region(view)
    charts: Dict[str, Any] = {}
    if regions:
        charts["region_revenue"] = revenue_bar(regions.to_records(), "region", title="Region")

    return {
        "criteria": asdict(engine.criteria),
        "empty": not view,
        "kpis": stats,
        "records": {
            "total": len(full),
            "filtered": len(view),
            "filtered_pct": round(engine.filter_ratio() * 100, 1),
        },
        "table": [r.to_dict() for r in view[: engine.thresholds.table_limit]],
        "table_truncated": len(view) > engine.thresholds.table_limit,
        "charts": charts,
    }
