from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from core.engine import AnalyticsEngine
from core.records import SaleRecord, parse_iso_date


def quarter_of(record: SaleRecord) -> str:
    d = parse_iso_date(record.date)
    return f"Q{(d.month - 1) // 3 + 1}" if d else ""


def transform_record(record: SaleRecord, rank: int, *, margin: float, high_value: float) -> Dict[str, Any]:
    return {
        **record.to_dict(),
        "profit": round(record.amount * margin),
        "quarter": quarter_of(record),
        "rank": rank,
        "profit_margin_pct": round(margin * 100),
        "status": "High Value" if record.amount > high_value else "Standard",
    }


def compute_transform(engine: AnalyticsEngine, *, limit: int = 10) -> Dict[str, Any]:
    view = engine.view
    t = engine.thresholds
    rows: List[Dict[str, Any]] = [
        transform_record(r, i + 1, margin=t.profit_margin, high_value=t.high_value) for i, r in enumerate(view[:limit])
    ]
    return {
        "criteria": asdict(engine.criteria),
        "empty": not view,
        "source_count": len(view),
        "rows": rows,
        "total_profit": sum(row["profit"] for row in rows),
    }
