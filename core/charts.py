from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def revenue_bar(rows: List[Dict[str, Any]], dimension: str, *, value: str = "total_revenue", title: str = "") -> Dict[str, Any]:
    df = pd.DataFrame(rows, columns=[dimension, value, "count"])
    hover = alt.selection_point(fields=[dimension], on="mouseover", empty="all")
    chart = (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X(f"{dimension}:N", title=title or dimension.replace("_", " ").title(), sort="-y", axis=alt.Axis(grid=False)),
            y=alt.Y(f"{value}:Q", title="Revenue", axis=alt.Axis(format="$~s", gridDash=[4, 4], domain=False, ticks=False)),
            color=f"{dimension}:N",
            opacity=alt.condition(hover, alt.value(1), alt.value(0.6)),
            tooltip=[alt.Tooltip(dimension), alt.Tooltip(f"{value}:Q", format="$,.0f"), alt.Tooltip("count:Q", title="Sales")],
        )
        .add_params(hover)
    )
    return to_vega_spec(chart)


def monthly_trend(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    df = pd.DataFrame(rows, columns=["month", "total_revenue", "count"]).sort_values("month")
    chart = (
        alt.Chart(df)
        .mark_line(point={"filled": True, "size": 60})
        .encode(
            x=alt.X("month:O", title="Month", axis=alt.Axis(grid=False)),
            y=alt.Y("total_revenue:Q", title="Revenue", axis=alt.Axis(format="$~s", gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=["month", alt.Tooltip("total_revenue:Q", format="$,.0f"), alt.Tooltip("count:Q", title="Sales")],
        )
        .properties(height=260)
    )
    return to_vega_spec(chart)
