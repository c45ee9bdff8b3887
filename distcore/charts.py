from __future__ import annotations

from typing import Any, Dict, List

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def timeline_chart(points: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(points, columns=["date", "quantity"])
    df["seq"] = range(1, len(df) + 1)
    return (
        alt.Chart(df)
        .mark_area(line=True, opacity=0.35)
        .encode(
            x=alt.X("seq:O", title="Shipment", axis=alt.Axis(labels=False, ticks=False)),
            y=alt.Y("quantity:Q", title="Quantity", axis=alt.Axis(gridDash=[4, 4], domain=False)),
            tooltip=[alt.Tooltip("date:N", title="Deliver Date"), alt.Tooltip("quantity:Q", title="Quantity", format=",")],
        )
        .properties(height=240)
    )


def pareto_chart(rows: List[Dict[str, Any]]) -> alt.LayerChart:
    df = pd.DataFrame(rows, columns=["model", "quantity", "cumulative_percent"])
    order = df["model"].tolist()
    base = alt.Chart(df).encode(x=alt.X("model:N", title="Model", sort=order))
    bars = base.mark_bar().encode(
        y=alt.Y("quantity:Q", title="Quantity", axis=alt.Axis(format="~s")),
        tooltip=["model", alt.Tooltip("quantity:Q", format=",")],
    )
    line = base.mark_line(point=True, color="#CD5C5C").encode(
        y=alt.Y("cumulative_percent:Q", title="Cumulative %", scale=alt.Scale(domain=[0, 100]), axis=alt.Axis(orient="right")),
        tooltip=["model", alt.Tooltip("cumulative_percent:Q", title="Cumulative %")],
    )
    return alt.layer(bars, line).resolve_scale(y="independent").properties(height=260)


def heatmap_chart(cells: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(cells, columns=["model", "customer", "count"])
    return (
        alt.Chart(df)
        .mark_rect()
        .encode(
            x=alt.X("model:N", title="Model"),
            y=alt.Y("customer:N", title="Customer"),
            color=alt.Color("count:Q", title="Records"),
            tooltip=["model", "customer", alt.Tooltip("count:Q", title="Records")],
        )
        .properties(height=260)
    )


def time_zone_chart(points: List[Dict[str, Any]]) -> alt.Chart:
    df = pd.DataFrame(points, columns=["offset", "quantity", "category"])
    return (
        alt.Chart(df)
        .mark_circle(size=80, opacity=0.7)
        .encode(
            x=alt.X("offset:Q", title="GMT Offset (h)", scale=alt.Scale(domain=[-12, 12])),
            y=alt.Y("quantity:Q", title="Quantity"),
            color=alt.Color("category:N", title="Category"),
            tooltip=["offset", "quantity", "category"],
        )
        .properties(height=240)
    )
