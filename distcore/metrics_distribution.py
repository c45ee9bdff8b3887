from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from distcore.aggregations import (
    aggregate_category_tree,
    aggregate_co_occurrence,
    aggregate_flow_graph,
    aggregate_pareto,
    aggregate_time_series,
    aggregate_time_zones,
    summarize_records,
)
from distcore.charts import heatmap_chart, pareto_chart, time_zone_chart, timeline_chart, to_vega_spec
from distcore.config import Limits
from distcore.filters import FilterState
from distcore.records import to_source_records


def compute_distribution(
    filters: FilterState,
    ctx: Dict[str, Any],
    *,
    limits: Limits = Limits(),
    weighted_flow: bool = False,
) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("filtered_a", pd.DataFrame())

    time_series = aggregate_time_series(df, limits.time_series_limit)
    pareto = aggregate_pareto(df)
    co_occurrence = aggregate_co_occurrence(df)
    time_zones = aggregate_time_zones(df)

    charts: Dict[str, Any] = {}
    if time_series:
        charts["timeline"] = to_vega_spec(timeline_chart(time_series))
    if pareto:
        charts["pareto"] = to_vega_spec(pareto_chart(pareto[: limits.pareto_chart_rows]))
    if co_occurrence:
        charts["heatmap"] = to_vega_spec(heatmap_chart(co_occurrence))
    if time_zones:
        charts["time_zones"] = to_vega_spec(time_zone_chart(time_zones))

    return {
        "filters": asdict(filters),
        "source": ctx.get("source", "default"),
        "comparison_mode": ctx.get("comparison_mode"),
        "kpis": summarize_records(df),
        "preview": to_source_records(df.head(limits.preview_rows)),
        "time_series": time_series,
        "category_tree": aggregate_category_tree(df),
        "flow_graph": aggregate_flow_graph(df, layer_limits=limits.flow_layer_limits, weighted=weighted_flow),
        "co_occurrence": co_occurrence,
        "pareto": pareto,
        "time_zones": time_zones,
        "charts": charts,
    }
