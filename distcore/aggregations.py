from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd

from distcore.config import FLOW_LAYER_LIMITS, TIME_SERIES_LIMIT
from distcore.data import round_half_up
from distcore.records import RecordsLike, to_frame
from distcore.timezone import derive_time_zone


FLOW_LAYERS = [
    ("supplier", "supplier_id"),
    ("license", "license_no"),
    ("model", "model"),
    ("customer", "customer_id"),
]


def aggregate_time_series(records: RecordsLike, limit: int = TIME_SERIES_LIMIT) -> List[Dict[str, Any]]:
    """First `limit` records, in input order, projected to {date, quantity}."""
    df = to_frame(records)
    if df.empty or limit <= 0:
        return []
    head = df.head(int(limit))
    return [
        {"date": str(date), "quantity": int(qty)}
        for date, qty in zip(head["deliver_date"], head["quantity"])
    ]


def aggregate_category_tree(records: RecordsLike) -> List[Dict[str, Any]]:
    df = to_frame(records)
    if df.empty:
        return []
    sums = df.groupby(["category", "model"], sort=False, dropna=False)["quantity"].sum()
    tree: Dict[str, Dict[str, Any]] = {}
    for (category, model), size in sums.items():
        node = tree.setdefault(category, {"category": category, "children": []})
        node["children"].append({"model": model, "size": int(size)})
    return list(tree.values())


def aggregate_flow_graph(
    records: RecordsLike,
    *,
    layer_limits: Sequence[int] = FLOW_LAYER_LIMITS,
    weighted: bool = False,
) -> Dict[str, Any]:
    """Four-layer Supplier -> License -> Model -> Customer graph.

    Each layer keeps its first-seen distinct values up to the layer cap.
    By default every node is linked to every node of the next layer, which
    draws the layers together but says nothing about who shipped what.
    With weighted=True links are only emitted for node pairs that occur
    together in at least one record, with `value` = number of such records.
    """
    if len(layer_limits) != len(FLOW_LAYERS):
        raise ValueError(f"layer_limits needs {len(FLOW_LAYERS)} entries, got {len(layer_limits)}")
    df = to_frame(records)
    if df.empty:
        return {"layers": [[] for _ in FLOW_LAYERS], "links": []}

    layers: List[List[Dict[str, str]]] = []
    kept: List[List[str]] = []
    for (layer, col), cap in zip(FLOW_LAYERS, layer_limits):
        values = [str(v) for v in pd.unique(df[col])][: max(0, int(cap))]
        kept.append(values)
        layers.append([{"id": f"{layer}:{v}", "label": v, "layer": layer} for v in values])

    links: List[Dict[str, Any]] = []
    for i in range(len(FLOW_LAYERS) - 1):
        src_layer, src_col = FLOW_LAYERS[i]
        dst_layer, dst_col = FLOW_LAYERS[i + 1]
        if not weighted:
            for src in kept[i]:
                for dst in kept[i + 1]:
                    links.append({"source": f"{src_layer}:{src}", "target": f"{dst_layer}:{dst}"})
            continue
        pairs = df[df[src_col].isin(kept[i]) & df[dst_col].isin(kept[i + 1])]
        counts = pairs.groupby([src_col, dst_col], sort=False).size()
        for (src, dst), value in counts.items():
            links.append({"source": f"{src_layer}:{src}", "target": f"{dst_layer}:{dst}", "value": int(value)})
    return {"layers": layers, "links": links}


def aggregate_co_occurrence(records: RecordsLike) -> List[Dict[str, Any]]:
    """One row per distinct (model, customer) pair with its record count."""
    df = to_frame(records)
    if df.empty:
        return []
    counts = df.groupby(["model", "customer_id"], sort=False, dropna=False).size()
    return [{"model": model, "customer": customer, "count": int(n)} for (model, customer), n in counts.items()]


def aggregate_pareto(records: RecordsLike) -> List[Dict[str, Any]]:
    df = to_frame(records)
    if df.empty:
        return []
    totals = df.groupby("model", sort=False, dropna=False)["quantity"].sum().reset_index()
    # mergesort is stable: equal quantities keep first-seen model order
    totals = totals.sort_values("quantity", ascending=False, kind="mergesort")
    grand_total = int(totals["quantity"].sum())
    running = totals["quantity"].cumsum()

    rows: List[Dict[str, Any]] = []
    for model, qty, cum in zip(totals["model"], totals["quantity"], running):
        pct = int(round_half_up(100 * int(cum) / grand_total)) if grand_total else 0
        rows.append({"model": model, "quantity": int(qty), "cumulative_percent": pct})
    return rows


def aggregate_time_zones(records: RecordsLike) -> List[Dict[str, Any]]:
    df = to_frame(records)
    if df.empty:
        return []
    return [
        {"offset": derive_time_zone(cust), "quantity": int(qty), "category": cat}
        for cust, qty, cat in zip(df["customer_id"], df["quantity"], df["category"])
    ]


def summarize_records(records: RecordsLike) -> Dict[str, int]:
    df = to_frame(records)
    return {
        "records": int(len(df)),
        "total_quantity": int(df["quantity"].sum()) if not df.empty else 0,
        "suppliers": int(df["supplier_id"].nunique()),
        "models": int(df["model"].nunique()),
        "customers": int(df["customer_id"].nunique()),
    }
