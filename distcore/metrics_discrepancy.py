from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from distcore.config import Limits
from distcore.discrepancy import build_discrepancy_snapshot
from distcore.filters import FilterState
from distcore.prompts import build_discrepancy_prompt


def compute_discrepancy(filters: FilterState, ctx: Dict[str, Any], *, limits: Limits = Limits()) -> Dict[str, Any]:
    filtered_a: pd.DataFrame = ctx.get("filtered_a", pd.DataFrame())
    filtered_b: pd.DataFrame = ctx.get("filtered_b", pd.DataFrame())

    snapshot = build_discrepancy_snapshot(filtered_a, filtered_b, limits.discrepancy_snippet_size)
    return {
        "filters": asdict(filters),
        "comparison_mode": ctx.get("comparison_mode"),
        "row_counts": {"supplier_rows": int(len(filtered_a)), "customer_rows": int(len(filtered_b))},
        "snapshot": snapshot,
        "prompt": build_discrepancy_prompt(snapshot),
    }
