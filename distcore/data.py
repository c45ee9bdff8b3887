from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

import numpy as np
import pandas as pd

from distcore.config import FALLBACK_RECORD_COUNT, get_data_file
from distcore.filters import FilterState, filter_records, filter_records_reduced, normalize_filters
from distcore.records import RecordsLike, empty_frame, parse_records_json, to_frame


logger = logging.getLogger(__name__)

ComparisonMode = Literal["full", "reduced"]
COMPARISON_MODES = ("full", "reduced")
DEFAULT_COMPARISON_MODE: ComparisonMode = "full"

SHIFTED_DELIVER_DATE = "2025-11-01"


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path), path.stat().st_mtime)


def generate_fallback_records(count: int = FALLBACK_RECORD_COUNT, *, seed: int = 0) -> pd.DataFrame:
    """Small synthetic record set used when no dataset file is available."""
    if count <= 0:
        return empty_frame()
    rng = np.random.default_rng(seed)
    quantities = rng.integers(1, 51, size=count)
    categories = ["Cardiac", "Ortho", "Dental"]
    rows = []
    for i in range(count):
        rows.append(
            {
                "supplier_id": "MedTech-A" if i % 2 == 0 else "BioLife-B",
                "category": categories[i % 3],
                "license_no": f"LIC-{1000 + i}",
                "model": f"M-{200 + (i % 5)}",
                "lot_no": f"L-{5000 + i}",
                "serial_no": f"SN-{seed:04d}-{i}",
                "customer_id": f"HOSP-{100 + (i % 4)}",
                "deliver_date": date(2023, (i % 12) + 1, (i % 28) + 1).isoformat(),
                "quantity": int(quantities[i]),
            }
        )
    return to_frame(pd.DataFrame(rows))


def simulate_comparison_records(records: RecordsLike) -> pd.DataFrame:
    """Customer-side copy of the supplier records with a few planted discrepancies.

    Every 7th record reports one extra unit; otherwise every 11th record
    reports a shifted delivery date. The input frame is left untouched.
    """
    df = to_frame(records).copy()
    if df.empty:
        return df
    pos = np.arange(len(df))
    bump = pos % 7 == 0
    shift = (pos % 11 == 0) & ~bump
    df.loc[bump, "quantity"] = df.loc[bump, "quantity"] + 1
    df.loc[shift, "deliver_date"] = SHIFTED_DELIVER_DATE
    return df


@lru_cache(maxsize=4)
def _load_records_cached(signature: Tuple[str, float]) -> pd.DataFrame:
    path = Path(signature[0])
    logger.info("Loading distribution records from %s", path)
    return parse_records_json(path.read_text(encoding="utf-8"))


def load_default_records() -> Tuple[pd.DataFrame, Optional[str]]:
    path = get_data_file()
    if not path.exists():
        logger.warning("Dataset %s not found; using generated fallback records", path)
        return generate_fallback_records(), None
    records = _load_records_cached(file_signature(path))
    if records.empty:
        logger.warning("Dataset %s is empty; using generated fallback records", path)
        return generate_fallback_records(), None
    return records, path.name


def load_dashboard_data(custom_records: RecordsLike = None, comparison_records: RecordsLike = None) -> Dict[str, object]:
    """Supplier (A) and customer (B) record sets for one dashboard session.

    Custom records replace the default dataset; when no comparison set is
    given, B is simulated from A.
    """
    if custom_records is not None:
        records_a = to_frame(custom_records)
        source = "custom"
        files: List[str] = []
    else:
        records_a, file_name = load_default_records()
        source = "default" if file_name else "fallback"
        files = [file_name] if file_name else []

    records_b = to_frame(comparison_records) if comparison_records is not None else simulate_comparison_records(records_a)
    logger.debug("Dashboard data: source=%s, A=%d rows, B=%d rows", source, len(records_a), len(records_b))
    return {"files": files, "source": source, "records_a": records_a, "records_b": records_b}


def prepare_context(
    filters: dict | FilterState,
    data_ctx: Dict[str, object],
    *,
    comparison_mode: ComparisonMode = DEFAULT_COMPARISON_MODE,
) -> Dict[str, object]:
    """Apply the filter spec to both record sets.

    A always goes through the full predicate. B goes through the predicate
    named by `comparison_mode`; the reduced one only honours the supplier
    and model selections.
    """
    if comparison_mode not in COMPARISON_MODES:
        raise ValueError(f"Unknown comparison mode {comparison_mode!r}; expected one of {COMPARISON_MODES}")
    filt = filters if isinstance(filters, FilterState) else normalize_filters(filters)

    records_a = to_frame(data_ctx.get("records_a"))
    records_b = to_frame(data_ctx.get("records_b"))

    filtered_a = filter_records(records_a, filt)
    if comparison_mode == "full":
        filtered_b = filter_records(records_b, filt)
    else:
        filtered_b = filter_records_reduced(records_b, filt)

    return {
        "filters": filt,
        "source": data_ctx.get("source", "default"),
        "comparison_mode": comparison_mode,
        "records_a": records_a,
        "records_b": records_b,
        "filtered_a": filtered_a,
        "filtered_b": filtered_b,
    }
