from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from distcore.config import TIME_ZONE_MAX, TIME_ZONE_MIN
from distcore.records import FIELD_COLUMNS, RecordsLike, to_frame
from distcore.timezone import derive_time_zone


@dataclass(frozen=True)
class FilterState:
    search_query: str = ""
    supplier_ids: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    license_nos: List[str] = field(default_factory=list)
    model_ids: List[str] = field(default_factory=list)
    customer_ids: List[str] = field(default_factory=list)
    lot_query: str = ""
    serial_query: str = ""
    time_zone_range: Tuple[int, int] = (TIME_ZONE_MIN, TIME_ZONE_MAX)


INITIAL_FILTERS = FilterState()

# FilterState attribute -> record column, for the exact-match multi-selects.
MULTI_SELECT_FIELDS: Dict[str, str] = {
    "supplier_ids": "supplier_id",
    "categories": "category",
    "license_nos": "license_no",
    "model_ids": "model",
    "customer_ids": "customer_id",
}
REDUCED_FIELDS: Dict[str, str] = {
    "supplier_ids": "supplier_id",
    "model_ids": "model",
}


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v)
        if s not in out:
            out.append(s)
    return out


def _as_bound(value: object, default: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        return default
    return max(TIME_ZONE_MIN, min(TIME_ZONE_MAX, out))


def normalize_filters(raw: dict) -> FilterState:
    raw = raw or {}
    tz = raw.get("time_zone_range") or (TIME_ZONE_MIN, TIME_ZONE_MAX)
    try:
        lo_raw, hi_raw = list(tz)[:2]
    except (TypeError, ValueError):
        lo_raw, hi_raw = TIME_ZONE_MIN, TIME_ZONE_MAX
    lo = _as_bound(lo_raw, TIME_ZONE_MIN)
    hi = _as_bound(hi_raw, TIME_ZONE_MAX)
    if lo > hi:
        lo, hi = hi, lo

    return FilterState(
        search_query=str(raw.get("search_query") or "").strip(),
        supplier_ids=_as_str_list(raw.get("supplier_ids")),
        categories=_as_str_list(raw.get("categories")),
        license_nos=_as_str_list(raw.get("license_nos")),
        model_ids=_as_str_list(raw.get("model_ids")),
        customer_ids=_as_str_list(raw.get("customer_ids")),
        lot_query=str(raw.get("lot_query") or "").strip(),
        serial_query=str(raw.get("serial_query") or "").strip(),
        time_zone_range=(lo, hi),
    )


def is_unrestricted(spec: FilterState) -> bool:
    return (
        not spec.search_query
        and not spec.lot_query
        and not spec.serial_query
        and not any(getattr(spec, attr) for attr in MULTI_SELECT_FIELDS)
        and spec.time_zone_range[0] <= TIME_ZONE_MIN
        and spec.time_zone_range[1] >= TIME_ZONE_MAX
    )


def _contains(series: pd.Series, query: str) -> pd.Series:
    return series.astype(str).str.lower().str.contains(query.lower(), regex=False, na=False)


def _multi_select_mask(df: pd.DataFrame, spec: FilterState, selects: Dict[str, str]) -> pd.Series:
    mask = pd.Series(True, index=df.index)
    for attr, col in selects.items():
        allowed = getattr(spec, attr)
        if allowed:
            mask &= df[col].astype(str).isin(set(allowed))
    return mask


def record_mask(df: pd.DataFrame, spec: FilterState) -> pd.Series:
    """Boolean mask of records satisfying every clause of the filter spec."""
    mask = pd.Series(True, index=df.index)
    if spec.search_query:
        hit = pd.Series(False, index=df.index)
        for col in FIELD_COLUMNS:
            hit |= _contains(df[col], spec.search_query)
        mask &= hit
    mask &= _multi_select_mask(df, spec, MULTI_SELECT_FIELDS)
    if spec.lot_query:
        mask &= _contains(df["lot_no"], spec.lot_query)
    if spec.serial_query:
        mask &= _contains(df["serial_no"], spec.serial_query)

    lo, hi = spec.time_zone_range
    if lo > TIME_ZONE_MIN or hi < TIME_ZONE_MAX:
        offsets = df["customer_id"].map(derive_time_zone).astype(int)
        mask &= offsets.between(lo, hi)
    return mask


def filter_records(records: RecordsLike, spec: FilterState) -> pd.DataFrame:
    """Full predicate: every clause of the filter spec, order preserved."""
    df = to_frame(records)
    if df.empty or is_unrestricted(spec):
        return df.copy()
    return df[record_mask(df, spec)].copy()


def filter_records_reduced(records: RecordsLike, spec: FilterState) -> pd.DataFrame:
    """Reduced predicate: only the Supplier and Model exact-match selections."""
    df = to_frame(records)
    if df.empty:
        return df.copy()
    return df[_multi_select_mask(df, spec, REDUCED_FIELDS)].copy()


def filter_options(records: RecordsLike) -> Dict[str, List[str]]:
    """Sorted distinct values for each multi-select field."""
    df = to_frame(records)
    out: Dict[str, List[str]] = {}
    for attr, col in MULTI_SELECT_FIELDS.items():
        values = df[col].dropna().astype(str)
        out[attr] = sorted(v for v in values.unique().tolist() if v != "")
    return out
