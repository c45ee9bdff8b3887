from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Union

import pandas as pd

from distcore.timezone import derive_time_zone


logger = logging.getLogger(__name__)

RECORD_COLUMNS = {
    "SupplierID": "supplier_id",
    "Category": "category",
    "LicenseNo": "license_no",
    "Model": "model",
    "LotNO": "lot_no",
    "SerialNo": "serial_no",
    "CustomerID": "customer_id",
    "DeliverDate": "deliver_date",
    "Quantity": "quantity",
}
SOURCE_KEYS = {col: key for key, col in RECORD_COLUMNS.items()}
FIELD_COLUMNS = list(RECORD_COLUMNS.values())
TEXT_COLUMNS = [c for c in FIELD_COLUMNS if c != "quantity"]


class RecordParseError(ValueError):
    """Raised when ingested text cannot be turned into distribution records."""


@dataclass(frozen=True)
class DistributionRecord:
    supplier_id: str = ""
    category: str = ""
    license_no: str = ""
    model: str = ""
    lot_no: str = ""
    serial_no: str = ""
    customer_id: str = ""
    deliver_date: str = ""
    quantity: int = 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DistributionRecord":
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            col = RECORD_COLUMNS.get(key, key)
            if col in RECORD_COLUMNS.values():
                values[col] = value
        quantity = _as_quantity(values.pop("quantity", 0))
        text = {k: _as_text(v) for k, v in values.items()}
        return cls(quantity=quantity, **text)

    def to_dict(self) -> Dict[str, Any]:
        return {SOURCE_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    @property
    def time_zone(self) -> int:
        return derive_time_zone(self.customer_id)


RecordsLike = Union[pd.DataFrame, Iterable[Union[DistributionRecord, Mapping[str, Any]]], None]


def _as_text(value: object) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def _as_quantity(value: object) -> int:
    out = pd.to_numeric(pd.Series([value]), errors="coerce").iloc[0]
    if pd.isna(out):
        return 0
    return int(out)


def empty_frame() -> pd.DataFrame:
    df = pd.DataFrame({c: pd.Series(dtype=object) for c in TEXT_COLUMNS})
    df["quantity"] = pd.Series(dtype="int64")
    return df[FIELD_COLUMNS]


def _canonicalize(df: pd.DataFrame) -> pd.DataFrame:
    df = df.rename(columns=RECORD_COLUMNS)
    df = df.loc[:, ~df.columns.duplicated()]
    for col in TEXT_COLUMNS:
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].map(_as_text).astype(object)
    if "quantity" not in df.columns:
        df["quantity"] = 0
    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce").fillna(0).astype("int64")
    return df[FIELD_COLUMNS]


def is_canonical(df: pd.DataFrame) -> bool:
    return list(df.columns) == FIELD_COLUMNS


def to_frame(records: RecordsLike) -> pd.DataFrame:
    """Return a canonical record frame for a DataFrame or an iterable of records/dicts."""
    if records is None:
        return empty_frame()
    if isinstance(records, pd.DataFrame):
        if records.empty and len(records.columns) == 0:
            return empty_frame()
        if is_canonical(records):
            return records
        return _canonicalize(records.copy())

    rows: List[Dict[str, Any]] = []
    for item in records:
        rec = item if isinstance(item, DistributionRecord) else DistributionRecord.from_dict(item)
        rows.append({f.name: getattr(rec, f.name) for f in fields(rec)})
    if not rows:
        return empty_frame()
    return _canonicalize(pd.DataFrame(rows))


def to_source_records(records: RecordsLike) -> List[Dict[str, Any]]:
    """Records as plain dicts keyed by the source field names (SupplierID, ...)."""
    df = to_frame(records)
    out = df.rename(columns=SOURCE_KEYS).to_dict(orient="records")
    for row in out:
        row["Quantity"] = int(row["Quantity"])
    return out


def to_export_frame(records: RecordsLike) -> pd.DataFrame:
    """Frame with source field names as columns, for CSV downloads."""
    return to_frame(records).rename(columns=SOURCE_KEYS).reset_index(drop=True)


def to_record_list(records: RecordsLike) -> List[DistributionRecord]:
    return [DistributionRecord.from_dict(row) for row in to_frame(records).to_dict(orient="records")]


def clean_model_json(text: str) -> str:
    return (text or "").replace("```json", "").replace("```", "").strip()


def parse_records_json(text: str) -> pd.DataFrame:
    """Parse pasted (or generated) JSON into a record frame.

    Accepts raw JSON or JSON wrapped in Markdown code fences. An empty body
    yields an empty frame; anything that is not an array of objects raises
    RecordParseError.
    """
    cleaned = clean_model_json(text)
    if not cleaned:
        return empty_frame()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise RecordParseError(f"Input is not valid JSON: {exc.msg}") from exc
    if not isinstance(parsed, list):
        raise RecordParseError("Expected a JSON array of records.")
    bad = [i for i, row in enumerate(parsed) if not isinstance(row, dict)]
    if bad:
        raise RecordParseError(f"Expected objects in the array; row {bad[0]} is {type(parsed[bad[0]]).__name__}.")
    logger.debug("Parsed %d records from JSON input", len(parsed))
    return to_frame(parsed)
