from __future__ import annotations

import logging
import math
from typing import Dict, List, Literal, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from distapi.schemas import DistributionRequest, IngestRequest, RecordModel
from distcore.aggregations import aggregate_pareto
from distcore.data import load_dashboard_data, prepare_context
from distcore.filters import FilterState, filter_options, normalize_filters
from distcore.metrics_discrepancy import compute_discrepancy
from distcore.metrics_distribution import compute_distribution
from distcore.records import RecordParseError, parse_records_json, to_export_frame, to_source_records


app = FastAPI(title="Distribution Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _records(models: Optional[List[RecordModel]]) -> Optional[List[Dict[str, object]]]:
    if models is None:
        return None
    return [m.model_dump() for m in models]


def _context(request: DistributionRequest) -> tuple[FilterState, Dict[str, object]]:
    data_ctx = load_dashboard_data(_records(request.records), _records(request.comparison_records))
    f = normalize_filters(request.filters.model_dump())
    return f, prepare_context(f, data_ctx, comparison_mode=request.comparison_mode)


@app.get("/meta/options")
def meta_options():
    try:
        data_ctx = load_dashboard_data()
        return _json({"source": data_ctx["source"], "options": filter_options(data_ctx["records_a"])})
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(exc)


@app.post("/distribution")
def distribution(request: DistributionRequest, weighted_flow: bool = Query(default=False)):
    try:
        f, ctx = _context(request)
        return _json(compute_distribution(f, ctx, weighted_flow=weighted_flow))
    except Exception as exc:
        logger.exception("distribution failed")
        return _error(exc)


@app.post("/discrepancy")
def discrepancy(request: DistributionRequest):
    try:
        f, ctx = _context(request)
        return _json(compute_discrepancy(f, ctx))
    except Exception as exc:
        logger.exception("discrepancy failed")
        return _error(exc)


@app.post("/ingest")
def ingest(request: IngestRequest):
    try:
        records = to_source_records(parse_records_json(request.text))
        return _json({"records": records, "count": len(records)})
    except RecordParseError as exc:
        logger.info("ingest rejected: %s", exc)
        return _error(exc, status_code=400)
    except Exception as exc:
        logger.exception("ingest failed")
        return _error(exc)


@app.post("/export/{page}")
def export_page(page: Literal["supplier", "customer", "pareto"], request: DistributionRequest):
    _, ctx = _context(request)

    filename = f"{page}.csv"
    if page == "supplier":
        export_df = to_export_frame(ctx["filtered_a"])
    elif page == "customer":
        export_df = to_export_frame(ctx["filtered_b"])
    else:
        export_df = pd.DataFrame(aggregate_pareto(ctx["filtered_a"]), columns=["model", "quantity", "cumulative_percent"])

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
