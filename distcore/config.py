from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = BASE_DIR / "data"
DEFAULT_DATA_FILE = DATA_DIR / "default_distribution.json"
DATA_FILE_ENV = "DIST_DATA_FILE"

FLOW_LAYER_LIMITS: Tuple[int, int, int, int] = (5, 5, 6, 8)
TIME_SERIES_LIMIT = 20
DISCREPANCY_SNIPPET_SIZE = 10
PREVIEW_ROWS = 20
PARETO_CHART_ROWS = 10
STANDARDIZE_MAX_CHARS = 10000
FALLBACK_RECORD_COUNT = 20

TIME_ZONE_MIN = -12
TIME_ZONE_MAX = 12


@dataclass(frozen=True)
class Limits:
    flow_layer_limits: Tuple[int, int, int, int] = FLOW_LAYER_LIMITS
    time_series_limit: int = TIME_SERIES_LIMIT
    discrepancy_snippet_size: int = DISCREPANCY_SNIPPET_SIZE
    preview_rows: int = PREVIEW_ROWS
    pareto_chart_rows: int = PARETO_CHART_ROWS
    standardize_max_chars: int = STANDARDIZE_MAX_CHARS

    def __post_init__(self):
        if len(self.flow_layer_limits) != len(FLOW_LAYER_LIMITS):
            raise ValueError(
                f"flow_layer_limits needs {len(FLOW_LAYER_LIMITS)} entries, got {len(self.flow_layer_limits)}"
            )


def get_data_file() -> Path:
    override = (os.environ.get(DATA_FILE_ENV) or "").strip()
    return Path(override) if override else DEFAULT_DATA_FILE
