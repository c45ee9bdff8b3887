from __future__ import annotations

from typing import Any, Dict

from distcore.config import DISCREPANCY_SNIPPET_SIZE
from distcore.records import RecordsLike, to_frame, to_source_records


def build_discrepancy_snapshot(
    records_a: RecordsLike,
    records_b: RecordsLike,
    limit: int = DISCREPANCY_SNIPPET_SIZE,
) -> Dict[str, Any]:
    """Order-preserving prefixes of the supplier (A) and customer (B) sets.

    No matching happens here; the snippets are handed to the external
    narrative generator as-is.
    """
    limit = max(0, int(limit))
    head_a = to_frame(records_a).head(limit)
    head_b = to_frame(records_b).head(limit)
    return {
        "snippet_a": to_source_records(head_a),
        "snippet_b": to_source_records(head_b),
    }
