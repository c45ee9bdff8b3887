"""Prompt text handed to the external text-generation service.

Only text is produced here; sending it is the caller's business.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from distcore.config import STANDARDIZE_MAX_CHARS

DISCREPANCY_TEMPLATE = """You are a Regulatory Compliance Agent.
Analyze these two dataset snippets for inconsistencies.
Dataset A (Supplier): {snippet_a}
Dataset B (Customer): {snippet_b}

Identify potential gaps in serial numbers or delivery dates.
Return a summary in Markdown format using coral color for alerts.
"""

STANDARDIZE_TEMPLATE = """You are a Data Engineering Agent. Transform the following raw input data into a JSON array of objects strictly following this schema:
{{
  "SupplierID": string,
  "Category": string,
  "LicenseNo": string,
  "Model": string,
  "LotNO": string,
  "SerialNo": string,
  "CustomerID": string,
  "DeliverDate": string (YYYY-MM-DD),
  "Quantity": number
}}

If the input is missing fields, infer reasonable defaults or mark as "UNKNOWN".
If the input is unstructured, extract the relevant entities.
Return ONLY valid JSON. Do not use Markdown formatting.

Raw Data:
{raw}
"""


def build_discrepancy_prompt(snapshot: Dict[str, Any]) -> str:
    return DISCREPANCY_TEMPLATE.format(
        snippet_a=json.dumps(snapshot.get("snippet_a", []), ensure_ascii=False),
        snippet_b=json.dumps(snapshot.get("snippet_b", []), ensure_ascii=False),
    )


def build_standardize_prompt(raw_text: str, max_chars: int = STANDARDIZE_MAX_CHARS) -> str:
    return STANDARDIZE_TEMPLATE.format(raw=(raw_text or "")[: max(0, int(max_chars))])

SUMMARY_INSTRUCTION = "Summarize this regulatory document about Class III recall."


def build_summary_prompt(document_text: str = "", instruction: str = SUMMARY_INSTRUCTION, max_chars: int = STANDARDIZE_MAX_CHARS) -> str:
    body = (document_text or "")[: max(0, int(max_chars))].strip()
    if not body:
        return instruction
    return f"{instruction}\n\nDocument:\n{body}\n"
