from distcore.discrepancy import build_discrepancy_snapshot
from distcore.prompts import SUMMARY_INSTRUCTION, build_discrepancy_prompt, build_standardize_prompt, build_summary_prompt


def test_snapshot_truncates_in_order(scenario_records, fallback_records):
    snap = build_discrepancy_snapshot(scenario_records, fallback_records, limit=2)
    assert [r["SerialNo"] for r in snap["snippet_a"]] == ["SN-A-1", "SN-B-2"]
    assert len(snap["snippet_b"]) == 2
    assert snap["snippet_b"][0]["LicenseNo"] == "LIC-1000"


def test_snapshot_default_size(fallback_records):
    snap = build_discrepancy_snapshot(fallback_records, fallback_records)
    assert len(snap["snippet_a"]) == 10
    assert len(snap["snippet_b"]) == 10


def test_snapshot_empty_side(scenario_records):
    snap = build_discrepancy_snapshot(scenario_records, [])
    assert len(snap["snippet_a"]) == 3
    assert snap["snippet_b"] == []
    assert build_discrepancy_snapshot([], [], limit=5) == {"snippet_a": [], "snippet_b": []}


def test_discrepancy_prompt_embeds_snippets(scenario_records):
    prompt = build_discrepancy_prompt(build_discrepancy_snapshot(scenario_records, scenario_records, limit=1))
    assert "Dataset A (Supplier):" in prompt
    assert '"SerialNo": "SN-A-1"' in prompt
    assert "SN-B-2" not in prompt


def test_standardize_prompt_truncates_raw_text():
    prompt = build_standardize_prompt("x" * 50, max_chars=10)
    assert "x" * 10 in prompt
    assert "x" * 11 not in prompt
    assert '"LotNO": string' in prompt


def test_summary_prompt():
    assert build_summary_prompt() == SUMMARY_INSTRUCTION
    prompt = build_summary_prompt("Recall notice for lot L-5000. " * 3, max_chars=20)
    assert prompt.startswith(SUMMARY_INSTRUCTION)
    assert "Document:\nRecall notice for lo" in prompt
    assert "L-5000" not in prompt
