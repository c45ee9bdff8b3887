import pandas as pd
import pytest

from distcore.data import (
    SHIFTED_DELIVER_DATE,
    generate_fallback_records,
    load_dashboard_data,
    prepare_context,
    round_half_up,
    simulate_comparison_records,
)
from distcore.filters import FilterState


def test_round_half_up():
    assert round_half_up(66.5) == 67.0
    assert round_half_up(2.5) == 3.0
    assert round_half_up(None) is None


def test_fallback_records_are_deterministic():
    a = generate_fallback_records(20)
    b = generate_fallback_records(20)
    pd.testing.assert_frame_equal(a, b)
    assert len(a) == 20
    assert a["quantity"].between(1, 50).all()
    assert generate_fallback_records(0).empty


def test_simulated_comparison_records(fallback_records):
    before = fallback_records.copy()
    sim = simulate_comparison_records(fallback_records)
    pd.testing.assert_frame_equal(fallback_records, before)

    for i in (0, 7, 14):
        assert sim["quantity"].iloc[i] == before["quantity"].iloc[i] + 1
    assert sim["deliver_date"].iloc[11] == SHIFTED_DELIVER_DATE
    assert sim["deliver_date"].iloc[0] == before["deliver_date"].iloc[0]
    assert sim["quantity"].iloc[1] == before["quantity"].iloc[1]


def test_load_from_data_file(data_file):
    ctx = load_dashboard_data()
    assert ctx["source"] == "default"
    assert ctx["files"] == [data_file.name]
    assert ctx["records_a"]["model"].tolist() == ["M-200", "M-201", "M-200"]
    assert ctx["records_b"]["quantity"].tolist() == [11, 30, 5]


def test_load_falls_back_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("DIST_DATA_FILE", str(tmp_path / "missing.json"))
    ctx = load_dashboard_data()
    assert ctx["source"] == "fallback"
    assert len(ctx["records_a"]) == 20


def test_custom_records_replace_default(scenario_rows):
    ctx = load_dashboard_data(scenario_rows[:2], comparison_records=[])
    assert ctx["source"] == "custom"
    assert len(ctx["records_a"]) == 2
    assert ctx["records_b"].empty


def test_prepare_context_comparison_modes(scenario_rows):
    data_ctx = load_dashboard_data(scenario_rows)
    spec = FilterState(categories=["Ortho"])

    full = prepare_context(spec, data_ctx)
    assert full["comparison_mode"] == "full"
    assert full["filtered_a"]["model"].tolist() == ["M-201"]
    assert full["filtered_b"]["model"].tolist() == ["M-201"]

    reduced = prepare_context(spec, data_ctx, comparison_mode="reduced")
    assert reduced["filtered_a"]["model"].tolist() == ["M-201"]
    assert len(reduced["filtered_b"]) == 3


def test_prepare_context_accepts_raw_dict(scenario_rows):
    ctx = prepare_context({"model_ids": ["M-200"]}, load_dashboard_data(scenario_rows))
    assert ctx["filters"].model_ids == ["M-200"]
    assert len(ctx["filtered_a"]) == 2


def test_prepare_context_rejects_unknown_mode(scenario_rows):
    with pytest.raises(ValueError):
        prepare_context({}, load_dashboard_data(scenario_rows), comparison_mode="partial")
