from distcore.config import Limits
from distcore.data import load_dashboard_data, prepare_context
from distcore.filters import INITIAL_FILTERS, FilterState
from distcore.metrics_discrepancy import compute_discrepancy
from distcore.metrics_distribution import compute_distribution


def test_distribution_payload(scenario_rows):
    ctx = prepare_context(INITIAL_FILTERS, load_dashboard_data(scenario_rows))
    payload = compute_distribution(INITIAL_FILTERS, ctx)

    assert payload["source"] == "custom"
    assert payload["comparison_mode"] == "full"
    assert payload["kpis"]["total_quantity"] == 45
    assert payload["pareto"][0] == {"model": "M-201", "quantity": 30, "cumulative_percent": 67}
    assert len(payload["preview"]) == 3
    assert payload["preview"][0]["SupplierID"] == "MedTech-A"
    assert set(payload["charts"]) == {"timeline", "pareto", "heatmap", "time_zones"}
    assert all("$schema" in spec for spec in payload["charts"].values())
    assert payload["filters"]["time_zone_range"] == (-12, 12)


def test_distribution_payload_respects_limits(fallback_records):
    limits = Limits(time_series_limit=5, preview_rows=3, flow_layer_limits=(1, 2, 3, 4))
    ctx = prepare_context(INITIAL_FILTERS, load_dashboard_data(fallback_records))
    payload = compute_distribution(INITIAL_FILTERS, ctx, limits=limits)
    assert len(payload["time_series"]) == 5
    assert len(payload["preview"]) == 3
    assert [len(layer) for layer in payload["flow_graph"]["layers"]] == [1, 2, 3, 4]


def test_distribution_payload_when_nothing_matches(scenario_rows):
    spec = FilterState(search_query="no-such-device")
    ctx = prepare_context(spec, load_dashboard_data(scenario_rows))
    payload = compute_distribution(spec, ctx)
    assert payload["kpis"]["records"] == 0
    assert payload["charts"] == {}
    assert payload["pareto"] == []
    assert payload["co_occurrence"] == []
    assert payload["flow_graph"]["links"] == []


def test_discrepancy_payload(fallback_records):
    spec = FilterState(model_ids=["M-200"], categories=["Cardiac"])
    ctx = prepare_context(spec, load_dashboard_data(fallback_records), comparison_mode="reduced")
    payload = compute_discrepancy(spec, ctx, limits=Limits(discrepancy_snippet_size=2))

    assert payload["comparison_mode"] == "reduced"
    # M-200 rows: indices 0, 5, 10, 15; only 0 and 15 are Cardiac
    assert payload["row_counts"] == {"supplier_rows": 2, "customer_rows": 4}
    assert len(payload["snapshot"]["snippet_a"]) == 2
    assert len(payload["snapshot"]["snippet_b"]) == 2
    assert "Dataset B (Customer)" in payload["prompt"]
