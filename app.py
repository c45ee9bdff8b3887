import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Optional

from distcore.config import Limits
from distcore.data import load_dashboard_data, prepare_context
from distcore.filters import FilterState, filter_options, normalize_filters
from distcore.metrics_discrepancy import compute_discrepancy
from distcore.metrics_distribution import compute_distribution
from distcore.prompts import build_standardize_prompt
from distcore.records import RecordParseError, parse_records_json, to_export_frame


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(f: FilterState) -> str:
    chips = []
    for label, values in [
        ("Supplier", f.supplier_ids),
        ("Category", f.categories),
        ("License", f.license_nos),
        ("Model", f.model_ids),
        ("Customer", f.customer_ids),
    ]:
        chips.append(f"{label}: {', '.join(values)}" if values else f"{label}: All")
    if f.search_query:
        chips.append(f"Search: {f.search_query}")
    if f.lot_query or f.serial_query:
        chips.append("Lot/Serial: search")
    lo, hi = f.time_zone_range
    chips.append(f"GMT: {lo:+d} to {hi:+d}")
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_page_header(title: str, breadcrumb: str, f: FilterState, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{format_filter_summary(f)}</div>", unsafe_allow_html=True)


# ---------- UI setup ----------
st.set_page_config(page_title="Medical Device Distribution Dashboard", layout="wide")
inject_base_styles()
st.title("Medical Device Distribution Dashboard")
st.caption("Supplier shipments by license, model, lot and customer.")
limits = Limits()

# ----- Sidebar: data source + navigation + filters -----
with st.sidebar:
    st.markdown("### Data source")
    source_choice = st.radio("Dataset", ["Default", "Custom"], index=0, horizontal=True)
    custom_records = None
    if source_choice == "Custom":
        custom_text = st.text_area("Paste JSON records", "", height=160)
        if custom_text.strip():
            try:
                custom_records = parse_records_json(custom_text)
            except RecordParseError as exc:
                st.error(f"Could not read records: {exc}")
                with st.expander("Standardization prompt"):
                    st.code(build_standardize_prompt(custom_text, limits.standardize_max_chars))

data_ctx = load_dashboard_data(custom_records)
records_a: pd.DataFrame = data_ctx["records_a"]
if records_a.empty:
    st.error("No distribution records loaded. Paste a JSON array of records or switch to the default dataset.")
    st.stop()

options = filter_options(records_a)
with st.sidebar:
    st.markdown("---")
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Distribution", "Discrepancies"], index=0)

    st.markdown("---")
    st.markdown("### Filters")
    search_query = st.text_input("Search all fields", "")
    supplier_ids = st.multiselect("Supplier", options=options["supplier_ids"], default=[])
    categories = st.multiselect("Category", options=options["categories"], default=[])
    license_nos = st.multiselect("License No", options=options["license_nos"], default=[])
    model_ids = st.multiselect("Model", options=options["model_ids"], default=[])
    customer_ids = st.multiselect("Customer", options=options["customer_ids"], default=[])
    lot_query = st.text_input("Lot No contains", "")
    serial_query = st.text_input("Serial No contains", "")
    time_zone_range = st.slider("GMT offset", min_value=-12, max_value=12, value=(-12, 12))

    with st.expander("Advanced settings", expanded=False):
        comparison_mode = st.radio(
            "Customer dataset filter",
            ["full", "reduced"],
            index=0,
            help="'reduced' applies only the Supplier and Model selections to the customer dataset.",
        )
        weighted_flow = st.checkbox("Flow links from actual shipments", value=False)

filters = normalize_filters(
    {
        "search_query": search_query,
        "supplier_ids": supplier_ids,
        "categories": categories,
        "license_nos": license_nos,
        "model_ids": model_ids,
        "customer_ids": customer_ids,
        "lot_query": lot_query,
        "serial_query": serial_query,
        "time_zone_range": time_zone_range,
    }
)
ctx = prepare_context(filters, data_ctx, comparison_mode=comparison_mode)


def render_flow_graph(graph: dict):
    cols = st.columns(len(graph["layers"]))
    for col, layer in zip(cols, graph["layers"]):
        with col:
            if layer:
                st.markdown(f"**{layer[0]['layer'].title()}**")
            for node in layer:
                st.markdown(f"<span class='chip'>{node['label']}</span>", unsafe_allow_html=True)
    st.caption(f"{len(graph['links'])} links")


def render_distribution_page():
    payload = compute_distribution(filters, ctx, limits=limits, weighted_flow=weighted_flow)
    render_page_header("Distribution", "Home / Distribution", filters, export_df=to_export_frame(ctx["filtered_a"]), export_name="distribution.csv")

    kpis = payload["kpis"]
    tiles = st.columns(5)
    tiles[0].metric("Records", f"{kpis['records']:,}")
    tiles[1].metric("Total Quantity", f"{kpis['total_quantity']:,}")
    tiles[2].metric("Suppliers", kpis["suppliers"])
    tiles[3].metric("Models", kpis["models"])
    tiles[4].metric("Customers", kpis["customers"])

    charts = payload["charts"]
    if not charts:
        st.info("No records match the current filters.")
        return

    row1 = st.columns(2)
    with row1[0]:
        with card("Shipment Timeline"):
            st.vega_lite_chart(charts["timeline"], use_container_width=True)
    with row1[1]:
        with card("Pareto Analysis"):
            st.vega_lite_chart(charts["pareto"], use_container_width=True)

    with card("Network Flow"):
        render_flow_graph(payload["flow_graph"])

    row2 = st.columns(2)
    with row2[0]:
        with card("Mosaic Heatmap"):
            st.vega_lite_chart(charts["heatmap"], use_container_width=True)
    with row2[1]:
        with card("Timezone Distribution"):
            st.vega_lite_chart(charts["time_zones"], use_container_width=True)

    with card("Category Breakdown"):
        tree_rows = [
            {"Category": node["category"], "Model": child["model"], "Quantity": child["size"]}
            for node in payload["category_tree"]
            for child in node["children"]
        ]
        st.dataframe(pd.DataFrame(tree_rows), hide_index=True, use_container_width=True)

    with card(f"Preview (first {limits.preview_rows} rows)"):
        st.dataframe(pd.DataFrame(payload["preview"]), hide_index=True, use_container_width=True)


def render_discrepancy_page():
    payload = compute_discrepancy(filters, ctx, limits=limits)
    render_page_header("Discrepancies", "Home / Discrepancies", filters, export_df=to_export_frame(ctx["filtered_b"]), export_name="customer.csv")
    counts = payload["row_counts"]
    st.caption(
        f"Supplier rows: {counts['supplier_rows']:,} | Customer rows: {counts['customer_rows']:,} | "
        f"Customer filter: {payload['comparison_mode']}"
    )
    cols = st.columns(2)
    with cols[0]:
        with card("Dataset A (Supplier)"):
            st.dataframe(pd.DataFrame(payload["snapshot"]["snippet_a"]), hide_index=True, use_container_width=True)
    with cols[1]:
        with card("Dataset B (Customer)"):
            st.dataframe(pd.DataFrame(payload["snapshot"]["snippet_b"]), hide_index=True, use_container_width=True)
    with card("Analysis prompt"):
        st.code(payload["prompt"])


if nav_choice == "Distribution":
    render_distribution_page()
else:
    render_discrepancy_page()
