# app.py
import logging

import pandas as pd
import plotly.express as px
import streamlit as st

from config import load_credentials, load_sheet_settings, load_timezone
from filters import FrameSink, apply_filters, build_filter_spec, clear_filters
from ingest import fetch_cod_orders, sync_to_sheet
from schema import COLUMNS, row_values
from sheets import open_sheet_sink

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

# page config must be set before other Streamlit calls
st.set_page_config(page_title="COD Orders", layout="wide")
st.title("📦 COD Orders")


def _secrets_env():
    """Shopify settings from the [shopify] secrets section; None means read the environment."""
    try:
        section = dict(st.secrets.get("shopify", {}))
    except Exception:
        # no secrets.toml
        return None
    if not section:
        return None
    env = {
        "SHOPIFY_DOMAIN": section.get("domain"),
        "SHOPIFY_ACCESS_TOKEN": section.get("access_token"),
        "SHOPIFY_API_VERSION": section.get("api_version"),
        "SHOP_TIMEZONE": section.get("timezone"),
    }
    return {k: v for k, v in env.items() if v}


secrets_env = _secrets_env()
credentials = load_credentials(secrets_env)
timezone = load_timezone(secrets_env)
sheet_settings = load_sheet_settings()

if "sink" not in st.session_state:
    st.session_state["sink"] = FrameSink(COLUMNS)
    st.session_state["result"] = None
sink: FrameSink = st.session_state["sink"]

# --- Sidebar: source status + fetch ---
st.sidebar.header("Shopify")
if credentials.is_configured:
    st.sidebar.success(f"✅ Connected to {credentials.domain} (API {credentials.api_version})")
else:
    st.sidebar.warning("⚠️ Shopify not configured. Showing sample orders.")

write_to_sheet = False
if sheet_settings.is_configured:
    write_to_sheet = st.sidebar.checkbox(f"Also write to Google Sheet tab '{sheet_settings.tab}'", value=False)
    if write_to_sheet:
        st.sidebar.caption("Filters applied below are set on the sheet too.")


def _sheet_sink():
    return open_sheet_sink(sheet_settings.doc_id, sheet_settings.tab, sheet_settings.creds_file)


if st.sidebar.button("🔄 Fetch COD orders") or st.session_state["result"] is None:
    with st.spinner("Loading orders..."):
        result = fetch_cod_orders(credentials, tz=timezone)
    st.session_state["result"] = result
    sink.write_table(COLUMNS, row_values(result.rows))
    # a fresh table starts unfiltered, so the form starts empty too
    for name in COLUMNS:
        st.session_state[f"filter_{name}"] = ""

    if write_to_sheet:
        try:
            written = sync_to_sheet(result, _sheet_sink())
            st.sidebar.success(f"Wrote {written} rows to '{sheet_settings.tab}'")
        except Exception as e:
            logging.exception("Sheet write failed")
            st.sidebar.error(f"Failed to write to Google Sheets: {e}")

result = st.session_state["result"]
if result.sample:
    st.info("Sample data: set SHOPIFY_DOMAIN and SHOPIFY_ACCESS_TOKEN (or [shopify] in secrets) to load real orders.")
elif result.message and not result.rows:
    st.warning(result.message)

# --- Column filters ---
st.subheader("Filters")
with st.form("filters"):
    cols = st.columns(4)
    values = {}
    for i, name in enumerate(COLUMNS):
        with cols[i % 4]:
            values[name] = st.text_input(name, key=f"filter_{name}")
    apply_clicked = st.form_submit_button("Apply filters")
    clear_clicked = st.form_submit_button("Clear filters")

if apply_clicked:
    applied = apply_filters(sink, values)
    if applied:
        st.caption(f"Filtering on {applied} column(s): {build_filter_spec(values)}")
    else:
        st.caption("No filters applied.")
elif clear_clicked:
    clear_filters(sink)
    st.caption("Filters cleared.")

if write_to_sheet and (apply_clicked or clear_clicked):
    try:
        gsink = _sheet_sink()
        if apply_clicked:
            apply_filters(gsink, values)
        else:
            clear_filters(gsink)
        st.sidebar.success(f"Sheet filters updated on '{sheet_settings.tab}'")
    except Exception as e:
        logging.exception("Sheet filter update failed")
        st.sidebar.error(f"Failed to update Google Sheets filters: {e}")

view = sink.view()
st.write(f"Rows: {len(view)} of {max(sink.row_count() - 1, 0)}")
st.dataframe(view, use_container_width=True, hide_index=True)

if not view.empty:
    st.download_button(
        "⬇️ Download CSV",
        view.to_csv(index=False).encode("utf-8"),
        file_name="cod_orders.csv",
        mime="text/csv",
    )

    st.subheader("Orders by country")
    counts = (
        view.assign(Country=view["Country"].replace("", "Unknown"))
            .groupby("Country")
            .size()
            .reset_index(name="Orders")
            .sort_values("Orders", ascending=False)
    )
    fig = px.bar(counts, x="Country", y="Orders")
    st.plotly_chart(fig, use_container_width=True)

    st.subheader("Orders by status")
    status_counts = pd.Series(view["Status"].replace("", "unknown")).value_counts()
    st.bar_chart(status_counts)
