# app.py
# Stock Index Dashboard (Streamlit) – closing prices, historical event bands, exchange filter
# ------------------------------------------------------------------------------------
# What's inside:
#  - Compact header with view toggles (All exchanges • NYSE • Filter)
#  - All Stock Exchanges: one line per index, legend with exchange names
#  - NYSE Exchange: single line with per-point hover tooltips
#  - Filter: pick one index from a dropdown, chart is rebuilt from scratch on change
#  - DotCom / Great Recession / Covid-19 bands on every chart
#
# Data: CSV with Index, Date, CloseUSD columns at data/stock.csv
# (override with STOCK_VIEWER_DATA).

import logging
from dataclasses import replace

import streamlit as st

from stock_viewer.config import CHART_PRESETS, DEFAULT_SELECTION, configure_logging, data_file
from stock_viewer.data import DataLoadError, load_dataset
from stock_viewer.renderer import ChartRenderer, selector_options

configure_logging()
logger = logging.getLogger("stock_viewer.app")

# =========================================
# 0) PAGE SETUP + COMPACT CSS
# =========================================
st.set_page_config(page_title="Stock Index Dashboard", layout="wide", initial_sidebar_state="collapsed")

COMPACT_CSS = """
<style>
.block-container { padding-top: 10px !important; padding-bottom: 10px !important; }

.group-title {
  font-weight: 600;
  font-size: 13px;
  margin-bottom: 6px;
}

.stSelectbox { min-height: 32px !important; }

.element-container .stPlotlyChart {
  padding: 6px 6px 10px 6px !important;
}
</style>
"""
st.markdown(COMPACT_CSS, unsafe_allow_html=True)

# =========================================
# 1) CONFIG
# =========================================
DATA_PATH = data_file()
renderer = ChartRenderer()


# =========================================
# 2) DATA LOADING
# =========================================
@st.cache_data(show_spinner="Loading data ...", ttl=3600)
def load_data(path):
    return load_dataset(path)


try:
    dataset = load_data(DATA_PATH)
except DataLoadError as e:
    logger.exception("Could not load %s", DATA_PATH)
    st.error(
        f"Price data could not be loaded: {e}. "
        "Make sure **stock.csv** (Index, Date, CloseUSD) is present in the data folder."
    )
    st.stop()

# =========================================
# 3) STATE DEFAULTS
# =========================================
if "view_all" not in st.session_state:
    st.session_state["view_all"] = True
if "view_nyse" not in st.session_state:
    st.session_state["view_nyse"] = True
if "view_filter" not in st.session_state:
    st.session_state["view_filter"] = True

# =========================================
# 4) HEADER
# =========================================
st.title("Stock Index Closing Prices")
st.markdown('<div class="group-title">Views</div>', unsafe_allow_html=True)
c1, c2, c3 = st.columns(3)
c1.checkbox("All exchanges", key="view_all")
c2.checkbox("NYSE", key="view_nyse")
c3.checkbox("Filter", key="view_filter")
st.caption("Pick which charts render. All updates apply immediately.")

if dataset.is_empty:
    st.info("The data file has no usable rows.")

# =========================================
# 5) ALL EXCHANGES
# =========================================
if st.session_state["view_all"]:
    st.subheader("All Stock Exchanges")
    renderer.render(st, dataset, CHART_PRESETS["all"])

# =========================================
# 6) NYSE (tooltips)
# =========================================
if st.session_state["view_nyse"]:
    st.subheader("NYSE Exchange")
    renderer.render(st, dataset, CHART_PRESETS["nyse"])

# =========================================
# 7) FILTER (dropdown, full redraw on change)
# =========================================
if st.session_state["view_filter"]:
    st.subheader("Filter by Exchange")
    options, default_index = selector_options(dataset, DEFAULT_SELECTION)
    if not options:
        st.info("No exchanges to choose from.")
    else:
        choice = st.selectbox("Exchange", options=options, index=default_index, key="stock_select")
        cfg = replace(CHART_PRESETS["filter"], title=choice, series_key=choice)
        renderer.render(st, dataset, cfg)

# =========================================
# 8) FOOTER NOTE
# =========================================
st.caption("Tip: hover the NYSE and filtered charts for exact closing prices. Shaded bands mark DotCom, Great Recession and Covid-19.")
