import streamlit as st
import pandas as pd
from datetime import datetime

from account_explorer.charts import chart_figure, figure_to_html
from account_explorer.config import ChartOptions, get_settings
from account_explorer.logging_setup import configure_logging, get_logger
from account_explorer.records import DatasetLoadError
from account_explorer.report import descriptions_frame, format_amount, summary_frame
from account_explorer.search import InvalidQueryError
from account_explorer.session import ExplorerSession
from account_explorer import storage

# --- Configuration ---
st.set_page_config(page_title="Account History Explorer", layout="wide", page_icon="🏦")
settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger("account_explorer.app")
OPTIONS = ChartOptions()


# --- Data Loading ---
@st.cache_data
def load_records(dataset: str) -> pd.DataFrame:
    return storage.load_file(dataset, dayfirst=OPTIONS.dayfirst)


def get_session(dataset: str) -> ExplorerSession:
    # One session per dataset, kept across streamlit reruns
    if st.session_state.get("dataset") != dataset or "explorer" not in st.session_state:
        st.session_state.explorer = ExplorerSession(load_records(dataset), OPTIONS)
        st.session_state.dataset = dataset
    return st.session_state.explorer


with st.sidebar:
    st.header("Dataset")
    available = storage.list_files()
    if settings.dataset not in available:
        available = [settings.dataset] + available
    dataset = st.selectbox("Statement file", available)

try:
    session = get_session(dataset)
except DatasetLoadError as exc:
    logger.error("Dataset load failed: %s", exc)
    st.error(f"Could not load {dataset}: {exc}")
    st.stop()

st.title("🏦 Account History")
st.caption(f"{len(session.records):,} transactions")

# --- Search ---
query = st.text_input(
    "Search",
    value=OPTIONS.default_query,
    placeholder="itunes|google",
    help="Case-insensitive regular expression. Separate queries with | to compare them.",
)

# Unchanged text on a rerun returns the search already on display
try:
    result_set = session.on_query_changed(query)
except InvalidQueryError as exc:
    st.error(str(exc))
    result_set = session.active

fig = chart_figure(session.baseline, result_set.layout if result_set else None)
st.plotly_chart(fig, use_container_width=True)

if result_set:
    totals = result_set.totals
    col1, col2, col3 = st.columns(3)
    col1.metric("Transactions", f"{totals.count:,}")
    col2.metric("Credits", format_amount(totals.credit_total), help=f"{totals.credit_count} credit transactions")
    col3.metric("Debits", format_amount(totals.debit_total), help=f"{totals.debit_count} debit transactions")

    st.subheader("Search Summary")
    st.dataframe(summary_frame(result_set.results), hide_index=True, use_container_width=True)

    for result in result_set.results:
        with st.expander(f"{result.query} ({result.count} transactions)"):
            st.dataframe(descriptions_frame(result), hide_index=True, use_container_width=True)

# --- Export ---
html = figure_to_html(fig)
col1, col2 = st.columns(2)
col1.download_button("⬇️ Download chart", data=html, file_name="account_history.html", mime="text/html")
if col2.button("💾 Save chart"):
    name = f"account_history_{datetime.now():%Y%m%d_%H%M%S}.html"
    st.success(f"Saved to {storage.save_file(name, html, folder='exports')}")
