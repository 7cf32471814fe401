"""Account History Explorer package.

This package turns a bank statement CSV into monthly credit/debit charts
with a running balance line, and overlays stacked per-query histograms for
free-text searches.  See ``session.py`` for the search entry point and
``app.py`` for the streamlit dashboard.
"""
