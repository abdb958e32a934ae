"""Streamlit dashboard. Run with `streamlit run loadboard/dashboard/Loadboard.py`."""
