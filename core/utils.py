import streamlit as st

PALETTE = {
    "Low": "#2e7d32",
    "Moderate": "#f9a825",
    "High": "#ef6c00",
    "Critical": "#c62828",
    "info": "#455a64",
}

def color_box(text: str, level: str = "info"):
    col = PALETTE.get(level, "#455a64")
    st.markdown(
        f"""
        <div style=\"background:{col};padding:12px;border-radius:8px;color:white;font-weight:600;\">{text}</div>
        """,
        unsafe_allow_html=True,
    )
