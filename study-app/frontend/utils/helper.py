from __future__ import annotations
import streamlit as st


# ---------- UI helpers ----------
def _toast(msg: str, icon: str, fallback: str = "info"):
    """Internal helper to use st.toast if available, else fallback."""
    if hasattr(st, "toast"):
        st.toast(msg, icon=icon)
    else:
        if fallback == "success":
            st.success(msg)
        elif fallback == "warning":
            st.warning(msg)
        elif fallback == "error":
            st.error(msg)
        else:
            st.info(msg)

def toast_ok(msg: str):
    _toast(msg, "✅", fallback="success")

def toast_err(msg: str):
    _toast(msg, "❌", fallback="error")

def safe_markdown(text: str, *, placeholder="(no content)"):
    st.markdown(str(text).strip() if (text and str(text).strip()) else placeholder)

def hide_sidebar():
    st.markdown("""
        <style>
        [data-testid="collapsedControl"] {
            display: none
        }
        </style>
        """, unsafe_allow_html=True)
