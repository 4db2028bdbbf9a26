from __future__ import annotations
import streamlit as st
from services.auth_service import AuthSession, sign_in, sign_up, sign_out

_SESSION_KEY = "auth_session"

# per-user page state dropped on logout
_PAGE_KEYS = (
    "chat_messages", "chat_session_id", "chat_sessions",
    "pending_prompt", "is_loading", "demo_messages", "demo_turn",
)


# -----------------------------
# Session helpers
# -----------------------------
def get_session() -> AuthSession | None:
    session = st.session_state.get(_SESSION_KEY)
    if session is not None and session.is_expired():
        st.session_state.pop(_SESSION_KEY, None)
        return None
    return session

def is_logged_in() -> bool:
    return get_session() is not None

def require_session() -> AuthSession:
    """Stop the page with a notice when nobody is signed in."""
    session = get_session()
    if session is None:
        st.error("⛔ Please sign in first.")
        st.page_link("Home.py", label="Go to sign in", icon="🏠")
        st.stop()
    return session


# -----------------------------
# Login / signup
# -----------------------------
def login(email: str, password: str) -> AuthSession:
    session = sign_in(email, password)
    st.session_state[_SESSION_KEY] = session
    return session

def signup(email: str, password: str) -> AuthSession | None:
    session = sign_up(email, password)
    if session is not None:
        st.session_state[_SESSION_KEY] = session
    return session


# -----------------------------
# Logout
# -----------------------------
def logout():
    """Revoke at the provider, then clear session state"""
    session = st.session_state.get(_SESSION_KEY)
    if session is not None:
        sign_out(session)
    clear_state()

def clear_state():
    for k in (_SESSION_KEY,) + _PAGE_KEYS:
        st.session_state.pop(k, None)
