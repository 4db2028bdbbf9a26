import streamlit as st
from state.auth import require_session, logout
from services.chat_service import SessionAuth, ChatRequestError, TransportError, stream_chat
from services.session_service import list_sessions, create_session, delete_session, load_messages, save_message
from utils.helper import toast_err
from utils.ui_components import chat_message, typing_bubble

st.set_page_config(page_title="Study", page_icon="💬", layout="wide")

session = require_session()

# ---------------- Session State ----------------
ss = st.session_state
ss.setdefault("chat_messages", [])
ss.setdefault("chat_session_id", None)
ss.setdefault("pending_prompt", None)
ss.setdefault("is_loading", False)


def _open_session(session_id: str | None):
    ss.chat_session_id = session_id
    ss.chat_messages = []
    if session_id:
        resp = load_messages(session, session_id)
        if resp.ok:
            ss.chat_messages = [
                {"role": m["role"], "content": m["content"]} for m in resp.json().get("messages", [])
            ]
        else:
            toast_err(resp.error_message)


# ---------------- Sidebar ----------------
with st.sidebar:
    st.title("💬 Chat History")

    if st.button("➕ New Chat", use_container_width=True, disabled=ss.is_loading):
        resp = create_session(session)
        if resp.ok:
            _open_session(resp.json()["id"])
            st.rerun()
        else:
            toast_err(resp.error_message)

    resp = list_sessions(session)
    sessions = resp.json().get("sessions", []) if resp.ok else []

    if sessions:
        for s in sessions:
            sid = s["id"]
            active = sid == ss.chat_session_id
            c1, c2 = st.columns([5, 1])
            with c1:
                if st.button(f"{'✅ ' if active else ''}{s['title']}", key=f"open-{sid}",
                             use_container_width=True, disabled=ss.is_loading):
                    _open_session(sid)
                    st.rerun()
            with c2:
                if st.button("🗑️", key=f"del-{sid}", disabled=ss.is_loading):
                    d = delete_session(session, sid)
                    if d.ok:
                        if active:
                            _open_session(None)
                        st.rerun()
                    else:
                        toast_err("Failed to delete chat")
    else:
        st.caption("No conversations yet. Start a new chat!")

    st.divider()
    st.caption(session.email)
    if st.button("🚪 Sign out", use_container_width=True):
        logout()
        st.switch_page("Home.py")

# ---------------- Main Chat Area ----------------
st.title("💬 Study with StudyBuddy")

if not ss.chat_messages and not ss.pending_prompt:
    st.caption("Ask a question about any subject to get started.")

for m in ss.chat_messages:
    chat_message(m["role"], m["content"])

prompt = st.chat_input("Ask anything…", disabled=ss.is_loading)

if prompt and prompt.strip() and not ss.is_loading:
    if not ss.chat_session_id:
        resp = create_session(session)
        if not resp.ok:
            toast_err(resp.error_message)
            st.stop()
        ss.chat_session_id = resp.json()["id"]

    text = prompt.strip()
    saved = save_message(session, ss.chat_session_id, "user", text)
    if not saved.ok:
        toast_err(saved.error_message)
        st.stop()
    ss.chat_messages.append({"role": "user", "content": text})
    ss.pending_prompt = text
    ss.is_loading = True
    st.rerun()

# ---------------- Streaming reply ----------------
if ss.pending_prompt:
    slot = typing_bubble()
    try:
        answer = stream_chat(ss.chat_messages, SessionAuth(session), on_update=slot.markdown)
        ss.chat_messages.append({"role": "assistant", "content": answer})
        if answer.strip():
            save_message(session, ss.chat_session_id, "assistant", answer)
    except (ChatRequestError, TransportError) as e:
        slot.empty()
        toast_err(str(e) or "Failed to get response")
    finally:
        ss.pending_prompt = None
        ss.is_loading = False
    st.rerun()
