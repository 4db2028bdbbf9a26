import time
import streamlit as st
from state.auth import is_logged_in, get_session, login, signup
from services.auth_service import AuthServiceError
from utils.demo import TYPING_DELAY_SECONDS, pick_demo_answer, suggested_questions
from utils.helper import hide_sidebar, toast_ok, toast_err
from utils.ui_components import chat_message, typing_bubble

st.set_page_config(page_title="StudyBuddy", page_icon="🎓", layout="wide")

# Hide sidebar when user is not logged in
if not is_logged_in():
    hide_sidebar()

st.title("🎓 StudyBuddy")
st.caption("Your AI study companion. Clear explanations, step-by-step problem solving and study tips for any subject.")

ss = st.session_state
ss.setdefault("demo_messages", [])
ss.setdefault("demo_turn", 0)
ss.setdefault("demo_pending", None)


# ------------------- DEMO -------------------
def _ask_demo(question: str):
    ss.demo_messages.append({"role": "user", "content": question})
    ss.demo_pending = question


with st.container(border=True):
    st.subheader("Try it now")
    st.caption("Experience how StudyBuddy can help you understand any topic.")

    if not ss.demo_messages and not ss.demo_pending:
        st.write("Hi! I'm here to help you study. Ask me anything!")
        cols = st.columns(len(suggested_questions()))
        for col, q in zip(cols, suggested_questions()):
            with col:
                if st.button(q, key=f"demo-{q}", use_container_width=True):
                    _ask_demo(q)
                    st.rerun()

    for m in ss.demo_messages:
        chat_message(m["role"], m["content"])

    if ss.demo_pending:
        typing_bubble()
        time.sleep(TYPING_DELAY_SECONDS)
        ss.demo_messages.append({"role": "assistant", "content": pick_demo_answer(ss.demo_pending, ss.demo_turn)})
        ss.demo_turn += 1
        ss.demo_pending = None
        st.rerun()

    with st.form("demo_form", clear_on_submit=True):
        demo_in = st.text_input("Type your question...", label_visibility="collapsed", placeholder="Type your question...")
        asked = st.form_submit_button("Send")
    if asked and demo_in.strip():
        _ask_demo(demo_in.strip())
        st.rerun()

st.markdown("---")

# ------------------- NOT LOGGED IN -------------------
if not is_logged_in():
    st.subheader("Account")

    tab_signin, tab_signup = st.tabs(["Sign in", "Sign up"])

    # ---------- SIGN IN ----------
    with tab_signin:
        with st.form("login_form", clear_on_submit=False):
            c1, c2 = st.columns(2)
            with c1:
                email_in = st.text_input("Email", autocomplete="username")
            with c2:
                pw_in = st.text_input("Password", type="password", autocomplete="current-password")
            submitted = st.form_submit_button("Sign in", type="primary")

        if submitted:
            if not email_in.strip() or not pw_in:
                st.error("Email and password required.")
            else:
                try:
                    login(email_in.strip(), pw_in)
                    toast_ok("Logged in successfully")
                    st.switch_page("pages/1_Study.py")
                except AuthServiceError as e:
                    toast_err(str(e))

    # ---------- SIGN UP ----------
    with tab_signup:
        st.caption("Create a new account")
        with st.form("signup_form", clear_on_submit=False):
            c1, c2 = st.columns(2)
            with c1:
                email_new = st.text_input("Email")
            with c2:
                pw_new = st.text_input("Password", type="password")
            submitted_su = st.form_submit_button("Sign up", type="secondary")

        if submitted_su:
            if not (email_new.strip() and pw_new):
                st.error("All fields are required.")
            else:
                try:
                    session = signup(email_new.strip(), pw_new)
                    if session:
                        toast_ok("Account created and logged in")
                        st.switch_page("pages/1_Study.py")
                    else:
                        toast_ok("Account created. Check your inbox to confirm your email, then sign in.")
                except AuthServiceError as e:
                    toast_err(str(e))

# ------------------- LOGGED IN -------------------
else:
    session = get_session()
    st.success(f"You are logged in as **{session.email}**")

    c1, c2 = st.columns(2)
    with c1:
        if st.button("💬 Study", use_container_width=True):
            st.switch_page("pages/1_Study.py")
    with c2:
        if st.button("👤 Account", use_container_width=True):
            st.switch_page("pages/2_Account.py")
