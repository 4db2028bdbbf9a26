import streamlit as st
from state.auth import require_session, logout, clear_state
from services.account_service import get_profile, delete_account, request_deletion
from utils.helper import toast_ok, toast_err
from utils.ui_components import confirm_phrase

st.set_page_config(page_title="Account", page_icon="👤")

session = require_session()

st.title("👤 Account")

resp = get_profile(session)
if resp.ok:
    profile = resp.json() or {}
    st.write(f"**Email:** {profile.get('email') or session.email}")
    if profile.get("created_at"):
        st.caption(f"Member since {profile['created_at'][:10]}")
else:
    toast_err(resp.error_message)

if st.button("🚪 Sign out"):
    logout()
    st.switch_page("Home.py")

st.divider()
st.subheader("Delete account")
st.warning(
    "This action is **permanent and cannot be undone**. Your profile, all chat sessions "
    "and messages, and your account credentials will be deleted."
)

tab_now, tab_email = st.tabs(["Delete now", "Confirm by email"])

with tab_now:
    confirmed = confirm_phrase("Type DELETE to confirm", "DELETE", key="delete_confirm_text")
    if st.button("Delete my account", type="primary", disabled=not confirmed):
        r = delete_account(session)
        if r.ok:
            clear_state()
            toast_ok("Your account and all associated data have been permanently deleted.")
            st.switch_page("Home.py")
        else:
            toast_err(r.error_message)

with tab_email:
    st.caption("We'll email you a link that is valid for one hour.")
    if st.button("Send confirmation email"):
        r = request_deletion(session)
        if r.ok:
            toast_ok((r.json() or {}).get("message", "Confirmation email sent."))
        else:
            toast_err(r.error_message)
