import streamlit as st
from state.auth import clear_state
from services.account_service import confirm_deletion

st.set_page_config(page_title="Confirm Account Deletion", page_icon="⚠️")
st.title("⚠️ Confirm account deletion")

token = st.query_params.get("token")

if not token:
    st.error("Invalid confirmation link. No token provided.")
    st.stop()

# the link is single-use; remember the outcome across reruns
outcome = st.session_state.get("deletion_outcome")
if outcome is None or outcome[0] != token:
    resp = confirm_deletion(token)
    if resp.ok:
        outcome = (token, "success", "")
    elif resp.status_code == 410:
        outcome = (token, "expired", resp.error_message)
    elif resp.status_code is None:
        outcome = (token, "error", "An unexpected error occurred. Please try again.")
    else:
        outcome = (token, "error", resp.error_message)
    st.session_state["deletion_outcome"] = outcome

_, status, message = outcome

if status == "success":
    clear_state()
    st.success("Your account and all associated data have been permanently deleted.")
    st.page_link("Home.py", label="Back to home", icon="🏠")
elif status == "expired":
    st.warning(message)
    st.page_link("pages/2_Account.py", label="Request a new link", icon="👤")
else:
    st.error(message)
    st.page_link("Home.py", label="Back to home", icon="🏠")
