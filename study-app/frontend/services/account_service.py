from services.api import APIResponse, get, post
from services.auth_service import AuthSession


def get_profile(session: AuthSession) -> APIResponse:
    return get("/account/me", token=session.access_token)


def delete_account(session: AuthSession) -> APIResponse:
    return post("/account/delete", token=session.access_token)


def request_deletion(session: AuthSession) -> APIResponse:
    """Ask the backend to email a one-hour confirmation link."""
    return post("/account/deletion-request", token=session.access_token)


def confirm_deletion(token: str) -> APIResponse:
    return post("/account/confirm-deletion", json={"token": token})
