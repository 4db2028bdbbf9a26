from services.api import APIResponse, get, post, delete
from services.auth_service import AuthSession


def list_sessions(session: AuthSession) -> APIResponse:
    return get("/sessions", token=session.access_token)


def create_session(session: AuthSession) -> APIResponse:
    return post("/sessions", token=session.access_token)


def delete_session(session: AuthSession, session_id: str) -> APIResponse:
    return delete(f"/sessions/{session_id}", token=session.access_token)


def load_messages(session: AuthSession, session_id: str) -> APIResponse:
    return get(f"/sessions/{session_id}/messages", token=session.access_token)


def save_message(session: AuthSession, session_id: str, role: str, content: str) -> APIResponse:
    """Persist one turn; the backend titles the session from its first user message."""
    return post(
        f"/sessions/{session_id}/messages",
        json={"role": role, "content": content},
        token=session.access_token,
    )
