"""
Sign-in against the hosted identity provider.

The provider issues the bearer tokens the backend verifies. Everything that
calls the network takes the resulting ``AuthSession`` as an argument.
"""
import os
import time
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("auth_service")
logging.basicConfig(level=logging.INFO)

AUTH_URL = os.getenv("AUTH_URL", "").rstrip("/")
AUTH_ANON_KEY = os.getenv("AUTH_ANON_KEY", "")
TIMEOUT = 15


class AuthServiceError(Exception):
    pass


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user_id: str
    email: str
    expires_at: float
    refresh_token: str = ""

    def is_expired(self, now: Optional[float] = None) -> bool:
        return (now if now is not None else time.time()) >= self.expires_at


# -----------------------------
# Helpers (normalization)
# -----------------------------
def _norm_email(email: str) -> str:
    return (email or "").strip().lower()


def _headers(token: Optional[str] = None) -> dict:
    hdrs = {"apikey": AUTH_ANON_KEY, "Content-Type": "application/json"}
    if token:
        hdrs["Authorization"] = f"Bearer {token}"
    return hdrs


def _error_text(resp: requests.Response) -> str:
    try:
        data = resp.json() or {}
    except ValueError:
        data = {}
    return (
        data.get("error_description")
        or data.get("msg")
        or data.get("message")
        or data.get("error")
        or f"Request failed with status {resp.status_code}"
    )


def session_from_payload(data: dict) -> Optional[AuthSession]:
    """Build a session from a token response; ``None`` when it carries no token."""
    token = data.get("access_token")
    if not token:
        return None
    user = data.get("user") or {}
    expires_at = data.get("expires_at")
    if not expires_at:
        expires_at = time.time() + float(data.get("expires_in") or 3600)
    return AuthSession(
        access_token=token,
        user_id=str(user.get("id", "")),
        email=user.get("email", ""),
        expires_at=float(expires_at),
        refresh_token=data.get("refresh_token", ""),
    )


# -----------------------------
# LOGIN
# -----------------------------
def sign_in(email: str, password: str) -> AuthSession:
    try:
        r = requests.post(
            f"{AUTH_URL}/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": _norm_email(email), "password": password},
            headers=_headers(),
            timeout=TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Sign in request failed: {e}")
        raise AuthServiceError("Could not reach the sign-in service") from e

    if not r.ok:
        raise AuthServiceError(_error_text(r))

    session = session_from_payload(r.json() or {})
    if session is None:
        raise AuthServiceError("Sign in did not return a session")
    return session


# -----------------------------
# SIGNUP
# -----------------------------
def sign_up(email: str, password: str) -> Optional[AuthSession]:
    """
    Create an account. Returns a session when the provider signs the user in
    straight away, ``None`` when the email address has to be confirmed first.
    """
    try:
        r = requests.post(
            f"{AUTH_URL}/auth/v1/signup",
            json={"email": _norm_email(email), "password": password},
            headers=_headers(),
            timeout=TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Sign up request failed: {e}")
        raise AuthServiceError("Could not reach the sign-up service") from e

    if not r.ok:
        raise AuthServiceError(_error_text(r))
    return session_from_payload(r.json() or {})


# -----------------------------
# LOGOUT
# -----------------------------
def sign_out(session: AuthSession) -> None:
    """Revoke the token at the provider; local state is cleared by the caller either way."""
    try:
        requests.post(f"{AUTH_URL}/auth/v1/logout", headers=_headers(session.access_token), timeout=TIMEOUT)
    except requests.RequestException as e:
        logger.warning(f"Sign out request failed: {e}")
