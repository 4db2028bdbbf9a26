import os
import requests
from dotenv import load_dotenv
from typing import Optional, Dict, Any

load_dotenv()

# Backend URL (override with BACKEND_URL in .env)
BASE_URL = os.getenv("BACKEND_URL", "http://127.0.0.1:8000").rstrip("/")
DEFAULT_TIMEOUT = 30


# -----------------------------
# APIResponse wrapper
# -----------------------------
class APIResponse:
    def __init__(self, response: Optional[requests.Response] = None, error: Optional[Exception] = None):
        self._resp = response
        self.error = error

    @property
    def ok(self) -> bool:
        return self._resp is not None and getattr(self._resp, "ok", False)

    @property
    def status_code(self) -> Optional[int]:
        return self._resp.status_code if self._resp is not None else None

    def json(self):
        if self._resp is None:
            return None
        try:
            return self._resp.json()
        except ValueError:
            return None

    @property
    def error_message(self) -> str:
        """The backend's ``{"error": ...}`` text, or a generic fallback."""
        data = self.json()
        if isinstance(data, dict) and isinstance(data.get("error"), str):
            return data["error"]
        if self.error is not None:
            return str(self.error)
        return f"Request failed with status {self.status_code}"


# -----------------------------
# Helpers
# -----------------------------
def auth_headers(token: Optional[str] = None) -> Dict[str, str]:
    hdrs = {"Accept": "application/json"}
    if token:
        hdrs["Authorization"] = f"Bearer {token}"
    return hdrs


def absolute(path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    return f"{BASE_URL}{path}"


# -----------------------------
# HTTP Methods
# -----------------------------
def post(path: str, json: Optional[Dict[str, Any]] = None, token: Optional[str] = None) -> APIResponse:
    try:
        response = requests.post(absolute(path), json=json, headers=auth_headers(token), timeout=DEFAULT_TIMEOUT)
        return APIResponse(response)
    except requests.RequestException as e:
        return APIResponse(error=e)


def get(path: str, params: Optional[Dict[str, Any]] = None, token: Optional[str] = None) -> APIResponse:
    try:
        response = requests.get(absolute(path), params=params, headers=auth_headers(token), timeout=DEFAULT_TIMEOUT)
        return APIResponse(response)
    except requests.RequestException as e:
        return APIResponse(error=e)


def delete(path: str, token: Optional[str] = None) -> APIResponse:
    try:
        response = requests.delete(absolute(path), headers=auth_headers(token), timeout=DEFAULT_TIMEOUT)
        return APIResponse(response)
    except requests.RequestException as e:
        return APIResponse(error=e)
