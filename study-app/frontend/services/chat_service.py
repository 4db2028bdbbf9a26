"""
Streaming chat against the backend relay.

Every surface that talks to ``/study-chat`` goes through ``stream_chat``.
How the request is authenticated is decided by the caller through a
``ChatAuth`` object.
"""
import logging
from typing import Callable, Dict, Iterable, Iterator, List, Optional

import requests

from services.api import absolute
from services.auth_service import AuthSession
from utils.stream_parser import SSEDeltaParser, iter_deltas

logger = logging.getLogger("chat_service")
logging.basicConfig(level=logging.INFO)

# (connect, read); read is the longest silence tolerated between chunks
CHAT_TIMEOUT = (10, 120)


class ChatRequestError(Exception):
    """The relay answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class TransportError(Exception):
    """The connection failed before or while the reply was streaming."""


# -----------------------------
# Auth strategies
# -----------------------------
class ChatAuth:
    """Supplies the auth headers for one chat request. The relay accepts user tokens only."""

    def headers(self) -> Dict[str, str]:
        raise NotImplementedError


class SessionAuth(ChatAuth):
    """Signed-in user: the session's access token is the bearer credential."""

    def __init__(self, session: AuthSession):
        self.session = session

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.session.access_token}"}


# -----------------------------
# Streaming
# -----------------------------
def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return f"Request failed with status {resp.status_code}"


def _read_chunks(resp: requests.Response, stop: Optional[Callable[[], bool]]) -> Iterator[bytes]:
    for chunk in resp.iter_content(chunk_size=None):
        if stop is not None and stop():
            logger.info("Chat stream aborted by caller")
            return
        yield chunk


def stream_chat(
    messages: Iterable[Dict[str, str]],
    auth: ChatAuth,
    on_update: Optional[Callable[[str], None]] = None,
    *,
    stop: Optional[Callable[[], bool]] = None,
) -> str:
    """
    Send the conversation and stream the assistant reply.

    ``on_update`` gets the whole reply so far after each delta. Returns the
    final text; when ``stop()`` turns true the text read so far is returned
    and the caller decides whether to keep it.
    """
    payload: List[Dict[str, str]] = [{"role": m["role"], "content": m["content"]} for m in messages]
    headers = {"Content-Type": "application/json", "Accept": "text/event-stream", **auth.headers()}

    try:
        resp = requests.post(
            absolute("/study-chat"),
            json={"messages": payload},
            headers=headers,
            stream=True,
            timeout=CHAT_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error(f"Chat request failed: {e}")
        raise TransportError(str(e)) from e

    with resp:
        if not resp.ok:
            raise ChatRequestError(resp.status_code, _error_message(resp))

        # one read can complete several frames, so the text is built per delta
        text = ""
        try:
            for delta in iter_deltas(_read_chunks(resp, stop), SSEDeltaParser()):
                text += delta
                if on_update is not None:
                    on_update(text)
        except requests.RequestException as e:
            logger.error(f"Chat stream interrupted: {e}")
            raise TransportError(str(e)) from e

    return text
