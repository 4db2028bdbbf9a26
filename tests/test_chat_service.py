import json

import pytest
import requests

from services import chat_service
from services.auth_service import AuthSession, session_from_payload
from services.chat_service import (
    ChatAuth,
    ChatRequestError,
    SessionAuth,
    TransportError,
    stream_chat,
)


def frame(text):
    return ("data: " + json.dumps({"choices": [{"delta": {"content": text}}]}, ensure_ascii=False) + "\n\n").encode()


class FakeResponse:
    def __init__(self, status_code=200, chunks=(), body=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.chunks = list(chunks)
        self.body = body
        self.read = 0
        self.closed = False

    def json(self):
        if self.body is None:
            raise ValueError("no json")
        return self.body

    def iter_content(self, chunk_size=None):
        for c in self.chunks:
            self.read += 1
            if isinstance(c, Exception):
                raise c
            yield c

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


@pytest.fixture
def posted(monkeypatch):
    """Replace requests.post; set ``posted.response`` before calling stream_chat."""
    class Posted:
        response = None
        calls = []

    p = Posted()
    p.calls = []

    def fake_post(url, **kw):
        p.calls.append((url, kw))
        if isinstance(p.response, Exception):
            raise p.response
        return p.response

    monkeypatch.setattr(chat_service.requests, "post", fake_post)
    return p


SESSION = AuthSession(access_token="tok-123", user_id="u1", email="u1@example.com", expires_at=9e9)


def test_streams_and_reports_cumulative_text(posted):
    posted.response = FakeResponse(chunks=[frame("Hel")[:10], frame("Hel")[10:] + frame("lo"), b"data: [DONE]\n\n"])
    updates = []

    result = stream_chat([{"role": "user", "content": "hi"}], SessionAuth(SESSION), on_update=updates.append)

    assert result == "Hello"
    assert updates == ["Hel", "Hello"]
    assert posted.response.closed

    url, kw = posted.calls[0]
    assert url.endswith("/study-chat")
    assert kw["stream"] is True
    assert kw["json"] == {"messages": [{"role": "user", "content": "hi"}]}
    assert kw["headers"]["Authorization"] == "Bearer tok-123"


def test_headers_come_from_the_injected_auth(posted):
    class FixedAuth(ChatAuth):
        def headers(self):
            return {"Authorization": "Bearer injected", "X-Trace": "1"}

    posted.response = FakeResponse(chunks=[b"data: [DONE]\n\n"])
    stream_chat([{"role": "user", "content": "hi"}], FixedAuth())
    headers = posted.calls[0][1]["headers"]
    assert headers["Authorization"] == "Bearer injected"
    assert headers["X-Trace"] == "1"
    assert headers["Accept"] == "text/event-stream"


def test_error_status_uses_relay_message(posted):
    posted.response = FakeResponse(429, body={"error": "Rate limit exceeded. Please try again in a moment."})
    with pytest.raises(ChatRequestError) as exc:
        stream_chat([{"role": "user", "content": "hi"}], SessionAuth(SESSION))
    assert exc.value.status_code == 429
    assert exc.value.message == "Rate limit exceeded. Please try again in a moment."


def test_error_status_without_json_body(posted):
    posted.response = FakeResponse(502)
    with pytest.raises(ChatRequestError) as exc:
        stream_chat([{"role": "user", "content": "hi"}], SessionAuth(SESSION))
    assert str(exc.value) == "Request failed with status 502"


def test_connection_failure_is_transport_error(posted):
    posted.response = requests.ConnectionError("refused")
    with pytest.raises(TransportError):
        stream_chat([{"role": "user", "content": "hi"}], SessionAuth(SESSION))


def test_failure_mid_stream_is_transport_error(posted):
    posted.response = FakeResponse(chunks=[frame("par"), requests.ConnectionError("reset")])
    updates = []
    with pytest.raises(TransportError):
        stream_chat([{"role": "user", "content": "hi"}], SessionAuth(SESSION), on_update=updates.append)
    assert updates == ["par"]


def test_stop_aborts_the_read(posted):
    posted.response = FakeResponse(chunks=[frame("one"), frame("two"), frame("three")])
    updates = []

    result = stream_chat(
        [{"role": "user", "content": "hi"}],
        SessionAuth(SESSION),
        on_update=updates.append,
        stop=lambda: len(updates) >= 1,
    )

    assert result == "one"
    assert posted.response.read == 2


def test_stream_without_done_is_flushed(posted):
    posted.response = FakeResponse(chunks=[frame("a"), frame("b").rstrip(b"\n")])
    assert stream_chat([{"role": "user", "content": "hi"}], SessionAuth(SESSION)) == "ab"


def test_session_from_token_payload():
    s = session_from_payload({
        "access_token": "t",
        "refresh_token": "r",
        "expires_at": 1000,
        "user": {"id": "abc", "email": "a@b.c"},
    })
    assert s == AuthSession(access_token="t", user_id="abc", email="a@b.c", expires_at=1000.0, refresh_token="r")
    assert s.is_expired(now=1000)
    assert not s.is_expired(now=999)
    assert session_from_payload({"user": {"id": "abc"}}) is None
