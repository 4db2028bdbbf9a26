import json
import os
import time

# settings are read at import time, so they go in before studybuddy is imported
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LLM_GATEWAY_API_KEY", "test-gateway-key")
os.environ.setdefault("LLM_GATEWAY_URL", "https://gateway.test/v1/chat/completions")
os.environ.setdefault("AUTH_URL", "https://auth.test")
os.environ.setdefault("AUTH_SERVICE_ROLE_KEY", "test-service-role")
os.environ.setdefault("APP_URL", "https://app.test")

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from studybuddy import config
from studybuddy.database.mongodb import get_db
from studybuddy.main import app
from studybuddy.services.identity_service import get_identity_transport
from studybuddy.services.relay_service import get_gateway_transport


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered as the given reads, unbuffered."""

    def __init__(self, chunks):
        self.chunks = list(chunks)

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk


def sse(*frames):
    """Encode completion deltas (or raw payload strings) as SSE lines."""
    out = []
    for f in frames:
        if isinstance(f, str) and f.startswith("["):
            out.append(f"data: {f}\n\n")
        else:
            out.append("data: " + json.dumps(f, ensure_ascii=False) + "\n\n")
    return "".join(out).encode("utf-8")


def delta(text):
    return {"choices": [{"delta": {"content": text}}]}


def make_token(sub="user-1", email="student@example.com", **claims):
    payload = {
        "sub": sub,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + 3600,
    }
    payload.update(claims)
    return jwt.encode(payload, config.JWT_SECRET, algorithm="HS256")


def bearer(**kw):
    return {"Authorization": f"Bearer {make_token(**kw)}"}


@pytest.fixture
def db():
    database = mongomock.MongoClient()["studybuddy-test"]
    app.dependency_overrides[get_db] = lambda: database
    yield database
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def gateway():
    """
    Stand-in for the completion gateway. Set ``gateway.reply`` to a
    ``httpx.Response`` (or a callable taking the request); every request
    the relay sends is kept in ``gateway.requests``.
    """
    class Gateway:
        reply = None
        requests = []

        def handler(self, request):
            self.requests.append(request)
            if callable(self.reply):
                return self.reply(request)
            return self.reply

    gw = Gateway()
    gw.requests = []
    app.dependency_overrides[get_gateway_transport] = lambda: httpx.MockTransport(gw.handler)
    yield gw
    app.dependency_overrides.pop(get_gateway_transport, None)


@pytest.fixture
def identity():
    """Stand-in for the identity provider admin API; answers 200 unless told otherwise."""
    class Identity:
        status_code = 200
        requests = []

        def handler(self, request):
            self.requests.append(request)
            return httpx.Response(self.status_code, json={})

    idp = Identity()
    idp.requests = []
    app.dependency_overrides[get_identity_transport] = lambda: httpx.MockTransport(idp.handler)
    yield idp
    app.dependency_overrides.pop(get_identity_transport, None)


@pytest.fixture
def client():
    # no context manager: the lifespan would try to reach MongoDB
    return TestClient(app)


@pytest.fixture
def app_client():
    """Client that returns the app's own 500 response instead of re-raising the server error."""
    return TestClient(app, raise_server_exceptions=False)
