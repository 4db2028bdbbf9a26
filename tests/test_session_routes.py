from datetime import datetime, timedelta, timezone

from conftest import bearer
from studybuddy.services.session_service import title_from_message


def _new_session(client, **kw):
    resp = client.post("/sessions", headers=bearer(**kw))
    assert resp.status_code == 201
    return resp.json()


def test_title_from_message():
    assert title_from_message("short") == "short"
    assert title_from_message("x" * 50) == "x" * 50
    assert title_from_message("x" * 51) == "x" * 50 + "..."


def test_sessions_require_auth(client, db):
    assert client.get("/sessions").status_code == 401
    assert client.post("/sessions").json() == {"error": "Authentication required"}


def test_create_and_list_sessions(client, db):
    first = _new_session(client)
    assert first["title"] == "New Chat"

    second = _new_session(client)
    older = datetime.now(timezone.utc) - timedelta(minutes=5)
    db.chat_sessions.update_many({}, {"$set": {"updated_at": older}})
    client.post(f"/sessions/{first['id']}/messages", json={"role": "user", "content": "bump"}, headers=bearer())

    sessions = client.get("/sessions", headers=bearer()).json()["sessions"]
    assert [s["id"] for s in sessions] == [first["id"], second["id"]]


def test_sessions_are_scoped_to_their_owner(client, db):
    mine = _new_session(client, sub="alice")

    assert client.get("/sessions", headers=bearer(sub="bob")).json() == {"sessions": []}
    resp = client.get(f"/sessions/{mine['id']}/messages", headers=bearer(sub="bob"))
    assert resp.status_code == 404
    assert resp.json() == {"error": "Chat session not found"}
    assert client.delete(f"/sessions/{mine['id']}", headers=bearer(sub="bob")).status_code == 404


def test_first_user_message_sets_title(client, db):
    s = _new_session(client)
    long_question = "Can you walk me through the proof of the Pythagorean theorem step by step?"

    resp = client.post(f"/sessions/{s['id']}/messages",
                       json={"role": "user", "content": long_question}, headers=bearer())
    assert resp.status_code == 201
    client.post(f"/sessions/{s['id']}/messages",
                json={"role": "user", "content": "and another one"}, headers=bearer())

    (listed,) = client.get("/sessions", headers=bearer()).json()["sessions"]
    assert listed["title"] == long_question[:50] + "..."


def test_messages_come_back_oldest_first(client, db):
    s = _new_session(client)
    for role, content in [("user", "q1"), ("assistant", "a1"), ("user", "q2")]:
        client.post(f"/sessions/{s['id']}/messages", json={"role": role, "content": content}, headers=bearer())

    msgs = client.get(f"/sessions/{s['id']}/messages", headers=bearer()).json()["messages"]
    assert [(m["role"], m["content"]) for m in msgs] == [("user", "q1"), ("assistant", "a1"), ("user", "q2")]
    assert all(m["session_id"] == s["id"] for m in msgs)


def test_saved_message_is_validated(client, db):
    s = _new_session(client)
    resp = client.post(f"/sessions/{s['id']}/messages", json={"role": "system", "content": "x"}, headers=bearer())
    assert resp.status_code == 400
    assert resp.json() == {"error": "Message 1 has invalid role. Must be 'user' or 'assistant'"}

    resp = client.post(f"/sessions/{s['id']}/messages", json={"role": "user", "content": "   "}, headers=bearer())
    assert resp.json() == {"error": "Message 1 content cannot be empty"}


def test_delete_cascades_to_messages(client, db):
    s = _new_session(client)
    client.post(f"/sessions/{s['id']}/messages", json={"role": "user", "content": "q"}, headers=bearer())
    client.post(f"/sessions/{s['id']}/messages", json={"role": "assistant", "content": "a"}, headers=bearer())

    resp = client.delete(f"/sessions/{s['id']}", headers=bearer())
    assert resp.status_code == 200
    assert resp.json() == {"deleted": 1, "deleted_messages": 2}
    assert db.chat_messages.count_documents({}) == 0
    assert client.get("/sessions", headers=bearer()).json() == {"sessions": []}


def test_invalid_session_id(client, db):
    resp = client.get("/sessions/not-an-id/messages", headers=bearer())
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid session id"}


def test_unexpected_failure_is_a_json_500(app_client, monkeypatch):
    from studybuddy.database import mongodb

    # no database configured and no override: get_db raises RuntimeError
    monkeypatch.setattr(mongodb.config, "MONGO_URI", None)
    monkeypatch.setattr(mongodb, "_client", None)

    resp = app_client.get("/sessions", headers=bearer())

    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"error": "An unexpected error occurred"}
