from unittest.mock import Mock

from src.infrastructure.api.dependencies import get_auth_adapter
from src.infrastructure.database.repositories.profile_repository import ProfileRepository


def signup(client, email, nickname, password="pw-123"):
    return client.post("/auth/signup", json={"email": email, "password": password, "nickname": nickname})


def signin(client, email, password="pw-123"):
    r = client.post("/auth/signin", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()


def headers(token):
    return {"Authorization": f"Bearer {token}"}


def make_admin(user_id):
    ProfileRepository(None).update_flags(user_id, is_admin=True)


def test_root_and_health(client):
    assert client.get("/").json()["service"] == "lfgboard-backend"
    assert client.get("/health").json() == {"status": "healthy"}


def test_signup_conflict_and_validation(client):
    r = signup(client, "a@x.com", "alice")
    assert r.status_code == 201, r.text
    assert r.json()["confirmation_required"] is False

    r = signup(client, "b@x.com", "alice")
    assert r.status_code == 409
    assert r.json()["kind"] == "conflict"

    r = signup(client, "c@x.com", "  ")
    assert r.status_code == 400
    assert r.json()["kind"] == "validation"

    # no identity was created for the conflicting signup
    r = client.post("/auth/signin", json={"email": "b@x.com", "password": "pw-123"})
    assert r.status_code == 401


def test_session_state_and_nickname_update(client):
    assert client.get("/auth/session").json()["show_login"] is True

    signup(client, "a@x.com", "alice")
    data = signin(client, "a@x.com")
    token = data["access_token"]
    assert data["session"]["welcome_label"] == "Welcome, alice"
    assert data["session"]["show_admin_link"] is False

    r = client.patch("/auth/profile", headers=headers(token), json={"nickname": "alice2"})
    assert r.status_code == 200
    assert r.json()["nickname"] == "alice2"
    assert client.get("/auth/session", headers=headers(token)).json()["nickname"] == "alice2"

    r = client.post("/auth/signout", headers=headers(token))
    assert r.json()["signed_in"] is False
    assert client.get("/auth/session", headers=headers(token)).json()["signed_in"] is False


def test_posts_flow(client):
    r = client.post("/posts", json={"title": "t", "content": "c"})
    assert r.status_code == 401
    assert r.json()["kind"] == "auth"

    signup(client, "a@x.com", "alice")
    token = signin(client, "a@x.com")["access_token"]

    r = client.post("/posts", headers=headers(token), json={"title": " ", "content": "c"})
    assert r.status_code == 400

    r = client.post(
        "/posts",
        headers=headers(token),
        json={"title": "Raid tonight", "content": "Need a healer", "game_types": "MMO"},
    )
    assert r.status_code == 201, r.text
    post_id = r.json()["id"]
    assert r.json()["author"] == "alice"

    listed = client.get("/posts").json()["posts"]
    assert [p["id"] for p in listed] == [post_id]
    assert listed[0]["author"] == "alice"

    html = client.get("/views/posts").text
    assert "Raid tonight" in html

    assert client.delete(f"/posts/{post_id}", headers=headers(token)).json() == {"ok": True}
    assert client.get("/posts").json()["posts"] == []


def test_messages_flow(client):
    signup(client, "a@x.com", "alice")
    signup(client, "b@x.com", "bob")
    alice = signin(client, "a@x.com")["access_token"]
    bob = signin(client, "b@x.com")["access_token"]

    r = client.post("/messages", headers=headers(alice), json={"to_nickname": "nobody", "content": "hi"})
    assert r.status_code == 404

    r = client.post("/messages", headers=headers(alice), json={"to_nickname": "bob", "content": "hi bob"})
    assert r.status_code == 201, r.text

    inbox = client.get("/messages", headers=headers(bob)).json()
    assert inbox["signed_in"] is True
    assert inbox["messages"][0]["sender_name"] == "alice"
    assert inbox["messages"][0]["content"] == "hi bob"

    assert client.get("/messages").json() == {"signed_in": False, "messages": []}
    assert "Sign in to see your messages." in client.get("/views/inbox").text


def test_directory_search(client):
    signup(client, "a@x.com", "DragonSlayer")

    assert client.get("/directory/search").json() == {"prompt": True, "results": []}
    results = client.get("/directory/search", params={"q": "slay"}).json()["results"]
    assert [r["nickname"] for r in results] == ["DragonSlayer"]
    assert "DragonSlayer" in client.get("/views/search", params={"q": "dragon"}).text


def test_moderation_flow(client):
    signup(client, "root@x.com", "root")
    signup(client, "b@x.com", "bob")
    root = signin(client, "root@x.com")
    bob = signin(client, "b@x.com")
    root_token, bob_token = root["access_token"], bob["access_token"]

    # not an admin yet
    assert client.get("/admin/check", headers=headers(root_token)).json() == {"is_admin": False}
    r = client.get("/admin/users", headers=headers(root_token))
    assert r.status_code == 403
    assert "Permission denied." in client.get("/views/admin/users", headers=headers(root_token)).text

    make_admin(root["session"]["user_id"])
    assert client.get("/auth/session", headers=headers(root_token)).json()["show_admin_link"] is True

    users = client.get("/admin/users", headers=headers(root_token)).json()["users"]
    assert {u["nickname"] for u in users} == {"root", "bob"}

    bob_id = bob["session"]["user_id"]
    r = client.post(f"/admin/users/{bob_id}/ban", headers=headers(root_token))
    assert r.json() == {"user_id": bob_id, "banned": True}

    # bob is expelled on his next refresh and cannot post
    r = client.post("/posts", headers=headers(bob_token), json={"title": "t", "content": "c"})
    assert r.status_code == 403
    state = client.get("/auth/session", headers=headers(bob_token)).json()
    assert state["signed_in"] is False
    assert state["notice"] == "Your account has been blocked."
    assert state["redirect_to"] == "/"

    # banned users cannot sign back in with a usable token
    assert signin(client, "b@x.com")["access_token"] is None

    r = client.post(f"/admin/users/{bob_id}/ban", headers=headers(root_token))
    assert r.json()["banned"] is False

    r = client.delete(f"/admin/users/{bob_id}", headers=headers(root_token))
    assert r.json() == {"ok": True}
    assert client.get("/directory/search", params={"q": "bob"}).json()["results"] == []


def test_gateway_outage_is_store_error_not_signed_out(client):
    gateway = Mock()
    gateway.get_session.side_effect = RuntimeError("Auth session lookup failed: 503")
    client.app.dependency_overrides[get_auth_adapter] = lambda: gateway
    try:
        r = client.post("/posts", headers=headers("some-token"), json={"title": "t", "content": "c"})
        assert r.status_code == 502
        assert r.json()["kind"] == "store_error"

        r = client.get("/auth/session", headers=headers("some-token"))
        assert r.status_code == 502
        assert r.json()["kind"] == "store_error"

        r = client.get("/messages", headers=headers("some-token"))
        assert r.status_code == 502

        # no token means no lookup, so the public state still renders
        r = client.get("/auth/session")
        assert r.status_code == 200
        assert r.json()["show_login"] is True
    finally:
        client.app.dependency_overrides.clear()
