# tests/test_chat.py


def signup(client, username, email):
    r = client.post(
        "/api/auth/signup",
        json={"username": username, "email": email, "password": "secret1", "confirmPassword": "secret1"},
    )
    return r.json()["user"]


def new_chat(client, name="Team", **extra):
    return client.post("/api/chats", json={"name": name, **extra})


def test_create_chat_adds_creator_as_admin(client, logged_in):
    r = new_chat(client)
    assert r.status_code == 201
    chat = r.json()
    assert chat["createdBy"] == logged_in["id"]
    assert chat["type"] == "group"
    assert chat["isMainChat"] is False

    members = client.get(f"/api/chats/{chat['id']}/members").json()
    assert len(members) == 1
    assert members[0]["userId"] == logged_in["id"]
    assert members[0]["role"] == "admin"


def test_create_chat_without_session_uses_body_creator(client, storage):
    user = signup(client, "creator", "c@test.com")
    client.post("/api/auth/logout")

    r = new_chat(client, createdBy=user["id"])
    assert r.status_code == 201
    assert r.json()["createdBy"] == user["id"]


def test_create_chat_without_anyone(client):
    assert new_chat(client).status_code == 401


def test_list_chats(client, logged_in):
    team = new_chat(client, "Team").json()
    art = new_chat(client, "Art").json()

    assert [c["id"] for c in client.get("/api/chats").json()] == [art["id"], team["id"]]
    mine = client.get("/api/chats", params={"createdBy": logged_in["id"]}).json()
    assert len(mine) == 2
    assert client.get("/api/chats", params={"createdBy": "nobody"}).json() == []

    joined = client.get(f"/api/users/{logged_in['id']}/chats").json()
    assert {c["id"] for c in joined} == {team["id"], art["id"]}

    assert client.get("/api/chats/missing").status_code == 404


def test_patch_chat(client, logged_in, storage):
    chat = new_chat(client).json()

    r = client.patch(f"/api/chats/{chat['id']}", json={"name": "Core Team", "isMainChat": True})
    assert r.status_code == 200
    assert r.json()["name"] == "Core Team"
    assert r.json()["isMainChat"] is True

    r = client.patch(f"/api/chats/{chat['id']}", json={"createdBy": "someone"})
    assert r.status_code == 400
    assert storage.get_chat(chat["id"]).created_by == logged_in["id"]

    assert client.patch("/api/chats/missing", json={"name": "x"}).status_code == 404


def test_adding_member_twice_keeps_one_row(client, logged_in):
    chat = new_chat(client).json()
    other = signup(client, "artist", "a@test.com")

    first = client.post(f"/api/chats/{chat['id']}/members", json={"userId": other["id"]})
    second = client.post(f"/api/chats/{chat['id']}/members", json={"userId": other["id"]})
    assert first.status_code == 201
    assert second.json()["id"] == first.json()["id"]

    members = client.get(f"/api/chats/{chat['id']}/members").json()
    assert sorted(m["userId"] for m in members) == sorted([logged_in["id"], other["id"]])


def test_member_references(client, logged_in):
    chat = new_chat(client).json()
    r = client.post(f"/api/chats/{chat['id']}/members", json={"userId": "ghost"})
    assert r.status_code == 400
    assert client.post("/api/chats/missing/members", json={"userId": logged_in["id"]}).status_code == 404


def test_remove_member(client, logged_in):
    chat = new_chat(client).json()
    r = client.delete(f"/api/chats/{chat['id']}/members/{logged_in['id']}")
    assert r.status_code == 200
    assert client.delete(f"/api/chats/{chat['id']}/members/{logged_in['id']}").status_code == 404
    assert client.get(f"/api/chats/{chat['id']}/members").json() == []


def test_messages_flow(client, logged_in):
    chat = new_chat(client).json()

    first = client.post(f"/api/chats/{chat['id']}/messages", json={"content": "hello"}).json()
    assert first["userId"] == logged_in["id"]
    assert first["editedAt"] is None

    reply = client.post(
        f"/api/chats/{chat['id']}/messages",
        json={"content": "hi!", "replyToId": first["id"]},
    ).json()

    listed = client.get(f"/api/chats/{chat['id']}/messages").json()
    assert [m["id"] for m in listed] == [reply["id"], first["id"]]
    assert [m["id"] for m in client.get(f"/api/chats/{chat['id']}/messages", params={"limit": 1, "offset": 1}).json()] == [first["id"]]

    r = client.patch(f"/api/messages/{first['id']}", json={"content": "hello, team"})
    assert r.status_code == 200
    assert r.json()["content"] == "hello, team"
    assert r.json()["editedAt"] is not None

    assert client.delete(f"/api/messages/{first['id']}").status_code == 200
    assert client.delete(f"/api/messages/{first['id']}").status_code == 404
    assert client.patch("/api/messages/missing", json={"content": "x"}).status_code == 404


def test_message_validation(client, logged_in):
    chat = new_chat(client).json()
    assert client.post(f"/api/chats/{chat['id']}/messages", json={"content": ""}).status_code == 400
    assert client.get(f"/api/chats/{chat['id']}/messages", params={"limit": 0}).status_code == 400
    assert client.post("/api/chats/missing/messages", json={"content": "x"}).status_code == 404


def test_message_without_sender(client, logged_in):
    chat = new_chat(client).json()
    client.post("/api/auth/logout")
    r = client.post(f"/api/chats/{chat['id']}/messages", json={"content": "anyone?"})
    assert r.status_code == 401


def test_delete_chat_cascades(client, logged_in, storage):
    chat = new_chat(client).json()
    other = signup(client, "tester", "t@test.com")
    client.post(f"/api/chats/{chat['id']}/members", json={"userId": other["id"]})
    for text in ("one", "two", "three"):
        client.post(f"/api/chats/{chat['id']}/messages", json={"content": text})

    r = client.delete(f"/api/chats/{chat['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Chat deleted successfully"

    assert not [m for m in storage.messages.values() if m.chat_id == chat["id"]]
    assert not [m for m in storage.chat_members.values() if m.chat_id == chat["id"]]
    assert client.delete(f"/api/chats/{chat['id']}").status_code == 404
