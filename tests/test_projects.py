# tests/test_projects.py


def new_project(client, **overrides):
    body = {
        "name": "Neon Drift",
        "description": "Arcade racer",
        "engine": "unity",
        "platform": "pc",
    }
    body.update(overrides)
    return client.post("/api/projects", json=body)


def test_create_project_defaults_owner_to_session_user(client, logged_in):
    r = new_project(client)
    assert r.status_code == 201
    body = r.json()
    assert body["ownerId"] == logged_in["id"]
    assert body["status"] == "not-started"
    assert body["icon"] == "🎮"
    assert body["teamMembers"] == []


def test_create_project_without_owner_or_session(client):
    r = new_project(client)
    assert r.status_code == 401


def test_create_project_unknown_owner(client):
    r = new_project(client, ownerId="ghost")
    assert r.status_code == 400
    assert r.json()["errors"] == [{"field": "ownerId", "message": "Owner does not exist"}]


def test_create_project_validation(client, logged_in):
    r = new_project(client, engine="gamemaker", screenshots=["not a url"])
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert "engine" in fields
    assert any(f.startswith("screenshots") for f in fields)


def test_create_project_feature_length(client, logged_in):
    r = new_project(client, features=["x" * 201])
    assert r.status_code == 400
    assert "features" in {e["field"] for e in r.json()["errors"]}

    r = new_project(client, features=[""])
    assert r.status_code == 400

    r = new_project(client, features=["x" * 200])
    assert r.status_code == 201
    assert r.json()["features"] == ["x" * 200]


def test_list_and_get_projects(client, logged_in):
    first = new_project(client, name="First").json()
    second = new_project(client, name="Second").json()

    listed = client.get("/api/projects").json()
    assert [p["id"] for p in listed] == [second["id"], first["id"]]

    mine = client.get(f"/api/projects/user/{logged_in['id']}").json()
    assert len(mine) == 2

    assert client.get(f"/api/projects/{first['id']}").json()["name"] == "First"
    r = client.get("/api/projects/missing")
    assert r.status_code == 404
    assert r.json()["message"] == "Project not found"


def test_patch_project_bumps_last_updated(client, logged_in):
    created = new_project(client).json()

    r = client.patch(
        f"/api/projects/{created['id']}",
        json={"status": "in-progress", "features": ["Drift physics"]},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "in-progress"
    assert body["features"] == ["Drift physics"]
    assert body["lastUpdated"] >= created["lastUpdated"]
    assert body["createdAt"] == created["createdAt"]


def test_patch_project_rejects_owner_change(client, logged_in, storage):
    created = new_project(client).json()
    r = client.patch(f"/api/projects/{created['id']}", json={"ownerId": "someone-else"})
    assert r.status_code == 400
    assert storage.get_project(created["id"]).owner_id == logged_in["id"]


def test_patch_project_empty_and_missing(client, logged_in):
    created = new_project(client).json()
    assert client.patch(f"/api/projects/{created['id']}", json={}).status_code == 400
    assert client.patch("/api/projects/missing", json={"name": "x"}).status_code == 404


def test_delete_project_by_non_owner_is_forbidden(client, storage):
    client.post(
        "/api/auth/signup",
        json={"username": "owner", "email": "o@test.com", "password": "secret1", "confirmPassword": "secret1"},
    )
    project = new_project(client).json()
    client.post("/api/auth/logout")
    client.post(
        "/api/auth/signup",
        json={"username": "intruder", "email": "i@test.com", "password": "secret1", "confirmPassword": "secret1"},
    )

    r = client.delete(f"/api/projects/{project['id']}")
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to delete this project"
    assert storage.get_project(project["id"]) is not None


def test_delete_project(client, logged_in):
    project = new_project(client).json()

    r = client.delete(f"/api/projects/{project['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Project deleted successfully"
    assert client.delete(f"/api/projects/{project['id']}").status_code == 404


def test_delete_project_requires_session(client):
    assert client.delete("/api/projects/proj-1").status_code == 401


def test_metrics_upsert_and_read(client, logged_in):
    uid = logged_in["id"]
    assert client.get(f"/api/metrics/{uid}").status_code == 404

    r = client.patch(f"/api/metrics/{uid}", json={"activeProjects": 3, "revenue": 125000})
    assert r.status_code == 200
    assert r.json()["activeProjects"] == 3
    assert r.json()["teamMembers"] == 0

    r = client.get(f"/api/metrics/{uid}")
    assert r.status_code == 200
    assert r.json()["revenue"] == 125000


def test_metrics_patch_is_self_only(client, logged_in):
    r = client.patch("/api/metrics/user-2", json={"revenue": 1})
    assert r.status_code == 403
