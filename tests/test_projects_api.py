"""
API tests for projects, tasks and workers, going through HTTP end to end.
"""

import uuid

import pytest


@pytest.fixture
def ada(register):
    return register("Ada", "Lovelace")


@pytest.fixture
def charles(register):
    return register("Charles", "Babbage")


def create_project(
    client, headers, title="Engine", description="analytical", files=None
):
    response = client.post(
        "/api/project",
        data={"title": title, "description": description},
        files=files,
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["projectId"]


def test_create_project_and_read_it_back(client, ada, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))

    project = client.get(f"/api/project/{project_id}").json()["project"]
    assert project["creator"] == ada["userId"]
    assert project["status"] == "active"
    assert project["tasks"] == []
    assert project["workers"] == []

    user = client.get(f"/api/users/{ada['userId']}").json()["user"]
    assert user["projects"] == [project_id]


def test_create_project_requires_token_and_fields(client, ada, auth_headers):
    response = client.post("/api/project", data={"title": "Engine", "description": "x"})
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication failed, no token provided"}

    response = client.post(
        "/api/project",
        data={"title": "Engine"},
        headers=auth_headers(ada["token"]),
    )
    assert response.status_code == 422


def test_unknown_project_is_404(client):
    response = client.get(f"/api/project/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"message": "Could not find a project with provided id"}
    assert client.get("/api/project/not-a-uuid").status_code == 422


def test_projects_by_user(client, ada, charles, auth_headers):
    first = create_project(client, auth_headers(ada["token"]), title="First")
    second = create_project(client, auth_headers(ada["token"]), title="Second")

    projects = client.get(f"/api/user/{ada['userId']}/projects").json()["projects"]
    assert [p["id"] for p in projects] == [first, second]

    response = client.get(f"/api/user/{charles['userId']}/projects")
    assert response.status_code == 200
    assert response.json() == {"projects": []}

    assert client.get(f"/api/user/{uuid.uuid4()}/projects").status_code == 404


def test_update_project_is_creator_only(client, ada, charles, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))
    payload = {"title": "Difference engine", "description": "v2"}

    response = client.patch(
        f"/api/project/{project_id}", json=payload, headers=auth_headers(charles["token"])
    )
    assert response.status_code == 401

    response = client.patch(
        f"/api/project/{project_id}", json=payload, headers=auth_headers(ada["token"])
    )
    assert response.status_code == 200
    assert response.json()["project"]["title"] == "Difference engine"


def test_task_lifecycle(client, ada, auth_headers):
    headers = auth_headers(ada["token"])
    project_id = create_project(client, headers)

    response = client.post(
        "/api/project/task",
        json={"projectId": project_id, "title": "", "content": "draft", "level": 1},
        headers=headers,
    )
    assert response.status_code == 201
    first = response.json()["task"]
    assert first["title"] == "Nameless"
    assert first["creator"] == ada["userId"]

    response = client.post(
        f"/api/project/{project_id}/task",
        json={"title": "Build", "level": 2},
        headers=headers,
    )
    assert response.status_code == 201
    second = response.json()["task"]

    body = client.get(f"/api/project/{project_id}/tasks").json()
    assert [t["id"] for t in body["tasks"]] == [first["id"], second["id"]]
    assert body["projectCreator"] == ada["userId"]

    response = client.patch(
        f"/api/project/{project_id}/task",
        json={"taskId": first["id"], "title": "Design", "content": "final", "level": 3},
        headers=headers,
    )
    assert response.status_code == 200
    task = client.get(f"/api/project/{project_id}/task/{first['id']}").json()["task"]
    assert (task["title"], task["content"], task["level"]) == ("Design", "final", 3)

    response = client.request(
        "DELETE",
        f"/api/project/{project_id}/task",
        json={"taskId": second["id"]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted"}

    response = client.get(f"/api/project/{project_id}/task/{second['id']}")
    assert response.status_code == 404
    assert response.json() == {"message": "Could not find a task with provided id"}


def test_update_unknown_task(client, ada, auth_headers):
    headers = auth_headers(ada["token"])
    project_id = create_project(client, headers)

    response = client.patch(
        f"/api/project/{project_id}/task",
        json={"taskId": "missing", "title": "Design"},
        headers=headers,
    )

    assert response.status_code == 404
    assert client.get(f"/api/project/{project_id}/tasks").json()["tasks"] == []


def test_tasks_are_member_only(client, ada, charles, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))

    response = client.post(
        f"/api/project/{project_id}/task",
        json={"title": "Sneak in"},
        headers=auth_headers(charles["token"]),
    )
    assert response.status_code == 401

    response = client.post(
        "/api/project/task",
        json={"projectId": project_id, "title": "Sneak in"},
        headers=auth_headers(charles["token"]),
    )
    assert response.status_code == 401


def test_workers_join_and_abort(client, ada, charles, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))

    response = client.post(
        f"/api/project/{project_id}/workers",
        json={"workers": ["Charles Babbage"]},
        headers=auth_headers(ada["token"]),
    )
    assert response.status_code == 201
    assert response.json()["workers"] == [
        {"id": charles["userId"], "name": "Charles", "surname": "Babbage"}
    ]

    worker = client.get(f"/api/users/{charles['userId']}").json()["user"]
    assert worker["projects"] == [project_id]

    # Workers may add tasks once assigned
    response = client.post(
        f"/api/project/{project_id}/task",
        json={"title": "Gears"},
        headers=auth_headers(charles["token"]),
    )
    assert response.status_code == 201

    response = client.patch(
        f"/api/project/{project_id}/abort", headers=auth_headers(charles["token"])
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Project aborted"}

    project = client.get(f"/api/project/{project_id}").json()["project"]
    assert project["workers"] == []
    worker = client.get(f"/api/users/{charles['userId']}").json()["user"]
    assert worker["projects"] == []


def test_add_unknown_worker_changes_nothing(client, ada, charles, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))

    response = client.post(
        f"/api/project/{project_id}/workers",
        json={"workers": ["Charles Babbage", "Nobody Known"]},
        headers=auth_headers(ada["token"]),
    )

    assert response.status_code == 404
    assert client.get(f"/api/project/{project_id}").json()["project"]["workers"] == []
    worker = client.get(f"/api/users/{charles['userId']}").json()["user"]
    assert worker["projects"] == []


def test_add_workers_is_creator_only(client, ada, charles, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))

    response = client.post(
        f"/api/project/{project_id}/workers",
        json={"workers": ["Charles Babbage"]},
        headers=auth_headers(charles["token"]),
    )
    assert response.status_code == 401

    response = client.post(
        f"/api/project/{project_id}/workers",
        json={"workers": []},
        headers=auth_headers(ada["token"]),
    )
    assert response.status_code == 422


def test_creator_cannot_abort(client, ada, auth_headers):
    project_id = create_project(client, auth_headers(ada["token"]))

    response = client.patch(
        f"/api/project/{project_id}/abort", headers=auth_headers(ada["token"])
    )

    assert response.status_code == 422
    user = client.get(f"/api/users/{ada['userId']}").json()["user"]
    assert user["projects"] == [project_id]


def test_delete_project(client, ada, charles, auth_headers, upload_root, png_bytes):
    project_id = create_project(
        client,
        auth_headers(ada["token"]),
        files={"image": ("engine.png", png_bytes, "image/png")},
    )
    client.post(
        f"/api/project/{project_id}/workers",
        json={"workers": ["Charles Babbage"]},
        headers=auth_headers(ada["token"]),
    )
    image = client.get(f"/api/project/{project_id}").json()["project"]["image"]
    assert (upload_root / image).exists()

    response = client.delete(
        f"/api/project/{project_id}", headers=auth_headers(charles["token"])
    )
    assert response.status_code == 401

    response = client.delete(
        f"/api/project/{project_id}", headers=auth_headers(ada["token"])
    )
    assert response.status_code == 200
    assert response.json() == {"message": "Project deleted"}

    assert client.get(f"/api/project/{project_id}").status_code == 404
    assert not (upload_root / image).exists()
    for user_id in (ada["userId"], charles["userId"]):
        user = client.get(f"/api/users/{user_id}").json()["user"]
        assert user["projects"] == []

    response = client.delete(
        f"/api/project/{project_id}", headers=auth_headers(ada["token"])
    )
    assert response.status_code == 404


def test_uploaded_image_is_served(client, ada, auth_headers, png_bytes):
    project_id = create_project(
        client,
        auth_headers(ada["token"]),
        files={"image": ("engine.png", png_bytes, "image/png")},
    )
    image = client.get(f"/api/project/{project_id}").json()["project"]["image"]

    response = client.get(f"/uploads/{image}")

    assert response.status_code == 200
    assert response.content == png_bytes
