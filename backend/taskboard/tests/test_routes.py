import pytest

from taskboard.core.errors import ConnectivityError
from taskboard.routes.crud import route_table

ENTITY_PATHS = ["/api/users", "/api/tasks", "/api/statuses", "/api/user-tasks"]


def create_status(client, label="aberta"):
    response = client.post("/api/statuses", json={"label": label})
    assert response.status_code == 201
    return response.json()


def create_task(client, title="Estudar Python"):
    status = create_status(client)
    response = client.post(
        "/api/tasks",
        json={"title": title, "description": "Estudar FastAPI e SQLAlchemy", "status_id": status["id"]},
    )
    assert response.status_code == 201
    return response.json()


def create_user(client, name="Ann", email="a@x.com"):
    response = client.post("/api/users", json={"name": name, "email": email, "active": True})
    assert response.status_code == 201
    return response.json()


def test_route_table_covers_every_entity_operation(client):
    table = {(method, path) for method, path, _ in route_table(client.app)}
    expected = set()
    for path in ENTITY_PATHS:
        expected |= {
            ("GET", path),
            ("POST", path),
            ("GET", f"{path}/{{item_id}}"),
            ("PUT", f"{path}/{{item_id}}"),
            ("DELETE", f"{path}/{{item_id}}"),
        }
    assert len(expected) == 20
    assert expected <= table


def test_user_lifecycle(client):
    created = client.post("/api/users", json={"name": "Ann", "email": "a@x.com", "active": True})
    assert created.status_code == 201
    assert created.json() == {"id": 1, "name": "Ann", "email": "a@x.com", "active": True}

    fetched = client.get("/api/users/1")
    assert fetched.status_code == 200
    assert fetched.json() == created.json()

    deleted = client.delete("/api/users/1")
    assert deleted.status_code == 200
    assert deleted.json() == {"deleted": 1}

    missing = client.get("/api/users/1")
    assert missing.status_code == 404
    assert missing.content == b""


def test_list_returns_every_row(client):
    create_user(client, "Ann", "a@x.com")
    create_user(client, "Bob", "b@x.com")

    response = client.get("/api/users")

    assert response.status_code == 200
    assert [row["name"] for row in response.json()] == ["Ann", "Bob"]


def test_update_replaces_task(client):
    task = create_task(client)
    done = create_status(client, "concluida")

    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Estudar pytest", "status_id": done["id"]},
    )

    assert response.status_code == 200
    assert response.json() == {
        "id": task["id"],
        "title": "Estudar pytest",
        "description": None,
        "status_id": done["id"],
    }


def test_update_missing_is_not_found(client):
    response = client.put("/api/statuses/77", json={"label": "x"})
    assert response.status_code == 404
    assert response.content == b""


def test_delete_missing_is_not_found_and_repeatable(client):
    assert client.delete("/api/tasks/77").status_code == 404
    assert client.delete("/api/tasks/77").status_code == 404


def test_non_integer_id_is_bad_request(client):
    response = client.get("/api/users/abc")
    assert response.status_code == 400
    assert response.json()["detail"]


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Ann", "email": "a@x.com"},
        {"name": "Ann", "email": "a@x.com", "active": "talvez"},
        {"name": "Ann", "email": "a@x.com", "active": True, "role": "admin"},
        {"name": "Ann", "email": "a@x.com", "active": "yes"},
        {"name": "Ann", "email": "a@x.com", "active": 1},
        {"name": 7, "email": "a@x.com", "active": True},
    ],
)
def test_malformed_body_is_rejected_before_touching_pool(client, pool, monkeypatch, payload):
    def fail_acquire():
        raise AssertionError("pool should not be used")

    monkeypatch.setattr(pool, "acquire", fail_acquire)

    response = client.post("/api/users", json=payload)

    assert response.status_code == 400


def test_task_with_unknown_status_conflicts(client):
    response = client.post("/api/tasks", json={"title": "Orfa", "status_id": 999})

    assert response.status_code == 409
    assert response.json()["detail"]
    assert client.get("/api/tasks").json() == []


def test_assignment_keeps_user_and_task_alive(client):
    user = create_user(client)
    task = create_task(client)
    assignment = client.post("/api/user-tasks", json={"user_id": user["id"], "task_id": task["id"]})
    assert assignment.status_code == 201

    assert client.delete(f"/api/users/{user['id']}").status_code == 409
    assert client.delete(f"/api/tasks/{task['id']}").status_code == 409

    assert client.delete(f"/api/user-tasks/{assignment.json()['id']}").json() == {"deleted": 1}
    assert client.delete(f"/api/users/{user['id']}").status_code == 200


def test_exhausted_pool_returns_service_unavailable(client, pool):
    held = [pool.acquire() for _ in range(pool.max_connections)]
    try:
        response = client.get("/api/users")
    finally:
        for conn in held:
            pool.release(conn)

    assert response.status_code == 503
    assert response.headers["retry-after"] == "1"
    assert client.get("/api/users").status_code == 200


def test_connectivity_failure_returns_service_unavailable(client, pool, monkeypatch):
    def unreachable():
        raise ConnectivityError("Banco de dados indisponível")

    monkeypatch.setattr(pool, "acquire", unreachable)

    response = client.get("/api/statuses/1")

    assert response.status_code == 503
    assert response.json() == {"detail": "Banco de dados indisponível"}


def test_connections_return_to_pool_after_mixed_requests(client, pool):
    user = create_user(client)
    client.get(f"/api/users/{user['id']}")
    client.get("/api/users/404")
    client.post("/api/users", json={"name": "Dup", "email": "a@x.com", "active": True})
    client.post("/api/tasks", json={"title": "Orfa", "status_id": 999})
    client.put("/api/users/404", json={"name": "X", "email": "x@x.com", "active": False})
    client.delete("/api/users/404")
    client.get("/api/users/abc")

    snapshot = pool.status()
    assert snapshot["checked_out"] == 0
    assert snapshot["checked_in"] <= pool.max_connections


def test_oversized_body_is_rejected(client):
    response = client.post("/api/statuses", json={"label": "x" * 5000})
    assert response.status_code == 413


def test_health_db_reports_pool(client):
    response = client.get("/health/db")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["pool"]["size"] == 3
    assert payload["pool"]["checked_out"] == 0


@pytest.mark.parametrize("payload", [{"title": "t", "status_id": "1"}, {"title": "t", "status_id": 2**70}])
def test_task_status_id_must_be_a_stored_integer(client, pool, monkeypatch, payload):
    def fail_acquire():
        raise AssertionError("pool should not be used")

    monkeypatch.setattr(pool, "acquire", fail_acquire)

    response = client.post("/api/tasks", json=payload)

    assert response.status_code == 400


@pytest.mark.parametrize("method", ["get", "delete"])
def test_out_of_range_id_is_bad_request(client, method):
    response = getattr(client, method)(f"/api/users/{2**70}")
    assert response.status_code == 400


def test_out_of_range_ids_in_update_are_bad_request(client):
    assert client.put(f"/api/statuses/{2**70}", json={"label": "x"}).status_code == 400
    response = client.post("/api/user-tasks", json={"user_id": 1, "task_id": -(2**70)})
    assert response.status_code == 400
