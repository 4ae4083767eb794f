"""HTTP tests for the /api/v1/tasks endpoints."""

from datetime import datetime

from fastapi.testclient import TestClient

from task_tracker_api.app.core.security import create_access_token

BASE = "/api/v1/tasks"


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _create(client: TestClient, headers, payload) -> dict:
    response = client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# create / read
# ---------------------------------------------------------------------------

def test_create_returns_201_with_caller_as_owner(client, alice, task_payload) -> None:
    """POST /tasks stores the task for the caller and echoes it back."""
    response = client.post(BASE, json=task_payload, headers=alice)
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Write report"
    assert data["description"] == "Q3 summary"
    assert data["due_date"] == "2024-08-01"
    assert data["status"] == "NOT_STARTED"
    assert isinstance(data["id"], int)
    assert isinstance(data["user_id"], int)
    assert data["created_at"] and data["updated_at"]


def test_create_ignores_client_supplied_owner(client, alice, bob, task_payload) -> None:
    bob_task = _create(client, bob, task_payload)
    response = client.post(
        BASE,
        json={**task_payload, "user_id": bob_task["user_id"], "id": 999},
        headers=alice,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] != bob_task["user_id"]
    assert data["id"] != 999


def test_read_returns_created_task(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.get(f"{BASE}/{created['id']}", headers=alice)
    assert response.status_code == 200
    assert response.json() == created


def test_other_user_gets_404_on_read(client, alice, bob, task_payload) -> None:
    """A task owned by someone else is reported exactly like a missing one."""
    created = _create(client, alice, task_payload)
    foreign = client.get(f"{BASE}/{created['id']}", headers=bob)
    missing = client.get(f"{BASE}/{created['id'] + 100}", headers=bob)
    assert foreign.status_code == 404
    assert missing.status_code == 404
    assert foreign.json() == missing.json()
    assert foreign.json()["error"] == "TASK_NOT_FOUND"


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------

def test_list_is_empty_for_new_user(client, alice) -> None:
    response = client.get(BASE, headers=alice)
    assert response.status_code == 200
    assert response.json() == []


def test_list_returns_only_own_tasks(client, alice, bob, task_payload) -> None:
    first = _create(client, alice, task_payload)
    second = _create(client, alice, {**task_payload, "title": "Second"})
    _create(client, bob, {**task_payload, "title": "Bob's"})

    response = client.get(BASE, headers=alice)
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [first["id"], second["id"]]


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------

def test_update_replaces_business_fields(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    new_values = {
        "title": "Write final report",
        "description": "Q3 summary, reviewed",
        "due_date": "2024-09-15",
        "status": "IN_PROGRESS",
    }
    response = client.put(f"{BASE}/{created['id']}", json=new_values, headers=alice)
    assert response.status_code == 200
    updated = response.json()
    for field, value in new_values.items():
        assert updated[field] == value
    assert updated["id"] == created["id"]
    assert updated["user_id"] == created["user_id"]
    assert updated["created_at"] == created["created_at"]
    assert _ts(updated["updated_at"]) > _ts(created["updated_at"])

    assert client.get(f"{BASE}/{created['id']}", headers=alice).json() == updated


def test_update_allows_any_status_change(client, alice, task_payload) -> None:
    created = _create(client, alice, {**task_payload, "status": "DONE"})
    response = client.put(
        f"{BASE}/{created['id']}",
        json={**task_payload, "status": "NOT_STARTED"},
        headers=alice,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "NOT_STARTED"


def test_update_ignores_system_fields_in_body(client, alice, bob, task_payload) -> None:
    created = _create(client, alice, task_payload)
    bob_task = _create(client, bob, task_payload)
    response = client.put(
        f"{BASE}/{created['id']}",
        json={
            **task_payload,
            "user_id": bob_task["user_id"],
            "created_at": "2000-01-01T00:00:00",
            "colour": "red",
        },
        headers=alice,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == created["user_id"]
    assert data["created_at"] == created["created_at"]
    assert "colour" not in data
    assert client.get(f"{BASE}/{created['id']}", headers=alice).status_code == 200


def test_update_by_other_user_is_404_and_leaves_task_untouched(client, alice, bob, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.put(
        f"{BASE}/{created['id']}",
        json={**task_payload, "title": "Hijacked"},
        headers=bob,
    )
    assert response.status_code == 404
    assert client.get(f"{BASE}/{created['id']}", headers=alice).json()["title"] == "Write report"


def test_update_missing_task_is_404_even_with_invalid_body(client, alice) -> None:
    response = client.put(f"{BASE}/12345", json={"title": ""}, headers=alice)
    assert response.status_code == 404


def test_update_missing_task_without_body_is_404(client, alice) -> None:
    response = client.put(f"{BASE}/12345", headers=alice)
    assert response.status_code == 404
    assert response.json()["error"] == "TASK_NOT_FOUND"


def test_update_missing_task_with_array_body_is_404(client, alice) -> None:
    response = client.put(f"{BASE}/12345", json=[1], headers=alice)
    assert response.status_code == 404


def test_update_existing_task_with_array_body_is_422(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.put(f"{BASE}/{created['id']}", json=[1], headers=alice)
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert "body" in response.json()["errors"]


def test_update_existing_task_without_body_is_422(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.put(f"{BASE}/{created['id']}", headers=alice)
    assert response.status_code == 422


def test_update_with_invalid_body_is_422_and_keeps_values(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.put(
        f"{BASE}/{created['id']}",
        json={**task_payload, "status": "INVALID"},
        headers=alice,
    )
    assert response.status_code == 422
    assert "status" in response.json()["errors"]
    assert client.get(f"{BASE}/{created['id']}", headers=alice).json() == created


def test_update_requires_all_fields(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.put(
        f"{BASE}/{created['id']}",
        json={"title": "Only the title"},
        headers=alice,
    )
    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"description", "due_date", "status"}


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------

def test_delete_returns_204_then_404(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.delete(f"{BASE}/{created['id']}", headers=alice)
    assert response.status_code == 204
    assert response.content == b""

    assert client.get(f"{BASE}/{created['id']}", headers=alice).status_code == 404
    assert client.delete(f"{BASE}/{created['id']}", headers=alice).status_code == 404


def test_delete_by_other_user_is_404(client, alice, bob, task_payload) -> None:
    created = _create(client, alice, task_payload)
    assert client.delete(f"{BASE}/{created['id']}", headers=bob).status_code == 404
    assert client.get(f"{BASE}/{created['id']}", headers=alice).status_code == 200


# ---------------------------------------------------------------------------
# validation
# ---------------------------------------------------------------------------

def test_create_with_empty_title_is_422(client, alice, task_payload) -> None:
    response = client.post(BASE, json={**task_payload, "title": ""}, headers=alice)
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "VALIDATION_ERROR"
    assert list(body["errors"]) == ["title"]
    assert client.get(BASE, headers=alice).json() == []


def test_create_with_blank_title_is_422(client, alice, task_payload) -> None:
    response = client.post(BASE, json={**task_payload, "title": "   "}, headers=alice)
    assert response.status_code == 422
    assert "title" in response.json()["errors"]


def test_create_with_long_description_is_422(client, alice, task_payload) -> None:
    response = client.post(
        BASE, json={**task_payload, "description": "x" * 1001}, headers=alice
    )
    assert response.status_code == 422
    assert "description" in response.json()["errors"]
    assert client.get(BASE, headers=alice).json() == []


def test_create_accepts_boundary_lengths(client, alice, task_payload) -> None:
    response = client.post(
        BASE,
        json={**task_payload, "title": "t" * 255, "description": "d" * 1000},
        headers=alice,
    )
    assert response.status_code == 201


def test_create_with_long_title_is_422(client, alice, task_payload) -> None:
    response = client.post(BASE, json={**task_payload, "title": "t" * 256}, headers=alice)
    assert response.status_code == 422
    assert "title" in response.json()["errors"]


def test_create_with_unknown_status_is_422(client, alice, task_payload) -> None:
    response = client.post(BASE, json={**task_payload, "status": "INVALID"}, headers=alice)
    assert response.status_code == 422
    assert "status" in response.json()["errors"]


def test_create_with_bad_date_is_422(client, alice, task_payload) -> None:
    response = client.post(BASE, json={**task_payload, "due_date": "2024-02-30"}, headers=alice)
    assert response.status_code == 422
    assert "due_date" in response.json()["errors"]


def test_create_with_numeric_due_date_is_422(client, alice, task_payload) -> None:
    for due_date in (0, 1722470400, "1722470400", True):
        response = client.post(BASE, json={**task_payload, "due_date": due_date}, headers=alice)
        assert response.status_code == 422, due_date
        assert list(response.json()["errors"]) == ["due_date"]
    assert client.get(BASE, headers=alice).json() == []


def test_update_with_numeric_due_date_is_422(client, alice, task_payload) -> None:
    created = _create(client, alice, task_payload)
    response = client.put(
        f"{BASE}/{created['id']}", json={**task_payload, "due_date": 0}, headers=alice
    )
    assert response.status_code == 422
    assert "due_date" in response.json()["errors"]
    assert client.get(f"{BASE}/{created['id']}", headers=alice).json()["due_date"] == "2024-08-01"


def test_create_reports_every_failing_field(client, alice) -> None:
    response = client.post(
        BASE,
        json={"title": "", "description": "x" * 1001, "due_date": "soon", "status": "INVALID"},
        headers=alice,
    )
    assert response.status_code == 422
    assert set(response.json()["errors"]) == {"title", "description", "due_date", "status"}


def test_task_id_beyond_integer_range_is_404(client, alice, task_payload) -> None:
    for task_id in ("99999999999999999999", "-99999999999999999999", str(2 ** 63)):
        url = f"{BASE}/{task_id}"
        assert client.get(url, headers=alice).status_code == 404
        assert client.put(url, json=task_payload, headers=alice).status_code == 404
        assert client.delete(url, headers=alice).status_code == 404


def test_non_integer_task_id_is_422(client, alice) -> None:
    response = client.get(f"{BASE}/abc", headers=alice)
    assert response.status_code == 422
    assert "task_id" in response.json()["errors"]


# ---------------------------------------------------------------------------
# authentication
# ---------------------------------------------------------------------------

def test_missing_token_is_401(client) -> None:
    response = client.get(BASE)
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error"] == "HTTP_ERROR"


def test_garbage_token_is_401(client) -> None:
    response = client.get(BASE, headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_token_for_unknown_user_is_401(client) -> None:
    token = create_access_token({"sub": "ghost@example.com"})
    response = client.get(BASE, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_disabled_user_is_401(client, create_user) -> None:
    create_user("mallory@example.com", disabled=True)
    token = create_access_token({"sub": "mallory@example.com"})
    response = client.get(BASE, headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["message"] == "User account disabled"


def test_unauthenticated_create_is_rejected_before_validation(client) -> None:
    response = client.post(BASE, json={"title": ""})
    assert response.status_code == 401
