from __future__ import annotations

import csv
import io
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def _create_user(client: AsyncClient, name: str = "Camille") -> dict:
    response = await client.post("/api/users", json={"name": name})
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def _create_task(
    client: AsyncClient,
    *,
    title: str = "Write report",
    description: str = "Quarterly summary",
    task_status: str = "En attente",
    user_id: int | None = None,
) -> dict:
    response = await client.post(
        "/api/tasks",
        json={
            "title": title,
            "description": description,
            "status": task_status,
            "user_id": user_id,
        },
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


async def test_task_crud_flow(client: AsyncClient) -> None:
    user = await _create_user(client)
    created = await _create_task(client, user_id=user["id"])
    assert created["status"] == "En attente"
    assert created["user_id"] == user["id"]

    detail = await client.get(f"/api/tasks/{created['id']}")
    assert detail.status_code == status.HTTP_200_OK
    body = detail.json()
    assert body["assigned_user"] == {"id": user["id"], "name": user["name"]}
    assert body["comments"] == []

    update = await client.put(
        f"/api/tasks/{created['id']}",
        json={
            "id": created["id"],
            "title": "Write final report",
            "description": "Quarterly summary, reviewed",
            "status": "En cours",
            "user_id": None,
        },
    )
    assert update.status_code == status.HTTP_204_NO_CONTENT

    updated = (await client.get(f"/api/tasks/{created['id']}")).json()
    assert updated["title"] == "Write final report"
    assert updated["status"] == "En cours"
    assert updated["user_id"] is None
    assert _parse_timestamp(updated["created_at"]) == _parse_timestamp(created["created_at"])

    delete = await client.delete(f"/api/tasks/{created['id']}")
    assert delete.status_code == status.HTTP_204_NO_CONTENT
    missing = await client.get(f"/api/tasks/{created['id']}")
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["details"] == {
        "entity": "task",
        "id": created["id"],
        "request_id": missing.headers["X-Request-ID"],
    }


async def test_create_task_reports_every_invalid_field(client: AsyncClient) -> None:
    response = await client.post("/api/tasks", json={"status": "Bloquée"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    payload = response.json()
    assert payload["code"] == "validation_error"
    fields = {error["field"] for error in payload["details"]["errors"]}
    assert fields == {"title", "description", "status"}


async def test_create_task_rejects_overlong_title(client: AsyncClient) -> None:
    response = await client.post(
        "/api/tasks",
        json={"title": "x" * 101, "description": "ok", "status": "En cours"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert [error["field"] for error in response.json()["details"]["errors"]] == ["title"]


async def test_create_task_ignores_client_created_at(client: AsyncClient) -> None:
    before = datetime.now(timezone.utc) - timedelta(seconds=5)
    response = await client.post(
        "/api/tasks",
        json={
            "title": "Backdated",
            "description": "Tries to set its own timestamp",
            "status": "En attente",
            "created_at": "2001-01-01T00:00:00Z",
        },
    )
    after = datetime.now(timezone.utc) + timedelta(seconds=5)

    assert response.status_code == status.HTTP_201_CREATED
    created_at = _parse_timestamp(response.json()["created_at"])
    assert before <= created_at <= after


async def test_create_task_for_missing_user_returns_not_found(client: AsyncClient) -> None:
    response = await client.post(
        "/api/tasks",
        json={"title": "Orphan", "description": "No owner", "status": "En attente", "user_id": 404},
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["details"]["entity"] == "user"
    assert (await client.get("/api/tasks")).json() == []


async def test_list_tasks_filters_by_status(client: AsyncClient) -> None:
    pending = await _create_task(client, title="Pending", task_status="En attente")
    active = await _create_task(client, title="Active", task_status="En cours")
    other_active = await _create_task(client, title="Also active", task_status="En cours")
    await _create_task(client, title="Done", task_status="Terminée")

    response = await client.get("/api/tasks", params={"status": "En cours"})

    assert response.status_code == status.HTTP_200_OK
    assert [task["id"] for task in response.json()] == [active["id"], other_active["id"]]

    everything = (await client.get("/api/tasks")).json()
    assert len(everything) == 4
    assert everything[0]["id"] == pending["id"]


async def test_list_tasks_rejects_unknown_status(client: AsyncClient) -> None:
    response = await client.get("/api/tasks", params={"status": "Archived"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


async def test_update_task_with_mismatched_id_is_rejected(client: AsyncClient) -> None:
    task = await _create_task(client)

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"id": task["id"] + 10, "title": "Changed", "description": "Changed", "status": "En cours"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "id_mismatch"
    assert (await client.get(f"/api/tasks/{task['id']}")).json()["title"] == task["title"]


async def test_update_missing_task_returns_not_found(client: AsyncClient) -> None:
    response = await client.put(
        "/api/tasks/31",
        json={"id": 31, "title": "Ghost", "description": "Gone", "status": "En cours"},
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


async def test_assign_task(client: AsyncClient) -> None:
    user = await _create_user(client)
    task = await _create_task(client)

    response = await client.post(f"/api/tasks/assign/{task['id']}/{user['id']}")

    assert response.status_code == status.HTTP_200_OK
    payload = response.json()
    assert payload["message"] == "Task assigned successfully"
    assert payload["task"]["id"] == task["id"]
    assert payload["task"]["user_id"] == user["id"]


async def test_assign_task_to_missing_user_keeps_assignment(client: AsyncClient) -> None:
    user = await _create_user(client)
    task = await _create_task(client, user_id=user["id"])

    response = await client.post(f"/api/tasks/assign/{task['id']}/999")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["details"]["entity"] == "user"
    assert response.json()["details"]["id"] == 999
    assert (await client.get(f"/api/tasks/{task['id']}")).json()["user_id"] == user["id"]


async def test_assign_missing_task_returns_not_found(client: AsyncClient) -> None:
    user = await _create_user(client)

    response = await client.post(f"/api/tasks/assign/555/{user['id']}")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["details"]["entity"] == "task"


async def test_search_matches_title_or_description(client: AsyncClient) -> None:
    by_title = await _create_task(client, title="Deploy release", description="Push the build")
    by_description = await _create_task(client, title="Checklist", description="Before we deploy")
    await _create_task(client, title="Unrelated", description="Nothing here")

    response = await client.get("/api/tasks/search", params={"keyword": "deploy"})

    assert response.status_code == status.HTTP_200_OK
    assert [task["id"] for task in response.json()] == [by_title["id"], by_description["id"]]


async def test_search_escapes_like_wildcards(client: AsyncClient) -> None:
    literal = await _create_task(client, title="Reach 100% coverage")
    await _create_task(client, title="Reach 1000 users")

    response = await client.get("/api/tasks/search", params={"keyword": "100%"})

    assert [task["id"] for task in response.json()] == [literal["id"]]


async def test_search_by_created_after(client: AsyncClient) -> None:
    task = await _create_task(client)
    created_at = _parse_timestamp(task["created_at"])

    earlier = await client.get(
        "/api/tasks/search",
        params={"created_after": (created_at - timedelta(minutes=1)).isoformat()},
    )
    later = await client.get(
        "/api/tasks/search",
        params={"created_after": (created_at + timedelta(minutes=1)).isoformat()},
    )

    assert [item["id"] for item in earlier.json()] == [task["id"]]
    assert later.json() == []


async def test_search_accepts_but_ignores_assigned_to(client: AsyncClient) -> None:
    owner = await _create_user(client, "Owner")
    owned = await _create_task(client, user_id=owner["id"])
    unowned = await _create_task(client)

    response = await client.get("/api/tasks/search", params={"assigned_to": owner["id"]})

    assert response.status_code == status.HTTP_200_OK
    assert [task["id"] for task in response.json()] == [owned["id"], unowned["id"]]


async def test_statistics(client: AsyncClient) -> None:
    busy = await _create_user(client, "Busy")
    idle = await _create_user(client, "Idle")
    await _create_task(client, title="One", task_status="En attente", user_id=busy["id"])
    await _create_task(client, title="Two", task_status="En attente", user_id=busy["id"])
    await _create_task(client, title="Three", task_status="Terminée")

    response = await client.get("/api/tasks/stats")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "total_tasks": 3,
        "tasks_by_status": {"En attente": 2, "Terminée": 1},
        "tasks_by_user": [
            {"user_id": busy["id"], "user_name": "Busy", "task_count": 2},
            {"user_id": idle["id"], "user_name": "Idle", "task_count": 0},
        ],
    }


async def test_statistics_on_empty_store(client: AsyncClient) -> None:
    response = await client.get("/api/tasks/stats")

    assert response.json() == {"total_tasks": 0, "tasks_by_status": {}, "tasks_by_user": []}


async def test_export_csv(client: AsyncClient) -> None:
    user = await _create_user(client)
    first = await _create_task(client, title="Plain", user_id=user["id"])
    second = await _create_task(client, title='Quoted "title", with comma', description="Line one\nLine two")

    response = await client.get("/api/tasks/export")

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="tasks_export.csv"'

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert len(rows) == 2
    for row, created in zip(rows, (first, second)):
        fetched = (await client.get(f"/api/tasks/{created['id']}")).json()
        assert row["id"] == str(fetched["id"])
        assert row["title"] == fetched["title"]
        assert row["description"] == fetched["description"]
        assert row["status"] == fetched["status"]
        assert row["created_at"] == fetched["created_at"]
    assert rows[0]["user_id"] == str(user["id"])
    assert rows[1]["user_id"] == ""


async def test_export_empty_store_has_header_only(client: AsyncClient) -> None:
    response = await client.get("/api/tasks/export")

    assert response.text.strip() == "id,title,description,status,created_at,user_id"


async def test_create_task_reports_blank_title_alongside_bad_status(client: AsyncClient) -> None:
    response = await client.post(
        "/api/tasks",
        json={"title": "   ", "description": "ok", "status": "Bogus"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    fields = {error["field"] for error in response.json()["details"]["errors"]}
    assert fields == {"title", "status"}
    assert (await client.get("/api/tasks")).json() == []


async def test_update_task_without_id_is_a_mismatch(client: AsyncClient) -> None:
    task = await _create_task(client)

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Changed", "description": "Changed", "status": "En cours"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    payload = response.json()
    assert payload["code"] == "id_mismatch"
    assert payload["details"]["path_id"] == task["id"]
    assert payload["details"]["payload_id"] is None
    assert (await client.get(f"/api/tasks/{task['id']}")).json()["title"] == task["title"]
