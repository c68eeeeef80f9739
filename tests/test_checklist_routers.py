from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from checklist.app import create_app
from checklist.config import Settings


@pytest.fixture
def client(monkeypatch, tmp_path: Path) -> Generator[TestClient, None, None]:
    """Fixture providing a test client backed by temporary storage."""
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    settings = Settings(
        data_path=tmp_path / "checklist.json",
        vault_root=tmp_path / "vault",
        logging_settings_path=tmp_path / "logging_settings.conf",
        animation_duration_ms=0,
        save_debounce_ms=0,
    )
    app = create_app(settings)

    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, text: str, **fields) -> dict:
    response = client.post("/api/tasks", json={"text": text, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "lists": 1, "calendarSync": False}


def test_create_and_list_tasks(client: TestClient) -> None:
    created = _create(client, "Buy milk #Shop", dueDate="2024-01-11T00:00:00", priority="high")
    assert created["tags"] == ["#shop"]
    assert created["dueDate"] == "2024-01-11T00:00:00"
    assert created["allDay"] is True

    payload = client.get("/api/tasks").json()
    assert [task["id"] for task in payload["tasks"]] == [created["id"]]
    assert payload["archived"] == []
    assert payload["smartList"] is None


def test_create_rejects_blank_text(client: TestClient) -> None:
    assert client.post("/api/tasks", json={"text": ""}).status_code == 422
    assert client.post("/api/tasks", json={"text": "   "}).status_code == 422


def test_create_in_unknown_list(client: TestClient) -> None:
    response = client.post("/api/tasks", json={"text": "Lost", "listId": "missing"})
    assert response.status_code == 404


def test_quick_add(client: TestClient) -> None:
    response = client.post("/api/tasks/quick-add", json={"text": "Call mom in 2 days"})
    assert response.status_code == 201
    task = response.json()
    assert task["text"] == "Call mom"
    assert task["dueDate"] is not None

    far = client.post("/api/tasks/quick-add", json={"text": "Plan in 99999999 days"})
    assert far.status_code == 201
    assert far.json()["text"] == "Plan in 99999999 days"
    assert far.json()["dueDate"] is None


def test_update_task(client: TestClient) -> None:
    created = _create(client, "Draft")
    response = client.patch(f"/api/tasks/{created['id']}", json={"text": "Final", "notes": "done"})
    assert response.status_code == 200
    assert response.json()["text"] == "Final"
    assert response.json()["notes"] == "done"

    assert client.patch("/api/tasks/missing", json={"text": "x"}).status_code == 404
    bad = client.patch(f"/api/tasks/{created['id']}", json={"startTime": "noon"})
    assert bad.status_code == 422
    late = client.patch(f"/api/tasks/{created['id']}", json={"startTime": "25:00"})
    assert late.status_code == 422


def test_complete_and_undo(client: TestClient) -> None:
    created = _create(client, "Finish")
    response = client.post(f"/api/tasks/{created['id']}/complete")
    assert response.status_code == 200
    body = response.json()
    assert body["task"]["completedAt"] is not None
    assert body["spawned"] is None
    assert client.get("/api/tasks").json()["archived"][0]["id"] == created["id"]

    undo = client.post("/api/tasks/undo")
    assert undo.json() == {"applied": True, "action": "complete", "message": "Task uncompleted"}
    assert client.post("/api/tasks/missing/complete").status_code == 404


def test_undo_with_empty_history(client: TestClient) -> None:
    response = client.post("/api/tasks/undo")
    assert response.json() == {"applied": False, "action": None, "message": "Nothing to undo"}


def test_delete_open_and_archived_tasks(client: TestClient) -> None:
    open_task = _create(client, "Open")
    done_task = _create(client, "Done")
    client.post(f"/api/tasks/{done_task['id']}/complete")

    assert client.delete(f"/api/tasks/{open_task['id']}").status_code == 200
    assert client.delete(f"/api/tasks/{done_task['id']}").status_code == 200
    assert client.delete(f"/api/tasks/{done_task['id']}").status_code == 404


def test_clear_archived(client: TestClient) -> None:
    for text in ("a", "b"):
        task = _create(client, text)
        client.post(f"/api/tasks/{task['id']}/complete")
    assert client.delete("/api/tasks/archived").json() == {"cleared": 2}


def test_subtasks_and_priority(client: TestClient) -> None:
    task = _create(client, "Parent")
    response = client.post(f"/api/tasks/{task['id']}/subtasks", json={"text": "Child"})
    assert response.status_code == 201
    subtask_id = response.json()["id"]

    toggle = client.post(f"/api/tasks/{task['id']}/subtasks/{subtask_id}/toggle")
    assert toggle.json() == {"completed": True}
    assert client.delete(f"/api/tasks/{task['id']}/subtasks/{subtask_id}").status_code == 200
    assert client.delete(f"/api/tasks/{task['id']}/subtasks/{subtask_id}").status_code == 404

    assert client.post(f"/api/tasks/{task['id']}/priority").json() == {"priority": "low"}


def test_lists_move_and_reorder(client: TestClient) -> None:
    first = _create(client, "First")
    response = client.post("/api/lists", json={"name": "Work"})
    assert response.status_code == 201
    work_id = response.json()["id"]
    work_task = _create(client, "Work task")

    lists = client.get("/api/lists").json()
    assert [item["name"] for item in lists] == ["My Tasks", "Work"]
    assert [item["current"] for item in lists] == [False, True]

    reorder = client.post(f"/api/tasks/{first['id']}/reorder", json={"targetId": work_task["id"]})
    assert reorder.status_code == 400

    move = client.post(f"/api/tasks/{first['id']}/move", json={"targetListId": work_id})
    assert move.json() == {"moved": True}
    assert len(client.get("/api/tasks").json()["tasks"]) == 2

    assert client.put(f"/api/lists/{work_id}", json={"name": "Office"}).status_code == 200
    assert client.post("/api/lists/default/select").json() == {"currentList": "default"}
    assert client.delete(f"/api/lists/{work_id}").json() == {"deleted": True}
    assert client.delete("/api/lists/default").status_code == 409
    assert client.delete("/api/lists/missing").status_code == 404


def test_view_filters(client: TestClient) -> None:
    _create(client, "Buy milk #shop")
    _create(client, "Read #books")

    response = client.put("/api/view", json={"tagFilter": "#shop"})
    assert response.json() == {"smartList": None, "searchQuery": "", "tagFilter": "#shop"}
    assert [task["text"] for task in client.get("/api/tasks").json()["tasks"]] == [
        "Buy milk #shop"
    ]

    assert client.put("/api/view", json={"smartList": "highPriority"}).status_code == 200
    assert client.get("/api/tasks").json()["tasks"] == []
    assert client.put("/api/view", json={"smartList": "someday"}).status_code == 422

    assert client.get("/api/tasks/tags").json() == ["#books", "#shop"]


def test_settings_round_trip(client: TestClient) -> None:
    current = client.get("/api/settings").json()
    assert current["sortBy"] == "manual"
    assert current["fullCalendarSync"] is False

    updated = client.put("/api/settings", json={"sortBy": "priority"})
    assert updated.status_code == 200
    assert updated.json()["sortBy"] == "priority"

    assert client.put("/api/settings", json={"sortBy": "random"}).status_code == 422
    assert client.put("/api/settings", json={"bogus": True}).status_code == 422
    assert client.post("/api/calendar/sync").status_code == 409


def test_calendar_sync_endpoint(client: TestClient, tmp_path: Path) -> None:
    _create(client, "Dentist", dueDate="2024-01-12T14:00:00")
    client.put("/api/settings", json={"fullCalendarSync": True})

    response = client.post("/api/calendar/sync")
    assert response.json() == {"synced": 1}
    files = list((tmp_path / "vault" / "calendar" / "tasks").glob("*.md"))
    assert [path.name[:10] for path in files] == ["2024-01-12"]


def test_notices_and_note_hooks(client: TestClient) -> None:
    _create(client, "Read", linkedNote="Books/Dune.md")
    renamed = client.post(
        "/api/notes/renamed", json={"oldPath": "Books/Dune.md", "newPath": "Read/Dune.md"}
    )
    assert renamed.json() == {"updated": 1}
    assert client.post("/api/notes/deleted", json={"path": "Read/Dune.md"}).json() == {
        "updated": 1
    }

    notices = client.get("/api/notices", params={"limit": 1}).json()
    assert len(notices) == 1
    assert notices[0]["message"] == "Task added"
    assert client.post("/api/notices/check").json() == []


def test_state_persists_across_restarts(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("LOG_FILE", raising=False)
    settings = Settings(
        data_path=tmp_path / "checklist.json",
        vault_root=tmp_path / "vault",
        logging_settings_path=tmp_path / "logging_settings.conf",
    )
    with TestClient(create_app(settings)) as first:
        first.post("/api/tasks", json={"text": "Persisted"})

    with TestClient(create_app(settings)) as second:
        tasks = second.get("/api/tasks").json()["tasks"]
    assert [task["text"] for task in tasks] == ["Persisted"]
