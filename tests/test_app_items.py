"""Tests for per-application todos, notes and maintenance runs"""

from datetime import datetime, timedelta, timezone

from cloud_tracker.modules.maintenance.service import MaintenanceService
from tests.conftest import OTHER_USER, make_application


# Todos

def test_todos_append_in_order(client, db):
    app = make_application(db)

    for text in ("write tests", "ship", "celebrate"):
        assert client.post(f"/api/v1/applications/{app['id']}/todos", json={"text": text}).status_code == 201

    todos = client.get(f"/api/v1/applications/{app['id']}/todos").json()
    assert [(t["text"], t["sort_order"]) for t in todos] == [("write tests", 0), ("ship", 1), ("celebrate", 2)]
    assert all(t["completed"] is False for t in todos)


def test_toggle_and_reorder_todos(client, db):
    app = make_application(db)
    ids = [
        client.post(f"/api/v1/applications/{app['id']}/todos", json={"text": text}).json()["id"]
        for text in ("a", "b", "c")
    ]

    toggled = client.patch(f"/api/v1/todos/{ids[0]}", json={"completed": True})
    assert toggled.json()["completed"] is True

    reordered = client.post(
        f"/api/v1/applications/{app['id']}/todos/reorder",
        json={"ordered_ids": [ids[2], ids[0], ids[1]]},
    )
    assert [t["text"] for t in reordered.json()] == ["c", "a", "b"]

    assert client.delete(f"/api/v1/todos/{ids[1]}").status_code == 204
    assert client.delete(f"/api/v1/todos/{ids[1]}").status_code == 404


def test_todos_require_owned_application(client, db):
    theirs = make_application(db, user_id=OTHER_USER["id"])

    assert client.get(f"/api/v1/applications/{theirs['id']}/todos").status_code == 404
    assert client.post(f"/api/v1/applications/{theirs['id']}/todos", json={"text": "x"}).status_code == 404


def test_todo_text_length(client, db):
    app = make_application(db)
    assert client.post(f"/api/v1/applications/{app['id']}/todos", json={"text": ""}).status_code == 422
    assert client.post(f"/api/v1/applications/{app['id']}/todos", json={"text": "x" * 501}).status_code == 422


# Notes

def test_notes_newest_first(client, db):
    app = make_application(db)
    db.seed("app_notes", [
        {"application_id": app["id"], "user_id": "user-1", "content": "old", "created_at": "2024-05-01T00:00:00+00:00"},
        {"application_id": app["id"], "user_id": "user-1", "content": "new", "created_at": "2024-05-02T00:00:00+00:00"},
    ])

    notes = client.get(f"/api/v1/applications/{app['id']}/notes").json()

    assert [n["content"] for n in notes] == ["new", "old"]


def test_note_lifecycle(client, db):
    app = make_application(db)

    created = client.post(f"/api/v1/applications/{app['id']}/notes", json={"content": "remember DNS"})
    assert created.status_code == 201
    note_id = created.json()["id"]

    updated = client.put(f"/api/v1/notes/{note_id}", json={"content": "DNS done"})
    assert updated.json()["content"] == "DNS done"

    assert client.delete(f"/api/v1/notes/{note_id}").status_code == 204
    assert client.delete(f"/api/v1/notes/{note_id}").status_code == 404


def test_note_of_other_user_is_not_found(client, db):
    theirs = make_application(db, user_id=OTHER_USER["id"])
    [note] = db.seed("app_notes", [{"application_id": theirs["id"], "user_id": OTHER_USER["id"], "content": "private"}])

    assert client.put(f"/api/v1/notes/{note['id']}", json={"content": "mine now"}).status_code == 404


# Maintenance

def seed_command_types(db):
    return db.seed("maintenance_command_types", [
        {"name": "Security Review", "slug": "security-review", "recommended_frequency_days": 7, "sort_order": 1, "is_active": True},
        {"name": "Dependency Updates", "slug": "dependency-updates", "recommended_frequency_days": 14, "sort_order": 2, "is_active": True},
        {"name": "Retired", "slug": "retired", "recommended_frequency_days": 30, "sort_order": 3, "is_active": False},
    ])


def test_command_types_listed_in_order(client, db):
    seed_command_types(db)

    response = client.get("/api/v1/maintenance/command-types")

    assert [c["slug"] for c in response.json()] == ["security-review", "dependency-updates", "retired"]


def test_latest_status_overdue_and_never_run(db):
    security, deps, _ = seed_command_types(db)
    app = make_application(db)
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    db.seed("maintenance_runs", [
        {"application_id": app["id"], "command_type_id": security["id"], "status": "completed",
         "run_at": (now - timedelta(days=10)).isoformat()},
        {"application_id": app["id"], "command_type_id": security["id"], "status": "failed",
         "run_at": (now - timedelta(days=20)).isoformat()},
    ])

    items = MaintenanceService(db).get_latest_status(app["id"], now=now)

    by_slug = {item.command_type.slug: item for item in items}
    assert set(by_slug) == {"security-review", "dependency-updates"}
    assert by_slug["security-review"].days_since_run == 10
    assert by_slug["security-review"].last_status == "completed"
    assert by_slug["security-review"].is_overdue is True
    assert by_slug["dependency-updates"].never_run is True
    assert by_slug["dependency-updates"].is_overdue is False


def test_run_on_the_due_day_is_not_overdue(db):
    security, _, _ = seed_command_types(db)
    app = make_application(db)
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    db.seed("maintenance_runs", [
        {"application_id": app["id"], "command_type_id": security["id"], "status": "completed",
         "run_at": (now - timedelta(days=7)).isoformat()},
    ])

    [item, _] = MaintenanceService(db).get_latest_status(app["id"], now=now)

    assert item.days_since_run == 7
    assert item.is_overdue is False


def test_maintenance_run_lifecycle(client, db):
    security, _, _ = seed_command_types(db)
    app = make_application(db)

    created = client.post("/api/v1/maintenance/runs", json={
        "application_id": app["id"],
        "command_type_id": security["id"],
        "notes": "",
    })
    assert created.status_code == 201
    assert created.json()["status"] == "completed"
    assert created.json()["notes"] is None
    run_id = created.json()["id"]

    runs = client.get(f"/api/v1/applications/{app['id']}/maintenance/runs").json()
    assert runs[0]["command_type"]["slug"] == "security-review"

    patched = client.patch(f"/api/v1/maintenance/runs/{run_id}", json={"status": "failed"})
    assert patched.json()["status"] == "failed"

    assert client.delete(f"/api/v1/maintenance/runs/{run_id}").status_code == 204


def test_maintenance_run_for_foreign_application(client, db):
    security, _, _ = seed_command_types(db)
    theirs = make_application(db, user_id=OTHER_USER["id"])

    response = client.post("/api/v1/maintenance/runs", json={
        "application_id": theirs["id"],
        "command_type_id": security["id"],
    })

    assert response.status_code == 404
