from datetime import datetime, timezone
from types import SimpleNamespace

import jobtrack.routers.applications as apps_mod

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _application(**overrides):
    data = dict(
        id="a1",
        company="ACME",
        role="Backend Engineer",
        location="Seattle, WA",
        status="SAVED",
        priority="MEDIUM",
        date_applied=None,
        job_url=None,
        archived=False,
        salary_min=None,
        salary_max=None,
        salary_currency="USD",
        salary_period="YEAR",
        created_at=NOW,
        updated_at=NOW,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_list_applications_passes_filters(monkeypatch, client, stub_user):
    captured = {}

    def fake_list(db, user_id, **kwargs):
        captured["user_id"] = user_id
        captured.update(kwargs)
        return [_application()], 1, 1

    monkeypatch.setattr(apps_mod.application_repo, "list_for_user", fake_list)
    resp = client.get(
        "/applications",
        params={"status": "APPLIED", "q": "acme", "include_archived": "false", "page": -3, "size": 10_000},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_elements"] == 1
    assert data["total_pages"] == 1
    assert data["content"][0]["company"] == "ACME"
    assert captured["user_id"] == stub_user.id
    assert captured["status"] == "APPLIED"
    assert captured["search"] == "acme"
    assert captured["include_archived"] is False
    assert captured["page"] == 0
    assert captured["size"] == apps_mod.MAX_PAGE_SIZE


def test_create_application_trims_and_defaults(monkeypatch, client, stub_user):
    captured = {}

    def fake_create(db, user_id, data):
        captured["user_id"] = user_id
        captured["data"] = data
        return _application(company=data["company"], role=data["role"], salary_min=data["salary_min"])

    monkeypatch.setattr(apps_mod.application_repo, "create", fake_create)
    resp = client.post(
        "/applications",
        json={"company": "  ACME  ", "role": "Engineer", "salary_min": "120000.9", "salary_max": ""},
    )
    assert resp.status_code == 201
    assert captured["user_id"] == stub_user.id
    assert captured["data"]["company"] == "ACME"
    assert captured["data"]["status"] == "SAVED"
    assert captured["data"]["salary_min"] == 120000
    assert captured["data"]["salary_max"] is None
    assert resp.json()["company"] == "ACME"


def test_create_application_rejects_blank_company(client):
    resp = client.post("/applications", json={"company": "   ", "role": "Engineer"})
    assert resp.status_code == 422


def test_create_application_rejects_inverted_salary(client):
    resp = client.post("/applications", json={"company": "ACME", "role": "Eng", "salary_min": 200, "salary_max": 100})
    assert resp.status_code == 422


def test_get_application_not_found(monkeypatch, client):
    monkeypatch.setattr(apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: None)
    resp = client.get("/applications/missing")
    assert resp.status_code == 404


def test_update_application_checks_merged_salary_range(monkeypatch, client):
    monkeypatch.setattr(
        apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: _application(salary_max=100_000)
    )
    monkeypatch.setattr(apps_mod.application_repo, "update", lambda *a, **kw: _application())
    resp = client.patch("/applications/a1", json={"salary_min": 150_000})
    assert resp.status_code == 400


def test_update_application_ignores_null_for_required_columns(monkeypatch, client):
    captured = {}
    monkeypatch.setattr(apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: _application())

    def fake_update(db, app_id, user_id, changes):
        captured["changes"] = changes
        return _application(location=None, priority="HIGH")

    monkeypatch.setattr(apps_mod.application_repo, "update", fake_update)
    resp = client.patch("/applications/a1", json={"company": None, "location": None, "priority": "HIGH"})
    assert resp.status_code == 200
    assert captured["changes"] == {"location": None, "priority": "HIGH"}


def test_update_status_rejects_unknown_status(client):
    resp = client.patch("/applications/a1/status", json={"status": "GHOSTED"})
    assert resp.status_code == 422


def test_update_status_moves_application(monkeypatch, client):
    captured = {}

    def fake_update(db, app_id, user_id, changes):
        captured["changes"] = changes
        return _application(status=changes["status"])

    monkeypatch.setattr(apps_mod.application_repo, "update", fake_update)
    resp = client.patch("/applications/a1/status", json={"status": "INTERVIEW"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "INTERVIEW"
    assert captured["changes"] == {"status": "INTERVIEW"}


def test_delete_application(monkeypatch, client):
    monkeypatch.setattr(apps_mod.application_repo, "delete", lambda db, app_id, user_id: app_id == "a1")
    assert client.delete("/applications/a1").json() == {"ok": True}
    assert client.delete("/applications/other").status_code == 404


def test_create_from_open_job(monkeypatch, client):
    job = SimpleNamespace(id="j1", company="Globex", role=None, location="Tacoma, WA", job_url="https://globex.example/1")
    captured = {}
    monkeypatch.setattr(apps_mod, "get_open_job_by_id", lambda db, job_id: job if job_id == "j1" else None)

    def fake_create(db, user_id, data):
        captured["data"] = data
        return _application(company=data["company"], role=data["role"], job_url=data["job_url"])

    monkeypatch.setattr(apps_mod.application_repo, "create", fake_create)
    resp = client.post("/applications/from-open-job/j1")
    assert resp.status_code == 201
    assert captured["data"]["company"] == "Globex"
    assert captured["data"]["role"] == "Unknown"
    assert captured["data"]["job_url"] == "https://globex.example/1"
    assert captured["data"]["status"] == "SAVED"

    assert client.post("/applications/from-open-job/nope").status_code == 404


def test_notes_require_owned_application(monkeypatch, client):
    monkeypatch.setattr(apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: None)
    assert client.get("/applications/a1/notes").status_code == 404
    assert client.post("/applications/a1/notes", json={"content": "hi"}).status_code == 404


def test_create_and_list_notes(monkeypatch, client):
    note = SimpleNamespace(id="n1", application_id="a1", body="Recruiter call went well", created_at=NOW)
    monkeypatch.setattr(apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: _application())
    monkeypatch.setattr(apps_mod.note_repo, "create", lambda db, app_id, user_id, body: note)
    monkeypatch.setattr(apps_mod.note_repo, "list_for_application", lambda db, app_id, user_id: [note])

    created = client.post("/applications/a1/notes", json={"content": "Recruiter call went well"})
    assert created.status_code == 201
    assert created.json()["content"] == "Recruiter call went well"
    listed = client.get("/applications/a1/notes").json()
    assert [n["id"] for n in listed] == ["n1"]


def test_note_content_required(client):
    assert client.post("/applications/a1/notes", json={"content": ""}).status_code == 422


def test_contacts_crud(monkeypatch, client):
    contact = SimpleNamespace(
        id="c1", application_id="a1", name="Dana", title="Recruiter",
        email="dana@acme.example", phone=None, notes=None, created_at=NOW,
    )
    monkeypatch.setattr(apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: _application())
    monkeypatch.setattr(apps_mod.contact_repo, "create", lambda db, app_id, user_id, data: contact)
    monkeypatch.setattr(apps_mod.contact_repo, "update", lambda db, app_id, cid, user_id, data: None)
    monkeypatch.setattr(apps_mod.contact_repo, "delete", lambda db, app_id, cid, user_id: True)

    resp = client.post("/applications/a1/contacts", json={"name": "Dana", "title": "Recruiter"})
    assert resp.status_code == 201
    assert resp.json()["name"] == "Dana"
    assert client.patch("/applications/a1/contacts/c9", json={"name": "X"}).status_code == 404
    assert client.delete("/applications/a1/contacts/c1").json() == {"ok": True}


def test_create_reminder_for_application(monkeypatch, client):
    remind_at = datetime(2026, 10, 25, 9, 0, tzinfo=timezone.utc)
    reminder = SimpleNamespace(
        id="r1", application_id="a1", remind_at=remind_at, message="Follow up",
        completed=False, created_at=NOW, application=_application(),
    )
    monkeypatch.setattr(apps_mod.application_repo, "get_for_user", lambda db, app_id, user_id: _application())
    monkeypatch.setattr(apps_mod.reminder_repo, "create", lambda db, app_id, user_id, at, message: reminder)

    resp = client.post("/applications/a1/reminders", json={"remind_at": remind_at.isoformat(), "message": "Follow up"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Follow up"
    assert body["completed"] is False
    assert body["application"] is None
