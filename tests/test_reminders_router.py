from datetime import datetime, timezone
from types import SimpleNamespace

import jobtrack.routers.reminders as rem_mod


def _reminder(**overrides):
    data = dict(
        id="r1",
        application_id="a1",
        remind_at=datetime(2026, 10, 21, 9, 0, tzinfo=timezone.utc),
        message="Send thank-you note",
        completed=False,
        created_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
        application=SimpleNamespace(company="ACME", role="Backend Engineer"),
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def test_upcoming_reminders_include_application(monkeypatch, client, stub_user):
    captured = {}

    def fake_upcoming(db, user_id, days, include_overdue, limit):
        captured.update(user_id=user_id, days=days, include_overdue=include_overdue, limit=limit)
        return [_reminder()]

    monkeypatch.setattr(rem_mod.reminder_repo, "get_upcoming", fake_upcoming)
    resp = client.get("/reminders/upcoming", params={"days": 9999, "limit": 0, "include_overdue": "false"})
    assert resp.status_code == 200
    body = resp.json()
    assert body[0]["application"] == {"company": "ACME", "role": "Backend Engineer"}
    assert captured == {"user_id": stub_user.id, "days": 365, "include_overdue": False, "limit": 1}


def test_complete_reminder(monkeypatch, client):
    monkeypatch.setattr(
        rem_mod.reminder_repo,
        "complete",
        lambda db, reminder_id, user_id: _reminder(completed=True) if reminder_id == "r1" else None,
    )
    resp = client.post("/reminders/r1/complete")
    assert resp.status_code == 200
    assert resp.json()["completed"] is True
    assert client.post("/reminders/nope/complete").status_code == 404
