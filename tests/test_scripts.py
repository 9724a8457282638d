import json

import pytest

import jobtrack.scripts.promote_admin as promote
import jobtrack.scripts.run_ingestion as ri
from jobtrack.services.open_jobs_ingestion import IngestionConfigError


class _DB:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class _Summary:
    def __init__(self, data):
        self.data = data

    def to_dict(self):
        return self.data


def test_promote_admin_usage():
    assert promote.main([]) == 1


def test_promote_admin_user_not_found(monkeypatch):
    monkeypatch.setattr(promote, "ensure_tables_exist", lambda: None)
    monkeypatch.setattr(promote, "SessionLocal", _DB)
    monkeypatch.setattr(promote, "get_by_email", lambda db, email: None)
    assert promote.main(["missing@example.com"]) == 1


def test_promote_admin_success(monkeypatch):
    user = type("U", (), {"id": "u1"})()
    calls = []
    monkeypatch.setattr(promote, "ensure_tables_exist", lambda: None)
    monkeypatch.setattr(promote, "SessionLocal", _DB)
    monkeypatch.setattr(promote, "get_by_email", lambda db, email: user)
    monkeypatch.setattr(promote, "update", lambda db, uid, **kwargs: calls.append((uid, kwargs)) or user)
    assert promote.main([" a@b.com "]) == 0
    assert calls == [("u1", {"is_admin": True})]


def test_run_ingestion_parser_collects_repeated_flags():
    args = ri.build_parser().parse_args(
        ["--once", "--title", "Backend Engineer", "--title", "Data Engineer", "--location", "Tacoma, WA", "--max-results", "5"]
    )
    assert args.once is True
    assert args.titles == ["Backend Engineer", "Data Engineer"]
    assert args.locations == ["Tacoma, WA"]
    assert args.max_results == 5


def test_run_ingestion_once_prints_summary(monkeypatch, capsys):
    db = _DB()
    captured = {}

    def fake_run(session, config):
        captured["config"] = config
        return _Summary({"ok": True, "upsert_success": 4, "skipped_no_url": 0})

    monkeypatch.setattr(ri, "setup_logging", lambda: None)
    monkeypatch.setattr(ri, "init_db", lambda: None)
    monkeypatch.setattr(ri, "SessionLocal", lambda: db)
    monkeypatch.setattr(ri, "run_ingestion", fake_run)
    rc = ri.main(["--once", "--title", "SRE", "--max-results", "500"])
    assert rc == 0
    assert json.loads(capsys.readouterr().out)["upsert_success"] == 4
    assert captured["config"].job_titles == ["SRE"]
    assert captured["config"].max_results_per_title == 100
    assert db.closed is True


def test_run_ingestion_once_missing_key(monkeypatch, capsys):
    def fake_run(session, config):
        raise IngestionConfigError("Missing SERPAPI_KEY")

    monkeypatch.setattr(ri, "setup_logging", lambda: None)
    monkeypatch.setattr(ri, "init_db", lambda: None)
    monkeypatch.setattr(ri, "SessionLocal", _DB)
    monkeypatch.setattr(ri, "run_ingestion", fake_run)
    assert ri.main(["--once"]) == 1
    assert json.loads(capsys.readouterr().out) == {"ok": False, "error": "Missing SERPAPI_KEY"}


def test_run_ingestion_loop_survives_failures(monkeypatch):
    calls = []

    def flaky_run(session, config):
        calls.append(1)
        raise RuntimeError("network down")

    def stop_sleep(_seconds):
        raise SystemExit(0)

    monkeypatch.setattr(ri, "setup_logging", lambda: None)
    monkeypatch.setattr(ri, "init_db", lambda: None)
    monkeypatch.setattr(ri, "SessionLocal", _DB)
    monkeypatch.setattr(ri, "run_ingestion", flaky_run)
    monkeypatch.setattr(ri.time, "sleep", stop_sleep)
    with pytest.raises(SystemExit):
        ri.main([])
    assert calls == [1]


def test_ensure_tables_main(monkeypatch, capsys):
    import jobtrack.scripts.ensure_tables as et

    calls = []
    monkeypatch.setattr(et, "setup_logging", lambda: None)
    monkeypatch.setattr(et, "ensure_tables_exist", lambda: calls.append(1))
    et.main()
    assert calls == [1]
    assert "created only missing tables" in capsys.readouterr().out
