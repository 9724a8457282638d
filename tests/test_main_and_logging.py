import logging

import jobtrack.logging_config as lc
import jobtrack.main as main_mod


class _ConnOK:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, _query):
        return 1


class _EngineOK:
    def connect(self):
        return _ConnOK()


class _EngineFail:
    def connect(self):
        raise RuntimeError("db down")


def test_health_live(client):
    resp = client.get("/health/live")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_health_ready_ok(monkeypatch, client):
    monkeypatch.setattr(main_mod, "engine", _EngineOK())
    resp = client.get("/health/ready")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ready"


def test_health_ready_not_ready(monkeypatch, client):
    monkeypatch.setattr(main_mod, "engine", _EngineFail())
    resp = client.get("/health/ready")
    assert resp.status_code == 503
    assert resp.json()["status"] == "not_ready"


def test_root(client):
    assert "JobTrack" in client.get("/").json()["message"]


def test_setup_logging_string_level():
    lc.setup_logging("debug")
    assert logging.getLogger().level <= logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_with_none_level():
    lc.setup_logging(None)
    assert isinstance(logging.getLogger().level, int)
    assert len(logging.getLogger().handlers) == 1


def test_setup_logging_import_failure_falls_back(monkeypatch):
    import builtins

    orig_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "jobtrack.config":
            raise RuntimeError("boom")
        return orig_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)
    lc.setup_logging(None)
    assert logging.getLogger().level == logging.INFO
