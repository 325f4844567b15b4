import importlib
import logging
import os
import sys

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


def _cleanup_app_modules():
    for module in ("courtside.main", "courtside.config"):
        sys.modules.pop(module, None)


@pytest.fixture(autouse=True)
def app_import_isolation(monkeypatch):
    app_path = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    _cleanup_app_modules()
    monkeypatch.syspath_prepend(app_path)
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    try:
        yield
    finally:
        _cleanup_app_modules()


def test_rejects_wildcard_origins(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    with pytest.raises(ValueError):
        importlib.import_module("courtside.main")


def test_requires_allowed_origins(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    with pytest.raises(ValueError):
        importlib.import_module("courtside.main")


def test_routes_mounted_under_prefix(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000")
    monkeypatch.setenv("API_PREFIX", "scoring/")
    main = importlib.import_module("courtside.main")

    client = TestClient(main.app)

    # Rejected by the router before any database access.
    resp = client.post(
        "/scoring/v0/games", json={"playerNames": ["Alice"], "firstServer": 0}
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid_configuration"
    assert client.get("/scoring/v0/points").status_code == 422

    resp = client.post(
        "/api/v0/games", json={"playerNames": ["Alice"], "firstServer": 0}
    )
    assert resp.status_code == 404
    assert client.get("/api/v0/points").status_code == 404

    assert client.get("/healthz").json() == {"status": "ok"}
    assert client.get("/scoring/healthz").json() == {"status": "ok"}


def test_canon_prefix():
    config = importlib.import_module("courtside.config")

    assert config._canon_prefix(None) == "/api"
    assert config._canon_prefix("api/") == "/api"
    assert config._canon_prefix("/") == "/"


def test_log_level_parsing():
    config = importlib.import_module("courtside.config")

    assert config._log_level("debug") == logging.DEBUG
    assert config._log_level(None) == logging.INFO
    assert config._log_level("chatty") == logging.INFO


def test_unhandled_exception_logs_traceback(monkeypatch, caplog):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000")
    main = importlib.import_module("courtside.main")

    app = FastAPI()
    app.add_exception_handler(Exception, main.unhandled_exception_handler)

    @app.get("/boom")
    def boom():
        raise ValueError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["code"] == "internal_server_error"
    record = next((r for r in caplog.records if r.message == "Unhandled exception"), None)
    assert record is not None
    assert record.exc_info[0] is ValueError
