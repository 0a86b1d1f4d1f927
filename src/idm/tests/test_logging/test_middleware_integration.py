# src/idm/tests/test_logging/test_middleware_integration.py
import json
import logging

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from idm.core.logging.builder import setup_logging
from idm.core.logging.middleware import RequestIDMiddleware
from ..conftest import make_settings

pytestmark = pytest.mark.usefixtures("restore_logging")


def build_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/hello")
    def hello():
        logging.getLogger("idm").warning("handling hello")
        return {"ok": True}

    return app


def test_request_id_in_response_and_logs(tmp_path, capsys):
    setup_logging(make_settings(LOG_FORMAT="json", LOG_DIR=tmp_path / "logs", ENV="production"))

    client = TestClient(build_app())
    resp = client.get("/hello")
    assert resp.status_code == 200

    rid = resp.headers.get("X-Request-ID")
    assert rid is not None

    stderr = capsys.readouterr().err.strip()
    assert stderr, "Expected logs on stderr but nothing was captured."

    found = False
    for line in stderr.splitlines():
        try:
            rec = json.loads(line)
        except ValueError:
            continue
        if rec.get("request_id") == rid:
            found = True
            break

    assert found, "No log line in stderr with matching request_id"


def test_incoming_request_id_is_echoed():
    client = TestClient(build_app())
    resp = client.get("/hello", headers={"X-Request-ID": "upstream-42"})
    assert resp.headers["X-Request-ID"] == "upstream-42"


def test_malformed_request_id_is_replaced():
    client = TestClient(build_app())
    resp = client.get("/hello", headers={"X-Request-ID": "bad id with spaces"})
    rid = resp.headers["X-Request-ID"]
    assert rid != "bad id with spaces"
    assert len(rid) == 36
