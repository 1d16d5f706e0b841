"""
Tests for health probes, request ids, the error envelope and log formatting.
"""
import json
import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from industrin.api import catalog
from industrin.core.logging import JsonFormatter
from industrin.main import app


class TestHealth:
    def test_healthz(self, client):
        resp = client.get("/api/healthz")
        assert resp.status_code == 200
        assert resp.json()["service"] == "industrin"
        assert resp.headers["X-Request-ID"]

    def test_readyz(self, client):
        resp = client.get("/api/readyz")
        assert resp.status_code == 200
        assert resp.json()["db"] == "up"

    def test_request_id_is_propagated(self, client):
        resp = client.get("/api/healthz", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Request-ID"] == "abc123"


class TestErrorEnvelope:
    @pytest.fixture
    def tolerant_client(self, client):
        # unhandled errors become responses instead of propagating into the test
        return TestClient(app, raise_server_exceptions=False)

    def test_unhandled_error_is_generic_500(self, tolerant_client, monkeypatch):
        def broken(db):
            raise RuntimeError("database password is hunter2")

        monkeypatch.setattr(catalog, "list_regions", broken)
        resp = tolerant_client.get("/api/regions")
        assert resp.status_code == 500
        err = resp.json()["error"]
        assert err["message"] == "Internal server error."
        assert "hunter2" not in resp.text

    def test_integrity_error_is_conflict(self, tolerant_client, monkeypatch):
        def duplicate(db):
            raise IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(catalog, "list_regions", duplicate)
        resp = tolerant_client.get("/api/regions")
        assert resp.status_code == 409
        assert resp.json()["error"]["type"] == "conflict"

    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json()["ok"] is False


class TestJsonFormatter:
    def test_extra_fields_are_included(self):
        record = logging.LogRecord(
            "industrin.claims", logging.INFO, __file__, 1, "claim %s approved", ("c-1",), None
        )
        record.trace_id = "t-1"
        out = json.loads(JsonFormatter().format(record))
        assert out["message"] == "claim c-1 approved"
        assert out["logger"] == "industrin.claims"
        assert out["trace_id"] == "t-1"
        assert out["service"] == "industrin"
