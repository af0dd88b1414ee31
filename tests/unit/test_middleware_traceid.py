"""
Unit tests for TraceIDMiddleware.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from oauth2_registry.core.trace_context import trace_id_context
from oauth2_registry.middleware import (
    TRACE_ID_HEADER,
    TraceIDMiddleware,
    resolve_trace_id,
)


@pytest.fixture
def client():
    """Create a minimal app wrapped by the middleware."""
    app = FastAPI()
    app.add_middleware(TraceIDMiddleware)

    @app.get("/trace")
    async def trace():
        return {"trace_id": trace_id_context.get()}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    return TestClient(app)


def test_trace_id_middleware_adds_header(client):
    """Test middleware adds X-Trace-ID header."""
    response = client.get("/trace")

    assert response.status_code == 200
    assert len(response.headers[TRACE_ID_HEADER]) > 0


def test_trace_id_middleware_sets_context_var(client):
    """Test the handler sees the same trace id as the response header."""
    response = client.get("/trace")

    assert response.json()["trace_id"] == response.headers[TRACE_ID_HEADER]


def test_trace_id_middleware_reuses_incoming_trace_id(client):
    response = client.get("/trace", headers={TRACE_ID_HEADER: "upstream-trace"})

    assert response.headers[TRACE_ID_HEADER] == "upstream-trace"
    assert response.json()["trace_id"] == "upstream-trace"


def test_trace_id_middleware_resets_context(client):
    """Test the trace id does not leak out of the request."""
    client.get("/trace")

    assert trace_id_context.get() is None


def test_trace_id_middleware_reraises(client):
    with pytest.raises(RuntimeError):
        client.get("/boom")


def test_trace_id_middleware_replaces_malformed_trace_id(client):
    response = client.get("/trace", headers={TRACE_ID_HEADER: "bad id with spaces"})

    assert response.headers[TRACE_ID_HEADER] != "bad id with spaces"


@pytest.mark.parametrize("incoming", [None, "", "x" * 129, "a/b"])
def test_resolve_trace_id_mints_new_id(incoming):
    assert resolve_trace_id(incoming) != incoming


def test_resolve_trace_id_keeps_valid_id():
    assert resolve_trace_id("1-5759e988:abc.def") == "1-5759e988:abc.def"
