"""
Tests for the lookup cache API.
"""

import pytest
from conftest import BrokenEmbeddingProvider
from fastapi.testclient import TestClient

from lookup_cache.api.app import create_app
from lookup_cache.handlers import CacheHandler
from lookup_cache.services import CacheRouter, HashCacheService, SemanticCacheService


@pytest.fixture
def client(router):
    """Create a test client around an in-memory handler."""
    with TestClient(create_app(handler=CacheHandler(router))) as client:
        yield client


@pytest.fixture
def broken_client():
    """Client whose embedding backend is down."""
    router = CacheRouter(
        hash_cache=HashCacheService.create(verbose=0),
        semantic_cache=SemanticCacheService.create(
            embedding_provider=BrokenEmbeddingProvider(), verbose=0
        ),
        char_limit=50,
    )
    with TestClient(create_app(handler=CacheHandler(router))) as client:
        yield client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Lookup Cache API"
    assert data["endpoints"]["check"] == "/cache/check"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "embedding_healthy": True}


def test_health_reports_broken_embeddings(broken_client):
    data = broken_client.get("/health").json()
    assert data["status"] == "unhealthy"
    assert data["embedding_healthy"] is False


def test_cache_check_miss(client):
    """An empty cache misses."""
    response = client.post("/cache/check", json={"key": "m1", "input": "hello"})
    assert response.status_code == 200
    data = response.json()
    assert data["key"] == "m1"
    assert data["mode"] == "semantic"
    assert data["is_hit"] is False
    assert data["result"] is None
    assert data["lookup_time_ms"] >= 0


def test_store_then_check(client):
    store = client.post(
        "/cache/store",
        json={"key": "m1", "input": "hello", "mode": "exact", "result": {"text": "A"}},
    )
    assert store.status_code == 200
    assert store.json() == {
        "success": True,
        "mode": "exact",
        "position": 0,
        "message": "Entry stored successfully",
    }

    hit = client.post("/cache/check", json={"key": "m1", "input": "hello", "mode": "exact"})
    assert hit.json()["is_hit"] is True
    assert hit.json()["result"] == {"text": "A"}

    miss = client.post("/cache/check", json={"key": "m1", "input": "world", "mode": "exact"})
    assert miss.json()["is_hit"] is False


def test_semantic_threshold_override(client):
    client.post("/cache/store", json={"key": "k", "input": "How is it going?", "result": "B"})

    default = client.post("/cache/check", json={"key": "k", "input": "How is it goin'?"})
    lowered = client.post(
        "/cache/check",
        json={"key": "k", "input": "How is it goin'?", "threshold": 0.9},
    )
    assert default.json()["is_hit"] is False
    assert lowered.json()["is_hit"] is True
    assert lowered.json()["result"] == "B"


def test_auto_mode_routes_long_inputs_to_exact(client):
    long_input = "a" * 51
    response = client.post("/cache/store", json={"key": "k", "input": long_input, "result": 1})
    assert response.json()["mode"] == "exact"

    check = client.post("/cache/check", json={"key": "k", "input": long_input})
    assert check.json()["mode"] == "exact"
    assert check.json()["is_hit"] is True


def test_exact_mode_accepts_escaped_surrogates(client):
    body = b'{"key": "k", "input": "\\ud800", "mode": "exact", "result": 1}'
    headers = {"Content-Type": "application/json"}

    store = client.post("/cache/store", content=body, headers=headers)
    check = client.post("/cache/check", content=body, headers=headers)

    assert store.status_code == 200
    assert check.status_code == 200
    assert check.json()["is_hit"] is True


def test_store_rejects_null_result(client):
    response = client.post("/cache/store", json={"key": "k", "input": "hello", "result": None})
    assert response.status_code == 400


def test_request_validation(client):
    assert client.post("/cache/check", json={"input": "hello"}).status_code == 422
    assert (
        client.post("/cache/check", json={"key": "k", "input": "x", "mode": "fuzzy"}).status_code
        == 422
    )
    assert (
        client.post("/cache/check", json={"key": "k", "input": "x", "verbose": 3}).status_code
        == 422
    )


def test_embedding_outage_returns_503(broken_client):
    check = broken_client.post("/cache/check", json={"key": "k", "input": "hello"})
    store = broken_client.post("/cache/store", json={"key": "k", "input": "hello", "result": 1})
    assert check.status_code == 503
    assert store.status_code == 503


def test_exact_mode_works_without_embeddings(broken_client):
    broken_client.post(
        "/cache/store", json={"key": "k", "input": "hello", "mode": "exact", "result": 1}
    )
    response = broken_client.post(
        "/cache/check", json={"key": "k", "input": "hello", "mode": "exact"}
    )
    assert response.status_code == 200
    assert response.json()["is_hit"] is True


def test_stats(client):
    client.post("/cache/store", json={"key": "m1", "input": "hello", "mode": "exact", "result": 1})
    client.post("/cache/check", json={"key": "m1", "input": "hello", "mode": "exact"})
    client.post("/cache/check", json={"key": "m1", "input": "other", "mode": "exact"})

    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["exact"]["total_entries"] == 1
    assert data["exact"]["partitions"] == {"m1": 1}
    assert data["semantic"]["embedding_model"] == "fake-embedder"
    assert data["performance"]["total_queries"] == 2
    assert data["performance"]["cache_hits"] == 1
    assert data["performance"]["hit_rate"] == 0.5
